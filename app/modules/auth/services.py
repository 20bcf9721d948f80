# app/modules/auth/services.py

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from app.modules.auth import models, schemas
from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from passlib.context import CryptContext
from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
import jwt as pyjwt
import datetime
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from typing import Optional
import logging

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=12,  # Set explicit rounds
    bcrypt__ident="2b"   # Use the modern 2b identifier
)
# auto_error off: a missing header raises AuthenticationError("Missing token")
bearer_scheme = HTTPBearer(auto_error=False)

_email_adapter = TypeAdapter(EmailStr)

VALID_ROLES = {role.value for role in models.UserRole}


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verifies if the entered password matches the stored hashed password.
    """
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """
    Generates a secure hash for the password.
    """
    return pwd_context.hash(password)


def is_valid_email(email: str) -> bool:
    try:
        _email_adapter.validate_python(email)
    except PydanticValidationError:
        return False
    return True


def get_user_by_email(db: Session, email: str):
    """
    Gets a user by their email address.
    """
    return db.query(models.User).filter(models.User.email == email).first()


def get_user_by_username(db: Session, username: str):
    """
    Gets a user by their username.
    """
    return db.query(models.User).filter(models.User.username == username).first()


def get_user_by_id(db: Session, user_id: int):
    """
    Gets a user by their ID.
    """
    return db.query(models.User).filter(models.User.id == user_id).first()


def register_user(db: Session, payload: schemas.RegisterRequest) -> models.User:
    """
    Validates a registration payload and creates the user.

    Raises:
        ValidationError: Empty username/email, bad email format, unknown role
            or empty password
        ConflictError: Email or username already taken
    """
    username = (payload.username or "").strip()
    email = (payload.email or "").strip().lower()

    if not username or not email:
        raise ValidationError("username or email cannot be empty")
    if not is_valid_email(email):
        raise ValidationError("invalid email format")
    # A taken email wins over every later check
    if get_user_by_email(db, email):
        raise ConflictError("Email already exists")
    if payload.role not in VALID_ROLES:
        raise ValidationError("invalid role")
    if not payload.password:
        raise ValidationError("password cannot be empty")

    if get_user_by_username(db, username):
        raise ConflictError("Username already exists")

    db_user = models.User(
        username=username,
        email=email,
        password_hash=get_password_hash(payload.password),
        role=payload.role,
    )
    db.add(db_user)
    try:
        db.commit()
    except IntegrityError as e:
        # A concurrent registration won the unique index
        db.rollback()
        logger.warning(f"IntegrityError while registering {username}: {str(e)}")
        raise ConflictError("Email already exists")
    db.refresh(db_user)

    logger.info(f"Registered user {db_user.id} ({db_user.role})")
    return db_user


def authenticate_user(db: Session, username: Optional[str], password: Optional[str]) -> models.User:
    """
    Checks login credentials.

    Raises:
        ValidationError: Username or password missing
        NotFoundError: No user with that username
        AuthenticationError: Password does not match
    """
    if not username or not password:
        raise ValidationError("Username and password are required")

    user = get_user_by_username(db, username.strip())
    if not user:
        raise NotFoundError("User not found")
    if not verify_password(password, user.password_hash):
        logger.warning(f"Failed login for user {user.id}")
        raise AuthenticationError("Invalid username or password")

    logger.info(f"User {user.id} logged in")
    return user


def create_access_token(data: dict, expires_delta: int = None, user_role: str = None):
    """
    Creates a JWT token with the provided data.

    Args:
        data: Dictionary containing base token data (usually "sub" with the user id)
        expires_delta: Token expiration time in minutes
        user_role: Optional role to include in the token

    Returns:
        JWT token string
    """
    to_encode = data.copy()

    if user_role:
        to_encode.update({"role": user_role})

    if expires_delta is None:
        expires_delta = settings.ACCESS_TOKEN_EXPIRE_MINUTES

    expire = datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(minutes=expires_delta)
    to_encode.update({"exp": expire})

    return pyjwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def issue_token(user: models.User) -> schemas.TokenResponse:
    token = create_access_token(data={"sub": str(user.id)}, user_role=user.role)
    return schemas.TokenResponse(token=token, role=user.role)


def decode_token(token: str) -> dict:
    """
    Verifies a JWT token and returns the payload.

    Raises:
        AuthenticationError: Expired, badly signed or malformed token
    """
    try:
        payload = pyjwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except pyjwt.ExpiredSignatureError:
        raise AuthenticationError("Token expired")
    except pyjwt.PyJWTError:
        raise AuthenticationError("Invalid token")

    if payload.get("sub") is None or payload.get("role") is None:
        raise AuthenticationError("Invalid token")
    return payload


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> schemas.Principal:
    """
    Resolves the bearer token into the authenticated principal.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Missing token")

    payload = decode_token(credentials.credentials)

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise AuthenticationError("Invalid token")

    user = get_user_by_id(db, user_id)
    if user is None:
        raise AuthenticationError("Invalid token")

    # Role claims must agree with the stored role
    if user.role != payload["role"]:
        logger.warning(f"Token role mismatch for user {user.id}. Token: {payload['role']}, DB: {user.role}")
        raise AuthenticationError("Invalid token")

    return schemas.Principal(id=user.id, role=user.role)


def require_role(role: models.UserRole):
    """
    Builds a dependency that only lets principals with `role` through.
    """
    async def dependency(
        principal: schemas.Principal = Depends(get_current_principal),
    ) -> schemas.Principal:
        if principal.role != role.value:
            raise AuthorizationError("Not enough permissions")
        return principal

    return dependency


require_client = require_role(models.UserRole.CLIENT)
require_contractor = require_role(models.UserRole.CONTRACTOR)
