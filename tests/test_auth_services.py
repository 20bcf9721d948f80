# tests/test_auth_services.py

import pytest
from unittest.mock import patch, MagicMock
import datetime
import jwt
from fastapi.security import HTTPAuthorizationCredentials
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from app.modules.auth import services, models, schemas
from app.core.config import settings
from app.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)

# Test data
TEST_USER = {
    "username": "test@example.com",
    "email": "test@example.com",
    "password": "Test123!",
    "role": models.UserRole.CLIENT.value
}


# Setup fixtures
@pytest.fixture
def db_session():
    """
    Create a mock database session for unit tests
    """
    return MagicMock(spec=Session)


@pytest.fixture
def test_user():
    """
    Create a test user object
    """
    return models.User(
        id=1,
        username=TEST_USER["username"],
        email=TEST_USER["email"],
        password_hash=services.get_password_hash(TEST_USER["password"]),
        role=TEST_USER["role"]
    )


def bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


# Unit tests for auth services
def test_verify_password():
    """Test password verification"""
    hashed = services.get_password_hash("password123")

    assert services.verify_password("password123", hashed) is True
    assert services.verify_password("wrong_password", hashed) is False


def test_get_password_hash():
    """Test password hashing"""
    hashed = services.get_password_hash("password123")

    assert isinstance(hashed, str)
    assert hashed != "password123"

    # Bcrypt adds salt, so hashes should differ
    assert hashed != services.get_password_hash("password123")


@pytest.mark.parametrize("email,expected", [
    ("someone@example.com", True),
    ("invalid-email", False),
    ("missing-domain@", False),
    ("@missing-local.com", False),
])
def test_is_valid_email(email, expected):
    assert services.is_valid_email(email) is expected


def test_register_user(db_session):
    """Test user registration persists a hashed password"""
    payload = schemas.RegisterRequest(**TEST_USER)

    with patch.object(services, 'get_user_by_email', return_value=None), \
            patch.object(services, 'get_user_by_username', return_value=None):
        result = services.register_user(db_session, payload)

    db_session.add.assert_called_once()
    db_session.commit.assert_called_once()
    db_session.refresh.assert_called_once()

    assert result.username == TEST_USER["username"]
    assert result.role == TEST_USER["role"]
    assert result.password_hash != TEST_USER["password"]
    assert services.verify_password(TEST_USER["password"], result.password_hash)


def test_register_user_accepts_user_type_alias():
    payload = schemas.RegisterRequest.model_validate(
        {"username": "a@example.com", "email": "a@example.com", "password": "x", "user_type": "contractor"}
    )
    assert payload.role == "contractor"


@pytest.mark.parametrize("overrides,message", [
    ({"username": ""}, "username or email cannot be empty"),
    ({"email": "   "}, "username or email cannot be empty"),
    ({"email": "invalid-email"}, "invalid email format"),
    ({"role": "admin"}, "invalid role"),
    ({"role": None}, "invalid role"),
    ({"password": ""}, "password cannot be empty"),
])
def test_register_user_validation(db_session, overrides, message):
    payload = schemas.RegisterRequest(**{**TEST_USER, **overrides})

    with patch.object(services, 'get_user_by_email', return_value=None):
        with pytest.raises(ValidationError) as excinfo:
            services.register_user(db_session, payload)

    assert message in excinfo.value.message
    db_session.add.assert_not_called()


def test_register_user_duplicate_email(db_session, test_user):
    payload = schemas.RegisterRequest(**TEST_USER)

    with patch.object(services, 'get_user_by_email', return_value=test_user):
        with pytest.raises(ConflictError) as excinfo:
            services.register_user(db_session, payload)

    assert excinfo.value.message == "Email already exists"
    db_session.add.assert_not_called()


@pytest.mark.parametrize("overrides", [
    {"role": "admin"},
    {"role": None},
    {"password": ""},
])
def test_register_user_duplicate_email_wins_over_other_fields(db_session, test_user, overrides):
    payload = schemas.RegisterRequest(**{**TEST_USER, **overrides})

    with patch.object(services, 'get_user_by_email', return_value=test_user):
        with pytest.raises(ConflictError) as excinfo:
            services.register_user(db_session, payload)

    assert excinfo.value.message == "Email already exists"
    db_session.add.assert_not_called()


def test_register_user_duplicate_username(db_session, test_user):
    payload = schemas.RegisterRequest(**{**TEST_USER, "email": "other@example.com"})

    with patch.object(services, 'get_user_by_email', return_value=None), \
            patch.object(services, 'get_user_by_username', return_value=test_user):
        with pytest.raises(ConflictError) as excinfo:
            services.register_user(db_session, payload)

    assert excinfo.value.message == "Username already exists"


def test_authenticate_user_success(db_session, test_user):
    with patch.object(services, 'get_user_by_username', return_value=test_user):
        user = services.authenticate_user(db_session, TEST_USER["username"], TEST_USER["password"])

    assert user is test_user


def test_authenticate_user_wrong_password(db_session, test_user):
    with patch.object(services, 'get_user_by_username', return_value=test_user):
        with pytest.raises(AuthenticationError) as excinfo:
            services.authenticate_user(db_session, TEST_USER["username"], "wrong_password")

    assert "Invalid username or password" in excinfo.value.message


def test_authenticate_user_not_found(db_session):
    with patch.object(services, 'get_user_by_username', return_value=None):
        with pytest.raises(NotFoundError) as excinfo:
            services.authenticate_user(db_session, "nonexistent@example.com", "password")

    assert "User not found" in excinfo.value.message


@pytest.mark.parametrize("username,password", [("", "x"), ("user", ""), (None, None)])
def test_authenticate_user_missing_fields(db_session, username, password):
    with pytest.raises(ValidationError) as excinfo:
        services.authenticate_user(db_session, username, password)

    assert "Username and password are required" in excinfo.value.message
    db_session.query.assert_not_called()


def test_create_access_token():
    """Test JWT token creation"""
    token = services.create_access_token({"sub": "1"}, user_role="client")

    assert isinstance(token, str)

    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert payload["sub"] == "1"
    assert payload["role"] == "client"
    assert "exp" in payload


def test_create_access_token_with_expiry():
    """Test JWT token creation with custom expiry"""
    token = services.create_access_token({"sub": "1"}, expires_delta=5)

    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])

    now = datetime.datetime.now(datetime.timezone.utc)
    expected_exp = now + datetime.timedelta(minutes=5)

    # Allow for a small time difference due to test execution
    assert abs(payload["exp"] - expected_exp.timestamp()) < 10


def test_issue_token_embeds_id_and_role(test_user):
    response = services.issue_token(test_user)

    payload = services.decode_token(response.token)
    assert payload["sub"] == str(test_user.id)
    assert payload["role"] == test_user.role
    assert response.role == test_user.role


def test_decode_token_expired():
    token = services.create_access_token({"sub": "1"}, expires_delta=-1, user_role="client")

    with pytest.raises(AuthenticationError) as excinfo:
        services.decode_token(token)

    assert excinfo.value.message == "Token expired"


def test_decode_token_wrong_signature():
    token = jwt.encode({"sub": "1", "role": "client"}, "another-secret", algorithm="HS256")

    with pytest.raises(AuthenticationError) as excinfo:
        services.decode_token(token)

    assert excinfo.value.message == "Invalid token"


def test_decode_token_missing_role():
    token = services.create_access_token({"sub": "1"})

    with pytest.raises(AuthenticationError):
        services.decode_token(token)


@pytest.mark.asyncio
async def test_get_current_principal_success(db_session, test_user):
    token = services.issue_token(test_user).token

    with patch.object(services, 'get_user_by_id', return_value=test_user):
        principal = await services.get_current_principal(bearer(token), db_session)

    assert principal == schemas.Principal(id=1, role="client")


@pytest.mark.asyncio
async def test_get_current_principal_missing_token(db_session):
    with pytest.raises(AuthenticationError) as excinfo:
        await services.get_current_principal(None, db_session)

    assert excinfo.value.message == "Missing token"
    assert excinfo.value.status_code == 401


@pytest.mark.asyncio
async def test_get_current_principal_invalid_token(db_session):
    with pytest.raises(AuthenticationError) as excinfo:
        await services.get_current_principal(bearer("invalid_token"), db_session)

    assert excinfo.value.message == "Invalid token"


@pytest.mark.asyncio
async def test_get_current_principal_user_not_found(db_session):
    token = services.create_access_token({"sub": "42"}, user_role="client")

    with patch.object(services, 'get_user_by_id', return_value=None):
        with pytest.raises(AuthenticationError):
            await services.get_current_principal(bearer(token), db_session)


@pytest.mark.asyncio
async def test_get_current_principal_role_mismatch(db_session, test_user):
    # Token claims contractor, stored user is a client
    token = services.create_access_token({"sub": "1"}, user_role="contractor")

    with patch.object(services, 'get_user_by_id', return_value=test_user):
        with pytest.raises(AuthenticationError) as excinfo:
            await services.get_current_principal(bearer(token), db_session)

    assert excinfo.value.message == "Invalid token"


@pytest.mark.asyncio
async def test_require_client_allows_client():
    principal = schemas.Principal(id=1, role="client")

    result = await services.require_client(principal)

    assert result is principal


@pytest.mark.asyncio
async def test_require_contractor_rejects_client():
    principal = schemas.Principal(id=1, role="client")

    with pytest.raises(AuthorizationError) as excinfo:
        await services.require_contractor(principal)

    assert excinfo.value.status_code == 403
    assert "Not enough permissions" in excinfo.value.message


def test_principal_is_immutable():
    principal = schemas.Principal(id=1, role="client")

    with pytest.raises(PydanticValidationError):
        principal.role = "contractor"
