# app/modules/auth/routes.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.modules.auth import schemas, services
from app.core.database import get_db
from app.core.exceptions import AuthenticationError

# Public endpoints, mounted without the API prefix
router = APIRouter()
# Endpoints that need a token, mounted under the API prefix
account_router = APIRouter()


@router.post("/register", response_model=schemas.TokenResponse, status_code=status.HTTP_201_CREATED)
def register(payload: schemas.RegisterRequest, db: Session = Depends(get_db)):
    """
    Create a client or contractor account and return a token for it.
    """
    user = services.register_user(db, payload)
    return services.issue_token(user)


@router.post("/login", response_model=schemas.TokenResponse)
def login(login_req: schemas.LoginRequest, db: Session = Depends(get_db)):
    user = services.authenticate_user(db, login_req.username, login_req.password)
    return services.issue_token(user)


@account_router.get("/me", response_model=schemas.UserResponse)
def read_users_me(
    principal: schemas.Principal = Depends(services.get_current_principal),
    db: Session = Depends(get_db)
):
    user = services.get_user_by_id(db, principal.id)
    if user is None:
        raise AuthenticationError("Invalid token")
    return user
