# app/modules/auth/schemas.py

from pydantic import BaseModel, Field, ConfigDict, AliasChoices
from datetime import datetime
from typing import Optional


class RegisterRequest(BaseModel):
    """
    Registration payload.

    Fields are optional at the schema level so that empty or missing values
    reach the service and get its validation messages.
    """
    username: Optional[str] = Field(None, description="Unique login name")
    email: Optional[str] = Field(None, description="User email address")
    password: Optional[str] = Field(None, description="User password")
    role: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("role", "user_type"),
        description="Either 'client' or 'contractor'"
    )


class LoginRequest(BaseModel):
    username: Optional[str] = Field(None, description="Login name")
    password: Optional[str] = Field(None, description="User password")


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    role: str


class UserResponse(BaseModel):
    id: int
    username: str
    email: str
    role: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class Principal(BaseModel):
    """
    Authenticated identity handed to every protected handler.
    """
    id: int
    role: str

    model_config = ConfigDict(frozen=True)
