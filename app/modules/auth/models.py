# app/modules/auth/models.py

from sqlalchemy import Column, Integer, String, DateTime, CheckConstraint
from sqlalchemy.sql import func
from app.core.database import Base
from enum import Enum as PyEnum


class UserRole(str, PyEnum):
    CLIENT = "client"
    CONTRACTOR = "contractor"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(255), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(
        String(50),
        nullable=False,
        default=UserRole.CLIENT.value  # Use .value explicitly for default
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Add check constraint to match SQL definition
    __table_args__ = (
        CheckConstraint(
            "role IN ('client', 'contractor')",
            name="chk_user_role"
        ),
    )

    def __repr__(self):
        return f"<User id={self.id} username={self.username} role={self.role}>"
