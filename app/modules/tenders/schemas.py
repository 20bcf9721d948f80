from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional
from datetime import datetime


class TenderCreate(BaseModel):
    """
    Tender creation payload.

    Required fields are optional here; the service reports missing values
    as "Invalid input" instead of a schema error.
    """
    title: Optional[str] = Field(None, description="Short title of the tender")
    description: Optional[str] = Field(None, description="Scope of work")
    deadline: Optional[datetime] = Field(None, description="ISO-8601 closing date, must be in the future")
    budget: Optional[float] = Field(None, allow_inf_nan=False, description="Maximum budget, must be positive")
    attachment: Optional[str] = Field(None, description="Reference to an attached document")

    @field_validator("deadline", mode="before")
    @classmethod
    def empty_deadline_is_missing(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class TenderStatusUpdate(BaseModel):
    status: Optional[str] = Field(None, description="Either 'open' or 'closed'")


class TenderResponse(BaseModel):
    id: int
    owner_id: int
    title: str
    description: str
    deadline: datetime
    budget: float
    status: str
    attachment: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MessageResponse(BaseModel):
    message: str
