from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime


class BidCreate(BaseModel):
    price: Optional[float] = Field(None, allow_inf_nan=False, description="Offered price, must be positive")
    delivery_time: Optional[int] = Field(None, description="Delivery time in days, must be positive")
    comments: Optional[str] = Field(None, description="Free text for the client")


class BidResponse(BaseModel):
    id: int
    tender_id: int
    contractor_id: int
    price: float
    delivery_time: int
    comments: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
