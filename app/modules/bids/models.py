from sqlalchemy import Column, Integer, DateTime, Float, ForeignKey, Text, String, CheckConstraint, Index, text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
from app.modules.tenders.models import Tender
from enum import Enum as PyEnum


class BidStatus(str, PyEnum):
    SUBMITTED = "submitted"
    AWARDED = "awarded"


class Bid(Base):
    """Model representing a contractor's offer on a tender"""
    __tablename__ = "bids"

    id = Column(Integer, primary_key=True, index=True)
    tender_id = Column(Integer, ForeignKey("tenders.id"), nullable=False, index=True)
    contractor_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    price = Column(Float, nullable=False)
    delivery_time = Column(Integer, nullable=False)  # days
    comments = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=BidStatus.SUBMITTED.value)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    tender = relationship(Tender)

    __table_args__ = (
        CheckConstraint("status IN ('submitted', 'awarded')", name="chk_bid_status"),
        CheckConstraint("price > 0", name="chk_bid_price"),
        CheckConstraint("delivery_time > 0", name="chk_bid_delivery_time"),
        # At most one awarded bid per tender
        Index(
            "uq_bids_awarded_per_tender",
            "tender_id",
            unique=True,
            sqlite_where=text("status = 'awarded'"),
            postgresql_where=text("status = 'awarded'"),
        ),
    )

    def __repr__(self):
        return f"<Bid id={self.id} tender_id={self.tender_id} status={self.status}>"
