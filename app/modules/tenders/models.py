from sqlalchemy import Column, Integer, String, DateTime, Float, ForeignKey, Text, CheckConstraint
from sqlalchemy.sql import func
from app.core.database import Base
from enum import Enum as PyEnum


class TenderStatus(str, PyEnum):
    OPEN = "open"
    CLOSED = "closed"


class Tender(Base):
    """Model representing a tender published by a client"""
    __tablename__ = "tenders"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    deadline = Column(DateTime(timezone=True), nullable=False)
    budget = Column(Float, nullable=False)
    status = Column(String(20), nullable=False, default=TenderStatus.OPEN.value)
    # Opaque reference supplied by the client, never dereferenced here
    attachment = Column(String(1024), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    # Soft delete tombstone
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint("status IN ('open', 'closed')", name="chk_tender_status"),
        CheckConstraint("budget > 0", name="chk_tender_budget"),
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def is_open(self) -> bool:
        return self.status == TenderStatus.OPEN.value

    def __repr__(self):
        return f"<Tender id={self.id} owner_id={self.owner_id} status={self.status}>"
