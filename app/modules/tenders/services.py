import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.access_control import (
    TENDER_NOT_FOUND,
    TENDER_NOT_FOUND_OR_DENIED,
    first_owned_or_404,
)
from app.core.exceptions import ValidationError
from app.modules.auth.schemas import Principal
from app.modules.tenders import schemas
from app.modules.tenders.models import Tender, TenderStatus

# Configure logging
logger = logging.getLogger(__name__)

VALID_STATUSES = {s.value for s in TenderStatus}


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps are taken to be UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def active_tenders(db: Session):
    """
    Query over tenders that have not been deleted.
    """
    return db.query(Tender).filter(Tender.deleted_at.is_(None))


def get_active_tender(db: Session, tender_id: int, for_update: bool = False) -> Optional[Tender]:
    """
    Get a non-deleted tender by id regardless of owner.
    """
    query = active_tenders(db).filter(Tender.id == tender_id)
    if for_update:
        query = query.with_for_update()
    return query.first()


def get_owned_tender(
    db: Session,
    principal: Principal,
    tender_id: int,
    message: str = TENDER_NOT_FOUND_OR_DENIED,
    for_update: bool = False,
) -> Tender:
    """
    Get a non-deleted tender owned by the principal.

    Raises:
        NotFoundError: If the tender is absent, deleted or owned by another client
    """
    query = active_tenders(db).filter(Tender.id == tender_id)
    return first_owned_or_404(query, "owner_id", principal.id, message, for_update=for_update)


def create_tender(db: Session, principal: Principal, payload: schemas.TenderCreate) -> Tender:
    """
    Create a tender in the open state for the calling client.

    Args:
        principal: The owning client
        payload: TenderCreate with title, description, deadline and budget

    Returns:
        Tender: The persisted tender

    Raises:
        ValidationError: "Invalid input" when a required field is empty or zero,
            "Invalid tender data" when the deadline is not in the future or the
            budget is negative
    """
    title = (payload.title or "").strip()
    description = (payload.description or "").strip()

    if not title or not description or payload.deadline is None or not payload.budget:
        raise ValidationError("Invalid input")

    deadline = _as_utc(payload.deadline)
    if deadline <= datetime.now(timezone.utc) or payload.budget <= 0:
        raise ValidationError("Invalid tender data")

    tender = Tender(
        owner_id=principal.id,
        title=title,
        description=description,
        deadline=deadline,
        budget=payload.budget,
        status=TenderStatus.OPEN.value,
        attachment=payload.attachment or None,
    )
    db.add(tender)
    db.commit()
    db.refresh(tender)

    logger.info(f"Client {principal.id} created tender {tender.id}")
    return tender


def list_tenders(db: Session, principal: Principal) -> List[Tender]:
    """
    All non-deleted tenders owned by the principal, in creation order.
    """
    return (
        active_tenders(db)
        .filter(Tender.owner_id == principal.id)
        .order_by(Tender.id)
        .all()
    )


def list_open_tenders(db: Session) -> List[Tender]:
    """
    Tenders currently accepting bids, from every client.
    """
    return (
        active_tenders(db)
        .filter(Tender.status == TenderStatus.OPEN.value)
        .order_by(Tender.id)
        .all()
    )


def get_tender(db: Session, principal: Principal, tender_id: int) -> Tender:
    return get_owned_tender(db, principal, tender_id)


def update_tender_status(
    db: Session,
    principal: Principal,
    tender_id: int,
    payload: schemas.TenderStatusUpdate,
) -> Tender:
    """
    Move a tender between open and closed.

    Raises:
        NotFoundError: "Tender not found" when the caller has no such tender
        ValidationError: "Invalid tender status" for anything but open/closed
    """
    tender = get_owned_tender(db, principal, tender_id, message=TENDER_NOT_FOUND, for_update=True)

    if payload.status not in VALID_STATUSES:
        db.rollback()
        raise ValidationError("Invalid tender status")

    previous = tender.status
    tender.status = payload.status
    db.commit()
    db.refresh(tender)

    logger.info(f"Tender {tender.id} status {previous} -> {tender.status}")
    return tender


def delete_tender(db: Session, principal: Principal, tender_id: int) -> None:
    """
    Soft delete a tender owned by the principal.

    Raises:
        NotFoundError: If the tender is absent, already deleted or not owned
    """
    tender = get_owned_tender(db, principal, tender_id, for_update=True)
    tender.deleted_at = datetime.now(timezone.utc)
    db.commit()

    logger.info(f"Client {principal.id} deleted tender {tender_id}")
