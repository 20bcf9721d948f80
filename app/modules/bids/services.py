import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.access_control import (
    BID_NOT_FOUND,
    BID_NOT_FOUND_OR_DENIED,
    TENDER_NOT_FOUND,
    TENDER_NOT_FOUND_OR_DENIED,
    first_owned_or_404,
)
from app.core.exceptions import NotFoundError, StateError, ValidationError
from app.modules.auth.schemas import Principal
from app.modules.bids import schemas
from app.modules.bids.models import Bid, BidStatus
from app.modules.tenders.models import Tender
from app.modules.tenders.services import get_active_tender, get_owned_tender

# Configure logging
logger = logging.getLogger(__name__)


def _lock_tender_row(db: Session, tender_id: int) -> None:
    # Deleted tenders included, their bids can still be withdrawn
    db.query(Tender.id).filter(Tender.id == tender_id).with_for_update().first()


def submit_bid(db: Session, principal: Principal, tender_id: int, payload: schemas.BidCreate) -> Bid:
    """
    Submit a bid on an open tender.

    Args:
        principal: The bidding contractor
        tender_id: ID of the tender to bid on
        payload: BidCreate with price, delivery_time and comments

    Returns:
        Bid: The submitted bid

    Raises:
        ValidationError: Price or delivery time missing or not positive
        NotFoundError: No such tender
        StateError: The tender is closed
    """
    if not payload.price or payload.price <= 0 or not payload.delivery_time or payload.delivery_time <= 0:
        raise ValidationError("Invalid bid data")

    # Row lock serializes with concurrent status updates on the tender
    tender = get_active_tender(db, tender_id, for_update=True)
    if tender is None:
        raise NotFoundError(TENDER_NOT_FOUND)
    if not tender.is_open:
        db.rollback()
        raise StateError("Tender is not open for bids")

    bid = Bid(
        tender_id=tender.id,
        contractor_id=principal.id,
        price=payload.price,
        delivery_time=payload.delivery_time,
        comments=payload.comments,
        status=BidStatus.SUBMITTED.value,
    )
    db.add(bid)
    db.commit()
    db.refresh(bid)

    logger.info(f"Contractor {principal.id} submitted bid {bid.id} on tender {tender_id}")
    return bid


def list_contractor_bids(db: Session, principal: Principal) -> List[Bid]:
    """
    All bids authored by the contractor.
    """
    return (
        db.query(Bid)
        .filter(Bid.contractor_id == principal.id)
        .order_by(Bid.id)
        .all()
    )


def list_tender_bids(db: Session, principal: Principal, tender_id: int) -> List[Bid]:
    """
    All bids on a tender owned by the calling client.

    Raises:
        NotFoundError: If the tender is absent or not owned by the caller
    """
    tender = get_owned_tender(db, principal, tender_id)
    return (
        db.query(Bid)
        .filter(Bid.tender_id == tender.id)
        .order_by(Bid.id)
        .all()
    )


def award_bid(db: Session, principal: Principal, tender_id: int, bid_id: int) -> Bid:
    """
    Award one bid of a tender owned by the calling client.

    Ownership of the tender is checked before the bid is looked up. A tender
    holds at most one awarded bid; the partial unique index on bids backs
    this up when two awards race.

    Raises:
        NotFoundError: Tender absent or not owned, or bid not on that tender
        StateError: The tender already has an awarded bid
    """
    tender = get_owned_tender(db, principal, tender_id, message=TENDER_NOT_FOUND_OR_DENIED, for_update=True)

    bid = (
        db.query(Bid)
        .filter(Bid.id == bid_id, Bid.tender_id == tender.id)
        .with_for_update()
        .first()
    )
    if bid is None:
        db.rollback()
        raise NotFoundError(BID_NOT_FOUND)

    already_awarded = (
        db.query(Bid.id)
        .filter(Bid.tender_id == tender.id, Bid.status == BidStatus.AWARDED.value)
        .first()
    )
    if already_awarded is not None:
        db.rollback()
        raise StateError("Tender already has an awarded bid")

    bid.status = BidStatus.AWARDED.value
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Concurrent award on tender {tender_id}: {str(e)}")
        raise StateError("Tender already has an awarded bid")
    db.refresh(bid)

    logger.info(f"Client {principal.id} awarded bid {bid.id} on tender {tender_id}")
    return bid


def delete_bid(db: Session, principal: Principal, bid_id: int) -> None:
    """
    Withdraw a bid authored by the calling contractor.

    Raises:
        NotFoundError: If the bid is absent or authored by someone else
    """
    bid = first_owned_or_404(
        db.query(Bid).filter(Bid.id == bid_id), "contractor_id", principal.id, BID_NOT_FOUND_OR_DENIED
    )

    # Same lock order as award_bid: tender row first, then the bid
    _lock_tender_row(db, bid.tender_id)
    bid = (
        db.query(Bid)
        .filter(Bid.id == bid_id, Bid.contractor_id == principal.id)
        .with_for_update()
        .first()
    )
    if bid is None:
        db.rollback()
        raise NotFoundError(BID_NOT_FOUND_OR_DENIED)

    db.delete(bid)
    db.commit()

    logger.info(f"Contractor {principal.id} deleted bid {bid_id}")
