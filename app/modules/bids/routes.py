from fastapi import APIRouter, Depends, Path, status
from typing import List
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.modules.auth.schemas import Principal
from app.modules.auth.services import require_client, require_contractor
from app.modules.bids import schemas, services
from app.modules.tenders.schemas import MessageResponse

router = APIRouter(tags=["bids"])


@router.post(
    "/contractor/tenders/{tender_id}/bid",
    response_model=schemas.BidResponse,
    status_code=status.HTTP_201_CREATED
)
def submit_bid(
    payload: schemas.BidCreate,
    tender_id: int = Path(..., description="ID of the tender to bid on"),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_contractor)
):
    """
    Submit a bid on an open tender.
    """
    return services.submit_bid(db, principal, tender_id, payload)


@router.get("/contractor/bids", response_model=List[schemas.BidResponse])
def list_my_bids(
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_contractor)
):
    return services.list_contractor_bids(db, principal)


@router.delete("/contractor/bids/{bid_id}", response_model=MessageResponse)
def delete_bid(
    bid_id: int = Path(..., description="ID of the bid to withdraw"),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_contractor)
):
    """
    Withdraw one of the caller's bids.
    """
    services.delete_bid(db, principal, bid_id)
    return MessageResponse(message="Bid deleted successfully")


@router.get("/client/tenders/{tender_id}/bids", response_model=List[schemas.BidResponse])
def list_tender_bids(
    tender_id: int = Path(..., description="ID of the tender"),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_client)
):
    """
    List the bids received on one of the caller's tenders.
    """
    return services.list_tender_bids(db, principal, tender_id)


@router.post("/client/tenders/{tender_id}/award/{bid_id}", response_model=MessageResponse)
def award_bid(
    tender_id: int = Path(..., description="ID of the tender"),
    bid_id: int = Path(..., description="ID of the winning bid"),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_client)
):
    services.award_bid(db, principal, tender_id, bid_id)
    return MessageResponse(message="Bid awarded successfully")
