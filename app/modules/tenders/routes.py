from fastapi import APIRouter, Depends, Path, status
from typing import List
from sqlalchemy.orm import Session
import logging

from app.core.database import get_db
from app.modules.auth.schemas import Principal
from app.modules.auth.services import require_client, require_contractor
from app.modules.tenders import schemas, services

router = APIRouter(tags=["tenders"])

# Configure logging
logger = logging.getLogger(__name__)


@router.post("/client/tenders", response_model=schemas.TenderResponse, status_code=status.HTTP_201_CREATED)
def create_tender(
    payload: schemas.TenderCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_client)
):
    """
    Publish a new tender. It starts in the open state.
    """
    return services.create_tender(db, principal, payload)


@router.get("/client/tenders", response_model=List[schemas.TenderResponse])
def list_tenders(
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_client)
):
    """
    List the caller's tenders, oldest first.
    """
    return services.list_tenders(db, principal)


@router.get("/client/tenders/{tender_id}", response_model=schemas.TenderResponse)
def get_tender(
    tender_id: int = Path(..., description="ID of the tender"),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_client)
):
    return services.get_tender(db, principal, tender_id)


@router.put("/client/tenders/{tender_id}", response_model=schemas.MessageResponse)
def update_tender_status(
    payload: schemas.TenderStatusUpdate,
    tender_id: int = Path(..., description="ID of the tender"),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_client)
):
    """
    Open or close a tender. Only the owning client may do this.
    """
    services.update_tender_status(db, principal, tender_id, payload)
    return schemas.MessageResponse(message="Tender status updated")


@router.delete("/client/tenders/{tender_id}", response_model=schemas.MessageResponse)
def delete_tender(
    tender_id: int = Path(..., description="ID of the tender"),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_client)
):
    services.delete_tender(db, principal, tender_id)
    return schemas.MessageResponse(message="Tender deleted successfully")


@router.get("/contractor/tenders", response_model=List[schemas.TenderResponse])
def list_open_tenders(
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_contractor)
):
    """
    Tenders a contractor can currently bid on.
    """
    logger.debug(f"Contractor {principal.id} browsing open tenders")
    return services.list_open_tenders(db)
