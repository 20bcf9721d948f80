"""
Ownership rules shared by the tender and bid services.

A lookup scoped to an owner raises the same NotFoundError whether the row
does not exist or belongs to someone else.
"""

import logging

from sqlalchemy.orm import Query

from app.core.exceptions import NotFoundError

logger = logging.getLogger(__name__)

TENDER_NOT_FOUND = "Tender not found"
TENDER_NOT_FOUND_OR_DENIED = "Tender not found or access denied"
BID_NOT_FOUND = "Bid not found"
BID_NOT_FOUND_OR_DENIED = "Bid not found or access denied"


def is_owner(entity, owner_attr: str, principal_id: int) -> bool:
    """True if `entity` exists and its `owner_attr` points at the principal."""
    return entity is not None and getattr(entity, owner_attr) == principal_id


def first_owned_or_404(
    query: Query,
    owner_attr: str,
    principal_id: int,
    message: str,
    for_update: bool = False,
):
    """
    Returns the first row of `query` if it is owned by the principal.

    Args:
        query: Query already filtered down to the requested id
        owner_attr: Name of the ownership column on the entity
        principal_id: Id of the authenticated caller
        message: Message of the NotFoundError raised otherwise
        for_update: Lock the row for the rest of the transaction

    Raises:
        NotFoundError: If the row is absent or owned by someone else
    """
    if for_update:
        query = query.with_for_update()
    entity = query.first()
    if not is_owner(entity, owner_attr, principal_id):
        if entity is not None:
            logger.warning(
                f"Principal {principal_id} denied access to {type(entity).__name__} {entity.id}"
            )
        raise NotFoundError(message)
    return entity
