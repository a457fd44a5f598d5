"""Ledger holding lookups."""
from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from forge_escrow.db import get_db
from forge_escrow.models.holding import Holding
from forge_escrow.schemas.holding import HoldingRead
from forge_escrow.security import ApiClient, require_api_key

router = APIRouter(prefix="/holdings", tags=["holdings"])


@router.get("/{owner}", response_model=list[HoldingRead])
def list_holdings(
    owner: str,
    db: Session = Depends(get_db),
    api_client: ApiClient = Depends(require_api_key),
) -> list[Holding]:
    """Return every balance held by ``owner``, one row per asset."""

    stmt = select(Holding).where(Holding.owner == owner).order_by(Holding.asset_key)
    return list(db.scalars(stmt).all())
