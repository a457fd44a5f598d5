"""Operator credits to external holdings."""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from forge_escrow.models.holding import MAX_BALANCE, Holding
from forge_escrow.services.assets import AssetKind, asset_key
from forge_escrow.services.transfers import TransferExecutor
from forge_escrow.utils.audit import log_audit
from forge_escrow.utils.errors import InvalidAmount, TransferFailure

logger = logging.getLogger(__name__)


def credit_holding(
    db: Session,
    owner: str,
    asset: AssetKind,
    amount: int,
    *,
    actor: str = "system",
) -> Holding:
    """Open ``owner``'s external holding of ``asset`` if needed and add ``amount`` to it.

    Only external holdings can be credited this way; custody vaults receive
    value exclusively through escrow deposits.
    """

    if amount <= 0:
        raise InvalidAmount(details={"amount": amount})

    try:
        executor = TransferExecutor(db)
        holding = executor.holding(owner, asset, lock=True)
        if holding is None:
            holding = Holding(
                owner=owner,
                asset_key=asset_key(asset),
                balance=0,
                authority=owner,
                program_owned=False,
                is_frozen=False,
            )
            db.add(holding)
        if holding.is_frozen:
            raise TransferFailure("Holding is frozen.", details={"owner": owner, "asset": asset_key(asset)})
        if holding.balance + amount > MAX_BALANCE:
            raise InvalidAmount(
                "Credit would overflow the holding balance.",
                details={"owner": owner, "balance": holding.balance, "amount": amount},
            )
        holding.balance += amount
        db.flush()
        log_audit(
            db,
            actor=actor,
            action="HOLDING_CREDITED",
            entity="Holding",
            entity_id=holding.id,
            data={"owner": owner, "asset": asset_key(asset), "amount": amount, "balance": holding.balance},
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        "Holding credited",
        extra={"owner": owner, "asset": asset_key(asset), "amount": amount, "balance": holding.balance},
    )
    return holding


__all__ = ["credit_holding"]
