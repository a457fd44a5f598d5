"""Token transfer primitive used for token-denominated escrows."""
from __future__ import annotations

import logging

from forge_escrow.models.holding import Holding
from forge_escrow.services.vault import Signer
from forge_escrow.utils.errors import TransferFailure

logger = logging.getLogger(__name__)


class TokenProgram:
    """Moves fungible token balances between holdings of the same mint.

    The program trusts nothing staged by its caller: every call re-checks the
    mint of both holdings, freezing, and that ``signer`` controls the source.
    """

    def transfer(
        self,
        *,
        mint: str,
        source: Holding,
        destination: Holding,
        amount: int,
        signer: Signer,
    ) -> None:
        if source.asset_key != mint or destination.asset_key != mint:
            raise TransferFailure(
                "Token holding mint mismatch.",
                details={"mint": mint, "source": source.owner, "destination": destination.owner},
            )
        if source.is_frozen or destination.is_frozen:
            raise TransferFailure("Token holding is frozen.", details={"mint": mint})
        if not signer.authorizes(source):
            raise TransferFailure("Signer does not own the source token holding.", details={"mint": mint})
        if source.balance < amount:
            raise TransferFailure(
                "Insufficient token balance.",
                details={"mint": mint, "available": source.balance, "requested": amount},
            )
        source.balance -= amount
        destination.balance += amount
        logger.debug(
            "Token transfer applied",
            extra={"mint": mint, "source": source.owner, "destination": destination.owner, "amount": amount},
        )


__all__ = ["TokenProgram"]
