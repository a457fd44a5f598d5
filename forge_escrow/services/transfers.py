"""Atomic multi-leg transfers between ledger holdings."""
from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import assert_never

from sqlalchemy import select
from sqlalchemy.orm import Session

from forge_escrow.models.holding import Holding
from forge_escrow.services.assets import AssetKind, Native, Token, asset_key
from forge_escrow.services.token_program import TokenProgram
from forge_escrow.services.vault import Signer, VaultAddress
from forge_escrow.utils.errors import TransferFailure

logger = logging.getLogger(__name__)

# Holdings are keyed by (owner, custody namespace); True is the vault namespace.
HoldingRef = tuple[str, bool]


@dataclass(frozen=True)
class TransferLeg:
    """One debit/credit pair, addressed by holding owner.

    The source namespace follows the signer. ``to_vault`` credits an existing
    custody vault instead of an external holding.
    """

    source: str
    destination: str
    amount: int
    label: str = "transfer"
    to_vault: bool = False


class TransferExecutor:
    """Stage, validate and apply transfer legs against the holdings table.

    All legs of one :meth:`execute` call are validated against projected
    balances before any balance is touched. The executor never commits: the
    caller's session transaction is the atomic unit, and a failure raised here
    is expected to be followed by a rollback.
    """

    def __init__(self, db: Session, token_program: TokenProgram | None = None) -> None:
        self.db = db
        self.token_program = token_program or TokenProgram()

    def holding(self, owner: str, asset: AssetKind, *, vault: bool = False, lock: bool = False) -> Holding | None:
        stmt = select(Holding).where(
            Holding.owner == owner,
            Holding.asset_key == asset_key(asset),
            Holding.program_owned.is_(vault),
        )
        if lock:
            stmt = stmt.with_for_update()
        return self.db.scalars(stmt).first()

    def balance_of(self, owner: str, asset: AssetKind, *, vault: bool = False) -> int:
        holding = self.holding(owner, asset, vault=vault)
        return holding.balance if holding is not None else 0

    def open_vault(self, vault: VaultAddress, asset: AssetKind) -> Holding:
        """Create the program-owned holding backing one escrow."""

        if self.holding(vault.address, asset, vault=True) is not None:
            raise TransferFailure("Custody vault already exists.", details={"vault": vault.address})
        holding = Holding(
            owner=vault.address,
            asset_key=asset_key(asset),
            balance=0,
            authority=vault.address,
            program_owned=True,
            is_frozen=False,
        )
        self.db.add(holding)
        self.db.flush()
        return holding

    def execute(self, asset: AssetKind, legs: Sequence[TransferLeg], signer: Signer) -> list[TransferLeg]:
        """Apply ``legs`` as one all-or-nothing batch and return the legs that moved value."""

        active = []
        for leg in legs:
            if leg.amount < 0:
                raise TransferFailure("Transfer amount must not be negative.", details={"leg": leg.label})
            if leg.amount > 0:
                active.append(leg)
        if not active:
            return []

        holdings: dict[HoldingRef, Holding] = {}
        projected: dict[HoldingRef, int] = {}
        staged: list[tuple[Holding, Holding, int]] = []
        for leg in active:
            source_ref = (leg.source, signer.program_owned)
            destination_ref = (leg.destination, leg.to_vault)
            source = self._load(holdings, source_ref, asset, role="source")
            destination = self._load(holdings, destination_ref, asset, role="destination")
            if not signer.authorizes(source):
                raise TransferFailure(
                    "Signer is not allowed to debit the source holding.",
                    details={"leg": leg.label, "source": leg.source},
                )
            if source.is_frozen or destination.is_frozen:
                raise TransferFailure(
                    "Holding is frozen.",
                    details={"leg": leg.label, "source": leg.source, "destination": leg.destination},
                )
            projected.setdefault(source_ref, source.balance)
            projected.setdefault(destination_ref, destination.balance)
            if projected[source_ref] < leg.amount:
                raise TransferFailure(
                    "Insufficient balance in source holding.",
                    details={
                        "leg": leg.label,
                        "source": leg.source,
                        "available": projected[source_ref],
                        "requested": leg.amount,
                    },
                )
            projected[source_ref] -= leg.amount
            projected[destination_ref] += leg.amount
            staged.append((source, destination, leg.amount))

        for source, destination, amount in staged:
            self._apply(asset, source, destination, amount, signer)
        self.db.flush()
        logger.debug(
            "Transfer batch applied",
            extra={"asset": asset_key(asset), "legs": [(leg.label, leg.amount) for leg in active]},
        )
        return active

    def _load(self, cache: dict[HoldingRef, Holding], ref: HoldingRef, asset: AssetKind, *, role: str) -> Holding:
        if ref in cache:
            return cache[ref]
        owner, vault = ref
        holding = self.holding(owner, asset, vault=vault, lock=True)
        if holding is None:
            # Vaults are only ever opened by open_vault; sources are never conjured.
            if role == "source" or vault:
                raise TransferFailure(
                    f"{'Custody vault' if vault else 'Source holding'} does not exist.",
                    details={"owner": owner, "asset": asset_key(asset), "role": role},
                )
            holding = Holding(
                owner=owner,
                asset_key=asset_key(asset),
                balance=0,
                authority=owner,
                program_owned=False,
                is_frozen=False,
            )
            self.db.add(holding)
        cache[ref] = holding
        return holding

    def _apply(self, asset: AssetKind, source: Holding, destination: Holding, amount: int, signer: Signer) -> None:
        match asset:
            case Native():
                source.balance -= amount
                destination.balance += amount
            case Token(mint=mint):
                self.token_program.transfer(
                    mint=mint, source=source, destination=destination, amount=amount, signer=signer
                )
            case _:
                assert_never(asset)


__all__ = ["TransferLeg", "TransferExecutor"]
