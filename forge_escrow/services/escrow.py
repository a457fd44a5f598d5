"""Escrow lifecycle controller.

Every public operation runs as one unit of work on the controller's session:
record changes, vault balance changes, timeline events and audit rows are
committed together, or the session is rolled back and the error re-raised.
"""
from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import NamedTuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from forge_escrow.config import ProgramConfig
from forge_escrow.models.escrow import EscrowEvent, EscrowRecord, EscrowStatus
from forge_escrow.services.assets import AssetKind, asset_key, from_record, to_columns
from forge_escrow.services.authorization import require_authorized
from forge_escrow.services.fees import fee_split, gross_release
from forge_escrow.services.transfers import TransferExecutor, TransferLeg
from forge_escrow.services.vault import PrincipalSigner, VaultSigner, derive_vault
from forge_escrow.utils.audit import actor_for, log_audit
from forge_escrow.utils.errors import (
    DuplicateEscrow,
    EscrowError,
    EscrowNotFound,
    InvalidAmount,
    InvalidEscrowStatus,
    InvalidPercentage,
    NoFundsToRelease,
)
from forge_escrow.utils.time import utcnow

logger = logging.getLogger(__name__)

MIN_PERCENTAGE = 1
MAX_PERCENTAGE = 100


class ReleaseResult(NamedTuple):
    net_to_recipient: int
    fee_leg_1: int
    fee_leg_2: int
    gross: int
    escrow: EscrowRecord
    dust: int


class EscrowController:
    """State machine over escrow records and their custody vaults."""

    def __init__(self, db: Session, config: ProgramConfig, transfers: TransferExecutor | None = None) -> None:
        self.db = db
        self.config = config
        self.transfers = transfers or TransferExecutor(db)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def initialize_and_fund(
        self,
        escrow_id: int,
        amount: int,
        asset: AssetKind,
        *,
        arbiter: str,
        recipient: str,
        initiator: str,
    ) -> EscrowRecord:
        """Create the escrow record and move ``amount`` from the initiator into a fresh vault."""

        if amount <= 0:
            raise InvalidAmount(details={"amount": amount})

        try:
            with self._unit_of_work("initialize_and_fund", escrow_id):
                if self._find(escrow_id) is not None:
                    raise DuplicateEscrow(details={"escrow_id": escrow_id})

                vault = derive_vault(self.config.program_id, self.config.vault_seed_tag, escrow_id)
                kind, mint = to_columns(asset)
                record = EscrowRecord(
                    escrow_id=escrow_id,
                    initiator=initiator,
                    recipient=recipient,
                    arbiter=arbiter,
                    amount=amount,
                    released_amount=0,
                    asset_kind=kind,
                    token_mint=mint,
                    status=EscrowStatus.INITIALIZED,
                    vault_address=vault.address,
                    vault_address_seed=vault.seed,
                )
                self.db.add(record)
                self.db.flush()

                self.transfers.open_vault(vault, asset)
                self.transfers.execute(
                    asset,
                    [TransferLeg(initiator, vault.address, amount, "deposit", to_vault=True)],
                    PrincipalSigner(initiator),
                )
                record.status = EscrowStatus.FUNDED

                data = {
                    "amount": amount,
                    "asset": asset_key(asset),
                    "initiator": initiator,
                    "recipient": recipient,
                    "arbiter": arbiter,
                    "vault_address": vault.address,
                }
                self._record_event(record, "FUNDED", data)
                log_audit(
                    self.db,
                    actor=actor_for(initiator),
                    action="ESCROW_FUNDED",
                    entity="EscrowRecord",
                    entity_id=record.id,
                    data=data,
                )
        except IntegrityError as exc:
            raise DuplicateEscrow(details={"escrow_id": escrow_id}) from exc

        logger.info(
            "Escrow initialized and funded",
            extra={"escrow_id": escrow_id, "amount": amount, "asset": asset_key(asset)},
        )
        return record

    def release(self, escrow_id: int, percentage: int, caller: str) -> ReleaseResult:
        """Release ``percentage`` of the remaining balance, net of fees, to the recipient."""

        with self._unit_of_work("release", escrow_id):
            record = self._get(escrow_id, lock=True)
            self._require_funded(record)
            require_authorized(record, caller)
            if not MIN_PERCENTAGE <= percentage <= MAX_PERCENTAGE:
                raise InvalidPercentage(details={"percentage": percentage})

            remaining = record.remaining
            if remaining == 0:
                raise NoFundsToRelease(details={"escrow_id": escrow_id})

            split = fee_split(gross_release(remaining, percentage))
            self.transfers.execute(
                from_record(record),
                [
                    TransferLeg(record.vault_address, record.recipient, split.net, "recipient"),
                    TransferLeg(record.vault_address, self.config.fee_wallet, split.fee_a, "fee"),
                    TransferLeg(record.vault_address, self.config.holding_wallet, split.fee_b, "holding_fee"),
                ],
                VaultSigner.for_escrow(self.config, record),
            )

            # The counter tracks the pre-fee amount; dust stays in the vault.
            record.released_amount += split.gross
            if record.released_amount >= record.amount:
                record.status = EscrowStatus.RELEASED

            data = {
                "percentage": percentage,
                "gross": split.gross,
                "net": split.net,
                "fee_a": split.fee_a,
                "fee_b": split.fee_b,
                "dust": split.dust,
                "released_amount": record.released_amount,
                "status": record.status.value,
                "caller": caller,
            }
            self._record_event(record, "RELEASED", data)
            log_audit(
                self.db,
                actor=actor_for(caller),
                action="ESCROW_RELEASED",
                entity="EscrowRecord",
                entity_id=record.id,
                data=data,
            )

        logger.info(
            "Partial release completed",
            extra={
                "escrow_id": escrow_id,
                "percentage": percentage,
                "released_amount": record.released_amount,
                "total_amount": record.amount,
                "status": record.status.value,
            },
        )
        return ReleaseResult(split.net, split.fee_a, split.fee_b, split.gross, record, split.dust)

    def cancel(self, escrow_id: int, caller: str) -> int:
        """Refund whatever is still locked to the initiator and close the escrow."""

        with self._unit_of_work("cancel", escrow_id):
            record = self._get(escrow_id, lock=True)
            self._require_funded(record)
            require_authorized(record, caller)

            refunded = record.remaining
            if refunded > 0:
                self.transfers.execute(
                    from_record(record),
                    [TransferLeg(record.vault_address, record.initiator, refunded, "refund")],
                    VaultSigner.for_escrow(self.config, record),
                )
            record.status = EscrowStatus.CANCELLED

            data = {"refunded": refunded, "released_amount": record.released_amount, "caller": caller}
            self._record_event(record, "CANCELLED", data)
            log_audit(
                self.db,
                actor=actor_for(caller),
                action="ESCROW_CANCELLED",
                entity="EscrowRecord",
                entity_id=record.id,
                data=data,
            )

        logger.info("Escrow cancelled", extra={"escrow_id": escrow_id, "refunded": refunded})
        return refunded

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def get_remaining(self, escrow_id: int) -> int:
        record = self._get(escrow_id)
        logger.debug("Remaining amount read", extra={"escrow_id": escrow_id, "remaining": record.remaining})
        return record.remaining

    def get_escrow(self, escrow_id: int) -> EscrowRecord:
        return self._get(escrow_id)

    def list_events(self, escrow_id: int) -> list[EscrowEvent]:
        record = self._get(escrow_id)
        return list(record.events)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @contextmanager
    def _unit_of_work(self, operation: str, escrow_id: int) -> Iterator[None]:
        try:
            yield
            self.db.commit()
        except EscrowError as exc:
            self.db.rollback()
            logger.warning(
                "Escrow operation rejected",
                extra={"operation": operation, "escrow_id": escrow_id, "code": exc.code},
            )
            raise
        except Exception:
            self.db.rollback()
            raise

    def _find(self, escrow_id: int, *, lock: bool = False) -> EscrowRecord | None:
        stmt = select(EscrowRecord).where(EscrowRecord.escrow_id == escrow_id)
        if lock:
            stmt = stmt.with_for_update()
        return self.db.scalars(stmt).first()

    def _get(self, escrow_id: int, *, lock: bool = False) -> EscrowRecord:
        record = self._find(escrow_id, lock=lock)
        if record is None:
            raise EscrowNotFound(details={"escrow_id": escrow_id})
        return record

    @staticmethod
    def _require_funded(record: EscrowRecord) -> None:
        if record.status != EscrowStatus.FUNDED:
            raise InvalidEscrowStatus(
                details={"escrow_id": record.escrow_id, "status": record.status.value}
            )

    def _record_event(self, record: EscrowRecord, kind: str, data: dict) -> None:
        self.db.add(EscrowEvent(escrow=record, kind=kind, data_json=data, at=utcnow()))


__all__ = ["EscrowController", "ReleaseResult", "MIN_PERCENTAGE", "MAX_PERCENTAGE"]
