"""Escrow record and timeline models."""
from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import BigInteger, CheckConstraint, DateTime, Enum as SqlEnum, ForeignKey, Index, JSON, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class EscrowStatus(str, PyEnum):
    """Lifecycle state of an escrow record."""

    INITIALIZED = "INITIALIZED"
    FUNDED = "FUNDED"
    RELEASED = "RELEASED"
    CANCELLED = "CANCELLED"


TERMINAL_STATUSES = frozenset({EscrowStatus.RELEASED, EscrowStatus.CANCELLED})


class AssetKindCode(str, PyEnum):
    """Persisted discriminator of the escrowed asset."""

    NATIVE = "NATIVE"
    TOKEN = "TOKEN"


class EscrowRecord(Base):
    """One custodial escrow: who funded it, who may act on it, and how much is left."""

    __tablename__ = "escrow_records"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_escrow_amount_positive"),
        CheckConstraint("released_amount >= 0", name="ck_escrow_released_non_negative"),
        CheckConstraint("released_amount <= amount", name="ck_escrow_released_within_amount"),
        CheckConstraint(
            "(asset_kind = 'NATIVE' AND token_mint IS NULL) OR (asset_kind = 'TOKEN' AND token_mint IS NOT NULL)",
            name="ck_escrow_token_mint_matches_kind",
        ),
        Index("ix_escrow_records_status", "status"),
    )

    escrow_id: Mapped[int] = mapped_column(BigInteger, unique=True, nullable=False, index=True)
    initiator: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    recipient: Mapped[str] = mapped_column(String(64), nullable=False)
    arbiter: Mapped[str] = mapped_column(String(64), nullable=False)
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    released_amount: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    asset_kind: Mapped[AssetKindCode] = mapped_column(SqlEnum(AssetKindCode), nullable=False)
    token_mint: Mapped[str | None] = mapped_column(String(64), nullable=True)
    status: Mapped[EscrowStatus] = mapped_column(
        SqlEnum(EscrowStatus), default=EscrowStatus.INITIALIZED, nullable=False
    )
    vault_address: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    vault_address_seed: Mapped[str] = mapped_column(String(128), nullable=False)

    events = relationship(
        "EscrowEvent", back_populates="escrow", order_by="EscrowEvent.id", cascade="all, delete-orphan"
    )

    @property
    def remaining(self) -> int:
        return self.amount - self.released_amount

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


class EscrowEvent(Base):
    """Timeline event for an escrow record."""

    __tablename__ = "escrow_events"

    escrow_record_id: Mapped[int] = mapped_column(ForeignKey("escrow_records.id"), nullable=False, index=True)
    kind: Mapped[str] = mapped_column(String(50), nullable=False)
    data_json: Mapped[dict] = mapped_column(JSON, nullable=False)
    at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    escrow = relationship("EscrowRecord", back_populates="events")
