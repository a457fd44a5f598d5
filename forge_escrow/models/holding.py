"""Ledger holdings backing escrow custody."""
from sqlalchemy import BigInteger, Boolean, CheckConstraint, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base

NATIVE_ASSET_KEY = "native"
# Balances are stored as signed 64-bit integers.
MAX_BALANCE = 2**63 - 1


class Holding(Base):
    """An addressable balance of one asset owned by one address.

    ``authority`` is the address allowed to debit the holding. Custody vaults are
    ``program_owned`` and their authority is the derived vault address itself.
    Vault and external holdings live in separate namespaces: an external
    holding may share its owner string with a vault without colliding.
    """

    __tablename__ = "holdings"
    __table_args__ = (
        UniqueConstraint("owner", "asset_key", "program_owned", name="uq_holdings_owner_asset_custody"),
        CheckConstraint("balance >= 0", name="ck_holding_balance_non_negative"),
    )

    owner: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    asset_key: Mapped[str] = mapped_column(String(64), nullable=False)
    balance: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    authority: Mapped[str] = mapped_column(String(64), nullable=False)
    program_owned: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_frozen: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
