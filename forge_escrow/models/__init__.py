"""ORM models package."""
from .audit import AuditLog
from .base import Base
from .escrow import AssetKindCode, EscrowEvent, EscrowRecord, EscrowStatus, TERMINAL_STATUSES
from .holding import MAX_BALANCE, NATIVE_ASSET_KEY, Holding

__all__ = [
    "AssetKindCode",
    "AuditLog",
    "Base",
    "EscrowEvent",
    "EscrowRecord",
    "EscrowStatus",
    "Holding",
    "MAX_BALANCE",
    "NATIVE_ASSET_KEY",
    "TERMINAL_STATUSES",
]
