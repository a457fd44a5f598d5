"""Schema package exports."""
from .escrow import (
    CancelRead,
    CancelRequest,
    EscrowCreate,
    EscrowEventRead,
    EscrowRead,
    ReleaseRead,
    ReleaseRequest,
    RemainingRead,
)
from .holding import HoldingRead

__all__ = [
    "CancelRead",
    "CancelRequest",
    "EscrowCreate",
    "EscrowEventRead",
    "EscrowRead",
    "HoldingRead",
    "ReleaseRead",
    "ReleaseRequest",
    "RemainingRead",
]
