"""Who may act on an escrow."""
from forge_escrow.models.escrow import EscrowRecord
from forge_escrow.utils.errors import Unauthorized


def authorize(record: EscrowRecord, caller: str) -> bool:
    """Return whether ``caller`` is the arbiter or the initiator of ``record``."""

    return caller == record.arbiter or caller == record.initiator


def require_authorized(record: EscrowRecord, caller: str) -> None:
    if not authorize(record, caller):
        raise Unauthorized(details={"escrow_id": record.escrow_id})


__all__ = ["authorize", "require_authorized"]
