"""Audit logging helper utilities."""
from __future__ import annotations

from sqlalchemy.orm import Session

from forge_escrow.models.audit import AuditLog
from forge_escrow.utils.time import utcnow


def log_audit(
    db: Session,
    *,
    actor: str,
    action: str,
    entity: str,
    entity_id: int | None,
    data: dict | None = None,
) -> None:
    """Stage an audit entry in the shared AuditLog table.

    The row is only added to the session; it is persisted by whatever commit
    closes the caller's unit of work, so a rolled back operation leaves no trace.
    """

    db.add(
        AuditLog(
            actor=actor,
            action=action,
            entity=entity,
            entity_id=entity_id if entity_id is not None else 0,
            data_json=data or {},
            at=utcnow(),
        )
    )


def actor_for(caller: str | None, fallback: str = "system") -> str:
    """Return the canonical actor string for an escrow principal."""

    if caller:
        return f"principal:{caller}"
    return fallback


__all__ = ["log_audit", "actor_for"]
