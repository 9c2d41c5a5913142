from __future__ import annotations

from typing import Any


def record_audit(
    owner: object,
    *,
    action: str,
    entity_type: str,
    entity_id: str,
    details: dict[str, Any] | None = None,
) -> None:
    """Stage an audit row in the owner's current unit of work; the caller commits."""
    audit_service = getattr(owner, "_audit_service", None)
    if audit_service is None:
        return
    audit_service.record(
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        details=details or {},
        commit=False,
    )


def actor_of(owner: object) -> str:
    audit_service = getattr(owner, "_audit_service", None)
    if audit_service is None:
        return ""
    return audit_service.actor or ""


__all__ = ["record_audit", "actor_of"]
