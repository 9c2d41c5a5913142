from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from bursar_core.domain.identifiers import generate_id, utc_now


@dataclass
class AuditLogEntry:
    id: str
    occurred_at: datetime
    actor: str | None
    action: str
    entity_type: str
    entity_id: str
    details: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def create(
        action: str,
        entity_type: str,
        entity_id: str,
        *,
        actor: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> "AuditLogEntry":
        return AuditLogEntry(
            id=generate_id(),
            occurred_at=utc_now(),
            actor=actor,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            details=details or {},
        )


__all__ = ["AuditLogEntry"]
