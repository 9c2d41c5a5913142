from __future__ import annotations

from typing import Any, List

from sqlalchemy.orm import Session

from bursar_core.interfaces import AuditLogRepository
from bursar_core.models import AuditLogEntry


class AuditService:
    """Append-only trail: rows are added, never updated or deleted."""

    def __init__(
        self,
        session: Session,
        audit_repo: AuditLogRepository,
        actor: str | None = None,
    ):
        self._session = session
        self._audit_repo = audit_repo
        self._actor = actor

    @property
    def actor(self) -> str | None:
        return self._actor

    def record(
        self,
        *,
        action: str,
        entity_type: str,
        entity_id: str,
        details: dict[str, Any] | None = None,
        commit: bool = False,
    ) -> AuditLogEntry:
        entry = AuditLogEntry.create(
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            actor=self._actor,
            details=details or {},
        )
        self._audit_repo.add(entry)
        if commit:
            self._session.commit()
        return entry

    def list_recent(
        self,
        limit: int = 200,
        *,
        entity_type: str | None = None,
        entity_id: str | None = None,
    ) -> List[AuditLogEntry]:
        return self._audit_repo.list_recent(
            limit=limit,
            entity_type=entity_type,
            entity_id=entity_id,
        )


__all__ = ["AuditService"]
