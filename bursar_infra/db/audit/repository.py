from __future__ import annotations

from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from bursar_core.interfaces import AuditLogRepository
from bursar_core.models import AuditLogEntry
from bursar_infra.db.audit.mapper import audit_from_orm, audit_to_orm
from bursar_infra.db.models import AuditLogORM


class SqlAlchemyAuditLogRepository(AuditLogRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, entry: AuditLogEntry) -> None:
        self.session.add(audit_to_orm(entry))

    def list_recent(
        self,
        limit: int = 200,
        *,
        entity_type: str | None = None,
        entity_id: str | None = None,
    ) -> List[AuditLogEntry]:
        stmt = select(AuditLogORM)
        if entity_type is not None:
            stmt = stmt.where(AuditLogORM.entity_type == entity_type)
        if entity_id is not None:
            stmt = stmt.where(AuditLogORM.entity_id == entity_id)
        stmt = stmt.order_by(AuditLogORM.occurred_at.desc()).limit(max(1, int(limit)))
        rows = self.session.execute(stmt).scalars().all()
        return [audit_from_orm(row) for row in rows]


__all__ = ["SqlAlchemyAuditLogRepository"]
