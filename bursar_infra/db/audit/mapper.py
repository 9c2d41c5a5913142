from __future__ import annotations

from bursar_core.models import AuditLogEntry
from bursar_infra.db.json_columns import dict_from_json, to_json
from bursar_infra.db.models import AuditLogORM
from bursar_infra.operational_support import redact_value


def audit_to_orm(entry: AuditLogEntry) -> AuditLogORM:
    return AuditLogORM(
        id=entry.id,
        occurred_at=entry.occurred_at,
        actor=entry.actor,
        action=entry.action,
        entity_type=entry.entity_type,
        entity_id=entry.entity_id,
        details_json=to_json(redact_value(entry.details)),
    )


def audit_from_orm(obj: AuditLogORM) -> AuditLogEntry:
    return AuditLogEntry(
        id=obj.id,
        occurred_at=obj.occurred_at,
        actor=obj.actor,
        action=obj.action,
        entity_type=obj.entity_type,
        entity_id=obj.entity_id,
        details=dict_from_json(obj.details_json),
    )


__all__ = ["audit_to_orm", "audit_from_orm"]
