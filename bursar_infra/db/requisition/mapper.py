from __future__ import annotations

from typing import List, Optional

from bursar_core.models import InQueueItem, Requisition, RequisitionItem
from bursar_infra.db.json_columns import dict_from_json, list_from_json, to_json
from bursar_infra.db.models import RequisitionORM, RequisitionQueueORM


def items_to_json(items: List[RequisitionItem]) -> str:
    return to_json([item.to_dict() for item in items])


def items_from_json(raw: str | None) -> List[RequisitionItem]:
    return [RequisitionItem.from_dict(entry) for entry in list_from_json(raw) if isinstance(entry, dict)]


def snapshot_to_json(snapshot: Optional[List[InQueueItem]]) -> Optional[str]:
    if snapshot is None:
        return None
    return to_json([entry.to_dict() for entry in snapshot])


def snapshot_from_json(raw: str | None) -> Optional[List[InQueueItem]]:
    if raw is None:
        return None
    return [InQueueItem.from_dict(entry) for entry in list_from_json(raw) if isinstance(entry, dict)]


def requisition_to_orm(requisition: Requisition) -> RequisitionORM:
    return RequisitionORM(
        id=requisition.id,
        readable_id=requisition.readable_id,
        title=requisition.title,
        account=requisition.account,
        date=requisition.date,
        items_json=items_to_json(requisition.items),
        status=requisition.status,
        notes=requisition.notes,
        priority=requisition.priority,
        queue_snapshot_json=snapshot_to_json(requisition.queue_snapshot),
        rejection_reason=requisition.rejection_reason,
        version=getattr(requisition, "version", 1),
    )


def requisition_from_orm(obj: RequisitionORM) -> Requisition:
    return Requisition(
        id=obj.id,
        readable_id=obj.readable_id,
        title=obj.title,
        account=obj.account,
        date=obj.date,
        items=items_from_json(obj.items_json),
        status=obj.status,
        notes=obj.notes or "",
        priority=obj.priority,
        queue_snapshot=snapshot_from_json(obj.queue_snapshot_json),
        rejection_reason=obj.rejection_reason,
        version=getattr(obj, "version", 1),
    )


def queue_to_orm(entry: InQueueItem) -> RequisitionQueueORM:
    return RequisitionQueueORM(
        id=entry.id,
        original_requisition_id=entry.original_requisition_id,
        item_json=to_json(entry.item_data.to_dict()),
        date_removed=entry.date_removed,
    )


def queue_from_orm(obj: RequisitionQueueORM) -> InQueueItem:
    return InQueueItem(
        id=obj.id,
        item_data=RequisitionItem.from_dict(dict_from_json(obj.item_json)),
        date_removed=obj.date_removed,
        original_requisition_id=obj.original_requisition_id,
    )


__all__ = [
    "requisition_to_orm",
    "requisition_from_orm",
    "queue_to_orm",
    "queue_from_orm",
    "items_to_json",
    "snapshot_to_json",
]
