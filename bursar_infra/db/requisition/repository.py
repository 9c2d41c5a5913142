from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from bursar_core.interfaces import RequisitionQueueRepository, RequisitionRepository
from bursar_core.models import InQueueItem, Requisition
from bursar_infra.db.models import RequisitionORM, RequisitionQueueORM
from bursar_infra.db.optimistic import update_with_version_check
from bursar_infra.db.requisition.mapper import (
    items_to_json,
    queue_from_orm,
    queue_to_orm,
    requisition_from_orm,
    requisition_to_orm,
    snapshot_to_json,
)


class SqlAlchemyRequisitionRepository(RequisitionRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, requisition: Requisition) -> None:
        self.session.add(requisition_to_orm(requisition))

    def update(self, requisition: Requisition) -> None:
        requisition.version = update_with_version_check(
            self.session,
            RequisitionORM,
            requisition.id,
            getattr(requisition, "version", 1),
            {
                "title": requisition.title,
                "account": requisition.account,
                "date": requisition.date,
                "items_json": items_to_json(requisition.items),
                "status": requisition.status,
                "notes": requisition.notes,
                "priority": requisition.priority,
                "queue_snapshot_json": snapshot_to_json(requisition.queue_snapshot),
                "rejection_reason": requisition.rejection_reason,
            },
            not_found_message="Requisition not found.",
            stale_message="Requisition was updated by another user.",
        )

    def delete(self, requisition_id: str) -> None:
        self.session.query(RequisitionORM).filter_by(id=requisition_id).delete()

    def get(self, requisition_id: str) -> Optional[Requisition]:
        obj = self.session.get(RequisitionORM, requisition_id)
        return requisition_from_orm(obj) if obj else None

    def list_all(self) -> List[Requisition]:
        stmt = select(RequisitionORM).order_by(RequisitionORM.date.desc(), RequisitionORM.readable_id)
        return [requisition_from_orm(row) for row in self.session.execute(stmt).scalars().all()]


class SqlAlchemyRequisitionQueueRepository(RequisitionQueueRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, entry: InQueueItem) -> None:
        self.session.add(queue_to_orm(entry))

    def get(self, entry_id: str) -> Optional[InQueueItem]:
        obj = self.session.get(RequisitionQueueORM, entry_id)
        return queue_from_orm(obj) if obj else None

    def delete(self, entry_id: str) -> None:
        self.session.query(RequisitionQueueORM).filter_by(id=entry_id).delete()

    def list_all(self) -> List[InQueueItem]:
        stmt = select(RequisitionQueueORM).order_by(RequisitionQueueORM.date_removed.desc())
        return [queue_from_orm(row) for row in self.session.execute(stmt).scalars().all()]

    def list_for_requisition(self, requisition_id: str) -> List[InQueueItem]:
        stmt = (
            select(RequisitionQueueORM)
            .where(RequisitionQueueORM.original_requisition_id == requisition_id)
            .order_by(RequisitionQueueORM.date_removed)
        )
        return [queue_from_orm(row) for row in self.session.execute(stmt).scalars().all()]

    def clear(self) -> None:
        self.session.query(RequisitionQueueORM).delete()


__all__ = ["SqlAlchemyRequisitionRepository", "SqlAlchemyRequisitionQueueRepository"]
