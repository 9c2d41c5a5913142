from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from bursar_core.interfaces import (
    InventoryGroupRepository,
    InventoryItemRepository,
    InventoryListRepository,
    InventoryLogRepository,
    InventoryTransferRepository,
)
from bursar_core.models import (
    InventoryGroup,
    InventoryItem,
    InventoryList,
    InventoryLog,
    InventoryTransfer,
    TransferStatus,
)
from bursar_infra.db.inventory.mapper import (
    group_from_orm,
    group_to_orm,
    item_from_orm,
    item_to_orm,
    list_from_orm,
    list_to_orm,
    lines_to_json,
    log_from_orm,
    log_to_orm,
    transfer_from_orm,
    transfer_to_orm,
)
from bursar_infra.db.models import (
    InventoryGroupORM,
    InventoryItemORM,
    InventoryListORM,
    InventoryLogORM,
    InventoryTransferORM,
)
from bursar_infra.db.optimistic import update_with_version_check


class SqlAlchemyInventoryListRepository(InventoryListRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, inventory_list: InventoryList) -> None:
        self.session.add(list_to_orm(inventory_list))

    def get(self, list_id: str) -> Optional[InventoryList]:
        obj = self.session.get(InventoryListORM, list_id)
        return list_from_orm(obj) if obj else None

    def get_by_name(self, name: str) -> Optional[InventoryList]:
        stmt = select(InventoryListORM).where(InventoryListORM.name == name)
        obj = self.session.execute(stmt).scalars().first()
        return list_from_orm(obj) if obj else None

    def list_all(self) -> List[InventoryList]:
        rows = self.session.execute(select(InventoryListORM).order_by(InventoryListORM.name)).scalars().all()
        return [list_from_orm(row) for row in rows]


class SqlAlchemyInventoryGroupRepository(InventoryGroupRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, group: InventoryGroup) -> None:
        self.session.add(group_to_orm(group))

    def get(self, group_id: str) -> Optional[InventoryGroup]:
        obj = self.session.get(InventoryGroupORM, group_id)
        return group_from_orm(obj) if obj else None

    def list_by_list(self, list_id: str) -> List[InventoryGroup]:
        stmt = select(InventoryGroupORM).where(InventoryGroupORM.list_id == list_id)
        return [group_from_orm(row) for row in self.session.execute(stmt).scalars().all()]


class SqlAlchemyInventoryItemRepository(InventoryItemRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, item: InventoryItem) -> None:
        self.session.add(item_to_orm(item))

    def update(self, item: InventoryItem) -> None:
        item.version = update_with_version_check(
            self.session,
            InventoryItemORM,
            item.id,
            getattr(item, "version", 1),
            {
                "name": item.name,
                "quantity": item.quantity,
                "min_stock": item.min_stock,
                "units": item.units,
                "last_updated": item.last_updated,
            },
            not_found_message="Inventory item not found.",
            stale_message="Inventory item was updated by another user.",
        )

    def delete(self, item_id: str) -> None:
        self.session.query(InventoryItemORM).filter_by(id=item_id).delete()

    def get(self, item_id: str) -> Optional[InventoryItem]:
        obj = self.session.get(InventoryItemORM, item_id)
        return item_from_orm(obj) if obj else None

    def list_by_group(self, group_id: str) -> List[InventoryItem]:
        stmt = select(InventoryItemORM).where(InventoryItemORM.group_id == group_id)
        return [item_from_orm(row) for row in self.session.execute(stmt).scalars().all()]


class SqlAlchemyInventoryLogRepository(InventoryLogRepository):
    """Only ever inserts; there is no code path that rewrites a log row."""

    def __init__(self, session: Session):
        self.session = session

    def add(self, log: InventoryLog) -> None:
        self.session.add(log_to_orm(log))

    def list_by_item(self, item_id: str) -> List[InventoryLog]:
        stmt = (
            select(InventoryLogORM)
            .where(InventoryLogORM.item_id == item_id)
            .order_by(InventoryLogORM.date, InventoryLogORM.id)
        )
        return [log_from_orm(row) for row in self.session.execute(stmt).scalars().all()]

    def list_recent(self, limit: int = 200) -> List[InventoryLog]:
        stmt = select(InventoryLogORM).order_by(InventoryLogORM.date.desc()).limit(max(1, int(limit)))
        return [log_from_orm(row) for row in self.session.execute(stmt).scalars().all()]


class SqlAlchemyInventoryTransferRepository(InventoryTransferRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, transfer: InventoryTransfer) -> None:
        self.session.add(transfer_to_orm(transfer))

    def update(self, transfer: InventoryTransfer) -> None:
        transfer.version = update_with_version_check(
            self.session,
            InventoryTransferORM,
            transfer.id,
            getattr(transfer, "version", 1),
            {
                "items_json": lines_to_json(transfer.items),
                "status": transfer.status,
                "notes": transfer.notes,
                "rejection_reason": transfer.rejection_reason,
                "approved_by": transfer.approved_by,
            },
            not_found_message="Transfer not found.",
            stale_message="Transfer was updated by another user.",
        )

    def get(self, transfer_id: str) -> Optional[InventoryTransfer]:
        obj = self.session.get(InventoryTransferORM, transfer_id)
        return transfer_from_orm(obj) if obj else None

    def list_by_status(self, status: TransferStatus | None = None) -> List[InventoryTransfer]:
        stmt = select(InventoryTransferORM)
        if status is not None:
            stmt = stmt.where(InventoryTransferORM.status == status)
        stmt = stmt.order_by(InventoryTransferORM.date.desc())
        return [transfer_from_orm(row) for row in self.session.execute(stmt).scalars().all()]

    def list_reversals_of(self, transfer_id: str) -> List[InventoryTransfer]:
        stmt = select(InventoryTransferORM).where(InventoryTransferORM.reversal_of == transfer_id)
        return [transfer_from_orm(row) for row in self.session.execute(stmt).scalars().all()]


__all__ = [
    "SqlAlchemyInventoryListRepository",
    "SqlAlchemyInventoryGroupRepository",
    "SqlAlchemyInventoryItemRepository",
    "SqlAlchemyInventoryLogRepository",
    "SqlAlchemyInventoryTransferRepository",
]
