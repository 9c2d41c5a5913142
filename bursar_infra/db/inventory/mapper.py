from __future__ import annotations

from bursar_core.models import (
    InventoryGroup,
    InventoryItem,
    InventoryList,
    InventoryLog,
    InventoryTransfer,
    LogSource,
    TransferLine,
)
from bursar_core.services.balances import classify_log_source
from bursar_infra.db.json_columns import list_from_json, to_json
from bursar_infra.db.models import (
    InventoryGroupORM,
    InventoryItemORM,
    InventoryListORM,
    InventoryLogORM,
    InventoryTransferORM,
)


def list_to_orm(inventory_list: InventoryList) -> InventoryListORM:
    return InventoryListORM(id=inventory_list.id, name=inventory_list.name)


def list_from_orm(obj: InventoryListORM) -> InventoryList:
    return InventoryList(id=obj.id, name=obj.name)


def group_to_orm(group: InventoryGroup) -> InventoryGroupORM:
    return InventoryGroupORM(id=group.id, name=group.name, list_id=group.list_id)


def group_from_orm(obj: InventoryGroupORM) -> InventoryGroup:
    return InventoryGroup(id=obj.id, name=obj.name, list_id=obj.list_id)


def item_to_orm(item: InventoryItem) -> InventoryItemORM:
    return InventoryItemORM(
        id=item.id,
        name=item.name,
        group_id=item.group_id,
        quantity=item.quantity,
        min_stock=item.min_stock,
        units=item.units,
        last_updated=item.last_updated,
        version=getattr(item, "version", 1),
    )


def item_from_orm(obj: InventoryItemORM) -> InventoryItem:
    return InventoryItem(
        id=obj.id,
        name=obj.name,
        group_id=obj.group_id,
        quantity=obj.quantity,
        min_stock=obj.min_stock,
        units=obj.units or "pcs",
        last_updated=obj.last_updated,
        version=getattr(obj, "version", 1),
    )


def log_to_orm(log: InventoryLog) -> InventoryLogORM:
    return InventoryLogORM(
        id=log.id,
        item_id=log.item_id,
        item_name=log.item_name,
        action=log.action,
        source=log.source,
        quantity_change=log.quantity_change,
        new_quantity=log.new_quantity,
        comment=log.comment,
        date=log.date,
        user=log.user,
    )


def log_from_orm(obj: InventoryLogORM) -> InventoryLog:
    # rows imported without a tag are classified from their comment
    source = obj.source if obj.source is not None else classify_log_source(obj.comment)
    return InventoryLog(
        id=obj.id,
        item_id=obj.item_id,
        item_name=obj.item_name,
        action=obj.action,
        source=LogSource(source),
        quantity_change=obj.quantity_change,
        new_quantity=obj.new_quantity,
        comment=obj.comment or "",
        date=obj.date,
        user=obj.user or "",
    )


def lines_to_json(lines: list[TransferLine]) -> str:
    return to_json(
        [{"item_id": line.item_id, "name": line.name, "quantity": line.quantity} for line in lines]
    )


def lines_from_json(raw: str | None) -> list[TransferLine]:
    return [
        TransferLine(
            item_id=str(entry.get("item_id") or ""),
            name=str(entry.get("name") or ""),
            quantity=float(entry.get("quantity") or 0),
        )
        for entry in list_from_json(raw)
        if isinstance(entry, dict)
    ]


def transfer_to_orm(transfer: InventoryTransfer) -> InventoryTransferORM:
    return InventoryTransferORM(
        id=transfer.id,
        type=transfer.type,
        items_json=lines_to_json(transfer.items),
        source=transfer.source,
        destination=transfer.destination,
        status=transfer.status,
        date=transfer.date,
        notes=transfer.notes,
        rejection_reason=transfer.rejection_reason,
        reversal_of=transfer.reversal_of,
        approved_by=transfer.approved_by,
        version=getattr(transfer, "version", 1),
    )


def transfer_from_orm(obj: InventoryTransferORM) -> InventoryTransfer:
    return InventoryTransfer(
        id=obj.id,
        type=obj.type,
        items=lines_from_json(obj.items_json),
        source=obj.source,
        destination=obj.destination,
        status=obj.status,
        date=obj.date,
        notes=obj.notes or "",
        rejection_reason=obj.rejection_reason,
        reversal_of=obj.reversal_of,
        approved_by=obj.approved_by,
        version=getattr(obj, "version", 1),
    )


__all__ = [
    "list_to_orm",
    "list_from_orm",
    "group_to_orm",
    "group_from_orm",
    "item_to_orm",
    "item_from_orm",
    "log_to_orm",
    "log_from_orm",
    "transfer_to_orm",
    "transfer_from_orm",
]
