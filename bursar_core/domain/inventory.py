from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from bursar_core.domain.enums import (
    InventoryAction,
    LogSource,
    TransferStatus,
    TransferType,
)
from bursar_core.domain.identifiers import generate_id, utc_now

REQUIREMENTS_LIST_NAME = "Requirements"


@dataclass
class InventoryList:
    id: str
    name: str

    @staticmethod
    def create(name: str) -> "InventoryList":
        return InventoryList(id=generate_id(), name=name)


@dataclass
class InventoryGroup:
    id: str
    name: str
    list_id: str

    @staticmethod
    def create(name: str, list_id: str) -> "InventoryGroup":
        return InventoryGroup(id=generate_id(), name=name, list_id=list_id)


@dataclass
class InventoryItem:
    """
    `quantity` is a baseline. For items filed under the Requirements list the
    available amount is derived from the log and student contributions instead.
    """

    id: str
    name: str
    group_id: str
    quantity: float = 0.0
    min_stock: float = 0.0
    units: str = "pcs"
    last_updated: Optional[datetime] = None
    version: int = 1

    @staticmethod
    def create(
        name: str,
        group_id: str,
        quantity: float = 0.0,
        min_stock: float = 0.0,
        units: str = "pcs",
    ) -> "InventoryItem":
        return InventoryItem(
            id=generate_id(),
            name=name,
            group_id=group_id,
            quantity=quantity,
            min_stock=min_stock,
            units=units,
            last_updated=utc_now(),
        )


@dataclass
class InventoryLog:
    id: str
    item_id: str
    item_name: str
    action: InventoryAction
    source: LogSource
    quantity_change: float
    new_quantity: float
    comment: str
    date: datetime
    user: str = ""

    @staticmethod
    def create(
        item_id: str,
        item_name: str,
        action: InventoryAction,
        source: LogSource,
        quantity_change: float,
        new_quantity: float,
        comment: str,
        user: str = "",
    ) -> "InventoryLog":
        return InventoryLog(
            id=generate_id(),
            item_id=item_id,
            item_name=item_name,
            action=action,
            source=source,
            quantity_change=quantity_change,
            new_quantity=new_quantity,
            comment=comment,
            date=utc_now(),
            user=user,
        )


@dataclass(frozen=True)
class TransferLine:
    item_id: str
    name: str
    quantity: float


@dataclass
class InventoryTransfer:
    id: str
    type: TransferType
    items: List[TransferLine]
    source: str
    destination: str
    status: TransferStatus = TransferStatus.IN_TRANSIT
    date: datetime = field(default_factory=utc_now)
    notes: str = ""
    rejection_reason: Optional[str] = None
    reversal_of: Optional[str] = None
    approved_by: Optional[str] = None
    version: int = 1

    @staticmethod
    def create(
        type: TransferType,
        items: List[TransferLine],
        source: str,
        destination: str,
        status: TransferStatus = TransferStatus.IN_TRANSIT,
        notes: str = "",
        reversal_of: Optional[str] = None,
    ) -> "InventoryTransfer":
        return InventoryTransfer(
            id=generate_id(),
            type=type,
            items=list(items),
            source=source,
            destination=destination,
            status=status,
            notes=notes,
            reversal_of=reversal_of,
        )


__all__ = [
    "REQUIREMENTS_LIST_NAME",
    "InventoryList",
    "InventoryGroup",
    "InventoryItem",
    "InventoryLog",
    "TransferLine",
    "InventoryTransfer",
]
