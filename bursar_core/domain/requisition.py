from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import Any, List, Optional

from bursar_core.domain.enums import RequisitionPriority, RequisitionStatus
from bursar_core.domain.identifiers import generate_id, utc_now


@dataclass
class RequisitionItem:
    id: str
    name: str
    category: str
    quantity: float = 1.0
    unit_price: float = 0.0
    amount: float = 0.0
    is_priority: bool = False
    is_manual: bool = False

    @staticmethod
    def create(
        name: str,
        category: str,
        quantity: float = 1.0,
        unit_price: float = 0.0,
        amount: float | None = None,
        is_priority: bool = False,
        is_manual: bool = False,
    ) -> "RequisitionItem":
        item = RequisitionItem(
            id=generate_id(),
            name=name,
            category=category,
            quantity=quantity,
            unit_price=unit_price,
            amount=0.0 if amount is None else amount,
            is_priority=is_priority,
            is_manual=is_manual,
        )
        item.recompute_amount()
        return item

    def recompute_amount(self) -> None:
        if not self.is_manual:
            self.amount = float(self.quantity or 0) * float(self.unit_price or 0)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> "RequisitionItem":
        return RequisitionItem(
            id=str(raw.get("id") or generate_id()),
            name=str(raw.get("name") or ""),
            category=str(raw.get("category") or ""),
            quantity=float(raw.get("quantity") or 0),
            unit_price=float(raw.get("unit_price") or 0),
            amount=float(raw.get("amount") or 0),
            is_priority=bool(raw.get("is_priority", False)),
            is_manual=bool(raw.get("is_manual", False)),
        )


@dataclass
class InQueueItem:
    """A line item removed from a requisition; kept in the recycle bin instead of being destroyed."""

    id: str
    item_data: RequisitionItem
    date_removed: datetime
    original_requisition_id: Optional[str] = None

    @staticmethod
    def create(item_data: RequisitionItem, original_requisition_id: str | None) -> "InQueueItem":
        return InQueueItem(
            id=generate_id(),
            item_data=item_data,
            date_removed=utc_now(),
            original_requisition_id=original_requisition_id,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "item_data": self.item_data.to_dict(),
            "date_removed": self.date_removed.isoformat(),
            "original_requisition_id": self.original_requisition_id,
        }

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> "InQueueItem":
        return InQueueItem(
            id=str(raw["id"]),
            item_data=RequisitionItem.from_dict(raw.get("item_data") or {}),
            date_removed=datetime.fromisoformat(str(raw["date_removed"])),
            original_requisition_id=raw.get("original_requisition_id"),
        )


@dataclass
class Requisition:
    id: str
    title: str
    account: str
    date: date
    items: List[RequisitionItem] = field(default_factory=list)
    status: RequisitionStatus = RequisitionStatus.DRAFT
    readable_id: Optional[str] = None
    notes: str = ""
    priority: Optional[RequisitionPriority] = None
    queue_snapshot: Optional[List[InQueueItem]] = None
    rejection_reason: Optional[str] = None
    version: int = 1

    @staticmethod
    def create(
        title: str,
        account: str,
        date: date,
        items: List[RequisitionItem] | None = None,
        status: RequisitionStatus = RequisitionStatus.DRAFT,
        notes: str = "",
        priority: RequisitionPriority | None = None,
    ) -> "Requisition":
        return Requisition(
            id=generate_id(),
            title=title,
            account=account,
            date=date,
            items=list(items or []),
            status=status,
            notes=notes,
            priority=priority,
        )

    @property
    def total_amount(self) -> float:
        return sum(float(item.amount or 0) for item in self.items)


__all__ = ["RequisitionItem", "InQueueItem", "Requisition"]
