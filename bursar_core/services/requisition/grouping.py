from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

from bursar_core.models import RequisitionItem

PRIORITY_GROUP = "PRIORITY / SPECIAL"
UNCATEGORIZED_GROUP = "Uncategorized"


@dataclass(frozen=True)
class RequisitionItemGroup:
    name: str
    items: Tuple[RequisitionItem, ...]
    subtotal: float


def group_name_for(item: RequisitionItem) -> str:
    if item.is_priority:
        return PRIORITY_GROUP
    head = (item.category or "").split("/")[0].strip()
    return head or UNCATEGORIZED_GROUP


def group_requisition_items(items: Iterable[RequisitionItem]) -> List[RequisitionItemGroup]:
    buckets: Dict[str, List[RequisitionItem]] = {}
    for item in items:
        buckets.setdefault(group_name_for(item), []).append(item)

    ordered = sorted(buckets, key=lambda name: (name != PRIORITY_GROUP, name))
    return [
        RequisitionItemGroup(
            name=name,
            items=tuple(buckets[name]),
            subtotal=sum(float(item.amount or 0.0) for item in buckets[name]),
        )
        for name in ordered
    ]


__all__ = [
    "PRIORITY_GROUP",
    "UNCATEGORIZED_GROUP",
    "RequisitionItemGroup",
    "group_name_for",
    "group_requisition_items",
]
