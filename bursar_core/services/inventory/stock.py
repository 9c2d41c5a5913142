"""
Stock bookkeeping shared by direct adjustments and transfers.

Nothing in here commits; callers own the unit of work.
"""
from __future__ import annotations

from typing import List

from bursar_core.exceptions import NotFoundError
from bursar_core.interfaces import (
    InventoryGroupRepository,
    InventoryItemRepository,
    InventoryListRepository,
    InventoryLogRepository,
    NoContributions,
    RequirementContributionSource,
)
from bursar_core.models import (
    REQUIREMENTS_LIST_NAME,
    InventoryAction,
    InventoryItem,
    InventoryLog,
    LogSource,
)
from bursar_core.domain.identifiers import utc_now
from bursar_core.services.balances import (
    RequirementAvailability,
    resolve_item_stock,
    resolve_requirement_availability,
)


class StockBook:
    def __init__(
        self,
        item_repo: InventoryItemRepository,
        log_repo: InventoryLogRepository,
        group_repo: InventoryGroupRepository,
        list_repo: InventoryListRepository,
        contributions: RequirementContributionSource | None = None,
    ):
        self._item_repo = item_repo
        self._log_repo = log_repo
        self._group_repo = group_repo
        self._list_repo = list_repo
        self._contributions = contributions or NoContributions()

    def require_item(self, item_id: str) -> InventoryItem:
        item = self._item_repo.get(item_id)
        if item is None:
            raise NotFoundError("Inventory item not found.", code="INVENTORY_ITEM_NOT_FOUND")
        return item

    def is_requirement(self, item: InventoryItem) -> bool:
        group = self._group_repo.get(item.group_id)
        if group is None:
            return False
        inventory_list = self._list_repo.get(group.list_id)
        return inventory_list is not None and inventory_list.name == REQUIREMENTS_LIST_NAME

    def logs_for(self, item: InventoryItem) -> List[InventoryLog]:
        return self._log_repo.list_by_item(item.id)

    def requirement_availability(self, item: InventoryItem) -> RequirementAvailability:
        return resolve_requirement_availability(
            item,
            self.logs_for(item),
            self._contributions.total_brought(item.name),
        )

    def available(self, item: InventoryItem) -> float:
        is_requirement = self.is_requirement(item)
        return resolve_item_stock(
            item,
            self.logs_for(item) if is_requirement else [],
            is_requirement=is_requirement,
            brought=self._contributions.total_brought(item.name) if is_requirement else 0.0,
        )

    def apply(
        self,
        item: InventoryItem,
        *,
        action: InventoryAction,
        source: LogSource,
        quantity_change: float,
        new_quantity: float,
        comment: str,
        user: str = "",
    ) -> InventoryLog:
        item.quantity = new_quantity
        item.last_updated = utc_now()
        self._item_repo.update(item)
        log = InventoryLog.create(
            item_id=item.id,
            item_name=item.name,
            action=action,
            source=source,
            quantity_change=quantity_change,
            new_quantity=new_quantity,
            comment=comment,
            user=user,
        )
        self._log_repo.add(log)
        return log


__all__ = ["StockBook"]
