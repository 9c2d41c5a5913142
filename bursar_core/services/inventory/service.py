from __future__ import annotations

import logging
from typing import List

from sqlalchemy.orm import Session

from bursar_core.events.domain_events import domain_events
from bursar_core.exceptions import NotFoundError, ValidationError
from bursar_core.interfaces import (
    InventoryGroupRepository,
    InventoryItemRepository,
    InventoryListRepository,
    InventoryLogRepository,
)
from bursar_core.models import (
    InventoryAction,
    InventoryGroup,
    InventoryItem,
    InventoryList,
    InventoryLog,
    LogSource,
)
from bursar_core.services.audit.helpers import actor_of, record_audit
from bursar_core.services.balances import RequirementAvailability, classify_log_source
from bursar_core.services.common.guards import ensure_expected_version, require_positive
from bursar_core.services.inventory.stock import StockBook

logger = logging.getLogger(__name__)

DEFAULT_ADD_COMMENT = "Stock added"
DEFAULT_REDUCE_COMMENT = "Stock reduced"
DEFAULT_SET_COMMENT = "Stock level set"

_DIRECT_ACTIONS = (InventoryAction.ADD, InventoryAction.REDUCE, InventoryAction.SET)


class InventoryService:
    def __init__(
        self,
        session: Session,
        list_repo: InventoryListRepository,
        group_repo: InventoryGroupRepository,
        item_repo: InventoryItemRepository,
        log_repo: InventoryLogRepository,
        stock: StockBook,
        audit_service=None,
    ):
        self._session: Session = session
        self._list_repo: InventoryListRepository = list_repo
        self._group_repo: InventoryGroupRepository = group_repo
        self._item_repo: InventoryItemRepository = item_repo
        self._log_repo: InventoryLogRepository = log_repo
        self._stock = stock
        self._audit_service = audit_service

    # --- Catalog ---

    def add_inventory_list(self, name: str) -> InventoryList:
        name = (name or "").strip()
        if not name:
            raise ValidationError("List name is required.", code="INVENTORY_LIST_NAME_REQUIRED")
        existing = self._list_repo.get_by_name(name)
        if existing is not None:
            return existing
        inventory_list = InventoryList.create(name)
        try:
            self._list_repo.add(inventory_list)
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e
        return inventory_list

    def add_inventory_group(self, name: str, list_id: str) -> InventoryGroup:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Group name is required.", code="INVENTORY_GROUP_NAME_REQUIRED")
        if self._list_repo.get(list_id) is None:
            raise NotFoundError("Inventory list not found.", code="INVENTORY_LIST_NOT_FOUND")
        group = InventoryGroup.create(name, list_id)
        try:
            self._group_repo.add(group)
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e
        return group

    def add_inventory_item(
        self,
        name: str,
        group_id: str,
        quantity: float = 0.0,
        min_stock: float = 0.0,
        units: str = "pcs",
    ) -> InventoryItem:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Item name is required.", code="INVENTORY_ITEM_NAME_REQUIRED")
        if self._group_repo.get(group_id) is None:
            raise NotFoundError("Inventory group not found.", code="INVENTORY_GROUP_NOT_FOUND")
        if quantity < 0 or min_stock < 0:
            raise ValidationError("Quantities cannot be negative.", code="QUANTITY_NEGATIVE")

        item = InventoryItem.create(
            name=name,
            group_id=group_id,
            quantity=float(quantity),
            min_stock=float(min_stock),
            units=(units or "pcs").strip(),
        )
        try:
            self._item_repo.add(item)
            record_audit(
                self,
                action="inventory.item.add",
                entity_type="inventory_item",
                entity_id=item.id,
                details={"name": item.name, "quantity": item.quantity},
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        domain_events.inventory_changed.emit(item.id)
        return item

    def update_inventory_item(
        self,
        item_id: str,
        *,
        name: str | None = None,
        min_stock: float | None = None,
        units: str | None = None,
        quantity: float | None = None,
        expected_version: int | None = None,
    ) -> InventoryItem:
        """Edit item details. A quantity change is recorded as a `set` log row."""
        item = self._stock.require_item(item_id)
        ensure_expected_version(item, expected_version, label="Inventory item")
        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("Item name is required.", code="INVENTORY_ITEM_NAME_REQUIRED")
            item.name = name
        if min_stock is not None:
            if min_stock < 0:
                raise ValidationError("Minimum stock cannot be negative.", code="QUANTITY_NEGATIVE")
            item.min_stock = float(min_stock)
        if units is not None:
            item.units = units.strip() or item.units
        if quantity is not None and quantity < 0:
            raise ValidationError("Quantity cannot be negative.", code="QUANTITY_NEGATIVE")

        try:
            if quantity is not None and float(quantity) != float(item.quantity):
                self._stock.apply(
                    item,
                    action=InventoryAction.SET,
                    source=LogSource.DIRECT,
                    quantity_change=float(quantity) - float(item.quantity),
                    new_quantity=float(quantity),
                    comment=DEFAULT_SET_COMMENT,
                    user=actor_of(self),
                )
            else:
                self._item_repo.update(item)
            record_audit(
                self,
                action="inventory.item.update",
                entity_type="inventory_item",
                entity_id=item.id,
                details={"name": item.name, "quantity": item.quantity},
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        domain_events.inventory_changed.emit(item.id)
        return item

    # --- Stock movements ---

    def add_inventory_log(
        self,
        item_id: str,
        action: InventoryAction,
        quantity: float,
        comment: str | None = None,
    ) -> InventoryLog:
        if not isinstance(action, InventoryAction):
            action = InventoryAction(str(action))
        if action not in _DIRECT_ACTIONS:
            raise ValidationError(
                "Transfers must be recorded through the transfer workflow.",
                code="INVENTORY_ACTION_UNSUPPORTED",
            )
        item = self._stock.require_item(item_id)
        current = float(item.quantity or 0.0)
        comment = (comment or "").strip()

        if action == InventoryAction.SET:
            if quantity < 0:
                raise ValidationError("Quantity cannot be negative.", code="QUANTITY_NEGATIVE")
            change = float(quantity) - current
            new_quantity = float(quantity)
            comment = comment or DEFAULT_SET_COMMENT
        elif action == InventoryAction.ADD:
            change = require_positive(quantity, field_name="Quantity", code="QUANTITY_NOT_POSITIVE")
            new_quantity = current + change
            comment = comment or DEFAULT_ADD_COMMENT
        else:
            change = require_positive(quantity, field_name="Quantity", code="QUANTITY_NOT_POSITIVE")
            available = self._stock.available(item)
            if change > available:
                logger.warning(
                    "Refused to reduce %s by %s: only %s available", item.name, change, available
                )
                raise ValidationError(
                    f"Cannot reduce {item.name} by {change:g}; only {available:g} available.",
                    code="INSUFFICIENT_STOCK",
                )
            new_quantity = current - change
            comment = comment or DEFAULT_REDUCE_COMMENT

        source = LogSource.DIRECT
        if action != InventoryAction.SET:
            source = classify_log_source(comment)

        try:
            log = self._stock.apply(
                item,
                action=action,
                source=source,
                quantity_change=change,
                new_quantity=new_quantity,
                comment=comment,
                user=actor_of(self),
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        logger.info("Inventory %s %s %g -> %g", item.name, action.value, change, new_quantity)
        domain_events.inventory_changed.emit(item.id)
        return log

    # --- Reads ---

    def get_available_stock(self, item_id: str) -> float:
        return self._stock.available(self._stock.require_item(item_id))

    def get_requirement_availability(self, item_id: str) -> RequirementAvailability:
        item = self._stock.require_item(item_id)
        if not self._stock.is_requirement(item):
            raise ValidationError(
                "Item is not on the Requirements list.",
                code="NOT_A_REQUIREMENT_ITEM",
            )
        return self._stock.requirement_availability(item)

    def is_low_stock(self, item_id: str) -> bool:
        item = self._stock.require_item(item_id)
        return self._stock.available(item) <= float(item.min_stock or 0.0)

    def list_logs(self, item_id: str | None = None, limit: int = 200) -> List[InventoryLog]:
        if item_id is not None:
            return self._log_repo.list_by_item(item_id)
        return self._log_repo.list_recent(limit)

    def list_lists(self) -> List[InventoryList]:
        return self._list_repo.list_all()

    def list_groups(self, list_id: str) -> List[InventoryGroup]:
        return self._group_repo.list_by_list(list_id)

    def list_items(self, group_id: str) -> List[InventoryItem]:
        return self._item_repo.list_by_group(group_id)


__all__ = ["InventoryService"]
