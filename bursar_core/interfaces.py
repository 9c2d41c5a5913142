# bursar_core/interfaces.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Mapping, Optional, Protocol

from bursar_core.models import (
    Account,
    AuditLogEntry,
    Billing,
    BudgetPeriod,
    BudgetType,
    InQueueItem,
    InventoryGroup,
    InventoryItem,
    InventoryList,
    InventoryLog,
    InventoryTransfer,
    Payment,
    Requisition,
    Transaction,
    TransactionCategory,
    TransferStatus,
)


class AccountRepository(ABC):
    @abstractmethod
    def add(self, account: Account) -> None: ...
    @abstractmethod
    def update(self, account: Account) -> None: ...
    @abstractmethod
    def delete(self, account_id: str) -> None: ...
    @abstractmethod
    def get(self, account_id: str) -> Optional[Account]: ...
    @abstractmethod
    def get_by_name(self, name: str) -> Optional[Account]: ...
    @abstractmethod
    def list_all(self) -> List[Account]: ...


class TransactionRepository(ABC):
    @abstractmethod
    def add(self, transaction: Transaction) -> None: ...
    @abstractmethod
    def update(self, transaction: Transaction) -> None: ...
    @abstractmethod
    def get(self, transaction_id: str) -> Optional[Transaction]: ...
    @abstractmethod
    def list_all(self, *, include_deleted: bool = False) -> List[Transaction]: ...
    @abstractmethod
    def list_deleted(self) -> List[Transaction]: ...
    @abstractmethod
    def list_by_method(self, method: str, *, include_deleted: bool = False) -> List[Transaction]: ...
    @abstractmethod
    def list_by_requisition(self, requisition_readable_id: str) -> List[Transaction]: ...


class BillingRepository(ABC):
    @abstractmethod
    def add(self, billing: Billing) -> None: ...
    @abstractmethod
    def update(self, billing: Billing) -> None: ...
    @abstractmethod
    def get(self, billing_id: str) -> Optional[Billing]: ...
    @abstractmethod
    def list_by_student(self, student_id: str, *, include_deleted: bool = False) -> List[Billing]: ...
    @abstractmethod
    def list_deleted(self) -> List[Billing]: ...


class PaymentRepository(ABC):
    @abstractmethod
    def add(self, payment: Payment) -> None: ...
    @abstractmethod
    def update(self, payment: Payment) -> None: ...
    @abstractmethod
    def get(self, payment_id: str) -> Optional[Payment]: ...
    @abstractmethod
    def list_by_student(self, student_id: str, *, include_deleted: bool = False) -> List[Payment]: ...
    @abstractmethod
    def list_deleted(self) -> List[Payment]: ...


class InventoryListRepository(ABC):
    @abstractmethod
    def add(self, inventory_list: InventoryList) -> None: ...
    @abstractmethod
    def get(self, list_id: str) -> Optional[InventoryList]: ...
    @abstractmethod
    def get_by_name(self, name: str) -> Optional[InventoryList]: ...
    @abstractmethod
    def list_all(self) -> List[InventoryList]: ...


class InventoryGroupRepository(ABC):
    @abstractmethod
    def add(self, group: InventoryGroup) -> None: ...
    @abstractmethod
    def get(self, group_id: str) -> Optional[InventoryGroup]: ...
    @abstractmethod
    def list_by_list(self, list_id: str) -> List[InventoryGroup]: ...


class InventoryItemRepository(ABC):
    @abstractmethod
    def add(self, item: InventoryItem) -> None: ...
    @abstractmethod
    def update(self, item: InventoryItem) -> None: ...
    @abstractmethod
    def delete(self, item_id: str) -> None: ...
    @abstractmethod
    def get(self, item_id: str) -> Optional[InventoryItem]: ...
    @abstractmethod
    def list_by_group(self, group_id: str) -> List[InventoryItem]: ...


class InventoryLogRepository(ABC):
    """Append-only: no update or delete."""

    @abstractmethod
    def add(self, log: InventoryLog) -> None: ...
    @abstractmethod
    def list_by_item(self, item_id: str) -> List[InventoryLog]: ...
    @abstractmethod
    def list_recent(self, limit: int = 200) -> List[InventoryLog]: ...


class InventoryTransferRepository(ABC):
    @abstractmethod
    def add(self, transfer: InventoryTransfer) -> None: ...
    @abstractmethod
    def update(self, transfer: InventoryTransfer) -> None: ...
    @abstractmethod
    def get(self, transfer_id: str) -> Optional[InventoryTransfer]: ...
    @abstractmethod
    def list_by_status(self, status: TransferStatus | None = None) -> List[InventoryTransfer]: ...
    @abstractmethod
    def list_reversals_of(self, transfer_id: str) -> List[InventoryTransfer]: ...


class RequisitionRepository(ABC):
    @abstractmethod
    def add(self, requisition: Requisition) -> None: ...
    @abstractmethod
    def update(self, requisition: Requisition) -> None: ...
    @abstractmethod
    def delete(self, requisition_id: str) -> None: ...
    @abstractmethod
    def get(self, requisition_id: str) -> Optional[Requisition]: ...
    @abstractmethod
    def list_all(self) -> List[Requisition]: ...


class RequisitionQueueRepository(ABC):
    @abstractmethod
    def add(self, entry: InQueueItem) -> None: ...
    @abstractmethod
    def get(self, entry_id: str) -> Optional[InQueueItem]: ...
    @abstractmethod
    def delete(self, entry_id: str) -> None: ...
    @abstractmethod
    def list_all(self) -> List[InQueueItem]: ...
    @abstractmethod
    def list_for_requisition(self, requisition_id: str) -> List[InQueueItem]: ...
    @abstractmethod
    def clear(self) -> None: ...


class TransactionCategoryRepository(ABC):
    @abstractmethod
    def add(self, category: TransactionCategory) -> None: ...
    @abstractmethod
    def update(self, category: TransactionCategory) -> None: ...
    @abstractmethod
    def get(self, category_id: str) -> Optional[TransactionCategory]: ...
    @abstractmethod
    def list_by_type(self, budget_type: BudgetType) -> List[TransactionCategory]: ...


class BudgetPeriodRepository(ABC):
    @abstractmethod
    def add(self, period: BudgetPeriod) -> None: ...
    @abstractmethod
    def update(self, period: BudgetPeriod) -> None: ...
    @abstractmethod
    def get(self, period_id: str) -> Optional[BudgetPeriod]: ...
    @abstractmethod
    def list_all(self) -> List[BudgetPeriod]: ...


class AuditLogRepository(ABC):
    @abstractmethod
    def add(self, entry: AuditLogEntry) -> None: ...
    @abstractmethod
    def list_recent(
        self,
        limit: int = 200,
        *,
        entity_type: str | None = None,
        entity_id: str | None = None,
    ) -> List[AuditLogEntry]: ...


class RequirementContributionSource(Protocol):
    """Supplies the quantity students declared as brought for a requirement item name."""

    def total_brought(self, item_name: str) -> float: ...


class NoContributions:
    def total_brought(self, item_name: str) -> float:
        return 0.0


class StaticContributions:
    def __init__(self, totals: Mapping[str, float] | None = None):
        self._totals = dict(totals or {})

    def set(self, item_name: str, quantity: float) -> None:
        self._totals[item_name] = float(quantity)

    def total_brought(self, item_name: str) -> float:
        return float(self._totals.get(item_name, 0.0))
