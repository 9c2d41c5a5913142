from bursar_core.domain.account import Account
from bursar_core.domain.audit import AuditLogEntry
from bursar_core.domain.budget import (
    BudgetCategoryLimit,
    BudgetPeriod,
    BudgetSubcategory,
    TransactionCategory,
)
from bursar_core.domain.enums import (
    AccountType,
    BillingStatus,
    BudgetPeriodStatus,
    BudgetType,
    InventoryAction,
    LogSource,
    RequisitionPriority,
    RequisitionStatus,
    RiskLevel,
    TransactionType,
    TransferStatus,
    TransferType,
)
from bursar_core.domain.fees import Billing, Payment
from bursar_core.domain.identifiers import generate_id, utc_now
from bursar_core.domain.inventory import (
    REQUIREMENTS_LIST_NAME,
    InventoryGroup,
    InventoryItem,
    InventoryList,
    InventoryLog,
    InventoryTransfer,
    TransferLine,
)
from bursar_core.domain.requisition import InQueueItem, Requisition, RequisitionItem
from bursar_core.domain.transaction import Transaction

__all__ = [
    "generate_id",
    "utc_now",
    "AccountType",
    "TransactionType",
    "RiskLevel",
    "InventoryAction",
    "LogSource",
    "TransferType",
    "TransferStatus",
    "RequisitionStatus",
    "RequisitionPriority",
    "BudgetType",
    "BudgetPeriodStatus",
    "BillingStatus",
    "Account",
    "Transaction",
    "Billing",
    "Payment",
    "REQUIREMENTS_LIST_NAME",
    "InventoryList",
    "InventoryGroup",
    "InventoryItem",
    "InventoryLog",
    "TransferLine",
    "InventoryTransfer",
    "RequisitionItem",
    "InQueueItem",
    "Requisition",
    "TransactionCategory",
    "BudgetSubcategory",
    "BudgetCategoryLimit",
    "BudgetPeriod",
    "AuditLogEntry",
]
