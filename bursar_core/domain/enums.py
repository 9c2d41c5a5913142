from __future__ import annotations

from enum import Enum


class AccountType(str, Enum):
    ASSET = "Asset"
    LIABILITY = "Liability"


class TransactionType(str, Enum):
    INCOME = "Income"
    EXPENSE = "Expense"


class RiskLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class InventoryAction(str, Enum):
    ADD = "add"
    REDUCE = "reduce"
    SET = "set"
    TRANSFER_IN = "transfer_in"
    TRANSFER_OUT = "transfer_out"


class LogSource(str, Enum):
    DIRECT = "direct"
    TRANSFER_IN = "transfer_in"
    TRANSFER_OUT = "transfer_out"


class TransferType(str, Enum):
    IN = "in"
    OUT = "out"

    def flipped(self) -> "TransferType":
        return TransferType.IN if self is TransferType.OUT else TransferType.OUT


class TransferStatus(str, Enum):
    DRAFT = "draft"
    IN_TRANSIT = "in-transit"
    COMPLETED = "completed"
    APPROVED = "approved"
    REJECTED = "rejected"


class RequisitionStatus(str, Enum):
    DRAFT = "Draft"
    SUBMITTED = "Submitted"
    PENDING_APPROVAL = "Pending Approval"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class RequisitionPriority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class BudgetType(str, Enum):
    EXPENSE = "Expense"
    INCOME = "Income"


class BudgetPeriodStatus(str, Enum):
    DRAFT = "Draft"
    ACTIVE = "Active"
    ARCHIVED = "Archived"


class BillingStatus(str, Enum):
    PENDING = "Pending"
    PARTIALLY_PAID = "Partially Paid"
    PAID = "Paid"
    VOID = "Void"


__all__ = [
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
]
