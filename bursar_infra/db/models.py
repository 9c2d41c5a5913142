# bursar_infra/db/models.py
from __future__ import annotations
import datetime as dt
from typing import Optional

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Enum as SAEnum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from bursar_infra.db.base import Base
from bursar_core.models import (
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


class AccountORM(Base):
    __tablename__ = "accounts"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    group: Mapped[str] = mapped_column("account_group", String, nullable=False)
    type: Mapped[AccountType] = mapped_column(
        SAEnum(AccountType), default=AccountType.ASSET, nullable=False
    )
    currency: Mapped[str] = mapped_column(String(8), default="UGX", nullable=False)
    opening_balance: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    version: Mapped[int] = mapped_column(Integer, default=1, nullable=False)


class TransactionORM(Base):
    __tablename__ = "transactions"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    type: Mapped[TransactionType] = mapped_column(SAEnum(TransactionType), nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    method: Mapped[str] = mapped_column(String, nullable=False)  # account name
    category: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(String, default="")
    recorded_by: Mapped[str] = mapped_column(String, default="")
    is_flagged: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    risk_level: Mapped[Optional[RiskLevel]] = mapped_column(SAEnum(RiskLevel), nullable=True)
    soft_deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    deleted_reason: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    deleted_at: Mapped[Optional[dt.datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    requisition_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    transfer_group_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    version: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
Index("idx_transactions_method", TransactionORM.method)
Index("idx_transactions_requisition", TransactionORM.requisition_id)


class BillingORM(Base):
    __tablename__ = "billings"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    student_id: Mapped[str] = mapped_column(String, nullable=False)
    kind: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(String, default="")
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    term: Mapped[str] = mapped_column(String, default="")
    status: Mapped[BillingStatus] = mapped_column(
        SAEnum(BillingStatus), default=BillingStatus.PENDING, nullable=False
    )
    soft_deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    deleted_reason: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    deleted_at: Mapped[Optional[dt.datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    version: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
Index("idx_billings_student", BillingORM.student_id)


class PaymentORM(Base):
    __tablename__ = "payments"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    student_id: Mapped[str] = mapped_column(String, nullable=False)
    billing_id: Mapped[Optional[str]] = mapped_column(
        String, ForeignKey("billings.id"), nullable=True
    )
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    method: Mapped[str] = mapped_column(String, nullable=False)
    reference: Mapped[str] = mapped_column(String, default="")
    term: Mapped[str] = mapped_column(String, default="")
    soft_deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    deleted_reason: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    deleted_at: Mapped[Optional[dt.datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    version: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
Index("idx_payments_student", PaymentORM.student_id)


class InventoryListORM(Base):
    __tablename__ = "inventory_lists"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False, unique=True)


class InventoryGroupORM(Base):
    __tablename__ = "inventory_groups"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    list_id: Mapped[str] = mapped_column(
        String, ForeignKey("inventory_lists.id", ondelete="CASCADE"), nullable=False
    )


class InventoryItemORM(Base):
    __tablename__ = "inventory_items"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    group_id: Mapped[str] = mapped_column(
        String, ForeignKey("inventory_groups.id", ondelete="CASCADE"), nullable=False
    )
    quantity: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    min_stock: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    units: Mapped[str] = mapped_column(String, default="pcs")
    last_updated: Mapped[Optional[dt.datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    version: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
Index("idx_inventory_items_group", InventoryItemORM.group_id)


class InventoryLogORM(Base):
    # no FK to items: history outlives the item it describes
    __tablename__ = "inventory_logs"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    item_id: Mapped[str] = mapped_column(String, nullable=False)
    item_name: Mapped[str] = mapped_column(String, nullable=False)
    action: Mapped[InventoryAction] = mapped_column(SAEnum(InventoryAction), nullable=False)
    source: Mapped[Optional[LogSource]] = mapped_column(SAEnum(LogSource), nullable=True)
    quantity_change: Mapped[float] = mapped_column(Float, nullable=False)
    new_quantity: Mapped[float] = mapped_column(Float, nullable=False)
    comment: Mapped[str] = mapped_column(String, default="")
    date: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    user: Mapped[str] = mapped_column("recorded_by", String, default="")
Index("idx_inventory_logs_item", InventoryLogORM.item_id)


class InventoryTransferORM(Base):
    __tablename__ = "inventory_transfers"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    type: Mapped[TransferType] = mapped_column(SAEnum(TransferType), nullable=False)
    items_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    source: Mapped[str] = mapped_column(String, nullable=False)
    destination: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[TransferStatus] = mapped_column(
        SAEnum(TransferStatus), default=TransferStatus.IN_TRANSIT, nullable=False
    )
    date: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    notes: Mapped[str] = mapped_column(String, default="")
    rejection_reason: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    reversal_of: Mapped[Optional[str]] = mapped_column(
        String, ForeignKey("inventory_transfers.id"), nullable=True
    )
    approved_by: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    version: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
Index("idx_inventory_transfers_status", InventoryTransferORM.status)
Index("idx_inventory_transfers_reversal_of", InventoryTransferORM.reversal_of)


class RequisitionORM(Base):
    __tablename__ = "requisitions"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    readable_id: Mapped[Optional[str]] = mapped_column(String, nullable=True, unique=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    account: Mapped[str] = mapped_column(String, nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    items_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    status: Mapped[RequisitionStatus] = mapped_column(
        SAEnum(RequisitionStatus), default=RequisitionStatus.DRAFT, nullable=False
    )
    notes: Mapped[str] = mapped_column(String, default="")
    priority: Mapped[Optional[RequisitionPriority]] = mapped_column(
        SAEnum(RequisitionPriority), nullable=True
    )
    queue_snapshot_json: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    rejection_reason: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    version: Mapped[int] = mapped_column(Integer, default=1, nullable=False)


class RequisitionQueueORM(Base):
    __tablename__ = "requisition_queue"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    original_requisition_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    item_json: Mapped[str] = mapped_column(Text, nullable=False)
    date_removed: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False)
Index("idx_requisition_queue_requisition", RequisitionQueueORM.original_requisition_id)


class TransactionCategoryORM(Base):
    __tablename__ = "transaction_categories"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    type: Mapped[BudgetType] = mapped_column(SAEnum(BudgetType), nullable=False)
    subcategories_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")


class BudgetPeriodORM(Base):
    __tablename__ = "budget_periods"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    start_date: Mapped[Optional[dt.date]] = mapped_column(Date, nullable=True)
    end_date: Mapped[Optional[dt.date]] = mapped_column(Date, nullable=True)
    status: Mapped[BudgetPeriodStatus] = mapped_column(
        SAEnum(BudgetPeriodStatus), default=BudgetPeriodStatus.DRAFT, nullable=False
    )
    expense_limits_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    income_limits_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    version: Mapped[int] = mapped_column(Integer, default=1, nullable=False)


class AuditLogORM(Base):
    __tablename__ = "audit_logs"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    occurred_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    actor: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    action: Mapped[str] = mapped_column(String, nullable=False)
    entity_type: Mapped[str] = mapped_column(String, nullable=False)
    entity_id: Mapped[str] = mapped_column(String, nullable=False)
    details_json: Mapped[str] = mapped_column(Text, nullable=False, default="{}")
Index("idx_audit_logs_entity", AuditLogORM.entity_type, AuditLogORM.entity_id)
Index("idx_audit_logs_occurred_at", AuditLogORM.occurred_at)
