"""create ledger, inventory, requisition and budget tables

Revision ID: 4b1e6c0d9a52
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


revision = "4b1e6c0d9a52"
down_revision = None
branch_labels = None
depends_on = None


def _version_column() -> sa.Column:
    return sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1"))


def upgrade() -> None:
    op.create_table(
        "accounts",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("account_group", sa.String(), nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("currency", sa.String(length=8), nullable=False, server_default=sa.text("'UGX'")),
        sa.Column("opening_balance", sa.Float(), nullable=False, server_default=sa.text("0")),
        _version_column(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_table(
        "transactions",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("method", sa.String(), nullable=False),
        sa.Column("category", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("recorded_by", sa.String(), nullable=True),
        sa.Column("is_flagged", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("risk_level", sa.String(length=16), nullable=True),
        sa.Column("soft_deleted", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("deleted_reason", sa.String(), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("requisition_id", sa.String(), nullable=True),
        sa.Column("transfer_group_id", sa.String(), nullable=True),
        _version_column(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_transactions_method", "transactions", ["method"], unique=False)
    op.create_index("idx_transactions_requisition", "transactions", ["requisition_id"], unique=False)

    op.create_table(
        "billings",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("student_id", sa.String(), nullable=False),
        sa.Column("kind", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("term", sa.String(), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False, server_default=sa.text("'PENDING'")),
        sa.Column("soft_deleted", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("deleted_reason", sa.String(), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        _version_column(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_billings_student", "billings", ["student_id"], unique=False)
    op.create_table(
        "payments",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("student_id", sa.String(), nullable=False),
        sa.Column("billing_id", sa.String(), sa.ForeignKey("billings.id"), nullable=True),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("method", sa.String(), nullable=False),
        sa.Column("reference", sa.String(), nullable=True),
        sa.Column("term", sa.String(), nullable=True),
        sa.Column("soft_deleted", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("deleted_reason", sa.String(), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        _version_column(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_payments_student", "payments", ["student_id"], unique=False)

    op.create_table(
        "inventory_lists",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_table(
        "inventory_groups",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column(
            "list_id",
            sa.String(),
            sa.ForeignKey("inventory_lists.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "inventory_items",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column(
            "group_id",
            sa.String(),
            sa.ForeignKey("inventory_groups.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("quantity", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("min_stock", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("units", sa.String(), nullable=True),
        sa.Column("last_updated", sa.DateTime(timezone=True), nullable=True),
        _version_column(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_inventory_items_group", "inventory_items", ["group_id"], unique=False)
    op.create_table(
        "inventory_logs",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("item_id", sa.String(), nullable=False),
        sa.Column("item_name", sa.String(), nullable=False),
        sa.Column("action", sa.String(length=16), nullable=False),
        sa.Column("source", sa.String(length=16), nullable=True),
        sa.Column("quantity_change", sa.Float(), nullable=False),
        sa.Column("new_quantity", sa.Float(), nullable=False),
        sa.Column("comment", sa.String(), nullable=True),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("recorded_by", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_inventory_logs_item", "inventory_logs", ["item_id"], unique=False)
    op.create_table(
        "inventory_transfers",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("type", sa.String(length=8), nullable=False),
        sa.Column("items_json", sa.Text(), nullable=False, server_default=sa.text("'[]'")),
        sa.Column("source", sa.String(), nullable=False),
        sa.Column("destination", sa.String(), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("rejection_reason", sa.String(), nullable=True),
        sa.Column("reversal_of", sa.String(), sa.ForeignKey("inventory_transfers.id"), nullable=True),
        sa.Column("approved_by", sa.String(), nullable=True),
        _version_column(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_inventory_transfers_status", "inventory_transfers", ["status"], unique=False)
    op.create_index(
        "idx_inventory_transfers_reversal_of",
        "inventory_transfers",
        ["reversal_of"],
        unique=False,
    )

    op.create_table(
        "requisitions",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("readable_id", sa.String(), nullable=True),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("account", sa.String(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("items_json", sa.Text(), nullable=False, server_default=sa.text("'[]'")),
        sa.Column("status", sa.String(length=32), nullable=False, server_default=sa.text("'DRAFT'")),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("priority", sa.String(length=16), nullable=True),
        sa.Column("queue_snapshot_json", sa.Text(), nullable=True),
        sa.Column("rejection_reason", sa.String(), nullable=True),
        _version_column(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("readable_id"),
    )
    op.create_table(
        "requisition_queue",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("original_requisition_id", sa.String(), nullable=True),
        sa.Column("item_json", sa.Text(), nullable=False),
        sa.Column("date_removed", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_requisition_queue_requisition",
        "requisition_queue",
        ["original_requisition_id"],
        unique=False,
    )

    op.create_table(
        "transaction_categories",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("subcategories_json", sa.Text(), nullable=False, server_default=sa.text("'[]'")),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "budget_periods",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("status", sa.String(length=16), nullable=False, server_default=sa.text("'DRAFT'")),
        sa.Column("expense_limits_json", sa.Text(), nullable=False, server_default=sa.text("'[]'")),
        sa.Column("income_limits_json", sa.Text(), nullable=False, server_default=sa.text("'[]'")),
        _version_column(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("actor", sa.String(), nullable=True),
        sa.Column("action", sa.String(length=64), nullable=False),
        sa.Column("entity_type", sa.String(length=64), nullable=False),
        sa.Column("entity_id", sa.String(), nullable=False),
        sa.Column("details_json", sa.Text(), nullable=False, server_default=sa.text("'{}'")),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_audit_logs_occurred_at", "audit_logs", ["occurred_at"], unique=False)
    op.create_index("idx_audit_logs_entity", "audit_logs", ["entity_type", "entity_id"], unique=False)


def downgrade() -> None:
    op.drop_index("idx_audit_logs_entity", table_name="audit_logs")
    op.drop_index("idx_audit_logs_occurred_at", table_name="audit_logs")
    op.drop_table("audit_logs")
    op.drop_table("budget_periods")
    op.drop_table("transaction_categories")
    op.drop_index("idx_requisition_queue_requisition", table_name="requisition_queue")
    op.drop_table("requisition_queue")
    op.drop_table("requisitions")
    op.drop_index("idx_inventory_transfers_reversal_of", table_name="inventory_transfers")
    op.drop_index("idx_inventory_transfers_status", table_name="inventory_transfers")
    op.drop_table("inventory_transfers")
    op.drop_index("idx_inventory_logs_item", table_name="inventory_logs")
    op.drop_table("inventory_logs")
    op.drop_index("idx_inventory_items_group", table_name="inventory_items")
    op.drop_table("inventory_items")
    op.drop_table("inventory_groups")
    op.drop_table("inventory_lists")
    op.drop_index("idx_payments_student", table_name="payments")
    op.drop_table("payments")
    op.drop_index("idx_billings_student", table_name="billings")
    op.drop_table("billings")
    op.drop_index("idx_transactions_requisition", table_name="transactions")
    op.drop_index("idx_transactions_method", table_name="transactions")
    op.drop_table("transactions")
    op.drop_table("accounts")
