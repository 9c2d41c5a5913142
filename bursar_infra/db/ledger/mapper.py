from __future__ import annotations

from bursar_core.models import Account, Transaction
from bursar_infra.db.models import AccountORM, TransactionORM


def account_to_orm(account: Account) -> AccountORM:
    return AccountORM(
        id=account.id,
        name=account.name,
        group=account.group,
        type=account.type,
        currency=account.currency,
        opening_balance=account.opening_balance,
        version=getattr(account, "version", 1),
    )


def account_from_orm(obj: AccountORM) -> Account:
    return Account(
        id=obj.id,
        name=obj.name,
        group=obj.group,
        type=obj.type,
        currency=obj.currency,
        opening_balance=obj.opening_balance,
        version=getattr(obj, "version", 1),
    )


def transaction_to_orm(txn: Transaction) -> TransactionORM:
    return TransactionORM(
        id=txn.id,
        type=txn.type,
        amount=txn.amount,
        date=txn.date,
        method=txn.method,
        category=txn.category,
        description=txn.description,
        recorded_by=txn.recorded_by,
        is_flagged=txn.is_flagged,
        risk_level=txn.risk_level,
        soft_deleted=txn.soft_deleted,
        deleted_reason=txn.deleted_reason,
        deleted_at=txn.deleted_at,
        requisition_id=txn.requisition_id,
        transfer_group_id=txn.transfer_group_id,
        version=getattr(txn, "version", 1),
    )


def transaction_from_orm(obj: TransactionORM) -> Transaction:
    return Transaction(
        id=obj.id,
        type=obj.type,
        amount=obj.amount,
        date=obj.date,
        method=obj.method,
        category=obj.category,
        description=obj.description or "",
        recorded_by=obj.recorded_by or "",
        is_flagged=bool(obj.is_flagged),
        risk_level=obj.risk_level,
        soft_deleted=bool(obj.soft_deleted),
        deleted_reason=obj.deleted_reason,
        deleted_at=obj.deleted_at,
        requisition_id=obj.requisition_id,
        transfer_group_id=obj.transfer_group_id,
        version=getattr(obj, "version", 1),
    )


__all__ = [
    "account_to_orm",
    "account_from_orm",
    "transaction_to_orm",
    "transaction_from_orm",
]
