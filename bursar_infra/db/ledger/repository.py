from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from bursar_core.interfaces import AccountRepository, TransactionRepository
from bursar_core.models import Account, Transaction
from bursar_infra.db.ledger.mapper import (
    account_from_orm,
    account_to_orm,
    transaction_from_orm,
    transaction_to_orm,
)
from bursar_infra.db.models import AccountORM, TransactionORM
from bursar_infra.db.optimistic import update_with_version_check


class SqlAlchemyAccountRepository(AccountRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, account: Account) -> None:
        self.session.add(account_to_orm(account))

    def update(self, account: Account) -> None:
        account.version = update_with_version_check(
            self.session,
            AccountORM,
            account.id,
            getattr(account, "version", 1),
            {
                "name": account.name,
                "group": account.group,
                "currency": account.currency,
            },
            not_found_message="Account not found.",
            stale_message="Account was updated by another user.",
        )

    def delete(self, account_id: str) -> None:
        self.session.query(AccountORM).filter_by(id=account_id).delete()

    def get(self, account_id: str) -> Optional[Account]:
        obj = self.session.get(AccountORM, account_id)
        return account_from_orm(obj) if obj else None

    def get_by_name(self, name: str) -> Optional[Account]:
        stmt = select(AccountORM).where(AccountORM.name == name)
        obj = self.session.execute(stmt).scalars().first()
        return account_from_orm(obj) if obj else None

    def list_all(self) -> List[Account]:
        rows = self.session.execute(select(AccountORM).order_by(AccountORM.name)).scalars().all()
        return [account_from_orm(row) for row in rows]


class SqlAlchemyTransactionRepository(TransactionRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, transaction: Transaction) -> None:
        self.session.add(transaction_to_orm(transaction))

    def update(self, transaction: Transaction) -> None:
        transaction.version = update_with_version_check(
            self.session,
            TransactionORM,
            transaction.id,
            getattr(transaction, "version", 1),
            {
                "amount": transaction.amount,
                "date": transaction.date,
                "category": transaction.category,
                "description": transaction.description,
                "is_flagged": transaction.is_flagged,
                "risk_level": transaction.risk_level,
                "soft_deleted": transaction.soft_deleted,
                "deleted_reason": transaction.deleted_reason,
                "deleted_at": transaction.deleted_at,
            },
            not_found_message="Transaction not found.",
            stale_message="Transaction was updated by another user.",
        )

    def get(self, transaction_id: str) -> Optional[Transaction]:
        obj = self.session.get(TransactionORM, transaction_id)
        return transaction_from_orm(obj) if obj else None

    def list_all(self, *, include_deleted: bool = False) -> List[Transaction]:
        stmt = select(TransactionORM)
        if not include_deleted:
            stmt = stmt.where(TransactionORM.soft_deleted.is_(False))
        stmt = stmt.order_by(TransactionORM.date, TransactionORM.id)
        return [transaction_from_orm(row) for row in self.session.execute(stmt).scalars().all()]

    def list_deleted(self) -> List[Transaction]:
        stmt = (
            select(TransactionORM)
            .where(TransactionORM.soft_deleted.is_(True))
            .order_by(TransactionORM.deleted_at.desc())
        )
        return [transaction_from_orm(row) for row in self.session.execute(stmt).scalars().all()]

    def list_by_method(self, method: str, *, include_deleted: bool = False) -> List[Transaction]:
        stmt = select(TransactionORM).where(TransactionORM.method == method)
        if not include_deleted:
            stmt = stmt.where(TransactionORM.soft_deleted.is_(False))
        stmt = stmt.order_by(TransactionORM.date, TransactionORM.id)
        return [transaction_from_orm(row) for row in self.session.execute(stmt).scalars().all()]

    def list_by_requisition(self, requisition_readable_id: str) -> List[Transaction]:
        stmt = select(TransactionORM).where(TransactionORM.requisition_id == requisition_readable_id)
        return [transaction_from_orm(row) for row in self.session.execute(stmt).scalars().all()]


__all__ = ["SqlAlchemyAccountRepository", "SqlAlchemyTransactionRepository"]
