from __future__ import annotations

import logging
from datetime import date
from typing import List

from sqlalchemy.orm import Session

from bursar_core.events.domain_events import domain_events
from bursar_core.exceptions import NotFoundError, ValidationError
from bursar_core.interfaces import AccountRepository, TransactionRepository
from bursar_core.models import RiskLevel, Transaction, TransactionType
from bursar_core.domain.identifiers import generate_id, utc_now
from bursar_core.services.audit.helpers import actor_of, record_audit
from bursar_core.services.common.guards import (
    ensure_expected_version,
    require_positive,
    require_reason,
)

logger = logging.getLogger(__name__)

TRANSFER_CATEGORY = "Account Transfer"


class LedgerService:
    def __init__(
        self,
        session: Session,
        transaction_repo: TransactionRepository,
        account_repo: AccountRepository,
        audit_service=None,
    ):
        self._session: Session = session
        self._transaction_repo: TransactionRepository = transaction_repo
        self._account_repo: AccountRepository = account_repo
        self._audit_service = audit_service

    def add_transaction(
        self,
        type: TransactionType,
        amount: float,
        date: date,
        method: str,
        category: str,
        description: str = "",
        risk_level: RiskLevel | None = None,
        is_flagged: bool = False,
    ) -> Transaction:
        if not isinstance(type, TransactionType):
            type = TransactionType(str(type))
        amount = require_positive(amount, field_name="Amount")
        self._require_account(method)
        category = (category or "").strip()
        if not category:
            raise ValidationError("Category is required.", code="CATEGORY_REQUIRED")

        txn = Transaction.create(
            type=type,
            amount=amount,
            date=date,
            method=method,
            category=category,
            description=(description or "").strip(),
            recorded_by=actor_of(self),
            risk_level=RiskLevel(risk_level) if risk_level else None,
            is_flagged=bool(is_flagged),
        )
        try:
            self._transaction_repo.add(txn)
            record_audit(
                self,
                action="transaction.add",
                entity_type="transaction",
                entity_id=txn.id,
                details={"type": txn.type.value, "amount": txn.amount, "method": txn.method},
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        logger.info("Recorded %s of %.2f through %s", txn.type.value, txn.amount, txn.method)
        domain_events.transactions_changed.emit(txn.method)
        return txn

    def update_transaction(
        self,
        transaction_id: str,
        *,
        amount: float | None = None,
        category: str | None = None,
        date: date | None = None,
        description: str | None = None,
        expected_version: int | None = None,
    ) -> Transaction:
        txn = self._require_transaction(transaction_id)
        ensure_expected_version(txn, expected_version, label="Transaction")
        if txn.soft_deleted:
            raise ValidationError(
                "Restore the transaction before editing it.",
                code="TRANSACTION_DELETED",
            )
        if amount is not None:
            txn.amount = require_positive(amount, field_name="Amount")
        if category is not None:
            category = category.strip()
            if not category:
                raise ValidationError("Category is required.", code="CATEGORY_REQUIRED")
            txn.category = category
        if date is not None:
            txn.date = date
        if description is not None:
            txn.description = description.strip()

        try:
            self._transaction_repo.update(txn)
            record_audit(
                self,
                action="transaction.update",
                entity_type="transaction",
                entity_id=txn.id,
                details={"amount": txn.amount, "category": txn.category},
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        domain_events.transactions_changed.emit(txn.method)
        return txn

    def delete_transaction(
        self,
        transaction_id: str,
        reason: str,
        expected_version: int | None = None,
    ) -> Transaction:
        """Soft delete. Account transfers are deleted as a pair so both legs stay consistent."""
        txn = self._require_transaction(transaction_id)
        ensure_expected_version(txn, expected_version, label="Transaction")
        reason = require_reason(reason, code="DELETE_REASON_REQUIRED")
        if txn.soft_deleted:
            return txn

        affected = self._with_transfer_legs(txn)
        now = utc_now()
        try:
            for row in affected:
                row.soft_deleted = True
                row.deleted_reason = reason
                row.deleted_at = now
                self._transaction_repo.update(row)
                record_audit(
                    self,
                    action="transaction.delete",
                    entity_type="transaction",
                    entity_id=row.id,
                    details={"reason": reason, "amount": row.amount},
                )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        logger.info("Moved transaction %s to deleted (%s)", txn.id, reason)
        for method in {row.method for row in affected}:
            domain_events.transactions_changed.emit(method)
        return txn

    def restore_transaction(self, transaction_id: str) -> Transaction:
        txn = self._require_transaction(transaction_id)
        if not txn.soft_deleted:
            return txn
        affected = self._with_transfer_legs(txn)
        for row in affected:
            self._require_account(row.method)
        try:
            for row in affected:
                row.soft_deleted = False
                row.deleted_reason = None
                row.deleted_at = None
                self._transaction_repo.update(row)
                record_audit(
                    self,
                    action="transaction.restore",
                    entity_type="transaction",
                    entity_id=row.id,
                )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        for method in {row.method for row in affected}:
            domain_events.transactions_changed.emit(method)
        return txn

    def flag_transaction(
        self,
        transaction_id: str,
        *,
        is_flagged: bool = True,
        risk_level: RiskLevel | None = None,
    ) -> Transaction:
        txn = self._require_transaction(transaction_id)
        txn.is_flagged = bool(is_flagged)
        txn.risk_level = RiskLevel(risk_level) if risk_level else None
        try:
            self._transaction_repo.update(txn)
            record_audit(
                self,
                action="transaction.flag",
                entity_type="transaction",
                entity_id=txn.id,
                details={
                    "is_flagged": txn.is_flagged,
                    "risk_level": txn.risk_level.value if txn.risk_level else None,
                },
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        if txn.is_flagged:
            logger.warning("Transaction %s flagged for review", txn.id)
        domain_events.transactions_changed.emit(txn.method)
        return txn

    def transfer_between_accounts(
        self,
        from_account: str,
        to_account: str,
        amount: float,
        date: date,
        description: str = "",
    ) -> tuple[Transaction, Transaction]:
        """Move money as an Expense leg on the source and an Income leg on the destination."""
        if from_account == to_account:
            raise ValidationError(
                "Source and destination accounts must differ.",
                code="TRANSFER_SAME_ACCOUNT",
            )
        amount = require_positive(amount, field_name="Amount")
        self._require_account(from_account)
        self._require_account(to_account)

        group_id = generate_id()
        note = (description or "").strip() or f"Transfer from {from_account} to {to_account}"
        outgoing = Transaction.create(
            type=TransactionType.EXPENSE,
            amount=amount,
            date=date,
            method=from_account,
            category=TRANSFER_CATEGORY,
            description=note,
            recorded_by=actor_of(self),
            transfer_group_id=group_id,
        )
        incoming = Transaction.create(
            type=TransactionType.INCOME,
            amount=amount,
            date=date,
            method=to_account,
            category=TRANSFER_CATEGORY,
            description=note,
            recorded_by=actor_of(self),
            transfer_group_id=group_id,
        )
        try:
            self._transaction_repo.add(outgoing)
            self._transaction_repo.add(incoming)
            record_audit(
                self,
                action="transaction.transfer",
                entity_type="transaction",
                entity_id=group_id,
                details={"from": from_account, "to": to_account, "amount": amount},
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        logger.info("Transferred %.2f from %s to %s", amount, from_account, to_account)
        domain_events.transactions_changed.emit(from_account)
        domain_events.transactions_changed.emit(to_account)
        return outgoing, incoming

    def list_transactions(self, method: str | None = None) -> List[Transaction]:
        if method is not None:
            return self._transaction_repo.list_by_method(method)
        return self._transaction_repo.list_all()

    def list_deleted_transactions(self) -> List[Transaction]:
        return self._transaction_repo.list_deleted()

    def list_flagged_transactions(self) -> List[Transaction]:
        return [
            txn
            for txn in self._transaction_repo.list_all()
            if txn.is_flagged or txn.risk_level == RiskLevel.HIGH
        ]

    def _require_transaction(self, transaction_id: str) -> Transaction:
        txn = self._transaction_repo.get(transaction_id)
        if txn is None:
            raise NotFoundError("Transaction not found.", code="TRANSACTION_NOT_FOUND")
        return txn

    def _require_account(self, name: str) -> None:
        if not name or self._account_repo.get_by_name(name) is None:
            raise NotFoundError(f"Account '{name}' not found.", code="ACCOUNT_NOT_FOUND")

    def _with_transfer_legs(self, txn: Transaction) -> List[Transaction]:
        if not txn.transfer_group_id:
            return [txn]
        legs = [
            row
            for row in self._transaction_repo.list_all(include_deleted=True)
            if row.transfer_group_id == txn.transfer_group_id and row.id != txn.id
        ]
        return [txn, *legs]


__all__ = ["LedgerService", "TRANSFER_CATEGORY"]
