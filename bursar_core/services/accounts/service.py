from __future__ import annotations

import logging
from typing import List

from sqlalchemy.orm import Session

from bursar_core.events.domain_events import domain_events
from bursar_core.exceptions import (
    NotFoundError,
    PreconditionFailedError,
    ValidationError,
)
from bursar_core.interfaces import AccountRepository, TransactionRepository
from bursar_core.models import Account, AccountType
from bursar_core.services.audit.helpers import record_audit
from bursar_core.services.balances import AccountBalance, resolve_account_balance
from bursar_core.services.common.guards import ensure_expected_version

logger = logging.getLogger(__name__)

ACCOUNT_GROUPS = ("Cash", "Accounts", "Bank Accounts", "Card")


class AccountService:
    def __init__(
        self,
        session: Session,
        account_repo: AccountRepository,
        transaction_repo: TransactionRepository,
        audit_service=None,
    ):
        self._session: Session = session
        self._account_repo: AccountRepository = account_repo
        self._transaction_repo: TransactionRepository = transaction_repo
        self._audit_service = audit_service

    def add_account(
        self,
        name: str,
        group: str,
        type: AccountType = AccountType.ASSET,
        currency: str = "UGX",
        opening_balance: float = 0.0,
    ) -> Account:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Account name is required.", code="ACCOUNT_NAME_REQUIRED")
        self._validate_group(group)
        if self._account_repo.get_by_name(name) is not None:
            raise ValidationError(
                f"An account named '{name}' already exists.",
                code="ACCOUNT_NAME_TAKEN",
            )
        if not isinstance(type, AccountType):
            type = AccountType(str(type))

        account = Account.create(
            name=name,
            group=group,
            type=type,
            currency=(currency or "").strip().upper() or "UGX",
            opening_balance=float(opening_balance or 0.0),
        )
        try:
            self._account_repo.add(account)
            record_audit(
                self,
                action="account.add",
                entity_type="account",
                entity_id=account.id,
                details={"name": account.name, "opening_balance": account.opening_balance},
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        logger.info("Account %s created in %s", account.name, account.group)
        domain_events.accounts_changed.emit(account.id)
        return account

    def update_account(
        self,
        account_id: str,
        *,
        name: str | None = None,
        group: str | None = None,
        currency: str | None = None,
        expected_version: int | None = None,
    ) -> Account:
        """Opening balance is fixed at creation; only labels can change."""
        account = self._require_account(account_id)
        ensure_expected_version(account, expected_version, label="Account")

        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("Account name is required.", code="ACCOUNT_NAME_REQUIRED")
            if name != account.name:
                if self._account_repo.get_by_name(name) is not None:
                    raise ValidationError(
                        f"An account named '{name}' already exists.",
                        code="ACCOUNT_NAME_TAKEN",
                    )
                if self._transaction_repo.list_by_method(account.name, include_deleted=True):
                    raise PreconditionFailedError(
                        "Account has ledger entries and cannot be renamed.",
                        code="ACCOUNT_RENAME_FORBIDDEN",
                    )
                account.name = name
        if group is not None:
            self._validate_group(group)
            account.group = group
        if currency is not None:
            account.currency = currency.strip().upper() or account.currency

        try:
            self._account_repo.update(account)
            record_audit(
                self,
                action="account.update",
                entity_type="account",
                entity_id=account.id,
                details={"name": account.name, "group": account.group},
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        domain_events.accounts_changed.emit(account.id)
        return account

    def delete_account(self, account_id: str) -> None:
        account = self._require_account(account_id)
        if self._transaction_repo.list_by_method(account.name):
            logger.warning("Refused to delete account %s: still referenced", account.name)
            raise PreconditionFailedError(
                "Account is referenced by transactions and cannot be deleted.",
                code="ACCOUNT_IN_USE",
            )
        try:
            self._account_repo.delete(account.id)
            record_audit(
                self,
                action="account.delete",
                entity_type="account",
                entity_id=account.id,
                details={"name": account.name},
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        domain_events.accounts_changed.emit(account.id)

    def get_account_balance(self, account_id: str) -> float:
        account = self._require_account(account_id)
        return resolve_account_balance(account, self._transaction_repo.list_by_method(account.name))

    def list_account_balances(self) -> List[AccountBalance]:
        transactions = self._transaction_repo.list_all()
        return [
            AccountBalance(
                account_id=account.id,
                account_name=account.name,
                group=account.group,
                currency=account.currency,
                opening_balance=account.opening_balance,
                balance=resolve_account_balance(account, transactions),
            )
            for account in self._account_repo.list_all()
        ]

    def list_accounts(self) -> List[Account]:
        return self._account_repo.list_all()

    def _require_account(self, account_id: str) -> Account:
        account = self._account_repo.get(account_id)
        if account is None:
            raise NotFoundError("Account not found.", code="ACCOUNT_NOT_FOUND")
        return account

    @staticmethod
    def _validate_group(group: str) -> None:
        if group not in ACCOUNT_GROUPS:
            raise ValidationError(
                f"Account group must be one of: {', '.join(ACCOUNT_GROUPS)}.",
                code="ACCOUNT_GROUP_INVALID",
            )


__all__ = ["AccountService", "ACCOUNT_GROUPS"]
