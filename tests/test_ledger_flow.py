from __future__ import annotations

from datetime import date

import pytest

from bursar_core.exceptions import (
    NotFoundError,
    PreconditionFailedError,
    ValidationError,
)
from bursar_core.models import AccountType, RiskLevel, TransactionType


def _cash(services, opening: float = 100_000):
    return services["account_service"].add_account("Cash", "Cash", opening_balance=opening)


def test_cash_scenario_through_services(services):
    accounts = services["account_service"]
    ledger = services["ledger_service"]
    cash = _cash(services)

    ledger.add_transaction(TransactionType.INCOME, 50_000, date(2026, 3, 1), "Cash", "Fees")
    assert accounts.get_account_balance(cash.id) == 150_000

    ledger.add_transaction(TransactionType.EXPENSE, 20_000, date(2026, 3, 2), "Cash", "Food")
    assert accounts.get_account_balance(cash.id) == 130_000


def test_soft_delete_and_restore_round_trip_balance(services):
    accounts = services["account_service"]
    ledger = services["ledger_service"]
    cash = _cash(services)
    txn = ledger.add_transaction(TransactionType.EXPENSE, 30_000, date(2026, 3, 1), "Cash", "Repairs")

    ledger.delete_transaction(txn.id, "Entered twice")
    assert accounts.get_account_balance(cash.id) == 100_000
    deleted = ledger.list_deleted_transactions()
    assert [row.id for row in deleted] == [txn.id]
    assert deleted[0].deleted_reason == "Entered twice"
    assert ledger.list_transactions() == []

    ledger.restore_transaction(txn.id)
    assert accounts.get_account_balance(cash.id) == 70_000
    assert ledger.list_deleted_transactions() == []


def test_delete_transaction_requires_reason(services):
    ledger = services["ledger_service"]
    _cash(services)
    txn = ledger.add_transaction(TransactionType.INCOME, 10, date(2026, 3, 1), "Cash", "Fees")

    with pytest.raises(ValidationError) as exc:
        ledger.delete_transaction(txn.id, "   ")
    assert exc.value.code == "DELETE_REASON_REQUIRED"


def test_transaction_requires_known_account_and_positive_amount(services):
    ledger = services["ledger_service"]
    _cash(services)

    with pytest.raises(NotFoundError) as exc:
        ledger.add_transaction(TransactionType.INCOME, 10, date(2026, 3, 1), "Petty", "Fees")
    assert exc.value.code == "ACCOUNT_NOT_FOUND"

    with pytest.raises(ValidationError):
        ledger.add_transaction(TransactionType.INCOME, 0, date(2026, 3, 1), "Cash", "Fees")


def test_update_transaction_edits_in_place(services):
    accounts = services["account_service"]
    ledger = services["ledger_service"]
    cash = _cash(services, opening=0)
    txn = ledger.add_transaction(TransactionType.INCOME, 100, date(2026, 3, 1), "Cash", "Fees")

    updated = ledger.update_transaction(txn.id, amount=250, category="Donations", description="Parent gift")

    assert updated.version == 2
    assert updated.category == "Donations"
    assert accounts.get_account_balance(cash.id) == 250


def test_account_in_use_cannot_be_deleted(services):
    accounts = services["account_service"]
    ledger = services["ledger_service"]
    cash = _cash(services)
    ledger.add_transaction(TransactionType.INCOME, 10, date(2026, 3, 1), "Cash", "Fees")

    with pytest.raises(PreconditionFailedError) as exc:
        accounts.delete_account(cash.id)
    assert exc.value.code == "ACCOUNT_IN_USE"
    assert accounts.get_account_balance(cash.id) == 100_010


def test_unused_account_can_be_deleted(services):
    accounts = services["account_service"]
    bank = accounts.add_account("Stanbic", "Bank Accounts")

    accounts.delete_account(bank.id)

    with pytest.raises(NotFoundError):
        accounts.get_account_balance(bank.id)


def test_account_rename_blocked_once_referenced(services):
    accounts = services["account_service"]
    ledger = services["ledger_service"]
    cash = _cash(services)

    renamed = accounts.update_account(cash.id, name="Petty Cash")
    assert renamed.name == "Petty Cash"

    ledger.add_transaction(TransactionType.INCOME, 10, date(2026, 3, 1), "Petty Cash", "Fees")
    with pytest.raises(PreconditionFailedError) as exc:
        accounts.update_account(cash.id, name="Till")
    assert exc.value.code == "ACCOUNT_RENAME_FORBIDDEN"


def test_account_names_are_unique_and_groups_validated(services):
    accounts = services["account_service"]
    _cash(services)

    with pytest.raises(ValidationError) as exc:
        accounts.add_account("Cash", "Cash")
    assert exc.value.code == "ACCOUNT_NAME_TAKEN"

    with pytest.raises(ValidationError) as exc:
        accounts.add_account("Wallet", "Pocket")
    assert exc.value.code == "ACCOUNT_GROUP_INVALID"


def test_transfer_between_accounts_moves_money_and_deletes_as_pair(services):
    accounts = services["account_service"]
    ledger = services["ledger_service"]
    cash = _cash(services, opening=1_000)
    bank = accounts.add_account("Bank", "Bank Accounts", opening_balance=0)

    outgoing, incoming = ledger.transfer_between_accounts("Cash", "Bank", 400, date(2026, 3, 5))

    assert outgoing.transfer_group_id == incoming.transfer_group_id
    assert accounts.get_account_balance(cash.id) == 600
    assert accounts.get_account_balance(bank.id) == 400

    ledger.delete_transaction(incoming.id, "Wrong amount")
    assert accounts.get_account_balance(cash.id) == 1_000
    assert accounts.get_account_balance(bank.id) == 0
    assert len(ledger.list_deleted_transactions()) == 2


def test_restoring_a_transfer_leg_requires_both_accounts(services):
    accounts = services["account_service"]
    ledger = services["ledger_service"]
    cash = _cash(services, opening=1_000)
    bank = accounts.add_account("Bank", "Bank Accounts", opening_balance=0)
    outgoing, incoming = ledger.transfer_between_accounts("Cash", "Bank", 200, date(2026, 3, 5))

    ledger.delete_transaction(outgoing.id, "Posted to the wrong term")
    accounts.delete_account(bank.id)

    with pytest.raises(NotFoundError) as exc:
        ledger.restore_transaction(outgoing.id)
    assert exc.value.code == "ACCOUNT_NOT_FOUND"
    assert {row.id for row in ledger.list_deleted_transactions()} == {outgoing.id, incoming.id}
    assert accounts.get_account_balance(cash.id) == 1_000


def test_liability_account_balance(services):
    accounts = services["account_service"]
    ledger = services["ledger_service"]
    card = accounts.add_account("Card", "Card", type=AccountType.LIABILITY, opening_balance=100)

    ledger.add_transaction(TransactionType.EXPENSE, 60, date(2026, 3, 1), "Card", "Fuel")

    assert accounts.get_account_balance(card.id) == 160


def test_flagged_transactions_include_high_risk(services):
    ledger = services["ledger_service"]
    _cash(services)
    plain = ledger.add_transaction(TransactionType.EXPENSE, 5, date(2026, 3, 1), "Cash", "Food")
    risky = ledger.add_transaction(
        TransactionType.EXPENSE, 9_000, date(2026, 3, 1), "Cash", "Misc", risk_level=RiskLevel.HIGH
    )
    ledger.flag_transaction(plain.id)

    flagged = {row.id for row in ledger.list_flagged_transactions()}
    assert flagged == {plain.id, risky.id}


def test_list_account_balances_covers_every_account(services):
    accounts = services["account_service"]
    ledger = services["ledger_service"]
    _cash(services, opening=50)
    accounts.add_account("Bank", "Bank Accounts", opening_balance=10)
    ledger.add_transaction(TransactionType.INCOME, 5, date(2026, 3, 1), "Bank", "Fees")

    balances = {row.account_name: row.balance for row in accounts.list_account_balances()}

    assert balances == {"Bank": 15, "Cash": 50}
