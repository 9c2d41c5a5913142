from __future__ import annotations

from datetime import date
from itertools import permutations

from bursar_core.models import (
    Account,
    AccountType,
    Billing,
    InventoryAction,
    InventoryItem,
    InventoryLog,
    LogSource,
    Payment,
    Transaction,
    TransactionType,
)
from bursar_core.services.balances import (
    availability_delta,
    classify_log_source,
    resolve_account_balance,
    resolve_item_stock,
    resolve_requirement_availability,
    resolve_student_balance,
)


def _txn(kind: TransactionType, amount: float, method: str = "Cash", **extra) -> Transaction:
    return Transaction.create(
        type=kind,
        amount=amount,
        date=date(2026, 1, 10),
        method=method,
        category="General",
        **extra,
    )


def _log(item: InventoryItem, action: InventoryAction, change: float, comment: str, source=None) -> InventoryLog:
    return InventoryLog.create(
        item_id=item.id,
        item_name=item.name,
        action=action,
        source=source or classify_log_source(comment),
        quantity_change=change,
        new_quantity=0.0,
        comment=comment,
    )


def test_cash_example_balance():
    cash = Account.create("Cash", "Cash", opening_balance=100_000)
    history = [_txn(TransactionType.INCOME, 50_000)]
    assert resolve_account_balance(cash, history) == 150_000

    history.append(_txn(TransactionType.EXPENSE, 20_000))
    assert resolve_account_balance(cash, history) == 130_000


def test_balance_is_independent_of_row_order():
    cash = Account.create("Cash", "Cash", opening_balance=1_000)
    rows = [
        _txn(TransactionType.INCOME, 300),
        _txn(TransactionType.EXPENSE, 125),
        _txn(TransactionType.INCOME, 40),
        _txn(TransactionType.EXPENSE, 15),
    ]
    results = {resolve_account_balance(cash, list(order)) for order in permutations(rows)}
    assert results == {1_200}


def test_balance_ignores_soft_deleted_and_foreign_rows():
    cash = Account.create("Cash", "Cash", opening_balance=500)
    rows = [
        _txn(TransactionType.INCOME, 100, soft_deleted=True),
        _txn(TransactionType.INCOME, 70, method="Bank"),
    ]
    assert resolve_account_balance(cash, rows) == 500
    assert resolve_account_balance(cash, []) == 500


def test_liability_balance_grows_with_spending():
    card = Account.create("School Card", "Card", type=AccountType.LIABILITY, opening_balance=200)
    rows = [
        _txn(TransactionType.EXPENSE, 80, method="School Card"),
        _txn(TransactionType.INCOME, 30, method="School Card"),
    ]
    assert resolve_account_balance(card, rows) == 250


def test_classify_log_source_reads_only_the_comment():
    assert classify_log_source("Transfer IN from Dorm B") == LogSource.TRANSFER_IN
    assert classify_log_source("transfer out to Dorm C") == LogSource.TRANSFER_OUT
    assert classify_log_source("") == LogSource.DIRECT
    assert classify_log_source(None) == LogSource.DIRECT
    assert classify_log_source("Stock reduced") == LogSource.DIRECT
    assert classify_log_source("Received from Dorm B") == LogSource.DIRECT


def test_transfer_action_without_phrase_counts_toward_neither_counter():
    item = InventoryItem.create("Mattress", "g-1")
    logs = [
        _log(item, InventoryAction.TRANSFER_IN, 4, "Received from Dorm B"),
        _log(item, InventoryAction.TRANSFER_OUT, 2, "Sent to Dorm C"),
    ]
    result = resolve_requirement_availability(item, logs, brought=10)

    assert result.transfer_ins == 0
    assert result.used == 0
    assert result.available == 10


def test_comment_with_both_phrases_feeds_both_counters():
    item = InventoryItem.create("Mattress", "g-1")
    logs = [_log(item, InventoryAction.ADD, 4, "transfer in after transfer out was cancelled")]
    result = resolve_requirement_availability(item, logs, brought=10)

    assert result.transfer_ins == 4
    assert result.used == 4
    assert result.available == 10
    assert availability_delta(logs[0]) == 0


def test_reduction_mentioning_transfer_in_is_not_used():
    item = InventoryItem.create("Mattress", "g-1")
    logs = [_log(item, InventoryAction.REDUCE, 3, "Correction after transfer in")]
    result = resolve_requirement_availability(item, logs, brought=10)

    assert result.transfer_ins == 3
    assert result.used == 0
    assert result.available == 13


def test_requirement_availability_counts_used_and_transfer_ins():
    item = InventoryItem.create("Mattress", "g-1")
    logs = [
        _log(item, InventoryAction.ADD, 5, "transfer in from Dorm B"),
        _log(item, InventoryAction.REDUCE, 3, "Transfer OUT to Dorm C"),
        _log(item, InventoryAction.REDUCE, 1, "Stock reduced"),
        _log(item, InventoryAction.SET, 40, "Stock level set"),
    ]
    result = resolve_requirement_availability(item, logs, brought=10)

    assert result.brought == 10
    assert result.transfer_ins == 5
    assert result.used == 4
    assert result.available == 11


def test_compensating_row_cancels_used():
    item = InventoryItem.create("Mattress", "g-1")
    logs = [
        _log(item, InventoryAction.REDUCE, 3, "Transfer OUT to Dorm C"),
        _log(item, InventoryAction.REDUCE, -3, "Reversal: Rejected Transfer OUT to Dorm C"),
    ]
    result = resolve_requirement_availability(item, logs, brought=10)
    assert result.used == 0
    assert result.available == 10


def test_item_stock_uses_baseline_for_ordinary_items():
    item = InventoryItem.create("Rice", "g-1", quantity=42)
    logs = [_log(item, InventoryAction.REDUCE, 5, "Stock reduced")]

    assert resolve_item_stock(item, logs, is_requirement=False) == 42
    assert resolve_item_stock(item, logs, is_requirement=True, brought=8) == 3


def test_student_balance_excludes_soft_deleted_rows():
    billings = [
        Billing.create("stu-1", "Tuition", "Term 1", 900_000, date(2026, 2, 1)),
        Billing.create("stu-1", "Uniform", "Sweater", 50_000, date(2026, 2, 1)),
        Billing.create("stu-2", "Tuition", "Term 1", 900_000, date(2026, 2, 1)),
    ]
    billings[1].soft_deleted = True
    payments = [
        Payment.create("stu-1", 400_000, date(2026, 2, 3), "Bank"),
        Payment.create("stu-1", 100_000, date(2026, 2, 4), "Cash"),
    ]
    payments[1].soft_deleted = True

    balance = resolve_student_balance("stu-1", billings, payments, opening_arrears=20_000)

    assert balance.billed == 920_000
    assert balance.paid == 400_000
    assert balance.outstanding == 520_000
