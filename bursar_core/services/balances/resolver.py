"""
Pure derivations of "current" values from append-only history.

Nothing here caches; every call folds the full history it is given so the
result can never go stale with respect to the ledger.
"""
from __future__ import annotations

from typing import Iterable

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
from bursar_core.services.balances.models import RequirementAvailability, StudentBalance

TRANSFER_IN_PHRASE = "transfer in"
TRANSFER_OUT_PHRASE = "transfer out"


def resolve_account_balance(account: Account, transactions: Iterable[Transaction]) -> float:
    income = 0.0
    expense = 0.0
    for txn in transactions:
        if txn.soft_deleted or txn.method != account.name:
            continue
        if txn.type == TransactionType.INCOME:
            income += float(txn.amount)
        elif txn.type == TransactionType.EXPENSE:
            expense += float(txn.amount)
    opening = float(account.opening_balance or 0.0)
    if account.type == AccountType.LIABILITY:
        # spending grows the debt, payments shrink it
        return opening + expense - income
    return opening + income - expense


def classify_log_source(comment: str | None) -> LogSource:
    """
    Derive the structured source tag for a log row that was written without one.

    Only the comment phrases decide the tag. An untagged row whose action is
    `transfer_in` or `transfer_out` but whose comment carries neither phrase is
    a direct movement and counts toward neither transfer counter.
    """
    text = (comment or "").lower()
    if TRANSFER_IN_PHRASE in text:
        return LogSource.TRANSFER_IN
    if TRANSFER_OUT_PHRASE in text:
        return LogSource.TRANSFER_OUT
    return LogSource.DIRECT


def counts_as_used(log: InventoryLog) -> bool:
    """Transfer-out rows, plus reductions whose comment does not mention a transfer in."""
    if log.source == LogSource.TRANSFER_OUT:
        return True
    text = (log.comment or "").lower()
    if TRANSFER_OUT_PHRASE in text:
        return True
    return log.action == InventoryAction.REDUCE and TRANSFER_IN_PHRASE not in text


def counts_as_transfer_in(log: InventoryLog) -> bool:
    """Transfer-in rows, plus additions whose comment does not mention a transfer out."""
    if log.source == LogSource.TRANSFER_IN:
        return True
    text = (log.comment or "").lower()
    if TRANSFER_IN_PHRASE in text:
        return True
    return log.action == InventoryAction.ADD and TRANSFER_OUT_PHRASE not in text


def availability_delta(log: InventoryLog) -> float:
    """Signed effect of one log row on derived availability.

    The two counters are independent, so a row whose comment mentions both
    phrases feeds both and nets to zero.
    """
    delta = 0.0
    if counts_as_transfer_in(log):
        delta += float(log.quantity_change)
    if counts_as_used(log):
        delta -= float(log.quantity_change)
    return delta


def resolve_requirement_availability(
    item: InventoryItem,
    logs: Iterable[InventoryLog],
    brought: float = 0.0,
) -> RequirementAvailability:
    transfer_ins = 0.0
    used = 0.0
    for log in logs:
        if log.item_id != item.id:
            continue
        if counts_as_transfer_in(log):
            transfer_ins += float(log.quantity_change)
        if counts_as_used(log):
            used += float(log.quantity_change)
    brought = float(brought or 0.0)
    return RequirementAvailability(
        brought=brought,
        transfer_ins=transfer_ins,
        used=used,
        available=brought + transfer_ins - used,
    )


def resolve_item_stock(
    item: InventoryItem,
    logs: Iterable[InventoryLog],
    *,
    is_requirement: bool,
    brought: float = 0.0,
) -> float:
    if not is_requirement:
        return float(item.quantity or 0.0)
    return resolve_requirement_availability(item, logs, brought).available


def resolve_student_balance(
    student_id: str,
    billings: Iterable[Billing],
    payments: Iterable[Payment],
    opening_arrears: float = 0.0,
) -> StudentBalance:
    billed = sum(
        float(b.amount) for b in billings if b.student_id == student_id and not b.soft_deleted
    )
    paid = sum(
        float(p.amount) for p in payments if p.student_id == student_id and not p.soft_deleted
    )
    billed += float(opening_arrears or 0.0)
    return StudentBalance(
        student_id=student_id,
        billed=billed,
        paid=paid,
        outstanding=billed - paid,
    )


__all__ = [
    "TRANSFER_IN_PHRASE",
    "TRANSFER_OUT_PHRASE",
    "resolve_account_balance",
    "classify_log_source",
    "counts_as_used",
    "counts_as_transfer_in",
    "availability_delta",
    "resolve_requirement_availability",
    "resolve_item_stock",
    "resolve_student_balance",
]
