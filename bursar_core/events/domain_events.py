"""Change notifications emitted after a unit of work commits."""
from __future__ import annotations

from bursar_core.events.signal import Signal


class DomainEvents:
    def __init__(self) -> None:
        self.accounts_changed: Signal[str] = Signal()      # account_id
        self.transactions_changed: Signal[str] = Signal()  # account name (method)
        self.inventory_changed: Signal[str] = Signal()     # item_id
        self.transfers_changed: Signal[str] = Signal()     # transfer_id
        self.requisitions_changed: Signal[str] = Signal()  # requisition_id
        self.budgets_changed: Signal[str] = Signal()       # period_id
        self.fees_changed: Signal[str] = Signal()          # student_id


# SINGLE global instance
domain_events = DomainEvents()
