from __future__ import annotations

from datetime import date

import pytest

from bursar_core.exceptions import NotFoundError, PreconditionFailedError, ValidationError
from bursar_core.models import RequisitionItem, RequisitionStatus, TransactionType
from bursar_core.services.requisition.grouping import PRIORITY_GROUP, group_requisition_items


@pytest.fixture
def cash(services):
    return services["account_service"].add_account("Cash", "Cash", opening_balance=1_000_000)


def _items():
    return [
        RequisitionItem.create("Maize flour", "Kitchen/Food", quantity=10, unit_price=3_000),
        RequisitionItem.create("Chalk", "Stationery", quantity=5, unit_price=1_000),
        RequisitionItem.create("Generator fuel", "Utilities", amount=50_000, is_manual=True, is_priority=True),
    ]


def _submitted(services, title="Term 2 supplies"):
    reqs = services["requisition_service"]
    return reqs.add_requisition(title, "Cash", date(2026, 5, 4), items=_items(), status=RequisitionStatus.SUBMITTED)


def test_readable_ids_are_sequential(services, cash):
    reqs = services["requisition_service"]

    first = reqs.add_requisition("One", "Cash", date(2026, 5, 1))
    second = reqs.add_requisition("Two", "Cash", date(2026, 5, 2))
    reqs.delete_requisition(first.id)
    third = reqs.add_requisition("Three", "Cash", date(2026, 5, 3))

    assert first.readable_id == "REQ-001"
    assert second.readable_id == "REQ-002"
    assert third.readable_id == "REQ-003"


def test_line_amounts_follow_quantity_unless_manual(services, cash):
    req = _submitted(services)

    amounts = {item.name: item.amount for item in req.items}
    assert amounts == {"Maize flour": 30_000, "Chalk": 5_000, "Generator fuel": 50_000}
    assert req.total_amount == 85_000


def test_unknown_account_is_rejected_at_creation(services):
    with pytest.raises(NotFoundError) as exc:
        services["requisition_service"].add_requisition("Books", "Nowhere", date(2026, 5, 1))
    assert exc.value.code == "ACCOUNT_NOT_FOUND"


def test_approval_posts_one_expense_per_item(services, cash):
    reqs = services["requisition_service"]
    accounts = services["account_service"]
    ledger = services["ledger_service"]
    req = _submitted(services)

    approved = reqs.approve_requisition(req.id)

    assert approved.status == RequisitionStatus.APPROVED
    rows = ledger.list_transactions("Cash")
    assert len(rows) == 3
    assert {row.type for row in rows} == {TransactionType.EXPENSE}
    assert {row.requisition_id for row in rows} == {"REQ-001"}
    assert {(row.description, row.category, row.amount) for row in rows} == {
        ("Maize flour", "Kitchen/Food", 30_000),
        ("Chalk", "Stationery", 5_000),
        ("Generator fuel", "Utilities", 50_000),
    }
    assert all(row.date == date.today() for row in rows)
    assert accounts.get_account_balance(cash.id) == 1_000_000 - 85_000


def test_second_approval_is_refused(services, cash):
    reqs = services["requisition_service"]
    req = _submitted(services)
    reqs.approve_requisition(req.id)

    with pytest.raises(PreconditionFailedError) as exc:
        reqs.approve_requisition(req.id)
    assert exc.value.code == "REQUISITION_NOT_APPROVABLE"
    assert len(services["ledger_service"].list_transactions("Cash")) == 3


def test_draft_cannot_be_approved(services, cash):
    reqs = services["requisition_service"]
    req = reqs.add_requisition("Draft", "Cash", date(2026, 5, 1), items=_items())

    with pytest.raises(PreconditionFailedError) as exc:
        reqs.approve_requisition(req.id)
    assert exc.value.code == "REQUISITION_NOT_APPROVABLE"


def test_approval_fails_when_account_disappears(services, cash):
    reqs = services["requisition_service"]
    req = reqs.add_requisition("Temp", "Cash", date(2026, 5, 1), status=RequisitionStatus.SUBMITTED)
    services["account_service"].delete_account(cash.id)

    with pytest.raises(NotFoundError) as exc:
        reqs.approve_requisition(req.id)
    assert exc.value.code == "ACCOUNT_NOT_FOUND"
    assert reqs.get_requisition(req.id).status == RequisitionStatus.SUBMITTED


def test_approved_requisition_is_locked(services, cash):
    reqs = services["requisition_service"]
    req = _submitted(services)
    reqs.approve_requisition(req.id)

    with pytest.raises(PreconditionFailedError) as exc:
        reqs.delete_requisition(req.id)
    assert exc.value.code == "REQUISITION_APPROVED_LOCKED"

    with pytest.raises(PreconditionFailedError) as exc:
        reqs.update_requisition(req.id, title="Changed")
    assert exc.value.code == "REQUISITION_LOCKED"


def test_queue_snapshot_is_frozen_at_approval(services, cash):
    reqs = services["requisition_service"]
    req = _submitted(services)
    chalk = next(item for item in req.items if item.name == "Chalk")
    entry = reqs.remove_line_item(req.id, chalk.id)

    approved = reqs.approve_requisition(req.id)
    assert [snap.id for snap in approved.queue_snapshot] == [entry.id]

    reqs.clear_queue()
    assert reqs.list_queue() == []

    stored = reqs.get_requisition(req.id)
    assert len(stored.queue_snapshot) == 1
    assert stored.queue_snapshot[0].item_data.name == "Chalk"
    assert stored.queue_snapshot[0].item_data.amount == 5_000
    assert len(services["ledger_service"].list_transactions("Cash")) == 2


def test_update_moves_dropped_items_to_queue(services, cash):
    reqs = services["requisition_service"]
    req = _submitted(services)
    keep = [item for item in req.items if item.name != "Maize flour"]

    updated = reqs.update_requisition(req.id, items=keep)

    assert {item.name for item in updated.items} == {"Chalk", "Generator fuel"}
    queued = reqs.list_queue(req.id)
    assert [entry.item_data.name for entry in queued] == ["Maize flour"]
    assert queued[0].original_requisition_id == req.id


def test_restore_from_queue_returns_item_with_fresh_id(services, cash):
    reqs = services["requisition_service"]
    req = _submitted(services)
    chalk = next(item for item in req.items if item.name == "Chalk")
    entry = reqs.remove_line_item(req.id, chalk.id)

    restored = reqs.restore_from_queue(entry.id, req.id)

    names = [item.name for item in restored.items]
    assert names.count("Chalk") == 1
    assert next(item for item in restored.items if item.name == "Chalk").id != chalk.id
    assert reqs.list_queue() == []

    with pytest.raises(NotFoundError) as exc:
        reqs.restore_from_queue(entry.id, req.id)
    assert exc.value.code == "QUEUE_ENTRY_NOT_FOUND"


def test_remove_from_queue_discards_entry(services, cash):
    reqs = services["requisition_service"]
    req = _submitted(services)
    entry = reqs.remove_line_item(req.id, req.items[0].id)

    reqs.remove_from_queue(entry.id)

    assert reqs.list_queue(req.id) == []


def test_remove_unknown_line_item(services, cash):
    reqs = services["requisition_service"]
    req = _submitted(services)

    with pytest.raises(NotFoundError) as exc:
        reqs.remove_line_item(req.id, "missing")
    assert exc.value.code == "REQUISITION_ITEM_NOT_FOUND"


def test_status_only_moves_forward_through_open_states(services, cash):
    reqs = services["requisition_service"]
    req = reqs.add_requisition("Forward", "Cash", date(2026, 5, 1))

    moved = reqs.update_requisition(req.id, status=RequisitionStatus.PENDING_APPROVAL)
    assert moved.status == RequisitionStatus.PENDING_APPROVAL

    with pytest.raises(PreconditionFailedError) as exc:
        reqs.update_requisition(req.id, status=RequisitionStatus.DRAFT)
    assert exc.value.code == "REQUISITION_STATUS_BACKWARDS"

    with pytest.raises(PreconditionFailedError) as exc:
        reqs.update_requisition(req.id, status=RequisitionStatus.APPROVED)
    assert exc.value.code == "REQUISITION_STATUS_VIA_WORKFLOW"

    with pytest.raises(ValidationError):
        reqs.add_requisition("Shortcut", "Cash", date(2026, 5, 1), status=RequisitionStatus.APPROVED)


def test_reject_requires_reason_and_posts_nothing(services, cash):
    reqs = services["requisition_service"]
    req = _submitted(services)

    with pytest.raises(ValidationError) as exc:
        reqs.reject_requisition(req.id, "")
    assert exc.value.code == "REQUISITION_REJECTION_REASON_REQUIRED"

    rejected = reqs.reject_requisition(req.id, "Over budget")

    assert rejected.status == RequisitionStatus.REJECTED
    assert reqs.get_requisition(req.id).rejection_reason == "Over budget"
    assert services["ledger_service"].list_transactions("Cash") == []
    with pytest.raises(PreconditionFailedError):
        reqs.approve_requisition(req.id)


def test_rejected_requisition_can_be_deleted(services, cash):
    reqs = services["requisition_service"]
    req = _submitted(services)
    reqs.reject_requisition(req.id, "Duplicate")

    reqs.delete_requisition(req.id)

    assert reqs.list_requisitions() == []


def test_deleting_requisition_clears_its_recycle_bin_entries(services, cash):
    reqs = services["requisition_service"]
    req = _submitted(services)
    chalk = next(item for item in req.items if item.name == "Chalk")
    reqs.remove_line_item(req.id, chalk.id)
    other = _submitted(services, title="Term 3 supplies")
    kept = reqs.remove_line_item(other.id, other.items[0].id)

    reqs.delete_requisition(req.id)

    assert [entry.id for entry in reqs.list_queue()] == [kept.id]
    rows = services["audit_service"].list_recent(entity_id=req.id)
    deleted = next(row for row in rows if row.action == "requisition.delete")
    assert deleted.details["discarded_items"] == ["Chalk"]


def test_grouping_puts_priority_first(services, cash):
    req = _submitted(services)

    groups = services["requisition_service"].group_requisition_items(req.id)

    assert [group.name for group in groups] == [PRIORITY_GROUP, "Kitchen", "Stationery"]
    assert [group.subtotal for group in groups] == [50_000, 30_000, 5_000]


def test_grouping_falls_back_to_uncategorized():
    groups = group_requisition_items([RequisitionItem.create("Mop", "", quantity=1, unit_price=500)])

    assert [(group.name, group.subtotal) for group in groups] == [("Uncategorized", 500)]
