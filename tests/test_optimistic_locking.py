from __future__ import annotations

from datetime import date

import pytest

from bursar_core.exceptions import ConflictError, NotFoundError
from bursar_core.models import RequisitionStatus, TransactionType
from bursar_infra.db.models import AccountORM
from bursar_infra.db.optimistic import update_with_version_check


def test_transaction_edit_with_stale_version_is_refused(services):
    services["account_service"].add_account("Cash", "Cash")
    ledger = services["ledger_service"]
    txn = ledger.add_transaction(TransactionType.EXPENSE, 10, date(2026, 1, 1), "Cash", "Food")

    ledger.update_transaction(txn.id, amount=12, expected_version=1)

    with pytest.raises(ConflictError) as exc:
        ledger.delete_transaction(txn.id, "Wrong", expected_version=1)
    assert exc.value.code == "STALE_WRITE"
    assert ledger.list_deleted_transactions() == []


def test_requisition_edit_with_stale_version_is_refused(services):
    services["account_service"].add_account("Cash", "Cash")
    reqs = services["requisition_service"]
    req = reqs.add_requisition("Books", "Cash", date(2026, 1, 1))
    reqs.update_requisition(req.id, status=RequisitionStatus.SUBMITTED, expected_version=1)

    with pytest.raises(ConflictError):
        reqs.update_requisition(req.id, title="Renamed", expected_version=1)
    assert reqs.get_requisition(req.id).title == "Books"


def test_inventory_item_edit_with_stale_version_is_refused(services, store_group):
    inv = services["inventory_service"]
    item = inv.add_inventory_item("Soap", store_group.id, quantity=3)
    inv.add_inventory_log(item.id, "add", 2)

    with pytest.raises(ConflictError):
        inv.update_inventory_item(item.id, min_stock=1, expected_version=1)


def test_version_check_at_repository_level(services):
    session = services["session"]
    account = services["account_service"].add_account("Cash", "Cash")

    assert update_with_version_check(
        session,
        AccountORM,
        account.id,
        1,
        {"currency": "KES"},
        not_found_message="gone",
        stale_message="stale",
    ) == 2
    session.commit()

    with pytest.raises(ConflictError):
        update_with_version_check(
            session, AccountORM, account.id, 1, {"currency": "USD"},
            not_found_message="gone", stale_message="stale",
        )
    with pytest.raises(NotFoundError):
        update_with_version_check(
            session, AccountORM, "missing", 1, {"currency": "USD"},
            not_found_message="gone", stale_message="stale",
        )
