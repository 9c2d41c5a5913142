from __future__ import annotations

from datetime import date

import pytest

from bursar_core.exceptions import ValidationError
from bursar_core.models import BillingStatus


def test_balance_follows_billings_and_payments(services):
    fees = services["fee_service"]
    fees.add_billing("STU-1", "Tuition", "Term 1 tuition", 600_000, date(2026, 2, 1), term="T1")
    fees.add_billing("STU-1", "Uniform", "Sweater", 40_000, date(2026, 2, 1), term="T1")
    fees.add_payment("STU-1", 250_000, date(2026, 2, 10), "Cash")

    balance = fees.get_student_balance("STU-1")

    assert balance.billed == 640_000
    assert balance.paid == 250_000
    assert balance.outstanding == 390_000


def test_opening_arrears_add_to_billed(services):
    fees = services["fee_service"]
    fees.add_billing("STU-2", "Tuition", "Term 1", 100, date(2026, 2, 1))

    balance = fees.get_student_balance("STU-2", opening_arrears=30)

    assert balance.billed == 130
    assert balance.outstanding == 130


def test_billing_status_tracks_linked_payments(services):
    fees = services["fee_service"]
    bill = fees.add_billing("STU-1", "Tuition", "Term 1", 500, date(2026, 2, 1))

    first = fees.add_payment("STU-1", 200, date(2026, 2, 2), "Cash", billing_id=bill.id)
    assert fees.list_billings("STU-1")[0].status == BillingStatus.PARTIALLY_PAID

    fees.add_payment("STU-1", 300, date(2026, 2, 3), "Bank", billing_id=bill.id)
    assert fees.list_billings("STU-1")[0].status == BillingStatus.PAID

    fees.delete_payment(first.id, "Cheque bounced")
    assert fees.list_billings("STU-1")[0].status == BillingStatus.PARTIALLY_PAID
    assert fees.get_student_balance("STU-1").outstanding == 200

    fees.restore_payment(first.id)
    assert fees.list_billings("STU-1")[0].status == BillingStatus.PAID


def test_deleted_billing_is_void_and_restorable(services):
    fees = services["fee_service"]
    bill = fees.add_billing("STU-3", "Trip", "Museum trip", 80, date(2026, 3, 1))

    voided = fees.delete_billing(bill.id, "Trip cancelled")

    assert voided.status == BillingStatus.VOID
    assert fees.get_student_balance("STU-3").outstanding == 0
    assert fees.list_billings("STU-3") == []
    assert [row.deleted_reason for row in fees.list_deleted_billings()] == ["Trip cancelled"]

    restored = fees.restore_billing(bill.id)
    assert restored.status == BillingStatus.PENDING
    assert fees.get_student_balance("STU-3").outstanding == 80


def test_payment_must_match_billing_student(services):
    fees = services["fee_service"]
    bill = fees.add_billing("STU-1", "Tuition", "Term 1", 500, date(2026, 2, 1))

    with pytest.raises(ValidationError) as exc:
        fees.add_payment("STU-9", 100, date(2026, 2, 2), "Cash", billing_id=bill.id)
    assert exc.value.code == "PAYMENT_BILLING_MISMATCH"
    assert fees.list_payments("STU-9") == []


def test_removal_requires_reason(services):
    fees = services["fee_service"]
    payment = fees.add_payment("STU-1", 100, date(2026, 2, 2), "Cash")

    with pytest.raises(ValidationError) as exc:
        fees.delete_payment(payment.id, "")
    assert exc.value.code == "DELETE_REASON_REQUIRED"
    assert fees.list_deleted_payments() == []


def test_amounts_must_be_positive(services):
    with pytest.raises(ValidationError) as exc:
        services["fee_service"].add_billing("STU-1", "Tuition", "Term 1", 0, date(2026, 2, 1))
    assert exc.value.code == "AMOUNT_NOT_POSITIVE"
