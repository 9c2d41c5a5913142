from __future__ import annotations

import logging
from datetime import date
from typing import List

from sqlalchemy.orm import Session

from bursar_core.events.domain_events import domain_events
from bursar_core.exceptions import NotFoundError, ValidationError
from bursar_core.interfaces import BillingRepository, PaymentRepository
from bursar_core.models import Billing, BillingStatus, Payment
from bursar_core.domain.identifiers import utc_now
from bursar_core.services.audit.helpers import record_audit
from bursar_core.services.balances import StudentBalance, resolve_student_balance
from bursar_core.services.common.guards import require_positive, require_reason

logger = logging.getLogger(__name__)


class FeeLedgerService:
    """Student billings and payments. Removal is always a soft delete so balances can be replayed."""

    def __init__(
        self,
        session: Session,
        billing_repo: BillingRepository,
        payment_repo: PaymentRepository,
        audit_service=None,
    ):
        self._session: Session = session
        self._billing_repo: BillingRepository = billing_repo
        self._payment_repo: PaymentRepository = payment_repo
        self._audit_service = audit_service

    def add_billing(
        self,
        student_id: str,
        kind: str,
        description: str,
        amount: float,
        date: date,
        term: str = "",
    ) -> Billing:
        student_id = self._require_student(student_id)
        billing = Billing.create(
            student_id=student_id,
            kind=(kind or "").strip() or "Fees",
            description=(description or "").strip(),
            amount=require_positive(amount, field_name="Amount"),
            date=date,
            term=(term or "").strip(),
        )
        try:
            self._billing_repo.add(billing)
            record_audit(
                self,
                action="fees.billing.add",
                entity_type="billing",
                entity_id=billing.id,
                details={"student_id": student_id, "amount": billing.amount},
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        domain_events.fees_changed.emit(student_id)
        return billing

    def delete_billing(self, billing_id: str, reason: str) -> Billing:
        billing = self._require_billing(billing_id)
        reason = require_reason(reason, code="DELETE_REASON_REQUIRED")
        if billing.soft_deleted:
            return billing
        billing.soft_deleted = True
        billing.deleted_reason = reason
        billing.deleted_at = utc_now()
        billing.status = BillingStatus.VOID
        self._save_billing(billing, action="fees.billing.delete", details={"reason": reason})
        return billing

    def restore_billing(self, billing_id: str) -> Billing:
        billing = self._require_billing(billing_id)
        if not billing.soft_deleted:
            return billing
        billing.soft_deleted = False
        billing.deleted_reason = None
        billing.deleted_at = None
        billing.status = self._status_for(billing)
        self._save_billing(billing, action="fees.billing.restore")
        return billing

    def add_payment(
        self,
        student_id: str,
        amount: float,
        date: date,
        method: str,
        reference: str = "",
        term: str = "",
        billing_id: str | None = None,
    ) -> Payment:
        student_id = self._require_student(student_id)
        if billing_id is not None:
            billing = self._require_billing(billing_id)
            if billing.student_id != student_id:
                raise ValidationError(
                    "Payment and billing belong to different students.",
                    code="PAYMENT_BILLING_MISMATCH",
                )
        payment = Payment.create(
            student_id=student_id,
            amount=require_positive(amount, field_name="Amount"),
            date=date,
            method=(method or "").strip() or "Cash",
            reference=(reference or "").strip(),
            term=(term or "").strip(),
            billing_id=billing_id,
        )
        try:
            self._payment_repo.add(payment)
            self._session.flush()
            self._refresh_billing_status(payment.billing_id)
            record_audit(
                self,
                action="fees.payment.add",
                entity_type="payment",
                entity_id=payment.id,
                details={"student_id": student_id, "amount": payment.amount},
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        logger.info("Payment of %.2f recorded for student %s", payment.amount, student_id)
        domain_events.fees_changed.emit(student_id)
        return payment

    def delete_payment(self, payment_id: str, reason: str) -> Payment:
        payment = self._require_payment(payment_id)
        reason = require_reason(reason, code="DELETE_REASON_REQUIRED")
        if payment.soft_deleted:
            return payment
        payment.soft_deleted = True
        payment.deleted_reason = reason
        payment.deleted_at = utc_now()
        self._save_payment(payment, action="fees.payment.delete", details={"reason": reason})
        return payment

    def restore_payment(self, payment_id: str) -> Payment:
        payment = self._require_payment(payment_id)
        if not payment.soft_deleted:
            return payment
        payment.soft_deleted = False
        payment.deleted_reason = None
        payment.deleted_at = None
        self._save_payment(payment, action="fees.payment.restore")
        return payment

    def get_student_balance(self, student_id: str, opening_arrears: float = 0.0) -> StudentBalance:
        return resolve_student_balance(
            student_id,
            self._billing_repo.list_by_student(student_id),
            self._payment_repo.list_by_student(student_id),
            opening_arrears=opening_arrears,
        )

    def list_billings(self, student_id: str, *, include_deleted: bool = False) -> List[Billing]:
        return self._billing_repo.list_by_student(student_id, include_deleted=include_deleted)

    def list_payments(self, student_id: str, *, include_deleted: bool = False) -> List[Payment]:
        return self._payment_repo.list_by_student(student_id, include_deleted=include_deleted)

    def list_deleted_billings(self) -> List[Billing]:
        return self._billing_repo.list_deleted()

    def list_deleted_payments(self) -> List[Payment]:
        return self._payment_repo.list_deleted()

    def _save_billing(self, billing: Billing, *, action: str, details: dict | None = None) -> None:
        try:
            self._billing_repo.update(billing)
            record_audit(self, action=action, entity_type="billing", entity_id=billing.id, details=details)
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e
        domain_events.fees_changed.emit(billing.student_id)

    def _save_payment(self, payment: Payment, *, action: str, details: dict | None = None) -> None:
        try:
            self._payment_repo.update(payment)
            self._refresh_billing_status(payment.billing_id)
            record_audit(self, action=action, entity_type="payment", entity_id=payment.id, details=details)
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e
        domain_events.fees_changed.emit(payment.student_id)

    def _refresh_billing_status(self, billing_id: str | None) -> None:
        if billing_id is None:
            return
        billing = self._require_billing(billing_id)
        if billing.soft_deleted:
            return
        status = self._status_for(billing)
        if status != billing.status:
            billing.status = status
            self._billing_repo.update(billing)

    def _status_for(self, billing: Billing) -> BillingStatus:
        paid = sum(
            payment.amount
            for payment in self._payment_repo.list_by_student(billing.student_id)
            if payment.billing_id == billing.id
        )
        if paid <= 0:
            return BillingStatus.PENDING
        if paid < billing.amount:
            return BillingStatus.PARTIALLY_PAID
        return BillingStatus.PAID

    def _require_billing(self, billing_id: str) -> Billing:
        billing = self._billing_repo.get(billing_id)
        if billing is None:
            raise NotFoundError("Billing not found.", code="BILLING_NOT_FOUND")
        return billing

    def _require_payment(self, payment_id: str) -> Payment:
        payment = self._payment_repo.get(payment_id)
        if payment is None:
            raise NotFoundError("Payment not found.", code="PAYMENT_NOT_FOUND")
        return payment

    @staticmethod
    def _require_student(student_id: str) -> str:
        student_id = (student_id or "").strip()
        if not student_id:
            raise ValidationError("Student is required.", code="STUDENT_REQUIRED")
        return student_id


__all__ = ["FeeLedgerService"]
