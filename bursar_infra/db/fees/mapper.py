from __future__ import annotations

from bursar_core.models import Billing, Payment
from bursar_infra.db.models import BillingORM, PaymentORM


def billing_to_orm(billing: Billing) -> BillingORM:
    return BillingORM(
        id=billing.id,
        student_id=billing.student_id,
        kind=billing.kind,
        description=billing.description,
        amount=billing.amount,
        date=billing.date,
        term=billing.term,
        status=billing.status,
        soft_deleted=billing.soft_deleted,
        deleted_reason=billing.deleted_reason,
        deleted_at=billing.deleted_at,
        version=getattr(billing, "version", 1),
    )


def billing_from_orm(obj: BillingORM) -> Billing:
    return Billing(
        id=obj.id,
        student_id=obj.student_id,
        kind=obj.kind,
        description=obj.description or "",
        amount=obj.amount,
        date=obj.date,
        term=obj.term or "",
        status=obj.status,
        soft_deleted=bool(obj.soft_deleted),
        deleted_reason=obj.deleted_reason,
        deleted_at=obj.deleted_at,
        version=getattr(obj, "version", 1),
    )


def payment_to_orm(payment: Payment) -> PaymentORM:
    return PaymentORM(
        id=payment.id,
        student_id=payment.student_id,
        billing_id=payment.billing_id,
        amount=payment.amount,
        date=payment.date,
        method=payment.method,
        reference=payment.reference,
        term=payment.term,
        soft_deleted=payment.soft_deleted,
        deleted_reason=payment.deleted_reason,
        deleted_at=payment.deleted_at,
        version=getattr(payment, "version", 1),
    )


def payment_from_orm(obj: PaymentORM) -> Payment:
    return Payment(
        id=obj.id,
        student_id=obj.student_id,
        amount=obj.amount,
        date=obj.date,
        method=obj.method,
        reference=obj.reference or "",
        term=obj.term or "",
        billing_id=obj.billing_id,
        soft_deleted=bool(obj.soft_deleted),
        deleted_reason=obj.deleted_reason,
        deleted_at=obj.deleted_at,
        version=getattr(obj, "version", 1),
    )


__all__ = ["billing_to_orm", "billing_from_orm", "payment_to_orm", "payment_from_orm"]
