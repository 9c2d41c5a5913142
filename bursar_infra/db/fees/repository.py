from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from bursar_core.interfaces import BillingRepository, PaymentRepository
from bursar_core.models import Billing, Payment
from bursar_infra.db.fees.mapper import (
    billing_from_orm,
    billing_to_orm,
    payment_from_orm,
    payment_to_orm,
)
from bursar_infra.db.models import BillingORM, PaymentORM
from bursar_infra.db.optimistic import update_with_version_check


class SqlAlchemyBillingRepository(BillingRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, billing: Billing) -> None:
        self.session.add(billing_to_orm(billing))

    def update(self, billing: Billing) -> None:
        billing.version = update_with_version_check(
            self.session,
            BillingORM,
            billing.id,
            getattr(billing, "version", 1),
            {
                "description": billing.description,
                "amount": billing.amount,
                "status": billing.status,
                "soft_deleted": billing.soft_deleted,
                "deleted_reason": billing.deleted_reason,
                "deleted_at": billing.deleted_at,
            },
            not_found_message="Billing not found.",
            stale_message="Billing was updated by another user.",
        )

    def get(self, billing_id: str) -> Optional[Billing]:
        obj = self.session.get(BillingORM, billing_id)
        return billing_from_orm(obj) if obj else None

    def list_by_student(self, student_id: str, *, include_deleted: bool = False) -> List[Billing]:
        stmt = select(BillingORM).where(BillingORM.student_id == student_id)
        if not include_deleted:
            stmt = stmt.where(BillingORM.soft_deleted.is_(False))
        rows = self.session.execute(stmt.order_by(BillingORM.date)).scalars().all()
        return [billing_from_orm(row) for row in rows]

    def list_deleted(self) -> List[Billing]:
        stmt = select(BillingORM).where(BillingORM.soft_deleted.is_(True))
        return [billing_from_orm(row) for row in self.session.execute(stmt).scalars().all()]


class SqlAlchemyPaymentRepository(PaymentRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, payment: Payment) -> None:
        self.session.add(payment_to_orm(payment))

    def update(self, payment: Payment) -> None:
        payment.version = update_with_version_check(
            self.session,
            PaymentORM,
            payment.id,
            getattr(payment, "version", 1),
            {
                "amount": payment.amount,
                "reference": payment.reference,
                "soft_deleted": payment.soft_deleted,
                "deleted_reason": payment.deleted_reason,
                "deleted_at": payment.deleted_at,
            },
            not_found_message="Payment not found.",
            stale_message="Payment was updated by another user.",
        )

    def get(self, payment_id: str) -> Optional[Payment]:
        obj = self.session.get(PaymentORM, payment_id)
        return payment_from_orm(obj) if obj else None

    def list_by_student(self, student_id: str, *, include_deleted: bool = False) -> List[Payment]:
        stmt = select(PaymentORM).where(PaymentORM.student_id == student_id)
        if not include_deleted:
            stmt = stmt.where(PaymentORM.soft_deleted.is_(False))
        rows = self.session.execute(stmt.order_by(PaymentORM.date)).scalars().all()
        return [payment_from_orm(row) for row in rows]

    def list_deleted(self) -> List[Payment]:
        stmt = select(PaymentORM).where(PaymentORM.soft_deleted.is_(True))
        return [payment_from_orm(row) for row in self.session.execute(stmt).scalars().all()]


__all__ = ["SqlAlchemyBillingRepository", "SqlAlchemyPaymentRepository"]
