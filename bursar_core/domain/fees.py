from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from bursar_core.domain.enums import BillingStatus
from bursar_core.domain.identifiers import generate_id


@dataclass
class Billing:
    id: str
    student_id: str
    kind: str
    description: str
    amount: float
    date: date
    term: str = ""
    status: BillingStatus = BillingStatus.PENDING
    soft_deleted: bool = False
    deleted_reason: Optional[str] = None
    deleted_at: Optional[datetime] = None
    version: int = 1

    @staticmethod
    def create(
        student_id: str,
        kind: str,
        description: str,
        amount: float,
        date: date,
        term: str = "",
    ) -> "Billing":
        return Billing(
            id=generate_id(),
            student_id=student_id,
            kind=kind,
            description=description,
            amount=amount,
            date=date,
            term=term,
        )


@dataclass
class Payment:
    id: str
    student_id: str
    amount: float
    date: date
    method: str
    reference: str = ""
    term: str = ""
    billing_id: Optional[str] = None
    soft_deleted: bool = False
    deleted_reason: Optional[str] = None
    deleted_at: Optional[datetime] = None
    version: int = 1

    @staticmethod
    def create(
        student_id: str,
        amount: float,
        date: date,
        method: str,
        reference: str = "",
        term: str = "",
        billing_id: Optional[str] = None,
    ) -> "Payment":
        return Payment(
            id=generate_id(),
            student_id=student_id,
            amount=amount,
            date=date,
            method=method,
            reference=reference,
            term=term,
            billing_id=billing_id,
        )


__all__ = ["Billing", "Payment"]
