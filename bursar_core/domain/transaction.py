from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from bursar_core.domain.enums import RiskLevel, TransactionType
from bursar_core.domain.identifiers import generate_id


@dataclass
class Transaction:
    """General ledger entry. `method` is the name of the account it moves money through."""

    id: str
    type: TransactionType
    amount: float
    date: date
    method: str
    category: str
    description: str = ""
    recorded_by: str = ""
    is_flagged: bool = False
    risk_level: Optional[RiskLevel] = None
    soft_deleted: bool = False
    deleted_reason: Optional[str] = None
    deleted_at: Optional[datetime] = None
    requisition_id: Optional[str] = None
    transfer_group_id: Optional[str] = None
    version: int = 1

    @staticmethod
    def create(
        type: TransactionType,
        amount: float,
        date: date,
        method: str,
        category: str,
        description: str = "",
        recorded_by: str = "",
        **extra,
    ) -> "Transaction":
        return Transaction(
            id=generate_id(),
            type=type,
            amount=amount,
            date=date,
            method=method,
            category=category,
            description=description,
            recorded_by=recorded_by,
            **extra,
        )


__all__ = ["Transaction"]
