from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, List, Optional

from bursar_core.domain.enums import BudgetPeriodStatus, BudgetType
from bursar_core.domain.identifiers import generate_id


@dataclass
class TransactionCategory:
    """Global category catalog entry shared by transactions and budget limits."""

    id: str
    name: str
    type: BudgetType
    subcategories: List[str] = field(default_factory=list)

    @staticmethod
    def create(name: str, type: BudgetType, subcategories: List[str] | None = None) -> "TransactionCategory":
        return TransactionCategory(
            id=generate_id(),
            name=name,
            type=type,
            subcategories=list(subcategories or []),
        )


@dataclass
class BudgetSubcategory:
    id: str
    name: str
    amount: float = 0.0

    @staticmethod
    def create(name: str, amount: float = 0.0) -> "BudgetSubcategory":
        return BudgetSubcategory(id=generate_id(), name=name, amount=amount)


@dataclass
class BudgetCategoryLimit:
    id: str
    category_id: str
    base_amount: float = 0.0
    allow_subcategories: bool = False
    subcategories: List[BudgetSubcategory] = field(default_factory=list)

    @staticmethod
    def create(category_id: str, allow_subcategories: bool = False) -> "BudgetCategoryLimit":
        return BudgetCategoryLimit(
            id=generate_id(),
            category_id=category_id,
            allow_subcategories=allow_subcategories,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "category_id": self.category_id,
            "base_amount": self.base_amount,
            "allow_subcategories": self.allow_subcategories,
            "subcategories": [
                {"id": sub.id, "name": sub.name, "amount": sub.amount} for sub in self.subcategories
            ],
        }

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> "BudgetCategoryLimit":
        return BudgetCategoryLimit(
            id=str(raw.get("id") or generate_id()),
            category_id=str(raw.get("category_id") or ""),
            base_amount=float(raw.get("base_amount") or 0),
            allow_subcategories=bool(raw.get("allow_subcategories", False)),
            subcategories=[
                BudgetSubcategory(
                    id=str(sub.get("id") or generate_id()),
                    name=str(sub.get("name") or ""),
                    amount=float(sub.get("amount") or 0),
                )
                for sub in raw.get("subcategories") or []
            ],
        )


@dataclass
class BudgetPeriod:
    id: str
    name: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: BudgetPeriodStatus = BudgetPeriodStatus.DRAFT
    expense_limits: List[BudgetCategoryLimit] = field(default_factory=list)
    income_limits: List[BudgetCategoryLimit] = field(default_factory=list)
    version: int = 1

    @staticmethod
    def create(
        name: str,
        start_date: date | None = None,
        end_date: date | None = None,
        status: BudgetPeriodStatus = BudgetPeriodStatus.DRAFT,
    ) -> "BudgetPeriod":
        return BudgetPeriod(
            id=generate_id(),
            name=name,
            start_date=start_date,
            end_date=end_date,
            status=status,
        )

    def limits_for(self, budget_type: BudgetType) -> List[BudgetCategoryLimit]:
        if budget_type == BudgetType.INCOME:
            return self.income_limits
        return self.expense_limits


__all__ = [
    "TransactionCategory",
    "BudgetSubcategory",
    "BudgetCategoryLimit",
    "BudgetPeriod",
]
