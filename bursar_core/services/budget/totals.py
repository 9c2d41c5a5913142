from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple

from bursar_core.models import BudgetCategoryLimit, BudgetPeriod, BudgetType, TransactionCategory


@dataclass(frozen=True)
class BudgetLimitLine:
    category_id: str
    category_name: str
    budget_type: BudgetType
    uses_subcategories: bool
    total: float


@dataclass(frozen=True)
class BudgetPeriodTotals:
    period_id: str
    expense_total: float
    income_total: float
    lines: Tuple[BudgetLimitLine, ...]

    @property
    def net(self) -> float:
        return self.income_total - self.expense_total


def uses_subcategories(limit: BudgetCategoryLimit, category: Optional[TransactionCategory]) -> bool:
    if category is not None:
        return bool(category.subcategories)
    return limit.allow_subcategories and bool(limit.subcategories)


def limit_total(limit: BudgetCategoryLimit, category: Optional[TransactionCategory]) -> float:
    """Either the subcategory sum or the base amount, never both."""
    if not uses_subcategories(limit, category):
        return float(limit.base_amount or 0.0)
    amounts: Dict[str, float] = {sub.name: float(sub.amount or 0.0) for sub in limit.subcategories}
    names = category.subcategories if category is not None else list(amounts)
    return sum(amounts.get(name, 0.0) for name in names)


def period_totals(
    period: BudgetPeriod,
    catalog: Mapping[str, TransactionCategory],
) -> BudgetPeriodTotals:
    lines = []
    tab_totals = {BudgetType.EXPENSE: 0.0, BudgetType.INCOME: 0.0}
    for budget_type in (BudgetType.EXPENSE, BudgetType.INCOME):
        for limit in period.limits_for(budget_type):
            category = catalog.get(limit.category_id)
            total = limit_total(limit, category)
            tab_totals[budget_type] += total
            lines.append(
                BudgetLimitLine(
                    category_id=limit.category_id,
                    category_name=category.name if category else limit.category_id,
                    budget_type=budget_type,
                    uses_subcategories=uses_subcategories(limit, category),
                    total=total,
                )
            )
    return BudgetPeriodTotals(
        period_id=period.id,
        expense_total=tab_totals[BudgetType.EXPENSE],
        income_total=tab_totals[BudgetType.INCOME],
        lines=tuple(lines),
    )


__all__ = [
    "BudgetLimitLine",
    "BudgetPeriodTotals",
    "uses_subcategories",
    "limit_total",
    "period_totals",
]
