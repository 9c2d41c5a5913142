from __future__ import annotations

from typing import List

from bursar_core.models import BudgetCategoryLimit, BudgetPeriod, TransactionCategory
from bursar_infra.db.json_columns import list_from_json, to_json
from bursar_infra.db.models import BudgetPeriodORM, TransactionCategoryORM


def limits_to_json(limits: List[BudgetCategoryLimit]) -> str:
    return to_json([limit.to_dict() for limit in limits])


def limits_from_json(raw: str | None) -> List[BudgetCategoryLimit]:
    return [BudgetCategoryLimit.from_dict(entry) for entry in list_from_json(raw) if isinstance(entry, dict)]


def category_to_orm(category: TransactionCategory) -> TransactionCategoryORM:
    return TransactionCategoryORM(
        id=category.id,
        name=category.name,
        type=category.type,
        subcategories_json=to_json(list(category.subcategories)),
    )


def category_from_orm(obj: TransactionCategoryORM) -> TransactionCategory:
    return TransactionCategory(
        id=obj.id,
        name=obj.name,
        type=obj.type,
        subcategories=[str(name) for name in list_from_json(obj.subcategories_json)],
    )


def period_to_orm(period: BudgetPeriod) -> BudgetPeriodORM:
    return BudgetPeriodORM(
        id=period.id,
        name=period.name,
        start_date=period.start_date,
        end_date=period.end_date,
        status=period.status,
        expense_limits_json=limits_to_json(period.expense_limits),
        income_limits_json=limits_to_json(period.income_limits),
        version=getattr(period, "version", 1),
    )


def period_from_orm(obj: BudgetPeriodORM) -> BudgetPeriod:
    return BudgetPeriod(
        id=obj.id,
        name=obj.name,
        start_date=obj.start_date,
        end_date=obj.end_date,
        status=obj.status,
        expense_limits=limits_from_json(obj.expense_limits_json),
        income_limits=limits_from_json(obj.income_limits_json),
        version=getattr(obj, "version", 1),
    )


__all__ = [
    "category_to_orm",
    "category_from_orm",
    "period_to_orm",
    "period_from_orm",
    "limits_to_json",
]
