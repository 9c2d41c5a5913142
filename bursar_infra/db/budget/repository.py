from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from bursar_core.exceptions import NotFoundError
from bursar_core.interfaces import BudgetPeriodRepository, TransactionCategoryRepository
from bursar_core.models import BudgetPeriod, BudgetType, TransactionCategory
from bursar_infra.db.budget.mapper import (
    category_from_orm,
    category_to_orm,
    limits_to_json,
    period_from_orm,
    period_to_orm,
)
from bursar_infra.db.json_columns import to_json
from bursar_infra.db.models import BudgetPeriodORM, TransactionCategoryORM
from bursar_infra.db.optimistic import update_with_version_check


class SqlAlchemyTransactionCategoryRepository(TransactionCategoryRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, category: TransactionCategory) -> None:
        self.session.add(category_to_orm(category))

    def update(self, category: TransactionCategory) -> None:
        obj = self.session.get(TransactionCategoryORM, category.id)
        if obj is None:
            raise NotFoundError("Category not found.", code="CATEGORY_NOT_FOUND")
        obj.name = category.name
        obj.subcategories_json = to_json(list(category.subcategories))
        self.session.flush()

    def get(self, category_id: str) -> Optional[TransactionCategory]:
        obj = self.session.get(TransactionCategoryORM, category_id)
        return category_from_orm(obj) if obj else None

    def list_by_type(self, budget_type: BudgetType) -> List[TransactionCategory]:
        stmt = (
            select(TransactionCategoryORM)
            .where(TransactionCategoryORM.type == budget_type)
            .order_by(TransactionCategoryORM.name)
        )
        return [category_from_orm(row) for row in self.session.execute(stmt).scalars().all()]


class SqlAlchemyBudgetPeriodRepository(BudgetPeriodRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, period: BudgetPeriod) -> None:
        self.session.add(period_to_orm(period))

    def update(self, period: BudgetPeriod) -> None:
        period.version = update_with_version_check(
            self.session,
            BudgetPeriodORM,
            period.id,
            getattr(period, "version", 1),
            {
                "name": period.name,
                "start_date": period.start_date,
                "end_date": period.end_date,
                "status": period.status,
                "expense_limits_json": limits_to_json(period.expense_limits),
                "income_limits_json": limits_to_json(period.income_limits),
            },
            not_found_message="Budget period not found.",
            stale_message="Budget period was updated by another user.",
        )

    def get(self, period_id: str) -> Optional[BudgetPeriod]:
        obj = self.session.get(BudgetPeriodORM, period_id)
        return period_from_orm(obj) if obj else None

    def list_all(self) -> List[BudgetPeriod]:
        stmt = select(BudgetPeriodORM).order_by(BudgetPeriodORM.start_date.desc())
        return [period_from_orm(row) for row in self.session.execute(stmt).scalars().all()]


__all__ = ["SqlAlchemyTransactionCategoryRepository", "SqlAlchemyBudgetPeriodRepository"]
