from __future__ import annotations

import logging
from datetime import date
from typing import List, Sequence

from sqlalchemy.orm import Session

from bursar_core.events.domain_events import domain_events
from bursar_core.exceptions import NotFoundError, ValidationError
from bursar_core.interfaces import BudgetPeriodRepository, TransactionCategoryRepository
from bursar_core.models import (
    BudgetCategoryLimit,
    BudgetPeriod,
    BudgetPeriodStatus,
    BudgetSubcategory,
    BudgetType,
    TransactionCategory,
)
from bursar_core.services.audit.helpers import record_audit
from bursar_core.services.budget.totals import BudgetPeriodTotals, period_totals
from bursar_core.services.common.guards import ensure_expected_version

logger = logging.getLogger(__name__)


class BudgetService:
    def __init__(
        self,
        session: Session,
        period_repo: BudgetPeriodRepository,
        category_repo: TransactionCategoryRepository,
        audit_service=None,
    ):
        self._session: Session = session
        self._period_repo: BudgetPeriodRepository = period_repo
        self._category_repo: TransactionCategoryRepository = category_repo
        self._audit_service = audit_service

    # --- Periods ---

    def create_budget_period(
        self,
        name: str,
        start_date: date | None = None,
        end_date: date | None = None,
        status: BudgetPeriodStatus = BudgetPeriodStatus.DRAFT,
    ) -> BudgetPeriod:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Budget period name is required.", code="BUDGET_NAME_REQUIRED")
        self._validate_dates(start_date, end_date)
        period = BudgetPeriod.create(
            name=name,
            start_date=start_date,
            end_date=end_date,
            status=BudgetPeriodStatus(status),
        )
        try:
            self._period_repo.add(period)
            record_audit(
                self,
                action="budget.period.add",
                entity_type="budget_period",
                entity_id=period.id,
                details={"name": period.name},
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        domain_events.budgets_changed.emit(period.id)
        return period

    def update_budget_period(
        self,
        period_id: str,
        *,
        name: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        status: BudgetPeriodStatus | None = None,
        expense_limits: Sequence[BudgetCategoryLimit] | None = None,
        income_limits: Sequence[BudgetCategoryLimit] | None = None,
        expected_version: int | None = None,
    ) -> BudgetPeriod:
        period = self.get_budget_period(period_id)
        ensure_expected_version(period, expected_version, label="Budget period")
        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("Budget period name is required.", code="BUDGET_NAME_REQUIRED")
            period.name = name
        if start_date is not None:
            period.start_date = start_date
        if end_date is not None:
            period.end_date = end_date
        self._validate_dates(period.start_date, period.end_date)
        if status is not None:
            period.status = BudgetPeriodStatus(status)
        if expense_limits is not None:
            period.expense_limits = self._dedupe(expense_limits)
        if income_limits is not None:
            period.income_limits = self._dedupe(income_limits)
        return self._save(period, action="budget.period.update")

    def get_budget_period(self, period_id: str) -> BudgetPeriod:
        period = self._period_repo.get(period_id)
        if period is None:
            raise NotFoundError("Budget period not found.", code="BUDGET_PERIOD_NOT_FOUND")
        return period

    def list_budget_periods(self) -> List[BudgetPeriod]:
        return self._period_repo.list_all()

    # --- Limits ---

    def add_category_limit(
        self,
        period_id: str,
        budget_type: BudgetType,
        category_id: str,
    ) -> BudgetPeriod:
        budget_type = BudgetType(budget_type)
        period = self.get_budget_period(period_id)
        category = self._require_category(category_id)
        if category.type != budget_type:
            raise ValidationError(
                f"Category '{category.name}' belongs to the {category.type.value} tab.",
                code="BUDGET_CATEGORY_TYPE_MISMATCH",
            )
        limits = period.limits_for(budget_type)
        if any(limit.category_id == category_id for limit in limits):
            return period

        limits.append(
            BudgetCategoryLimit.create(category_id, allow_subcategories=bool(category.subcategories))
        )
        return self._save(period, action="budget.limit.add", details={"category": category.name})

    def remove_category_limit(
        self,
        period_id: str,
        budget_type: BudgetType,
        category_id: str,
    ) -> BudgetPeriod:
        """Drops the limit from this period only; the catalog entry is left alone."""
        budget_type = BudgetType(budget_type)
        period = self.get_budget_period(period_id)
        limits = period.limits_for(budget_type)
        remaining = [limit for limit in limits if limit.category_id != category_id]
        if len(remaining) == len(limits):
            raise NotFoundError("Category is not budgeted in this period.", code="BUDGET_LIMIT_NOT_FOUND")
        limits[:] = remaining
        return self._save(period, action="budget.limit.remove", details={"category_id": category_id})

    def set_base_amount(
        self,
        period_id: str,
        budget_type: BudgetType,
        category_id: str,
        amount: float,
    ) -> BudgetPeriod:
        period = self.get_budget_period(period_id)
        limit = self._require_limit(period, BudgetType(budget_type), category_id)
        limit.base_amount = self._non_negative(amount)
        return self._save(period, action="budget.limit.base", details={"amount": limit.base_amount})

    def set_subcategory_amount(
        self,
        period_id: str,
        budget_type: BudgetType,
        category_id: str,
        subcategory: str,
        amount: float,
    ) -> BudgetPeriod:
        subcategory = (subcategory or "").strip()
        if not subcategory:
            raise ValidationError("Subcategory name is required.", code="SUBCATEGORY_NAME_REQUIRED")
        period = self.get_budget_period(period_id)
        limit = self._require_limit(period, BudgetType(budget_type), category_id)
        value = self._non_negative(amount)
        existing = next((sub for sub in limit.subcategories if sub.name == subcategory), None)
        if existing is None:
            limit.subcategories.append(BudgetSubcategory.create(subcategory, value))
        else:
            existing.amount = value
        limit.allow_subcategories = True
        return self._save(
            period,
            action="budget.limit.subcategory",
            details={"subcategory": subcategory, "amount": value},
        )

    def get_period_totals(self, period_id: str) -> BudgetPeriodTotals:
        period = self.get_budget_period(period_id)
        catalog = {
            category.id: category
            for budget_type in (BudgetType.EXPENSE, BudgetType.INCOME)
            for category in self._category_repo.list_by_type(budget_type)
        }
        return period_totals(period, catalog)

    # --- Category catalog ---

    def add_category(
        self,
        name: str,
        budget_type: BudgetType,
        subcategories: Sequence[str] | None = None,
    ) -> TransactionCategory:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name is required.", code="CATEGORY_REQUIRED")
        budget_type = BudgetType(budget_type)
        for category in self._category_repo.list_by_type(budget_type):
            if category.name.lower() == name.lower():
                return category

        category = TransactionCategory.create(
            name=name,
            type=budget_type,
            subcategories=self._clean_names(subcategories or []),
        )
        try:
            self._category_repo.add(category)
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e
        return category

    def add_subcategory(self, category_id: str, name: str) -> TransactionCategory:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Subcategory name is required.", code="SUBCATEGORY_NAME_REQUIRED")
        category = self._require_category(category_id)
        if name in category.subcategories:
            return category
        category.subcategories.append(name)
        try:
            self._category_repo.update(category)
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e
        return category

    def list_categories(self, budget_type: BudgetType) -> List[TransactionCategory]:
        return self._category_repo.list_by_type(BudgetType(budget_type))

    def _save(self, period: BudgetPeriod, *, action: str, details: dict | None = None) -> BudgetPeriod:
        try:
            self._period_repo.update(period)
            record_audit(
                self,
                action=action,
                entity_type="budget_period",
                entity_id=period.id,
                details=details,
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        logger.info("Budget period %s saved (%s)", period.name, action)
        domain_events.budgets_changed.emit(period.id)
        return period

    def _require_category(self, category_id: str) -> TransactionCategory:
        category = self._category_repo.get(category_id)
        if category is None:
            raise NotFoundError("Category not found.", code="CATEGORY_NOT_FOUND")
        return category

    @staticmethod
    def _require_limit(period: BudgetPeriod, budget_type: BudgetType, category_id: str) -> BudgetCategoryLimit:
        for limit in period.limits_for(budget_type):
            if limit.category_id == category_id:
                return limit
        raise NotFoundError("Category is not budgeted in this period.", code="BUDGET_LIMIT_NOT_FOUND")

    @staticmethod
    def _dedupe(limits: Sequence[BudgetCategoryLimit]) -> List[BudgetCategoryLimit]:
        seen: set[str] = set()
        result: List[BudgetCategoryLimit] = []
        for limit in limits:
            if limit.category_id in seen:
                continue
            seen.add(limit.category_id)
            result.append(limit)
        return result

    @staticmethod
    def _clean_names(names: Sequence[str]) -> List[str]:
        return list(dict.fromkeys(name.strip() for name in names if name and name.strip()))

    @staticmethod
    def _non_negative(amount: float) -> float:
        value = float(amount or 0.0)
        if value < 0:
            raise ValidationError("Budget amounts cannot be negative.", code="AMOUNT_NEGATIVE")
        return value

    @staticmethod
    def _validate_dates(start_date: date | None, end_date: date | None) -> None:
        if start_date and end_date and end_date < start_date:
            raise ValidationError("Period end date is before its start date.", code="BUDGET_DATES_INVALID")


__all__ = ["BudgetService"]
