from __future__ import annotations

from datetime import date

import pytest

from bursar_core.exceptions import NotFoundError, ValidationError
from bursar_core.models import BudgetCategoryLimit, BudgetSubcategory, BudgetType
from bursar_core.services.budget.totals import limit_total


@pytest.fixture
def catalog(services):
    budget = services["budget_service"]
    return {
        "food": budget.add_category("Food", BudgetType.EXPENSE, ["Breakfast", "Lunch"]),
        "repairs": budget.add_category("Repairs", BudgetType.EXPENSE),
        "fees": budget.add_category("Tuition Fees", BudgetType.INCOME),
    }


@pytest.fixture
def period(services):
    return services["budget_service"].create_budget_period(
        "Term 1 2026", start_date=date(2026, 2, 1), end_date=date(2026, 4, 30)
    )


def test_totals_use_subcategories_or_base_never_both(services, catalog, period):
    budget = services["budget_service"]
    food, repairs, fees = catalog["food"], catalog["repairs"], catalog["fees"]

    budget.add_category_limit(period.id, BudgetType.EXPENSE, food.id)
    budget.add_category_limit(period.id, BudgetType.EXPENSE, repairs.id)
    budget.add_category_limit(period.id, BudgetType.INCOME, fees.id)
    budget.set_subcategory_amount(period.id, BudgetType.EXPENSE, food.id, "Breakfast", 100)
    budget.set_subcategory_amount(period.id, BudgetType.EXPENSE, food.id, "Lunch", 200)
    budget.set_base_amount(period.id, BudgetType.EXPENSE, food.id, 999)
    budget.set_base_amount(period.id, BudgetType.EXPENSE, repairs.id, 50)
    budget.set_base_amount(period.id, BudgetType.INCOME, fees.id, 1_000)

    totals = budget.get_period_totals(period.id)

    lines = {line.category_name: line for line in totals.lines}
    assert lines["Food"].total == 300
    assert lines["Food"].uses_subcategories is True
    assert lines["Repairs"].total == 50
    assert lines["Repairs"].uses_subcategories is False
    assert totals.expense_total == 350
    assert totals.income_total == 1_000
    assert totals.net == 650


def test_subcategory_outside_catalog_counts_once_catalog_learns_it(services, catalog, period):
    budget = services["budget_service"]
    food = catalog["food"]
    budget.add_category_limit(period.id, BudgetType.EXPENSE, food.id)
    budget.set_subcategory_amount(period.id, BudgetType.EXPENSE, food.id, "Lunch", 200)
    budget.set_subcategory_amount(period.id, BudgetType.EXPENSE, food.id, "Snacks", 40)

    assert budget.get_period_totals(period.id).expense_total == 200

    budget.add_subcategory(food.id, "Snacks")

    assert budget.get_period_totals(period.id).expense_total == 240


def test_category_limit_is_added_once(services, catalog, period):
    budget = services["budget_service"]
    food = catalog["food"]

    budget.add_category_limit(period.id, BudgetType.EXPENSE, food.id)
    budget.add_category_limit(period.id, BudgetType.EXPENSE, food.id)

    stored = budget.get_budget_period(period.id)
    assert [limit.category_id for limit in stored.expense_limits] == [food.id]
    assert stored.expense_limits[0].allow_subcategories is True


def test_category_must_match_tab(services, catalog, period):
    with pytest.raises(ValidationError) as exc:
        services["budget_service"].add_category_limit(period.id, BudgetType.EXPENSE, catalog["fees"].id)
    assert exc.value.code == "BUDGET_CATEGORY_TYPE_MISMATCH"


def test_removing_limit_leaves_catalog_alone(services, catalog, period):
    budget = services["budget_service"]
    repairs = catalog["repairs"]
    budget.add_category_limit(period.id, BudgetType.EXPENSE, repairs.id)

    budget.remove_category_limit(period.id, BudgetType.EXPENSE, repairs.id)

    assert budget.get_budget_period(period.id).expense_limits == []
    assert [c.name for c in budget.list_categories(BudgetType.EXPENSE)] == ["Food", "Repairs"]
    with pytest.raises(NotFoundError) as exc:
        budget.remove_category_limit(period.id, BudgetType.EXPENSE, repairs.id)
    assert exc.value.code == "BUDGET_LIMIT_NOT_FOUND"


def test_catalog_names_are_case_insensitive(services, catalog):
    again = services["budget_service"].add_category("  food ", BudgetType.EXPENSE)

    assert again.id == catalog["food"].id


def test_negative_amounts_and_bad_dates_are_refused(services, catalog, period):
    budget = services["budget_service"]
    budget.add_category_limit(period.id, BudgetType.EXPENSE, catalog["repairs"].id)

    with pytest.raises(ValidationError) as exc:
        budget.set_base_amount(period.id, BudgetType.EXPENSE, catalog["repairs"].id, -1)
    assert exc.value.code == "AMOUNT_NEGATIVE"

    with pytest.raises(ValidationError) as exc:
        budget.create_budget_period("Backwards", start_date=date(2026, 5, 1), end_date=date(2026, 4, 1))
    assert exc.value.code == "BUDGET_DATES_INVALID"


def test_limit_total_falls_back_to_own_subcategories_without_catalog_entry():
    limit = BudgetCategoryLimit.create("gone", allow_subcategories=True)
    limit.base_amount = 500
    limit.subcategories = [BudgetSubcategory.create("A", 10), BudgetSubcategory.create("B", 15)]

    assert limit_total(limit, None) == 25

    limit.allow_subcategories = False
    assert limit_total(limit, None) == 500
