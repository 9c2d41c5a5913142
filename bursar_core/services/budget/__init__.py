from .service import BudgetService
from .totals import BudgetLimitLine, BudgetPeriodTotals, limit_total, period_totals

__all__ = [
    "BudgetService",
    "BudgetLimitLine",
    "BudgetPeriodTotals",
    "limit_total",
    "period_totals",
]
