from bursar_infra.db.budget.repository import (
    SqlAlchemyBudgetPeriodRepository,
    SqlAlchemyTransactionCategoryRepository,
)

__all__ = ["SqlAlchemyTransactionCategoryRepository", "SqlAlchemyBudgetPeriodRepository"]
