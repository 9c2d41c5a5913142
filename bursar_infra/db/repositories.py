# bursar_infra/db/repositories.py
from bursar_infra.db.audit import SqlAlchemyAuditLogRepository
from bursar_infra.db.budget import (
    SqlAlchemyBudgetPeriodRepository,
    SqlAlchemyTransactionCategoryRepository,
)
from bursar_infra.db.fees import SqlAlchemyBillingRepository, SqlAlchemyPaymentRepository
from bursar_infra.db.inventory import (
    SqlAlchemyInventoryGroupRepository,
    SqlAlchemyInventoryItemRepository,
    SqlAlchemyInventoryListRepository,
    SqlAlchemyInventoryLogRepository,
    SqlAlchemyInventoryTransferRepository,
)
from bursar_infra.db.ledger import SqlAlchemyAccountRepository, SqlAlchemyTransactionRepository
from bursar_infra.db.requisition import (
    SqlAlchemyRequisitionQueueRepository,
    SqlAlchemyRequisitionRepository,
)

__all__ = [
    "SqlAlchemyAccountRepository",
    "SqlAlchemyTransactionRepository",
    "SqlAlchemyBillingRepository",
    "SqlAlchemyPaymentRepository",
    "SqlAlchemyInventoryListRepository",
    "SqlAlchemyInventoryGroupRepository",
    "SqlAlchemyInventoryItemRepository",
    "SqlAlchemyInventoryLogRepository",
    "SqlAlchemyInventoryTransferRepository",
    "SqlAlchemyRequisitionRepository",
    "SqlAlchemyRequisitionQueueRepository",
    "SqlAlchemyTransactionCategoryRepository",
    "SqlAlchemyBudgetPeriodRepository",
    "SqlAlchemyAuditLogRepository",
]
