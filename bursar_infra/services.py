from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from bursar_core.interfaces import NoContributions, RequirementContributionSource
from bursar_core.services.accounts import AccountService
from bursar_core.services.audit import AuditService
from bursar_core.services.budget import BudgetService
from bursar_core.services.fees import FeeLedgerService
from bursar_core.services.inventory import InventoryService, StockBook
from bursar_core.services.ledger import LedgerService
from bursar_core.services.requisition import RequisitionService
from bursar_core.services.transfers import TransferService
from bursar_infra.db.repositories import (
    SqlAlchemyAccountRepository,
    SqlAlchemyAuditLogRepository,
    SqlAlchemyBillingRepository,
    SqlAlchemyBudgetPeriodRepository,
    SqlAlchemyInventoryGroupRepository,
    SqlAlchemyInventoryItemRepository,
    SqlAlchemyInventoryListRepository,
    SqlAlchemyInventoryLogRepository,
    SqlAlchemyInventoryTransferRepository,
    SqlAlchemyPaymentRepository,
    SqlAlchemyRequisitionQueueRepository,
    SqlAlchemyRequisitionRepository,
    SqlAlchemyTransactionCategoryRepository,
    SqlAlchemyTransactionRepository,
)


@dataclass(frozen=True)
class ServiceGraph:
    session: Session
    audit_service: AuditService
    account_service: AccountService
    ledger_service: LedgerService
    inventory_service: InventoryService
    transfer_service: TransferService
    requisition_service: RequisitionService
    budget_service: BudgetService
    fee_service: FeeLedgerService

    def as_dict(self) -> dict[str, Any]:
        return {
            "session": self.session,
            "audit_service": self.audit_service,
            "account_service": self.account_service,
            "ledger_service": self.ledger_service,
            "inventory_service": self.inventory_service,
            "transfer_service": self.transfer_service,
            "requisition_service": self.requisition_service,
            "budget_service": self.budget_service,
            "fee_service": self.fee_service,
        }


def build_service_graph(
    session: Session,
    *,
    contributions: RequirementContributionSource | None = None,
    actor: str | None = None,
) -> ServiceGraph:
    """Wire every service onto one session so each operation is a single unit of work."""
    account_repo = SqlAlchemyAccountRepository(session)
    transaction_repo = SqlAlchemyTransactionRepository(session)
    billing_repo = SqlAlchemyBillingRepository(session)
    payment_repo = SqlAlchemyPaymentRepository(session)
    list_repo = SqlAlchemyInventoryListRepository(session)
    group_repo = SqlAlchemyInventoryGroupRepository(session)
    item_repo = SqlAlchemyInventoryItemRepository(session)
    log_repo = SqlAlchemyInventoryLogRepository(session)
    transfer_repo = SqlAlchemyInventoryTransferRepository(session)
    requisition_repo = SqlAlchemyRequisitionRepository(session)
    queue_repo = SqlAlchemyRequisitionQueueRepository(session)
    category_repo = SqlAlchemyTransactionCategoryRepository(session)
    period_repo = SqlAlchemyBudgetPeriodRepository(session)
    audit_repo = SqlAlchemyAuditLogRepository(session)

    audit_service = AuditService(session=session, audit_repo=audit_repo, actor=actor)
    stock = StockBook(
        item_repo=item_repo,
        log_repo=log_repo,
        group_repo=group_repo,
        list_repo=list_repo,
        contributions=contributions or NoContributions(),
    )

    account_service = AccountService(
        session,
        account_repo,
        transaction_repo,
        audit_service=audit_service,
    )
    ledger_service = LedgerService(
        session,
        transaction_repo,
        account_repo,
        audit_service=audit_service,
    )
    inventory_service = InventoryService(
        session,
        list_repo,
        group_repo,
        item_repo,
        log_repo,
        stock,
        audit_service=audit_service,
    )
    transfer_service = TransferService(
        session,
        transfer_repo,
        stock,
        audit_service=audit_service,
    )
    requisition_service = RequisitionService(
        session,
        requisition_repo,
        queue_repo,
        transaction_repo,
        account_repo,
        audit_service=audit_service,
    )
    budget_service = BudgetService(
        session,
        period_repo,
        category_repo,
        audit_service=audit_service,
    )
    fee_service = FeeLedgerService(
        session,
        billing_repo,
        payment_repo,
        audit_service=audit_service,
    )

    return ServiceGraph(
        session=session,
        audit_service=audit_service,
        account_service=account_service,
        ledger_service=ledger_service,
        inventory_service=inventory_service,
        transfer_service=transfer_service,
        requisition_service=requisition_service,
        budget_service=budget_service,
        fee_service=fee_service,
    )


__all__ = ["ServiceGraph", "build_service_graph"]
