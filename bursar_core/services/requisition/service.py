from __future__ import annotations

import copy
import logging
import re
from datetime import date
from typing import Any, Iterable, List, Mapping, Sequence

from sqlalchemy.orm import Session

from bursar_core.events.domain_events import domain_events
from bursar_core.exceptions import NotFoundError, PreconditionFailedError, ValidationError
from bursar_core.interfaces import (
    AccountRepository,
    RequisitionQueueRepository,
    RequisitionRepository,
    TransactionRepository,
)
from bursar_core.models import (
    InQueueItem,
    Requisition,
    RequisitionItem,
    RequisitionPriority,
    RequisitionStatus,
    Transaction,
    TransactionType,
)
from bursar_core.domain.identifiers import generate_id
from bursar_core.services.audit.helpers import actor_of, record_audit
from bursar_core.services.common.guards import ensure_expected_version, require_reason
from bursar_core.services.requisition.grouping import RequisitionItemGroup, group_requisition_items

logger = logging.getLogger(__name__)

READABLE_ID_PATTERN = re.compile(r"^REQ-(\d+)$")

OPEN_STATUSES = (
    RequisitionStatus.DRAFT,
    RequisitionStatus.SUBMITTED,
    RequisitionStatus.PENDING_APPROVAL,
)
APPROVABLE_STATUSES = (RequisitionStatus.SUBMITTED, RequisitionStatus.PENDING_APPROVAL)
_STATUS_RANK = {status: rank for rank, status in enumerate(OPEN_STATUSES)}

ItemInput = RequisitionItem | Mapping[str, Any]


def format_readable_id(number: int) -> str:
    return f"REQ-{number:03d}"


class RequisitionService:
    def __init__(
        self,
        session: Session,
        requisition_repo: RequisitionRepository,
        queue_repo: RequisitionQueueRepository,
        transaction_repo: TransactionRepository,
        account_repo: AccountRepository,
        audit_service=None,
    ):
        self._session: Session = session
        self._requisition_repo: RequisitionRepository = requisition_repo
        self._queue_repo: RequisitionQueueRepository = queue_repo
        self._transaction_repo: TransactionRepository = transaction_repo
        self._account_repo: AccountRepository = account_repo
        self._audit_service = audit_service

    def add_requisition(
        self,
        title: str,
        account: str,
        date: date,
        items: Sequence[ItemInput] | None = None,
        notes: str = "",
        priority: RequisitionPriority | None = None,
        status: RequisitionStatus = RequisitionStatus.DRAFT,
    ) -> Requisition:
        title = (title or "").strip()
        if not title:
            raise ValidationError("Requisition title is required.", code="REQUISITION_TITLE_REQUIRED")
        if not isinstance(status, RequisitionStatus):
            status = RequisitionStatus(str(status))
        if status not in OPEN_STATUSES:
            raise ValidationError(
                "New requisitions cannot start approved or rejected.",
                code="REQUISITION_STATUS_INVALID",
            )
        self._require_account(account)

        requisition = Requisition.create(
            title=title,
            account=account,
            date=date,
            items=self._normalize_items(items or []),
            status=status,
            notes=(notes or "").strip(),
            priority=RequisitionPriority(priority) if priority else None,
        )
        requisition.readable_id = self._next_readable_id()
        try:
            self._requisition_repo.add(requisition)
            record_audit(
                self,
                action="requisition.add",
                entity_type="requisition",
                entity_id=requisition.id,
                details={"readable_id": requisition.readable_id, "total": requisition.total_amount},
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        logger.info("Requisition %s created", requisition.readable_id)
        domain_events.requisitions_changed.emit(requisition.id)
        return requisition

    def update_requisition(
        self,
        requisition_id: str,
        *,
        title: str | None = None,
        account: str | None = None,
        date: date | None = None,
        notes: str | None = None,
        priority: RequisitionPriority | None = None,
        items: Sequence[ItemInput] | None = None,
        status: RequisitionStatus | None = None,
        expected_version: int | None = None,
    ) -> Requisition:
        requisition = self.get_requisition(requisition_id)
        ensure_expected_version(requisition, expected_version, label="Requisition")
        self._ensure_open(requisition)

        if title is not None:
            title = title.strip()
            if not title:
                raise ValidationError("Requisition title is required.", code="REQUISITION_TITLE_REQUIRED")
            requisition.title = title
        if account is not None:
            self._require_account(account)
            requisition.account = account
        if date is not None:
            requisition.date = date
        if notes is not None:
            requisition.notes = notes.strip()
        if priority is not None:
            requisition.priority = RequisitionPriority(priority)
        if status is not None:
            requisition.status = self._next_status(requisition.status, status)

        dropped: List[RequisitionItem] = []
        if items is not None:
            new_items = self._normalize_items(items)
            kept_ids = {item.id for item in new_items}
            dropped = [item for item in requisition.items if item.id not in kept_ids]
            requisition.items = new_items

        try:
            self._requisition_repo.update(requisition)
            for item in dropped:
                self._queue_repo.add(InQueueItem.create(item, requisition.id))
            record_audit(
                self,
                action="requisition.update",
                entity_type="requisition",
                entity_id=requisition.id,
                details={
                    "status": requisition.status.value,
                    "total": requisition.total_amount,
                    "dropped_items": len(dropped),
                },
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        domain_events.requisitions_changed.emit(requisition.id)
        return requisition

    def remove_line_item(self, requisition_id: str, item_id: str) -> InQueueItem:
        requisition = self.get_requisition(requisition_id)
        self._ensure_open(requisition)
        item = next((row for row in requisition.items if row.id == item_id), None)
        if item is None:
            raise NotFoundError("Line item not found on requisition.", code="REQUISITION_ITEM_NOT_FOUND")

        requisition.items = [row for row in requisition.items if row.id != item_id]
        entry = InQueueItem.create(item, requisition.id)
        try:
            self._requisition_repo.update(requisition)
            self._queue_repo.add(entry)
            record_audit(
                self,
                action="requisition.item.remove",
                entity_type="requisition",
                entity_id=requisition.id,
                details={"item": item.name, "queue_id": entry.id},
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        domain_events.requisitions_changed.emit(requisition.id)
        return entry

    def approve_requisition(self, requisition_id: str) -> Requisition:
        """
        Approve and post one Expense row per line item against the requisition's
        account. The recycle-bin entries of this requisition are frozen into
        `queue_snapshot` at the same moment.
        """
        requisition = self.get_requisition(requisition_id)
        if requisition.status not in APPROVABLE_STATUSES:
            logger.warning(
                "Refused to approve %s from status %s",
                requisition.readable_id,
                requisition.status.value,
            )
            raise PreconditionFailedError(
                f"Requisition in status '{requisition.status.value}' cannot be approved.",
                code="REQUISITION_NOT_APPROVABLE",
            )
        self._require_account(requisition.account)

        requisition.status = RequisitionStatus.APPROVED
        requisition.queue_snapshot = [
            copy.deepcopy(entry) for entry in self._queue_repo.list_for_requisition(requisition.id)
        ]
        recorded_by = actor_of(self)
        expenses = [
            Transaction.create(
                type=TransactionType.EXPENSE,
                amount=float(item.amount or 0.0),
                date=date.today(),
                method=requisition.account,
                category=item.category,
                description=item.name,
                recorded_by=recorded_by,
                requisition_id=requisition.readable_id,
            )
            for item in requisition.items
        ]

        try:
            self._requisition_repo.update(requisition)
            for txn in expenses:
                self._transaction_repo.add(txn)
            record_audit(
                self,
                action="requisition.approve",
                entity_type="requisition",
                entity_id=requisition.id,
                details={
                    "readable_id": requisition.readable_id,
                    "total": requisition.total_amount,
                    "snapshot_size": len(requisition.queue_snapshot),
                },
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        logger.info(
            "Requisition %s approved; %d expense rows posted to %s",
            requisition.readable_id,
            len(expenses),
            requisition.account,
        )
        domain_events.requisitions_changed.emit(requisition.id)
        domain_events.transactions_changed.emit(requisition.account)
        return requisition

    def reject_requisition(self, requisition_id: str, reason: str) -> Requisition:
        requisition = self.get_requisition(requisition_id)
        if requisition.status not in APPROVABLE_STATUSES:
            raise PreconditionFailedError(
                f"Requisition in status '{requisition.status.value}' cannot be rejected.",
                code="REQUISITION_NOT_REJECTABLE",
            )
        reason = require_reason(reason, code="REQUISITION_REJECTION_REASON_REQUIRED")
        requisition.status = RequisitionStatus.REJECTED
        requisition.rejection_reason = reason
        try:
            self._requisition_repo.update(requisition)
            record_audit(
                self,
                action="requisition.reject",
                entity_type="requisition",
                entity_id=requisition.id,
                details={"reason": reason},
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        logger.info("Requisition %s rejected", requisition.readable_id)
        domain_events.requisitions_changed.emit(requisition.id)
        return requisition

    def delete_requisition(self, requisition_id: str) -> None:
        requisition = self.get_requisition(requisition_id)
        if requisition.status == RequisitionStatus.APPROVED:
            raise PreconditionFailedError(
                "Approved requisitions are referenced by ledger rows and cannot be deleted.",
                code="REQUISITION_APPROVED_LOCKED",
            )
        # bin entries cannot be restored once their requisition is gone
        discarded = self._queue_repo.list_for_requisition(requisition.id)
        try:
            self._requisition_repo.delete(requisition.id)
            for entry in discarded:
                self._queue_repo.delete(entry.id)
            record_audit(
                self,
                action="requisition.delete",
                entity_type="requisition",
                entity_id=requisition.id,
                details={
                    "readable_id": requisition.readable_id,
                    "discarded_items": [entry.item_data.name for entry in discarded],
                },
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        if discarded:
            logger.info(
                "Requisition %s deleted with %d recycle bin entries",
                requisition.readable_id,
                len(discarded),
            )

        domain_events.requisitions_changed.emit(requisition.id)

    def get_requisition(self, requisition_id: str) -> Requisition:
        requisition = self._requisition_repo.get(requisition_id)
        if requisition is None:
            raise NotFoundError("Requisition not found.", code="REQUISITION_NOT_FOUND")
        return requisition

    def list_requisitions(self) -> List[Requisition]:
        return self._requisition_repo.list_all()

    def group_requisition_items(self, requisition_id: str) -> List[RequisitionItemGroup]:
        return group_requisition_items(self.get_requisition(requisition_id).items)

    # --- Recycle bin ---

    def list_queue(self, requisition_id: str | None = None) -> List[InQueueItem]:
        if requisition_id is not None:
            return self._queue_repo.list_for_requisition(requisition_id)
        return self._queue_repo.list_all()

    def restore_from_queue(self, queue_id: str, requisition_id: str) -> Requisition:
        entry = self._require_queue_entry(queue_id)
        requisition = self.get_requisition(requisition_id)
        self._ensure_open(requisition)

        restored = copy.deepcopy(entry.item_data)
        restored.id = generate_id()
        requisition.items = [*requisition.items, restored]
        try:
            self._requisition_repo.update(requisition)
            self._queue_repo.delete(entry.id)
            record_audit(
                self,
                action="requisition.item.restore",
                entity_type="requisition",
                entity_id=requisition.id,
                details={"item": restored.name, "queue_id": entry.id},
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        domain_events.requisitions_changed.emit(requisition.id)
        return requisition

    def remove_from_queue(self, queue_id: str) -> None:
        entry = self._require_queue_entry(queue_id)
        try:
            self._queue_repo.delete(entry.id)
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

    def clear_queue(self) -> None:
        try:
            self._queue_repo.clear()
            record_audit(self, action="requisition.queue.clear", entity_type="requisition_queue", entity_id="*")
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

    def _require_queue_entry(self, queue_id: str) -> InQueueItem:
        entry = self._queue_repo.get(queue_id)
        if entry is None:
            raise NotFoundError("Recycle bin entry not found.", code="QUEUE_ENTRY_NOT_FOUND")
        return entry

    def _require_account(self, name: str) -> None:
        if not name or self._account_repo.get_by_name(name) is None:
            raise NotFoundError(f"Account '{name}' not found.", code="ACCOUNT_NOT_FOUND")

    def _next_readable_id(self) -> str:
        highest = 0
        for requisition in self._requisition_repo.list_all():
            match = READABLE_ID_PATTERN.match(requisition.readable_id or "")
            if match:
                highest = max(highest, int(match.group(1)))
        return format_readable_id(highest + 1)

    @staticmethod
    def _ensure_open(requisition: Requisition) -> None:
        if requisition.status not in OPEN_STATUSES:
            raise PreconditionFailedError(
                f"Requisition is {requisition.status.value} and can no longer be changed.",
                code="REQUISITION_LOCKED",
            )

    @staticmethod
    def _next_status(current: RequisitionStatus, target: RequisitionStatus) -> RequisitionStatus:
        if not isinstance(target, RequisitionStatus):
            target = RequisitionStatus(str(target))
        if target not in OPEN_STATUSES:
            raise PreconditionFailedError(
                "Use approve or reject to close a requisition.",
                code="REQUISITION_STATUS_VIA_WORKFLOW",
            )
        if _STATUS_RANK[target] < _STATUS_RANK[current]:
            raise PreconditionFailedError(
                f"Cannot move a requisition back from '{current.value}' to '{target.value}'.",
                code="REQUISITION_STATUS_BACKWARDS",
            )
        return target

    @staticmethod
    def _normalize_items(items: Iterable[ItemInput]) -> List[RequisitionItem]:
        normalized: List[RequisitionItem] = []
        for raw in items:
            item = raw if isinstance(raw, RequisitionItem) else RequisitionItem.from_dict(dict(raw))
            item = copy.copy(item)
            if not item.name.strip():
                raise ValidationError("Line item name is required.", code="REQUISITION_ITEM_NAME_REQUIRED")
            if item.quantity < 0 or item.unit_price < 0 or item.amount < 0:
                raise ValidationError("Line item values cannot be negative.", code="QUANTITY_NEGATIVE")
            item.recompute_amount()
            normalized.append(item)
        return normalized


__all__ = [
    "RequisitionService",
    "format_readable_id",
    "OPEN_STATUSES",
    "APPROVABLE_STATUSES",
]
