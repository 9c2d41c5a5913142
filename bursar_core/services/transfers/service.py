from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Mapping, Sequence

from sqlalchemy.orm import Session

from bursar_core.events.domain_events import domain_events
from bursar_core.exceptions import NotFoundError, PreconditionFailedError, ValidationError
from bursar_core.interfaces import InventoryTransferRepository
from bursar_core.models import (
    InventoryAction,
    InventoryItem,
    InventoryTransfer,
    LogSource,
    TransferLine,
    TransferStatus,
    TransferType,
)
from bursar_core.domain.identifiers import generate_id, utc_now
from bursar_core.services.audit.helpers import actor_of, record_audit
from bursar_core.services.common.guards import (
    ensure_expected_version,
    require_positive,
    require_reason,
)
from bursar_core.services.inventory.stock import StockBook
from bursar_core.services.transfers.transitions import CREATION_STATUSES, ensure_transition

logger = logging.getLogger(__name__)

LineInput = TransferLine | Mapping[str, object]


class TransferService:
    """
    Inter-site stock movements.

    Stock effects are booked when a transfer goes in-transit (at creation, or
    when a draft is dispatched). Rejecting a transfer never deletes anything:
    the original row is marked rejected, a mirror transfer is recorded and each
    line gets a compensating log row, all in one unit of work.
    """

    def __init__(
        self,
        session: Session,
        transfer_repo: InventoryTransferRepository,
        stock: StockBook,
        audit_service=None,
    ):
        self._session: Session = session
        self._transfer_repo: InventoryTransferRepository = transfer_repo
        self._stock = stock
        self._audit_service = audit_service

    def add_inventory_transfer(
        self,
        type: TransferType,
        items: Sequence[LineInput],
        source: str,
        destination: str,
        status: TransferStatus = TransferStatus.IN_TRANSIT,
        notes: str = "",
    ) -> InventoryTransfer:
        if not isinstance(type, TransferType):
            type = TransferType(str(type))
        if not isinstance(status, TransferStatus):
            status = TransferStatus(str(status))
        if status not in CREATION_STATUSES:
            raise ValidationError(
                "New transfers start as draft or in-transit.",
                code="TRANSFER_STATUS_INVALID",
            )
        source = (source or "").strip()
        destination = (destination or "").strip()
        if not source or not destination:
            raise ValidationError(
                "Transfer source and destination are required.",
                code="TRANSFER_PARTY_REQUIRED",
            )
        if not items:
            raise ValidationError("Transfer needs at least one item.", code="TRANSFER_EMPTY")

        cache: Dict[str, InventoryItem] = {}
        lines = [self._normalize_line(raw, cache) for raw in items]
        transfer = InventoryTransfer.create(
            type=type,
            items=lines,
            source=source,
            destination=destination,
            status=status,
            notes=(notes or "").strip(),
        )
        if status == TransferStatus.IN_TRANSIT:
            self._check_outbound_stock(transfer, cache)

        try:
            self._transfer_repo.add(transfer)
            if status == TransferStatus.IN_TRANSIT:
                self._book_dispatch(transfer, cache)
            record_audit(
                self,
                action="transfer.add",
                entity_type="inventory_transfer",
                entity_id=transfer.id,
                details={
                    "type": transfer.type.value,
                    "status": transfer.status.value,
                    "lines": len(transfer.items),
                },
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        logger.info(
            "Transfer %s (%s) %s -> %s recorded as %s",
            transfer.id,
            transfer.type.value,
            transfer.source,
            transfer.destination,
            transfer.status.value,
        )
        domain_events.transfers_changed.emit(transfer.id)
        self._emit_items(transfer.items)
        return transfer

    def update_inventory_transfer(
        self,
        transfer_id: str,
        status: TransferStatus,
        rejection_reason: str | None = None,
        expected_version: int | None = None,
    ) -> InventoryTransfer:
        if not isinstance(status, TransferStatus):
            status = TransferStatus(str(status))
        transfer = self.get_transfer(transfer_id)
        ensure_expected_version(transfer, expected_version, label="Transfer")
        try:
            ensure_transition(transfer.status, status)
        except PreconditionFailedError:
            logger.warning(
                "Rejected transfer %s move %s -> %s",
                transfer.id,
                transfer.status.value,
                status.value,
            )
            raise

        if status == TransferStatus.REJECTED:
            reason = require_reason(
                rejection_reason,
                code="TRANSFER_REJECTION_REASON_REQUIRED",
                message="A rejection reason is required.",
            )
            return self._reject(transfer, reason)

        previous = transfer.status
        cache: Dict[str, InventoryItem] = {}
        if status == TransferStatus.IN_TRANSIT:
            for line in transfer.items:
                cache.setdefault(line.item_id, self._stock.require_item(line.item_id))
            self._check_outbound_stock(transfer, cache)
        transfer.status = status
        if status == TransferStatus.APPROVED:
            transfer.approved_by = actor_of(self) or None

        try:
            self._transfer_repo.update(transfer)
            if status == TransferStatus.IN_TRANSIT:
                self._book_dispatch(transfer, cache)
            record_audit(
                self,
                action=f"transfer.{status.value}",
                entity_type="inventory_transfer",
                entity_id=transfer.id,
                details={"from": previous.value, "to": status.value},
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        logger.info("Transfer %s moved %s -> %s", transfer.id, previous.value, status.value)
        domain_events.transfers_changed.emit(transfer.id)
        if status == TransferStatus.IN_TRANSIT:
            self._emit_items(transfer.items)
        return transfer

    def get_transfer(self, transfer_id: str) -> InventoryTransfer:
        transfer = self._transfer_repo.get(transfer_id)
        if transfer is None:
            raise NotFoundError("Transfer not found.", code="TRANSFER_NOT_FOUND")
        return transfer

    def list_transfers(self, status: TransferStatus | None = None) -> List[InventoryTransfer]:
        return self._transfer_repo.list_by_status(status)

    def _reject(self, transfer: InventoryTransfer, reason: str) -> InventoryTransfer:
        if transfer.reversal_of is not None:
            raise PreconditionFailedError(
                "A reversal transfer cannot itself be rejected.",
                code="TRANSFER_REVERSAL_NOT_REJECTABLE",
            )
        if self._transfer_repo.list_reversals_of(transfer.id):
            raise PreconditionFailedError(
                "Transfer has already been reversed.",
                code="TRANSFER_ALREADY_REJECTED",
            )

        transfer.status = TransferStatus.REJECTED
        transfer.rejection_reason = reason
        reversal = InventoryTransfer(
            id=generate_id(),
            type=transfer.type.flipped(),
            items=list(transfer.items),
            source=transfer.destination,
            destination=transfer.source,
            status=TransferStatus.IN_TRANSIT,
            date=utc_now(),
            notes=f"Reversal of rejected transfer {transfer.id}. Reason: {reason}",
            reversal_of=transfer.id,
        )

        try:
            self._transfer_repo.update(transfer)
            self._transfer_repo.add(reversal)
            self._book_reversal(transfer)
            record_audit(
                self,
                action="transfer.rejected",
                entity_type="inventory_transfer",
                entity_id=transfer.id,
                details={"reason": reason, "reversal_id": reversal.id},
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e

        logger.info("Transfer %s rejected; reversal %s recorded", transfer.id, reversal.id)
        domain_events.transfers_changed.emit(transfer.id)
        domain_events.transfers_changed.emit(reversal.id)
        self._emit_items(transfer.items)
        return transfer

    def _normalize_line(self, raw: LineInput, cache: Dict[str, InventoryItem]) -> TransferLine:
        if isinstance(raw, TransferLine):
            item_id, quantity = raw.item_id, raw.quantity
        else:
            item_id, quantity = str(raw.get("item_id") or ""), raw.get("quantity")
        quantity = require_positive(quantity, field_name="Quantity", code="QUANTITY_NOT_POSITIVE")
        item = cache.get(item_id) or self._stock.require_item(item_id)
        cache[item.id] = item
        return TransferLine(item_id=item.id, name=item.name, quantity=quantity)

    def _check_outbound_stock(self, transfer: InventoryTransfer, cache: Dict[str, InventoryItem]) -> None:
        if transfer.type != TransferType.OUT:
            return
        requested: Dict[str, float] = defaultdict(float)
        for line in transfer.items:
            requested[line.item_id] += line.quantity
        for item_id, quantity in requested.items():
            item = cache[item_id]
            available = self._stock.available(item)
            if quantity > available:
                logger.warning(
                    "Refused transfer of %g %s: only %g available", quantity, item.name, available
                )
                raise ValidationError(
                    f"Not enough {item.name} in stock: requested {quantity:g}, available {available:g}.",
                    code="INSUFFICIENT_STOCK",
                )

    def _book_dispatch(self, transfer: InventoryTransfer, cache: Dict[str, InventoryItem]) -> None:
        user = actor_of(self)
        for line in transfer.items:
            item = cache.get(line.item_id) or self._stock.require_item(line.item_id)
            cache[item.id] = item
            if transfer.type == TransferType.OUT:
                self._stock.apply(
                    item,
                    action=InventoryAction.REDUCE,
                    source=LogSource.TRANSFER_OUT,
                    quantity_change=line.quantity,
                    new_quantity=float(item.quantity or 0.0) - line.quantity,
                    comment=f"Transfer OUT to {transfer.destination}",
                    user=user,
                )
            else:
                self._stock.apply(
                    item,
                    action=InventoryAction.ADD,
                    source=LogSource.TRANSFER_IN,
                    quantity_change=line.quantity,
                    new_quantity=float(item.quantity or 0.0) + line.quantity,
                    comment=f"Transfer IN from {transfer.source}",
                    user=user,
                )

    def _book_reversal(self, transfer: InventoryTransfer) -> None:
        user = actor_of(self)
        cache: Dict[str, InventoryItem] = {}
        for line in transfer.items:
            item = cache.get(line.item_id) or self._stock.require_item(line.item_id)
            cache[item.id] = item
            if transfer.type == TransferType.OUT:
                self._stock.apply(
                    item,
                    action=InventoryAction.REDUCE,
                    source=LogSource.TRANSFER_OUT,
                    quantity_change=-line.quantity,
                    new_quantity=float(item.quantity or 0.0) + line.quantity,
                    comment=f"Reversal: Rejected Transfer OUT to {transfer.destination}",
                    user=user,
                )
            else:
                self._stock.apply(
                    item,
                    action=InventoryAction.ADD,
                    source=LogSource.TRANSFER_IN,
                    quantity_change=-line.quantity,
                    new_quantity=max(0.0, float(item.quantity or 0.0) - line.quantity),
                    comment=f"Reversal: Rejected Transfer IN from {transfer.source}",
                    user=user,
                )

    @staticmethod
    def _emit_items(lines: Iterable[TransferLine]) -> None:
        for item_id in dict.fromkeys(line.item_id for line in lines):
            domain_events.inventory_changed.emit(item_id)


__all__ = ["TransferService"]
