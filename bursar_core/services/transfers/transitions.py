from __future__ import annotations

from typing import Dict, FrozenSet

from bursar_core.exceptions import PreconditionFailedError
from bursar_core.models import TransferStatus

ALLOWED_TRANSITIONS: Dict[TransferStatus, FrozenSet[TransferStatus]] = {
    TransferStatus.DRAFT: frozenset({TransferStatus.IN_TRANSIT}),
    TransferStatus.IN_TRANSIT: frozenset(
        {TransferStatus.COMPLETED, TransferStatus.APPROVED, TransferStatus.REJECTED}
    ),
    TransferStatus.COMPLETED: frozenset({TransferStatus.APPROVED, TransferStatus.REJECTED}),
    TransferStatus.APPROVED: frozenset(),
    TransferStatus.REJECTED: frozenset(),
}

CREATION_STATUSES = frozenset({TransferStatus.DRAFT, TransferStatus.IN_TRANSIT})


def is_terminal(status: TransferStatus) -> bool:
    return not ALLOWED_TRANSITIONS[status]


def can_transition(current: TransferStatus, target: TransferStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def ensure_transition(current: TransferStatus, target: TransferStatus) -> None:
    if can_transition(current, target):
        return
    if current == TransferStatus.REJECTED and target == TransferStatus.REJECTED:
        raise PreconditionFailedError(
            "Transfer has already been rejected.",
            code="TRANSFER_ALREADY_REJECTED",
        )
    raise PreconditionFailedError(
        f"Cannot move a transfer from '{current.value}' to '{target.value}'.",
        code="TRANSFER_TRANSITION_INVALID",
    )


__all__ = [
    "ALLOWED_TRANSITIONS",
    "CREATION_STATUSES",
    "is_terminal",
    "can_transition",
    "ensure_transition",
]
