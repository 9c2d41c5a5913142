from .service import TransferService
from .transitions import ALLOWED_TRANSITIONS, can_transition, ensure_transition, is_terminal

__all__ = [
    "TransferService",
    "ALLOWED_TRANSITIONS",
    "can_transition",
    "ensure_transition",
    "is_terminal",
]
