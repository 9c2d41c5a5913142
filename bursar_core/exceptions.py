# bursar_core/exceptions.py

class DomainError(Exception):
    """Base class for domain-level errors."""
    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when input is missing or violates field constraints."""


class NotFoundError(DomainError):
    """Raised when a referenced account, item, transfer or requisition does not exist."""


class BusinessRuleError(DomainError):
    """Raised when a ledger rule is violated (e.g., deleting an account still in use)."""


class PreconditionFailedError(BusinessRuleError):
    """Raised when a state-machine transition is not allowed from the current status."""


class ConflictError(DomainError):
    """Raised when optimistic locking detects a stale write."""
