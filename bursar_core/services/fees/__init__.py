from .service import FeeLedgerService

__all__ = ["FeeLedgerService"]
