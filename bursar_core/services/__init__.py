from .accounts import AccountService
from .audit import AuditService
from .budget import BudgetService
from .fees import FeeLedgerService
from .inventory import InventoryService, StockBook
from .ledger import LedgerService
from .requisition import RequisitionService
from .transfers import TransferService

__all__ = [
    "AccountService",
    "AuditService",
    "BudgetService",
    "FeeLedgerService",
    "InventoryService",
    "LedgerService",
    "RequisitionService",
    "StockBook",
    "TransferService",
]
