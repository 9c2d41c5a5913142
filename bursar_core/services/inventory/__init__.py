from .service import InventoryService
from .stock import StockBook

__all__ = ["InventoryService", "StockBook"]
