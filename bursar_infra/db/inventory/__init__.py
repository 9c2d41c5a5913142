from bursar_infra.db.inventory.repository import (
    SqlAlchemyInventoryGroupRepository,
    SqlAlchemyInventoryItemRepository,
    SqlAlchemyInventoryListRepository,
    SqlAlchemyInventoryLogRepository,
    SqlAlchemyInventoryTransferRepository,
)

__all__ = [
    "SqlAlchemyInventoryListRepository",
    "SqlAlchemyInventoryGroupRepository",
    "SqlAlchemyInventoryItemRepository",
    "SqlAlchemyInventoryLogRepository",
    "SqlAlchemyInventoryTransferRepository",
]
