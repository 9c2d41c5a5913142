from bursar_infra.db.requisition.repository import (
    SqlAlchemyRequisitionQueueRepository,
    SqlAlchemyRequisitionRepository,
)

__all__ = ["SqlAlchemyRequisitionRepository", "SqlAlchemyRequisitionQueueRepository"]
