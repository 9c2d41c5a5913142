from .grouping import PRIORITY_GROUP, RequisitionItemGroup, group_requisition_items
from .service import RequisitionService, format_readable_id

__all__ = [
    "RequisitionService",
    "RequisitionItemGroup",
    "PRIORITY_GROUP",
    "format_readable_id",
    "group_requisition_items",
]
