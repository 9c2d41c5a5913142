from .models import AccountBalance, RequirementAvailability, StudentBalance
from .resolver import (
    availability_delta,
    classify_log_source,
    resolve_account_balance,
    resolve_item_stock,
    resolve_requirement_availability,
    resolve_student_balance,
)

__all__ = [
    "AccountBalance",
    "RequirementAvailability",
    "StudentBalance",
    "availability_delta",
    "classify_log_source",
    "resolve_account_balance",
    "resolve_item_stock",
    "resolve_requirement_availability",
    "resolve_student_balance",
]
