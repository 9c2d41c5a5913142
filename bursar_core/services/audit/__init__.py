from .helpers import actor_of, record_audit
from .service import AuditService

__all__ = ["AuditService", "actor_of", "record_audit"]
