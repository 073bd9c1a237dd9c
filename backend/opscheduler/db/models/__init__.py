"""Record types held by the in-memory scheduler store."""
from opscheduler.db.models.audit_log import AuditLogEntry
from opscheduler.db.models.task import Task
from opscheduler.db.models.user import User

__all__ = [
    "AuditLogEntry",
    "Task",
    "User",
]
