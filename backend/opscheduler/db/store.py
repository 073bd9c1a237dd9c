"""Process-wide in-memory state for the single local operator."""
from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional, Sequence

from opscheduler.db.models.audit_log import AuditLogEntry
from opscheduler.db.models.task import Task
from opscheduler.db.models.user import User
from opscheduler.services.interaction import InteractionController
from opscheduler.services.task_graph import TaskGraph

logger = logging.getLogger(__name__)

TasksCreatedCallback = Callable[[Sequence[Task], str], None]
TasksCommittedCallback = Callable[[Sequence[Task]], None]


class SchedulerStore:
    """
    Task table, assignable users, audit trail and the interaction controller.

    Collaborators observe changes through `on_tasks_created` / `on_tasks_committed`; by default
    task creation is recorded in the audit log.
    """

    def __init__(
        self,
        tasks: Iterable[Task] = (),
        users: Iterable[User] = (),
        *,
        actor: str = "scheduler",
        on_tasks_created: Optional[TasksCreatedCallback] = None,
        on_tasks_committed: Optional[TasksCommittedCallback] = None,
    ) -> None:
        self.graph = TaskGraph(tasks)
        self.users: List[User] = list(users)
        self.audit_log: List[AuditLogEntry] = []
        self.interaction = InteractionController()
        self.actor = actor
        self.on_tasks_created: TasksCreatedCallback = on_tasks_created or self.record_creation
        self.on_tasks_committed: Optional[TasksCommittedCallback] = on_tasks_committed

    def record_creation(self, tasks: Sequence[Task], description: str) -> None:
        recurring = any(task.recurring_instance_id for task in tasks)
        action = "Create Recurring Tasks" if recurring else "Create Task"
        self.audit_log.append(AuditLogEntry(user=self.actor, action=action, details=description))
        logger.info("%s: %s", action, description)
