"""Task record held in the in-memory task table."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Literal, Optional, Tuple
from uuid import uuid4

Priority = Literal["Low", "Medium", "High"]
TaskStatus = Literal["pending", "in-progress", "completed"]

PRIORITIES: Tuple[str, ...] = ("Low", "Medium", "High")
STATUSES: Tuple[str, ...] = ("pending", "in-progress", "completed")

# Fields a batch patch may replace; `id` is the row key and never changes.
EDITABLE_FIELDS = frozenset(
    {
        "name",
        "description",
        "priority",
        "status",
        "start",
        "end",
        "assignee_id",
        "dependencies",
        "parent_id",
        "recurring_instance_id",
    }
)


def new_task_id() -> str:
    return f"task-{uuid4().hex[:12]}"


@dataclass(frozen=True)
class Task:
    id: str
    name: str
    start: date
    end: date
    description: str = ""
    priority: Priority = "Medium"
    status: TaskStatus = "pending"
    assignee_id: Optional[str] = None
    dependencies: Tuple[str, ...] = field(default_factory=tuple)
    parent_id: Optional[str] = None
    recurring_instance_id: Optional[str] = None

    @property
    def is_inverted(self) -> bool:
        return self.end < self.start
