"""Demo rows loaded into a fresh store when SEED_DEMO_DATA is enabled."""
from __future__ import annotations

from datetime import date
from typing import List

from opscheduler.db.models.task import Task
from opscheduler.db.models.user import User


def demo_users() -> List[User]:
    return [
        User(id="user-1", name="Alice Johnson", email="alice@example.com", role="Admin"),
        User(id="user-2", name="Bob Williams", email="bob@example.com", role="Editor"),
        User(id="user-3", name="Charlie Brown", email="charlie@example.com", role="Viewer"),
        User(id="user-4", name="Diana Prince", email="diana@example.com", role="Editor", status="Pending"),
    ]


def demo_tasks() -> List[Task]:
    return [
        Task(
            id="task-1",
            name="Prepare Q3 Audit Report",
            start=date(2024, 8, 5),
            end=date(2024, 8, 9),
            assignee_id="user-1",
            status="completed",
            priority="High",
        ),
        Task(
            id="task-2",
            name="Review Kitchen SOPs",
            start=date(2024, 8, 8),
            end=date(2024, 8, 12),
            assignee_id="user-2",
            status="in-progress",
        ),
        Task(
            id="task-3",
            name="Finalize HACCP Plan",
            start=date(2024, 8, 13),
            end=date(2024, 8, 16),
            dependencies=("task-2",),
            assignee_id="user-1",
            priority="High",
        ),
        Task(
            id="task-4",
            name="Schedule Fire Safety Training",
            start=date(2024, 8, 10),
            end=date(2024, 8, 14),
            assignee_id="user-3",
            status="in-progress",
        ),
        Task(
            id="task-5",
            name="Distribute Training Materials",
            start=date(2024, 8, 15),
            end=date(2024, 8, 16),
            dependencies=("task-4",),
            parent_id="task-4",
            assignee_id="user-3",
            priority="Low",
        ),
        Task(
            id="task-6",
            name="Present Audit Findings",
            start=date(2024, 8, 19),
            end=date(2024, 8, 20),
            dependencies=("task-1", "task-3"),
            assignee_id="user-1",
        ),
    ]
