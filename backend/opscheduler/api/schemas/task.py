"""Schemas for task listing, creation and direct edits."""
from __future__ import annotations

from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from opscheduler.db.models.task import Task, new_task_id


class TaskPayload(BaseModel):
    id: str
    name: str
    description: str
    priority: Literal["Low", "Medium", "High"]
    status: Literal["pending", "in-progress", "completed"]
    start: date
    end: date
    assignee_id: Optional[str]
    dependencies: List[str]
    parent_id: Optional[str]
    recurring_instance_id: Optional[str]

    @classmethod
    def from_task(cls, task: Task) -> "TaskPayload":
        return cls(
            id=task.id,
            name=task.name,
            description=task.description,
            priority=task.priority,
            status=task.status,
            start=task.start,
            end=task.end,
            assignee_id=task.assignee_id,
            dependencies=list(task.dependencies),
            parent_id=task.parent_id,
            recurring_instance_id=task.recurring_instance_id,
        )


class TaskCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = ""
    priority: Literal["Low", "Medium", "High"] = "Medium"
    status: Literal["pending", "in-progress", "completed"] = "pending"
    start: date
    end: date
    assignee_id: Optional[str] = None
    dependencies: List[str] = Field(default_factory=list)
    parent_id: Optional[str] = None

    def to_task(self) -> Task:
        task_id = new_task_id()
        return Task(
            id=task_id,
            name=self.name,
            description=self.description,
            priority=self.priority,
            status=self.status,
            start=self.start,
            end=self.end,
            assignee_id=self.assignee_id,
            dependencies=tuple(dep for dep in dict.fromkeys(self.dependencies) if dep != task_id),
            parent_id=self.parent_id,
        )


class RecurringTaskRequest(BaseModel):
    template: TaskCreateRequest
    frequency: Literal["daily", "weekly", "monthly"]
    end_date: date


class TaskPatchItem(BaseModel):
    id: str
    name: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[Literal["Low", "Medium", "High"]] = None
    status: Optional[Literal["pending", "in-progress", "completed"]] = None
    start: Optional[date] = None
    end: Optional[date] = None
    assignee_id: Optional[str] = None
    dependencies: Optional[List[str]] = None
    parent_id: Optional[str] = None

    def to_patch(self) -> dict:
        """Only the fields the client actually sent; explicit nulls clear optional references."""
        values = self.model_dump(exclude_unset=True, exclude={"id"})
        required = {"name", "description", "priority", "status", "start", "end", "dependencies"}
        return {key: value for key, value in values.items() if value is not None or key not in required}


class TaskBatchUpdateRequest(BaseModel):
    updates: List[TaskPatchItem] = Field(..., min_length=1)


class TaskListResponse(BaseModel):
    tasks: List[TaskPayload]
    request_id: str


class TaskDescendantsResponse(BaseModel):
    task_id: str
    descendants: List[TaskPayload]
    request_id: str
