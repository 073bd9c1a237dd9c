"""Task listing, creation and direct-edit API routes."""
from __future__ import annotations

from time import perf_counter
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status

from opscheduler.api.schemas.task import (
    RecurringTaskRequest,
    TaskBatchUpdateRequest,
    TaskCreateRequest,
    TaskDescendantsResponse,
    TaskListResponse,
    TaskPayload,
)
from opscheduler.db.deps import get_store
from opscheduler.db.models.task import Task
from opscheduler.db.store import SchedulerStore
from opscheduler.observability.metrics import log_metric
from opscheduler.observability.tracing import trace
from opscheduler.services.recurrence import RecurrenceRule
from opscheduler.services.schedule_service import (
    InvalidEditError,
    TaskNotFoundError,
    commit_updates,
    create_recurring_tasks,
    create_task,
    get_task,
    list_tasks,
    validate_updates,
)

router = APIRouter()


@router.get("/tasks", response_model=TaskListResponse, tags=["tasks"])
def list_tasks_endpoint(request: Request, store: SchedulerStore = Depends(get_store)) -> TaskListResponse:
    """List tasks in timeline display order."""
    request_id = getattr(request.state, "request_id", None)
    with trace("task.list", request_id=request_id):
        tasks = list_tasks(store)
    log_metric("task.list.count", len(tasks))
    return _task_list(tasks, request_id)


@router.post("/tasks", response_model=TaskListResponse, status_code=status.HTTP_201_CREATED, tags=["tasks"])
def create_task_endpoint(
    payload: TaskCreateRequest,
    request: Request,
    store: SchedulerStore = Depends(get_store),
) -> TaskListResponse:
    request_id = getattr(request.state, "request_id", None)
    with trace("task.create", metadata={"name": payload.name}, request_id=request_id):
        try:
            task = create_task(store, payload.to_task())
        except InvalidEditError as exc:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    log_metric("task.create.success", 1, metadata={"task_id": task.id})
    return _task_list([task], request_id)


@router.post(
    "/tasks/recurring",
    response_model=TaskListResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["tasks"],
)
def create_recurring_tasks_endpoint(
    payload: RecurringTaskRequest,
    request: Request,
    store: SchedulerStore = Depends(get_store),
) -> TaskListResponse:
    """Expand a recurring task request; an empty list means the rule produced no instances."""
    request_id = getattr(request.state, "request_id", None)
    start = perf_counter()
    metadata = {"frequency": payload.frequency, "end_date": payload.end_date.isoformat(), "request_id": request_id}
    with trace("task.create_recurring", metadata=metadata, request_id=request_id):
        if payload.template.end < payload.template.start:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="Task end date must not be before its start date",
            )
        rule = RecurrenceRule(frequency=payload.frequency, end_date=payload.end_date)
        tasks = create_recurring_tasks(store, payload.template.to_task(), rule)

    latency_ms = (perf_counter() - start) * 1000
    log_metric("task.create_recurring.count", len(tasks), metadata={"frequency": payload.frequency})
    log_metric("task.create_recurring.latency_ms", latency_ms)
    return _task_list(tasks, request_id)


@router.patch("/tasks", response_model=TaskListResponse, tags=["tasks"])
def update_tasks_endpoint(
    payload: TaskBatchUpdateRequest,
    request: Request,
    store: SchedulerStore = Depends(get_store),
) -> TaskListResponse:
    """Apply a direct-edit batch; the response lists the tasks that changed."""
    request_id = getattr(request.state, "request_id", None)
    patches = [(item.id, item.to_patch()) for item in payload.updates]
    with trace("task.update", metadata={"count": len(patches)}, request_id=request_id):
        try:
            validate_updates(store, patches)
        except TaskNotFoundError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
        except InvalidEditError as exc:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
        updated = commit_updates(store, patches)
    log_metric("task.update.count", len(updated))
    return _task_list(updated, request_id)


@router.get("/tasks/{task_id}/descendants", response_model=TaskDescendantsResponse, tags=["tasks"])
def task_descendants_endpoint(
    task_id: str,
    request: Request,
    store: SchedulerStore = Depends(get_store),
) -> TaskDescendantsResponse:
    request_id = getattr(request.state, "request_id", None)
    try:
        get_task(store, task_id)
    except TaskNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    return TaskDescendantsResponse(
        task_id=task_id,
        descendants=[TaskPayload.from_task(task) for task in store.graph.descendants(task_id)],
        request_id=request_id or "",
    )


def _task_list(tasks: List[Task], request_id: str | None) -> TaskListResponse:
    return TaskListResponse(tasks=[TaskPayload.from_task(task) for task in tasks], request_id=request_id or "")
