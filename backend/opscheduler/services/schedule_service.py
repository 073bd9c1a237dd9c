"""Scheduler operations used by the API layer and by embedding collaborators."""
from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Tuple

from opscheduler.db.models.task import Task
from opscheduler.db.models.user import User
from opscheduler.db.store import SchedulerStore
from opscheduler.observability.metrics import log_metric
from opscheduler.services.dependency_paths import DependencyPath, dependency_paths
from opscheduler.services.interaction import Gesture, GesturePreview, LinkGesture, preview_gesture
from opscheduler.services.recurrence import RecurrenceRule, describe_series, expand_recurrence
from opscheduler.services.task_graph import PatchList
from opscheduler.services.timeline_layout import (
    Affordance,
    TimelineProjection,
    build_projection,
    display_order,
    hit_test,
)

logger = logging.getLogger(__name__)


class TaskNotFoundError(ValueError):
    """Referenced task id is not in the task table."""


class InvalidEditError(ValueError):
    """A direct edit would leave the task table inconsistent."""


def list_tasks(store: SchedulerStore) -> List[Task]:
    """Tasks in timeline display order."""
    return display_order(store.graph.tasks())


def get_task(store: SchedulerStore, task_id: str) -> Task:
    task = store.graph.get(task_id)
    if task is None:
        raise TaskNotFoundError(f"Task {task_id} not found")
    return task


def assignable_users(store: SchedulerStore) -> List[User]:
    return [user for user in store.users if user.status == "Active"]


def create_task(store: SchedulerStore, task: Task) -> Task:
    if task.is_inverted:
        raise InvalidEditError("Task end date must not be before its start date")
    store.graph.add_tasks([task])
    store.on_tasks_created([task], f"Created task '{task.name}' ({task.start.isoformat()} to {task.end.isoformat()})")
    log_metric("tasks.created", 1, metadata={"task_id": task.id})
    return task


def create_recurring_tasks(store: SchedulerStore, template: Task, rule: RecurrenceRule) -> List[Task]:
    """
    Expand `template` under `rule` and add the whole series in one step.

    A rule ending before the template's own end date is an invalid temporal edit and creates nothing.
    """
    if rule.end_date < template.end:
        logger.info(
            "Ignoring recurrence for %r: end_date %s is before template end %s",
            template.name,
            rule.end_date.isoformat(),
            template.end.isoformat(),
        )
        return []

    instances = expand_recurrence(template, rule)
    if not instances:
        return []
    store.graph.add_tasks(instances)
    store.on_tasks_created(instances, describe_series(template, rule, len(instances)))
    log_metric("tasks.recurring.created", len(instances), metadata={"frequency": rule.frequency})
    return instances


def validate_updates(store: SchedulerStore, patches: PatchList) -> None:
    for task_id, _ in patches:
        get_task(store, task_id)
    reason = store.graph.validate_batch(patches)
    if reason:
        raise InvalidEditError(reason)


def commit_updates(store: SchedulerStore, patches: PatchList) -> List[Task]:
    """Apply one batch update and hand the changed tasks to the commit callback."""
    if not patches:
        return []
    changed = store.graph.apply_batch(patches)
    if changed and store.on_tasks_committed is not None:
        store.on_tasks_committed(changed)
    log_metric("tasks.committed", len(changed))
    return changed


def build_timeline(
    store: SchedulerStore,
    viewport_width: Optional[float] = None,
    today: Optional[date] = None,
) -> Tuple[TimelineProjection, List[DependencyPath]]:
    """Projection and dependency curves for the committed task table."""
    tasks = store.graph.tasks()
    projection = build_projection(tasks, viewport_width, today)
    return projection, dependency_paths(tasks, projection)


def begin_gesture(
    store: SchedulerStore,
    *,
    x: float,
    y: float,
    task_id: Optional[str] = None,
    affordance: Optional[Affordance] = None,
    viewport_width: Optional[float] = None,
    today: Optional[date] = None,
) -> Gesture:
    """
    Start a gesture from a pointer-down.

    When the caller does not name the task, task and affordance are resolved by hit-testing the
    committed projection. A named task without an affordance is grabbed by its body.
    """
    if task_id is None:
        projection, _ = build_timeline(store, viewport_width, today)
        hit = hit_test(projection, x, y)
        if hit is None:
            raise TaskNotFoundError("No task bar under the pointer")
        task_id, affordance = hit
    task = get_task(store, task_id)
    affordance = affordance or "body"
    return store.interaction.begin(affordance, task, store.graph, x, y)


def update_gesture(
    store: SchedulerStore,
    *,
    x: float,
    y: float,
    target_id: Optional[str] = None,
    viewport_width: Optional[float] = None,
    today: Optional[date] = None,
) -> Gesture:
    projection, _ = build_timeline(store, viewport_width, today)
    target_id = _resolve_link_target(store, projection, x, y, target_id)
    return store.interaction.move(x, y, projection.day_width, target_id)


def end_gesture(
    store: SchedulerStore,
    *,
    x: float,
    y: float,
    target_id: Optional[str] = None,
    viewport_width: Optional[float] = None,
    today: Optional[date] = None,
) -> List[Task]:
    """Release the active gesture; its outcome is committed as a single batch update."""
    projection, _ = build_timeline(store, viewport_width, today)
    target_id = _resolve_link_target(store, projection, x, y, target_id)
    patches = store.interaction.release(store.graph, x, y, projection.day_width, target_id)
    return commit_updates(store, patches)


def cancel_gesture(store: SchedulerStore) -> Optional[Gesture]:
    return store.interaction.cancel()


def gesture_preview(
    store: SchedulerStore,
    viewport_width: Optional[float] = None,
    today: Optional[date] = None,
) -> Optional[GesturePreview]:
    gesture = store.interaction.active
    if gesture is None:
        return None
    projection, _ = build_timeline(store, viewport_width, today)
    return preview_gesture(gesture, projection)


def _resolve_link_target(
    store: SchedulerStore,
    projection: TimelineProjection,
    x: float,
    y: float,
    target_id: Optional[str],
) -> Optional[str]:
    if not isinstance(store.interaction.active, LinkGesture) or target_id is not None:
        return target_id
    hit = hit_test(projection, x, y)
    return hit[0] if hit else None
