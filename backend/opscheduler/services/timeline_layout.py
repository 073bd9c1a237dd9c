"""Derivation of the shared date axis and per-task bar geometry."""
from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Iterable, List, Literal, Optional, Sequence, Set, Tuple

from opscheduler.core.config import settings
from opscheduler.db.models.task import Task

Affordance = Literal["body", "left-handle", "right-handle", "connector"]


@dataclass(frozen=True)
class TaskGeometry:
    task_id: str
    row: int
    level: int
    offset_days: int
    duration_days: int
    left: float
    width: float
    top: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def center_y(self) -> float:
        return self.top + self.height / 2


@dataclass(frozen=True)
class TimelineProjection:
    grid_start: date
    total_days: int
    day_width: float
    viewport_width: float
    geometries: Tuple[TaskGeometry, ...]
    today_offset_days: Optional[int] = None

    @property
    def grid_end(self) -> date:
        return self.grid_start + timedelta(days=self.total_days - 1)

    @property
    def today_x(self) -> Optional[float]:
        if self.today_offset_days is None:
            return None
        return self.today_offset_days * self.day_width

    @property
    def display_order(self) -> List[str]:
        return [geometry.task_id for geometry in self.geometries]

    def geometry_for(self, task_id: str) -> Optional[TaskGeometry]:
        return self.by_id().get(task_id)

    def by_id(self) -> Dict[str, TaskGeometry]:
        return {geometry.task_id: geometry for geometry in self.geometries}


def days_between(start: date, end: date) -> int:
    return (end - start).days


def duration_days(task: Task) -> int:
    """Inclusive day count, never below one."""
    return max(1, days_between(task.start, task.end) + 1)


def grid_window(tasks: Sequence[Task], today: Optional[date] = None) -> Tuple[date, date]:
    """First and last day of the axis; the current month when there are no tasks."""
    if not tasks:
        anchor = today or date.today()
        last_day = calendar.monthrange(anchor.year, anchor.month)[1]
        return anchor.replace(day=1), anchor.replace(day=last_day)

    earliest = min(task.start for task in tasks)
    latest = max(max(task.end, task.start) for task in tasks)
    return (
        earliest - timedelta(days=settings.grid_lead_days),
        latest + timedelta(days=settings.grid_trail_days),
    )


def compute_levels(tasks: Iterable[Task]) -> Dict[str, int]:
    """Indentation depth per task; dangling or cyclic parent chains stop counting where they break."""
    by_id = {task.id: task for task in tasks}
    levels: Dict[str, int] = {}
    for task in by_id.values():
        depth = 0
        seen: Set[str] = {task.id}
        parent_id = task.parent_id
        while parent_id is not None and parent_id in by_id and parent_id not in seen:
            seen.add(parent_id)
            depth += 1
            parent_id = by_id[parent_id].parent_id
        levels[task.id] = depth
    return levels


def display_order(tasks: Sequence[Task]) -> List[Task]:
    """
    Roots by start date, each immediately followed by its start-sorted subtree.

    Ties keep input order. Tasks whose parent is missing are roots; tasks only reachable through a
    parent cycle are appended as extra roots so every task is listed exactly once.
    """
    position = {task.id: index for index, task in enumerate(tasks)}
    known = set(position)

    def sort_key(task: Task) -> Tuple[date, int]:
        return task.start, position[task.id]

    children: Dict[str, List[Task]] = {}
    roots: List[Task] = []
    for task in tasks:
        if task.parent_id is None or task.parent_id not in known or task.parent_id == task.id:
            roots.append(task)
        else:
            children.setdefault(task.parent_id, []).append(task)

    ordered: List[Task] = []
    placed: Set[str] = set()

    def visit(task: Task) -> None:
        stack = [task]
        while stack:
            current = stack.pop()
            if current.id in placed:
                continue
            placed.add(current.id)
            ordered.append(current)
            stack.extend(sorted(children.get(current.id, []), key=sort_key, reverse=True))

    for root in sorted(roots, key=sort_key):
        visit(root)

    leftovers = [task for task in tasks if task.id not in placed]
    for task in sorted(leftovers, key=sort_key):
        visit(task)
    return ordered


def build_projection(
    tasks: Sequence[Task],
    viewport_width: Optional[float] = None,
    today: Optional[date] = None,
) -> TimelineProjection:
    """Pure layout of `tasks` for a viewport of the given pixel width."""
    width = float(viewport_width if viewport_width is not None else settings.default_viewport_width)
    today = today or date.today()
    grid_start, grid_end = grid_window(tasks, today)
    total_days = days_between(grid_start, grid_end) + 1
    day_width = max(settings.min_day_width_px, width / total_days)
    row_height = settings.row_height_px
    levels = compute_levels(tasks)

    geometries: List[TaskGeometry] = []
    for row, task in enumerate(display_order(tasks)):
        offset = days_between(grid_start, task.start)
        span = duration_days(task)
        geometries.append(
            TaskGeometry(
                task_id=task.id,
                row=row,
                level=levels[task.id],
                offset_days=offset,
                duration_days=span,
                left=offset * day_width,
                width=span * day_width,
                top=row * row_height,
                height=row_height,
            )
        )

    today_offset = days_between(grid_start, today)
    return TimelineProjection(
        grid_start=grid_start,
        total_days=total_days,
        day_width=day_width,
        viewport_width=width,
        geometries=tuple(geometries),
        today_offset_days=today_offset if 0 <= today_offset < total_days else None,
    )


def hit_test(projection: TimelineProjection, x: float, y: float) -> Optional[Tuple[str, Affordance]]:
    """Resolve a pointer position to the bar under it and which part of the bar was hit."""
    handle = settings.handle_width_px
    connector = settings.connector_width_px
    for geometry in projection.geometries:
        if not geometry.top <= y < geometry.top + geometry.height:
            continue
        if geometry.right <= x < geometry.right + connector:
            return geometry.task_id, "connector"
        if not geometry.left <= x < geometry.right:
            return None
        edge = min(handle, geometry.width / 3)
        if x < geometry.left + edge:
            return geometry.task_id, "left-handle"
        if x >= geometry.right - edge:
            return geometry.task_id, "right-handle"
        return geometry.task_id, "body"
    return None
