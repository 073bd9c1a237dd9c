"""Pointer-gesture state machine for moving, resizing and linking timeline bars."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from datetime import timedelta
from typing import ClassVar, Dict, List, Optional, Tuple, Union

from opscheduler.db.models.task import Task
from opscheduler.services.task_graph import PatchList, TaskGraph
from opscheduler.services.timeline_layout import Affordance, TaskGeometry, TimelineProjection

logger = logging.getLogger(__name__)


class GestureInProgressError(RuntimeError):
    """A gesture was started while another one is still active."""


class NoActiveGestureError(RuntimeError):
    """A pointer update or release arrived with no gesture in flight."""


@dataclass(frozen=True)
class MoveGesture:
    kind: ClassVar[str] = "move"
    task_id: str
    origin_x: float
    descendant_ids: Tuple[str, ...] = ()
    day_delta: int = 0


@dataclass(frozen=True)
class ResizeStartGesture:
    kind: ClassVar[str] = "resize-start"
    task_id: str
    origin_x: float
    day_delta: int = 0


@dataclass(frozen=True)
class ResizeEndGesture:
    kind: ClassVar[str] = "resize-end"
    task_id: str
    origin_x: float
    day_delta: int = 0


@dataclass(frozen=True)
class LinkGesture:
    kind: ClassVar[str] = "link"
    task_id: str
    origin_x: float
    origin_y: float
    pointer_x: float
    pointer_y: float
    target_id: Optional[str] = None


Gesture = Union[MoveGesture, ResizeStartGesture, ResizeEndGesture, LinkGesture]


@dataclass(frozen=True)
class GesturePreview:
    """Overlay for the in-flight gesture; the task table is untouched until release."""

    kind: str
    task_id: str
    day_delta: int
    geometries: Tuple[TaskGeometry, ...]
    valid: bool
    link_line: Optional[Tuple[float, float, float, float]] = None


def start_gesture(affordance: Affordance, task: Task, graph: TaskGraph, x: float, y: float) -> Gesture:
    """Create the gesture matching the bar affordance under the pointer."""
    if affordance == "body":
        return MoveGesture(
            task_id=task.id,
            origin_x=x,
            descendant_ids=tuple(sorted(graph.descendant_ids(task.id))),
        )
    if affordance == "left-handle":
        return ResizeStartGesture(task_id=task.id, origin_x=x)
    if affordance == "right-handle":
        return ResizeEndGesture(task_id=task.id, origin_x=x)
    if affordance == "connector":
        return LinkGesture(task_id=task.id, origin_x=x, origin_y=y, pointer_x=x, pointer_y=y)
    raise ValueError(f"Unknown affordance: {affordance}")


def day_delta_for(origin_x: float, x: float, day_width: float) -> int:
    if day_width <= 0:
        return 0
    # half-day ties snap forward, never to the nearest even day
    return math.floor((x - origin_x) / day_width + 0.5)


def track_pointer(
    gesture: Gesture,
    x: float,
    y: float,
    day_width: float,
    target_id: Optional[str] = None,
) -> Gesture:
    """Return the gesture updated for a new pointer position."""
    if isinstance(gesture, LinkGesture):
        return replace(gesture, pointer_x=x, pointer_y=y, target_id=target_id)
    return replace(gesture, day_delta=day_delta_for(gesture.origin_x, x, day_width))


def preview_gesture(gesture: Gesture, projection: TimelineProjection) -> GesturePreview:
    """Pure preview geometry for `gesture` over the committed projection."""
    by_id = projection.by_id()
    source = by_id.get(gesture.task_id)
    if isinstance(gesture, LinkGesture):
        line = None
        if source is not None:
            line = (source.right, source.center_y, gesture.pointer_x, gesture.pointer_y)
        valid = gesture.target_id is not None and gesture.target_id != gesture.task_id
        return GesturePreview(
            kind=gesture.kind,
            task_id=gesture.task_id,
            day_delta=0,
            geometries=(),
            valid=valid,
            link_line=line,
        )

    shift = gesture.day_delta * projection.day_width
    moved: List[TaskGeometry] = []
    valid = True
    if isinstance(gesture, MoveGesture):
        for task_id in (gesture.task_id, *gesture.descendant_ids):
            geometry = by_id.get(task_id)
            if geometry is not None:
                moved.append(
                    replace(geometry, offset_days=geometry.offset_days + gesture.day_delta, left=geometry.left + shift)
                )
    elif source is not None:
        if isinstance(gesture, ResizeStartGesture):
            span = source.duration_days - gesture.day_delta
            moved.append(
                replace(
                    source,
                    offset_days=source.offset_days + gesture.day_delta,
                    duration_days=span,
                    left=source.left + shift,
                    width=source.width - shift,
                )
            )
        else:
            span = source.duration_days + gesture.day_delta
            moved.append(replace(source, duration_days=span, width=source.width + shift))
        valid = span >= 1

    return GesturePreview(
        kind=gesture.kind,
        task_id=gesture.task_id,
        day_delta=gesture.day_delta,
        geometries=tuple(moved),
        valid=valid,
    )


def commit_patches(gesture: Gesture, graph: TaskGraph) -> PatchList:
    """
    Translate a released gesture into batch-update patches.

    Invalid or degenerate outcomes (inverted resize, self or duplicate link, zero delta) produce [].
    """
    task = graph.get(gesture.task_id)
    if task is None:
        return []

    if isinstance(gesture, LinkGesture):
        target = graph.get(gesture.target_id) if gesture.target_id else None
        if target is None or target.id == task.id or task.id in target.dependencies:
            return []
        return [(target.id, {"dependencies": (*target.dependencies, task.id)})]

    delta = timedelta(days=gesture.day_delta)
    if not gesture.day_delta:
        return []

    if isinstance(gesture, MoveGesture):
        patches: List[Tuple[str, Dict[str, object]]] = []
        for task_id in (gesture.task_id, *gesture.descendant_ids):
            current = graph.get(task_id)
            if current is not None:
                patches.append((task_id, {"start": current.start + delta, "end": current.end + delta}))
        return patches

    if isinstance(gesture, ResizeStartGesture):
        new_start = task.start + delta
        if new_start > task.end:
            return []
        return [(task.id, {"start": new_start})]

    new_end = task.end + delta
    if new_end < task.start:
        return []
    return [(task.id, {"end": new_end})]


class InteractionController:
    """Holds the single in-flight gesture for the local operator."""

    def __init__(self) -> None:
        self.active: Optional[Gesture] = None

    @property
    def is_active(self) -> bool:
        return self.active is not None

    def begin(self, affordance: Affordance, task: Task, graph: TaskGraph, x: float, y: float) -> Gesture:
        if self.active is not None:
            raise GestureInProgressError(f"Gesture {self.active.kind} on {self.active.task_id} is still active")
        self.active = start_gesture(affordance, task, graph, x, y)
        logger.debug("Gesture %s started on %s", self.active.kind, task.id)
        return self.active

    def move(self, x: float, y: float, day_width: float, target_id: Optional[str] = None) -> Gesture:
        if self.active is None:
            raise NoActiveGestureError("No gesture to update")
        self.active = track_pointer(self.active, x, y, day_width, target_id)
        return self.active

    def release(
        self,
        graph: TaskGraph,
        x: float,
        y: float,
        day_width: float,
        target_id: Optional[str] = None,
    ) -> PatchList:
        """Finish the gesture at the release position and return its patches."""
        if self.active is None:
            raise NoActiveGestureError("No gesture to release")
        gesture = track_pointer(self.active, x, y, day_width, target_id)
        self.active = None
        patches = commit_patches(gesture, graph)
        if not patches:
            logger.debug("Gesture %s on %s released without changes", gesture.kind, gesture.task_id)
        return patches

    def cancel(self) -> Optional[Gesture]:
        gesture, self.active = self.active, None
        if gesture is not None:
            logger.debug("Gesture %s on %s abandoned", gesture.kind, gesture.task_id)
        return gesture
