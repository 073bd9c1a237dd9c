"""Schemas for pointer-gesture endpoints."""
from __future__ import annotations

from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, Field

from opscheduler.api.schemas.task import TaskPayload
from opscheduler.api.schemas.timeline import TaskGeometryPayload
from opscheduler.services.interaction import Gesture, GesturePreview, LinkGesture, MoveGesture


class GestureStartRequest(BaseModel):
    x: float
    y: float
    task_id: Optional[str] = None
    affordance: Optional[Literal["body", "left-handle", "right-handle", "connector"]] = None
    viewport_width: Optional[float] = Field(default=None, gt=0)


class GesturePointerRequest(BaseModel):
    x: float
    y: float
    target_id: Optional[str] = None
    viewport_width: Optional[float] = Field(default=None, gt=0)


class GestureStatePayload(BaseModel):
    kind: Literal["move", "resize-start", "resize-end", "link"]
    task_id: str
    day_delta: int = 0
    descendant_ids: List[str] = Field(default_factory=list)
    target_id: Optional[str] = None

    @classmethod
    def from_gesture(cls, gesture: Gesture) -> "GestureStatePayload":
        if isinstance(gesture, LinkGesture):
            return cls(kind=gesture.kind, task_id=gesture.task_id, target_id=gesture.target_id)
        descendants = list(gesture.descendant_ids) if isinstance(gesture, MoveGesture) else []
        return cls(
            kind=gesture.kind,
            task_id=gesture.task_id,
            day_delta=gesture.day_delta,
            descendant_ids=descendants,
        )


class GestureResponse(BaseModel):
    gesture: Optional[GestureStatePayload]
    request_id: str


class GestureCommitResponse(BaseModel):
    updated: List[TaskPayload]
    request_id: str


class GesturePreviewPayload(BaseModel):
    kind: str
    task_id: str
    day_delta: int
    valid: bool
    geometries: List[TaskGeometryPayload]
    link_line: Optional[Tuple[float, float, float, float]] = None

    @classmethod
    def from_preview(cls, preview: GesturePreview) -> "GesturePreviewPayload":
        return cls(
            kind=preview.kind,
            task_id=preview.task_id,
            day_delta=preview.day_delta,
            valid=preview.valid,
            geometries=[TaskGeometryPayload.from_geometry(g) for g in preview.geometries],
            link_line=preview.link_line,
        )


class GesturePreviewResponse(BaseModel):
    preview: Optional[GesturePreviewPayload]
    request_id: str
