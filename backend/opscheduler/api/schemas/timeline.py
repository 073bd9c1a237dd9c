"""Schemas for the timeline projection."""
from __future__ import annotations

from datetime import date
from typing import List, Optional, Tuple

from pydantic import BaseModel

from opscheduler.services.dependency_paths import DependencyPath
from opscheduler.services.timeline_layout import TaskGeometry


class TaskGeometryPayload(BaseModel):
    task_id: str
    row: int
    level: int
    offset_days: int
    duration_days: int
    left: float
    width: float
    top: float
    height: float

    @classmethod
    def from_geometry(cls, geometry: TaskGeometry) -> "TaskGeometryPayload":
        return cls(
            task_id=geometry.task_id,
            row=geometry.row,
            level=geometry.level,
            offset_days=geometry.offset_days,
            duration_days=geometry.duration_days,
            left=geometry.left,
            width=geometry.width,
            top=geometry.top,
            height=geometry.height,
        )


class DependencyPathPayload(BaseModel):
    from_id: str
    to_id: str
    start: Tuple[float, float]
    end: Tuple[float, float]
    svg: str

    @classmethod
    def from_path(cls, path: DependencyPath) -> "DependencyPathPayload":
        return cls(from_id=path.from_id, to_id=path.to_id, start=path.start, end=path.end, svg=path.svg)


class TimelineResponse(BaseModel):
    grid_start: date
    grid_end: date
    total_days: int
    day_width: float
    today_offset_days: Optional[int]
    today_x: Optional[float]
    geometries: List[TaskGeometryPayload]
    dependency_paths: List[DependencyPathPayload]
    request_id: str
