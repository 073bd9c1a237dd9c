"""Timeline projection API route."""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from opscheduler.api.schemas.timeline import DependencyPathPayload, TaskGeometryPayload, TimelineResponse
from opscheduler.db.deps import get_store
from opscheduler.db.store import SchedulerStore
from opscheduler.observability.metrics import log_metric
from opscheduler.observability.tracing import trace
from opscheduler.services.schedule_service import build_timeline

router = APIRouter()


@router.get("/timeline", response_model=TimelineResponse, tags=["timeline"])
def get_timeline(
    request: Request,
    viewport_width: Optional[float] = Query(default=None, gt=0, description="Drawable width in pixels"),
    today: Optional[date] = Query(default=None, description="Override for the today marker"),
    store: SchedulerStore = Depends(get_store),
) -> TimelineResponse:
    """Date axis, bar geometry and dependency curves for the committed task set."""
    request_id = getattr(request.state, "request_id", None)
    with trace("timeline.build", metadata={"viewport_width": viewport_width}, request_id=request_id):
        projection, paths = build_timeline(store, viewport_width, today)

    log_metric("timeline.tasks", len(projection.geometries))
    log_metric("timeline.dependency_paths", len(paths))
    return TimelineResponse(
        grid_start=projection.grid_start,
        grid_end=projection.grid_end,
        total_days=projection.total_days,
        day_width=projection.day_width,
        today_offset_days=projection.today_offset_days,
        today_x=projection.today_x,
        geometries=[TaskGeometryPayload.from_geometry(g) for g in projection.geometries],
        dependency_paths=[DependencyPathPayload.from_path(p) for p in paths],
        request_id=request_id or "",
    )
