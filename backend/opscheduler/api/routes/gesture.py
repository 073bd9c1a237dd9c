"""Pointer-gesture API routes for the interactive timeline."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from opscheduler.api.schemas.gesture import (
    GestureCommitResponse,
    GesturePointerRequest,
    GesturePreviewPayload,
    GesturePreviewResponse,
    GestureResponse,
    GestureStartRequest,
    GestureStatePayload,
)
from opscheduler.api.schemas.task import TaskPayload
from opscheduler.db.deps import get_store
from opscheduler.db.store import SchedulerStore
from opscheduler.observability.metrics import log_metric
from opscheduler.observability.tracing import trace
from opscheduler.services.interaction import NoActiveGestureError
from opscheduler.services.schedule_service import (
    TaskNotFoundError,
    begin_gesture,
    cancel_gesture,
    end_gesture,
    gesture_preview,
    update_gesture,
)

router = APIRouter(prefix="/gestures", tags=["gestures"])


@router.post("/start", response_model=GestureResponse)
def start_gesture_endpoint(
    payload: GestureStartRequest,
    request: Request,
    store: SchedulerStore = Depends(get_store),
) -> GestureResponse:
    request_id = getattr(request.state, "request_id", None)
    if store.interaction.is_active:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="A gesture is already in progress")
    with trace("gesture.start", metadata={"task_id": payload.task_id}, request_id=request_id):
        try:
            gesture = begin_gesture(
                store,
                x=payload.x,
                y=payload.y,
                task_id=payload.task_id,
                affordance=payload.affordance,
                viewport_width=payload.viewport_width,
            )
        except TaskNotFoundError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    log_metric("gesture.start", 1, metadata={"kind": gesture.kind})
    return GestureResponse(gesture=GestureStatePayload.from_gesture(gesture), request_id=request_id or "")


@router.post("/move", response_model=GestureResponse)
def move_gesture_endpoint(
    payload: GesturePointerRequest,
    request: Request,
    store: SchedulerStore = Depends(get_store),
) -> GestureResponse:
    request_id = getattr(request.state, "request_id", None)
    try:
        gesture = update_gesture(
            store,
            x=payload.x,
            y=payload.y,
            target_id=payload.target_id,
            viewport_width=payload.viewport_width,
        )
    except NoActiveGestureError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return GestureResponse(gesture=GestureStatePayload.from_gesture(gesture), request_id=request_id or "")


@router.post("/end", response_model=GestureCommitResponse)
def end_gesture_endpoint(
    payload: GesturePointerRequest,
    request: Request,
    store: SchedulerStore = Depends(get_store),
) -> GestureCommitResponse:
    """Release the pointer; an empty `updated` list means the gesture was discarded."""
    request_id = getattr(request.state, "request_id", None)
    with trace("gesture.end", request_id=request_id):
        try:
            updated = end_gesture(
                store,
                x=payload.x,
                y=payload.y,
                target_id=payload.target_id,
                viewport_width=payload.viewport_width,
            )
        except NoActiveGestureError as exc:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    log_metric("gesture.committed_tasks", len(updated))
    return GestureCommitResponse(updated=[TaskPayload.from_task(t) for t in updated], request_id=request_id or "")


@router.post("/cancel", response_model=GestureResponse)
def cancel_gesture_endpoint(request: Request, store: SchedulerStore = Depends(get_store)) -> GestureResponse:
    request_id = getattr(request.state, "request_id", None)
    cancel_gesture(store)
    return GestureResponse(gesture=None, request_id=request_id or "")


@router.get("/preview", response_model=GesturePreviewResponse)
def preview_gesture_endpoint(
    request: Request,
    viewport_width: Optional[float] = Query(default=None, gt=0),
    store: SchedulerStore = Depends(get_store),
) -> GesturePreviewResponse:
    request_id = getattr(request.state, "request_id", None)
    preview = gesture_preview(store, viewport_width)
    return GesturePreviewResponse(
        preview=GesturePreviewPayload.from_preview(preview) if preview else None,
        request_id=request_id or "",
    )
