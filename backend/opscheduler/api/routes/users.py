"""Assignable users and audit log API routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request

from opscheduler.api.schemas.users import AuditLogEntryPayload, AuditLogResponse, UserListResponse, UserPayload
from opscheduler.db.deps import get_store
from opscheduler.db.store import SchedulerStore
from opscheduler.services.schedule_service import assignable_users

router = APIRouter()


@router.get("/users", response_model=UserListResponse, tags=["users"])
def list_users(request: Request, store: SchedulerStore = Depends(get_store)) -> UserListResponse:
    request_id = getattr(request.state, "request_id", None)
    users = [
        UserPayload(id=user.id, name=user.name, email=user.email, role=user.role)
        for user in assignable_users(store)
    ]
    return UserListResponse(users=users, request_id=request_id or "")


@router.get("/audit-log", response_model=AuditLogResponse, tags=["audit"])
def list_audit_log(
    request: Request,
    limit: int = Query(50, ge=1, le=500),
    store: SchedulerStore = Depends(get_store),
) -> AuditLogResponse:
    """Newest entries first."""
    request_id = getattr(request.state, "request_id", None)
    entries = [
        AuditLogEntryPayload(
            id=entry.id,
            timestamp=entry.timestamp,
            user=entry.user,
            action=entry.action,
            details=entry.details,
        )
        for entry in reversed(store.audit_log[-limit:])
    ]
    return AuditLogResponse(entries=entries, request_id=request_id or "")
