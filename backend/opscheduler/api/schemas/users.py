"""Schemas for assignable users and the audit log."""
from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel


class UserPayload(BaseModel):
    id: str
    name: str
    email: str
    role: str


class UserListResponse(BaseModel):
    users: List[UserPayload]
    request_id: str


class AuditLogEntryPayload(BaseModel):
    id: str
    timestamp: datetime
    user: str
    action: str
    details: str


class AuditLogResponse(BaseModel):
    entries: List[AuditLogEntryPayload]
    request_id: str
