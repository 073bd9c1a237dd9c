"""Assignable user reference data."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

UserRole = Literal["Admin", "Editor", "Viewer"]
UserStatus = Literal["Active", "Pending"]


@dataclass(frozen=True)
class User:
    id: str
    name: str
    email: str
    role: UserRole = "Editor"
    status: UserStatus = "Active"
