from __future__ import annotations

from datetime import date

import pytest
from fastapi.testclient import TestClient

from opscheduler.db.deps import get_store
from opscheduler.db.models.task import Task
from opscheduler.db.models.user import User
from opscheduler.db.store import SchedulerStore
from opscheduler.main import app


def _seed_store() -> SchedulerStore:
    return SchedulerStore(
        [
            Task(id="a", name="Kitchen audit", start=date(2024, 8, 1), end=date(2024, 8, 5), assignee_id="user-1"),
            Task(id="b", name="Cold-room log review", start=date(2024, 8, 2), end=date(2024, 8, 3), parent_id="a"),
        ],
        [
            User(id="user-1", name="Alice Johnson", email="alice@example.com", role="Admin"),
            User(id="user-2", name="Pending Person", email="pending@example.com", status="Pending"),
        ],
    )


@pytest.fixture()
def client():
    store = _seed_store()
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as test_client:
        yield test_client, store
    app.dependency_overrides.clear()
