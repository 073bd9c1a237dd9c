"""FastAPI dependency returning the scheduler store."""
from __future__ import annotations

from functools import lru_cache

from opscheduler.core.config import settings
from opscheduler.db.seed import demo_tasks, demo_users
from opscheduler.db.store import SchedulerStore


@lru_cache
def _default_store() -> SchedulerStore:
    if settings.seed_demo_data:
        return SchedulerStore(demo_tasks(), demo_users())
    return SchedulerStore()


def get_store() -> SchedulerStore:
    return _default_store()
