"""FastAPI application entrypoint."""
from __future__ import annotations

import logging
from uuid import uuid4

from fastapi import FastAPI, Request

from opscheduler.api.routes import gesture, task, timeline, users
from opscheduler.core.config import settings
from opscheduler.core.logging import configure_logging

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    configure_logging(log_level=settings.log_level)
    application = FastAPI(title=settings.app_name, debug=settings.debug)

    @application.middleware("http")
    async def attach_request_id(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    @application.get("/health", tags=["health"])
    def health() -> dict:
        return {"status": "ok", "app": settings.app_name}

    application.include_router(task.router)
    application.include_router(timeline.router)
    application.include_router(gesture.router)
    application.include_router(users.router)
    logger.info("%s initialised (seed_demo_data=%s)", settings.app_name, settings.seed_demo_data)
    return application


app = create_app()
