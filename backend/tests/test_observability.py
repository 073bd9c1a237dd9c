from __future__ import annotations

import logging

import pytest

from opscheduler.core.config import Settings
from opscheduler.core.logging import configure_logging
from opscheduler.observability.tracing import trace


def test_trace_logs_and_reraises_failures(caplog):
    caplog.set_level("WARNING")
    with pytest.raises(RuntimeError):
        with trace("timeline.build", request_id="req-1"):
            raise RuntimeError("boom")
    assert "span timeline.build failed" in caplog.text
    assert "req-1" in caplog.text


def test_configure_logging_is_idempotent():
    root = logging.getLogger()
    previous = root.level
    try:
        configure_logging("DEBUG")
        configure_logging("WARNING")
        marked = [handler for handler in root.handlers if getattr(handler, "_opscheduler", False)]
        assert len(marked) == 1
        assert root.level == logging.WARNING
    finally:
        root.setLevel(previous)


def test_settings_read_from_environment(monkeypatch):
    monkeypatch.setenv("GRID_LEAD_DAYS", "2")
    monkeypatch.setenv("SEED_DEMO_DATA", "false")
    configured = Settings()
    assert configured.grid_lead_days == 2
    assert configured.seed_demo_data is False
    assert configured.grid_trail_days == 10
