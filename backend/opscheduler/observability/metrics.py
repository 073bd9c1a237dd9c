"""Lightweight metric emission backed by the logging pipeline."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

logger = logging.getLogger("opscheduler.metrics")


def log_metric(name: str, value: float, metadata: Optional[Dict[str, Any]] = None) -> None:
    """Record a single metric sample as a structured debug log line."""
    logger.debug("metric %s=%s", name, value, extra={"metric": name, "value": value, "metadata": metadata or {}})
