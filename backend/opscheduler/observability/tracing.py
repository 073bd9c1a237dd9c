"""Span-style tracing helpers that write to the standard logger."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from time import perf_counter
from typing import Any, Dict, Iterator, Optional

logger = logging.getLogger("opscheduler.tracing")


@contextmanager
def trace(
    name: str,
    *,
    metadata: Optional[Dict[str, Any]] = None,
    user_id: Optional[str] = None,
    request_id: Optional[str] = None,
) -> Iterator[Dict[str, Any]]:
    """
    Wrap a unit of work in a named span.

    The yielded dict can be filled with extra attributes; they are logged when the span closes.
    Exceptions are logged and re-raised.
    """
    attributes: Dict[str, Any] = dict(metadata or {})
    start = perf_counter()
    try:
        yield attributes
    except Exception:
        duration_ms = (perf_counter() - start) * 1000
        logger.warning(
            "span %s failed after %0.2fms (user_id=%s, request_id=%s)",
            name,
            duration_ms,
            user_id,
            request_id,
        )
        raise
    duration_ms = (perf_counter() - start) * 1000
    logger.debug(
        "span %s finished in %0.2fms (request_id=%s) %s",
        name,
        duration_ms,
        request_id,
        attributes,
    )
