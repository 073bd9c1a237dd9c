"""Expansion of a single recurring-task request into dated task instances."""
from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable, Iterator, List, Literal, Optional
from uuid import uuid4

from opscheduler.core.config import settings
from opscheduler.db.models.task import Task, new_task_id

logger = logging.getLogger(__name__)

Frequency = Literal["daily", "weekly", "monthly"]
FREQUENCIES = ("daily", "weekly", "monthly")


@dataclass(frozen=True)
class RecurrenceRule:
    frequency: Frequency
    end_date: date


def add_months(day: date, months: int) -> date:
    """Shift by whole calendar months, clamping to the last day of a shorter target month."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def iter_occurrences(start: date, rule: RecurrenceRule) -> Iterator[date]:
    """
    Yield occurrence start dates from `start` while they stay on or before `rule.end_date`.

    Monthly steps are anchored on `start` (k months after it) so Jan 31 -> Feb 29 -> Mar 31.
    """
    if rule.frequency not in FREQUENCIES:
        raise ValueError(f"Unsupported recurrence frequency: {rule.frequency}")

    index = 0
    cursor = start
    while cursor <= rule.end_date:
        yield cursor
        index += 1
        if rule.frequency == "daily":
            cursor = start + timedelta(days=index)
        elif rule.frequency == "weekly":
            cursor = start + timedelta(weeks=index)
        else:
            cursor = add_months(start, index)


def expand_recurrence(
    template: Task,
    rule: RecurrenceRule,
    *,
    max_instances: Optional[int] = None,
    id_factory: Callable[[], str] = new_task_id,
) -> List[Task]:
    """
    Build the concrete instances for `template` repeated under `rule`.

    Every instance keeps the template's duration, gets a fresh id and an empty dependency list,
    and shares one recurring_instance_id. An end date before the template start yields [].
    """
    limit = max_instances if max_instances is not None else settings.max_recurrence_instances
    duration = timedelta(days=max(0, (template.end - template.start).days))
    series_id = f"rec-{uuid4().hex[:12]}"

    instances: List[Task] = []
    for occurrence in iter_occurrences(template.start, rule):
        if len(instances) >= limit:
            logger.warning(
                "Recurrence for %r truncated at %s instances (frequency=%s, end_date=%s)",
                template.name,
                limit,
                rule.frequency,
                rule.end_date.isoformat(),
            )
            break
        instances.append(
            Task(
                id=id_factory(),
                name=f"{template.name} ({occurrence.isoformat()})",
                description=template.description,
                priority=template.priority,
                status=template.status,
                start=occurrence,
                end=occurrence + duration,
                assignee_id=template.assignee_id,
                dependencies=(),
                parent_id=None,
                recurring_instance_id=series_id,
            )
        )
    return instances


def describe_series(template: Task, rule: RecurrenceRule, count: int) -> str:
    """Audit-log description for a generated series."""
    return (
        f"Created {count} {rule.frequency} instance(s) of '{template.name}' "
        f"from {template.start.isoformat()} until {rule.end_date.isoformat()}"
    )
