from __future__ import annotations

from datetime import date

from opscheduler.db.models.task import Task
from opscheduler.services.recurrence import RecurrenceRule, add_months, describe_series, expand_recurrence
from opscheduler.services.timeline_layout import duration_days


def _template(start: date, end: date, **kwargs) -> Task:
    return Task(id="tpl", name="Walk-in freezer check", start=start, end=end, assignee_id="user-2", **kwargs)


def test_weekly_series_through_end_date():
    template = _template(date(2024, 8, 1), date(2024, 8, 1), priority="High")
    instances = expand_recurrence(template, RecurrenceRule(frequency="weekly", end_date=date(2024, 8, 22)))

    assert [task.start for task in instances] == [
        date(2024, 8, 1),
        date(2024, 8, 8),
        date(2024, 8, 15),
        date(2024, 8, 22),
    ]
    assert all(duration_days(task) == 1 for task in instances)
    assert instances[1].name == "Walk-in freezer check (2024-08-08)"
    assert all(task.priority == "High" and task.assignee_id == "user-2" for task in instances)


def test_instances_share_series_id_and_get_fresh_ids():
    template = _template(date(2024, 8, 1), date(2024, 8, 2), dependencies=("task-9",), parent_id="task-1")
    instances = expand_recurrence(template, RecurrenceRule(frequency="daily", end_date=date(2024, 8, 5)))

    assert len(instances) == 5
    assert len({task.id for task in instances}) == 5
    assert "tpl" not in {task.id for task in instances}
    assert len({task.recurring_instance_id for task in instances}) == 1
    assert instances[0].recurring_instance_id
    assert all(task.dependencies == () for task in instances)
    assert all(task.parent_id is None for task in instances)


def test_end_date_before_start_yields_nothing():
    template = _template(date(2024, 8, 10), date(2024, 8, 12))
    assert expand_recurrence(template, RecurrenceRule(frequency="daily", end_date=date(2024, 8, 9))) == []


def test_every_instance_keeps_template_duration():
    template = _template(date(2024, 3, 4), date(2024, 3, 7))
    instances = expand_recurrence(template, RecurrenceRule(frequency="weekly", end_date=date(2024, 5, 1)))
    assert instances
    assert {duration_days(task) for task in instances} == {duration_days(template)}


def test_inverted_template_is_treated_as_zero_length():
    template = _template(date(2024, 3, 4), date(2024, 3, 1))
    instances = expand_recurrence(template, RecurrenceRule(frequency="daily", end_date=date(2024, 3, 5)))
    assert [(task.start, task.end) for task in instances] == [
        (date(2024, 3, 4), date(2024, 3, 4)),
        (date(2024, 3, 5), date(2024, 3, 5)),
    ]


def test_monthly_steps_clamp_to_month_end_without_drifting():
    template = _template(date(2024, 1, 31), date(2024, 1, 31))
    instances = expand_recurrence(template, RecurrenceRule(frequency="monthly", end_date=date(2024, 4, 30)))
    assert [task.start for task in instances] == [
        date(2024, 1, 31),
        date(2024, 2, 29),
        date(2024, 3, 31),
        date(2024, 4, 30),
    ]


def test_add_months_crosses_year_boundary():
    assert add_months(date(2023, 12, 15), 1) == date(2024, 1, 15)
    assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)
    assert add_months(date(2024, 5, 31), 13) == date(2025, 6, 30)


def test_series_is_truncated_at_the_safety_ceiling(caplog):
    template = _template(date(2024, 1, 1), date(2024, 1, 1))
    caplog.set_level("WARNING")
    instances = expand_recurrence(
        template,
        RecurrenceRule(frequency="daily", end_date=date(2024, 12, 31)),
        max_instances=3,
    )
    assert len(instances) == 3
    assert "truncated" in caplog.text


def test_series_description_mentions_count_and_window():
    template = _template(date(2024, 8, 1), date(2024, 8, 1))
    text = describe_series(template, RecurrenceRule(frequency="weekly", end_date=date(2024, 8, 22)), 4)
    assert "4 weekly" in text
    assert "2024-08-22" in text
