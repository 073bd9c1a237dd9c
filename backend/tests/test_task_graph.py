from __future__ import annotations

from datetime import date

import pytest

from opscheduler.db.models.task import Task
from opscheduler.services.task_graph import TaskGraph


def _task(task_id: str, start: date, end: date, parent_id: str | None = None, **kwargs) -> Task:
    return Task(id=task_id, name=task_id.upper(), start=start, end=end, parent_id=parent_id, **kwargs)


def _graph() -> TaskGraph:
    return TaskGraph(
        [
            _task("a", date(2024, 8, 1), date(2024, 8, 5)),
            _task("b", date(2024, 8, 2), date(2024, 8, 3), parent_id="a"),
            _task("c", date(2024, 8, 3), date(2024, 8, 4), parent_id="b"),
            _task("d", date(2024, 8, 10), date(2024, 8, 12)),
        ]
    )


def test_descendants_follow_the_full_parent_chain():
    graph = _graph()
    assert [task.id for task in graph.descendants("a")] == ["b", "c"]
    assert [task.id for task in graph.descendants("b")] == ["c"]
    assert graph.descendants("d") == []


def test_descendants_reflect_current_state_not_a_cache():
    graph = _graph()
    graph.apply_batch([("d", {"parent_id": "c"})])
    assert graph.descendant_ids("a") == {"b", "c", "d"}


def test_descendants_terminate_on_cyclic_input():
    graph = TaskGraph(
        [
            _task("x", date(2024, 1, 1), date(2024, 1, 2), parent_id="y"),
            _task("y", date(2024, 1, 1), date(2024, 1, 2), parent_id="x"),
        ]
    )
    assert graph.descendant_ids("x") == {"y"}


def test_batch_update_changes_only_matching_tasks():
    graph = _graph()
    before_d = graph.get("d")
    changed = graph.apply_batch(
        [
            ("a", {"start": date(2024, 8, 2), "end": date(2024, 8, 6)}),
            ("b", {"status": "completed"}),
        ]
    )
    assert [task.id for task in changed] == ["a", "b"]
    assert graph.get("a").start == date(2024, 8, 2)
    assert graph.get("b").status == "completed"
    assert graph.get("d") is before_d


def test_batch_update_is_void_when_any_task_would_invert():
    graph = _graph()
    changed = graph.apply_batch(
        [
            ("a", {"start": date(2024, 8, 4), "end": date(2024, 8, 8)}),
            ("b", {"end": date(2024, 7, 1)}),
        ]
    )
    assert changed == []
    assert graph.get("a").start == date(2024, 8, 1)
    assert graph.get("b").end == date(2024, 8, 3)
    assert "before it starts" in graph.validate_batch([("b", {"end": date(2024, 7, 1)})])


def test_batch_update_skips_unknown_ids():
    graph = _graph()
    changed = graph.apply_batch([("missing", {"name": "x"}), ("d", {"name": "Renamed"})])
    assert [task.id for task in changed] == ["d"]


def test_batch_update_rejects_parent_cycle():
    graph = _graph()
    assert graph.apply_batch([("a", {"parent_id": "c"})]) == []
    assert graph.get("a").parent_id is None
    assert "own ancestor" in graph.validate_batch([("a", {"parent_id": "a"})])


def test_batch_update_rejects_non_editable_fields():
    graph = _graph()
    with pytest.raises(ValueError):
        graph.apply_batch([("a", {"id": "z"})])


def test_batch_update_deduplicates_dependencies():
    graph = _graph()
    graph.apply_batch([("d", {"dependencies": ["a", "b", "a"]})])
    assert graph.get("d").dependencies == ("a", "b")


def test_batch_update_drops_self_dependency():
    graph = _graph()
    graph.apply_batch([("a", {"dependencies": ["a", "d", "a"]})])
    assert graph.get("a").dependencies == ("d",)


def test_add_tasks_rejects_duplicate_ids():
    graph = _graph()
    with pytest.raises(ValueError):
        graph.add_tasks([_task("a", date(2024, 1, 1), date(2024, 1, 1))])
    assert len(graph) == 4
