"""Canonical task table with hierarchy traversal and atomic batch updates."""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from opscheduler.db.models.task import EDITABLE_FIELDS, Task

logger = logging.getLogger(__name__)

TaskPatch = Mapping[str, Any]
PatchList = Sequence[Tuple[str, TaskPatch]]


class TaskGraph:
    """
    Flat id-indexed task table.

    Parent links and dependency edges are plain id references. Nothing outside this class
    mutates the table; every edit goes through `add_tasks` or `apply_batch`.
    """

    def __init__(self, tasks: Iterable[Task] = ()) -> None:
        self._tasks: Dict[str, Task] = {}
        self.add_tasks(tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._tasks

    def tasks(self) -> List[Task]:
        """Return all tasks in insertion order."""
        return list(self._tasks.values())

    def get(self, task_id: str) -> Optional[Task]:
        return self._tasks.get(task_id)

    def children(self, task_id: str) -> List[Task]:
        return [task for task in self._tasks.values() if task.parent_id == task_id]

    def descendants(self, task_id: str) -> List[Task]:
        """All tasks whose parent chain reaches `task_id`, computed fresh on each call."""
        return _collect_descendants(self._tasks.values(), task_id)

    def descendant_ids(self, task_id: str) -> Set[str]:
        return {task.id for task in self.descendants(task_id)}

    def add_tasks(self, tasks: Iterable[Task]) -> List[Task]:
        incoming = list(tasks)
        seen: Set[str] = set()
        for task in incoming:
            if task.id in self._tasks or task.id in seen:
                raise ValueError(f"Duplicate task id: {task.id}")
            seen.add(task.id)
        for task in incoming:
            self._tasks[task.id] = task
        return incoming

    def validate_batch(self, patches: PatchList) -> Optional[str]:
        """Return why `patches` would be rejected, or None when the batch is acceptable."""
        _, reason = self._stage(patches)
        return reason

    def apply_batch(self, patches: PatchList) -> List[Task]:
        """
        Replace the patched fields of the matching tasks in one pass.

        Unknown ids are skipped. If any resulting task has end < start, or the parent links would
        form a cycle, nothing is written and an empty list is returned.
        Returns the tasks that actually changed, in patch order.
        """
        staged, reason = self._stage(patches)
        if reason:
            logger.info("Discarded batch of %s patch(es): %s", len(patches), reason)
            return []

        changed: List[Task] = []
        for task_id, task in staged.items():
            if self._tasks[task_id] != task:
                self._tasks[task_id] = task
                changed.append(task)
        if changed:
            logger.debug("Committed batch update for %s task(s)", len(changed))
        return changed

    def _stage(self, patches: PatchList) -> Tuple[Dict[str, Task], Optional[str]]:
        staged: Dict[str, Task] = {}
        for task_id, patch in patches:
            unknown = set(patch) - EDITABLE_FIELDS
            if unknown:
                raise ValueError(f"Non-editable task field(s): {', '.join(sorted(unknown))}")
            current = staged.get(task_id) or self._tasks.get(task_id)
            if current is None:
                logger.debug("Skipping patch for unknown task %s", task_id)
                continue
            values = dict(patch)
            if "dependencies" in values:
                values["dependencies"] = tuple(
                    dep for dep in dict.fromkeys(values["dependencies"] or ()) if dep != task_id
                )
            staged[task_id] = replace(current, **values)

        for task in staged.values():
            if task.is_inverted:
                return {}, f"task {task.id} would end ({task.end}) before it starts ({task.start})"

        if any("parent_id" in patch for _, patch in patches):
            merged = {**self._tasks, **staged}
            for task_id in staged:
                if _has_parent_cycle(merged, task_id):
                    return {}, f"task {task_id} would become its own ancestor"
        return staged, None


def _collect_descendants(tasks: Iterable[Task], root_id: str) -> List[Task]:
    by_parent: Dict[str, List[Task]] = {}
    for task in tasks:
        if task.parent_id is not None:
            by_parent.setdefault(task.parent_id, []).append(task)

    result: List[Task] = []
    visited: Set[str] = {root_id}
    stack = list(reversed(by_parent.get(root_id, [])))
    while stack:
        task = stack.pop()
        if task.id in visited:
            continue
        visited.add(task.id)
        result.append(task)
        stack.extend(reversed(by_parent.get(task.id, [])))
    return result


def _has_parent_cycle(tasks: Mapping[str, Task], start_id: str) -> bool:
    seen: Set[str] = set()
    current = tasks.get(start_id)
    while current is not None and current.parent_id is not None:
        if current.parent_id == start_id or current.id in seen:
            return True
        seen.add(current.id)
        current = tasks.get(current.parent_id)
    return False
