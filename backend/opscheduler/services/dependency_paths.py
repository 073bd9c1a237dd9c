"""Curves connecting prerequisite bars to their dependent bars."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from opscheduler.db.models.task import Task
from opscheduler.services.timeline_layout import TimelineProjection

Point = Tuple[float, float]


@dataclass(frozen=True)
class DependencyPath:
    from_id: str
    to_id: str
    start: Point
    control_1: Point
    control_2: Point
    end: Point

    @property
    def svg(self) -> str:
        (x1, y1), (c1x, c1y), (c2x, c2y), (x2, y2) = self.start, self.control_1, self.control_2, self.end
        return f"M {x1:g} {y1:g} C {c1x:g} {c1y:g}, {c2x:g} {c2y:g}, {x2:g} {y2:g}"


def dependency_paths(tasks: Sequence[Task], projection: TimelineProjection) -> List[DependencyPath]:
    """
    One cubic curve per drawable dependency edge, in display order of the dependent task.

    Edges whose prerequisite is not laid out, or whose dependent bar does not start strictly right
    of the prerequisite's right edge, are skipped. That includes finish-to-start neighbours: a task
    starting the day after its prerequisite ends touches it (left == right) and gets no curve.
    """
    geometry = projection.by_id()
    by_id = {task.id: task for task in tasks}
    paths: List[DependencyPath] = []
    for task_id in projection.display_order:
        task = by_id.get(task_id)
        target = geometry.get(task_id)
        if task is None or target is None:
            continue
        for dependency_id in task.dependencies:
            source = geometry.get(dependency_id)
            if source is None or dependency_id == task_id:
                continue
            start = (source.right, source.center_y)
            end = (target.left, target.center_y)
            if end[0] <= start[0]:
                continue
            bend = (end[0] - start[0]) / 2
            paths.append(
                DependencyPath(
                    from_id=dependency_id,
                    to_id=task_id,
                    start=start,
                    control_1=(start[0] + bend, start[1]),
                    control_2=(end[0] - bend, end[1]),
                    end=end,
                )
            )
    return paths
