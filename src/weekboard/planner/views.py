"""Read-side helpers shared by the renderers and the command layer."""

from __future__ import annotations

from collections.abc import Iterable

from .model import DAYS, PlannerState, SortMode, Task


def sorted_tasks(tasks: Iterable[Task], mode: SortMode) -> list[Task]:
    """Return tasks for display: pinned first, then by title or creation time."""
    if mode == "alpha":
        return sorted(tasks, key=lambda t: (not t.pinned, t.title.casefold()))
    return sorted(tasks, key=lambda t: (not t.pinned, t.created_at))


def find_task(state: PlannerState, task_id: int) -> tuple[Task, str] | None:
    """Return ``(task, day)`` for ``task_id``, or ``None`` if no column holds it."""
    for day in DAYS:
        for task in state.days.get(day, []):
            if task.id == task_id:
                return task, day
    return None


def task_count(state: PlannerState) -> int:
    return sum(len(tasks) for tasks in state.days.values())


__all__ = ["find_task", "sorted_tasks", "task_count"]
