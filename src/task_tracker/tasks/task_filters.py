# src/task_tracker/tasks/task_filters.py

from __future__ import annotations

"""
Task filters.

Each filter keeps the tasks matching a predicate fixed at construction time.
Filters never mutate their input and keep the input order, so any chain of
them yields the same set of tasks regardless of the order they run in.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime

from ..core.ports import TaskFilter
from .task_models import Priority, Task, TaskStatus, ensure_utc


class StatusFilter:
    def __init__(self, status: TaskStatus | str) -> None:
        self.status = TaskStatus(status)

    def filter(self, tasks: Iterable[Task]) -> list[Task]:
        return [t for t in tasks if t.status == self.status]


class PriorityFilter:
    def __init__(self, priority: Priority | str) -> None:
        self.priority = Priority(priority)

    def filter(self, tasks: Iterable[Task]) -> list[Task]:
        return [t for t in tasks if t.priority == self.priority]


class ProjectFilter:
    def __init__(self, project_id: str) -> None:
        self.project_id = project_id

    def filter(self, tasks: Iterable[Task]) -> list[Task]:
        return [t for t in tasks if t.project_id == self.project_id]


class OverdueFilter:
    """
    Keep tasks that are overdue at call time.

    Pass `now` to pin the clock; otherwise the current time is read on every call,
    so two calls straddling a deadline can disagree.
    """

    def __init__(self, now: datetime | None = None) -> None:
        self.now = ensure_utc("OverdueFilter", "now", now) if now is not None else None

    def filter(self, tasks: Iterable[Task]) -> list[Task]:
        return [t for t in tasks if t.is_overdue(self.now)]


class DueDateRangeFilter:
    """Keep tasks whose due date lies in [start, end]; tasks without one are dropped."""

    def __init__(self, start: datetime, end: datetime) -> None:
        self.start = ensure_utc("DueDateRangeFilter", "start", start)
        self.end = ensure_utc("DueDateRangeFilter", "end", end)
        if self.start > self.end:
            raise ValueError(f"start ({self.start.isoformat()}) is after end ({self.end.isoformat()})")

    def filter(self, tasks: Iterable[Task]) -> list[Task]:
        return [
            t for t in tasks
            if t.due_date is not None and self.start <= t.due_date <= self.end
        ]


def apply_filters(tasks: Iterable[Task], filters: Sequence[TaskFilter]) -> list[Task]:
    """Run filters left to right; with no filters the input is returned as a new list."""
    out = list(tasks)
    for f in filters:
        out = f.filter(out)
    return out
