# src/task_tracker/tasks/task_store.py

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from .store_base import InMemoryStore, JsonFileStore
from .task_models import Priority, Task, TaskStatus, task_from_record, task_to_record


class TaskQueriesMixin:
    """
    Convenience lookups shared by every task store.

    Each one is find_all() narrowed by equality on a single field, so the cost
    is linear in the total number of tasks for both backends.
    """

    find_all: Callable[[], list[Task]]  # provided by the concrete store

    def find_by_project_id(self, project_id: str) -> list[Task]:
        return [t for t in self.find_all() if t.project_id == project_id]

    def find_by_status(self, status: TaskStatus | str) -> list[Task]:
        status = TaskStatus(status)
        return [t for t in self.find_all() if t.status == status]

    def find_by_priority(self, priority: Priority | str) -> list[Task]:
        priority = Priority(priority)
        return [t for t in self.find_all() if t.priority == priority]


class InMemoryTaskStore(TaskQueriesMixin, InMemoryStore[Task]):
    """Process-local task store; contents are lost on restart."""

    kind = "task"


class JsonFileTaskStore(TaskQueriesMixin, JsonFileStore[Task]):
    """
    File-backed task store (tasks.json).

    Drop-in replacement for InMemoryTaskStore: same operations, same results,
    only the lifetime differs.
    """

    kind = "task"

    def __init__(self, path: str | Path = "tasks.json") -> None:
        super().__init__(path, to_record=task_to_record, from_record=task_from_record)
