# src/task_tracker/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage backends, export formats and notification channels swappable
and makes testing easier: concrete classes are picked in cli/bootstrap.py and
passed in through constructors.
"""

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..tasks.task_models import Priority, Project, Task, TaskStatus


class TaskRepo(Protocol):
    """
    Task storage contract.

    - save: upsert, never fails on a duplicate id
    - find_by_id: None when absent (not an exception)
    - update/delete: silently do nothing for an unknown id
    """

    def save(self, task: Task) -> None: ...
    def find_by_id(self, task_id: str) -> Task | None: ...
    def find_all(self) -> list[Task]: ...
    def update(self, task: Task) -> None: ...
    def delete(self, task_id: str) -> None: ...

    def find_by_project_id(self, project_id: str) -> list[Task]: ...
    def find_by_status(self, status: TaskStatus) -> list[Task]: ...
    def find_by_priority(self, priority: Priority) -> list[Task]: ...


class ProjectRepo(Protocol):
    def save(self, project: Project) -> None: ...
    def find_by_id(self, project_id: str) -> Project | None: ...
    def find_all(self) -> list[Project]: ...
    def update(self, project: Project) -> None: ...
    def delete(self, project_id: str) -> None: ...


class TaskFilter(Protocol):
    """Pure narrowing step: returns the input tasks that match, in input order."""

    def filter(self, tasks: Iterable[Task]) -> list[Task]: ...


class TaskExporter(Protocol):
    def export(self, tasks: Sequence[Task]) -> str: ...
    def get_file_extension(self) -> str: ...


class TaskNotifier(Protocol):
    """
    Outbound channel for task lifecycle events.

    Delivery failures are the channel's business; callers get no result back.
    """

    def notify_task_created(self, task: Task) -> None: ...
    def notify_task_completed(self, task: Task) -> None: ...
    def notify_task_due(self, task: Task) -> None: ...
