# src/task_tracker/tasks/task_api.py

from __future__ import annotations

"""
Small high-level helpers used by the command layer.

They combine a repository call with the matching notification so the command
handlers stay thin. Storage errors propagate; notification delivery is the
notifier's business.
"""

import logging
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from ..core.ports import TaskExporter, TaskFilter
from ..core.state import AppState
from .task_export import write_export
from .task_filters import apply_filters
from .task_models import Priority, Task, TaskStatus

logger = logging.getLogger(__name__)


def create_task(
    state: AppState,
    *,
    task_id: str,
    title: str,
    project_id: str,
    description: str = "",
    priority: Priority | str = Priority.MEDIUM,
    due_date: datetime | None = None,
) -> Task:
    """Build a TODO task, save it and announce it."""
    task = Task(
        id=task_id,
        title=title,
        project_id=project_id,
        description=description,
        status=TaskStatus.TODO,
        priority=priority,
        due_date=due_date,
    )
    state.tasks.save(task)
    state.notifier.notify_task_created(task)
    return task


def complete_task(state: AppState, task_id: str) -> Task | None:
    """Mark a stored task DONE. Returns None for an unknown id; no event for an already-done task."""
    task = state.tasks.find_by_id(task_id)
    if task is None:
        return None
    if task.status == TaskStatus.DONE:
        return task

    task.mark_complete()
    state.tasks.update(task)
    state.notifier.notify_task_completed(task)
    logger.info("Task %s -> done", task_id)
    return task


def start_task(state: AppState, task_id: str) -> Task | None:
    task = state.tasks.find_by_id(task_id)
    if task is None:
        return None
    task.mark_in_progress()
    state.tasks.update(task)
    logger.info("Task %s -> in_progress", task_id)
    return task


def project_tasks(state: AppState, project_id: str) -> list[Task]:
    return state.tasks.find_by_project_id(project_id)


def export_tasks(
    state: AppState,
    exporter: TaskExporter,
    *,
    filters: Sequence[TaskFilter] = (),
    path: str | Path | None = None,
) -> str | Path:
    """
    find_all -> filters -> exporter.

    Returns the exported text, or the written file path when `path` is given.
    """
    tasks = apply_filters(state.tasks.find_all(), filters)
    if path is None:
        return exporter.export(tasks)
    return write_export(exporter, tasks, path)
