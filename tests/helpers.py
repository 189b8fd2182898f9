# tests/helpers.py

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from task_tracker.tasks.task_models import Priority, Task, TaskStatus

# Fixed clock for deterministic time-dependent assertions.
NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


def make_task(
    task_id: str = "1",
    *,
    project_id: str = "p1",
    title: str | None = None,
    status: TaskStatus = TaskStatus.TODO,
    priority: Priority = Priority.MEDIUM,
    due_date: datetime | None = None,
    description: str = "",
) -> Task:
    task = Task(
        id=task_id,
        title=title or f"Task {task_id}",
        project_id=project_id,
        description=description,
        priority=priority,
        due_date=due_date,
        created_at=NOW - timedelta(days=1),
    )
    if status == TaskStatus.DONE:
        task.mark_complete(NOW)
    elif status == TaskStatus.IN_PROGRESS:
        task.mark_in_progress()
    return task
