# src/task_tracker/tasks/task_reminders.py

from __future__ import annotations

"""
Due-date reminders.

One pass:
- fetch all tasks,
- keep the unfinished ones due within the horizon (overdue ones included),
- send notify_task_due for each through the injected notifier.

Nothing is recorded about sent reminders, so running the pass twice sends twice.
"""

import logging
from collections.abc import Iterable
from datetime import datetime, timedelta

from ..core.ports import TaskNotifier, TaskRepo
from .task_models import Task, TaskStatus, ensure_utc, utcnow

logger = logging.getLogger(__name__)

DEFAULT_HORIZON = timedelta(hours=24)


def find_due_tasks(
    tasks: Iterable[Task],
    *,
    now: datetime | None = None,
    within: timedelta = DEFAULT_HORIZON,
) -> list[Task]:
    now = utcnow() if now is None else ensure_utc("find_due_tasks", "now", now)
    limit = now + within
    due = [
        t for t in tasks
        if t.status != TaskStatus.DONE and t.due_date is not None and t.due_date <= limit
    ]
    due.sort(key=lambda t: (t.due_date, t.created_at))
    return due


def dispatch_due_reminders(
    task_store: TaskRepo,
    notifier: TaskNotifier,
    *,
    within: timedelta = DEFAULT_HORIZON,
    now: datetime | None = None,
) -> int:
    """Send a due reminder for every matching task. Returns how many were sent."""
    sent = 0
    for task in find_due_tasks(task_store.find_all(), now=now, within=within):
        try:
            notifier.notify_task_due(task)
        except Exception:
            logger.exception("notify_task_due failed task_id=%s", task.id)
            continue
        sent += 1

    logger.info("Due reminders sent=%d within=%s", sent, within)
    return sent
