# src/task_tracker/notifiers/messages.py

from __future__ import annotations

from enum import StrEnum

from ..tasks.task_models import Task


class TaskEvent(StrEnum):
    CREATED = "created"
    COMPLETED = "completed"
    DUE = "due"


def event_text(event: TaskEvent, task: Task) -> str:
    """Plain one-line text for an event, shared by every channel."""
    if event == TaskEvent.CREATED:
        return f'Task "{task.title}" has been created'
    if event == TaskEvent.COMPLETED:
        return f'Task "{task.title}" is complete!'

    if task.due_date is not None:
        return f'Task "{task.title}" is due {task.due_date.strftime("%Y-%m-%d %H:%M")} UTC'
    return f'Task "{task.title}" is due soon'


def event_subject(event: TaskEvent, task: Task) -> str:
    if event == TaskEvent.CREATED:
        return f"[tasks] New task: {task.title}"
    if event == TaskEvent.COMPLETED:
        return f"[tasks] Completed: {task.title}"
    return f"[tasks] Reminder: {task.title} is due"
