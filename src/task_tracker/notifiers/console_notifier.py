# src/task_tracker/notifiers/console_notifier.py

from __future__ import annotations

from datetime import datetime
from typing import TextIO

from ..tasks.task_models import Task
from .messages import TaskEvent, event_text

_ICONS = {
    TaskEvent.CREATED: "🔔",
    TaskEvent.COMPLETED: "🎉",
    TaskEvent.DUE: "⏰",
}


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


class ConsoleNotifier:
    """Prints one timestamped line per event (stdout unless a stream is given)."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def _emit(self, event: TaskEvent, task: Task) -> None:
        print(f"[{_ts_local()}] {_ICONS[event]} {event_text(event, task)}", file=self._stream, flush=True)

    def notify_task_created(self, task: Task) -> None:
        self._emit(TaskEvent.CREATED, task)

    def notify_task_completed(self, task: Task) -> None:
        self._emit(TaskEvent.COMPLETED, task)

    def notify_task_due(self, task: Task) -> None:
        self._emit(TaskEvent.DUE, task)
