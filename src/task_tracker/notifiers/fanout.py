# src/task_tracker/notifiers/fanout.py

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from ..core.ports import TaskNotifier
from ..tasks.task_models import Task

logger = logging.getLogger(__name__)


class FanoutNotifier:
    """Forwards every event to each channel in order; a crashing channel does not stop the rest."""

    def __init__(self, channels: Sequence[TaskNotifier]) -> None:
        self.channels = list(channels)

    def _each(self, event: str, call: Callable[[TaskNotifier], None], task: Task) -> None:
        for ch in self.channels:
            try:
                call(ch)
            except Exception:
                logger.exception("Notifier %s crashed on %s task_id=%s", type(ch).__name__, event, task.id)

    def notify_task_created(self, task: Task) -> None:
        self._each("created", lambda ch: ch.notify_task_created(task), task)

    def notify_task_completed(self, task: Task) -> None:
        self._each("completed", lambda ch: ch.notify_task_completed(task), task)

    def notify_task_due(self, task: Task) -> None:
        self._each("due", lambda ch: ch.notify_task_due(task), task)
