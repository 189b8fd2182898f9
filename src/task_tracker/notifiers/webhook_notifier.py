# src/task_tracker/notifiers/webhook_notifier.py

from __future__ import annotations

"""
Webhook-based channels (Slack incoming webhook, SMS gateway).

Both POST a small JSON body per event. A non-2xx answer or a transport error
is logged; the caller never sees it and nothing is retried.
"""

import logging
from typing import Any

import httpx

from ..tasks.task_models import Task
from .messages import TaskEvent, event_text

logger = logging.getLogger(__name__)


class _WebhookNotifier:
    channel = "webhook"

    def __init__(self, url: str, *, timeout: float = 10.0, client: httpx.Client | None = None) -> None:
        if not url:
            raise ValueError(f"{type(self).__name__} needs a webhook URL")
        self.url = url
        self.timeout = timeout
        self._client = client

    def _payload(self, event: TaskEvent, task: Task) -> dict[str, Any]:
        raise NotImplementedError

    def _post(self, payload: dict[str, Any]) -> httpx.Response:
        if self._client is not None:
            return self._client.post(self.url, json=payload, timeout=self.timeout)
        with httpx.Client() as client:
            return client.post(self.url, json=payload, timeout=self.timeout)

    def _send(self, event: TaskEvent, task: Task) -> None:
        try:
            resp = self._post(self._payload(event, task))
            resp.raise_for_status()
        except httpx.HTTPError:
            logger.exception("%s delivery failed event=%s task_id=%s", self.channel, event.value, task.id)
            return
        logger.info("%s sent event=%s task_id=%s status=%s", self.channel, event.value, task.id, resp.status_code)

    def notify_task_created(self, task: Task) -> None:
        self._send(TaskEvent.CREATED, task)

    def notify_task_completed(self, task: Task) -> None:
        self._send(TaskEvent.COMPLETED, task)

    def notify_task_due(self, task: Task) -> None:
        self._send(TaskEvent.DUE, task)


class SlackNotifier(_WebhookNotifier):
    """Posts to a Slack incoming-webhook URL."""

    channel = "slack"

    _EMOJI = {
        TaskEvent.CREATED: ":bell:",
        TaskEvent.COMPLETED: ":tada:",
        TaskEvent.DUE: ":alarm_clock:",
    }

    def _payload(self, event: TaskEvent, task: Task) -> dict[str, Any]:
        return {"text": f"{self._EMOJI[event]} {event_text(event, task)}"}


class SmsNotifier(_WebhookNotifier):
    """Posts {"to", "message"} to an HTTP SMS gateway."""

    channel = "sms"

    # Single SMS segment.
    MAX_LEN = 160

    def __init__(
        self,
        url: str,
        *,
        to: str,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        super().__init__(url, timeout=timeout, client=client)
        if not to:
            raise ValueError("SmsNotifier needs a destination number")
        self.to = to

    def _payload(self, event: TaskEvent, task: Task) -> dict[str, Any]:
        text = event_text(event, task)
        if len(text) > self.MAX_LEN:
            text = text[: self.MAX_LEN - 1] + "…"
        return {"to": self.to, "message": text}
