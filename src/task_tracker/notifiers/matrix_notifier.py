# src/task_tracker/notifiers/matrix_notifier.py

from __future__ import annotations

import asyncio
import logging

import aiohttp
from nio import RoomSendResponse

from ..tasks.task_models import Task
from . import matrix_client
from .messages import TaskEvent, event_text

logger = logging.getLogger(__name__)


class MatrixNotifier:
    """
    Posts an m.text message to one Matrix room per event.

    The rest of the app is synchronous, so each event runs its own short event
    loop: connect (restored session or password login), send, close.
    Only unencrypted rooms are supported.
    """

    def __init__(self, settings, *, room_id: str | None = None) -> None:
        self._settings = settings
        self.room_id = (room_id or getattr(settings, "matrix_room_id", "") or "").strip()
        if not self.room_id:
            raise ValueError("MatrixNotifier needs a room id (TRACKER_MATRIX_ROOM_ID)")

    async def _deliver(self, text: str) -> bool:
        client = await matrix_client.create_matrix_client(self._settings)
        if client is None:
            return False
        try:
            resp = await client.room_send(
                room_id=self.room_id,
                message_type="m.room.message",
                content={"msgtype": "m.text", "body": text},
                ignore_unverified_devices=True,
            )
        finally:
            await client.close()

        if not isinstance(resp, RoomSendResponse):
            logger.error("Matrix room_send failed room=%s: %r", self.room_id, resp)
            return False
        return True

    def _send(self, event: TaskEvent, task: Task) -> None:
        try:
            ok = asyncio.run(self._deliver(event_text(event, task)))
        except (aiohttp.ClientError, OSError, asyncio.TimeoutError):
            logger.exception("Matrix delivery failed event=%s task_id=%s", event.value, task.id)
            return
        if ok:
            logger.info("Matrix sent event=%s task_id=%s room=%s", event.value, task.id, self.room_id)

    def notify_task_created(self, task: Task) -> None:
        self._send(TaskEvent.CREATED, task)

    def notify_task_completed(self, task: Task) -> None:
        self._send(TaskEvent.COMPLETED, task)

    def notify_task_due(self, task: Task) -> None:
        self._send(TaskEvent.DUE, task)
