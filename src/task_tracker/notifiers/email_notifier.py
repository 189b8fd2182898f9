# src/task_tracker/notifiers/email_notifier.py

from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage

from ..tasks.task_models import Task
from .messages import TaskEvent, event_subject, event_text

logger = logging.getLogger(__name__)


class EmailNotifier:
    """
    Sends one plain-text email per event over SMTP.

    A fresh SMTP connection is opened per message. Delivery errors are logged,
    never raised to the caller.
    """

    def __init__(
        self,
        *,
        host: str,
        port: int = 25,
        sender: str,
        recipients: list[str],
        username: str = "",
        password: str = "",
        starttls: bool = False,
        timeout: float = 10.0,
    ) -> None:
        if not recipients:
            raise ValueError("EmailNotifier needs at least one recipient")
        self.host = host
        self.port = port
        self.sender = sender
        self.recipients = list(recipients)
        self.username = username
        self.password = password
        self.starttls = starttls
        self.timeout = timeout

    def _build(self, event: TaskEvent, task: Task) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = event_subject(event, task)
        msg["From"] = self.sender
        msg["To"] = ", ".join(self.recipients)

        lines = [event_text(event, task), ""]
        if task.description:
            lines += [task.description, ""]
        lines.append(f"Project: {task.project_id}")
        lines.append(f"Priority: {task.priority.value}  Status: {task.status.value}")
        msg.set_content("\n".join(lines))
        return msg

    def _send(self, event: TaskEvent, task: Task) -> None:
        msg = self._build(event, task)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                if self.starttls:
                    smtp.starttls()
                if self.username:
                    smtp.login(self.username, self.password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError):
            logger.exception("Email delivery failed event=%s task_id=%s", event.value, task.id)
            return
        logger.info("Email sent event=%s task_id=%s to=%s", event.value, task.id, msg["To"])

    def notify_task_created(self, task: Task) -> None:
        self._send(TaskEvent.CREATED, task)

    def notify_task_completed(self, task: Task) -> None:
        self._send(TaskEvent.COMPLETED, task)

    def notify_task_due(self, task: Task) -> None:
        self._send(TaskEvent.DUE, task)
