# src/task_tracker/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- picks the concrete stores, notification channels and exporters,
- wires them into AppState.

Nothing else in the app chooses an implementation.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import ProjectRepo, TaskExporter, TaskNotifier, TaskRepo
from ..core.state import AppState
from ..notifiers.console_notifier import ConsoleNotifier
from ..notifiers.email_notifier import EmailNotifier
from ..notifiers.fanout import FanoutNotifier
from ..notifiers.matrix_notifier import MatrixNotifier
from ..notifiers.webhook_notifier import SlackNotifier, SmsNotifier
from ..tasks.project_store import InMemoryProjectStore, JsonFileProjectStore
from ..tasks.task_export import CsvExporter, JsonExporter, MarkdownExporter
from ..tasks.task_store import InMemoryTaskStore, JsonFileTaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    if settings.storage == "file":
        settings.tasks_file_path.parent.mkdir(parents=True, exist_ok=True)
        settings.projects_file_path.parent.mkdir(parents=True, exist_ok=True)


def build_task_store(settings) -> TaskRepo:
    if settings.storage == "memory":
        return InMemoryTaskStore()
    return JsonFileTaskStore(settings.tasks_file_path)


def build_project_store(settings) -> ProjectRepo:
    if settings.storage == "memory":
        return InMemoryProjectStore()
    return JsonFileProjectStore(settings.projects_file_path)


def _build_channel(name: str, settings) -> TaskNotifier:
    if name == "console":
        return ConsoleNotifier()
    if name == "email":
        return EmailNotifier(
            host=settings.smtp_host,
            port=settings.smtp_port,
            sender=settings.email_from,
            recipients=settings.email_to,
            username=settings.smtp_user,
            password=settings.smtp_password,
            starttls=settings.smtp_starttls,
            timeout=settings.http_timeout,
        )
    if name == "slack":
        return SlackNotifier(settings.slack_webhook_url, timeout=settings.http_timeout)
    if name == "sms":
        return SmsNotifier(settings.sms_gateway_url, to=settings.sms_to, timeout=settings.http_timeout)
    if name == "matrix":
        return MatrixNotifier(settings)
    raise ValueError(f"Unknown notifier channel: {name!r}")


def build_notifier(settings) -> TaskNotifier:
    """
    Build every configured channel behind one FanoutNotifier.

    A channel with incomplete settings is skipped with an error in the log,
    so a missing webhook URL does not stop the app from starting.
    """
    channels: list[TaskNotifier] = []
    for name in getattr(settings, "notifiers", None) or []:
        try:
            channels.append(_build_channel(name, settings))
        except ValueError as e:
            logger.error("Notifier %s disabled: %s", name, e)

    logger.info("Notifiers active: %s", ", ".join(type(c).__name__ for c in channels) or "none")
    return FanoutNotifier(channels)


def build_exporter(fmt: str) -> TaskExporter:
    key = fmt.strip().lower().lstrip(".")
    if key == "csv":
        return CsvExporter()
    if key == "json":
        return JsonExporter()
    if key in ("md", "markdown"):
        return MarkdownExporter()
    raise ValueError(f"Unknown export format: {fmt!r} (use csv, json or md)")


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    return AppState(
        settings=settings,
        tasks=build_task_store(settings),
        projects=build_project_store(settings),
        notifier=build_notifier(settings),
    )
