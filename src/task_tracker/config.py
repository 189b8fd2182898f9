# src/task_tracker/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time.
- Notification channels are opt-in; only the console channel is on by default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TRACKER"

STORAGE_BACKENDS = ("memory", "file")
NOTIFIER_CHANNELS = ("console", "email", "slack", "sms", "matrix")


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    parts = [p.strip() for p in raw.replace(",", " ").split() if p.strip()]
    return parts


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Storage ----
    storage: str
    data_dir: Path
    tasks_file_path: Path
    projects_file_path: Path

    # ---- Notifications ----
    notifiers: list[str]
    due_soon_hours: int
    http_timeout: float

    # ---- Email (SMTP) ----
    smtp_host: str
    smtp_port: int
    smtp_user: str
    smtp_password: str
    smtp_starttls: bool
    email_from: str
    email_to: list[str]

    # ---- Webhooks ----
    slack_webhook_url: str
    sms_gateway_url: str
    sms_to: str

    # ---- Matrix ----
    matrix_homeserver: str
    matrix_user_id: str
    matrix_password: str
    matrix_room_id: str
    matrix_store_path: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "task-tracker")
        log_level = _env(_k("LOG_LEVEL"), "WARNING")

        storage = _env(_k("STORAGE"), "file").strip().lower()
        if storage not in STORAGE_BACKENDS:
            storage = "file"

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/tracker"))
        tasks_file_path = _env_path(_k("TASKS_FILE"), data_dir / "tasks.json")
        projects_file_path = _env_path(_k("PROJECTS_FILE"), data_dir / "projects.json")

        notifiers = [
            n.lower() for n in _env_list(_k("NOTIFIERS"), ["console"]) if n.lower() in NOTIFIER_CHANNELS
        ]
        due_soon_hours = _env_int(_k("DUE_SOON_HOURS"), 24)
        http_timeout = _env_float(_k("HTTP_TIMEOUT"), 10.0)

        smtp_host = _env(_k("SMTP_HOST"), "localhost").strip()
        smtp_port = _env_int(_k("SMTP_PORT"), 25)
        smtp_user = _env(_k("SMTP_USER"), "").strip()
        smtp_password = _env(_k("SMTP_PASSWORD"), "")
        smtp_starttls = _env_bool(_k("SMTP_STARTTLS"), False)
        email_from = _env(_k("EMAIL_FROM"), "tracker@localhost").strip()
        email_to = _env_list(_k("EMAIL_TO"), [])

        slack_webhook_url = _env(_k("SLACK_WEBHOOK_URL"), "").strip()
        sms_gateway_url = _env(_k("SMS_GATEWAY_URL"), "").strip()
        sms_to = _env(_k("SMS_TO"), "").strip()

        matrix_homeserver = _env(_k("MATRIX_HOMESERVER"), "").strip()
        matrix_user_id = _env(_k("MATRIX_USER_ID"), "").strip()
        matrix_password = _env(_k("MATRIX_PASSWORD"), "").strip()
        matrix_room_id = _env(_k("MATRIX_ROOM_ID"), "").strip()
        matrix_store_path = _env_path(_k("MATRIX_STORE_PATH"), data_dir / "matrix_store")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            storage=storage,
            data_dir=data_dir,
            tasks_file_path=tasks_file_path,
            projects_file_path=projects_file_path,
            notifiers=notifiers,
            due_soon_hours=due_soon_hours,
            http_timeout=http_timeout,
            smtp_host=smtp_host,
            smtp_port=smtp_port,
            smtp_user=smtp_user,
            smtp_password=smtp_password,
            smtp_starttls=smtp_starttls,
            email_from=email_from,
            email_to=email_to,
            slack_webhook_url=slack_webhook_url,
            sms_gateway_url=sms_gateway_url,
            sms_to=sms_to,
            matrix_homeserver=matrix_homeserver,
            matrix_user_id=matrix_user_id,
            matrix_password=matrix_password,
            matrix_room_id=matrix_room_id,
            matrix_store_path=matrix_store_path,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
