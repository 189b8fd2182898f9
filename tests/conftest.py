# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from task_tracker.core.state import AppState
from task_tracker.tasks.project_store import InMemoryProjectStore
from task_tracker.tasks.task_store import InMemoryTaskStore, JsonFileTaskStore

from .fakes import RecordingNotifier


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="task-tracker-test",
        log_level="DEBUG",
        storage="file",
        data_dir=tmp_path,
        tasks_file_path=tmp_path / "tasks.json",
        projects_file_path=tmp_path / "projects.json",
        notifiers=[],
        due_soon_hours=24,
        http_timeout=1.0,
        matrix_homeserver="",
        matrix_user_id="",
        matrix_password="",
        matrix_room_id="",
        matrix_store_path=tmp_path / "matrix_store",
    )


@pytest.fixture(params=["memory", "file"])
def task_store(request, tmp_path: Path):
    """Both task store backends: every test using this runs once per backend."""
    if request.param == "memory":
        return InMemoryTaskStore()
    return JsonFileTaskStore(tmp_path / "tasks.json")


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def state(settings: SimpleNamespace, notifier: RecordingNotifier) -> AppState:
    """
    AppState wired with a recording notifier.

    NOTE: We keep a real file-backed task store here because its behaviour
    is part of what we want to test.
    """
    return AppState(
        settings=settings,
        tasks=JsonFileTaskStore(settings.tasks_file_path),
        projects=InMemoryProjectStore(),
        notifier=notifier,
    )
