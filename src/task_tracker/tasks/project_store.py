# src/task_tracker/tasks/project_store.py

from __future__ import annotations

from pathlib import Path

from .store_base import InMemoryStore, JsonFileStore
from .task_models import Project, project_from_record, project_to_record


class InMemoryProjectStore(InMemoryStore[Project]):
    kind = "project"


class JsonFileProjectStore(JsonFileStore[Project]):
    """File-backed project store (projects.json)."""

    kind = "project"

    def __init__(self, path: str | Path = "projects.json") -> None:
        super().__init__(path, to_record=project_to_record, from_record=project_from_record)
