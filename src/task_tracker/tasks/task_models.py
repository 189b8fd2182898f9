# src/task_tracker/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any


class TaskStatus(StrEnum):
    """Task lifecycle status. Values are the stored (wire) form."""

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def utcnow() -> datetime:
    return datetime.now(UTC)


def _require_text(owner: str, name: str, value: Any, *, allow_blank: bool = False) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{owner}.{name} must be a string, got {type(value).__name__}")
    if not allow_blank and not value.strip():
        raise ValueError(f"{owner}.{name} is required")
    return value


def ensure_utc(owner: str, name: str, value: Any) -> datetime:
    if not isinstance(value, datetime):
        raise TypeError(f"{owner}.{name} must be a datetime, got {type(value).__name__}")
    # Naive timestamps are taken as UTC so comparisons never mix naive/aware.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _optional_utc(owner: str, name: str, value: Any) -> datetime | None:
    return None if value is None else ensure_utc(owner, name, value)


_TASK_FIXED = frozenset({"id", "project_id", "created_at"})
_PROJECT_FIXED = frozenset({"id", "created_at"})


@dataclass(slots=True)
class Task:
    """
    A unit of work inside a project.

    Invariants enforced here:
    - id, project_id and created_at cannot be reassigned once set
    - completed_at is set exactly when status is DONE
    - status/priority are real enum members (exact wire values are accepted)

    is_overdue() is derived from due_date and status; it is never stored.
    """

    id: str
    title: str
    project_id: str
    description: str = ""
    status: TaskStatus = TaskStatus.TODO
    priority: Priority = Priority.MEDIUM
    due_date: datetime | None = None
    created_at: datetime = field(default_factory=utcnow)
    completed_at: datetime | None = None

    def __post_init__(self) -> None:
        _require_text("Task", "id", self.id)
        _require_text("Task", "title", self.title)
        _require_text("Task", "project_id", self.project_id)
        _require_text("Task", "description", self.description, allow_blank=True)

        self.status = TaskStatus(self.status)
        self.priority = Priority(self.priority)

        object.__setattr__(self, "created_at", ensure_utc("Task", "created_at", self.created_at))
        self.due_date = _optional_utc("Task", "due_date", self.due_date)
        self.completed_at = _optional_utc("Task", "completed_at", self.completed_at)

        if self.status == TaskStatus.DONE and self.completed_at is None:
            raise ValueError(f"Task {self.id!r} is DONE but has no completed_at; use mark_complete()")
        if self.status != TaskStatus.DONE and self.completed_at is not None:
            raise ValueError(f"Task {self.id!r} has completed_at but status is {self.status.value}")

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _TASK_FIXED and hasattr(self, name):
            raise AttributeError(f"Task.{name} is immutable")
        object.__setattr__(self, name, value)

    # ---- transitions ----

    def mark_complete(self, now: datetime | None = None) -> None:
        self.status = TaskStatus.DONE
        self.completed_at = utcnow() if now is None else ensure_utc("Task", "completed_at", now)

    def mark_in_progress(self) -> None:
        self.status = TaskStatus.IN_PROGRESS
        self.completed_at = None

    def update_status(self, status: TaskStatus | str) -> None:
        status = TaskStatus(status)
        if status == TaskStatus.DONE:
            if self.status != TaskStatus.DONE:
                self.mark_complete()
            return
        self.status = status
        self.completed_at = None

    # ---- field updates ----

    def update_title(self, title: str) -> None:
        self.title = _require_text("Task", "title", title)

    def update_description(self, description: str) -> None:
        self.description = _require_text("Task", "description", description, allow_blank=True)

    def update_priority(self, priority: Priority | str) -> None:
        self.priority = Priority(priority)

    def update_due_date(self, due_date: datetime | None) -> None:
        self.due_date = _optional_utc("Task", "due_date", due_date)

    def is_overdue(self, now: datetime | None = None) -> bool:
        if self.due_date is None or self.status == TaskStatus.DONE:
            return False
        now = utcnow() if now is None else ensure_utc("Task", "now", now)
        return now > self.due_date


@dataclass(slots=True)
class Project:
    """A named group of tasks. Tasks point at it via Task.project_id."""

    id: str
    name: str
    description: str = ""
    created_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        _require_text("Project", "id", self.id)
        _require_text("Project", "name", self.name)
        _require_text("Project", "description", self.description, allow_blank=True)
        object.__setattr__(self, "created_at", ensure_utc("Project", "created_at", self.created_at))

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _PROJECT_FIXED and hasattr(self, name):
            raise AttributeError(f"Project.{name} is immutable")
        object.__setattr__(self, name, value)

    def update_name(self, name: str) -> None:
        self.name = _require_text("Project", "name", name)

    def update_description(self, description: str) -> None:
        self.description = _require_text("Project", "description", description, allow_blank=True)


# ---- record codec (durable JSON form) ----


def _ts_to_str(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _str_to_ts(value: Any) -> datetime | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise TypeError(f"expected ISO-8601 string, got {type(value).__name__}")
    return datetime.fromisoformat(value)


def task_to_record(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "status": task.status.value,
        "priority": task.priority.value,
        "dueDate": _ts_to_str(task.due_date),
        "projectId": task.project_id,
        "createdAt": _ts_to_str(task.created_at),
        "completedAt": _ts_to_str(task.completed_at),
    }


def task_from_record(rec: dict[str, Any]) -> Task:
    """Rebuild a Task from its record. Missing keys or bad values raise."""
    return Task(
        id=rec["id"],
        title=rec["title"],
        description=rec["description"],
        status=TaskStatus(rec["status"]),
        priority=Priority(rec["priority"]),
        due_date=_str_to_ts(rec.get("dueDate")),
        project_id=rec["projectId"],
        created_at=_str_to_ts(rec["createdAt"]),
        completed_at=_str_to_ts(rec.get("completedAt")),
    )


def project_to_record(project: Project) -> dict[str, Any]:
    return {
        "id": project.id,
        "name": project.name,
        "description": project.description,
        "createdAt": _ts_to_str(project.created_at),
    }


def project_from_record(rec: dict[str, Any]) -> Project:
    return Project(
        id=rec["id"],
        name=rec["name"],
        description=rec["description"],
        created_at=_str_to_ts(rec["createdAt"]),
    )
