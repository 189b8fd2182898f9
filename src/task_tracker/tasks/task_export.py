# src/task_tracker/tasks/task_export.py

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from pathlib import Path

from ..core.ports import TaskExporter
from .task_models import Task, TaskStatus, task_to_record

logger = logging.getLogger(__name__)

CSV_HEADER = "ID,Title,Description,Priority,Status,Due Date,Created At"
NO_DUE_DATE = "N/A"
MARKDOWN_HEADING = "# Tasks"


def _csv_quote(text: str) -> str:
    return '"' + text.replace('"', '""') + '"'


class CsvExporter:
    """
    One header row plus one row per task.

    Title and description are always quoted; a missing due date is written as N/A.
    An empty collection exports as "" (no header).
    """

    def export(self, tasks: Sequence[Task]) -> str:
        if not tasks:
            return ""

        rows = [CSV_HEADER]
        for t in tasks:
            due = t.due_date.isoformat() if t.due_date is not None else NO_DUE_DATE
            rows.append(
                ",".join(
                    [
                        t.id,
                        _csv_quote(t.title),
                        _csv_quote(t.description),
                        t.priority.value,
                        t.status.value,
                        due,
                        t.created_at.isoformat(),
                    ]
                )
            )
        return "\n".join(rows)

    def get_file_extension(self) -> str:
        return ".csv"


class JsonExporter:
    """Every field of every task, same record shape as the durable tasks file."""

    def export(self, tasks: Sequence[Task]) -> str:
        return json.dumps([task_to_record(t) for t in tasks], ensure_ascii=False, indent=2)

    def get_file_extension(self) -> str:
        return ".json"


class MarkdownExporter:
    def export(self, tasks: Sequence[Task]) -> str:
        parts = [f"{MARKDOWN_HEADING}\n\n"]

        for t in tasks:
            checkbox = "[x]" if t.status == TaskStatus.DONE else "[ ]"
            parts.append(f"## {checkbox} {t.title}\n\n")
            parts.append(f"**Description:** {t.description}\n\n")
            parts.append(f"**Priority:** {t.priority.value}\n\n")
            parts.append(f"**Status:** {t.status.value}\n\n")
            if t.due_date is not None:
                parts.append(f"**Due Date:** {t.due_date.date().isoformat()}\n\n")
            parts.append("---\n\n")

        return "".join(parts)

    def get_file_extension(self) -> str:
        return ".md"


def write_export(exporter: TaskExporter, tasks: Sequence[Task], path: str | Path) -> Path:
    """Export `tasks` into `path`, appending the exporter's extension when it is missing."""
    path = Path(path)
    ext = exporter.get_file_extension()
    if path.suffix.lower() != ext:
        path = path.with_name(path.name + ext)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(exporter.export(tasks), "utf-8")
    logger.info("Exported %d tasks to %s", len(tasks), path)
    return path
