# tests/test_task_export.py

from __future__ import annotations

import json
from datetime import timedelta
from pathlib import Path

from task_tracker.tasks.task_export import CsvExporter, JsonExporter, MarkdownExporter, write_export
from task_tracker.tasks.task_models import Priority, TaskStatus, task_from_record

from .helpers import NOW, make_task


def test_empty_exports() -> None:
    assert CsvExporter().export([]) == ""
    assert json.loads(JsonExporter().export([])) == []
    assert MarkdownExporter().export([]).strip() == "# Tasks"


def test_file_extensions() -> None:
    assert CsvExporter().get_file_extension() == ".csv"
    assert JsonExporter().get_file_extension() == ".json"
    assert MarkdownExporter().get_file_extension() == ".md"


def test_csv_rows_quote_text_and_mark_missing_due_date() -> None:
    due = NOW + timedelta(days=1)
    tasks = [
        make_task("1", title="Plain", description="with, comma", priority=Priority.HIGH, due_date=due),
        make_task("2", title='He said "go"', description=""),
    ]

    lines = CsvExporter().export(tasks).split("\n")

    assert lines[0] == "ID,Title,Description,Priority,Status,Due Date,Created At"
    assert lines[1] == f'1,"Plain","with, comma",high,todo,{due.isoformat()},{tasks[0].created_at.isoformat()}'
    assert lines[2] == f'2,"He said ""go""","",medium,todo,N/A,{tasks[1].created_at.isoformat()}'
    assert len(lines) == 3


def test_json_export_has_every_field_and_parses_back() -> None:
    tasks = [
        make_task("1", status=TaskStatus.DONE, due_date=NOW),
        make_task("2", description="second"),
    ]
    text = JsonExporter().export(tasks)
    data = json.loads(text)

    assert "\n  " in text  # pretty-printed
    assert [task_from_record(r) for r in data] == tasks
    assert data[1]["dueDate"] is None
    assert data[0]["completedAt"] == NOW.isoformat()


def test_markdown_sections() -> None:
    tasks = [
        make_task("1", title="Ship it", description="release", status=TaskStatus.DONE,
                  priority=Priority.HIGH, due_date=NOW),
        make_task("2", title="Plan", description="think"),
    ]
    md = MarkdownExporter().export(tasks)

    assert md.startswith("# Tasks\n\n")
    assert "## [x] Ship it" in md
    assert "## [ ] Plan" in md
    assert "**Description:** release" in md
    assert "**Priority:** high" in md
    assert "**Status:** done" in md
    assert "**Due Date:** 2026-10-19" in md
    assert md.count("**Due Date:**") == 1
    assert md.count("---") == 2


def test_write_export_appends_extension(tmp_path: Path) -> None:
    out = write_export(CsvExporter(), [make_task("1")], tmp_path / "report")
    assert out == tmp_path / "report.csv"
    assert out.read_text("utf-8").startswith("ID,Title")

    same = write_export(JsonExporter(), [], tmp_path / "dump.json")
    assert same == tmp_path / "dump.json"
    assert json.loads(same.read_text("utf-8")) == []
