# tests/test_task_filters.py

from __future__ import annotations

import itertools
from datetime import timedelta

import pytest

from task_tracker.tasks.task_filters import (
    DueDateRangeFilter,
    OverdueFilter,
    PriorityFilter,
    ProjectFilter,
    StatusFilter,
    apply_filters,
)
from task_tracker.tasks.task_models import Priority, TaskStatus

from .helpers import NOW, make_task


@pytest.fixture()
def tasks():
    return [
        make_task("1", priority=Priority.HIGH, due_date=NOW - timedelta(days=2)),
        make_task("2", priority=Priority.LOW, due_date=NOW + timedelta(days=2), project_id="p2"),
        make_task("3", priority=Priority.HIGH, status=TaskStatus.DONE, due_date=NOW - timedelta(days=1)),
        make_task("4", priority=Priority.MEDIUM, status=TaskStatus.IN_PROGRESS),
        make_task("5", priority=Priority.HIGH, status=TaskStatus.IN_PROGRESS, due_date=NOW),
    ]


def ids(tasks) -> list[str]:
    return [t.id for t in tasks]


def test_status_filter(tasks) -> None:
    assert ids(StatusFilter(TaskStatus.IN_PROGRESS).filter(tasks)) == ["4", "5"]
    assert ids(StatusFilter("done").filter(tasks)) == ["3"]


def test_priority_filter(tasks) -> None:
    assert ids(PriorityFilter(Priority.HIGH).filter(tasks)) == ["1", "3", "5"]


def test_project_filter(tasks) -> None:
    assert ids(ProjectFilter("p2").filter(tasks)) == ["2"]


def test_overdue_filter_excludes_done_and_undated(tasks) -> None:
    assert ids(OverdueFilter(now=NOW).filter(tasks)) == ["1"]


def test_overdue_filter_reads_clock_when_not_pinned() -> None:
    past = make_task("1", due_date=NOW - timedelta(days=3650))
    assert ids(OverdueFilter().filter([past])) == ["1"]


def test_due_date_range_is_inclusive(tasks) -> None:
    f = DueDateRangeFilter(NOW - timedelta(days=1), NOW)
    assert ids(f.filter(tasks)) == ["3", "5"]

    wide = DueDateRangeFilter(NOW - timedelta(days=30), NOW + timedelta(days=30))
    assert ids(wide.filter(tasks)) == ["1", "2", "3", "5"]


def test_due_date_range_rejects_inverted_bounds() -> None:
    with pytest.raises(ValueError):
        DueDateRangeFilter(NOW, NOW - timedelta(seconds=1))


def test_filters_do_not_mutate_input(tasks) -> None:
    snapshot = list(tasks)
    PriorityFilter(Priority.HIGH).filter(tasks)
    OverdueFilter(now=NOW).filter(tasks)
    assert tasks == snapshot


def test_filter_output_is_subsequence_of_input(tasks) -> None:
    all_filters = [
        StatusFilter(TaskStatus.TODO),
        PriorityFilter(Priority.HIGH),
        OverdueFilter(now=NOW),
        DueDateRangeFilter(NOW - timedelta(days=5), NOW + timedelta(days=5)),
        ProjectFilter("p1"),
    ]
    for f in all_filters:
        out = f.filter(tasks)
        it = iter(tasks)
        assert all(any(t is x for x in it) for t in out)


def test_filter_chains_commute(tasks) -> None:
    chain = [
        PriorityFilter(Priority.HIGH),
        StatusFilter(TaskStatus.IN_PROGRESS),
        DueDateRangeFilter(NOW - timedelta(days=5), NOW + timedelta(days=5)),
    ]
    results = {frozenset(ids(apply_filters(tasks, order))) for order in itertools.permutations(chain)}
    assert results == {frozenset({"5"})}


def test_apply_filters_without_filters_copies_input(tasks) -> None:
    out = apply_filters(tasks, [])
    assert out == tasks
    assert out is not tasks
