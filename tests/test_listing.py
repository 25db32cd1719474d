"""Tests for toru.listing: list filters and ordering."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from toru.graph import DependencyGraph
from toru.listing import ListOptions, Order, OrderBy, filter_tasks, sort_tasks
from toru.tasks.model import Priority, TimeEntry


def _ids(tasks):
    return [t.id for t in tasks]


@pytest.fixture
def tasks(make_task):
    return [
        make_task(0, "write report", tags={"work"}, priority=Priority.HIGH,
                  created=datetime(2024, 1, 1), due=datetime(2024, 3, 1, 17, 0)),
        make_task(1, "buy milk", tags={"home"}, priority=Priority.LOW,
                  created=datetime(2024, 2, 1)),
        make_task(2, "fix bike", tags={"home", "outdoor"}, priority=Priority.BACKLOG,
                  created=datetime(2024, 3, 1), due=datetime(2024, 2, 1, 8, 0),
                  dependencies={1}),
        make_task(3, "old chore", created=datetime(2023, 6, 1),
                  completed=datetime(2023, 7, 1)),
    ]


@pytest.fixture
def graph(tasks):
    return DependencyGraph.create(tasks)


class TestFilter:

    def test_default_hides_completed(self, tasks, graph):
        assert _ids(filter_tasks(tasks, ListOptions(), graph)) == [0, 1, 2]

    def test_include_completed(self, tasks, graph):
        opts = ListOptions(include_completed=True)
        assert _ids(filter_tasks(tasks, opts, graph)) == [0, 1, 2, 3]

    def test_tags_match_any(self, tasks, graph):
        opts = ListOptions(tags=["work", "outdoor"])
        assert _ids(filter_tasks(tasks, opts, graph)) == [0, 2]

    def test_exclude_tags(self, tasks, graph):
        opts = ListOptions(exclude_tags=["home"])
        assert _ids(filter_tasks(tasks, opts, graph)) == [0]

    def test_priorities(self, tasks, graph):
        opts = ListOptions(priorities=[Priority.LOW, Priority.BACKLOG])
        assert _ids(filter_tasks(tasks, opts, graph)) == [1, 2]

    def test_due_bounds_are_inclusive(self, tasks, graph):
        before = ListOptions(due_before=date(2024, 2, 1))
        assert _ids(filter_tasks(tasks, before, graph)) == [2]
        after = ListOptions(due_after=date(2024, 3, 1))
        # No due date counts as due infinitely late.
        assert _ids(filter_tasks(tasks, after, graph)) == [0, 1]

    def test_created_bounds(self, tasks, graph):
        opts = ListOptions(created_after=date(2024, 2, 1), created_before=date(2024, 3, 1))
        assert _ids(filter_tasks(tasks, opts, graph)) == [1, 2]

    def test_dependency_filters(self, tasks, graph):
        assert _ids(filter_tasks(tasks, ListOptions(no_dependencies=True), graph)) == [0, 1]
        assert _ids(filter_tasks(tasks, ListOptions(no_dependents=True), graph)) == [0, 2]


class TestSort:

    @pytest.mark.parametrize(
        "order_by, expected",
        [
            (OrderBy.ID, [0, 1, 2]),
            (OrderBy.NAME, [1, 2, 0]),
            (OrderBy.DUE, [2, 0, 1]),
            (OrderBy.PRIORITY, [2, 1, 0]),
            (OrderBy.CREATED, [0, 1, 2]),
        ],
    )
    def test_ascending(self, tasks, order_by, expected):
        assert _ids(sort_tasks(tasks[:3], ListOptions(order_by=order_by))) == expected

    def test_descending(self, tasks):
        opts = ListOptions(order_by=OrderBy.PRIORITY, order=Order.DESC)
        assert _ids(sort_tasks(tasks[:3], opts)) == [0, 1, 2]

    def test_tracked(self, tasks):
        tasks[1].time_entries.append(TimeEntry.new(3, 0, date(2024, 1, 1)))
        tasks[2].time_entries.append(TimeEntry.new(0, 30, date(2024, 1, 1)))
        opts = ListOptions(order_by=OrderBy.TRACKED)
        assert _ids(sort_tasks(tasks[:3], opts)) == [0, 2, 1]


def test_unique_columns_keeps_first_occurrence():
    from toru.listing import Column

    opts = ListOptions(columns=[Column.TAGS, Column.DUE, Column.TAGS])
    assert opts.unique_columns() == [Column.TAGS, Column.DUE]
