"""Filtering and ordering of tasks for the ``list`` command."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any

from toru.graph import DependencyGraph
from toru.tasks.model import Priority, Task


class Column(str, Enum):
    DUE = "due"
    PRIORITY = "priority"
    CREATED = "created"
    TRACKED = "tracked"
    TAGS = "tags"
    STATUS = "status"


class OrderBy(str, Enum):
    ID = "id"
    NAME = "name"
    DUE = "due"
    PRIORITY = "priority"
    CREATED = "created"
    TRACKED = "tracked"


class Order(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass
class ListOptions:
    columns: list[Column] = field(default_factory=list)
    order_by: OrderBy = OrderBy.ID
    order: Order = Order.ASC
    tags: list[str] = field(default_factory=list)
    exclude_tags: list[str] = field(default_factory=list)
    priorities: list[Priority] = field(default_factory=list)
    due_before: date | None = None
    due_after: date | None = None
    created_before: date | None = None
    created_after: date | None = None
    include_completed: bool = False
    no_dependencies: bool = False
    no_dependents: bool = False

    def unique_columns(self) -> list[Column]:
        return list(dict.fromkeys(self.columns))


def _due_date(task: Task) -> date | None:
    return task.due.date() if task.due is not None else None


def filter_tasks(tasks: list[Task], options: ListOptions, graph: DependencyGraph) -> list[Task]:
    """Apply every filter in *options*. Date bounds are inclusive.

    A task without a due date counts as due infinitely late.
    """
    result = list(tasks)

    if options.created_before is not None:
        result = [t for t in result if t.created.date() <= options.created_before]
    if options.created_after is not None:
        result = [t for t in result if t.created.date() >= options.created_after]
    if options.due_before is not None:
        result = [t for t in result if _due_date(t) is not None and _due_date(t) <= options.due_before]
    if options.due_after is not None:
        result = [t for t in result if _due_date(t) is None or _due_date(t) >= options.due_after]

    if not options.include_completed:
        result = [t for t in result if t.completed is None]

    if options.tags:
        wanted = set(options.tags)
        result = [t for t in result if t.tags & wanted]
    if options.exclude_tags:
        unwanted = set(options.exclude_tags)
        result = [t for t in result if not t.tags & unwanted]

    if options.priorities:
        levels = set(options.priorities)
        result = [t for t in result if t.priority in levels]

    if options.no_dependencies:
        result = [t for t in result if not t.dependencies]
    if options.no_dependents:
        depended_on = graph.get_tasks_with_dependents()
        result = [t for t in result if t.id not in depended_on]

    return result


_SORT_KEYS: dict[OrderBy, Callable[[Task], Any]] = {
    OrderBy.ID: lambda t: t.id,
    OrderBy.NAME: lambda t: t.name,
    OrderBy.DUE: lambda t: (t.due is None, t.due or datetime.min),
    OrderBy.PRIORITY: lambda t: t.priority.rank,
    OrderBy.CREATED: lambda t: t.created,
    OrderBy.TRACKED: lambda t: t.total_time().total_minutes,
}


def sort_tasks(tasks: list[Task], options: ListOptions) -> list[Task]:
    return sorted(tasks, key=_SORT_KEYS[options.order_by], reverse=options.order is Order.DESC)
