"""Rich renderables for tasks, lists and statistics."""

from __future__ import annotations

from datetime import datetime

from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from toru.graph import DependencyGraph
from toru.listing import Column
from toru.tasks.model import Duration, Priority, Task

_PRIORITY_STYLE = {
    Priority.BACKLOG: "dim",
    Priority.LOW: "green",
    Priority.MEDIUM: "yellow",
    Priority.HIGH: "red",
}


def task_id(value: int) -> str:
    return f"[blue]{value}[/blue]"


def task_name(name: str, completed: bool = False) -> str:
    if completed:
        return f"[dim]{escape(name)}[/dim]"
    return f"[bold green]{escape(name)}[/bold green]"


def vault_name(name: str) -> str:
    return f"[bold yellow]{escape(name)}[/bold yellow]"


def priority(level: Priority) -> str:
    style = _PRIORITY_STYLE[level]
    return f"[{style}]{level.value}[/{style}]"


def tags(values: set[str]) -> str:
    return ", ".join(sorted(values))


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'}"


def fuzzy_period(delta_seconds: float) -> str:
    seconds = int(abs(delta_seconds))
    if seconds >= 86400:
        return _plural(seconds // 86400, "day")
    if seconds >= 3600:
        return _plural(seconds // 3600, "hour")
    if seconds >= 60:
        return _plural(seconds // 60, "minute")
    return _plural(seconds, "second")


def due_date(due: datetime, pending: bool = True, now: datetime | None = None) -> str:
    """Due timestamp, with a coloured overdue / remaining hint while pending."""
    stamp = due.replace(microsecond=0).isoformat(sep=" ")
    if not pending:
        return stamp
    remaining = (due - (now or datetime.now())).total_seconds()
    period = fuzzy_period(remaining)
    if remaining < 0:
        return f"{stamp} [red]({period} overdue)[/red]"
    if remaining < 86400:
        return f"{stamp} [bright_red]({period} remaining)[/bright_red]"
    if remaining < 5 * 86400:
        return f"{stamp} [yellow]({period} remaining)[/yellow]"
    return f"{stamp} [green]({period} remaining)[/green]"


def _stamp(value: datetime) -> str:
    return value.replace(microsecond=0).isoformat(sep=" ")


# ── dependency tree ──────────────────────────────────────────────


def dependency_tree(root: Task, graph: DependencyGraph, tasks: dict[int, Task]) -> Tree:
    """Tree of *root*'s dependencies, following the graph recursively."""
    tree = Tree("Dependencies:")
    _add_dependencies(tree, root.id, graph, tasks)
    return tree


def _add_dependencies(branch: Tree, node: int, graph: DependencyGraph, tasks: dict[int, Task]) -> None:
    for dep in sorted(graph.dependencies_of(node)):
        task = tasks.get(dep)
        label = task_name(task.name, task.is_complete) if task else "[red]<missing>[/red]"
        child = branch.add(f"{label} (id: {task_id(dep)})")
        _add_dependencies(child, dep, graph, tasks)


# ── views ────────────────────────────────────────────────────────


def task_lines(task: Task) -> list[str]:
    """Detail lines for ``toru view``, without the dependency tree."""
    mark = "X" if task.is_complete else " "
    heading = f"\\[{mark}] {task_id(task.id)} {task_name(task.name)}"
    lines = [heading, "-" * (5 + len(task.name) + len(str(task.id)))]
    lines.append(f"Priority:     {priority(task.priority)}")
    lines.append(f"Tags:         \\[{escape(tags(task.tags))}]")
    lines.append(f"Created:      {_stamp(task.created)}")
    if task.due is not None:
        lines.append(f"Due:          {due_date(task.due, pending=not task.is_complete)}")
    if task.completed is not None:
        lines.append(f"Completed:    {_stamp(task.completed)}")
    if task.info:
        lines.append("Info:")
        lines.extend(f"    {escape(line)}" for line in task.info.rstrip("\n").split("\n"))
    if task.time_entries:
        lines.append(f"Time Entries (totaling {task.total_time()}):")
        for entry in sorted(task.time_entries, key=lambda e: e.logged_date):
            message = escape(entry.message or "")
            lines.append(f"    {entry.duration} \\[{entry.logged_date.isoformat()}] {message}")
    return lines


def task_table(tasks: list[Task], columns: list[Column]) -> Table:
    table = Table()
    table.add_column("Id", justify="right")
    table.add_column("Name")
    for column in columns:
        table.add_column(column.value.capitalize())

    for task in tasks:
        row = [str(task.id), escape(task.name)]
        for column in columns:
            match column:
                case Column.TRACKED:
                    total = task.total_time()
                    row.append("" if total == Duration.zero() else str(total))
                case Column.DUE:
                    row.append(due_date(task.due, not task.is_complete) if task.due else "")
                case Column.TAGS:
                    row.append(escape(tags(task.tags)))
                case Column.PRIORITY:
                    row.append(priority(task.priority))
                case Column.STATUS:
                    row.append("complete" if task.is_complete else "incomplete")
                case Column.CREATED:
                    row.append(_stamp(task.created))
        table.add_row(*row)
    return table


def tag_time_table(times: dict[str, Duration]) -> Table:
    table = Table()
    table.add_column("Tag")
    table.add_column("Time", justify="right")
    for tag, duration in times.items():
        table.add_row(escape(tag), str(duration))
    return table


def completed_table(tasks: list[Task]) -> Table:
    table = Table()
    table.add_column("Id", justify="right")
    table.add_column("Name")
    table.add_column("Completed")
    for task in tasks:
        table.add_row(str(task.id), escape(task.name), _stamp(task.completed))
    return table
