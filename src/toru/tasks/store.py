"""Task record store and lifecycle operations.

One YAML file per task lives under ``<vault>/tasks/<id>.yaml``. The
functions here write and delete those files immediately, and keep the
in-memory :class:`~toru.state.VaultState` (graph and name index) in step.
Persisting the state itself is left to the command that loaded it.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import date, datetime
from pathlib import Path
from typing import TYPE_CHECKING

import yaml
from send2trash import send2trash

from toru import log
from toru.errors import InternalError, NotFoundError, UserError
from toru.index import parse_id
from toru.io_utils import read_text, rewrite_text, write_text
from toru.tasks.model import Priority, Task, TimeEntry, validate_name

if TYPE_CHECKING:
    from toru.state import VaultState

TASK_EXT = ".yaml"


# ── paths ────────────────────────────────────────────────────────


def tasks_dir(vault: Path) -> Path:
    return vault / "tasks"


def task_path(task_id: int, vault: Path) -> Path:
    return tasks_dir(vault) / f"{task_id}{TASK_EXT}"


def check_exists(task_id: int, vault: Path) -> Path:
    """Return the file path for *task_id*, or raise if there is no such task."""
    path = task_path(task_id, vault)
    if not path.is_file():
        raise NotFoundError(f"No task with the id {task_id} exists")
    return path


def id_iter(vault: Path) -> Iterator[int]:
    """Ids of every task file in the vault, ascending.

    Files whose stem is not a bare integer are ignored.
    """
    ids: list[int] = []
    for entry in tasks_dir(vault).iterdir():
        if not entry.is_file() or entry.suffix != TASK_EXT:
            continue
        task_id = parse_id(entry.stem)
        if task_id is not None and str(task_id) == entry.stem:
            ids.append(task_id)
    yield from sorted(ids)


# ── serialization ────────────────────────────────────────────────


def dump_task(task: Task) -> str:
    return yaml.safe_dump(task.to_dict(), sort_keys=False, allow_unicode=True)


def parse_task(text: str) -> Task:
    return Task.from_dict(yaml.safe_load(text))


# ── loading ──────────────────────────────────────────────────────


def load_direct(path: Path, read_only: bool = True) -> Task:
    """Load a task straight from *path*, e.g. the temporary edit file."""
    task = parse_task(read_text(path))
    task.path = path
    task.read_only = read_only
    return task


def load(task_id: int, vault: Path, read_only: bool = True) -> Task:
    return load_direct(check_exists(task_id, vault), read_only)


def load_all(vault: Path, read_only: bool = True) -> list[Task]:
    """Load every task in the vault. One malformed file fails the whole batch."""
    return [load(task_id, vault, read_only) for task_id in id_iter(vault)]


def load_all_as_map(vault: Path, read_only: bool = True) -> dict[int, Task]:
    return {task.id: task for task in load_all(vault, read_only)}


# ── writing ──────────────────────────────────────────────────────


def save(task: Task) -> None:
    """Overwrite the task's file with its in-memory record."""
    if task.path is None or task.read_only:
        raise InternalError(f"Task {task.id} was not loaded for writing")
    # An edit can reintroduce a numeric name, so check again here.
    validate_name(task.name)
    rewrite_text(task.path, dump_task(task))


def delete(task: Task) -> None:
    """Move the task's file to the trash so the deletion can be undone."""
    if task.path is None:
        raise InternalError(f"Task {task.id} has no file to delete")
    send2trash(str(task.path))
    log.debug(f"Moved {task.path} to trash")


# ── lifecycle ────────────────────────────────────────────────────


def create(
    name: str,
    info: str | None,
    tags: Iterable[str],
    dependencies: Iterable[int],
    priority: Priority | None,
    due: datetime | None,
    vault: Path,
    state: VaultState,
) -> Task:
    """Create a task, wire it into the graph and index, and write its file.

    Every dependency is checked before anything is mutated, so a missing
    one leaves the state exactly as it was.
    """
    validate_name(name)
    deps = list(dict.fromkeys(dependencies))
    for dep in deps:
        if not state.graph.contains_node(dep):
            raise NotFoundError(f"No task with an id of {dep} exists")

    task_id = state.allocate_id()
    state.graph.insert_node(task_id)
    for dep in deps:
        state.graph.insert_edge(task_id, dep)

    task = Task(
        id=task_id,
        name=name,
        info=info,
        tags=set(tags),
        dependencies=set(deps),
        priority=priority or Priority.LOW,
        due=due,
        created=datetime.now(),
        path=task_path(task_id, vault),
        read_only=False,
    )
    write_text(task.path, dump_task(task))
    state.index.insert(task.name, task_id)
    log.debug(f"Created task {task_id} ({name})")
    return task


def remove(task_id: int, vault: Path, state: VaultState) -> Task:
    """Delete a task and strip it from every task that depended on it.

    The graph and index are updated first, then each dependent's file is
    re-saved without the id, and the task's own file is trashed last.
    """
    task = load(task_id, vault, read_only=False)
    _, dependents = state.graph.remove_node(task_id)
    state.index.remove(task.name, task_id)

    for dependent_id in sorted(dependents):
        dependent = load(dependent_id, vault, read_only=False)
        dependent.dependencies.discard(task_id)
        save(dependent)
        log.debug(f"Removed dependency on {task_id} from task {dependent_id}")

    delete(task)
    return task


def complete(task_id: int, vault: Path) -> Task:
    """Mark a task complete. There is no way back."""
    task = load(task_id, vault, read_only=False)
    if task.completed is not None:
        raise UserError(f"Task {task_id} is already complete")
    task.completed = datetime.now()
    save(task)
    return task


def track(
    task_id: int,
    vault: Path,
    hours: int,
    minutes: int,
    logged_date: date | None = None,
    message: str | None = None,
) -> TimeEntry:
    """Log time against a task."""
    if hours < 0 or minutes < 0:
        raise UserError("Tracked time cannot be negative")
    task = load(task_id, vault, read_only=False)
    entry = TimeEntry.new(hours, minutes, logged_date, message)
    task.time_entries.append(entry)
    save(task)
    return entry
