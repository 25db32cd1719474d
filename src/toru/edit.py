"""Editing tasks through an external editor."""

from __future__ import annotations

import shlex
import shutil
import subprocess
from pathlib import Path

from toru import log
from toru.errors import NotFoundError, ToruError, UserError
from toru.graph import DependencyGraph, format_cycle
from toru.io_utils import read_text, write_text
from toru.state import VaultState
from toru.tasks import store
from toru.tasks.model import Task, validate_name

RAW_TEMP_FILE = "temp.yaml"
INFO_TEMP_FILE = "temp.md"


def open_editor(path: Path, editor: str) -> None:
    """Open *path* in *editor* and block until it exits."""
    cmd = [*shlex.split(editor), str(path)]
    log.debug(f"Running editor: {' '.join(cmd)}")
    result = subprocess.run(cmd)
    if result.returncode < 0:
        raise UserError(f"Editor was interrupted by signal {-result.returncode}")
    if result.returncode != 0:
        raise UserError(f"Editor exited with a non-zero status code: {result.returncode}")


def edit_info(task_id: int, vault: Path, editor: str) -> Task:
    """Edit only the task's info text, in a markdown file."""
    task = store.load(task_id, vault, read_only=False)
    temp_path = vault / INFO_TEMP_FILE
    write_text(temp_path, task.info or "")

    open_editor(temp_path, editor)

    contents = read_text(temp_path)
    task.info = contents if contents.strip() else None
    store.save(task)
    temp_path.unlink()
    return task


def edit_raw(task_id: int, vault: Path, editor: str, state: VaultState) -> Task:
    """Edit the whole task record by hand.

    The edited copy is checked before anything is written: the id and
    creation time must be unchanged, completion cannot be undone, the name
    must not be numeric, and a changed dependency set must reference
    existing tasks without closing a cycle. On rejection the graph is put
    back as it was and the task file is left untouched.
    """
    task = store.load(task_id, vault, read_only=False)
    temp_path = vault / RAW_TEMP_FILE
    shutil.copyfile(task.path, temp_path)

    open_editor(temp_path, editor)

    edited = store.load_direct(temp_path, read_only=True)
    _check_edit(task, edited)

    if edited.dependencies != task.dependencies:
        _rewire_dependencies(state.graph, task_id, task.dependencies, edited.dependencies)

    if edited.name != task.name:
        state.index.remove(task.name, task_id)
        state.index.insert(edited.name, task_id)

    edited.path = task.path
    edited.read_only = False
    store.save(edited)
    temp_path.unlink()
    return edited


def _check_edit(original: Task, edited: Task) -> None:
    if edited.id != original.id:
        raise UserError("You cannot change the id of a task in a direct edit")
    validate_name(edited.name)
    for entry in edited.time_entries:
        if not entry.duration.satisfies_invariant():
            raise UserError("Time entry durations must have fewer than 60 minutes")
    if edited.created != original.created:
        raise UserError("You cannot change the creation time of a task")
    if original.completed is not None and edited.completed != original.completed:
        raise UserError("You cannot change the completion time of a completed task")


def _rewire_dependencies(
    graph: DependencyGraph,
    task_id: int,
    old: set[int],
    new: set[int],
) -> None:
    for dep in sorted(new):
        if not graph.contains_node(dep):
            raise NotFoundError(f"No task with an id of {dep} exists")

    for dep in old:
        graph.remove_edge(task_id, dep)
    try:
        for dep in sorted(new):
            graph.insert_edge(task_id, dep)
        cycle = graph.find_cycle()
        if cycle is not None:
            raise UserError(f"Task edit aborted due to circular dependency: {format_cycle(cycle)}")
    except ToruError:
        for dep in graph.dependencies_of(task_id):
            graph.remove_edge(task_id, dep)
        for dep in old:
            if graph.contains_node(dep):
                graph.insert_edge(task_id, dep)
        raise
