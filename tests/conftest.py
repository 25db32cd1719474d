"""Shared fixtures for toru tests.

File handling in tests:
- Use tmp_path for any directory or file creation so tests are isolated and cleaned up.
- The trash is replaced by a plain directory under tmp_path, so deletions stay inspectable.
"""

from __future__ import annotations

import shutil
from datetime import datetime
from pathlib import Path

import pytest

from toru import vault as vault_ops
from toru.state import VaultState
from toru.tasks import store
from toru.tasks.model import Priority, Task


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the process configuration at a file inside tmp_path."""
    path = tmp_path / "config" / "config.yaml"
    monkeypatch.setenv("TORU_CONFIG", str(path))
    monkeypatch.setenv("TORU_EDITOR", "true")
    return path


@pytest.fixture(autouse=True)
def trash_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Replace send2trash with a move into tmp_path/trash."""
    target = tmp_path / "trash"
    target.mkdir()

    def _fake_trash(path: str) -> None:
        shutil.move(path, target / Path(path).name)

    monkeypatch.setattr(store, "send2trash", _fake_trash)
    monkeypatch.setattr(vault_ops, "send2trash", _fake_trash)
    return target


@pytest.fixture
def vault(tmp_path: Path) -> Path:
    """An initialised, empty vault directory."""
    path = tmp_path / "vault"
    store.tasks_dir(path).mkdir(parents=True)
    return path


@pytest.fixture
def state(vault: Path) -> VaultState:
    return VaultState.load(vault)


def _make_task(
    id: int,
    name: str = "",
    dependencies: set[int] | None = None,
    tags: set[str] | None = None,
    priority: Priority = Priority.LOW,
    created: datetime | None = None,
    completed: datetime | None = None,
    due: datetime | None = None,
) -> Task:
    return Task(
        id=id,
        name=name or f"task {id}",
        created=created or datetime(2024, 1, 1, 9, 0, 0),
        dependencies=dependencies or set(),
        tags=tags or set(),
        priority=priority,
        completed=completed,
        due=due,
    )


@pytest.fixture
def make_task():
    """Factory fixture that creates Task instances."""
    return _make_task


@pytest.fixture
def write_task(vault: Path):
    """Write a task record straight into the vault, bypassing the state."""

    def _write(task: Task) -> Path:
        path = store.task_path(task.id, vault)
        path.write_text(store.dump_task(task), encoding="utf-8")
        return path

    return _write
