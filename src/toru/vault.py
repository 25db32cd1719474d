"""Vault lifecycle: create, connect, disconnect, delete, rename, switch."""

from __future__ import annotations

from pathlib import Path

from send2trash import send2trash

from toru import log
from toru.config import Config
from toru.errors import UserError
from toru.state import STATE_FILE, VaultState
from toru.tasks.store import tasks_dir


def _init_metadata(path: Path) -> VaultState:
    tasks_dir(path).mkdir()
    return VaultState.load(path)


def new(name: str, path: Path, config: Config) -> None:
    """Create a vault at *path*, which must be missing or an empty directory."""
    path = path.expanduser().resolve()
    if config.contains_name(name):
        raise UserError(f"A vault named {name!r} already exists")
    if config.contains_path(path):
        raise UserError(f"A vault at the path {str(path)!r} already exists")

    if path.is_dir():
        if any(path.iterdir()):
            raise UserError(
                "The specified folder already exists and contains other data, "
                "please provide a path to a new or empty folder"
            )
    elif path.exists():
        raise UserError(
            "The specified path already points to a file, please provide a path to a new or empty folder"
        )
    else:
        path.mkdir(parents=True)

    _init_metadata(path)
    config.add(name, path)
    log.debug(f"Initialised vault {name} at {path}")


def connect(name: str, path: Path, config: Config) -> None:
    """Register an existing vault directory."""
    path = path.expanduser().resolve()
    if config.contains_name(name):
        raise UserError(f"A vault named {name!r} already exists")
    if config.contains_path(path):
        raise UserError(f"A vault at the path {str(path)!r} is already set up")
    if not path.exists():
        raise UserError(f"The path {str(path)!r} does not exist")
    if not path.is_dir():
        raise UserError("The specified path points to a file, not a folder")
    if not tasks_dir(path).is_dir():
        raise UserError("Cannot connect the vault as it is missing the tasks folder")
    if not (path / STATE_FILE).is_file():
        raise UserError(f"Cannot connect the vault as it is missing the {STATE_FILE} file")
    config.add(name, path)


def disconnect(name: str, config: Config) -> Path:
    """Forget a vault without touching its files."""
    return config.remove(name)


def delete(name: str, config: Config) -> Path:
    """Forget a vault and move its folder to the trash."""
    path = config.remove(name)
    send2trash(str(path))
    return path


def rename(old_name: str, new_name: str, config: Config) -> None:
    config.rename_vault(old_name, new_name)


def switch(name: str, config: Config) -> None:
    config.switch(name)
