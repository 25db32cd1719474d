"""Process-wide configuration: the vault registry and the editor command."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import click
import yaml

from toru.errors import NotFoundError, RecordError, UserError
from toru.io_utils import read_text, write_text

APP_NAME = "toru"
CONFIG_ENV = "TORU_CONFIG"
DEFAULT_EDITOR = "vim"


def config_path() -> Path:
    """``$TORU_CONFIG`` if set, else ``config.yaml`` in the user config dir."""
    override = os.environ.get(CONFIG_ENV)
    if override:
        return Path(override)
    return Path(click.get_app_dir(APP_NAME)) / "config.yaml"


@dataclass
class Config:
    """Known vaults, most recently selected first, plus the editor command."""

    vaults: list[tuple[str, Path]] = field(default_factory=list)
    editor: str = ""

    def __post_init__(self) -> None:
        if not self.editor:
            self.editor = (
                os.environ.get("TORU_EDITOR")
                or os.environ.get("EDITOR")
                or DEFAULT_EDITOR
            )

    # ── persistence ──────────────────────────────────────────────

    @classmethod
    def load(cls, path: Path | None = None) -> Config:
        path = path or config_path()
        if not path.is_file():
            return cls()
        raw = yaml.safe_load(read_text(path)) or {}
        if not isinstance(raw, dict):
            raise RecordError(f"{path} does not hold a configuration mapping")
        try:
            vaults = [(str(v["name"]), Path(v["path"])) for v in raw.get("vaults") or []]
        except (KeyError, TypeError) as exc:
            raise RecordError(f"Malformed vault entry in {path}: {exc}") from exc
        return cls(vaults=vaults, editor=str(raw.get("editor") or ""))

    def save(self, path: Path | None = None) -> None:
        path = path or config_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        write_text(path, yaml.safe_dump(self.to_dict(), sort_keys=False, allow_unicode=True))

    def to_dict(self) -> dict[str, Any]:
        return {
            "vaults": [{"name": name, "path": str(p)} for name, p in self.vaults],
            "editor": self.editor,
        }

    # ── vault registry ───────────────────────────────────────────

    def current_vault(self) -> tuple[str, Path]:
        if not self.vaults:
            raise UserError(
                "The attempted operation requires a vault, none of which have been set up"
            )
        return self.vaults[0]

    def contains_name(self, name: str) -> bool:
        return any(n == name for n, _ in self.vaults)

    def contains_path(self, path: Path) -> bool:
        target = path.resolve()
        return any(p.resolve() == target for _, p in self.vaults)

    def add(self, name: str, path: Path) -> None:
        if self.contains_name(name):
            raise UserError(f"A vault named {name!r} already exists")
        if self.contains_path(path):
            raise UserError(f"A vault at the path {str(path)!r} already exists")
        self.vaults.append((name, path))

    def _position(self, name: str) -> int:
        for i, (n, _) in enumerate(self.vaults):
            if n == name:
                return i
        raise NotFoundError(f"No vault by the name {name!r} exists")

    def remove(self, name: str) -> Path:
        _, path = self.vaults.pop(self._position(name))
        return path

    def switch(self, name: str) -> None:
        """Make *name* the current vault."""
        self.vaults.insert(0, self.vaults.pop(self._position(name)))

    def rename_vault(self, old_name: str, new_name: str) -> None:
        pos = self._position(old_name)
        if old_name != new_name and self.contains_name(new_name):
            raise UserError(f"A vault named {new_name!r} already exists")
        self.vaults[pos] = (new_name, self.vaults[pos][1])
