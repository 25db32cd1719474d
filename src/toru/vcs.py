"""Version control passthrough run at the vault root."""

from __future__ import annotations

import subprocess
from enum import Enum
from pathlib import Path

from toru import log
from toru.io_utils import write_text

IGNORED_FILES = ("state.yaml", "temp.yaml", "temp.md")


class Vcs(str, Enum):
    GIT = "git"
    SVN = "svn"


def _command(vcs: Vcs, args: list[str]) -> list[str]:
    if vcs is Vcs.GIT:
        # Keep colours even though output is not a tty of git's own.
        return ["git", "-c", "color.ui=always", *args]
    return ["svn", *args]


def run(vcs: Vcs, args: list[str], vault: Path) -> int:
    """Run the tool in *vault* with inherited stdio and return its exit code.

    The tool reports its own errors, so a non-zero code is passed through
    rather than raised.
    """
    cmd = _command(vcs, args)
    log.debug(f"Running {' '.join(cmd)} in {vault}")
    return subprocess.run(cmd, cwd=vault).returncode


def create_gitignore(vault: Path) -> Path:
    path = vault / ".gitignore"
    write_text(path, "\n".join(IGNORED_FILES) + "\n")
    return path


def set_svn_ignore(vault: Path) -> int:
    """Set the ``svn:ignore`` property on the vault root."""
    return subprocess.run(
        ["svn", "propset", "svn:ignore", "\n".join(IGNORED_FILES), "."],
        cwd=vault,
    ).returncode
