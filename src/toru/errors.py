"""Error kinds raised by the vault core.

User-facing errors are kept apart from internal ones so that callers and
tests can tell a bad input from a bug in this program, even though both end
the current command the same way.
"""

from __future__ import annotations


class ToruError(Exception):
    """Base class for every error raised deliberately by toru."""


class UserError(ToruError):
    """Invalid user input: reported with a message, the command aborts."""


class NotFoundError(UserError):
    """A task, dependency target, name or vault does not exist."""


class AmbiguousNameError(UserError):
    """More than one task shares the looked-up name."""

    def __init__(self, name: str, ids: list[int]) -> None:
        self.name = name
        self.ids = sorted(ids)
        listed = ", ".join(str(i) for i in self.ids)
        super().__init__(f"Multiple tasks (ids: [{listed}]) by the name {name!r} exist")


class InternalError(ToruError):
    """An invariant was broken by the program itself."""


class RecordError(ToruError):
    """A task record or state file is structurally malformed."""
