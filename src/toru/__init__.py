"""toru: a personal task tracker storing one file per task inside a vault."""

__version__ = "0.6.0"
