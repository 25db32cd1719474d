"""Task record data models: priority, durations, time entries and tasks."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from functools import total_ordering
from pathlib import Path
from typing import Any

from toru.errors import RecordError, UserError


class Priority(str, Enum):
    BACKLOG = "backlog"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _PRIORITY_ORDER.index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Priority):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Priority):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Priority):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Priority):
            return NotImplemented
        return self.rank >= other.rank


_PRIORITY_ORDER = [Priority.BACKLOG, Priority.LOW, Priority.MEDIUM, Priority.HIGH]


@total_ordering
@dataclass(frozen=True)
class Duration:
    """Hours and minutes, always with ``minutes < 60``."""

    hours: int = 0
    minutes: int = 0

    def __post_init__(self) -> None:
        if self.hours < 0 or self.minutes < 0:
            raise ValueError("Duration cannot be negative")
        if self.minutes >= 60:
            object.__setattr__(self, "hours", self.hours + self.minutes // 60)
            object.__setattr__(self, "minutes", self.minutes % 60)

    @classmethod
    def zero(cls) -> Duration:
        return cls(0, 0)

    @classmethod
    def from_minutes(cls, total: int) -> Duration:
        return cls(total // 60, total % 60)

    @property
    def total_minutes(self) -> int:
        return self.hours * 60 + self.minutes

    def satisfies_invariant(self) -> bool:
        return self.minutes < 60

    def __add__(self, other: object) -> Duration:
        if not isinstance(other, Duration):
            return NotImplemented
        carried = self.minutes + other.minutes
        return Duration(self.hours + other.hours + carried // 60, carried % 60)

    def __truediv__(self, divisor: int) -> Duration:
        """Split evenly, rounding to the nearest minute with halves rounded up."""
        if divisor <= 0:
            raise ValueError("Duration can only be divided by a positive count")
        return Duration.from_minutes((2 * self.total_minutes + divisor) // (2 * divisor))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self.total_minutes < other.total_minutes

    def __str__(self) -> str:
        return f"{self.hours}:{self.minutes:02d}"


@dataclass
class TimeEntry:
    logged_date: date
    duration: Duration
    message: str | None = None

    @classmethod
    def new(
        cls,
        hours: int,
        minutes: int,
        logged_date: date | None = None,
        message: str | None = None,
    ) -> TimeEntry:
        """Build an entry, carrying surplus minutes into hours; date defaults to today."""
        return cls(
            logged_date=logged_date or date.today(),
            duration=Duration(hours + minutes // 60, minutes % 60),
            message=message,
        )


def total_time(entries: list[TimeEntry]) -> Duration:
    total = Duration.zero()
    for entry in entries:
        total = total + entry.duration
    return total


def is_numeric_name(name: str) -> bool:
    """Names made only of digits would be read back as ids."""
    return all(ch.isnumeric() for ch in name)


def validate_name(name: str) -> None:
    if is_numeric_name(name):
        raise UserError("Name must not be purely numeric")


@dataclass
class Task:
    id: int
    name: str
    created: datetime
    tags: set[str] = field(default_factory=set)
    dependencies: set[int] = field(default_factory=set)
    priority: Priority = Priority.LOW
    due: datetime | None = None
    completed: datetime | None = None
    info: str | None = None
    time_entries: list[TimeEntry] = field(default_factory=list)

    # Where the record lives; not part of the record itself.
    path: Path | None = field(default=None, compare=False, repr=False)
    read_only: bool = field(default=True, compare=False, repr=False)

    @property
    def is_complete(self) -> bool:
        return self.completed is not None

    def total_time(self) -> Duration:
        return total_time(self.time_entries)

    # ── serialization ────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "tags": sorted(self.tags),
            "dependencies": sorted(self.dependencies),
            "priority": self.priority.value,
            "due": _dt_out(self.due),
            "created": _dt_out(self.created),
            "completed": _dt_out(self.completed),
            "info": self.info,
            "time_entries": [
                {
                    "logged_date": entry.logged_date.isoformat(),
                    "message": entry.message,
                    "duration": {
                        "hours": entry.duration.hours,
                        "minutes": entry.duration.minutes,
                    },
                }
                for entry in self.time_entries
            ],
        }

    @classmethod
    def from_dict(cls, raw: Any) -> Task:
        if not isinstance(raw, dict):
            raise RecordError(f"Task record must be a mapping, got {type(raw).__name__}")
        try:
            return cls(
                id=int(raw["id"]),
                name=str(raw["name"]),
                tags={str(t) for t in raw.get("tags") or []},
                dependencies={int(d) for d in raw.get("dependencies") or []},
                priority=Priority(raw.get("priority") or Priority.LOW.value),
                due=_dt_in(raw.get("due")),
                created=_dt_in(raw["created"]),
                completed=_dt_in(raw.get("completed")),
                info=raw.get("info"),
                time_entries=[_entry_in(e) for e in raw.get("time_entries") or []],
            )
        except KeyError as exc:
            raise RecordError(f"Task record is missing field {exc.args[0]!r}") from exc
        except (TypeError, ValueError) as exc:
            raise RecordError(f"Malformed task record: {exc}") from exc


def _dt_out(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _dt_in(value: Any) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return datetime.fromisoformat(str(value))


def _date_in(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def _entry_in(raw: Any) -> TimeEntry:
    duration = raw["duration"]
    hours = int(duration["hours"])
    minutes = int(duration["minutes"])
    if minutes >= 60:
        raise ValueError("time entry minutes must be below 60")
    return TimeEntry(
        logged_date=_date_in(raw["logged_date"]),
        duration=Duration(hours, minutes),
        message=raw.get("message"),
    )
