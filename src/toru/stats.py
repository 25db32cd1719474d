"""Statistics over a vault's tasks."""

from __future__ import annotations

from datetime import date, datetime, timedelta

from toru.tasks.model import Duration, Task


def time_per_tag(tasks: list[Task], days: int, today: date | None = None) -> dict[str, Duration]:
    """Time logged in the last *days* days, split evenly across each task's tags.

    Tasks without tags are left out.
    """
    today = today or date.today()
    window = timedelta(days=days)
    times: dict[str, Duration] = {}

    for task in tasks:
        if not task.tags:
            continue
        logged = Duration.zero()
        for entry in task.time_entries:
            if today - entry.logged_date < window:
                logged = logged + entry.duration
        share = logged / len(task.tags)
        for tag in task.tags:
            times[tag] = times.get(tag, Duration.zero()) + share

    return dict(sorted(times.items()))


def completed_recently(tasks: list[Task], days: int, now: datetime | None = None) -> list[Task]:
    """Tasks completed within the last *days* days, most recent first."""
    now = now or datetime.now()
    cutoff = now - timedelta(days=days)
    done = [t for t in tasks if t.completed is not None and t.completed >= cutoff]
    return sorted(done, key=lambda t: t.completed, reverse=True)
