"""Tests for toru.tasks.model: durations, priorities and record parsing."""

from __future__ import annotations

from dataclasses import fields
from datetime import date, datetime

import pytest

from toru.errors import RecordError, UserError
from toru.tasks.model import (
    Duration,
    Priority,
    Task,
    TimeEntry,
    is_numeric_name,
    total_time,
    validate_name,
)


class TestDuration:

    def test_constructor_carries_minutes(self):
        assert Duration(1, 75) == Duration(2, 15)

    def test_add_carries(self):
        assert Duration(1, 45) + Duration(0, 30) == Duration(2, 15)
        assert Duration(0, 59) + Duration(0, 1) == Duration(1, 0)

    def test_divide_rounds_to_nearest_minute(self):
        assert Duration(1, 0) / 4 == Duration(0, 15)
        assert Duration(0, 10) / 3 == Duration(0, 3)
        assert Duration(2, 30) / 2 == Duration(1, 15)

    @pytest.mark.parametrize(
        "minutes, divisor, expected",
        [(5, 2, 3), (1, 2, 1), (3, 2, 2), (9, 6, 2), (7, 2, 4)],
    )
    def test_divide_rounds_halves_up(self, minutes, divisor, expected):
        assert Duration(0, minutes) / divisor == Duration.from_minutes(expected)

    def test_divide_by_zero_rejected(self):
        with pytest.raises(ValueError):
            Duration(1, 0) / 0

    def test_invariant_holds_under_arithmetic(self):
        for h1 in range(0, 4):
            for m1 in range(0, 120, 7):
                for m2 in range(0, 120, 11):
                    total = Duration(h1, m1) + Duration(0, m2)
                    assert total.minutes < 60
                    assert total.total_minutes == h1 * 60 + m1 + m2
                    for n in (1, 2, 3, 7):
                        assert (total / n).minutes < 60

    def test_ordering_and_str(self):
        assert Duration(0, 59) < Duration(1, 0)
        assert str(Duration(3, 5)) == "3:05"

    def test_negative_rejected(self):
        with pytest.raises(ValueError):
            Duration(-1, 0)


class TestTimeEntry:

    def test_new_normalises_minutes(self):
        entry = TimeEntry.new(0, 90, date(2024, 3, 1), "review")
        assert entry.duration == Duration(1, 30)
        assert entry.logged_date == date(2024, 3, 1)

    def test_new_defaults_to_today(self):
        assert TimeEntry.new(1, 0).logged_date == date.today()

    def test_total_time(self):
        entries = [TimeEntry.new(1, 40), TimeEntry.new(0, 30)]
        assert total_time(entries) == Duration(2, 10)


class TestPriority:

    def test_ordered(self):
        assert Priority.BACKLOG < Priority.LOW < Priority.MEDIUM < Priority.HIGH
        assert max([Priority.LOW, Priority.HIGH, Priority.BACKLOG]) is Priority.HIGH


class TestNames:

    @pytest.mark.parametrize("name", ["42", "007", ""])
    def test_numeric_names_rejected(self, name):
        assert is_numeric_name(name)
        with pytest.raises(UserError):
            validate_name(name)

    @pytest.mark.parametrize("name", ["42a", "buy milk", "v2"])
    def test_other_names_accepted(self, name):
        validate_name(name)


class TestRecord:

    def test_round_trip_dict(self, make_task):
        task = make_task(
            3,
            "write report",
            dependencies={1, 2},
            tags={"work", "q3"},
            priority=Priority.HIGH,
            due=datetime(2024, 6, 1, 17, 30),
            completed=datetime(2024, 5, 30, 12, 0, 0, 123456),
        )
        task.info = "multi\nline\n"
        task.time_entries = [TimeEntry.new(1, 5, date(2024, 5, 2), None)]
        assert Task.from_dict(task.to_dict()) == task

    def test_path_not_part_of_equality(self, make_task, tmp_path):
        a = make_task(1)
        b = make_task(1)
        b.path = tmp_path / "1.yaml"
        b.read_only = False
        assert a == b

    def test_missing_field(self, make_task):
        raw = make_task(1).to_dict()
        del raw["created"]
        with pytest.raises(RecordError, match="created"):
            Task.from_dict(raw)

    def test_bad_priority(self, make_task):
        raw = make_task(1).to_dict()
        raw["priority"] = "urgent"
        with pytest.raises(RecordError):
            Task.from_dict(raw)

    def test_entry_minutes_over_limit(self, make_task):
        raw = make_task(1).to_dict()
        raw["time_entries"] = [
            {"logged_date": "2024-01-01", "message": None, "duration": {"hours": 0, "minutes": 75}}
        ]
        with pytest.raises(RecordError):
            Task.from_dict(raw)

    def test_not_a_mapping(self):
        with pytest.raises(RecordError):
            Task.from_dict(["nope"])

    def test_location_fields(self):
        names = {f.name for f in fields(Task) if not f.compare}
        assert names == {"path", "read_only"}
