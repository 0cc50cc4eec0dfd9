# brgy_core/daycare/tests/test_shifts.py
from datetime import date, datetime, timezone as dt_timezone
from types import SimpleNamespace

import pytest
from django.utils import timezone

from brgy_core.daycare import shifts
from brgy_core.daycare.services import parse_clock


@pytest.mark.parametrize(
    "value,expected",
    [
        (None, None),
        ("", None),
        ("morning", "MORNING"),
        ("AFTERNOON", "AFTERNOON"),
        (" Afternoon ", "AFTERNOON"),
    ],
)
def test_parse_shift(value, expected):
    assert shifts.parse_shift(value) == expected


@pytest.mark.parametrize("value", ["evening", "unassigned", "1"])
def test_parse_shift_rejects_unknown(value):
    with pytest.raises(ValueError):
        shifts.parse_shift(value)


def test_round_robin_alternates_after_shuffle():
    result = shifts.assign_round_robin(range(7), seed=42)

    assert set(result) == set(range(7))
    assert shifts.count_by_shift(result) == {"morning": 4, "afternoon": 3}


def test_round_robin_is_deterministic_for_a_seed():
    a = shifts.assign_round_robin(["a", "b", "c", "d", "e"], seed=7)
    b = shifts.assign_round_robin(["a", "b", "c", "d", "e"], seed=7)

    assert a == b


def test_round_robin_empty():
    assert shifts.assign_round_robin([], seed=1) == {}


def test_group_by_shift():
    students = [
        SimpleNamespace(name="a", shift="MORNING"),
        SimpleNamespace(name="b", shift=None),
        SimpleNamespace(name="c", shift="AFTERNOON"),
        SimpleNamespace(name="d", shift="MORNING"),
    ]

    groups = shifts.group_by_shift(students)

    assert [s.name for s in groups["morning"]] == ["a", "d"]
    assert [s.name for s in groups["afternoon"]] == ["c"]
    assert [s.name for s in groups["unassigned"]] == ["b"]


def test_parse_clock_combines_with_day():
    dt = parse_clock("08:30", date(2024, 6, 3))

    local = timezone.localtime(dt)
    assert (local.date(), local.hour, local.minute) == (date(2024, 6, 3), 8, 30)


def test_parse_clock_accepts_iso_and_empty():
    assert parse_clock("", date(2024, 6, 3)) is None
    assert parse_clock(None, date(2024, 6, 3)) is None

    dt = parse_clock("2024-06-03T09:15:00+08:00", date(2024, 1, 1))
    assert dt == datetime(2024, 6, 3, 1, 15, tzinfo=dt_timezone.utc)


@pytest.mark.parametrize("value", ["25:00", "8h30", "later"])
def test_parse_clock_rejects_garbage(value):
    with pytest.raises(ValueError):
        parse_clock(value, date(2024, 6, 3))
