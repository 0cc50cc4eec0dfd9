# brgy_core/events/tests/test_analytics.py
from datetime import date

import pytest

from brgy_core.events import analytics


@pytest.mark.parametrize(
    "attendees,registrations,expected",
    [
        (0, 0, 0.0),
        (5, 0, 0.0),
        (3, 4, 75.0),
        (1, 3, 33.33),
        (10, 10, 100.0),
    ],
)
def test_attendance_rate(attendees, registrations, expected):
    assert analytics.attendance_rate(attendees, registrations) == expected


@pytest.mark.parametrize(
    "rate,tier",
    [
        (100, "excellent"),
        (80, "excellent"),
        (79.99, "good"),
        (60, "good"),
        (40, "fair"),
        (39.9, "poor"),
        (0, "poor"),
    ],
)
def test_rate_tier(rate, tier):
    assert analytics.rate_tier(rate) == tier


def test_event_stats():
    assert analytics.event_stats(registrations=4, attendees=3) == {
        "total_registrations": 4,
        "total_attendees": 3,
        "attendance_rate": 75.0,
        "rate_tier": "good",
    }


def test_overall_stats():
    rows = [
        analytics.event_stats(registrations=4, attendees=3),
        analytics.event_stats(registrations=0, attendees=0),
        analytics.event_stats(registrations=10, attendees=9),
    ]
    today = date(2025, 5, 1)

    result = analytics.overall_stats(
        rows,
        event_dates=[date(2025, 4, 1), date(2025, 5, 1), date(2025, 6, 1)],
        today=today,
    )

    assert result == {
        "total_events": 3,
        "total_attendees": 12,
        "total_registrations": 14,
        "average_attendance_rate": 55.0,
        "upcoming_events": 1,
    }


def test_overall_stats_empty():
    assert analytics.overall_stats([], today=date(2025, 1, 1))["average_attendance_rate"] == 0.0


def test_top_events_limit_and_order():
    rows = [{"title": str(i), "attendance_rate": float(i)} for i in range(15)]

    top = analytics.top_events(rows)

    assert len(top) == 10
    assert top[0]["title"] == "14"
    assert top[-1]["title"] == "5"
