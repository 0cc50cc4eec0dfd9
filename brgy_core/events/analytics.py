# brgy_core/events/analytics.py
"""
Attendance analytics. Pure functions over plain counts so the report
builders and the API share one definition of "attendance rate".
"""
from __future__ import annotations

from datetime import date
from typing import Any, Dict, Iterable, List, Optional

TIER_EXCELLENT = "excellent"
TIER_GOOD = "good"
TIER_FAIR = "fair"
TIER_POOR = "poor"


def attendance_rate(attendees: int, registrations: int) -> float:
    if not registrations:
        return 0.0
    return round(attendees / registrations * 100, 2)


def rate_tier(rate: float) -> str:
    if rate >= 80:
        return TIER_EXCELLENT
    if rate >= 60:
        return TIER_GOOD
    if rate >= 40:
        return TIER_FAIR
    return TIER_POOR


def event_stats(*, registrations: int, attendees: int) -> Dict[str, Any]:
    """registrations counts APPROVED registrations only."""
    rate = attendance_rate(attendees, registrations)
    return {
        "total_registrations": registrations,
        "total_attendees": attendees,
        "attendance_rate": rate,
        "rate_tier": rate_tier(rate),
    }


def overall_stats(per_event: Iterable[Dict[str, Any]], *, event_dates: Iterable[date] = (), today: Optional[date] = None) -> Dict[str, Any]:
    rows: List[Dict[str, Any]] = list(per_event)
    today = today or date.today()
    rates = [r["attendance_rate"] for r in rows]

    return {
        "total_events": len(rows),
        "total_attendees": sum(r["total_attendees"] for r in rows),
        "total_registrations": sum(r["total_registrations"] for r in rows),
        "average_attendance_rate": round(sum(rates) / len(rates), 2) if rates else 0.0,
        "upcoming_events": sum(1 for d in event_dates if d > today),
    }


def top_events(per_event: Iterable[Dict[str, Any]], limit: int = 10) -> List[Dict[str, Any]]:
    return sorted(per_event, key=lambda r: r["attendance_rate"], reverse=True)[:limit]
