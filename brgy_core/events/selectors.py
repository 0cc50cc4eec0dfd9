# brgy_core/events/selectors.py
from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional
from uuid import UUID

from django.db.models import Case, Count, DateField, F, IntegerField, Q, QuerySet, Value, When

from brgy_core.events import analytics
from brgy_core.events.models import Event, EventAttendance, EventRegistration
from brgy_core.events.permissions import is_sk_staff

PUBLIC_STATUSES = (Event.Status.PUBLISHED, Event.Status.COMPLETED)


def with_counts(qs: QuerySet) -> QuerySet:
    return qs.annotate(
        approved_count=Count(
            "registrations",
            filter=Q(registrations__status=EventRegistration.Status.APPROVED),
            distinct=True,
        ),
        attendee_count=Count("attendance", distinct=True),
    )


def visible_events(user) -> QuerySet:
    qs = Event.objects.select_related("created_by")
    if not is_sk_staff(user):
        qs = qs.filter(status__in=PUBLIC_STATUSES)
    return qs


def list_events(
    *,
    user,
    search: str = "",
    status: str = "all",
    category: Optional[str] = None,
    today: Optional[date] = None,
) -> QuerySet:
    """
    Upcoming events first (soonest first), then past events (latest first).
    status="all" hides CANCELLED.
    """
    today = today or date.today()
    qs = visible_events(user)

    if not status or status.lower() == "all":
        qs = qs.exclude(status=Event.Status.CANCELLED)
    else:
        qs = qs.filter(status=status.upper())

    if search:
        qs = qs.filter(
            Q(title__icontains=search)
            | Q(description__icontains=search)
            | Q(location__icontains=search)
        )
    if category:
        qs = qs.filter(category=category)

    qs = qs.annotate(
        is_past=Case(When(event_date__lt=today, then=Value(1)), default=Value(0), output_field=IntegerField()),
        upcoming_date=Case(When(event_date__gte=today, then=F("event_date")), default=None, output_field=DateField()),
        past_date=Case(When(event_date__lt=today, then=F("event_date")), default=None, output_field=DateField()),
    )
    return with_counts(qs).order_by(
        "is_past",
        F("upcoming_date").asc(nulls_last=True),
        F("past_date").desc(nulls_last=True),
        "start_time",
    )


def get_visible_event(*, user, event_id: UUID) -> Event:
    """Raises Event.DoesNotExist, including drafts hidden from residents."""
    return with_counts(visible_events(user)).get(id=event_id)


def list_categories() -> List[str]:
    return list(
        Event.objects.exclude(category="")
        .order_by("category")
        .values_list("category", flat=True)
        .distinct()
    )


def approved_count(event: Event) -> int:
    return event.registrations.filter(status=EventRegistration.Status.APPROVED).count()


def list_event_registrations(*, event_id: UUID, status: Optional[str] = None) -> QuerySet:
    qs = EventRegistration.objects.filter(event_id=event_id).select_related("user", "event")
    if status:
        qs = qs.filter(status=status.upper())
    return qs.order_by("-registered_at")


def my_registrations(*, user) -> QuerySet:
    return EventRegistration.objects.filter(user=user).select_related("event").order_by("-registered_at")


def list_event_attendance(*, event_id: UUID) -> QuerySet:
    return (
        EventAttendance.objects.filter(event_id=event_id)
        .select_related("user", "user__resident_profile", "recorded_by")
        .order_by("attended_at")
    )


def available_attendees(*, event_id: UUID) -> QuerySet:
    attended = EventAttendance.objects.filter(event_id=event_id).values("user_id")
    return (
        EventRegistration.objects.filter(event_id=event_id, status=EventRegistration.Status.APPROVED)
        .exclude(user_id__in=attended)
        .select_related("user")
        .order_by("user__last_name", "user__first_name")
    )


def event_analytics_row(event: Event) -> Dict[str, Any]:
    registrations = getattr(event, "approved_count", None)
    attendees = getattr(event, "attendee_count", None)
    if registrations is None:
        registrations = approved_count(event)
    if attendees is None:
        attendees = event.attendance.count()

    return {
        "event_id": str(event.id),
        "title": event.title,
        "event_date": event.event_date,
        "status": event.status,
        "category": event.category,
        **analytics.event_stats(registrations=registrations, attendees=attendees),
    }


def all_event_analytics(*, today: Optional[date] = None) -> Dict[str, Any]:
    events = list(with_counts(Event.objects.all()).order_by("-event_date"))
    rows = [event_analytics_row(e) for e in events]
    return {
        "overall": analytics.overall_stats(rows, event_dates=[e.event_date for e in events], today=today),
        "events": rows,
    }
