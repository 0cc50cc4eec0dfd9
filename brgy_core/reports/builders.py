# brgy_core/reports/builders.py
"""
Report builders. Each returns a plain dict; the JSON endpoint returns it
as-is and the exporters turn the same dict into sheets or PDF tables.
"""
from __future__ import annotations

from collections import Counter
from datetime import date
from typing import Any, Dict, List, Optional

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from django.db.models import Count
from django.utils import timezone

from brgy_core.certificates.models import Certificate
from brgy_core.cms.models import Announcement
from brgy_core.common.permissions import ALL_ROLES, ROLE_SYSTEM_ADMIN
from brgy_core.daycare.models import AttendanceRecord, DaycareRegistration, DaycareStudent, LearningMaterial
from brgy_core.daycare.selectors import attendance_rate as daycare_attendance_rate
from brgy_core.events import analytics
from brgy_core.events.models import Event, EventAttendance, EventRegistration
from brgy_core.events.selectors import event_analytics_row, with_counts
from brgy_core.health import schedule
from brgy_core.health.models import ImmunizationCard, ImmunizationRecord, Patient
from brgy_core.iam.models import ResidentProfile
from brgy_core.iam.validators import age_on

KIND_HEALTH = "health"
KIND_DAYCARE = "daycare"
KIND_SK = "sk"
KINDS = (KIND_HEALTH, KIND_DAYCARE, KIND_SK)


def _counts(qs, field: str, label: str, *, blank_as: str = "Unknown") -> List[Dict[str, Any]]:
    rows = qs.order_by().values(field).annotate(count=Count("id")).order_by("-count", field)
    return [{label: row[field] or blank_as, "count": row["count"]} for row in rows]


def build_health_report(today: Optional[date] = None) -> Dict[str, Any]:
    today = today or timezone.localdate()

    total_doses = given_doses = 0
    for card_data in ImmunizationCard.objects.values_list("card_data", flat=True):
        counts = schedule.summarize_card(card_data or {}, today)["counts"]
        total_doses += counts["total_doses"]
        given_doses += counts["given_doses"]

    return {
        "title": "Health Report",
        "generated_at": timezone.now(),
        "summary": {
            "total_patients": Patient.objects.count(),
            "total_immunization_records": ImmunizationRecord.objects.count(),
            "total_immunization_cards": ImmunizationCard.objects.count(),
            "doses_given": given_doses,
            "dose_completion_rate": round(given_doses / total_doses * 100, 2) if total_doses else 0.0,
        },
        "immunizations_by_vaccine": _counts(ImmunizationRecord.objects.all(), "vaccine_name", "vaccine"),
        "demographics_by_gender": _counts(Patient.objects.all(), "gender", "gender"),
        "blood_type_distribution": _counts(Patient.objects.all(), "blood_type", "blood_type"),
    }


def build_daycare_report(today: Optional[date] = None) -> Dict[str, Any]:
    today = today or timezone.localdate()

    status_counts = {s: 0 for s in DaycareRegistration.Status.values}
    for row in DaycareRegistration.objects.order_by().values("status").annotate(n=Count("id")):
        status_counts[row["status"]] = row["n"]

    attendance_counts = {
        row["status"]: row["n"]
        for row in AttendanceRecord.objects.order_by().values("status").annotate(n=Count("id"))
    }

    ages = Counter(age_on(dob, today) for dob in DaycareStudent.objects.values_list("date_of_birth", flat=True))

    return {
        "title": "Daycare Report",
        "generated_at": timezone.now(),
        "summary": {
            "total_students": DaycareStudent.objects.count(),
            "total_registrations": sum(status_counts.values()),
            "approved_registrations": status_counts[DaycareRegistration.Status.APPROVED],
            "pending_registrations": status_counts[DaycareRegistration.Status.PENDING],
            "average_attendance_rate": daycare_attendance_rate(attendance_counts),
        },
        "registration_status": [{"status": s, "count": n} for s, n in status_counts.items()],
        "student_demographics": _counts(DaycareStudent.objects.all(), "gender", "gender"),
        "age_distribution": [{"age": age, "count": ages[age]} for age in sorted(ages)],
    }


def build_sk_report(today: Optional[date] = None) -> Dict[str, Any]:
    today = today or timezone.localdate()

    events = list(with_counts(Event.objects.all()).order_by("-event_date"))
    rows = [event_analytics_row(e) for e in events]
    overall = analytics.overall_stats(rows, event_dates=[e.event_date for e in events], today=today)
    status_counts = Counter(e.status for e in events)

    return {
        "title": "SK Events Report",
        "generated_at": timezone.now(),
        "summary": {
            "total_events": overall["total_events"],
            "published_events": status_counts[Event.Status.PUBLISHED],
            "completed_events": status_counts[Event.Status.COMPLETED],
            "total_registrations": EventRegistration.objects.count(),
            "total_attendance": EventAttendance.objects.count(),
            "average_attendance_rate": overall["average_attendance_rate"],
        },
        "events_by_status": [{"status": s, "count": status_counts[s]} for s in Event.Status.values],
        "events_by_category": _counts(Event.objects.all(), "category", "category", blank_as="Uncategorized"),
        "top_events": [
            {
                "title": r["title"],
                "event_date": r["event_date"],
                "total_registrations": r["total_registrations"],
                "total_attendees": r["total_attendees"],
                "attendance_rate": r["attendance_rate"],
            }
            for r in analytics.top_events(rows)
        ],
    }


BUILDERS = {
    KIND_HEALTH: build_health_report,
    KIND_DAYCARE: build_daycare_report,
    KIND_SK: build_sk_report,
}


def build_report(kind: str) -> Dict[str, Any]:
    return BUILDERS[kind]()


def build_admin_stats() -> Dict[str, Any]:
    """Dashboard numbers for the admin home page."""
    User = get_user_model()

    by_status = {s: 0 for s in ResidentProfile.Status.values}
    for row in ResidentProfile.objects.order_by().values("status").annotate(n=Count("id")):
        by_status[row["status"]] = row["n"]
    # accounts created outside registration (e.g. createsuperuser) have no profile
    no_profile = User.objects.filter(resident_profile__isnull=True)
    by_status[ResidentProfile.Status.ACTIVE] += no_profile.filter(is_active=True).count()
    by_status[ResidentProfile.Status.INACTIVE] += no_profile.filter(is_active=False).count()

    by_role = {role: 0 for role in ALL_ROLES}
    for name, n in Group.objects.filter(name__in=ALL_ROLES).annotate(n=Count("user")).values_list("name", "n"):
        by_role[name] = n
    by_role[ROLE_SYSTEM_ADMIN] += (
        User.objects.filter(is_superuser=True).exclude(groups__name=ROLE_SYSTEM_ADMIN).count()
    )

    return {
        "users_by_status": by_status,
        "users_by_role": by_role,
        "totals": {
            "users": User.objects.count(),
            "patients": Patient.objects.count(),
            "immunization_records": ImmunizationRecord.objects.count(),
            "daycare_students": DaycareStudent.objects.count(),
            "pending_daycare_registrations": DaycareRegistration.objects.filter(
                status=DaycareRegistration.Status.PENDING
            ).count(),
            "events": Event.objects.count(),
            "certificates": Certificate.objects.count(),
            "learning_materials": LearningMaterial.objects.count(),
            "announcements": Announcement.objects.count(),
        },
    }
