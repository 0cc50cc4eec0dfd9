# brgy_core/daycare/selectors.py
from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional
from uuid import UUID

from django.db.models import Count, Prefetch, Q, QuerySet

from brgy_core.daycare.models import (
    AttendanceRecord,
    DaycareRegistration,
    DaycareStudent,
    LearningMaterial,
    ProgressReport,
)
from brgy_core.daycare.permissions import can_read_all_daycare, is_daycare_staff

ATTENDED_STATUSES = (
    AttendanceRecord.Status.PRESENT,
    AttendanceRecord.Status.LATE,
    AttendanceRecord.Status.HALFDAY,
)


def list_registrations(*, status: Optional[str] = None) -> QuerySet:
    qs = DaycareRegistration.objects.select_related("parent", "reviewed_by")
    if status:
        qs = qs.filter(status=status.upper())
    return qs.order_by("-submitted_at")


def my_registrations(*, user) -> QuerySet:
    return (
        DaycareRegistration.objects.filter(parent=user)
        .select_related("student")
        .order_by("-submitted_at")
    )


def list_students(*, shift: Optional[str] = None, search: str = "") -> QuerySet:
    qs = DaycareStudent.objects.select_related("registration").annotate(
        attendance_count=Count("attendance_records", distinct=True),
        progress_report_count=Count("progress_reports", distinct=True),
    )
    if shift:
        if shift.lower() == "unassigned":
            qs = qs.filter(shift__isnull=True)
        else:
            qs = qs.filter(shift=shift.upper())
    if search:
        qs = qs.filter(
            Q(first_name__icontains=search)
            | Q(last_name__icontains=search)
            | Q(middle_name__icontains=search)
        )
    return qs.order_by("-enrollment_date", "last_name")


def get_student(student_id: UUID) -> DaycareStudent:
    return DaycareStudent.objects.select_related("registration").get(id=student_id)


def students_by_shift() -> QuerySet:
    return DaycareStudent.objects.filter(is_active=True).order_by("last_name", "first_name")


def list_attendance(
    *,
    student_id: Optional[UUID] = None,
    on_date: Optional[date] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> QuerySet:
    qs = AttendanceRecord.objects.select_related("student", "recorded_by")
    if student_id:
        qs = qs.filter(student_id=student_id)
    if on_date:
        qs = qs.filter(date=on_date)
    if start_date and end_date:
        qs = qs.filter(date__gte=start_date, date__lte=end_date)
    return qs.order_by("-date", "student__last_name")


def attendance_rate(counts: Dict[str, int]) -> float:
    total = sum(counts.values())
    if not total:
        return 0.0
    attended = sum(counts.get(s, 0) for s in ATTENDED_STATUSES)
    return round(attended / total * 100, 2)


def attendance_summary(
    *,
    student_id: Optional[UUID] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> Dict[str, Any]:
    qs = list_attendance(student_id=student_id, start_date=start_date, end_date=end_date)

    counts = {s: 0 for s in AttendanceRecord.Status.values}
    for row in qs.order_by().values("status").annotate(n=Count("id")):
        counts[row["status"]] = row["n"]

    return {
        "student_id": str(student_id) if student_id else None,
        "start_date": start_date,
        "end_date": end_date,
        "total_days": sum(counts.values()),
        "present": counts["PRESENT"],
        "absent": counts["ABSENT"],
        "late": counts["LATE"],
        "excused": counts["EXCUSED"],
        "halfday": counts["HALFDAY"],
        "attendance_rate": attendance_rate(counts),
    }


def list_progress_reports(*, student_id: Optional[UUID] = None) -> QuerySet:
    qs = ProgressReport.objects.select_related("student", "generated_by")
    if student_id:
        qs = qs.filter(student_id=student_id)
    return qs.order_by("-generated_at")


def parent_children_with_reports(*, user) -> QuerySet:
    return (
        DaycareStudent.objects.filter(registration__parent=user)
        .prefetch_related(
            Prefetch("progress_reports", queryset=ProgressReport.objects.select_related("generated_by").order_by("-generated_at"))
        )
        .order_by("last_name", "first_name")
    )


def can_access_student(*, user, student: DaycareStudent) -> bool:
    return can_read_all_daycare(user) or student.registration.parent_id == user.id


def visible_materials(*, user, category: Optional[str] = None) -> QuerySet:
    qs = LearningMaterial.objects.select_related("uploaded_by")
    if not is_daycare_staff(user):
        qs = qs.filter(is_public=True)
    if category:
        qs = qs.filter(category=category)
    return qs.order_by("-uploaded_at")
