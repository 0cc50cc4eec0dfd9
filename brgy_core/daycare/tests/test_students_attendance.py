# brgy_core/daycare/tests/test_students_attendance.py
from datetime import date

import pytest
from django.utils import timezone

from brgy_core.daycare.models import AttendanceRecord, DaycareRegistration, DaycareStudent

pytestmark = pytest.mark.django_db


def _enroll(parent, first_name, shift=None, is_active=True):
    reg = DaycareRegistration.objects.create(
        parent=parent,
        child_first_name=first_name,
        child_last_name="Reyes",
        child_date_of_birth=date(2021, 2, 2),
        child_gender="FEMALE",
        address="Purok 4",
        parent_contact="09170000000",
        status=DaycareRegistration.Status.APPROVED,
    )
    return DaycareStudent.objects.create(
        registration=reg,
        first_name=first_name,
        last_name="Reyes",
        date_of_birth=date(2021, 2, 2),
        gender="FEMALE",
        shift=shift,
        is_active=is_active,
    )


def test_direct_enrollment(client_for):
    c, staff = client_for("DAYCARE_STAFF")

    r = c.post(
        "/api/v1/daycare/students/",
        {
            "first_name": "Nina",
            "last_name": "Bautista",
            "date_of_birth": "2021-09-09",
            "gender": "FEMALE",
            "shift": "morning",
        },
        format="json",
    )

    assert r.status_code == 201, r.data
    assert r.data["shift"] == "MORNING"
    reg = DaycareRegistration.objects.get(id=r.data["registration_id"])
    assert reg.status == "APPROVED"
    assert reg.parent_id == staff.id
    assert reg.parent_contact == "Direct Enrollment"
    assert reg.notes == "Direct enrollment by staff"


def test_list_counts_and_shift_filter(api_client, admin_user, student):
    AttendanceRecord.objects.create(student=student, date=date(2024, 6, 3), status="PRESENT")
    AttendanceRecord.objects.create(student=student, date=date(2024, 6, 4), status="ABSENT")
    _enroll(admin_user, "Mika", shift="MORNING")

    r = api_client.get("/api/v1/daycare/students/")
    assert r.data["count"] == 2
    row = next(s for s in r.data["results"] if s["id"] == str(student.id))
    assert row["attendance_count"] == 2
    assert row["progress_report_count"] == 0

    r = api_client.get("/api/v1/daycare/students/", {"shift": "unassigned"})
    assert [s["first_name"] for s in r.data["results"]] == ["Lito"]

    r = api_client.get("/api/v1/daycare/students/", {"shift": "MORNING"})
    assert [s["first_name"] for s in r.data["results"]] == ["Mika"]

    r = api_client.get("/api/v1/daycare/students/", {"search": "mik"})
    assert r.data["count"] == 1


def test_retrieve_includes_history(api_client, student):
    AttendanceRecord.objects.create(student=student, date=date(2024, 6, 3), status="PRESENT")

    r = api_client.get(f"/api/v1/daycare/students/{student.id}/")

    assert r.status_code == 200
    assert len(r.data["attendance_records"]) == 1
    assert r.data["progress_reports"] == []


def test_random_assign_only_touches_unassigned_active(api_client, admin_user):
    kept = _enroll(admin_user, "Kept", shift="AFTERNOON")
    inactive = _enroll(admin_user, "Gone", is_active=False)
    for name in ("A", "B", "C"):
        _enroll(admin_user, name)

    r = api_client.post("/api/v1/daycare/students/shifts/random-assign/", {"seed": 3}, format="json")

    assert r.status_code == 200, r.data
    assert (r.data["morning"], r.data["afternoon"], r.data["assigned"]) == (2, 1, 3)
    kept.refresh_from_db()
    inactive.refresh_from_db()
    assert kept.shift == "AFTERNOON"
    assert inactive.shift is None

    board = api_client.get("/api/v1/daycare/students/shifts/").data
    assert len(board["morning"]) == 2
    assert len(board["afternoon"]) == 2
    assert board["unassigned"] == []


def test_move_and_clear_shifts(api_client, student):
    r = api_client.patch(f"/api/v1/daycare/students/{student.id}/shift/", {"shift": "AFTERNOON"}, format="json")
    assert r.status_code == 200
    assert r.data["shift"] == "AFTERNOON"

    r = api_client.patch(f"/api/v1/daycare/students/{student.id}/shift/", {"shift": None}, format="json")
    assert r.data["shift"] is None

    r = api_client.patch(f"/api/v1/daycare/students/{student.id}/shift/", {"shift": "NIGHT"}, format="json")
    assert r.status_code == 400

    DaycareStudent.objects.filter(pk=student.pk).update(shift="MORNING")
    r = api_client.post("/api/v1/daycare/students/shifts/clear/", {}, format="json")
    assert r.data["cleared"] == 1
    student.refresh_from_db()
    assert student.shift is None


def test_captain_reads_but_cannot_assign(client_for, student):
    c, _ = client_for("BARANGAY_CAPTAIN")

    assert c.get("/api/v1/daycare/students/").status_code == 200
    assert c.post("/api/v1/daycare/students/shifts/random-assign/", {}, format="json").status_code == 403


def test_record_attendance_with_clock_times(client_for, student):
    c, teacher = client_for("DAYCARE_TEACHER", first_name="Tess", last_name="Teacher")

    r = c.post(
        "/api/v1/daycare/attendance/",
        {
            "student_id": str(student.id),
            "attendance_date": "2024-06-03",
            "status": "LATE",
            "time_in": "08:45",
            "notes": "Traffic",
        },
        format="json",
    )

    assert r.status_code == 201, r.data
    assert r.data["remarks"] == "Traffic"
    assert r.data["recorded_by_name"] == "Tess Teacher"
    record = AttendanceRecord.objects.get(id=r.data["id"])
    local = timezone.localtime(record.time_in)
    assert (local.date(), local.hour, local.minute) == (date(2024, 6, 3), 8, 45)
    assert record.time_out is None


def test_attendance_requires_date(api_client, student):
    r = api_client.post(
        "/api/v1/daycare/attendance/",
        {"student_id": str(student.id), "status": "PRESENT"},
        format="json",
    )

    assert r.status_code == 400
    assert r.data["error"]["message"] == "Attendance date is required"


def test_duplicate_attendance_conflicts(api_client, student):
    payload = {"student_id": str(student.id), "date": "2024-06-03", "status": "PRESENT"}
    assert api_client.post("/api/v1/daycare/attendance/", payload, format="json").status_code == 201

    r = api_client.post("/api/v1/daycare/attendance/", payload, format="json")

    assert r.status_code == 409
    assert r.data["error"]["message"] == (
        "Attendance already recorded for this student on this date. Use update instead."
    )


def test_update_attendance_clears_time(api_client, student):
    record = AttendanceRecord.objects.create(
        student=student,
        date=date(2024, 6, 3),
        status="PRESENT",
        time_in=timezone.now(),
    )

    r = api_client.patch(
        f"/api/v1/daycare/attendance/{record.id}/",
        {"status": "HALFDAY", "time_in": "", "time_out": "11:30"},
        format="json",
    )

    assert r.status_code == 200, r.data
    record.refresh_from_db()
    assert record.status == "HALFDAY"
    assert record.time_in is None
    assert timezone.localtime(record.time_out).hour == 11


def test_attendance_list_filters_and_unknown_recorder(api_client, student):
    AttendanceRecord.objects.create(student=student, date=date(2024, 6, 3), status="PRESENT")
    AttendanceRecord.objects.create(student=student, date=date(2024, 6, 10), status="ABSENT")

    r = api_client.get("/api/v1/daycare/attendance/", {"date": "2024-06-03"})
    assert r.data["count"] == 1
    assert r.data["results"][0]["recorded_by_name"] == "Unknown"

    r = api_client.get("/api/v1/daycare/attendance/", {"start_date": "2024-06-01", "end_date": "2024-06-30"})
    assert [row["date"] for row in r.data["results"]] == ["2024-06-10", "2024-06-03"]


def test_attendance_summary(api_client, student):
    for day, status in [(3, "PRESENT"), (4, "LATE"), (5, "ABSENT"), (6, "HALFDAY"), (7, "EXCUSED")]:
        AttendanceRecord.objects.create(student=student, date=date(2024, 6, day), status=status)

    r = api_client.get("/api/v1/daycare/attendance/summary/", {"student_id": str(student.id)})

    assert r.status_code == 200
    assert r.data["total_days"] == 5
    assert (r.data["present"], r.data["late"], r.data["absent"]) == (1, 1, 1)
    assert r.data["attendance_rate"] == 60.0
