# brgy_core/reports/tests/test_reports.py
import io
from datetime import date, time, timedelta

import openpyxl
import pytest

from brgy_core.daycare.models import AttendanceRecord
from brgy_core.events.models import Event, EventAttendance, EventRegistration
from brgy_core.health.models import ImmunizationRecord
from brgy_core.reports import exports
from brgy_core.reports.builders import build_daycare_report, build_health_report, build_sk_report

pytestmark = pytest.mark.django_db


def test_health_report_counts(patient):
    ImmunizationRecord.objects.create(patient=patient, vaccine_name="BCG", date_given=date(2024, 1, 16))
    ImmunizationRecord.objects.create(patient=patient, vaccine_name="Hepatitis B", date_given=date(2024, 1, 16))
    ImmunizationRecord.objects.create(patient=patient, vaccine_name="BCG", date_given=date(2024, 2, 16))

    report = build_health_report()

    assert report["summary"]["total_patients"] == 1
    assert report["summary"]["total_immunization_records"] == 3
    assert report["immunizations_by_vaccine"][0] == {"vaccine": "BCG", "count": 2}
    assert report["demographics_by_gender"] == [{"gender": "FEMALE", "count": 1}]
    assert report["blood_type_distribution"] == [{"blood_type": "O+", "count": 1}]


def test_daycare_report_attendance_rate(student):
    today = date.today()
    AttendanceRecord.objects.create(student=student, date=today, status=AttendanceRecord.Status.PRESENT)
    AttendanceRecord.objects.create(
        student=student, date=today - timedelta(days=1), status=AttendanceRecord.Status.ABSENT
    )

    report = build_daycare_report()

    assert report["summary"]["total_students"] == 1
    assert report["summary"]["approved_registrations"] == 1
    assert report["summary"]["pending_registrations"] == 0
    assert report["summary"]["average_attendance_rate"] == 50.0
    assert report["student_demographics"] == [{"gender": "MALE", "count": 1}]
    assert len(report["age_distribution"]) == 1


def test_sk_report_top_events(make_user):
    user = make_user()
    event = Event.objects.create(
        title="Youth Summit",
        event_date=date.today() - timedelta(days=3),
        start_time=time(9, 0),
        location="Barangay Hall",
        status=Event.Status.COMPLETED,
    )
    Event.objects.create(
        title="Draft Meetup",
        event_date=date.today() + timedelta(days=3),
        start_time=time(9, 0),
        location="Barangay Hall",
    )
    EventRegistration.objects.create(event=event, user=user, status=EventRegistration.Status.APPROVED)
    EventAttendance.objects.create(event=event, user=user)

    report = build_sk_report()

    assert report["summary"]["total_events"] == 2
    assert report["summary"]["completed_events"] == 1
    assert report["summary"]["total_attendance"] == 1
    assert report["top_events"][0]["title"] == "Youth Summit"
    assert report["top_events"][0]["attendance_rate"] == 100.0
    assert {"category": "Uncategorized", "count": 2} in report["events_by_category"]


def test_tables_follow_sheet_layout(patient):
    report = build_health_report()

    titles = [t["title"] for t in exports.tables("health", report)]

    assert titles == ["Summary", "Immunizations by Vaccine", "Demographics by Gender", "Blood Type Distribution"]
    summary = exports.tables("health", report)[0]
    assert summary["columns"] == ["Metric", "Value"]
    assert ["Total Patients", 1] in summary["rows"]


def test_report_json_endpoint_for_module_staff(client_for, patient):
    c, _ = client_for("BHW")

    r = c.get("/api/v1/reports/health/")

    assert r.status_code == 200
    assert r.data["title"] == "Health Report"
    assert r.data["summary"]["total_patients"] == 1


def test_report_denied_for_other_module_staff(client_for):
    c, _ = client_for("SK_OFFICER")

    r = c.get("/api/v1/reports/health/")

    assert r.status_code == 403


def test_captain_reads_every_report(client_for):
    c, _ = client_for("BARANGAY_CAPTAIN")

    for kind in ("health", "daycare", "sk"):
        assert c.get(f"/api/v1/reports/{kind}/").status_code == 200


def test_excel_export_has_named_sheets(client_for, student):
    c, _ = client_for("DAYCARE_TEACHER")

    r = c.get("/api/v1/reports/daycare/export/?format=xlsx")

    assert r.status_code == 200
    assert r["Content-Disposition"].startswith('attachment; filename="daycare-report-')
    wb = openpyxl.load_workbook(io.BytesIO(r.content))
    assert wb.sheetnames == ["Summary", "Registration Status", "Student Demographics", "Age Distribution"]


def test_pdf_export(api_client):
    r = api_client.get("/api/v1/reports/sk/export/?format=pdf")

    assert r.status_code == 200
    assert r["Content-Type"] == "application/pdf"
    assert r.content.startswith(b"%PDF")


def test_export_rejects_unknown_format(api_client):
    r = api_client.get("/api/v1/reports/sk/export/?format=csv")

    assert r.status_code == 400
    assert r.data["error"]["message"] == "Format must be xlsx or pdf"
