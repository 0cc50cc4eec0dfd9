# brgy_core/daycare/tests/test_registrations.py
import pytest

from brgy_core.audit.models import AuditEvent
from brgy_core.daycare.models import AttendanceRecord, DaycareRegistration, DaycareStudent, ProgressReport

pytestmark = pytest.mark.django_db


def _registration_payload(**overrides):
    data = {
        "child_first_name": "Ana",
        "child_last_name": "Cruz",
        "child_date_of_birth": "2021-03-10",
        "child_gender": "FEMALE",
        "address": "Purok 2, Binitayan",
        "parent_contact": "09171112222",
    }
    data.update(overrides)
    return data


def test_parent_submits_and_sees_own_registration(client_for):
    c, parent = client_for("PARENT_RESIDENT")

    r = c.post("/api/v1/daycare/registrations/", _registration_payload(), format="json")
    assert r.status_code == 201, r.data
    assert r.data["status"] == "PENDING"
    assert r.data["parent_id"] == parent.id

    r = c.get("/api/v1/daycare/registrations/my/")
    assert r.status_code == 200
    assert len(r.data) == 1
    assert r.data[0]["student"] is None


def test_parent_cannot_list_all_registrations(client_for):
    c, _ = client_for("PARENT_RESIDENT")

    r = c.get("/api/v1/daycare/registrations/")

    assert r.status_code == 403


def test_staff_lists_with_status_filter(client_for, student):
    c, _ = client_for("DAYCARE_STAFF")
    DaycareRegistration.objects.create(parent=student.registration.parent, **{
        "child_first_name": "Ben",
        "child_last_name": "Lopez",
        "child_date_of_birth": "2021-01-01",
        "child_gender": "MALE",
        "address": "Purok 5",
        "parent_contact": "09170000000",
    })

    assert c.get("/api/v1/daycare/registrations/").data["count"] == 2
    r = c.get("/api/v1/daycare/registrations/", {"status": "pending"})
    assert r.data["count"] == 1
    assert r.data["results"][0]["child_first_name"] == "Ben"


def test_approve_creates_student(client_for):
    parent_client, _ = client_for("PARENT_RESIDENT")
    reg_id = parent_client.post("/api/v1/daycare/registrations/", _registration_payload(), format="json").data["id"]
    c, staff = client_for("DAYCARE_TEACHER")

    r = c.post(
        f"/api/v1/daycare/registrations/{reg_id}/approve/",
        {"allergies": "Peanuts", "notes": "Welcome"},
        format="json",
    )

    assert r.status_code == 200, r.data
    assert r.data["detail"] == "Registration approved and student enrolled successfully"
    student = DaycareStudent.objects.get(registration_id=reg_id)
    assert student.first_name == "Ana"
    assert student.allergies == "Peanuts"
    assert student.shift is None

    reg = DaycareRegistration.objects.get(id=reg_id)
    assert reg.status == "APPROVED"
    assert reg.reviewed_by_id == staff.id
    assert reg.reviewed_at is not None
    assert AuditEvent.objects.filter(event_code="daycare_registration.approved").exists()

    r = parent_client.get("/api/v1/daycare/registrations/my/")
    assert r.data[0]["student"]["id"] == str(student.id)


def test_processed_registration_cannot_be_reviewed_again(client_for):
    parent_client, _ = client_for("PARENT_RESIDENT")
    reg_id = parent_client.post("/api/v1/daycare/registrations/", _registration_payload(), format="json").data["id"]
    c, _ = client_for("DAYCARE_STAFF")

    assert c.post(f"/api/v1/daycare/registrations/{reg_id}/reject/", {"notes": "Full"}, format="json").status_code == 200

    for verb in ("approve", "reject"):
        r = c.post(f"/api/v1/daycare/registrations/{reg_id}/{verb}/", {}, format="json")
        assert r.status_code == 409
        assert r.data["error"]["message"] == "Registration already processed"
    assert not DaycareStudent.objects.filter(registration_id=reg_id).exists()


def test_approve_missing_registration(api_client):
    r = api_client.post("/api/v1/daycare/registrations/00000000-0000-0000-0000-000000000000/approve/", {}, format="json")

    assert r.status_code == 404
    assert r.data["error"]["message"] == "Registration not found"


def test_update_registration(api_client, student):
    r = api_client.patch(
        f"/api/v1/daycare/registrations/{student.registration_id}/",
        {"emergency_contact": "09998887777"},
        format="json",
    )

    assert r.status_code == 200
    assert r.data["emergency_contact"] == "09998887777"


def test_delete_registration_removes_student_and_history(api_client, student):
    AttendanceRecord.objects.create(student=student, date="2024-06-03", status="PRESENT")
    ProgressReport.objects.create(student=student, reporting_period="Q1")

    r = api_client.delete(f"/api/v1/daycare/registrations/{student.registration_id}/")

    assert r.status_code == 204
    assert not DaycareRegistration.objects.exists()
    assert not DaycareStudent.objects.exists()
    assert not AttendanceRecord.objects.exists()
    assert not ProgressReport.objects.exists()
