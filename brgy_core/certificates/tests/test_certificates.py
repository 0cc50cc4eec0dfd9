# brgy_core/certificates/tests/test_certificates.py
import pytest

from brgy_core.audit.models import AuditEvent
from brgy_core.certificates.models import Certificate
from brgy_core.certificates.services import resolve_issuer_name

pytestmark = pytest.mark.django_db

MISSING = "00000000-0000-0000-0000-000000000000"


def test_issuer_name_resolution(make_user):
    teacher = make_user("DAYCARE_TEACHER", first_name="Tess", last_name="Teacher")

    assert resolve_issuer_name(teacher.id) == "Tess Teacher"
    assert resolve_issuer_name(str(teacher.id)) == "Tess Teacher"
    assert resolve_issuer_name("Hon. Juan Dela Cruz") == "Hon. Juan Dela Cruz"
    assert resolve_issuer_name("999999") == "999999"
    assert resolve_issuer_name(None) == ""


def test_daycare_certificate_create_and_list(client_for, student):
    c, teacher = client_for("DAYCARE_TEACHER", first_name="Tess", last_name="Teacher")

    r = c.post(
        "/api/v1/daycare/certificates/",
        {"student_id": str(student.id), "certificate_type": "Completion", "issued_by": str(teacher.id)},
        format="json",
    )

    assert r.status_code == 201, r.data
    assert r.data["recipient_name"] == "Lito Garcia"
    assert r.data["issued_for"] == "Completion"
    assert r.data["issued_by"] == "Tess Teacher"
    assert r.data["certificate_number"] == "N/A"
    assert r.data["purpose"] == "Completion"
    assert AuditEvent.objects.filter(event_code="certificate.issued").exists()

    r = c.get("/api/v1/daycare/certificates/", {"student_id": str(student.id)})
    assert r.data["count"] == 1


def test_daycare_and_health_lists_are_separate(api_client, student, patient):
    api_client.post(
        "/api/v1/daycare/certificates/",
        {"student_id": str(student.id), "certificate_type": "Completion"},
        format="json",
    )
    r = api_client.post(
        "/api/v1/health/certificates/",
        {"patient_id": str(patient.id), "certificate_type": "Fully Immunized", "purpose": "School enrollment"},
        format="json",
    )
    assert r.status_code == 201
    assert r.data["recipient_name"] == "Maria Reyes"
    assert r.data["issued_for"] == "School enrollment"

    assert api_client.get("/api/v1/daycare/certificates/").data["count"] == 1
    assert api_client.get("/api/v1/health/certificates/").data["count"] == 1

    health_id = r.data["id"]
    assert api_client.get(f"/api/v1/daycare/certificates/{health_id}/").status_code == 404


def test_missing_subject_is_404(api_client):
    r = api_client.post(
        "/api/v1/daycare/certificates/",
        {"student_id": MISSING, "certificate_type": "Completion"},
        format="json",
    )
    assert r.status_code == 404
    assert r.data["error"]["message"] == "Student not found"

    r = api_client.post(
        "/api/v1/health/certificates/",
        {"patient_id": MISSING, "certificate_type": "Fully Immunized"},
        format="json",
    )
    assert r.status_code == 404
    assert r.data["error"]["message"] == "Patient not found"


def test_update_keeps_unchanged_fields(api_client, student):
    cert_id = api_client.post(
        "/api/v1/daycare/certificates/",
        {
            "student_id": str(student.id),
            "certificate_type": "Achievement",
            "certificate_number": "DC-2025-001",
            "achievements": "Best in Art",
            "issued_by": "Teacher Tess",
        },
        format="json",
    ).data["id"]

    r = api_client.put(
        f"/api/v1/daycare/certificates/{cert_id}/",
        {"recommendations": "Keep drawing"},
        format="json",
    )

    assert r.status_code == 200, r.data
    assert r.data["certificate_type"] == "Achievement"
    assert r.data["certificate_number"] == "DC-2025-001"
    assert r.data["achievements"] == "Best in Art"
    assert r.data["recommendations"] == "Keep drawing"
    assert r.data["issued_by"] == "Teacher Tess"


def test_download_pdf(api_client, patient):
    cert_id = api_client.post(
        "/api/v1/health/certificates/",
        {"patient_id": str(patient.id), "certificate_type": "Fully Immunized"},
        format="json",
    ).data["id"]

    r = api_client.get(f"/api/v1/health/certificates/{cert_id}/download/")

    assert r.status_code == 200
    assert r["Content-Disposition"] == 'attachment; filename="health-certificate-Maria-Reyes.pdf"'
    assert r.content.startswith(b"%PDF")


def test_delete(api_client, student):
    cert_id = api_client.post(
        "/api/v1/daycare/certificates/",
        {"student_id": str(student.id), "certificate_type": "Completion"},
        format="json",
    ).data["id"]

    assert api_client.delete(f"/api/v1/daycare/certificates/{cert_id}/").status_code == 204
    assert not Certificate.objects.exists()


def test_role_boundaries(client_for, student, patient):
    bhw, _ = client_for("BHW")
    captain, _ = client_for("BARANGAY_CAPTAIN")

    r = bhw.post(
        "/api/v1/daycare/certificates/",
        {"student_id": str(student.id), "certificate_type": "Completion"},
        format="json",
    )
    assert r.status_code == 403

    assert captain.get("/api/v1/health/certificates/").status_code == 200
    r = captain.post(
        "/api/v1/health/certificates/",
        {"patient_id": str(patient.id), "certificate_type": "Fully Immunized"},
        format="json",
    )
    assert r.status_code == 403
