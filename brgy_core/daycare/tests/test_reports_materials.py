# brgy_core/daycare/tests/test_reports_materials.py
import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import DatabaseError

from brgy_core.common import storage
from brgy_core.common.storage import StorageError, delete_file, file_exists
from brgy_core.daycare.models import DaycareRegistration, LearningMaterial, ProgressReport

pytestmark = pytest.mark.django_db


def _report(student, **overrides):
    data = {
        "student": student,
        "reporting_period": "1st Quarter 2024",
        "academic_performance": "Knows colors and shapes.",
        "social_behavior": "Shares toys.",
    }
    data.update(overrides)
    return ProgressReport.objects.create(**data)


def test_teacher_creates_and_updates_report(client_for, student):
    c, teacher = client_for("DAYCARE_TEACHER")

    r = c.post(
        "/api/v1/daycare/progress-reports/",
        {"student_id": str(student.id), "reporting_period": "Q1", "recommendations": "Read daily"},
        format="json",
    )
    assert r.status_code == 201, r.data
    assert r.data["generated_by_id"] == teacher.id

    r = c.patch(f"/api/v1/daycare/progress-reports/{r.data['id']}/", {"social_behavior": "Kind"}, format="json")
    assert r.status_code == 200
    assert r.data["social_behavior"] == "Kind"
    assert r.data["recommendations"] == "Read daily"

    r = c.get("/api/v1/daycare/progress-reports/", {"student_id": str(student.id)})
    assert r.data["count"] == 1


def test_report_for_missing_student(api_client):
    r = api_client.post(
        "/api/v1/daycare/progress-reports/",
        {"student_id": "00000000-0000-0000-0000-000000000000", "reporting_period": "Q1"},
        format="json",
    )

    assert r.status_code == 404


def test_download_pdf_name(api_client, student):
    report = _report(student)

    r = api_client.get(f"/api/v1/daycare/progress-reports/{report.id}/download/")

    assert r.status_code == 200
    assert r["Content-Type"] == "application/pdf"
    assert r["Content-Disposition"] == 'attachment; filename="progress-report-Lito-Garcia-1st-Quarter-2024.pdf"'
    assert r.content.startswith(b"%PDF")


def test_parent_downloads_only_own_child(client_for, student):
    report = _report(student)
    stranger, _ = client_for("PARENT_RESIDENT")

    r = stranger.get(f"/api/v1/daycare/progress-reports/{report.id}/download/")
    assert r.status_code == 403

    parent_client, parent = client_for("PARENT_RESIDENT")
    DaycareRegistration.objects.filter(pk=student.registration_id).update(parent=parent)

    r = parent_client.get(f"/api/v1/daycare/progress-reports/{report.id}/download/")
    assert r.status_code == 200

    r = parent_client.get("/api/v1/daycare/progress-reports/my/")
    assert r.status_code == 200
    assert r.data[0]["full_name"] == "Lito Garcia"
    assert [p["reporting_period"] for p in r.data[0]["progress_reports"]] == ["1st Quarter 2024"]


def _upload(client, **fields):
    data = {
        "title": "Colors Worksheet",
        "category": "Worksheets",
        "is_public": "false",
        "file": SimpleUploadedFile("colors.pdf", b"%PDF-1.4 worksheet", content_type="application/pdf"),
    }
    data.update(fields)
    return client.post("/api/v1/daycare/learning-materials/", data, format="multipart")


def test_upload_material(client_for):
    c, teacher = client_for("DAYCARE_TEACHER", first_name="Tess", last_name="Teacher")

    r = _upload(c)

    assert r.status_code == 201, r.data
    assert r.data["is_public"] is False
    assert r.data["file_path"].startswith("learning-materials/")
    assert r.data["file_type"] == "application/pdf"
    assert r.data["uploaded_by_name"] == "Tess Teacher"
    assert file_exists(r.data["file_path"])


def test_upload_without_file(api_client):
    r = api_client.post("/api/v1/daycare/learning-materials/", {"title": "Empty"}, format="multipart")

    assert r.status_code == 400
    assert r.data["error"]["message"] == "No file uploaded"


def test_upload_storage_failure(api_client, monkeypatch):
    def boom(folder, file, **kwargs):
        raise StorageError("bucket offline")

    monkeypatch.setattr("brgy_core.daycare.services.upload_file", boom)

    r = _upload(api_client)

    assert r.status_code == 503
    assert not LearningMaterial.objects.exists()



def test_upload_removes_file_when_insert_fails(api_client, monkeypatch):
    stored = []

    def recording_upload(folder, file, **kwargs):
        path = storage.upload_file(folder, file, **kwargs)
        stored.append(path)
        return path

    def insert_fails(**kwargs):
        raise DatabaseError("insert failed")

    monkeypatch.setattr("brgy_core.daycare.services.upload_file", recording_upload)
    monkeypatch.setattr(LearningMaterial.objects, "create", insert_fails)

    r = _upload(api_client)

    assert r.status_code == 500
    assert len(stored) == 1
    assert not file_exists(stored[0])
    assert not LearningMaterial.objects.exists()

def test_non_staff_see_public_materials_only(api_client, client_for):
    _upload(api_client, title="Private")
    _upload(api_client, title="Public", is_public="true", category="Songs")
    visitor, _ = client_for(None)

    r = visitor.get("/api/v1/daycare/learning-materials/")
    assert [m["title"] for m in r.data["results"]] == ["Public"]

    r = api_client.get("/api/v1/daycare/learning-materials/", {"category": "Songs"})
    assert r.data["count"] == 1


def test_download_rules(api_client, client_for):
    private_id = _upload(api_client, title="Private").data["id"]
    public = _upload(api_client, title="Public", is_public="true").data
    parent, _ = client_for("PARENT_RESIDENT")

    assert parent.get(f"/api/v1/daycare/learning-materials/{private_id}/download/").status_code == 403

    r = parent.get(f"/api/v1/daycare/learning-materials/{public['id']}/download/")
    assert r.status_code == 200
    assert b"".join(r.streaming_content) == b"%PDF-1.4 worksheet"

    r = parent.get(f"/api/v1/daycare/learning-materials/{public['id']}/download-url/")
    assert r.data["url"].startswith("/api/v1/files/download/?token=")

    delete_file(public["file_path"])
    r = parent.get(f"/api/v1/daycare/learning-materials/{public['id']}/download/")
    assert r.status_code == 404
    assert r.data["error"]["message"] == "File not found on server"


def test_delete_material_survives_storage_failure(api_client, monkeypatch):
    material_id = _upload(api_client).data["id"]

    def boom(path):
        raise StorageError("bucket offline")

    monkeypatch.setattr("brgy_core.daycare.services.delete_file", boom)
    logged = []
    monkeypatch.setattr("brgy_core.daycare.services.logger.exception", lambda msg, *args: logged.append(msg))

    r = api_client.delete(f"/api/v1/daycare/learning-materials/{material_id}/")

    assert r.status_code == 204
    assert not LearningMaterial.objects.filter(id=material_id).exists()
    assert logged == ["Learning material file not removed material_id=%s path=%s"]


def test_parent_cannot_upload(client_for):
    c, _ = client_for("PARENT_RESIDENT")

    assert _upload(c).status_code == 403
