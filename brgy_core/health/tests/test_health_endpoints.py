# brgy_core/health/tests/test_health_endpoints.py
from datetime import date

import pytest

from brgy_core.audit.models import AuditEvent
from brgy_core.health.models import ImmunizationCard, Patient

pytestmark = pytest.mark.django_db


def _patient_payload(**overrides):
    data = {
        "first_name": "Pedro",
        "last_name": "Santos",
        "date_of_birth": "2024-06-01",
        "gender": "MALE",
        "address": "Purok 1, Binitayan",
        "birth_weight": "3.10",
    }
    data.update(overrides)
    return data


def test_bhw_creates_and_searches_patients(client_for):
    c, _ = client_for("BHW")

    r = c.post("/api/v1/health/patients/", _patient_payload(), format="json")
    assert r.status_code == 201, r.data
    assert r.data["full_name"] == "Pedro Santos"
    assert AuditEvent.objects.filter(event_code="patient.created").count() == 1

    r = c.get("/api/v1/health/patients/", {"q": "pedro"})
    assert r.data["count"] == 1

    r = c.get("/api/v1/health/patients/", {"gender": "FEMALE"})
    assert r.data["count"] == 0


def test_parent_cannot_write_patients(client_for):
    c, _ = client_for("PARENT_RESIDENT")

    r = c.post("/api/v1/health/patients/", _patient_payload(), format="json")

    assert r.status_code == 403
    assert r.data["error"]["code"] == "permission_denied"


def test_parent_sees_only_own_children(client_for, patient):
    c, parent = client_for("PARENT_RESIDENT")

    assert c.get("/api/v1/health/patients/").data["count"] == 0
    assert c.get(f"/api/v1/health/patients/{patient.id}/").status_code == 404

    Patient.objects.filter(pk=patient.pk).update(guardian=parent)
    assert c.get("/api/v1/health/patients/").data["count"] == 1
    assert c.get(f"/api/v1/health/patients/{patient.id}/").status_code == 200


def test_update_and_delete_patient(api_client, patient):
    r = api_client.patch(f"/api/v1/health/patients/{patient.id}/", {"blood_type": "A+"}, format="json")
    assert r.status_code == 200
    assert r.data["blood_type"] == "A+"

    r = api_client.delete(f"/api/v1/health/patients/{patient.id}/")
    assert r.status_code == 204
    assert not Patient.objects.filter(pk=patient.pk).exists()


def test_immunization_records(api_client, client_for, patient):
    r = api_client.post(
        "/api/v1/health/immunization-records/",
        {"patient_id": str(patient.id), "vaccine_name": "BCG Vaccine", "date_given": "2024-01-15", "dose_number": 1},
        format="json",
    )
    assert r.status_code == 201, r.data
    assert r.data["age_at_vaccination"] == "At birth"

    api_client.post(
        "/api/v1/health/immunization-records/",
        {"patient_id": str(patient.id), "vaccine_name": "Hepatitis B Vaccine", "date_given": "2024-03-01"},
        format="json",
    )

    r = api_client.get("/api/v1/health/immunization-records/", {"patient_id": str(patient.id)})
    assert [row["vaccine_name"] for row in r.data["results"]] == ["Hepatitis B Vaccine", "BCG Vaccine"]

    c, parent = client_for("PARENT_RESIDENT")
    assert c.get("/api/v1/health/immunization-records/my/").data == []
    Patient.objects.filter(pk=patient.pk).update(guardian=parent)
    assert len(c.get("/api/v1/health/immunization-records/my/").data) == 2


def test_immunization_record_unknown_patient(api_client):
    r = api_client.post(
        "/api/v1/health/immunization-records/",
        {"patient_id": "00000000-0000-0000-0000-000000000000", "vaccine_name": "BCG", "date_given": "2024-01-15"},
        format="json",
    )
    assert r.status_code == 404


def test_schedule_table(client_for):
    c, _ = client_for()

    r = c.get("/api/v1/health/immunization-schedule/")

    assert r.status_code == 200
    assert r.data["schedule"][2]["vaccine"] == "Pentavalent Vaccine (DPT-Hep B-HIB)"
    assert [d["timing"] for d in r.data["schedule"][2]["doses"]] == ["1½ months", "2½ months", "3½ months"]


def test_card_create_is_server_built_and_unique(client_for, patient):
    c, _ = client_for("BHW")

    r = c.post("/api/v1/health/immunization-cards/", {"patient_id": str(patient.id)}, format="json")
    assert r.status_code == 201, r.data
    info = r.data["card_data"]["child_information"]
    assert info["name"] == "Maria Santos Reyes"
    assert info["family_number"] == patient.id.hex[:8]
    assert info["birth_height"] == 50.0
    first_dose = r.data["card_data"]["vaccination_schedule"][0]["doses"][0]
    assert first_dose["due_date"] == "2024-01-15"
    assert first_dose["date_given"] is None

    r = c.post("/api/v1/health/immunization-cards/", {"patient_id": str(patient.id)}, format="json")
    assert r.status_code == 409
    assert r.data["error"]["code"] == "conflict"


def test_card_update_requires_health_role(client_for, patient):
    bhw, _ = client_for("BHW")
    card_id = bhw.post("/api/v1/health/immunization-cards/", {"patient_id": str(patient.id)}, format="json").data["id"]
    card = ImmunizationCard.objects.get(pk=card_id)

    edited = card.card_data
    edited["vaccination_schedule"][0]["doses"][0]["date_given"] = "2024-01-16"

    parent, user = client_for("PARENT_RESIDENT")
    Patient.objects.filter(pk=patient.pk).update(guardian=user)
    r = parent.put(f"/api/v1/health/immunization-cards/{card_id}/", {"card_data": edited}, format="json")
    assert r.status_code == 403

    r = bhw.put(f"/api/v1/health/immunization-cards/{card_id}/", {"card_data": edited}, format="json")
    assert r.status_code == 200
    assert r.data["card_data"]["vaccination_schedule"][0]["doses"][0]["date_given"] == "2024-01-16"

    edited["vaccination_schedule"].pop()
    r = bhw.put(f"/api/v1/health/immunization-cards/{card_id}/", {"card_data": edited}, format="json")
    assert r.status_code == 400


def test_single_dose_edit_and_summary(api_client, patient):
    card_id = api_client.post(
        "/api/v1/health/immunization-cards/", {"patient_id": str(patient.id)}, format="json"
    ).data["id"]
    today = date.today().isoformat()

    r = api_client.patch(
        f"/api/v1/health/immunization-cards/{card_id}/doses/",
        {"vaccine_index": 1, "dose_index": 0, "date_given": today, "remarks": "Right thigh"},
        format="json",
    )
    assert r.status_code == 200
    assert r.data["card_data"]["vaccination_schedule"][1]["doses"][0]["remarks"] == "Right thigh"

    r = api_client.patch(
        f"/api/v1/health/immunization-cards/{card_id}/doses/",
        {"vaccine_index": 1, "dose_index": 5, "date_given": today},
        format="json",
    )
    assert r.status_code == 400

    r = api_client.get(f"/api/v1/health/immunization-cards/{card_id}/summary/")
    assert r.status_code == 200
    assert r.data["recent"][0]["vaccine"] == "Hepatitis B Vaccine"
    assert r.data["counts"]["given_doses"] == 1
    assert r.data["counts"]["total_doses"] == 15


def test_immunization_status_without_card(api_client, patient):
    r = api_client.get(f"/api/v1/health/patients/{patient.id}/immunization-status/")

    assert r.status_code == 200
    assert r.data["card_id"] is None
    assert r.data["summary"]["total_doses"] == 15
    assert r.data["summary"]["given_doses"] == 0
    assert r.data["summary"]["vaccine_types"] == 7
    assert {d["status"] for d in r.data["doses"]} <= {"overdue", "due_soon", "scheduled"}
