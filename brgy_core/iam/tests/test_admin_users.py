# brgy_core/iam/tests/test_admin_users.py
import pytest
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage

from brgy_core.iam.models import ResidentProfile

pytestmark = pytest.mark.django_db


def test_admin_lists_and_filters_users(api_client, make_user):
    make_user("BHW", email="bhw@example.com")
    make_user(email="pending@example.com", status="PENDING")

    r = api_client.get("/api/v1/admin/users/", {"status": "PENDING"})
    assert r.status_code == 200
    assert [u["email"] for u in r.data["results"]] == ["pending@example.com"]

    r = api_client.get("/api/v1/admin/users/", {"role": "BHW"})
    assert [u["email"] for u in r.data["results"]] == ["bhw@example.com"]

    r = api_client.get("/api/v1/admin/users/", {"search": "pending"})
    assert r.data["count"] == 1


def test_captain_can_list_but_not_write(client_for):
    c, _ = client_for("BARANGAY_CAPTAIN")

    assert c.get("/api/v1/admin/users/").status_code == 200
    r = c.post("/api/v1/admin/users/", {"email": "x@example.com", "password": "Secret123"}, format="json")
    assert r.status_code == 403


def test_non_admin_forbidden(client_for):
    c, _ = client_for("BHW")
    assert c.get("/api/v1/admin/users/").status_code == 403


def test_create_staff_user_with_roles(api_client, ensure_groups):
    r = api_client.post(
        "/api/v1/admin/users/",
        {"email": "Teacher@Example.com", "password": "Secret123", "first_name": "Tess", "roles": ["DAYCARE_TEACHER"]},
        format="json",
    )

    assert r.status_code == 201, r.data
    assert r.data["email"] == "teacher@example.com"
    assert r.data["roles"] == ["DAYCARE_TEACHER"]
    assert r.data["status"] == "ACTIVE"

    dup = api_client.post("/api/v1/admin/users/", {"email": "teacher@example.com", "password": "Secret123"}, format="json")
    assert dup.status_code == 409


def test_approve_pending_user_enables_login(api_client, anon_client, make_user):
    user = make_user(email="juan@example.com", status="PENDING")

    r = api_client.patch(f"/api/v1/admin/users/{user.id}/status/", {"status": "ACTIVE"}, format="json")
    assert r.status_code == 200
    assert r.data["status"] == "ACTIVE"

    user.refresh_from_db()
    assert user.is_active is True
    assert user.resident_profile.status == ResidentProfile.Status.ACTIVE

    r = anon_client.post("/api/v1/auth/login/", {"email": "juan@example.com", "password": "Pass@12345"}, format="json")
    assert r.status_code == 200


def test_replace_roles(api_client, make_user):
    user = make_user("BHW")

    r = api_client.put(f"/api/v1/admin/users/{user.id}/roles/", {"roles": ["SK_OFFICER", "SK_CHAIRMAN"]}, format="json")

    assert r.status_code == 200
    assert r.data["roles"] == ["SK_CHAIRMAN", "SK_OFFICER"]


def test_update_and_delete_user(api_client, make_user):
    user = make_user("BHW")

    r = api_client.patch(f"/api/v1/admin/users/{user.id}/", {"last_name": "Cruz"}, format="json")
    assert r.status_code == 200
    assert r.data["last_name"] == "Cruz"

    r = api_client.delete(f"/api/v1/admin/users/{user.id}/")
    assert r.status_code == 204
    assert api_client.get(f"/api/v1/admin/users/{user.id}/").status_code == 404


def test_proof_of_residency_signed_url(api_client, anon_client, make_user):
    user = make_user(status="PENDING")
    path = default_storage.save("proofs-of-residency/1-1-id.pdf", ContentFile(b"%PDF-1.4"))
    ResidentProfile.objects.filter(user=user).update(proof_of_residency=path)

    r = api_client.get(f"/api/v1/admin/users/{user.id}/proof-of-residency/")
    assert r.status_code == 200
    assert r.data["url"].startswith("/api/v1/files/download/?token=")

    download = anon_client.get(r.data["url"])
    assert download.status_code == 200
    assert b"".join(download.streaming_content) == b"%PDF-1.4"
