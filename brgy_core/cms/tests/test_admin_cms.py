# brgy_core/cms/tests/test_admin_cms.py
import pytest

from brgy_core.audit.models import AuditEvent
from brgy_core.cms.models import Announcement, Feature

pytestmark = pytest.mark.django_db


def test_admin_creates_and_toggles_feature(api_client):
    r = api_client.post(
        "/api/v1/admin/features/",
        {"title": "SK Programs", "description": "Youth events", "icon_type": "users", "sort_order": 3},
        format="json",
    )
    assert r.status_code == 201, r.data
    feature_id = r.data["id"]
    assert r.data["is_active"] is True

    r = api_client.patch(f"/api/v1/admin/features/{feature_id}/toggle-active/")

    assert r.status_code == 200
    assert r.data["is_active"] is False
    assert AuditEvent.objects.filter(event_code="cms.content_toggled", entity_id=feature_id).exists()


def test_admin_list_includes_inactive(api_client):
    Feature.objects.create(title="Off", description="x", is_active=False)

    r = api_client.get("/api/v1/admin/features/")

    assert r.data["count"] == 1


def test_testimonial_rating_is_bounded(api_client):
    r = api_client.post(
        "/api/v1/admin/testimonials/",
        {"name": "Jose", "content": "Great", "rating": 6},
        format="json",
    )

    assert r.status_code == 400
    assert "rating" in r.data["error"]["details"]


def test_staff_cannot_edit_content(client_for):
    c, _ = client_for("BHW")

    r = c.post("/api/v1/admin/benefits/", {"text": "x"}, format="json")

    assert r.status_code == 403


def test_missing_content_is_404(api_client):
    r = api_client.delete("/api/v1/admin/service-features/00000000-0000-0000-0000-000000000000/")

    assert r.status_code == 404
    assert r.data["error"]["message"] == "Service feature not found"


def test_captain_creates_and_publishes_announcement(client_for):
    c, captain = client_for("BARANGAY_CAPTAIN")

    r = c.post(
        "/api/v1/admin/announcements/",
        {"title": "Water interruption", "content": "Purok 2, 9am-3pm", "priority": "HIGH", "is_public": True},
        format="json",
    )
    assert r.status_code == 201, r.data
    assert r.data["published_at"] is None
    assert r.data["created_by_id"] == captain.id

    r = c.patch(f"/api/v1/admin/announcements/{r.data['id']}/publish/")

    assert r.status_code == 200
    assert r.data["published_at"] is not None
    assert Announcement.objects.get().published_at is not None


def test_captain_cannot_edit_features(client_for):
    c, _ = client_for("BARANGAY_CAPTAIN")

    assert c.get("/api/v1/admin/features/").status_code == 403


def test_settings_get_and_put(api_client):
    r = api_client.get("/api/v1/admin/settings/")
    assert r.status_code == 200
    assert r.data["barangay_name"] == ""

    r = api_client.put(
        "/api/v1/admin/settings/",
        {"barangay_name": "Barangay Binitayan", "barangay_contact_number": "052 123 4567"},
        format="json",
    )

    assert r.status_code == 200
    assert r.data["barangay_contact_number"] == "052 123 4567"
    assert api_client.get("/api/v1/public/contact-info/").data["contact_info"]["phone"] == "052 123 4567"


def test_settings_admin_only(client_for):
    c, _ = client_for("BARANGAY_CAPTAIN")

    assert c.get("/api/v1/admin/settings/").status_code == 403
