# brgy_core/iam/tests/test_token_auth.py
import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

pytestmark = pytest.mark.django_db


def _access_for(user) -> str:
    return str(RefreshToken.for_user(user).access_token)


def test_bearer_header_authenticates(make_user):
    user = make_user("BHW")
    c = APIClient()
    c.credentials(HTTP_AUTHORIZATION=f"Bearer {_access_for(user)}")

    r = c.get("/api/v1/me/")

    assert r.status_code == 200


def test_access_cookie_authenticates(make_user):
    user = make_user("PARENT_RESIDENT")
    c = APIClient()
    c.cookies["brgy_access"] = _access_for(user)

    assert c.get("/api/v1/me/").status_code == 200


def test_suspended_resident_token_rejected(make_user):
    user = make_user("PARENT_RESIDENT")
    token = _access_for(user)
    user.resident_profile.status = "SUSPENDED"
    user.resident_profile.save()

    c = APIClient()
    c.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    r = c.get("/api/v1/me/")

    assert r.status_code == 401
    assert r.json()["error"]["message"] == "Account is inactive"
