# brgy_core/iam/tests/test_auth_flows.py
import re
from datetime import timedelta

import pytest
from django.core import mail
from django.utils import timezone
from rest_framework.test import APIClient

from brgy_core.iam.models import VerificationCode
from brgy_core.notifications.tests.test_email_service import FAILING_BACKEND

pytestmark = pytest.mark.django_db

PASSWORD = "Pass@12345"


def _code_from_last_email() -> str:
    return re.search(r"\b(\d{6})\b", mail.outbox[-1].body).group(1)


def test_login_sets_cookies_and_returns_user(anon_client, make_user, settings):
    user = make_user("BHW", email="bhw@example.com")

    r = anon_client.post("/api/v1/auth/login/", {"email": "bhw@example.com", "password": PASSWORD}, format="json")

    assert r.status_code == 200
    assert r.data["user"]["id"] == user.id
    assert "BHW" in r.data["user"]["roles"]
    assert settings.SIMPLE_JWT["AUTH_COOKIE"] in r.cookies
    assert settings.SIMPLE_JWT["AUTH_COOKIE_REFRESH"] in r.cookies


def test_cookie_authenticates_follow_up_requests(make_user):
    make_user("BHW", email="bhw@example.com")
    c = APIClient()
    c.post("/api/v1/auth/login/", {"email": "bhw@example.com", "password": PASSWORD}, format="json")

    r = c.get("/api/v1/me/")

    assert r.status_code == 200
    assert r.data["email"] == "bhw@example.com"


def test_login_bad_password(anon_client, make_user):
    make_user(email="juan@example.com")

    r = anon_client.post("/api/v1/auth/login/", {"email": "juan@example.com", "password": "nope"}, format="json")

    assert r.status_code == 400
    assert r.data["error"]["message"] == "Invalid email or password"


@pytest.mark.parametrize(
    "status,message",
    [("PENDING", "Account pending approval"), ("SUSPENDED", "Account is inactive")],
)
def test_login_blocked_until_active(anon_client, make_user, status, message):
    make_user(email="juan@example.com", status=status)

    r = anon_client.post("/api/v1/auth/login/", {"email": "juan@example.com", "password": PASSWORD}, format="json")

    assert r.status_code == 403
    assert r.data["error"]["message"] == message


def test_otp_login_flow(anon_client, make_user):
    make_user("SK_OFFICER", email="sk@example.com")

    r = anon_client.post("/api/v1/auth/send-otp/", {"email": "sk@example.com", "password": PASSWORD}, format="json")
    assert r.status_code == 200
    assert len(mail.outbox) == 1
    code = _code_from_last_email()

    r = anon_client.post("/api/v1/auth/verify-otp/", {"email": "sk@example.com", "code": code}, format="json")
    assert r.status_code == 200
    assert "SK_OFFICER" in r.data["user"]["roles"]

    # single use
    r = anon_client.post("/api/v1/auth/verify-otp/", {"email": "sk@example.com", "code": code}, format="json")
    assert r.status_code == 400


def test_resend_otp_requires_pending_login(anon_client, make_user):
    make_user(email="juan@example.com")

    r = anon_client.post("/api/v1/auth/resend-otp/", {"email": "juan@example.com"}, format="json")
    assert r.status_code == 400

    anon_client.post("/api/v1/auth/send-otp/", {"email": "juan@example.com", "password": PASSWORD}, format="json")
    first = _code_from_last_email()
    r = anon_client.post("/api/v1/auth/resend-otp/", {"email": "juan@example.com"}, format="json")
    assert r.status_code == 200
    assert len(mail.outbox) == 2

    # the first code was retired by the resend
    second = _code_from_last_email()
    if first != second:
        r = anon_client.post("/api/v1/auth/verify-otp/", {"email": "juan@example.com", "code": first}, format="json")
        assert r.status_code == 400


def test_otp_expired(anon_client, make_user):
    make_user(email="juan@example.com")
    anon_client.post("/api/v1/auth/send-otp/", {"email": "juan@example.com", "password": PASSWORD}, format="json")
    code = _code_from_last_email()
    VerificationCode.objects.update(expires_at=timezone.now() - timedelta(seconds=1))

    r = anon_client.post("/api/v1/auth/verify-otp/", {"email": "juan@example.com", "code": code}, format="json")

    assert r.status_code == 400
    assert r.data["error"]["message"] == "Invalid or expired verification code"


def test_otp_locks_after_max_attempts(anon_client, make_user):
    make_user(email="juan@example.com")
    anon_client.post("/api/v1/auth/send-otp/", {"email": "juan@example.com", "password": PASSWORD}, format="json")
    code = _code_from_last_email()
    wrong = "000000" if code != "000000" else "111111"

    for _ in range(5):
        anon_client.post("/api/v1/auth/verify-otp/", {"email": "juan@example.com", "code": wrong}, format="json")

    r = anon_client.post("/api/v1/auth/verify-otp/", {"email": "juan@example.com", "code": code}, format="json")
    assert r.status_code == 400
    assert "Too many failed attempts" in r.data["error"]["message"]


def test_forgot_password_is_generic_for_unknown_email(anon_client, db):
    r = anon_client.post("/api/v1/auth/forgot-password/", {"email": "nobody@example.com"}, format="json")

    assert r.status_code == 200
    assert mail.outbox == []


def test_password_reset_flow(anon_client, make_user):
    user = make_user(email="juan@example.com")

    r = anon_client.post("/api/v1/auth/forgot-password/", {"email": "juan@example.com"}, format="json")
    assert r.status_code == 200
    assert mail.outbox[0].subject == "Password Reset Code - Gabay Barangay"
    code = _code_from_last_email()

    r = anon_client.post("/api/v1/auth/verify-reset-code/", {"email": "juan@example.com", "code": code}, format="json")
    assert r.status_code == 200
    assert r.data == {"valid": True}

    r = anon_client.post(
        "/api/v1/auth/reset-password/",
        {"email": "juan@example.com", "code": code, "new_password": "NewPass123", "confirm_password": "NewPass123"},
        format="json",
    )
    assert r.status_code == 200

    user.refresh_from_db()
    assert user.check_password("NewPass123")

    r = anon_client.post("/api/v1/auth/verify-reset-code/", {"email": "juan@example.com", "code": code}, format="json")
    assert r.status_code == 400
    assert r.data["error"]["message"] == "Invalid or expired reset code"


def test_forgot_password_all_providers_down(anon_client, make_user, settings):
    make_user(email="juan@example.com")
    settings.EMAIL_PROVIDERS = [
        {"name": "sendgrid", "backend": FAILING_BACKEND, "options": {}},
        {"name": "gmail", "backend": FAILING_BACKEND, "options": {}},
    ]

    r = anon_client.post("/api/v1/auth/forgot-password/", {"email": "juan@example.com"}, format="json")

    assert r.status_code == 503
    assert r.data["error"]["code"] == "service_unavailable"


def test_logout_clears_cookies(client_for, settings):
    c, _ = client_for("BHW")

    r = c.post("/api/v1/auth/logout/")

    assert r.status_code == 200
    assert r.cookies[settings.SIMPLE_JWT["AUTH_COOKIE"]].value == ""


def test_profile_get_and_update(client_for):
    c, user = client_for("PARENT_RESIDENT")

    r = c.get("/api/v1/auth/profile/")
    assert r.status_code == 200
    assert r.data["roles"] == ["PARENT_RESIDENT"]

    r = c.put("/api/v1/auth/profile/", {"first_name": "Ana", "purok_zone": "Purok 5"}, format="json")
    assert r.status_code == 200
    assert r.data["first_name"] == "Ana"
    assert r.data["profile"]["purok_zone"] == "Purok 5"

    r = c.put("/api/v1/auth/profile/", {"contact_number": "12345"}, format="json")
    assert r.status_code == 400
