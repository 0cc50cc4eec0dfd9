# brgy_core/notifications/tests/test_email_service.py
import smtplib

import pytest
from django.core import mail
from django.core.mail.backends.base import BaseEmailBackend

from brgy_core.notifications.services import (
    NOT_CONFIGURED_MSG,
    EmailService,
    send_login_otp_email,
    send_password_reset_email,
)

FAILING_BACKEND = "brgy_core.notifications.tests.test_email_service.FailingEmailBackend"
BROKEN_API_BACKEND = "brgy_core.notifications.tests.test_email_service.BrokenApiEmailBackend"
LOCMEM_BACKEND ="django.core.mail.backends.locmem.EmailBackend"


class FailingEmailBackend(BaseEmailBackend):
    def send_messages(self, email_messages):
        raise smtplib.SMTPException("relay refused")


class BrokenApiEmailBackend(BaseEmailBackend):
    def send_messages(self, email_messages):
        raise RuntimeError("provider api 502")


def _provider(name, backend):
    return {"name": name, "backend": backend, "from_email": f"{name}@test.local", "options": {}}


def test_primary_provider_sends():
    result = EmailService.send(to="juan@example.com", subject="Hi", html="<p>Hello</p>")

    assert result.success is True
    assert result.provider == "sendgrid"
    assert result.message_id
    assert len(mail.outbox) == 1
    assert mail.outbox[0].from_email == "no-reply@test.local"
    assert mail.outbox[0].extra_headers["Message-ID"] == result.message_id


def test_falls_back_to_second_provider(settings):
    settings.EMAIL_PROVIDERS = [
        _provider("sendgrid", FAILING_BACKEND),
        _provider("gmail", LOCMEM_BACKEND),
    ]

    result = EmailService.send(to="juan@example.com", subject="Hi", html="<p>Hello</p>")

    assert result.success is True
    assert result.provider == "gmail"
    assert len(mail.outbox) == 1
    assert mail.outbox[0].from_email == "gmail@test.local"


def test_falls_back_when_provider_raises_non_smtp_error(settings):
    settings.EMAIL_PROVIDERS = [
        _provider("sendgrid", BROKEN_API_BACKEND),
        _provider("gmail", LOCMEM_BACKEND),
    ]

    result = EmailService.send(to="juan@example.com", subject="Hi", html="<p>Hello</p>")

    assert result.success is True
    assert result.provider == "gmail"
    assert len(mail.outbox) == 1


def test_falls_back_when_backend_path_cannot_be_imported(settings):
    settings.EMAIL_PROVIDERS = [
        _provider("sendgrid", "no.such.Backend"),
        _provider("gmail", LOCMEM_BACKEND),
    ]

    result = EmailService.send(to="juan@example.com", subject="Hi", html="<p>Hello</p>")

    assert result.success is True
    assert result.provider == "gmail"
    assert len(mail.outbox) == 1
    assert mail.outbox[0].from_email == "gmail@test.local"


def test_all_providers_fail(settings):
    settings.EMAIL_PROVIDERS = [
        _provider("sendgrid", FAILING_BACKEND),
        _provider("gmail", FAILING_BACKEND),
    ]

    result = EmailService.send(to="juan@example.com", subject="Hi", html="<p>Hello</p>")

    assert result.success is False
    assert result.provider is None
    assert result.error == "Failed to send email: relay refused"
    assert mail.outbox == []


def test_no_providers_configured(settings):
    settings.EMAIL_PROVIDERS = []

    result = EmailService.send(to="juan@example.com", subject="Hi", html="<p>Hello</p>")

    assert result.as_dict() == {
        "success": False,
        "provider": None,
        "message_id": None,
        "error": NOT_CONFIGURED_MSG,
    }


def test_password_reset_email_renders_code():
    result = send_password_reset_email(email="ana@example.com", code="123456", first_name="Ana")

    assert result.success
    msg = mail.outbox[0]
    assert msg.subject == "Password Reset Code - Gabay Barangay"
    html = msg.alternatives[0][0]
    assert "123456" in html
    assert "Hello Ana" in html
    assert "15 minutes" in html


def test_login_otp_email_uses_otp_ttl():
    send_login_otp_email(email="ana@example.com", code="654321")

    html = mail.outbox[0].alternatives[0][0]
    assert "654321" in html
    assert "10 minutes" in html
