# brgy_core/notifications/services.py
"""
Outbound email.

Providers come from settings.EMAIL_PROVIDERS, in priority order. Each entry is
turned into a Django mail connection; the first one that accepts the message
wins and the rest are only tried after a failure.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from email.utils import make_msgid
from typing import Any, Dict, List, Optional

from django.conf import settings
from django.core.mail import EmailMultiAlternatives, get_connection
from django.template.loader import render_to_string
from django.utils.html import strip_tags

logger = logging.getLogger(__name__)

NOT_CONFIGURED_MSG = "Email service not configured. Please contact administrator."


@dataclass(frozen=True)
class EmailResult:
    success: bool
    provider: Optional[str] = None
    message_id: Optional[str] = None
    error: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _providers() -> List[Dict[str, Any]]:
    return list(getattr(settings, "EMAIL_PROVIDERS", None) or [])


class EmailService:
    @staticmethod
    def send(*, to: str, subject: str, html: str, text: Optional[str] = None) -> EmailResult:
        providers = _providers()
        if not providers:
            logger.error("Email not sent to=%s: no providers configured", to)
            return EmailResult(success=False, error=NOT_CONFIGURED_MSG)

        last_error = ""
        for provider in providers:
            name = provider.get("name", "default")
            message_id = make_msgid(domain=provider.get("domain") or "gabaybarangay.ph")
            try:
                connection = get_connection(
                    provider.get("backend"),
                    fail_silently=False,
                    **(provider.get("options") or {}),
                )
                msg = EmailMultiAlternatives(
                    subject=subject,
                    body=text or strip_tags(html),
                    from_email=provider.get("from_email") or settings.DEFAULT_FROM_EMAIL,
                    to=[to],
                    headers={"Message-ID": message_id},
                    connection=connection,
                )
                msg.attach_alternative(html, "text/html")
                msg.send(fail_silently=False)
            except Exception as exc:
                last_error = str(exc) or exc.__class__.__name__
                logger.exception("Email provider failed provider=%s to=%s", name, to)
                continue

            logger.info("Email sent provider=%s to=%s message_id=%s", name, to, message_id)
            return EmailResult(success=True, provider=name, message_id=message_id)

        return EmailResult(success=False, error=f"Failed to send email: {last_error}")


def _portal_context(**extra) -> Dict[str, Any]:
    portal = getattr(settings, "PORTAL", {}) or {}
    return {
        "portal_name": portal.get("NAME", "Gabay Barangay"),
        "barangay_name": portal.get("BARANGAY_NAME", ""),
        **extra,
    }


def send_password_reset_email(*, email: str, code: str, first_name: str = "") -> EmailResult:
    ctx = _portal_context(
        code=code,
        first_name=first_name or "there",
        expiry_minutes=settings.PORTAL.get("RESET_CODE_TTL_MINUTES", 15),
    )
    html = render_to_string("notifications/password_reset_email.html", ctx)
    return EmailService.send(
        to=email,
        subject=f"Password Reset Code - {ctx['portal_name']}",
        html=html,
        text=(
            f"Hello {ctx['first_name']},\n\n"
            f"Your password reset code is {code}. "
            f"It will expire in {ctx['expiry_minutes']} minutes.\n\n"
            "If you did not request a password reset, you can ignore this email."
        ),
    )


def send_login_otp_email(*, email: str, code: str, first_name: str = "") -> EmailResult:
    ctx = _portal_context(
        code=code,
        first_name=first_name or "there",
        expiry_minutes=settings.PORTAL.get("LOGIN_OTP_TTL_MINUTES", 10),
    )
    html = render_to_string("notifications/login_otp_email.html", ctx)
    return EmailService.send(
        to=email,
        subject=f"Login Verification Code - {ctx['portal_name']}",
        html=html,
        text=(
            f"Hello {ctx['first_name']},\n\n"
            f"Your login verification code is {code}. "
            f"It will expire in {ctx['expiry_minutes']} minutes."
        ),
    )
