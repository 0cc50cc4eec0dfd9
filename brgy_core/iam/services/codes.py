# brgy_core/iam/services/codes.py
"""
One-time verification codes (login OTP, password reset).

Codes are 6 digits, stored hashed, single use, and expire after the
purpose-specific TTL. Issuing a new code retires every older open code
for the same user and purpose.
"""
from __future__ import annotations

import secrets
from datetime import timedelta

from django.conf import settings
from django.contrib.auth.hashers import check_password, make_password
from django.db import transaction
from django.utils import timezone

from brgy_core.iam.models import VerificationCode


class InvalidCodeError(ValueError):
    pass


def _ttl_minutes(purpose: str) -> int:
    portal = settings.PORTAL
    if purpose == VerificationCode.Purpose.PASSWORD_RESET:
        return int(portal.get("RESET_CODE_TTL_MINUTES", 15))
    return int(portal.get("LOGIN_OTP_TTL_MINUTES", 10))


def _max_attempts() -> int:
    return int(settings.PORTAL.get("MAX_CODE_ATTEMPTS", 5))


def generate_code() -> str:
    return f"{secrets.randbelow(900000) + 100000}"


def _open_codes(user, purpose: str):
    return VerificationCode.objects.filter(user=user, purpose=purpose, used_at__isnull=True)


class VerificationCodeService:
    @staticmethod
    @transaction.atomic
    def issue(*, user, purpose: str) -> str:
        now = timezone.now()
        _open_codes(user, purpose).update(used_at=now)

        code = generate_code()
        VerificationCode.objects.create(
            user=user,
            purpose=purpose,
            code_hash=make_password(code),
            expires_at=now + timedelta(minutes=_ttl_minutes(purpose)),
        )
        return code

    @staticmethod
    def has_pending(*, user, purpose: str) -> bool:
        return _open_codes(user, purpose).exists()

    @staticmethod
    def verify(*, user, purpose: str, code: str, consume: bool = True) -> VerificationCode:
        """
        Raises InvalidCodeError on a missing, expired, exhausted or wrong code.
        Failed guesses are counted even though the caller gets an error.
        """
        record = _open_codes(user, purpose).order_by("-created_at").first()
        if record is None or record.expires_at <= timezone.now():
            raise InvalidCodeError("Invalid or expired code")

        if record.attempts >= _max_attempts():
            raise InvalidCodeError("Too many failed attempts. Please request a new code.")

        if not check_password(str(code or "").strip(), record.code_hash):
            record.attempts += 1
            record.save(update_fields=["attempts", "updated_at"])
            raise InvalidCodeError("Invalid or expired code")

        if consume:
            updated = VerificationCode.objects.filter(pk=record.pk, used_at__isnull=True).update(used_at=timezone.now())
            if not updated:
                raise InvalidCodeError("Invalid or expired code")
        return record
