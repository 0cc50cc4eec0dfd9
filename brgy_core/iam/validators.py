# brgy_core/iam/validators.py
from __future__ import annotations

import re
from datetime import date

from django.conf import settings
from django.core.exceptions import ValidationError

CONTACT_NUMBER_RE = re.compile(r"^09\d{9}$")
NAME_RE = re.compile(r"^[A-Za-z\s]+$")

MIN_PASSWORD_LENGTH = 8
MIN_RESIDENT_AGE = 15
ADULT_FOLLOW_UP_AGE = 30

PROOF_CONTENT_TYPES = {"application/pdf", "image/jpeg", "image/png"}
PROOF_EXTENSIONS = {".pdf", ".jpg", ".jpeg", ".png"}


def age_on(birthday: date, today: date | None = None) -> int:
    today = today or date.today()
    years = today.year - birthday.year
    if (today.month, today.day) < (birthday.month, birthday.day):
        years -= 1
    return years


def validate_contact_number(value: str) -> None:
    if not CONTACT_NUMBER_RE.match(value or ""):
        raise ValidationError(
            "Invalid contact number format. Please enter a valid Philippine mobile number (09XXXXXXXXX)"
        )


def validate_person_name(value: str) -> None:
    if value and not NAME_RE.match(value):
        raise ValidationError("Names should only contain letters and spaces")


def validate_password_pair(password: str, confirm_password: str) -> None:
    if password != confirm_password:
        raise ValidationError("Passwords do not match")
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")


def validate_proof_of_residency(upload) -> None:
    if upload is None:
        raise ValidationError("Proof of residency is required")

    limit = settings.PORTAL.get("PROOF_OF_RESIDENCY_MAX_BYTES", 5 * 1024 * 1024)
    if upload.size > limit:
        raise ValidationError("File size must be less than 5MB")

    content_type = (getattr(upload, "content_type", "") or "").lower()
    name = (getattr(upload, "name", "") or "").lower()
    ext = name[name.rfind("."):] if "." in name else ""
    if content_type not in PROOF_CONTENT_TYPES and ext not in PROOF_EXTENSIONS:
        raise ValidationError("Only PDF, JPEG and PNG files are allowed")
