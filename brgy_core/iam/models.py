# brgy_core/iam/models.py
from django.conf import settings
from django.db import models

from brgy_core.common.models import BaseModel


class ResidentProfile(BaseModel):
    """
    Resident details anchored to Django's AUTH_USER_MODEL.
    The user's email doubles as the username.
    """

    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        ACTIVE = "ACTIVE", "Active"
        INACTIVE = "INACTIVE", "Inactive"
        SUSPENDED = "SUSPENDED", "Suspended"

    class Sex(models.TextChoices):
        MALE = "MALE", "Male"
        FEMALE = "FEMALE", "Female"

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="resident_profile")

    middle_name = models.CharField(max_length=100, blank=True)
    suffix = models.CharField(max_length=20, blank=True)
    contact_number = models.CharField(max_length=20, blank=True)
    address = models.CharField(max_length=255, blank=True)

    purok_zone = models.CharField(max_length=100, blank=True)
    barangay = models.CharField(max_length=100, blank=True)
    city_municipality = models.CharField(max_length=100, blank=True)
    province = models.CharField(max_length=100, blank=True)
    region = models.CharField(max_length=100, blank=True)

    birthday = models.DateField(null=True, blank=True)
    sex = models.CharField(max_length=10, choices=Sex.choices, blank=True)
    civil_status = models.CharField(max_length=50, blank=True)
    religion = models.CharField(max_length=100, blank=True)
    work_status = models.CharField(max_length=100, blank=True)

    registered_sk_voter = models.BooleanField(null=True, blank=True)
    registered_national_voter = models.BooleanField(null=True, blank=True)
    voted_last_sk_election = models.BooleanField(null=True, blank=True)
    lgbtq_community = models.BooleanField(null=True, blank=True)
    solo_parent = models.BooleanField(null=True, blank=True)

    proof_of_residency = models.CharField(max_length=512, blank=True)
    consent_agreed_at = models.DateTimeField(null=True, blank=True)

    status = models.CharField(max_length=16, choices=Status.choices, default=Status.PENDING, db_index=True)

    class Meta:
        db_table = "iam_resident_profile"

    def __str__(self) -> str:
        return f"{self.user.email} ({self.status})"


class VerificationCode(BaseModel):
    """
    One-time 6-digit code for login OTP and password reset.
    Only the hash is stored.
    """

    class Purpose(models.TextChoices):
        LOGIN_OTP = "LOGIN_OTP", "Login OTP"
        PASSWORD_RESET = "PASSWORD_RESET", "Password reset"

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="verification_codes")
    purpose = models.CharField(max_length=20, choices=Purpose.choices)
    code_hash = models.CharField(max_length=128)
    expires_at = models.DateTimeField()
    used_at = models.DateTimeField(null=True, blank=True)
    attempts = models.PositiveSmallIntegerField(default=0)

    class Meta:
        db_table = "iam_verification_code"
        indexes = [models.Index(fields=["user", "purpose", "used_at"])]
