# brgy_core/health/models.py
from django.conf import settings
from django.db import models

from brgy_core.common.models import BaseModel


class Patient(BaseModel):
    class Gender(models.TextChoices):
        MALE = "MALE", "Male"
        FEMALE = "FEMALE", "Female"

    first_name = models.CharField(max_length=100)
    middle_name = models.CharField(max_length=100, blank=True)
    last_name = models.CharField(max_length=100)
    date_of_birth = models.DateField()
    gender = models.CharField(max_length=10, choices=Gender.choices)

    address = models.CharField(max_length=255, blank=True)
    contact_number = models.CharField(max_length=20, blank=True)
    blood_type = models.CharField(max_length=5, blank=True)

    mother_name = models.CharField(max_length=200, blank=True)
    father_name = models.CharField(max_length=200, blank=True)
    place_of_birth = models.CharField(max_length=200, blank=True)
    # kg / cm
    birth_weight = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    birth_length = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)

    guardian = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="children_patients",
    )
    philhealth_number = models.CharField(max_length=30, blank=True)
    emergency_contact = models.CharField(max_length=100, blank=True)
    allergies = models.TextField(blank=True)
    medical_history = models.TextField(blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        db_table = "health_patient"
        ordering = ["last_name", "first_name"]
        indexes = [
            models.Index(fields=["last_name", "first_name"]),
            models.Index(fields=["guardian"]),
        ]

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.middle_name, self.last_name) if p and p.strip())

    def __str__(self) -> str:
        return self.full_name


class ImmunizationRecord(BaseModel):
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name="immunization_records")

    vaccine_name = models.CharField(max_length=150)
    vaccine_type = models.CharField(max_length=100, blank=True)
    manufacturer = models.CharField(max_length=150, blank=True)
    lot_number = models.CharField(max_length=50, blank=True)
    batch_number = models.CharField(max_length=50, blank=True)

    dosage = models.CharField(max_length=50, blank=True)
    date_given = models.DateField()
    age_at_vaccination = models.CharField(max_length=50, blank=True)
    site_of_administration = models.CharField(max_length=100, blank=True)
    administered_by = models.CharField(max_length=150, blank=True)

    dose_number = models.PositiveSmallIntegerField(null=True, blank=True)
    next_due_date = models.DateField(null=True, blank=True)
    expiration_date = models.DateField(null=True, blank=True)

    adverse_reactions = models.TextField(blank=True)
    notes = models.TextField(blank=True)

    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        db_table = "health_immunization_record"
        ordering = ["-date_given", "-created_at"]
        indexes = [models.Index(fields=["patient", "date_given"])]


class ImmunizationCard(BaseModel):
    """
    One card per patient. card_data holds child_information and
    vaccination_schedule (see health.schedule).
    """
    patient = models.OneToOneField(Patient, on_delete=models.CASCADE, related_name="immunization_card")
    card_data = models.JSONField(default=dict)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        db_table = "health_immunization_card"
