# brgy_core/certificates/models.py
from django.conf import settings
from django.db import models
from django.utils import timezone

from brgy_core.common.models import BaseModel


class Certificate(BaseModel):
    """
    One table for daycare, health and SK certificates. Exactly one of
    student / patient / event is set, matching `scope`.
    """

    class Scope(models.TextChoices):
        DAYCARE = "DAYCARE", "Daycare"
        HEALTH = "HEALTH", "Health"
        EVENT = "EVENT", "SK event"

    scope = models.CharField(max_length=10, choices=Scope.choices, db_index=True)

    student = models.ForeignKey(
        "daycare.DaycareStudent",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="certificates",
    )
    patient = models.ForeignKey(
        "health.Patient",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="certificates",
    )
    event = models.ForeignKey(
        "events.Event",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="certificates",
    )
    recipient_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="certificates",
    )

    certificate_type = models.CharField(max_length=100)
    recipient_name = models.CharField(max_length=200)
    issued_for = models.CharField(max_length=255)
    issued_by = models.CharField(max_length=200, blank=True)
    issued_date = models.DateField(default=timezone.localdate)

    # certificate_number, purpose, achievements, recommendations, expiry_date
    certificate_data = models.JSONField(default=dict, blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        db_table = "certificates_certificate"
        ordering = ["-issued_date", "-created_at"]

    def __str__(self) -> str:
        return f"{self.certificate_type} - {self.recipient_name}"
