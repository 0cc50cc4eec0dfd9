# brgy_core/events/models.py
from django.conf import settings
from django.db import models
from django.utils import timezone

from brgy_core.common.models import BaseModel


class Event(BaseModel):
    class Status(models.TextChoices):
        DRAFT = "DRAFT", "Draft"
        PUBLISHED = "PUBLISHED", "Published"
        CANCELLED = "CANCELLED", "Cancelled"
        COMPLETED = "COMPLETED", "Completed"

    title = models.CharField(max_length=200)
    description = models.TextField()
    event_date = models.DateField(db_index=True)
    start_time = models.TimeField()
    end_time = models.TimeField(null=True, blank=True)
    location = models.CharField(max_length=255)
    category = models.CharField(max_length=100, blank=True, db_index=True)
    max_participants = models.PositiveIntegerField(null=True, blank=True)

    status = models.CharField(max_length=10, choices=Status.choices, default=Status.DRAFT, db_index=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        db_table = "events_event"

    def __str__(self) -> str:
        return self.title


class EventRegistration(BaseModel):
    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        APPROVED = "APPROVED", "Approved"
        REJECTED = "REJECTED", "Rejected"

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="registrations")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="event_registrations")
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING, db_index=True)
    registered_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "events_registration"
        ordering = ["-registered_at"]
        constraints = [
            models.UniqueConstraint(fields=["event", "user"], name="uq_event_registration_event_user"),
        ]


class EventAttendance(BaseModel):
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="attendance")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="event_attendance")
    attended_at = models.DateTimeField(default=timezone.now)
    remarks = models.TextField(blank=True)

    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        db_table = "events_attendance"
        ordering = ["attended_at"]
        constraints = [
            models.UniqueConstraint(fields=["event", "user"], name="uq_event_attendance_event_user"),
        ]
