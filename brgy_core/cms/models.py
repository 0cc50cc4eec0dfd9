# brgy_core/cms/models.py
from __future__ import annotations

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from brgy_core.common.models import BaseModel, TimeStampedModel


class ContentBlock(BaseModel):
    """Landing-page rows share an on/off switch and a manual order."""
    is_active = models.BooleanField(default=True, db_index=True)
    sort_order = models.PositiveIntegerField(default=0)

    class Meta:
        abstract = True
        ordering = ["sort_order", "created_at"]


class Feature(ContentBlock):
    title = models.CharField(max_length=150)
    description = models.TextField()
    icon_type = models.CharField(max_length=50, blank=True)
    stats = models.CharField(max_length=100, blank=True)

    class Meta(ContentBlock.Meta):
        db_table = "cms_feature"

    def __str__(self) -> str:
        return self.title


class Benefit(ContentBlock):
    text = models.CharField(max_length=255)
    icon_type = models.CharField(max_length=50, blank=True)

    class Meta(ContentBlock.Meta):
        db_table = "cms_benefit"

    def __str__(self) -> str:
        return self.text


class Testimonial(ContentBlock):
    name = models.CharField(max_length=150)
    role = models.CharField(max_length=150, blank=True)
    content = models.TextField()
    rating = models.PositiveSmallIntegerField(
        default=5, validators=[MinValueValidator(1), MaxValueValidator(5)]
    )

    class Meta(ContentBlock.Meta):
        db_table = "cms_testimonial"

    def __str__(self) -> str:
        return f"{self.name} ({self.rating})"


class ServiceFeature(ContentBlock):
    description = models.CharField(max_length=255)

    class Meta(ContentBlock.Meta):
        db_table = "cms_service_feature"

    def __str__(self) -> str:
        return self.description


class Announcement(ContentBlock):
    class Priority(models.TextChoices):
        LOW = "LOW", "Low"
        NORMAL = "NORMAL", "Normal"
        HIGH = "HIGH", "High"
        URGENT = "URGENT", "Urgent"

    title = models.CharField(max_length=200)
    content = models.TextField()
    priority = models.CharField(max_length=10, choices=Priority.choices, default=Priority.NORMAL)
    is_public = models.BooleanField(default=False)
    published_at = models.DateTimeField(null=True, blank=True, db_index=True)
    expires_at = models.DateTimeField(null=True, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        db_table = "cms_announcement"
        ordering = ["-published_at", "-created_at"]

    def __str__(self) -> str:
        return self.title


class SystemSettings(TimeStampedModel):
    """Single row (pk=1) holding the barangay's public contact details."""
    barangay_name = models.CharField(max_length=150, blank=True)
    barangay_address = models.CharField(max_length=255, blank=True)
    barangay_contact_number = models.CharField(max_length=30, blank=True)
    barangay_email = models.EmailField(blank=True)

    class Meta:
        db_table = "cms_system_settings"
        verbose_name_plural = "system settings"

    @classmethod
    def load(cls) -> "SystemSettings":
        obj, _ = cls.objects.get_or_create(pk=1)
        return obj

    def __str__(self) -> str:
        return self.barangay_name or "System settings"
