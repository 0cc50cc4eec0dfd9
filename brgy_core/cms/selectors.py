# brgy_core/cms/selectors.py
from __future__ import annotations

import logging
from typing import Any, Dict

from django.conf import settings
from django.db import DatabaseError
from django.db.models import Q, QuerySet
from django.utils import timezone

from brgy_core.cms.models import Announcement, SystemSettings
from brgy_core.daycare.models import DaycareStudent
from brgy_core.events.models import Event
from brgy_core.health.models import Patient
from brgy_core.iam.models import ResidentProfile

logger = logging.getLogger(__name__)

# shown on the landing page while the database is unreachable
FALLBACK_STATS = {
    "communityMembers": 150,
    "healthRecords": 85,
    "daycareChildren": 45,
    "skEvents": 12,
}

DEFAULT_CONTACT_PHONE = "+63 XXX XXX XXXX"
DEFAULT_CONTACT_EMAIL = "contact@barangaybinitayan.gov.ph"

PUBLIC_ANNOUNCEMENT_LIMIT = 20


def count_public_stats() -> Dict[str, int]:
    return {
        "communityMembers": ResidentProfile.objects.filter(status=ResidentProfile.Status.ACTIVE).count(),
        "healthRecords": Patient.objects.count(),
        "daycareChildren": DaycareStudent.objects.count(),
        "skEvents": Event.objects.filter(status=Event.Status.PUBLISHED).count(),
    }


def public_stats() -> Dict[str, int]:
    try:
        return count_public_stats()
    except DatabaseError:
        logger.exception("Public stats query failed, serving fallback numbers")
        return dict(FALLBACK_STATS)


def active(model) -> QuerySet:
    return model.objects.filter(is_active=True).order_by("sort_order", "created_at")


def contact_info() -> Dict[str, Any]:
    portal = getattr(settings, "PORTAL", {})
    s = SystemSettings.objects.filter(pk=1).first()
    return {
        "barangay_name": (s and s.barangay_name) or portal.get("BARANGAY_NAME", ""),
        "address": (s and s.barangay_address) or portal.get("BARANGAY_ADDRESS", ""),
        "phone": (s and s.barangay_contact_number) or DEFAULT_CONTACT_PHONE,
        "email": (s and s.barangay_email) or DEFAULT_CONTACT_EMAIL,
        "hours": portal.get("OFFICE_HOURS", ""),
    }


def public_announcements(now=None) -> QuerySet:
    now = now or timezone.now()
    return (
        Announcement.objects.filter(is_public=True, is_active=True, published_at__isnull=False, published_at__lte=now)
        .filter(Q(expires_at__isnull=True) | Q(expires_at__gte=now))
        .order_by("-published_at")[:PUBLIC_ANNOUNCEMENT_LIMIT]
    )


def list_announcements(*, search: str | None = None) -> QuerySet:
    qs = Announcement.objects.select_related("created_by")
    if search:
        qs = qs.filter(Q(title__icontains=search) | Q(content__icontains=search))
    return qs.order_by("-created_at")
