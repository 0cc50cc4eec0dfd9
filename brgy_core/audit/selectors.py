# brgy_core/audit/selectors.py
from __future__ import annotations

from django.db.models import Q, QuerySet

from brgy_core.audit.models import AuditEvent


def audit_events() -> QuerySet[AuditEvent]:
    return AuditEvent.objects.select_related("actor_user").order_by("-occurred_at")


def with_event_code(qs: QuerySet[AuditEvent], code: str) -> QuerySet[AuditEvent]:
    """Exact code or dotted prefix: "daycare_registration" finds ".approved" and ".rejected"."""
    return qs.filter(Q(event_code=code) | Q(event_code__startswith=f"{code}."))


def matching(qs: QuerySet[AuditEvent], term: str) -> QuerySet[AuditEvent]:
    return qs.filter(
        Q(actor_user__email__icontains=term)
        | Q(entity_id__icontains=term)
        | Q(event_code__icontains=term)
    )
