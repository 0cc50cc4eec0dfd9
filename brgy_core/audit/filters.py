# brgy_core/audit/filters.py
from __future__ import annotations

import django_filters

from brgy_core.audit import selectors
from brgy_core.audit.models import AuditEvent


class AuditEventFilter(django_filters.FilterSet):
    entity_type = django_filters.CharFilter()
    entity_id = django_filters.CharFilter()
    event_code = django_filters.CharFilter(method="filter_event_code")
    actor_user_id = django_filters.NumberFilter(field_name="actor_user_id")
    start_date = django_filters.DateFilter(field_name="occurred_at", lookup_expr="date__gte")
    end_date = django_filters.DateFilter(field_name="occurred_at", lookup_expr="date__lte")
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = AuditEvent
        fields = []

    def filter_event_code(self, queryset, name, value):
        return selectors.with_event_code(queryset, value)

    def filter_search(self, queryset, name, value):
        return selectors.matching(queryset, value.strip())
