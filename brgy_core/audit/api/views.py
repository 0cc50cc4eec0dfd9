# brgy_core/audit/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets
from rest_framework.exceptions import ValidationError as DRFValidationError

from brgy_core.audit.api.serializers import AuditEventSerializer
from brgy_core.audit.filters import AuditEventFilter
from brgy_core.audit.models import AuditEvent
from brgy_core.audit.selectors import audit_events
from brgy_core.common.api.pagination import paginate
from brgy_core.common.permissions import AdminOnlyPermission


def _q(name: str, kind=OpenApiTypes.STR) -> OpenApiParameter:
    return OpenApiParameter(name=name, type=kind, location=OpenApiParameter.QUERY, required=False)


class AuditEventViewSet(viewsets.GenericViewSet):
    """
    Admin audit log (read-only).
    """
    permission_classes = [AdminOnlyPermission]

    serializer_class = AuditEventSerializer
    queryset = AuditEvent.objects.none()

    @extend_schema(
        tags=["Admin"],
        responses={200: AuditEventSerializer(many=True)},
        parameters=[
            _q("entity_type"),
            _q("entity_id"),
            _q("event_code"),
            _q("actor_user_id", OpenApiTypes.INT),
            _q("start_date", OpenApiTypes.DATE),
            _q("end_date", OpenApiTypes.DATE),
            _q("search"),
        ],
    )
    def list(self, request):
        fs = AuditEventFilter(request.query_params, queryset=audit_events())
        if not fs.is_valid():
            raise DRFValidationError(fs.errors)
        return paginate(request, fs.qs, AuditEventSerializer)
