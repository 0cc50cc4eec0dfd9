# brgy_core/events/api/views.py
from __future__ import annotations

from uuid import UUID

from django.contrib.auth import get_user_model
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, ValidationError as DRFValidationError
from rest_framework.response import Response

from brgy_core.certificates.api.serializers import EventCertificateSerializer
from brgy_core.certificates.services import CertificateService, certificate_filename, render_certificate_pdf
from brgy_core.common.api.exceptions import ServiceUnavailableError
from brgy_core.common.api.pagination import paginate
from brgy_core.documents.excel import excel_response
from brgy_core.documents.pdf import PdfRenderError, pdf_response
from brgy_core.events import exports
from brgy_core.events.api.serializers import (
    AttendanceCreateSerializer,
    AvailableAttendeeSerializer,
    EventAttendanceSerializer,
    EventCreateSerializer,
    EventRegistrationSerializer,
    EventSerializer,
    EventStatusSerializer,
    EventUpdateSerializer,
    RegistrationStatusSerializer,
)
from brgy_core.events.models import Event, EventAttendance, EventRegistration
from brgy_core.events.permissions import EventAttendancePermission, EventPermission, EventRegistrationPermission
from brgy_core.events.selectors import (
    all_event_analytics,
    available_attendees,
    event_analytics_row,
    get_visible_event,
    list_categories,
    list_event_attendance,
    list_event_registrations,
    list_events,
    my_registrations,
)
from brgy_core.events.services import EventAttendanceService, EventRegistrationService, EventService


def _parse_uuid(value, field_name: str) -> UUID:
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        raise DRFValidationError({field_name: "Invalid UUID"})


class EventViewSet(viewsets.ViewSet):
    permission_classes = [EventPermission]

    serializer_class = EventSerializer
    queryset = Event.objects.none()

    def _get(self, request, pk) -> Event:
        try:
            return get_visible_event(user=request.user, event_id=_parse_uuid(pk, "id"))
        except Event.DoesNotExist:
            raise NotFound("Event not found")

    @extend_schema(
        tags=["Events"],
        responses={200: EventSerializer(many=True)},
        parameters=[
            OpenApiParameter(name="search", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="status", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False,
                             description="all (default, hides CANCELLED) or a single status"),
            OpenApiParameter(name="category", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    def list(self, request):
        qs = list_events(
            user=request.user,
            search=request.query_params.get("search", "").strip(),
            status=request.query_params.get("status", "all"),
            category=request.query_params.get("category") or None,
        )
        return paginate(request, qs, EventSerializer)

    @extend_schema(tags=["Events"], responses={200: EventSerializer})
    def retrieve(self, request, pk=None):
        return Response(EventSerializer(self._get(request, pk)).data)

    @extend_schema(tags=["Events"], request=EventCreateSerializer, responses={201: EventSerializer})
    def create(self, request):
        ser = EventCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        event = EventService.create_event(actor_user_id=request.user.id, data=dict(ser.validated_data))
        return Response(EventSerializer(event).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Events"], request=EventUpdateSerializer, responses={200: EventSerializer})
    def update(self, request, pk=None, partial=False):
        ser = EventUpdateSerializer(data=request.data, partial=partial)
        ser.is_valid(raise_exception=True)

        try:
            event = EventService.update_event(
                actor_user_id=request.user.id,
                event_id=_parse_uuid(pk, "id"),
                data=dict(ser.validated_data),
            )
        except Event.DoesNotExist:
            raise NotFound("Event not found")
        return Response(EventSerializer(event).data)

    @extend_schema(tags=["Events"], request=EventUpdateSerializer, responses={200: EventSerializer})
    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk, partial=True)

    @extend_schema(tags=["Events"], responses={204: None})
    def destroy(self, request, pk=None):
        try:
            EventService.delete_event(actor_user_id=request.user.id, event_id=_parse_uuid(pk, "id"))
        except Event.DoesNotExist:
            raise NotFound("Event not found")
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(tags=["Events"], request=EventStatusSerializer, responses={200: EventSerializer})
    @action(detail=True, methods=["patch"], url_path="status")
    def status(self, request, pk=None):
        ser = EventStatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        try:
            event = EventService.set_status(
                actor_user_id=request.user.id,
                event_id=_parse_uuid(pk, "id"),
                status=ser.validated_data["status"],
            )
        except Event.DoesNotExist:
            raise NotFound("Event not found")
        return Response(EventSerializer(event).data)

    @extend_schema(tags=["Events"], responses={200: OpenApiTypes.OBJECT})
    @action(detail=False, methods=["get"], url_path="categories")
    def categories(self, request):
        return Response({"categories": list_categories()})

    @extend_schema(tags=["Events"], request=None, responses={201: EventRegistrationSerializer})
    @action(detail=True, methods=["post"], url_path="register")
    def register(self, request, pk=None):
        event = self._get(request, pk)
        reg = EventRegistrationService.register(user=request.user, event_id=event.id)
        return Response(EventRegistrationSerializer(reg).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        tags=["Events"],
        responses={200: EventRegistrationSerializer(many=True)},
        parameters=[
            OpenApiParameter(name="status", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    @action(detail=True, methods=["get"], url_path="registrations")
    def registrations(self, request, pk=None):
        event = self._get(request, pk)
        qs = list_event_registrations(event_id=event.id, status=request.query_params.get("status") or None)
        return Response(EventRegistrationSerializer(qs, many=True).data)

    @extend_schema(tags=["Events"], responses={200: EventRegistrationSerializer(many=True)})
    @action(detail=False, methods=["get"], url_path="my-registrations")
    def my_registrations(self, request):
        return Response(EventRegistrationSerializer(my_registrations(user=request.user), many=True).data)

    @extend_schema(tags=["Events"], responses={200: EventAttendanceSerializer(many=True)})
    @action(detail=True, methods=["get"], url_path="attendance")
    def attendance(self, request, pk=None):
        event = self._get(request, pk)
        return Response(EventAttendanceSerializer(list_event_attendance(event_id=event.id), many=True).data)

    @extend_schema(tags=["Events"], responses={200: AvailableAttendeeSerializer(many=True)})
    @action(detail=True, methods=["get"], url_path="available-attendees")
    def available_attendees(self, request, pk=None):
        event = self._get(request, pk)
        return Response(AvailableAttendeeSerializer(available_attendees(event_id=event.id), many=True).data)

    @extend_schema(tags=["Events"], responses={200: OpenApiTypes.OBJECT})
    @action(detail=False, methods=["get"], url_path="analytics")
    def overall_analytics(self, request):
        return Response(all_event_analytics())

    @extend_schema(tags=["Events"], responses={200: OpenApiTypes.OBJECT})
    @action(detail=True, methods=["get"], url_path="analytics")
    def analytics(self, request, pk=None):
        return Response(event_analytics_row(self._get(request, pk)))

    @extend_schema(
        tags=["Events"],
        responses={200: OpenApiTypes.BINARY},
        parameters=[
            OpenApiParameter(name="format", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False,
                             enum=[*exports.EXPORT_FORMATS]),
        ],
    )
    @action(detail=True, methods=["get"], url_path="attendees/export")
    def export_attendees(self, request, pk=None):
        event = self._get(request, pk)
        fmt = (request.query_params.get("format") or "pdf").lower()
        if fmt not in exports.EXPORT_FORMATS:
            raise DRFValidationError({"format": "Use pdf or xlsx"})

        if fmt == "xlsx":
            return excel_response(exports.attendees_xlsx(event), exports.export_filename(event, fmt))
        try:
            content = exports.attendees_pdf(event)
        except PdfRenderError as e:
            raise ServiceUnavailableError(str(e))
        return pdf_response(content, exports.export_filename(event, fmt))

    @extend_schema(tags=["Events"], request=EventCertificateSerializer, responses={200: OpenApiTypes.BINARY})
    @action(detail=True, methods=["post"], url_path="certificates")
    def certificates(self, request, pk=None):
        """Participation certificate PDF for someone who attended."""
        event = self._get(request, pk)
        ser = EventCertificateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        try:
            user = get_user_model().objects.get(pk=data["user_id"])
        except get_user_model().DoesNotExist:
            raise NotFound("User not found")
        if not EventAttendance.objects.filter(event=event, user=user).exists():
            raise DRFValidationError({"detail": "Certificates are only issued to event attendees"})

        cert = CertificateService.issue_event_certificate(
            actor_user_id=request.user.id,
            event=event,
            user=user,
            certificate_type=data["certificate_type"],
            issued_by=data.get("issued_by"),
        )
        try:
            content = render_certificate_pdf(cert)
        except PdfRenderError as e:
            raise ServiceUnavailableError(str(e))
        return pdf_response(content, certificate_filename(cert))


class EventRegistrationViewSet(viewsets.ViewSet):
    permission_classes = [EventRegistrationPermission]

    serializer_class = EventRegistrationSerializer
    queryset = EventRegistration.objects.none()

    @extend_schema(tags=["Events"], request=RegistrationStatusSerializer, responses={200: EventRegistrationSerializer})
    @action(detail=True, methods=["patch"], url_path="status")
    def status(self, request, pk=None):
        ser = RegistrationStatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        try:
            reg = EventRegistrationService.set_status(
                actor_user_id=request.user.id,
                registration_id=_parse_uuid(pk, "id"),
                status=ser.validated_data["status"],
            )
        except EventRegistration.DoesNotExist:
            raise NotFound("Registration not found")
        return Response(EventRegistrationSerializer(reg).data)


class EventAttendanceViewSet(viewsets.ViewSet):
    permission_classes = [EventAttendancePermission]

    serializer_class = EventAttendanceSerializer
    queryset = EventAttendance.objects.none()

    @extend_schema(tags=["Events"], request=AttendanceCreateSerializer, responses={201: EventAttendanceSerializer})
    def create(self, request):
        ser = AttendanceCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        attendance = EventAttendanceService.record(
            actor_user_id=request.user.id,
            event_id=data["event_id"],
            user_id=data["user_id"],
            remarks=data.get("remarks", ""),
        )
        return Response(EventAttendanceSerializer(attendance).data, status=status.HTTP_201_CREATED)
