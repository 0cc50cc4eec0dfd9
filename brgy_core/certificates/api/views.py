# brgy_core/certificates/api/views.py
from __future__ import annotations

from uuid import UUID

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, ValidationError as DRFValidationError
from rest_framework.response import Response

from brgy_core.certificates.api.serializers import (
    CertificateSerializer,
    CertificateUpdateSerializer,
    DaycareCertificateCreateSerializer,
    HealthCertificateCreateSerializer,
)
from brgy_core.certificates.models import Certificate
from brgy_core.certificates.permissions import DaycareCertificatePermission, HealthCertificatePermission
from brgy_core.certificates.services import CertificateService, certificate_filename, render_certificate_pdf
from brgy_core.common.api.exceptions import ServiceUnavailableError
from brgy_core.common.api.pagination import paginate
from brgy_core.daycare.models import DaycareStudent
from brgy_core.documents.pdf import PdfRenderError, pdf_response
from brgy_core.health.models import Patient


def _parse_uuid(value, field_name: str) -> UUID:
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        raise DRFValidationError({field_name: "Invalid UUID"})


class _ScopedCertificateViewSet(viewsets.ViewSet):
    """
    Same workflow for daycare (student) and health (patient) certificates.
    Subclasses name the scope, the subject model and the subject field.
    """
    serializer_class = CertificateSerializer
    queryset = Certificate.objects.none()

    scope: str = ""
    subject_model = None
    subject_field = ""
    subject_label = ""
    create_serializer_class = None

    def _scoped(self):
        return Certificate.objects.filter(scope=self.scope).select_related("event")

    def _get(self, pk) -> Certificate:
        try:
            return self._scoped().get(id=_parse_uuid(pk, "id"))
        except Certificate.DoesNotExist:
            raise NotFound("Certificate not found")

    def list(self, request):
        qs = self._scoped()
        raw = request.query_params.get(f"{self.subject_field}_id")
        if raw:
            qs = qs.filter(**{f"{self.subject_field}_id": _parse_uuid(raw, f"{self.subject_field}_id")})
        return paginate(request, qs.order_by("-issued_date", "-created_at"), CertificateSerializer)

    def retrieve(self, request, pk=None):
        return Response(CertificateSerializer(self._get(pk)).data)

    def create(self, request):
        ser = self.create_serializer_class(data=request.data)
        ser.is_valid(raise_exception=True)
        data = dict(ser.validated_data)

        subject_id = data.pop(f"{self.subject_field}_id")
        try:
            subject = self.subject_model.objects.get(id=subject_id)
        except self.subject_model.DoesNotExist:
            raise NotFound(f"{self.subject_label} not found")

        cert = CertificateService.create_certificate(
            actor_user_id=request.user.id,
            scope=self.scope,
            subject=subject,
            certificate_type=data.pop("certificate_type"),
            data=data,
        )
        return Response(CertificateSerializer(cert).data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None):
        ser = CertificateUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        self._get(pk)

        cert = CertificateService.update_certificate(
            actor_user_id=request.user.id,
            certificate_id=_parse_uuid(pk, "id"),
            data=dict(ser.validated_data),
        )
        return Response(CertificateSerializer(cert).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    def destroy(self, request, pk=None):
        cert = self._get(pk)
        CertificateService.delete_certificate(actor_user_id=request.user.id, certificate_id=cert.id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(responses={200: OpenApiTypes.BINARY})
    @action(detail=True, methods=["get"], url_path="download")
    def download(self, request, pk=None):
        cert = self._get(pk)
        try:
            content = render_certificate_pdf(cert)
        except PdfRenderError as e:
            raise ServiceUnavailableError(str(e))
        return pdf_response(content, certificate_filename(cert))


@extend_schema(tags=["Daycare"])
class DaycareCertificateViewSet(_ScopedCertificateViewSet):
    permission_classes = [DaycareCertificatePermission]

    scope = Certificate.Scope.DAYCARE
    subject_model = DaycareStudent
    subject_field = "student"
    subject_label = "Student"
    create_serializer_class = DaycareCertificateCreateSerializer

    @extend_schema(
        responses={200: CertificateSerializer(many=True)},
        parameters=[
            OpenApiParameter(name="student_id", type=OpenApiTypes.UUID, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    def list(self, request):
        return super().list(request)

    @extend_schema(request=DaycareCertificateCreateSerializer, responses={201: CertificateSerializer})
    def create(self, request):
        return super().create(request)


@extend_schema(tags=["Health"])
class HealthCertificateViewSet(_ScopedCertificateViewSet):
    permission_classes = [HealthCertificatePermission]

    scope = Certificate.Scope.HEALTH
    subject_model = Patient
    subject_field = "patient"
    subject_label = "Patient"
    create_serializer_class = HealthCertificateCreateSerializer

    @extend_schema(
        responses={200: CertificateSerializer(many=True)},
        parameters=[
            OpenApiParameter(name="patient_id", type=OpenApiTypes.UUID, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    def list(self, request):
        return super().list(request)

    @extend_schema(request=HealthCertificateCreateSerializer, responses={201: CertificateSerializer})
    def create(self, request):
        return super().create(request)
