# brgy_core/health/api/views.py
from __future__ import annotations

from uuid import UUID

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, ValidationError as DRFValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from brgy_core.common.api.pagination import paginate
from brgy_core.health import schedule
from brgy_core.health.api.serializers import (
    DoseUpdateSerializer,
    ImmunizationCardCreateSerializer,
    ImmunizationCardSerializer,
    ImmunizationCardUpdateSerializer,
    ImmunizationRecordCreateSerializer,
    ImmunizationRecordSerializer,
    PatientSerializer,
    PatientWriteSerializer,
)
from brgy_core.health.models import ImmunizationCard, ImmunizationRecord, Patient
from brgy_core.health.permissions import (
    ImmunizationCardPermission,
    ImmunizationRecordPermission,
    PatientPermission,
)
from brgy_core.health.selectors import (
    get_visible_card,
    get_visible_patient,
    list_immunization_cards,
    list_immunization_records,
    my_immunization_records,
    search_patients,
)
from brgy_core.health.services import ImmunizationCardService, ImmunizationRecordService, PatientService


def _parse_uuid(value, field_name: str) -> UUID:
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        raise DRFValidationError({field_name: "Invalid UUID"})


def _optional_uuid(request, field_name: str):
    raw = request.query_params.get(field_name)
    return _parse_uuid(raw, field_name) if raw else None


class PatientViewSet(viewsets.ViewSet):
    permission_classes = [PatientPermission]

    serializer_class = PatientSerializer
    queryset = Patient.objects.none()

    def _get(self, request, pk) -> Patient:
        try:
            return get_visible_patient(user=request.user, patient_id=_parse_uuid(pk, "id"))
        except Patient.DoesNotExist:
            raise NotFound("Patient not found")

    @extend_schema(
        tags=["Health"],
        responses={200: PatientSerializer(many=True)},
        parameters=[
            OpenApiParameter(name="q", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="gender", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    def list(self, request):
        qs = search_patients(
            user=request.user,
            q=request.query_params.get("q", "").strip(),
            gender=request.query_params.get("gender") or None,
        )
        return paginate(request, qs, PatientSerializer)

    @extend_schema(tags=["Health"], responses={200: PatientSerializer})
    def retrieve(self, request, pk=None):
        return Response(PatientSerializer(self._get(request, pk)).data)

    @extend_schema(tags=["Health"], request=PatientWriteSerializer, responses={201: PatientSerializer})
    def create(self, request):
        ser = PatientWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        patient = PatientService.create_patient(actor_user_id=request.user.id, data=dict(ser.validated_data))
        return Response(PatientSerializer(patient).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Health"], request=PatientWriteSerializer, responses={200: PatientSerializer})
    def update(self, request, pk=None, partial=False):
        ser = PatientWriteSerializer(data=request.data, partial=partial)
        ser.is_valid(raise_exception=True)

        try:
            patient = PatientService.update_patient(
                actor_user_id=request.user.id,
                patient_id=_parse_uuid(pk, "id"),
                data=dict(ser.validated_data),
            )
        except Patient.DoesNotExist:
            raise NotFound("Patient not found")
        return Response(PatientSerializer(patient).data)

    @extend_schema(tags=["Health"], request=PatientWriteSerializer, responses={200: PatientSerializer})
    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk, partial=True)

    @extend_schema(tags=["Health"], responses={204: None})
    def destroy(self, request, pk=None):
        try:
            PatientService.delete_patient(actor_user_id=request.user.id, patient_id=_parse_uuid(pk, "id"))
        except Patient.DoesNotExist:
            raise NotFound("Patient not found")
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(tags=["Health"], responses={200: OpenApiTypes.OBJECT})
    @action(detail=True, methods=["get"], url_path="immunization-status")
    def immunization_status(self, request, pk=None):
        """
        Card-based status. Patients without a stored card get one computed
        from the standard schedule (nothing is saved).
        """
        patient = self._get(request, pk)
        card = ImmunizationCard.objects.filter(patient=patient).first()
        card_data = card.card_data if card else schedule.build_card_data(patient)

        body = schedule.immunization_status(card_data)
        body["patient_id"] = str(patient.id)
        body["card_id"] = str(card.id) if card else None
        body["records_count"] = patient.immunization_records.count()
        return Response(body)


class ImmunizationRecordViewSet(viewsets.ViewSet):
    permission_classes = [ImmunizationRecordPermission]

    serializer_class = ImmunizationRecordSerializer
    queryset = ImmunizationRecord.objects.none()

    @extend_schema(
        tags=["Health"],
        responses={200: ImmunizationRecordSerializer(many=True)},
        parameters=[
            OpenApiParameter(name="patient_id", type=OpenApiTypes.UUID, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    def list(self, request):
        qs = list_immunization_records(user=request.user, patient_id=_optional_uuid(request, "patient_id"))
        return paginate(request, qs, ImmunizationRecordSerializer)

    @extend_schema(tags=["Health"], request=ImmunizationRecordCreateSerializer, responses={201: ImmunizationRecordSerializer})
    def create(self, request):
        ser = ImmunizationRecordCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = dict(ser.validated_data)

        try:
            record = ImmunizationRecordService.create_record(
                actor_user_id=request.user.id,
                patient_id=data.pop("patient_id"),
                data=data,
            )
        except Patient.DoesNotExist:
            raise NotFound("Patient not found")
        return Response(ImmunizationRecordSerializer(record).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Health"], responses={200: ImmunizationRecordSerializer(many=True)})
    @action(detail=False, methods=["get"], url_path="my")
    def my(self, request):
        data = ImmunizationRecordSerializer(my_immunization_records(user=request.user), many=True).data
        return Response(data)


class ImmunizationScheduleView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Health"], responses={200: OpenApiTypes.OBJECT})
    def get(self, request):
        return Response({"schedule": schedule.schedule_table()})


class ImmunizationCardViewSet(viewsets.ViewSet):
    permission_classes = [ImmunizationCardPermission]

    serializer_class = ImmunizationCardSerializer
    queryset = ImmunizationCard.objects.none()

    def _get(self, request, pk) -> ImmunizationCard:
        try:
            return get_visible_card(user=request.user, card_id=_parse_uuid(pk, "id"))
        except ImmunizationCard.DoesNotExist:
            raise NotFound("Immunization card not found")

    @extend_schema(
        tags=["Health"],
        responses={200: ImmunizationCardSerializer(many=True)},
        parameters=[
            OpenApiParameter(name="patient_id", type=OpenApiTypes.UUID, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    def list(self, request):
        qs = list_immunization_cards(user=request.user, patient_id=_optional_uuid(request, "patient_id"))
        return paginate(request, qs, ImmunizationCardSerializer)

    @extend_schema(tags=["Health"], request=ImmunizationCardCreateSerializer, responses={201: ImmunizationCardSerializer})
    def create(self, request):
        ser = ImmunizationCardCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        try:
            card = ImmunizationCardService.create_card(
                actor_user_id=request.user.id,
                patient_id=ser.validated_data["patient_id"],
            )
        except Patient.DoesNotExist:
            raise NotFound("Patient not found")
        return Response(ImmunizationCardSerializer(card).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Health"], responses={200: ImmunizationCardSerializer})
    def retrieve(self, request, pk=None):
        return Response(ImmunizationCardSerializer(self._get(request, pk)).data)

    @extend_schema(tags=["Health"], request=ImmunizationCardUpdateSerializer, responses={200: ImmunizationCardSerializer})
    def update(self, request, pk=None):
        ser = ImmunizationCardUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        try:
            card = ImmunizationCardService.replace_doses(
                actor_user_id=request.user.id,
                card_id=_parse_uuid(pk, "id"),
                card_data=ser.validated_data["card_data"],
            )
        except ImmunizationCard.DoesNotExist:
            raise NotFound("Immunization card not found")
        except ValueError as e:
            raise DRFValidationError({"card_data": str(e)})
        return Response(ImmunizationCardSerializer(card).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(tags=["Health"], request=DoseUpdateSerializer, responses={200: ImmunizationCardSerializer})
    @action(detail=True, methods=["patch"], url_path="doses")
    def doses(self, request, pk=None):
        ser = DoseUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        try:
            card = ImmunizationCardService.update_dose(
                actor_user_id=request.user.id,
                card_id=_parse_uuid(pk, "id"),
                vaccine_index=data["vaccine_index"],
                dose_index=data["dose_index"],
                date_given=data.get("date_given"),
                remarks=data.get("remarks"),
            )
        except ImmunizationCard.DoesNotExist:
            raise NotFound("Immunization card not found")
        except ValueError as e:
            raise DRFValidationError({"detail": str(e)})
        return Response(ImmunizationCardSerializer(card).data)

    @extend_schema(tags=["Health"], responses={200: OpenApiTypes.OBJECT})
    @action(detail=True, methods=["get"], url_path="summary")
    def summary(self, request, pk=None):
        card = self._get(request, pk)
        body = schedule.summarize_card(card.card_data)
        body.pop("doses")
        body["card_id"] = str(card.id)
        body["patient_id"] = str(card.patient_id)
        return Response(body)
