# brgy_core/daycare/api/views.py
from __future__ import annotations

import os
from datetime import date
from uuid import UUID

from django.http import FileResponse
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError as DRFValidationError
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response

from brgy_core.common.api.exceptions import ServiceUnavailableError
from brgy_core.common.api.pagination import paginate
from brgy_core.common.names import display_name
from brgy_core.common.storage import file_exists, get_download_url, open_file
from brgy_core.daycare import shifts as shift_rules
from brgy_core.daycare.api.serializers import (
    ApproveRegistrationSerializer,
    AttendanceCreateSerializer,
    AttendanceRecordSerializer,
    AttendanceUpdateSerializer,
    DaycareRegistrationSerializer,
    DaycareStudentDetailSerializer,
    DaycareStudentSerializer,
    LearningMaterialCreateSerializer,
    LearningMaterialSerializer,
    LearningMaterialUpdateSerializer,
    MyRegistrationSerializer,
    ParentChildReportsSerializer,
    ProgressReportSerializer,
    ProgressReportWriteSerializer,
    RandomAssignSerializer,
    RegistrationCreateSerializer,
    RegistrationUpdateSerializer,
    RejectRegistrationSerializer,
    ShiftUpdateSerializer,
    StudentCreateSerializer,
    StudentShiftSerializer,
    StudentUpdateSerializer,
)
from brgy_core.daycare.models import (
    AttendanceRecord,
    DaycareRegistration,
    DaycareStudent,
    LearningMaterial,
    ProgressReport,
)
from brgy_core.daycare.permissions import (
    AttendancePermission,
    DaycareRegistrationPermission,
    DaycareStudentPermission,
    LearningMaterialPermission,
    ProgressReportPermission,
    is_daycare_staff,
)
from brgy_core.daycare.selectors import (
    attendance_summary,
    can_access_student,
    get_student,
    list_attendance,
    list_progress_reports,
    list_registrations,
    list_students,
    my_registrations,
    parent_children_with_reports,
    students_by_shift,
    visible_materials,
)
from brgy_core.daycare.services import (
    AttendanceService,
    DaycareRegistrationService,
    DaycareStudentService,
    LearningMaterialService,
    ProgressReportService,
)
from brgy_core.documents.pdf import PdfRenderError, pdf_response, render_pdf, slugify_filename_part


def _parse_uuid(value, field_name: str) -> UUID:
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        raise DRFValidationError({field_name: "Invalid UUID"})


def _optional_uuid(request, field_name: str):
    raw = request.query_params.get(field_name)
    return _parse_uuid(raw, field_name) if raw else None


def _optional_date(request, field_name: str):
    raw = request.query_params.get(field_name)
    if not raw:
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise DRFValidationError({field_name: "Invalid date. Use YYYY-MM-DD."})


class DaycareRegistrationViewSet(viewsets.ViewSet):
    permission_classes = [DaycareRegistrationPermission]

    serializer_class = DaycareRegistrationSerializer
    queryset = DaycareRegistration.objects.none()

    @extend_schema(
        tags=["Daycare"],
        responses={200: DaycareRegistrationSerializer(many=True)},
        parameters=[
            OpenApiParameter(name="status", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    def list(self, request):
        qs = list_registrations(status=request.query_params.get("status") or None)
        return paginate(request, qs, DaycareRegistrationSerializer)

    @extend_schema(tags=["Daycare"], responses={200: DaycareRegistrationSerializer})
    def retrieve(self, request, pk=None):
        try:
            reg = DaycareRegistration.objects.get(id=_parse_uuid(pk, "id"))
        except DaycareRegistration.DoesNotExist:
            raise NotFound("Registration not found")
        return Response(DaycareRegistrationSerializer(reg).data)

    @extend_schema(tags=["Daycare"], request=RegistrationCreateSerializer, responses={201: DaycareRegistrationSerializer})
    def create(self, request):
        ser = RegistrationCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        reg = DaycareRegistrationService.create_registration(parent=request.user, data=dict(ser.validated_data))
        return Response(DaycareRegistrationSerializer(reg).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Daycare"], request=RegistrationUpdateSerializer, responses={200: DaycareRegistrationSerializer})
    def partial_update(self, request, pk=None):
        ser = RegistrationUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        try:
            reg = DaycareRegistrationService.update_registration(
                actor_user_id=request.user.id,
                registration_id=_parse_uuid(pk, "id"),
                data=dict(ser.validated_data),
            )
        except DaycareRegistration.DoesNotExist:
            raise NotFound("Registration not found")
        return Response(DaycareRegistrationSerializer(reg).data)

    @extend_schema(tags=["Daycare"], responses={204: None})
    def destroy(self, request, pk=None):
        try:
            DaycareRegistrationService.delete_registration(
                actor_user_id=request.user.id,
                registration_id=_parse_uuid(pk, "id"),
            )
        except DaycareRegistration.DoesNotExist:
            raise NotFound("Registration not found")
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(tags=["Daycare"], responses={200: MyRegistrationSerializer(many=True)})
    @action(detail=False, methods=["get"], url_path="my")
    def my(self, request):
        return Response(MyRegistrationSerializer(my_registrations(user=request.user), many=True).data)

    @extend_schema(tags=["Daycare"], request=ApproveRegistrationSerializer, responses={200: OpenApiTypes.OBJECT})
    @action(detail=True, methods=["post"], url_path="approve")
    def approve(self, request, pk=None):
        ser = ApproveRegistrationSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        reg, student = DaycareRegistrationService.approve(
            actor_user_id=request.user.id,
            registration_id=_parse_uuid(pk, "id"),
            **ser.validated_data,
        )
        return Response(
            {
                "detail": "Registration approved and student enrolled successfully",
                "registration": DaycareRegistrationSerializer(reg).data,
                "student": DaycareStudentSerializer(student).data,
            }
        )

    @extend_schema(tags=["Daycare"], request=RejectRegistrationSerializer, responses={200: DaycareRegistrationSerializer})
    @action(detail=True, methods=["post"], url_path="reject")
    def reject(self, request, pk=None):
        ser = RejectRegistrationSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        reg = DaycareRegistrationService.reject(
            actor_user_id=request.user.id,
            registration_id=_parse_uuid(pk, "id"),
            notes=ser.validated_data.get("notes", ""),
        )
        return Response(DaycareRegistrationSerializer(reg).data)


class DaycareStudentViewSet(viewsets.ViewSet):
    permission_classes = [DaycareStudentPermission]

    serializer_class = DaycareStudentSerializer
    queryset = DaycareStudent.objects.none()

    @extend_schema(
        tags=["Daycare"],
        responses={200: DaycareStudentSerializer(many=True)},
        parameters=[
            OpenApiParameter(name="shift", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False,
                             description="MORNING, AFTERNOON or unassigned"),
            OpenApiParameter(name="search", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    def list(self, request):
        qs = list_students(
            shift=request.query_params.get("shift") or None,
            search=request.query_params.get("search", "").strip(),
        )
        return paginate(request, qs, DaycareStudentSerializer)

    @extend_schema(tags=["Daycare"], responses={200: DaycareStudentDetailSerializer})
    def retrieve(self, request, pk=None):
        try:
            student = get_student(_parse_uuid(pk, "id"))
        except DaycareStudent.DoesNotExist:
            raise NotFound("Student not found")
        return Response(DaycareStudentDetailSerializer(student).data)

    @extend_schema(tags=["Daycare"], request=StudentCreateSerializer, responses={201: DaycareStudentSerializer})
    def create(self, request):
        ser = StudentCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        student = DaycareStudentService.enroll_direct(staff_user=request.user, data=dict(ser.validated_data))
        return Response(DaycareStudentSerializer(student).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Daycare"], request=StudentUpdateSerializer, responses={200: DaycareStudentSerializer})
    def partial_update(self, request, pk=None):
        ser = StudentUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        try:
            student = DaycareStudentService.update_student(
                actor_user_id=request.user.id,
                student_id=_parse_uuid(pk, "id"),
                data=dict(ser.validated_data),
            )
        except DaycareStudent.DoesNotExist:
            raise NotFound("Student not found")
        return Response(DaycareStudentSerializer(student).data)

    @extend_schema(tags=["Daycare"], request=ShiftUpdateSerializer, responses={200: DaycareStudentSerializer})
    @action(detail=True, methods=["patch"], url_path="shift")
    def shift(self, request, pk=None):
        ser = ShiftUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        try:
            student = DaycareStudentService.set_shift(
                actor_user_id=request.user.id,
                student_id=_parse_uuid(pk, "id"),
                shift=ser.validated_data["shift"],
            )
        except DaycareStudent.DoesNotExist:
            raise NotFound("Student not found")
        return Response(DaycareStudentSerializer(student).data)

    @extend_schema(tags=["Daycare"], responses={200: OpenApiTypes.OBJECT})
    @action(detail=False, methods=["get"], url_path="shifts")
    def shifts(self, request):
        groups = shift_rules.group_by_shift(students_by_shift())
        return Response({k: StudentShiftSerializer(v, many=True).data for k, v in groups.items()})

    @extend_schema(tags=["Daycare"], request=RandomAssignSerializer, responses={200: OpenApiTypes.OBJECT})
    @action(detail=False, methods=["post"], url_path="shifts/random-assign")
    def random_assign(self, request):
        ser = RandomAssignSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        counts = DaycareStudentService.random_assign(
            actor_user_id=request.user.id,
            seed=ser.validated_data.get("seed"),
        )
        return Response({"detail": "Shifts assigned successfully", **counts})

    @extend_schema(tags=["Daycare"], request=None, responses={200: OpenApiTypes.OBJECT})
    @action(detail=False, methods=["post"], url_path="shifts/clear")
    def clear_shifts(self, request):
        cleared = DaycareStudentService.clear_shifts(actor_user_id=request.user.id)
        return Response({"detail": "All shifts cleared", "cleared": cleared})


class AttendanceViewSet(viewsets.ViewSet):
    permission_classes = [AttendancePermission]

    serializer_class = AttendanceRecordSerializer
    queryset = AttendanceRecord.objects.none()

    @extend_schema(
        tags=["Daycare"],
        responses={200: AttendanceRecordSerializer(many=True)},
        parameters=[
            OpenApiParameter(name="student_id", type=OpenApiTypes.UUID, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="date", type=OpenApiTypes.DATE, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="start_date", type=OpenApiTypes.DATE, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="end_date", type=OpenApiTypes.DATE, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    def list(self, request):
        qs = list_attendance(
            student_id=_optional_uuid(request, "student_id"),
            on_date=_optional_date(request, "date"),
            start_date=_optional_date(request, "start_date"),
            end_date=_optional_date(request, "end_date"),
        )
        return paginate(request, qs, AttendanceRecordSerializer)

    @extend_schema(tags=["Daycare"], request=AttendanceCreateSerializer, responses={201: AttendanceRecordSerializer})
    def create(self, request):
        ser = AttendanceCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        try:
            record = AttendanceService.record(
                actor_user_id=request.user.id,
                student_id=data["student_id"],
                day=data["day"],
                status=data["status"],
                time_in=data.get("time_in"),
                time_out=data.get("time_out"),
                remarks=data["remarks"],
            )
        except DaycareStudent.DoesNotExist:
            raise NotFound("Student not found")
        return Response(AttendanceRecordSerializer(record).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Daycare"], request=AttendanceUpdateSerializer, responses={200: AttendanceRecordSerializer})
    def partial_update(self, request, pk=None):
        ser = AttendanceUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        try:
            record = AttendanceService.update(
                actor_user_id=request.user.id,
                record_id=_parse_uuid(pk, "id"),
                data=dict(ser.validated_data),
            )
        except AttendanceRecord.DoesNotExist:
            raise NotFound("Attendance record not found")
        return Response(AttendanceRecordSerializer(record).data)

    @extend_schema(tags=["Daycare"], responses={204: None})
    def destroy(self, request, pk=None):
        try:
            AttendanceService.delete(actor_user_id=request.user.id, record_id=_parse_uuid(pk, "id"))
        except AttendanceRecord.DoesNotExist:
            raise NotFound("Attendance record not found")
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        tags=["Daycare"],
        responses={200: OpenApiTypes.OBJECT},
        parameters=[
            OpenApiParameter(name="student_id", type=OpenApiTypes.UUID, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="start_date", type=OpenApiTypes.DATE, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="end_date", type=OpenApiTypes.DATE, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    @action(detail=False, methods=["get"], url_path="summary")
    def summary(self, request):
        return Response(
            attendance_summary(
                student_id=_optional_uuid(request, "student_id"),
                start_date=_optional_date(request, "start_date"),
                end_date=_optional_date(request, "end_date"),
            )
        )


class ProgressReportViewSet(viewsets.ViewSet):
    permission_classes = [ProgressReportPermission]

    serializer_class = ProgressReportSerializer
    queryset = ProgressReport.objects.none()

    def _get(self, pk) -> ProgressReport:
        try:
            return ProgressReport.objects.select_related("student__registration", "generated_by").get(
                id=_parse_uuid(pk, "id")
            )
        except ProgressReport.DoesNotExist:
            raise NotFound("Progress report not found")

    @extend_schema(
        tags=["Daycare"],
        responses={200: ProgressReportSerializer(many=True)},
        parameters=[
            OpenApiParameter(name="student_id", type=OpenApiTypes.UUID, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    def list(self, request):
        qs = list_progress_reports(student_id=_optional_uuid(request, "student_id"))
        return paginate(request, qs, ProgressReportSerializer)

    @extend_schema(tags=["Daycare"], responses={200: ProgressReportSerializer})
    def retrieve(self, request, pk=None):
        return Response(ProgressReportSerializer(self._get(pk)).data)

    @extend_schema(tags=["Daycare"], request=ProgressReportWriteSerializer, responses={201: ProgressReportSerializer})
    def create(self, request):
        ser = ProgressReportWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = dict(ser.validated_data)

        try:
            report = ProgressReportService.create_report(
                actor_user_id=request.user.id,
                student_id=data.pop("student_id"),
                data=data,
            )
        except DaycareStudent.DoesNotExist:
            raise NotFound("Student not found")
        return Response(ProgressReportSerializer(report).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Daycare"], request=ProgressReportWriteSerializer, responses={200: ProgressReportSerializer})
    def update(self, request, pk=None, partial=False):
        ser = ProgressReportWriteSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        data = dict(ser.validated_data)
        data.pop("student_id", None)

        try:
            report = ProgressReportService.update_report(
                actor_user_id=request.user.id,
                report_id=_parse_uuid(pk, "id"),
                data=data,
            )
        except ProgressReport.DoesNotExist:
            raise NotFound("Progress report not found")
        return Response(ProgressReportSerializer(report).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk, partial=True)

    @extend_schema(tags=["Daycare"], responses={204: None})
    def destroy(self, request, pk=None):
        try:
            ProgressReportService.delete_report(actor_user_id=request.user.id, report_id=_parse_uuid(pk, "id"))
        except ProgressReport.DoesNotExist:
            raise NotFound("Progress report not found")
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(tags=["Daycare"], responses={200: ParentChildReportsSerializer(many=True)})
    @action(detail=False, methods=["get"], url_path="my")
    def my(self, request):
        return Response(ParentChildReportsSerializer(parent_children_with_reports(user=request.user), many=True).data)

    @extend_schema(tags=["Daycare"], responses={200: OpenApiTypes.BINARY})
    @action(detail=True, methods=["get"], url_path="download")
    def download(self, request, pk=None):
        report = self._get(pk)
        student = report.student
        if not can_access_student(user=request.user, student=student):
            raise PermissionDenied("Access denied")

        sections = [
            {"title": title, "body": body}
            for title, body in (
                ("Academic Performance", report.academic_performance),
                ("Social Behavior", report.social_behavior),
                ("Physical Development", report.physical_development),
                ("Emotional Development", report.emotional_development),
            )
            if body
        ]
        try:
            content = render_pdf(
                "documents/progress_report.html",
                {
                    "student_name": student.full_name,
                    "report": report,
                    "sections": sections,
                    "teacher_name": display_name(report.generated_by, default=""),
                },
            )
        except PdfRenderError as e:
            raise ServiceUnavailableError(str(e))

        filename = "progress-report-{}-{}-{}.pdf".format(
            slugify_filename_part(student.first_name),
            slugify_filename_part(student.last_name),
            slugify_filename_part(report.reporting_period),
        )
        return pdf_response(content, filename)


class LearningMaterialViewSet(viewsets.ViewSet):
    permission_classes = [LearningMaterialPermission]
    parser_classes = [MultiPartParser, FormParser, JSONParser]

    serializer_class = LearningMaterialSerializer
    queryset = LearningMaterial.objects.none()

    def _get(self, request, pk) -> LearningMaterial:
        try:
            material = LearningMaterial.objects.select_related("uploaded_by").get(id=_parse_uuid(pk, "id"))
        except LearningMaterial.DoesNotExist:
            raise NotFound("Learning material not found")
        if not material.is_public and not is_daycare_staff(request.user):
            raise PermissionDenied("Access denied")
        return material

    @extend_schema(
        tags=["Daycare"],
        responses={200: LearningMaterialSerializer(many=True)},
        parameters=[
            OpenApiParameter(name="category", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    def list(self, request):
        qs = visible_materials(user=request.user, category=request.query_params.get("category") or None)
        return paginate(request, qs, LearningMaterialSerializer)

    @extend_schema(tags=["Daycare"], responses={200: LearningMaterialSerializer})
    def retrieve(self, request, pk=None):
        return Response(LearningMaterialSerializer(self._get(request, pk)).data)

    @extend_schema(tags=["Daycare"], request=LearningMaterialCreateSerializer, responses={201: LearningMaterialSerializer})
    def create(self, request):
        ser = LearningMaterialCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = dict(ser.validated_data)

        upload = data.pop("file", None)
        if upload is None:
            raise DRFValidationError({"detail": "No file uploaded"})

        material = LearningMaterialService.create_material(actor_user_id=request.user.id, file=upload, data=data)
        return Response(LearningMaterialSerializer(material).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Daycare"], request=LearningMaterialUpdateSerializer, responses={200: LearningMaterialSerializer})
    def update(self, request, pk=None, partial=False):
        ser = LearningMaterialUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        try:
            material = LearningMaterialService.update_material(
                actor_user_id=request.user.id,
                material_id=_parse_uuid(pk, "id"),
                data=dict(ser.validated_data),
            )
        except LearningMaterial.DoesNotExist:
            raise NotFound("Learning material not found")
        return Response(LearningMaterialSerializer(material).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk, partial=True)

    @extend_schema(tags=["Daycare"], responses={204: None})
    def destroy(self, request, pk=None):
        try:
            LearningMaterialService.delete_material(actor_user_id=request.user.id, material_id=_parse_uuid(pk, "id"))
        except LearningMaterial.DoesNotExist:
            raise NotFound("Learning material not found")
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(tags=["Daycare"], responses={200: OpenApiTypes.BINARY})
    @action(detail=True, methods=["get"], url_path="download")
    def download(self, request, pk=None):
        material = self._get(request, pk)
        if not file_exists(material.file_path):
            raise NotFound("File not found on server")
        return FileResponse(
            open_file(material.file_path),
            as_attachment=True,
            filename=os.path.basename(material.file_path),
            content_type=material.file_type or None,
        )

    @extend_schema(tags=["Daycare"], responses={200: OpenApiTypes.OBJECT})
    @action(detail=True, methods=["get"], url_path="download-url")
    def download_url(self, request, pk=None):
        material = self._get(request, pk)
        return Response({"url": get_download_url(material.file_path)})
