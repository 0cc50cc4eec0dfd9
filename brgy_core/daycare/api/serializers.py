# brgy_core/daycare/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from brgy_core.common.names import display_name
from brgy_core.daycare import shifts
from brgy_core.daycare.models import (
    AttendanceRecord,
    DaycareRegistration,
    DaycareStudent,
    Gender,
    LearningMaterial,
    ProgressReport,
)

RECENT_ATTENDANCE_FOR_PARENT = 10
RECENT_ATTENDANCE_FOR_STAFF = 30


class AttendanceRecordSerializer(serializers.ModelSerializer):
    student_id = serializers.UUIDField(read_only=True)
    student_name = serializers.CharField(source="student.full_name", read_only=True)
    recorded_by_id = serializers.IntegerField(read_only=True, allow_null=True)
    recorded_by_name = serializers.SerializerMethodField()

    class Meta:
        model = AttendanceRecord
        fields = [
            "id",
            "student_id",
            "student_name",
            "date",
            "status",
            "time_in",
            "time_out",
            "remarks",
            "recorded_by_id",
            "recorded_by_name",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_recorded_by_name(self, obj) -> str:
        return display_name(obj.recorded_by)


class AttendanceCreateSerializer(serializers.Serializer):
    student_id = serializers.UUIDField()
    attendance_date = serializers.DateField(required=False, allow_null=True)
    date = serializers.DateField(required=False, allow_null=True)
    status = serializers.ChoiceField(choices=AttendanceRecord.Status.choices)
    time_in = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    time_out = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    remarks = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate(self, attrs):
        day = attrs.get("attendance_date") or attrs.get("date")
        if not day:
            raise serializers.ValidationError({"detail": "Attendance date is required"})
        attrs["day"] = day
        attrs["remarks"] = attrs.get("remarks") or attrs.get("notes") or ""
        return attrs


class AttendanceUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=AttendanceRecord.Status.choices, required=False)
    time_in = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    time_out = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    remarks = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class ProgressReportSerializer(serializers.ModelSerializer):
    student_id = serializers.UUIDField(read_only=True)
    student_name = serializers.CharField(source="student.full_name", read_only=True)
    generated_by_id = serializers.IntegerField(read_only=True, allow_null=True)
    generated_by_name = serializers.SerializerMethodField()

    class Meta:
        model = ProgressReport
        fields = [
            "id",
            "student_id",
            "student_name",
            "reporting_period",
            "academic_performance",
            "social_behavior",
            "physical_development",
            "emotional_development",
            "recommendations",
            "generated_by_id",
            "generated_by_name",
            "generated_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_generated_by_name(self, obj) -> str:
        return display_name(obj.generated_by)


class ProgressReportWriteSerializer(serializers.Serializer):
    student_id = serializers.UUIDField()
    reporting_period = serializers.CharField(max_length=100)
    academic_performance = serializers.CharField(required=False, allow_blank=True)
    social_behavior = serializers.CharField(required=False, allow_blank=True)
    physical_development = serializers.CharField(required=False, allow_blank=True)
    emotional_development = serializers.CharField(required=False, allow_blank=True)
    recommendations = serializers.CharField(required=False, allow_blank=True)


class DaycareStudentSerializer(serializers.ModelSerializer):
    registration_id = serializers.UUIDField(read_only=True)
    parent_id = serializers.IntegerField(source="registration.parent_id", read_only=True)
    parent_contact = serializers.CharField(source="registration.parent_contact", read_only=True)
    full_name = serializers.CharField(read_only=True)
    attendance_count = serializers.SerializerMethodField()
    progress_report_count = serializers.SerializerMethodField()

    class Meta:
        model = DaycareStudent
        fields = [
            "id",
            "registration_id",
            "parent_id",
            "parent_contact",
            "first_name",
            "middle_name",
            "last_name",
            "full_name",
            "date_of_birth",
            "gender",
            "address",
            "emergency_contact",
            "allergies",
            "medical_conditions",
            "enrollment_date",
            "shift",
            "is_active",
            "attendance_count",
            "progress_report_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_attendance_count(self, obj) -> int:
        count = getattr(obj, "attendance_count", None)
        return count if count is not None else obj.attendance_records.count()

    def get_progress_report_count(self, obj) -> int:
        count = getattr(obj, "progress_report_count", None)
        return count if count is not None else obj.progress_reports.count()


class DaycareStudentDetailSerializer(DaycareStudentSerializer):
    attendance_records = serializers.SerializerMethodField()
    progress_reports = serializers.SerializerMethodField()

    class Meta(DaycareStudentSerializer.Meta):
        fields = DaycareStudentSerializer.Meta.fields + ["attendance_records", "progress_reports"]
        read_only_fields = fields

    def get_attendance_records(self, obj):
        limit = self.context.get("attendance_limit", RECENT_ATTENDANCE_FOR_STAFF)
        qs = obj.attendance_records.select_related("recorded_by").order_by("-date")[:limit]
        return AttendanceRecordSerializer(qs, many=True).data

    def get_progress_reports(self, obj):
        qs = obj.progress_reports.select_related("generated_by").order_by("-generated_at")
        return ProgressReportSerializer(qs, many=True).data


class StudentShiftSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = DaycareStudent
        fields = ["id", "first_name", "last_name", "full_name", "date_of_birth", "gender", "shift"]
        read_only_fields = fields


class StudentCreateSerializer(serializers.Serializer):
    first_name = serializers.CharField(max_length=100)
    middle_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    last_name = serializers.CharField(max_length=100)
    date_of_birth = serializers.DateField()
    gender = serializers.ChoiceField(choices=Gender.choices)
    address = serializers.CharField(max_length=255, required=False, allow_blank=True)
    parent_contact = serializers.CharField(max_length=50, required=False, allow_blank=True)
    emergency_contact = serializers.CharField(max_length=100, required=False, allow_blank=True)
    allergies = serializers.CharField(required=False, allow_blank=True)
    medical_conditions = serializers.CharField(required=False, allow_blank=True)
    enrollment_date = serializers.DateField(required=False)
    shift = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate_shift(self, value):
        try:
            return shifts.parse_shift(value)
        except ValueError as e:
            raise serializers.ValidationError(str(e))


class StudentUpdateSerializer(serializers.Serializer):
    first_name = serializers.CharField(max_length=100, required=False)
    middle_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    last_name = serializers.CharField(max_length=100, required=False)
    date_of_birth = serializers.DateField(required=False)
    gender = serializers.ChoiceField(choices=Gender.choices, required=False)
    address = serializers.CharField(max_length=255, required=False, allow_blank=True)
    emergency_contact = serializers.CharField(max_length=100, required=False, allow_blank=True)
    allergies = serializers.CharField(required=False, allow_blank=True)
    medical_conditions = serializers.CharField(required=False, allow_blank=True)
    enrollment_date = serializers.DateField(required=False)
    is_active = serializers.BooleanField(required=False)


class ShiftUpdateSerializer(serializers.Serializer):
    shift = serializers.CharField(allow_blank=True, allow_null=True)

    def validate_shift(self, value):
        try:
            return shifts.parse_shift(value)
        except ValueError as e:
            raise serializers.ValidationError(str(e))


class RandomAssignSerializer(serializers.Serializer):
    seed = serializers.IntegerField(required=False, allow_null=True)


class DaycareRegistrationSerializer(serializers.ModelSerializer):
    parent_id = serializers.IntegerField(read_only=True)
    parent_name = serializers.SerializerMethodField()
    parent_email = serializers.EmailField(source="parent.email", read_only=True)
    reviewed_by_id = serializers.IntegerField(read_only=True, allow_null=True)
    child_name = serializers.CharField(read_only=True)
    student_id = serializers.SerializerMethodField()

    class Meta:
        model = DaycareRegistration
        fields = [
            "id",
            "parent_id",
            "parent_name",
            "parent_email",
            "child_first_name",
            "child_middle_name",
            "child_last_name",
            "child_name",
            "child_date_of_birth",
            "child_gender",
            "address",
            "parent_contact",
            "emergency_contact",
            "status",
            "submitted_at",
            "reviewed_at",
            "reviewed_by_id",
            "notes",
            "student_id",
        ]
        read_only_fields = fields

    def get_parent_name(self, obj) -> str:
        return display_name(obj.parent)

    def get_student_id(self, obj):
        student = DaycareStudent.objects.filter(registration_id=obj.id).values_list("id", flat=True).first()
        return str(student) if student else None


class MyRegistrationSerializer(DaycareRegistrationSerializer):
    """A parent's application with the enrolled child, when there is one."""
    student = serializers.SerializerMethodField()

    class Meta(DaycareRegistrationSerializer.Meta):
        fields = DaycareRegistrationSerializer.Meta.fields + ["student"]
        read_only_fields = fields

    def get_student(self, obj):
        student = DaycareStudent.objects.filter(registration_id=obj.id).first()
        if student is None:
            return None
        return DaycareStudentDetailSerializer(
            student,
            context={"attendance_limit": RECENT_ATTENDANCE_FOR_PARENT},
        ).data


class RegistrationCreateSerializer(serializers.Serializer):
    child_first_name = serializers.CharField(max_length=100)
    child_middle_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    child_last_name = serializers.CharField(max_length=100)
    child_date_of_birth = serializers.DateField()
    child_gender = serializers.ChoiceField(choices=Gender.choices)
    address = serializers.CharField(max_length=255)
    parent_contact = serializers.CharField(max_length=50)
    emergency_contact = serializers.CharField(max_length=100, required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)


class RegistrationUpdateSerializer(serializers.Serializer):
    child_first_name = serializers.CharField(max_length=100, required=False)
    child_middle_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    child_last_name = serializers.CharField(max_length=100, required=False)
    child_date_of_birth = serializers.DateField(required=False)
    child_gender = serializers.ChoiceField(choices=Gender.choices, required=False)
    address = serializers.CharField(max_length=255, required=False)
    parent_contact = serializers.CharField(max_length=50, required=False)
    emergency_contact = serializers.CharField(max_length=100, required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)


class ApproveRegistrationSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True)
    allergies = serializers.CharField(required=False, allow_blank=True)
    medical_conditions = serializers.CharField(required=False, allow_blank=True)


class RejectRegistrationSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True)


class LearningMaterialSerializer(serializers.ModelSerializer):
    uploaded_by_id = serializers.IntegerField(read_only=True, allow_null=True)
    uploaded_by_name = serializers.SerializerMethodField()

    class Meta:
        model = LearningMaterial
        fields = [
            "id",
            "title",
            "description",
            "file_path",
            "file_type",
            "file_size",
            "category",
            "is_public",
            "uploaded_by_id",
            "uploaded_by_name",
            "uploaded_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_uploaded_by_name(self, obj) -> str:
        return display_name(obj.uploaded_by)


class LearningMaterialCreateSerializer(serializers.Serializer):
    file = serializers.FileField(required=False)
    title = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True)
    category = serializers.CharField(max_length=100, required=False, allow_blank=True)
    is_public = serializers.BooleanField(required=False, default=False)


class LearningMaterialUpdateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    category = serializers.CharField(max_length=100, required=False, allow_blank=True)
    is_public = serializers.BooleanField(required=False)


class ParentChildReportsSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)
    progress_reports = ProgressReportSerializer(many=True, read_only=True)

    class Meta:
        model = DaycareStudent
        fields = ["id", "first_name", "last_name", "full_name", "date_of_birth", "shift", "progress_reports"]
        read_only_fields = fields
