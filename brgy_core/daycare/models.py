# brgy_core/daycare/models.py
from django.conf import settings
from django.db import models
from django.utils import timezone

from brgy_core.common.models import BaseModel


class Gender(models.TextChoices):
    MALE = "MALE", "Male"
    FEMALE = "FEMALE", "Female"


class DaycareRegistration(BaseModel):
    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        APPROVED = "APPROVED", "Approved"
        REJECTED = "REJECTED", "Rejected"

    parent = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="daycare_registrations")

    child_first_name = models.CharField(max_length=100)
    child_middle_name = models.CharField(max_length=100, blank=True)
    child_last_name = models.CharField(max_length=100)
    child_date_of_birth = models.DateField()
    child_gender = models.CharField(max_length=10, choices=Gender.choices)

    address = models.CharField(max_length=255)
    parent_contact = models.CharField(max_length=50)
    emergency_contact = models.CharField(max_length=100, blank=True)

    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING, db_index=True)
    submitted_at = models.DateTimeField(default=timezone.now, db_index=True)
    reviewed_at = models.DateTimeField(null=True, blank=True)
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    notes = models.TextField(blank=True)

    class Meta:
        db_table = "daycare_registration"
        ordering = ["-submitted_at"]

    @property
    def child_name(self) -> str:
        return " ".join(p for p in (self.child_first_name, self.child_middle_name, self.child_last_name) if p)


class DaycareStudent(BaseModel):
    class Shift(models.TextChoices):
        MORNING = "MORNING", "Morning"
        AFTERNOON = "AFTERNOON", "Afternoon"

    registration = models.OneToOneField(DaycareRegistration, on_delete=models.CASCADE, related_name="student")

    first_name = models.CharField(max_length=100)
    middle_name = models.CharField(max_length=100, blank=True)
    last_name = models.CharField(max_length=100)
    date_of_birth = models.DateField()
    gender = models.CharField(max_length=10, choices=Gender.choices)
    address = models.CharField(max_length=255, blank=True)
    emergency_contact = models.CharField(max_length=100, blank=True)
    allergies = models.TextField(blank=True)
    medical_conditions = models.TextField(blank=True)

    enrollment_date = models.DateField(default=timezone.localdate, db_index=True)
    # null = unassigned
    shift = models.CharField(max_length=10, choices=Shift.choices, null=True, blank=True, db_index=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "daycare_student"
        ordering = ["-enrollment_date", "last_name"]

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __str__(self) -> str:
        return self.full_name


class AttendanceRecord(BaseModel):
    class Status(models.TextChoices):
        PRESENT = "PRESENT", "Present"
        ABSENT = "ABSENT", "Absent"
        LATE = "LATE", "Late"
        EXCUSED = "EXCUSED", "Excused"
        HALFDAY = "HALFDAY", "Half day"

    student = models.ForeignKey(DaycareStudent, on_delete=models.CASCADE, related_name="attendance_records")
    date = models.DateField(db_index=True)
    status = models.CharField(max_length=10, choices=Status.choices)
    time_in = models.DateTimeField(null=True, blank=True)
    time_out = models.DateTimeField(null=True, blank=True)
    remarks = models.TextField(blank=True)

    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        db_table = "daycare_attendance_record"
        ordering = ["-date"]
        constraints = [
            models.UniqueConstraint(fields=["student", "date"], name="uq_attendance_student_date"),
        ]


class ProgressReport(BaseModel):
    student = models.ForeignKey(DaycareStudent, on_delete=models.CASCADE, related_name="progress_reports")
    reporting_period = models.CharField(max_length=100)

    academic_performance = models.TextField(blank=True)
    social_behavior = models.TextField(blank=True)
    physical_development = models.TextField(blank=True)
    emotional_development = models.TextField(blank=True)
    recommendations = models.TextField(blank=True)

    generated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    generated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "daycare_progress_report"
        ordering = ["-generated_at"]


class LearningMaterial(BaseModel):
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)

    # storage path, e.g. "learning-materials/1718000000000-123456789-colors.pdf"
    file_path = models.CharField(max_length=512)
    file_type = models.CharField(max_length=100, blank=True)
    file_size = models.PositiveBigIntegerField(default=0)

    category = models.CharField(max_length=100, blank=True, db_index=True)
    is_public = models.BooleanField(default=False)

    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    uploaded_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "daycare_learning_material"
        ordering = ["-uploaded_at"]
