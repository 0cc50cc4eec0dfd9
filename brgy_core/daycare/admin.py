# brgy_core/daycare/admin.py
from django.contrib import admin

from brgy_core.daycare.models import (
    AttendanceRecord,
    DaycareRegistration,
    DaycareStudent,
    LearningMaterial,
    ProgressReport,
)


@admin.register(DaycareRegistration)
class DaycareRegistrationAdmin(admin.ModelAdmin):
    list_display = ("child_last_name", "child_first_name", "parent", "status", "submitted_at", "reviewed_at")
    list_filter = ("status",)
    search_fields = ("child_first_name", "child_last_name", "parent__email")
    ordering = ("-submitted_at",)


@admin.register(DaycareStudent)
class DaycareStudentAdmin(admin.ModelAdmin):
    list_display = ("last_name", "first_name", "shift", "enrollment_date", "is_active")
    list_filter = ("shift", "is_active", "gender")
    search_fields = ("first_name", "last_name")


@admin.register(AttendanceRecord)
class AttendanceRecordAdmin(admin.ModelAdmin):
    list_display = ("student", "date", "status", "time_in", "time_out")
    list_filter = ("status", "date")
    ordering = ("-date",)


@admin.register(ProgressReport)
class ProgressReportAdmin(admin.ModelAdmin):
    list_display = ("student", "reporting_period", "generated_by", "generated_at")
    search_fields = ("student__first_name", "student__last_name", "reporting_period")


@admin.register(LearningMaterial)
class LearningMaterialAdmin(admin.ModelAdmin):
    list_display = ("title", "category", "is_public", "file_size", "uploaded_at")
    list_filter = ("category", "is_public")
    search_fields = ("title", "description")
