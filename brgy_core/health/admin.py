# brgy_core/health/admin.py
from django.contrib import admin

from brgy_core.health.models import ImmunizationCard, ImmunizationRecord, Patient


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ("last_name", "first_name", "date_of_birth", "gender", "guardian", "created_at")
    list_filter = ("gender", "blood_type")
    search_fields = ("first_name", "last_name", "mother_name", "philhealth_number")
    ordering = ("last_name", "first_name")


@admin.register(ImmunizationRecord)
class ImmunizationRecordAdmin(admin.ModelAdmin):
    list_display = ("patient", "vaccine_name", "dose_number", "date_given", "next_due_date")
    list_filter = ("vaccine_name",)
    search_fields = ("patient__first_name", "patient__last_name", "vaccine_name", "lot_number")
    ordering = ("-date_given",)


@admin.register(ImmunizationCard)
class ImmunizationCardAdmin(admin.ModelAdmin):
    list_display = ("patient", "created_at", "updated_at")
    search_fields = ("patient__first_name", "patient__last_name")
    readonly_fields = ("created_at", "updated_at")
