# brgy_core/iam/admin.py
from __future__ import annotations

from django.contrib import admin

from brgy_core.iam.models import ResidentProfile, VerificationCode


@admin.register(ResidentProfile)
class ResidentProfileAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "status", "contact_number", "purok_zone", "created_at")
    list_filter = ("status", "sex", "civil_status")
    search_fields = ("user__email", "user__first_name", "user__last_name", "contact_number")
    autocomplete_fields = ("user",)
    ordering = ("-created_at",)


@admin.register(VerificationCode)
class VerificationCodeAdmin(admin.ModelAdmin):
    list_display = ("user", "purpose", "expires_at", "used_at", "attempts")
    list_filter = ("purpose",)
    search_fields = ("user__email",)
    readonly_fields = ("code_hash",)
    ordering = ("-created_at",)
