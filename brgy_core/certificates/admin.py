# brgy_core/certificates/admin.py
from django.contrib import admin

from brgy_core.certificates.models import Certificate


@admin.register(Certificate)
class CertificateAdmin(admin.ModelAdmin):
    list_display = ("recipient_name", "certificate_type", "scope", "issued_date", "issued_by")
    list_filter = ("scope", "certificate_type")
    search_fields = ("recipient_name", "issued_for")
    ordering = ("-issued_date",)
