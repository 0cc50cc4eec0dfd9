# brgy_core/audit/admin.py
from django.contrib import admin

from brgy_core.audit.models import AuditEvent


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    """Read-only: the audit trail is written by AuditService only."""
    list_display = ("occurred_at", "event_code", "entity_type", "entity_id", "actor_user")
    list_filter = ("entity_type", "event_code")
    search_fields = ("event_code", "entity_id", "actor_user__email")
    date_hierarchy = "occurred_at"
    ordering = ("-occurred_at",)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
