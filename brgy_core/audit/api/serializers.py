# brgy_core/audit/api/serializers.py
from rest_framework import serializers

from brgy_core.audit.models import AuditEvent


class AuditEventSerializer(serializers.ModelSerializer):
    # API field "timestamp" maps to model field "occurred_at"
    timestamp = serializers.DateTimeField(source="occurred_at", read_only=True)
    actor_user_id = serializers.IntegerField(read_only=True)
    actor_email = serializers.EmailField(source="actor_user.email", read_only=True, default=None)

    class Meta:
        model = AuditEvent
        fields = [
            "id",
            "entity_type",
            "entity_id",
            "event_code",
            "actor_user_id",
            "actor_email",
            "timestamp",
            "metadata",
        ]
        read_only_fields = fields
