# brgy_core/certificates/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from brgy_core.certificates.models import Certificate


class CertificateSerializer(serializers.ModelSerializer):
    """Flattened view: certificate_data keys are lifted to the top level."""
    student_id = serializers.UUIDField(read_only=True, allow_null=True)
    patient_id = serializers.UUIDField(read_only=True, allow_null=True)
    event_id = serializers.UUIDField(read_only=True, allow_null=True)
    certificate_number = serializers.SerializerMethodField()
    purpose = serializers.SerializerMethodField()
    achievements = serializers.SerializerMethodField()
    recommendations = serializers.SerializerMethodField()
    expiry_date = serializers.SerializerMethodField()

    class Meta:
        model = Certificate
        fields = [
            "id",
            "scope",
            "student_id",
            "patient_id",
            "event_id",
            "certificate_type",
            "recipient_name",
            "issued_for",
            "issued_by",
            "issued_date",
            "certificate_number",
            "purpose",
            "achievements",
            "recommendations",
            "expiry_date",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def _cert_data(self, obj) -> dict:
        return obj.certificate_data or {}

    def get_certificate_number(self, obj) -> str:
        return self._cert_data(obj).get("certificate_number") or "N/A"

    def get_purpose(self, obj) -> str:
        return self._cert_data(obj).get("purpose") or obj.issued_for

    def get_achievements(self, obj):
        return self._cert_data(obj).get("achievements")

    def get_recommendations(self, obj):
        return self._cert_data(obj).get("recommendations")

    def get_expiry_date(self, obj):
        return self._cert_data(obj).get("expiry_date")


class _CertificateFieldsSerializer(serializers.Serializer):
    certificate_type = serializers.CharField(max_length=100)
    recipient_name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    certificate_number = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    purpose = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    achievements = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    recommendations = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    expiry_date = serializers.DateField(required=False, allow_null=True)
    issued_date = serializers.DateField(required=False)
    issued_by = serializers.CharField(max_length=200, required=False, allow_blank=True, allow_null=True)


class DaycareCertificateCreateSerializer(_CertificateFieldsSerializer):
    student_id = serializers.UUIDField()


class HealthCertificateCreateSerializer(_CertificateFieldsSerializer):
    patient_id = serializers.UUIDField()


class CertificateUpdateSerializer(_CertificateFieldsSerializer):
    certificate_type = serializers.CharField(max_length=100, required=False, allow_blank=True)


class EventCertificateSerializer(serializers.Serializer):
    user_id = serializers.IntegerField()
    certificate_type = serializers.CharField(max_length=100, required=False, default="Participation")
    issued_by = serializers.CharField(max_length=200, required=False, allow_blank=True, allow_null=True)
