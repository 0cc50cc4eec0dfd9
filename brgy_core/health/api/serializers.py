# brgy_core/health/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from brgy_core.health.models import ImmunizationCard, ImmunizationRecord, Patient


class PatientSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)
    guardian_id = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = Patient
        fields = [
            "id",
            "first_name",
            "middle_name",
            "last_name",
            "full_name",
            "date_of_birth",
            "gender",
            "address",
            "contact_number",
            "blood_type",
            "mother_name",
            "father_name",
            "place_of_birth",
            "birth_weight",
            "birth_length",
            "guardian_id",
            "philhealth_number",
            "emergency_contact",
            "allergies",
            "medical_history",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class PatientWriteSerializer(serializers.Serializer):
    first_name = serializers.CharField(max_length=100)
    middle_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    last_name = serializers.CharField(max_length=100)
    date_of_birth = serializers.DateField()
    gender = serializers.ChoiceField(choices=Patient.Gender.choices)
    address = serializers.CharField(max_length=255, required=False, allow_blank=True)
    contact_number = serializers.CharField(max_length=20, required=False, allow_blank=True)
    blood_type = serializers.CharField(max_length=5, required=False, allow_blank=True)
    mother_name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    father_name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    place_of_birth = serializers.CharField(max_length=200, required=False, allow_blank=True)
    birth_weight = serializers.DecimalField(max_digits=5, decimal_places=2, required=False, allow_null=True)
    birth_length = serializers.DecimalField(max_digits=5, decimal_places=2, required=False, allow_null=True)
    guardian_id = serializers.IntegerField(required=False, allow_null=True)
    philhealth_number = serializers.CharField(max_length=30, required=False, allow_blank=True)
    emergency_contact = serializers.CharField(max_length=100, required=False, allow_blank=True)
    allergies = serializers.CharField(required=False, allow_blank=True)
    medical_history = serializers.CharField(required=False, allow_blank=True)

    def validate_guardian_id(self, value):
        from django.contrib.auth import get_user_model

        if value is not None and not get_user_model().objects.filter(pk=value).exists():
            raise serializers.ValidationError("Guardian user not found.")
        return value


class ImmunizationRecordSerializer(serializers.ModelSerializer):
    patient_id = serializers.UUIDField(read_only=True)
    patient_name = serializers.CharField(source="patient.full_name", read_only=True)
    recorded_by_id = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = ImmunizationRecord
        fields = [
            "id",
            "patient_id",
            "patient_name",
            "vaccine_name",
            "vaccine_type",
            "manufacturer",
            "lot_number",
            "batch_number",
            "dosage",
            "date_given",
            "age_at_vaccination",
            "site_of_administration",
            "administered_by",
            "dose_number",
            "next_due_date",
            "expiration_date",
            "adverse_reactions",
            "notes",
            "recorded_by_id",
            "created_at",
        ]
        read_only_fields = fields


class ImmunizationRecordCreateSerializer(serializers.Serializer):
    patient_id = serializers.UUIDField()
    vaccine_name = serializers.CharField(max_length=150)
    vaccine_type = serializers.CharField(max_length=100, required=False, allow_blank=True)
    manufacturer = serializers.CharField(max_length=150, required=False, allow_blank=True)
    lot_number = serializers.CharField(max_length=50, required=False, allow_blank=True)
    batch_number = serializers.CharField(max_length=50, required=False, allow_blank=True)
    dosage = serializers.CharField(max_length=50, required=False, allow_blank=True)
    date_given = serializers.DateField()
    age_at_vaccination = serializers.CharField(max_length=50, required=False, allow_blank=True)
    site_of_administration = serializers.CharField(max_length=100, required=False, allow_blank=True)
    administered_by = serializers.CharField(max_length=150, required=False, allow_blank=True)
    dose_number = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    next_due_date = serializers.DateField(required=False, allow_null=True)
    expiration_date = serializers.DateField(required=False, allow_null=True)
    adverse_reactions = serializers.CharField(required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        nxt = attrs.get("next_due_date")
        if nxt and nxt < attrs["date_given"]:
            raise serializers.ValidationError({"next_due_date": "Next due date cannot be before date given."})
        return attrs


class ImmunizationCardSerializer(serializers.ModelSerializer):
    patient_id = serializers.UUIDField(read_only=True)
    patient_name = serializers.CharField(source="patient.full_name", read_only=True)

    class Meta:
        model = ImmunizationCard
        fields = ["id", "patient_id", "patient_name", "card_data", "created_at", "updated_at"]
        read_only_fields = fields


class ImmunizationCardCreateSerializer(serializers.Serializer):
    patient_id = serializers.UUIDField()


class ImmunizationCardUpdateSerializer(serializers.Serializer):
    card_data = serializers.JSONField()


class DoseUpdateSerializer(serializers.Serializer):
    vaccine_index = serializers.IntegerField(min_value=0)
    dose_index = serializers.IntegerField(min_value=0)
    date_given = serializers.DateField(required=False, allow_null=True)
    remarks = serializers.CharField(required=False, allow_blank=True, allow_null=True)
