# brgy_core/iam/api/serializers.py
from __future__ import annotations

from django.contrib.auth import get_user_model
from rest_framework import serializers

from brgy_core.common.permissions import ALL_ROLES, user_roles
from brgy_core.iam.models import ResidentProfile
from brgy_core.iam.validators import (
    ADULT_FOLLOW_UP_AGE,
    MIN_RESIDENT_AGE,
    age_on,
    validate_contact_number,
    validate_password_pair,
    validate_person_name,
    validate_proof_of_residency,
)

User = get_user_model()


class ResidentProfileSerializer(serializers.ModelSerializer):
    has_proof_of_residency = serializers.SerializerMethodField()

    class Meta:
        model = ResidentProfile
        fields = [
            "id",
            "status",
            "middle_name",
            "suffix",
            "contact_number",
            "address",
            "purok_zone",
            "barangay",
            "city_municipality",
            "province",
            "region",
            "birthday",
            "sex",
            "civil_status",
            "religion",
            "work_status",
            "registered_sk_voter",
            "registered_national_voter",
            "voted_last_sk_election",
            "lgbtq_community",
            "solo_parent",
            "has_proof_of_residency",
            "consent_agreed_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_has_proof_of_residency(self, obj) -> bool:
        return bool(obj.proof_of_residency)


class UserSerializer(serializers.ModelSerializer):
    roles = serializers.SerializerMethodField()
    status = serializers.SerializerMethodField()
    profile = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "first_name",
            "last_name",
            "is_active",
            "is_superuser",
            "date_joined",
            "last_login",
            "roles",
            "status",
            "profile",
        ]
        read_only_fields = fields

    def _profile(self, obj):
        try:
            return obj.resident_profile
        except ResidentProfile.DoesNotExist:
            return None

    def get_roles(self, obj) -> list[str]:
        return sorted(user_roles(obj))

    def get_status(self, obj) -> str:
        profile = self._profile(obj)
        if profile is not None:
            return profile.status
        return ResidentProfile.Status.ACTIVE if obj.is_active else ResidentProfile.Status.INACTIVE

    def get_profile(self, obj):
        profile = self._profile(obj)
        return ResidentProfileSerializer(profile).data if profile else None


class _ProfileFieldsMixin(serializers.Serializer):
    middle_name = serializers.CharField(max_length=100, required=False, allow_blank=True, validators=[validate_person_name])
    suffix = serializers.CharField(max_length=20, required=False, allow_blank=True)
    address = serializers.CharField(max_length=255, required=False, allow_blank=True)
    purok_zone = serializers.CharField(max_length=100, required=False, allow_blank=True)
    barangay = serializers.CharField(max_length=100, required=False, allow_blank=True)
    city_municipality = serializers.CharField(max_length=100, required=False, allow_blank=True)
    province = serializers.CharField(max_length=100, required=False, allow_blank=True)
    region = serializers.CharField(max_length=100, required=False, allow_blank=True)
    sex = serializers.ChoiceField(choices=ResidentProfile.Sex.choices, required=False, allow_blank=True)
    civil_status = serializers.CharField(max_length=50, required=False, allow_blank=True)
    religion = serializers.CharField(max_length=100, required=False, allow_blank=True)
    work_status = serializers.CharField(max_length=100, required=False, allow_blank=True)
    registered_sk_voter = serializers.BooleanField(required=False, allow_null=True)
    registered_national_voter = serializers.BooleanField(required=False, allow_null=True)
    voted_last_sk_election = serializers.BooleanField(required=False, allow_null=True)
    lgbtq_community = serializers.BooleanField(required=False, allow_null=True)
    solo_parent = serializers.BooleanField(required=False, allow_null=True)


class RegisterSerializer(_ProfileFieldsMixin):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)
    confirm_password = serializers.CharField(write_only=True, trim_whitespace=False)
    first_name = serializers.CharField(max_length=150, validators=[validate_person_name])
    last_name = serializers.CharField(max_length=150, validators=[validate_person_name])
    contact_number = serializers.CharField(max_length=20, validators=[validate_contact_number])
    birthday = serializers.DateField()
    consent_agreed = serializers.BooleanField()
    proof_of_residency = serializers.FileField(required=False, allow_null=True)

    def validate_proof_of_residency(self, value):
        validate_proof_of_residency(value)
        return value

    def validate(self, attrs):
        validate_password_pair(attrs.get("password", ""), attrs.get("confirm_password", ""))

        if attrs.get("proof_of_residency") is None:
            raise serializers.ValidationError({"proof_of_residency": "Proof of residency is required"})

        if age_on(attrs["birthday"]) < MIN_RESIDENT_AGE:
            raise serializers.ValidationError({"birthday": f"Age must be {MIN_RESIDENT_AGE} or above"})

        if age_on(attrs["birthday"]) >= ADULT_FOLLOW_UP_AGE:
            missing = [
                f
                for f in ("work_status", "registered_sk_voter", "registered_national_voter", "voted_last_sk_election")
                if attrs.get(f) in (None, "")
            ]
            if missing:
                raise serializers.ValidationError({f: "This field is required." for f in missing})

        if not attrs.get("consent_agreed"):
            raise serializers.ValidationError({"consent_agreed": "You must agree to the data privacy consent"})
        return attrs


class LoginRequestSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(trim_whitespace=False)


class LoginResponseSerializer(serializers.Serializer):
    detail = serializers.CharField()
    user = UserSerializer()


class EmailOnlySerializer(serializers.Serializer):
    email = serializers.EmailField()


class EmailCodeSerializer(serializers.Serializer):
    email = serializers.EmailField()
    code = serializers.RegexField(r"^\d{6}$", error_messages={"invalid": "Code must be 6 digits"})


class ResetPasswordSerializer(EmailCodeSerializer):
    new_password = serializers.CharField(trim_whitespace=False)
    confirm_password = serializers.CharField(trim_whitespace=False)

    def validate(self, attrs):
        validate_password_pair(attrs["new_password"], attrs["confirm_password"])
        return attrs


class DetailSerializer(serializers.Serializer):
    detail = serializers.CharField()


class ProfileUpdateSerializer(_ProfileFieldsMixin):
    first_name = serializers.CharField(max_length=150, required=False, validators=[validate_person_name])
    last_name = serializers.CharField(max_length=150, required=False, validators=[validate_person_name])
    contact_number = serializers.CharField(max_length=20, required=False, validators=[validate_contact_number])
    birthday = serializers.DateField(required=False, allow_null=True)


class AdminUserCreateSerializer(_ProfileFieldsMixin):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=8, trim_whitespace=False)
    first_name = serializers.CharField(max_length=150, required=False, allow_blank=True, default="")
    last_name = serializers.CharField(max_length=150, required=False, allow_blank=True, default="")
    contact_number = serializers.CharField(max_length=20, required=False, allow_blank=True)
    birthday = serializers.DateField(required=False, allow_null=True)
    roles = serializers.ListField(child=serializers.ChoiceField(choices=ALL_ROLES), required=False, default=list)


class AdminUserUpdateSerializer(_ProfileFieldsMixin):
    email = serializers.EmailField(required=False)
    password = serializers.CharField(write_only=True, min_length=8, required=False, trim_whitespace=False)
    first_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    last_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    contact_number = serializers.CharField(max_length=20, required=False, allow_blank=True)
    birthday = serializers.DateField(required=False, allow_null=True)
    roles = serializers.ListField(child=serializers.ChoiceField(choices=ALL_ROLES), required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs


class UserStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ResidentProfile.Status.choices)


class UserRolesSerializer(serializers.Serializer):
    roles = serializers.ListField(child=serializers.ChoiceField(choices=ALL_ROLES), allow_empty=True)
