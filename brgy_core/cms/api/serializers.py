# brgy_core/cms/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from brgy_core.cms.models import Announcement, Benefit, Feature, ServiceFeature, SystemSettings, Testimonial
from brgy_core.common.names import display_name

_BLOCK_FIELDS = ["id", "is_active", "sort_order", "created_at", "updated_at"]
_BLOCK_READ_ONLY = ["id", "created_at", "updated_at"]


class FeatureSerializer(serializers.ModelSerializer):
    class Meta:
        model = Feature
        fields = _BLOCK_FIELDS + ["title", "description", "icon_type", "stats"]
        read_only_fields = _BLOCK_READ_ONLY


class BenefitSerializer(serializers.ModelSerializer):
    class Meta:
        model = Benefit
        fields = _BLOCK_FIELDS + ["text", "icon_type"]
        read_only_fields = _BLOCK_READ_ONLY


class TestimonialSerializer(serializers.ModelSerializer):
    class Meta:
        model = Testimonial
        fields = _BLOCK_FIELDS + ["name", "role", "content", "rating"]
        read_only_fields = _BLOCK_READ_ONLY


class ServiceFeatureSerializer(serializers.ModelSerializer):
    class Meta:
        model = ServiceFeature
        fields = _BLOCK_FIELDS + ["description"]
        read_only_fields = _BLOCK_READ_ONLY


class AnnouncementSerializer(serializers.ModelSerializer):
    created_by_id = serializers.IntegerField(read_only=True, allow_null=True)
    created_by_name = serializers.SerializerMethodField()

    class Meta:
        model = Announcement
        fields = _BLOCK_FIELDS + [
            "title",
            "content",
            "priority",
            "is_public",
            "published_at",
            "expires_at",
            "created_by_id",
            "created_by_name",
        ]
        read_only_fields = _BLOCK_READ_ONLY + ["published_at"]

    def get_created_by_name(self, obj) -> str:
        return display_name(obj.created_by, default="")

    def validate(self, attrs):
        expires_at = attrs.get("expires_at")
        if expires_at is not None and self.instance and self.instance.published_at:
            if expires_at < self.instance.published_at:
                raise serializers.ValidationError({"expires_at": "Expiry must be after the publish date"})
        return attrs


class PublicAnnouncementSerializer(serializers.ModelSerializer):
    class Meta:
        model = Announcement
        fields = ["id", "title", "content", "priority", "published_at", "expires_at"]


class SystemSettingsSerializer(serializers.ModelSerializer):
    class Meta:
        model = SystemSettings
        fields = ["barangay_name", "barangay_address", "barangay_contact_number", "barangay_email", "updated_at"]
        read_only_fields = ["updated_at"]


class ContactInfoSerializer(serializers.Serializer):
    barangay_name = serializers.CharField()
    address = serializers.CharField()
    phone = serializers.CharField()
    email = serializers.CharField()
    hours = serializers.CharField()


class PublicStatsSerializer(serializers.Serializer):
    communityMembers = serializers.IntegerField()
    healthRecords = serializers.IntegerField()
    daycareChildren = serializers.IntegerField()
    skEvents = serializers.IntegerField()
