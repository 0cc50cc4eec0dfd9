# brgy_core/events/api/serializers.py
from __future__ import annotations

from datetime import date

from rest_framework import serializers

from brgy_core.common.names import display_name
from brgy_core.events.models import Event, EventAttendance, EventRegistration


class EventSerializer(serializers.ModelSerializer):
    created_by_id = serializers.IntegerField(read_only=True, allow_null=True)
    created_by_name = serializers.SerializerMethodField()
    registration_count = serializers.SerializerMethodField()
    attendee_count = serializers.SerializerMethodField()

    class Meta:
        model = Event
        fields = [
            "id",
            "title",
            "description",
            "event_date",
            "start_time",
            "end_time",
            "location",
            "category",
            "max_participants",
            "status",
            "created_by_id",
            "created_by_name",
            "registration_count",
            "attendee_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_created_by_name(self, obj) -> str:
        return display_name(obj.created_by)

    def get_registration_count(self, obj) -> int:
        count = getattr(obj, "approved_count", None)
        if count is None:
            count = obj.registrations.filter(status=EventRegistration.Status.APPROVED).count()
        return count

    def get_attendee_count(self, obj) -> int:
        count = getattr(obj, "attendee_count", None)
        return count if count is not None else obj.attendance.count()


class EventCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200)
    description = serializers.CharField()
    event_date = serializers.DateField()
    start_time = serializers.TimeField()
    end_time = serializers.TimeField(required=False, allow_null=True)
    location = serializers.CharField(max_length=255)
    category = serializers.CharField(max_length=100, required=False, allow_blank=True)
    max_participants = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    status = serializers.ChoiceField(
        choices=[Event.Status.DRAFT, Event.Status.PUBLISHED],
        required=False,
        default=Event.Status.DRAFT,
    )

    def validate_event_date(self, value):
        if value < date.today():
            raise serializers.ValidationError("Event date cannot be in the past")
        return value


class EventUpdateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200, required=False)
    description = serializers.CharField(required=False)
    event_date = serializers.DateField(required=False)
    start_time = serializers.TimeField(required=False)
    end_time = serializers.TimeField(required=False, allow_null=True)
    location = serializers.CharField(max_length=255, required=False)
    category = serializers.CharField(max_length=100, required=False, allow_blank=True)
    max_participants = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    status = serializers.ChoiceField(choices=Event.Status.choices, required=False)


class EventStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Event.Status.choices)


class EventRegistrationSerializer(serializers.ModelSerializer):
    event_id = serializers.UUIDField(read_only=True)
    event_title = serializers.CharField(source="event.title", read_only=True)
    event_date = serializers.DateField(source="event.event_date", read_only=True)
    event_status = serializers.CharField(source="event.status", read_only=True)
    user_id = serializers.IntegerField(read_only=True)
    user_name = serializers.SerializerMethodField()
    user_email = serializers.EmailField(source="user.email", read_only=True)

    class Meta:
        model = EventRegistration
        fields = [
            "id",
            "event_id",
            "event_title",
            "event_date",
            "event_status",
            "user_id",
            "user_name",
            "user_email",
            "status",
            "registered_at",
        ]
        read_only_fields = fields

    def get_user_name(self, obj) -> str:
        return display_name(obj.user)


class RegistrationStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=EventRegistration.Status.choices)


class AttendanceCreateSerializer(serializers.Serializer):
    event_id = serializers.UUIDField()
    user_id = serializers.IntegerField()
    remarks = serializers.CharField(required=False, allow_blank=True)


def _contact_number(user) -> str:
    profile = getattr(user, "resident_profile", None)
    return getattr(profile, "contact_number", "") or ""


class EventAttendanceSerializer(serializers.ModelSerializer):
    event_id = serializers.UUIDField(read_only=True)
    user_id = serializers.IntegerField(read_only=True)
    full_name = serializers.SerializerMethodField()
    email = serializers.EmailField(source="user.email", read_only=True)
    contact_number = serializers.SerializerMethodField()
    recorded_by_id = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = EventAttendance
        fields = [
            "id",
            "event_id",
            "user_id",
            "full_name",
            "email",
            "contact_number",
            "attended_at",
            "remarks",
            "recorded_by_id",
        ]
        read_only_fields = fields

    def get_full_name(self, obj) -> str:
        return display_name(obj.user)

    def get_contact_number(self, obj) -> str:
        return _contact_number(obj.user)


class AvailableAttendeeSerializer(serializers.ModelSerializer):
    registration_id = serializers.UUIDField(source="id", read_only=True)
    user_id = serializers.IntegerField(read_only=True)
    full_name = serializers.SerializerMethodField()
    email = serializers.EmailField(source="user.email", read_only=True)

    class Meta:
        model = EventRegistration
        fields = ["registration_id", "user_id", "full_name", "email", "registered_at"]
        read_only_fields = fields

    def get_full_name(self, obj) -> str:
        return display_name(obj.user)
