# brgy_core/events/services.py
from __future__ import annotations

import logging
from typing import Any, Dict
from uuid import UUID

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from rest_framework.exceptions import NotFound, ValidationError

from brgy_core.audit.services import AuditService
from brgy_core.common.api.exceptions import ConflictError
from brgy_core.events.models import Event, EventAttendance, EventRegistration
from brgy_core.events.selectors import approved_count

logger = logging.getLogger(__name__)

EVENT_FULL_MSG = "Event is full"

EVENT_FIELDS = {
    "title",
    "description",
    "event_date",
    "start_time",
    "end_time",
    "location",
    "category",
    "max_participants",
    "status",
}


def _assert_capacity(event: Event) -> None:
    if event.max_participants and approved_count(event) >= event.max_participants:
        raise ConflictError(EVENT_FULL_MSG)


class EventService:
    @staticmethod
    @transaction.atomic
    def create_event(*, actor_user_id: int | None, data: Dict[str, Any]) -> Event:
        fields = {k: v for k, v in data.items() if k in EVENT_FIELDS}
        event = Event.objects.create(created_by_id=actor_user_id, **fields)

        AuditService.log(
            event_code="event.created",
            entity_type="Event",
            entity_id=event.id,
            actor_user_id=actor_user_id,
            metadata={"title": event.title, "status": event.status},
        )
        return event

    @staticmethod
    @transaction.atomic
    def update_event(*, actor_user_id: int | None, event_id: UUID, data: Dict[str, Any]) -> Event:
        event = Event.objects.get(id=event_id)

        updates = {k: v for k, v in (data or {}).items() if k in EVENT_FIELDS}
        for k, v in updates.items():
            setattr(event, k, v)
        event.save()

        AuditService.log(
            event_code="event.updated",
            entity_type="Event",
            entity_id=event.id,
            actor_user_id=actor_user_id,
            metadata={"updated_fields": sorted(updates.keys())},
        )
        return event

    @staticmethod
    @transaction.atomic
    def set_status(*, actor_user_id: int | None, event_id: UUID, status: str) -> Event:
        event = Event.objects.select_for_update().get(id=event_id)
        previous = event.status
        event.status = status
        event.save(update_fields=["status", "updated_at"])

        AuditService.log(
            event_code="event.status_changed",
            entity_type="Event",
            entity_id=event.id,
            actor_user_id=actor_user_id,
            metadata={"from": previous, "to": status},
        )
        return event

    @staticmethod
    @transaction.atomic
    def delete_event(*, actor_user_id: int | None, event_id: UUID) -> None:
        event = Event.objects.get(id=event_id)
        title = event.title
        event.delete()

        AuditService.log(
            event_code="event.deleted",
            entity_type="Event",
            entity_id=event_id,
            actor_user_id=actor_user_id,
            metadata={"title": title},
        )


class EventRegistrationService:
    @staticmethod
    @transaction.atomic
    def register(*, user, event_id: UUID) -> EventRegistration:
        event = Event.objects.select_for_update().get(id=event_id)

        if event.status != Event.Status.PUBLISHED:
            raise ValidationError({"detail": "Event is not open for registration"})
        if EventRegistration.objects.filter(event=event, user=user).exists():
            raise ConflictError("Already registered for this event")
        _assert_capacity(event)

        try:
            with transaction.atomic():
                reg = EventRegistration.objects.create(event=event, user=user)
        except IntegrityError:
            raise ConflictError("Already registered for this event")

        AuditService.log(
            event_code="event_registration.created",
            entity_type="EventRegistration",
            entity_id=reg.id,
            actor_user_id=user.id,
            metadata={"event_id": str(event.id)},
        )
        return reg

    @staticmethod
    @transaction.atomic
    def set_status(*, actor_user_id: int | None, registration_id: UUID, status: str) -> EventRegistration:
        reg = EventRegistration.objects.select_related("event", "user").select_for_update().get(id=registration_id)

        if status == EventRegistration.Status.APPROVED and reg.status != EventRegistration.Status.APPROVED:
            # serialize seat counting with register()
            event = Event.objects.select_for_update().get(id=reg.event_id)
            _assert_capacity(event)

        previous = reg.status
        reg.status = status
        reg.save(update_fields=["status", "updated_at"])

        AuditService.log(
            event_code="event_registration.status_changed",
            entity_type="EventRegistration",
            entity_id=reg.id,
            actor_user_id=actor_user_id,
            metadata={"event_id": str(reg.event_id), "user_id": reg.user_id, "from": previous, "to": status},
        )
        return reg


class EventAttendanceService:
    @staticmethod
    @transaction.atomic
    def record(*, actor_user_id: int | None, event_id: UUID, user_id: int, remarks: str = "") -> EventAttendance:
        try:
            event = Event.objects.get(id=event_id)
        except Event.DoesNotExist:
            raise NotFound("Event not found")
        if not get_user_model().objects.filter(pk=user_id).exists():
            raise NotFound("User not found")

        approved = EventRegistration.objects.filter(
            event=event,
            user_id=user_id,
            status=EventRegistration.Status.APPROVED,
        ).exists()
        if not approved:
            raise ValidationError({"detail": "User does not have an approved registration for this event"})

        if EventAttendance.objects.filter(event=event, user_id=user_id).exists():
            raise ConflictError("Attendance already recorded for this user")

        try:
            with transaction.atomic():
                attendance = EventAttendance.objects.create(
                    event=event,
                    user_id=user_id,
                    remarks=remarks or "",
                    recorded_by_id=actor_user_id,
                )
        except IntegrityError:
            raise ConflictError("Attendance already recorded for this user")

        AuditService.log(
            event_code="event_attendance.recorded",
            entity_type="EventAttendance",
            entity_id=attendance.id,
            actor_user_id=actor_user_id,
            metadata={"event_id": str(event.id), "user_id": user_id},
        )
        logger.info("Event attendance recorded event_id=%s user_id=%s", event.id, user_id)
        return attendance
