# brgy_core/cms/services.py
from __future__ import annotations

from typing import Any, Dict, Type

from django.db import models, transaction
from django.utils import timezone

from brgy_core.audit.services import AuditService
from brgy_core.cms.models import Announcement, SystemSettings


def _entity_type(model: Type[models.Model]) -> str:
    return model.__name__


class ContentService:
    """
    Create/update/delete for the landing-page blocks. The model class is
    passed in, so one service covers Feature, Benefit, Testimonial,
    ServiceFeature and Announcement.
    """

    @staticmethod
    @transaction.atomic
    def create(*, actor_user_id: int, model, data: Dict[str, Any]):
        obj = model.objects.create(**data)
        AuditService.log(
            event_code="cms.content_created",
            entity_type=_entity_type(model),
            entity_id=obj.id,
            actor_user_id=actor_user_id,
            metadata={},
        )
        return obj

    @staticmethod
    @transaction.atomic
    def update(*, actor_user_id: int, obj, data: Dict[str, Any]):
        for field, value in data.items():
            setattr(obj, field, value)
        obj.save()
        AuditService.log(
            event_code="cms.content_updated",
            entity_type=_entity_type(type(obj)),
            entity_id=obj.id,
            actor_user_id=actor_user_id,
            metadata={"fields": sorted(data.keys())},
        )
        return obj

    @staticmethod
    @transaction.atomic
    def toggle_active(*, actor_user_id: int, obj):
        obj.is_active = not obj.is_active
        obj.save(update_fields=["is_active", "updated_at"])
        AuditService.log(
            event_code="cms.content_toggled",
            entity_type=_entity_type(type(obj)),
            entity_id=obj.id,
            actor_user_id=actor_user_id,
            metadata={"is_active": obj.is_active},
        )
        return obj

    @staticmethod
    @transaction.atomic
    def delete(*, actor_user_id: int, obj) -> None:
        entity_type, entity_id = _entity_type(type(obj)), obj.id
        obj.delete()
        AuditService.log(
            event_code="cms.content_deleted",
            entity_type=entity_type,
            entity_id=entity_id,
            actor_user_id=actor_user_id,
            metadata={},
        )


class AnnouncementService:
    @staticmethod
    @transaction.atomic
    def create(*, actor_user_id: int, data: Dict[str, Any]) -> Announcement:
        data = dict(data)
        data["created_by_id"] = actor_user_id
        return ContentService.create(actor_user_id=actor_user_id, model=Announcement, data=data)

    @staticmethod
    @transaction.atomic
    def publish(*, actor_user_id: int, announcement: Announcement) -> Announcement:
        announcement.published_at = timezone.now()
        announcement.save(update_fields=["published_at", "updated_at"])
        AuditService.log(
            event_code="cms.announcement_published",
            entity_type="Announcement",
            entity_id=announcement.id,
            actor_user_id=actor_user_id,
            metadata={"is_public": announcement.is_public},
        )
        return announcement


class SystemSettingsService:
    @staticmethod
    @transaction.atomic
    def update(*, actor_user_id: int, data: Dict[str, Any]) -> SystemSettings:
        obj = SystemSettings.load()
        for field, value in data.items():
            setattr(obj, field, value)
        obj.save()
        AuditService.log(
            event_code="cms.settings_updated",
            entity_type="SystemSettings",
            entity_id=obj.pk,
            actor_user_id=actor_user_id,
            metadata={"fields": sorted(data.keys())},
        )
        return obj
