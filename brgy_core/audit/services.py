# brgy_core/audit/services.py
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from django.core.serializers.json import DjangoJSONEncoder
from django.db import transaction

from brgy_core.audit.models import AuditEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuditRecord:
    event_code: str
    entity_type: str
    entity_id: str
    actor_user_id: int | None
    metadata: Dict[str, Any]


def _json_safe(metadata: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    # UUIDs, dates and Decimals become strings so the JSONField accepts them
    return json.loads(json.dumps(metadata or {}, cls=DjangoJSONEncoder))


class AuditService:
    """
    Central audit writer. Every mutating workflow in the portal (approvals,
    shift changes, certificate issuance, CMS edits...) lands here as one
    AuditEvent row. Rows are never updated or deleted.
    """

    @staticmethod
    @transaction.atomic
    def log(
        *,
        event_code: str,
        entity_type: str,
        entity_id: Any,
        actor_user_id: int | None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> AuditRecord:
        record = AuditRecord(
            event_code=event_code,
            entity_type=entity_type,
            entity_id=str(entity_id),
            actor_user_id=actor_user_id,
            metadata=_json_safe(metadata),
        )
        AuditEvent.objects.create(
            event_code=record.event_code,
            entity_type=record.entity_type,
            entity_id=record.entity_id,
            actor_user_id=record.actor_user_id,
            metadata=record.metadata,
        )
        logger.debug("audit %s %s:%s actor=%s", event_code, entity_type, record.entity_id, actor_user_id)
        return record
