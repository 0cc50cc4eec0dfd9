# brgy_core/certificates/services.py
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, Optional
from uuid import UUID

from django.contrib.auth import get_user_model
from django.db import transaction

from brgy_core.audit.services import AuditService
from brgy_core.certificates.models import Certificate
from brgy_core.common.names import display_name
from brgy_core.documents.pdf import render_pdf, slugify_filename_part

logger = logging.getLogger(__name__)

DATA_KEYS = ("certificate_number", "purpose", "achievements", "recommendations", "expiry_date")

FILENAME_PREFIX = {
    Certificate.Scope.DAYCARE: "daycare-certificate",
    Certificate.Scope.HEALTH: "health-certificate",
    Certificate.Scope.EVENT: "sk-certificate",
}


def resolve_issuer_name(issued_by) -> str:
    """
    A user id is turned into that user's name; anything else
    (a typed-in name, an unknown id) is kept as given.
    """
    if issued_by in (None, ""):
        return ""
    raw = str(issued_by).strip()
    if raw.isdigit():
        user = get_user_model().objects.filter(pk=int(raw)).first()
        if user is not None:
            return display_name(user, default=raw)
    return raw


def _data_value(value):
    if isinstance(value, date):
        return value.isoformat()
    return value


def pdf_context(cert: Certificate) -> Dict[str, Any]:
    data = cert.certificate_data or {}
    ctx = {
        "certificate_type": cert.certificate_type,
        "certificate_number": data.get("certificate_number") or "",
        "recipient_name": cert.recipient_name,
        "achievements": data.get("achievements") or "",
        "purpose": data.get("purpose") or "",
        "issued_for": cert.issued_for,
        "recommendations": data.get("recommendations") or "",
        "issued_date": cert.issued_date,
        "issued_by": cert.issued_by,
    }
    if cert.event_id:
        ctx["event_title"] = cert.event.title
        ctx["event_date"] = cert.event.event_date
    return ctx


def render_certificate_pdf(cert: Certificate) -> bytes:
    return render_pdf("documents/certificate.html", pdf_context(cert))


def certificate_filename(cert: Certificate) -> str:
    return f"{FILENAME_PREFIX[cert.scope]}-{slugify_filename_part(cert.recipient_name)}.pdf"


class CertificateService:
    @staticmethod
    @transaction.atomic
    def create_certificate(
        *,
        actor_user_id: int | None,
        scope: str,
        subject,
        certificate_type: str,
        data: Dict[str, Any],
    ) -> Certificate:
        """
        subject is the DaycareStudent (DAYCARE) or Patient (HEALTH).
        """
        cert_data = {k: _data_value(data.get(k)) for k in DATA_KEYS}

        cert = Certificate(
            scope=scope,
            certificate_type=certificate_type,
            recipient_name=data.get("recipient_name") or f"{subject.first_name} {subject.last_name}",
            issued_for=data.get("purpose") or certificate_type,
            issued_by=resolve_issuer_name(data.get("issued_by") or actor_user_id),
            certificate_data=cert_data,
            created_by_id=actor_user_id,
        )
        if data.get("issued_date"):
            cert.issued_date = data["issued_date"]
        if scope == Certificate.Scope.DAYCARE:
            cert.student = subject
        else:
            cert.patient = subject
        cert.save()

        AuditService.log(
            event_code="certificate.issued",
            entity_type="Certificate",
            entity_id=cert.id,
            actor_user_id=actor_user_id,
            metadata={"scope": scope, "certificate_type": certificate_type, "recipient": cert.recipient_name},
        )
        return cert

    @staticmethod
    @transaction.atomic
    def update_certificate(*, actor_user_id: int | None, certificate_id: UUID, data: Dict[str, Any]) -> Certificate:
        """Fields missing from data keep their stored values."""
        cert = Certificate.objects.select_for_update().get(id=certificate_id)

        if data.get("certificate_type"):
            cert.certificate_type = data["certificate_type"]
        if data.get("purpose"):
            cert.issued_for = data["purpose"]
        if data.get("issued_by"):
            cert.issued_by = resolve_issuer_name(data["issued_by"])
        if data.get("issued_date"):
            cert.issued_date = data["issued_date"]
        if data.get("recipient_name"):
            cert.recipient_name = data["recipient_name"]

        merged = dict(cert.certificate_data or {})
        for key in DATA_KEYS:
            if key in data:
                merged[key] = _data_value(data[key])
        cert.certificate_data = merged
        cert.save()

        AuditService.log(
            event_code="certificate.updated",
            entity_type="Certificate",
            entity_id=cert.id,
            actor_user_id=actor_user_id,
            metadata={"updated_fields": sorted(data.keys())},
        )
        return cert

    @staticmethod
    @transaction.atomic
    def delete_certificate(*, actor_user_id: int | None, certificate_id: UUID) -> None:
        cert = Certificate.objects.get(id=certificate_id)
        meta = {"scope": cert.scope, "recipient": cert.recipient_name}
        cert.delete()

        AuditService.log(
            event_code="certificate.deleted",
            entity_type="Certificate",
            entity_id=certificate_id,
            actor_user_id=actor_user_id,
            metadata=meta,
        )

    @staticmethod
    @transaction.atomic
    def issue_event_certificate(
        *,
        actor_user_id: int | None,
        event,
        user,
        certificate_type: str,
        issued_by: Optional[str] = None,
    ) -> Certificate:
        """
        Participation certificate for an attendee. Callers check attendance.
        """
        cert = Certificate.objects.create(
            scope=Certificate.Scope.EVENT,
            event=event,
            recipient_user=user,
            certificate_type=certificate_type,
            recipient_name=display_name(user, default=user.email),
            issued_for=event.title,
            issued_by=resolve_issuer_name(issued_by if issued_by else actor_user_id),
            certificate_data={k: None for k in DATA_KEYS},
            created_by_id=actor_user_id,
        )

        AuditService.log(
            event_code="certificate.issued",
            entity_type="Certificate",
            entity_id=cert.id,
            actor_user_id=actor_user_id,
            metadata={"scope": cert.scope, "event_id": str(event.id), "user_id": user.id},
        )
        logger.info("Event certificate issued event_id=%s user_id=%s", event.id, user.id)
        return cert
