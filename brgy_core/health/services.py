# brgy_core/health/services.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from uuid import UUID

from django.db import IntegrityError, transaction

from brgy_core.audit.services import AuditService
from brgy_core.common.api.exceptions import ConflictError
from brgy_core.health import schedule
from brgy_core.health.models import ImmunizationCard, ImmunizationRecord, Patient

logger = logging.getLogger(__name__)

PATIENT_FIELDS = {
    "first_name",
    "middle_name",
    "last_name",
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
}


class PatientService:
    @staticmethod
    @transaction.atomic
    def create_patient(*, actor_user_id: int | None, data: Dict[str, Any]) -> Patient:
        fields = {k: v for k, v in data.items() if k in PATIENT_FIELDS}
        patient = Patient.objects.create(created_by_id=actor_user_id, **fields)

        AuditService.log(
            event_code="patient.created",
            entity_type="Patient",
            entity_id=patient.id,
            actor_user_id=actor_user_id,
            metadata={"name": patient.full_name},
        )
        return patient

    @staticmethod
    @transaction.atomic
    def update_patient(*, actor_user_id: int | None, patient_id: UUID, data: Dict[str, Any]) -> Patient:
        patient = Patient.objects.get(id=patient_id)

        updates = {k: v for k, v in (data or {}).items() if k in PATIENT_FIELDS}
        for k, v in updates.items():
            setattr(patient, k, v)
        patient.save()

        AuditService.log(
            event_code="patient.updated",
            entity_type="Patient",
            entity_id=patient.id,
            actor_user_id=actor_user_id,
            metadata={"updated_fields": sorted(updates.keys())},
        )
        return patient

    @staticmethod
    @transaction.atomic
    def delete_patient(*, actor_user_id: int | None, patient_id: UUID) -> None:
        patient = Patient.objects.get(id=patient_id)
        name = patient.full_name
        patient.delete()

        AuditService.log(
            event_code="patient.deleted",
            entity_type="Patient",
            entity_id=patient_id,
            actor_user_id=actor_user_id,
            metadata={"name": name},
        )


class ImmunizationRecordService:
    @staticmethod
    @transaction.atomic
    def create_record(*, actor_user_id: int | None, patient_id: UUID, data: Dict[str, Any]) -> ImmunizationRecord:
        patient = Patient.objects.get(id=patient_id)

        fields = dict(data)
        if not fields.get("age_at_vaccination"):
            fields["age_at_vaccination"] = schedule.age_label(patient.date_of_birth, fields["date_given"])

        record = ImmunizationRecord.objects.create(patient=patient, recorded_by_id=actor_user_id, **fields)

        AuditService.log(
            event_code="immunization_record.created",
            entity_type="ImmunizationRecord",
            entity_id=record.id,
            actor_user_id=actor_user_id,
            metadata={"patient_id": str(patient.id), "vaccine_name": record.vaccine_name},
        )
        return record


class ImmunizationCardService:
    @staticmethod
    @transaction.atomic
    def create_card(*, actor_user_id: int | None, patient_id: UUID) -> ImmunizationCard:
        patient = Patient.objects.get(id=patient_id)
        if ImmunizationCard.objects.filter(patient=patient).exists():
            raise ConflictError("Immunization card already exists for this patient")

        try:
            with transaction.atomic():
                card = ImmunizationCard.objects.create(
                    patient=patient,
                    card_data=schedule.build_card_data(patient),
                    created_by_id=actor_user_id,
                )
        except IntegrityError:
            raise ConflictError("Immunization card already exists for this patient")

        AuditService.log(
            event_code="immunization_card.created",
            entity_type="ImmunizationCard",
            entity_id=card.id,
            actor_user_id=actor_user_id,
            metadata={"patient_id": str(patient.id)},
        )
        logger.info("Immunization card created card_id=%s patient_id=%s", card.id, patient.id)
        return card

    @staticmethod
    @transaction.atomic
    def replace_doses(*, actor_user_id: int | None, card_id: UUID, card_data: Dict[str, Any]) -> ImmunizationCard:
        """
        Raises ValueError when card_data does not match the stored schedule.
        """
        card = ImmunizationCard.objects.select_for_update().get(id=card_id)
        card.card_data = schedule.merge_schedule(card.card_data, card_data)
        card.save(update_fields=["card_data", "updated_at"])

        AuditService.log(
            event_code="immunization_card.updated",
            entity_type="ImmunizationCard",
            entity_id=card.id,
            actor_user_id=actor_user_id,
            metadata={"patient_id": str(card.patient_id)},
        )
        return card

    @staticmethod
    @transaction.atomic
    def update_dose(
        *,
        actor_user_id: int | None,
        card_id: UUID,
        vaccine_index: int,
        dose_index: int,
        date_given=None,
        remarks: Optional[str] = None,
    ) -> ImmunizationCard:
        card = ImmunizationCard.objects.select_for_update().get(id=card_id)
        card.card_data = schedule.set_dose(
            card.card_data,
            vaccine_index=vaccine_index,
            dose_index=dose_index,
            date_given=date_given,
            remarks=remarks,
        )
        card.save(update_fields=["card_data", "updated_at"])

        dose = card.card_data["vaccination_schedule"][vaccine_index]["doses"][dose_index]
        AuditService.log(
            event_code="immunization_card.dose_updated",
            entity_type="ImmunizationCard",
            entity_id=card.id,
            actor_user_id=actor_user_id,
            metadata={
                "vaccine": card.card_data["vaccination_schedule"][vaccine_index].get("vaccine"),
                "dose_number": dose.get("number"),
                "date_given": dose.get("date_given"),
            },
        )
        return card
