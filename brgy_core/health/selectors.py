# brgy_core/health/selectors.py
from __future__ import annotations

from typing import Optional
from uuid import UUID

from django.db.models import Q, QuerySet

from brgy_core.health.models import ImmunizationCard, ImmunizationRecord, Patient
from brgy_core.health.permissions import can_read_all_health


def visible_patients(user) -> QuerySet:
    qs = Patient.objects.all()
    if can_read_all_health(user):
        return qs
    return qs.filter(guardian=user)


def search_patients(*, user, q: str = "", gender: Optional[str] = None) -> QuerySet:
    qs = visible_patients(user)
    if q:
        qs = qs.filter(
            Q(first_name__icontains=q)
            | Q(last_name__icontains=q)
            | Q(middle_name__icontains=q)
            | Q(mother_name__icontains=q)
            | Q(contact_number__icontains=q)
            | Q(philhealth_number__icontains=q)
        )
    if gender:
        qs = qs.filter(gender=gender.upper())
    return qs.order_by("last_name", "first_name")


def get_visible_patient(*, user, patient_id) -> Patient:
    """Raises Patient.DoesNotExist (also for someone else's child)."""
    return visible_patients(user).get(id=patient_id)


def list_immunization_records(*, user, patient_id: Optional[UUID] = None) -> QuerySet:
    qs = ImmunizationRecord.objects.select_related("patient", "recorded_by")
    if not can_read_all_health(user):
        qs = qs.filter(patient__guardian=user)
    if patient_id:
        qs = qs.filter(patient_id=patient_id)
    return qs.order_by("-date_given", "-created_at")


def my_immunization_records(*, user) -> QuerySet:
    return (
        ImmunizationRecord.objects.select_related("patient")
        .filter(patient__guardian=user)
        .order_by("-date_given", "-created_at")
    )


def list_immunization_cards(*, user, patient_id: Optional[UUID] = None) -> QuerySet:
    qs = ImmunizationCard.objects.select_related("patient")
    if not can_read_all_health(user):
        qs = qs.filter(patient__guardian=user)
    if patient_id:
        qs = qs.filter(patient_id=patient_id)
    return qs.order_by("-created_at")


def get_visible_card(*, user, card_id) -> ImmunizationCard:
    return list_immunization_cards(user=user).get(id=card_id)
