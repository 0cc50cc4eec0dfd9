# brgy_core/daycare/services.py
from __future__ import annotations

import logging
import re
from datetime import date, datetime, time
from typing import Any, Dict, Optional, Tuple
from uuid import UUID

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone
from django.utils.dateparse import parse_datetime
from rest_framework.exceptions import NotFound, ValidationError

from brgy_core.audit.services import AuditService
from brgy_core.common.api.exceptions import ConflictError, ServiceUnavailableError
from brgy_core.common.storage import (
    FOLDER_LEARNING_MATERIALS,
    StorageError,
    delete_file,
    discard_file,
    upload_file,
)
from brgy_core.daycare import shifts
from brgy_core.daycare.models import (
    AttendanceRecord,
    DaycareRegistration,
    DaycareStudent,
    LearningMaterial,
    ProgressReport,
)

logger = logging.getLogger(__name__)

DIRECT_ENROLLMENT_CONTACT = "Direct Enrollment"
DIRECT_ENROLLMENT_NOTES = "Direct enrollment by staff"
ALREADY_PROCESSED_MSG = "Registration already processed"
DUPLICATE_ATTENDANCE_MSG = "Attendance already recorded for this student on this date. Use update instead."

_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")

REGISTRATION_FIELDS = {
    "child_first_name",
    "child_middle_name",
    "child_last_name",
    "child_date_of_birth",
    "child_gender",
    "address",
    "parent_contact",
    "emergency_contact",
    "notes",
}

STUDENT_FIELDS = {
    "first_name",
    "middle_name",
    "last_name",
    "date_of_birth",
    "gender",
    "address",
    "emergency_contact",
    "allergies",
    "medical_conditions",
    "enrollment_date",
    "is_active",
}

REPORT_FIELDS = {
    "reporting_period",
    "academic_performance",
    "social_behavior",
    "physical_development",
    "emotional_development",
    "recommendations",
}


def parse_clock(value, day: date) -> Optional[datetime]:
    """
    "08:30" -> that time on `day` in the current timezone.
    ISO datetimes pass through. Empty -> None. Raises ValueError otherwise.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        raw = str(value).strip()
        m = _CLOCK_RE.match(raw)
        if m:
            hour, minute, second = int(m.group(1)), int(m.group(2)), int(m.group(3) or 0)
            if hour > 23 or minute > 59 or second > 59:
                raise ValueError(f"Invalid time: {raw}")
            return timezone.make_aware(datetime.combine(day, time(hour, minute, second)))
        dt = parse_datetime(raw)
        if dt is None:
            raise ValueError(f"Invalid time: {raw}")
    if timezone.is_naive(dt):
        dt = timezone.make_aware(dt)
    return dt


def _get_registration_for_review(registration_id: UUID) -> DaycareRegistration:
    try:
        reg = DaycareRegistration.objects.select_for_update().get(id=registration_id)
    except DaycareRegistration.DoesNotExist:
        raise NotFound("Registration not found")
    if reg.status != DaycareRegistration.Status.PENDING:
        raise ConflictError(ALREADY_PROCESSED_MSG)
    return reg


class DaycareRegistrationService:
    @staticmethod
    @transaction.atomic
    def create_registration(*, parent, data: Dict[str, Any]) -> DaycareRegistration:
        fields = {k: v for k, v in data.items() if k in REGISTRATION_FIELDS}
        reg = DaycareRegistration.objects.create(parent=parent, **fields)

        AuditService.log(
            event_code="daycare_registration.submitted",
            entity_type="DaycareRegistration",
            entity_id=reg.id,
            actor_user_id=parent.id,
            metadata={"child_name": reg.child_name},
        )
        return reg

    @staticmethod
    @transaction.atomic
    def update_registration(*, actor_user_id: int | None, registration_id: UUID, data: Dict[str, Any]) -> DaycareRegistration:
        reg = DaycareRegistration.objects.get(id=registration_id)

        updates = {k: v for k, v in (data or {}).items() if k in REGISTRATION_FIELDS}
        for k, v in updates.items():
            setattr(reg, k, v)
        reg.save()

        AuditService.log(
            event_code="daycare_registration.updated",
            entity_type="DaycareRegistration",
            entity_id=reg.id,
            actor_user_id=actor_user_id,
            metadata={"updated_fields": sorted(updates.keys())},
        )
        return reg

    @staticmethod
    @transaction.atomic
    def approve(
        *,
        actor_user_id: int | None,
        registration_id: UUID,
        notes: str = "",
        allergies: str = "",
        medical_conditions: str = "",
    ) -> Tuple[DaycareRegistration, DaycareStudent]:
        reg = _get_registration_for_review(registration_id)

        reg.status = DaycareRegistration.Status.APPROVED
        reg.reviewed_at = timezone.now()
        reg.reviewed_by_id = actor_user_id
        if notes:
            reg.notes = notes
        reg.save()

        student = DaycareStudent.objects.create(
            registration=reg,
            first_name=reg.child_first_name,
            middle_name=reg.child_middle_name,
            last_name=reg.child_last_name,
            date_of_birth=reg.child_date_of_birth,
            gender=reg.child_gender,
            address=reg.address,
            emergency_contact=reg.emergency_contact,
            allergies=allergies or "",
            medical_conditions=medical_conditions or "",
        )

        AuditService.log(
            event_code="daycare_registration.approved",
            entity_type="DaycareRegistration",
            entity_id=reg.id,
            actor_user_id=actor_user_id,
            metadata={"student_id": str(student.id), "child_name": reg.child_name},
        )
        logger.info("Daycare registration approved registration_id=%s student_id=%s", reg.id, student.id)
        return reg, student

    @staticmethod
    @transaction.atomic
    def reject(*, actor_user_id: int | None, registration_id: UUID, notes: str = "") -> DaycareRegistration:
        reg = _get_registration_for_review(registration_id)

        reg.status = DaycareRegistration.Status.REJECTED
        reg.reviewed_at = timezone.now()
        reg.reviewed_by_id = actor_user_id
        if notes:
            reg.notes = notes
        reg.save()

        AuditService.log(
            event_code="daycare_registration.rejected",
            entity_type="DaycareRegistration",
            entity_id=reg.id,
            actor_user_id=actor_user_id,
            metadata={"child_name": reg.child_name},
        )
        return reg

    @staticmethod
    @transaction.atomic
    def delete_registration(*, actor_user_id: int | None, registration_id: UUID) -> None:
        reg = DaycareRegistration.objects.get(id=registration_id)
        child_name = reg.child_name

        student = DaycareStudent.objects.filter(registration=reg).first()
        if student is not None:
            AttendanceRecord.objects.filter(student=student).delete()
            ProgressReport.objects.filter(student=student).delete()
            student.delete()
        reg.delete()

        AuditService.log(
            event_code="daycare_registration.deleted",
            entity_type="DaycareRegistration",
            entity_id=registration_id,
            actor_user_id=actor_user_id,
            metadata={"child_name": child_name, "had_student": student is not None},
        )


class DaycareStudentService:
    @staticmethod
    @transaction.atomic
    def enroll_direct(*, staff_user, data: Dict[str, Any]) -> DaycareStudent:
        """
        Staff enrollment without a parent application: an APPROVED
        registration owned by the staff user is created alongside.
        """
        now = timezone.now()
        reg = DaycareRegistration.objects.create(
            parent=staff_user,
            child_first_name=data["first_name"],
            child_middle_name=data.get("middle_name", ""),
            child_last_name=data["last_name"],
            child_date_of_birth=data["date_of_birth"],
            child_gender=data["gender"],
            address=data.get("address", ""),
            parent_contact=data.get("parent_contact") or DIRECT_ENROLLMENT_CONTACT,
            emergency_contact=data.get("emergency_contact", ""),
            status=DaycareRegistration.Status.APPROVED,
            submitted_at=now,
            reviewed_at=now,
            reviewed_by=staff_user,
            notes=DIRECT_ENROLLMENT_NOTES,
        )

        fields = {k: v for k, v in data.items() if k in STUDENT_FIELDS}
        student = DaycareStudent.objects.create(registration=reg, shift=data.get("shift"), **fields)

        AuditService.log(
            event_code="daycare_student.enrolled",
            entity_type="DaycareStudent",
            entity_id=student.id,
            actor_user_id=staff_user.id,
            metadata={"name": student.full_name, "direct": True},
        )
        return student

    @staticmethod
    @transaction.atomic
    def update_student(*, actor_user_id: int | None, student_id: UUID, data: Dict[str, Any]) -> DaycareStudent:
        student = DaycareStudent.objects.get(id=student_id)

        updates = {k: v for k, v in (data or {}).items() if k in STUDENT_FIELDS}
        for k, v in updates.items():
            setattr(student, k, v)
        student.save()

        AuditService.log(
            event_code="daycare_student.updated",
            entity_type="DaycareStudent",
            entity_id=student.id,
            actor_user_id=actor_user_id,
            metadata={"updated_fields": sorted(updates.keys())},
        )
        return student

    @staticmethod
    @transaction.atomic
    def set_shift(*, actor_user_id: int | None, student_id: UUID, shift: Optional[str]) -> DaycareStudent:
        student = DaycareStudent.objects.select_for_update().get(id=student_id)
        previous = student.shift
        student.shift = shifts.parse_shift(shift)
        student.save(update_fields=["shift", "updated_at"])

        AuditService.log(
            event_code="daycare_student.shift_changed",
            entity_type="DaycareStudent",
            entity_id=student.id,
            actor_user_id=actor_user_id,
            metadata={"from": previous, "to": student.shift},
        )
        return student

    @staticmethod
    @transaction.atomic
    def random_assign(*, actor_user_id: int | None, seed=None) -> Dict[str, int]:
        """
        Splits active unassigned students between the two shifts.
        Students that already have a shift keep it.
        """
        ids = list(
            DaycareStudent.objects.select_for_update()
            .filter(is_active=True, shift__isnull=True)
            .order_by("id")
            .values_list("id", flat=True)
        )
        assignments = shifts.assign_round_robin(ids, seed=seed)

        for shift in shifts.SHIFTS:
            chosen = [sid for sid, s in assignments.items() if s == shift]
            if chosen:
                DaycareStudent.objects.filter(id__in=chosen).update(shift=shift, updated_at=timezone.now())

        counts = shifts.count_by_shift(assignments)
        counts["assigned"] = len(assignments)

        AuditService.log(
            event_code="daycare_student.shifts_randomized",
            entity_type="DaycareStudent",
            entity_id="*",
            actor_user_id=actor_user_id,
            metadata={**counts, "seed": seed},
        )
        logger.info("Random shift assignment morning=%s afternoon=%s", counts["morning"], counts["afternoon"])
        return counts

    @staticmethod
    @transaction.atomic
    def clear_shifts(*, actor_user_id: int | None) -> int:
        cleared = DaycareStudent.objects.filter(shift__isnull=False).update(shift=None, updated_at=timezone.now())

        AuditService.log(
            event_code="daycare_student.shifts_cleared",
            entity_type="DaycareStudent",
            entity_id="*",
            actor_user_id=actor_user_id,
            metadata={"cleared": cleared},
        )
        return cleared


class AttendanceService:
    @staticmethod
    @transaction.atomic
    def record(
        *,
        actor_user_id: int | None,
        student_id: UUID,
        day: date,
        status: str,
        time_in=None,
        time_out=None,
        remarks: str = "",
    ) -> AttendanceRecord:
        student = DaycareStudent.objects.get(id=student_id)

        if AttendanceRecord.objects.filter(student=student, date=day).exists():
            raise ConflictError(DUPLICATE_ATTENDANCE_MSG)

        try:
            fields = {
                "time_in": parse_clock(time_in, day),
                "time_out": parse_clock(time_out, day),
            }
        except ValueError as e:
            raise ValidationError({"detail": str(e)})

        try:
            with transaction.atomic():
                record = AttendanceRecord.objects.create(
                    student=student,
                    date=day,
                    status=status,
                    remarks=remarks or "",
                    recorded_by_id=actor_user_id,
                    **fields,
                )
        except IntegrityError:
            raise ConflictError(DUPLICATE_ATTENDANCE_MSG)

        AuditService.log(
            event_code="daycare_attendance.recorded",
            entity_type="AttendanceRecord",
            entity_id=record.id,
            actor_user_id=actor_user_id,
            metadata={"student_id": str(student.id), "date": day.isoformat(), "status": status},
        )
        return record

    @staticmethod
    @transaction.atomic
    def update(*, actor_user_id: int | None, record_id: UUID, data: Dict[str, Any]) -> AttendanceRecord:
        record = AttendanceRecord.objects.select_for_update().get(id=record_id)

        if "status" in data:
            record.status = data["status"]
        try:
            for key in ("time_in", "time_out"):
                if key in data:
                    setattr(record, key, parse_clock(data[key], record.date))
        except ValueError as e:
            raise ValidationError({"detail": str(e)})
        if "remarks" in data:
            record.remarks = data["remarks"] or ""
        record.save()

        AuditService.log(
            event_code="daycare_attendance.updated",
            entity_type="AttendanceRecord",
            entity_id=record.id,
            actor_user_id=actor_user_id,
            metadata={"updated_fields": sorted(data.keys())},
        )
        return record

    @staticmethod
    @transaction.atomic
    def delete(*, actor_user_id: int | None, record_id: UUID) -> None:
        record = AttendanceRecord.objects.get(id=record_id)
        meta = {"student_id": str(record.student_id), "date": record.date.isoformat()}
        record.delete()

        AuditService.log(
            event_code="daycare_attendance.deleted",
            entity_type="AttendanceRecord",
            entity_id=record_id,
            actor_user_id=actor_user_id,
            metadata=meta,
        )


class ProgressReportService:
    @staticmethod
    @transaction.atomic
    def create_report(*, actor_user_id: int | None, student_id: UUID, data: Dict[str, Any]) -> ProgressReport:
        student = DaycareStudent.objects.get(id=student_id)
        fields = {k: v for k, v in data.items() if k in REPORT_FIELDS}
        report = ProgressReport.objects.create(student=student, generated_by_id=actor_user_id, **fields)

        AuditService.log(
            event_code="progress_report.created",
            entity_type="ProgressReport",
            entity_id=report.id,
            actor_user_id=actor_user_id,
            metadata={"student_id": str(student.id), "reporting_period": report.reporting_period},
        )
        return report

    @staticmethod
    @transaction.atomic
    def update_report(*, actor_user_id: int | None, report_id: UUID, data: Dict[str, Any]) -> ProgressReport:
        report = ProgressReport.objects.get(id=report_id)

        updates = {k: v for k, v in (data or {}).items() if k in REPORT_FIELDS}
        for k, v in updates.items():
            setattr(report, k, v)
        report.save()

        AuditService.log(
            event_code="progress_report.updated",
            entity_type="ProgressReport",
            entity_id=report.id,
            actor_user_id=actor_user_id,
            metadata={"updated_fields": sorted(updates.keys())},
        )
        return report

    @staticmethod
    @transaction.atomic
    def delete_report(*, actor_user_id: int | None, report_id: UUID) -> None:
        report = ProgressReport.objects.get(id=report_id)
        student_id = str(report.student_id)
        report.delete()

        AuditService.log(
            event_code="progress_report.deleted",
            entity_type="ProgressReport",
            entity_id=report_id,
            actor_user_id=actor_user_id,
            metadata={"student_id": student_id},
        )


class LearningMaterialService:
    MATERIAL_FIELDS = {"title", "description", "category", "is_public"}

    @staticmethod
    def create_material(*, actor_user_id: int | None, file, data: Dict[str, Any]) -> LearningMaterial:
        max_bytes = int(settings.PORTAL.get("LEARNING_MATERIAL_MAX_BYTES", 25 * 1024 * 1024))
        if file.size > max_bytes:
            raise ValidationError({"file": f"File too large. Maximum size is {max_bytes // (1024 * 1024)}MB."})

        try:
            path = upload_file(FOLDER_LEARNING_MATERIALS, file)
        except StorageError:
            raise ServiceUnavailableError("Failed to upload file to storage")

        fields = {k: v for k, v in data.items() if k in LearningMaterialService.MATERIAL_FIELDS}
        try:
            with transaction.atomic():
                material = LearningMaterial.objects.create(
                    file_path=path,
                    file_type=getattr(file, "content_type", "") or "",
                    file_size=file.size,
                    uploaded_by_id=actor_user_id,
                    **fields,
                )
                AuditService.log(
                    event_code="learning_material.uploaded",
                    entity_type="LearningMaterial",
                    entity_id=material.id,
                    actor_user_id=actor_user_id,
                    metadata={"title": material.title, "file_path": path, "is_public": material.is_public},
                )
        except Exception:
            discard_file(path)
            raise
        return material

    @staticmethod
    @transaction.atomic
    def update_material(*, actor_user_id: int | None, material_id: UUID, data: Dict[str, Any]) -> LearningMaterial:
        material = LearningMaterial.objects.get(id=material_id)

        updates = {k: v for k, v in (data or {}).items() if k in LearningMaterialService.MATERIAL_FIELDS}
        for k, v in updates.items():
            setattr(material, k, v)
        material.save()

        AuditService.log(
            event_code="learning_material.updated",
            entity_type="LearningMaterial",
            entity_id=material.id,
            actor_user_id=actor_user_id,
            metadata={"updated_fields": sorted(updates.keys())},
        )
        return material

    @staticmethod
    @transaction.atomic
    def delete_material(*, actor_user_id: int | None, material_id: UUID) -> None:
        material = LearningMaterial.objects.get(id=material_id)

        try:
            delete_file(material.file_path)
        except StorageError:
            logger.exception("Learning material file not removed material_id=%s path=%s", material.id, material.file_path)

        title = material.title
        material.delete()

        AuditService.log(
            event_code="learning_material.deleted",
            entity_type="LearningMaterial",
            entity_id=material_id,
            actor_user_id=actor_user_id,
            metadata={"title": title},
        )
