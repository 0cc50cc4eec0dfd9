# brgy_core/iam/services/accounts.py
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from brgy_core.audit.services import AuditService
from brgy_core.common.api.exceptions import ConflictError, ServiceUnavailableError
from brgy_core.common.permissions import ALL_ROLES, ROLE_PARENT_RESIDENT
from brgy_core.common.storage import (
    FOLDER_PROOFS_OF_RESIDENCY,
    StorageError,
    delete_file,
    discard_file,
    upload_file,
)
from brgy_core.iam.models import ResidentProfile, VerificationCode
from brgy_core.iam.services.codes import InvalidCodeError, VerificationCodeService
from brgy_core.notifications.services import send_login_otp_email, send_password_reset_email

logger = logging.getLogger(__name__)

User = get_user_model()

INVALID_CREDENTIALS_MSG = "Invalid email or password"
FORGOT_PASSWORD_MSG = "If an account with that email exists, a password reset code has been sent."

PROFILE_FIELDS = {
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
}
USER_FIELDS = {"first_name", "last_name"}


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def find_user_by_email(email: str):
    return User.objects.filter(email__iexact=normalize_email(email)).first()


def profile_for(user) -> Optional[ResidentProfile]:
    try:
        return user.resident_profile
    except ResidentProfile.DoesNotExist:
        return None


def _assert_can_login(user) -> None:
    profile = profile_for(user)
    status = profile.status if profile else (
        ResidentProfile.Status.ACTIVE if user.is_active else ResidentProfile.Status.INACTIVE
    )
    if status == ResidentProfile.Status.PENDING:
        raise PermissionDenied("Account pending approval")
    if status != ResidentProfile.Status.ACTIVE or not user.is_active:
        raise PermissionDenied("Account is inactive")


def _set_groups(user, roles: Iterable[str]) -> list[str]:
    roles = sorted(set(roles))
    unknown = [r for r in roles if r not in ALL_ROLES]
    if unknown:
        raise ValidationError({"roles": f"Unknown role(s): {', '.join(unknown)}"})
    groups = [Group.objects.get_or_create(name=r)[0] for r in roles]
    user.groups.set(groups)
    return roles


class AuthService:
    @staticmethod
    def check_credentials(*, email: str, password: str):
        """
        Returns the user for a valid email/password of an ACTIVE account.
        400 on bad credentials, 403 when the account may not log in yet.
        """
        user = find_user_by_email(email)
        if user is None or not user.check_password(password or ""):
            raise ValidationError({"detail": INVALID_CREDENTIALS_MSG})
        _assert_can_login(user)
        return user

    @staticmethod
    def send_login_otp(*, email: str, password: str) -> Dict[str, Any]:
        user = AuthService.check_credentials(email=email, password=password)
        return AuthService._deliver_login_otp(user)

    @staticmethod
    def resend_login_otp(*, email: str) -> Dict[str, Any]:
        user = find_user_by_email(email)
        if user is None or not VerificationCodeService.has_pending(user=user, purpose=VerificationCode.Purpose.LOGIN_OTP):
            raise ValidationError({"detail": "No pending login found. Please log in again."})
        _assert_can_login(user)
        return AuthService._deliver_login_otp(user)

    @staticmethod
    def _deliver_login_otp(user) -> Dict[str, Any]:
        code = VerificationCodeService.issue(user=user, purpose=VerificationCode.Purpose.LOGIN_OTP)
        result = send_login_otp_email(email=user.email, code=code, first_name=user.first_name)
        if not result.success:
            raise ServiceUnavailableError(result.error)
        return {"detail": "Verification code sent to your email", "email": user.email}

    @staticmethod
    def verify_login_otp(*, email: str, code: str):
        user = find_user_by_email(email)
        if user is None:
            raise ValidationError({"detail": "Invalid or expired verification code"})
        try:
            VerificationCodeService.verify(user=user, purpose=VerificationCode.Purpose.LOGIN_OTP, code=code)
        except InvalidCodeError as e:
            msg = str(e)
            if msg == "Invalid or expired code":
                msg = "Invalid or expired verification code"
            raise ValidationError({"detail": msg})
        _assert_can_login(user)
        return user

    @staticmethod
    def forgot_password(*, email: str) -> Dict[str, Any]:
        user = find_user_by_email(email)
        if user is None:
            logger.info("Password reset requested for unknown email")
            return {"detail": FORGOT_PASSWORD_MSG}

        code = VerificationCodeService.issue(user=user, purpose=VerificationCode.Purpose.PASSWORD_RESET)
        result = send_password_reset_email(email=user.email, code=code, first_name=user.first_name)
        if not result.success:
            raise ServiceUnavailableError(result.error)

        AuditService.log(
            event_code="user.password_reset_requested",
            entity_type="User",
            entity_id=user.id,
            actor_user_id=None,
            metadata={"provider": result.provider},
        )
        return {"detail": FORGOT_PASSWORD_MSG}

    @staticmethod
    def verify_reset_code(*, email: str, code: str) -> Dict[str, Any]:
        user = find_user_by_email(email)
        try:
            if user is None:
                raise InvalidCodeError("Invalid or expired reset code")
            VerificationCodeService.verify(
                user=user, purpose=VerificationCode.Purpose.PASSWORD_RESET, code=code, consume=False
            )
        except InvalidCodeError:
            raise ValidationError({"detail": "Invalid or expired reset code"})
        return {"valid": True}

    @staticmethod
    def reset_password(*, email: str, code: str, new_password: str) -> Dict[str, Any]:
        user = find_user_by_email(email)
        try:
            if user is None:
                raise InvalidCodeError("Invalid or expired reset code")
            VerificationCodeService.verify(user=user, purpose=VerificationCode.Purpose.PASSWORD_RESET, code=code)
        except InvalidCodeError:
            raise ValidationError({"detail": "Invalid or expired reset code"})

        user.set_password(new_password)
        user.save(update_fields=["password"])

        AuditService.log(
            event_code="user.password_reset",
            entity_type="User",
            entity_id=user.id,
            actor_user_id=user.id,
            metadata={},
        )
        return {"detail": "Password has been reset successfully"}


class AccountService:
    @staticmethod
    @transaction.atomic
    def register_resident(
        *,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        proof_of_residency,
        profile: Dict[str, Any],
    ) -> ResidentProfile:
        email = normalize_email(email)
        if User.objects.filter(email__iexact=email).exists() or User.objects.filter(username__iexact=email).exists():
            raise ConflictError("Email already registered")

        try:
            proof_path = upload_file(FOLDER_PROOFS_OF_RESIDENCY, proof_of_residency)
        except StorageError as e:
            raise ServiceUnavailableError(str(e))

        try:
            user = User.objects.create_user(
                username=email,
                email=email,
                password=password,
                first_name=first_name.strip(),
                last_name=last_name.strip(),
                is_active=False,
            )
            _set_groups(user, [ROLE_PARENT_RESIDENT])

            fields = {k: v for k, v in (profile or {}).items() if k in PROFILE_FIELDS}
            resident = ResidentProfile.objects.create(
                user=user,
                proof_of_residency=proof_path,
                consent_agreed_at=timezone.now(),
                status=ResidentProfile.Status.PENDING,
                **fields,
            )

            AuditService.log(
                event_code="user.registered",
                entity_type="User",
                entity_id=user.id,
                actor_user_id=None,
                metadata={"profile_id": str(resident.id)},
            )
        except Exception:
            discard_file(proof_path)
            raise

        logger.info("Resident registered user_id=%s status=PENDING", user.id)
        return resident

    @staticmethod
    @transaction.atomic
    def update_profile(*, user, data: Dict[str, Any]) -> None:
        user_updates = {k: v for k, v in data.items() if k in USER_FIELDS}
        for k, v in user_updates.items():
            setattr(user, k, v)
        if user_updates:
            user.save(update_fields=sorted(user_updates))

        profile_updates = {k: v for k, v in data.items() if k in PROFILE_FIELDS}
        if profile_updates:
            profile, _ = ResidentProfile.objects.get_or_create(
                user=user, defaults={"status": ResidentProfile.Status.ACTIVE}
            )
            for k, v in profile_updates.items():
                setattr(profile, k, v)
            profile.save()

        AuditService.log(
            event_code="user.profile_updated",
            entity_type="User",
            entity_id=user.id,
            actor_user_id=user.id,
            metadata={"updated_fields": sorted([*user_updates, *profile_updates])},
        )


class UserAdminService:
    @staticmethod
    def get_user(user_id: int):
        try:
            return User.objects.get(pk=user_id)
        except (User.DoesNotExist, ValueError):
            raise NotFound("User not found")

    @staticmethod
    @transaction.atomic
    def create_user(
        *,
        actor_user_id: int | None,
        email: str,
        password: str,
        first_name: str = "",
        last_name: str = "",
        roles: Iterable[str] = (),
        profile: Optional[Dict[str, Any]] = None,
    ):
        email = normalize_email(email)
        if User.objects.filter(email__iexact=email).exists():
            raise ConflictError("Email already registered")

        user = User.objects.create_user(
            username=email,
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            is_active=True,
        )
        applied = _set_groups(user, roles)
        fields = {k: v for k, v in (profile or {}).items() if k in PROFILE_FIELDS}
        ResidentProfile.objects.create(user=user, status=ResidentProfile.Status.ACTIVE, **fields)

        AuditService.log(
            event_code="user.created",
            entity_type="User",
            entity_id=user.id,
            actor_user_id=actor_user_id,
            metadata={"roles": applied},
        )
        return user

    @staticmethod
    @transaction.atomic
    def update_user(*, actor_user_id: int | None, user_id: int, data: Dict[str, Any]):
        user = UserAdminService.get_user(user_id)

        if "email" in data:
            email = normalize_email(data["email"])
            if User.objects.filter(email__iexact=email).exclude(pk=user.pk).exists():
                raise ConflictError("Email already registered")
            user.email = email
            user.username = email
        for k in USER_FIELDS:
            if k in data:
                setattr(user, k, data[k])
        if data.get("password"):
            user.set_password(data["password"])
        user.save()

        if "roles" in data:
            _set_groups(user, data["roles"])

        profile_updates = {k: v for k, v in data.items() if k in PROFILE_FIELDS}
        if profile_updates:
            profile, _ = ResidentProfile.objects.get_or_create(user=user)
            for k, v in profile_updates.items():
                setattr(profile, k, v)
            profile.save()

        AuditService.log(
            event_code="user.updated",
            entity_type="User",
            entity_id=user.id,
            actor_user_id=actor_user_id,
            metadata={"updated_fields": sorted(k for k in data if k != "password")},
        )
        return user

    @staticmethod
    @transaction.atomic
    def set_status(*, actor_user_id: int | None, user_id: int, status: str):
        if status not in ResidentProfile.Status.values:
            raise ValidationError({"status": f"Invalid status. Allowed: {', '.join(ResidentProfile.Status.values)}"})

        user = UserAdminService.get_user(user_id)
        profile, _ = ResidentProfile.objects.get_or_create(user=user)
        previous = profile.status

        profile.status = status
        profile.save(update_fields=["status", "updated_at"])

        user.is_active = status == ResidentProfile.Status.ACTIVE
        user.save(update_fields=["is_active"])

        AuditService.log(
            event_code="user.status_changed",
            entity_type="User",
            entity_id=user.id,
            actor_user_id=actor_user_id,
            metadata={"from": previous, "to": status},
        )
        logger.info("User status changed user_id=%s %s -> %s", user.id, previous, status)
        return user

    @staticmethod
    @transaction.atomic
    def set_roles(*, actor_user_id: int | None, user_id: int, roles: Iterable[str]):
        user = UserAdminService.get_user(user_id)
        applied = _set_groups(user, roles)

        AuditService.log(
            event_code="user.roles_changed",
            entity_type="User",
            entity_id=user.id,
            actor_user_id=actor_user_id,
            metadata={"roles": applied},
        )
        return user

    @staticmethod
    @transaction.atomic
    def delete_user(*, actor_user_id: int | None, user_id: int) -> None:
        user = UserAdminService.get_user(user_id)
        if actor_user_id is not None and user.pk == actor_user_id:
            raise ValidationError({"detail": "You cannot delete your own account"})

        profile = profile_for(user)
        proof_path = profile.proof_of_residency if profile else ""
        email = user.email
        user.delete()

        AuditService.log(
            event_code="user.deleted",
            entity_type="User",
            entity_id=user_id,
            actor_user_id=actor_user_id,
            metadata={"email": email},
        )

        if proof_path:
            try:
                delete_file(proof_path)
            except StorageError:
                logger.exception("Proof of residency not removed path=%s", proof_path)
