# brgy_core/health/permissions.py
from brgy_core.common.permissions import (
    EVERYONE,
    HEALTH_STAFF,
    ROLE_BARANGAY_CAPTAIN,
    BaseRolePermission,
    has_any_role,
)

HEALTH_READERS = HEALTH_STAFF | {ROLE_BARANGAY_CAPTAIN}


def is_health_staff(user) -> bool:
    return has_any_role(user, HEALTH_STAFF)


def can_read_all_health(user) -> bool:
    return has_any_role(user, HEALTH_READERS)


class PatientPermission(BaseRolePermission):
    """
    Anyone signed in may read (parents are narrowed to their own children
    in the view). Writes are BHW / BHW coordinator.
    """
    allowed_roles_per_action = {
        "list": EVERYONE,
        "retrieve": EVERYONE,
        "immunization_status": EVERYONE,
        "create": HEALTH_STAFF,
        "update": HEALTH_STAFF,
        "partial_update": HEALTH_STAFF,
        "destroy": HEALTH_STAFF,
    }


class ImmunizationRecordPermission(BaseRolePermission):
    allowed_roles_per_action = {
        "list": EVERYONE,
        "retrieve": EVERYONE,
        "my": EVERYONE,
        "create": HEALTH_STAFF,
    }


class ImmunizationCardPermission(BaseRolePermission):
    allowed_roles_per_action = {
        "list": EVERYONE,
        "retrieve": EVERYONE,
        "summary": EVERYONE,
        "create": HEALTH_STAFF,
        "update": HEALTH_STAFF,
        "partial_update": HEALTH_STAFF,
        "doses": HEALTH_STAFF,
    }
