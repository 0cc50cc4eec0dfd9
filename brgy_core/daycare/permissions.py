# brgy_core/daycare/permissions.py
from brgy_core.common.permissions import (
    DAYCARE_STAFF,
    EVERYONE,
    ROLE_BARANGAY_CAPTAIN,
    BaseRolePermission,
    has_any_role,
)

DAYCARE_READERS = DAYCARE_STAFF | {ROLE_BARANGAY_CAPTAIN}


def is_daycare_staff(user) -> bool:
    return has_any_role(user, DAYCARE_STAFF)


def can_read_all_daycare(user) -> bool:
    return has_any_role(user, DAYCARE_READERS)


class DaycareRegistrationPermission(BaseRolePermission):
    """Any signed-in parent may apply and see their own applications."""
    allowed_roles_per_action = {
        "create": EVERYONE,
        "my": EVERYONE,
        "list": DAYCARE_READERS,
        "retrieve": DAYCARE_READERS,
        "update": DAYCARE_STAFF,
        "partial_update": DAYCARE_STAFF,
        "destroy": DAYCARE_STAFF,
        "approve": DAYCARE_STAFF,
        "reject": DAYCARE_STAFF,
    }


class DaycareStudentPermission(BaseRolePermission):
    allowed_roles_per_action = {
        "list": DAYCARE_READERS,
        "retrieve": DAYCARE_READERS,
        "shifts": DAYCARE_READERS,
        "create": DAYCARE_STAFF,
        "update": DAYCARE_STAFF,
        "partial_update": DAYCARE_STAFF,
        "shift": DAYCARE_STAFF,
        "random_assign": DAYCARE_STAFF,
        "clear_shifts": DAYCARE_STAFF,
    }


class AttendancePermission(BaseRolePermission):
    allowed_roles_per_action = {
        "list": DAYCARE_READERS,
        "retrieve": DAYCARE_READERS,
        "summary": DAYCARE_READERS,
        "create": DAYCARE_STAFF,
        "update": DAYCARE_STAFF,
        "partial_update": DAYCARE_STAFF,
        "destroy": DAYCARE_STAFF,
    }


class ProgressReportPermission(BaseRolePermission):
    """Parents reach their own children's reports through my/ and download/."""
    allowed_roles_per_action = {
        "list": DAYCARE_READERS,
        "retrieve": DAYCARE_READERS,
        "my": EVERYONE,
        "download": EVERYONE,
        "create": DAYCARE_STAFF,
        "update": DAYCARE_STAFF,
        "partial_update": DAYCARE_STAFF,
        "destroy": DAYCARE_STAFF,
    }


class LearningMaterialPermission(BaseRolePermission):
    allowed_roles_per_action = {
        "list": EVERYONE,
        "retrieve": EVERYONE,
        "download": EVERYONE,
        "download_url": EVERYONE,
        "create": DAYCARE_STAFF,
        "update": DAYCARE_STAFF,
        "partial_update": DAYCARE_STAFF,
        "destroy": DAYCARE_STAFF,
    }
