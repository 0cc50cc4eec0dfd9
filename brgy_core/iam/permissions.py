# brgy_core/iam/permissions.py
from brgy_core.common.permissions import ROLE_BARANGAY_CAPTAIN, BaseRolePermission


class UserAdminPermission(BaseRolePermission):
    """
    User management is SYSTEM_ADMIN only; the captain may browse.
    """
    allowed_roles_per_action = {
        "list": {ROLE_BARANGAY_CAPTAIN},
        "retrieve": {ROLE_BARANGAY_CAPTAIN},
    }
