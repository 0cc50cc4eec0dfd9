# brgy_core/cms/permissions.py
from brgy_core.common.permissions import ROLE_BARANGAY_CAPTAIN, BaseRolePermission

CAPTAIN = {ROLE_BARANGAY_CAPTAIN}


class ContentPermission(BaseRolePermission):
    """Landing-page content is edited by SYSTEM_ADMIN only."""
    allowed_roles_per_action = {}


class AnnouncementPermission(BaseRolePermission):
    allowed_roles_per_action = {
        "list": CAPTAIN,
        "retrieve": CAPTAIN,
        "create": CAPTAIN,
        "update": CAPTAIN,
        "partial_update": CAPTAIN,
        "destroy": CAPTAIN,
        "publish": CAPTAIN,
    }
