# brgy_core/reports/permissions.py

from __future__ import annotations

from brgy_core.common.permissions import (
    DAYCARE_STAFF,
    HEALTH_STAFF,
    ROLE_BARANGAY_CAPTAIN,
    SK_STAFF,
    BaseRolePermission,
    has_any_role,
)
from brgy_core.reports.builders import KIND_DAYCARE, KIND_HEALTH, KIND_SK

# SYSTEM_ADMIN is implied by has_any_role
REPORT_ROLES = {
    KIND_HEALTH: HEALTH_STAFF | {ROLE_BARANGAY_CAPTAIN},
    KIND_DAYCARE: DAYCARE_STAFF | {ROLE_BARANGAY_CAPTAIN},
    KIND_SK: SK_STAFF | {ROLE_BARANGAY_CAPTAIN},
}


class ReportPermission(BaseRolePermission):
    """Each report kind is readable by its module's staff and the captain."""

    def has_permission(self, request, view) -> bool:
        user = request.user
        if not user or not getattr(user, "is_authenticated", False):
            return False
        allowed = REPORT_ROLES.get((getattr(view, "kwargs", {}) or {}).get("kind"))
        if allowed is None:
            # unknown kind, the view answers 404
            return True
        return has_any_role(user, allowed)
