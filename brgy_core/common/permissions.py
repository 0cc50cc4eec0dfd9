# brgy_core/common/permissions.py

from __future__ import annotations

from typing import Set

from rest_framework.permissions import BasePermission, SAFE_METHODS

# Group/role names (Django auth Group names)
ROLE_SYSTEM_ADMIN = "SYSTEM_ADMIN"
ROLE_BARANGAY_CAPTAIN = "BARANGAY_CAPTAIN"
ROLE_BHW = "BHW"
ROLE_BHW_COORDINATOR = "BHW_COORDINATOR"
ROLE_DAYCARE_STAFF = "DAYCARE_STAFF"
ROLE_DAYCARE_TEACHER = "DAYCARE_TEACHER"
ROLE_SK_OFFICER = "SK_OFFICER"
ROLE_SK_CHAIRMAN = "SK_CHAIRMAN"
ROLE_PARENT_RESIDENT = "PARENT_RESIDENT"
ROLE_VISITOR = "VISITOR"

ALL_ROLES = [
    ROLE_SYSTEM_ADMIN,
    ROLE_BARANGAY_CAPTAIN,
    ROLE_BHW,
    ROLE_BHW_COORDINATOR,
    ROLE_DAYCARE_STAFF,
    ROLE_DAYCARE_TEACHER,
    ROLE_SK_OFFICER,
    ROLE_SK_CHAIRMAN,
    ROLE_PARENT_RESIDENT,
    ROLE_VISITOR,
]

HEALTH_STAFF = {ROLE_BHW, ROLE_BHW_COORDINATOR}
DAYCARE_STAFF = {ROLE_DAYCARE_STAFF, ROLE_DAYCARE_TEACHER}
SK_STAFF = {ROLE_SK_OFFICER, ROLE_SK_CHAIRMAN}
EVERYONE = set(ALL_ROLES)


def user_roles(user) -> Set[str]:
    """
    Resolve roles from Django groups.

    - Superuser is treated as SYSTEM_ADMIN.
    - An authenticated user with no groups is treated as VISITOR.
    """
    roles: Set[str] = set()

    if not user or not getattr(user, "is_authenticated", False):
        return roles

    if getattr(user, "is_superuser", False):
        roles.add(ROLE_SYSTEM_ADMIN)
        return roles

    if hasattr(user, "groups"):
        roles.update(user.groups.values_list("name", flat=True))

    if not roles:
        roles.add(ROLE_VISITOR)

    return roles


def has_any_role(user, roles: set[str]) -> bool:
    owned = user_roles(user)
    return ROLE_SYSTEM_ADMIN in owned or bool(owned & roles)


class BaseRolePermission(BasePermission):
    """
    Base permission class for role-based access control.

    - Requires authentication.
    - SYSTEM_ADMIN bypass.
    - Uses allowed_roles_per_action for strict RBAC.
    - Unknown SAFE actions fall back to list/retrieve instead of denying.
    """
    message = "You do not have permission to perform this action."

    # Override in subclasses: dict of action -> set of allowed roles
    allowed_roles_per_action: dict[str, set[str]] = {
        "list": EVERYONE,
        "retrieve": EVERYONE,
        "create": {ROLE_SYSTEM_ADMIN},
        "update": {ROLE_SYSTEM_ADMIN},
        "partial_update": {ROLE_SYSTEM_ADMIN},
        "destroy": {ROLE_SYSTEM_ADMIN},
    }

    def _infer_action(self, request, view) -> str | None:
        action = getattr(view, "action", None)
        if action:
            return action

        kwargs = getattr(view, "kwargs", {}) or {}
        is_detail = "pk" in kwargs or "id" in kwargs

        method = request.method.upper()
        if method in ("GET", "HEAD", "OPTIONS"):
            return "retrieve" if is_detail else "list"
        if method == "POST":
            return "create"
        if method == "PUT":
            return "update"
        if method == "PATCH":
            return "partial_update"
        if method == "DELETE":
            return "destroy"
        return None

    def has_permission(self, request, view) -> bool:
        user = request.user
        if not user or not getattr(user, "is_authenticated", False):
            return False

        roles = user_roles(user)

        if ROLE_SYSTEM_ADMIN in roles:
            return True

        action = self._infer_action(request, view)
        allowed = self.allowed_roles_per_action.get(action)

        if allowed is None and request.method in SAFE_METHODS:
            kwargs = getattr(view, "kwargs", {}) or {}
            is_detail = "pk" in kwargs or "id" in kwargs
            read_action = "retrieve" if is_detail else "list"
            allowed = self.allowed_roles_per_action.get(read_action)

        if allowed is not None:
            return bool(roles & allowed)

        # Unknown action => deny by default
        return False

    def has_object_permission(self, request, view, obj) -> bool:
        return self.has_permission(request, view)


class AdminOnlyPermission(BaseRolePermission):
    allowed_roles_per_action = {}


class AdminOrCaptainReadPermission(BaseRolePermission):
    """SYSTEM_ADMIN writes, BARANGAY_CAPTAIN may read."""
    allowed_roles_per_action = {
        "list": {ROLE_BARANGAY_CAPTAIN},
        "retrieve": {ROLE_BARANGAY_CAPTAIN},
    }
