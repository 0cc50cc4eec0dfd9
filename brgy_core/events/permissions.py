# brgy_core/events/permissions.py
from brgy_core.common.permissions import (
    EVERYONE,
    ROLE_BARANGAY_CAPTAIN,
    SK_STAFF,
    BaseRolePermission,
    has_any_role,
)

SK_READERS = SK_STAFF | {ROLE_BARANGAY_CAPTAIN}


def is_sk_staff(user) -> bool:
    return has_any_role(user, SK_STAFF)


class EventPermission(BaseRolePermission):
    """
    Residents browse published events and register themselves.
    SK officers manage events, registrants and attendance.
    """
    allowed_roles_per_action = {
        "list": EVERYONE,
        "retrieve": EVERYONE,
        "categories": EVERYONE,
        "register": EVERYONE,
        "my_registrations": EVERYONE,
        "registrations": SK_READERS,
        "attendance": SK_READERS,
        "available_attendees": SK_READERS,
        "analytics": SK_READERS,
        "overall_analytics": SK_READERS,
        "export_attendees": SK_READERS,
        "create": SK_STAFF,
        "update": SK_STAFF,
        "partial_update": SK_STAFF,
        "destroy": SK_STAFF,
        "status": SK_STAFF,
        "certificates": SK_STAFF,
    }


class EventRegistrationPermission(BaseRolePermission):
    allowed_roles_per_action = {
        "status": SK_STAFF,
    }


class EventAttendancePermission(BaseRolePermission):
    allowed_roles_per_action = {
        "create": SK_STAFF,
    }
