# brgy_core/certificates/permissions.py
from brgy_core.common.permissions import DAYCARE_STAFF, HEALTH_STAFF, ROLE_BARANGAY_CAPTAIN, BaseRolePermission


def _certificate_rules(staff: set[str]) -> dict[str, set[str]]:
    readers = staff | {ROLE_BARANGAY_CAPTAIN}
    return {
        "list": readers,
        "retrieve": readers,
        "download": readers,
        "create": staff,
        "update": staff,
        "partial_update": staff,
        "destroy": staff,
    }


class DaycareCertificatePermission(BaseRolePermission):
    allowed_roles_per_action = _certificate_rules(DAYCARE_STAFF)


class HealthCertificatePermission(BaseRolePermission):
    allowed_roles_per_action = _certificate_rules(HEALTH_STAFF)
