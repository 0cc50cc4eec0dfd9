# brgy_core/common/spectacular_hooks.py
from __future__ import annotations

PRIMARY_PREFIX = "/api/v1/"
LEGACY_PREFIX = "/api/"


def preprocess_exclude_legacy_api(endpoints):
    """
    The API is mounted twice (/api/v1/ and the unversioned /api/ alias).
    Only the versioned copy goes into the schema, otherwise every operation
    shows up twice with clashing operationIds.
    """
    return [
        endpoint
        for endpoint in endpoints
        if endpoint[0].startswith(PRIMARY_PREFIX) or not endpoint[0].startswith(LEGACY_PREFIX)
    ]
