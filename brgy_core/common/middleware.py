from __future__ import annotations

import logging
import time

from brgy_core.common.api.exceptions import ensure_request_id

logger = logging.getLogger(__name__)


class RequestLogMiddleware:
    """
    Attaches request.request_id (echoed as X-Request-Id) and writes one access
    log line per request.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        incoming = request.headers.get("X-Request-Id")
        if incoming:
            request.request_id = incoming[:64]
        rid = ensure_request_id(request)

        started = time.monotonic()
        response = self.get_response(request)
        elapsed_ms = (time.monotonic() - started) * 1000

        response["X-Request-Id"] = rid
        logger.info(
            "%s %s -> %s (%.1fms) request_id=%s",
            request.method,
            request.path,
            response.status_code,
            elapsed_ms,
            rid,
        )
        return response
