# brgy_core/common/api/pagination.py
from __future__ import annotations

from django.conf import settings
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


def _portal(key: str, default: int) -> int:
    return int(getattr(settings, "PORTAL", {}).get(key, default))


class DefaultPagination(PageNumberPagination):
    page_size_query_param = "page_size"

    def __init__(self):
        self.page_size = _portal("PAGE_SIZE", 20)
        self.max_page_size = _portal("MAX_PAGE_SIZE", 200)


def paginate(request, queryset, serializer_class, *, paginator: PageNumberPagination | None = None, context: dict | None = None) -> Response:
    """
    Every list endpoint answers { count, next, previous, results }.
    Serializers get the request in their context (for absolute URLs and
    role-dependent fields) plus anything passed in `context`.
    """
    p = paginator or DefaultPagination()
    ctx = {"request": request, **(context or {})}
    page = p.paginate_queryset(queryset, request)
    if page is None:
        return Response(serializer_class(queryset, many=True, context=ctx).data)
    return p.get_paginated_response(serializer_class(page, many=True, context=ctx).data)
