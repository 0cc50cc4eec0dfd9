# brgy_core/reports/api/views.py
from __future__ import annotations

import logging

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework.exceptions import NotFound, ValidationError as DRFValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from brgy_core.common.api.exceptions import ServiceUnavailableError
from brgy_core.common.permissions import AdminOrCaptainReadPermission
from brgy_core.documents.excel import excel_response
from brgy_core.documents.pdf import PdfRenderError, pdf_response
from brgy_core.reports import exports
from brgy_core.reports.builders import KINDS, build_admin_stats, build_report
from brgy_core.reports.permissions import ReportPermission

logger = logging.getLogger(__name__)


def _check_kind(kind: str) -> str:
    if kind not in KINDS:
        raise NotFound("Unknown report type")
    return kind


class ReportView(APIView):
    permission_classes = [ReportPermission]

    @extend_schema(tags=["Reports"], responses=OpenApiTypes.OBJECT)
    def get(self, request, kind: str):
        return Response(build_report(_check_kind(kind)))


class ReportExportView(APIView):
    permission_classes = [ReportPermission]

    @extend_schema(
        tags=["Reports"],
        parameters=[OpenApiParameter("format", OpenApiTypes.STR, enum=list(exports.EXPORT_FORMATS))],
        responses={(200, "application/octet-stream"): OpenApiTypes.BINARY},
    )
    def get(self, request, kind: str):
        kind = _check_kind(kind)
        fmt = (request.query_params.get("format") or "xlsx").lower()
        if fmt not in exports.EXPORT_FORMATS:
            raise DRFValidationError({"detail": "Format must be xlsx or pdf"})

        report = build_report(kind)
        filename = exports.export_filename(kind, fmt)
        logger.info("Report export kind=%s format=%s user_id=%s", kind, fmt, request.user.id)

        if fmt == "xlsx":
            return excel_response(exports.report_xlsx(kind, report), filename)
        try:
            return pdf_response(exports.report_pdf(kind, report), filename)
        except PdfRenderError:
            raise ServiceUnavailableError("Failed to generate report PDF")


class AdminStatsView(APIView):
    permission_classes = [AdminOrCaptainReadPermission]

    @extend_schema(tags=["Admin"], responses=OpenApiTypes.OBJECT)
    def get(self, request):
        return Response(build_admin_stats())
