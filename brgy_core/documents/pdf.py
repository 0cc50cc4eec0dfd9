# brgy_core/documents/pdf.py
"""
HTML -> PDF via xhtml2pdf.

Templates live in documents/templates/documents/ and get the PORTAL
settings merged into their context as `portal`.
"""
from __future__ import annotations

import io
import logging
import re
from typing import Any, Dict

from django.conf import settings
from django.http import HttpResponse
from django.template.loader import render_to_string
from xhtml2pdf import pisa

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"


class PdfRenderError(Exception):
    pass


def render_html(template_name: str, context: Dict[str, Any] | None = None) -> str:
    ctx = {"portal": getattr(settings, "PORTAL", {}), **(context or {})}
    return render_to_string(template_name, ctx)


def render_pdf(template_name: str, context: Dict[str, Any] | None = None) -> bytes:
    html = render_html(template_name, context)
    out = io.BytesIO()
    try:
        result = pisa.CreatePDF(src=html, dest=out, encoding="utf-8")
    except Exception as exc:
        logger.exception("PDF render crashed template=%s", template_name)
        raise PdfRenderError(f"Failed to generate PDF: {exc}") from exc

    if result.err:
        logger.error("PDF render failed template=%s errors=%s", template_name, result.err)
        raise PdfRenderError("Failed to generate PDF")
    return out.getvalue()


def slugify_filename_part(value: str) -> str:
    """'Juan  Dela Cruz' -> 'Juan-Dela-Cruz'"""
    return re.sub(r"\s+", "-", (value or "").strip())


def pdf_response(content: bytes, filename: str) -> HttpResponse:
    res = HttpResponse(content, content_type=PDF_CONTENT_TYPE)
    res["Content-Disposition"] = f'attachment; filename="{filename}"'
    res["Content-Length"] = str(len(content))
    return res
