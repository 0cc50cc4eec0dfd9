# brgy_core/reports/exports.py
from __future__ import annotations

from typing import Any, Dict, List, Tuple

import pandas as pd
from django.utils import timezone

from brgy_core.documents.excel import build_workbook
from brgy_core.documents.pdf import render_pdf
from brgy_core.reports.builders import KIND_DAYCARE, KIND_HEALTH, KIND_SK

EXPORT_FORMATS = ("xlsx", "pdf")

# (sheet name, report key, [(column header, row key), ...]); "summary" is special-cased
Layout = List[Tuple[str, str, List[Tuple[str, str]]]]

SHEET_LAYOUTS: Dict[str, Layout] = {
    KIND_HEALTH: [
        ("Summary", "summary", []),
        ("Immunizations by Vaccine", "immunizations_by_vaccine", [("Vaccine", "vaccine"), ("Count", "count")]),
        ("Demographics by Gender", "demographics_by_gender", [("Gender", "gender"), ("Count", "count")]),
        ("Blood Type Distribution", "blood_type_distribution", [("Blood Type", "blood_type"), ("Count", "count")]),
    ],
    KIND_DAYCARE: [
        ("Summary", "summary", []),
        ("Registration Status", "registration_status", [("Status", "status"), ("Count", "count")]),
        ("Student Demographics", "student_demographics", [("Gender", "gender"), ("Count", "count")]),
        ("Age Distribution", "age_distribution", [("Age (years)", "age"), ("Count", "count")]),
    ],
    KIND_SK: [
        ("Summary", "summary", []),
        ("Events by Status", "events_by_status", [("Status", "status"), ("Count", "count")]),
        ("Events by Category", "events_by_category", [("Category", "category"), ("Count", "count")]),
        (
            "Top Events",
            "top_events",
            [
                ("Event", "title"),
                ("Date", "event_date"),
                ("Registrations", "total_registrations"),
                ("Attendees", "total_attendees"),
                ("Attendance Rate (%)", "attendance_rate"),
            ],
        ),
    ],
}

SUMMARY_COLUMNS = [("Metric", "metric"), ("Value", "value")]


def _metric_label(key: str) -> str:
    return key.replace("_", " ").title()


def tables(kind: str, report: Dict[str, Any]) -> List[Dict[str, Any]]:
    """[{title, columns, rows}] with rows as lists, in sheet order."""
    out = []
    for title, key, columns in SHEET_LAYOUTS[kind]:
        if key == "summary":
            columns = SUMMARY_COLUMNS
            source = [{"metric": _metric_label(k), "value": v} for k, v in report["summary"].items()]
        else:
            source = report.get(key) or []
        out.append(
            {
                "title": title,
                "columns": [header for header, _ in columns],
                "rows": [[row.get(field) for _, field in columns] for row in source],
            }
        )
    return out


def export_filename(kind: str, fmt: str) -> str:
    return f"{kind}-report-{timezone.localdate().isoformat()}.{fmt}"


def report_xlsx(kind: str, report: Dict[str, Any]) -> bytes:
    return build_workbook(
        {t["title"]: pd.DataFrame(t["rows"], columns=t["columns"]) for t in tables(kind, report)}
    )


def report_pdf(kind: str, report: Dict[str, Any]) -> bytes:
    return render_pdf(
        "documents/report.html",
        {
            "title": report["title"],
            "generated_at": report["generated_at"],
            "sections": tables(kind, report),
        },
    )
