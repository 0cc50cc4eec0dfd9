# brgy_core/events/exports.py
from __future__ import annotations

from typing import Dict, List

import pandas as pd
from django.utils import timezone

from brgy_core.common.names import display_name
from brgy_core.documents.excel import build_workbook
from brgy_core.documents.pdf import render_pdf, slugify_filename_part
from brgy_core.events.models import Event
from brgy_core.events.selectors import list_event_attendance

EXPORT_FORMATS = ("pdf", "xlsx")
ATTENDEE_COLUMNS = ["#", "Full Name", "Email", "Contact Number", "Attendance Time"]


def attendee_rows(event: Event) -> List[Dict[str, str]]:
    rows = []
    for record in list_event_attendance(event_id=event.id):
        profile = getattr(record.user, "resident_profile", None)
        rows.append(
            {
                "full_name": display_name(record.user),
                "email": record.user.email or "",
                "contact_number": getattr(profile, "contact_number", "") or "",
                "attendance_time": timezone.localtime(record.attended_at).strftime("%Y-%m-%d %H:%M"),
            }
        )
    return rows


def export_filename(event: Event, fmt: str) -> str:
    return f"event-attendees-{slugify_filename_part(event.title)}.{fmt}"


def attendees_pdf(event: Event) -> bytes:
    return render_pdf("documents/event_attendees.html", {"event": event, "rows": attendee_rows(event)})


def attendees_xlsx(event: Event) -> bytes:
    table = [
        {
            "#": i,
            "Full Name": r["full_name"],
            "Email": r["email"],
            "Contact Number": r["contact_number"],
            "Attendance Time": r["attendance_time"],
        }
        for i, r in enumerate(attendee_rows(event), start=1)
    ]
    return build_workbook({"Attendees": pd.DataFrame(table, columns=ATTENDEE_COLUMNS)})
