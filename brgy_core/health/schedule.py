# brgy_core/health/schedule.py
"""
Immunization card scheduling.

A card is plain JSON:

    {
      "child_information": {...},
      "vaccination_schedule": [
        {"vaccine": "BCG Vaccine",
         "doses": [{"number": 1, "timing": "At birth", "due_date": "2024-01-15",
                    "date_given": null, "remarks": null}]},
        ...
      ]
    }

Everything here is pure: dates in, dicts out.
"""
from __future__ import annotations

import calendar
import copy
from datetime import date, timedelta
from typing import Any, Dict, Iterator, List, Optional, Tuple

DUE_SOON_DAYS = 30

STATUS_COMPLETED = "completed"
STATUS_OVERDUE = "overdue"
STATUS_DUE_SOON = "due_soon"
STATUS_SCHEDULED = "scheduled"

AT_BIRTH = "At birth"
SIX_WEEKS = "1½ months"
TEN_WEEKS = "2½ months"
FOURTEEN_WEEKS = "3½ months"
NINE_MONTHS = "9 months"
ONE_YEAR = "1 year"

# label -> (days, months) added to the date of birth
TIMING_OFFSETS: Dict[str, Tuple[int, int]] = {
    AT_BIRTH: (0, 0),
    SIX_WEEKS: (45, 0),
    TEN_WEEKS: (75, 0),
    FOURTEEN_WEEKS: (105, 0),
    NINE_MONTHS: (0, 9),
    ONE_YEAR: (0, 12),
}

STANDARD_SCHEDULE: List[Tuple[str, List[str]]] = [
    ("BCG Vaccine", [AT_BIRTH]),
    ("Hepatitis B Vaccine", [AT_BIRTH]),
    ("Pentavalent Vaccine (DPT-Hep B-HIB)", [SIX_WEEKS, TEN_WEEKS, FOURTEEN_WEEKS]),
    ("Oral Polio Vaccine (OPV)", [SIX_WEEKS, TEN_WEEKS, FOURTEEN_WEEKS]),
    ("Inactivated Polio Vaccine (IPV)", [FOURTEEN_WEEKS, NINE_MONTHS]),
    ("Pneumococcal Conjugate Vaccine (PCV)", [SIX_WEEKS, TEN_WEEKS, FOURTEEN_WEEKS]),
    ("Measles, Mumps, Rubella Vaccine (MMR)", [NINE_MONTHS, ONE_YEAR]),
]


def add_months(d: date, months: int) -> date:
    """Calendar month arithmetic, clamped to the last day of the target month."""
    month_index = d.month - 1 + months
    year = d.year + month_index // 12
    month = month_index % 12 + 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def due_date_for(date_of_birth: date, timing: str) -> date:
    days, months = TIMING_OFFSETS.get(timing, (0, 0))
    return add_months(date_of_birth, months) + timedelta(days=days)


def schedule_table() -> List[Dict[str, Any]]:
    return [
        {
            "vaccine": vaccine,
            "doses": [{"number": i, "timing": timing} for i, timing in enumerate(timings, start=1)],
        }
        for vaccine, timings in STANDARD_SCHEDULE
    ]


def _decimal_to_float(value) -> Optional[float]:
    return float(value) if value is not None else None


def barangay_from_address(address: str) -> str:
    return (address or "").split(",")[-1].strip()


def build_card_data(patient) -> Dict[str, Any]:
    dob = patient.date_of_birth
    return {
        "child_information": {
            "name": " ".join(p for p in (patient.first_name, patient.middle_name, patient.last_name) if p and p.strip()),
            "mother_name": patient.mother_name or "",
            "father_name": patient.father_name or "",
            "date_of_birth": dob.isoformat(),
            "place_of_birth": patient.place_of_birth or "",
            "birth_weight": _decimal_to_float(patient.birth_weight),
            "birth_height": _decimal_to_float(patient.birth_length),
            "sex": patient.gender,
            "address": patient.address or "",
            "barangay": barangay_from_address(patient.address),
            "family_number": patient.id.hex[:8],
        },
        "vaccination_schedule": [
            {
                "vaccine": vaccine,
                "doses": [
                    {
                        "number": i,
                        "timing": timing,
                        "due_date": due_date_for(dob, timing).isoformat(),
                        "date_given": None,
                        "remarks": None,
                    }
                    for i, timing in enumerate(timings, start=1)
                ],
            }
            for vaccine, timings in STANDARD_SCHEDULE
        ],
    }


def _parse_date(value) -> Optional[date]:
    if value in (None, ""):
        return None
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def dose_status(dose: Dict[str, Any], today: date) -> str:
    if dose.get("date_given"):
        return STATUS_COMPLETED
    due = _parse_date(dose.get("due_date"))
    if due is None:
        return STATUS_SCHEDULED
    if due < today:
        return STATUS_OVERDUE
    if due <= today + timedelta(days=DUE_SOON_DAYS):
        return STATUS_DUE_SOON
    return STATUS_SCHEDULED


def iter_doses(card_data: Dict[str, Any]) -> Iterator[Tuple[int, int, str, Dict[str, Any]]]:
    for vi, vaccine in enumerate(card_data.get("vaccination_schedule") or []):
        for di, dose in enumerate(vaccine.get("doses") or []):
            yield vi, di, vaccine.get("vaccine", ""), dose


def _flat(vi: int, di: int, vaccine: str, dose: Dict[str, Any], today: date) -> Dict[str, Any]:
    return {
        "vaccine_index": vi,
        "dose_index": di,
        "vaccine": vaccine,
        "number": dose.get("number"),
        "timing": dose.get("timing"),
        "due_date": dose.get("due_date"),
        "date_given": dose.get("date_given"),
        "remarks": dose.get("remarks"),
        "status": dose_status(dose, today),
    }


def summarize_card(card_data: Dict[str, Any], today: Optional[date] = None) -> Dict[str, Any]:
    """
    due_soon: not given, due within the next DUE_SOON_DAYS days
    recent:   given on or before today, newest first
    """
    today = today or date.today()
    horizon = today + timedelta(days=DUE_SOON_DAYS)

    doses = [_flat(vi, di, v, d, today) for vi, di, v, d in iter_doses(card_data)]

    due_soon = [
        d for d in doses
        if not d["date_given"] and d["due_date"] and today <= _parse_date(d["due_date"]) <= horizon
    ]
    due_soon.sort(key=lambda d: d["due_date"])

    recent = [d for d in doses if d["date_given"] and _parse_date(d["date_given"]) <= today]
    recent.sort(key=lambda d: d["date_given"], reverse=True)

    given = sum(1 for d in doses if d["date_given"])
    total = len(doses)
    return {
        "doses": doses,
        "due_soon": due_soon,
        "recent": recent,
        "counts": {
            "total_doses": total,
            "given_doses": given,
            "pending_doses": total - given,
            "overdue_doses": sum(1 for d in doses if d["status"] == STATUS_OVERDUE),
            "due_soon_doses": len(due_soon),
        },
    }


def immunization_status(card_data: Dict[str, Any], today: Optional[date] = None) -> Dict[str, Any]:
    summary = summarize_card(card_data, today)
    counts = summary["counts"]
    total = counts["total_doses"]
    return {
        "child_information": card_data.get("child_information") or {},
        "doses": summary["doses"],
        "due_soon": summary["due_soon"],
        "recent": summary["recent"],
        "summary": {
            "total_doses": total,
            "given_doses": counts["given_doses"],
            "upcoming_doses": counts["pending_doses"],
            "overdue_doses": counts["overdue_doses"],
            "vaccine_types": len(card_data.get("vaccination_schedule") or []),
            "completion_percentage": round(counts["given_doses"] * 100 / total, 1) if total else 0,
        },
    }


def _clean_given(value, where: str) -> Optional[str]:
    if value in (None, ""):
        return None
    try:
        return _parse_date(value).isoformat()
    except (TypeError, ValueError):
        raise ValueError(f"{where}: date_given must be YYYY-MM-DD")


def _clean_remarks(value) -> Optional[str]:
    if value in (None, ""):
        return None
    return str(value)


def merge_schedule(existing: Dict[str, Any], incoming: Dict[str, Any]) -> Dict[str, Any]:
    """
    Copy date_given/remarks from an edited card onto the stored one.
    The vaccine list, dose numbers, timings and due dates never change.
    Raises ValueError when the incoming shape does not match.
    """
    if not isinstance(incoming, dict) or not isinstance(incoming.get("vaccination_schedule"), list):
        raise ValueError("card_data.vaccination_schedule must be a list")

    current = existing.get("vaccination_schedule") or []
    new_schedule = incoming["vaccination_schedule"]
    if len(new_schedule) != len(current):
        raise ValueError("vaccination_schedule does not match the card's vaccines")

    merged = copy.deepcopy(existing)
    for vi, (old_vaccine, new_vaccine) in enumerate(zip(current, new_schedule)):
        if not isinstance(new_vaccine, dict) or not isinstance(new_vaccine.get("doses"), list):
            raise ValueError(f"vaccination_schedule[{vi}].doses must be a list")
        if new_vaccine.get("vaccine") not in (None, old_vaccine.get("vaccine")):
            raise ValueError(f"vaccination_schedule[{vi}] is not {old_vaccine.get('vaccine')}")
        if len(new_vaccine["doses"]) != len(old_vaccine.get("doses") or []):
            raise ValueError(f"vaccination_schedule[{vi}] has the wrong number of doses")

        for di, new_dose in enumerate(new_vaccine["doses"]):
            if not isinstance(new_dose, dict):
                raise ValueError(f"vaccination_schedule[{vi}].doses[{di}] must be an object")
            target = merged["vaccination_schedule"][vi]["doses"][di]
            target["date_given"] = _clean_given(new_dose.get("date_given"), f"vaccination_schedule[{vi}].doses[{di}]")
            target["remarks"] = _clean_remarks(new_dose.get("remarks"))
    return merged


def set_dose(card_data: Dict[str, Any], *, vaccine_index: int, dose_index: int, date_given, remarks) -> Dict[str, Any]:
    schedule = card_data.get("vaccination_schedule") or []
    if not 0 <= vaccine_index < len(schedule):
        raise ValueError("vaccine_index out of range")
    doses = schedule[vaccine_index].get("doses") or []
    if not 0 <= dose_index < len(doses):
        raise ValueError("dose_index out of range")

    updated = copy.deepcopy(card_data)
    dose = updated["vaccination_schedule"][vaccine_index]["doses"][dose_index]
    dose["date_given"] = _clean_given(date_given, "dose")
    dose["remarks"] = _clean_remarks(remarks)
    return updated


def age_label(date_of_birth: date, on: date) -> str:
    """'3 months', '1 year 2 months', 'At birth'"""
    months = (on.year - date_of_birth.year) * 12 + (on.month - date_of_birth.month)
    if on.day < date_of_birth.day:
        months -= 1
    if months <= 0:
        weeks = max((on - date_of_birth).days // 7, 0)
        return f"{weeks} weeks" if weeks else AT_BIRTH
    years, rem = divmod(months, 12)
    parts = []
    if years:
        parts.append(f"{years} year{'s' if years != 1 else ''}")
    if rem:
        parts.append(f"{rem} month{'s' if rem != 1 else ''}")
    return " ".join(parts)
