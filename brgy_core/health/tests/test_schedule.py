# brgy_core/health/tests/test_schedule.py
import uuid
from datetime import date, timedelta
from decimal import Decimal
from types import SimpleNamespace

import pytest

from brgy_core.health import schedule


def _patient(**overrides):
    data = dict(
        id=uuid.UUID("1234abcd-0000-0000-0000-000000000000"),
        first_name="Maria",
        middle_name="",
        last_name="Reyes",
        date_of_birth=date(2024, 1, 15),
        gender="FEMALE",
        address="Purok 3, Binitayan , Daraga ",
        mother_name="Ana Reyes",
        father_name="",
        place_of_birth="Daraga",
        birth_weight=Decimal("3.20"),
        birth_length=None,
    )
    data.update(overrides)
    return SimpleNamespace(**data)


@pytest.mark.parametrize(
    "timing,expected",
    [
        ("At birth", date(2024, 1, 15)),
        ("1½ months", date(2024, 2, 29)),
        ("2½ months", date(2024, 3, 30)),
        ("3½ months", date(2024, 4, 29)),
        ("9 months", date(2024, 10, 15)),
        ("1 year", date(2025, 1, 15)),
        ("someday", date(2024, 1, 15)),
    ],
)
def test_due_date_for(timing, expected):
    assert schedule.due_date_for(date(2024, 1, 15), timing) == expected


def test_month_arithmetic_clamps_to_month_end():
    assert schedule.due_date_for(date(2024, 2, 29), "1 year") == date(2025, 2, 28)
    assert schedule.add_months(date(2024, 5, 31), 9) == date(2025, 2, 28)


def test_build_card_data():
    card = schedule.build_card_data(_patient())
    info = card["child_information"]

    assert info["name"] == "Maria Reyes"
    assert info["barangay"] == "Daraga"
    assert info["family_number"] == "1234abcd"
    assert info["birth_weight"] == 3.2
    assert info["birth_height"] is None

    vaccines = [v["vaccine"] for v in card["vaccination_schedule"]]
    assert vaccines[0] == "BCG Vaccine"
    assert vaccines[-1] == "Measles, Mumps, Rubella Vaccine (MMR)"
    assert sum(len(v["doses"]) for v in card["vaccination_schedule"]) == 15

    mmr = card["vaccination_schedule"][-1]["doses"]
    assert mmr[1] == {"number": 2, "timing": "1 year", "due_date": "2025-01-15", "date_given": None, "remarks": None}


def test_dose_status():
    today = date(2025, 1, 1)
    assert schedule.dose_status({"due_date": "2024-01-01", "date_given": "2024-01-02"}, today) == "completed"
    assert schedule.dose_status({"due_date": "2024-12-31", "date_given": None}, today) == "overdue"
    assert schedule.dose_status({"due_date": "2025-01-31", "date_given": None}, today) == "due_soon"
    assert schedule.dose_status({"due_date": "2025-02-01", "date_given": None}, today) == "scheduled"


def test_summarize_card_buckets():
    today = date.today()
    card = {
        "vaccination_schedule": [
            {
                "vaccine": "A",
                "doses": [
                    {"number": 1, "timing": "At birth", "due_date": (today - timedelta(days=60)).isoformat(),
                     "date_given": (today - timedelta(days=50)).isoformat(), "remarks": None},
                    {"number": 2, "timing": "1½ months", "due_date": (today + timedelta(days=10)).isoformat(),
                     "date_given": None, "remarks": None},
                ],
            },
            {
                "vaccine": "B",
                "doses": [
                    {"number": 1, "timing": "At birth", "due_date": (today - timedelta(days=60)).isoformat(),
                     "date_given": (today - timedelta(days=5)).isoformat(), "remarks": "ok"},
                    {"number": 2, "timing": "9 months", "due_date": (today + timedelta(days=90)).isoformat(),
                     "date_given": None, "remarks": None},
                ],
            },
        ]
    }

    summary = schedule.summarize_card(card, today)

    assert [d["vaccine"] for d in summary["due_soon"]] == ["A"]
    assert [d["vaccine"] for d in summary["recent"]] == ["B", "A"]
    assert summary["counts"] == {
        "total_doses": 4,
        "given_doses": 2,
        "pending_doses": 2,
        "overdue_doses": 0,
        "due_soon_doses": 1,
    }

    status = schedule.immunization_status(card, today)
    assert status["summary"]["completion_percentage"] == 50.0
    assert status["summary"]["vaccine_types"] == 2


def test_merge_schedule_only_touches_given_and_remarks():
    stored = schedule.build_card_data(_patient())
    edited = schedule.build_card_data(_patient())
    edited["vaccination_schedule"][0]["doses"][0].update(
        {"date_given": "2024-01-16", "remarks": "Left arm", "due_date": "1999-01-01"}
    )

    merged = schedule.merge_schedule(stored, edited)

    dose = merged["vaccination_schedule"][0]["doses"][0]
    assert dose["date_given"] == "2024-01-16"
    assert dose["remarks"] == "Left arm"
    assert dose["due_date"] == "2024-01-15"
    assert stored["vaccination_schedule"][0]["doses"][0]["date_given"] is None


@pytest.mark.parametrize(
    "mutate",
    [
        lambda c: c.pop("vaccination_schedule"),
        lambda c: c["vaccination_schedule"].pop(),
        lambda c: c["vaccination_schedule"][1]["doses"].pop(),
        lambda c: c["vaccination_schedule"][0].update({"vaccine": "Other"}),
        lambda c: c["vaccination_schedule"][0]["doses"][0].update({"date_given": "16/01/2024"}),
    ],
)
def test_merge_schedule_rejects_bad_shapes(mutate):
    stored = schedule.build_card_data(_patient())
    edited = schedule.build_card_data(_patient())
    mutate(edited)

    with pytest.raises(ValueError):
        schedule.merge_schedule(stored, edited)


def test_set_dose_bounds():
    card = schedule.build_card_data(_patient())

    updated = schedule.set_dose(card, vaccine_index=2, dose_index=1, date_given=date(2024, 4, 1), remarks="")
    assert updated["vaccination_schedule"][2]["doses"][1]["date_given"] == "2024-04-01"
    assert updated["vaccination_schedule"][2]["doses"][1]["remarks"] is None

    with pytest.raises(ValueError):
        schedule.set_dose(card, vaccine_index=7, dose_index=0, date_given=None, remarks=None)
    with pytest.raises(ValueError):
        schedule.set_dose(card, vaccine_index=0, dose_index=1, date_given=None, remarks=None)


def test_age_label():
    dob = date(2024, 1, 15)
    assert schedule.age_label(dob, dob) == "At birth"
    assert schedule.age_label(dob, date(2024, 2, 5)) == "3 weeks"
    assert schedule.age_label(dob, date(2024, 2, 29)) == "1 month"
    assert schedule.age_label(dob, date(2024, 10, 15)) == "9 months"
    assert schedule.age_label(dob, date(2025, 3, 20)) == "1 year 2 months"
