# brgy_core/daycare/shifts.py
"""
Morning/afternoon shift helpers. Unassigned is always None.
"""
from __future__ import annotations

import random
from typing import Dict, Hashable, Iterable, List, Optional

MORNING = "MORNING"
AFTERNOON = "AFTERNOON"
SHIFTS = (MORNING, AFTERNOON)


def parse_shift(value) -> Optional[str]:
    """None/"" -> None, "morning" -> "MORNING". Raises ValueError otherwise."""
    if value is None or value == "":
        return None
    normalized = str(value).strip().upper()
    if normalized not in SHIFTS:
        raise ValueError("Shift must be MORNING, AFTERNOON or null")
    return normalized


def assign_round_robin(ids: Iterable[Hashable], *, seed=None) -> Dict[Hashable, str]:
    """
    Shuffle, then alternate: even positions MORNING, odd AFTERNOON.
    The same seed always gives the same split.
    """
    shuffled = list(ids)
    random.Random(seed).shuffle(shuffled)
    return {sid: MORNING if i % 2 == 0 else AFTERNOON for i, sid in enumerate(shuffled)}


def count_by_shift(assignments: Dict[Hashable, str]) -> Dict[str, int]:
    values = list(assignments.values())
    return {"morning": values.count(MORNING), "afternoon": values.count(AFTERNOON)}


def group_by_shift(students: Iterable) -> Dict[str, List]:
    groups: Dict[str, List] = {"morning": [], "afternoon": [], "unassigned": []}
    for s in students:
        if s.shift == MORNING:
            groups["morning"].append(s)
        elif s.shift == AFTERNOON:
            groups["afternoon"].append(s)
        else:
            groups["unassigned"].append(s)
    return groups
