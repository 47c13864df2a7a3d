# shiftlog/services/status.py
"""
Per-date submission status.

Mirrors the ordering rules in `shiftlog.services.policy`: nothing is eligible
until the previous day's shift C exists, A opens the day, B follows A on the
status board and C follows B.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List

from shiftlog.services.policy import find_log
from shiftlog.utils.dates import previous_calendar_day
from shiftlog.utils.rows import SHIFTS, MaintenanceLog, shift_key


@dataclass(frozen=True)
class SubmissionStatus:
    date: str
    submitted: List[str]
    eligible: Dict[str, bool]
    previous_date: str
    prev_day_closed: bool

    @property
    def submissions(self) -> Dict[str, bool]:
        return {s: s in self.submitted for s in SHIFTS}


def submitted_shifts(history: Iterable[MaintenanceLog], date: str) -> List[str]:
    """Shifts stored for `date`, upper-cased, first occurrence order, no repeats."""
    seen: List[str] = []
    for log in history:
        if log.date != date:
            continue
        key = shift_key(log.shift)
        if key and key not in seen:
            seen.append(key)
    return seen


def submission_status(history: Iterable[MaintenanceLog], date: str) -> SubmissionStatus:
    logs = list(history)
    previous = previous_calendar_day(date)
    closed = find_log(logs, previous, "C") is not None
    submitted = submitted_shifts(logs, date)

    eligible = {
        "A": closed and "A" not in submitted,
        "B": closed and "A" in submitted and "B" not in submitted,
        "C": closed and "B" in submitted and "C" not in submitted,
    }
    return SubmissionStatus(
        date=date,
        submitted=submitted,
        eligible=eligible,
        previous_date=previous,
        prev_day_closed=closed,
    )
