# shiftlog/services/policy.py
"""
Submission policy for maintenance shift logs.

Given a snapshot of every stored log and a candidate submission, decide whether
the candidate may be appended. Rules run in a fixed order and the first failure
wins:

1. date and shift present; shift is A, B or C; date parses   -> INVALID_INPUT
2. at least one electrician named                            -> INVALID_INPUT
3. no negative numeric equipment reading                     -> INVALID_INPUT
4. (date, shift) not already submitted                       -> DUPLICATE_ENTRY
5. previous day's shift C submitted                          -> PREVIOUS_SHIFT_C_MISSING
6. shift C only after the same day's shift B                 -> SHIFT_B_REQUIRED

Shift B does not require shift A. Keep `shiftlog.services.status` in step with
any change to this order.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Optional

from shiftlog.core.errors import PolicyViolation, ReasonCode
from shiftlog.utils.dates import operating_date, previous_calendar_day
from shiftlog.utils.rows import SHIFTS, MaintenanceLog, shift_key

# Leading numeric prefix, the way a browser's parseFloat reads it ("-5 bar" -> -5).
_LEADING_NUMBER_RE = re.compile(
    r"^\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))"
)


@dataclass(frozen=True)
class LogDraft:
    """A submission as received from the front-end."""
    date: Any = None
    shift: Any = None
    electrician1: Optional[str] = None
    electrician2: Optional[str] = None
    equipment_status: Dict[str, Any] = field(default_factory=dict)
    timestamp: Any = None

    @property
    def canonical_date(self) -> str:
        return operating_date(self.date)

    @property
    def canonical_shift(self) -> str:
        return shift_key(self.shift)


@dataclass(frozen=True)
class Decision:
    accepted: bool
    code: Optional[ReasonCode] = None
    message: str = ""
    required_date: Optional[str] = None
    required_shift: Optional[str] = None

    @classmethod
    def accept(cls) -> "Decision":
        return cls(accepted=True)

    @classmethod
    def reject(
        cls,
        code: ReasonCode,
        message: str,
        required_date: Optional[str] = None,
        required_shift: Optional[str] = None,
    ) -> "Decision":
        return cls(
            accepted=False,
            code=code,
            message=message,
            required_date=required_date,
            required_shift=required_shift,
        )

    def to_error(self) -> PolicyViolation:
        if self.accepted or self.code is None:
            raise ValueError("An accepted decision has no error")
        return PolicyViolation(
            self.code,
            self.message,
            required_date=self.required_date,
            required_shift=self.required_shift,
        )


# ----------------------------
# Helpers
# ----------------------------
def numeric_value(value: Any) -> Optional[float]:
    """Number a reading parses as, or None for free text / blanks."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return None if isinstance(value, float) and math.isnan(value) else float(value)
    if not isinstance(value, str):
        return None
    m = _LEADING_NUMBER_RE.match(value)
    return float(m.group(1)) if m else None


def has_negative_values(equipment_status: Optional[Mapping[str, Any]]) -> bool:
    if not isinstance(equipment_status, Mapping):
        return False
    for value in equipment_status.values():
        number = numeric_value(value)
        if number is not None and number < 0:
            return True
    return False


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def find_log(
    history: Iterable[MaintenanceLog], date: str, shift: str
) -> Optional[MaintenanceLog]:
    for log in history:
        if log.matches(date, shift):
            return log
    return None


# ----------------------------
# Rules
# ----------------------------
def check_input(draft: LogDraft) -> Decision:
    """Rules 1-3: structural checks that need no history."""
    if _blank(draft.date) or _blank(draft.shift):
        return Decision.reject(ReasonCode.INVALID_INPUT, "Date and shift are required fields")

    if draft.canonical_shift not in SHIFTS:
        return Decision.reject(ReasonCode.INVALID_INPUT, "Shift must be A, B, or C")

    if not draft.canonical_date:
        return Decision.reject(
            ReasonCode.INVALID_INPUT, "Date must be a valid date (YYYY-MM-DD)"
        )

    if _blank(draft.electrician1) and _blank(draft.electrician2):
        return Decision.reject(
            ReasonCode.INVALID_INPUT,
            "At least one electrician must be present for the shift",
        )

    if has_negative_values(draft.equipment_status):
        return Decision.reject(
            ReasonCode.INVALID_INPUT, "Negative values are not allowed in any field"
        )

    return Decision.accept()


def evaluate(history: Iterable[MaintenanceLog], draft: LogDraft) -> Decision:
    """
    Accept or reject `draft` against a consistent snapshot of `history`.

    Pure: the same history and draft always give the same decision.
    """
    decision = check_input(draft)
    if not decision.accepted:
        return decision

    logs = list(history)
    date = draft.canonical_date
    shift = draft.canonical_shift

    if find_log(logs, date, shift) is not None:
        return Decision.reject(
            ReasonCode.DUPLICATE_ENTRY,
            f"Form for {date} - Shift {shift} has already been submitted",
        )

    previous = previous_calendar_day(date)
    if find_log(logs, previous, "C") is None:
        return Decision.reject(
            ReasonCode.PREVIOUS_SHIFT_C_MISSING,
            f"Cannot submit form for {date}. Previous date's Shift C ({previous}) "
            "has not been submitted yet.",
            required_date=previous,
            required_shift="C",
        )

    if shift == "C" and find_log(logs, date, "B") is None:
        return Decision.reject(
            ReasonCode.SHIFT_B_REQUIRED,
            f"Cannot submit Shift C for {date}. Shift B for this date has not been "
            "submitted yet.",
            required_date=date,
            required_shift="B",
        )

    return Decision.accept()
