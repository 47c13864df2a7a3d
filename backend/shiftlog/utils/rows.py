# shiftlog/utils/rows.py
"""
Row layout of the maintenance log table and conversion to/from records.

Layout (columns A:P, row 1 is a header):
    timestamp, electrician names, shift, <13 equipment channels>
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from shiftlog.utils.dates import normalize_date

EQUIPMENT_CHANNELS = (
    "boiler",
    "solvent",
    "refinery",
    "np",
    "pp",
    "dryer",
    "prep_compressor",
    "pump",
    "prep",
    "wbsedcl_unit",
    "Pulverizer_Mega",
    "Pulverizer_Oils",
    "Boiler_12_Ton",
)

HEADER_ROW = [
    "Timestamp",
    "Electrician Name",
    "Shift",
    "Boiler",
    "Solvent",
    "Refinery",
    "NP",
    "PP",
    "Dryer",
    "Prep Compressor",
    "Pump",
    "Prep",
    "WBSEDCL Unit",
    "Pulverizer Mega",
    "Pulverizer Oils",
    "Boiler 12 Ton",
]

ROW_WIDTH = 3 + len(EQUIPMENT_CHANNELS)

SHIFTS = ("A", "B", "C")


@dataclass(frozen=True)
class MaintenanceLog:
    """One stored log, as read back from the table."""
    timestamp: str
    date: str  # canonical YYYY-MM-DD derived from timestamp ('' if unparseable)
    electrician: str
    shift: str
    equipment_status: Dict[str, str] = field(default_factory=dict)

    def matches(self, date: str, shift: str) -> bool:
        return bool(date) and self.date == date and shift_key(self.shift) == shift_key(shift)


def shift_key(raw: Any) -> str:
    """Trimmed, upper-cased shift label used for every comparison."""
    if raw is None:
        return ""
    return str(raw).strip().upper()


def cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def pad_row(row: Sequence[Any]) -> List[Any]:
    """Truncate/pad a raw row to the fixed width; None cells become ''."""
    cells = ["" if c is None else c for c in list(row)[:ROW_WIDTH]]
    return cells + [""] * (ROW_WIDTH - len(cells))


def log_from_row(row: Sequence[Any]) -> MaintenanceLog:
    cells = pad_row(row)
    return MaintenanceLog(
        timestamp=cell_text(cells[0]),
        date=normalize_date(cells[0]),
        electrician=cell_text(cells[1]),
        shift=cell_text(cells[2]),
        equipment_status={
            name: cell_text(cells[3 + i]) for i, name in enumerate(EQUIPMENT_CHANNELS)
        },
    )


def logs_from_rows(rows: Sequence[Sequence[Any]]) -> List[MaintenanceLog]:
    return [log_from_row(r) for r in rows]


def join_electricians(*names: Optional[str]) -> str:
    return ", ".join(n.strip() for n in names if isinstance(n, str) and n.strip())


def build_row(
    timestamp: str,
    electricians: str,
    shift: str,
    equipment_status: Optional[Mapping[str, Any]],
) -> List[str]:
    """Raw row for an accepted submission. Unknown channels are dropped."""
    status = equipment_status or {}
    return [timestamp, electricians, shift_key(shift)] + [
        cell_text(status.get(name)) for name in EQUIPMENT_CHANNELS
    ]
