# shiftlog/db/models.py
"""
SQLAlchemy ORM model for the SQL backing store.

The table mirrors the spreadsheet layout (timestamp, electrician names, shift,
equipment channels) and adds `log_date`, the canonical date derived from the
timestamp, so that (log_date, shift) can carry a real unique constraint.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import JSON, Integer, String, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from shiftlog.utils.dates import normalize_date
from shiftlog.utils.rows import EQUIPMENT_CHANNELS, cell_text, pad_row, shift_key


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""
    pass


class MaintenanceLogRow(Base):
    """One maintenance log (one per date and shift)."""

    __tablename__ = "maintenance_logs"
    __table_args__ = (
        UniqueConstraint("log_date", "shift", name="uq_maintenance_logs_date_shift"),
    )

    # Insertion order doubles as the physical row order.
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # As written: DD/MM/YYYY HH:mm:ss
    timestamp: Mapped[str] = mapped_column(String(64), nullable=False)

    # NULL when the timestamp does not parse (NULLs never collide in the constraint).
    log_date: Mapped[Optional[str]] = mapped_column(String(10), index=True, nullable=True)

    electrician_names: Mapped[str] = mapped_column(String(256), nullable=False, default="")
    shift: Mapped[str] = mapped_column(String(8), nullable=False)

    # channel name -> reading text
    equipment_status: Mapped[Dict[str, str]] = mapped_column(JSON, nullable=False, default=dict)

    @classmethod
    def from_row(cls, row: Sequence[Any]) -> "MaintenanceLogRow":
        cells = pad_row(row)
        return cls(
            timestamp=cell_text(cells[0]),
            log_date=normalize_date(cells[0]) or None,
            electrician_names=cell_text(cells[1]),
            shift=shift_key(cells[2]),
            equipment_status={
                name: cell_text(cells[3 + i]) for i, name in enumerate(EQUIPMENT_CHANNELS)
            },
        )

    def to_row(self) -> List[str]:
        status = self.equipment_status or {}
        return [self.timestamp, self.electrician_names, self.shift] + [
            cell_text(status.get(name)) for name in EQUIPMENT_CHANNELS
        ]
