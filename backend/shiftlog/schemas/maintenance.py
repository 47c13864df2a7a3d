# shiftlog/schemas/maintenance.py
"""
Schemas for the /api/maintenance-log endpoints.

The front-end already speaks this wire format (camelCase keys on the status
payload), so field aliases keep Python names snake_case while the JSON stays
unchanged.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from shiftlog.services.policy import LogDraft
from shiftlog.services.status import SubmissionStatus
from shiftlog.utils.rows import MaintenanceLog

Reading = Union[str, int, float, None]


class MaintenanceLogIn(BaseModel):
    """
    Body of POST /api/maintenance-log.

    Everything is optional here on purpose: missing or malformed values are
    reported by the submission policy with its own messages.
    """
    date: Optional[str] = Field(default=None, description="Operating date (YYYY-MM-DD)")
    shift: Optional[str] = Field(default=None, description="Shift label: A, B or C")
    electrician1: Optional[str] = Field(default=None, description="First electrician on shift")
    electrician2: Optional[str] = Field(default=None, description="Second electrician on shift")
    equipment_status: Dict[str, Reading] = Field(
        default_factory=dict,
        description="Channel name -> reading (boiler, solvent, refinery, ...)",
    )
    timestamp: Optional[Union[str, int, float]] = Field(
        default=None,
        description="Client submission time; only its time of day is stored",
    )

    def to_draft(self) -> LogDraft:
        return LogDraft(
            date=self.date,
            shift=self.shift,
            electrician1=self.electrician1,
            electrician2=self.electrician2,
            equipment_status=dict(self.equipment_status or {}),
            timestamp=self.timestamp,
        )


class MaintenanceLogItem(BaseModel):
    """A stored log as returned to the front-end."""
    timestamp: str = Field(..., description="Stored timestamp (DD/MM/YYYY HH:mm:ss)")
    date: str = Field(..., description="Canonical date derived from the timestamp")
    electrician: str = Field(..., description="Electrician names, comma separated")
    shift: str = Field(..., description="Shift label")
    equipment_status: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_log(cls, log: MaintenanceLog) -> "MaintenanceLogItem":
        return cls(
            timestamp=log.timestamp,
            date=log.date,
            electrician=log.electrician,
            shift=log.shift,
            equipment_status=dict(log.equipment_status),
        )


class SubmitResponse(BaseModel):
    success: bool = True
    message: str
    data: MaintenanceLogItem


class LogsResponse(BaseModel):
    success: bool = True
    count: int = Field(..., ge=0)
    data: List[MaintenanceLogItem] = Field(default_factory=list)


class ShiftFlags(BaseModel):
    A: bool = False
    B: bool = False
    C: bool = False


class PreviousDateCheck(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date: str
    shift_c_submitted: bool = Field(..., alias="shiftCSubmitted")


class StatusResponse(BaseModel):
    """
    Example:
    {
      "success": true,
      "date": "2024-01-02",
      "submittedShifts": ["A"],
      "canSubmit": {"A": false, "B": true, "C": false},
      "previousDateCheck": {"date": "2024-01-01", "shiftCSubmitted": true},
      "submissions": {"A": true, "B": false, "C": false}
    }
    """
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    date: str
    submitted_shifts: List[str] = Field(default_factory=list, alias="submittedShifts")
    can_submit: ShiftFlags = Field(..., alias="canSubmit")
    previous_date_check: PreviousDateCheck = Field(..., alias="previousDateCheck")
    submissions: ShiftFlags

    @classmethod
    def from_status(cls, status: SubmissionStatus) -> "StatusResponse":
        return cls(
            date=status.date,
            submitted_shifts=list(status.submitted),
            can_submit=ShiftFlags(**status.eligible),
            previous_date_check=PreviousDateCheck(
                date=status.previous_date,
                shift_c_submitted=status.prev_day_closed,
            ),
            submissions=ShiftFlags(**status.submissions),
        )


class DeleteResponse(BaseModel):
    success: bool = True
    message: str
