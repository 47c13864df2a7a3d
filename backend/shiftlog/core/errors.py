# shiftlog/core/errors.py
"""
Error taxonomy shared by the policy, the stores and the HTTP layer.

Every error the API reports carries a machine-readable `code` and the HTTP
status it maps to. FastAPI exception handlers in `shiftlog.main` turn these
into the `{success: false, message, code, ...}` envelope.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ReasonCode(str, Enum):
    INVALID_INPUT = "INVALID_INPUT"
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"
    PREVIOUS_SHIFT_C_MISSING = "PREVIOUS_SHIFT_C_MISSING"
    SHIFT_B_REQUIRED = "SHIFT_B_REQUIRED"


REASON_STATUS: Dict[ReasonCode, int] = {
    ReasonCode.INVALID_INPUT: 400,
    ReasonCode.DUPLICATE_ENTRY: 409,
    ReasonCode.PREVIOUS_SHIFT_C_MISSING: 403,
    ReasonCode.SHIFT_B_REQUIRED: 403,
}


class ShiftLogError(Exception):
    """Base class for errors rendered as structured JSON responses."""

    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str, *, error: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.error = error

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "success": False,
            "message": self.message,
            "code": self.code,
        }
        if self.error:
            payload["error"] = self.error
        return payload


class ConfigurationError(RuntimeError):
    """Raised at startup when the selected store cannot be configured."""


class PolicyViolation(ShiftLogError):
    """A submission rejected by the submission policy."""

    def __init__(
        self,
        code: ReasonCode,
        message: str,
        *,
        required_date: Optional[str] = None,
        required_shift: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.code = code.value
        self.reason = code
        self.status_code = REASON_STATUS[code]
        self.required_date = required_date
        self.required_shift = required_shift

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        if self.required_date is not None:
            payload["requiredDate"] = self.required_date
        if self.required_shift is not None:
            payload["requiredShift"] = self.required_shift
        return payload


class LogNotFound(ShiftLogError):
    code = "LOG_NOT_FOUND"
    status_code = 404


# -----------------------
# Store errors
# -----------------------
class StoreError(ShiftLogError):
    """Transport, auth or database failure talking to the backing store."""

    code = "STORE_UNAVAILABLE"
    status_code = 500


class StoreUnavailable(StoreError):
    pass


class SheetNotFound(StoreError):
    code = "SHEET_NOT_FOUND"
    status_code = 404


class StorePermissionDenied(StoreError):
    code = "PERMISSION_DENIED"
    status_code = 403


class UniqueKeyViolation(StoreError):
    """The store refused a row whose (date, shift) already exists."""

    code = ReasonCode.DUPLICATE_ENTRY.value
    status_code = 409
