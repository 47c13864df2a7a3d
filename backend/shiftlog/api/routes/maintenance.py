# shiftlog/api/routes/maintenance.py
"""
/api/maintenance-log

- POST   /                 submit a shift log (validated by the submission policy)
- GET    /                 list stored logs, filtered by date/shift, limited
- GET    /status           which shifts are submitted / eligible for a date
- DELETE /{date}/{shift}   admin: remove a stored log

Routes stay thin: validation, ordering rules and locking live in
`MaintenanceLogService`. Errors are raised as `ShiftLogError` and rendered by
the handlers in `shiftlog.main`.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from shiftlog.api.deps import get_log_service
from shiftlog.core.config import settings
from shiftlog.schemas.maintenance import (
    DeleteResponse,
    LogsResponse,
    MaintenanceLogIn,
    MaintenanceLogItem,
    StatusResponse,
    SubmitResponse,
)
from shiftlog.services.log_service import MaintenanceLogService

router = APIRouter(prefix="/api/maintenance-log")


@router.post("", status_code=201, response_model=SubmitResponse)
@router.post("/", status_code=201, response_model=SubmitResponse, include_in_schema=False)
async def submit_log(
    body: MaintenanceLogIn,
    service: MaintenanceLogService = Depends(get_log_service),
):
    log = await service.submit(body.to_draft())
    return SubmitResponse(
        message="Maintenance log submitted successfully",
        data=MaintenanceLogItem.from_log(log),
    )


@router.get("", response_model=LogsResponse)
@router.get("/", response_model=LogsResponse, include_in_schema=False)
async def list_logs(
    date: Optional[str] = Query(default=None, description="Filter by date (YYYY-MM-DD)"),
    shift: Optional[str] = Query(default=None, description="Filter by shift (A, B, C)"),
    limit: int = Query(
        default=settings.DEFAULT_LIST_LIMIT, ge=0, le=1000, description="Max results to return"
    ),
    service: MaintenanceLogService = Depends(get_log_service),
):
    """
    Example:
      /api/maintenance-log?date=2024-01-02&shift=A&limit=10
    """
    logs = await service.list_logs(date=date, shift=shift, limit=limit)
    return LogsResponse(
        count=len(logs),
        data=[MaintenanceLogItem.from_log(log) for log in logs],
    )


@router.get("/status", response_model=StatusResponse)
async def submission_status(
    date: Optional[str] = Query(default=None, description="Date to check (YYYY-MM-DD)"),
    service: MaintenanceLogService = Depends(get_log_service),
):
    status = await service.status(date)
    return StatusResponse.from_status(status)


@router.delete("/{date}/{shift}", response_model=DeleteResponse)
async def delete_log(
    date: str,
    shift: str,
    service: MaintenanceLogService = Depends(get_log_service),
):
    await service.delete(date, shift)
    return DeleteResponse(message="Maintenance log deleted successfully")
