# shiftlog/api/deps.py
"""FastAPI dependencies shared by the routers."""

from __future__ import annotations

from fastapi import Request

from shiftlog.services.log_service import MaintenanceLogService


def get_log_service(request: Request) -> MaintenanceLogService:
    """The service built at startup (see `shiftlog.main.on_startup`)."""
    return request.app.state.log_service
