# shiftlog/store/factory.py
"""Builds the configured backing store once, at application startup."""

from __future__ import annotations

import asyncio
import logging

from shiftlog.core.config import Settings
from shiftlog.store.base import LogStore

logger = logging.getLogger(__name__)


async def build_store(settings: Settings) -> LogStore:
    if settings.STORE_BACKEND == "sql":
        from shiftlog.store.sql import SqlLogStore

        logger.info("Using SQL store (%s)", settings.DATABASE_URL)
        return SqlLogStore(settings.DATABASE_URL)

    from shiftlog.store.sheets import SheetsLogStore, open_worksheet

    worksheet = await asyncio.to_thread(open_worksheet, settings)
    logger.info(
        "Using Google Sheets store (spreadsheet=%s, sheet=%s)",
        settings.GOOGLE_SPREADSHEET_ID,
        settings.SHEET_NAME,
    )
    return SheetsLogStore(worksheet)
