# shiftlog/store/sheets.py
"""
Google Sheets backing store.

One worksheet holds every log: row 1 is the header, each following row is one
log in the fixed A:P layout.

Notes:
- gspread is synchronous. Calls run in a worker thread via `asyncio.to_thread()`
  so they don't block the event loop.
- The authorized client is built once by `open_worksheet()` at startup and the
  worksheet is handed to `SheetsLogStore`; nothing is cached at module level.
- Calls are not retried. Failures surface as `StoreError` subclasses.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any, Callable, List, Sequence

import gspread
from google.auth.exceptions import GoogleAuthError
from google.oauth2.service_account import Credentials
from gspread.exceptions import APIError, GSpreadException, SpreadsheetNotFound, WorksheetNotFound
from requests.exceptions import RequestException

from shiftlog.core.config import Settings
from shiftlog.core.errors import (
    ConfigurationError,
    SheetNotFound,
    StoreError,
    StorePermissionDenied,
    StoreUnavailable,
)
from shiftlog.store.base import LogStore
from shiftlog.utils.rows import HEADER_ROW, pad_row

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

# Sheets rows are 1-based and row 1 is the header.
FIRST_DATA_ROW = 2

# USER_ENTERED parses these leading characters as a formula.
FORMULA_PREFIXES = ("=", "+", "-", "@")
_PLAIN_NUMBER_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")


def literal_cell(value: Any) -> Any:
    """
    Cell value safe to send with USER_ENTERED.

    Text that Sheets would evaluate as a formula gets a leading apostrophe, so
    it is stored and read back as the same text. Plain numbers pass through.
    """
    if (
        isinstance(value, str)
        and value.startswith(FORMULA_PREFIXES)
        and not _PLAIN_NUMBER_RE.match(value)
    ):
        return "'" + value
    return value


def translate_api_error(exc: APIError) -> StoreError:
    status = getattr(getattr(exc, "response", None), "status_code", None)
    if status == 404:
        return SheetNotFound(
            "Google Sheet not found. Please check SPREADSHEET_ID", error=str(exc)
        )
    if status == 403:
        return StorePermissionDenied(
            "Permission denied. Please check service account permissions", error=str(exc)
        )
    return StoreUnavailable("Google Sheets request failed", error=str(exc))


def build_credentials(settings: Settings) -> Credentials:
    if settings.GOOGLE_CREDENTIALS_JSON:
        return Credentials.from_service_account_info(
            dict(settings.GOOGLE_CREDENTIALS_JSON), scopes=SCOPES
        )
    if settings.GOOGLE_APPLICATION_CREDENTIALS:
        try:
            return Credentials.from_service_account_file(
                settings.GOOGLE_APPLICATION_CREDENTIALS, scopes=SCOPES
            )
        except (OSError, ValueError) as e:
            raise ConfigurationError(f"Unreadable service account key file: {e}") from e
    raise ConfigurationError(
        "GOOGLE_CREDENTIALS_JSON or GOOGLE_APPLICATION_CREDENTIALS must be set"
    )


def open_worksheet(settings: Settings) -> gspread.Worksheet:
    """Authorize a client and open the configured worksheet (blocking)."""
    if not settings.GOOGLE_SPREADSHEET_ID:
        raise ConfigurationError("GOOGLE_SPREADSHEET_ID is not set")

    client = gspread.authorize(build_credentials(settings))
    try:
        spreadsheet = client.open_by_key(settings.GOOGLE_SPREADSHEET_ID)
        return spreadsheet.worksheet(settings.SHEET_NAME)
    except (SpreadsheetNotFound, WorksheetNotFound) as e:
        raise SheetNotFound(
            f"Worksheet {settings.SHEET_NAME!r} not found in spreadsheet "
            f"{settings.GOOGLE_SPREADSHEET_ID}"
        ) from e
    except APIError as e:
        raise translate_api_error(e) from e


class SheetsLogStore(LogStore):
    """Log rows kept in a single gspread worksheet."""

    name = "sheets"

    def __init__(self, worksheet: gspread.Worksheet) -> None:
        self.worksheet = worksheet

    async def _run(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        try:
            return await asyncio.to_thread(fn, *args, **kwargs)
        except APIError as e:
            raise translate_api_error(e) from e
        except (SpreadsheetNotFound, WorksheetNotFound) as e:
            raise SheetNotFound("Google Sheet not found. Please check SPREADSHEET_ID") from e
        except (GSpreadException, RequestException, GoogleAuthError) as e:
            raise StoreUnavailable("Google Sheets request failed", error=str(e)) from e

    async def init(self) -> None:
        values = await self._run(self.worksheet.get_all_values)
        if not values:
            logger.info("Worksheet %s is empty; writing header row", self.worksheet.title)
            await self._run(
                self.worksheet.append_row, HEADER_ROW, value_input_option="RAW"
            )

    async def read_all(self) -> List[List[Any]]:
        values = await self._run(self.worksheet.get_all_values)
        return [pad_row(r) for r in values[1:]]

    async def append(self, row: Sequence[Any]) -> None:
        await self._run(
            self.worksheet.append_row,
            [literal_cell(c) for c in row],
            value_input_option="USER_ENTERED",
            table_range="A1",
        )

    async def delete_row(self, index: int) -> None:
        await self._run(self.worksheet.delete_rows, index + FIRST_DATA_ROW)
