# shiftlog/utils/dates.py
"""
Date helpers for maintenance logs.

Rows come back from the spreadsheet in whatever shape the sheet decided to
render them: our own `DD/MM/YYYY HH:mm:ss` text, a serial day number when the
cell is formatted as a number, or an ISO string typed in by hand. Everything
is reduced to a canonical `YYYY-MM-DD` string before any comparison.

`normalize_date` never raises: an empty string means "unparseable" and will
never equal a canonical date.
"""

from __future__ import annotations

import logging
import math
import re
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil import parser as dtparser

logger = logging.getLogger(__name__)

# Days between the spreadsheet epoch (1899-12-30) and 1970-01-01.
SERIAL_EPOCH_OFFSET = 25569
UNIX_EPOCH = datetime(1970, 1, 1)

TIMESTAMP_FORMAT = "%d/%m/%Y %H:%M:%S"

_NUMERIC_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")

# dateutil fills missing fields from `default`; two defaults differing in
# year, month and day expose a partial date.
_FILL_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


# ----------------------------
# Normalization
# ----------------------------
def from_serial(serial: float) -> str:
    """Spreadsheet serial day number -> canonical date ('' if out of range)."""
    if not math.isfinite(serial):
        return ""
    try:
        moment = UNIX_EPOCH + timedelta(days=serial - SERIAL_EPOCH_OFFSET)
    except OverflowError:
        return ""
    return moment.date().isoformat()


def _from_day_first(token: str) -> Optional[str]:
    """
    Parse the `DD/MM/YYYY` part of a timestamp.

    Returns None when the token is not three numeric parts (so the caller can
    try a generic parse), '' when it is but does not name a real day.
    """
    parts = token.split("/")
    if len(parts) != 3 or not all(p.isdigit() for p in parts):
        return None
    day, month, year = (int(p) for p in parts)
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return ""


def normalize_date(raw: Any) -> str:
    """
    Reduce a raw date/timestamp value to `YYYY-MM-DD`.

    Accepts:
    - numbers (or numeric strings): spreadsheet serial dates
    - `DD/MM/YYYY` optionally followed by a time
    - any other string python-dateutil can parse (tz-aware values go to UTC)
    """
    if raw is None or isinstance(raw, bool):
        return ""
    if isinstance(raw, datetime):
        if raw.tzinfo is not None:
            raw = raw.astimezone(timezone.utc)
        return raw.date().isoformat()
    if isinstance(raw, date):
        return raw.isoformat()
    if isinstance(raw, (int, float)):
        return from_serial(float(raw))

    text = str(raw).strip()
    if not text:
        return ""

    if _NUMERIC_RE.match(text):
        return from_serial(float(text))

    first = text.split()[0]
    if "/" in first:
        parsed = _from_day_first(first)
        if parsed is not None:
            return parsed

    try:
        dt, other = (dtparser.parse(text, default=d) for d in _FILL_DEFAULTS)
    except (ValueError, OverflowError):
        return ""
    if dt.date() != other.date():
        # "March", "2024-03": no full calendar day given
        return ""
    if dt.tzinfo is not None:
        try:
            dt = dt.astimezone(timezone.utc)
        except OverflowError:
            return ""
    return dt.date().isoformat()


def is_canonical_date(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        return date.fromisoformat(value).isoformat() == value
    except ValueError:
        return False


def previous_calendar_day(canonical: str) -> str:
    """
    The day before `canonical` (YYYY-MM-DD), month and year rollover included.

    Raises ValueError for anything that is not a canonical date, and for
    0001-01-01.
    """
    if not is_canonical_date(canonical):
        raise ValueError(f"Not a canonical YYYY-MM-DD date: {canonical!r}")
    day = date.fromisoformat(canonical)
    if day == date.min:
        raise ValueError(f"{canonical} has no previous calendar day")
    return (day - timedelta(days=1)).isoformat()


def operating_date(raw: Any) -> str:
    """
    `normalize_date` for a submitted or queried shift date.

    Also '' for 0001-01-01: a day with no previous day cannot be opened.
    """
    canonical = normalize_date(raw)
    if canonical == date.min.isoformat():
        return ""
    return canonical


# ----------------------------
# Timestamps
# ----------------------------
def resolve_timezone(name: str) -> tzinfo:
    try:
        return ZoneInfo(name or "UTC")
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown TIMEZONE %r; falling back to UTC", name)
        return timezone.utc


def format_timestamp(dt: datetime) -> str:
    return dt.strftime(TIMESTAMP_FORMAT)


def _parse_client_timestamp(raw: Any, tz: tzinfo) -> Optional[datetime]:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        # Browser clocks send epoch milliseconds.
        try:
            return datetime.fromtimestamp(raw / 1000, tz)
        except (OverflowError, OSError, ValueError):
            return None

    text = str(raw).strip()
    if not text:
        return None
    try:
        return datetime.strptime(text, TIMESTAMP_FORMAT)
    except ValueError:
        pass
    try:
        return dtparser.parse(text)
    except (ValueError, OverflowError):
        return None


def submission_timestamp(
    canonical: str,
    raw_timestamp: Any = None,
    tz: tzinfo = timezone.utc,
    now: Optional[datetime] = None,
) -> str:
    """
    Timestamp text written to the store for a submission on `canonical`.

    The date part is always the shift's operating date, so the date derived
    from the row on read is the one the policy checked. The time of day comes
    from the client timestamp when it parses, else from the current time.
    """
    day = date.fromisoformat(canonical)
    moment = _parse_client_timestamp(raw_timestamp, tz)
    if moment is None:
        moment = now or datetime.now(tz)
    if moment.tzinfo is not None:
        moment = moment.astimezone(tz)
    return format_timestamp(datetime.combine(day, moment.time().replace(microsecond=0)))
