"""
Shared test fixtures for the shift log backend.

The spreadsheet store runs against `FakeWorksheet`, an in-memory stand-in for
`gspread.Worksheet` that implements the three calls the store uses.
"""
import asyncio
import copy
from datetime import date

import pytest

from shiftlog.store.base import LogStore
from shiftlog.store.sheets import SheetsLogStore
from shiftlog.utils.rows import EQUIPMENT_CHANNELS, HEADER_ROW, ROW_WIDTH, pad_row


class FakeWorksheet:
    """Minimal in-memory gspread.Worksheet."""

    def __init__(self, values=None, title="Sheet1"):
        self.title = title
        self.values = [list(r) for r in (values or [])]
        self.calls = []

    def get_all_values(self):
        self.calls.append(("get_all_values",))
        return copy.deepcopy(self.values)

    def append_row(self, values, value_input_option="RAW", table_range=None, **kwargs):
        self.calls.append(("append_row", value_input_option, table_range))
        self.values.append(list(values))

    def delete_rows(self, start_index, end_index=None):
        self.calls.append(("delete_rows", start_index))
        del self.values[start_index - 1]


class MemoryLogStore(LogStore):
    """List-backed store; yields to the loop on every call to expose races."""

    name = "memory"

    def __init__(self, rows=None):
        self.rows = [pad_row(r) for r in (rows or [])]

    async def read_all(self):
        await asyncio.sleep(0)
        return [list(r) for r in self.rows]

    async def append(self, row):
        await asyncio.sleep(0)
        self.rows.append(pad_row(row))

    async def delete_row(self, index):
        await asyncio.sleep(0)
        del self.rows[index]


# ── Row helpers ────────────────────────────────────────────────────────────────

def sheet_row(day, shift, electrician="Ravi Das", time="08:00:00", **equipment):
    """A stored row for `day` (YYYY-MM-DD) written the way the API writes it."""
    d = date.fromisoformat(day)
    row = [f"{d:%d/%m/%Y} {time}", electrician, shift] + [""] * (ROW_WIDTH - 3)
    if equipment:
        for name, value in equipment.items():
            row[3 + EQUIPMENT_CHANNELS.index(name)] = value
    return row


def payload(day="2024-01-02", shift="A", **overrides):
    body = {
        "date": day,
        "shift": shift,
        "electrician1": "Ravi Das",
        "electrician2": "",
        "equipment_status": {"boiler": "Running", "pump": "12"},
    }
    body.update(overrides)
    return body


# ── Fixtures ───────────────────────────────────────────────────────────────────

@pytest.fixture
def worksheet():
    """Worksheet with a header and the closing shift of 2024-01-01."""
    return FakeWorksheet([list(HEADER_ROW), sheet_row("2024-01-01", "C")])


@pytest.fixture
def sheets_store(worksheet):
    return SheetsLogStore(worksheet)


@pytest.fixture
def client(sheets_store):
    from starlette.testclient import TestClient
    from shiftlog.main import create_app

    with TestClient(create_app(store=sheets_store), raise_server_exceptions=False) as c:
        yield c
