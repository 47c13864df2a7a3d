"""
HTTP tests for /api/maintenance-log.

The default `client` fixture runs the app against the spreadsheet store on a
fake worksheet that already holds the 2024-01-01 shift C row.
"""
import asyncio

import pytest
from starlette.testclient import TestClient

from conftest import FakeWorksheet, payload, sheet_row
from shiftlog.core.errors import StoreUnavailable
from shiftlog.main import create_app
from shiftlog.store.sheets import SheetsLogStore
from shiftlog.store.sql import SqlLogStore
from shiftlog.utils.rows import HEADER_ROW

BASE = "/api/maintenance-log"


# ─────────────────────────────────────────────────────────────
# Basics
# ─────────────────────────────────────────────────────────────

class TestBasics:
    def test_root(self, client):
        res = client.get("/")
        assert res.status_code == 200
        assert "Maintenance API is running" in res.text

    def test_health(self, client):
        res = client.get("/health")
        assert res.status_code == 200
        assert res.json()["data"]["store"] == "sheets"

    def test_request_id_headers(self, client):
        res = client.get("/health", headers={"x-request-id": "abc-123"})
        assert res.headers["x-request-id"] == "abc-123"
        assert "x-response-ms" in res.headers


# ─────────────────────────────────────────────────────────────
# POST
# ─────────────────────────────────────────────────────────────

class TestSubmit:
    def test_created(self, client, worksheet):
        res = client.post(BASE, json=payload(timestamp="2024-01-02T07:45:00Z"))
        assert res.status_code == 201
        body = res.json()
        assert body["success"] is True
        assert body["message"] == "Maintenance log submitted successfully"
        assert body["data"]["timestamp"] == "02/01/2024 07:45:00"
        assert body["data"]["shift"] == "A"
        assert body["data"]["electrician"] == "Ravi Das"
        assert body["data"]["equipment_status"]["boiler"] == "Running"
        assert worksheet.values[-1][:3] == ["02/01/2024 07:45:00", "Ravi Das", "A"]

    def test_trailing_slash(self, client):
        assert client.post(BASE + "/", json=payload()).status_code == 201

    def test_previous_c_missing(self, client):
        res = client.post(BASE, json=payload(day="2024-01-05"))
        assert res.status_code == 403
        body = res.json()
        assert body["success"] is False
        assert body["code"] == "PREVIOUS_SHIFT_C_MISSING"
        assert body["requiredDate"] == "2024-01-04"
        assert body["requiredShift"] == "C"

    def test_duplicate(self, client):
        assert client.post(BASE, json=payload()).status_code == 201
        res = client.post(BASE, json=payload(shift="a"))
        assert res.status_code == 409
        assert res.json()["code"] == "DUPLICATE_ENTRY"

    def test_shift_b_required(self, client):
        client.post(BASE, json=payload(shift="A"))
        res = client.post(BASE, json=payload(shift="C"))
        assert res.status_code == 403
        assert res.json()["code"] == "SHIFT_B_REQUIRED"
        assert res.json()["requiredShift"] == "B"

    def test_full_day_then_next_day(self, client):
        for shift in ("A", "B", "C"):
            assert client.post(BASE, json=payload(shift=shift)).status_code == 201
        assert client.post(BASE, json=payload(day="2024-01-03")).status_code == 201

    @pytest.mark.parametrize(
        "overrides",
        [
            {"date": ""},
            {"shift": "D"},
            {"electrician1": "", "electrician2": ""},
            {"equipment_status": {"boiler": "-5"}},
            {"equipment_status": {"pump": -2}},
            {"date": "0001-01-01"},
            {"date": "March"},
        ],
    )
    def test_invalid_input(self, client, worksheet, overrides):
        before = len(worksheet.values)
        res = client.post(BASE, json=payload(**overrides))
        assert res.status_code == 400
        assert res.json()["code"] == "INVALID_INPUT"
        assert len(worksheet.values) == before

    def test_malformed_body_is_400(self, client):
        res = client.post(BASE, json={"date": "2024-01-02", "equipment_status": ["not", "a", "map"]})
        assert res.status_code == 400
        assert res.json()["code"] == "INVALID_INPUT"

    def test_missing_equipment_status_is_fine(self, client):
        body = payload()
        del body["equipment_status"]
        assert client.post(BASE, json=body).status_code == 201


# ─────────────────────────────────────────────────────────────
# GET
# ─────────────────────────────────────────────────────────────

class TestList:
    def test_list_all(self, client):
        client.post(BASE, json=payload())
        body = client.get(BASE).json()
        assert body["success"] is True
        assert body["count"] == 2
        assert [d["shift"] for d in body["data"]] == ["C", "A"]

    def test_filters(self, client):
        client.post(BASE, json=payload())
        body = client.get(BASE, params={"date": "2024-01-02", "shift": "a"}).json()
        assert body["count"] == 1
        assert body["data"][0]["date"] == "2024-01-02"

    def test_limit(self, client):
        client.post(BASE, json=payload())
        assert client.get(BASE, params={"limit": 1}).json()["count"] == 1

    def test_bad_limit(self, client):
        assert client.get(BASE, params={"limit": "many"}).status_code == 400

    def test_empty_sheet(self):
        app = create_app(store=SheetsLogStore(FakeWorksheet([list(HEADER_ROW)])))
        with TestClient(app) as c:
            assert c.get(BASE).json() == {"success": True, "count": 0, "data": []}


class TestStatus:
    def test_status_payload(self, client):
        client.post(BASE, json=payload(shift="A"))
        res = client.get(BASE + "/status", params={"date": "2024-01-02"})
        assert res.status_code == 200
        assert res.json() == {
            "success": True,
            "date": "2024-01-02",
            "submittedShifts": ["A"],
            "canSubmit": {"A": False, "B": True, "C": False},
            "previousDateCheck": {"date": "2024-01-01", "shiftCSubmitted": True},
            "submissions": {"A": True, "B": False, "C": False},
        }

    def test_previous_day_open(self, client):
        body = client.get(BASE + "/status", params={"date": "2024-01-10"}).json()
        assert body["canSubmit"] == {"A": False, "B": False, "C": False}
        assert body["previousDateCheck"]["shiftCSubmitted"] is False

    def test_missing_date(self, client):
        res = client.get(BASE + "/status")
        assert res.status_code == 400
        assert res.json()["message"] == "Date parameter is required"

    def test_unparseable_date(self, client):
        assert client.get(BASE + "/status", params={"date": "someday"}).status_code == 400

    def test_first_representable_day(self, client):
        res = client.get(BASE + "/status", params={"date": "0001-01-01"})
        assert res.status_code == 400
        assert res.json()["code"] == "INVALID_INPUT"

    def test_idempotent(self, client):
        first = client.get(BASE + "/status", params={"date": "2024-01-02"}).json()
        second = client.get(BASE + "/status", params={"date": "2024-01-02"}).json()
        assert first == second


# ─────────────────────────────────────────────────────────────
# DELETE
# ─────────────────────────────────────────────────────────────

class TestDelete:
    def test_delete(self, client, worksheet):
        client.post(BASE, json=payload())
        res = client.delete(BASE + "/2024-01-02/a")
        assert res.status_code == 200
        assert res.json() == {"success": True, "message": "Maintenance log deleted successfully"}
        assert [r[2] for r in worksheet.values[1:]] == ["C"]

    def test_delete_missing(self, client):
        res = client.delete(BASE + "/2024-01-02/A")
        assert res.status_code == 404
        assert res.json()["message"] == "Maintenance log not found"

    def test_delete_unknown_shift(self, client, worksheet):
        before = len(worksheet.values)
        res = client.delete(BASE + "/2024-01-02/ZZZ")
        assert res.status_code == 400
        assert res.json()["code"] == "INVALID_INPUT"
        assert len(worksheet.values) == before


# ─────────────────────────────────────────────────────────────
# Store failures
# ─────────────────────────────────────────────────────────────

class BrokenStore(SheetsLogStore):
    async def read_all(self):
        raise StoreUnavailable("Google Sheets request failed", error="connection reset")


class CrashingStore(SheetsLogStore):
    async def read_all(self):
        raise RuntimeError("unexpected")


class TestStoreFailures:
    def test_store_unavailable_is_500(self):
        app = create_app(store=BrokenStore(FakeWorksheet([list(HEADER_ROW)])))
        with TestClient(app, raise_server_exceptions=False) as c:
            res = c.post(BASE, json=payload())
        assert res.status_code == 500
        assert res.json() == {
            "success": False,
            "message": "Google Sheets request failed",
            "code": "STORE_UNAVAILABLE",
            "error": "connection reset",
        }

    def test_unexpected_error_is_500(self):
        app = create_app(store=CrashingStore(FakeWorksheet([list(HEADER_ROW)])))
        with TestClient(app, raise_server_exceptions=False) as c:
            res = c.get(BASE)
        assert res.status_code == 500
        assert res.json()["code"] == "INTERNAL_ERROR"
        assert res.json()["success"] is False


# ─────────────────────────────────────────────────────────────
# SQL store end to end
# ─────────────────────────────────────────────────────────────

class TestSqlBackedApi:
    def test_day_sequence(self, tmp_path):
        url = f"sqlite+aiosqlite:///{tmp_path / 'shiftlog.db'}"
        with TestClient(create_app(store=SqlLogStore(url))) as c:
            assert c.get("/health").json()["data"]["store"] == "sql"
            assert c.post(BASE, json=payload()).status_code == 403

        async def close_previous_day():
            seed = SqlLogStore(url)
            await seed.append(sheet_row("2024-01-01", "C"))
            await seed.close()

        asyncio.run(close_previous_day())

        with TestClient(create_app(store=SqlLogStore(url))) as c:
            assert c.post(BASE, json=payload()).status_code == 201
            assert c.post(BASE, json=payload()).status_code == 409
            assert c.delete(BASE + "/2024-01-02/A").status_code == 200
            assert c.get(BASE).json()["count"] == 1
