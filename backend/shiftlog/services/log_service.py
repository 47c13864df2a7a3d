# shiftlog/services/log_service.py
"""
Maintenance log orchestration (store -> policy -> store).

Why a service?
- Keeps the routes thin
- Owns the writer locks, so read -> evaluate -> append is one critical section
- Easier to test with any `LogStore`

Writes are serialized per (date, shift): two submissions for the same key
cannot both pass the duplicate check. Deletes also take a global lock because
removing a row shifts the position of every row after it. Locks are
in-process only; run a single worker against the spreadsheet store.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone, tzinfo
from typing import Any, AsyncIterator, Callable, Dict, List, Optional, Tuple

from shiftlog.core.errors import LogNotFound, PolicyViolation, ReasonCode, UniqueKeyViolation
from shiftlog.services.policy import LogDraft, check_input, evaluate
from shiftlog.services.status import SubmissionStatus, submission_status
from shiftlog.store.base import LogStore
from shiftlog.utils.dates import operating_date, submission_timestamp
from shiftlog.utils.rows import (
    SHIFTS,
    MaintenanceLog,
    build_row,
    join_electricians,
    log_from_row,
    logs_from_rows,
    shift_key,
)

logger = logging.getLogger(__name__)


def _required_date(raw: Any, what: str = "Date") -> str:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise PolicyViolation(ReasonCode.INVALID_INPUT, f"{what} parameter is required")
    canonical = operating_date(raw)
    if not canonical:
        raise PolicyViolation(
            ReasonCode.INVALID_INPUT, f"{what} must be a valid date (YYYY-MM-DD)"
        )
    return canonical


class MaintenanceLogService:
    def __init__(
        self,
        store: LogStore,
        tz: tzinfo = timezone.utc,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.store = store
        self.tz = tz
        self._clock = clock
        self._key_locks: Dict[Tuple[str, str], asyncio.Lock] = {}
        self._lock_users: Dict[Tuple[str, str], int] = {}
        self._delete_lock = asyncio.Lock()

    @asynccontextmanager
    async def _key_lock(self, date: str, shift: str) -> AsyncIterator[None]:
        """Hold the (date, shift) lock; it is dropped once nobody holds or awaits it."""
        key = (date, shift)
        lock = self._key_locks.setdefault(key, asyncio.Lock())
        self._lock_users[key] = self._lock_users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[key] -= 1
            if not self._lock_users[key]:
                del self._lock_users[key]
                del self._key_locks[key]

    async def history(self) -> List[MaintenanceLog]:
        return logs_from_rows(await self.store.read_all())

    # -----------------------
    # Submissions
    # -----------------------
    async def submit(self, draft: LogDraft) -> MaintenanceLog:
        """
        Validate and append one log.

        Raises PolicyViolation when a rule rejects the draft, StoreError when
        the store fails. Nothing is written unless every rule passes.
        """
        decision = check_input(draft)
        if not decision.accepted:
            logger.info("Rejected submission: %s", decision.message)
            raise decision.to_error()

        date, shift = draft.canonical_date, draft.canonical_shift

        async with self._key_lock(date, shift):
            decision = evaluate(await self.history(), draft)
            if not decision.accepted:
                logger.info(
                    "Rejected submission %s/%s (%s)", date, shift, decision.code.value
                )
                raise decision.to_error()

            now = self._clock() if self._clock else None
            row = build_row(
                submission_timestamp(date, draft.timestamp, self.tz, now=now),
                join_electricians(draft.electrician1, draft.electrician2),
                shift,
                draft.equipment_status,
            )
            try:
                await self.store.append(row)
            except UniqueKeyViolation as e:
                logger.warning("Store refused duplicate %s/%s", date, shift)
                raise PolicyViolation(
                    ReasonCode.DUPLICATE_ENTRY,
                    f"Form for {date} - Shift {shift} has already been submitted",
                ) from e

        logger.info("Stored maintenance log %s shift %s", date, shift)
        return log_from_row(row)

    # -----------------------
    # Queries
    # -----------------------
    async def list_logs(
        self,
        date: Optional[str] = None,
        shift: Optional[str] = None,
        limit: int = 50,
    ) -> List[MaintenanceLog]:
        logs = await self.history()

        if date:
            canonical = _required_date(date)
            logs = [log for log in logs if log.date == canonical]

        if shift:
            key = shift_key(shift)
            logs = [log for log in logs if shift_key(log.shift) == key]

        return logs[: max(limit, 0)]

    async def status(self, date: Optional[str]) -> SubmissionStatus:
        canonical = _required_date(date)
        return submission_status(await self.history(), canonical)

    # -----------------------
    # Admin
    # -----------------------
    async def delete(self, date: str, shift: str) -> MaintenanceLog:
        """Remove the last stored log for (date, shift)."""
        canonical = _required_date(date)
        key = shift_key(shift)
        if key not in SHIFTS:
            raise PolicyViolation(ReasonCode.INVALID_INPUT, "Shift must be A, B, or C")

        async with self._delete_lock, self._key_lock(canonical, key):
            history = await self.history()
            index = None
            for i, log in enumerate(history):
                if log.matches(canonical, key):
                    index = i
            if index is None:
                raise LogNotFound("Maintenance log not found")
            await self.store.delete_row(index)

        logger.info("Deleted maintenance log %s shift %s (row %d)", canonical, key, index)
        return history[index]
