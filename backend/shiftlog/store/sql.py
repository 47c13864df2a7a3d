# shiftlog/store/sql.py
"""
SQL backing store (SQLAlchemy async, SQLite by default).

Same raw-row contract as the spreadsheet store, plus a unique constraint on
(log_date, shift): a second row for the same key is refused by the database
even if two submissions race past the policy check.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, List, Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from shiftlog.core.errors import LogNotFound, StoreUnavailable, UniqueKeyViolation
from shiftlog.db.models import MaintenanceLogRow
from shiftlog.db.session import init_db, make_engine, make_session_factory
from shiftlog.store.base import LogStore

logger = logging.getLogger(__name__)


@contextmanager
def _database_errors() -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as e:
        logger.error("Database error: %s", e)
        raise StoreUnavailable("Database request failed", error=str(e)) from e


class SqlLogStore(LogStore):
    """Log rows kept in the `maintenance_logs` table."""

    name = "sql"

    def __init__(self, database_url: str) -> None:
        self.database_url = database_url
        self.engine = make_engine(database_url)
        self.sessions = make_session_factory(self.engine)

    async def init(self) -> None:
        with _database_errors():
            await init_db(self.engine)

    async def close(self) -> None:
        await self.engine.dispose()

    async def read_all(self) -> List[List[Any]]:
        with _database_errors():
            async with self.sessions() as session:
                rows = (
                    await session.execute(
                        select(MaintenanceLogRow).order_by(MaintenanceLogRow.id)
                    )
                ).scalars().all()
        return [r.to_row() for r in rows]

    async def append(self, row: Sequence[Any]) -> None:
        record = MaintenanceLogRow.from_row(row)
        with _database_errors():
            async with self.sessions() as session:
                session.add(record)
                try:
                    await session.commit()
                except IntegrityError as e:
                    await session.rollback()
                    raise UniqueKeyViolation(
                        f"Form for {record.log_date} - Shift {record.shift} "
                        "has already been submitted"
                    ) from e

    async def delete_row(self, index: int) -> None:
        with _database_errors():
            async with self.sessions() as session:
                row_id = (
                    await session.execute(
                        select(MaintenanceLogRow.id)
                        .order_by(MaintenanceLogRow.id)
                        .offset(index)
                        .limit(1)
                    )
                ).scalar()
                if row_id is None:
                    raise LogNotFound("Maintenance log not found")
                await session.execute(
                    delete(MaintenanceLogRow).where(MaintenanceLogRow.id == row_id)
                )
                await session.commit()
