# shiftlog/db/session.py
"""
Database engine utilities for the SQL backing store.

We use:
- SQLAlchemy async engine + AsyncSession
- SQLite via aiosqlite driver by default

The engine is created by whoever owns the store (`SqlLogStore`), not at import
time, so tests and the app each get their own.
"""

from __future__ import annotations

import os

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from shiftlog.db.models import Base


def _ensure_sqlite_dir(url: str) -> None:
    """Create the parent directory of a file-backed SQLite database."""
    parsed = make_url(url)
    if not parsed.drivername.startswith("sqlite"):
        return
    database = parsed.database or ""
    if not database or database == ":memory:":
        return
    parent = os.path.dirname(os.path.abspath(database))
    os.makedirs(parent, exist_ok=True)


def make_engine(url: str) -> AsyncEngine:
    # Keep echo=False; set LOG_LEVEL=DEBUG and enable sqlalchemy.engine logging to see SQL.
    _ensure_sqlite_dir(url)
    return create_async_engine(url, echo=False, future=True)


def make_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
        class_=AsyncSession,
    )


async def init_db(engine: AsyncEngine) -> None:
    """
    Create tables and apply SQLite pragmas.

    - journal_mode=WAL: reads don't block the single writer
    - synchronous=NORMAL: good balance for durability vs speed
    """
    async with engine.begin() as conn:
        if engine.dialect.name == "sqlite":
            await conn.execute(text("PRAGMA journal_mode=WAL;"))
            await conn.execute(text("PRAGMA synchronous=NORMAL;"))

        await conn.run_sync(Base.metadata.create_all)
