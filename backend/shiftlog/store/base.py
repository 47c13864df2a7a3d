# shiftlog/store/base.py
"""
Backing store interface.

The store is a plain table of raw rows (see `shiftlog.utils.rows`). It does no
filtering or validation of its own; the service reads everything, decides, and
appends.
"""

from __future__ import annotations

import abc
from typing import Any, List, Sequence


class LogStore(abc.ABC):
    """Read-all / append / delete-by-position table of maintenance log rows."""

    name = "base"

    async def init(self) -> None:
        """Prepare the store (create tables, write headers). Called once at startup."""

    async def close(self) -> None:
        """Release connections. Called once at shutdown."""

    @abc.abstractmethod
    async def read_all(self) -> List[List[Any]]:
        """Every data row in physical order, header skipped, padded to full width."""

    @abc.abstractmethod
    async def append(self, row: Sequence[Any]) -> None:
        """Add one row at the end."""

    @abc.abstractmethod
    async def delete_row(self, index: int) -> None:
        """Remove the data row at 0-based `index` of the last `read_all()` result."""
