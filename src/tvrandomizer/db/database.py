"""Shared aiosqlite connection with an explicit open/close lifecycle."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import aiosqlite

from tvrandomizer.core.constants import DEFAULT_DB_PATH
from tvrandomizer.db.migrations import ensure_connection_migrated, prepare_db_path


def utc_now() -> datetime:
    return datetime.now(UTC)


def to_timestamp(value: datetime) -> str:
    """Serialize to a sortable UTC ISO-8601 string."""

    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="microseconds")


def from_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value)


class Database:
    """Async SQLite database used by the show registry and watch history.

    Resolved once per process and passed by reference to the stores that
    need it. Open it with :meth:`open` (or ``async with``) and close it on
    shutdown.
    """

    def __init__(self, db_path: str | Path = DEFAULT_DB_PATH) -> None:
        """Initialize the database handle.

        Args:
            db_path: Path to SQLite database file (\":memory:\" for in-memory).
                Parent directories are created on construction.
        """

        self._db_path = prepare_db_path(db_path)
        self._db: aiosqlite.Connection | None = None

    @property
    def path(self) -> str:
        return self._db_path

    @property
    def is_open(self) -> bool:
        return self._db is not None

    async def open(self) -> aiosqlite.Connection:
        """Connect and migrate on first use; later calls reuse the connection."""

        if self._db is None:
            self._db = await aiosqlite.connect(self._db_path)
            self._db.row_factory = aiosqlite.Row
            await ensure_connection_migrated(self._db)
        return self._db

    async def execute(self, sql: str, params: tuple[Any, ...] = ()) -> int:
        """Execute a write statement, commit, and return the affected row count."""

        db = await self.open()
        async with db.execute(sql, params) as cursor:
            rowcount = cursor.rowcount
        await db.commit()
        return rowcount

    async def fetch_all(self, sql: str, params: tuple[Any, ...] = ()) -> list[aiosqlite.Row]:
        db = await self.open()
        async with db.execute(sql, params) as cursor:
            return list(await cursor.fetchall())

    async def fetch_one(self, sql: str, params: tuple[Any, ...] = ()) -> aiosqlite.Row | None:
        db = await self.open()
        async with db.execute(sql, params) as cursor:
            row: aiosqlite.Row | None = await cursor.fetchone()
            return row

    async def close(self) -> None:
        """Close database connection."""

        if self._db is not None:
            await self._db.close()
            self._db = None

    async def __aenter__(self) -> Database:
        await self.open()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
