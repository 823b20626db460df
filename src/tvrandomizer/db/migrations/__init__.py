"""Versioned SQL migrations for the shows / settings / history database.

Migrations are the ``NNN_name.sql`` files bundled next to this module,
applied in filename order and recorded in ``schema_migrations``.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path

import aiosqlite
import structlog

__all__ = [
    "Migration",
    "apply_migrations",
    "applied_migration_names",
    "ensure_connection_migrated",
    "load_migrations",
    "prepare_db_path",
]

logger = structlog.get_logger(__name__)

_TRACKING_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS schema_migrations (
    name TEXT PRIMARY KEY,
    applied_at TEXT NOT NULL
)
"""


@dataclass(frozen=True)
class Migration:
    """One bundled SQL script."""

    name: str
    sql: str


def _sql_resources() -> Iterable[Traversable]:
    for entry in resources.files(__name__).iterdir():
        if entry.name.endswith(".sql"):
            yield entry


def load_migrations() -> list[Migration]:
    """Bundled migrations sorted by filename."""

    return [
        Migration(name=entry.name, sql=entry.read_text(encoding="utf-8"))
        for entry in sorted(_sql_resources(), key=lambda item: item.name)
    ]


async def applied_migration_names(connection: aiosqlite.Connection) -> set[str]:
    async with connection.execute("SELECT name FROM schema_migrations") as cursor:
        return {row[0] for row in await cursor.fetchall()}


async def ensure_connection_migrated(connection: aiosqlite.Connection) -> list[str]:
    """Bring an open connection up to date; returns newly applied names."""

    await connection.execute(_TRACKING_TABLE_SQL)
    await connection.commit()

    applied = await applied_migration_names(connection)
    newly_applied: list[str] = []
    for migration in load_migrations():
        if migration.name in applied:
            continue

        await connection.executescript(migration.sql)
        await connection.execute(
            "INSERT INTO schema_migrations (name, applied_at) VALUES (?, ?)",
            (migration.name, datetime.now(UTC).isoformat()),
        )
        await connection.commit()
        newly_applied.append(migration.name)
        logger.info("db.migration_applied", migration=migration.name)

    return newly_applied


def prepare_db_path(db_path: str | Path) -> str:
    """Expand ``db_path`` and create its parent directory; ``:memory:`` passes through."""

    if str(db_path) == ":memory:":
        return ":memory:"
    resolved = Path(db_path).expanduser()
    resolved.parent.mkdir(parents=True, exist_ok=True)
    return str(resolved)


async def apply_migrations(db_path: str | Path) -> list[str]:
    """Open ``db_path`` (creating parent directories) and migrate it."""

    async with aiosqlite.connect(prepare_db_path(db_path)) as connection:
        return await ensure_connection_migrated(connection)
