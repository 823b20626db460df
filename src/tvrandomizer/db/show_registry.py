"""SQLite-backed show registry: tracked shows and per-show season filters."""

from __future__ import annotations

import json
from collections.abc import Iterable

from tvrandomizer.db.database import Database, to_timestamp, utc_now
from tvrandomizer.schemas import SeasonFilter, Show


class ShowRegistry:
    """Per-user tracked shows and enabled-season settings.

    Show ids are unique per user. Shows are immutable once added; removing
    one is a delete. Season filters are upserted, one per (user, show).
    """

    def __init__(self, database: Database) -> None:
        self._db = database

    async def list_shows(self, user_id: str) -> list[Show]:
        """All tracked shows for ``user_id``, newest first."""

        if not user_id:
            return []
        rows = await self._db.fetch_all(
            """
            SELECT show_id, name, poster, background FROM shows
            WHERE user_id = ?
            ORDER BY created_at DESC, rowid DESC
            """,
            (user_id,),
        )
        return [
            Show(
                id=row["show_id"],
                name=row["name"],
                poster=row["poster"],
                background=row["background"],
            )
            for row in rows
        ]

    async def count_shows(self, user_id: str) -> int:
        if not user_id:
            return 0
        row = await self._db.fetch_one(
            "SELECT COUNT(*) FROM shows WHERE user_id = ?", (user_id,)
        )
        return int(row[0]) if row else 0

    async def has_show(self, user_id: str, show_id: str) -> bool:
        if not user_id:
            return False
        row = await self._db.fetch_one(
            "SELECT 1 FROM shows WHERE user_id = ? AND show_id = ?",
            (user_id, show_id),
        )
        return row is not None

    async def insert_show(self, user_id: str, show: Show) -> bool:
        """Add a show; returns False when the user already tracks it."""

        if not user_id:
            return False
        inserted = await self._db.execute(
            """
            INSERT OR IGNORE INTO shows
            (user_id, show_id, name, poster, background, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                user_id,
                show.id,
                show.name,
                show.poster,
                show.background,
                to_timestamp(utc_now()),
            ),
        )
        return inserted > 0

    async def delete_show(self, user_id: str, show_id: str) -> None:
        if not user_id:
            return
        await self._db.execute(
            "DELETE FROM shows WHERE user_id = ? AND show_id = ?", (user_id, show_id)
        )

    async def get_season_filter(self, user_id: str, show_id: str) -> frozenset[int]:
        """Enabled seasons for a show; empty means every season is eligible."""

        if not user_id or not show_id:
            return frozenset()
        row = await self._db.fetch_one(
            """
            SELECT enabled_seasons FROM show_settings
            WHERE user_id = ? AND show_id = ?
            """,
            (user_id, show_id),
        )
        if row is None:
            return frozenset()
        return SeasonFilter(
            show_id=show_id, enabled_seasons=json.loads(row["enabled_seasons"])
        ).enabled_seasons

    async def set_season_filter(
        self, user_id: str, show_id: str, enabled_seasons: Iterable[int]
    ) -> SeasonFilter:
        """Upsert the season filter and return the stored value."""

        season_filter = SeasonFilter(show_id=show_id, enabled_seasons=list(enabled_seasons))
        if not user_id or not show_id:
            return season_filter

        now = to_timestamp(utc_now())
        await self._db.execute(
            """
            INSERT INTO show_settings
            (user_id, show_id, enabled_seasons, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(user_id, show_id) DO UPDATE SET
                enabled_seasons = excluded.enabled_seasons,
                updated_at = excluded.updated_at
            """,
            (
                user_id,
                show_id,
                json.dumps(sorted(season_filter.enabled_seasons)),
                now,
                now,
            ),
        )
        return season_filter

    async def delete_season_filter(self, user_id: str, show_id: str) -> None:
        if not user_id or not show_id:
            return
        await self._db.execute(
            "DELETE FROM show_settings WHERE user_id = ? AND show_id = ?",
            (user_id, show_id),
        )
