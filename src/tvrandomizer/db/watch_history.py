"""SQLite-backed watch history."""

from __future__ import annotations

from datetime import datetime, timedelta

import aiosqlite

from tvrandomizer.core.constants import DEFAULT_HISTORY_LIMIT
from tvrandomizer.db.database import Database, from_timestamp, to_timestamp, utc_now
from tvrandomizer.schemas import WatchHistoryEntry


def _row_to_entry(row: aiosqlite.Row) -> WatchHistoryEntry:
    return WatchHistoryEntry(
        user_id=row["user_id"],
        episode_id=row["episode_id"],
        show_id=row["show_id"],
        season=row["season"],
        episode=row["episode"],
        show_name=row["show_name"],
        episode_name=row["episode_name"],
        poster=row["poster"],
        watched_at=from_timestamp(row["watched_at"]),
    )


class WatchHistory:
    """Recently watched episodes, one row per (user, episode).

    Recording the same episode again only moves its timestamp.
    """

    def __init__(self, database: Database) -> None:
        self._db = database

    async def record_watch(self, entry: WatchHistoryEntry) -> WatchHistoryEntry:
        """Insert or overwrite the watch event for ``entry``."""

        watched_at = entry.watched_at or utc_now()
        await self._db.execute(
            """
            INSERT INTO watch_history
            (user_id, episode_id, show_id, season, episode,
             show_name, episode_name, poster, watched_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(user_id, episode_id) DO UPDATE SET
                show_id = excluded.show_id,
                season = excluded.season,
                episode = excluded.episode,
                show_name = excluded.show_name,
                episode_name = excluded.episode_name,
                poster = excluded.poster,
                watched_at = excluded.watched_at
            """,
            (
                entry.user_id,
                entry.episode_id,
                entry.show_id,
                entry.season,
                entry.episode,
                entry.show_name,
                entry.episode_name,
                entry.poster,
                to_timestamp(watched_at),
            ),
        )
        return entry.model_copy(update={"watched_at": watched_at})

    async def recent_watched_ids(
        self,
        user_id: str,
        show_id: str,
        window_days: int,
        now: datetime | None = None,
    ) -> set[str]:
        """Episode ids of ``show_id`` watched within the last ``window_days``."""

        if not user_id:
            return set()
        cutoff = (now or utc_now()) - timedelta(days=window_days)
        rows = await self._db.fetch_all(
            """
            SELECT episode_id FROM watch_history
            WHERE user_id = ? AND show_id = ? AND watched_at >= ?
            """,
            (user_id, show_id, to_timestamp(cutoff)),
        )
        return {row["episode_id"] for row in rows}

    async def recent_history(
        self,
        user_id: str,
        limit: int = DEFAULT_HISTORY_LIMIT,
        window_days: int | None = None,
        now: datetime | None = None,
    ) -> list[WatchHistoryEntry]:
        """Latest watch events for a user, newest first."""

        if not user_id:
            return []
        if window_days is None:
            rows = await self._db.fetch_all(
                """
                SELECT * FROM watch_history WHERE user_id = ?
                ORDER BY watched_at DESC LIMIT ?
                """,
                (user_id, limit),
            )
        else:
            cutoff = (now or utc_now()) - timedelta(days=window_days)
            rows = await self._db.fetch_all(
                """
                SELECT * FROM watch_history
                WHERE user_id = ? AND watched_at >= ?
                ORDER BY watched_at DESC LIMIT ?
                """,
                (user_id, to_timestamp(cutoff), limit),
            )
        return [_row_to_entry(row) for row in rows]

    async def clear(self, user_id: str) -> int:
        """Delete every history row for a user; returns the number removed."""

        if not user_id:
            return 0
        return await self._db.execute(
            "DELETE FROM watch_history WHERE user_id = ?", (user_id,)
        )
