"""Tests for the SQLite watch history."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from tvrandomizer.db.database import Database
from tvrandomizer.db.watch_history import WatchHistory
from tvrandomizer.schemas import WatchHistoryEntry

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


def _entry(episode_id: str, watched_at: datetime, **fields: object) -> WatchHistoryEntry:
    show_id, season, episode = episode_id.split(":")
    return WatchHistoryEntry(
        user_id=str(fields.pop("user_id", "user-1")),
        episode_id=episode_id,
        show_id=show_id,
        season=int(season),
        episode=int(episode),
        show_name="Lost",
        episode_name=f"Episode {episode}",
        watched_at=watched_at,
        **fields,
    )


@pytest.mark.asyncio
async def test_recent_watched_ids_respects_window(database: Database) -> None:
    history = WatchHistory(database)
    await history.record_watch(_entry("tt1:1:1", NOW - timedelta(days=1)))
    await history.record_watch(_entry("tt1:1:2", NOW - timedelta(days=8)))
    await history.record_watch(_entry("tt2:1:1", NOW - timedelta(days=1)))

    recent = await history.recent_watched_ids("user-1", "tt1", 7, now=NOW)

    assert recent == {"tt1:1:1"}


@pytest.mark.asyncio
async def test_record_watch_overwrites_timestamp(database: Database) -> None:
    history = WatchHistory(database)
    await history.record_watch(_entry("tt1:1:1", NOW - timedelta(days=30)))
    await history.record_watch(_entry("tt1:1:1", NOW))

    entries = await history.recent_history("user-1", now=NOW)

    assert len(entries) == 1
    assert entries[0].watched_at == NOW
    assert await history.recent_watched_ids("user-1", "tt1", 7, now=NOW) == {"tt1:1:1"}


@pytest.mark.asyncio
async def test_record_watch_fills_timestamp(database: Database) -> None:
    history = WatchHistory(database)
    entry = _entry("tt1:1:1", NOW).model_copy(update={"watched_at": None})

    recorded = await history.record_watch(entry)

    assert recorded.watched_at is not None
    assert recorded.watched_at.tzinfo is not None


@pytest.mark.asyncio
async def test_recent_history_newest_first_with_limit(database: Database) -> None:
    history = WatchHistory(database)
    for offset in range(5):
        await history.record_watch(_entry(f"tt1:1:{offset + 1}", NOW - timedelta(hours=offset)))

    entries = await history.recent_history("user-1", limit=3)

    assert [entry.episode_id for entry in entries] == ["tt1:1:1", "tt1:1:2", "tt1:1:3"]
    assert entries[0].episode_name == "Episode 1"


@pytest.mark.asyncio
async def test_recent_history_window(database: Database) -> None:
    history = WatchHistory(database)
    await history.record_watch(_entry("tt1:1:1", NOW - timedelta(days=2)))
    await history.record_watch(_entry("tt1:1:2", NOW - timedelta(days=20)))

    entries = await history.recent_history("user-1", window_days=7, now=NOW)

    assert [entry.episode_id for entry in entries] == ["tt1:1:1"]


@pytest.mark.asyncio
async def test_clear_only_touches_one_user(database: Database) -> None:
    history = WatchHistory(database)
    await history.record_watch(_entry("tt1:1:1", NOW))
    await history.record_watch(_entry("tt1:1:2", NOW))
    await history.record_watch(_entry("tt1:1:1", NOW, user_id="user-2"))

    assert await history.clear("user-1") == 2

    assert await history.recent_history("user-1") == []
    assert len(await history.recent_history("user-2")) == 1


@pytest.mark.asyncio
async def test_empty_user_is_absence(database: Database) -> None:
    history = WatchHistory(database)

    assert await history.recent_watched_ids("", "tt1", 7) == set()
    assert await history.recent_history("") == []
    assert await history.clear("") == 0
