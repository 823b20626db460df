"""Interfaces the selection core depends on.

Concrete implementations live in ``tvrandomizer.db`` (registry, history) and
``tvrandomizer.metadata.providers`` (metadata, summaries).
"""

from __future__ import annotations

from typing import Protocol

from tvrandomizer.schemas import SeriesMeta, Show


class ShowRegistryProtocol(Protocol):
    """Stores a user's tracked shows and per-show season filters."""

    async def list_shows(self, user_id: str) -> list[Show]: ...

    async def get_season_filter(self, user_id: str, show_id: str) -> frozenset[int]: ...


class WatchHistoryProtocol(Protocol):
    """Records and queries recently watched canonical episode ids."""

    async def recent_watched_ids(
        self, user_id: str, show_id: str, window_days: int
    ) -> set[str]: ...


class SeriesMetadataProtocol(Protocol):
    """Primary metadata provider: series fields plus the full episode list."""

    async def get_series_meta(self, show_id: str) -> SeriesMeta | None: ...


class EpisodeSummaryProtocol(Protocol):
    """Secondary provider for plain-text episode summaries."""

    async def get_episode_summary(
        self, show_id: str, season: int, episode: int
    ) -> str: ...
