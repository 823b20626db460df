"""Orchestration of picks, lookups and show management.

The service glues the selection core to its collaborators: it runs a pick,
resolves the description, records the watch event and builds the display
record. It also carries the show-management operations a front end needs.
"""

from __future__ import annotations

import random
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager

import structlog

from tvrandomizer.core.config import Settings
from tvrandomizer.core.constants import (
    DEFAULT_HISTORY_LIMIT,
    MAX_SEARCH_RESULTS,
    MIN_SEARCH_QUERY_LENGTH,
    TVMAZE_ID_PREFIX,
)
from tvrandomizer.core.descriptions import DescriptionResolver
from tvrandomizer.core.episode_id import parse_episode_id
from tvrandomizer.core.episodes import (
    available_seasons,
    find_episode_video,
    season_episode_counts,
)
from tvrandomizer.core.errors import (
    MissingUserId,
    ShowAlreadyTracked,
    ShowLimitExceeded,
    ShowNotResolvable,
)
from tvrandomizer.core.presentation import build_episode_display
from tvrandomizer.core.selection import SelectionEngine
from tvrandomizer.db.database import Database
from tvrandomizer.db.show_registry import ShowRegistry
from tvrandomizer.db.watch_history import WatchHistory
from tvrandomizer.metadata.providers.base import ProviderError
from tvrandomizer.metadata.providers.cinemeta import CinemetaProvider
from tvrandomizer.metadata.providers.tvmaze import TVMazeProvider
from tvrandomizer.schemas import (
    EpisodeDisplay,
    SeasonFilter,
    Show,
    ShowSearchResult,
    WatchHistoryEntry,
)

logger = structlog.get_logger(__name__)


class RandomizerService:
    """High-level operations over registry, history and metadata providers."""

    def __init__(
        self,
        *,
        registry: ShowRegistry,
        history: WatchHistory,
        cinemeta: CinemetaProvider,
        tvmaze: TVMazeProvider,
        engine: SelectionEngine,
        settings: Settings | None = None,
    ) -> None:
        self.registry = registry
        self.history = history
        self.cinemeta = cinemeta
        self.tvmaze = tvmaze
        self.engine = engine
        self.settings = settings or Settings()
        self.descriptions = DescriptionResolver(tvmaze)

    # ------------------------------------------------------------------
    # Episodes
    # ------------------------------------------------------------------

    async def random_episode(
        self, user_id: str, show_id: str | None = None
    ) -> EpisodeDisplay | None:
        """Pick, describe, record and render one episode for ``user_id``."""

        if not user_id:
            raise MissingUserId()

        pick = await self.engine.pick_for_user(user_id, show_id)
        if pick is None:
            return None

        description = await self.descriptions.resolve(
            pick.series_meta, pick.video, pick.season, pick.episode
        )
        await self.history.record_watch(pick.to_history_entry(user_id))
        logger.info(
            "service.watch_recorded",
            user_id=user_id,
            show_id=pick.show.id,
            episode_id=pick.episode_id,
        )

        return build_episode_display(
            pick.series_meta,
            pick.episode_id,
            pick.season,
            pick.episode,
            pick.video,
            description,
        )

    async def episode_display(self, episode_id: str) -> EpisodeDisplay | None:
        """Render a canonical episode id without going through selection."""

        ref = parse_episode_id(episode_id)
        if ref is None:
            return None

        series_meta = await self.cinemeta.get_series_meta(ref.show_id)
        if series_meta is None:
            return None

        video = find_episode_video(series_meta, ref.season, ref.episode)
        description = await self.descriptions.resolve(
            series_meta, video, ref.season, ref.episode
        )
        return build_episode_display(
            series_meta, episode_id, ref.season, ref.episode, video, description
        )

    # ------------------------------------------------------------------
    # Shows
    # ------------------------------------------------------------------

    async def list_shows(self, user_id: str) -> list[Show]:
        return await self.registry.list_shows(user_id)

    async def add_show(self, user_id: str, show_id: str) -> Show:
        """Track a show, resolving ``tvmaze-<id>`` search ids first.

        Raises:
            MissingUserId: No user key supplied
            ShowLimitExceeded: The user already tracks ``max_shows`` shows
            ShowNotResolvable: No IMDb id or no metadata for the show
            ShowAlreadyTracked: The show is already on the user's list
        """

        if not user_id:
            raise MissingUserId()

        if await self.registry.count_shows(user_id) >= self.settings.max_shows:
            raise ShowLimitExceeded(self.settings.max_shows)

        canonical_id = await self._resolve_show_id(show_id)
        if await self.registry.has_show(user_id, canonical_id):
            raise ShowAlreadyTracked(canonical_id)

        try:
            series_meta = await self.cinemeta.get_series_meta(canonical_id)
        except ProviderError as exc:
            raise ShowNotResolvable(canonical_id, "Failed to fetch show metadata") from exc
        if series_meta is None:
            raise ShowNotResolvable(canonical_id, "Failed to fetch show metadata")

        show = Show(
            id=canonical_id,
            name=series_meta.name,
            poster=series_meta.poster,
            background=series_meta.background,
        )
        if not await self.registry.insert_show(user_id, show):
            raise ShowAlreadyTracked(canonical_id)

        logger.info("service.show_added", user_id=user_id, show_id=canonical_id)
        return show

    async def _resolve_show_id(self, show_id: str) -> str:
        if not show_id.startswith(TVMAZE_ID_PREFIX):
            return show_id

        tvmaze_id = show_id[len(TVMAZE_ID_PREFIX) :]
        try:
            imdb_id = await self.tvmaze.resolve_imdb_id(tvmaze_id)
        except ProviderError as exc:
            raise ShowNotResolvable(show_id, "Failed to lookup show") from exc
        if not imdb_id:
            raise ShowNotResolvable(show_id, "No IMDB ID available for this show")
        return imdb_id

    async def remove_show(self, user_id: str, show_id: str) -> list[Show]:
        """Stop tracking a show (and drop its season filter)."""

        if not user_id:
            raise MissingUserId()
        await self.registry.delete_show(user_id, show_id)
        await self.registry.delete_season_filter(user_id, show_id)
        logger.info("service.show_removed", user_id=user_id, show_id=show_id)
        return await self.registry.list_shows(user_id)

    async def search_shows(self, query: str) -> list[ShowSearchResult]:
        if not query or len(query.strip()) < MIN_SEARCH_QUERY_LENGTH:
            return []
        results = await self.tvmaze.search_shows(query.strip())
        return results[:MAX_SEARCH_RESULTS]

    # ------------------------------------------------------------------
    # Seasons
    # ------------------------------------------------------------------

    async def available_seasons(self, show_id: str) -> list[int]:
        return available_seasons(await self.cinemeta.get_series_meta(show_id))

    async def season_episode_counts(self, show_id: str) -> dict[int, int]:
        return season_episode_counts(await self.cinemeta.get_series_meta(show_id))

    async def get_season_filter(self, user_id: str, show_id: str) -> list[int]:
        if not user_id:
            raise MissingUserId()
        return sorted(await self.registry.get_season_filter(user_id, show_id))

    async def update_season_filter(
        self, user_id: str, show_id: str, enabled_seasons: Iterable[int]
    ) -> SeasonFilter:
        if not user_id:
            raise MissingUserId()
        return await self.registry.set_season_filter(user_id, show_id, enabled_seasons)

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    async def recent_history(
        self,
        user_id: str,
        limit: int = DEFAULT_HISTORY_LIMIT,
        days: int | None = None,
    ) -> list[WatchHistoryEntry]:
        """Latest watch events, optionally only those within the last ``days``."""

        if not user_id:
            raise MissingUserId()
        return await self.history.recent_history(user_id, limit, window_days=days)

    async def clear_history(self, user_id: str) -> int:
        if not user_id:
            raise MissingUserId()
        return await self.history.clear(user_id)


def create_randomizer_service(
    database: Database,
    settings: Settings | None = None,
    *,
    cinemeta: CinemetaProvider | None = None,
    tvmaze: TVMazeProvider | None = None,
    rng: random.Random | None = None,
) -> RandomizerService:
    """Wire stores, providers and the selection engine together."""

    settings = settings or Settings()
    registry = ShowRegistry(database)
    history = WatchHistory(database)
    cinemeta = cinemeta or CinemetaProvider(
        settings.cinemeta_url, timeout=settings.request_timeout
    )
    tvmaze = tvmaze or TVMazeProvider(
        settings.tvmaze_url, timeout=settings.request_timeout
    )
    engine = SelectionEngine(
        registry,
        history,
        cinemeta,
        rng=rng or random.Random(settings.random_seed),
        recency_days=settings.history_recency_days,
    )
    return RandomizerService(
        registry=registry,
        history=history,
        cinemeta=cinemeta,
        tvmaze=tvmaze,
        engine=engine,
        settings=settings,
    )


@asynccontextmanager
async def open_randomizer(
    settings: Settings | None = None,
) -> AsyncIterator[RandomizerService]:
    """Open database and HTTP clients for the lifetime of the block."""

    settings = settings or Settings.from_env()
    database = Database(settings.db_path)
    await database.open()
    service = create_randomizer_service(database, settings)
    try:
        yield service
    finally:
        await service.cinemeta.aclose()
        await service.tvmaze.aclose()
        await database.close()
