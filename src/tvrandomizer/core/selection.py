"""Random episode selection over a user's tracked shows.

Algorithm:
1. Restrict the pool to the target show when one is given (an empty id
   means no restriction).
2. Shuffle the pool; the shuffled order decides which show is tried first.
3. For each show in order, build its eligible episodes:
   - normalize every provider record,
   - keep streamable episodes (season > 0 and episode > 0) unless none exist,
   - apply the season filter unless it would leave nothing,
   - prefer episodes not watched within the recency window.
4. The first show with an eligible episode wins; the episode is drawn
   uniformly from its pick pool.

Only the draw inside the winning show is uniform. Across shows, precedence
comes from the shuffle, so shows are not weighted by episode count.
"""

from __future__ import annotations

import random
from collections.abc import Sequence

import structlog

from tvrandomizer.core.collaborators import (
    SeriesMetadataProtocol,
    ShowRegistryProtocol,
    WatchHistoryProtocol,
)
from tvrandomizer.core.constants import HISTORY_RECENCY_DAYS
from tvrandomizer.core.episodes import normalize_all
from tvrandomizer.schemas import EpisodePick, NormalizedEpisode, Show

logger = structlog.get_logger(__name__)


def streamable_or_all(episodes: list[NormalizedEpisode]) -> list[NormalizedEpisode]:
    """Streamable episodes, or every episode for specials-only shows."""

    streamable = [item for item in episodes if item.is_streamable]
    return streamable or episodes


def apply_season_filter(
    episodes: list[NormalizedEpisode], enabled_seasons: frozenset[int] | set[int]
) -> list[NormalizedEpisode]:
    """Restrict to enabled seasons; an empty result ignores the filter."""

    if not enabled_seasons:
        return episodes
    filtered = [item for item in episodes if item.season in enabled_seasons]
    return filtered or episodes


def partition_unwatched(
    episodes: list[NormalizedEpisode], recent_ids: set[str]
) -> tuple[list[NormalizedEpisode], list[NormalizedEpisode]]:
    """Split into (unwatched, recently watched)."""

    unwatched: list[NormalizedEpisode] = []
    watched: list[NormalizedEpisode] = []
    for item in episodes:
        (watched if item.id in recent_ids else unwatched).append(item)
    return unwatched, watched


class SelectionEngine:
    """Pick one episode to play next from a pool of shows."""

    def __init__(
        self,
        registry: ShowRegistryProtocol,
        history: WatchHistoryProtocol,
        metadata: SeriesMetadataProtocol,
        rng: random.Random | None = None,
        recency_days: int = HISTORY_RECENCY_DAYS,
    ) -> None:
        self._registry = registry
        self._history = history
        self._metadata = metadata
        self._rng = rng or random.Random()
        self.recency_days = recency_days

    async def pick_for_user(
        self, user_id: str, target_show_id: str | None = None
    ) -> EpisodePick | None:
        """Load the user's shows from the registry and pick from them."""

        shows = await self._registry.list_shows(user_id)
        return await self.pick(user_id, shows, target_show_id)

    async def pick(
        self,
        user_id: str,
        shows: Sequence[Show],
        target_show_id: str | None = None,
    ) -> EpisodePick | None:
        """Pick an episode from ``shows`` (optionally only ``target_show_id``).

        Returns None when the pool is empty or no show yields an episode.
        A failing show is skipped, never aborting the remaining ones.
        """

        if not shows:
            return None

        pool = [show for show in shows if not target_show_id or show.id == target_show_id]
        if not pool:
            return None

        self._rng.shuffle(pool)
        bound_logger = logger.bind(user_id=user_id, pool_size=len(pool))

        for show in pool:
            try:
                result = await self.pick_from_show(user_id, show)
            except Exception as exc:  # noqa: BLE001 - one failing show must not abort selection
                bound_logger.warning(
                    "selection.show_failed", show_id=show.id, error=str(exc)
                )
                continue
            if result is not None:
                bound_logger.info(
                    "selection.picked",
                    show_id=show.id,
                    episode_id=result.episode_id,
                    was_unwatched=result.was_unwatched,
                )
                return result
            bound_logger.debug("selection.show_empty", show_id=show.id)

        bound_logger.info("selection.no_pick")
        return None

    async def pick_from_show(self, user_id: str, show: Show) -> EpisodePick | None:
        """Pick an episode from a single show, or None when it has none."""

        series_meta = await self._metadata.get_series_meta(show.id)
        if series_meta is None or not series_meta.videos:
            return None

        working_set = streamable_or_all(normalize_all(series_meta))

        enabled_seasons = await self._registry.get_season_filter(user_id, show.id)
        working_set = apply_season_filter(working_set, enabled_seasons)

        recent_ids = await self._history.recent_watched_ids(
            user_id, show.id, self.recency_days
        )
        unwatched, _ = partition_unwatched(working_set, recent_ids)

        pick_pool = unwatched or working_set
        picked = self._rng.choice(pick_pool)

        return EpisodePick(
            show=show,
            series_meta=series_meta,
            episode_id=picked.id,
            season=picked.season,
            episode=picked.episode,
            video=picked.source,
            was_unwatched=bool(unwatched),
        )
