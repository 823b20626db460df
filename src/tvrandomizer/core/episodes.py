"""Episode normalization and season helpers over provider series metadata."""

from __future__ import annotations

from collections import Counter

from tvrandomizer.core.episode_id import (
    build_episode_id,
    coerce_number,
    derive_season_episode,
)
from tvrandomizer.schemas import NormalizedEpisode, SeriesMeta, VideoRecord


def normalize_episode(
    series_meta: SeriesMeta, record: VideoRecord | None
) -> NormalizedEpisode:
    """Convert a raw provider record into a :class:`NormalizedEpisode`.

    Pure function: derives ``(season, episode)`` through the identity codec
    and keeps a provider-supplied canonical id verbatim.
    """

    source = record if record is not None else VideoRecord()
    season, episode = derive_season_episode(source)
    episode_id = build_episode_id(series_meta.id, season, episode, source.id)
    return NormalizedEpisode(id=episode_id, season=season, episode=episode, source=source)


def normalize_all(series_meta: SeriesMeta) -> list[NormalizedEpisode]:
    return [normalize_episode(series_meta, video) for video in series_meta.videos]


def find_episode_video(
    series_meta: SeriesMeta | None, season: int, episode: int
) -> VideoRecord | None:
    """Find the raw record for ``season``/``episode``, or None."""

    if series_meta is None:
        return None

    for video in series_meta.videos:
        video_episode = coerce_number(video.episode) or coerce_number(video.number)
        if coerce_number(video.season) == season and video_episode == episode:
            return video
    return None


def available_seasons(series_meta: SeriesMeta | None) -> list[int]:
    """Sorted list of positive season numbers present in the episode list."""

    return sorted(season_episode_counts(series_meta))


def season_episode_counts(series_meta: SeriesMeta | None) -> dict[int, int]:
    """Number of episodes per positive season."""

    if series_meta is None:
        return {}

    counts: Counter[int] = Counter()
    for video in series_meta.videos:
        season = coerce_number(video.season)
        if season is not None and season > 0:
            counts[season] += 1
    return dict(sorted(counts.items()))
