"""Build the outward-facing display record for an episode."""

from __future__ import annotations

from tvrandomizer.core.constants import DISPLAY_CONTENT_TYPE, DISPLAY_VIDEO_SIZE
from tvrandomizer.core.episode_id import format_label
from tvrandomizer.schemas import (
    BehaviorHints,
    DisplayVideo,
    EpisodeDisplay,
    SeriesMeta,
    VideoRecord,
)


def build_display_title(show_name: str, episode_title: str, season: int, episode: int) -> str:
    """``"{show} — {title} (S01E05)"``, or ``"{show} — (S01E05)"`` without a title."""

    label = format_label(season, episode)
    if episode_title:
        return f"{show_name} — {episode_title} ({label})"
    return f"{show_name} — ({label})"


def build_episode_display(
    series_meta: SeriesMeta,
    episode_id: str,
    season: int,
    episode: int,
    video: VideoRecord | None = None,
    description: str | None = None,
) -> EpisodeDisplay:
    """Compose the display record. Pure; tolerates missing optional fields.

    Without a ``description`` override the episode's own description is used,
    then the series description.
    """

    episode_title = video.episode_title if video else ""
    release_date = video.release_date if video else ""
    resolved_description = (
        description
        or (video.raw_description if video else "")
        or series_meta.description
        or ""
    )
    release_info = release_date[:4] or series_meta.release_info or ""

    return EpisodeDisplay(
        id=episode_id,
        type=DISPLAY_CONTENT_TYPE,
        name=build_display_title(series_meta.name, episode_title, season, episode),
        series=series_meta.name,
        series_id=series_meta.id,
        season=season,
        episode=episode,
        logo=series_meta.logo,
        poster=series_meta.poster,
        background=series_meta.background,
        description=resolved_description,
        release_info=release_info,
        released=release_date,
        imdb_rating=series_meta.imdb_rating,
        runtime=series_meta.runtime,
        genres=series_meta.genres,
        cast=series_meta.cast,
        director=series_meta.director,
        writer=series_meta.writer,
        behavior_hints=BehaviorHints(
            binge_group=series_meta.id,
            featured=True,
            video_size=DISPLAY_VIDEO_SIZE,
        ),
        videos=[
            DisplayVideo(
                id=episode_id,
                title=episode_title or f"Episode {episode}",
                season=season,
                episode=episode,
                released=release_date,
                overview=resolved_description,
            )
        ],
    )
