"""Pick the best available description for an episode."""

from __future__ import annotations

import structlog

from tvrandomizer.core.collaborators import EpisodeSummaryProtocol
from tvrandomizer.schemas import SeriesMeta, VideoRecord
from tvrandomizer.utils.html import normalize_text, strip_html

logger = structlog.get_logger(__name__)


class DescriptionResolver:
    """Resolve episode descriptions with a secondary-provider fallback.

    Order of preference:
    1. The episode's own description, unless it merely repeats the series
       blurb (compared whitespace-collapsed and case-folded).
    2. A summary from the secondary provider.
    3. The episode's own description, even if it repeats the series blurb.
    4. The series description (possibly empty).

    Secondary-provider failures are logged and treated as "no summary".
    """

    def __init__(self, summaries: EpisodeSummaryProtocol | None = None) -> None:
        self._summaries = summaries

    async def resolve(
        self,
        series_meta: SeriesMeta,
        video: VideoRecord | None,
        season: int,
        episode: int,
    ) -> str:
        video_description = video.raw_description if video else ""
        series_description = series_meta.description or ""

        normalized_video = normalize_text(video_description)
        if normalized_video and normalized_video != normalize_text(series_description):
            return video_description

        summary = await self._secondary_summary(series_meta.id, season, episode)
        if summary:
            return summary

        if video_description:
            return video_description
        return series_description

    async def _secondary_summary(self, show_id: str, season: int, episode: int) -> str:
        if self._summaries is None:
            return ""
        try:
            summary = await self._summaries.get_episode_summary(show_id, season, episode)
        except Exception as exc:  # noqa: BLE001 - any provider failure means "no summary"
            logger.warning(
                "description.secondary_failed",
                show_id=show_id,
                season=season,
                episode=episode,
                error=str(exc),
            )
            return ""
        return strip_html(summary)


async def resolve_episode_description(
    series_meta: SeriesMeta,
    video: VideoRecord | None,
    season: int,
    episode: int,
    summaries: EpisodeSummaryProtocol | None = None,
) -> str:
    """Functional wrapper around :class:`DescriptionResolver`."""

    return await DescriptionResolver(summaries).resolve(series_meta, video, season, episode)
