"""Canonical episode identifiers: ``<showId>:<season>:<episode>``.

The identifier is a wire contract. Once handed to a caller it must parse
with :func:`parse_episode_id` and survive :func:`build_episode_id`
unchanged when passed back as ``fallback_id``.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any

from tvrandomizer.core.constants import EPISODE_ID_SEPARATOR, SHOW_ID_PREFIX
from tvrandomizer.schemas import VideoRecord

_SHOW_ID_PATTERN = re.compile(rf"^{re.escape(SHOW_ID_PREFIX)}\d+$")
_NUMBER_PATTERN = re.compile(r"^\d+$")


@dataclass(frozen=True)
class EpisodeRef:
    """Components of a parsed canonical episode identifier."""

    show_id: str
    season: int
    episode: int


def is_show_id(value: Any) -> bool:
    """Return True for canonical show ids (``tt`` followed by digits)."""

    return isinstance(value, str) and bool(_SHOW_ID_PATTERN.match(value))


def parse_episode_id(text: Any) -> EpisodeRef | None:
    """Parse ``tt123:1:5`` into its parts; malformed input yields None.

    Exactly three colon-separated parts are accepted: a canonical show id
    and two non-negative integers. Never raises.
    """

    if not isinstance(text, str) or not text:
        return None

    parts = text.split(EPISODE_ID_SEPARATOR)
    if len(parts) != 3:
        return None

    show_id, season_text, episode_text = parts
    if not is_show_id(show_id):
        return None
    if not _NUMBER_PATTERN.match(season_text) or not _NUMBER_PATTERN.match(
        episode_text
    ):
        return None

    return EpisodeRef(show_id=show_id, season=int(season_text), episode=int(episode_text))


def build_episode_id(
    series_id: str | None, season: int, episode: int, fallback_id: str | None = None
) -> str:
    """Build a canonical episode id.

    A ``fallback_id`` that already parses is returned unchanged, even when
    ``season``/``episode`` disagree with it. Without a series id the
    fallback (or an empty string) is returned.
    """

    if parse_episode_id(fallback_id) is not None:
        return str(fallback_id)
    if not series_id:
        return fallback_id or ""
    return EPISODE_ID_SEPARATOR.join((series_id, str(season), str(episode)))


def coerce_number(value: Any) -> int | None:
    """Convert a provider numeric field to int; None when not finite."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return None
        return int(number) if math.isfinite(number) else None
    return None


def format_label(season: Any, episode: Any) -> str:
    """Format season/episode as ``S01E05``; non-finite input counts as 0."""

    return f"S{coerce_number(season) or 0:02d}E{coerce_number(episode) or 0:02d}"


def _non_negative(value: Any) -> int | None:
    number = coerce_number(value)
    return number if number is not None and number >= 0 else None


def derive_season_episode(record: VideoRecord | None) -> tuple[int, int]:
    """Resolve ``(season, episode)`` for a raw provider record.

    Each field is resolved independently: explicit numeric field first
    (``episode`` then ``number`` for the episode), then the numbers
    embedded in the record's own canonical id, then 0. Negative values
    count as unresolved, so both results are always ``>= 0``.
    """

    if record is None:
        return 0, 0

    season = _non_negative(record.season)
    episode = _non_negative(record.episode)
    if not episode and record.number is not None:
        # zero or missing episode falls through to the "number" alias
        episode = _non_negative(record.number)

    if season is None or episode is None:
        parsed = parse_episode_id(record.id)
        if parsed is not None:
            if season is None:
                season = parsed.season
            if episode is None:
                episode = parsed.episode

    return (season if season is not None else 0, episode if episode is not None else 0)
