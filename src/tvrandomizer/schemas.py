"""Pydantic schemas for shows, provider records, picks and display records.

These schemas define the data structures used throughout TV Randomizer:
- Show / SeasonFilter: what the show registry stores per user
- VideoRecord / SeriesMeta: raw metadata provider payloads (read-only)
- NormalizedEpisode / EpisodePick: transient selection values
- WatchHistoryEntry: what the watch-history store records
- EpisodeDisplay: the outward-facing episode record

Provider payloads use camelCase keys; models accept both spellings and
serialize back to camelCase.

All schemas use Pydantic v2 for validation and serialization.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

RawNumber = int | float | str | None


class Show(BaseModel):
    """A tracked show as stored by the show registry.

    Attributes:
        id: Canonical show identifier (IMDb id, e.g. ``tt0944947``)
        name: Display name
        poster: Optional poster URL
        background: Optional background URL
    """

    id: str
    name: str = ""
    poster: str | None = None
    background: str | None = None

    model_config = {"frozen": True}


class SeasonFilter(BaseModel):
    """Per-(user, show) set of enabled seasons. Empty means all seasons."""

    show_id: str
    enabled_seasons: frozenset[int] = Field(default_factory=frozenset)

    model_config = {"frozen": True}

    @field_validator("enabled_seasons", mode="before")
    @classmethod
    def keep_positive_seasons(cls, value: Any) -> frozenset[int]:
        if value is None:
            return frozenset()
        seasons: set[int] = set()
        for item in value:
            if isinstance(item, bool):
                continue
            try:
                number = int(item)
            except (TypeError, ValueError):
                continue
            if number > 0:
                seasons.add(number)
        return frozenset(seasons)


class VideoRecord(BaseModel):
    """Raw per-episode record from the metadata provider.

    Every field is optional. Season and episode numbers may arrive as
    numbers, numeric strings, under the ``number`` alias, or only inside
    the ``id`` string; the identity codec resolves them.
    """

    id: str | None = None
    season: RawNumber = None
    episode: RawNumber = None
    number: RawNumber = None
    name: str | None = None
    title: str | None = None
    description: str | None = None
    overview: str | None = None
    released: str | None = None
    first_aired: str | None = None
    thumbnail: str | None = None

    model_config = ConfigDict(
        extra="allow", populate_by_name=True, alias_generator=to_camel
    )

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, value: Any) -> str | None:
        if value is None:
            return None
        return str(value)

    @property
    def episode_title(self) -> str:
        return self.name or self.title or ""

    @property
    def raw_description(self) -> str:
        return self.description or self.overview or ""

    @property
    def release_date(self) -> str:
        return self.released or self.first_aired or ""


class SeriesMeta(BaseModel):
    """Series metadata as returned by the primary metadata provider."""

    id: str
    type: str = "series"
    name: str = ""
    description: str = ""
    poster: str | None = None
    background: str | None = None
    logo: str | None = None
    release_info: str | None = None
    imdb_rating: str | float | None = None
    runtime: str | None = None
    genres: list[str] | None = None
    cast: list[str] | None = None
    director: list[str] | str | None = None
    writer: list[str] | str | None = None
    videos: list[VideoRecord] = Field(default_factory=list)

    model_config = ConfigDict(
        extra="allow", populate_by_name=True, alias_generator=to_camel
    )

    @field_validator("name", "description", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("release_info", "runtime", mode="before")
    @classmethod
    def stringify(cls, value: Any) -> str | None:
        if value is None:
            return None
        return str(value)

    @field_validator("videos", mode="before")
    @classmethod
    def none_to_list(cls, value: Any) -> Any:
        return [] if value is None else value


class NormalizedEpisode(BaseModel):
    """Uniform internal shape of one provider episode.

    ``id`` normally equals ``<showId>:<season>:<episode>``, but a
    well-formed canonical id supplied by the provider is kept verbatim,
    so ``id`` and ``(season, episode)`` are not always mutually derivable.
    """

    id: str
    season: int = Field(ge=0)
    episode: int = Field(ge=0)
    source: VideoRecord

    model_config = {"frozen": True}

    @property
    def is_streamable(self) -> bool:
        return self.season > 0 and self.episode > 0


class WatchHistoryEntry(BaseModel):
    """One logical watch per (user_id, episode_id); repeats overwrite."""

    user_id: str
    episode_id: str
    show_id: str
    season: int = 0
    episode: int = 0
    show_name: str = ""
    episode_name: str = ""
    poster: str | None = None
    watched_at: datetime | None = None


class EpisodePick(BaseModel):
    """Result of a single selection call."""

    show: Show
    series_meta: SeriesMeta
    episode_id: str
    season: int
    episode: int
    video: VideoRecord | None = None
    was_unwatched: bool = False

    def to_history_entry(
        self, user_id: str, watched_at: datetime | None = None
    ) -> WatchHistoryEntry:
        """Build the watch event the caller records after a pick."""

        return WatchHistoryEntry(
            user_id=user_id,
            episode_id=self.episode_id,
            show_id=self.show.id,
            season=self.season,
            episode=self.episode,
            show_name=self.series_meta.name,
            episode_name=self.video.episode_title if self.video else "",
            poster=self.series_meta.poster,
            watched_at=watched_at,
        )


class ShowSearchResult(BaseModel):
    """Show search hit passed through from the search provider."""

    id: str
    name: str
    poster: str | None = None
    year: str | None = None


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)


class BehaviorHints(_CamelModel):
    binge_group: str
    featured: bool = True
    video_size: int = 1080


class DisplayVideo(_CamelModel):
    id: str
    title: str
    season: int
    episode: int
    released: str = ""
    overview: str = ""


class EpisodeDisplay(_CamelModel):
    """Outward-facing episode record built by the presentation layer."""

    id: str
    type: str = "series"
    name: str
    series: str
    series_id: str
    season: int
    episode: int
    logo: str | None = None
    poster: str | None = None
    background: str | None = None
    description: str = ""
    release_info: str = ""
    released: str = ""
    imdb_rating: str | float | None = None
    runtime: str | None = None
    genres: list[str] | None = None
    cast: list[str] | None = None
    director: list[str] | str | None = None
    writer: list[str] | str | None = None
    behavior_hints: BehaviorHints
    videos: list[DisplayVideo] = Field(default_factory=list)

    def as_meta_response(self) -> dict[str, Any]:
        """Serialize as ``{"meta": {...}}`` with camelCase keys, omitting nulls."""

        return {"meta": self.model_dump(by_alias=True, exclude_none=True)}
