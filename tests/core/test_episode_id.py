"""Tests for canonical episode identifiers and season/episode derivation."""

from __future__ import annotations

import math

import pytest

from tvrandomizer.core.episode_id import (
    EpisodeRef,
    build_episode_id,
    coerce_number,
    derive_season_episode,
    format_label,
    is_show_id,
    parse_episode_id,
)
from tvrandomizer.schemas import VideoRecord


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("tt0903747:1:5", EpisodeRef("tt0903747", 1, 5)),
        ("tt1:0:0", EpisodeRef("tt1", 0, 0)),
        ("tt0944947:10:12", EpisodeRef("tt0944947", 10, 12)),
    ],
)
def test_parse_episode_id_accepts_well_formed_ids(text: str, expected: EpisodeRef) -> None:
    assert parse_episode_id(text) == expected


@pytest.mark.parametrize(
    "text",
    [
        "",
        "tt0903747",
        "tt0903747:1",
        "0903747:1:5",
        "kitsu:123:1:5",
        "tvmaze-169:1:5",
        "tt0903747:one:5",
        "tt0903747:1:5.5",
        "tt0903747:-1:5",
        "tt0903747:1:5:extra",
        "ttabc:1:5",
        None,
        42,
    ],
)
def test_parse_episode_id_rejects_malformed_input(text: object) -> None:
    assert parse_episode_id(text) is None


def test_is_show_id() -> None:
    assert is_show_id("tt0903747")
    assert not is_show_id("tvmaze-169")
    assert not is_show_id(None)


def test_build_episode_id_synthesizes_from_parts() -> None:
    assert build_episode_id("tt0903747", 2, 3) == "tt0903747:2:3"


def test_build_episode_id_keeps_well_formed_fallback_verbatim() -> None:
    """A canonical fallback wins even when season/episode disagree."""

    assert build_episode_id("tt0903747", 9, 9, "tt0903747:1:1") == "tt0903747:1:1"


def test_build_episode_id_ignores_malformed_fallback() -> None:
    assert build_episode_id("tt0903747", 1, 2, "bb-s01e02") == "tt0903747:1:2"


def test_build_episode_id_without_series_returns_fallback() -> None:
    assert build_episode_id(None, 1, 2, "bb-s01e02") == "bb-s01e02"
    assert build_episode_id("", 1, 2) == ""


@pytest.mark.parametrize(
    ("series_id", "season", "episode", "fallback"),
    [
        ("tt0903747", 1, 1, None),
        ("tt0903747", 0, 4, "special-4"),
        ("tt0903747", 3, 7, "tt0903747:3:7"),
    ],
)
def test_build_episode_id_is_idempotent(
    series_id: str, season: int, episode: int, fallback: str | None
) -> None:
    first = build_episode_id(series_id, season, episode, fallback)
    assert build_episode_id(series_id, season, episode, first) == first


def test_format_label_pads_numbers() -> None:
    assert format_label(1, 5) == "S01E05"
    assert format_label(12, 104) == "S12E104"


def test_format_label_treats_non_finite_as_zero() -> None:
    assert format_label(math.nan, None) == "S00E00"
    assert format_label(math.inf, "x") == "S00E00"
    assert format_label("3", "4") == "S03E04"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (3, 3),
        (3.0, 3),
        ("7", 7),
        (" 2 ", 2),
        ("4.0", 4),
        (math.nan, None),
        ("", None),
        ("abc", None),
        (True, None),
        (None, None),
    ],
)
def test_coerce_number(value: object, expected: int | None) -> None:
    assert coerce_number(value) == expected


def test_derive_prefers_explicit_fields() -> None:
    record = VideoRecord(id="tt0903747:9:9", season=2, episode=4)
    assert derive_season_episode(record) == (2, 4)


def test_derive_uses_number_alias_for_episode() -> None:
    record = VideoRecord(season=1, number=6)
    assert derive_season_episode(record) == (1, 6)


def test_derive_uses_number_when_episode_is_zero() -> None:
    record = VideoRecord(season=1, episode=0, number=6)
    assert derive_season_episode(record) == (1, 6)


def test_derive_falls_back_to_id_per_field() -> None:
    """Season may come from the record field while episode comes from the id."""

    record = VideoRecord(id="tt0903747:5:8", season=3)
    assert derive_season_episode(record) == (3, 8)

    record = VideoRecord(id="tt0903747:5:8", episode=2)
    assert derive_season_episode(record) == (5, 2)


def test_derive_defaults_to_zero() -> None:
    assert derive_season_episode(VideoRecord(id="bonus-feature")) == (0, 0)
    assert derive_season_episode(VideoRecord(season="n/a")) == (0, 0)
    assert derive_season_episode(None) == (0, 0)


def test_derive_treats_negative_numbers_as_unresolved() -> None:
    assert derive_season_episode(VideoRecord(season=-1, episode=3)) == (0, 3)
    assert derive_season_episode(VideoRecord(id="tt1:4:7", season=-1, episode=-2)) == (4, 7)
    assert derive_season_episode(VideoRecord(season=2, episode=-1, number=5)) == (2, 5)
