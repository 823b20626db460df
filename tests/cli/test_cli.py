"""CLI tests for the tvrandomizer command."""

from __future__ import annotations

import json
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock

import pytest
from typer.testing import CliRunner

from tvrandomizer.cli.main import app
from tvrandomizer.core.errors import ShowAlreadyTracked
from tvrandomizer.core.presentation import build_episode_display
from tvrandomizer.schemas import SeasonFilter, Show, ShowSearchResult, WatchHistoryEntry

runner = CliRunner()


@pytest.fixture()
def stub_service(monkeypatch: pytest.MonkeyPatch) -> AsyncMock:
    service = AsyncMock()
    opened: list[Any] = []

    @asynccontextmanager
    async def fake_open_randomizer(settings: Any):
        opened.append(settings)
        yield service

    monkeypatch.setattr("tvrandomizer.cli.common.open_randomizer", fake_open_randomizer)
    service.opened = opened
    return service


def test_pick_prints_display(stub_service: AsyncMock, series_factory: Any) -> None:
    meta = series_factory()
    stub_service.random_episode.return_value = build_episode_display(
        meta, "tt0903747:1:1", 1, 1, meta.videos[0], "Walt gets bad news."
    )

    result = runner.invoke(app, ["pick", "--user", "user-1"])

    assert result.exit_code == 0
    assert "Breaking Bad — Episode 1x1 (S01E01)" in result.stdout
    assert "Walt gets bad news." in result.stdout
    stub_service.random_episode.assert_awaited_once_with("user-1", None)


def test_pick_json_for_one_show(stub_service: AsyncMock, series_factory: Any) -> None:
    meta = series_factory()
    stub_service.random_episode.return_value = build_episode_display(
        meta, "tt0903747:1:2", 1, 2
    )

    result = runner.invoke(
        app, ["pick", "-u", "user-1", "--show", "tt0903747", "--json"]
    )

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["meta"]["id"] == "tt0903747:1:2"
    assert payload["meta"]["behaviorHints"]["bingeGroup"] == "tt0903747"
    stub_service.random_episode.assert_awaited_once_with("user-1", "tt0903747")


def test_pick_without_episode(stub_service: AsyncMock) -> None:
    stub_service.random_episode.return_value = None

    result = runner.invoke(app, ["pick", "--user", "user-1"])

    assert result.exit_code == 0
    assert "No episode available." in result.stdout


def test_episode_not_found_exits_non_zero(stub_service: AsyncMock) -> None:
    stub_service.episode_display.return_value = None

    result = runner.invoke(app, ["episode", "bogus"])

    assert result.exit_code == 1
    assert "Episode not found: bogus" in result.output


def test_seasons_lists_counts(stub_service: AsyncMock) -> None:
    stub_service.season_episode_counts.return_value = {1: 7, 2: 13}

    result = runner.invoke(app, ["seasons", "tt0903747"])

    assert result.exit_code == 0
    assert "Season 1: 7 episodes" in result.stdout
    assert "Season 2: 13 episodes" in result.stdout


def test_shows_add_and_list(stub_service: AsyncMock) -> None:
    show = Show(id="tt0903747", name="Breaking Bad")
    stub_service.add_show.return_value = show
    stub_service.list_shows.return_value = [show]

    added = runner.invoke(app, ["shows", "add", "tt0903747", "--user", "user-1"])
    listed = runner.invoke(app, ["shows", "list", "--user", "user-1"])

    assert added.exit_code == 0
    assert "Added Breaking Bad (tt0903747)" in added.stdout
    assert listed.exit_code == 0
    assert "tt0903747\tBreaking Bad" in listed.stdout


def test_shows_add_duplicate_reports_error(stub_service: AsyncMock) -> None:
    stub_service.add_show.side_effect = ShowAlreadyTracked("tt0903747")

    result = runner.invoke(app, ["shows", "add", "tt0903747", "--user", "user-1"])

    assert result.exit_code == 1
    assert "already tracked" in result.output


def test_shows_remove(stub_service: AsyncMock) -> None:
    stub_service.remove_show.return_value = []

    result = runner.invoke(app, ["shows", "remove", "tt0903747", "-u", "user-1"])

    assert result.exit_code == 0
    assert "0 shows remain" in result.stdout
    stub_service.remove_show.assert_awaited_once_with("user-1", "tt0903747")


def test_shows_search_json(stub_service: AsyncMock) -> None:
    stub_service.search_shows.return_value = [
        ShowSearchResult(id="tvmaze-1", name="Lost", poster="p.jpg", year="2004")
    ]

    result = runner.invoke(app, ["shows", "search", "lost", "--json"])

    assert result.exit_code == 0
    assert json.loads(result.stdout)[0]["id"] == "tvmaze-1"


def test_settings_set_and_get(stub_service: AsyncMock) -> None:
    stub_service.update_season_filter.return_value = SeasonFilter(
        show_id="tt0903747", enabled_seasons=[2, 1]
    )
    stub_service.get_season_filter.return_value = []

    set_result = runner.invoke(
        app, ["settings", "set", "tt0903747", "2", "1", "--user", "user-1"]
    )
    get_result = runner.invoke(app, ["settings", "get", "tt0903747", "--user", "user-1"])

    assert set_result.exit_code == 0
    assert "tt0903747: 1, 2" in set_result.stdout
    stub_service.update_season_filter.assert_awaited_once_with(
        "user-1", "tt0903747", [2, 1]
    )
    assert "tt0903747: all seasons" in get_result.stdout


def test_history_list_and_clear(stub_service: AsyncMock) -> None:
    stub_service.recent_history.return_value = [
        WatchHistoryEntry(
            user_id="user-1",
            episode_id="tt0903747:1:1",
            show_id="tt0903747",
            season=1,
            episode=1,
            show_name="Breaking Bad",
            episode_name="Pilot",
        )
    ]
    stub_service.clear_history.return_value = 1

    listed = runner.invoke(app, ["history", "list", "--user", "user-1", "-n", "5"])
    cleared = runner.invoke(app, ["history", "clear", "--user", "user-1"])

    assert "Breaking Bad S01E01\tPilot" in listed.stdout
    stub_service.recent_history.assert_awaited_once_with("user-1", 5, None)
    assert "Cleared 1 history entries" in cleared.stdout


def test_db_path_option_reaches_settings(stub_service: AsyncMock, tmp_path: Path) -> None:
    stub_service.list_shows.return_value = []
    db_path = tmp_path / "custom.db"

    result = runner.invoke(
        app, ["shows", "list", "--user", "user-1", "--db-path", str(db_path)]
    )

    assert result.exit_code == 0
    assert stub_service.opened[0].db_path == db_path


def test_db_migrate_creates_database(tmp_path: Path) -> None:
    db_path = tmp_path / "data" / "custom.db"

    result = runner.invoke(app, ["db", "migrate", "--db-path", str(db_path)])

    assert result.exit_code == 0
    assert "Migrations applied" in result.stdout
    assert db_path.exists()


def test_shows_list_against_real_database(tmp_path: Path) -> None:
    db_path = tmp_path / "tv.db"

    result = runner.invoke(app, ["shows", "list", "--user", "user-1", "--db-path", str(db_path)])

    assert result.exit_code == 0
    assert "No shows tracked." in result.stdout


def test_db_migrate_uses_environment_path(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    db_path = tmp_path / "env" / "tv.db"
    monkeypatch.setenv("TVRANDOMIZER_DB_PATH", str(db_path))

    result = runner.invoke(app, ["db", "migrate"])

    assert result.exit_code == 0
    assert str(db_path) in result.stdout
    assert db_path.exists()


def test_history_list_days_window(stub_service: AsyncMock) -> None:
    stub_service.recent_history.return_value = []

    result = runner.invoke(app, ["history", "list", "-u", "user-1", "--days", "3"])

    assert result.exit_code == 0
    assert "No watch history." in result.stdout
    stub_service.recent_history.assert_awaited_once_with("user-1", 50, 3)
