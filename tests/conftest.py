"""Pytest configuration and fixtures for TV Randomizer tests."""

import os
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
import structlog

from tvrandomizer.db.database import Database
from tvrandomizer.schemas import SeriesMeta, Show


def _load_project_dotenv() -> None:
    """Load environment variables from the project .env file if present."""

    repo_root = Path(__file__).resolve().parents[1]
    env_path = repo_root / ".env"
    if not env_path.exists():
        return

    for raw_line in env_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if "#" in value:
            value = value.split("#", 1)[0].strip()

        if key and value and key not in os.environ:
            os.environ[key] = value


_load_project_dotenv()


@pytest.fixture(autouse=True)
def reset_structlog() -> Any:
    """CLI runs reconfigure structlog onto a temporary stderr; undo that."""

    yield
    structlog.reset_defaults()


def make_series_meta(
    show_id: str = "tt0903747",
    *,
    seasons: dict[int, int] | None = None,
    videos: list[dict[str, Any]] | None = None,
    **fields: Any,
) -> SeriesMeta:
    """Build series metadata with ``seasons`` = {season: episode count}."""

    if videos is None:
        videos = [
            {
                "id": f"{show_id}:{season}:{episode}",
                "season": season,
                "episode": episode,
                "name": f"Episode {season}x{episode}",
            }
            for season, count in (seasons or {1: 3}).items()
            for episode in range(1, count + 1)
        ]
    payload: dict[str, Any] = {
        "id": show_id,
        "name": "Breaking Bad",
        "description": "A chemistry teacher turns to crime.",
        "videos": videos,
    }
    payload.update(fields)
    return SeriesMeta.model_validate(payload)


@pytest.fixture
def series_factory() -> Any:
    return make_series_meta


@pytest.fixture
def sample_show() -> Show:
    return Show(
        id="tt0903747",
        name="Breaking Bad",
        poster="https://images.example/bb.jpg",
        background="https://images.example/bb-bg.jpg",
    )


@pytest_asyncio.fixture
async def database(tmp_path: Path) -> Any:
    db = Database(tmp_path / "tvrandomizer.db")
    await db.open()
    yield db
    await db.close()
