"""Runtime settings loaded from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from tvrandomizer.core.constants import (
    CINEMETA_URL,
    DEFAULT_DB_PATH,
    HISTORY_RECENCY_DAYS,
    MAX_SHOWS,
    PROVIDER_TIMEOUT,
    TVMAZE_URL,
)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration.

    Attributes:
        db_path: SQLite database location or ``":memory:"``
        history_recency_days: Window in which an episode counts as watched
        max_shows: Maximum number of tracked shows per user
        cinemeta_url: Base URL of the primary metadata provider
        tvmaze_url: Base URL of the secondary metadata provider
        request_timeout: Per-request HTTP timeout in seconds
        random_seed: Optional seed for reproducible picks
    """

    db_path: str | Path = DEFAULT_DB_PATH
    history_recency_days: int = HISTORY_RECENCY_DAYS
    max_shows: int = MAX_SHOWS
    cinemeta_url: str = CINEMETA_URL
    tvmaze_url: str = TVMAZE_URL
    request_timeout: float = PROVIDER_TIMEOUT
    random_seed: int | None = None

    @classmethod
    def from_env(cls) -> Settings:
        seed_raw = os.getenv("TVRANDOMIZER_SEED", "").strip()
        try:
            seed = int(seed_raw) if seed_raw else None
        except ValueError:
            seed = None

        return cls(
            db_path=os.getenv("TVRANDOMIZER_DB_PATH") or DEFAULT_DB_PATH,
            history_recency_days=_env_int(
                "TVRANDOMIZER_HISTORY_DAYS", HISTORY_RECENCY_DAYS
            ),
            max_shows=_env_int("TVRANDOMIZER_MAX_SHOWS", MAX_SHOWS),
            cinemeta_url=os.getenv("TVRANDOMIZER_CINEMETA_URL") or CINEMETA_URL,
            tvmaze_url=os.getenv("TVRANDOMIZER_TVMAZE_URL") or TVMAZE_URL,
            request_timeout=_env_float("TVRANDOMIZER_TIMEOUT", PROVIDER_TIMEOUT),
            random_seed=seed,
        )
