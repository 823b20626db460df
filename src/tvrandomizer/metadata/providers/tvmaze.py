"""TVMaze provider for episode summaries, show search and id lookups."""

from __future__ import annotations

from collections import OrderedDict
from typing import Any

import httpx

from tvrandomizer.core.constants import (
    PROVIDER_TIMEOUT,
    TVMAZE_ID_PREFIX,
    TVMAZE_LOOKUP_CACHE_SIZE,
    TVMAZE_URL,
)
from tvrandomizer.core.episode_id import is_show_id
from tvrandomizer.metadata.providers.base import BaseProvider
from tvrandomizer.schemas import ShowSearchResult
from tvrandomizer.utils.html import strip_html

_MISSING = ""


class ShowIdCache:
    """Bounded LRU of IMDb id -> TVMaze id ("" marks a known miss).

    Shared across concurrent requests without locking; a lost update only
    costs one extra lookup.
    """

    def __init__(self, max_size: int = TVMAZE_LOOKUP_CACHE_SIZE) -> None:
        self.max_size = max_size
        self._entries: OrderedDict[str, str] = OrderedDict()

    def __contains__(self, imdb_id: object) -> bool:
        return imdb_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, imdb_id: str) -> str | None:
        value = self._entries.get(imdb_id)
        if value is None:
            return None
        self._entries.move_to_end(imdb_id)
        return value

    def set(self, imdb_id: str, tvmaze_id: str | None) -> None:
        self._entries[imdb_id] = tvmaze_id or _MISSING
        self._entries.move_to_end(imdb_id)
        while len(self._entries) > self.max_size:
            self._entries.popitem(last=False)


class TVMazeProvider(BaseProvider):
    """TVMaze API wrapper (no authentication required)."""

    def __init__(
        self,
        base_url: str = TVMAZE_URL,
        timeout: float = PROVIDER_TIMEOUT,
        client: httpx.AsyncClient | None = None,
        id_cache: ShowIdCache | None = None,
    ) -> None:
        super().__init__(
            provider_name="TVMaze",
            base_url=base_url,
            rate_limit_per_minute=40,
            max_retries=3,
            timeout=timeout,
            client=client,
        )
        self.id_cache = id_cache if id_cache is not None else ShowIdCache()

    async def search_series(self, name: str) -> list[dict[str, Any]]:
        """Search for a TV series by name."""

        data = await self._get_json("/search/shows", "search_series", {"q": name})
        if not isinstance(data, list):
            return []
        return [entry.get("show", {}) for entry in data if entry.get("show")]

    async def search_shows(self, query: str) -> list[ShowSearchResult]:
        """Search shows and map them into the canonical id space.

        Shows with an IMDb id keep it; others get a ``tvmaze-<id>`` search id
        that :meth:`get_show` can resolve later. Results without a poster
        are dropped.
        """

        results: list[ShowSearchResult] = []
        for show in await self.search_series(query):
            image = show.get("image") or {}
            poster = image.get("medium")
            if not poster:
                continue
            externals = show.get("externals") or {}
            imdb_id = externals.get("imdb")
            premiered = show.get("premiered")
            results.append(
                ShowSearchResult(
                    id=imdb_id or f"{TVMAZE_ID_PREFIX}{show.get('id')}",
                    name=show.get("name") or "",
                    poster=poster,
                    year=premiered[:4] if premiered else None,
                )
            )
        return results

    async def get_show(self, tvmaze_id: int | str) -> dict[str, Any] | None:
        """Fetch a show by TVMaze id."""

        data = await self._get_json(f"/shows/{tvmaze_id}", "get_show")
        return data if isinstance(data, dict) else None

    async def resolve_imdb_id(self, tvmaze_id: int | str) -> str | None:
        """Translate a TVMaze show id into an IMDb id, if TVMaze knows one."""

        show = await self.get_show(tvmaze_id)
        if not show:
            return None
        imdb_id = (show.get("externals") or {}).get("imdb")
        return imdb_id or None

    async def lookup_show_id(self, imdb_id: str) -> str | None:
        """Find the TVMaze id for an IMDb id, consulting the LRU first."""

        if not is_show_id(imdb_id):
            return None
        if imdb_id in self.id_cache:
            return self.id_cache.get(imdb_id) or None

        data = await self._get_json(
            "/lookup/shows", "lookup_show_id", {"imdb": imdb_id}
        )
        tvmaze_id = str(data["id"]) if isinstance(data, dict) and data.get("id") else None
        self.id_cache.set(imdb_id, tvmaze_id)
        return tvmaze_id

    async def get_episode(
        self, series_id: int | str, season: int, episode: int
    ) -> dict[str, Any] | None:
        """Fetch a specific episode by season and episode number."""

        data = await self._get_json(
            f"/shows/{series_id}/episodebynumber",
            "get_episode",
            {"season": season, "number": episode},
        )
        return data if isinstance(data, dict) else None

    async def get_episode_summary(self, show_id: str, season: int, episode: int) -> str:
        """Plain-text episode summary for an IMDb show id, or ``""``."""

        tvmaze_id = await self.lookup_show_id(show_id)
        if not tvmaze_id:
            return ""
        payload = await self.get_episode(tvmaze_id, season, episode)
        if not payload:
            return ""
        return strip_html(payload.get("summary"))
