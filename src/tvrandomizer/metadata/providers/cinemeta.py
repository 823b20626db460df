"""Cinemeta provider: series metadata and full episode lists (no auth)."""

from __future__ import annotations

from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from tvrandomizer.core.constants import CINEMETA_URL, PROVIDER_TIMEOUT
from tvrandomizer.metadata.providers.base import BaseProvider
from tvrandomizer.schemas import SeriesMeta

logger = structlog.get_logger(__name__)


class CinemetaProvider(BaseProvider):
    """Cinemeta API wrapper keyed by IMDb ids."""

    def __init__(
        self,
        base_url: str = CINEMETA_URL,
        timeout: float = PROVIDER_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(
            provider_name="Cinemeta",
            base_url=base_url,
            rate_limit_per_minute=120,
            max_retries=3,
            timeout=timeout,
            client=client,
        )

    async def get_meta(self, content_type: str, entity_id: str) -> dict[str, Any] | None:
        """Fetch the raw ``{"meta": {...}}`` payload for any content type."""

        data = await self._get_json(
            f"/meta/{content_type}/{entity_id}.json", "get_meta"
        )
        if not isinstance(data, dict) or not isinstance(data.get("meta"), dict):
            return None
        return data

    async def get_series_meta(self, show_id: str) -> SeriesMeta | None:
        """Fetch series metadata with its episode list; None when unknown."""

        data = await self.get_meta("series", show_id)
        if data is None:
            return None

        meta = dict(data["meta"])
        meta.setdefault("id", show_id)
        try:
            return SeriesMeta.model_validate(meta)
        except ValidationError as exc:
            logger.warning(
                "cinemeta.invalid_meta",
                show_id=show_id,
                errors=exc.error_count(),
            )
            return None
