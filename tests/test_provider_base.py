"""Tests for base provider interface.

These tests verify:
- Rate limiting enforcement
- Backoff calculation
- 404 and invalid JSON handling
- Client lifecycle
"""

from typing import Any
from unittest.mock import AsyncMock, Mock, patch

import httpx
import pytest

from tvrandomizer.metadata.providers.base import (
    BaseProvider,
    ProviderError,
    RateLimitError,
)


def _provider(**kwargs: Any) -> BaseProvider:
    kwargs.setdefault("provider_name", "Test")
    kwargs.setdefault("base_url", "https://api.example.com/")
    return BaseProvider(**kwargs)


def test_base_url_is_normalized_and_rendered() -> None:
    provider = _provider()

    assert provider.base_url == "https://api.example.com"
    assert str(provider) == "TestProvider(base_url=https://api.example.com)"
    assert repr(provider) == str(provider)


def test_provider_enforces_rate_limit() -> None:
    """Test that providers enforce rate limits to prevent API bans."""
    provider = _provider(rate_limit_per_minute=2)

    assert provider.check_rate_limit() is True
    assert provider.check_rate_limit() is True
    assert provider.check_rate_limit() is False


def test_rate_limit_window_expires() -> None:
    provider = _provider(rate_limit_per_minute=1)

    with patch("tvrandomizer.metadata.providers.base.time.time", return_value=1000.0):
        assert provider.check_rate_limit() is True
        assert provider.check_rate_limit() is False

    with patch("tvrandomizer.metadata.providers.base.time.time", return_value=1061.0):
        assert provider.check_rate_limit() is True


def test_backoff_is_exponential_and_capped() -> None:
    provider = _provider()

    assert provider.calculate_backoff_delay(1) == 1.0
    assert provider.calculate_backoff_delay(2) == 2.0
    assert provider.calculate_backoff_delay(3) == 4.0
    assert provider.calculate_backoff_delay(10) == 60.0


@pytest.mark.asyncio
async def test_get_json_maps_404_to_none() -> None:
    provider = _provider()
    request = httpx.Request("GET", "https://api.example.com/missing")
    mock_response = Mock()
    mock_response.raise_for_status = Mock(
        side_effect=httpx.HTTPStatusError(
            "Not found", request=request, response=httpx.Response(404, request=request)
        )
    )

    with patch.object(provider._client, "get", return_value=mock_response):
        assert await provider._get_json("/missing", "missing") is None


@pytest.mark.asyncio
async def test_get_json_rejects_invalid_json() -> None:
    provider = _provider()
    mock_response = Mock()
    mock_response.raise_for_status = Mock()
    mock_response.json = Mock(side_effect=ValueError("not json"))

    with patch.object(provider._client, "get", return_value=mock_response):
        with pytest.raises(ProviderError, match="invalid JSON"):
            await provider._get_json("/broken", "broken")


@pytest.mark.asyncio
async def test_get_json_waits_for_a_free_slot() -> None:
    provider = _provider(rate_limit_per_minute=1)
    now = [1000.0]

    async def fake_sleep(delay: float) -> None:
        now[0] += delay

    mock_response = Mock()
    mock_response.raise_for_status = Mock()
    mock_response.json = Mock(return_value={"ok": True})

    with (
        patch("tvrandomizer.metadata.providers.base.time.time", side_effect=lambda: now[0]),
        patch(
            "tvrandomizer.metadata.providers.base.anyio.sleep", side_effect=fake_sleep
        ) as mock_sleep,
        patch.object(provider._client, "get", return_value=mock_response) as mock_get,
    ):
        assert await provider._get_json("/first", "first") == {"ok": True}
        assert await provider._get_json("/second", "second") == {"ok": True}

    assert mock_get.call_count == 2
    mock_sleep.assert_awaited_once_with(60.0)
    assert now[0] == 1060.0


@pytest.mark.asyncio
async def test_get_json_rejects_zero_rate_limit() -> None:
    provider = _provider(rate_limit_per_minute=0)

    with patch.object(provider._client, "get") as mock_get:
        with pytest.raises(RateLimitError):
            await provider._get_json("/anything", "anything")
    mock_get.assert_not_called()


@pytest.mark.asyncio
async def test_async_context_manager_closes_client() -> None:
    client = AsyncMock(spec=httpx.AsyncClient)

    async with _provider(client=client) as provider:
        assert provider._client is client

    client.aclose.assert_awaited_once()
