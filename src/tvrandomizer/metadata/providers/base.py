"""Base provider interface with rate limiting and retry logic.

RESILIENCE REQUIREMENTS:
- Rate limits MUST be enforced to prevent API bans; callers wait for a free slot
- Transient failures (429, 5xx, timeouts) are retried with exponential backoff
- 404 responses mean "absent", never an error
- Everything else surfaces as ProviderError so callers can decide
"""

import time
from collections import deque
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import anyio
import httpx
import structlog

from tvrandomizer.core.constants import MAX_PROVIDER_RETRIES, PROVIDER_TIMEOUT
from tvrandomizer.core.errors import TVRandomizerError

T = TypeVar("T")

logger = structlog.get_logger(__name__)

RETRIABLE_STATUS_CODES = (429, 500, 502, 503, 504)


class ProviderError(TVRandomizerError):
    """Base error for provider-related failures."""

    pass


class RateLimitError(ProviderError):
    """Raised when a provider keeps answering 429 or allows no requests."""

    pass


class ProviderUnavailableError(ProviderError):
    """Raised when provider API is unavailable."""

    pass


class BaseProvider:
    """Base class for metadata providers.

    Features:
    - Shared httpx.AsyncClient with an explicit close
    - Sliding-window rate limiting per provider (waits, never drops)
    - Exponential backoff retry logic
    - 404 mapped to ``None``
    """

    def __init__(
        self,
        provider_name: str,
        base_url: str,
        rate_limit_per_minute: int = 40,
        max_retries: int = MAX_PROVIDER_RETRIES,
        timeout: float = PROVIDER_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize provider.

        Args:
            provider_name: Name of the provider (for logging)
            base_url: API root without trailing slash
            rate_limit_per_minute: Max requests per minute (conservative)
            max_retries: Maximum retry attempts for failed requests
            timeout: Per-request timeout in seconds
            client: Optional pre-built client (tests, shared pools)
        """
        self.provider_name = provider_name
        self.base_url = base_url.rstrip("/")
        self.rate_limit_per_minute = rate_limit_per_minute
        self.max_retries = max_retries
        self._client: httpx.AsyncClient = client or httpx.AsyncClient(timeout=timeout)

        # Rate limiting: track request timestamps
        self._request_times: deque[float] = deque()

    def __str__(self) -> str:
        return f"{self.provider_name}Provider(base_url={self.base_url})"

    def __repr__(self) -> str:
        return self.__str__()

    def check_rate_limit(self) -> bool:
        """Check if we're within rate limit, update tracking.

        Returns:
            True if request allowed, False if rate limited
        """
        now = time.time()
        minute_ago = now - 60

        # Drop timestamps at least a minute old
        while self._request_times and self._request_times[0] <= minute_ago:
            self._request_times.popleft()

        if len(self._request_times) >= self.rate_limit_per_minute:
            return False

        self._request_times.append(now)
        return True

    async def wait_for_rate_limit(self) -> None:
        """Block until a request slot frees up in the one-minute window."""
        while not self.check_rate_limit():
            if not self._request_times:
                raise RateLimitError(f"{self.provider_name} allows no requests")
            delay = max(self._request_times[0] + 60 - time.time(), 0.0)
            logger.debug(
                "provider.rate_limited",
                provider=self.provider_name,
                delay=round(delay, 3),
            )
            await anyio.sleep(delay)

    def calculate_backoff_delay(self, attempt: int, base_delay: float = 1.0) -> float:
        """Calculate exponential backoff delay for retry attempt.

        Args:
            attempt: Retry attempt number (1-indexed)
            base_delay: Base delay in seconds (default 1.0)

        Returns:
            Delay in seconds (exponential: 1s, 2s, 4s, 8s...), capped at 60s
        """
        delay: float = min(base_delay * (2 ** (attempt - 1)), 60.0)
        return delay

    async def _execute_with_retry(
        self, func: Callable[[], Awaitable[T]], operation_name: str = "request"
    ) -> T:
        """Execute an async function with automatic retry on transient errors.

        Retries on:
        - 429 Too Many Requests (rate limit)
        - 500, 502, 503, 504 (server errors)
        - Network timeouts

        Does NOT retry on:
        - 4xx errors (except 429) - these are client errors
        - Other transport errors (connection refused, DNS)

        Raises:
            ProviderError: After max retries exceeded or non-retriable error
        """
        last_error: Exception | None = None

        for attempt in range(1, self.max_retries + 1):
            try:
                return await func()

            except httpx.HTTPStatusError as e:
                status_code = e.response.status_code
                last_error = e

                should_retry = status_code in RETRIABLE_STATUS_CODES
                if status_code == 429 and attempt >= self.max_retries:
                    raise RateLimitError(
                        f"{self.provider_name} {operation_name} still rate limited "
                        f"after {self.max_retries} attempts"
                    ) from e
                if not should_retry or attempt >= self.max_retries:
                    raise ProviderError(
                        f"{self.provider_name} {operation_name} failed: {e}"
                    ) from e

                delay = self.calculate_backoff_delay(attempt)
                logger.debug(
                    "provider.retry",
                    provider=self.provider_name,
                    operation=operation_name,
                    status_code=status_code,
                    attempt=attempt,
                    delay=delay,
                )
                await anyio.sleep(delay)
                continue

            except httpx.TimeoutException as e:
                last_error = e

                if attempt >= self.max_retries:
                    raise ProviderError(
                        f"{self.provider_name} {operation_name} timed out after "
                        f"{self.max_retries} attempts: {e}"
                    ) from e

                delay = self.calculate_backoff_delay(attempt)
                logger.debug(
                    "provider.retry",
                    provider=self.provider_name,
                    operation=operation_name,
                    attempt=attempt,
                    delay=delay,
                )
                await anyio.sleep(delay)
                continue

            except httpx.HTTPError as e:
                raise ProviderUnavailableError(
                    f"{self.provider_name} {operation_name} failed: {e}"
                ) from e

        raise ProviderError(
            f"{self.provider_name} {operation_name} failed after "
            f"{self.max_retries} retries"
        ) from last_error

    async def _get_json(
        self,
        path: str,
        operation_name: str,
        params: dict[str, Any] | None = None,
    ) -> Any | None:
        """GET ``base_url + path`` and decode JSON; 404 yields None."""

        await self.wait_for_rate_limit()

        async def _do_get() -> Any | None:
            try:
                response = await self._client.get(
                    f"{self.base_url}{path}", params=params
                )
                response.raise_for_status()
                return response.json()
            except httpx.HTTPStatusError as exc:
                if exc.response.status_code == 404:
                    return None
                raise
            except ValueError as exc:
                raise ProviderError(
                    f"{self.provider_name} {operation_name} returned invalid JSON"
                ) from exc

        try:
            return await self._execute_with_retry(_do_get, operation_name)
        except ProviderError as exc:
            logger.warning(
                "provider.request_failed",
                provider=self.provider_name,
                operation=operation_name,
                error=str(exc),
            )
            raise

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "BaseProvider":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()
