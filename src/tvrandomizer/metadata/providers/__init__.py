"""Metadata providers for Cinemeta and TVMaze.

Neither provider needs an API key.
Rate limiting: Each provider enforces conservative limits to prevent bans.
"""

from tvrandomizer.metadata.providers.base import (
    BaseProvider,
    ProviderError,
    ProviderUnavailableError,
    RateLimitError,
)
from tvrandomizer.metadata.providers.cinemeta import CinemetaProvider
from tvrandomizer.metadata.providers.tvmaze import ShowIdCache, TVMazeProvider

__all__ = [
    "BaseProvider",
    "ProviderError",
    "ProviderUnavailableError",
    "RateLimitError",
    "CinemetaProvider",
    "ShowIdCache",
    "TVMazeProvider",
]
