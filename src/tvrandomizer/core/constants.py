"""Core constants for TV Randomizer.

This module defines constants used throughout the application:
- Metadata provider endpoints
- Episode identifier format
- Selection and storage limits
"""

# ============================================================================
# Metadata Providers
# ============================================================================

#: Primary metadata provider (series meta + episode lists)
CINEMETA_URL: str = "https://v3-cinemeta.strem.io"

#: Secondary provider for episode summaries, search and id lookups
TVMAZE_URL: str = "https://api.tvmaze.com"

#: Prefix TVmaze search results carry when no IMDb id is known
TVMAZE_ID_PREFIX: str = "tvmaze-"

#: Timeout for provider API calls in seconds
PROVIDER_TIMEOUT: float = 10.0

#: Maximum number of retry attempts for provider API calls
MAX_PROVIDER_RETRIES: int = 3

#: Upper bound of the IMDb -> TVmaze id lookup cache
TVMAZE_LOOKUP_CACHE_SIZE: int = 512

# ============================================================================
# Episode Identifiers
# ============================================================================

#: Two-letter prefix of canonical (IMDb) show identifiers
SHOW_ID_PREFIX: str = "tt"

#: Separator between show id, season and episode in canonical ids
EPISODE_ID_SEPARATOR: str = ":"

# ============================================================================
# Selection & Storage
# ============================================================================

#: Days an episode counts as "recently watched"
HISTORY_RECENCY_DAYS: int = 7

#: Maximum number of shows a single user may track
MAX_SHOWS: int = 150

#: Maximum number of search results passed through to callers
MAX_SEARCH_RESULTS: int = 10

#: Minimum query length for show search
MIN_SEARCH_QUERY_LENGTH: int = 2

#: SQLite location used when TVRANDOMIZER_DB_PATH is unset
DEFAULT_DB_PATH: str = ".data/tvrandomizer.db"

#: Default number of history rows returned by listings
DEFAULT_HISTORY_LIMIT: int = 50

# ============================================================================
# Presentation
# ============================================================================

#: Content type reported for every display record
DISPLAY_CONTENT_TYPE: str = "series"

#: Video size hint attached to display records
DISPLAY_VIDEO_SIZE: int = 1080
