"""Custom exceptions for TV Randomizer.

This module defines typed exceptions used throughout the application for
error handling and API responses. Absence of data (no shows, no episodes,
no history) is never an error; these types cover caller mistakes and
collaborator failures only.
"""

from typing import Any


class TVRandomizerError(Exception):
    """Base exception for all TV Randomizer errors.

    All custom exceptions should inherit from this base class to allow
    for broad exception handling when needed.
    """

    pass


class MissingUserId(TVRandomizerError):
    """Raised when an operation that needs a user key receives none."""

    def __init__(self) -> None:
        super().__init__("Missing user key")

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {"success": False, "error": "Missing user key"}


class ShowLimitExceeded(TVRandomizerError):
    """Raised when a user tries to track more shows than allowed.

    Attributes:
        limit: Maximum number of shows a single user may track
    """

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(f"Maximum of {limit} shows allowed")

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses.

        Returns:
            Dictionary representation suitable for JSON responses
        """
        return {"success": False, "error": str(self), "limit": self.limit}

    def __repr__(self) -> str:
        return f"ShowLimitExceeded(limit={self.limit})"


class ShowAlreadyTracked(TVRandomizerError):
    """Raised when a show is added twice for the same user."""

    def __init__(self, show_id: str) -> None:
        self.show_id = show_id
        super().__init__(f"Show '{show_id}' is already tracked")

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {"success": False, "exists": True, "show_id": self.show_id}

    def __repr__(self) -> str:
        return f"ShowAlreadyTracked(show_id={self.show_id!r})"


class ShowNotResolvable(TVRandomizerError):
    """Raised when a show id cannot be resolved to usable metadata.

    This covers search ids that have no IMDb counterpart, failed lookups,
    and shows the metadata provider does not know about.

    Attributes:
        show_id: The identifier supplied by the caller
        reason: Human-readable reason for the failure
    """

    def __init__(self, show_id: str, reason: str) -> None:
        """Initialize ShowNotResolvable exception.

        Args:
            show_id: Identifier supplied by the caller
            reason: Reason the show could not be resolved
        """
        self.show_id = show_id
        self.reason = reason
        super().__init__(f"Show '{show_id}' could not be resolved: {reason}")

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses.

        Returns:
            Dictionary representation suitable for JSON responses
        """
        return {"success": False, "error": self.reason, "show_id": self.show_id}

    def __repr__(self) -> str:
        """Return repr string for debugging."""
        return (
            f"ShowNotResolvable(show_id={self.show_id!r}, reason={self.reason!r})"
        )
