"""Structured logging setup for TV Randomizer.

Every module logs through ``structlog.get_logger(__name__)`` with dotted
event names. This module only decides the level and renderer.

Usage:
    from tvrandomizer.utils.logs import configure_logging

    configure_logging()            # INFO, or DEBUG when TVRANDOMIZER_DEBUG set
    configure_logging("WARNING")   # explicit level

Environment:
    TVRANDOMIZER_DEBUG: Set to '1', 'true', 'yes' (case-insensitive) to enable
                        debug events. Any other value or unset disables them.
"""

from __future__ import annotations

import logging
import os
import sys

import structlog


def debug_enabled() -> bool:
    """Return True when TVRANDOMIZER_DEBUG requests debug output."""

    return os.environ.get("TVRANDOMIZER_DEBUG", "").lower() in ("1", "true", "yes")


def resolve_level(level: str | int | None = None) -> int:
    """Translate a level name/number into a stdlib logging level."""

    if level is None:
        return logging.DEBUG if debug_enabled() else logging.INFO
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(level: str | int | None = None, *, json_output: bool = False) -> None:
    """Configure structlog once for the process.

    Args:
        level: Minimum level to emit; defaults from TVRANDOMIZER_DEBUG.
        json_output: Render JSON lines instead of the console renderer.
    """

    renderer: structlog.typing.Processor = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(resolve_level(level)),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
