"""Shared options and service wiring for CLI commands."""

from __future__ import annotations

import asyncio
import dataclasses
import importlib
import json
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any, TypeVar

if TYPE_CHECKING:  # pragma: no cover - typing only
    import typer
else:  # pragma: no cover - runtime fallback for typing
    typer = importlib.import_module("typer")

from tvrandomizer.core.config import Settings
from tvrandomizer.core.errors import TVRandomizerError
from tvrandomizer.core.randomizer_service import RandomizerService, open_randomizer

T = TypeVar("T")

UserOption = Annotated[
    str,
    typer.Option("--user", "-u", help="Opaque user key the shows belong to."),
]
DbPathOption = Annotated[
    Path | None,
    typer.Option(
        "--db-path",
        help="Optional override for the database location.",
    ),
]
JsonFlag = Annotated[
    bool,
    typer.Option("--json", help="Emit JSON instead of plain text."),
]


def load_settings(db_path: Path | None = None) -> Settings:
    settings = Settings.from_env()
    if db_path is not None:
        settings = dataclasses.replace(settings, db_path=db_path)
    return settings


def run_with_service(
    db_path: Path | None,
    operation: Callable[[RandomizerService], Awaitable[T]],
) -> T:
    """Run ``operation`` against an opened service; errors exit with code 1."""

    async def _run() -> T:
        async with open_randomizer(load_settings(db_path)) as service:
            return await operation(service)

    try:
        return asyncio.run(_run())
    except TVRandomizerError as exc:
        typer.secho(f"Error: {exc}", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1) from exc


def echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, sort_keys=True, default=str))
