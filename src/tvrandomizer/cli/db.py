"""CLI commands for database management."""

from __future__ import annotations

import asyncio
import importlib
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover - typing only
    import typer
    from typer import Typer as TyperType
else:  # pragma: no cover - runtime fallback for typing
    typer = importlib.import_module("typer")
    TyperType = Any

from tvrandomizer.cli.common import DbPathOption, load_settings
from tvrandomizer.db.migrations import apply_migrations, prepare_db_path

app: TyperType = typer.Typer(help="Manage the TV Randomizer database.")


def migrate(db_path: DbPathOption = None) -> None:
    """Apply migrations to ensure the schema is up-to-date."""

    resolved_path = prepare_db_path(load_settings(db_path).db_path)
    applied = asyncio.run(apply_migrations(resolved_path))
    typer.secho(
        f"Migrations applied to {resolved_path} ({len(applied)} new)",
        fg=typer.colors.GREEN,
    )


app.command("migrate")(migrate)
