"""CLI commands for the watch history."""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING, Annotated, Any

if TYPE_CHECKING:  # pragma: no cover - typing only
    import typer
    from typer import Typer as TyperType
else:  # pragma: no cover - runtime fallback for typing
    typer = importlib.import_module("typer")
    TyperType = Any

from tvrandomizer.cli.common import (
    DbPathOption,
    JsonFlag,
    UserOption,
    echo_json,
    run_with_service,
)
from tvrandomizer.core.constants import DEFAULT_HISTORY_LIMIT
from tvrandomizer.core.episode_id import format_label

app: TyperType = typer.Typer(help="Inspect or clear recently watched episodes.")

LimitOption = Annotated[
    int,
    typer.Option("--limit", "-n", min=1, help="Maximum number of entries."),
]

DaysOption = Annotated[
    int | None,
    typer.Option("--days", "-d", min=1, help="Only entries from the last N days."),
]


def list_history(
    user: UserOption,
    limit: LimitOption = DEFAULT_HISTORY_LIMIT,
    days: DaysOption = None,
    json_output: JsonFlag = False,
    db_path: DbPathOption = None,
) -> None:
    """List the latest watch events, newest first."""

    entries = run_with_service(
        db_path, lambda service: service.recent_history(user, limit, days)
    )
    if json_output:
        echo_json([entry.model_dump(mode="json") for entry in entries])
        return
    if not entries:
        typer.secho("No watch history.", fg=typer.colors.YELLOW)
        return
    for entry in entries:
        watched_at = entry.watched_at.isoformat() if entry.watched_at else ""
        label = format_label(entry.season, entry.episode)
        typer.echo(f"{watched_at}\t{entry.show_name} {label}\t{entry.episode_name}")


def clear_history(user: UserOption, db_path: DbPathOption = None) -> None:
    """Delete every watch event for a user."""

    removed = run_with_service(db_path, lambda service: service.clear_history(user))
    typer.secho(f"Cleared {removed} history entries", fg=typer.colors.GREEN)


app.command("list")(list_history)
app.command("clear")(clear_history)
