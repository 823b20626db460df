"""CLI commands for managing tracked shows."""

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

app: TyperType = typer.Typer(help="Manage the shows a user tracks.")

ShowIdArgument = Annotated[
    str,
    typer.Argument(help="IMDb id (tt...) or a tvmaze-<id> search id."),
]
QueryArgument = Annotated[str, typer.Argument(help="Show name to search for.")]


def list_shows(
    user: UserOption,
    json_output: JsonFlag = False,
    db_path: DbPathOption = None,
) -> None:
    """List tracked shows, newest first."""

    shows = run_with_service(db_path, lambda service: service.list_shows(user))
    if json_output:
        echo_json([show.model_dump() for show in shows])
        return
    if not shows:
        typer.secho("No shows tracked.", fg=typer.colors.YELLOW)
        return
    for show in shows:
        typer.echo(f"{show.id}\t{show.name}")


def add_show(
    user: UserOption,
    show_id: ShowIdArgument,
    db_path: DbPathOption = None,
) -> None:
    """Start tracking a show."""

    show = run_with_service(db_path, lambda service: service.add_show(user, show_id))
    typer.secho(f"Added {show.name} ({show.id})", fg=typer.colors.GREEN)


def remove_show(
    user: UserOption,
    show_id: ShowIdArgument,
    db_path: DbPathOption = None,
) -> None:
    """Stop tracking a show and forget its season filter."""

    remaining = run_with_service(
        db_path, lambda service: service.remove_show(user, show_id)
    )
    typer.secho(
        f"Removed {show_id}; {len(remaining)} shows remain", fg=typer.colors.GREEN
    )


def search_shows(
    query: QueryArgument,
    json_output: JsonFlag = False,
    db_path: DbPathOption = None,
) -> None:
    """Search shows by name."""

    results = run_with_service(db_path, lambda service: service.search_shows(query))
    if json_output:
        echo_json([result.model_dump() for result in results])
        return
    for result in results:
        year = f" ({result.year})" if result.year else ""
        typer.echo(f"{result.id}\t{result.name}{year}")


app.command("list")(list_shows)
app.command("add")(add_show)
app.command("remove")(remove_show)
app.command("search")(search_shows)
