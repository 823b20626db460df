"""CLI commands for picking and looking up episodes."""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING, Annotated

if TYPE_CHECKING:  # pragma: no cover - typing only
    import typer
else:  # pragma: no cover - runtime fallback for typing
    typer = importlib.import_module("typer")

from tvrandomizer.cli.common import (
    DbPathOption,
    JsonFlag,
    UserOption,
    echo_json,
    run_with_service,
)
from tvrandomizer.schemas import EpisodeDisplay

ShowOption = Annotated[
    str | None,
    typer.Option("--show", "-s", help="Only pick from this show id."),
]
EpisodeIdArgument = Annotated[
    str,
    typer.Argument(help="Canonical episode id, e.g. tt0903747:1:1."),
]
ShowIdArgument = Annotated[str, typer.Argument(help="Show id, e.g. tt0903747.")]


def _print_display(display: EpisodeDisplay, json_output: bool) -> None:
    if json_output:
        echo_json(display.as_meta_response())
        return

    typer.secho(display.name, bold=True)
    typer.echo(display.id)
    if display.description:
        typer.echo(display.description)


def pick_episode(
    user: UserOption,
    show: ShowOption = None,
    json_output: JsonFlag = False,
    db_path: DbPathOption = None,
) -> None:
    """Pick a random episode and record it in the watch history."""

    display = run_with_service(
        db_path, lambda service: service.random_episode(user, show)
    )
    if display is None:
        typer.secho("No episode available.", fg=typer.colors.YELLOW)
        return
    _print_display(display, json_output)


def show_episode(
    episode_id: EpisodeIdArgument,
    json_output: JsonFlag = False,
    db_path: DbPathOption = None,
) -> None:
    """Show display metadata for a canonical episode id."""

    display = run_with_service(
        db_path, lambda service: service.episode_display(episode_id)
    )
    if display is None:
        typer.secho(f"Episode not found: {episode_id}", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1)
    _print_display(display, json_output)


def list_seasons(
    show_id: ShowIdArgument,
    json_output: JsonFlag = False,
    db_path: DbPathOption = None,
) -> None:
    """List the seasons of a show with their episode counts."""

    counts = run_with_service(
        db_path, lambda service: service.season_episode_counts(show_id)
    )
    if json_output:
        echo_json({"seasons": sorted(counts), "counts": counts})
        return
    if not counts:
        typer.secho("No seasons found.", fg=typer.colors.YELLOW)
        return
    for season, count in counts.items():
        typer.echo(f"Season {season}: {count} episodes")
