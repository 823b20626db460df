"""CLI commands for per-show season filters."""

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

app: TyperType = typer.Typer(help="Choose which seasons of a show are eligible.")

ShowIdArgument = Annotated[str, typer.Argument(help="Show id, e.g. tt0903747.")]
SeasonsArgument = Annotated[
    list[int] | None,
    typer.Argument(help="Enabled seasons; omit to allow every season."),
]


def _describe(seasons: list[int]) -> str:
    return ", ".join(str(season) for season in seasons) if seasons else "all seasons"


def get_settings(
    user: UserOption,
    show_id: ShowIdArgument,
    json_output: JsonFlag = False,
    db_path: DbPathOption = None,
) -> None:
    """Print the enabled seasons for a show."""

    seasons = run_with_service(
        db_path, lambda service: service.get_season_filter(user, show_id)
    )
    if json_output:
        echo_json({"show_id": show_id, "enabled_seasons": seasons})
        return
    typer.echo(f"{show_id}: {_describe(seasons)}")


def set_settings(
    user: UserOption,
    show_id: ShowIdArgument,
    seasons: SeasonsArgument = None,
    db_path: DbPathOption = None,
) -> None:
    """Replace the enabled seasons for a show."""

    season_filter = run_with_service(
        db_path,
        lambda service: service.update_season_filter(user, show_id, seasons or []),
    )
    typer.secho(
        f"{show_id}: {_describe(sorted(season_filter.enabled_seasons))}",
        fg=typer.colors.GREEN,
    )


app.command("get")(get_settings)
app.command("set")(set_settings)
