"""Top-level ``tvrandomizer`` command."""

from __future__ import annotations

import importlib
from collections.abc import Sequence
from typing import TYPE_CHECKING, Annotated, Any

if TYPE_CHECKING:  # pragma: no cover - typing only
    import typer
    from typer import Typer as TyperType
else:  # pragma: no cover - runtime fallback for typing
    typer = importlib.import_module("typer")
    TyperType = Any

from tvrandomizer.cli.db import app as db_app
from tvrandomizer.cli.episodes import list_seasons, pick_episode, show_episode
from tvrandomizer.cli.history import app as history_app
from tvrandomizer.cli.settings import app as settings_app
from tvrandomizer.cli.shows import app as shows_app
from tvrandomizer.utils.logs import configure_logging

app: TyperType = typer.Typer(help="Pick random episodes from your tracked TV shows.")

VerboseFlag = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Emit debug log events on stderr."),
]


def configure(verbose: VerboseFlag = False) -> None:
    """Configure logging before any subcommand runs."""

    configure_logging("DEBUG" if verbose else None)


def run_cli(args: Sequence[str] | None = None) -> None:
    app(args=args)


app.callback()(configure)
app.command("pick")(pick_episode)
app.command("episode")(show_episode)
app.command("seasons")(list_seasons)
app.add_typer(shows_app, name="shows")
app.add_typer(settings_app, name="settings")
app.add_typer(history_app, name="history")
app.add_typer(db_app, name="db")
