"""CLI entrypoints for TV Randomizer."""

from tvrandomizer.cli.db import app as db_app
from tvrandomizer.cli.history import app as history_app
from tvrandomizer.cli.main import app, run_cli
from tvrandomizer.cli.settings import app as settings_app
from tvrandomizer.cli.shows import app as shows_app

__all__ = ["app", "db_app", "history_app", "run_cli", "settings_app", "shows_app"]
