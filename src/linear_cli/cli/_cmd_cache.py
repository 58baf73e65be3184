"""Cache management commands for the linear CLI."""

from __future__ import annotations

import typer

from linear_cli.config import load_config

from ._helpers import SortedGroup, get_file_cache
from ._json_state import echo_error

cache_app = typer.Typer(
    help="Manage the local cache.",
    no_args_is_help=True,
    cls=SortedGroup,
)


def register(app: typer.Typer) -> None:
    """Register cache commands."""

    @cache_app.command("clear")
    def clear_cache() -> None:
        """Remove all cached data."""
        try:
            count = get_file_cache(load_config()).clear()
        except OSError as e:
            echo_error(f"clearing cache: {e}")
            raise typer.Exit(1)

        if count == 0:
            typer.echo("Cache is already empty.")
        else:
            typer.echo(f"Cleared {count} cached file(s).")

    app.add_typer(cache_app, name="cache")
