"""linear CLI commands."""

from __future__ import annotations

import typer

from ._helpers import SortedGroup

app = typer.Typer(
    help="linear - command-line client for the Linear issue tracker",
    no_args_is_help=True,
    cls=SortedGroup,
)


@app.callback(invoke_without_command=True)
def _global_options(
    ctx: typer.Context,
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output as JSON for all commands",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log debug output to stderr",
    ),
) -> None:
    from ._helpers import configure_logging
    from ._json_state import set_json_flag

    set_json_flag(json_output)
    configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)


from . import _cmd_cache, _cmd_issue  # noqa: E402

for _mod in (_cmd_cache, _cmd_issue):
    _mod.register(app)


def main() -> None:
    """Run the linear CLI application."""
    app()
