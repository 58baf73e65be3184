"""JSON output mode for the linear CLI.

``--json`` may be given globally (``linear --json issue list``) or per
command. Either one switches both regular output and error reporting to
JSON for the rest of the invocation.
"""

from __future__ import annotations

import sys
from typing import Any

import orjson
import typer

from linear_cli.errors import LinearCliError

_json_mode: bool = False


def set_json_flag(value: bool) -> None:
    """Set JSON mode from the global ``--json`` option."""
    global _json_mode  # noqa: PLW0603
    _json_mode = value


def is_json_output(local_flag: bool = False) -> bool:
    """Check JSON mode, turning it on if the command's own ``--json`` is set.

    Latching the local flag means errors raised later in the command are
    reported as JSON as well.
    """
    global _json_mode  # noqa: PLW0603
    _json_mode = _json_mode or local_flag
    return _json_mode


def echo_json(payload: Any) -> None:
    """Write ``payload`` to stdout as a single line of JSON."""
    typer.echo(orjson.dumps(payload).decode())


def echo_error(error: str | BaseException) -> None:
    """Report an error on stderr.

    Plain mode prints ``Error: <message>``. JSON mode prints
    ``{"error": "<message>"}``; errors from this package also carry their
    class name under ``"type"`` (e.g. ``"CycleNotFoundError"``).
    """
    message = str(error)
    if not _json_mode:
        typer.echo(f"Error: {message}", err=True)
        return
    payload: dict[str, str] = {"error": message}
    if isinstance(error, LinearCliError):
        payload["type"] = type(error).__name__
    sys.stderr.write(orjson.dumps(payload).decode() + "\n")
