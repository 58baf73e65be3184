#!/usr/bin/env -S uv run --script
#
# /// script
# requires-python = ">=3.11"
# dependencies = [
#   "typer",
#   "rich",
#   "orjson",
#   "requests",
# ]
# ///

"""Dev utility: print the zsh completions linear offers for a command line.

Usage:
    python tabcomp.py "linear issue list --status "
    python tabcomp.py "linear issue list --status started,!"
    python tabcomp.py "linear issue list --cycle "
    python tabcomp.py "linear issue list --sort p"

A trailing space completes the next argument; otherwise the last word is
completed as a partial value. Cycle completions need LINEAR_API_KEY to show
live cycle details.
"""

from __future__ import annotations

import os
import re
import subprocess
import sys
from pathlib import Path

_PAIR_RE = re.compile(r'"([^"]*?)":"([^"]*?)"')


def _parse_zsh_pairs(raw: str) -> list[tuple[str, str]]:
    """Extract ("value", "description") pairs from Typer's zsh output."""
    return [(m.group(1), m.group(2)) for m in _PAIR_RE.finditer(raw)]


def _print_pairs(pairs: list[tuple[str, str]]) -> None:
    width = min(max(len(value) for value, _ in pairs) + 2, 40)
    print(f"{'VALUE':<{width}} DESCRIPTION")
    print("-" * (width + 40))
    for value, desc in pairs:
        print(f"{value:<{width}} {desc}")
    print(f"\n({len(pairs)} completions)")


def main() -> None:  # noqa: D103
    if len(sys.argv) < 2 or sys.argv[1] in ("-h", "--help"):
        print(__doc__)
        raise SystemExit(0)

    # Typer derives the env var from the script name: "linear.py" becomes
    # _LINEAR.PY_COMPLETE (only hyphens are replaced)
    script = Path(__file__).resolve().parent / "linear.py"
    result = subprocess.run(
        [sys.executable, str(script)],
        env={
            **os.environ,
            "_TYPER_COMPLETE_ARGS": sys.argv[1],
            "_LINEAR.PY_COMPLETE": "complete_zsh",
        },
        capture_output=True,
        text=True,
    )

    stdout = result.stdout.strip()
    pairs = _parse_zsh_pairs(stdout)
    if not stdout:
        print("(no completions)")
    elif pairs:
        _print_pairs(pairs)
    else:
        print(stdout)

    if result.stderr:
        print(f"\nstderr: {result.stderr}", file=sys.stderr)


if __name__ == "__main__":
    main()
