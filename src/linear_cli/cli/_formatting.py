"""Display and formatting functions for the linear CLI."""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

import typer

from linear_cli.constants import PRIORITY_COLORS, STATE_COLORS
from linear_cli.models import parse_timestamp, priority_label

if TYPE_CHECKING:
    from collections.abc import Sequence

    from linear_cli.models import (
        CycleRecord,
        IssueDetail,
        IssueRecord,
        ResolvedCycle,
    )


def color_enabled() -> bool:
    """Check whether stdout should get ANSI colors (TTY and no ``NO_COLOR``)."""
    if os.environ.get("NO_COLOR"):
        return False
    return sys.stdout.isatty()


def _style(text: str, color: bool, **styles: object) -> str:
    return typer.style(text, **styles) if color else text  # type: ignore[arg-type]


def format_cycle_date(timestamp: str) -> str:
    """Format an ISO timestamp as ``Jan 15`` (day padded to two columns).

    Returns an empty string if the timestamp cannot be parsed.
    """
    parsed = parse_timestamp(timestamp)
    if parsed is None:
        return ""
    return f"{parsed:%b} {parsed.day:>2}"


def format_cycle_date_range(starts_at: str, ends_at: str) -> str:
    """Format two timestamps as ``Jan  2 – Jan 15``, or "" if either is invalid."""
    start = format_cycle_date(starts_at)
    end = format_cycle_date(ends_at)
    if start and end:
        return f"{start} – {end}"
    return ""


def format_cycle_header(
    cycle: ResolvedCycle,
    color: bool = False,
    with_dates: bool = True,
) -> str:
    """Format a cycle header like ``Cycle 11 - Sprint 11 (Jan 15 – Jan 28)``."""
    header = _style(f"Cycle {cycle.number:.0f}", color, fg="cyan", bold=True)
    if cycle.name:
        header += f" - {cycle.name}"
    if not with_dates:
        return header
    dates = format_cycle_date_range(cycle.starts_at, cycle.ends_at)
    if dates:
        header += " " + _style(f"({dates})", color, fg="bright_black")
    return header


def format_cycle_label(cycle: CycleRecord) -> str:
    """Format a cycle for completion descriptions: ``#11 Sprint 11  Jan 15 – ...``."""
    label = f"#{cycle.number:.0f}"
    if cycle.name:
        label += f" {cycle.name}"
    dates = format_cycle_date_range(cycle.starts_at, cycle.ends_at)
    if dates:
        label += f"  {dates}"
    return label


def format_issue_table(issues: Sequence[IssueRecord], color: bool = False) -> str:
    """Format issues as an aligned table using Rich.

    Columns: IDENTIFIER, STATUS, PRIORITY, LABELS (only when some issue has
    labels) and TITLE.

    Returns:
        Formatted table string (rendered by Rich)
    """
    from io import StringIO

    from rich import box
    from rich.console import Console
    from rich.markup import escape
    from rich.table import Table

    if not issues:
        return ""

    has_labels = any(issue.labels for issue in issues)

    table = Table(
        show_header=True,
        header_style="bold",
        box=box.SIMPLE_HEAD,
        pad_edge=False,
        show_edge=False,
    )
    table.add_column("IDENTIFIER", no_wrap=True)
    table.add_column("STATUS", no_wrap=True)
    table.add_column("PRIORITY", no_wrap=True)
    if has_labels:
        table.add_column("LABELS", no_wrap=True)
    table.add_column("TITLE", no_wrap=True)

    for issue in issues:
        state_name = issue.state.name if issue.state else ""
        state_color = STATE_COLORS.get(issue.state.type, "") if issue.state else ""
        priority_color = PRIORITY_COLORS.get(issue.priority, "")

        state_cell = escape(state_name)
        row = [
            escape(issue.identifier),
            f"[{state_color}]{state_cell}[/]" if state_color else state_cell,
            (
                f"[{priority_color}]{priority_label(issue.priority)}[/]"
                if priority_color
                else priority_label(issue.priority)
            ),
        ]
        if has_labels:
            labels_str = ", ".join(escape(lbl) for lbl in issue.labels)
            row.append(f"[cyan]{labels_str}[/]" if labels_str else "")
        row.append(escape(issue.title))
        table.add_row(*row)

    string_io = StringIO()
    console = Console(
        file=string_io,
        force_terminal=color,
        no_color=not color,
        width=10_000,
    )
    console.print(table)

    return "\n".join(line.rstrip() for line in string_io.getvalue().splitlines())


def format_issue_detail(issue: IssueDetail, color: bool = False) -> str:
    """Format one issue as aligned ``Field  value`` lines plus its description."""
    state_color = STATE_COLORS.get(issue.state.type) if issue.state else None
    cycle = ""
    if issue.cycle:
        cycle = f"{issue.cycle.number:.0f}"
        if issue.cycle.name:
            cycle += f" - {issue.cycle.name}"
        dates = format_cycle_date_range(issue.cycle.starts_at, issue.cycle.ends_at)
        if dates:
            cycle += f" ({dates})"
    estimate = f"{issue.estimate:.0f}" if issue.estimate is not None else ""
    fields: list[tuple[str, str, str | None]] = [
        ("Identifier", issue.identifier, None),
        ("Title", issue.title, None),
        ("State", issue.state.name if issue.state else "", state_color),
        (
            "Priority",
            priority_label(issue.priority),
            PRIORITY_COLORS.get(issue.priority),
        ),
        ("Assignee", issue.assignee or "Unassigned", None),
        ("Team", issue.team or "", None),
        ("Cycle", cycle, "cyan"),
        ("Project", issue.project or "", None),
        ("Labels", ", ".join(issue.labels), None),
        ("Due Date", issue.due_date or "", None),
        ("Estimate", estimate, None),
        ("Branch Name", issue.branch_name, None),
        ("URL", issue.url, None),
    ]
    if issue.parent:
        fields.append(("Parent", issue.parent, None))

    width = max(len(label) for label, _, _ in fields)
    lines = []
    for label, value, fg in fields:
        key = _style(f"{label:<{width}}", color, bold=True)
        shown = _style(value, color, fg=fg) if fg and value else value
        lines.append(f"{key}  {shown}".rstrip())

    if issue.description:
        lines.extend(["", issue.description])
    return "\n".join(lines)
