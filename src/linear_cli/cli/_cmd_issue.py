"""Issue commands for the linear CLI."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import typer

from linear_cli.config import (
    get_default_excluded_statuses,
    get_default_limit,
    get_default_sort,
    load_config,
)
from linear_cli.filters import build_issue_filter
from linear_cli.models import cycle_number, issue_detail_to_dict, issue_to_dict
from linear_cli.ranking import sort_issues

from ._completions import (
    complete_cycles,
    complete_issue_ids,
    complete_label_names,
    complete_sort_keys,
    complete_statuses,
    complete_user_names,
)
from ._formatting import (
    color_enabled,
    format_cycle_header,
    format_issue_detail,
    format_issue_table,
)
from ._helpers import SortedGroup, get_client, get_cycle_resolver
from ._json_state import echo_error, echo_json, is_json_output

if TYPE_CHECKING:
    from linear_cli.models import ResolvedCycle

issue_app = typer.Typer(
    help="Work with issues.",
    no_args_is_help=True,
    cls=SortedGroup,
)


def _cycle_to_dict(cycle: ResolvedCycle | None) -> dict[str, Any] | None:
    if cycle is None:
        return None
    return {
        "id": cycle.id,
        "number": cycle_number(cycle.number),
        "name": cycle.name,
        "startsAt": cycle.starts_at,
        "endsAt": cycle.ends_at,
    }


def register(app: typer.Typer) -> None:
    """Register issue commands."""

    @issue_app.command("list")
    def list_issues(
        status: str | None = typer.Option(
            None,
            "--status",
            "-S",
            help="Filter by status type: all, or comma-separated list "
            "(prefix with ! to exclude, e.g. !completed)",
            autocompletion=complete_statuses,
        ),
        label: str | None = typer.Option(
            None,
            "--label",
            "-l",
            help="Filter by label (comma=OR, plus=AND, e.g. bug,devex or bug+frontend)",
            autocompletion=complete_label_names,
        ),
        cycle: str | None = typer.Option(
            None,
            "--cycle",
            "-c",
            help="Filter by cycle: all, current, next, previous, or a cycle number "
            "(default: current)",
            autocompletion=complete_cycles,
        ),
        sort_by: str | None = typer.Option(
            None,
            "--sort",
            "-s",
            help="Sort by column: status, priority, identifier, title "
            "(default: status)",
            autocompletion=complete_sort_keys,
        ),
        user: str | None = typer.Option(
            None,
            "--user",
            "-u",
            help="User whose issues to list (all for every user)",
            autocompletion=complete_user_names,
        ),
        limit: int | None = typer.Option(
            None,
            "--limit",
            "-n",
            help="Maximum number of issues to return (default: 50)",
        ),
        no_cache: bool = typer.Option(
            False,
            "--no-cache",
            help="Always fetch the cycle list from the API",
        ),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """List issues assigned to you."""
        is_json = is_json_output(json_output)
        try:
            config = load_config()
            if limit is None:
                limit = get_default_limit(config)
            if limit <= 0:
                echo_error(f"--limit must be greater than 0, got {limit}")
                raise typer.Exit(1)

            client = get_client(config)
            resolver = get_cycle_resolver(client, config, use_cache=not no_cache)
            issue_filter, resolved_cycle = build_issue_filter(
                resolver,
                status=status,
                label=label,
                user=user,
                cycle=cycle,
                default_excluded=get_default_excluded_statuses(config),
            )

            issues = client.list_issues(limit, issue_filter, user=user or None)
            issues = sort_issues(issues, sort_by or get_default_sort(config))

            if is_json:
                echo_json(
                    {
                        "cycle": _cycle_to_dict(resolved_cycle),
                        "issues": [issue_to_dict(issue) for issue in issues],
                    },
                )
                return

            color = color_enabled()
            if resolved_cycle is not None:
                typer.echo(format_cycle_header(resolved_cycle, color=color))
            if not issues:
                typer.echo("No issues found")
            else:
                typer.echo(format_issue_table(issues, color=color))

        except typer.Exit:
            raise
        except Exception as e:
            echo_error(e)
            raise typer.Exit(1)

    issue_app.command("ls", hidden=True)(list_issues)

    @issue_app.command("get")
    def get_issue(
        identifier: str = typer.Argument(
            ...,
            help="Issue identifier, e.g. ENG-42",
            autocompletion=complete_issue_ids,
        ),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """Show details for a specific issue."""
        is_json = is_json_output(json_output)
        try:
            client = get_client(load_config())
            issue = client.get_issue(identifier)
            if issue is None:
                echo_error(f"issue {identifier} not found")
                raise typer.Exit(1)

            if is_json:
                echo_json(issue_detail_to_dict(issue))
            else:
                typer.echo(format_issue_detail(issue, color=color_enabled()))

        except typer.Exit:
            raise
        except Exception as e:
            echo_error(e)
            raise typer.Exit(1)

    issue_app.command("show", hidden=True)(get_issue)
    issue_app.command("view", hidden=True)(get_issue)

    @issue_app.command("edit")
    def edit_issue(
        identifier: str = typer.Argument(
            ...,
            help="Issue identifier, e.g. ENG-42",
            autocompletion=complete_issue_ids,
        ),
        cycle: str | None = typer.Option(
            None,
            "--cycle",
            "-c",
            help="Set cycle: current, next, previous, or a cycle number",
            autocompletion=complete_cycles,
        ),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """Edit properties of an existing issue."""
        is_json = is_json_output(json_output)
        if not cycle:
            echo_error("at least one edit flag is required (e.g. --cycle)")
            raise typer.Exit(1)
        try:
            config = load_config()
            client = get_client(config)
            issue = client.get_issue(identifier)
            if issue is None:
                echo_error(f"issue {identifier} not found")
                raise typer.Exit(1)

            resolved = get_cycle_resolver(client, config).resolve(cycle)
            client.update_issue_cycle(issue.id, resolved.id)

            if is_json:
                echo_json(
                    {"identifier": identifier, "cycle": _cycle_to_dict(resolved)},
                )
                return

            color = color_enabled()
            issue_label = typer.style(identifier, bold=True) if color else identifier
            header = format_cycle_header(resolved, color=color, with_dates=False)
            typer.echo(f"Updated {issue_label} cycle to {header}")

        except typer.Exit:
            raise
        except Exception as e:
            echo_error(e)
            raise typer.Exit(1)

    issue_app.command("e", hidden=True)(edit_issue)

    app.add_typer(issue_app, name="issue")
