"""Shell completion callbacks for the linear CLI."""

from __future__ import annotations

from typing import Any

from linear_cli.config import load_config
from linear_cli.constants import (
    ALL_SELECTOR,
    DEFAULT_EXCLUDED_STATUSES,
    SORT_KEYS,
    STATUS_COMPLETIONS,
)
from linear_cli.ranking import sort_issues
from linear_cli.status_filter import split_negation

from ._formatting import format_cycle_label
from ._helpers import get_client, get_cycle_resolver

# Return (value, help_text) tuples so Typer generates "value":"description"
# pairs in the zsh completion output.

_SORT_HELP = {
    "status": "State type, then priority",
    "priority": "Priority, then state type",
    "identifier": "Issue identifier",
    "title": "Title (case-insensitive)",
}

_STATIC_CYCLES = [
    ("current", "Current active cycle"),
    ("next", "Next upcoming cycle"),
    ("previous", "Previous completed cycle"),
]


def complete_statuses(incomplete: str) -> list[tuple[str, str]]:
    """Complete comma-separated ``--status`` values.

    Offers ``all`` only as the sole value, keeps a ``!``/``\\!`` negation
    prefix on the value being typed and skips values already used.
    """
    parts = incomplete.split(",")
    partial = parts[-1]
    prefix = ",".join(parts[:-1])

    used = {split_negation(p.strip())[1] for p in parts[:-1]}
    neg_prefix, bare, negated = split_negation(partial)

    results: list[tuple[str, str]] = []
    if not prefix and not negated and ALL_SELECTOR.startswith(bare):
        results.append((ALL_SELECTOR, "All statuses"))
    for status in STATUS_COMPLETIONS:
        if status in used or not status.startswith(bare):
            continue
        value = f"{neg_prefix}{status}"
        if prefix:
            value = f"{prefix},{value}"
        results.append((value, f"Exclude {status}" if negated else status))
    return results


def complete_sort_keys(incomplete: str) -> list[tuple[str, str]]:
    """Complete ``--sort`` values."""
    return [(key, _SORT_HELP[key]) for key in SORT_KEYS if key.startswith(incomplete)]


def complete_cycles(
    ctx: Any,  # noqa: ARG001 (kept for signature compat)
    args: list[str],  # noqa: ARG001 (always [] from Typer, kept for signature compat)
    incomplete: str,
) -> list[tuple[str, str]]:
    """Complete ``--cycle`` values with cycle details when available.

    Upcoming cycles beyond the next one are offered by number. Falls back
    to the bare keywords when cycles cannot be fetched.
    """
    entries = dict(_STATIC_CYCLES)
    upcoming: list[tuple[str, str]] = []
    try:
        config = load_config()
        resolver = get_cycle_resolver(get_client(config), config)
        cycles = resolver.list_cycles()
    except Exception:
        cycles = ()

    for cycle in cycles:
        label = format_cycle_label(cycle)
        if cycle.is_active:
            entries["current"] = f"Active   {label}"
        if cycle.is_next:
            entries["next"] = f"Next     {label}"
        if cycle.is_previous:
            entries["previous"] = f"Previous {label}"
    for cycle in sorted(
        (c for c in cycles if c.is_future and not c.is_next),
        key=lambda c: c.number,
    ):
        upcoming.append((f"{cycle.number:.0f}", f"Upcoming {format_cycle_label(cycle)}"))

    results = [*entries.items(), (ALL_SELECTOR, "All cycles"), *upcoming]
    return [(v, h) for v, h in results if v.startswith(incomplete.lower())]


def complete_label_names(incomplete: str) -> list[tuple[str, str]]:
    """Complete ``--label`` expressions one term at a time.

    The text up to the last ``,`` or ``+`` is kept as typed and labels
    already named in it are skipped.
    """
    cut = max(incomplete.rfind(","), incomplete.rfind("+")) + 1
    prefix, partial = incomplete[:cut], incomplete[cut:].strip().lower()
    used = {
        term.strip().lower()
        for group in prefix.split(",")
        for term in group.split("+")
        if term.strip()
    }
    try:
        names = get_client(load_config()).list_labels()
    except Exception:
        return []

    results: list[tuple[str, str]] = []
    for name in sorted(set(names), key=str.lower):
        lowered = name.lower()
        if lowered in used or not lowered.startswith(partial):
            continue
        results.append((f"{prefix}{name}", "Label"))
    return results


def complete_user_names(incomplete: str) -> list[tuple[str, str]]:
    """Complete ``--user`` with each member's first display-name word."""
    entries = [(ALL_SELECTOR, "Every user")]
    try:
        users = get_client(load_config()).list_users()
    except Exception:
        users = []
    for user in users:
        words = user.display_name.split()
        value = (words[0] if words else user.display_name).lower()
        if value:
            entries.append((value, user.name))
    return [(v, h) for v, h in entries if v.startswith(incomplete.lower())]


def complete_issue_ids(
    ctx: Any,  # noqa: ARG001 (kept for signature compat)
    args: list[str],  # noqa: ARG001 (always [] from Typer, kept for signature compat)
    incomplete: str,
) -> list[tuple[str, str]]:
    """Complete identifiers of your open issues, in status order."""
    try:
        client = get_client(load_config())
        issues = client.list_issues(
            100,
            {"state": {"type": {"nin": list(DEFAULT_EXCLUDED_STATUSES)}}},
        )
    except Exception:
        return []
    prefix = incomplete.upper()
    return [
        (i.identifier, f"{i.state.name if i.state else '-'}: {i.title}")
        for i in sort_issues(issues)
        if i.identifier.upper().startswith(prefix)
    ]
