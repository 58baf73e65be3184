"""Deterministic ordering of issue lists."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

from linear_cli.models import priority_rank, state_rank

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from linear_cli.models import IssueRecord


class SortKey(str, Enum):
    """Sort key names accepted by ``--sort``.

    ``UNKNOWN`` stands for any unrecognized name and sorts like ``STATUS``:
    a bad ``--sort`` value is tolerated rather than rejected.
    """

    STATUS = "status"
    PRIORITY = "priority"
    IDENTIFIER = "identifier"
    TITLE = "title"
    UNKNOWN = "unknown"


def parse_sort_key(raw: str | None) -> SortKey:
    """Map a ``--sort`` value to a SortKey (empty means status)."""
    value = (raw or "").strip().lower()
    if not value:
        return SortKey.STATUS
    try:
        key = SortKey(value)
    except ValueError:
        return SortKey.UNKNOWN
    return key


def _status_key(issue: IssueRecord) -> tuple[Any, ...]:
    return (state_rank(issue), priority_rank(issue.priority))


def _priority_key(issue: IssueRecord) -> tuple[Any, ...]:
    return (priority_rank(issue.priority), state_rank(issue))


def _identifier_key(issue: IssueRecord) -> tuple[Any, ...]:
    return (issue.identifier,)


def _title_key(issue: IssueRecord) -> tuple[Any, ...]:
    return (issue.title.lower(),)


_SORT_KEYS: dict[SortKey, Callable[[IssueRecord], tuple[Any, ...]]] = {
    SortKey.STATUS: _status_key,
    SortKey.PRIORITY: _priority_key,
    SortKey.IDENTIFIER: _identifier_key,
    SortKey.TITLE: _title_key,
    SortKey.UNKNOWN: _status_key,
}


def sort_issues(
    issues: Iterable[IssueRecord],
    sort_by: SortKey | str | None = SortKey.STATUS,
) -> list[IssueRecord]:
    """Return the issues ordered by ``sort_by``.

    - status: state rank, then priority rank (most urgent first)
    - priority: priority rank, then state rank
    - identifier: raw identifier string
    - title: lowercased title

    Priority 0 (none) and unknown state types rank last. The sort is
    stable: issues equal on every key keep their input order.
    """
    key = sort_by if isinstance(sort_by, SortKey) else parse_sort_key(sort_by)
    return sorted(issues, key=_SORT_KEYS[key])
