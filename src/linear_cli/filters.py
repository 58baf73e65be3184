"""Composition of the issue list query filter from flag values."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from linear_cli.constants import ALL_SELECTOR, DEFAULT_EXCLUDED_STATUSES
from linear_cli.errors import LinearCliError
from linear_cli.label_filter import compile_label_filter, label_filter_to_query
from linear_cli.models import cycle_number
from linear_cli.status_filter import parse_status_filter, status_comparator

if TYPE_CHECKING:
    from collections.abc import Iterable

    from linear_cli.cycles import CycleResolver
    from linear_cli.models import ResolvedCycle

logger = logging.getLogger(__name__)


def build_issue_filter(
    resolver: CycleResolver,
    status: str | None = None,
    label: str | None = None,
    user: str | None = None,
    cycle: str | None = None,
    default_excluded: Iterable[str] = DEFAULT_EXCLUDED_STATUSES,
) -> tuple[dict[str, Any] | None, ResolvedCycle | None]:
    """Build the remote issue filter for ``issue list``.

    Each constraint is ANDed into the filter and absent ones are left out
    entirely. Cycle handling:

    - ``all``: no cycle constraint.
    - a selector: resolved via ``resolver`` and matched by cycle number.
      Resolution errors propagate.
    - empty: the current cycle if it can be resolved, otherwise an
      ``isActive`` constraint. This path never raises.

    Returns:
        (filter dict or None when nothing is constrained, resolved cycle for
        the display header or None)
    """
    issue_filter: dict[str, Any] = {}

    comparator = status_comparator(parse_status_filter(status, default_excluded))
    if comparator is not None:
        issue_filter["state"] = {"type": comparator}

    username = (user or "").strip()
    if username and username.lower() != ALL_SELECTOR:
        issue_filter["assignee"] = {"displayName": {"eqIgnoreCase": username}}

    label_expr = compile_label_filter(label)
    if label_expr is not None:
        issue_filter["labels"] = label_filter_to_query(label_expr)

    resolved: ResolvedCycle | None = None
    cycle_value = (cycle or "").strip().lower()
    if cycle_value == ALL_SELECTOR:
        pass
    elif cycle_value:
        resolved = resolver.resolve(cycle_value)
    else:
        try:
            resolved = resolver.resolve("current")
        except LinearCliError as e:
            logger.debug("No current cycle (%s); filtering on active cycle", e)
            issue_filter["cycle"] = {"isActive": {"eq": True}}

    if resolved is not None:
        issue_filter["cycle"] = {"number": {"eq": cycle_number(resolved.number)}}

    return issue_filter or None, resolved
