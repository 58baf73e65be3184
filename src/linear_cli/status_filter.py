"""Parsing of ``--status`` selector strings into include/exclude sets."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from linear_cli.constants import (
    ALL_SELECTOR,
    DEFAULT_EXCLUDED_STATUSES,
    NEGATION_PREFIXES,
)
from linear_cli.models import WorkflowStateCategory

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusSelector:
    """Workflow state types to include and exclude.

    An empty ``include`` set means "no positive constraint".
    """

    include: frozenset[WorkflowStateCategory] = field(default_factory=frozenset)
    exclude: frozenset[WorkflowStateCategory] = field(default_factory=frozenset)

    @classmethod
    def excluding(cls, categories: Iterable[str]) -> StatusSelector:
        """Build a selector that only excludes the given state types."""
        return cls(
            exclude=frozenset(WorkflowStateCategory.parse(c) for c in categories),
        )


def split_negation(token: str) -> tuple[str, str, bool]:
    """Split a token into its negation prefix, the bare value and a negated flag.

    Examples:
        "!back"   -> ("!", "back", True)
        "\\!back" -> ("\\!", "back", True)
        "started" -> ("", "started", False)
    """
    for prefix in NEGATION_PREFIXES:
        if token.startswith(prefix):
            return prefix, token[len(prefix) :], True
    return "", token, False


def parse_status_filter(
    raw: str | None,
    default_excluded: Iterable[str] = DEFAULT_EXCLUDED_STATUSES,
) -> StatusSelector | None:
    """Parse a ``--status`` value into a StatusSelector.

    - Empty input applies the default policy (exclude ``default_excluded``).
    - ``all`` (any case) returns None: no state filter at all.
    - Otherwise the comma-separated tokens are split into included and
      ``!``-negated (excluded) state types. ``todo`` is read as ``unstarted``.

    A state type given both with and without negation is excluded: exclusion
    wins regardless of token order. Repeated tokens are deduplicated.

    Raises:
        ValueError: If a token is not a known state type.
    """
    value = (raw or "").strip().lower()
    if value == ALL_SELECTOR:
        return None
    if not value:
        return StatusSelector.excluding(default_excluded)

    include: set[WorkflowStateCategory] = set()
    exclude: set[WorkflowStateCategory] = set()
    for token in value.split(","):
        token = token.strip()
        if not token:
            continue
        _, bare, negated = split_negation(token)
        bare = bare.strip()
        if not bare:
            continue
        category = WorkflowStateCategory.parse(bare)
        if negated:
            exclude.add(category)
        else:
            include.add(category)

    contradictory = include & exclude
    if contradictory:
        logger.debug(
            "Status selector both includes and excludes %s; excluding",
            ", ".join(sorted(c.value for c in contradictory)),
        )
    return StatusSelector(
        include=frozenset(include - exclude),
        exclude=frozenset(exclude),
    )


def _ordered(categories: frozenset[WorkflowStateCategory]) -> list[str]:
    return [c.value for c in sorted(categories, key=lambda c: c.rank)]


def status_comparator(selector: StatusSelector | None) -> dict[str, Any] | None:
    """Render a selector as a remote string comparator (``in``/``nin``).

    Returns None when the selector constrains nothing.
    """
    if selector is None:
        return None
    comparator: dict[str, Any] = {}
    if selector.include:
        comparator["in"] = _ordered(selector.include)
    if selector.exclude:
        comparator["nin"] = _ordered(selector.exclude)
    return comparator or None
