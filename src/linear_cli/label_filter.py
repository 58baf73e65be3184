"""Compilation of ``--label`` expressions into label filter trees.

Comma separates OR groups, plus separates AND terms within a group::

    "bug,devex"          -> bug OR devex
    "bug+frontend"       -> bug AND frontend
    "bug+frontend,devex" -> (bug AND frontend) OR devex
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Leaf:
    """Match issues carrying a label with this (case-insensitive) name."""

    name: str


@dataclass(frozen=True)
class And:
    """Match issues satisfying every child."""

    children: tuple[Leaf, ...]


@dataclass(frozen=True)
class Or:
    """Match issues satisfying any child."""

    children: tuple[Leaf | And, ...]


LabelFilterExpression = Union[Leaf, And, Or]


def compile_label_filter(raw: str | None) -> LabelFilterExpression | None:
    """Parse a label expression; returns None when it names no labels.

    Empty groups and terms are dropped. Single-term groups collapse to a bare
    Leaf and a single group is returned without an Or wrapper.
    """
    value = (raw or "").strip().lower()
    groups: list[Leaf | And] = []
    for group in value.split(","):
        terms = [Leaf(term.strip()) for term in group.split("+") if term.strip()]
        if not terms:
            continue
        if len(terms) == 1:
            groups.append(terms[0])
        else:
            groups.append(And(tuple(terms)))

    if not groups:
        return None
    if len(groups) == 1:
        return groups[0]
    return Or(tuple(groups))


def label_filter_to_query(expr: LabelFilterExpression) -> dict[str, Any]:
    """Render an expression as a remote label collection filter."""
    if isinstance(expr, Leaf):
        return {"some": {"name": {"eqIgnoreCase": expr.name}}}
    if isinstance(expr, And):
        return {"and": [label_filter_to_query(child) for child in expr.children]}
    return {"or": [label_filter_to_query(child) for child in expr.children]}
