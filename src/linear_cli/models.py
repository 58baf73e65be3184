"""Data models for Linear issues and cycles using dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from linear_cli.constants import (
    PRIORITY_LABELS,
    STATE_TYPE_ORDER,
    STATUS_ALIASES,
    UNRANKED,
)


class WorkflowStateCategory(str, Enum):
    """Workflow state type enumeration."""

    STARTED = "started"
    UNSTARTED = "unstarted"
    TRIAGE = "triage"
    BACKLOG = "backlog"
    COMPLETED = "completed"
    CANCELED = "canceled"

    @property
    def rank(self) -> int:
        """Display rank, lower is shown first."""
        return STATE_TYPE_ORDER[self.value]

    @classmethod
    def parse(cls, value: str) -> WorkflowStateCategory:
        """Parse a user-supplied status name, expanding aliases like ``todo``.

        Raises:
            ValueError: If the name is not a known state type.
        """
        raw = value.strip().lower()
        raw = STATUS_ALIASES.get(raw, raw)
        try:
            return cls(raw)
        except ValueError:
            valid = ", ".join([c.value for c in cls] + list(STATUS_ALIASES))
            msg = f"Invalid status '{value}'. Valid values: {valid}"
            raise ValueError(msg) from None


@dataclass(frozen=True)
class WorkflowState:
    """The workflow state an issue is in."""

    name: str
    type: str


@dataclass(frozen=True)
class IssueRecord:
    """An issue as returned by a list query."""

    identifier: str  # e.g. "ENG-42"
    title: str
    id: str = ""
    state: WorkflowState | None = None
    priority: int = 0  # 0 = no priority, 1 = urgent .. 4 = low
    updated_at: datetime | None = None
    labels: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class CycleRecord:
    """A cycle from the remote cycle list.

    Timestamps are kept as the raw ISO strings the API returns so that
    cached snapshots round-trip unchanged.
    """

    id: str
    number: float
    starts_at: str
    ends_at: str
    name: str | None = None
    is_active: bool = False
    is_next: bool = False
    is_previous: bool = False
    is_future: bool = False


@dataclass(frozen=True)
class ResolvedCycle:
    """Metadata for exactly one cycle, used for filtering and display."""

    id: str
    number: float
    name: str
    starts_at: str
    ends_at: str

    @classmethod
    def from_record(cls, record: CycleRecord) -> ResolvedCycle:
        """Build from a cycle list record."""
        return cls(
            id=record.id,
            number=record.number,
            name=record.name or "",
            starts_at=record.starts_at,
            ends_at=record.ends_at,
        )


def state_rank(issue: IssueRecord) -> int:
    """Rank an issue by workflow state type; unknown or missing ranks last."""
    if issue.state is None:
        return UNRANKED
    return STATE_TYPE_ORDER.get(issue.state.type, UNRANKED)


def priority_rank(priority: float) -> float:
    """Rank a priority value (lower = more important); 0 (None) ranks last."""
    if priority == 0:
        return UNRANKED
    return priority


def priority_label(priority: float) -> str:
    """Get a human-readable label for a priority value."""
    label = PRIORITY_LABELS.get(priority)  # type: ignore[call-overload]
    if label is None:
        return f"Unknown({priority:.0f})"
    return label


def cycle_number(number: float) -> int | float:
    """Render a cycle number as an int when it is integral (12, not 12.0)."""
    return int(number) if number.is_integer() else number


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO 8601 timestamp, returning None if it is missing or invalid."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def dict_to_issue(data: dict[str, Any]) -> IssueRecord:
    """Convert an issue node from the API to an IssueRecord."""
    state_data = data.get("state")
    state = (
        WorkflowState(name=state_data.get("name", ""), type=state_data.get("type", ""))
        if state_data
        else None
    )
    labels_data = data.get("labels") or {}
    labels = tuple(lbl["name"] for lbl in labels_data.get("nodes") or [])
    return IssueRecord(
        id=data.get("id", ""),
        identifier=data["identifier"],
        title=data.get("title", ""),
        state=state,
        priority=int(data.get("priority") or 0),
        updated_at=parse_timestamp(data.get("updatedAt")),
        labels=labels,
    )


def issue_to_dict(issue: IssueRecord) -> dict[str, Any]:
    """Convert an IssueRecord to a JSON-friendly dictionary."""
    return {
        "id": issue.id,
        "identifier": issue.identifier,
        "title": issue.title,
        "state": (
            {"name": issue.state.name, "type": issue.state.type}
            if issue.state
            else None
        ),
        "priority": issue.priority,
        "updatedAt": issue.updated_at.isoformat() if issue.updated_at else None,
        "labels": list(issue.labels),
    }


def dict_to_cycle(data: dict[str, Any]) -> CycleRecord:
    """Convert a cycle node from the API (or cache) to a CycleRecord.

    Raises:
        KeyError: If a required field is missing.
        TypeError: If the number is not numeric.
    """
    number = data["number"]
    if isinstance(number, bool) or not isinstance(number, (int, float)):
        msg = f"Cycle number must be numeric, got {number!r}"
        raise TypeError(msg)
    return CycleRecord(
        id=data["id"],
        number=float(number),
        name=data.get("name"),
        starts_at=data.get("startsAt") or "",
        ends_at=data.get("endsAt") or "",
        is_active=bool(data.get("isActive", False)),
        is_next=bool(data.get("isNext", False)),
        is_previous=bool(data.get("isPrevious", False)),
        is_future=bool(data.get("isFuture", False)),
    )


def cycle_to_dict(cycle: CycleRecord) -> dict[str, Any]:
    """Convert a CycleRecord to the API's dictionary shape."""
    return {
        "id": cycle.id,
        "number": cycle.number,
        "name": cycle.name,
        "startsAt": cycle.starts_at,
        "endsAt": cycle.ends_at,
        "isActive": cycle.is_active,
        "isNext": cycle.is_next,
        "isPrevious": cycle.is_previous,
        "isFuture": cycle.is_future,
    }


@dataclass(frozen=True)
class UserRecord:
    """A workspace member."""

    name: str
    display_name: str


@dataclass(frozen=True)
class IssueDetail:
    """Full detail for a single issue."""

    id: str
    identifier: str
    title: str
    state: WorkflowState | None = None
    priority: int = 0
    assignee: str | None = None
    team: str | None = None
    cycle: ResolvedCycle | None = None
    project: str | None = None
    labels: tuple[str, ...] = field(default_factory=tuple)
    due_date: str | None = None
    estimate: float | None = None
    branch_name: str = ""
    url: str = ""
    parent: str | None = None  # "ENG-1 Parent title"
    description: str | None = None


def dict_to_user(data: dict[str, Any]) -> UserRecord:
    """Convert a user node from the API to a UserRecord."""
    return UserRecord(
        name=data.get("name") or "",
        display_name=data.get("displayName") or "",
    )


def _name_of(data: dict[str, Any] | None) -> str | None:
    return data.get("name") if data else None


def dict_to_issue_detail(data: dict[str, Any]) -> IssueDetail:
    """Convert a single-issue node from the API to an IssueDetail."""
    summary = dict_to_issue(data)
    cycle_data = data.get("cycle")
    cycle = None
    if cycle_data:
        cycle = ResolvedCycle(
            id=cycle_data.get("id", ""),
            number=float(cycle_data.get("number") or 0),
            name=cycle_data.get("name") or "",
            starts_at=cycle_data.get("startsAt") or "",
            ends_at=cycle_data.get("endsAt") or "",
        )
    parent_data = data.get("parent")
    parent = (
        f"{parent_data.get('identifier', '')} {parent_data.get('title', '')}".strip()
        if parent_data
        else None
    )
    estimate = data.get("estimate")
    return IssueDetail(
        id=summary.id,
        identifier=summary.identifier,
        title=summary.title,
        state=summary.state,
        priority=summary.priority,
        assignee=_name_of(data.get("assignee")),
        team=_name_of(data.get("team")),
        cycle=cycle,
        project=_name_of(data.get("project")),
        labels=summary.labels,
        due_date=data.get("dueDate"),
        estimate=float(estimate) if estimate is not None else None,
        branch_name=data.get("branchName") or "",
        url=data.get("url") or "",
        parent=parent,
        description=data.get("description"),
    )


def issue_detail_to_dict(issue: IssueDetail) -> dict[str, Any]:
    """Convert an IssueDetail to a JSON-friendly dictionary."""
    return {
        "id": issue.id,
        "identifier": issue.identifier,
        "title": issue.title,
        "state": issue.state.name if issue.state else None,
        "priority": priority_label(issue.priority),
        "assignee": issue.assignee or "Unassigned",
        "team": issue.team,
        "cycle": cycle_number(issue.cycle.number) if issue.cycle else None,
        "project": issue.project,
        "labels": list(issue.labels),
        "dueDate": issue.due_date,
        "estimate": issue.estimate,
        "branchName": issue.branch_name,
        "url": issue.url,
        "parent": issue.parent,
        "description": issue.description,
    }
