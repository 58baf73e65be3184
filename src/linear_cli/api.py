"""Minimal Linear GraphQL client."""

from __future__ import annotations

import logging
from typing import Any

import requests

from linear_cli.constants import (
    API_TIMEOUT_SECONDS,
    CYCLE_LIST_SIZE,
    LINEAR_API_ENDPOINT,
)
from linear_cli.errors import ApiError
from linear_cli.models import (
    CycleRecord,
    IssueDetail,
    IssueRecord,
    UserRecord,
    dict_to_cycle,
    dict_to_issue,
    dict_to_issue_detail,
    dict_to_user,
)

logger = logging.getLogger(__name__)

_ISSUE_FIELDS = """
    id identifier title priority updatedAt
    state { name type }
    labels { nodes { name } }
"""

LIST_CYCLES_QUERY = """
query ListCycles($first: Int!) {
  cycles(first: $first) {
    nodes {
      id number name startsAt endsAt
      isActive isNext isPrevious isFuture
    }
  }
}
"""

LIST_MY_ISSUES_QUERY = f"""
query ListMyIssues($first: Int!, $filter: IssueFilter) {{
  viewer {{
    assignedIssues(first: $first, filter: $filter) {{
      nodes {{ {_ISSUE_FIELDS} }}
    }}
  }}
}}
"""

LIST_ISSUES_QUERY = f"""
query ListIssues($first: Int!, $filter: IssueFilter) {{
  issues(first: $first, filter: $filter) {{
    nodes {{ {_ISSUE_FIELDS} }}
  }}
}}
"""

GET_ISSUE_QUERY = f"""
query GetIssue($id: String!) {{
  issue(id: $id) {{
    {_ISSUE_FIELDS}
    description dueDate estimate branchName url
    assignee {{ name }}
    team {{ name }}
    project {{ name }}
    cycle {{ id number name startsAt endsAt }}
    parent {{ identifier title }}
  }}
}}
"""

UPDATE_ISSUE_CYCLE_MUTATION = """
mutation UpdateIssueCycle($id: String!, $cycleId: String!) {
  issueUpdate(id: $id, input: { cycleId: $cycleId }) {
    success
  }
}
"""

LIST_LABELS_QUERY = """
query ListLabels($first: Int!) {
  issueLabels(first: $first) {
    nodes { name }
  }
}
"""

LIST_USERS_QUERY = """
query ListUsers($first: Int!) {
  users(first: $first) {
    nodes { name displayName }
  }
}
"""


class LinearClient:
    """Run queries against the Linear GraphQL API."""

    def __init__(
        self,
        api_key: str,
        endpoint: str = LINEAR_API_ENDPOINT,
        session: requests.Session | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.session = session or requests.Session()
        self.session.headers.update(
            {"Authorization": api_key, "Content-Type": "application/json"},
        )

    def graphql(self, query: str, variables: dict[str, Any] | None = None) -> Any:
        """Execute a query and return its ``data`` payload.

        Raises:
            ApiError: On transport errors, HTTP errors or GraphQL errors.
        """
        try:
            resp = self.session.post(
                self.endpoint,
                json={"query": query, "variables": variables or {}},
                timeout=API_TIMEOUT_SECONDS,
            )
            resp.raise_for_status()
            payload = resp.json()
        except requests.RequestException as e:
            msg = f"request to {self.endpoint} failed: {e}"
            raise ApiError(msg) from e
        except ValueError as e:
            msg = f"invalid JSON response from {self.endpoint}"
            raise ApiError(msg) from e

        if payload.get("errors"):
            messages = "; ".join(
                err.get("message", str(err)) for err in payload["errors"]
            )
            msg = f"GraphQL errors: {messages}"
            raise ApiError(msg)
        return payload.get("data") or {}

    def list_cycles(self, first: int = CYCLE_LIST_SIZE) -> list[CycleRecord]:
        """Fetch the cycle list.

        Raises:
            ApiError: If the request fails or returns no or malformed cycles
                data.
        """
        data = self.graphql(LIST_CYCLES_QUERY, {"first": first})
        cycles = data.get("cycles")
        if cycles is None:
            msg = "no cycles data returned from API"
            raise ApiError(msg)
        # A null node list is an empty cycle list
        nodes = cycles.get("nodes") or []
        logger.debug("Fetched %d cycles", len(nodes))
        try:
            return [dict_to_cycle(node) for node in nodes]
        except (KeyError, TypeError) as e:
            msg = f"invalid cycle data returned from API: {e}"
            raise ApiError(msg) from e

    def list_issues(
        self,
        limit: int,
        issue_filter: dict[str, Any] | None = None,
        user: str | None = None,
    ) -> list[IssueRecord]:
        """Fetch issues matching ``issue_filter``.

        Without ``user`` this lists the viewer's assigned issues. With a
        user the assignee constraint is expected in the filter and all
        issues are queried.

        Raises:
            ApiError: If the request fails or returns no issues data.
        """
        variables = {"first": limit, "filter": issue_filter}
        if user:
            data = self.graphql(LIST_ISSUES_QUERY, variables)
            connection = data.get("issues")
            if connection is None:
                msg = "no issues data returned from API"
                raise ApiError(msg)
        else:
            data = self.graphql(LIST_MY_ISSUES_QUERY, variables)
            viewer = data.get("viewer")
            if viewer is None:
                msg = "no viewer data returned from API"
                raise ApiError(msg)
            connection = viewer.get("assignedIssues")
            if connection is None:
                msg = "no assigned issues data returned from API"
                raise ApiError(msg)
        nodes = connection.get("nodes")
        if nodes is None:
            msg = "no issues data returned from API"
            raise ApiError(msg)
        return [dict_to_issue(node) for node in nodes]

    def get_issue(self, identifier: str) -> IssueDetail | None:
        """Fetch one issue by identifier (``ENG-42``) or UUID.

        Returns:
            The issue, or None if the API returns no issue.

        Raises:
            ApiError: If the request fails.
        """
        data = self.graphql(GET_ISSUE_QUERY, {"id": identifier})
        node = data.get("issue")
        if node is None:
            return None
        return dict_to_issue_detail(node)

    def update_issue_cycle(self, issue_id: str, cycle_id: str) -> None:
        """Move an issue into a cycle.

        Raises:
            ApiError: If the request fails or the update is not successful.
        """
        data = self.graphql(
            UPDATE_ISSUE_CYCLE_MUTATION,
            {"id": issue_id, "cycleId": cycle_id},
        )
        result = data.get("issueUpdate")
        if not result or not result.get("success"):
            msg = "issue update was not successful"
            raise ApiError(msg)

    def list_labels(self, first: int = 250) -> list[str]:
        """Fetch issue label names.

        Raises:
            ApiError: If the request fails or returns no labels data.
        """
        data = self.graphql(LIST_LABELS_QUERY, {"first": first})
        labels = data.get("issueLabels")
        if labels is None:
            msg = "no labels data returned from API"
            raise ApiError(msg)
        return [node["name"] for node in labels.get("nodes") or [] if node.get("name")]

    def list_users(self, first: int = 100) -> list[UserRecord]:
        """Fetch workspace members.

        Raises:
            ApiError: If the request fails or returns no users data.
        """
        data = self.graphql(LIST_USERS_QUERY, {"first": first})
        users = data.get("users")
        if users is None:
            msg = "no users data returned from API"
            raise ApiError(msg)
        return [dict_to_user(node) for node in users.get("nodes") or []]
