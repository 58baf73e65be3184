"""Tests for the issue commands."""

from __future__ import annotations

from typing import Any

import orjson
import pytest
from cli_test_helpers import (
    NOW,
    FakeClient,
    MemoryStore,
    make_detail,
    make_issue,
    runner,
)

from linear_cli.cli import _cmd_issue, app
from linear_cli.config import get_config_path
from linear_cli.cycles import CycleCache, CycleResolver

ISSUES = [
    make_issue("AIS-273", "started", 3, title="Polish table"),
    make_issue("AIS-265", "started", 2, title="Cache cycles"),
    make_issue("AIS-215", "unstarted", 2, title="Label filter"),
    make_issue("AIS-147", "backlog", 3, title="Docs"),
]

DEFAULT_FILTER = {
    "state": {"type": {"nin": ["completed", "canceled"]}},
    "cycle": {"number": {"eq": 12}},
}


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch) -> FakeClient:
    """Route the command through a fake API client with sample issues."""
    fake = FakeClient(issues=list(ISSUES), details=[make_detail("AIS-265")])
    store = MemoryStore()
    fake.resolver_calls = []  # type: ignore[attr-defined]

    def fake_resolver(
        client: FakeClient,
        config: dict[str, Any],  # noqa: ARG001
        use_cache: bool = True,
    ) -> CycleResolver:
        fake.resolver_calls.append(use_cache)  # type: ignore[attr-defined]
        cache = CycleCache(store, now=lambda: NOW) if use_cache else None
        return CycleResolver(client.list_cycles, cache, now=lambda: NOW)

    monkeypatch.setattr(_cmd_issue, "get_client", lambda _config: fake)
    monkeypatch.setattr(_cmd_issue, "get_cycle_resolver", fake_resolver)
    return fake


def _write_config(text: str) -> None:
    path = get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)


def _ids(output: str) -> list[str]:
    rows = [line.split() for line in output.splitlines()]
    return [row[0] for row in rows if row and row[0].startswith("AIS-")]


class TestIssueList:
    """Tests for ``linear issue list``."""

    def test_defaults(self, client: FakeClient) -> None:
        """Without flags: current cycle header and status-sorted table."""
        result = runner.invoke(app, ["issue", "list"])
        assert result.exit_code == 0, result.output
        assert result.output.splitlines()[0] == (
            "Cycle 12 - Sprint 12 (Jan 13 – Jan 27)"
        )
        assert _ids(result.output) == ["AIS-265", "AIS-273", "AIS-215", "AIS-147"]
        assert client.issue_calls == [
            {"limit": 50, "filter": DEFAULT_FILTER, "user": None},
        ]

    def test_ls_alias(self, client: FakeClient) -> None:
        """``ls`` behaves like ``list``."""
        result = runner.invoke(app, ["issue", "ls"])
        assert result.exit_code == 0, result.output
        assert len(client.issue_calls) == 1

    def test_sort_priority(self, client: FakeClient) -> None:  # noqa: ARG002
        """--sort priority orders by priority, then state."""
        result = runner.invoke(app, ["issue", "list", "--sort", "priority"])
        assert result.exit_code == 0, result.output
        assert _ids(result.output) == ["AIS-265", "AIS-215", "AIS-273", "AIS-147"]

    def test_sort_from_config(self, client: FakeClient) -> None:  # noqa: ARG002
        """default_sort from the config file is used without --sort."""
        _write_config('default_sort = "identifier"\n')
        result = runner.invoke(app, ["issue", "list"])
        assert _ids(result.output) == ["AIS-147", "AIS-215", "AIS-265", "AIS-273"]

    def test_flags_build_filter(self, client: FakeClient) -> None:
        """Status, label, user and cycle flags all reach the query."""
        result = runner.invoke(
            app,
            [
                "issue",
                "list",
                "-S",
                "started,!backlog",
                "-l",
                "bug",
                "-u",
                "alice",
                "-c",
                "next",
                "-n",
                "10",
            ],
        )
        assert result.exit_code == 0, result.output
        assert result.output.startswith("Cycle 13 (Jan 27 – Feb 10)")
        assert client.issue_calls == [
            {
                "limit": 10,
                "filter": {
                    "state": {"type": {"in": ["started"], "nin": ["backlog"]}},
                    "assignee": {"displayName": {"eqIgnoreCase": "alice"}},
                    "labels": {"some": {"name": {"eqIgnoreCase": "bug"}}},
                    "cycle": {"number": {"eq": 13}},
                },
                "user": "alice",
            },
        ]

    def test_all_cycles_has_no_header(self, client: FakeClient) -> None:
        """--cycle all drops the cycle constraint and the header."""
        result = runner.invoke(app, ["issue", "list", "--cycle", "all", "-S", "all"])
        assert result.exit_code == 0, result.output
        assert not result.output.startswith("Cycle")
        assert client.issue_calls[0]["filter"] is None
        assert client.cycle_fetches == 0

    def test_no_issues(self, client: FakeClient) -> None:
        """An empty result prints a message after the header."""
        client.issues = []
        result = runner.invoke(app, ["issue", "list"])
        assert result.exit_code == 0, result.output
        assert result.output.splitlines()[-1] == "No issues found"

    def test_json_output(self, client: FakeClient) -> None:  # noqa: ARG002
        """--json emits the resolved cycle and the sorted issues."""
        result = runner.invoke(app, ["issue", "list", "--json"])
        assert result.exit_code == 0, result.output
        data = orjson.loads(result.output)
        assert data["cycle"]["number"] == 12
        assert isinstance(data["cycle"]["number"], int)
        assert '"number":12,' in result.output
        assert data["cycle"]["name"] == "Sprint 12"
        assert [i["identifier"] for i in data["issues"]] == [
            "AIS-265",
            "AIS-273",
            "AIS-215",
            "AIS-147",
        ]

    def test_global_json_flag(self, client: FakeClient) -> None:  # noqa: ARG002
        """The global --json flag works like the command flag."""
        result = runner.invoke(app, ["--json", "issue", "list", "-c", "all"])
        assert result.exit_code == 0, result.output
        assert orjson.loads(result.output)["cycle"] is None

    def test_limit_zero(self, client: FakeClient) -> None:
        """A non-positive --limit is rejected before any request."""
        result = runner.invoke(app, ["issue", "list", "--limit", "0"])
        assert result.exit_code == 1
        assert "--limit must be greater than 0, got 0" in result.output
        assert client.issue_calls == []

    def test_limit_from_config(self, client: FakeClient) -> None:
        """default_limit from the config file is used without --limit."""
        _write_config("default_limit = 7\n")
        runner.invoke(app, ["issue", "list"])
        assert client.issue_calls[0]["limit"] == 7

    def test_invalid_limit_in_config(self, client: FakeClient) -> None:
        """An invalid default_limit is reported as an error."""
        _write_config("default_limit = 0\n")
        result = runner.invoke(app, ["issue", "list"])
        assert result.exit_code == 1
        assert "default_limit must be a positive integer" in result.output
        assert client.issue_calls == []

    def test_invalid_cycle(self, client: FakeClient) -> None:
        """A malformed --cycle value fails without querying issues."""
        result = runner.invoke(app, ["issue", "list", "--cycle", "later"])
        assert result.exit_code == 1
        assert "invalid --cycle value 'later'" in result.output
        assert client.issue_calls == []

    def test_unknown_cycle(self, client: FakeClient) -> None:  # noqa: ARG002
        """A cycle number that does not exist is an error."""
        result = runner.invoke(app, ["issue", "list", "--cycle", "42"])
        assert result.exit_code == 1
        assert "no 42 cycle found" in result.output

    def test_invalid_status(self, client: FakeClient) -> None:  # noqa: ARG002
        """Unknown status names are reported."""
        result = runner.invoke(app, ["issue", "list", "--status", "wip"])
        assert result.exit_code == 1
        assert "Invalid status 'wip'" in result.output

    def test_json_error(self, client: FakeClient) -> None:  # noqa: ARG002
        """In JSON mode errors are emitted as JSON objects."""
        result = runner.invoke(app, ["--json", "issue", "list", "-c", "later"])
        assert result.exit_code == 1
        assert '{"error":"invalid --cycle value' in result.output
        assert '"type":"InvalidSelectorError"' in result.output

    def test_default_cycle_without_active(self, client: FakeClient) -> None:
        """Without an active cycle the filter falls back to isActive."""
        client.cycles = [c for c in client.cycles if not c.is_active]
        result = runner.invoke(app, ["issue", "list", "-S", "all"])
        assert result.exit_code == 0, result.output
        assert not result.output.startswith("Cycle")
        assert client.issue_calls[0]["filter"] == {"cycle": {"isActive": {"eq": True}}}

    def test_no_cache_flag(self, client: FakeClient) -> None:
        """--no-cache builds the resolver without the cycle cache."""
        runner.invoke(app, ["issue", "list", "--no-cache"])
        runner.invoke(app, ["issue", "list"])
        assert client.resolver_calls == [False, True]  # type: ignore[attr-defined]

    def test_missing_api_key(self) -> None:
        """Without credentials the command fails with a hint."""
        result = runner.invoke(app, ["issue", "list"])
        assert result.exit_code == 1
        assert "no API key found" in result.output


class TestIssueGet:
    """Tests for ``linear issue get``."""

    def test_shows_fields(self, client: FakeClient) -> None:  # noqa: ARG002
        """Details render as aligned field lines."""
        result = runner.invoke(app, ["issue", "get", "AIS-265"])
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0] == "Identifier   AIS-265"
        assert "State        In Progress" in lines
        assert "Assignee     Unassigned" in lines
        assert "URL          https://linear.app/acme/issue/AIS-265" in lines

    def test_show_alias(self, client: FakeClient) -> None:  # noqa: ARG002
        """``show`` behaves like ``get``."""
        result = runner.invoke(app, ["issue", "show", "AIS-265"])
        assert result.exit_code == 0, result.output
        assert result.output.startswith("Identifier   AIS-265")

    def test_json_output(self, client: FakeClient) -> None:  # noqa: ARG002
        """--json emits the issue fields."""
        result = runner.invoke(app, ["issue", "get", "AIS-265", "--json"])
        assert result.exit_code == 0, result.output
        data = orjson.loads(result.output)
        assert data["identifier"] == "AIS-265"
        assert data["state"] == "In Progress"
        assert data["priority"] == "High"
        assert data["assignee"] == "Unassigned"
        assert data["cycle"] is None

    def test_not_found(self, client: FakeClient) -> None:  # noqa: ARG002
        """An unknown identifier exits 1."""
        result = runner.invoke(app, ["issue", "get", "AIS-999"])
        assert result.exit_code == 1
        assert "issue AIS-999 not found" in result.output

    def test_requires_identifier(self, client: FakeClient) -> None:  # noqa: ARG002
        """The identifier argument is mandatory."""
        result = runner.invoke(app, ["issue", "get"])
        assert result.exit_code != 0


class TestIssueEdit:
    """Tests for ``linear issue edit``."""

    def test_requires_a_flag(self, client: FakeClient) -> None:
        """Without edit flags nothing is updated."""
        result = runner.invoke(app, ["issue", "edit", "AIS-265"])
        assert result.exit_code == 1
        assert "at least one edit flag is required" in result.output
        assert client.cycle_updates == []

    def test_set_next_cycle(self, client: FakeClient) -> None:
        """--cycle next moves the issue into cycle 13."""
        result = runner.invoke(app, ["issue", "edit", "AIS-265", "--cycle", "next"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "Updated AIS-265 cycle to Cycle 13"
        assert client.cycle_updates == [("uuid-AIS-265", "cycle-13")]

    def test_set_cycle_by_number(self, client: FakeClient) -> None:
        """A cycle number selects that cycle; the alias ``e`` works too."""
        result = runner.invoke(app, ["issue", "e", "AIS-265", "-c", "12"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "Updated AIS-265 cycle to Cycle 12 - Sprint 12"
        assert client.cycle_updates == [("uuid-AIS-265", "cycle-12")]

    def test_json_output(self, client: FakeClient) -> None:  # noqa: ARG002
        """--json reports the new cycle with an integral number."""
        result = runner.invoke(
            app,
            ["issue", "edit", "AIS-265", "--cycle", "current", "--json"],
        )
        assert result.exit_code == 0, result.output
        data = orjson.loads(result.output)
        assert data["identifier"] == "AIS-265"
        assert data["cycle"]["id"] == "cycle-12"
        assert data["cycle"]["number"] == 12
        assert isinstance(data["cycle"]["number"], int)

    def test_invalid_cycle(self, client: FakeClient) -> None:
        """A malformed selector fails without updating."""
        result = runner.invoke(app, ["issue", "edit", "AIS-265", "--cycle", "later"])
        assert result.exit_code == 1
        assert "invalid --cycle value 'later'" in result.output
        assert client.cycle_updates == []

    def test_all_is_not_a_cycle(self, client: FakeClient) -> None:
        """``all`` cannot be assigned as a cycle."""
        result = runner.invoke(app, ["issue", "edit", "AIS-265", "--cycle", "all"])
        assert result.exit_code == 1
        assert "invalid --cycle value 'all'" in result.output
        assert client.cycle_updates == []

    def test_unknown_cycle(self, client: FakeClient) -> None:
        """A cycle number that does not exist fails without updating."""
        result = runner.invoke(app, ["issue", "edit", "AIS-265", "--cycle", "42"])
        assert result.exit_code == 1
        assert "no 42 cycle found" in result.output
        assert client.cycle_updates == []

    def test_unknown_issue(self, client: FakeClient) -> None:
        """An unknown identifier fails without updating."""
        result = runner.invoke(app, ["issue", "edit", "AIS-999", "--cycle", "next"])
        assert result.exit_code == 1
        assert "issue AIS-999 not found" in result.output
        assert client.cycle_updates == []

    def test_json_error_type(self, client: FakeClient) -> None:  # noqa: ARG002
        """JSON errors name the error class."""
        result = runner.invoke(
            app,
            ["--json", "issue", "edit", "AIS-265", "--cycle", "42"],
        )
        assert result.exit_code == 1
        assert (
            '{"error":"no 42 cycle found","type":"CycleNotFoundError"}'
            in result.output
        )


class TestApp:
    """Tests for the top-level app."""

    def test_help_lists_commands(self) -> None:
        """Running without a command shows help with every group."""
        result = runner.invoke(app, [])
        assert "issue" in result.output
        assert "cache" in result.output

    def test_issue_help(self) -> None:
        """The list command documents its flags."""
        result = runner.invoke(app, ["issue", "list", "--help"])
        assert result.exit_code == 0
        for flag in ("--status", "--label", "--cycle", "--sort", "--user", "--limit"):
            assert flag in result.output

    def test_issue_group_lists_commands(self) -> None:
        """The issue group shows list, get and edit but hides aliases."""
        result = runner.invoke(app, ["issue", "--help"])
        assert result.exit_code == 0
        for command in ("list", "get", "edit"):
            assert command in result.output
        assert " show " not in result.output
