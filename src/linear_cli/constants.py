"""Constants for the linear CLI."""

from __future__ import annotations

from datetime import timedelta

# Workflow state types in display order (lower rank = shown first)
STATE_TYPE_ORDER: dict[str, int] = {
    "started": 1,
    "unstarted": 2,
    "triage": 3,
    "backlog": 4,
    "completed": 5,
    "canceled": 6,
}

# Rank for absent/unrecognized state types and for "no priority"
UNRANKED = 99

# Convenience names accepted on input only
STATUS_ALIASES: dict[str, str] = {
    "todo": "unstarted",
}

# Values offered by --status completion (aliases included)
STATUS_COMPLETIONS = (
    "started",
    "todo",
    "unstarted",
    "triage",
    "backlog",
    "completed",
    "canceled",
)

# Excluded unless --status is given
DEFAULT_EXCLUDED_STATUSES: tuple[str, ...] = ("completed", "canceled")

# "\!" comes first: zsh's BANG_HIST escapes "!" even inside single quotes
NEGATION_PREFIXES = ("\\!", "!")

# Selector meaning "no constraint" for --status, --cycle and --user
ALL_SELECTOR = "all"

CYCLE_KEYWORDS = ("current", "next", "previous")

SORT_KEYS = ("status", "priority", "identifier", "title")
DEFAULT_SORT = "status"

DEFAULT_LIMIT = 50
CYCLE_LIST_SIZE = 50

PRIORITY_LABELS: dict[int, str] = {
    0: "None",
    1: "Urgent",
    2: "High",
    3: "Normal",
    4: "Low",
}

PRIORITY_COLORS: dict[int, str] = {
    1: "red",
    2: "yellow",
    3: "green",
    4: "bright_black",
}

STATE_COLORS: dict[str, str] = {
    "started": "yellow",
    "completed": "green",
    "canceled": "red",
    "backlog": "bright_black",
}

# Cache layout
CACHE_DIRNAME = "linear"
CACHE_DEFAULT_TTL = timedelta(minutes=5)
CYCLE_CACHE_KEY = "cycles/list"
CYCLE_CACHE_TTL = timedelta(hours=24)

# Remote API
LINEAR_API_ENDPOINT = "https://api.linear.app/graphql"
API_TIMEOUT_SECONDS = 30
API_KEY_ENV_VAR = "LINEAR_API_KEY"

# Config file
CONFIG_DIRNAME = "linear"
CONFIG_FILENAME = "config.toml"
