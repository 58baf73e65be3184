"""Configuration file handling for the linear CLI."""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from linear_cli.constants import (
    API_KEY_ENV_VAR,
    CONFIG_DIRNAME,
    CONFIG_FILENAME,
    DEFAULT_EXCLUDED_STATUSES,
    DEFAULT_LIMIT,
    DEFAULT_SORT,
)
from linear_cli.errors import MissingApiKeyError
from linear_cli.models import WorkflowStateCategory


def get_config_path() -> Path:
    """Get the path to the config file (``$XDG_CONFIG_HOME/linear/config.toml``).

    Returns:
        Path to config.toml
    """
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / CONFIG_DIRNAME / CONFIG_FILENAME


def load_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """Load configuration from config.toml.

    Args:
        config_path: Path to the config file (default: ``get_config_path()``)

    Returns:
        Configuration dictionary, or empty dict if no config exists
    """
    path = Path(config_path) if config_path is not None else get_config_path()
    if not path.exists():
        return {}

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError):
        return {}


def get_api_key(config: dict[str, Any]) -> str:
    """Resolve the API key.

    Precedence:
    1. ``LINEAR_API_KEY`` environment variable
    2. ``api_key`` from config.toml

    Raises:
        MissingApiKeyError: If neither is set.
    """
    key = os.environ.get(API_KEY_ENV_VAR) or config.get("api_key")
    if key:
        return str(key).strip()
    msg = (
        f"no API key found. Set {API_KEY_ENV_VAR} or add api_key to "
        f"{get_config_path()}"
    )
    raise MissingApiKeyError(msg)


def get_default_sort(config: dict[str, Any]) -> str:
    """Get the default ``--sort`` value."""
    return str(config.get("default_sort", DEFAULT_SORT))


def get_default_limit(config: dict[str, Any]) -> int:
    """Get the default ``--limit`` value.

    Raises:
        ValueError: If the configured value is not a positive integer.
    """
    limit = config.get("default_limit", DEFAULT_LIMIT)
    if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
        msg = f"default_limit must be a positive integer, got {limit!r}"
        raise ValueError(msg)
    return limit


def get_default_excluded_statuses(config: dict[str, Any]) -> tuple[str, ...]:
    """Get the state types hidden when ``--status`` is omitted.

    Raises:
        ValueError: If a configured value is not a known state type.
    """
    configured = config.get("excluded_statuses")
    if configured is None:
        return DEFAULT_EXCLUDED_STATUSES
    if isinstance(configured, str):
        configured = [configured]
    return tuple(WorkflowStateCategory.parse(str(s)).value for s in configured)


def get_cache_dir(config: dict[str, Any]) -> Path | None:
    """Get the configured cache directory, or None to use the default."""
    cache_dir = config.get("cache_dir")
    if not cache_dir:
        return None
    return Path(str(cache_dir)).expanduser()
