"""Shared infrastructure for linear CLI commands."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

from typer.core import TyperGroup

from linear_cli.api import LinearClient
from linear_cli.cache import FileCache, default_cache_dir
from linear_cli.config import get_api_key, get_cache_dir
from linear_cli.cycles import CycleCache, CycleResolver

if TYPE_CHECKING:
    import click


class SortedGroup(TyperGroup):
    """Typer group that lists commands in alphabetical order."""

    def list_commands(self, ctx: click.Context) -> list[str]:
        """Return commands sorted alphabetically."""
        return sorted(super().list_commands(ctx))


def configure_logging(verbose: bool) -> None:
    """Send debug logging to stderr when ``--verbose`` is given."""
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def get_client(config: dict[str, Any]) -> LinearClient:
    """Create an authenticated API client.

    Raises:
        MissingApiKeyError: If no API key is configured.
    """
    return LinearClient(get_api_key(config))


def get_file_cache(config: dict[str, Any]) -> FileCache:
    """Get the on-disk cache, honoring the ``cache_dir`` config key."""
    return FileCache(get_cache_dir(config) or default_cache_dir())


def get_cycle_resolver(
    client: LinearClient,
    config: dict[str, Any],
    use_cache: bool = True,
) -> CycleResolver:
    """Create a cycle resolver backed by the cycle cache.

    Args:
        client: API client used for live cycle fetches
        config: Loaded configuration
        use_cache: If False, always fetch the cycle list live
    """
    cache = CycleCache(get_file_cache(config)) if use_cache else CycleCache.disabled()
    return CycleResolver(client.list_cycles, cache)
