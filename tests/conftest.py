"""Pytest configuration and shared fixtures."""

from collections.abc import Iterator
from pathlib import Path

import pytest
from cli_test_helpers import NOW, FakeClient, MemoryStore

from linear_cli.cli._json_state import set_json_flag
from linear_cli.cycles import CycleCache, CycleResolver


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point config and cache lookups at a temporary home."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.delenv("LINEAR_API_KEY", raising=False)
    monkeypatch.delenv("NO_COLOR", raising=False)
    return tmp_path


@pytest.fixture(autouse=True)
def reset_json_flag() -> Iterator[None]:
    """Global --json state must not leak between CLI invocations."""
    set_json_flag(False)
    yield
    set_json_flag(False)


@pytest.fixture
def fake_client() -> FakeClient:
    """A fake API client with the default cycle list."""
    return FakeClient()


@pytest.fixture
def memory_store() -> MemoryStore:
    """An empty in-memory cache store."""
    return MemoryStore()


@pytest.fixture
def cycle_cache(memory_store: MemoryStore) -> CycleCache:
    """A cycle cache over the memory store with a frozen clock."""
    return CycleCache(memory_store, now=lambda: NOW)


@pytest.fixture
def resolver(fake_client: FakeClient, cycle_cache: CycleCache) -> CycleResolver:
    """A cycle resolver over the fake client with a frozen clock."""
    return CycleResolver(fake_client.list_cycles, cycle_cache, now=lambda: NOW)
