"""Cycle list caching and cycle selector resolution.

The cycle list changes rarely, so it is cached for a day. The
``isActive``/``isNext``/``isPrevious`` flags in a cached list are only true
at the moment it was fetched, though: once the active cycle ends they are
wrong, so every read also checks whether that boundary has been crossed.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any, Protocol

import orjson

from linear_cli.constants import CYCLE_CACHE_KEY, CYCLE_CACHE_TTL, CYCLE_KEYWORDS
from linear_cli.errors import (
    CacheCorruptError,
    CycleNotFoundError,
    InvalidSelectorError,
)
from linear_cli.models import (
    CycleRecord,
    ResolvedCycle,
    cycle_to_dict,
    dict_to_cycle,
    parse_timestamp,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"^\d+(\.\d+)?$")


class CacheStore(Protocol):
    """Key/value store backing the cycle cache (see ``FileCache``)."""

    def get(self, key: str, ttl: timedelta | None = None) -> str | None: ...

    def set(self, key: str, content: str) -> None: ...


def utc_now() -> datetime:
    """Get the current instant as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass(frozen=True)
class CycleSnapshot:
    """The full cycle list plus the instant it was fetched."""

    cycles: tuple[CycleRecord, ...]
    fetched_at: datetime

    def to_json(self) -> bytes:
        """Serialize for the cache store."""
        return orjson.dumps(
            {
                "fetched_at": self.fetched_at.isoformat(),
                "cycles": [cycle_to_dict(c) for c in self.cycles],
            },
        )

    @classmethod
    def from_json(cls, raw: str | bytes) -> CycleSnapshot:
        """Deserialize a cached payload.

        Raises:
            CacheCorruptError: If the payload is not a valid snapshot.
        """
        try:
            data: dict[str, Any] = orjson.loads(raw)
            fetched_at = datetime.fromisoformat(data["fetched_at"])
            cycles = tuple(dict_to_cycle(c) for c in data["cycles"])
        except (orjson.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            msg = f"Invalid cycle snapshot: {e}"
            raise CacheCorruptError(msg) from e
        return cls(cycles=cycles, fetched_at=_as_utc(fetched_at))


def cycle_boundary_crossed(snapshot: CycleSnapshot, now: datetime) -> bool:
    """Check whether the snapshot's active cycle has ended by ``now``.

    A snapshot with no active cycle, or whose active cycle has an
    unparsable end timestamp, counts as crossed.
    """
    for cycle in snapshot.cycles:
        if not cycle.is_active:
            continue
        ends_at = parse_timestamp(cycle.ends_at)
        if ends_at is None:
            return True
        return _as_utc(ends_at) <= _as_utc(now)
    return True


def snapshot_expired(snapshot: CycleSnapshot, now: datetime, ttl: timedelta) -> bool:
    """Check whether the snapshot is older than ``ttl`` at ``now``."""
    return _as_utc(now) - snapshot.fetched_at >= ttl


class CycleCache:
    """TTL- and boundary-aware cache of the cycle list.

    ``store`` may be None, in which case caching is disabled: ``get`` always
    misses and ``put`` does nothing.
    """

    def __init__(
        self,
        store: CacheStore | None,
        now: Callable[[], datetime] = utc_now,
        ttl: timedelta = CYCLE_CACHE_TTL,
        key: str = CYCLE_CACHE_KEY,
    ) -> None:
        self.store = store
        self.ttl = ttl
        self.key = key
        self._now = now

    @classmethod
    def disabled(cls) -> CycleCache:
        """Create a cache that never holds anything."""
        return cls(None)

    def get(self) -> CycleSnapshot | None:
        """Return the cached snapshot if fresh and not boundary-crossed."""
        if self.store is None:
            return None
        raw = self.store.get(self.key, self.ttl)
        if raw is None:
            logger.debug("Cycle cache miss")
            return None
        try:
            snapshot = CycleSnapshot.from_json(raw)
        except CacheCorruptError as e:
            logger.debug("Ignoring corrupt cycle cache: %s", e)
            return None

        now = self._now()
        if snapshot_expired(snapshot, now, self.ttl):
            logger.debug("Cycle cache expired")
            return None
        if cycle_boundary_crossed(snapshot, now):
            logger.debug("Cycle boundary crossed since cycle list was cached")
            return None
        logger.debug("Cycle cache hit (%d cycles)", len(snapshot.cycles))
        return snapshot

    def put(self, snapshot: CycleSnapshot) -> None:
        """Replace the cached snapshot. Write failures are logged, not raised."""
        if self.store is None:
            return
        try:
            self.store.set(self.key, snapshot.to_json().decode())
        except OSError as e:
            logger.warning("Failed to write cycle cache: %s", e)


def parse_cycle_selector(raw: str) -> float | str:
    """Validate a cycle selector.

    Returns:
        The cycle number for numeric selectors, else the lowercased keyword

    Raises:
        InvalidSelectorError: If the value is neither a non-negative number
            nor one of current, next, previous.
    """
    value = raw.strip().lower()
    if _NUMBER_RE.match(value):
        return float(value)
    if value in CYCLE_KEYWORDS:
        return value
    raise InvalidSelectorError(raw)


def _matches(cycle: CycleRecord, selector: float | str) -> bool:
    if isinstance(selector, float):
        return cycle.number == selector
    if selector == "current":
        return cycle.is_active
    if selector == "next":
        return cycle.is_next
    return cycle.is_previous


class CycleResolver:
    """Resolve cycle selectors against the (cached) cycle list."""

    def __init__(
        self,
        fetch_cycles: Callable[[], Sequence[CycleRecord]],
        cache: CycleCache | None = None,
        now: Callable[[], datetime] = utc_now,
    ) -> None:
        self._fetch_cycles = fetch_cycles
        self.cache = cache if cache is not None else CycleCache.disabled()
        self._now = now

    def list_cycles(self) -> tuple[CycleRecord, ...]:
        """Get the cycle list, from cache when possible.

        A live fetch always repopulates the cache. Fetch errors propagate.
        """
        snapshot = self.cache.get()
        if snapshot is not None:
            return snapshot.cycles

        snapshot = CycleSnapshot(
            cycles=tuple(self._fetch_cycles()),
            fetched_at=_as_utc(self._now()),
        )
        self.cache.put(snapshot)
        return snapshot.cycles

    def resolve(self, selector: str) -> ResolvedCycle:
        """Resolve a selector to exactly one cycle.

        The first cycle in list order that matches wins.

        Raises:
            InvalidSelectorError: If the selector is malformed (checked
                before any fetch).
            CycleNotFoundError: If no cycle matches.
        """
        parsed = parse_cycle_selector(selector)
        for cycle in self.list_cycles():
            if _matches(cycle, parsed):
                return ResolvedCycle.from_record(cycle)
        raise CycleNotFoundError(selector.strip().lower())
