"""File-based key/value cache with mtime-based TTL expiry."""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
import time
from datetime import timedelta
from pathlib import Path
from typing import TYPE_CHECKING

from linear_cli.constants import CACHE_DEFAULT_TTL, CACHE_DIRNAME

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


def default_cache_dir() -> Path:
    """Get the per-user cache directory (``$XDG_CACHE_HOME/linear``)."""
    base = os.environ.get("XDG_CACHE_HOME")
    root = Path(base) if base else Path.home() / ".cache"
    return root / CACHE_DIRNAME


class FileCache:
    """One file per key under ``directory``.

    Entries expire once their file is older than the TTL. Writes go through
    a temporary file and an atomic rename, so concurrent readers see either
    the old or the new content and the last writer wins.
    """

    def __init__(
        self,
        directory: str | Path,
        ttl: timedelta = CACHE_DEFAULT_TTL,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.directory = Path(directory)
        self.ttl = ttl
        self._clock = clock

    def _path(self, key: str) -> Path:
        return self.directory / key

    def get(self, key: str, ttl: timedelta | None = None) -> str | None:
        """Read the cached value for ``key``.

        Args:
            key: Cache key (may contain ``/`` for sub-directories)
            ttl: Overrides the cache's default TTL for this read

        Returns:
            The cached content, or None if missing, expired or unreadable
        """
        max_age = (ttl if ttl is not None else self.ttl).total_seconds()
        path = self._path(key)
        try:
            age = self._clock() - path.stat().st_mtime
            if age > max_age:
                logger.debug("Cache entry %s expired (%.0fs old)", key, age)
                return None
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            # Missing, or removed/rewritten by another process mid-read
            return None

    def set(self, key: str, content: str) -> None:
        """Atomically write ``content`` for ``key``.

        Raises:
            OSError: If the directory or file cannot be written.
        """
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True, mode=0o700)
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=path.parent,
            prefix=".tmp-",
            delete=False,
        ) as tmp_file:
            tmp_path = Path(tmp_file.name)
            try:
                tmp_file.write(content)
            except OSError:
                tmp_file.close()
                tmp_path.unlink(missing_ok=True)
                raise
        try:
            tmp_path.replace(path)
        except OSError:
            with contextlib.suppress(OSError):
                tmp_path.unlink()
            raise

    def clear(self) -> int:
        """Remove every cached file.

        Returns:
            Number of files removed
        """
        if not self.directory.is_dir():
            return 0
        count = 0
        for path in sorted(self.directory.rglob("*"), reverse=True):
            if path.is_dir():
                path.rmdir()
            else:
                path.unlink()
                count += 1
        return count
