# src/cache/base_memo_cache.py — v3
"""Abstract memoizing cache interface.

A memo cache maps an opaque hashable key to the result of a zero-argument
computation. Entries are filled at most once per key and are never evicted,
overwritten or expired for the lifetime of the instance.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from contextlib import AbstractContextManager, nullcontext
from datetime import datetime, timezone
from typing import Any, Callable, Hashable

from memocache.cache.models import CacheEntry, CacheLookupResult, CacheStats
from memocache.logging.context import fill_context

logger = logging.getLogger(__name__)


class RecursiveFillError(RuntimeError):
    """A computation re-entered get_or_compute for the key it is filling."""

    def __init__(self, cache: str, key: Hashable):
        self.cache = cache
        self.key = key
        super().__init__(
            f"Recursive fill of key {key!r} in cache '{cache}'"
        )


class MemoCacheCore:
    """Entry map, counters and fill bookkeeping shared by sync and async caches."""

    def __init__(self, name: str = "default") -> None:
        self._name = name
        self._entries: dict[Hashable, CacheEntry] = {}
        self._hits = 0
        self._misses = 0
        self._fills = 0
        self._failures = 0

    @property
    def name(self) -> str:
        return self._name

    def keys(self) -> list[Hashable]:
        with self._guard():
            return list(self._entries)

    def stats(self) -> CacheStats:
        with self._guard():
            return CacheStats(
                name=self._name,
                size=len(self._entries),
                hits=self._hits,
                misses=self._misses,
                fills=self._fills,
                failures=self._failures,
            )

    def __contains__(self, key: object) -> bool:
        with self._guard():
            return key in self._entries

    def __len__(self) -> int:
        with self._guard():
            return len(self._entries)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r}, size={len(self)})"

    # --- Helpers for implementations ---

    def _guard(self) -> AbstractContextManager[Any]:
        """Context manager protecting the entry map and counters."""
        return nullcontext()

    def _lookup(self, key: Hashable) -> CacheLookupResult:
        with self._guard():
            entry = self._entries.get(key)
        if entry is None:
            return CacheLookupResult()
        return CacheLookupResult(hit=True, entry=entry)

    def _log_hit(self, key: Hashable) -> None:
        logger.debug("Hit for key %r in cache '%s'", key, self._name)

    def _log_miss(self, key: Hashable) -> None:
        logger.debug("Miss for key %r in cache '%s'", key, self._name)

    def _record_failure(self, key: Hashable, error: Exception) -> None:
        with self._guard():
            self._failures += 1
        logger.warning(
            "Compute failed for key %r in cache '%s': %s",
            key, self._name, error,
        )

    def _store(self, key: Hashable, value: Any, started: float) -> CacheEntry:
        """Insert value unless key is already filled; return the stored entry."""
        entry = CacheEntry(
            key=key,
            value=value,
            created_at=datetime.now(timezone.utc),
            compute_ms=(time.perf_counter() - started) * 1000.0,
        )
        with self._guard():
            stored = self._entries.setdefault(key, entry)
            if stored is entry:
                self._fills += 1
        if stored is entry:
            logger.debug(
                "Filled key %r in cache '%s' (%.2fms)",
                key, self._name, entry.compute_ms,
            )
        return stored


class BaseMemoCache(MemoCacheCore, ABC):
    """Unified interface for synchronous memo cache implementations."""

    @abstractmethod
    def get_or_compute(self, key: Hashable, compute: Callable[[], Any]) -> Any:
        """Return the value stored under key, computing and storing it on a miss."""

    def lookup(self, key: Hashable) -> CacheLookupResult:
        """Look up key without computing anything."""
        return self._lookup(key)

    def get(self, key: Hashable, default: Any = None) -> Any:
        """Return the stored value for key, or default when absent."""
        result = self._lookup(key)
        return result.entry.value if result.hit else default

    def _fill(self, key: Hashable, compute: Callable[[], Any]) -> CacheEntry:
        """Run compute for key and store its result.

        Exceptions raised by compute are logged, counted and re-raised
        unchanged; nothing is stored for key in that case.
        """
        started = time.perf_counter()
        with fill_context(self._name, key):
            try:
                value = compute()
            except Exception as e:
                self._record_failure(key, e)
                raise
        return self._store(key, value, started)
