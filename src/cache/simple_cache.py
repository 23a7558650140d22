# src/cache/simple_cache.py — v2
"""Single-owner memo cache (CONCURRENCY=single_owner).

No locking is performed; callers sharing an instance across threads must
serialize access themselves.
"""

from __future__ import annotations

from typing import Any, Callable, Hashable

from memocache.cache.base_memo_cache import BaseMemoCache, RecursiveFillError


class SimpleMemoCache(BaseMemoCache):
    """Dictionary-backed memo cache for sequential use."""

    def __init__(self, name: str = "default") -> None:
        super().__init__(name)
        self._filling: set[Hashable] = set()

    def get_or_compute(self, key: Hashable, compute: Callable[[], Any]) -> Any:
        entry = self._entries.get(key)
        if entry is not None:
            self._hits += 1
            self._log_hit(key)
            return entry.value

        if key in self._filling:
            raise RecursiveFillError(self._name, key)

        self._misses += 1
        self._log_miss(key)
        self._filling.add(key)
        try:
            return self._fill(key, compute).value
        finally:
            self._filling.discard(key)
