# src/cache/locking_cache.py — v3
"""Thread-safe memo cache (CONCURRENCY=locking).

At most one computation runs per key at any time. The first caller for a
missing key computes; concurrent callers for the same key block on that
key's fill lock and receive the stored value. If the computation fails the
error reaches the computing caller only, and the next waiter computes again.
Computations for distinct keys run in parallel.
"""

from __future__ import annotations

import threading
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from typing import Any, Callable, Hashable

from memocache.cache.base_memo_cache import BaseMemoCache, RecursiveFillError


@dataclass
class _FillSlot:
    """Per-key fill lock, shared by every caller waiting on that key."""

    lock: threading.Lock = field(default_factory=threading.Lock)
    waiters: int = 0
    owner: int | None = None


class LockingMemoCache(BaseMemoCache):
    """Memo cache safe for concurrent use from multiple threads."""

    def __init__(self, name: str = "default") -> None:
        super().__init__(name)
        self._lock = threading.Lock()
        self._slots: dict[Hashable, _FillSlot] = {}

    def get_or_compute(self, key: Hashable, compute: Callable[[], Any]) -> Any:
        me = threading.get_ident()
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                self._hits += 1
            else:
                slot = self._slots.get(key)
                if slot is None:
                    slot = self._slots[key] = _FillSlot()
                elif slot.owner == me:
                    raise RecursiveFillError(self._name, key)
                slot.waiters += 1

        if entry is not None:
            self._log_hit(key)
            return entry.value

        try:
            with slot.lock:
                slot.owner = me
                try:
                    return self._fill_once(key, compute)
                finally:
                    slot.owner = None
        finally:
            with self._lock:
                slot.waiters -= 1
                if slot.waiters == 0:
                    del self._slots[key]

    def _fill_once(self, key: Hashable, compute: Callable[[], Any]) -> Any:
        """Fill key unless a previous holder of the slot already did."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                self._hits += 1
            else:
                self._misses += 1

        if entry is not None:
            self._log_hit(key)
            return entry.value

        self._log_miss(key)
        return self._fill(key, compute).value

    def _guard(self) -> AbstractContextManager[Any]:
        return self._lock
