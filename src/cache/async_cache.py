# src/cache/async_cache.py — v2
"""Asyncio memo cache with one fill lock per key.

The compute callable takes no arguments and returns either a value or an
awaitable; awaitables are awaited before the result is stored. Concurrent
tasks asking for the same missing key wait for the first task's fill.
"""

from __future__ import annotations

import asyncio
import inspect
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Hashable

from memocache.cache.base_memo_cache import MemoCacheCore, RecursiveFillError
from memocache.cache.models import CacheEntry, CacheLookupResult
from memocache.logging.context import fill_context


@dataclass
class _AsyncFillSlot:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    waiters: int = 0
    owner: asyncio.Task | None = None


class AsyncMemoCache(MemoCacheCore):
    """Memo cache for coroutine-based callers on a single event loop."""

    def __init__(self, name: str = "default") -> None:
        super().__init__(name)
        self._slots: dict[Hashable, _AsyncFillSlot] = {}

    async def lookup(self, key: Hashable) -> CacheLookupResult:
        """Look up key without computing anything."""
        return self._lookup(key)

    async def get(self, key: Hashable, default: Any = None) -> Any:
        """Return the stored value for key, or default when absent."""
        result = self._lookup(key)
        return result.entry.value if result.hit else default

    async def get_or_compute(self, key: Hashable, compute: Callable[[], Any]) -> Any:
        """Return the value stored under key, computing and storing it on a miss."""
        entry = self._entries.get(key)
        if entry is not None:
            self._hits += 1
            self._log_hit(key)
            return entry.value

        task = asyncio.current_task()
        slot = self._slots.get(key)
        if slot is None:
            slot = self._slots[key] = _AsyncFillSlot()
        elif task is not None and slot.owner is task:
            raise RecursiveFillError(self._name, key)
        slot.waiters += 1

        try:
            async with slot.lock:
                slot.owner = task
                try:
                    entry = self._entries.get(key)
                    if entry is not None:
                        self._hits += 1
                        self._log_hit(key)
                        return entry.value
                    self._misses += 1
                    self._log_miss(key)
                    return (await self._fill(key, compute)).value
                finally:
                    slot.owner = None
        finally:
            slot.waiters -= 1
            if slot.waiters == 0:
                del self._slots[key]

    async def _fill(self, key: Hashable, compute: Callable[[], Any]) -> CacheEntry:
        started = time.perf_counter()
        with fill_context(self._name, key):
            try:
                value = compute()
                if inspect.isawaitable(value):
                    value = await value
            except Exception as e:
                self._record_failure(key, e)
                raise
        return self._store(key, value, started)
