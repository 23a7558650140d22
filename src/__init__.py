# src/__init__.py — v1
"""memocache: memoizing lookup caches filled at most once per key."""

from __future__ import annotations

from memocache.cache.async_cache import AsyncMemoCache
from memocache.cache.base_memo_cache import BaseMemoCache, RecursiveFillError
from memocache.cache.cache_factory import create_memo_cache
from memocache.cache.locking_cache import LockingMemoCache
from memocache.cache.memoize import make_key, memoize
from memocache.cache.models import CacheEntry, CacheLookupResult, CacheStats
from memocache.cache.simple_cache import SimpleMemoCache

__version__ = "0.1.0"

__all__ = [
    "AsyncMemoCache",
    "BaseMemoCache",
    "CacheEntry",
    "CacheLookupResult",
    "CacheStats",
    "LockingMemoCache",
    "RecursiveFillError",
    "SimpleMemoCache",
    "create_memo_cache",
    "make_key",
    "memoize",
]
