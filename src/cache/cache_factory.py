# src/cache/cache_factory.py — v3
"""Factory for memo cache instantiation."""

from __future__ import annotations

from memocache.cache.base_memo_cache import BaseMemoCache
from memocache.config.settings import Settings


def create_memo_cache(
    settings: Settings | None = None, name: str | None = None
) -> BaseMemoCache:
    """Instantiate the configured memo cache implementation.

    Args:
        settings: Library settings. Defaults to the thread-safe cache.
        name: Cache name used in logs and stats. Defaults to
            ``settings.default_cache_name``.

    Returns:
        Empty BaseMemoCache implementation.
    """
    concurrency = "locking" if settings is None else settings.concurrency
    if name is None:
        name = "default" if settings is None else settings.default_cache_name

    if concurrency == "single_owner":
        from memocache.cache.simple_cache import SimpleMemoCache
        return SimpleMemoCache(name=name)

    if concurrency == "locking":
        from memocache.cache.locking_cache import LockingMemoCache
        return LockingMemoCache(name=name)

    raise ValueError(f"Unsupported cache concurrency: {concurrency!r}")
