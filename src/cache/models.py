# src/cache/models.py — v1
"""Cache domain models: CacheEntry, CacheLookupResult, CacheStats."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class CacheEntry(BaseModel):
    """Single memoized result, stored by reference."""

    key: Any
    value: Any
    created_at: datetime
    compute_ms: float = 0.0


class CacheLookupResult(BaseModel):
    """Result of a plain lookup; distinguishes a miss from a stored None."""

    hit: bool = False
    entry: CacheEntry | None = None


class CacheStats(BaseModel):
    """Counters for a single cache instance."""

    name: str
    size: int = 0
    hits: int = 0
    misses: int = 0
    fills: int = 0
    failures: int = 0

    @property
    def hit_ratio(self) -> float:
        """Share of get_or_compute calls served without computing."""
        total = self.hits + self.misses
        return self.hits / total if total else 0.0
