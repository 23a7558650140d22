# src/logging/context.py — v2
"""Contextual logging support: attach the cache name and key being filled.

Log records emitted while a computation runs (including from inside the
caller's compute function) carry the cache and key of the fill.
"""

from __future__ import annotations

import contextvars
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

_cache: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "cache", default=None
)
_key: contextvars.ContextVar[Any] = contextvars.ContextVar("key", default=None)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    cache: str | None = None
    key: Any = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(cache=_cache.get(), key=_key.get())


@contextmanager
def fill_context(cache: str, key: Any) -> Iterator[LogContext]:
    """Set the fill context for the duration of a computation.

    Nested fills restore the enclosing fill's context on exit.
    """
    cache_token = _cache.set(cache)
    key_token = _key.set(key)
    try:
        yield get_context()
    finally:
        _key.reset(key_token)
        _cache.reset(cache_token)


def clear_context() -> None:
    """Reset all context variables."""
    _cache.set(None)
    _key.set(None)
