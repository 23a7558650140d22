# src/cache/memoize.py — v2
"""Decorator memoizing a function's results per argument key.

    @memoize
    def quote(symbol): ...

    quote("ACME")      # computed
    quote("ACME")      # served from quote.cache

Coroutine functions are memoized in an AsyncMemoCache, so concurrent awaits
of the same arguments share a single execution.
"""

from __future__ import annotations

import functools
import inspect
from typing import Any, Callable, Hashable

from memocache.cache.async_cache import AsyncMemoCache
from memocache.cache.base_memo_cache import BaseMemoCache
from memocache.cache.cache_factory import create_memo_cache
from memocache.config.settings import Settings, load_settings

KeyFunc = Callable[[tuple, dict], Hashable]


class _KwargsMark:
    """Separates positional from keyword arguments inside a key."""

    def __repr__(self) -> str:
        return "<kwargs>"


_KWARGS_MARK = _KwargsMark()


def make_key(args: tuple, kwargs: dict[str, Any]) -> Hashable:
    """Build a cache key from call arguments.

    f(1, 2) and f(1, b=2) produce different keys; keyword order does not
    matter. Arguments must be hashable.
    """
    if not kwargs:
        return args
    return args + (_KWARGS_MARK,) + tuple(sorted(kwargs.items()))


def memoize(
    func: Callable[..., Any] | None = None,
    *,
    cache: BaseMemoCache | AsyncMemoCache | None = None,
    key: KeyFunc = make_key,
    name: str | None = None,
    settings: Settings | None = None,
) -> Any:
    """Memoize func, either bare (``@memoize``) or with options.

    Args:
        func: Function to wrap (set when used without parentheses).
        cache: Cache to store results in. Must be an AsyncMemoCache for
            coroutine functions. Defaults to a new cache per function.
        key: Builds the cache key from ``(args, kwargs)``.
        name: Cache name for logs and stats; defaults to the function's
            qualified name.
        settings: Selects the cache implementation for plain functions.
            Defaults to load_settings(), so MEMOCACHE_CONCURRENCY applies.

    Returns:
        The wrapper, exposing its cache as ``wrapper.cache``.
    """

    def decorate(fn: Callable[..., Any]) -> Callable[..., Any]:
        cache_name = name or fn.__qualname__

        if inspect.iscoroutinefunction(fn):
            if cache is not None and not isinstance(cache, AsyncMemoCache):
                raise TypeError(
                    f"Coroutine function {fn.__qualname__} needs an AsyncMemoCache"
                )
            async_memo = cache if cache is not None else AsyncMemoCache(name=cache_name)

            @functools.wraps(fn)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                return await async_memo.get_or_compute(
                    key(args, kwargs), lambda: fn(*args, **kwargs)
                )

            async_wrapper.cache = async_memo  # type: ignore[attr-defined]
            return async_wrapper

        if isinstance(cache, AsyncMemoCache):
            raise TypeError(
                f"Function {fn.__qualname__} cannot use an AsyncMemoCache"
            )
        if cache is not None:
            memo = cache
        else:
            memo = create_memo_cache(
                settings if settings is not None else load_settings(),
                name=cache_name,
            )

        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            return memo.get_or_compute(key(args, kwargs), lambda: fn(*args, **kwargs))

        wrapper.cache = memo  # type: ignore[attr-defined]
        return wrapper

    if func is not None:
        return decorate(func)
    return decorate
