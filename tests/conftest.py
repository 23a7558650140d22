# tests/conftest.py — v2
"""Shared test fixtures for unit tests.

Provides counting compute callables, fresh caches and settings. No external
dependencies; nothing touches the network or the user's environment.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

import pytest

from memocache.cache.locking_cache import LockingMemoCache
from memocache.cache.simple_cache import SimpleMemoCache
from memocache.config.settings import Settings
from memocache.logging.context import clear_context


class CountingCompute:
    """Zero-argument callable recording how often it ran."""

    def __init__(self, value: Any = None, error: Exception | None = None) -> None:
        self.value = value
        self.error = error
        self.calls = 0

    def __call__(self) -> Any:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.value


# === FIXTURES: Computations ===


@pytest.fixture
def make_compute() -> Callable[..., CountingCompute]:
    """Factory for CountingCompute instances."""
    return CountingCompute


# === FIXTURES: Caches ===


@pytest.fixture
def simple_cache() -> SimpleMemoCache:
    return SimpleMemoCache(name="test")


@pytest.fixture
def locking_cache() -> LockingMemoCache:
    return LockingMemoCache(name="test")


@pytest.fixture(params=["simple", "locking"])
def any_cache(request: pytest.FixtureRequest):
    """Each synchronous cache implementation in turn."""
    if request.param == "simple":
        return SimpleMemoCache(name="test")
    return LockingMemoCache(name="test")


# === FIXTURES: Settings ===


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from any .env file."""
    return Settings(_env_file=None)


@pytest.fixture(autouse=True)
def _reset_logging_state():
    """Restore the memocache logger and context after each test."""
    root = logging.getLogger("memocache")
    handlers, level = list(root.handlers), root.level
    clear_context()
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    clear_context()
