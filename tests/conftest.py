"""Shared pytest fixtures for paramcoerce tests."""

from __future__ import annotations

from collections.abc import Generator

import pytest

from paramcoerce.config.settings import CoerceSettings
from paramcoerce.infrastructure.registry import TypeRegistry
from paramcoerce.services.engine import CoercionEngine, set_engine


@pytest.fixture
def settings() -> CoerceSettings:
    """Non-strict settings that never touch entry points."""
    return CoerceSettings(strict=False, load_plugins=False)


@pytest.fixture
def registry() -> TypeRegistry:
    """Empty type registry."""
    return TypeRegistry()


@pytest.fixture
def engine(registry: TypeRegistry, settings: CoerceSettings) -> CoercionEngine:
    """Engine with a fresh registry and cache and no plugins."""
    return CoercionEngine(registry=registry, settings=settings)


@pytest.fixture(autouse=True)
def default_engine(settings: CoerceSettings) -> Generator[CoercionEngine]:
    """Swap in a fresh process-wide engine for every test.

    Module-level ``coerce`` and installed helpers resolve the engine at call
    time, so they see this one and nothing leaks between tests.
    """
    fresh = CoercionEngine(registry=TypeRegistry(), settings=settings)
    previous = set_engine(fresh)
    try:
        yield fresh
    finally:
        set_engine(previous)
