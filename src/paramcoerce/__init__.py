"""paramcoerce — accept "anything convertible to X" as a parameter.

A class advertises that it can become a ``shop.Bar`` by defining
``__as_shop_Bar__(self)``. A class advertises that it can be built from a
``Foo`` by defining a ``__from_Foo__(cls, value)`` classmethod. Consumers
then call :func:`coerce`, or install a helper with :func:`install` /
:func:`uses_coercion`.
"""

from __future__ import annotations

from paramcoerce.errors import (
    CoercionError,
    ConversionFailed,
    InvalidMethodName,
    InvalidTarget,
    InvalidTypeName,
    MethodCollision,
    TargetLoadError,
    TargetNotLoaded,
    UnsupportedImport,
)
from paramcoerce.services.binding import install, uses_coercion
from paramcoerce.services.engine import CoercionEngine, coerce, get_engine, set_engine

__all__ = [
    "CoercionEngine",
    "CoercionError",
    "ConversionFailed",
    "InvalidMethodName",
    "InvalidTarget",
    "InvalidTypeName",
    "MethodCollision",
    "TargetLoadError",
    "TargetNotLoaded",
    "UnsupportedImport",
    "coerce",
    "get_engine",
    "install",
    "register",
    "set_engine",
    "uses_coercion",
]


def register(cls: type, name: str | None = None) -> type:
    """Register *cls* with the process-wide engine's type registry."""
    return get_engine().registry.register(cls, name)
