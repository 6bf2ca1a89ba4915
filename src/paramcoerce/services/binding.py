"""BindingInstaller — give a consumer class or module its own coercion helper.

Recognized configurations:

- ``install(consumer)`` — no-op
- ``install(consumer, "coerce")`` — bind the free :func:`coerce` function
- ``install(consumer, "_bar", "shop.Bar")`` — attach ``_bar(value)``, which
  coerces *value* to ``shop.Bar``

Every other shape raises at install time, never at call time.

INVARIANT: An existing name on the consumer is never overwritten.
"""

from __future__ import annotations

import logging
import types
from collections.abc import Callable
from typing import Any, TypeVar

from paramcoerce.domain.names import validate_method_name, validate_type_name
from paramcoerce.errors import (
    InvalidMethodName,
    InvalidTypeName,
    MethodCollision,
    UnsupportedImport,
)
from paramcoerce.services.engine import coerce, get_engine

logger = logging.getLogger(__name__)

FREE_FUNCTION = "coerce"

_C = TypeVar("_C", bound=type)


def install(consumer: type | types.ModuleType, *config: str) -> None:
    """Apply an install-time coercion configuration to *consumer*.

    Raises:
        UnsupportedImport: Wrong arity, an unknown single name, or a
            consumer that is neither a class nor a module.
        InvalidMethodName: The helper name is not an identifier.
        InvalidTypeName: The target type name is malformed.
        MethodCollision: *consumer* already defines the helper name.
        TargetLoadError: The target type could not be loaded.
    """
    if not config:
        return
    if len(config) > 2:
        msg = f"Too many parameters: expected at most 2, got {len(config)}"
        raise UnsupportedImport(msg)
    if not isinstance(consumer, (type, types.ModuleType)):
        msg = f"Cannot install into {consumer!r}; expected a class or module"
        raise UnsupportedImport(msg)

    if len(config) == 1:
        _install_free_function(consumer, config[0])
        return

    raw_method, raw_target = config
    method = validate_method_name(raw_method)
    if method is None:
        msg = f"Illegal method name {raw_method!r}"
        raise InvalidMethodName(msg)
    target = validate_type_name(raw_target)
    if target is None:
        msg = f"Illegal class name {raw_target!r}"
        raise InvalidTypeName(msg)

    consumer_name = _consumer_name(consumer)
    if method in vars(consumer):
        msg = f"Cannot create '{consumer_name}.{method}'. It already exists"
        raise MethodCollision(msg)

    get_engine().registry.load(target)

    helper = _make_helper(target, method, consumer_name)
    if isinstance(consumer, type):
        setattr(consumer, method, classmethod(helper))
    else:
        setattr(consumer, method, _unbound(helper))
    logger.debug("Installed coercion helper %s.%s -> %s", consumer_name, method, target)


def uses_coercion(*config: str) -> Callable[[_C], _C]:
    """Class decorator form of :func:`install`.

    Usage::

        @uses_coercion("_bar", "shop.Bar")
        class Basket:
            def __init__(self, bar):
                self.bar = self._bar(bar)
    """

    def decorator(cls: _C) -> _C:
        install(cls, *config)
        return cls

    return decorator


def _install_free_function(consumer: type | types.ModuleType, name: str) -> None:
    if name != FREE_FUNCTION:
        msg = f"paramcoerce does not export {name!r}"
        raise UnsupportedImport(msg)
    if isinstance(consumer, type):
        setattr(consumer, FREE_FUNCTION, staticmethod(coerce))
    else:
        setattr(consumer, FREE_FUNCTION, coerce)


def _make_helper(target: str, method: str, consumer_name: str) -> Callable[[Any, Any], Any]:
    def helper(owner: Any, value: Any) -> Any:
        return get_engine().coerce(target, value)

    helper.__name__ = method
    helper.__qualname__ = f"{consumer_name}.{method}"
    helper.__doc__ = f"Coerce *value* to {target}, or return None."
    return helper


def _unbound(helper: Callable[[Any, Any], Any]) -> Callable[[Any], Any]:
    def function(value: Any) -> Any:
        return helper(None, value)

    function.__name__ = helper.__name__
    function.__qualname__ = helper.__name__
    function.__doc__ = helper.__doc__
    return function


def _consumer_name(consumer: type | types.ModuleType) -> str:
    if isinstance(consumer, type):
        return f"{consumer.__module__}.{consumer.__qualname__}"
    return consumer.__name__
