"""TypeRegistry — which named classes are loaded, and what they expose.

A type name resolves in two ways:

- Explicit registration via :meth:`TypeRegistry.register` (or the
  :func:`registered` class decorator), under any validated name.
- Implicitly through ``sys.modules``: ``shop.models.Bar`` is loaded when
  ``shop.models`` is already imported and defines a class ``Bar``.

``is_loaded`` and ``get`` never import anything. Only :meth:`load` does,
and only install-time configuration calls it.
"""

from __future__ import annotations

import importlib
import logging
import sys
from collections.abc import Callable
from typing import TypeVar

from paramcoerce.domain.names import canonical_type_name, split_type_name, validate_type_name
from paramcoerce.errors import InvalidTypeName, TargetLoadError, TargetNotLoaded

logger = logging.getLogger(__name__)

_C = TypeVar("_C", bound=type)


class TypeRegistry:
    """Lookup facade over explicitly registered classes and ``sys.modules``."""

    def __init__(self) -> None:
        self._by_name: dict[str, type] = {}
        self._names: dict[type, str] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, cls: type, name: str | None = None) -> type:
        """Record *cls* under *name* (default ``module.qualname``).

        The first name registered for a class becomes its name for pull-method
        derivation. Re-registering a name with a different class is an error.

        Raises:
            TypeError: If *cls* is not a class.
            InvalidTypeName: If the name is not a legal type name.
            ValueError: If the name already belongs to another class.
        """
        if not isinstance(cls, type):
            msg = f"Only classes can be registered, got {cls!r}"
            raise TypeError(msg)
        raw = name if name is not None else f"{cls.__module__}.{cls.__qualname__}"
        valid = validate_type_name(raw)
        if valid is None:
            msg = f"Illegal type name {raw!r}"
            raise InvalidTypeName(msg)

        key = canonical_type_name(valid)
        existing = self._by_name.get(key)
        if existing is not None and existing is not cls:
            msg = f"Type name {key!r} is already registered to {existing!r}"
            raise ValueError(msg)

        self._by_name[key] = cls
        self._names.setdefault(cls, valid)
        logger.debug("Registered type %s -> %s", key, cls.__qualname__)
        return cls

    def registered(self, name: str | None = None) -> Callable[[_C], _C]:
        """Class decorator form of :meth:`register`."""

        def decorator(cls: _C) -> _C:
            self.register(cls, name)
            return cls

        return decorator

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find(self, name: str) -> type | None:
        """Return the loaded class for a validated *name*, or None."""
        key = canonical_type_name(name)
        cls = self._by_name.get(key)
        if cls is not None:
            return cls
        return _resolve_in_modules(split_type_name(name))

    def is_loaded(self, name: str) -> bool:
        return self.find(name) is not None

    def get(self, name: str) -> type:
        """Return the loaded class for *name*.

        Raises:
            TargetNotLoaded: If nothing loaded answers to *name*.
        """
        cls = self.find(name)
        if cls is None:
            msg = f"Type {name!r} is not loaded"
            raise TargetNotLoaded(msg)
        return cls

    def load(self, name: str) -> type:
        """Return the class for *name*, importing its module if necessary.

        The longest importable dotted prefix is treated as the module and the
        remaining segments as attributes inside it.

        Raises:
            TargetLoadError: If no prefix imports, or the attribute path does
                not lead to a class.
        """
        cls = self.find(name)
        if cls is not None:
            return cls

        segments = split_type_name(name)
        last_error: Exception | None = None
        for cut in range(len(segments), 0, -1):
            module_name = ".".join(segments[:cut])
            try:
                importlib.import_module(module_name)
            except ImportError as exc:
                last_error = exc
                continue
            logger.debug("Imported %s while loading type %s", module_name, name)
            cls = _resolve_in_modules(segments)
            if cls is not None:
                return cls
            break

        msg = f"Cannot load type {name!r}"
        if last_error is not None:
            raise TargetLoadError(msg) from last_error
        raise TargetLoadError(msg)

    def name_of(self, cls: type) -> str:
        """Name used for *cls* when deriving pull-method names."""
        registered = self._names.get(cls)
        if registered is not None:
            return registered
        return f"{cls.__module__}.{cls.__qualname__}"

    @staticmethod
    def exposes(cls: type, member: str) -> bool:
        """Whether *cls* (or an ancestor) provides a callable *member*."""
        return callable(getattr(cls, member, None))


def _resolve_in_modules(segments: list[str]) -> type | None:
    """Walk *segments* through already-imported modules.

    Uses the longest prefix present in ``sys.modules`` as the module, then
    follows attributes. Never triggers an import.
    """
    for cut in range(len(segments), 0, -1):
        module = sys.modules.get(".".join(segments[:cut]))
        if module is None:
            continue
        obj: object = module
        for attr in segments[cut:]:
            obj = getattr(obj, attr, None)
            if obj is None:
                return None
        return obj if isinstance(obj, type) else None
    return None
