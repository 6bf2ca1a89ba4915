"""CoercionEngine — turn an arbitrary value into an instance of a named class.

Resolution order for a (source class, target name) pair:

1. push — the source class exposes ``__as_<Target>__()``
2. pull — the target class exposes ``__from_<Source>__(value)``
3. external — a plugin answers the ``coercion_function`` hook
4. none — nothing converts; cached like any other answer

A directive is stored in the :class:`ResolutionCache` before it runs, so a
pair that cannot convert costs one dict lookup on every later call.

INVARIANT: "No conversion" is a ``None`` return, never an exception.
Only an invalid or unloaded target raises.
"""

from __future__ import annotations

import logging
import threading
from typing import Any

from paramcoerce.config.logging import configure_from_settings
from paramcoerce.config.settings import CoerceSettings
from paramcoerce.domain.directives import NO_CONVERSION, Directive, DirectiveKind
from paramcoerce.domain.names import pull_method_name, push_method_name, validate_type_name
from paramcoerce.errors import ConversionFailed, InvalidTypeName, TargetNotLoaded
from paramcoerce.infrastructure.registry import TypeRegistry
from paramcoerce.plugins.manager import PluginManager
from paramcoerce.services.cache import ResolutionCache

logger = logging.getLogger(__name__)


def is_typed_instance(value: object) -> bool:
    """Whether *value* is an instance of a user-level class.

    Instances of ``builtins`` types (``int``, ``str``, ``list``, ``None``...)
    are plain values and never take part in coercion.
    """
    return type(value).__module__ != "builtins"


class CoercionEngine:
    """Resolve, cache, and run conversions between classes.

    Usage::

        engine = CoercionEngine()
        engine.registry.register(Bar, "Bar")
        bar = engine.coerce("Bar", foo)
        if bar is None:
            raise TypeError("Not passed a Bar")
    """

    def __init__(
        self,
        registry: TypeRegistry | None = None,
        plugins: PluginManager | None = None,
        settings: CoerceSettings | None = None,
    ) -> None:
        self._registry = registry if registry is not None else TypeRegistry()
        self._plugins = plugins
        self._settings = settings if settings is not None else CoerceSettings()
        self._cache = ResolutionCache()

    @property
    def registry(self) -> TypeRegistry:
        return self._registry

    @property
    def cache(self) -> ResolutionCache:
        return self._cache

    @property
    def plugins(self) -> PluginManager | None:
        return self._plugins

    @property
    def settings(self) -> CoerceSettings:
        return self._settings

    # ------------------------------------------------------------------
    # Public entry points
    # ------------------------------------------------------------------

    def coerce(self, target_name: str, value: Any) -> Any:
        """Return *value* as an instance of *target_name* (or a subclass).

        Returns None when no conversion applies.

        Raises:
            InvalidTypeName: If *target_name* is not a legal type name.
            TargetNotLoaded: If *target_name* is not loaded. The engine never
                imports it here; the caller must load it first.
            ConversionFailed: Only in strict mode, when a conversion method
                raises.
        """
        valid = validate_type_name(target_name)
        if valid is None:
            msg = f"Illegal class name {target_name!r}"
            raise InvalidTypeName(msg)

        target_cls = self._registry.find(valid)
        if target_cls is None:
            msg = f"Tried to coerce to unloaded class {valid!r}"
            raise TargetNotLoaded(msg)

        return self._coerce(valid, target_cls, value)

    def coerce_to(self, target_cls: type, value: Any) -> Any:
        """Same as :meth:`coerce`, with the target given as a class object."""
        if not isinstance(target_cls, type):
            msg = f"Expected a class, got {target_cls!r}"
            raise InvalidTypeName(msg)
        name = validate_type_name(self._registry.name_of(target_cls))
        if name is None:
            msg = f"Class {target_cls!r} has no legal type name; register it explicitly"
            raise InvalidTypeName(msg)
        return self._coerce(name, target_cls, value)

    def resolve(
        self,
        source_cls: type,
        target_name: str,
        target_cls: type | None = None,
    ) -> Directive:
        """Return the directive converting *source_cls* into *target_name*.

        Cached answers are returned as-is. On a miss the directive is
        computed, stored, and the stored value returned.
        """
        cached = self._cache.lookup(source_cls, target_name)
        if cached is not None:
            logger.debug(
                "Cache hit %s -> %s: %s",
                source_cls.__qualname__,
                target_name,
                cached.describe(),
            )
            return cached

        if target_cls is None:
            target_cls = self._registry.get(target_name)

        directive = self._discover(source_cls, target_name, target_cls)
        directive = self._cache.store(source_cls, target_name, directive)
        logger.debug(
            "Resolved %s -> %s: %s",
            source_cls.__qualname__,
            target_name,
            directive.describe(),
        )
        return directive

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _coerce(self, target_name: str, target_cls: type, value: Any) -> Any:
        if not is_typed_instance(value):
            return None

        source_cls = type(value)
        if issubclass(source_cls, target_cls):
            return value

        directive = self.resolve(source_cls, target_name, target_cls)
        if directive.is_none:
            return None

        result = self._execute(directive, value, target_cls)
        if result is None:
            return None
        if is_typed_instance(result) and isinstance(result, target_cls):
            return result

        logger.debug(
            "%s returned %s, not a %s",
            directive.describe(),
            type(result).__qualname__,
            target_cls.__qualname__,
        )
        return None

    def _discover(self, source_cls: type, target_name: str, target_cls: type) -> Directive:
        push = push_method_name(target_name)
        if self._registry.exposes(source_cls, push):
            return Directive.push(push)

        source_name = validate_type_name(self._registry.name_of(source_cls))
        if source_name is not None:
            pull = pull_method_name(source_name)
            if self._registry.exposes(target_cls, pull):
                return Directive.pull(pull)

        if self._plugins is not None:
            function = self._plugins.find_coercion_function(source_cls, target_cls)
            if function is not None:
                return Directive.external(function)

        return NO_CONVERSION

    def _execute(self, directive: Directive, value: Any, target_cls: type) -> Any:
        """Run *directive*; a raising conversion method counts as no conversion."""
        try:
            if directive.kind is DirectiveKind.PUSH:
                return getattr(value, directive.method)()
            if directive.kind is DirectiveKind.PULL:
                return getattr(target_cls, directive.method)(value)
            if directive.kind is DirectiveKind.EXTERNAL:
                return directive.function(value, target_cls)
        except Exception as exc:
            if self._settings.strict:
                msg = (
                    f"{directive.describe()} raised while coercing "
                    f"{type(value).__qualname__} to {target_cls.__qualname__}"
                )
                raise ConversionFailed(msg) from exc
            logger.warning(
                "%s raised while coercing %s to %s",
                directive.describe(),
                type(value).__qualname__,
                target_cls.__qualname__,
                exc_info=True,
            )
        return None


# ---------------------------------------------------------------------------
# Process-wide default engine
# ---------------------------------------------------------------------------

_default_engine: CoercionEngine | None = None
_default_lock = threading.Lock()


def build_default_engine(settings: CoerceSettings | None = None) -> CoercionEngine:
    """Build an engine from discovered settings.

    Entry-point plugins are not loaded here; see :func:`load_entry_point_plugins`.
    """
    if settings is None:
        settings = CoerceSettings.discover()
    if settings.setup_logging:
        configure_from_settings(settings)
    return CoercionEngine(registry=TypeRegistry(), plugins=PluginManager(), settings=settings)


def load_entry_point_plugins(engine: CoercionEngine) -> list[str]:
    """Import ``paramcoerce.plugins`` entry points into *engine*'s plugin manager.

    Plugin modules may call the public API while they import, so this must
    run after *engine* is published and without holding the default lock.
    """
    if engine.plugins is None:
        return []
    names = engine.plugins.discover_and_load()
    if names:
        logger.debug("Loaded coercion plugins: %s", ", ".join(names))
    return names


def get_engine() -> CoercionEngine:
    """Return the process-wide engine, building it on first use."""
    global _default_engine
    engine = _default_engine
    if engine is not None:
        return engine
    with _default_lock:
        if _default_engine is not None:
            return _default_engine
        engine = build_default_engine()
        _default_engine = engine
    if engine.settings.load_plugins:
        load_entry_point_plugins(engine)
    return engine


def set_engine(engine: CoercionEngine | None) -> CoercionEngine | None:
    """Replace the process-wide engine and return the previous one.

    Passing None makes the next :func:`get_engine` call build a fresh one.
    """
    global _default_engine
    with _default_lock:
        previous = _default_engine
        _default_engine = engine
    return previous


def coerce(target_name: str, value: Any) -> Any:
    """Coerce *value* to *target_name* with the process-wide engine."""
    return get_engine().coerce(target_name, value)
