"""Plugin discovery and loading.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints
in the ``paramcoerce.plugins`` group, plus direct registration.
Capability: the ``coercion_function`` hook.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import Any

import pluggy

from paramcoerce.plugins.hookspecs import PROJECT_NAME, ParamCoerceHookSpec

ENTRY_POINT_GROUP = "paramcoerce.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, loading, and the coercion_function hook."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(ParamCoerceHookSpec)

    def discover_and_load(self) -> list[str]:
        """Load plugins advertised under the ``paramcoerce.plugins`` group.

        Returns a list of loaded plugin names.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._normalize_plugin_instances()
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def list_plugin_names(self) -> list[str]:
        """Return names of all registered plugins."""
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    def find_coercion_function(
        self,
        source_type: type,
        target_type: type,
    ) -> Callable[[Any, type], Any] | None:
        """Ask plugins for a function converting *source_type* to *target_type*.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        try:
            function = self._pm.hook.coercion_function(
                source_type=source_type,
                target_type=target_type,
            )
        except Exception:
            logger.warning(
                "Plugin coercion_function hook failed for %s -> %s",
                source_type.__qualname__,
                target_type.__qualname__,
                exc_info=True,
            )
            return None

        if function is None:
            return None
        if not callable(function):
            logger.warning(
                "Plugin returned non-callable coercion function for %s -> %s",
                source_type.__qualname__,
                target_type.__qualname__,
            )
            return None
        return function

    def _normalize_plugin_instances(self) -> None:
        """Replace registered plugin classes with instantiated objects.

        Entry-point loading may register a plugin class directly. Hook dispatch
        against class objects leaves ``self`` unbound and fails at runtime.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin):
                continue
            if not self._has_hook_impls(plugin):
                continue

            plugin_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)

            try:
                instance = plugin()
            except Exception:
                logger.warning(
                    "Failed to instantiate entry-point plugin %s",
                    plugin_name,
                    exc_info=True,
                )
                continue

            self._pm.register(instance, name=plugin_name)
            logger.debug("Instantiated entry-point plugin: %s", plugin_name)

    @staticmethod
    def _has_hook_impls(cls: type) -> bool:
        """Check whether *cls* has any methods decorated with ``@hookimpl``.

        Pluggy's ``HookimplMarker("paramcoerce")`` sets a
        ``paramcoerce_impl`` attribute on decorated methods.
        """
        for name in dir(cls):
            if name.startswith("_"):
                continue
            method = getattr(cls, name, None)
            if callable(method) and getattr(method, "paramcoerce_impl", None):
                return True
        return False
