"""Extension layer — third-party coercion functions via pluggy.

INVARIANT: Plugin failures are warnings, never errors.
"""

from paramcoerce.plugins.hookspecs import hookimpl
from paramcoerce.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
