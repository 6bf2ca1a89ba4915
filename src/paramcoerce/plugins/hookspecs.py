"""Pluggy hook specifications for third-party coercion functions.

A plugin can supply a conversion between two classes that neither class
knows about. It is consulted only after the push and pull conventions fail.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pluggy

PROJECT_NAME = "paramcoerce"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class ParamCoerceHookSpec:
    """Hook specifications for the paramcoerce plugin system."""

    @hookspec(firstresult=True)
    def coercion_function(
        self,
        source_type: type,
        target_type: type,
    ) -> Callable[[Any, type], Any] | None:
        """Return ``function(value, target_type)`` converting *source_type*
        instances into *target_type*, or None to pass.

        The answer is cached per pair for the life of the process.
        """
