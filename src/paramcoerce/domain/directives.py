"""Conversion directives — how a source class turns into a target class.

A directive is resolved once per (source class, target name) pair and then
cached for the process lifetime, so it must be immutable.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class DirectiveKind(StrEnum):
    """Which way a conversion runs."""

    PUSH = "push"
    PULL = "pull"
    EXTERNAL = "external"
    NONE = "none"


@dataclass(frozen=True)
class Directive:
    """Resolved conversion path for one (source class, target name) pair.

    Attributes:
        kind: Direction of the conversion.
        method: Method name for ``push`` (on the source instance) and
            ``pull`` (on the target class).
        function: Plugin-supplied ``function(value, target_cls)`` for
            ``external``.
    """

    kind: DirectiveKind
    method: str | None = None
    function: Callable[[Any, type], Any] | None = None

    @classmethod
    def push(cls, method: str) -> Directive:
        return cls(DirectiveKind.PUSH, method=method)

    @classmethod
    def pull(cls, method: str) -> Directive:
        return cls(DirectiveKind.PULL, method=method)

    @classmethod
    def external(cls, function: Callable[[Any, type], Any]) -> Directive:
        return cls(DirectiveKind.EXTERNAL, function=function)

    @property
    def is_none(self) -> bool:
        return self.kind is DirectiveKind.NONE

    def describe(self) -> str:
        """Short form for logs, e.g. ``push(__as_Bar__)``."""
        if self.kind is DirectiveKind.EXTERNAL:
            target = getattr(self.function, "__qualname__", repr(self.function))
            return f"external({target})"
        if self.method is not None:
            return f"{self.kind}({self.method})"
        return str(self.kind)


NO_CONVERSION = Directive(DirectiveKind.NONE)
