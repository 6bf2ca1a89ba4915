"""Type-name and method-name validation plus conversion naming conventions.

A type name is one or more identifier segments joined by ``::`` or ``.``
(``Bar``, ``shop.models.Bar``, ``shop::models::Bar``). A leading separator
roots the name at :data:`ROOT_NAMESPACE`.

Conversion methods are discovered by name:

- push: ``__as_<Target>__`` — zero-argument method on the source class.
- pull: ``__from_<Source>__`` — one-argument classmethod on the target class.

Both markers are dunder names so Python never mangles them inside a class
body. Separators in the embedded type name are flattened to ``_``.

INVARIANT: Validators never raise. Invalid input yields ``None``.
"""

from __future__ import annotations

import re

ROOT_NAMESPACE = "__main__"

PUSH_PREFIX = "__as_"
PULL_PREFIX = "__from_"
MARKER_SUFFIX = "__"
FLAT_SEPARATOR = "_"

_IDENTIFIER = r"[^\W\d]\w*"
_SEPARATOR = r"(?:::|\.)"

METHOD_NAME_PATTERN: re.Pattern[str] = re.compile(_IDENTIFIER)
TYPE_NAME_PATTERN: re.Pattern[str] = re.compile(
    rf"{_IDENTIFIER}(?:{_SEPARATOR}{_IDENTIFIER})*"
)
_LEADING_SEPARATOR = re.compile(rf"^{_SEPARATOR}")
_ANY_SEPARATOR = re.compile(_SEPARATOR)


def validate_method_name(name: object) -> str | None:
    """Return *name* if it is a plain identifier, else ``None``."""
    if not isinstance(name, str):
        return None
    return name if METHOD_NAME_PATTERN.fullmatch(name) else None


def validate_type_name(name: object) -> str | None:
    """Return *name* if it is a legal (possibly namespaced) type name.

    ``"::"`` and ``"."`` map to :data:`ROOT_NAMESPACE`; a name that starts
    with a separator is rewritten to be rooted there. Everything else keeps
    its original spelling.
    """
    if not isinstance(name, str):
        return None
    if name in ("::", "."):
        return ROOT_NAMESPACE
    name = _LEADING_SEPARATOR.sub(lambda m: ROOT_NAMESPACE + m.group(0), name, count=1)
    return name if TYPE_NAME_PATTERN.fullmatch(name) else None


def split_type_name(name: str) -> list[str]:
    """Split a validated type name into its segments."""
    return _ANY_SEPARATOR.split(name)


def canonical_type_name(name: str) -> str:
    """Return *name* with every separator normalized to ``.``.

    ``shop::models::Bar`` and ``shop.models.Bar`` share one canonical form,
    which is what registry lookups and cache keys use.
    """
    return ".".join(split_type_name(name))


def flatten_type_name(name: str) -> str:
    """Replace every namespace separator in *name* with ``_``."""
    return _ANY_SEPARATOR.sub(FLAT_SEPARATOR, name)


def push_method_name(target_name: str) -> str:
    """Name of the method a source class exposes to become *target_name*."""
    return f"{PUSH_PREFIX}{flatten_type_name(target_name)}{MARKER_SUFFIX}"


def pull_method_name(source_name: str) -> str:
    """Name of the method a target class exposes to accept *source_name*."""
    return f"{PULL_PREFIX}{flatten_type_name(source_name)}{MARKER_SUFFIX}"
