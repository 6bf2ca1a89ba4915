"""Exception taxonomy for paramcoerce.

Every configuration or validation failure raises a :class:`CoercionError`
subclass immediately. "No conversion available" is never an exception:
``coerce`` returns ``None`` for it.
"""

from __future__ import annotations


class CoercionError(Exception):
    """Base class for all paramcoerce errors."""


class InvalidTypeName(CoercionError, ValueError):
    """A type name failed validation before any lookup was attempted."""


# Name used at the coercion entry points.
InvalidTarget = InvalidTypeName


class InvalidMethodName(CoercionError, ValueError):
    """A helper method name is not a plain identifier."""


class TargetNotLoaded(CoercionError, LookupError):
    """The requested target type is not present in the type registry."""


class TargetLoadError(TargetNotLoaded):
    """Loading the target type at install time failed."""


class MethodCollision(CoercionError, AttributeError):
    """The consumer already defines the helper name being installed."""


class UnsupportedImport(CoercionError, TypeError):
    """Install-time configuration has an unsupported shape or value."""


class ConversionFailed(CoercionError):
    """A conversion method raised while ``strict`` mode is enabled."""
