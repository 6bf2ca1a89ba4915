"""Infrastructure layer — adapters over the Python runtime's type system."""

from paramcoerce.infrastructure.registry import TypeRegistry

__all__ = ["TypeRegistry"]
