"""Error types raised by the packing engine.

All engine errors derive from ``PackingError`` so callers can catch the
whole family at a run boundary. The engine itself never recovers from them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from binpack2d.core.models import Rectangle


class PackingError(Exception):
    """Base class for every error raised by binpack2d."""


class ConfigurationError(PackingError):
    """Invalid size bounds or run configuration."""


class InvalidInputError(PackingError, ValueError):
    """A value supplied to the engine is out of range or malformed."""


class MemberNotFoundError(InvalidInputError, LookupError):
    """Attempted to remove a rectangle that is not in the container."""


class InfeasibleItemError(PackingError):
    """A rectangle is larger than an empty container and can never be placed."""

    def __init__(self, rectangle: "Rectangle", capacity: int):
        self.rectangle = rectangle
        self.capacity = capacity
        super().__init__(
            f"Rectangle {rectangle.width}x{rectangle.height} "
            f"(area {rectangle.area}) exceeds container capacity {capacity}"
        )

    def __reduce__(self):
        return type(self), (self.rectangle, self.capacity)


class CapacityViolationError(PackingError):
    """A rectangle was added to a container without enough remaining area."""
