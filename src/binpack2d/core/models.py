"""Core data models for 2D bin packing."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from binpack2d.core.errors import (
    CapacityViolationError,
    ConfigurationError,
    InvalidInputError,
    MemberNotFoundError,
)


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


@dataclass(frozen=True)
class SizeBounds:
    """
    Inclusive bounds on rectangle dimensions.

    Built once by the caller and handed to every operation that validates
    rectangles. Immutable, so it can be shared freely.

    Attributes:
        min_width, max_width:   Allowed width range.
        min_height, max_height: Allowed height range.
    """

    min_width: int
    max_width: int
    min_height: int
    max_height: int

    def __post_init__(self) -> None:
        for name in ("min_width", "max_width", "min_height", "max_height"):
            if not _is_positive_int(getattr(self, name)):
                raise ConfigurationError(f"{name} must be a positive integer, got {getattr(self, name)!r}")
        if self.min_width >= self.max_width:
            raise ConfigurationError(
                f"min_width ({self.min_width}) must be less than max_width ({self.max_width})"
            )
        if self.min_height >= self.max_height:
            raise ConfigurationError(
                f"min_height ({self.min_height}) must be less than max_height ({self.max_height})"
            )

    def validate_width(self, width: int) -> None:
        if width < self.min_width or width > self.max_width:
            raise InvalidInputError(
                f"width must be between {self.min_width} and {self.max_width}, got {width}"
            )

    def validate_height(self, height: int) -> None:
        if height < self.min_height or height > self.max_height:
            raise InvalidInputError(
                f"height must be between {self.min_height} and {self.max_height}, got {height}"
            )

    def contains(self, width: int, height: int) -> bool:
        return (
            self.min_width <= width <= self.max_width
            and self.min_height <= height <= self.max_height
        )

    def to_dict(self) -> dict:
        return {"min_width": self.min_width, "max_width": self.max_width,
                "min_height": self.min_height, "max_height": self.max_height}


@dataclass(frozen=True)
class Rectangle:
    """
    An item to be packed.

    Value semantics: two rectangles with the same width and height are equal
    and interchangeable. ``bounds`` only takes part in validation.

    Attributes:
        width:  Horizontal extent (positive int).
        height: Vertical extent (positive int).
        bounds: Optional size bounds checked at construction.
    """

    width: int
    height: int
    bounds: Optional[SizeBounds] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not _is_positive_int(self.width):
            raise InvalidInputError(f"width must be a positive integer, got {self.width!r}")
        if not _is_positive_int(self.height):
            raise InvalidInputError(f"height must be a positive integer, got {self.height!r}")
        if self.bounds is not None:
            self.bounds.validate_width(self.width)
            self.bounds.validate_height(self.height)

    @property
    def area(self) -> int:
        """Area of the rectangle."""
        return self.width * self.height

    def fits_within(self, edge_length: int) -> bool:
        """Whether both sides are no longer than a square of ``edge_length``."""
        return self.width <= edge_length and self.height <= edge_length

    def to_dict(self) -> dict:
        return {"width": self.width, "height": self.height, "area": self.area}

    @classmethod
    def from_dict(cls, d: dict, bounds: Optional[SizeBounds] = None) -> "Rectangle":
        return cls(width=d["width"], height=d["height"], bounds=bounds)


class Container:
    """
    A square container that holds rectangles up to its area capacity.

    Feasibility is judged on remaining area only; no positions are tracked.
    """

    def __init__(self, edge_length: int, container_id: int = 0):
        if not _is_positive_int(edge_length):
            raise InvalidInputError(f"edge_length must be a positive integer, got {edge_length!r}")
        self.id = container_id
        self.edge_length = edge_length
        self.capacity = edge_length * edge_length
        self.remaining_area = self.capacity
        self.members: list[Rectangle] = []

    def can_fit(self, rect: Rectangle) -> bool:
        """Check whether ``rect`` fits in the remaining area."""
        return rect.area <= self.remaining_area

    def add(self, rect: Rectangle) -> None:
        """
        Add a rectangle to the container.

        Raises:
            CapacityViolationError: If the rectangle does not fit.
        """
        if not self.can_fit(rect):
            raise CapacityViolationError(
                f"Container {self.id}: rectangle area {rect.area} exceeds "
                f"remaining area {self.remaining_area}"
            )
        self.members.append(rect)
        self.remaining_area -= rect.area

    def remove(self, rect: Rectangle) -> None:
        """
        Remove the first member equal to ``rect``.

        Raises:
            MemberNotFoundError: If no such member exists.
        """
        try:
            self.members.remove(rect)
        except ValueError:
            raise MemberNotFoundError(
                f"Container {self.id} does not hold rectangle {rect.width}x{rect.height}"
            ) from None
        self.remaining_area += rect.area

    def is_empty(self) -> bool:
        return not self.members

    def used_area(self) -> int:
        return self.capacity - self.remaining_area

    def member_count(self) -> int:
        return len(self.members)

    def snapshot(self) -> tuple[Rectangle, ...]:
        """Stable copy of the members, safe to iterate while mutating."""
        return tuple(self.members)

    @property
    def utilization(self) -> float:
        """Used area as a percentage of capacity."""
        return (self.used_area() / self.capacity) * 100

    def copy(self) -> "Container":
        clone = Container(self.edge_length, container_id=self.id)
        clone.members = list(self.members)
        clone.remaining_area = self.remaining_area
        return clone

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "edge_length": self.edge_length,
            "capacity": self.capacity,
            "used_area": self.used_area(),
            "remaining_area": self.remaining_area,
            "rectangles": [[r.width, r.height] for r in self.members],
        }

    def __repr__(self) -> str:
        return (
            f"Container(id={self.id}, "
            f"{self.edge_length}x{self.edge_length}, "
            f"rectangles={len(self.members)}, "
            f"used={self.used_area()}/{self.capacity}, "
            f"util={self.utilization:.1f}%)"
        )


@dataclass
class Solution:
    """
    Ordered containers holding every rectangle of a packing run.

    Attributes:
        edge_length: Side of every container in the solution.
        containers:  Containers in creation order.
    """

    edge_length: int
    containers: list[Container] = field(default_factory=list)

    @property
    def container_count(self) -> int:
        return len(self.containers)

    def rectangles(self) -> list[Rectangle]:
        """All rectangles, container by container, in member order."""
        return [rect for container in self.containers for rect in container.members]

    @property
    def total_used_area(self) -> int:
        return sum(c.used_area() for c in self.containers)

    @property
    def average_utilization(self) -> float:
        if not self.containers:
            return 0.0
        return sum(c.utilization for c in self.containers) / len(self.containers)

    def copy(self) -> "Solution":
        """Independent copy; container ids and member order are preserved."""
        return Solution(
            edge_length=self.edge_length,
            containers=[c.copy() for c in self.containers],
        )

    def to_dict(self) -> dict:
        return {
            "edge_length": self.edge_length,
            "container_count": self.container_count,
            "containers": [c.to_dict() for c in self.containers],
        }
