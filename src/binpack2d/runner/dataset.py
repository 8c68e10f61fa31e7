"""Reproducible problem-instance generation for packing experiments."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from binpack2d.core.errors import InvalidInputError
from binpack2d.core.models import Rectangle, SizeBounds


def derive_seed(instance_id: int, box_length: int, num_rectangles: int) -> int:
    """
    Deterministic seed from instance parameters.

    Used when no explicit seed is given, so the same parameters always
    produce the same instance.
    """
    return abs((instance_id * 31) ^ (box_length * 17) ^ (num_rectangles * 23))


def validate_parameters(
    box_length: int,
    num_rectangles: int,
    min_width: int,
    max_width: int,
    min_height: int,
    max_height: int,
) -> None:
    """
    Check instance parameters.

    Raises:
        InvalidInputError: If any parameter is out of range
    """
    if box_length <= 0:
        raise InvalidInputError("Box length must be positive")
    if num_rectangles <= 0:
        raise InvalidInputError("Number of rectangles must be positive")
    if min_width <= 0 or min_height <= 0:
        raise InvalidInputError("Minimum dimensions must be positive")
    if max_width < min_width:
        raise InvalidInputError("Maximum width must be >= minimum width")
    if max_height < min_height:
        raise InvalidInputError("Maximum height must be >= minimum height")
    if max_width > box_length or max_height > box_length:
        raise InvalidInputError(
            f"Rectangle dimensions ({max_width}, {max_height}) exceed container size {box_length}"
        )


@dataclass(frozen=True)
class ProblemInstance:
    """
    A container size plus the rectangles to pack into it.

    Attributes:
        instance_id: Identifier of the instance.
        box_length:  Side of the square containers.
        rectangles:  Generated rectangles, in generation order.
        bounds:      Size bounds the rectangles were drawn from.
        seed:        Seed used for generation.
    """

    instance_id: int
    box_length: int
    rectangles: tuple[Rectangle, ...]
    bounds: SizeBounds
    seed: int

    @property
    def rectangle_count(self) -> int:
        return len(self.rectangles)

    @property
    def total_area(self) -> int:
        return sum(r.area for r in self.rectangles)

    @property
    def container_area(self) -> int:
        return self.box_length * self.box_length

    @property
    def packing_density(self) -> float:
        """Total rectangle area over one container's area (>1 means several containers)."""
        return self.total_area / self.container_area

    @property
    def area_lower_bound(self) -> int:
        """No solution can use fewer containers than this."""
        return math.ceil(self.total_area / self.container_area)

    def size_statistics(self) -> str:
        """Min, max and average of widths and heights."""
        widths = np.array([r.width for r in self.rectangles])
        heights = np.array([r.height for r in self.rectangles])
        return (
            f"Width: {widths.min()}-{widths.max()} (avg {widths.mean():.1f}), "
            f"Height: {heights.min()}-{heights.max()} (avg {heights.mean():.1f})"
        )

    def copy_with_new_id(self, new_instance_id: int) -> "ProblemInstance":
        """Same parameters, new id and fresh rectangles from a seed derived from this one."""
        new_seed = int(np.random.default_rng(self.seed).integers(0, 2**31 - 1))
        return generate_instance(
            instance_id=new_instance_id,
            box_length=self.box_length,
            num_rectangles=self.rectangle_count,
            min_width=self.bounds.min_width,
            max_width=self.bounds.max_width,
            min_height=self.bounds.min_height,
            max_height=self.bounds.max_height,
            seed=new_seed,
        )

    def to_dict(self) -> dict:
        return {
            "instance_id": self.instance_id,
            "box_length": self.box_length,
            "seed": self.seed,
            "bounds": self.bounds.to_dict(),
            "rectangles": [[r.width, r.height] for r in self.rectangles],
        }


def generate_instance(
    instance_id: int,
    box_length: int,
    num_rectangles: int,
    min_width: int,
    max_width: int,
    min_height: int,
    max_height: int,
    seed: Optional[int] = None,
) -> ProblemInstance:
    """
    Generate a random instance.

    Widths are drawn first, then heights, each uniformly from the inclusive
    range. The same parameters and seed always give identical rectangles.

    Args:
        instance_id: Instance identifier
        box_length: Side of the square containers
        num_rectangles: Number of rectangles to generate
        min_width, max_width: Inclusive width range
        min_height, max_height: Inclusive height range
        seed: Random seed (default: derived from the parameters)

    Returns:
        ProblemInstance with validated rectangles

    Raises:
        InvalidInputError: If any parameter is out of range
        ConfigurationError: If a minimum equals its maximum
    """
    validate_parameters(box_length, num_rectangles, min_width, max_width, min_height, max_height)

    if seed is None:
        seed = derive_seed(instance_id, box_length, num_rectangles)

    bounds = SizeBounds(
        min_width=min_width, max_width=max_width,
        min_height=min_height, max_height=max_height,
    )
    rng = np.random.default_rng(seed)
    widths = rng.integers(min_width, max_width + 1, size=num_rectangles)
    heights = rng.integers(min_height, max_height + 1, size=num_rectangles)

    rectangles = tuple(
        Rectangle(int(w), int(h), bounds=bounds) for w, h in zip(widths, heights)
    )
    return ProblemInstance(
        instance_id=instance_id,
        box_length=box_length,
        rectangles=rectangles,
        bounds=bounds,
        seed=seed,
    )
