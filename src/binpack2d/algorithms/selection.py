"""Selection strategies: the order in which rectangles are packed."""

from __future__ import annotations

from enum import Enum
from typing import Callable, Iterable, Union

from binpack2d.core.errors import InvalidInputError
from binpack2d.core.models import Rectangle


class SelectionStrategy(str, Enum):
    """
    Descending orderings over a rectangle sequence.

    Every variant sorts stably, so rectangles with equal keys keep their
    input order and results are reproducible.
    """

    AREA_DESC = "area_desc"
    WIDTH_DESC = "width_desc"
    HEIGHT_DESC = "height_desc"

    @property
    def key(self) -> Callable[[Rectangle], int]:
        return _SORT_KEYS[self]

    def order(self, rectangles: Iterable[Rectangle]) -> list[Rectangle]:
        """
        Return a new list of rectangles in processing order.

        Args:
            rectangles: Rectangles to order (left untouched)

        Returns:
            Rectangles sorted by this strategy's key, largest first
        """
        return sorted(rectangles, key=self.key, reverse=True)


_SORT_KEYS: dict[SelectionStrategy, Callable[[Rectangle], int]] = {
    SelectionStrategy.AREA_DESC: lambda r: r.area,
    SelectionStrategy.WIDTH_DESC: lambda r: r.width,
    SelectionStrategy.HEIGHT_DESC: lambda r: r.height,
}


# Map of strategy names to variants ("length_desc" is the legacy name for width)
ORDERING_STRATEGIES: dict[str, SelectionStrategy] = {
    "area_desc": SelectionStrategy.AREA_DESC,
    "width_desc": SelectionStrategy.WIDTH_DESC,
    "height_desc": SelectionStrategy.HEIGHT_DESC,
    "length_desc": SelectionStrategy.WIDTH_DESC,
}


def get_selection_strategy(name: Union[str, SelectionStrategy]) -> SelectionStrategy:
    """
    Get a selection strategy by name.

    Args:
        name: Strategy name (area_desc, width_desc, height_desc, length_desc),
            case-insensitive, or a SelectionStrategy

    Returns:
        The matching SelectionStrategy

    Raises:
        InvalidInputError: If the name is not recognized
    """
    if isinstance(name, SelectionStrategy):
        return name
    key = str(name).strip().lower()
    if key not in ORDERING_STRATEGIES:
        raise InvalidInputError(
            f"Unknown selection strategy: {name}. "
            f"Available: {list(ORDERING_STRATEGIES.keys())}"
        )
    return ORDERING_STRATEGIES[key]
