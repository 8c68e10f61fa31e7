"""First-fit decreasing assignment of rectangles to containers."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Iterable, Optional, Union

from binpack2d.algorithms.selection import SelectionStrategy, get_selection_strategy
from binpack2d.core.errors import InfeasibleItemError, InvalidInputError
from binpack2d.core.models import Container, Rectangle, Solution

if TYPE_CHECKING:
    from binpack2d.monitoring.progress import ProgressObserver


logger = logging.getLogger(__name__)


class GreedyPacker:
    """
    First-fit decreasing packer.

    Orders the rectangles with a selection strategy, then puts each one into
    the first container (in creation order) with enough remaining area.
    If none has room, a new container is opened.
    """

    def __init__(
        self,
        edge_length: int,
        strategy: Union[str, SelectionStrategy] = SelectionStrategy.AREA_DESC,
        observer: Optional["ProgressObserver"] = None,
    ):
        if not isinstance(edge_length, int) or isinstance(edge_length, bool) or edge_length <= 0:
            raise InvalidInputError(f"edge_length must be a positive integer, got {edge_length!r}")
        self.edge_length = edge_length
        self.strategy = get_selection_strategy(strategy)
        self.observer = observer
        self.containers: list[Container] = []
        self.elapsed_seconds = 0.0
        self._next_container_id = 0

    @property
    def capacity(self) -> int:
        return self.edge_length * self.edge_length

    def pack(self, rectangles: Iterable[Rectangle]) -> Solution:
        """
        Pack rectangles into containers.

        Args:
            rectangles: Rectangles to pack (input order only matters for ties)

        Returns:
            Solution holding every rectangle

        Raises:
            InfeasibleItemError: If a rectangle is larger than an empty container
        """
        ordered = self.strategy.order(rectangles)

        # Reject unplaceable items before touching any container
        for rect in ordered:
            if rect.area > self.capacity:
                raise InfeasibleItemError(rect, self.capacity)

        self.containers = []
        self._next_container_id = 0
        start = time.perf_counter()
        total = len(ordered)

        for processed, rect in enumerate(ordered, start=1):
            target = self._first_fit(rect)
            if target is None:
                target = self._new_container()
            target.add(rect)

            if self.observer is not None:
                self.observer.on_item_placed(processed, total, len(self.containers))

        self.elapsed_seconds = time.perf_counter() - start
        if self.observer is not None:
            self.observer.on_finish()

        logger.info(
            "Greedy (%s) packed %d rectangles into %d containers in %.4fs",
            self.strategy.value, total, len(self.containers), self.elapsed_seconds,
        )
        return Solution(edge_length=self.edge_length, containers=self.containers)

    def _first_fit(self, rect: Rectangle) -> Optional[Container]:
        for container in self.containers:
            if container.can_fit(rect):
                return container
        return None

    def _new_container(self) -> Container:
        """Create a new container and add it to the list."""
        container = Container(self.edge_length, container_id=self._next_container_id)
        self._next_container_id += 1
        self.containers.append(container)
        return container


def greedy_pack(
    rectangles: Iterable[Rectangle],
    edge_length: int,
    strategy: Union[str, SelectionStrategy] = SelectionStrategy.AREA_DESC,
    observer: Optional["ProgressObserver"] = None,
) -> Solution:
    """Pack ``rectangles`` into squares of side ``edge_length`` with first-fit decreasing."""
    return GreedyPacker(edge_length, strategy, observer).pack(rectangles)
