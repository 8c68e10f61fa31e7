"""
Local search that consolidates an existing packing.

Starting from a feasible solution (normally the greedy one), the optimizer
repeatedly moves single rectangles into other containers, hoping that
containers empty out and can be dropped.

Per pass:
    1. Visit containers in their current order. For each source container,
       take a snapshot of its members.
    2. For each member, in order, look for the first *other* container that
       can fit it.
    3. On the first successful move: relocate the rectangle, drop the source
       if it became empty, and end the pass.
A pass without a move means the search has converged.

A move is accepted because it succeeds, not because it lowers the container
count. This is first-improvement consolidation, not best-improvement search.
"""

from __future__ import annotations

import hashlib
import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from binpack2d.core.errors import InvalidInputError
from binpack2d.core.models import Container, Rectangle, Solution

if TYPE_CHECKING:
    from binpack2d.monitoring.progress import ProgressObserver


logger = logging.getLogger(__name__)


@dataclass
class SearchStats:
    """
    Counters from one optimizer run.

    Attributes:
        passes:             Number of passes started.
        moves:              Successful relocations.
        containers_removed: Containers emptied and dropped.
        converged:          A full pass found no move.
        cycle_detected:     The search returned to an earlier assignment and
                            was stopped there.
        elapsed_seconds:    Wall-clock time of the run.
    """

    passes: int = 0
    moves: int = 0
    containers_removed: int = 0
    converged: bool = False
    cycle_detected: bool = False
    elapsed_seconds: float = 0.0

    def to_dict(self) -> dict:
        return {
            "passes": self.passes,
            "moves": self.moves,
            "containers_removed": self.containers_removed,
            "converged": self.converged,
            "cycle_detected": self.cycle_detected,
            "elapsed_seconds": self.elapsed_seconds,
        }


def _assignment_key(containers: list[Container]) -> bytes:
    """
    Fixed-size digest of which rectangles sit in which container.

    One key is kept per pass, so a digest keeps the cycle check at a few
    bytes per pass whatever the instance size.
    """
    layout = tuple(
        (c.id, tuple((r.width, r.height) for r in c.members)) for c in containers
    )
    return hashlib.blake2b(repr(layout).encode(), digest_size=16).digest()


class LocalSearchOptimizer:
    """
    Single-rectangle relocation search with first-improvement acceptance.

    The input solution is never modified; ``optimize`` works on a copy.
    The acceptance rule can lead back to an assignment seen before (two
    containers passing an item back and forth). Since the search is
    deterministic it would then repeat forever, so it stops at the first
    repeated assignment.
    """

    def __init__(
        self,
        observer: Optional["ProgressObserver"] = None,
        max_passes: Optional[int] = None,
    ):
        if max_passes is not None and max_passes <= 0:
            raise InvalidInputError(f"max_passes must be positive, got {max_passes}")
        self.observer = observer
        self.max_passes = max_passes
        self.stats = SearchStats()

    def optimize(self, solution: Solution) -> Solution:
        """
        Improve a solution by relocating rectangles between containers.

        Args:
            solution: Feasible starting solution (left untouched)

        Returns:
            New solution with the same rectangles and no more containers
        """
        self.stats = SearchStats()
        result = solution.copy()
        containers = result.containers
        seen: set[bytes] = set()
        start = time.perf_counter()

        while True:
            if self.max_passes is not None and self.stats.passes >= self.max_passes:
                logger.warning("Local search stopped after max_passes=%d", self.max_passes)
                break

            key = _assignment_key(containers)
            if key in seen:
                self.stats.cycle_detected = True
                logger.warning(
                    "Local search revisited an earlier assignment after %d passes; stopping",
                    self.stats.passes,
                )
                break
            seen.add(key)

            self.stats.passes += 1
            moved = self._run_pass(containers)

            if self.observer is not None:
                self.observer.on_pass_complete(self.stats.passes, moved, len(containers))
            logger.debug("pass %d: moved=%s containers=%d", self.stats.passes, moved, len(containers))

            if not moved:
                self.stats.converged = True
                break

        self.stats.elapsed_seconds = time.perf_counter() - start
        if self.observer is not None:
            self.observer.on_finish()

        logger.info(
            "Local search finished: %d -> %d containers, %d passes, %d moves in %.4fs",
            solution.container_count, len(containers), self.stats.passes,
            self.stats.moves, self.stats.elapsed_seconds,
        )
        return result

    def _run_pass(self, containers: list[Container]) -> bool:
        """Apply at most one move. Returns True if a rectangle was moved."""
        for source in containers:
            for rect in source.snapshot():
                target = self._find_target(rect, source, containers)
                if target is None:
                    continue

                source.remove(rect)
                target.add(rect)
                self.stats.moves += 1
                if source.is_empty():
                    # Identity removal; containers never compare by value
                    containers.remove(source)
                    self.stats.containers_removed += 1
                return True
        return False

    @staticmethod
    def _find_target(rect: Rectangle, source: Container, containers: list[Container]) -> Optional[Container]:
        for target in containers:
            if target is source:
                continue
            if target.can_fit(rect):
                return target
        return None


def local_search(
    solution: Solution,
    observer: Optional["ProgressObserver"] = None,
    max_passes: Optional[int] = None,
) -> Solution:
    """Consolidate ``solution`` with single-rectangle moves and return the result."""
    return LocalSearchOptimizer(observer=observer, max_passes=max_passes).optimize(solution)
