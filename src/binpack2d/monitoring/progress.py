"""Progress observers for the greedy packer and the local search.

Observers are notified synchronously and must not touch the solution being
built; they only report.
"""

from __future__ import annotations

import logging
import sys
import time
from typing import TextIO


logger = logging.getLogger(__name__)


class ProgressObserver:
    """No-op observer. Subclass and override the hooks you need."""

    def on_item_placed(self, processed: int, total: int, container_count: int) -> None:
        """Called by the greedy packer after each rectangle is placed."""

    def on_pass_complete(self, pass_number: int, moved: bool, container_count: int) -> None:
        """Called by the local search after each pass."""

    def on_finish(self) -> None:
        """Called once when a run ends."""


class LoggingProgress(ProgressObserver):
    """Emit progress as DEBUG log records, every ``every`` events."""

    def __init__(self, every: int = 100):
        self.every = max(1, every)

    def on_item_placed(self, processed: int, total: int, container_count: int) -> None:
        if processed % self.every == 0 or processed == total:
            logger.debug("placed %d/%d rectangles, %d containers open", processed, total, container_count)

    def on_pass_complete(self, pass_number: int, moved: bool, container_count: int) -> None:
        if pass_number % self.every == 0 or not moved:
            logger.debug("pass %d: moved=%s, %d containers", pass_number, moved, container_count)


class ProgressBar(ProgressObserver):
    """
    Console progress bar with elapsed time, redrawn in place.

    The greedy packer fills the bar by fraction of rectangles placed. The
    local search has no known total, so the bar animates with elapsed time
    and is redrawn at most every ``update_interval`` seconds.
    """

    def __init__(self, width: int = 30, stream: TextIO | None = None, update_interval: float = 0.05):
        self.width = width
        self.stream = stream if stream is not None else sys.stderr
        self.update_interval = update_interval
        self._start = time.perf_counter()
        self._last_draw = 0.0

    def _draw(self, filled: int) -> None:
        elapsed = time.perf_counter() - self._start
        bar = "#" * filled + "-" * (self.width - filled)
        self.stream.write(f"\r[{bar}] {elapsed:.4f}s")
        self.stream.flush()

    def on_item_placed(self, processed: int, total: int, container_count: int) -> None:
        filled = int(self.width * processed / total) if total else self.width
        self._draw(filled)

    def on_pass_complete(self, pass_number: int, moved: bool, container_count: int) -> None:
        now = time.perf_counter()
        if now - self._last_draw < self.update_interval:
            return
        self._last_draw = now
        elapsed = now - self._start
        self._draw(int(elapsed * 2) % self.width)

    def on_finish(self) -> None:
        self.stream.write("\r\n")
        self.stream.flush()
