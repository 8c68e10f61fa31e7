"""Metrics tracking and export for packing experiments.

Provides dataclasses for per-container and per-run metrics, an aggregate
for a whole experiment, and helpers for exporting results to JSON and CSV.
"""

from __future__ import annotations

import csv
import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import numpy as np

from binpack2d.core.models import Container


def _now() -> datetime:
    return datetime.now(timezone.utc)


CONTAINER_CSV_FIELDS = [
    "container_id", "instance_id", "strategy", "rectangles_placed",
    "utilization_pct", "area_used", "area_total",
]


@dataclass
class ContainerMetrics:
    """Metrics for a single container of a final solution.

    Attributes:
        container_id: Identifier of the container within its solution.
        rectangles_placed: Number of rectangles it holds.
        utilization_pct: Area utilization percentage (0-100).
        area_used: Total area of its rectangles.
        area_total: Container capacity.
        strategy: Selection strategy of the run.
        instance_id: Instance the container belongs to.
    """

    container_id: int
    rectangles_placed: int
    utilization_pct: float
    area_used: int
    area_total: int
    strategy: str
    instance_id: int

    @classmethod
    def from_container(cls, container: Container, strategy: str, instance_id: int) -> "ContainerMetrics":
        """Build metrics from a packed container.

        Example:
            >>> from binpack2d import Container, Rectangle
            >>> c = Container(10)
            >>> c.add(Rectangle(5, 5))
            >>> ContainerMetrics.from_container(c, "area_desc", 1).utilization_pct
            25.0
        """
        return cls(
            container_id=container.id,
            rectangles_placed=container.member_count(),
            utilization_pct=container.utilization,
            area_used=container.used_area(),
            area_total=container.capacity,
            strategy=strategy,
            instance_id=instance_id,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class RunMetrics:
    """Outcome of one (instance, strategy) run.

    Attributes:
        instance_id: Instance identifier.
        strategy: Selection strategy name.
        rectangles: Number of rectangles packed.
        greedy_containers: Containers after the greedy pass.
        optimized_containers: Containers after local search (equal to
            greedy_containers when the search is disabled).
        area_lower_bound: ceil(total rectangle area / capacity).
        greedy_seconds: Greedy runtime.
        search_seconds: Local search runtime.
        search_passes: Local search passes.
        search_moves: Local search relocations.
        cycle_detected: Whether the search stopped on a repeated assignment.
    """

    instance_id: int
    strategy: str
    rectangles: int
    greedy_containers: int
    optimized_containers: int
    area_lower_bound: int
    greedy_seconds: float = 0.0
    search_seconds: float = 0.0
    search_passes: int = 0
    search_moves: int = 0
    cycle_detected: bool = False

    @property
    def containers_saved(self) -> int:
        return self.greedy_containers - self.optimized_containers

    @property
    def gap_to_bound(self) -> int:
        """Containers above the area lower bound.

        Example:
            >>> RunMetrics(1, "area_desc", 10, 4, 3, 2).gap_to_bound
            1
        """
        return self.optimized_containers - self.area_lower_bound

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["containers_saved"] = self.containers_saved
        d["gap_to_bound"] = self.gap_to_bound
        return d


@dataclass
class ExperimentMetrics:
    """Aggregate metrics for an entire experiment run.

    Attributes:
        experiment_id: Unique identifier for the experiment.
        algorithm: Algorithm label (e.g. "FFD+LocalSearch").
        total_runs: Number of (instance, strategy) runs planned.
        total_containers: Containers across all final solutions.
        total_rectangles: Rectangles across all final solutions.
        avg_utilization_pct: Mean container utilization.
        median_utilization_pct: Median container utilization.
        min_utilization_pct: Minimum container utilization.
        max_utilization_pct: Maximum container utilization.
        runtime_seconds: Total runtime in seconds.
        errors_count: Number of runs that failed.
        started_at: Experiment start timestamp.
        completed_at: Experiment completion timestamp (None if running).
        runs: Per-run metrics.
        container_metrics: Per-container metrics.
    """

    experiment_id: str
    algorithm: str
    total_runs: int = 0
    total_containers: int = 0
    total_rectangles: int = 0
    avg_utilization_pct: float = 0.0
    median_utilization_pct: float = 0.0
    min_utilization_pct: float = 0.0
    max_utilization_pct: float = 0.0
    runtime_seconds: float = 0.0
    errors_count: int = 0
    started_at: datetime = field(default_factory=_now)
    completed_at: datetime | None = None
    runs: list[RunMetrics] = field(default_factory=list)
    container_metrics: list[ContainerMetrics] = field(default_factory=list)

    def add_run(self, run: RunMetrics, containers: list[ContainerMetrics]) -> None:
        """Add a finished run and the containers of its final solution.

        Example:
            >>> em = ExperimentMetrics("exp_001", "FFD", total_runs=3)
            >>> run = RunMetrics(1, "area_desc", 2, 1, 1, 1)
            >>> cm = ContainerMetrics(0, 2, 72.0, 72, 100, "area_desc", 1)
            >>> em.add_run(run, [cm])
            >>> em.total_containers, em.total_rectangles
            (1, 2)
        """
        self.runs.append(run)
        self.container_metrics.extend(containers)
        self.total_containers += len(containers)
        self.total_rectangles += sum(c.rectangles_placed for c in containers)
        self._recalculate_stats()

    def record_error(self) -> None:
        """Increment error counter.

        Example:
            >>> em = ExperimentMetrics("exp_001", "FFD")
            >>> em.record_error()
            >>> em.errors_count
            1
        """
        self.errors_count += 1

    def mark_complete(self) -> None:
        """Mark experiment as complete and calculate final runtime."""
        self.completed_at = _now()
        self.runtime_seconds = (self.completed_at - self.started_at).total_seconds()

    def _recalculate_stats(self) -> None:
        if not self.container_metrics:
            return

        utilizations = np.array([c.utilization_pct for c in self.container_metrics], dtype=float)
        self.avg_utilization_pct = float(utilizations.mean())
        self.median_utilization_pct = float(np.median(utilizations))
        self.min_utilization_pct = float(utilizations.min())
        self.max_utilization_pct = float(utilizations.max())

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary with ISO timestamps."""
        d = asdict(self)
        d["started_at"] = self.started_at.isoformat()
        d["completed_at"] = self.completed_at.isoformat() if self.completed_at else None
        d["runs"] = [r.to_dict() for r in self.runs]
        d["container_metrics"] = [c.to_dict() for c in self.container_metrics]
        return d

    def to_summary_dict(self) -> dict[str, Any]:
        """Summary without per-container details (runs are kept)."""
        d = self.to_dict()
        del d["container_metrics"]
        return d


def export_to_json(metrics: ExperimentMetrics, output_path: Path | str, include_containers: bool = True) -> None:
    """Export experiment metrics to a JSON file.

    Args:
        metrics: ExperimentMetrics instance to export.
        output_path: Path to output JSON file.
        include_containers: If False, write the summary only.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    data = metrics.to_dict() if include_containers else metrics.to_summary_dict()

    with output_path.open("w") as f:
        json.dump(data, f, indent=2)


def export_to_csv(metrics: ExperimentMetrics, output_path: Path | str) -> None:
    """Export per-container metrics to a CSV file (header only when empty)."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with output_path.open("w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=CONTAINER_CSV_FIELDS)
        writer.writeheader()
        for container in metrics.container_metrics:
            writer.writerow(container.to_dict())


def print_summary(metrics: ExperimentMetrics) -> str:
    """Generate human-readable summary of experiment metrics.

    Args:
        metrics: ExperimentMetrics instance to summarize.

    Returns:
        Formatted multi-line summary string.
    """
    lines = [
        "=" * 60,
        f"Experiment: {metrics.experiment_id}",
        f"Algorithm: {metrics.algorithm}",
        "=" * 60,
        f"Runs: {len(metrics.runs)}/{metrics.total_runs}",
        f"Total Containers: {metrics.total_containers}",
        f"Total Rectangles: {metrics.total_rectangles}",
        "",
    ]
    if metrics.runs:
        lines.append("Runs (greedy -> local search, lower bound):")
        for run in metrics.runs:
            lines.append(
                f"  instance {run.instance_id} {run.strategy:<12} "
                f"{run.greedy_containers} -> {run.optimized_containers} "
                f"(bound {run.area_lower_bound})"
            )
        lines.append("")
    lines += [
        "Utilization Statistics:",
        f"  Average: {metrics.avg_utilization_pct:.2f}%",
        f"  Median:  {metrics.median_utilization_pct:.2f}%",
        f"  Min:     {metrics.min_utilization_pct:.2f}%",
        f"  Max:     {metrics.max_utilization_pct:.2f}%",
        "",
        f"Runtime: {metrics.runtime_seconds:.3f} seconds",
        f"Errors: {metrics.errors_count}",
        "",
        f"Started:   {metrics.started_at.isoformat()}",
        f"Completed: {metrics.completed_at.isoformat() if metrics.completed_at else 'In Progress'}",
        "=" * 60,
    ]
    return "\n".join(lines)
