"""Main experiment runner for packing experiments."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from binpack2d.algorithms.greedy import GreedyPacker
from binpack2d.algorithms.local_search import LocalSearchOptimizer
from binpack2d.core.errors import PackingError
from binpack2d.core.models import Solution
from binpack2d.monitoring.metrics import (
    ContainerMetrics,
    ExperimentMetrics,
    RunMetrics,
    export_to_csv,
    export_to_json,
    print_summary,
)
from binpack2d.monitoring.progress import LoggingProgress
from binpack2d.monitoring.report import print_solution
from binpack2d.monitoring.telegram_notifier import (
    format_error,
    format_experiment_start,
    format_final_summary,
    format_run_complete,
    send_telegram,
)
from binpack2d.runner.config import RunConfig, load_config
from binpack2d.runner.dataset import ProblemInstance, generate_instance


logger = logging.getLogger(__name__)


class ExperimentRunner:
    """
    Experiment orchestrator.

    Generates every configured instance, packs it with each selection
    strategy, optionally improves the result with local search, collects
    metrics and sends progress updates.
    """

    def __init__(self, config: RunConfig, show_solutions: bool = False):
        """
        Initialize experiment runner.

        Args:
            config: Validated run configuration
            show_solutions: Print each final solution to stdout
        """
        self.config = config
        self.show_solutions = show_solutions
        self.results_dir = Path(config.results_dir)
        self.results_dir.mkdir(parents=True, exist_ok=True)

    @property
    def algorithm(self) -> str:
        return "FFD+LocalSearch" if self.config.local_search else "FFD"

    async def run_experiment(self) -> ExperimentMetrics:
        """
        Run all (instance, strategy) combinations.

        Returns:
            ExperimentMetrics with aggregated results

        A run that fails with a PackingError is logged, counted and
        reported; the remaining runs still execute.
        """
        experiment_id = f"exp_{datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')}"
        strategies = self.config.strategies
        metrics = ExperimentMetrics(
            experiment_id=experiment_id,
            algorithm=self.algorithm,
            total_runs=len(self.config.instances) * len(strategies),
        )

        await self._notify(format_experiment_start(
            total_runs=metrics.total_runs,
            instance_count=len(self.config.instances),
            strategies=strategies,
            local_search=self.config.local_search,
        ))

        for params in self.config.instances:
            try:
                instance = generate_instance(**params.model_dump())
            except PackingError as e:
                logger.error("Instance %d could not be generated: %s", params.instance_id, e)
                for _ in strategies:
                    metrics.record_error()
                await self._notify(format_error(type(e).__name__, str(e), {"instance_id": params.instance_id}))
                continue

            logger.info(
                "Instance %d: %d rectangles, density %.2f, %s",
                instance.instance_id, instance.rectangle_count,
                instance.packing_density, instance.size_statistics(),
            )

            for strategy in strategies:
                try:
                    run, solution = self.run_single(instance, strategy)
                except PackingError as e:
                    logger.error("Run failed (instance %d, %s): %s", instance.instance_id, strategy, e)
                    metrics.record_error()
                    await self._notify(format_error(
                        type(e).__name__, str(e),
                        {"instance_id": instance.instance_id, "strategy": strategy},
                    ))
                    continue

                metrics.add_run(run, [
                    ContainerMetrics.from_container(c, strategy, instance.instance_id)
                    for c in solution.containers
                ])
                if self.show_solutions:
                    print(f"\nInstance {instance.instance_id} ({strategy}):")
                    print_solution(solution)

                await self._notify(format_run_complete(
                    instance_id=run.instance_id,
                    strategy=run.strategy,
                    greedy_containers=run.greedy_containers,
                    optimized_containers=run.optimized_containers,
                    lower_bound=run.area_lower_bound,
                ))

        metrics.mark_complete()
        self._save_results(metrics)

        await self._notify(format_final_summary(
            total_runs=len(metrics.runs),
            total_containers=metrics.total_containers,
            avg_utilization=metrics.avg_utilization_pct,
            runtime_seconds=metrics.runtime_seconds,
            errors=metrics.errors_count,
        ))

        print(print_summary(metrics))
        return metrics

    def run_single(self, instance: ProblemInstance, strategy: str) -> tuple[RunMetrics, Solution]:
        """
        Pack one instance with one strategy.

        Returns:
            Run metrics and the final solution

        Raises:
            PackingError: If the engine rejects the instance
        """
        observer = LoggingProgress()
        packer = GreedyPacker(instance.box_length, strategy, observer=observer)
        greedy_solution = packer.pack(instance.rectangles)

        run = RunMetrics(
            instance_id=instance.instance_id,
            strategy=packer.strategy.value,
            rectangles=instance.rectangle_count,
            greedy_containers=greedy_solution.container_count,
            optimized_containers=greedy_solution.container_count,
            area_lower_bound=instance.area_lower_bound,
            greedy_seconds=packer.elapsed_seconds,
        )
        if not self.config.local_search:
            return run, greedy_solution

        optimizer = LocalSearchOptimizer(observer=observer, max_passes=self.config.max_passes)
        solution = optimizer.optimize(greedy_solution)
        run.optimized_containers = solution.container_count
        run.search_seconds = optimizer.stats.elapsed_seconds
        run.search_passes = optimizer.stats.passes
        run.search_moves = optimizer.stats.moves
        run.cycle_detected = optimizer.stats.cycle_detected
        return run, solution

    async def _notify(self, message: str) -> None:
        if self.config.send_telegram:
            await send_telegram(message)

    def _save_results(self, metrics: ExperimentMetrics) -> None:
        """Save metrics to JSON and CSV files."""
        json_path = self.results_dir / f"{metrics.experiment_id}.json"
        csv_path = self.results_dir / f"{metrics.experiment_id}_containers.csv"
        export_to_json(metrics, json_path)
        export_to_csv(metrics, csv_path)
        logger.info("Saved results to %s and %s", json_path, csv_path)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run 2D bin packing experiments")
    parser.add_argument("--config", required=True, help="YAML run configuration")
    parser.add_argument("--results-dir", help="Override results directory")
    parser.add_argument("--no-telegram", action="store_true", help="Disable Telegram notifications")
    parser.add_argument("--no-local-search", action="store_true", help="Greedy only")
    parser.add_argument("--show-solutions", action="store_true", help="Print every final solution")
    parser.add_argument("--log-level", help="Override log level (DEBUG, INFO, ...)")
    return parser


async def main(argv: Optional[list[str]] = None) -> ExperimentMetrics:
    """
    Main entry point for running experiments.

    Args:
        argv: Command-line arguments (default: sys.argv[1:])
    """
    args = build_parser().parse_args(argv)
    config = load_config(args.config)

    updates = {}
    if args.results_dir:
        updates["results_dir"] = args.results_dir
    if args.no_telegram:
        updates["send_telegram"] = False
    if args.no_local_search:
        updates["local_search"] = False
    if args.log_level:
        updates["log_level"] = args.log_level.upper()
    if updates:
        config = config.model_copy(update=updates)

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    runner = ExperimentRunner(config, show_solutions=args.show_solutions)
    return await runner.run_experiment()


def cli() -> None:
    try:
        asyncio.run(main())
    except PackingError as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    cli()
