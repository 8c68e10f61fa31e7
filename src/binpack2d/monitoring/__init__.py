"""Monitoring module for binpack2d.

Provides progress observers, text reports, metrics tracking and Telegram
notifications for packing experiments.
"""

from .metrics import (
    ContainerMetrics,
    ExperimentMetrics,
    RunMetrics,
    export_to_csv,
    export_to_json,
    print_summary,
)
from .progress import LoggingProgress, ProgressBar, ProgressObserver
from .report import format_container, format_solution, print_solution
from .telegram_notifier import (
    format_error,
    format_experiment_start,
    format_final_summary,
    format_run_complete,
    send_telegram,
)

__all__ = [
    # Metrics
    "ContainerMetrics",
    "RunMetrics",
    "ExperimentMetrics",
    "export_to_csv",
    "export_to_json",
    "print_summary",
    # Progress
    "ProgressObserver",
    "LoggingProgress",
    "ProgressBar",
    # Reports
    "format_solution",
    "format_container",
    "print_solution",
    # Telegram
    "send_telegram",
    "format_experiment_start",
    "format_run_complete",
    "format_error",
    "format_final_summary",
]
