"""Lightweight Telegram notifications for packing experiments.

Sends plain-text messages to a Telegram chat via the Bot API for:
- Experiment start
- Completion of each (instance, strategy) run
- Errors
- Final results summary

No retry logic; notifications are non-critical and never raise.
"""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx


logger = logging.getLogger(__name__)

TELEGRAM_API = "https://api.telegram.org/bot{token}/sendMessage"


async def send_telegram(
    message: str,
    chat_id: str | None = None,
    token: str | None = None,
    timeout: float = 10.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> bool:
    """Send a plain-text message to a Telegram chat.

    Args:
        message: Text to send.
        chat_id: Telegram chat ID. Defaults to TELEGRAM_CHAT_ID env var.
        token: Bot token. Defaults to TELEGRAM_BOT_TOKEN env var.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport, e.g. a MockTransport in tests.

    Returns:
        True if the API accepted the message, False if unconfigured or failed.
    """
    token = token or os.environ.get("TELEGRAM_BOT_TOKEN", "")
    chat_id = chat_id or os.environ.get("TELEGRAM_CHAT_ID", "")
    if not token or not chat_id:
        logger.debug("Telegram not configured, message dropped")
        return False

    url = TELEGRAM_API.format(token=token)
    payload = {"chat_id": chat_id, "text": message}

    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            resp = await client.post(url, json=payload)
            data = resp.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Telegram notification failed: %s", e)
        return False
    if not isinstance(data, dict):
        logger.warning("Telegram notification failed: unexpected response %r", data)
        return False
    return bool(data.get("ok", False))


def format_experiment_start(
    total_runs: int,
    instance_count: int,
    strategies: list[str],
    local_search: bool,
) -> str:
    """Format experiment start notification message.

    Example:
        >>> print(format_experiment_start(6, 2, ["area_desc", "width_desc", "height_desc"], True))
        Experiment Started
        Runs: 6 (2 instances x 3 strategies)
        Strategies: area_desc, width_desc, height_desc
        Local search: on
    """
    return (
        f"Experiment Started\n"
        f"Runs: {total_runs} ({instance_count} instances x {len(strategies)} strategies)\n"
        f"Strategies: {', '.join(strategies)}\n"
        f"Local search: {'on' if local_search else 'off'}"
    )


def format_run_complete(
    instance_id: int,
    strategy: str,
    greedy_containers: int,
    optimized_containers: int,
    lower_bound: int,
) -> str:
    """Format the notification for one finished run.

    Example:
        >>> print(format_run_complete(3, "area_desc", 12, 11, 10))
        Run Complete
        Instance: #3 (area_desc)
        Containers: 12 -> 11 (lower bound 10)
    """
    return (
        f"Run Complete\n"
        f"Instance: #{instance_id} ({strategy})\n"
        f"Containers: {greedy_containers} -> {optimized_containers} (lower bound {lower_bound})"
    )


def format_error(error_type: str, error_message: str, context: dict[str, Any] | None = None) -> str:
    """Format error notification message.

    Example:
        >>> print(format_error("InfeasibleItemError", "too big", {"instance_id": 2}))
        Error: InfeasibleItemError
        too big
        Context: instance_id=2
    """
    lines = [f"Error: {error_type}", error_message]
    if context:
        ctx_str = ", ".join(f"{k}={v}" for k, v in context.items())
        lines.append(f"Context: {ctx_str}")
    return "\n".join(lines)


def format_final_summary(
    total_runs: int,
    total_containers: int,
    avg_utilization: float,
    runtime_seconds: float,
    errors: int,
) -> str:
    """Format final experiment results summary.

    Example:
        >>> print(format_final_summary(6, 40, 81.25, 1.5, 0))
        Experiment Complete
        Runs: 6
        Containers: 40
        Avg Utilization: 81.2%
        Runtime: 1.50 s
        Errors: 0
    """
    return (
        f"Experiment Complete\n"
        f"Runs: {total_runs}\n"
        f"Containers: {total_containers}\n"
        f"Avg Utilization: {avg_utilization:.1f}%\n"
        f"Runtime: {runtime_seconds:.2f} s\n"
        f"Errors: {errors}"
    )
