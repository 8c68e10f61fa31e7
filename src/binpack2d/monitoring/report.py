"""Human-readable reports of packing solutions."""

from __future__ import annotations

from binpack2d.core.models import Container, Solution


def format_solution(solution: Solution) -> str:
    """Summarize a solution, one line per container.

    Example:
        >>> from binpack2d import Rectangle, greedy_pack
        >>> sol = greedy_pack([Rectangle(6, 6), Rectangle(6, 6)], 10)
        >>> print(format_solution(sol))
        Number of boxes = 1
        Box 1 | Rectangles: 2 | Used area: 72
    """
    lines = [f"Number of boxes = {solution.container_count}"]
    for i, container in enumerate(solution.containers, start=1):
        lines.append(
            f"Box {i} | Rectangles: {container.member_count()} | Used area: {container.used_area()}"
        )
    return "\n".join(lines)


def format_container(container: Container) -> str:
    """Detailed listing of one container and its rectangles."""
    lines = [
        "=== Box Information ===",
        f"Dimensions: {container.edge_length} x {container.edge_length}",
        f"Total Area: {container.capacity}",
        f"Number of Rectangles: {container.member_count()}",
        f"Total Rectangles Area: {container.used_area()}",
        f"Empty Area: {container.remaining_area}",
    ]
    if not container.is_empty():
        lines.append("")
        lines.append("Rectangles in box:")
        for i, rect in enumerate(container.members):
            lines.append(f"  [{i}] Rectangle: {rect.width} x {rect.height} (Area: {rect.area})")
    return "\n".join(lines)


def print_solution(solution: Solution, detailed: bool = False) -> None:
    print(format_solution(solution))
    if detailed:
        for container in solution.containers:
            print()
            print(format_container(container))
