"""binpack2d: area-based 2D bin packing.

Public API:
    from binpack2d import Rectangle, SizeBounds, Container, Solution
    from binpack2d import greedy_pack, local_search, SelectionStrategy
"""

from .algorithms import (
    GreedyPacker,
    LocalSearchOptimizer,
    SearchStats,
    SelectionStrategy,
    get_selection_strategy,
    greedy_pack,
    local_search,
)
from .core import (
    CapacityViolationError,
    ConfigurationError,
    Container,
    InfeasibleItemError,
    InvalidInputError,
    MemberNotFoundError,
    PackingError,
    Rectangle,
    SizeBounds,
    Solution,
)

__version__ = "0.1.0"

__all__ = [
    "Rectangle",
    "SizeBounds",
    "Container",
    "Solution",
    "SelectionStrategy",
    "get_selection_strategy",
    "GreedyPacker",
    "greedy_pack",
    "LocalSearchOptimizer",
    "SearchStats",
    "local_search",
    "PackingError",
    "ConfigurationError",
    "InvalidInputError",
    "MemberNotFoundError",
    "InfeasibleItemError",
    "CapacityViolationError",
]
