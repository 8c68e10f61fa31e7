"""Packing algorithms: selection strategies, greedy first-fit, local search."""

from .greedy import GreedyPacker, greedy_pack
from .local_search import LocalSearchOptimizer, SearchStats, local_search
from .selection import ORDERING_STRATEGIES, SelectionStrategy, get_selection_strategy

__all__ = [
    "SelectionStrategy",
    "ORDERING_STRATEGIES",
    "get_selection_strategy",
    "GreedyPacker",
    "greedy_pack",
    "LocalSearchOptimizer",
    "SearchStats",
    "local_search",
]
