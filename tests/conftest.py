"""Shared fixtures for the binpack2d test suite."""

import os
import sys

import pytest

# Make the src/ layout importable without installing the package
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from binpack2d import Rectangle, SizeBounds  # noqa: E402


@pytest.fixture
def bounds():
    """Bounds wide enough for every hand-written rectangle in the tests."""
    return SizeBounds(min_width=1, max_width=20, min_height=1, max_height=20)


@pytest.fixture
def mixed_rectangles():
    """A small instance with area ties, for a 10x10 container."""
    dims = [(3, 4), (6, 6), (2, 6), (5, 5), (4, 3), (9, 2), (1, 1), (7, 3), (6, 2), (2, 2)]
    return [Rectangle(w, h) for w, h in dims]


@pytest.fixture
def ping_pong_solution():
    """Containers whose consolidation moves a 30-area item back and forth."""
    from binpack2d import Container, Solution

    a, b, c = Container(10, 0), Container(10, 1), Container(10, 2)
    a.add(Rectangle(6, 10))
    b.add(Rectangle(3, 10))
    c.add(Rectangle(5, 10))
    return Solution(edge_length=10, containers=[a, b, c])
