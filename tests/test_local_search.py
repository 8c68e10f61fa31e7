"""
Tests for the local search consolidation.

Tests cover:
- Fixed scenarios from greedy output
- Consolidation of hand-built solutions, move by move
- Conservation, capacity and non-increase on generated instances
- Input immutability and determinism
- Termination on cyclic move sequences and max_passes
"""

from collections import Counter

import pytest

from binpack2d import (
    Container,
    InvalidInputError,
    LocalSearchOptimizer,
    Rectangle,
    SelectionStrategy,
    Solution,
    greedy_pack,
    local_search,
)
from binpack2d.algorithms.local_search import _assignment_key
from binpack2d.monitoring.progress import ProgressObserver
from binpack2d.runner.dataset import generate_instance


def dims(solution):
    return [[(r.width, r.height) for r in c.members] for c in solution.containers]


def build_solution(edge, *contents):
    """Solution with one container per tuple of (w, h) pairs."""
    containers = []
    for i, members in enumerate(contents):
        c = Container(edge, container_id=i)
        for w, h in members:
            c.add(Rectangle(w, h))
        containers.append(c)
    return Solution(edge_length=edge, containers=containers)


class PassRecorder(ProgressObserver):
    def __init__(self):
        self.passes = []

    def on_pass_complete(self, pass_number, moved, container_count):
        self.passes.append((pass_number, moved, container_count))


# ---------------------------------------------------------------------------
# 1. Scenarios
# ---------------------------------------------------------------------------

class TestScenarios:
    def test_single_container_unchanged(self):
        greedy = greedy_pack([Rectangle(6, 6), Rectangle(6, 6)], 10)
        optimizer = LocalSearchOptimizer()
        result = optimizer.optimize(greedy)
        assert result.container_count == 1
        assert dims(result) == dims(greedy)
        assert optimizer.stats.passes == 1
        assert optimizer.stats.moves == 0
        assert optimizer.stats.converged

    def test_two_large_rectangles_converge_immediately(self):
        greedy = greedy_pack([Rectangle(9, 9), Rectangle(9, 9)], 10)
        optimizer = LocalSearchOptimizer()
        result = optimizer.optimize(greedy)
        assert result.container_count == 2
        assert optimizer.stats.passes == 1
        assert optimizer.stats.moves == 0
        assert optimizer.stats.converged

    @pytest.mark.parametrize("strategy", list(SelectionStrategy))
    def test_single_rectangle(self, strategy):
        result = local_search(greedy_pack([Rectangle(18, 18)], 20, strategy))
        assert result.container_count == 1
        assert result.containers[0].used_area() == 324

    def test_empty_solution(self):
        result = local_search(Solution(edge_length=10))
        assert result.container_count == 0


# ---------------------------------------------------------------------------
# 2. Move semantics
# ---------------------------------------------------------------------------

class TestMoves:
    def test_consolidates_three_into_one(self):
        sol = build_solution(10, [(3, 10)], [(3, 10)], [(3, 10)])
        optimizer = LocalSearchOptimizer()
        result = optimizer.optimize(sol)

        assert result.container_count == 1
        assert result.containers[0].id == 2
        assert dims(result) == [[(3, 10), (3, 10), (3, 10)]]
        assert optimizer.stats.moves == 3
        assert optimizer.stats.passes == 4
        assert optimizer.stats.containers_removed == 2
        assert optimizer.stats.converged

    def test_move_accepted_without_reducing_count(self):
        # The 60 moves out first although its container keeps the 10
        sol = build_solution(10, [(6, 10), (1, 10)], [(2, 10)])
        optimizer = LocalSearchOptimizer(max_passes=1)
        result = optimizer.optimize(sol)

        assert result.container_count == 2
        assert dims(result) == [[(1, 10)], [(2, 10), (6, 10)]]
        assert optimizer.stats.moves == 1
        assert not optimizer.stats.converged

    def test_continues_until_container_empties(self):
        sol = build_solution(10, [(6, 10), (1, 10)], [(2, 10)])
        result = local_search(sol)
        assert dims(result) == [[(2, 10), (6, 10), (1, 10)]]

    def test_one_move_per_pass(self):
        sol = build_solution(10, [(1, 10), (1, 10), (1, 10)], [(1, 10)])
        recorder = PassRecorder()
        local_search(sol, observer=recorder)
        # First pass moves a single rectangle out of the first container
        assert recorder.passes[0] == (1, True, 2)
        assert recorder.passes[-1][1] is False

    def test_target_is_first_container_with_room(self):
        sol = build_solution(10, [(10, 10)], [(5, 10)], [(6, 10)], [(2, 10)])
        optimizer = LocalSearchOptimizer(max_passes=1)
        result = optimizer.optimize(sol)
        # The full container's item fits nowhere; the 50 skips itself and
        # container 2 (40 left) and lands in container 3
        assert dims(result) == [[(10, 10)], [(6, 10)], [(2, 10), (5, 10)]]
        assert [c.id for c in result.containers] == [0, 2, 3]


# ---------------------------------------------------------------------------
# 3. Properties on generated instances
# ---------------------------------------------------------------------------

@pytest.fixture(params=[
    (1, SelectionStrategy.AREA_DESC),
    (2, SelectionStrategy.WIDTH_DESC),
    (3, SelectionStrategy.HEIGHT_DESC),
])
def greedy_solution(request):
    instance_id, strategy = request.param
    instance = generate_instance(
        instance_id=instance_id, box_length=20, num_rectangles=60,
        min_width=1, max_width=14, min_height=1, max_height=14,
    )
    return greedy_pack(instance.rectangles, instance.box_length, strategy)


class TestProperties:
    def test_conservation(self, greedy_solution):
        result = local_search(greedy_solution)
        assert Counter(result.rectangles()) == Counter(greedy_solution.rectangles())

    def test_capacity_respected(self, greedy_solution):
        result = local_search(greedy_solution)
        for c in result.containers:
            assert sum(r.area for r in c.members) <= c.capacity
            assert c.remaining_area == c.capacity - sum(r.area for r in c.members)
            assert not c.is_empty()

    def test_non_increase(self, greedy_solution):
        result = local_search(greedy_solution)
        assert result.container_count <= greedy_solution.container_count

    def test_input_not_mutated(self, greedy_solution):
        before = dims(greedy_solution)
        remaining = [c.remaining_area for c in greedy_solution.containers]
        local_search(greedy_solution)
        assert dims(greedy_solution) == before
        assert [c.remaining_area for c in greedy_solution.containers] == remaining

    def test_deterministic(self, greedy_solution):
        assert dims(local_search(greedy_solution)) == dims(local_search(greedy_solution))

    def test_stops(self, greedy_solution):
        optimizer = LocalSearchOptimizer()
        optimizer.optimize(greedy_solution)
        assert optimizer.stats.converged or optimizer.stats.cycle_detected


# ---------------------------------------------------------------------------
# 4. Termination guards
# ---------------------------------------------------------------------------

class TestTermination:
    def test_cycle_detected(self, ping_pong_solution):
        optimizer = LocalSearchOptimizer()
        result = optimizer.optimize(ping_pong_solution)

        assert optimizer.stats.cycle_detected
        assert not optimizer.stats.converged
        assert optimizer.stats.passes == 4
        assert optimizer.stats.moves == 4
        assert result.container_count == 2
        assert Counter(result.rectangles()) == Counter(ping_pong_solution.rectangles())

    def test_max_passes(self, ping_pong_solution):
        optimizer = LocalSearchOptimizer(max_passes=2)
        result = optimizer.optimize(ping_pong_solution)
        assert optimizer.stats.passes == 2
        assert not optimizer.stats.converged
        assert not optimizer.stats.cycle_detected
        assert result.container_count == 2

    @pytest.mark.parametrize("max_passes", [0, -1])
    def test_invalid_max_passes(self, max_passes):
        with pytest.raises(InvalidInputError):
            LocalSearchOptimizer(max_passes=max_passes)

    def test_stats_to_dict(self, ping_pong_solution):
        optimizer = LocalSearchOptimizer()
        optimizer.optimize(ping_pong_solution)
        d = optimizer.stats.to_dict()
        assert d["moves"] == 4
        assert d["cycle_detected"] is True

    def test_assignment_key_size_is_fixed(self):
        small = build_solution(10, [(1, 1)])
        large = build_solution(10, *([[(1, 1)] * 50] * 40))
        assert len(_assignment_key(small.containers)) == 16
        assert len(_assignment_key(large.containers)) == 16

    def test_assignment_key_tracks_layout(self):
        a = build_solution(10, [(3, 3), (2, 2)], [(5, 5)])
        b = build_solution(10, [(3, 3), (2, 2)], [(5, 5)])
        moved = build_solution(10, [(3, 3)], [(5, 5), (2, 2)])
        reordered = build_solution(10, [(2, 2), (3, 3)], [(5, 5)])
        assert _assignment_key(a.containers) == _assignment_key(b.containers)
        assert _assignment_key(a.containers) != _assignment_key(moved.containers)
        assert _assignment_key(a.containers) != _assignment_key(reordered.containers)
