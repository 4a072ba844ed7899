import random

import pytest

from tsp_hga.context import SolverContext
from tsp_hga.errors import IllegalConfigurationError
from tsp_hga.geometry import EucPoint
from tsp_hga.operators import MultiPointMutation, RandomGenerator, RangeReversingMutation

from conftest import is_permutation


def undirected_edges(tour):
    return {frozenset(e) for e in tour.edges()}


@pytest.fixture
def tours(random_context):
    gen = RandomGenerator(rng=random.Random(21))
    return [gen.generate(random_context) for _ in range(20)]


@pytest.mark.parametrize("loci", [2, 3, 8, 100])
def test_multi_point_keeps_permutation(random_context, tours, loci):
    op = MultiPointMutation(number_of_loci=loci, rng=random.Random(loci))
    for tour in tours:
        mutant = op.mutate(random_context, tour)
        assert is_permutation(mutant, 30)
        assert mutant is not tour


def test_multi_point_leaves_parent_untouched(random_context, tours):
    op = MultiPointMutation(number_of_loci=10, rng=random.Random(1))
    before = [t.order for t in tours]
    for tour in tours:
        op.mutate(random_context, tour)
    assert [t.order for t in tours] == before


def test_multi_point_eventually_changes_something(random_context, tours):
    op = MultiPointMutation(number_of_loci=5, rng=random.Random(2))
    assert any(op.mutate(random_context, t) != t for t in tours)


def test_multi_point_on_single_point_instance():
    ctx = SolverContext([EucPoint(1, 0, 0)])
    tour = RandomGenerator().generate(ctx)
    assert MultiPointMutation(number_of_loci=3).mutate(ctx, tour).order == (1,)


def test_multi_point_needs_two_loci():
    with pytest.raises(IllegalConfigurationError):
        MultiPointMutation(number_of_loci=1)


def test_range_reversing_keeps_permutation(random_context, tours):
    op = RangeReversingMutation(range_width=10, rng=random.Random(3))
    for tour in tours:
        assert is_permutation(op.mutate(random_context, tour), 30)


def test_range_reversing_preserves_edges_outside_range(random_context, tours):
    op = RangeReversingMutation(range_width=4, rng=random.Random(4))
    for tour in tours:
        mutant = op.mutate(random_context, tour)
        # A reversal replaces at most two edges of the cycle.
        assert len(undirected_edges(tour) - undirected_edges(mutant)) <= 2


def test_range_reversing_of_width_one_is_identity(random_context, tours):
    op = RangeReversingMutation(range_width=1, rng=random.Random(5))
    assert all(op.mutate(random_context, t) == t for t in tours)


def test_range_width_must_be_positive():
    with pytest.raises(IllegalConfigurationError):
        RangeReversingMutation(range_width=0)
