import random

import pytest

from tsp_hga.errors import InvalidInputError
from tsp_hga.operators import NearestKNeighborsGenerator, RandomGenerator, RouletteSelection


@pytest.fixture
def mixed_tours(random_context):
    rng = random.Random(31)
    random_tours = [RandomGenerator(rng=rng).generate(random_context) for _ in range(10)]
    greedy_tours = [NearestKNeighborsGenerator(k=2, rng=rng).generate(random_context) for _ in range(10)]
    return random_tours + greedy_tours


def test_selects_exact_target_size(random_context, mixed_tours):
    op = RouletteSelection(rng=random.Random(1))
    selected = op.select(random_context, mixed_tours, 57)
    assert len(selected) == 57
    assert all(t in mixed_tours for t in selected)


def test_non_positive_target_selects_nothing(random_context, mixed_tours):
    op = RouletteSelection()
    assert op.select(random_context, mixed_tours, 0) == []
    assert op.select(random_context, mixed_tours, -2) == []


def test_empty_population_is_rejected(random_context):
    with pytest.raises(InvalidInputError):
        RouletteSelection().select(random_context, [], 3)


def test_fitter_tours_are_picked_more_often(random_context, mixed_tours):
    best = max(mixed_tours, key=lambda t: t.fitness)
    worst = min(mixed_tours, key=lambda t: t.fitness)
    op = RouletteSelection(rng=random.Random(2))
    yes = no = 0
    for _ in range(60):
        selected = op.select(random_context, mixed_tours, 1000)
        best_count = sum(t is best for t in selected)
        worst_count = sum(t is worst for t in selected)
        if best_count > worst_count:
            yes += 1
        else:
            no += 1
    assert yes >= 10 * no
