import random

import pytest

from tsp_hga.context import SolverContext
from tsp_hga.geometry import EucPoint, GeoPoint


PLUS_BOUNDARY = [(1, 1), (1, 0), (1, -1), (-1, 1), (-1, 0), (-1, -1), (0, 1), (0, -1)]
PLUS_INTERIOR = [(0, 0), (0.5, 0.5), (-0.9, 0.8), (0.7, -0.4), (-0.1, -0.999)]


def make_points(coords, scale=1.0):
    return [EucPoint(i, x * scale, y * scale) for i, (x, y) in enumerate(coords, start=1)]


def is_permutation(tour, size):
    return sorted(tour.order) == list(range(1, size + 1))


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def plus_points():
    return make_points(PLUS_BOUNDARY + PLUS_INTERIOR, scale=100.0)


@pytest.fixture
def plus_context(plus_points):
    return SolverContext(plus_points, name="plus")


@pytest.fixture
def random_context():
    gen = random.Random(99)
    coords = [(gen.uniform(0, 1000), gen.uniform(0, 1000)) for _ in range(30)]
    return SolverContext(make_points(coords), name="random30")


@pytest.fixture
def geo_context():
    # A handful of European capitals in TSPLIB DDD.MM notation.
    coords = [
        (52.31, 13.24),
        (48.51, 2.21),
        (51.30, -0.07),
        (40.25, -3.42),
        (41.54, 12.29),
        (48.12, 16.22),
        (59.20, 18.04),
        (52.13, 21.01),
        (38.43, -9.08),
        (50.05, 14.25),
    ]
    points = [GeoPoint.from_degrees(i, lat, lon) for i, (lat, lon) in enumerate(coords, start=1)]
    return SolverContext(points, name="capitals")
