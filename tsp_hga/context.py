from typing import Callable, List, Sequence

import numpy as np

from .errors import IncompatiblePointKindError, InvalidInputError
from .geometry import Point


FitnessFunction = Callable[[float], float]

UNKNOWN = -1.0


def default_fitness(length: float) -> float:
    return 1.0 / (length + 1e-3)


class SolverContext:
    """
    State shared by every operator while one TSP instance is being solved:
    the points, the fitness function and a distance matrix that is filled
    lazily, pair by pair, or all at once by ``full_distances``.

    A context belongs to a single solver thread and is never shared.
    """

    def __init__(self, points: Sequence[Point], fitness_function: FitnessFunction = default_fitness, name: str = ""):
        if not points:
            raise InvalidInputError("a TSP instance needs at least one point")
        kind = type(points[0])
        for p in points:
            if type(p) is not kind:
                raise IncompatiblePointKindError(
                    f"mixed point kinds in one instance: {kind.__name__} and {type(p).__name__}"
                )
        for idx, p in enumerate(points, start=1):
            if p.order != idx:
                raise InvalidInputError(f"point orders must run 1..N, got {p.order} at position {idx}")
        self.name = name
        self.points: List[Point] = list(points)
        self.fitness_function = fitness_function
        self.kind = kind
        n = len(self.points)
        self.dist = np.full((n, n), UNKNOWN)
        np.fill_diagonal(self.dist, 0.0)
        self.fully_computed = False

    @property
    def size(self) -> int:
        return len(self.points)

    @property
    def planar(self) -> bool:
        return self.kind.planar

    def point(self, order: int) -> Point:
        return self.points[order - 1]

    def distance(self, a: int, b: int) -> float:
        """Distance between the points with 1-based orders ``a`` and ``b``."""
        d = self.dist[a - 1, b - 1]
        if d == UNKNOWN:
            d = self.points[a - 1].distance_to(self.points[b - 1])
            self.dist[a - 1, b - 1] = d
            self.dist[b - 1, a - 1] = d
        return float(d)

    def full_distances(self) -> np.ndarray:
        if not self.fully_computed:
            self.dist = self.kind.pairwise(self.points)
            np.fill_diagonal(self.dist, 0.0)
            self.fully_computed = True
        return self.dist

    def fitness(self, length: float) -> float:
        return self.fitness_function(length)
