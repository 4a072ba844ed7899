import heapq
import random
from typing import Callable, List, Optional, Sequence

import numpy as np
from networkx.utils import UnionFind

from ..context import SolverContext
from ..errors import IllegalConfigurationError
from ..geometry import Point, approximate_convex_hull, convex_hull
from ..tour import Tour
from .base import GeneratingOperator


HullFunction = Callable[[Sequence[Point]], List[Point]]


def insertion_costs(dist: np.ndarray, cycle: np.ndarray, candidates: np.ndarray) -> np.ndarray:
    """
    Distance increment of inserting each candidate after each cycle position.

    ``cycle`` and ``candidates`` hold 0-based indices; the result has one row
    per cycle edge (cycle[i] -> cycle[i + 1]) and one column per candidate.
    """
    succ = np.roll(cycle, -1)
    return dist[np.ix_(cycle, candidates)] + dist[np.ix_(succ, candidates)] - dist[cycle, succ][:, None]


def _hull_for(context: SolverContext) -> HullFunction:
    # The exact hull needs planar coordinates.
    return convex_hull if context.planar else approximate_convex_hull


def _check_k(name: str, k: int) -> int:
    if k < 1:
        raise IllegalConfigurationError(f"{name} needs k >= 1, got {k}")
    return k


class RandomGenerator(GeneratingOperator):
    name = "random"

    def generate(self, context: SolverContext) -> Tour:
        order = list(range(1, context.size + 1))
        self.rng.shuffle(order)
        return Tour(order, context)


class NearestKNeighborsGenerator(GeneratingOperator):
    """
    Greedy walk from a random start; each hop goes to one of the k nearest
    unvisited points, picked uniformly.
    """

    name = "nearest_k_neighbors"

    def __init__(self, weight: int = 1, k: int = 1, rng: Optional[random.Random] = None):
        super().__init__(weight, rng)
        self.k = _check_k(self.name, k)

    def generate(self, context: SolverContext) -> Tour:
        start = self.rng.randint(1, context.size)
        order = [start]
        unvisited = set(range(1, context.size + 1))
        unvisited.remove(start)
        current = start
        while unvisited:
            nearest = heapq.nsmallest(self.k, unvisited, key=lambda o: context.distance(current, o))
            current = self.rng.choice(nearest)
            order.append(current)
            unvisited.remove(current)
        return Tour(order, context)


class ShortestKEdgeGenerator(GeneratingOperator):
    """
    Builds the tour edge by edge. Each round keeps the k shortest edges that
    leave a point without a successor, enter a point without a predecessor
    and do not close a cycle early, then commits one of them at random.
    The last round closes the loop.
    """

    name = "shortest_k_edge"

    def __init__(self, weight: int = 1, k: int = 1, rng: Optional[random.Random] = None):
        super().__init__(weight, rng)
        self.k = _check_k(self.name, k)

    def generate(self, context: SolverContext) -> Tour:
        dist = context.full_distances()
        n = context.size
        if n == 1:
            return Tour([1], context)
        successor = [0] * n
        has_out = np.zeros(n, dtype=bool)
        has_in = np.zeros(n, dtype=bool)
        paths = UnionFind(range(n))
        flat = dist.ravel()
        for step in range(n):
            allowed = ~has_out[:, None] & ~has_in[None, :]
            np.fill_diagonal(allowed, False)
            if step != n - 1:
                roots = np.array([paths[i] for i in range(n)])
                allowed &= roots[:, None] != roots[None, :]
            candidates = np.flatnonzero(allowed)
            if len(candidates) > self.k:
                shortest = np.argpartition(flat[candidates], self.k - 1)[: self.k]
                candidates = candidates[shortest]
            src, dst = divmod(int(candidates[self.rng.randrange(len(candidates))]), n)
            successor[src] = dst
            paths.union(src, dst)
            has_out[src] = True
            has_in[dst] = True
        order = []
        p = 0
        for _ in range(n):
            order.append(p + 1)
            p = successor[p]
        return Tour(order, context)


class ConvexHullConstrictionGenerator(GeneratingOperator):
    """
    Starts from the convex hull and keeps inserting points: every remaining
    point gets its cheapest insertion edge, and one of the k cheapest such
    insertions is committed at random.
    """

    name = "convex_hull_constriction"

    def __init__(self, weight: int = 1, k: int = 1, rng: Optional[random.Random] = None):
        super().__init__(weight, rng)
        self.k = _check_k(self.name, k)

    def generate(self, context: SolverContext) -> Tour:
        dist = context.full_distances()
        hull = _hull_for(context)(context.points)
        cycle = [p.order - 1 for p in hull]
        on_hull = set(cycle)
        remaining = [i for i in range(context.size) if i not in on_hull]
        while remaining:
            costs = insertion_costs(dist, np.array(cycle), np.array(remaining))
            edges = costs.argmin(axis=0)
            increments = costs[edges, np.arange(len(remaining))]
            plans = heapq.nsmallest(self.k, range(len(remaining)), key=lambda c: increments[c])
            chosen = self.rng.choice(plans)
            cycle.insert(int(edges[chosen]) + 1, remaining.pop(chosen))
        return Tour([i + 1 for i in cycle], context)


class ConvexHullDivisionGenerator(GeneratingOperator):
    """
    Recursive layered hull decomposition.

    An outer layer is made of a few successively peeled hulls merged by
    cheapest insertion. Every interior point is attached to the outer point
    whose following edge is cheapest to insert it into; each outer point
    with its attached points is then ordered recursively. The sections are
    concatenated in outer-layer order, rotated to the requested start and
    reversed on alternate levels.
    """

    name = "convex_hull_division"

    def generate(self, context: SolverContext) -> Tour:
        dist = context.full_distances()
        hull = _hull_for(context)
        points = [p.order - 1 for p in context.points]
        sequence = self._divide(context, dist, hull, points, points[0], self.rng.random() < 0.5)
        return Tour([i + 1 for i in sequence], context)

    def _divide(
        self,
        context: SolverContext,
        dist: np.ndarray,
        hull: HullFunction,
        members: List[int],
        start: int,
        reverse: bool,
    ) -> List[int]:
        outer = self._peel(context, hull, members)
        taken = set(outer)
        remaining = [i for i in members if i not in taken]

        if not remaining:
            section = outer
        else:
            layers: List[int] = []
            for _ in range(1, self._number_of_layers(len(members))):
                if not remaining:
                    break
                layer = self._peel(context, hull, remaining)
                layers.extend(layer)
                peeled = set(layer)
                remaining = [i for i in remaining if i not in peeled]
            outer = self._insert_cheapest(dist, layers, outer)

            buckets = [[i] for i in outer]
            if remaining:
                costs = insertion_costs(dist, np.array(outer), np.array(remaining))
                for point, edge in zip(remaining, costs.argmin(axis=0)):
                    buckets[int(edge)].append(point)
            section = []
            for bucket in buckets:
                section.extend(self._divide(context, dist, hull, bucket, bucket[0], not reverse))

        at = section.index(start)
        section = section[at:] + section[:at]
        if reverse:
            section = section[:1] + section[:0:-1]
        return section

    @staticmethod
    def _peel(context: SolverContext, hull: HullFunction, members: List[int]) -> List[int]:
        return [p.order - 1 for p in hull([context.points[i] for i in members])]

    @staticmethod
    def _insert_cheapest(dist: np.ndarray, points: List[int], outer: List[int]) -> List[int]:
        outer = list(outer)
        points = list(points)
        while points:
            costs = insertion_costs(dist, np.array(outer), np.array(points))
            edge, column = np.unravel_index(int(costs.argmin()), costs.shape)
            outer.insert(int(edge) + 1, points.pop(int(column)))
        return outer

    def _number_of_layers(self, size: int) -> int:
        bands = ((50, 1), (100, 3), (500, 5), (1500, 7), (2000, 9), (3000, 11))
        for limit, low in bands:
            if size <= limit:
                return low + self.rng.randrange(low + 1)
        return 25
