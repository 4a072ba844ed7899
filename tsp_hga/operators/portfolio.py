import random
from dataclasses import dataclass, field
from typing import List, Optional

from .base import CrossoverOperator, GeneratingOperator, MutationOperator, SelectionOperator
from .crossover import NearestNeighborCrossover, SectionCrossover, SinglePointCrossover
from .generators import (
    ConvexHullConstrictionGenerator,
    ConvexHullDivisionGenerator,
    NearestKNeighborsGenerator,
    RandomGenerator,
    ShortestKEdgeGenerator,
)
from .mutation import MultiPointMutation, RangeReversingMutation
from .selection import RouletteSelection


@dataclass
class Portfolio:
    generators: List[GeneratingOperator] = field(default_factory=list)
    crossovers: List[CrossoverOperator] = field(default_factory=list)
    mutations: List[MutationOperator] = field(default_factory=list)
    selectors: List[SelectionOperator] = field(default_factory=list)


def _loci(size: int, fraction: float, least: int = 1) -> int:
    return max(least, int(size * fraction))


def default_portfolio(size: int, rng: Optional[random.Random] = None) -> Portfolio:
    """Weighted operators tuned for an instance of ``size`` points."""
    rng = rng or random.Random()
    return Portfolio(
        generators=[
            RandomGenerator(4, rng=rng),
            NearestKNeighborsGenerator(18, k=1, rng=rng),
            ShortestKEdgeGenerator(12, k=2, rng=rng),
            ConvexHullConstrictionGenerator(48, k=3, rng=rng),
            ConvexHullDivisionGenerator(18, rng=rng),
        ],
        crossovers=[
            SinglePointCrossover(10, _loci(size, 0.050), rng=rng),
            SinglePointCrossover(10, _loci(size, 0.100), rng=rng),
            SinglePointCrossover(10, _loci(size, 0.300), rng=rng),
            SectionCrossover(10, rng=rng),
            NearestNeighborCrossover(60, rng=rng),
        ],
        mutations=[
            MultiPointMutation(10, _loci(size, 0.050, least=2), rng=rng),
            MultiPointMutation(10, _loci(size, 0.125, least=2), rng=rng),
            RangeReversingMutation(10, _loci(size, 0.125), rng=rng),
            RangeReversingMutation(20, _loci(size, 0.250), rng=rng),
            RangeReversingMutation(50, _loci(size, 0.650), rng=rng),
        ],
        selectors=[RouletteSelection(100, rng=rng)],
    )
