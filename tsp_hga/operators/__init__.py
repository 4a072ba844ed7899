from .base import (
    CrossoverOperator,
    GeneratingOperator,
    MutationOperator,
    Operator,
    OperatorTable,
    SelectionOperator,
)
from .crossover import NearestNeighborCrossover, SectionCrossover, SinglePointCrossover
from .generators import (
    ConvexHullConstrictionGenerator,
    ConvexHullDivisionGenerator,
    NearestKNeighborsGenerator,
    RandomGenerator,
    ShortestKEdgeGenerator,
)
from .mutation import MultiPointMutation, RangeReversingMutation
from .portfolio import Portfolio, default_portfolio
from .selection import RouletteSelection

__all__ = [
    "Operator",
    "OperatorTable",
    "GeneratingOperator",
    "CrossoverOperator",
    "MutationOperator",
    "SelectionOperator",
    "RandomGenerator",
    "NearestKNeighborsGenerator",
    "ShortestKEdgeGenerator",
    "ConvexHullConstrictionGenerator",
    "ConvexHullDivisionGenerator",
    "SinglePointCrossover",
    "SectionCrossover",
    "NearestNeighborCrossover",
    "MultiPointMutation",
    "RangeReversingMutation",
    "RouletteSelection",
    "Portfolio",
    "default_portfolio",
]
