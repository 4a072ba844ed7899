import random
from typing import List, Optional

from ..context import SolverContext
from ..errors import IllegalConfigurationError, MalformedGenotypeError
from ..tour import Tour
from .base import CrossoverOperator


class SinglePointCrossover(CrossoverOperator):
    """
    Swaps the alleles at one differing locus, then follows the chain of
    forced swaps that keeps both children permutations. At most
    ``number_of_loci`` loci change in each child.
    """

    name = "single_point"

    def __init__(self, weight: int = 1, number_of_loci: int = 1, rng: Optional[random.Random] = None):
        super().__init__(weight, rng)
        if number_of_loci < 0:
            raise IllegalConfigurationError(f"number_of_loci must not be negative, got {number_of_loci}")
        self.number_of_loci = number_of_loci

    def crossover(self, context: SolverContext, first: Tour, second: Tour) -> List[Tour]:
        if first == second:
            return [first, second]
        gene1 = first.genes()
        gene2 = second.genes()
        if len(gene1) != len(gene2):
            raise MalformedGenotypeError(f"parents differ in size: {len(gene1)} != {len(gene2)}")
        size = len(gene1)
        loci = min(self.number_of_loci, size)

        idx = self.rng.choice([i for i in range(size) if gene1[i] != gene2[i]])
        target = gene2.index(gene1[idx])
        for step in range(1, loci + 1):
            if step == loci:
                gene1[idx], gene2[target] = gene2[target], gene1[idx]
                break
            gene1[idx], gene2[idx] = gene2[idx], gene1[idx]
            if idx == target:
                break
            # Follow the value just swapped into gene1 to its other occurrence.
            value = gene1[idx]
            idx = next(f for f in range(size) if f != idx and gene1[f] == value)
        return [Tour(gene1, context), Tour(gene2, context)]


class SectionCrossover(CrossoverOperator):
    """Exchanges the tail section of both parents, repairing duplicates as it goes."""

    name = "section"

    def crossover(self, context: SolverContext, first: Tour, second: Tour) -> List[Tour]:
        gene1 = first.genes()
        gene2 = second.genes()
        begin = self.rng.randrange(len(gene1))
        for i in range(begin, len(gene1)):
            idx1 = gene1.index(gene2[i])
            idx2 = gene2.index(gene1[i])
            gene1[i], gene2[i] = gene2[i], gene1[i]
            gene1[idx1], gene2[idx2] = gene2[idx2], gene1[idx1]
        return [Tour(gene1, context), Tour(gene2, context)]


class NearestNeighborCrossover(CrossoverOperator):
    """
    Builds two children from random starts. The next point is the nearest
    unvisited neighbour of the current one in either parent; when all four
    are visited, the nearest unvisited point overall.
    """

    name = "nearest_neighbor"

    def crossover(self, context: SolverContext, first: Tour, second: Tour) -> List[Tour]:
        dist = context.full_distances()
        size = context.size
        gene1 = first.order
        gene2 = second.order
        pos1 = {v: i for i, v in enumerate(gene1)}
        pos2 = {v: i for i, v in enumerate(gene2)}

        offspring = []
        for _ in range(2):
            last = self.rng.randint(1, size)
            order = [last]
            unvisited = set(range(1, size + 1))
            unvisited.remove(last)
            while unvisited:
                i1, i2 = pos1[last], pos2[last]
                neighbours = (
                    gene1[i1 - 1],
                    gene2[i2 - 1],
                    gene1[(i1 + 1) % size],
                    gene2[(i2 + 1) % size],
                )
                pool = [o for o in neighbours if o in unvisited] or unvisited
                last = min(pool, key=lambda o: dist[last - 1, o - 1])
                order.append(last)
                unvisited.remove(last)
            offspring.append(Tour(order, context))
        return offspring
