import random
from typing import Optional

from ..context import SolverContext
from ..errors import IllegalConfigurationError
from ..tour import Tour
from .base import MutationOperator


class MultiPointMutation(MutationOperator):
    """Picks between 2 and ``number_of_loci`` loci and shuffles their alleles among them."""

    name = "multi_point"

    def __init__(self, weight: int = 1, number_of_loci: int = 2, rng: Optional[random.Random] = None):
        super().__init__(weight, rng)
        if number_of_loci < 2:
            raise IllegalConfigurationError(f"multi-point mutation needs at least 2 loci, got {number_of_loci}")
        self.number_of_loci = number_of_loci

    def mutate(self, context: SolverContext, tour: Tour) -> Tour:
        gene = tour.genes()
        most = min(self.number_of_loci, len(gene))
        if most < 2:
            return Tour(gene, context)
        loci = self.rng.sample(range(len(gene)), self.rng.randint(2, most))
        alleles = [gene[i] for i in loci]
        self.rng.shuffle(alleles)
        for locus, allele in zip(loci, alleles):
            gene[locus] = allele
        return Tour(gene, context)


class RangeReversingMutation(MutationOperator):
    """Reverses a random contiguous range of at most ``range_width`` loci."""

    name = "range_reversing"

    def __init__(self, weight: int = 1, range_width: int = 2, rng: Optional[random.Random] = None):
        super().__init__(weight, rng)
        if range_width < 1:
            raise IllegalConfigurationError(f"range_width must be at least 1, got {range_width}")
        self.range_width = range_width

    def mutate(self, context: SolverContext, tour: Tour) -> Tour:
        gene = tour.genes()
        left = self.rng.randrange(len(gene))
        # Both ends are included.
        right = left + self.rng.randrange(min(len(gene) - left, self.range_width))
        gene[left:right + 1] = gene[left:right + 1][::-1]
        return Tour(gene, context)
