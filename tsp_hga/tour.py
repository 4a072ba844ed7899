from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from .context import SolverContext
from .errors import MalformedGenotypeError


class Tour:
    """
    Genotype of one individual: a Hamiltonian path over point orders 1..N.

    The cycle length also counts the edge from the last point back to the
    first. Length and fitness are computed on first access and cached;
    equality and hashing look at the genotype only, so a tour and its
    mirror image compare unequal.
    """

    __slots__ = ("order", "_context", "_length", "_fitness")

    def __init__(self, order: Sequence[int], context: SolverContext, canonicalize: bool = True):
        order = tuple(order)
        if canonicalize and order and order[0] != 1:
            try:
                idx = order.index(1)
            except ValueError:
                raise MalformedGenotypeError("genotype does not contain point order 1") from None
            order = order[idx:] + order[:idx]
        self.order: Tuple[int, ...] = order
        self._context = context
        self._length: Optional[float] = None
        self._fitness: Optional[float] = None

    @property
    def context(self) -> SolverContext:
        return self._context

    @property
    def length(self) -> float:
        if self._length is None:
            if not self.order:
                raise MalformedGenotypeError("empty genotype")
            dist = self._context.full_distances()
            idx = np.asarray(self.order) - 1
            self._length = float(dist[idx, np.roll(idx, -1)].sum())
        return self._length

    @property
    def fitness(self) -> float:
        if self._fitness is None:
            self._fitness = self._context.fitness(self.length)
        return self._fitness

    def genes(self) -> List[int]:
        return list(self.order)

    def derive(self, order: Sequence[int], canonicalize: bool = True) -> "Tour":
        return Tour(order, self._context, canonicalize)

    def edges(self) -> Iterator[Tuple[int, int]]:
        n = len(self.order)
        for i in range(n):
            yield self.order[i], self.order[(i + 1) % n]

    def validate(self, size: Optional[int] = None) -> "Tour":
        if size is None:
            size = self._context.size
        if len(self.order) != size:
            raise MalformedGenotypeError(f"genotype has {len(self.order)} loci, expected {size}")
        if set(self.order) != set(range(1, size + 1)):
            missing = sorted(set(range(1, size + 1)) - set(self.order))
            raise MalformedGenotypeError(f"genotype is not a permutation of 1..{size}, missing {missing}")
        return self

    def __len__(self) -> int:
        return len(self.order)

    def __iter__(self) -> Iterator[int]:
        return iter(self.order)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Tour):
            return NotImplemented
        return self.order == other.order

    def __hash__(self) -> int:
        return hash(self.order)

    def __lt__(self, other: "Tour") -> bool:
        return self.fitness < other.fitness

    def __gt__(self, other: "Tour") -> bool:
        return self.fitness > other.fitness

    def __le__(self, other: "Tour") -> bool:
        return self.fitness <= other.fitness

    def __ge__(self, other: "Tour") -> bool:
        return self.fitness >= other.fitness

    def __repr__(self) -> str:
        return f"Tour(length={self.length:f}, fitness={self.fitness:f}, order={list(self.order)})"


def best_first(tours: Iterable[Tour]) -> List[Tour]:
    return sorted(tours, key=lambda t: t.fitness, reverse=True)
