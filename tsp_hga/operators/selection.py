from typing import List, Sequence

from ..context import SolverContext
from ..errors import InvalidInputError
from ..tour import Tour
from .base import SelectionOperator


class RouletteSelection(SelectionOperator):
    """Fitness-proportional sampling with replacement."""

    name = "roulette"

    def select(self, context: SolverContext, tours: Sequence[Tour], target_size: int) -> List[Tour]:
        if target_size <= 0:
            return []
        if not tours:
            raise InvalidInputError("cannot select from an empty population")
        total = sum(t.fitness for t in tours)
        chances = [t.fitness / total for t in tours]
        selected = []
        for _ in range(target_size):
            p = self.rng.random()
            for tour, chance in zip(tours, chances):
                if p < chance:
                    selected.append(tour)
                    break
                p -= chance
            else:
                # Rounding left part of the wheel uncovered.
                selected.append(self.rng.choice(tours))
        return selected
