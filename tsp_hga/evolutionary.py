import bisect
import enum
import itertools
import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .context import SolverContext
from .errors import IllegalConfigurationError
from .operators.base import (
    CrossoverOperator,
    GeneratingOperator,
    MutationOperator,
    OperatorTable,
    SelectionOperator,
)
from .tour import Tour, best_first


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StopCondition:
    """
    Stop at ``max_generation``, or once the search has plateaued: at least
    ``min_generation`` generations, the best tour unbeaten for
    ``least_best_stay_generation`` generations and the fitness spread of the
    full best-history within ``max_difference``.
    """

    min_generation: int
    max_generation: int
    least_best_stay_generation: int
    max_difference: float

    def __post_init__(self):
        if self.min_generation > self.max_generation:
            raise IllegalConfigurationError(
                f"min_generation ({self.min_generation}) exceeds max_generation ({self.max_generation})"
            )

    def is_met(self, generation: int, stay_generation: int, difference: Optional[float]) -> bool:
        """``difference`` is None until the best-history is at capacity."""
        if generation >= self.max_generation:
            return True
        return (
            generation >= self.min_generation
            and stay_generation >= self.least_best_stay_generation
            and difference is not None
            and difference <= self.max_difference
        )


@dataclass
class EvolutionConfig:
    population_size: int = 35
    crossover_probability: float = 0.96
    mutation_probability: float = 0.66
    top_x: int = 2
    top_y: int = 5
    top_z: int = 3
    best_queue_size: int = 500
    min_generation: int = 2000
    max_generation: int = 20000
    least_best_stay_generation: int = 1000
    max_difference: float = 1e-6
    random_seed: Optional[int] = None

    def validate(self) -> "EvolutionConfig":
        if self.population_size < 1:
            raise IllegalConfigurationError(f"population_size must be positive, got {self.population_size}")
        for name in ("crossover_probability", "mutation_probability"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise IllegalConfigurationError(f"{name} must lie in [0, 1], got {value}")
        for name in ("top_x", "top_y", "top_z"):
            if getattr(self, name) < 0:
                raise IllegalConfigurationError(f"{name} must not be negative, got {getattr(self, name)}")
        if self.best_queue_size < 1:
            raise IllegalConfigurationError(f"best_queue_size must be positive, got {self.best_queue_size}")
        if self.min_generation > self.max_generation:
            raise IllegalConfigurationError(
                f"min_generation ({self.min_generation}) exceeds max_generation ({self.max_generation})"
            )
        return self

    def stop_condition(self) -> StopCondition:
        return StopCondition(
            min_generation=self.min_generation,
            max_generation=self.max_generation,
            least_best_stay_generation=self.least_best_stay_generation,
            max_difference=self.max_difference,
        )


class BestHistory:
    """Bounded collection of the best tour of past generations, worst first."""

    def __init__(self, capacity: int):
        self.capacity = capacity
        self._entries: List[Tuple[float, int, Tour]] = []
        self._counter = itertools.count()

    def offer(self, tour: Tour) -> bool:
        entry = (tour.fitness, next(self._counter), tour)
        if len(self._entries) < self.capacity:
            bisect.insort(self._entries, entry)
            return True
        if self._entries[0][0] < tour.fitness:
            self._entries.pop(0)
            bisect.insort(self._entries, entry)
            return True
        return False

    @property
    def best(self) -> Tour:
        return self._entries[-1][2]

    @property
    def worst(self) -> Tour:
        return self._entries[0][2]

    @property
    def full(self) -> bool:
        return len(self._entries) >= self.capacity

    def difference(self) -> float:
        return self.best.fitness - self.worst.fitness

    def __len__(self) -> int:
        return len(self._entries)


class State(enum.Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    EVOLVING = "evolving"
    CONVERGED = "converged"


class Population:
    """
    Elitist genetic algorithm over tours.

    Each generation runs crossover, mutation and selection. Before every
    stage the best ``top_x``/``top_y``/``top_z`` individuals are set aside
    and compete again with the selected ones, so none of the stages can
    lose them.
    """

    def __init__(
        self,
        context: SolverContext,
        config: EvolutionConfig,
        generators: Sequence[GeneratingOperator],
        crossovers: Sequence[CrossoverOperator],
        mutations: Sequence[MutationOperator],
        selectors: Sequence[SelectionOperator],
        rng: Optional[random.Random] = None,
    ):
        self.context = context
        self.cfg = config.validate()
        self.rng = rng or random.Random(config.random_seed)
        self.generators = OperatorTable(generators, "generating")
        self.crossovers = OperatorTable(crossovers, "crossover")
        self.mutations = OperatorTable(mutations, "mutation")
        self.selectors = OperatorTable(selectors, "selection")
        self.tours: List[Tour] = []
        self.history = BestHistory(config.best_queue_size)
        self.generation = 0
        self.stay_generation = 0
        self.state = State.UNINITIALIZED

    def initialize(self) -> None:
        self.tours = [
            self.generators.choose(self.rng).generate(self.context)
            for _ in range(self.cfg.population_size)
        ]
        self.history = BestHistory(self.cfg.best_queue_size)
        self.history.offer(self.best())
        self.generation = 0
        self.stay_generation = 1
        self.state = State.INITIALIZED

    def evolve(self, stop_condition: Optional[StopCondition] = None) -> Tour:
        if self.cfg.population_size <= 1:
            raise IllegalConfigurationError(
                f"population size must be greater than 1, got {self.cfg.population_size}"
            )
        if self.state is State.UNINITIALIZED:
            self.initialize()
        stop_condition = stop_condition or self.cfg.stop_condition()
        self.state = State.EVOLVING
        while True:
            self.step()
            difference = self.history.difference() if self.history.full else None
            if stop_condition.is_met(self.generation, self.stay_generation, difference):
                break
        self.state = State.CONVERGED
        logger.debug(
            "%s converged at generation %d, best length %.3f",
            self.context.name or "population", self.generation, self.history.best.length,
        )
        return self.best()

    def step(self) -> None:
        self.generation += 1

        top_x = best_first(self.tours)[: self.cfg.top_x]
        after_crossover = self._crossover(self.tours)

        top_y = best_first(after_crossover)[: self.cfg.top_y]
        after_mutation = self._mutate(after_crossover)

        top_z = best_first(after_mutation)[: self.cfg.top_z]
        selected = self._select(after_mutation)

        self.tours = best_first(selected + top_x + top_y + top_z)[: self.cfg.population_size]
        self._track_best()

    def _crossover(self, parents: List[Tour]) -> List[Tour]:
        offspring = []
        size = len(parents)
        for i, first in enumerate(parents):
            j = self.rng.randrange(size - 1)
            if j >= i:
                j += 1
            second = parents[j]
            if self.rng.random() >= self.cfg.crossover_probability:
                offspring.extend((first, second))
                continue
            operator = self.crossovers.choose(self.rng)
            offspring.extend(operator.crossover(self.context, first, second))
        return offspring

    def _mutate(self, tours: List[Tour]) -> List[Tour]:
        mutated = []
        for tour in tours:
            if self.rng.random() >= self.cfg.mutation_probability:
                mutated.append(tour)
                continue
            operator = self.mutations.choose(self.rng)
            mutated.append(operator.mutate(self.context, tour))
        return mutated

    def _select(self, tours: List[Tour]) -> List[Tour]:
        target = self.cfg.population_size
        selected: List[Tour] = []
        *leading, (last, _) = list(self.selectors)
        for operator, chance in leading:
            size = int(chance * target)
            selected.extend(operator.select(self.context, tours, size))
        # The last selector takes whatever rounding left over.
        selected.extend(last.select(self.context, tours, target - len(selected)))
        return selected

    def _track_best(self) -> None:
        best = self.best()
        if self.history.best.fitness >= best.fitness:
            self.stay_generation += 1
        else:
            self.stay_generation = 1
            logger.debug("generation %d: new best length %.3f", self.generation, best.length)
        self.history.offer(best)

    def best(self) -> Optional[Tour]:
        if not self.tours:
            return None
        self.tours.sort(key=lambda t: t.fitness, reverse=True)
        return self.tours[0]

    @property
    def best_ever(self) -> Tour:
        return self.history.best
