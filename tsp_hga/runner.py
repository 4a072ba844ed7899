import concurrent.futures
import logging
import math
import os
import random
import threading
import time
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .context import FitnessFunction, SolverContext, default_fitness
from .data import Instance
from .errors import IllegalConfigurationError
from .evolutionary import EvolutionConfig, Population
from .operators.portfolio import Portfolio, default_portfolio
from .tour import Tour


logger = logging.getLogger(__name__)


class SolverIds:
    """Hands out solver ids for one batch of concurrent solves."""

    def __init__(self, start: int = 0):
        self._next = start
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            value = self._next
            self._next += 1
            return value


@dataclass
class AttemptReport:
    attempt: int
    tour: Tour
    generation: int
    init_seconds: float
    evolution_seconds: float

    @property
    def length(self) -> float:
        return self.tour.length


@dataclass
class SolveReport:
    name: str
    attempts: List[AttemptReport] = field(default_factory=list)
    optimum: Optional[float] = None
    optimal_tour: Optional[Tour] = None

    @property
    def best(self) -> AttemptReport:
        return max(self.attempts, key=lambda a: a.tour.fitness)

    @property
    def best_length(self) -> float:
        return self.best.length

    @property
    def average_length(self) -> float:
        return sum(a.length for a in self.attempts) / len(self.attempts)

    @property
    def average_generation(self) -> float:
        return sum(a.generation for a in self.attempts) / len(self.attempts)

    @property
    def average_init_seconds(self) -> float:
        return sum(a.init_seconds for a in self.attempts) / len(self.attempts)

    @property
    def average_evolution_seconds(self) -> float:
        return sum(a.evolution_seconds for a in self.attempts) / len(self.attempts)

    def gap_of(self, length: float) -> float:
        if self.optimum is None or math.isclose(self.optimum, 0.0):
            return float("inf")
        return (length - self.optimum) / self.optimum

    @property
    def gap(self) -> float:
        return self.gap_of(self.best_length)

    @property
    def average_gap(self) -> float:
        return self.gap_of(self.average_length)

    def format(self) -> str:
        lines = [
            f"report of solving [{self.name}]:",
            f"calculation times: {len(self.attempts)}",
            f"average generation number: {self.average_generation:.2f}",
            f"average initialization cost time: {self.average_init_seconds:.2f}s",
            f"average evolution cost time: {self.average_evolution_seconds:.2f}s",
            f"average overall cost time: {self.average_init_seconds + self.average_evolution_seconds:.2f}s",
            f"average distance: {self.average_length:.3f} [{self.average_gap * 100:.2f}%]",
            f"best obtained distance: {self.best_length:.3f} [{self.gap * 100:.2f}%]",
            f"best obtained solution: {list(self.best.tour.order)}",
        ]
        if self.optimal_tour is not None:
            lines.append(f"true optimal distance: {self.optimum:.3f}")
            lines.append(f"true optimal solution: {list(self.optimal_tour.order)}")
        return "\n".join(lines)


class TspSolver:
    """Solves one instance ``attempts`` times, each with a fresh population."""

    def __init__(
        self,
        instance: Instance,
        config: Optional[EvolutionConfig] = None,
        attempts: int = 3,
        portfolio: Optional[Portfolio] = None,
        fitness_function: FitnessFunction = default_fitness,
        solver_id: int = 0,
    ):
        if attempts < 1:
            raise IllegalConfigurationError(f"attempts must be positive, got {attempts}")
        self.instance = instance
        self.cfg = (config or EvolutionConfig()).validate()
        self.attempts = attempts
        self.solver_id = solver_id
        self.rng = random.Random(self.cfg.random_seed)
        self.context = SolverContext(instance.points, fitness_function, name=instance.name)
        self.portfolio = portfolio or default_portfolio(self.context.size, rng=self.rng)

    def _population(self) -> Population:
        return Population(
            self.context,
            self.cfg,
            self.portfolio.generators,
            self.portfolio.crossovers,
            self.portfolio.mutations,
            self.portfolio.selectors,
            rng=self.rng,
        )

    def run(self) -> SolveReport:
        logger.info("[%d] solving %s (%d points)", self.solver_id, self.instance.name, self.context.size)
        report = SolveReport(name=self.instance.name)
        if self.instance.optimal_order is not None:
            report.optimal_tour = Tour(self.instance.optimal_order, self.context)
            report.optimum = report.optimal_tour.length

        for attempt in range(1, self.attempts + 1):
            population = self._population()
            t0 = time.perf_counter()
            population.initialize()
            t_init = time.perf_counter()
            logger.info("[%d] population-%d initialized in %.2fs", self.solver_id, attempt, t_init - t0)
            try:
                best = population.evolve(self.cfg.stop_condition())
            except Exception:
                logger.exception("[%d] population-%d evolution failed", self.solver_id, attempt)
                raise
            t_evolve = time.perf_counter()
            result = AttemptReport(
                attempt=attempt,
                tour=best,
                generation=population.generation,
                init_seconds=t_init - t0,
                evolution_seconds=t_evolve - t_init,
            )
            report.attempts.append(result)
            logger.info(
                "[%d] population-%d finished: length=%.0f generation=%d gap=%.3f%%",
                self.solver_id, attempt, result.length, result.generation, report.gap_of(result.length) * 100,
            )
        return report


def solve_many(
    instances: Sequence[Instance],
    config: Optional[EvolutionConfig] = None,
    attempts: int = 3,
    workers: Optional[int] = None,
    fitness_function: FitnessFunction = default_fitness,
) -> List[SolveReport]:
    """Solves every instance on its own worker thread; reports keep input order."""
    if not instances:
        return []
    ids = SolverIds()
    workers = workers or min(len(instances), os.cpu_count() or 1)
    solvers = []
    for inst in instances:
        cfg = config or EvolutionConfig()
        solvers.append(
            TspSolver(inst, cfg, attempts=attempts, fitness_function=fitness_function, solver_id=ids.next())
        )
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as ex:
        futures = [ex.submit(solver.run) for solver in solvers]
        return [f.result() for f in futures]
