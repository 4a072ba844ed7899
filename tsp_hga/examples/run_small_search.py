import random
from pathlib import Path

from tsp_hga.data import Instance
from tsp_hga.evolutionary import EvolutionConfig
from tsp_hga.geometry import EucPoint
from tsp_hga.runner import TspSolver


def random_instance(size: int, seed: int = 7) -> Instance:
    rng = random.Random(seed)
    points = [EucPoint(i, rng.uniform(0, 1000), rng.uniform(0, 1000)) for i in range(1, size + 1)]
    return Instance(name=f"random{size}", path=Path("."), points=points)


def main():
    cfg = EvolutionConfig(
        population_size=20,
        min_generation=50,
        max_generation=200,
        best_queue_size=20,
        least_best_stay_generation=30,
        random_seed=123,
    )
    solver = TspSolver(random_instance(60), cfg, attempts=2)
    report = solver.run()
    print(report.format())


if __name__ == "__main__":
    main()
