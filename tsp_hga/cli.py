import argparse
import logging
import time
from pathlib import Path

from tsp_hga.data import discover_instances, load_instances
from tsp_hga.evolutionary import EvolutionConfig
from tsp_hga.runner import solve_many


def log(msg: str) -> None:
    ts = time.strftime("%H:%M:%S")
    print(f"[{ts}] {msg}", flush=True)


def cases(args) -> None:
    paths = discover_instances(Path(args.data_root))
    if not paths:
        print(f"No TSPLIB instances found in {args.data_root}.")
        return
    for idx, path in enumerate(paths):
        print(f"[{idx}] {path.stem}")
    print("Solve one with: tsp-hga solve --case <index>")


def _config_from_args(args) -> EvolutionConfig:
    cfg = EvolutionConfig()
    overrides = {
        "population_size": args.population_size,
        "crossover_probability": args.crossover_probability,
        "mutation_probability": args.mutation_probability,
        "min_generation": args.min_generation,
        "max_generation": args.max_generation,
        "best_queue_size": args.best_queue_size,
        "least_best_stay_generation": args.stay_generation,
        "random_seed": args.seed,
    }
    for name, value in overrides.items():
        if value is not None:
            setattr(cfg, name, value)
    return cfg.validate()


def solve(args) -> None:
    t0 = time.perf_counter()
    data_root = Path(args.data_root)
    indices = None if args.all else (args.case or [0])
    log(f"loading data from {data_root}")
    instances = load_instances(data_root, indices)
    if not instances:
        raise RuntimeError(
            f"No TSPLIB instances found in {data_root}. "
            "Place .tsp (and optional .opt.tour) files there before running."
        )
    names = ", ".join(inst.name for inst in instances)
    log(f"loaded {len(instances)} instances in {time.perf_counter() - t0:.2f}s: {names}")

    reports = solve_many(instances, _config_from_args(args), attempts=args.attempts, workers=args.workers)
    for report in reports:
        print(report.format())
    log(f"done in {time.perf_counter() - t0:.2f}s")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Hybrid genetic algorithm TSP solver")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log solver progress at DEBUG level")
    subparsers = parser.add_subparsers(dest="command", required=True)

    cases_parser = subparsers.add_parser("cases", help="List the TSPLIB instances found under the data root")
    cases_parser.add_argument("--data-root", default="data/tsplib")
    cases_parser.set_defaults(func=cases)

    solve_parser = subparsers.add_parser("solve", help="Solve instances, one worker thread each")
    solve_parser.add_argument("--data-root", default="data/tsplib")
    solve_parser.add_argument("--case", type=int, nargs="+", help="Instance indices as listed by `cases`")
    solve_parser.add_argument("--all", action="store_true", help="Solve every instance found")
    solve_parser.add_argument("--attempts", type=int, default=3)
    solve_parser.add_argument("--workers", type=int, default=None)
    solve_parser.add_argument("--population-size", type=int)
    solve_parser.add_argument("--crossover-probability", type=float)
    solve_parser.add_argument("--mutation-probability", type=float)
    solve_parser.add_argument("--min-generation", type=int)
    solve_parser.add_argument("--max-generation", type=int)
    solve_parser.add_argument("--best-queue-size", type=int)
    solve_parser.add_argument("--stay-generation", type=int)
    solve_parser.add_argument("--seed", type=int)
    solve_parser.set_defaults(func=solve)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    args.func(args)


if __name__ == "__main__":
    main()
