import concurrent.futures

import pytest

from tsp_hga.data import Instance
from tsp_hga.errors import IllegalConfigurationError
from tsp_hga.evolutionary import EvolutionConfig
from tsp_hga.runner import SolverIds, TspSolver, solve_many


def quick_config(seed=3):
    return EvolutionConfig(
        population_size=12,
        best_queue_size=5,
        min_generation=5,
        max_generation=15,
        least_best_stay_generation=5,
        random_seed=seed,
    )


@pytest.fixture
def plus_instance(plus_points):
    return Instance(name="plus", path=None, points=plus_points)


@pytest.fixture
def random_instance(random_context):
    return Instance(name="random30", path=None, points=random_context.points)


def test_solver_reports_every_attempt(random_instance):
    report = TspSolver(random_instance, quick_config(), attempts=2).run()
    assert report.name == "random30"
    assert [a.attempt for a in report.attempts] == [1, 2]
    for attempt in report.attempts:
        assert 5 <= attempt.generation <= 15
        assert attempt.init_seconds >= 0 and attempt.evolution_seconds >= 0
        assert sorted(attempt.tour.order) == list(range(1, 31))
    assert report.best_length == min(a.length for a in report.attempts)
    assert report.best_length <= report.average_length
    assert report.optimum is None
    assert report.gap == float("inf")
    assert "true optimal" not in report.format()


def test_solver_compares_against_known_optimum(plus_points):
    reference = tuple(range(1, 14))
    instance = Instance(name="plus", path=None, points=plus_points, optimal_order=reference)
    report = TspSolver(instance, quick_config(), attempts=1).run()
    assert report.optimal_tour.order == reference
    assert report.optimum == report.optimal_tour.length
    assert report.gap == pytest.approx((report.best_length - report.optimum) / report.optimum)
    text = report.format()
    assert "report of solving [plus]" in text
    assert "true optimal distance" in text


def test_solver_needs_an_attempt(random_instance):
    with pytest.raises(IllegalConfigurationError):
        TspSolver(random_instance, quick_config(), attempts=0)


def test_solve_many_keeps_input_order(random_instance, plus_instance):
    reports = solve_many([plus_instance, random_instance], quick_config(), attempts=1, workers=2)
    assert [r.name for r in reports] == ["plus", "random30"]
    assert all(len(r.attempts) == 1 for r in reports)


def test_solve_many_with_nothing_to_do():
    assert solve_many([]) == []


def test_solver_ids_are_unique_across_threads():
    ids = SolverIds(start=10)
    with concurrent.futures.ThreadPoolExecutor(max_workers=8) as ex:
        handed = list(ex.map(lambda _: ids.next(), range(200)))
    assert sorted(handed) == list(range(10, 210))
