from tsp_hga import cli

from test_data import CAPITALS_TSP, SQUARE_TOUR, SQUARE_TSP, write


def test_cases_lists_instances(tmp_path, capsys):
    write(tmp_path / "square5.tsp", SQUARE_TSP)
    write(tmp_path / "capitals3.tsp", CAPITALS_TSP)
    cli.main(["cases", "--data-root", str(tmp_path)])
    out = capsys.readouterr().out
    assert "[0] capitals3" in out
    assert "[1] square5" in out


def test_cases_on_empty_root(tmp_path, capsys):
    cli.main(["cases", "--data-root", str(tmp_path)])
    assert "No TSPLIB instances" in capsys.readouterr().out


def test_solve_prints_report(tmp_path, capsys):
    write(tmp_path / "square5.tsp", SQUARE_TSP)
    write(tmp_path / "square5.opt.tour", SQUARE_TOUR)
    cli.main(
        [
            "solve",
            "--data-root", str(tmp_path),
            "--case", "0",
            "--attempts", "1",
            "--population-size", "6",
            "--min-generation", "2",
            "--max-generation", "4",
            "--best-queue-size", "3",
            "--stay-generation", "2",
            "--seed", "1",
        ]
    )
    out = capsys.readouterr().out
    assert "report of solving [square5]" in out
    assert "true optimal distance: 44.000" in out
