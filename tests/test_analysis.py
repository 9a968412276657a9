import random

import matplotlib.pyplot as plt
import pytest

from vaultsolver import (
    VaultBoard,
    format_discovered,
    format_score_grid,
    generate_hidden_layout,
    plot_attempts_comparison,
    plot_score_grid,
    run_solver_many_tests,
    run_solver_single_test,
)

SPECS = [("yellow", "H"), ("blue", "V"), ("orange", "H")]


def test_format_score_grid_marks_suggestion(make_session):
    board, solver = make_session(4, 4, [("green", "H")])
    board.probe(1, 1, True, "green")
    text = format_score_grid(solver)
    lines = text.splitlines()
    assert lines[3] == " 1 |*101    -  101  101"
    assert lines[2] == " 0 |   1    1    1    1"


def test_format_discovered(make_session):
    board, solver = make_session(2, 2, [("yellow", "H"), ("blue", "V")])
    board.probe(1, 0, True, "yellow", "left")
    board.probe(1, 1, True, "yellow", "right")
    assert format_discovered(solver).splitlines() == [
        "[x] Yellow Diamond #1 (H) at (1, 0)",
        "[ ] Blue Rod #2 (V)",
    ]


def test_hidden_layout_is_valid_and_reproducible():
    board = VaultBoard()
    board.start(6, 6, SPECS + [("purple", "H")])
    first = generate_hidden_layout(6, 6, board.pieces, random.Random(3))
    second = generate_hidden_layout(6, 6, board.pieces, random.Random(3))
    assert first == second
    assert [p.piece for p in first] == board.pieces

    cells = [cell for placed in first for cell in placed.cells]
    assert len(cells) == len(set(cells)) == 2 + 3 + 4 + 6
    assert all(0 <= r < 6 and 0 <= c < 6 for r, c in cells)


def test_hidden_layout_gives_up_when_impossible():
    board = VaultBoard()
    board.start(2, 2, [("orange", "H"), ("yellow", "H")])
    with pytest.raises(RuntimeError):
        generate_hidden_layout(2, 2, board.pieces, random.Random(0), max_retries=3)


@pytest.mark.parametrize("report_edges", [True, False])
def test_single_self_play_finds_everything(report_edges):
    result = run_solver_single_test(6, 6, SPECS, report_edges=report_edges, seed=11)
    assert result["all_found"] is True
    assert result["discovered"] == result["total"] == 3
    moves = result["moves_sequence"]
    assert len(moves) == result["attempts"] <= 36
    assert sum(1 for *_, kind in moves if kind == "H") == 2 + 3 + 4
    assert len({(r, c) for r, c, _ in moves}) == len(moves)


def test_many_self_play_runs():
    stats = run_solver_many_tests(5, 5, SPECS, runs=4, seed=1)
    assert stats["success_rate"] == 1.0
    assert stats["avg_discovered"] == 3.0
    assert 9 <= stats["min_attempts"] <= stats["avg_attempts"] <= stats["max_attempts"] <= 25
    with pytest.raises(ValueError):
        run_solver_many_tests(5, 5, SPECS, runs=0)


def test_plot_score_grid(make_session):
    board, solver = make_session(4, 4, [("green", "H")])
    board.probe(1, 1, True, "green")
    board.probe(0, 0, False)
    ax = plot_score_grid(solver)
    assert ax.get_title() == "0 / 1 found, 2 attempts"
    plt.close("all")


def test_plot_attempts_comparison():
    results = plot_attempts_comparison(5, 5, SPECS, runs=2, seed=4, show=False)
    assert set(results) == {"with_edges", "without_edges"}
    assert results["with_edges"]["success_rate"] == 1.0
    plt.close("all")
