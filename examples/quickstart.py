"""
Quickstart example for the Vault Solver.

This script demonstrates basic usage of the solver.
"""

import logging

from vaultsolver import (
    VaultBoard,
    VaultSolver,
    edge_options,
    format_discovered,
    format_score_grid,
    run_solver_many_tests,
)


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 60)
    print("Vault Solver - Quickstart Example")
    print("=" * 60)

    # Example 1: Configure a session
    print("\n1. Configuring a 6x5 board with three pieces...")
    print("-" * 60)

    board = VaultBoard()
    board.add_piece("yellow")
    rod = board.add_piece("green")
    board.toggle_orientation(rod.piece_id)
    board.add_piece("orange")
    board.start(6, 5)

    solver = VaultSolver(board)
    for color, per_orientation in edge_options(board.pieces).items():
        for orientation, labels in per_orientation.items():
            print(f"{color:8s} ({orientation}): {', '.join(labels)}")

    # Example 2: Record a few probes and read the advice
    print("\n2. Recording probes...")
    print("-" * 60)

    board.probe(2, 2, False)
    board.probe(1, 1, True, "green", "middle")
    board.probe(0, 3, True, "yellow", "left")
    board.probe(0, 4, True, "yellow", "right")

    print(board.format_board(highlight=solver.suggest_move()))
    print()
    print(format_score_grid(solver))
    print()
    print(format_discovered(solver))
    print(f"\nSuggested next probe: {solver.suggest_move()}")

    # Example 3: Self-play statistics
    print("\n3. Running 50 self-play sessions (8x8, four pieces)...")
    print("-" * 60)

    logging.getLogger("vaultsolver").setLevel(logging.WARNING)
    specs = [("yellow", "H"), ("blue", "V"), ("orange", "H"), ("red", "H")]
    for report_edges in (True, False):
        results = run_solver_many_tests(8, 8, specs, runs=50, report_edges=report_edges, seed=0)
        label = "with edge labels" if report_edges else "hits only"
        print(
            f"{label:17s}: {results['avg_attempts']:.1f} attempts on average "
            f"(min {results['min_attempts']:.0f}, max {results['max_attempts']:.0f})"
        )

    print("\n" + "=" * 60)
    print("Done!")
    print("=" * 60)


if __name__ == "__main__":
    main()
