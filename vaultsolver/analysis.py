"""Analysis and benchmarking tools for the vault solver."""

import random
from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple

import matplotlib.pyplot as plt
import numpy as np

from .engine import VaultBoard
from .shapes import SHAPES, Piece, edge_label_at
from .solver import DiscoveredPiece, VaultSolver
from .utils import Cell, get_placements


def format_score_grid(solver: VaultSolver, *, show_coords: bool = True) -> str:
    """
    Format the solver's score grid as a human-readable string.

    Args:
        solver: Solver whose scores will be displayed.
        show_coords: If True, include coordinate labels and a header.

    Returns:
        A text grid where revealed cells are shown as '-' and the suggested
        move is marked with '*'.
    """
    board = solver.board
    scores = solver.score_grid()
    suggestion = solver.suggest_move()
    cell_w = max(2, len(str(int(scores.max()))) + 1 if scores.size else 2)

    def cell_str(r: int, c: int) -> str:
        if board.cells[r][c].revealed:
            return "-".rjust(cell_w)
        mark = "*" if suggestion == (r, c) else ""
        return f"{mark}{int(scores[r, c])}".rjust(cell_w)

    lines: List[str] = []
    if show_coords:
        header = " ".join(f"{c:>{cell_w}d}" for c in range(board.width))
        lines.append("   " + header)
        lines.append("   " + "-" * ((cell_w + 1) * board.width - 1))

    for r in range(board.height):
        row = " ".join(cell_str(r, c) for c in range(board.width))
        lines.append(f"{r:2d} |" + row if show_coords else row)

    return "\n".join(lines)


def format_discovered(solver: VaultSolver) -> str:
    """List found and remaining pieces, one per line."""
    lines: List[str] = []
    for found in solver.discovered_pieces():
        p = found.piece
        lines.append(
            f"[x] {SHAPES[p.color].name} #{p.piece_id} ({p.orientation}) "
            f"at ({found.row}, {found.col})"
        )
    for p in solver.remaining_pieces():
        lines.append(f"[ ] {SHAPES[p.color].name} #{p.piece_id} ({p.orientation})")
    return "\n".join(lines)


def generate_hidden_layout(
    height: int,
    width: int,
    pieces: Sequence[Piece],
    rng: Optional[random.Random] = None,
    max_retries: int = 50,
) -> Tuple[DiscoveredPiece, ...]:
    """
    Place pieces at random, non-overlapping positions.

    Args:
        height: Board rows.
        width: Board columns.
        pieces: Pieces to place; orientation is taken from each piece.
        rng: Random source, for reproducible layouts.
        max_retries: Number of fresh layouts to try before giving up.

    Returns:
        One placement per piece, in the order of ``pieces``.

    Raises:
        RuntimeError: If no layout could be found within max_retries.
    """
    rng = rng or random.Random()

    for _ in range(max_retries):
        taken: set = set()
        placed: Dict[int, DiscoveredPiece] = {}
        order = list(pieces)
        rng.shuffle(order)

        for piece in order:
            w, h = piece.size
            options = [
                anchor
                for anchor, cells in get_placements(height, width, w, h)
                if not taken.intersection(cells)
            ]
            if not options:
                break
            row, col = rng.choice(options)
            placement = DiscoveredPiece(piece, row, col)
            taken.update(placement.cells)
            placed[piece.piece_id] = placement
        else:
            return tuple(placed[p.piece_id] for p in pieces)

    raise RuntimeError(f"Could not place all pieces after {max_retries} layout attempts")


def run_solver_single_test(
    height: int,
    width: int,
    shape_specs: Sequence[Tuple[str, str]],
    *,
    report_edges: bool = True,
    seed: Optional[int] = None,
    show_boards: bool = False,
) -> Dict[str, object]:
    """
    Play one session against a random hidden layout, always probing the suggestion.

    Args:
        height: Board rows.
        width: Board columns.
        shape_specs: (shape_id, orientation) pairs of the pieces to hide.
        report_edges: If True, each hit reports its contact-point label.
        seed: Seed for the layout generator.
        show_boards: If True, print the final board and piece list.

    Returns:
        Dict with attempts, discovered, total, all_found and moves_sequence
        (list of (row, col, "H"|"M")).
    """
    board = VaultBoard()
    board.start(height, width, shape_specs)
    solver = VaultSolver(board)

    layout = generate_hidden_layout(height, width, board.pieces, random.Random(seed))
    owners: Dict[Cell, DiscoveredPiece] = {}
    for placement in layout:
        for cell in placement.cells:
            owners[cell] = placement

    moves_sequence: List[Tuple[int, int, str]] = []
    while not solver.all_found():
        move = solver.suggest_move()
        if move is None:
            break
        r, c = move
        owner = owners.get(move)
        if owner is None:
            board.probe(r, c, False)
            moves_sequence.append((r, c, "M"))
            continue
        edge = None
        if report_edges:
            p = owner.piece
            edge = edge_label_at(r - owner.row, c - owner.col, p.width, p.height)
        board.probe(r, c, True, owner.piece.color, edge)
        moves_sequence.append((r, c, "H"))

    if show_boards:
        print(board.format_board())
        print()
        print(format_discovered(solver))
        print(f"\nFinished in {board.attempts} attempts.")

    progress = solver.progress()
    return {
        "attempts": board.attempts,
        "discovered": progress["discovered"],
        "total": progress["total"],
        "all_found": progress["all_found"],
        "moves_sequence": moves_sequence,
    }


def run_solver_many_tests(
    height: int,
    width: int,
    shape_specs: Sequence[Tuple[str, str]],
    runs: int,
    *,
    report_edges: bool = True,
    seed: Optional[int] = None,
) -> Dict[str, float]:
    """
    Run many independent self-play sessions and return averaged metrics.

    Returns:
        avg_attempts, std_attempts, min_attempts, max_attempts,
        avg_discovered, success_rate (fraction of runs finding every piece).
    """
    if runs <= 0:
        raise ValueError("runs must be positive.")

    rng = random.Random(seed)
    attempts: List[int] = []
    sums: Dict[str, float] = defaultdict(float)

    for _ in range(runs):
        result = run_solver_single_test(
            height, width, shape_specs,
            report_edges=report_edges,
            seed=rng.randrange(2**32),
        )
        attempts.append(int(result["attempts"]))  # type: ignore[arg-type]
        sums["discovered"] += float(result["discovered"])  # type: ignore[arg-type]
        if result["all_found"]:
            sums["found"] += 1.0

    arr = np.asarray(attempts, dtype=float)
    return {
        "avg_attempts": float(arr.mean()),
        "std_attempts": float(arr.std()),
        "min_attempts": float(arr.min()),
        "max_attempts": float(arr.max()),
        "avg_discovered": sums["discovered"] / runs,
        "success_rate": sums["found"] / runs,
    }


def plot_score_grid(solver: VaultSolver, ax: Optional[plt.Axes] = None) -> plt.Axes:
    """
    Draw the score grid as a heatmap with probes and the suggestion overlaid.

    Revealed cells are masked; misses are drawn as grey crosses, hits as dots in
    their piece color, and the suggested move as a star.
    """
    board = solver.board
    if ax is None:
        _, ax = plt.subplots()

    scores = solver.score_grid().astype(float)
    revealed = np.array(
        [[cell.revealed for cell in row] for row in board.cells], dtype=bool
    ).reshape(scores.shape)
    ax.imshow(np.ma.masked_array(scores, mask=revealed), cmap="Reds", vmin=0)

    for r in range(board.height):
        for c in range(board.width):
            cell = board.cells[r][c]
            if not cell.revealed:
                continue
            if cell.is_hit:
                hex_color = SHAPES[cell.color].hex_color if cell.color else "#4b5563"
                ax.plot(c, r, "o", color=hex_color, markersize=12)
            else:
                ax.plot(c, r, "x", color="#9ca3af", markersize=10)

    suggestion = solver.suggest_move()
    if suggestion is not None:
        ax.plot(suggestion[1], suggestion[0], "*", color="#4f46e5", markersize=18)

    ax.set_xticks(range(board.width))
    ax.set_yticks(range(board.height))
    progress = solver.progress()
    ax.set_title(
        f"{progress['discovered']} / {progress['total']} found, "
        f"{progress['attempts']} attempts"
    )
    return ax


def plot_attempts_comparison(
    height: int,
    width: int,
    shape_specs: Sequence[Tuple[str, str]],
    runs: int,
    *,
    seed: Optional[int] = None,
    show: bool = True,
) -> Dict[str, Dict[str, float]]:
    """
    Compare average attempts with and without contact-point labels and plot them.

    Returns:
        Mapping {"with_edges": stats, "without_edges": stats}, each as returned
        by run_solver_many_tests().
    """
    results = {
        "with_edges": run_solver_many_tests(
            height, width, shape_specs, runs, report_edges=True, seed=seed
        ),
        "without_edges": run_solver_many_tests(
            height, width, shape_specs, runs, report_edges=False, seed=seed
        ),
    }

    names = list(results.keys())
    x = np.arange(len(names))
    means = [results[n]["avg_attempts"] for n in names]
    stds = [results[n]["std_attempts"] for n in names]

    plt.figure()  # type: ignore[misc]
    plt.bar(x, means, yerr=stds, capsize=4)  # type: ignore[misc]
    plt.xticks(x, names)  # type: ignore[misc]
    plt.ylabel("Average attempts")  # type: ignore[misc]
    plt.title(f"Attempts to find all pieces ({height}x{width}, {runs} runs)")  # type: ignore[misc]
    plt.tight_layout()
    if show:
        plt.show()  # type: ignore[misc]

    return results
