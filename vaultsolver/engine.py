"""Board state for a vault session: piece setup, probe log and terminal UI."""

import logging
from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple, Union

from .config import DEFAULT_CONFIG, SolverConfig
from .shapes import SHAPES, Piece, edge_options, get_shape, toggle_orientation
from .utils import Cell

logger = logging.getLogger(__name__)

PieceSpec = Union[Piece, Tuple[str, str]]


class CellInfo(NamedTuple):
    """Observed state of one board cell. Hit fields are meaningful only when revealed."""

    revealed: bool = False
    is_hit: bool = False
    color: Optional[str] = None
    edge: Optional[str] = None


class HitEvent(NamedTuple):
    """A recorded hit, in probe order."""

    row: int
    col: int
    color: Optional[str]
    edge: Optional[str]


class VaultBoard:
    """
    Session state: configured pieces, the revealed grid and the hit log.

    A board moves from the "setup" phase (pieces are added, removed and rotated)
    to "playing" via start(), and back to "setup" via reset(). Board size and
    piece list are fixed while playing; only cell contents and the hit log grow.
    """

    def __init__(self, config: SolverConfig = DEFAULT_CONFIG) -> None:
        self.config: SolverConfig = config
        self.phase: str = "setup"

        self.pieces: List[Piece] = []
        self._next_piece_id: int = 1

        self.height: int = 0
        self.width: int = 0
        self.cells: List[List[CellInfo]] = []
        self.hits: List[HitEvent] = []
        self.attempts: int = 0
        self.pending: Optional[Cell] = None

        # Bumped on every mutation; derived values are memoised against it.
        self.version: int = 0

    # -------------------------------------------------------------------------
    # Setup phase
    # -------------------------------------------------------------------------

    def _require_phase(self, phase: str) -> None:
        if self.phase != phase:
            raise RuntimeError(
                f"Operation requires the {phase!r} phase; board is in {self.phase!r}."
            )

    def _touch(self) -> None:
        self.version += 1

    def add_piece(self, shape_id: str, orientation: str = "H") -> Piece:
        """
        Add a piece to the setup list.

        Args:
            shape_id: Catalog id (color) of the piece.
            orientation: "H" or "V"; ignored for orientation-locked shapes.

        Returns:
            The new Piece with a fresh id.

        Raises:
            RuntimeError: If the board is not in the setup phase.
            ValueError: If the shape id or orientation is invalid.
        """
        self._require_phase("setup")
        piece = Piece(self._next_piece_id, shape_id, orientation)
        self._next_piece_id += 1
        self.pieces.append(piece)
        self._touch()
        return piece

    def remove_piece(self, piece_id: int) -> None:
        """Remove a configured piece by id (no-op if absent)."""
        self._require_phase("setup")
        self.pieces = [p for p in self.pieces if p.piece_id != piece_id]
        self._touch()

    def toggle_orientation(self, piece_id: int) -> None:
        """Flip a configured piece between H and V (locked shapes stay H)."""
        self._require_phase("setup")
        self.pieces = [
            toggle_orientation(p) if p.piece_id == piece_id else p
            for p in self.pieces
        ]
        self._touch()

    def _coerce_pieces(self, pieces: Iterable[PieceSpec]) -> List[Piece]:
        items = list(pieces)
        # Explicit ids are reserved before any pair is numbered.
        for item in items:
            if isinstance(item, Piece):
                self._next_piece_id = max(self._next_piece_id, item.piece_id + 1)

        out: List[Piece] = []
        for item in items:
            if isinstance(item, Piece):
                out.append(item)
            else:
                shape_id, orientation = item
                out.append(Piece(self._next_piece_id, shape_id, orientation))
                self._next_piece_id += 1
        ids = [p.piece_id for p in out]
        if len(ids) != len(set(ids)):
            raise ValueError("Piece ids must be unique.")
        return out

    def start(
        self,
        height: int,
        width: int,
        pieces: Optional[Sequence[PieceSpec]] = None,
    ) -> None:
        """
        Allocate an unrevealed board and enter the playing phase.

        Args:
            height: Number of rows.
            width: Number of columns.
            pieces: Pieces to locate, as Piece objects or (shape_id, orientation)
                pairs. Defaults to the pieces configured during setup.

        Raises:
            RuntimeError: If the board is not in the setup phase.
            ValueError: If no pieces are configured or dimensions are invalid.
                The board stays in the setup phase.
        """
        self._require_phase("setup")
        self.config.limits.check(height, width)
        configured = self._coerce_pieces(pieces) if pieces is not None else list(self.pieces)
        if not configured:
            raise ValueError("At least one piece must be configured.")

        self.pieces = configured
        self.height = height
        self.width = width
        self.cells = [[CellInfo() for _ in range(width)] for _ in range(height)]
        self.hits = []
        self.attempts = 0
        self.pending = None
        self.phase = "playing"
        self._touch()
        logger.info(
            "Started %dx%d session with %d piece(s): %s",
            height, width, len(configured), ", ".join(p.color for p in configured),
        )

    def reset(self) -> None:
        """Return to the setup phase, discarding board, hits and pieces."""
        self.phase = "setup"
        self.pieces = []
        self.height = 0
        self.width = 0
        self.cells = []
        self.hits = []
        self.attempts = 0
        self.pending = None
        self._touch()
        logger.info("Session reset")

    # -------------------------------------------------------------------------
    # Playing phase
    # -------------------------------------------------------------------------

    def cell(self, row: int, col: int) -> CellInfo:
        """Return the observed state of a cell."""
        return self.cells[row][col]

    def _check_bounds(self, row: int, col: int) -> None:
        if row < 0 or row >= self.height or col < 0 or col >= self.width:
            raise ValueError("Cell coordinates are outside the board.")

    @property
    def unrevealed_count(self) -> int:
        return sum(1 for row in self.cells for cell in row if not cell.revealed)

    def select_cell(self, row: int, col: int) -> None:
        """
        Mark an unrevealed cell as the pending probe target.

        A new selection replaces any earlier pending one. Selecting a revealed
        cell is a no-op.

        Raises:
            RuntimeError: If the board is not in the playing phase.
            ValueError: If coordinates are out of bounds.
        """
        self._require_phase("playing")
        self._check_bounds(row, col)
        if self.cells[row][col].revealed:
            logger.debug("Ignoring selection of revealed cell (%d, %d)", row, col)
            return
        self.pending = (row, col)
        self._touch()

    def clear_selection(self) -> None:
        """Drop the pending cell, if any."""
        self.pending = None
        self._touch()

    def record_result(
        self,
        is_hit: bool,
        color: Optional[str] = None,
        edge: Optional[str] = None,
    ) -> bool:
        """
        Resolve the pending cell with the outcome of the probe.

        Args:
            is_hit: True for a hit, False for a miss.
            color: Color of the piece that was hit, if known.
            edge: Contact-point label for the hit, if reported.

        Returns:
            True if a result was recorded, False if no cell was pending.

        Raises:
            RuntimeError: If the board is not in the playing phase.
            ValueError: If ``color`` is not a catalog color.
        """
        self._require_phase("playing")
        if self.pending is None:
            logger.debug("record_result called with nothing pending")
            return False

        if not is_hit:
            color, edge = None, None
        elif color is not None:
            get_shape(color)

        row, col = self.pending
        self.cells[row][col] = CellInfo(True, is_hit, color, edge)
        self.attempts += 1
        if is_hit:
            self.hits.append(HitEvent(row, col, color, edge))
        self.pending = None
        self._touch()

        logger.debug(
            "Probe %d at (%d, %d): %s",
            self.attempts, row, col,
            f"hit {color or '?'} {edge or ''}".rstrip() if is_hit else "miss",
        )
        return True

    def probe(
        self,
        row: int,
        col: int,
        is_hit: bool,
        color: Optional[str] = None,
        edge: Optional[str] = None,
    ) -> bool:
        """Select a cell and immediately record its result."""
        self.select_cell(row, col)
        if self.pending != (row, col):
            return False
        return self.record_result(is_hit, color, edge)

    # -------------------------------------------------------------------------
    # Display methods
    # -------------------------------------------------------------------------

    _ANSI_RESET = "\033[0m"
    _ANSI_COORD = "\033[96m"

    def _c(self, s: str) -> str:
        """Wrap string in coordinate color."""
        return f"{self._ANSI_COORD}{s}{self._ANSI_RESET}"

    def format_board(self, highlight: Optional[Cell] = None, color: bool = True) -> str:
        """
        Render the board as a multi-line string for terminal display.

        Unrevealed cells are '.', misses 'x', hits the first letter of their
        color (or '#' when no color was reported). The pending cell is '?' and
        ``highlight`` (usually the suggested move) is '*'.
        """
        paint = self._c if color else (lambda s: s)

        def cell_str(r: int, c: int) -> str:
            cell = self.cells[r][c]
            if cell.revealed:
                if not cell.is_hit:
                    return "x"
                return cell.color[0].upper() if cell.color else "#"
            if self.pending == (r, c):
                return "?"
            if highlight == (r, c):
                return "*"
            return "."

        header_cells = " ".join(f"{c:2d}" for c in range(self.width))
        out = [paint("   ") + paint(header_cells)]
        out.append(paint("   " + "-" * (3 * self.width - 1)))

        for r in range(self.height):
            row_cells = " ".join(f" {cell_str(r, c)}" for c in range(self.width))
            out.append(paint(f"{r:2d} ") + paint("|") + row_cells)

        return "\n".join(out)

    def print_board(self) -> None:
        """Print the current board to stdout."""
        print(self.format_board())


def _parse_probe(s: str) -> Tuple[int, int, bool, Optional[str], Optional[str]]:
    parts = s.replace(",", " ").split()
    if len(parts) < 3:
        raise ValueError("Expected: row col m | row col h [color [edge]]")
    row, col = int(parts[0]), int(parts[1])
    outcome = parts[2].lower()
    if outcome in ("m", "miss"):
        return row, col, False, None, None
    if outcome not in ("h", "hit"):
        raise ValueError("Outcome must be 'm' (miss) or 'h' (hit).")
    color = parts[3].lower() if len(parts) > 3 else None
    edge = parts[4].lower() if len(parts) > 4 else None
    if color is not None and color not in SHAPES:
        raise ValueError(f"Unknown color {color!r}.")
    return row, col, True, color, edge


def play_cli(board: VaultBoard) -> None:
    """
    Run a simple terminal assistant over a started board.

    Each turn prints the board with the suggested probe and reads the outcome
    of the player's probe, e.g. ``2 3 m`` or ``2 3 h green middle``.

    Args:
        board: A VaultBoard in the playing phase.
    """
    from .solver import VaultSolver

    board._require_phase("playing")
    solver = VaultSolver(board)

    print("Vault solver CLI. Coordinates are 0-based. Type 'q' to quit.")
    for color, per_orientation in edge_options(board.pieces).items():
        for orientation, labels in per_orientation.items():
            print(f"  {color} ({orientation}): {', '.join(labels)}")

    while True:
        suggestion = solver.suggest_move()
        print()
        print(board.format_board(highlight=suggestion))
        progress = solver.progress()
        print(
            f"\n{progress['discovered']} / {progress['total']} pieces found, "
            f"{progress['attempts']} attempts"
        )
        if progress["all_found"]:
            print(f"All pieces found in {progress['attempts']} attempts!")
            return
        if suggestion is None:
            print("No unrevealed cells left.")
            return
        print(f"Suggestion: row {suggestion[0]}, col {suggestion[1]}")

        s = input("\nProbe (row col m|h [color [edge]]): ").strip()
        if s.lower() in {"q", "quit", "exit"}:
            print("Quit.")
            return

        try:
            row, col, is_hit, color, edge = _parse_probe(s)
            if not board.probe(row, col, is_hit, color, edge):
                print("That cell is already revealed.")
        except ValueError as exc:
            print(f"Invalid input: {exc}")
