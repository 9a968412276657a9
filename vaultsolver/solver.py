"""Discovery, placement scoring and move selection over a VaultBoard."""

import logging
from typing import Dict, List, NamedTuple, Optional, Set, Tuple

import numpy as np

from .config import SolverConfig
from .engine import VaultBoard
from .shapes import Piece, anchor_offset
from .utils import Cell, footprint, get_placements, in_bounds

logger = logging.getLogger(__name__)


class DiscoveredPiece(NamedTuple):
    """A piece whose whole footprint is known, anchored at its top-left cell."""

    piece: Piece
    row: int
    col: int

    @property
    def cells(self) -> Tuple[Cell, ...]:
        return footprint(self.row, self.col, self.piece.width, self.piece.height)


class VaultSolver:
    """
    Derives discovered pieces, a placement score grid and a suggested probe.

    Every derived value is a pure function of the board. Results are memoised
    against ``board.version`` and recomputed from scratch after any mutation:
    1. Discovery, phase 1: edge-anchored blocks from labelled hits
    2. Discovery, phase 2: exhaustive row-major block scan
    3. Scoring: weighted enumeration of every consistent placement
    4. Advice: row-major-first maximum over unrevealed cells
    """

    def __init__(self, board: VaultBoard, config: Optional[SolverConfig] = None) -> None:
        """
        Bind a solver to a board.

        Args:
            board: Session state to read. The solver never mutates it.
            config: Scoring weights; defaults to the board's own config.
        """
        self.board = board
        self.config: SolverConfig = config if config is not None else board.config

        self._cached_version: int = -1
        self._discovered: Tuple[DiscoveredPiece, ...] = ()
        self._scores: Optional[np.ndarray] = None

    def _refresh(self) -> None:
        if self._cached_version == self.board.version:
            return
        self._discovered = self._discover() if self.board.phase == "playing" else ()
        self._scores = None
        self._cached_version = self.board.version

    # -------------------------------------------------------------------------
    # Discovery
    # -------------------------------------------------------------------------

    def _block_is_solid(
        self,
        cells: Tuple[Cell, ...],
        color: str,
        consumed: Optional[Set[Cell]] = None,
    ) -> bool:
        """True if every cell is a revealed hit of ``color`` (and not consumed)."""
        for r, c in cells:
            if consumed is not None and (r, c) in consumed:
                return False
            cell = self.board.cells[r][c]
            if not cell.revealed or not cell.is_hit or cell.color != color:
                return False
        return True

    def _discover(self) -> Tuple[DiscoveredPiece, ...]:
        board = self.board
        discovered: List[DiscoveredPiece] = []
        consumed: Set[Cell] = set()
        remaining: Tuple[Piece, ...] = tuple(board.pieces)

        def accept(piece: Piece, row: int, col: int, method: str) -> Tuple[Piece, ...]:
            found = DiscoveredPiece(piece, row, col)
            discovered.append(found)
            consumed.update(found.cells)
            logger.debug(
                "Discovered %s piece #%d at (%d, %d) via %s",
                piece.color, piece.piece_id, row, col, method,
            )
            return tuple(p for p in remaining if p.piece_id != piece.piece_id)

        # Phase 1: a labelled hit pins the anchor of the first same-color piece.
        # A failed block is not retried with other pieces or the alternative offset.
        for hit in board.hits:
            if (hit.row, hit.col) in consumed or not hit.edge:
                continue
            piece = next((p for p in remaining if p.color == hit.color), None)
            if piece is None:
                continue

            w, h = piece.size
            offset = anchor_offset(hit.edge, w, h)
            row, col = hit.row + offset.d_row, hit.col + offset.d_col
            if not in_bounds(row, col, w, h, board.height, board.width):
                continue
            if self._block_is_solid(footprint(row, col, w, h), piece.color):
                remaining = accept(piece, row, col, "edge anchor")

        # Phase 2: first row-major solid block per piece, restarting after each find.
        progress = True
        while progress:
            progress = False
            for piece in remaining:
                w, h = piece.size
                for (row, col), cells in get_placements(board.height, board.width, w, h):
                    if self._block_is_solid(cells, piece.color, consumed):
                        remaining = accept(piece, row, col, "block scan")
                        progress = True
                        break
                if progress:
                    break

        return tuple(discovered)

    def discovered_pieces(self) -> Tuple[DiscoveredPiece, ...]:
        """Pieces whose full footprint is known, in discovery order."""
        self._refresh()
        return self._discovered

    def remaining_pieces(self) -> Tuple[Piece, ...]:
        """Configured pieces not yet discovered, in configuration order."""
        found = {d.piece.piece_id for d in self.discovered_pieces()}
        return tuple(p for p in self.board.pieces if p.piece_id not in found)

    # -------------------------------------------------------------------------
    # Placement scoring
    # -------------------------------------------------------------------------

    def _placement_weight(
        self,
        piece: Piece,
        anchor: Cell,
        cells: Tuple[Cell, ...],
        occupied: Set[Cell],
    ) -> Optional[int]:
        """
        Weight of placing ``piece`` at ``anchor``, or None if the placement is
        inconsistent with the observations.
        """
        weights = self.config.weights
        w, h = piece.size
        hit_score = 0
        edge_score = 0

        for r, c in cells:
            if (r, c) in occupied:
                return None
            cell = self.board.cells[r][c]
            if not cell.revealed:
                continue
            if not cell.is_hit:
                return None
            if cell.color is None:
                continue
            if cell.color != piece.color:
                return None

            hit_score += 1
            if cell.edge:
                offset = anchor_offset(cell.edge, w, h)
                if cell.edge == "middle":
                    expected = list(offset.candidates())
                else:
                    expected = [(offset.d_row, offset.d_col)]
                if (anchor[0] - r, anchor[1] - c) not in expected:
                    return None
                edge_score += weights.edge

        weight = weights.baseline + edge_score
        if hit_score > 0:
            weight += weights.hit * hit_score
        return weight

    def _score(self) -> np.ndarray:
        board = self.board
        scores = np.zeros((board.height, board.width), dtype=np.int64)
        if board.phase != "playing":
            return scores

        occupied: Set[Cell] = set()
        for found in self._discovered:
            occupied.update(found.cells)

        for piece in self.remaining_pieces():
            w, h = piece.size
            for anchor, cells in get_placements(board.height, board.width, w, h):
                weight = self._placement_weight(piece, anchor, cells, occupied)
                if weight is None:
                    continue
                for r, c in cells:
                    if not board.cells[r][c].revealed:
                        scores[r, c] += weight

        return scores

    def score_grid(self) -> np.ndarray:
        """
        Accumulated placement weights per cell.

        Returns:
            int64 array of shape (height, width). Revealed cells are always 0.
            The returned array is a copy; mutating it does not affect the solver.
        """
        self._refresh()
        if self._scores is None:
            self._scores = self._score()
        return self._scores.copy()

    # -------------------------------------------------------------------------
    # Advice
    # -------------------------------------------------------------------------

    def suggest_move(self) -> Optional[Cell]:
        """
        Pick the next cell to probe.

        Returns:
            The row-major-first unrevealed cell with the highest score, or None
            if every cell is revealed.
        """
        scores = self.score_grid()
        best: Optional[Cell] = None
        best_score = -1
        for r in range(self.board.height):
            for c in range(self.board.width):
                if self.board.cells[r][c].revealed:
                    continue
                if scores[r, c] > best_score:
                    best_score = int(scores[r, c])
                    best = (r, c)
        return best

    def all_found(self) -> bool:
        """True when every configured piece has been discovered."""
        return bool(self.board.pieces) and not self.remaining_pieces()

    def progress(self) -> Dict[str, object]:
        """Summary counters for display: discovered, total, attempts, all_found."""
        return {
            "discovered": len(self.discovered_pieces()),
            "total": len(self.board.pieces),
            "attempts": self.board.attempts,
            "all_found": self.all_found(),
        }
