"""Utility functions for the vault solver."""

from typing import Dict, List, Tuple

Cell = Tuple[int, int]

# Module-level cache: (board_h, board_w, w, h) -> ((anchor, footprint), ...)
_PLACEMENTS_CACHE: Dict[
    Tuple[int, int, int, int],
    Tuple[Tuple[Cell, Tuple[Cell, ...]], ...]
] = {}


def footprint(row: int, col: int, w: int, h: int) -> Tuple[Cell, ...]:
    """Cells covered by a w x h piece anchored at (row, col), row-major."""
    return tuple(
        (row + dr, col + dc) for dr in range(h) for dc in range(w)
    )


def in_bounds(row: int, col: int, w: int, h: int, board_h: int, board_w: int) -> bool:
    """True if the whole w x h footprint anchored at (row, col) is on the board."""
    return 0 <= row and 0 <= col and row + h <= board_h and col + w <= board_w


def get_placements(
    board_h: int, board_w: int, w: int, h: int
) -> Tuple[Tuple[Cell, Tuple[Cell, ...]], ...]:
    """
    Precompute and cache every in-bounds placement of a w x h footprint.

    Args:
        board_h: Board height (rows). Must be positive.
        board_w: Board width (columns). Must be positive.
        w: Footprint width.
        h: Footprint height.

    Returns:
        Tuple of (anchor, footprint_cells) pairs with anchors in row-major order.
        Empty if the footprint does not fit on the board.

    Raises:
        ValueError: If any dimension is non-positive.
    """
    if board_h <= 0 or board_w <= 0 or w <= 0 or h <= 0:
        raise ValueError("Board and footprint dimensions must be positive.")

    key = (board_h, board_w, w, h)
    cached = _PLACEMENTS_CACHE.get(key)
    if cached is not None:
        return cached

    placements: List[Tuple[Cell, Tuple[Cell, ...]]] = []
    for r in range(board_h - h + 1):
        for c in range(board_w - w + 1):
            placements.append(((r, c), footprint(r, c, w, h)))

    result = tuple(placements)
    _PLACEMENTS_CACHE[key] = result
    return result
