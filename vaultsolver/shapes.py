"""Piece catalog and contact-point (edge label) geometry."""

import logging
from dataclasses import dataclass, replace
from typing import Dict, Iterable, Iterator, NamedTuple, Optional, Tuple

logger = logging.getLogger(__name__)

ORIENTATIONS: Tuple[str, str] = ("H", "V")


class ShapeDef(NamedTuple):
    """Static description of a piece type. Width/height are for the "H" form."""

    shape_id: str
    name: str
    width: int
    height: int
    hex_color: str
    locked: bool = False


SHAPES: Dict[str, ShapeDef] = {
    "yellow": ShapeDef("yellow", "Yellow Diamond", 2, 1, "#fbbf24"),
    "blue": ShapeDef("blue", "Blue Rod", 3, 1, "#3b82f6"),
    "green": ShapeDef("green", "Green Rod", 4, 1, "#22c55e"),
    "orange": ShapeDef("orange", "Orange Diamond", 2, 2, "#f97316"),
    # Always stands upright; orientation toggles are ignored.
    "purple": ShapeDef("purple", "Purple Diamond", 2, 3, "#a855f7", locked=True),
    "red": ShapeDef("red", "Red Decagon", 3, 3, "#ef4444"),
}


def get_shape(shape_id: str) -> ShapeDef:
    """
    Look up a shape by its id (the piece color).

    Raises:
        ValueError: If the id is not in the catalog.
    """
    try:
        return SHAPES[shape_id]
    except KeyError:
        raise ValueError(
            f"Unknown shape {shape_id!r}; expected one of {sorted(SHAPES)}."
        ) from None


def effective_size(shape_id: str, orientation: str) -> Tuple[int, int]:
    """
    Return the (width, height) a shape occupies in the given orientation.

    "V" swaps the base dimensions; orientation-locked shapes always use "H".

    Raises:
        ValueError: If the shape id or orientation is invalid.
    """
    if orientation not in ORIENTATIONS:
        raise ValueError(f'Orientation must be "H" or "V", got {orientation!r}.')
    shape = get_shape(shape_id)
    if orientation == "V" and not shape.locked:
        return shape.height, shape.width
    return shape.width, shape.height


@dataclass(frozen=True)
class Piece:
    """A configured instance of a shape, to be located on the board."""

    piece_id: int
    color: str
    orientation: str = "H"

    def __post_init__(self) -> None:
        effective_size(self.color, self.orientation)
        if get_shape(self.color).locked and self.orientation != "H":
            object.__setattr__(self, "orientation", "H")

    @property
    def shape(self) -> ShapeDef:
        return SHAPES[self.color]

    @property
    def size(self) -> Tuple[int, int]:
        """Effective (width, height)."""
        return effective_size(self.color, self.orientation)

    @property
    def width(self) -> int:
        return self.size[0]

    @property
    def height(self) -> int:
        return self.size[1]


def toggle_orientation(piece: Piece) -> Piece:
    """Return the piece with H/V flipped (unchanged for locked shapes)."""
    if piece.shape.locked:
        return piece
    return replace(piece, orientation="V" if piece.orientation == "H" else "H")


# -----------------------------------------------------------------------------
# Edge geometry
# -----------------------------------------------------------------------------

_SQUARE_3X3_LABELS: Tuple[str, ...] = (
    "top-left", "top", "top-right",
    "left", "middle", "right",
    "bottom-left", "bottom", "bottom-right",
)

_OFFSETS_2X3: Dict[str, Tuple[int, int]] = {
    "top-left": (0, 0),
    "top-right": (0, -1),
    "middle-left": (-1, 0),
    "middle-right": (-1, -1),
    "bottom-left": (-2, 0),
    "bottom-right": (-2, -1),
}


class AnchorOffset(NamedTuple):
    """
    Displacement from a hit cell to the piece's top-left cell.

    ``alternative`` is only set for the "middle" label of length-4 rods, where
    the label covers both center cells; either offset is an equally valid anchor.
    """

    d_row: int
    d_col: int
    alternative: Optional[Tuple[int, int]] = None

    def candidates(self) -> Iterator[Tuple[int, int]]:
        """Yield the primary offset, then the alternative if there is one."""
        yield self.d_row, self.d_col
        if self.alternative is not None:
            yield self.alternative


def valid_edge_labels(w: int, h: int) -> Tuple[str, ...]:
    """
    List the contact-point labels a hit may report for a w x h footprint.

    Args:
        w: Effective width (columns).
        h: Effective height (rows).

    Returns:
        Ordered tuple of labels. Unsupported sizes fall back to ("middle",).
    """
    if w == 1 and h == 1:
        return ("middle",)

    if h == 1:
        if w == 2:
            return ("left", "right")
        # The two center cells of a length-4 rod share "middle".
        if w in (3, 4):
            return ("left", "middle", "right")
    if w == 1:
        if h == 2:
            return ("top", "bottom")
        if h in (3, 4):
            return ("top", "middle", "bottom")

    if w == 2 and h == 2:
        return ("top-left", "top-right", "bottom-left", "bottom-right")
    if w == 3 and h == 3:
        return _SQUARE_3X3_LABELS
    if w == 2 and h == 3:
        return tuple(_OFFSETS_2X3)

    logger.warning("No edge labels defined for a %dx%d footprint; using 'middle'", w, h)
    return ("middle",)


def anchor_offset(label: str, w: int, h: int) -> AnchorOffset:
    """
    Map an edge label to the offset from the hit cell to the anchor.

    The anchor (top-left cell of the footprint) is ``hit + offset``.

    Args:
        label: Contact-point label reported with the hit.
        w: Effective width of the piece.
        h: Effective height of the piece.

    Returns:
        AnchorOffset; unknown labels yield (0, 0) and a logged warning.
    """
    if w == 2 and h == 3 and label in _OFFSETS_2X3:
        return AnchorOffset(*_OFFSETS_2X3[label])

    if label == "middle":
        if w == 4 and h == 1:
            return AnchorOffset(0, -1, alternative=(0, -2))
        if w == 1 and h == 4:
            return AnchorOffset(-1, 0, alternative=(-2, 0))

    mid_row, mid_col = -(h // 2), -(w // 2)
    last_row, last_col = -(h - 1), -(w - 1)
    offsets: Dict[str, Tuple[int, int]] = {
        "top-left": (0, 0),
        "top-right": (0, last_col),
        "bottom-left": (last_row, 0),
        "bottom-right": (last_row, last_col),
        "top": (0, mid_col),
        "bottom": (last_row, mid_col),
        "left": (mid_row, 0),
        "right": (mid_row, last_col),
        "middle": (mid_row, mid_col),
    }
    if label not in offsets:
        logger.warning("Unknown edge label %r for a %dx%d footprint; using (0, 0)", label, w, h)
        return AnchorOffset(0, 0)
    return AnchorOffset(*offsets[label])


def edge_label_at(d_row: int, d_col: int, w: int, h: int) -> Optional[str]:
    """
    Inverse of anchor_offset: the label describing footprint cell (d_row, d_col).

    Returns None when no label of the shape maps that cell back to the anchor.
    """
    target = (-d_row, -d_col)
    for label in valid_edge_labels(w, h):
        if target in anchor_offset(label, w, h).candidates():
            return label
    return None


def edge_options(pieces: Iterable[Piece]) -> Dict[str, Dict[str, Tuple[str, ...]]]:
    """
    Collect the labels the operator can report, per color and orientation.

    Colors and orientations keep the order they first appear in ``pieces``.
    """
    options: Dict[str, Dict[str, Tuple[str, ...]]] = {}
    for piece in pieces:
        per_color = options.setdefault(piece.color, {})
        if piece.orientation not in per_color:
            per_color[piece.orientation] = valid_edge_labels(piece.width, piece.height)
    return options
