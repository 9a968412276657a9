"""
Vault Solver

Probe advisor for a Battleship-style hidden-shape puzzle:
- Shape catalog and contact-point (edge label) geometry
- Two-phase discovery of fully located pieces
- Weighted placement enumeration into a per-cell score grid
- Row-major-first best-probe suggestion
"""

from .analysis import (
    format_discovered,
    format_score_grid,
    generate_hidden_layout,
    plot_attempts_comparison,
    plot_score_grid,
    run_solver_many_tests,
    run_solver_single_test,
)
from .config import DEFAULT_CONFIG, BoardLimits, ScoringWeights, SolverConfig
from .engine import CellInfo, HitEvent, VaultBoard, play_cli
from .shapes import (
    SHAPES,
    AnchorOffset,
    Piece,
    ShapeDef,
    anchor_offset,
    edge_label_at,
    edge_options,
    effective_size,
    get_shape,
    valid_edge_labels,
)
from .solver import DiscoveredPiece, VaultSolver

__version__ = "1.0.0"

__all__ = [
    # Core classes
    "VaultBoard",
    "VaultSolver",
    "Piece",
    "DiscoveredPiece",
    "CellInfo",
    "HitEvent",
    # Shapes and geometry
    "SHAPES",
    "ShapeDef",
    "AnchorOffset",
    "get_shape",
    "effective_size",
    "valid_edge_labels",
    "anchor_offset",
    "edge_label_at",
    "edge_options",
    # Configuration
    "BoardLimits",
    "ScoringWeights",
    "SolverConfig",
    "DEFAULT_CONFIG",
    # CLI
    "play_cli",
    # Analysis functions
    "format_score_grid",
    "format_discovered",
    "generate_hidden_layout",
    "run_solver_single_test",
    "run_solver_many_tests",
    "plot_score_grid",
    "plot_attempts_comparison",
]
