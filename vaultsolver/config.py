"""Configuration dataclasses for board limits and placement scoring."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class BoardLimits:
    """Allowed board dimensions (rows and columns, inclusive)."""

    min_dimension: int = 1
    max_dimension: int = 15

    def check(self, height: int, width: int) -> None:
        """
        Validate board dimensions against the limits.

        Raises:
            ValueError: If either dimension is outside [min_dimension, max_dimension].
        """
        if height <= 0 or width <= 0:
            raise ValueError("Height and width must be positive.")
        for name, value in (("height", height), ("width", width)):
            if not self.min_dimension <= value <= self.max_dimension:
                raise ValueError(
                    f"Board {name} must be between {self.min_dimension} "
                    f"and {self.max_dimension}, got {value}."
                )


@dataclass(frozen=True)
class ScoringWeights:
    """
    Heuristic weights for a valid placement.

    weight = baseline + hit * supporting_hits (if any) + edge * matching_edges
    """

    baseline: int = 1  # every valid placement
    hit: int = 100  # per same-color hit inside the footprint
    edge: int = 1000  # per contact label that agrees with the anchor


@dataclass(frozen=True)
class SolverConfig:
    """Bundle of all tunables, passed to VaultBoard and VaultSolver."""

    limits: BoardLimits = field(default_factory=BoardLimits)
    weights: ScoringWeights = field(default_factory=ScoringWeights)


DEFAULT_CONFIG = SolverConfig()
