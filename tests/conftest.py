import matplotlib

matplotlib.use("Agg")

import pytest  # noqa: E402

from vaultsolver import VaultBoard, VaultSolver  # noqa: E402


@pytest.fixture
def make_session():
    """Start a board with the given pieces and return (board, solver)."""

    def _make(height, width, pieces):
        board = VaultBoard()
        board.start(height, width, pieces)
        return board, VaultSolver(board)

    return _make
