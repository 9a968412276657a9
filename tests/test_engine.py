import builtins
import logging

import pytest

from vaultsolver import BoardLimits, Piece, SolverConfig, VaultBoard, play_cli
from vaultsolver.engine import CellInfo, HitEvent, _parse_probe


def test_start_without_pieces_stays_in_setup():
    board = VaultBoard()
    with pytest.raises(ValueError):
        board.start(4, 4)
    with pytest.raises(ValueError):
        board.start(4, 4, [])
    assert board.phase == "setup"
    assert board.cells == []


@pytest.mark.parametrize("height, width", [(0, 4), (4, 0), (-1, 3), (16, 4), (4, 16)])
def test_start_rejects_bad_dimensions(height, width):
    board = VaultBoard()
    with pytest.raises(ValueError):
        board.start(height, width, [("yellow", "H")])
    assert board.phase == "setup"


def test_board_limits_are_configurable():
    board = VaultBoard(SolverConfig(limits=BoardLimits(max_dimension=20)))
    board.start(20, 18, [("red", "H")])
    assert (board.height, board.width) == (20, 18)


def test_start_allocates_unrevealed_grid():
    board = VaultBoard()
    board.start(3, 5, [("yellow", "H"), ("green", "V")])
    assert board.phase == "playing"
    assert len(board.cells) == 3 and all(len(row) == 5 for row in board.cells)
    assert all(cell == CellInfo() for row in board.cells for cell in row)
    assert board.unrevealed_count == 15
    assert board.attempts == 0 and board.hits == [] and board.pending is None
    assert [(p.color, p.orientation) for p in board.pieces] == [
        ("yellow", "H"),
        ("green", "V"),
    ]
    assert len({p.piece_id for p in board.pieces}) == 2


def test_start_accepts_piece_objects():
    board = VaultBoard()
    board.start(4, 4, [Piece(7, "orange"), ("blue", "V")])
    assert [p.piece_id for p in board.pieces] == [7, 8]
    with pytest.raises(RuntimeError):
        board.start(4, 4, [("blue", "V")])


def test_duplicate_piece_ids_rejected():
    board = VaultBoard()
    with pytest.raises(ValueError):
        board.start(4, 4, [Piece(1, "orange"), Piece(1, "red")])


def test_setup_helpers():
    board = VaultBoard()
    yellow = board.add_piece("yellow")
    purple = board.add_piece("purple", "V")
    blue = board.add_piece("blue")
    assert purple.orientation == "H"

    board.toggle_orientation(yellow.piece_id)
    board.toggle_orientation(purple.piece_id)
    board.remove_piece(blue.piece_id)
    assert [(p.color, p.orientation) for p in board.pieces] == [
        ("yellow", "V"),
        ("purple", "H"),
    ]

    board.start(6, 4)
    assert [p.piece_id for p in board.pieces] == [yellow.piece_id, purple.piece_id]
    with pytest.raises(RuntimeError):
        board.add_piece("red")


def test_playing_operations_require_start():
    board = VaultBoard()
    with pytest.raises(RuntimeError):
        board.select_cell(0, 0)
    with pytest.raises(RuntimeError):
        board.record_result(False)


def test_select_and_record():
    board = VaultBoard()
    board.start(4, 4, [("yellow", "H")])

    board.select_cell(1, 2)
    assert board.pending == (1, 2)
    assert board.record_result(True, "yellow", "left") is True

    assert board.cell(1, 2) == CellInfo(True, True, "yellow", "left")
    assert board.hits == [HitEvent(1, 2, "yellow", "left")]
    assert board.attempts == 1
    assert board.pending is None


def test_miss_is_not_logged_as_hit():
    board = VaultBoard()
    board.start(4, 4, [("yellow", "H")])
    board.select_cell(0, 0)
    board.record_result(False, "yellow", "left")
    assert board.cell(0, 0) == CellInfo(True, False, None, None)
    assert board.hits == []
    assert board.attempts == 1


def test_record_with_nothing_pending_is_a_noop():
    board = VaultBoard()
    board.start(4, 4, [("yellow", "H")])
    version = board.version
    assert board.record_result(True, "yellow") is False
    assert board.attempts == 0
    assert board.version == version


def test_selecting_revealed_cell_is_a_noop():
    board = VaultBoard()
    board.start(4, 4, [("yellow", "H")])
    board.probe(0, 0, False)
    board.select_cell(2, 2)
    board.select_cell(0, 0)
    assert board.pending == (2, 2)


def test_new_selection_replaces_pending():
    board = VaultBoard()
    board.start(4, 4, [("yellow", "H")])
    board.select_cell(0, 0)
    board.select_cell(3, 3)
    board.record_result(False)
    assert board.cell(3, 3).revealed
    assert not board.cell(0, 0).revealed


def test_clear_selection():
    board = VaultBoard()
    board.start(4, 4, [("yellow", "H")])
    board.select_cell(0, 0)
    board.clear_selection()
    assert board.record_result(False) is False


def test_out_of_bounds_and_unknown_color():
    board = VaultBoard()
    board.start(4, 4, [("yellow", "H")])
    with pytest.raises(ValueError):
        board.select_cell(4, 0)
    board.select_cell(0, 0)
    with pytest.raises(ValueError):
        board.record_result(True, "black")
    assert board.pending == (0, 0)


def test_probe_on_revealed_cell_keeps_other_pending():
    board = VaultBoard()
    board.start(4, 4, [("yellow", "H")])
    board.probe(0, 0, True, "yellow")
    board.select_cell(1, 1)
    assert board.probe(0, 0, False) is False
    assert board.pending == (1, 1)
    assert board.attempts == 1


def test_reset_discards_everything():
    board = VaultBoard()
    board.start(4, 4, [("yellow", "H")])
    board.probe(0, 0, True, "yellow", "left")
    board.select_cell(1, 1)
    board.reset()
    assert board.phase == "setup"
    assert board.pieces == [] and board.hits == [] and board.cells == []
    assert board.attempts == 0 and board.pending is None
    with pytest.raises(ValueError):
        board.start(4, 4)


def test_version_changes_on_mutation():
    board = VaultBoard()
    seen = {board.version}
    board.start(4, 4, [("yellow", "H")])
    seen.add(board.version)
    board.probe(0, 0, False)
    seen.add(board.version)
    board.reset()
    seen.add(board.version)
    assert len(seen) == 4


def test_format_board_symbols():
    board = VaultBoard()
    board.start(2, 3, [("yellow", "H")])
    board.probe(0, 0, True, "yellow", "left")
    board.probe(0, 1, True)
    board.probe(0, 2, False)
    board.select_cell(1, 0)
    text = board.format_board(highlight=(1, 2), color=False)
    lines = text.splitlines()
    assert lines[2] == " 0 | Y  #  x"
    assert lines[3] == " 1 | ?  .  *"


def test_parse_probe():
    assert _parse_probe("2 3 m") == (2, 3, False, None, None)
    assert _parse_probe("2,3 h green middle") == (2, 3, True, "green", "middle")
    assert _parse_probe("0 0 hit") == (0, 0, True, None, None)
    with pytest.raises(ValueError):
        _parse_probe("2 3")
    with pytest.raises(ValueError):
        _parse_probe("2 3 h black")
    with pytest.raises(ValueError):
        _parse_probe("2 3 z")


def test_play_cli_until_all_found(monkeypatch, capsys):
    board = VaultBoard()
    board.start(1, 3, [("yellow", "H")])
    answers = iter(["0 0 m", "oops", "0 1 h yellow left", "0 2 h yellow right"])
    monkeypatch.setattr(builtins, "input", lambda _prompt="": next(answers))

    play_cli(board)

    out = capsys.readouterr().out
    assert "yellow (H): left, right" in out
    assert "Invalid input" in out
    assert "All pieces found in 3 attempts!" in out


def test_play_cli_quit(monkeypatch, capsys):
    board = VaultBoard()
    board.start(2, 2, [("orange", "H")])
    monkeypatch.setattr(builtins, "input", lambda _prompt="": "q")
    play_cli(board)
    assert "Quit." in capsys.readouterr().out
    assert board.attempts == 0


def test_start_reserves_explicit_ids_before_numbering_pairs():
    board = VaultBoard()
    board.start(4, 4, [("yellow", "H"), Piece(1, "blue")])
    assert [(p.piece_id, p.color) for p in board.pieces] == [(2, "yellow"), (1, "blue")]


def test_play_cli_leaves_root_logging_alone(monkeypatch):
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    board = VaultBoard()
    board.start(2, 2, [("orange", "H")])
    monkeypatch.setattr(builtins, "input", lambda _prompt="": "q")
    play_cli(board)
    assert root.handlers == handlers
    assert root.level == level
