"""Unit tests for tic-tac-toe board rules."""

import pytest

from tictactoe.game import (
    EMPTY,
    Board,
    Outcome,
    completes_line,
    evaluate,
    opponent,
    winner,
)


def test_new_board_is_empty_and_ongoing():
    board = Board()
    assert board.cells == [EMPTY] * 9
    assert len(board.empty_cells()) == 9
    assert evaluate(board) is Outcome.ONGOING


@pytest.mark.parametrize(
    "rows",
    [
        ["XXX", "OO.", "..."],
        ["OO.", "...", "XXX"],
        ["XO.", "XO.", "X.."],
        ["O.X", "OX.", "X.."],
        ["X.O", ".XO", "..X"],
    ],
)
def test_x_lines_detected(rows):
    assert evaluate(Board.from_rows(rows)) is Outcome.X_WINS


def test_o_column_detected():
    board = Board.from_rows(["XOX", ".O.", "XO."])
    assert winner(board) == "O"
    assert evaluate(board) is Outcome.O_WINS


def test_lines_are_scanned_in_fixed_order():
    # Not reachable in play, but the first complete line must win.
    assert winner(Board.from_rows(["XXX", "OOO", "..."])) == "X"
    assert winner(Board.from_rows(["OOO", "XXX", "..."])) == "O"
    assert winner(Board.from_rows(["OX.", "OX.", "OX."])) == "O"


def test_full_board_without_line_is_draw():
    board = Board.from_rows(["XOX", "XOO", "OXX"])
    assert board.is_full()
    assert evaluate(board) is Outcome.DRAW


def test_win_on_last_cell_is_not_draw():
    board = Board.from_rows(["XOX", "OXO", "OXX"])
    assert evaluate(board) is Outcome.X_WINS


def test_place_rejects_occupied_and_off_board_cells():
    board = Board()
    board.place("X", 1, 1)
    with pytest.raises(ValueError):
        board.place("O", 1, 1)
    with pytest.raises(ValueError):
        board.place("O", 3, 0)
    with pytest.raises(ValueError):
        board.place("O", 0, -1)
    with pytest.raises(ValueError):
        board.place("O", 1.0, 0)
    assert board.cells.count("X") == 1
    assert board.cells.count("O") == 0


def test_snapshot_is_independent_copy():
    board = Board.from_rows(["X..", "...", "..."])
    first = board.snapshot()
    second = board.snapshot()
    assert first == second
    first[0][0] = "O"
    second[1][1] = "X"
    assert board[(0, 0)] == "X"
    assert board.is_empty(1, 1)


def test_completes_line_leaves_board_untouched():
    board = Board.from_rows(["XX.", "OO.", "..."])
    before = board.cells.copy()
    assert completes_line(board, "X", 0, 2)
    assert completes_line(board, "O", 1, 2)
    assert not completes_line(board, "X", 2, 2)
    assert not completes_line(board, "X", 0, 0)  # occupied
    assert board.cells == before


def test_from_rows_validates_shape_and_marks():
    with pytest.raises(ValueError):
        Board.from_rows(["XX", "...", "..."])
    with pytest.raises(ValueError):
        Board.from_rows(["XZ.", "...", "..."])


def test_opponent():
    assert opponent("X") == "O"
    assert opponent("O") == "X"
