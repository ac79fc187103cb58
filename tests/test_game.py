"""Unit tests for Tactic Infinity game rules."""

import pytest

from tacticinfinity.game import (
    CLASSIC,
    DISAPPEARING,
    EMPTY_BOARD,
    WINNING_LINES,
    Move,
    TerminalResult,
    apply_move,
    derive_board_from_moves,
    evaluate,
    next_to_vanish,
)


@pytest.mark.parametrize("symbol", ["X", "O"])
@pytest.mark.parametrize("line", WINNING_LINES)
def test_every_line_wins(line, symbol):
    board = [None] * 9
    for i in line:
        board[i] = symbol
    assert evaluate(board) == TerminalResult(winner=symbol, line=line)


def test_full_board_without_line_is_draw():
    board = ["X", "O", "X", "X", "O", "O", "O", "X", "X"]
    result = evaluate(board)
    assert result.is_draw
    assert result.line is None


def test_ongoing_board_has_no_result():
    assert evaluate(EMPTY_BOARD) is None
    assert evaluate(["X", "O", "X", None, "O", None, None, None, None]) is None


def test_first_line_in_order_wins_on_double_complete():
    board = ["X", "X", "X", "X", None, None, "X", None, None]
    assert evaluate(board).line == (0, 1, 2)


def test_classic_apply_appends_and_places():
    board, moves = apply_move(EMPTY_BOARD, (), "X", 4, CLASSIC)
    board, moves = apply_move(board, moves, "O", 0, CLASSIC)
    assert board[4] == "X" and board[0] == "O"
    assert moves == (Move("X", 4), Move("O", 0))


def test_apply_does_not_mutate_inputs():
    board = [None] * 9
    moves = [Move("X", 1)]
    board[1] = "X"
    apply_move(board, moves, "O", 2, CLASSIC)
    assert board[2] is None
    assert moves == [Move("X", 1)]


def test_classic_keeps_more_than_three_pieces():
    board, moves = EMPTY_BOARD, ()
    for cell in (0, 2, 6, 8):
        board, moves = apply_move(board, moves, "X", cell, CLASSIC)
    assert board.count("X") == 4


def test_disappearing_fourth_piece_evicts_oldest():
    board, moves = EMPTY_BOARD, ()
    for symbol, cell in (("X", 0), ("O", 4), ("X", 2), ("O", 5), ("X", 7)):
        board, moves = apply_move(board, moves, symbol, cell, DISAPPEARING)
    board, moves = apply_move(board, moves, "O", 8, DISAPPEARING)
    board, moves = apply_move(board, moves, "X", 6, DISAPPEARING)

    assert board[0] is None
    assert Move("X", 0) not in moves
    assert [m.cell for m in moves if m.symbol == "X"] == [2, 7, 6]
    # O only has three pieces and keeps them all
    assert [m.cell for m in moves if m.symbol == "O"] == [4, 5, 8]


def test_disappearing_board_tracks_three_most_recent():
    board, moves = EMPTY_BOARD, ()
    played = [0, 1, 2, 3, 4, 5, 6, 7]
    for n, cell in enumerate(played, start=1):
        if board[cell] is not None:
            continue
        board, moves = apply_move(board, moves, "X", cell, DISAPPEARING)
        live = [i for i, c in enumerate(board) if c == "X"]
        assert live == sorted(played[max(0, n - 3):n])
        assert board == derive_board_from_moves(moves)


def test_derive_board_from_moves():
    assert derive_board_from_moves([]) == EMPTY_BOARD
    board = derive_board_from_moves([Move("X", 0), Move("O", 4), Move("X", 8)])
    assert board == ("X", None, None, None, "O", None, None, None, "X")


def test_derive_board_later_duplicate_wins():
    board = derive_board_from_moves([Move("X", 3), Move("O", 3)])
    assert board[3] == "O"


def test_next_to_vanish_needs_three_moves():
    assert next_to_vanish([Move("X", 0), Move("O", 1), Move("X", 2)], "X") is None


def test_next_to_vanish_is_oldest_own_move():
    moves = [Move("O", 7), Move("X", 0), Move("O", 1), Move("X", 2), Move("X", 5)]
    assert next_to_vanish(moves, "X") == 0
    assert next_to_vanish(moves, "O") is None
