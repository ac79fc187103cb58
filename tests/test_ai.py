"""Tests for the Tactic Infinity computer opponent."""

import random

import pytest

from tacticinfinity.ai import DIFFICULTIES, NO_MOVE, BotPlayer, select_move
from tacticinfinity.game import CLASSIC, DISAPPEARING, GAME_MODES, EMPTY_BOARD, Move
from tacticinfinity.session import GameState


@pytest.mark.parametrize("mode", GAME_MODES)
@pytest.mark.parametrize("difficulty", DIFFICULTIES)
def test_full_board_returns_sentinel(difficulty, mode):
    board = ["X", "O", "X", "X", "O", "O", "O", "X", "X"]
    assert select_move(board, [], "X", difficulty, mode) == NO_MOVE


@pytest.mark.parametrize("difficulty", DIFFICULTIES)
def test_single_empty_cell_is_chosen(difficulty):
    board = ["X", "O", "X", "X", "O", "O", "O", "X", None]
    assert select_move(board, [], "X", difficulty, CLASSIC) == 8


def test_easy_picks_an_empty_cell():
    board = ["X", None, "O", None, "X", None, None, None, "O"]
    rng = random.Random(3)
    for _ in range(20):
        assert select_move(board, [], "O", "Easy", CLASSIC, rng) in {1, 3, 5, 6, 7}


@pytest.mark.parametrize("difficulty", ["Medium", "Hard"])
def test_takes_immediate_win(difficulty):
    board = ["X", "X", None, "O", "O", None, None, None, None]
    assert select_move(board, [], "X", difficulty, CLASSIC) == 2


@pytest.mark.parametrize("difficulty", ["Medium", "Hard"])
def test_blocks_opponent(difficulty):
    board = ["O", "O", None, "X", None, None, None, None, None]
    assert select_move(board, [], "X", difficulty, CLASSIC) == 2


def test_medium_falls_back_to_random_empty_cell():
    board = ["X", None, None, None, None, None, None, None, None]
    move = select_move(board, [], "O", "Medium", CLASSIC, random.Random(0))
    assert move in range(1, 9)


def test_hard_opens_in_center():
    assert select_move(EMPTY_BOARD, [], "X", "Hard", CLASSIC) == 4
    assert select_move(EMPTY_BOARD, [], "O", "Hard", DISAPPEARING) == 4


def test_hard_replies_to_center_with_corner():
    board = [None] * 9
    board[4] = "X"
    assert select_move(board, [Move("X", 4)], "O", "Hard", CLASSIC) == 0


def test_hard_takes_center_after_corner_opening():
    board = [None] * 9
    board[0] = "X"
    assert select_move(board, [Move("X", 0)], "O", "Hard", CLASSIC) == 4


def test_medium_does_not_count_line_broken_by_own_eviction():
    # X playing 2 would drop X at 0, so only the block on 5 matters.
    moves = [Move("X", 0), Move("O", 8), Move("X", 1), Move("O", 3), Move("X", 6), Move("O", 4)]
    board = [None] * 9
    for m in moves:
        board[m.cell] = m.symbol
    assert select_move(board, moves, "X", "Medium", DISAPPEARING) == 5


def test_medium_ignores_threat_broken_by_opponent_eviction():
    # O on 2 would evict O at 0; O on 7 completes 1-4-7 after the eviction.
    moves = [Move("O", 0), Move("X", 3), Move("O", 1), Move("X", 6), Move("O", 4)]
    board = [None] * 9
    for m in moves:
        board[m.cell] = m.symbol
    assert select_move(board, moves, "X", "Medium", DISAPPEARING) == 7


def test_hard_disappearing_takes_win():
    moves = [Move("X", 6), Move("O", 3), Move("X", 0), Move("O", 4), Move("X", 1), Move("O", 8)]
    board = [None] * 9
    for m in moves:
        board[m.cell] = m.symbol
    assert select_move(board, moves, "X", "Hard", DISAPPEARING) == 2


def test_bot_player_uses_game_state():
    state = GameState(board=("X", "X", None, "O", "O", None, None, None, None))
    bot = BotPlayer(symbol="O", difficulty="Hard")
    assert bot.choose(state) == 5
