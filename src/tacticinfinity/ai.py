"""Computer opponent: random, one-ply heuristic and minimax move selection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple
import logging
import math
import random

from .game import (
    CLASSIC,
    DISAPPEARING,
    Board,
    Cell,
    GameMode,
    Move,
    Symbol,
    apply_move,
    empty_cells,
    evaluate,
    opponent_of,
)

logger = logging.getLogger(__name__)

Difficulty = str  # "Easy", "Medium" or "Hard"

EASY, MEDIUM, HARD = "Easy", "Medium", "Hard"
DIFFICULTIES: Tuple[Difficulty, ...] = (EASY, MEDIUM, HARD)

NO_MOVE = -1
CENTER = 4

# Search horizon per variant; the disappearing variant never fills up.
MAX_DEPTH = {CLASSIC: 9, DISAPPEARING: 4}


def _winner(board: Sequence[Cell]) -> Optional[Symbol]:
    result = evaluate(board)
    if result is None or result.is_draw:
        return None
    return result.winner


def select_move(
    board: Sequence[Cell],
    moves: Sequence[Move],
    symbol: Symbol,
    difficulty: Difficulty,
    mode: GameMode,
    rng: Optional[random.Random] = None,
) -> int:
    """Return the cell ``symbol`` should play, or ``NO_MOVE`` on a full board."""
    rng = rng or random.Random()
    empty = empty_cells(board)
    if not empty:
        return NO_MOVE

    if difficulty == EASY:
        return rng.choice(empty)
    if difficulty == MEDIUM:
        return _heuristic_move(board, moves, symbol, mode, empty, rng)
    return _search_move(board, moves, symbol, mode, empty)


def _heuristic_move(
    board: Sequence[Cell],
    moves: Sequence[Move],
    symbol: Symbol,
    mode: GameMode,
    empty: List[int],
    rng: random.Random,
) -> int:
    # Take a win, else block one, else play anywhere.
    for who in (symbol, opponent_of(symbol)):
        for cell in empty:
            child, _ = apply_move(board, moves, who, cell, mode)
            if _winner(child) == who:
                return cell
    return rng.choice(empty)


def _search_move(
    board: Sequence[Cell],
    moves: Sequence[Move],
    symbol: Symbol,
    mode: GameMode,
    empty: List[int],
) -> int:
    if len(empty) >= 8 and board[CENTER] is None:
        return CENTER

    max_depth = MAX_DEPTH.get(mode, MAX_DEPTH[CLASSIC])
    best_score = -math.inf
    best_cell = empty[0]
    for cell in empty:
        child_board, child_moves = apply_move(board, moves, symbol, cell, mode)
        score = _minimax(
            child_board,
            child_moves,
            0,
            best_score,
            math.inf,
            False,
            symbol,
            mode,
            max_depth,
        )
        if score > best_score:
            best_score, best_cell = score, cell
    logger.debug("search picked %d for %s (score %s)", best_cell, symbol, best_score)
    return best_cell


def _minimax(
    board: Board,
    moves: Tuple[Move, ...],
    depth: int,
    alpha: float,
    beta: float,
    maximizing: bool,
    me: Symbol,
    mode: GameMode,
    max_depth: int,
) -> float:
    winner = _winner(board)
    if winner == me:
        return 10 - depth
    if winner is not None:
        return depth - 10
    if depth >= max_depth:
        return 0
    empty = empty_cells(board)
    if not empty:
        return 0

    mover = me if maximizing else opponent_of(me)
    if maximizing:
        value = -math.inf
        for cell in empty:
            child_board, child_moves = apply_move(board, moves, mover, cell, mode)
            score = _minimax(
                child_board, child_moves, depth + 1, alpha, beta, False, me, mode, max_depth
            )
            value = max(value, score)
            alpha = max(alpha, value)
            if alpha >= beta:
                break
        return value

    value = math.inf
    for cell in empty:
        child_board, child_moves = apply_move(board, moves, mover, cell, mode)
        score = _minimax(
            child_board, child_moves, depth + 1, alpha, beta, True, me, mode, max_depth
        )
        value = min(value, score)
        beta = min(beta, value)
        if alpha >= beta:
            break
    return value


@dataclass
class BotPlayer:
    """Automated player bound to one symbol and difficulty tier.

    ``choose`` works on any object exposing ``board``, ``moves`` and
    ``mode`` (the session's game state).
    """

    symbol: Symbol
    difficulty: Difficulty = MEDIUM
    rng: random.Random = field(default_factory=random.Random, repr=False)

    def choose(self, state) -> int:
        return select_move(
            state.board, state.moves, self.symbol, self.difficulty, state.mode, self.rng
        )
