"""Core rules for Tactic Infinity: win detection, move application and aging."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

Symbol = str  # "X" or "O"
Cell = Optional[Symbol]
Board = Tuple[Cell, ...]
GameMode = str  # "classic" or "disappearing"

CLASSIC = "classic"
DISAPPEARING = "disappearing"
GAME_MODES: Tuple[GameMode, ...] = (CLASSIC, DISAPPEARING)

SYMBOLS: Tuple[Symbol, Symbol] = ("X", "O")
DRAW = "draw"

# Live pieces a player may keep on the board in the disappearing variant.
MAX_LIVE_MOVES = 3

WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)

EMPTY_BOARD: Board = (None,) * 9


@dataclass(frozen=True)
class Move:
    symbol: Symbol
    cell: int


@dataclass(frozen=True)
class TerminalResult:
    """Outcome of a finished round.

    ``winner`` is ``"X"``, ``"O"`` or ``"draw"``; ``line`` holds the
    completed triple for a win and is ``None`` for a draw.
    """

    winner: str
    line: Optional[Tuple[int, int, int]] = None

    @property
    def is_draw(self) -> bool:
        return self.winner == DRAW


def opponent_of(symbol: Symbol) -> Symbol:
    return "O" if symbol == "X" else "X"


def empty_cells(board: Sequence[Cell]) -> List[int]:
    return [i for i, c in enumerate(board) if c is None]


def evaluate(board: Sequence[Cell]) -> Optional[TerminalResult]:
    """Classify ``board``; ``None`` means the round is still going."""
    for line in WINNING_LINES:
        a, b, c = line
        v = board[a]
        if v is not None and v == board[b] == board[c]:
            return TerminalResult(winner=v, line=line)
    if all(c is not None for c in board):
        return TerminalResult(winner=DRAW)
    return None


def apply_move(
    board: Sequence[Cell],
    moves: Sequence[Move],
    symbol: Symbol,
    cell: int,
    mode: GameMode,
) -> Tuple[Board, Tuple[Move, ...]]:
    """Place ``symbol`` on ``cell`` and return the new board and history.

    The caller guarantees ``cell`` is empty. In the disappearing variant a
    player already holding three live pieces loses the oldest one first.
    """
    new_board = list(board)
    new_moves = list(moves)

    if mode == DISAPPEARING:
        own = [m for m in new_moves if m.symbol == symbol]
        if len(own) >= MAX_LIVE_MOVES:
            oldest = own[0]
            new_moves.remove(oldest)
            new_board[oldest.cell] = None

    new_moves.append(Move(symbol, cell))
    new_board[cell] = symbol
    return tuple(new_board), tuple(new_moves)


def derive_board_from_moves(moves: Sequence[Move]) -> Board:
    """Rebuild a board from history alone; later entries win on a shared cell."""
    board: List[Cell] = [None] * 9
    for move in moves:
        board[move.cell] = move.symbol
    return tuple(board)


def next_to_vanish(moves: Sequence[Move], symbol: Symbol) -> Optional[int]:
    """Cell that ``symbol`` would lose on its next move, if any."""
    own = [m for m in moves if m.symbol == symbol]
    if len(own) >= MAX_LIVE_MOVES:
        return own[0].cell
    return None
