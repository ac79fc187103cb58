"""Persisted snapshot shape and its conversion to and from session state."""

from __future__ import annotations

from collections import Counter
from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple
import logging
import random

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .game import (
    DISAPPEARING,
    MAX_LIVE_MOVES,
    Move,
    TerminalResult,
    derive_board_from_moves,
    evaluate,
)
from .session import DEFAULT_PLAYERS, GameState, PlayerProfile, SessionState, new_session

logger = logging.getLogger(__name__)

SymbolField = Literal["X", "O"]


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class PlayerModel(_CamelModel):
    id: int
    name: str
    symbol: SymbolField
    wins: int = Field(ge=0)
    is_bot: bool = Field(alias="isBot")
    difficulty: Literal["Easy", "Medium", "Hard"]


class MoveModel(_CamelModel):
    player_symbol: SymbolField = Field(alias="playerSymbol")
    cell_index: int = Field(alias="cellIndex", ge=0, le=8)


class GameStateModel(_CamelModel):
    game_mode: Literal["classic", "disappearing"] = Field(alias="gameMode")
    board: List[Optional[SymbolField]] = Field(min_length=9, max_length=9)
    current_player_index: Literal[0, 1] = Field(alias="currentPlayerIndex")
    winner: Optional[Literal["X", "O", "draw"]] = None
    winning_line: Optional[Tuple[int, int, int]] = Field(default=None, alias="winningLine")
    moves: List[MoveModel] = Field(default_factory=list)
    last_starter_index: Literal[0, 1] = Field(alias="lastStarterIndex")


class SnapshotModel(_CamelModel):
    players: List[PlayerModel] = Field(min_length=2, max_length=2)
    game_state: GameStateModel = Field(alias="gameState")


def hydrate_player(index: int, raw: Mapping[str, Any]) -> Dict[str, Any]:
    """Fill fields missing from an older saved player with defaults.

    Only absent keys are filled; present values are left for validation.
    """
    default = DEFAULT_PLAYERS[index]
    return {
        "id": raw.get("id", default.id),
        "name": raw.get("name", default.name),
        "symbol": raw.get("symbol", default.symbol),
        "wins": raw.get("wins", default.wins),
        "isBot": raw.get("isBot", default.is_bot),
        "difficulty": raw.get("difficulty", default.difficulty),
    }


def _hydrate(data: Mapping[str, Any]) -> Dict[str, Any]:
    players = data["players"]
    if not isinstance(players, list) or len(players) != 2:
        raise ValueError("snapshot must hold exactly two players")
    return {
        "players": [hydrate_player(i, p) for i, p in enumerate(players)],
        "gameState": data["gameState"],
    }


def _to_state(model: SnapshotModel) -> SessionState:
    players = tuple(
        PlayerProfile(
            id=p.id,
            name=p.name,
            symbol=p.symbol,
            wins=p.wins,
            is_bot=p.is_bot,
            difficulty=p.difficulty,
        )
        for p in model.players
    )
    if tuple(p.symbol for p in players) != ("X", "O"):
        raise ValueError("players must be X then O")

    gs = model.game_state
    moves = tuple(Move(m.player_symbol, m.cell_index) for m in gs.moves)
    board = tuple(gs.board)

    cells = Counter(m.cell for m in moves)
    if any(n > 1 for n in cells.values()):
        raise ValueError("history places two pieces on one cell")
    if derive_board_from_moves(moves) != board:
        raise ValueError("board does not match move history")
    if gs.game_mode == DISAPPEARING:
        per_symbol = Counter(m.symbol for m in moves)
        if any(n > MAX_LIVE_MOVES for n in per_symbol.values()):
            raise ValueError("too many live pieces for the disappearing variant")

    result = None
    if gs.winner is not None:
        line = gs.winning_line if gs.winner != "draw" else None
        result = TerminalResult(winner=gs.winner, line=line)
    if evaluate(board) != result:
        raise ValueError("saved result does not match the board")

    game = GameState(
        mode=gs.game_mode,
        board=board,
        moves=moves,
        current_player_index=gs.current_player_index,
        result=result,
        last_starter_index=gs.last_starter_index,
    )
    return SessionState(players=players, game=game)


def load_snapshot(
    data: Optional[Mapping[str, Any]], rng: Optional[random.Random] = None
) -> SessionState:
    """Restore a session, or start a fresh one if ``data`` is unusable."""
    if data is None:
        return new_session(rng)
    try:
        return _to_state(SnapshotModel.model_validate(_hydrate(data)))
    except (AttributeError, KeyError, TypeError, ValueError, ValidationError) as exc:
        logger.warning("discarding malformed snapshot: %s", exc)
        return new_session(rng)


def dump_snapshot(state: SessionState) -> Dict[str, Any]:
    game = state.game
    result = game.result
    return {
        "players": [
            {
                "id": p.id,
                "name": p.name,
                "symbol": p.symbol,
                "wins": p.wins,
                "isBot": p.is_bot,
                "difficulty": p.difficulty,
            }
            for p in state.players
        ],
        "gameState": {
            "gameMode": game.mode,
            "board": list(game.board),
            "currentPlayerIndex": game.current_player_index,
            "winner": result.winner if result else None,
            "winningLine": list(result.line) if result and result.line else None,
            "moves": [
                {"playerSymbol": m.symbol, "cellIndex": m.cell} for m in game.moves
            ],
            "lastStarterIndex": game.last_starter_index,
        },
    }
