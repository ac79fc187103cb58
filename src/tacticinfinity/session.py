"""Session controller: turn order, scoring, round rotation and bot turns.

Every transition is a pure function from one :class:`SessionState` to the
next; :class:`GameSession` holds the current state and swaps it in one
assignment so observers never see a half-applied move.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple
import logging
import random
import threading

from .ai import DIFFICULTIES, MEDIUM, NO_MOVE, BotPlayer, Difficulty
from .game import (
    EMPTY_BOARD,
    CLASSIC,
    DISAPPEARING,
    GAME_MODES,
    Board,
    GameMode,
    Move,
    Symbol,
    TerminalResult,
    apply_move,
    evaluate,
    next_to_vanish,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlayerProfile:
    id: int
    name: str
    symbol: Symbol
    wins: int = 0
    is_bot: bool = False
    difficulty: Difficulty = MEDIUM


DEFAULT_PLAYERS: Tuple[PlayerProfile, PlayerProfile] = (
    PlayerProfile(id=0, name="Player 1", symbol="X"),
    PlayerProfile(id=1, name="Player 2", symbol="O"),
)


@dataclass(frozen=True)
class GameState:
    mode: GameMode = CLASSIC
    board: Board = EMPTY_BOARD
    moves: Tuple[Move, ...] = ()
    current_player_index: int = 0
    result: Optional[TerminalResult] = None
    last_starter_index: int = 0

    @property
    def is_over(self) -> bool:
        return self.result is not None


@dataclass(frozen=True)
class SessionState:
    players: Tuple[PlayerProfile, PlayerProfile] = DEFAULT_PLAYERS
    game: GameState = field(default_factory=GameState)

    @property
    def current_player(self) -> PlayerProfile:
        return self.players[self.game.current_player_index]


def _fresh_round(game: GameState, starter: int) -> GameState:
    return replace(
        game,
        board=EMPTY_BOARD,
        moves=(),
        result=None,
        current_player_index=starter,
    )


def new_session(rng: Optional[random.Random] = None) -> SessionState:
    """Default players, empty classic board and a coin-flip starter."""
    starter = (rng or random).randrange(2)
    game = GameState(current_player_index=starter, last_starter_index=starter)
    return SessionState(players=DEFAULT_PLAYERS, game=game)


def submit_move(state: SessionState, cell: int) -> SessionState:
    """Play ``cell`` for the active player.

    Occupied or out-of-range cells, and any move after the round ended,
    return ``state`` unchanged.
    """
    game = state.game
    if game.is_over or not 0 <= cell < len(game.board) or game.board[cell] is not None:
        logger.debug("ignoring move on cell %s", cell)
        return state

    player = state.current_player
    board, moves = apply_move(game.board, game.moves, player.symbol, cell, game.mode)
    result = evaluate(board)

    players = state.players
    next_index = game.current_player_index
    if result is None:
        next_index = 1 - next_index
    elif result.is_draw:
        logger.info("round drawn")
    else:
        players = tuple(
            replace(p, wins=p.wins + 1) if p.symbol == result.winner else p
            for p in players
        )
        logger.info("%s (%s) wins on %s", player.name, result.winner, result.line)

    return SessionState(
        players=players,
        game=replace(
            game,
            board=board,
            moves=moves,
            result=result,
            current_player_index=next_index,
        ),
    )


def start_new_round(state: SessionState) -> SessionState:
    starter = 1 - state.game.last_starter_index
    game = replace(_fresh_round(state.game, starter), last_starter_index=starter)
    return replace(state, game=game)


def restart_round(state: SessionState) -> SessionState:
    game = state.game
    return replace(state, game=_fresh_round(game, game.last_starter_index))


def change_mode(state: SessionState, mode: GameMode) -> SessionState:
    game = state.game
    if mode not in GAME_MODES or mode == game.mode:
        return state
    game = replace(_fresh_round(game, game.last_starter_index), mode=mode)
    return replace(state, game=game)


def update_player(
    state: SessionState,
    index: int,
    name: Optional[str] = None,
    is_bot: Optional[bool] = None,
    difficulty: Optional[Difficulty] = None,
) -> SessionState:
    """Edit a player's name, automation flag or difficulty.

    Fields left as ``None`` (and blank names or unknown difficulties) keep
    their previous value.
    """
    if index not in (0, 1):
        return state
    player = state.players[index]
    changes = {}
    if name is not None and name.strip():
        changes["name"] = name.strip()
    if is_bot is not None:
        changes["is_bot"] = bool(is_bot)
    if difficulty in DIFFICULTIES:
        changes["difficulty"] = difficulty
    if not changes:
        return state
    players = list(state.players)
    players[index] = replace(player, **changes)
    return replace(state, players=tuple(players))


def reset_scores(state: SessionState) -> SessionState:
    players = tuple(replace(p, wins=0) for p in state.players)
    return replace(state, players=players)


def factory_reset(rng: Optional[random.Random] = None) -> SessionState:
    return new_session(rng)


def vanishing_cell(state: SessionState) -> Optional[int]:
    """Piece the active player would lose next, for previews."""
    game = state.game
    if game.mode != DISAPPEARING or game.is_over:
        return None
    return next_to_vanish(game.moves, state.current_player.symbol)


@dataclass
class GameSession:
    """Mutable holder for one session and its pending bot turn.

    ``generation`` increases on every state change except a score reset. A
    bot turn is scheduled against a generation and is dropped if the session
    moved on before it fired.
    """

    state: SessionState = field(default_factory=new_session)
    rng: random.Random = field(default_factory=random.Random, repr=False)
    generation: int = 0
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False)
    _scheduled: Optional[int] = field(default=None, init=False, repr=False)

    @property
    def bot_pending(self) -> bool:
        return self._scheduled is not None and self._scheduled == self.generation

    def _commit(self, new_state: SessionState) -> bool:
        with self.lock:
            if new_state == self.state:
                return False
            self.state = new_state
            self.generation += 1
            return True

    # ---- operations used by the API ----

    def play(self, cell: int) -> bool:
        """Human move; ignored while an automated player is to move."""
        with self.lock:
            if self.state.current_player.is_bot:
                logger.debug("ignoring human move during bot turn")
                return False
            return self._commit(submit_move(self.state, cell))

    def new_round(self) -> None:
        with self.lock:
            self._commit(start_new_round(self.state))
            logger.info("new round, starter %d", self.state.game.last_starter_index)

    def restart(self) -> None:
        with self.lock:
            self._commit(restart_round(self.state))

    def change_mode(self, mode: GameMode) -> None:
        with self.lock:
            if self._commit(change_mode(self.state, mode)):
                logger.info("switched to %s mode", mode)

    def update_player(self, index: int, **fields) -> None:
        with self.lock:
            self._commit(update_player(self.state, index, **fields))

    def reset_scores(self) -> None:
        # Scores are outside the round, so a pending bot turn stays valid.
        with self.lock:
            self.state = reset_scores(self.state)

    def factory_reset(self) -> None:
        with self.lock:
            self.state = factory_reset(self.rng)
            self.generation += 1
            logger.info("session reset to defaults")

    # ---- bot turns ----

    def schedule_bot_turn(self) -> Optional[int]:
        """Return a token for a bot move owed on the current state, if any."""
        with self.lock:
            if self.state.game.is_over or not self.state.current_player.is_bot:
                return None
            if self.bot_pending:
                return None
            self._scheduled = self.generation
            return self.generation

    def play_bot_turn(self, token: int) -> Optional[int]:
        """Apply the bot move scheduled as ``token``.

        Returns the token for a follow-up bot turn (bot against bot), or
        ``None``. Stale tokens are discarded without touching the state.
        """
        with self.lock:
            if token != self.generation:
                logger.debug("dropping stale bot turn %d (now %d)", token, self.generation)
                return None
            self._scheduled = None
            state = self.state
            player = state.current_player
            if state.game.is_over or not player.is_bot:
                return None
            bot = BotPlayer(symbol=player.symbol, difficulty=player.difficulty, rng=self.rng)
            cell = bot.choose(state.game)
            if cell == NO_MOVE:
                return None
            logger.debug("%s (%s) plays %d", player.name, player.difficulty, cell)
            self._commit(submit_move(state, cell))
            return self.schedule_bot_turn()
