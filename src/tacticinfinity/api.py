"""FastAPI service exposing Tactic Infinity sessions over HTTP."""

from __future__ import annotations

import logging
import os
import time
import uuid
from typing import Any, Dict, Literal, Optional

from fastapi import BackgroundTasks, FastAPI, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from .session import GameSession, vanishing_cell
from .snapshot import dump_snapshot, load_snapshot

logger = logging.getLogger(__name__)

SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(
    title="Tactic Infinity",
    description="Classic and disappearing tic-tac-toe with a computer opponent",
)

BOT_THINK_DELAY: float = float(os.environ.get("TACTICINFINITY_BOT_DELAY", "0.7"))


class NewGameRequest(BaseModel):
    """Request payload for opening a session, optionally from a saved snapshot."""

    snapshot: Optional[Dict[str, Any]] = None


class MoveRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cell_index: int = Field(alias="cellIndex", ge=0, le=8)


class ModeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    game_mode: Literal["classic", "disappearing"] = Field(alias="gameMode")


class PlayerUpdate(BaseModel):
    """Partial player edit; omitted fields stay as they are."""

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(default=None, max_length=40)
    is_bot: Optional[bool] = Field(default=None, alias="isBot")
    difficulty: Optional[Literal["Easy", "Medium", "Hard"]] = None


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _run_bot_turns(game_id: str, token: int) -> None:
    """Play bot moves after the think delay until a human is to move."""
    next_token: Optional[int] = token
    while next_token is not None:
        session = SESSIONS.get(game_id)
        if not session:
            return
        time.sleep(max(0.0, BOT_THINK_DELAY))
        next_token = session.play_bot_turn(next_token)


def _schedule_bot(
    game_id: str, session: GameSession, background_tasks: BackgroundTasks
) -> None:
    token = session.schedule_bot_turn()
    if token is not None:
        background_tasks.add_task(_run_bot_turns, game_id, token)


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        state = session.state
        view: Dict[str, object] = {"id": game_id}
        view.update(dump_snapshot(state))
        view["currentPlayer"] = state.current_player.symbol
        view["nextToVanish"] = vanishing_cell(state)
        view["botPending"] = session.bot_pending
        return view


@app.post("/api/game")
def create_game(
    request: NewGameRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    session = GameSession(state=load_snapshot(request.snapshot))
    game_id = uuid.uuid4().hex
    SESSIONS[game_id] = session
    logger.info("opened session %s (%s mode)", game_id, session.state.game.mode)
    _schedule_bot(game_id, session, background_tasks)
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    return _serialize_session(game_id, _get_session(game_id))


@app.get("/api/game/{game_id}/snapshot")
def get_snapshot(game_id: str) -> Dict[str, Any]:
    session = _get_session(game_id)
    with session.lock:
        return dump_snapshot(session.state)


@app.post("/api/game/{game_id}/move")
def make_move(
    game_id: str, request: MoveRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    session = _get_session(game_id)
    session.play(request.cell_index)
    _schedule_bot(game_id, session, background_tasks)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/new-round")
def new_round(game_id: str, background_tasks: BackgroundTasks) -> Dict[str, object]:
    session = _get_session(game_id)
    session.new_round()
    _schedule_bot(game_id, session, background_tasks)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/restart")
def restart_round(game_id: str, background_tasks: BackgroundTasks) -> Dict[str, object]:
    session = _get_session(game_id)
    session.restart()
    _schedule_bot(game_id, session, background_tasks)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/mode")
def change_mode(
    game_id: str, request: ModeRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    session = _get_session(game_id)
    session.change_mode(request.game_mode)
    _schedule_bot(game_id, session, background_tasks)
    return _serialize_session(game_id, session)


@app.patch("/api/game/{game_id}/players/{index}")
def update_player(
    game_id: str,
    index: int,
    request: PlayerUpdate,
    background_tasks: BackgroundTasks,
) -> Dict[str, object]:
    session = _get_session(game_id)
    if index not in (0, 1):
        raise HTTPException(status_code=400, detail="Player index must be 0 or 1")
    session.update_player(
        index,
        name=request.name,
        is_bot=request.is_bot,
        difficulty=request.difficulty,
    )
    _schedule_bot(game_id, session, background_tasks)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/reset-scores")
def reset_scores(game_id: str, background_tasks: BackgroundTasks) -> Dict[str, object]:
    session = _get_session(game_id)
    session.reset_scores()
    _schedule_bot(game_id, session, background_tasks)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/factory-reset")
def factory_reset(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    session.factory_reset()
    return _serialize_session(game_id, session)

