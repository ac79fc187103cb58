"""Tactic Infinity package exposing the game rules, computer opponent and web API."""

from .ai import BotPlayer, select_move
from .game import Move, TerminalResult, apply_move, evaluate, next_to_vanish
from .session import GameSession, SessionState
from .api import app

__all__ = [
    "BotPlayer",
    "GameSession",
    "Move",
    "SessionState",
    "TerminalResult",
    "app",
    "apply_move",
    "evaluate",
    "next_to_vanish",
    "select_move",
]
