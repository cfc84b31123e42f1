"""Round engine, settlement and bankroll session."""

from core.game.events import GameEvent, EventType, EventEmitter
from core.game.state import RoundState
from core.game.result import RoundResult, SettleReason, Winner, settle_bet
from core.game.engine import BlackjackRound, Move, PlayerActionSource
from core.game.session import (
    BlackjackError,
    GameSession,
    InvalidBetError,
    SessionOverError,
)

__all__ = [
    "GameEvent",
    "EventType",
    "EventEmitter",
    "RoundState",
    "RoundResult",
    "SettleReason",
    "Winner",
    "settle_bet",
    "BlackjackRound",
    "Move",
    "PlayerActionSource",
    "BlackjackError",
    "GameSession",
    "InvalidBetError",
    "SessionOverError",
]
