"""Pydantic schemas for API requests and responses."""

from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field
from typing import Literal


class NewGameRequest(BaseModel):
    """Optional overrides for a new game."""

    initial_bankroll: Decimal | None = Field(default=None, gt=0, description="Starting coins")


class NewGameResponse(BaseModel):
    """Signed session token for a new game."""

    session_id: str


class BetRequest(BaseModel):
    """Request to place a bet."""

    amount: Decimal = Field(..., gt=0, description="Bet amount")


class ActionRequest(BaseModel):
    """Request for player action."""

    action: Literal["hit", "stand", "hint"]


class CardResponse(BaseModel):
    """Card representation."""

    model_config = ConfigDict(from_attributes=True)

    rank: str
    name: str
    soft_value: int
    hard_value: int


class HandResponse(BaseModel):
    """Hand representation. ``value`` is None while the hole card is hidden."""

    cards: list[CardResponse | None]
    value: int | None
    is_blackjack: bool | None
    is_busted: bool | None
    is_standing: bool


class RoundResultResponse(BaseModel):
    """Round result."""

    winner: Literal["dealer", "player", "tie"]
    player_blackjack: bool
    dealer_sum: int
    player_sum: int
    reason: str
    delta: float


class GameStateResponse(BaseModel):
    """Current session and round state."""

    state: str
    bankroll: float
    max_stake: float
    current_bet: float
    rounds_played: int
    is_over: bool
    dealer_hand: HandResponse | None
    player_hand: HandResponse | None
    can_hit: bool
    can_stand: bool
    last_result: RoundResultResponse | None
    recommendation: Literal["hit", "stand"] | None = None
