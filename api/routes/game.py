"""Game API endpoints."""

import logging
import time
from decimal import Decimal
from fastapi import APIRouter, HTTPException, Header
from typing import Annotated, Any

from api.schemas import (
    ActionRequest,
    BetRequest,
    CardResponse,
    GameStateResponse,
    HandResponse,
    NewGameRequest,
    NewGameResponse,
    RoundResultResponse,
)
from api.session import extract_session_id, get_session_store, new_session_token
from config import config
from core.cards import Card, Rank
from core.game import (
    BlackjackError,
    BlackjackRound,
    GameSession,
    RoundResult,
    RoundState,
    SettleReason,
    Winner,
)
from core.hand import Hand, Owner
from core.strategy.rules import RuleSet

logger = logging.getLogger(__name__)

router = APIRouter()

# In-memory game cache, only valid while the session store holds the entry
_games: dict[str, GameSession] = {}

# Session data keys
SESSION_KEY_GAME = "game"
SESSION_KEY_CREATED_AT = "created_at"
SESSION_KEY_LAST_ACTIVITY = "last_activity"


def _serialize_hand(hand: Hand) -> dict[str, Any]:
    return {
        "cards": [c.rank.value for c in hand.cards],
        "is_standing": hand.is_standing,
    }


def _deserialize_hand(owner: Owner, data: dict[str, Any]) -> Hand:
    return Hand(
        owner=owner,
        cards=[Card(Rank(r)) for r in data["cards"]],
        is_standing=data["is_standing"],
    )


def _serialize_result(result: RoundResult | None) -> dict[str, Any] | None:
    if result is None:
        return None
    return {
        "winner": result.winner.value,
        "player_blackjack": result.player_blackjack,
        "dealer_sum": result.dealer_sum,
        "player_sum": result.player_sum,
        "reason": result.reason.value,
    }


def _deserialize_result(data: dict[str, Any] | None) -> RoundResult | None:
    if data is None:
        return None
    return RoundResult(
        winner=Winner(data["winner"]),
        player_blackjack=data["player_blackjack"],
        dealer_sum=data["dealer_sum"],
        player_sum=data["player_sum"],
        reason=SettleReason(data["reason"]),
    )


def _serialize_game(session: GameSession) -> dict[str, Any]:
    """Serialize a session for the session store."""
    round_ = session.current_round
    return {
        "bankroll": str(session.bankroll),
        "current_bet": str(session.current_bet),
        "rounds_played": session.rounds_played,
        "last_delta": str(session.last_delta),
        "last_result": _serialize_result(session.last_result),
        "round": None if round_ is None else {
            "state": round_._machine_state,
            "dealer_hand": _serialize_hand(round_.dealer_hand),
            "player_hand": _serialize_hand(round_.player_hand),
            "result": _serialize_result(round_.result),
        },
        "rules": {
            "max_bet": str(session.rules.max_bet),
            "blackjack_payout": session.rules.blackjack_payout,
            "dealer_hit_limit": session.rules.dealer_hit_limit,
        },
    }


def _deserialize_game(data: dict[str, Any]) -> GameSession:
    """Restore a session from stored data."""
    rules_data = data["rules"]
    rules = RuleSet(
        max_bet=Decimal(rules_data["max_bet"]),
        blackjack_payout=rules_data["blackjack_payout"],
        dealer_hit_limit=rules_data["dealer_hit_limit"],
    )

    session = GameSession(rules=rules, initial_bankroll=Decimal(data["bankroll"]))
    session.current_bet = Decimal(data["current_bet"])
    session.rounds_played = data["rounds_played"]
    session.last_delta = Decimal(data["last_delta"])
    session.last_result = _deserialize_result(data["last_result"])

    round_data = data["round"]
    if round_data is not None:
        round_ = BlackjackRound(rules=rules, source=session.source, events=session.events)
        round_._machine_state = round_data["state"]
        round_.dealer_hand = _deserialize_hand(Owner.DEALER, round_data["dealer_hand"])
        round_.player_hand = _deserialize_hand(Owner.PLAYER, round_data["player_hand"])
        round_.result = _deserialize_result(round_data["result"])
        session.current_round = round_
        if round_.finished:
            # Already paid out before it was stored
            session._settled_round = round_

    return session


async def _save_game(session_id: str, game: GameSession) -> None:
    """Save game to session store."""
    store = get_session_store()
    session_data = await store.get(session_id) or {}
    session_data[SESSION_KEY_GAME] = _serialize_game(game)
    session_data[SESSION_KEY_LAST_ACTIVITY] = int(time.time())
    if SESSION_KEY_CREATED_AT not in session_data:
        session_data[SESSION_KEY_CREATED_AT] = int(time.time())
    await store.set(session_id, session_data)


async def _get_game(token: str) -> tuple[str, GameSession]:
    """Resolve a signed token to its game, loading it from the store if needed."""
    session_id = extract_session_id(token)
    if session_id is None:
        raise HTTPException(status_code=404, detail="Unknown session")

    store = get_session_store()
    session_data = await store.get(session_id)
    if not session_data or SESSION_KEY_GAME not in session_data:
        if _games.pop(session_id, None) is not None:
            logger.info("Evicted expired game session")
        raise HTTPException(status_code=404, detail="Unknown session")

    if session_id in _games:
        return session_id, _games[session_id]

    game = _deserialize_game(session_data[SESSION_KEY_GAME])
    _games[session_id] = game
    return session_id, game


def _card_to_response(card: Card) -> CardResponse:
    return CardResponse(
        rank=str(card.rank),
        name=card.name,
        soft_value=card.soft_value,
        hard_value=card.hard_value,
    )


def _hand_to_response(hand: Hand, hide_hole_card: bool = False) -> HandResponse:
    """Convert a Hand to HandResponse."""
    if hide_hole_card:
        return HandResponse(
            cards=[_card_to_response(hand.cards[0]), None],
            value=None,
            is_blackjack=None,
            is_busted=None,
            is_standing=hand.is_standing,
        )
    return HandResponse(
        cards=[_card_to_response(c) for c in hand.cards],
        value=hand.best_sum,
        is_blackjack=hand.is_blackjack,
        is_busted=hand.is_busted,
        is_standing=hand.is_standing,
    )


def _game_state_response(game: GameSession) -> GameStateResponse:
    """Convert session state to response."""
    round_ = game.current_round

    if game.is_over:
        state = "GAME_OVER"
    elif round_ is None:
        state = "WAITING_FOR_BET"
    else:
        state = round_.state.name

    player_turn = round_ is not None and round_.state == RoundState.PLAYER_TURN

    last_result = None
    if game.last_result is not None:
        last_result = RoundResultResponse(
            delta=float(game.last_delta),
            **_serialize_result(game.last_result),  # type: ignore[arg-type]
        )

    return GameStateResponse(
        state=state,
        bankroll=float(game.bankroll),
        max_stake=float(max(game.max_stake, Decimal("0"))),
        current_bet=float(game.current_bet),
        rounds_played=game.rounds_played,
        is_over=game.is_over,
        dealer_hand=None if round_ is None else _hand_to_response(round_.dealer_hand, hide_hole_card=player_turn),
        player_hand=None if round_ is None else _hand_to_response(round_.player_hand),
        can_hit=player_turn,
        can_stand=player_turn,
        last_result=last_result,
    )


@router.post("/new")
async def new_game(request: NewGameRequest | None = None) -> NewGameResponse:
    """Create a new game session."""
    session_id, token = new_session_token()

    bankroll = Decimal(str(config.game.initial_bankroll))
    if request is not None and request.initial_bankroll is not None:
        bankroll = request.initial_bankroll

    game = GameSession(rules=RuleSet.from_config(), initial_bankroll=bankroll)
    _games[session_id] = game
    await _save_game(session_id, game)
    logger.info("New game session with bankroll %s", bankroll)

    return NewGameResponse(session_id=token)


@router.get("/state")
async def get_state(
    session_token: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Get current game state."""
    _, game = await _get_game(session_token)
    return _game_state_response(game)


@router.post("/bet")
async def place_bet(
    request: BetRequest,
    session_token: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Place a bet and deal cards."""
    session_id, game = await _get_game(session_token)

    try:
        game.start_round(request.amount)
    except BlackjackError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    await _save_game(session_id, game)
    return _game_state_response(game)


@router.post("/action")
async def player_action(
    request: ActionRequest,
    session_token: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Execute a player action."""
    session_id, game = await _get_game(session_token)

    recommendation = None
    try:
        if request.action == "hit":
            game.hit()
        elif request.action == "stand":
            game.stand()
        else:
            recommendation = game.hint()
    except BlackjackError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    await _save_game(session_id, game)
    response = _game_state_response(game)
    if recommendation is not None:
        response = response.model_copy(update={"recommendation": str(recommendation)})
    return response
