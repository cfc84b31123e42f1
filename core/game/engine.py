"""Blackjack round engine with state machine."""

import logging
from enum import Enum
from random import Random
from typing import Callable

from transitions import Machine

from core.cards import CardSource, InfiniteShoe
from core.hand import Hand, Owner
from core.strategy.basic import Action, BasicStrategy
from core.strategy.rules import RuleSet
from core.game.events import EventEmitter, EventType, GameEvent
from core.game.result import RoundResult, SettleReason, Winner, compare_totals
from core.game.state import RoundState

logger = logging.getLogger(__name__)


class Move(Enum):
    """Player inputs during the player turn."""

    HIT = "hit"
    STAND = "stand"
    HINT = "hint"

    @classmethod
    def parse(cls, text: str) -> "Move | None":
        """Parse typed input; anything unrecognized becomes None."""
        try:
            return cls(text.strip().lower())
        except ValueError:
            return None


# Called once per prompt; None means the input was not understood.
PlayerActionSource = Callable[["BlackjackRound"], Move | None]


class BlackjackRound:
    """
    One round of blackjack, driven by a state machine.

    The round deals a dealer and a player hand from an infinite shoe, takes
    player moves, plays the dealer out and records a :class:`RoundResult`.
    It knows nothing about bankrolls: settlement amounts are computed by the
    session from the result. Communication happens through events and
    return values only.
    """

    # State machine states
    STATES = [s.name.lower() for s in RoundState]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "cards_dealt", "source": "dealing", "dest": "player_turn"},
        {"trigger": "dealer_blackjack", "source": "dealing", "dest": "settled"},
        {"trigger": "player_action", "source": "player_turn", "dest": "player_turn"},
        {"trigger": "player_done", "source": "player_turn", "dest": "dealer_turn"},
        {"trigger": "player_busts", "source": "player_turn", "dest": "settled"},
        {"trigger": "dealer_done", "source": "dealer_turn", "dest": "settled"},
    ]

    def __init__(
        self,
        rules: RuleSet | None = None,
        source: CardSource | None = None,
        strategy: BasicStrategy | None = None,
        events: EventEmitter | None = None,
        rng: Random | None = None,
    ) -> None:
        """
        Initialize a new round in the dealing state.

        Args:
            rules: Table rules (uses defaults if not provided)
            source: Card source; an InfiniteShoe is created if not provided
            strategy: Advisor consulted for hints
            events: Emitter to publish on, shared with the session if given
            rng: Random number generator for the default shoe
        """
        self.rules = rules or RuleSet()
        self.source = source or InfiniteShoe(rng=rng)
        self.strategy = strategy or BasicStrategy()
        self.events = events or EventEmitter()

        self.dealer_hand = Hand(owner=Owner.DEALER)
        self.player_hand = Hand(owner=Owner.PLAYER)
        self.result: RoundResult | None = None

        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="dealing",
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    @property
    def state(self) -> RoundState:
        """Get current round state as enum."""
        return RoundState[self._machine_state.upper()]  # type: ignore

    @classmethod
    def next_states(cls, state: RoundState) -> set[RoundState]:
        """States reachable from ``state`` through one transition."""
        source = state.name.lower()
        return {
            RoundState[t["dest"].upper()]
            for t in cls.TRANSITIONS
            if t["source"] == source
        }

    @property
    def finished(self) -> bool:
        """True once the round sits in a state with no way out."""
        return not self.next_states(self.state)

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to round events."""
        self.events.subscribe(handler, event_type)

    def deal(self) -> bool:
        """
        Deal two cards to the dealer, then two to the player.

        A dealer blackjack settles the round on the spot; the player never
        gets to act.

        Returns:
            True if cards were dealt
        """
        if self.state != RoundState.DEALING:
            self._reject("deal")
            return False

        self.dealer_hand = Hand.deal(Owner.DEALER, self.source)
        self.player_hand = Hand.deal(Owner.PLAYER, self.source)

        for i, card in enumerate(self.dealer_hand.cards):
            self.events.emit_new(
                EventType.CARD_DEALT,
                card=str(card) if i == 0 else "??",
                hand=str(Owner.DEALER),
            )
        for card in self.player_hand.cards:
            self.events.emit_new(
                EventType.CARD_DEALT,
                card=str(card),
                hand=str(Owner.PLAYER),
                hand_value=self.player_hand.best_sum,
            )

        self.events.emit_new(
            EventType.ROUND_STARTED,
            dealer_upcard=self.dealer_hand.cards[0].name,
            player_value=self.player_hand.best_sum,
        )

        if self.dealer_hand.is_blackjack:
            self.events.emit_new(EventType.DEALER_BLACKJACK)
            self.dealer_blackjack()
            self._settle(
                RoundResult(
                    winner=Winner.DEALER,
                    player_blackjack=False,
                    dealer_sum=self.dealer_hand.best_sum,
                    player_sum=self.player_hand.best_sum,
                    reason=SettleReason.DEALER_BLACKJACK,
                )
            )
            return True

        self.cards_dealt()
        return True

    def hit(self) -> bool:
        """Player hits (takes another card)."""
        if self.state != RoundState.PLAYER_TURN:
            self._reject("hit")
            return False

        card = self.player_hand.draw(self.source)
        self.events.emit_new(
            EventType.CARD_DEALT,
            card=str(card),
            hand=str(Owner.PLAYER),
            hand_value=self.player_hand.best_sum,
        )
        self.events.emit_new(EventType.PLAYER_HIT, hand_value=self.player_hand.best_sum)

        if self.player_hand.is_busted:
            self.events.emit_new(EventType.PLAYER_BUSTS, hand_value=self.player_hand.best_sum)
            self.player_busts()
            self._settle(
                RoundResult(
                    winner=Winner.DEALER,
                    player_blackjack=False,
                    dealer_sum=self.dealer_hand.best_sum,
                    player_sum=self.player_hand.best_sum,
                    reason=SettleReason.PLAYER_BUST,
                )
            )
            return True

        self.player_action()  # Stay in player turn
        return True

    def stand(self) -> bool:
        """Player stands; the dealer then plays out and the round settles."""
        if self.state != RoundState.PLAYER_TURN:
            self._reject("stand")
            return False

        self.player_hand.stand()
        self.events.emit_new(EventType.PLAYER_STAND, hand_value=self.player_hand.best_sum)
        self.player_done()
        self._play_dealer()
        return True

    def hint(self) -> Action | None:
        """
        Ask the advisor for a move.

        Does not change the round or use up the player's turn.

        Returns:
            The recommended action, or None outside the player turn
        """
        if self.state != RoundState.PLAYER_TURN:
            self._reject("hint")
            return None

        action = self.strategy.get_action(self.dealer_hand, self.player_hand)
        self.events.emit_new(EventType.HINT_GIVEN, action=str(action))
        return action

    def apply(self, move: Move | None) -> bool:
        """
        Apply one player input.

        Unrecognized input (None) is ignored and reported as an
        INVALID_ACTION event.

        Returns:
            True if the input was accepted
        """
        if move is None:
            self.events.emit_new(EventType.INVALID_ACTION, message="Unrecognized move")
            return False
        if move is Move.HIT:
            return self.hit()
        if move is Move.STAND:
            return self.stand()
        return self.hint() is not None

    def play(self, action_source: PlayerActionSource) -> RoundResult:
        """
        Run the round to completion.

        Deals if needed, then asks ``action_source`` for moves until the
        player stands or busts.
        """
        if self.state == RoundState.DEALING:
            self.deal()

        while self.state == RoundState.PLAYER_TURN:
            self.apply(action_source(self))

        assert self.result is not None
        return self.result

    def _play_dealer(self) -> None:
        """Dealer draws while at or below the hit limit, then the hands are compared."""
        self.events.emit_new(
            EventType.DEALER_REVEALS,
            card=str(self.dealer_hand.cards[1]),
            hand_value=self.dealer_hand.best_sum,
        )

        while self._dealer_should_hit():
            card = self.dealer_hand.draw(self.source)
            self.events.emit_new(
                EventType.DEALER_HITS,
                card=str(card),
                hand_value=self.dealer_hand.best_sum,
            )

        if self.dealer_hand.is_busted:
            self.events.emit_new(EventType.DEALER_BUSTS, hand_value=self.dealer_hand.best_sum)
        else:
            self.events.emit_new(EventType.DEALER_STANDS, hand_value=self.dealer_hand.best_sum)

        self.dealer_done()
        self._settle(compare_totals(self.dealer_hand.best_sum, self.player_hand.best_sum))

    def _dealer_should_hit(self) -> bool:
        """Hard 17 rule: no soft/hard distinction, 17 itself draws."""
        return self.dealer_hand.best_sum <= self.rules.dealer_hit_limit

    def _settle(self, result: RoundResult) -> None:
        """Record the result of a round that just reached SETTLED."""
        self.result = result
        logger.debug(
            "Round settled: winner=%s reason=%s dealer=%d player=%d",
            result.winner,
            result.reason.value,
            result.dealer_sum,
            result.player_sum,
        )
        self.events.emit_new(
            EventType.ROUND_SETTLED,
            winner=str(result.winner),
            player_blackjack=result.player_blackjack,
            dealer_sum=result.dealer_sum,
            player_sum=result.player_sum,
            reason=result.reason.value,
        )

    def _reject(self, action: str) -> None:
        logger.debug("Rejected %s in state %s", action, self.state.name)
        self.events.emit_new(
            EventType.INVALID_ACTION,
            message=f"Cannot {action} in current state",
            state=self.state.name,
        )
