"""Bankroll session that plays rounds back to back."""

import logging
from decimal import Decimal, InvalidOperation
from random import Random
from typing import Any

from core.cards import CardSource, InfiniteShoe
from core.strategy.basic import Action
from core.strategy.rules import RuleSet
from core.game.engine import BlackjackRound, PlayerActionSource
from core.game.events import EventEmitter, EventType
from core.game.result import RoundResult

logger = logging.getLogger(__name__)


class BlackjackError(Exception):
    """Base class for session errors."""


class InvalidBetError(BlackjackError):
    """Bet outside (0, max stake]."""


class SessionOverError(BlackjackError):
    """The bankroll is exhausted."""


class GameSession:
    """
    A player's bankroll across many rounds.

    The session validates bets, starts rounds and applies each round's
    settlement to the bankroll exactly once. Rounds share the session's card
    source and event emitter.
    """

    def __init__(
        self,
        rules: RuleSet | None = None,
        initial_bankroll: Decimal = Decimal("1000"),
        source: CardSource | None = None,
        rng: Random | None = None,
    ) -> None:
        """
        Initialize a session.

        Args:
            rules: Table rules (uses defaults if not provided)
            initial_bankroll: Starting bankroll
            source: Card source shared by every round
            rng: Random number generator for the default shoe
        """
        self.rules = rules or RuleSet()
        self.bankroll = Decimal(str(initial_bankroll))
        self.source = source or InfiniteShoe(rng=rng)
        self.events = EventEmitter()

        self.current_round: BlackjackRound | None = None
        self.current_bet = Decimal("0")
        self.last_result: RoundResult | None = None
        self.last_delta = Decimal("0")
        self.rounds_played = 0
        self._settled_round: BlackjackRound | None = None

    @property
    def max_stake(self) -> Decimal:
        """Largest bet allowed right now."""
        return min(self.rules.max_bet, self.bankroll)

    @property
    def is_over(self) -> bool:
        """Check if the bankroll is exhausted."""
        return self.bankroll <= 0

    @property
    def in_round(self) -> bool:
        """Check if a round is waiting on player input."""
        return self.current_round is not None and not self.current_round.finished

    def validate_bet(self, amount: Any) -> bool:
        """Check that a bet is a number in (0, max stake]."""
        try:
            bet = Decimal(str(amount).strip())
        except InvalidOperation:
            return False
        return bet.is_finite() and Decimal("0") < bet <= self.max_stake

    def start_round(self, bet: Any) -> BlackjackRound:
        """
        Place a bet and deal a new round.

        Args:
            bet: Bet amount

        Returns:
            The dealt round, possibly already settled by a dealer blackjack

        Raises:
            SessionOverError: If the bankroll is exhausted
            BlackjackError: If a round is already in progress
            InvalidBetError: If the bet is outside (0, max stake]
        """
        if self.is_over:
            raise SessionOverError("No more coins left")
        if self.in_round:
            raise BlackjackError("A round is already in progress")
        if not self.validate_bet(bet):
            raise InvalidBetError(f"Bet must be more than 0 and at most {self.max_stake}")

        self.current_bet = Decimal(str(bet).strip())
        self.current_round = BlackjackRound(
            rules=self.rules,
            source=self.source,
            events=self.events,
        )
        self.events.emit_new(EventType.BET_PLACED, amount=float(self.current_bet))
        logger.debug("Round %d started with bet %s", self.rounds_played + 1, self.current_bet)

        self.current_round.deal()
        self._apply_if_settled()
        return self.current_round

    def hit(self) -> bool:
        """Hit on the current round."""
        accepted = self._require_round().hit()
        self._apply_if_settled()
        return accepted

    def stand(self) -> bool:
        """Stand on the current round."""
        accepted = self._require_round().stand()
        self._apply_if_settled()
        return accepted

    def hint(self) -> Action | None:
        """Get advice for the current round."""
        return self._require_round().hint()

    def play_round(self, bet: Any, action_source: PlayerActionSource) -> RoundResult:
        """Play a whole round, blocking on ``action_source`` for each move."""
        round_ = self.start_round(bet)
        result = round_.play(action_source)
        self._apply_if_settled()
        return result

    def _require_round(self) -> BlackjackRound:
        if not self.in_round:
            raise BlackjackError("No round in progress")
        assert self.current_round is not None
        return self.current_round

    def _apply_if_settled(self) -> None:
        """Credit or debit the bankroll once per finished round."""
        round_ = self.current_round
        if round_ is None or not round_.finished or round_ is self._settled_round:
            return
        assert round_.result is not None

        delta = round_.result.delta(self.current_bet, self.rules.blackjack_payout)
        self.bankroll += delta
        self.last_result = round_.result
        self.last_delta = delta
        self.rounds_played += 1
        self._settled_round = round_

        logger.info(
            "Round %d: %s wins, delta %s, bankroll %s",
            self.rounds_played,
            round_.result.winner,
            delta,
            self.bankroll,
        )
        self.events.emit_new(
            EventType.BANKROLL_CHANGED,
            delta=float(delta),
            bankroll=float(self.bankroll),
        )

        if self.is_over:
            self.events.emit_new(EventType.GAME_ENDED, reason="bankrupt")
