"""Console blackjack game."""

import argparse
import logging
import sys
from dataclasses import replace
from decimal import Decimal, InvalidOperation
from random import Random
from typing import Iterable, Optional, TextIO

from config import config
from core.game import (
    BlackjackRound,
    EventType,
    GameEvent,
    GameSession,
    Move,
    Winner,
)
from core.strategy import RuleSet

logger = logging.getLogger(__name__)

WELCOME_TEXT = """Welcome to Blackjack
Press "p" to play, "h" for help, and "q" to quit"""

HELP_TEXT = """This game makes several simplifications for now.
It assumes a continuous shuffle machine rather than a fixed set of decks.
Dealer hits on a hard 17.
No splitting, no doubling, no surrendering, etc.
Only original bets are lost on dealer blackjack, although the dealer wins immediately."""

MOVE_PROMPT = 'Would you like to "hit", "stand", or receive a "hint"?'


class InputClosed(Exception):
    """Raised when the input stream runs dry."""


def format_coins(amount: Decimal) -> str:
    return f"{amount:.2f}"


def positive_amount(text: str) -> Decimal:
    """argparse type for coin amounts: finite and greater than zero."""
    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"not a number: {text!r}")
    if not amount.is_finite() or amount <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive amount: {text!r}")
    return amount


class ConsoleGame:
    """
    Line-based front end for a :class:`GameSession`.

    Prompts are read from ``stdin`` and everything the round reports arrives
    as events, which are printed to ``stdout``.
    """

    def __init__(
        self,
        session: GameSession,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        self.session = session
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout

        session.events.subscribe(self._on_dealer_blackjack, EventType.DEALER_BLACKJACK)
        session.events.subscribe(self._on_player_busts, EventType.PLAYER_BUSTS)
        session.events.subscribe(self._on_dealer_hits, EventType.DEALER_HITS)
        session.events.subscribe(self._on_hint, EventType.HINT_GIVEN)
        session.events.subscribe(self._on_invalid, EventType.INVALID_ACTION)
        session.events.subscribe(self._on_settled, EventType.ROUND_SETTLED)
        session.events.subscribe(self._on_bankroll, EventType.BANKROLL_CHANGED)

    def say(self, text: str) -> None:
        print(text, file=self.stdout)

    def read_line(self) -> str:
        line = self.stdin.readline()
        if not line:
            raise InputClosed()
        return line.strip()

    def run(self) -> int:
        """Play until the player quits or runs out of coins."""
        self.say(WELCOME_TEXT)
        try:
            if not self.wants_to_play():
                return 0

            while not self.session.is_over:
                bet = self.ask_bet()
                self.session.play_round(bet, self.ask_move)

            self.say("You have no more coins! Game Over")
        except InputClosed:
            logger.debug("Input closed, leaving the table")
            self.say("Goodbye")
        return 0

    def wants_to_play(self) -> bool:
        """Menu loop: "p" plays, "h" shows help, "q" quits."""
        while True:
            choice = self.read_line().lower()
            if choice == "p":
                return True
            if choice == "q":
                return False
            if choice == "h":
                self.say(HELP_TEXT)
                self.say(WELCOME_TEXT.splitlines()[1])
                continue
            self.say("Invalid option, try again")

    def ask_bet(self) -> Decimal:
        """Prompt until the player enters a bet in (0, max stake]."""
        self.say(
            f"You have {format_coins(self.session.bankroll)} coins. "
            f"How much would you like to bet, up to {format_coins(self.session.max_stake)}?"
        )
        while True:
            text = self.read_line()
            if self.session.validate_bet(text):
                return Decimal(text)
            self.say("Invalid bet size, try again.")

    def ask_move(self, round_: BlackjackRound) -> Move | None:
        """Show the table and read one move."""
        self.say(f"Dealer's Hand: {round_.dealer_hand.cards[0].name}, ?")
        self.say(f"Your Hand: {', '.join(c.name for c in round_.player_hand.cards)}")
        self.say(MOVE_PROMPT)
        return Move.parse(self.read_line())

    def _on_dealer_blackjack(self, event: GameEvent) -> None:
        self.say("Dealer automatically won by blackjack 21!")

    def _on_player_busts(self, event: GameEvent) -> None:
        self.say(f"You busted! Player hand = {event.data['hand_value']}")

    def _on_dealer_hits(self, event: GameEvent) -> None:
        self.say(f"Dealer hit, now at {event.data['hand_value']}")

    def _on_hint(self, event: GameEvent) -> None:
        self.say(f"The ideal move is to {event.data['action']}")

    def _on_invalid(self, event: GameEvent) -> None:
        self.say("Invalid choice.")

    def _on_settled(self, event: GameEvent) -> None:
        if event.data["winner"] == str(Winner.TIE):
            self.say("Tie, no change in coins")
            return
        self.say(
            f"Dealer {event.data['dealer_sum']}, Player {event.data['player_sum']}. "
            f"Winner was the {event.data['winner']}!"
        )

    def _on_bankroll(self, event: GameEvent) -> None:
        if event.data["delta"]:
            self.say(f"Player coins is now {format_coins(self.session.bankroll)}")


def parse_args(argv: Optional[Iterable[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play blackjack against a hard-17 dealer.")
    parser.add_argument(
        "--bankroll",
        type=positive_amount,
        default=Decimal(str(config.game.initial_bankroll)),
        help="Starting coins",
    )
    parser.add_argument(
        "--max-bet",
        dest="max_bet",
        type=positive_amount,
        default=Decimal(str(config.game.max_bet)),
        help="Largest bet allowed per round",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible deals")
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default=config.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Logging level (logs go to stderr)",
    )
    return parser.parse_args(list(argv) if argv is not None else None)


def main(argv: Optional[Iterable[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    rules = replace(RuleSet.from_config(), max_bet=args.max_bet)
    rng = Random(args.seed) if args.seed is not None else None
    session = GameSession(rules=rules, initial_bankroll=args.bankroll, rng=rng)
    return ConsoleGame(session).run()


if __name__ == "__main__":
    sys.exit(main())
