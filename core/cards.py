"""Card model and the continuous-shuffle card source."""

from dataclasses import dataclass
from enum import Enum
from random import Random
from typing import Protocol


class Rank(Enum):
    """Card ranks. Jack, Queen and King are distinct ranks worth 10."""

    ACE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13

    def __str__(self) -> str:
        if 2 <= self.value <= 10:
            return str(self.value)
        return {
            Rank.ACE: "A",
            Rank.JACK: "J",
            Rank.QUEEN: "Q",
            Rank.KING: "K",
        }[self]

    @property
    def soft_value(self) -> int:
        """Return the low point value (Ace = 1, face cards = 10)."""
        return min(self.value, 10)

    @property
    def hard_value(self) -> int:
        """Return the high point value (Ace = 11)."""
        if self == Rank.ACE:
            return 11
        return self.soft_value

    @property
    def is_ace(self) -> bool:
        """Check if this rank is an Ace."""
        return self == Rank.ACE

    @property
    def display_name(self) -> str:
        """Return the spoken name used in prompts ("Ace", "7", "Queen")."""
        if 2 <= self.value <= 10:
            return str(self.value)
        return self.name.title()


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card. Suits are not tracked."""

    rank: Rank

    def __str__(self) -> str:
        return str(self.rank)

    def __repr__(self) -> str:
        return f"Card({self.rank.name})"

    @property
    def soft_value(self) -> int:
        """Return the value with an Ace counted as 1."""
        return self.rank.soft_value

    @property
    def hard_value(self) -> int:
        """Return the value with an Ace counted as 11."""
        return self.rank.hard_value

    @property
    def is_ace(self) -> bool:
        """Check if this card is an Ace."""
        return self.rank.is_ace

    @property
    def name(self) -> str:
        return self.rank.display_name

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a rank string like 'A', '7', '10', 'T' or 'k'."""
        s = s.strip().upper()

        rank_map = {
            "A": Rank.ACE,
            "2": Rank.TWO,
            "3": Rank.THREE,
            "4": Rank.FOUR,
            "5": Rank.FIVE,
            "6": Rank.SIX,
            "7": Rank.SEVEN,
            "8": Rank.EIGHT,
            "9": Rank.NINE,
            "10": Rank.TEN,
            "T": Rank.TEN,
            "J": Rank.JACK,
            "Q": Rank.QUEEN,
            "K": Rank.KING,
        }

        if s not in rank_map:
            raise ValueError(f"Invalid rank: {s!r}")

        return cls(rank_map[s])


# Every rank is equally likely; face-value duplication is not weighted.
ALL_RANKS: tuple[Rank, ...] = tuple(Rank)


def draw_card(rng: Random | None = None) -> Card:
    """Draw one card uniformly from the 13 ranks."""
    return Card((rng or Random()).choice(ALL_RANKS))


class CardSource(Protocol):
    """Anything that can hand out one card at a time."""

    def draw(self) -> Card:
        ...


class InfiniteShoe:
    """
    A continuous shuffle machine.

    Every draw is independent: nothing is depleted and no suits are tracked,
    so the shoe never runs out and never needs reshuffling.
    """

    def __init__(self, rng: Random | None = None) -> None:
        """
        Initialize the shoe.

        Args:
            rng: Random number generator for reproducible draws
        """
        self._rng = rng or Random()
        self._cards_dealt = 0

    def draw(self) -> Card:
        """Draw a card."""
        self._cards_dealt += 1
        return draw_card(self._rng)

    @property
    def cards_dealt(self) -> int:
        """Return the number of cards drawn so far."""
        return self._cards_dealt
