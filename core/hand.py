"""Hand evaluation for blackjack."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from core.cards import Card, CardSource


class Owner(Enum):
    """Who a hand belongs to."""

    DEALER = "dealer"
    PLAYER = "player"

    def __str__(self) -> str:
        return self.value


@dataclass
class Hand:
    """A blackjack hand with value calculation."""

    owner: Owner = Owner.PLAYER
    cards: list[Card] = field(default_factory=list)
    is_standing: bool = False

    @classmethod
    def deal(cls, owner: Owner, source: CardSource) -> "Hand":
        """Create a hand holding two freshly drawn cards."""
        return cls(owner=owner, cards=[source.draw(), source.draw()])

    def add_card(self, card: Card) -> None:
        """Add a card to the hand."""
        self.cards.append(card)

    def draw(self, source: CardSource) -> Card:
        """Draw one card from the source into the hand."""
        card = source.draw()
        self.cards.append(card)
        return card

    def stand(self) -> None:
        """Stop taking cards."""
        self.is_standing = True

    @property
    def soft_sum(self) -> int:
        """Total with every ace counted as 1."""
        return sum(card.soft_value for card in self.cards)

    @property
    def hard_sum(self) -> int:
        """Total with every ace counted as 11."""
        return sum(card.hard_value for card in self.cards)

    @property
    def best_sum(self) -> int:
        """
        Calculate the hand value.

        Uses the all-hard total when it does not bust, otherwise the all-soft
        total. Mixed totals are never tried, so A-A is worth 2 rather than 12.
        """
        hard = self.hard_sum
        if hard <= 21:
            return hard
        return self.soft_sum

    @property
    def is_blackjack(self) -> bool:
        """Check if the hand totals 21, regardless of card count."""
        return self.best_sum == 21

    @property
    def is_busted(self) -> bool:
        """Check if the hand has busted (value > 21)."""
        return self.best_sum > 21

    @property
    def has_ace(self) -> bool:
        return any(card.is_ace for card in self.cards)

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        cards_str = ", ".join(card.name for card in self.cards)
        value_str = f"({self.best_sum})"
        if self.is_busted:
            value_str = "(BUST)"
        return f"{cards_str} {value_str}"

    def __repr__(self) -> str:
        return f"Hand({self.owner.name}, {self.cards!r}, value={self.best_sum})"
