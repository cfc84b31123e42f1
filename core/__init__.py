"""Core blackjack engine - 100% UI-agnostic."""

from core.cards import Card, CardSource, InfiniteShoe, Rank, draw_card
from core.hand import Hand, Owner

__all__ = [
    "Card",
    "CardSource",
    "InfiniteShoe",
    "Rank",
    "draw_card",
    "Hand",
    "Owner",
]
