"""Pytest fixtures for blackjack round tests."""

import pytest
from decimal import Decimal
from random import Random

from hypothesis import strategies as st

from core.cards import Card, InfiniteShoe, Rank
from core.hand import Hand, Owner
from core.strategy import BasicStrategy, RuleSet
from core.game import BlackjackRound, GameSession, Move


class StackedSource:
    """Card source that deals a fixed sequence, for scripted rounds."""

    def __init__(self, ranks):
        self._cards = [Card.from_string(r) for r in ranks]
        self.dealt = 0

    def draw(self) -> Card:
        if self.dealt >= len(self._cards):
            raise IndexError("Stacked source exhausted")
        card = self._cards[self.dealt]
        self.dealt += 1
        return card

    @property
    def remaining(self) -> int:
        return len(self._cards) - self.dealt


def make_hand(*ranks, owner=Owner.PLAYER) -> Hand:
    """Build a hand from rank strings like 'A', '10', 'K'."""
    return Hand(owner=owner, cards=[Card.from_string(r) for r in ranks])


def scripted(*moves):
    """Player-action source that replays moves, then stands forever."""
    queue = list(moves)

    def source(round_):
        return queue.pop(0) if queue else Move.STAND

    return source


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def shoe(rng):
    """A seeded infinite shoe."""
    return InfiniteShoe(rng=rng)


@pytest.fixture
def stacked():
    """Factory for stacked card sources: dealer two, player two, then draws."""
    return StackedSource


@pytest.fixture
def empty_hand():
    """An empty player hand."""
    return Hand()


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand (A-K)."""
    return make_hand("A", "K")


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    return make_hand("10", "6")


@pytest.fixture
def bust_hand():
    """A busted hand."""
    return make_hand("10", "6", "K")


@pytest.fixture
def rules():
    """Default ruleset."""
    return RuleSet()


@pytest.fixture
def basic_strategy():
    return BasicStrategy()


@pytest.fixture
def round_factory(rules):
    """Build a round over a stacked source."""

    def factory(*ranks):
        return BlackjackRound(rules=rules, source=StackedSource(ranks))

    return factory


@pytest.fixture
def session_factory(rules):
    """Build a session over a stacked source."""

    def factory(*ranks, bankroll=Decimal("1000")):
        return GameSession(rules=rules, initial_bankroll=bankroll, source=StackedSource(ranks))

    return factory


# Hypothesis strategies for property-based testing

NON_ACE_RANKS = [r for r in Rank if not r.is_ace]


@st.composite
def non_ace_card_strategy(draw):
    """Generate a random non-ace card."""
    return Card(draw(st.sampled_from(NON_ACE_RANKS)))


@st.composite
def card_strategy(draw):
    """Generate a random card."""
    return Card(draw(st.sampled_from(list(Rank))))
