"""Basic strategy advisor for blackjack."""

from enum import Enum, auto

from core.hand import Hand


class Action(Enum):
    """Actions the advisor can recommend."""

    HIT = auto()
    STAND = auto()

    def __str__(self) -> str:
        return self.name.lower()


def soft_total(hand: Hand) -> int:
    """
    Total a hand with every ace counted as 1.

    The non-ace cards are scored with the normal hand rule, then one point is
    added per ace.
    """
    non_aces = Hand(owner=hand.owner, cards=[c for c in hand.cards if not c.is_ace])
    aces = sum(1 for c in hand.cards if c.is_ace)
    return non_aces.best_sum + aces


def recommend(dealer_hand: Hand, player_hand: Hand) -> Action:
    """
    Recommend HIT or STAND for the player.

    A fixed table approximating the expectation-maximizing play. The dealer
    total is the whole dealer hand, hole card included.

    Args:
        dealer_hand: The dealer's hand
        player_hand: The player's hand

    Returns:
        The recommended action
    """
    dealer_sum = dealer_hand.best_sum

    # Soft hands
    if player_hand.has_ace:
        total = soft_total(player_hand)
        if total >= 8:
            return Action.STAND
        if total == 7:
            if 4 <= dealer_sum <= 6:
                return Action.STAND
            return Action.HIT
        return Action.HIT

    # Hard hands
    player_sum = player_hand.best_sum

    if player_sum >= 17:
        return Action.STAND

    if player_sum >= 13:
        if dealer_sum >= 7:
            return Action.HIT
        return Action.STAND

    if player_sum == 12:
        if dealer_sum <= 3 or dealer_sum >= 7:
            return Action.HIT
        return Action.STAND

    return Action.HIT


class BasicStrategy:
    """
    Basic strategy advisor.

    The round engine consults an advisor object so another table can be
    swapped in; this one delegates to :func:`recommend`.
    """

    def get_action(self, dealer_hand: Hand, player_hand: Hand) -> Action:
        """Get the basic strategy action for a hand pair."""
        return recommend(dealer_hand, player_hand)
