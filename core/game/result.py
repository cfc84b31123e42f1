"""Round outcomes and bet settlement."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class Winner(Enum):
    """Who took the round."""

    DEALER = "dealer"
    PLAYER = "player"
    TIE = "tie"

    def __str__(self) -> str:
        return self.value


class SettleReason(Enum):
    """Why the round ended the way it did."""

    DEALER_BLACKJACK = "dealer_blackjack"
    PLAYER_BUST = "player_bust"
    DEALER_BUST = "dealer_bust"
    HIGHER_TOTAL = "higher_total"
    TIE = "tie"


@dataclass(frozen=True)
class RoundResult:
    """Final outcome of one round."""

    winner: Winner
    player_blackjack: bool
    dealer_sum: int
    player_sum: int
    reason: SettleReason

    def delta(self, bet_size: Decimal, blackjack_payout: float = 1.5) -> Decimal:
        """Bankroll change for this result at the given stake."""
        return settle_bet(self.winner, self.player_blackjack, bet_size, blackjack_payout)


def compare_totals(dealer_sum: int, player_sum: int) -> RoundResult:
    """
    Decide a round where both sides finished without an early exit.

    A dealer bust or a higher player total wins for the player; equal totals
    tie; anything else goes to the dealer.
    """
    if dealer_sum > 21 or player_sum > dealer_sum:
        return RoundResult(
            winner=Winner.PLAYER,
            player_blackjack=player_sum == 21,
            dealer_sum=dealer_sum,
            player_sum=player_sum,
            reason=SettleReason.DEALER_BUST if dealer_sum > 21 else SettleReason.HIGHER_TOTAL,
        )
    if player_sum == dealer_sum:
        return RoundResult(
            winner=Winner.TIE,
            player_blackjack=False,
            dealer_sum=dealer_sum,
            player_sum=player_sum,
            reason=SettleReason.TIE,
        )
    return RoundResult(
        winner=Winner.DEALER,
        player_blackjack=False,
        dealer_sum=dealer_sum,
        player_sum=player_sum,
        reason=SettleReason.HIGHER_TOTAL,
    )


def settle_bet(
    winner: Winner,
    player_blackjack: bool,
    bet_size: Decimal,
    blackjack_payout: float = 1.5,
) -> Decimal:
    """
    Compute the bankroll change for a settled bet.

    The bet is not validated and the result is not clamped; keeping the
    bankroll above zero is the session's job.

    Args:
        winner: Who won the round
        player_blackjack: Whether the player won with 21
        bet_size: Amount staked
        blackjack_payout: Multiplier paid on a player 21 (3:2 = 1.5)

    Returns:
        Positive for a player win, negative for a loss, zero for a tie
    """
    bet = Decimal(str(bet_size))
    if winner == Winner.PLAYER:
        if player_blackjack:
            return bet * Decimal(str(blackjack_payout))
        return bet
    if winner == Winner.DEALER:
        return -bet
    return Decimal("0")
