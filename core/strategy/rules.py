"""Blackjack house rules."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class RuleSet:
    """
    Blackjack table rules configuration.

    The table plays from a continuous shuffle machine with no splitting,
    doubling, surrender or insurance, so only betting, payout and dealer
    rules remain configurable.
    """

    # Betting limits
    max_bet: Decimal = Decimal("1000")

    # Blackjack payout (3:2 = 1.5, 6:5 = 1.2)
    blackjack_payout: float = 1.5

    # Dealer draws while its total is at or below this value (hard 17 rule)
    dealer_hit_limit: int = 17

    def __post_init__(self) -> None:
        """Validate rule combinations."""
        if self.max_bet <= 0:
            raise ValueError("max_bet must be positive")
        if self.blackjack_payout < 1.0:
            raise ValueError("blackjack_payout must be at least 1.0")
        if not 2 <= self.dealer_hit_limit <= 21:
            raise ValueError("dealer_hit_limit must be between 2 and 21")

    @classmethod
    def from_config(cls) -> "RuleSet":
        """Build rules from the application configuration."""
        from config import config

        return cls(
            max_bet=Decimal(str(config.game.max_bet)),
            blackjack_payout=config.game.blackjack_payout,
            dealer_hit_limit=config.game.dealer_hit_limit,
        )
