"""Round state enumeration."""

from enum import Enum, auto


class RoundState(Enum):
    """
    Round state machine states.

    Flow: DEALING → PLAYER_TURN → DEALER_TURN → SETTLED
    """

    # Cards being dealt
    DEALING = auto()

    # Player actions
    PLAYER_TURN = auto()

    # Dealer plays
    DEALER_TURN = auto()

    # Winner decided (terminal)
    SETTLED = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()
