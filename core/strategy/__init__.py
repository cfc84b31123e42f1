"""Strategy advisor and table rules."""

from core.strategy.rules import RuleSet
from core.strategy.basic import Action, BasicStrategy, recommend, soft_total

__all__ = [
    "RuleSet",
    "Action",
    "BasicStrategy",
    "recommend",
    "soft_total",
]
