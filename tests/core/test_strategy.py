"""Tests for the basic strategy advisor."""

import pytest

from core.hand import Owner
from core.strategy import Action, RuleSet, recommend, soft_total

from conftest import make_hand


def dealer(*ranks):
    return make_hand(*ranks, owner=Owner.DEALER)


class TestSoftTotal:
    """Tests for soft_total."""

    def test_single_ace(self):
        assert soft_total(make_hand("A", "6")) == 7

    def test_two_aces(self):
        assert soft_total(make_hand("A", "A")) == 2

    def test_non_aces_scored_normally(self):
        assert soft_total(make_hand("A", "K", "9")) == 20


class TestSoftHands:
    """Player holds at least one ace."""

    @pytest.mark.parametrize("ranks", [("A", "7"), ("A", "9"), ("A", "K"), ("A", "A", "6")])
    def test_soft_8_or_more_stands(self, ranks):
        """Test a soft total of 8+ stands whatever the dealer shows."""
        for up in [("2", "3"), ("10", "K"), ("5", "A")]:
            assert recommend(dealer(*up), make_hand(*ranks)) == Action.STAND

    @pytest.mark.parametrize("dealer_ranks", [("2", "2"), ("2", "3"), ("2", "4")])
    def test_soft_7_stands_against_4_to_6(self, dealer_ranks):
        assert recommend(dealer(*dealer_ranks), make_hand("A", "6")) == Action.STAND

    @pytest.mark.parametrize(
        "dealer_ranks",
        [("A", "A"), ("2", "A"), ("3", "4"), ("10", "7")],
    )
    def test_soft_7_hits_outside_4_to_6(self, dealer_ranks):
        """Test soft 7 hits when the dealer is at 3 or less, or 7 or more."""
        assert recommend(dealer(*dealer_ranks), make_hand("A", "6")) == Action.HIT

    def test_soft_7_against_dealer_2_hits(self):
        """Test dealer A-A (best sum 2) is outside 4-6, so soft 7 hits."""
        dealer_hand = dealer("A", "A")
        assert dealer_hand.best_sum == 2
        assert recommend(dealer_hand, make_hand("A", "6")) == Action.HIT

    @pytest.mark.parametrize("ranks", [("A", "5"), ("A", "2"), ("A", "A")])
    def test_soft_6_or_less_hits(self, ranks):
        assert recommend(dealer("2", "3"), make_hand(*ranks)) == Action.HIT


class TestHardHands:
    """Player holds no aces."""

    def test_hard_17_or_more_stands(self):
        for ranks in [("10", "7"), ("K", "9"), ("10", "6", "5")]:
            for up in [("2", "2"), ("10", "K")]:
                assert recommend(dealer(*up), make_hand(*ranks)) == Action.STAND

    def test_16_against_10_hits(self):
        """Test 9-7 against a dealer 10 hits."""
        assert recommend(dealer("4", "6"), make_hand("9", "7")) == Action.HIT

    @pytest.mark.parametrize("player", [("10", "3"), ("9", "7")])
    def test_13_to_16_stands_against_6_or_less(self, player):
        assert recommend(dealer("2", "4"), make_hand(*player)) == Action.STAND

    @pytest.mark.parametrize("player", [("10", "3"), ("9", "7")])
    def test_13_to_16_hits_against_7_or_more(self, player):
        assert recommend(dealer("3", "4"), make_hand(*player)) == Action.HIT

    @pytest.mark.parametrize(
        "dealer_ranks,expected",
        [
            (("A", "A"), Action.HIT),  # 2
            (("2", "A"), Action.HIT),  # 13 (A counted as 11)
            (("2", "2"), Action.STAND),  # 4
            (("2", "4"), Action.STAND),  # 6
            (("3", "4"), Action.HIT),  # 7
        ],
    )
    def test_hard_12(self, dealer_ranks, expected):
        """Test 12 hits against 3 or less and 7 or more, stands against 4-6."""
        assert recommend(dealer(*dealer_ranks), make_hand("10", "2")) == expected

    def test_11_or_less_always_hits(self):
        for ranks in [("2", "3"), ("5", "6"), ("2", "2", "2")]:
            assert recommend(dealer("2", "4"), make_hand(*ranks)) == Action.HIT


class TestBasicStrategy:
    """Tests for the advisor wrapper."""

    def test_matches_recommend(self, basic_strategy):
        dealer_hand = dealer("10", "6")
        player_hand = make_hand("10", "2")
        assert basic_strategy.get_action(dealer_hand, player_hand) == recommend(dealer_hand, player_hand)

    def test_does_not_mutate_hands(self, basic_strategy):
        dealer_hand = dealer("10", "6")
        player_hand = make_hand("A", "6")
        basic_strategy.get_action(dealer_hand, player_hand)
        assert len(dealer_hand) == 2
        assert len(player_hand) == 2
        assert not player_hand.is_standing

    def test_action_str(self):
        assert str(Action.HIT) == "hit"
        assert str(Action.STAND) == "stand"


class TestRuleSet:
    """Tests for RuleSet validation."""

    def test_defaults(self, rules):
        assert rules.blackjack_payout == 1.5
        assert rules.dealer_hit_limit == 17

    def test_invalid_payout_raises(self):
        with pytest.raises(ValueError):
            RuleSet(blackjack_payout=0.5)

    def test_invalid_max_bet_raises(self):
        with pytest.raises(ValueError):
            RuleSet(max_bet=0)

    def test_invalid_hit_limit_raises(self):
        with pytest.raises(ValueError):
            RuleSet(dealer_hit_limit=25)
