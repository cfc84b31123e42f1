"""Tests for the console game."""

import io
from decimal import Decimal

import pytest

from cli import ConsoleGame, HELP_TEXT, main, parse_args
from core.game import GameSession

from conftest import StackedSource


def play(ranks, lines, bankroll="1000"):
    """Run a console game over scripted input and return its output."""
    session = GameSession(initial_bankroll=Decimal(bankroll), source=StackedSource(ranks))
    stdout = io.StringIO()
    game = ConsoleGame(session, stdin=io.StringIO("".join(f"{line}\n" for line in lines)), stdout=stdout)
    assert game.run() == 0
    return stdout.getvalue(), session


class TestMenu:
    """Tests for the welcome menu."""

    def test_quit(self):
        out, session = play([], ["q"])
        assert out.startswith("Welcome to Blackjack")
        assert session.rounds_played == 0
        assert "How much would you like to bet" not in out

    def test_invalid_option_then_help_then_play(self):
        out, _ = play([], ["x", "h", "p"])
        assert "Invalid option, try again" in out
        assert HELP_TEXT in out
        assert "How much would you like to bet, up to 1000.00?" in out

    def test_eof_leaves_cleanly(self):
        out, _ = play([], [])
        assert out.rstrip().endswith("Goodbye")


class TestRound:
    """Tests for a round played through the console."""

    def test_stand_and_win(self):
        out, session = play(["10", "8", "10", "9"], ["p", "100", "stand"])

        assert "Dealer's Hand: 10, ?" in out
        assert "Your Hand: 10, 9" in out
        assert "Winner was the player!" in out
        assert "Player coins is now 1100.00" in out
        assert session.bankroll == Decimal("1100")

    def test_invalid_bets_reprompt(self):
        out, session = play(["10", "8", "10", "9"], ["p", "0", "abc", "2000", "10", "stand"])
        assert out.count("Invalid bet size, try again.") == 3
        assert session.current_bet == Decimal("10")

    def test_hint_invalid_hit_and_dealer_draw(self):
        out, session = play(
            ["10", "6", "A", "6", "K", "5"],
            ["p", "10", "hint", "foo", "hit", "stand"],
        )

        assert "The ideal move is to hit" in out
        assert "Invalid choice." in out
        assert "Your Hand: Ace, 6, King" in out
        assert "Dealer hit, now at 21" in out
        assert "Winner was the dealer!" in out
        assert session.bankroll == Decimal("990")

    def test_bust(self):
        out, session = play(["10", "6", "10", "6", "9"], ["p", "10", "hit"])
        assert "You busted! Player hand = 25" in out
        assert "Dealer hit" not in out
        assert session.bankroll == Decimal("990")

    def test_tie(self):
        out, session = play(["10", "7", "10", "9", "2"], ["p", "10", "stand"])
        assert "Tie, no change in coins" in out
        assert "Player coins is now" not in out
        assert session.bankroll == Decimal("1000")

    def test_dealer_blackjack_ends_game(self):
        """Test losing the last coins to a dealer blackjack ends the game."""
        out, session = play(["A", "K", "5", "6"], ["p", "50"], bankroll="50")

        assert "Dealer automatically won by blackjack 21!" in out
        assert "Your Hand" not in out
        assert "You have no more coins! Game Over" in out
        assert session.is_over


class TestArgs:
    """Tests for command line parsing."""

    def test_defaults(self):
        args = parse_args([])
        assert args.bankroll == Decimal("1000")
        assert args.seed is None

    def test_overrides(self):
        args = parse_args(["--bankroll", "50", "--max-bet", "20", "--seed", "3", "--log-level", "debug"])
        assert args.bankroll == Decimal("50")
        assert args.max_bet == Decimal("20")
        assert args.seed == 3
        assert args.log_level == "DEBUG"

    def test_bad_log_level(self):
        with pytest.raises(SystemExit):
            parse_args(["--log-level", "loud"])

    @pytest.mark.parametrize("value", ["0", "-5", "NaN", "Infinity", "lots"])
    @pytest.mark.parametrize("option", ["--max-bet", "--bankroll"])
    def test_bad_amount_is_usage_error(self, option, value, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([option, value])
        assert exc_info.value.code == 2
        assert option in capsys.readouterr().err

    def test_main_quits(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("q\n"))
        assert main(["--seed", "1"]) == 0
        assert "Welcome to Blackjack" in capsys.readouterr().out
