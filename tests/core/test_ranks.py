"""Tests for rank normalization."""

import pytest
from hypothesis import given

from conftest import rank_strategy
from trainer.ranks import Rank, normalize_rank, parse_ranks, rank_value


class TestNormalizeRank:
    """Tests for normalize_rank."""

    @pytest.mark.parametrize("raw", ["10", "0", "T", "t", "J", "j", "Q", "q", "K", "k"])
    def test_ten_value_aliases(self, raw):
        """All ten-value inputs collapse to T."""
        assert normalize_rank(raw) is Rank.TEN

    def test_ace(self):
        """Test that A and a both normalize to an Ace."""
        assert normalize_rank("A") is Rank.ACE
        assert normalize_rank("a") is Rank.ACE

    @pytest.mark.parametrize("digit", list("23456789"))
    def test_digits(self, digit):
        """Digit ranks map to themselves."""
        assert normalize_rank(digit).value == digit

    def test_whitespace_trimmed(self):
        """Test that surrounding whitespace is ignored."""
        assert normalize_rank("  k ") is Rank.TEN
        assert normalize_rank("\t7\n") is Rank.SEVEN

    def test_integer_input(self):
        """Test that integers are accepted like their string form."""
        assert normalize_rank(7) is Rank.SEVEN
        assert normalize_rank(10) is Rank.TEN

    @pytest.mark.parametrize("raw", ["", "1", "11", "X", "AA", "ace", None, 1.5, [], True])
    def test_invalid_input_returns_none(self, raw):
        """Invalid input yields no rank rather than raising."""
        assert normalize_rank(raw) is None

    @given(rank_strategy)
    def test_idempotent_on_canonical_ranks(self, rank):
        """Normalizing a canonical rank (or its symbol) returns the same rank."""
        assert normalize_rank(rank) is rank
        assert normalize_rank(rank.value) is rank
        assert normalize_rank(normalize_rank(rank.value)) is rank


class TestRankValue:
    """Tests for rank_value."""

    def test_ace_is_eleven(self):
        assert rank_value(Rank.ACE) == 11

    def test_ten_is_ten(self):
        assert rank_value(Rank.TEN) == 10

    def test_digit_values(self):
        """Digit ranks are worth their face value."""
        for value in range(2, 10):
            assert rank_value(Rank(str(value))) == value

    def test_blackjack_value_property(self):
        assert Rank.ACE.blackjack_value == 11
        assert Rank.FIVE.blackjack_value == 5


class TestParseRanks:
    """Tests for parse_ranks."""

    def test_parses_mixed_input(self):
        assert parse_ranks(["a", "10", "K", 5]) == [Rank.ACE, Rank.TEN, Rank.TEN, Rank.FIVE]

    def test_raises_on_invalid(self):
        with pytest.raises(ValueError):
            parse_ranks(["A", "Z"])
