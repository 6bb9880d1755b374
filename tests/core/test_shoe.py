"""Tests for shoe and count state."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from trainer.counting import HI_OPT_II, WONG_HALVES
from trainer.ranks import Rank
from trainer.shoe import (
    MIN_DECKS_REMAINING,
    Band,
    ShoeState,
    TrueCountMode,
    band_for,
)


class TestCounting:
    """Tests for counting cards into the shoe."""

    def test_count_updates_running_count(self, shoe):
        assert shoe.count(Rank.FIVE) == 1
        assert shoe.count(Rank.TEN) == -1
        assert shoe.count(Rank.TWO) == 1
        assert shoe.running_count == 1
        assert shoe.cards_dealt == 3

    def test_aces_tracked(self, shoe):
        shoe.count(Rank.ACE)
        shoe.count(Rank.SEVEN)
        assert shoe.aces_seen == 1

    def test_uncount_reverses_count(self, shoe):
        weight = shoe.count(Rank.ACE)
        shoe.uncount(Rank.ACE, weight)
        assert shoe.running_count == 0
        assert shoe.cards_dealt == 0
        assert shoe.aces_seen == 0

    def test_switching_system_only_reweights_future_cards(self, shoe):
        """Cards counted before a system change keep their old weight."""
        shoe.count(Rank.FIVE)  # Hi-Lo +1
        shoe.system = WONG_HALVES
        shoe.count(Rank.FIVE)  # Wong Halves +1.5
        assert shoe.running_count == 2.5

    def test_reset(self, shoe):
        for rank in (Rank.TWO, Rank.ACE, Rank.SIX):
            shoe.count(rank)
        shoe.reset()
        assert shoe.running_count == 0
        assert shoe.cards_dealt == 0
        assert shoe.aces_seen == 0


class TestDecksRemaining:
    """Tests for the true-count divisor."""

    def test_full_shoe(self, shoe):
        assert shoe.decks_remaining == 6

    def test_computed_from_cards_dealt(self, shoe):
        shoe.cards_dealt = 104
        assert shoe.decks_remaining == 4

    def test_floor(self, shoe):
        """Decks remaining never drops below the floor."""
        shoe.cards_dealt = 6 * 52
        assert shoe.decks_remaining == MIN_DECKS_REMAINING

    def test_tray_estimate_mode(self, shoe):
        shoe.mode = TrueCountMode.TRAY_ESTIMATE
        shoe.tray_decks_remaining = 2.5
        shoe.cards_dealt = 10  # Still accumulates, but does not drive the divisor
        assert shoe.decks_remaining == 2.5

    def test_tray_estimate_clamped(self, shoe):
        shoe.mode = TrueCountMode.TRAY_ESTIMATE
        shoe.tray_decks_remaining = 9
        assert shoe.decks_remaining == 6
        shoe.tray_decks_remaining = 0
        assert shoe.decks_remaining == MIN_DECKS_REMAINING

    def test_penetration(self, shoe):
        shoe.cards_dealt = 156
        assert shoe.decks_seen == 3
        assert shoe.penetration == 0.5


class TestTrueCount:
    """Tests for true count and bands."""

    def test_true_count_scenario(self, shoe):
        """Running count +8 with 2 decks remaining is TC +4, band HIGH."""
        shoe.running_count = 8
        shoe.mode = TrueCountMode.TRAY_ESTIMATE
        shoe.tray_decks_remaining = 2
        assert shoe.true_count == 4.0
        assert shoe.band is Band.HIGH

    def test_true_count_computed_mode(self, shoe):
        shoe.running_count = 6
        shoe.cards_dealt = 156
        assert shoe.true_count == 2.0

    @pytest.mark.parametrize(
        "true_count,band",
        [
            (-5, Band.NEGATIVE),
            (-2, Band.NEGATIVE),
            (-1.9, Band.NEUTRAL),
            (0, Band.NEUTRAL),
            (0.99, Band.NEUTRAL),
            (1, Band.POSITIVE),
            (2.99, Band.POSITIVE),
            (3, Band.HIGH),
            (10, Band.HIGH),
        ],
    )
    def test_bands(self, true_count, band):
        assert band_for(true_count) is band


class TestAceSideCount:
    """Tests for the ace side-count correction."""

    def test_disabled_by_default(self):
        shoe = ShoeState(system=HI_OPT_II)
        shoe.cards_dealt = 52
        assert shoe.ace_correction == 0

    def test_computed_mode_correction(self):
        """One deck dealt with no aces: 4 expected, correction 4 * 2."""
        shoe = ShoeState(system=HI_OPT_II, ace_side_enabled=True)
        shoe.cards_dealt = 52
        assert shoe.ace_correction == 8

    def test_tray_mode_correction(self):
        """In tray mode decks seen comes from the tray estimate."""
        shoe = ShoeState(
            system=HI_OPT_II,
            ace_side_enabled=True,
            mode=TrueCountMode.TRAY_ESTIMATE,
            tray_decks_remaining=5,
        )
        shoe.aces_seen = 2
        assert shoe.ace_correction == (4 - 2) * 2

    def test_correction_feeds_true_count(self):
        shoe = ShoeState(system=HI_OPT_II, ace_side_enabled=True)
        shoe.cards_dealt = 52
        shoe.running_count = 2
        assert shoe.true_count == pytest.approx((2 + 8) / 5)

    def test_ignored_for_hilo(self, shoe):
        shoe.ace_side_enabled = True
        shoe.cards_dealt = 52
        assert shoe.ace_correction == 0


@given(
    rc=st.floats(min_value=-100, max_value=100),
    delta=st.floats(min_value=0, max_value=50),
    remaining=st.floats(min_value=0.25, max_value=8),
)
def test_true_count_monotonic_in_running_count(rc, delta, remaining):
    shoe = ShoeState(decks_in_shoe=8, mode=TrueCountMode.TRAY_ESTIMATE)
    shoe.tray_decks_remaining = remaining
    shoe.running_count = rc
    lower = shoe.true_count
    shoe.running_count = rc + delta
    assert shoe.true_count >= lower


@given(
    rc=st.floats(min_value=0, max_value=100),
    remaining=st.floats(min_value=0.25, max_value=7),
    extra=st.floats(min_value=0, max_value=1),
)
def test_true_count_non_increasing_in_decks_remaining(rc, remaining, extra):
    shoe = ShoeState(decks_in_shoe=8, mode=TrueCountMode.TRAY_ESTIMATE)
    shoe.running_count = rc
    shoe.tray_decks_remaining = remaining
    fewer = shoe.true_count
    shoe.tray_decks_remaining = remaining + extra
    assert shoe.true_count <= fewer


@given(st.lists(st.sampled_from(list(Rank)), max_size=60))
def test_aces_never_exceed_cards_dealt(ranks):
    shoe = ShoeState()
    for rank in ranks:
        shoe.count(rank)
    assert 0 <= shoe.aces_seen <= shoe.cards_dealt
