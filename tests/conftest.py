"""Pytest fixtures for count trainer tests."""

import pytest
from random import Random

from hypothesis import strategies as st

from trainer.counting import HI_LO, HI_OPT_II, OMEGA_II, WONG_HALVES
from trainer.engine import CountTrainer
from trainer.hand import Hand
from trainer.ranks import Rank
from trainer.settings import Settings
from trainer.shoe import ShoeState
from trainer.strategy import BasicStrategy, RuleSet


def make_hand(*ranks: str) -> Hand:
    """Build a hand from rank symbols."""
    return Hand([Rank(r) for r in ranks])


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def trainer(rng):
    """A trainer with default settings (Hi-Lo, 6 decks)."""
    return CountTrainer(rng=rng)


@pytest.fixture
def deviation_trainer(rng):
    """A trainer with index plays enabled."""
    return CountTrainer(settings=Settings(use_deviations=True), rng=rng)


@pytest.fixture
def shoe():
    """A fresh 6-deck Hi-Lo shoe."""
    return ShoeState(system=HI_LO, decks_in_shoe=6)


@pytest.fixture
def empty_hand():
    """An empty player hand."""
    return Hand()


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    return make_hand("A", "T")


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    return make_hand("A", "6")


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    return make_hand("T", "6")


@pytest.fixture
def pair_8s_hand():
    """A pair of 8s hand."""
    return make_hand("8", "8")


@pytest.fixture
def bust_hand():
    """A busted hand."""
    return make_hand("T", "6", "T")


@pytest.fixture
def hilo():
    """Hi-Lo counting system."""
    return HI_LO


@pytest.fixture
def wong_halves():
    """Wong Halves counting system."""
    return WONG_HALVES


@pytest.fixture
def hiopt2():
    """Hi-Opt II counting system."""
    return HI_OPT_II


@pytest.fixture
def omega2():
    """Omega II counting system."""
    return OMEGA_II


@pytest.fixture
def rules():
    """Default ruleset."""
    return RuleSet()


@pytest.fixture
def surrender_rules():
    """Default rules with late surrender."""
    return RuleSet(late_surrender=True)


@pytest.fixture
def basic_strategy(rules):
    """Basic strategy for default rules."""
    return BasicStrategy(rules)


# Hypothesis strategies for property-based testing
rank_strategy = st.sampled_from(list(Rank))

raw_rank_strategy = st.sampled_from(
    ["A", "a", "2", "3", "4", "5", "6", "7", "8", "9", "10", "0", "T", "t", "J", "q", "K", " k "]
)

target_strategy = st.sampled_from(["player", "dealer", "table"])


@st.composite
def hand_strategy(draw, min_cards=2, max_cards=5):
    """Generate a random hand."""
    ranks = draw(st.lists(rank_strategy, min_size=min_cards, max_size=max_cards))
    return Hand(ranks)
