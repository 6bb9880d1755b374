"""Shoe and count state - running count, decks remaining and true count."""

import logging
from dataclasses import dataclass
from enum import Enum

from trainer.counting import HI_LO, CountSystem, expected_aces
from trainer.ranks import Rank

logger = logging.getLogger(__name__)

CARDS_PER_DECK = 52

# Floor for the true-count divisor so late-shoe counts stay finite
MIN_DECKS_REMAINING = 0.25


class TrueCountMode(Enum):
    """How decks remaining is determined."""

    COMPUTED = "computed"  # From cards dealt
    TRAY_ESTIMATE = "tray-estimate"  # User-supplied estimate from the discard tray

    def __str__(self) -> str:
        return self.value


class Band(Enum):
    """Coarse true-count band, used for UI signalling only."""

    NEGATIVE = "NEGATIVE"
    NEUTRAL = "NEUTRAL"
    POSITIVE = "POSITIVE"
    HIGH = "HIGH"

    def __str__(self) -> str:
        return self.value


def band_for(true_count: float) -> Band:
    """
    Classify a true count.

    NEGATIVE at -2 or below, NEUTRAL below +1, POSITIVE below +3,
    HIGH from +3 up.
    """
    if true_count <= -2:
        return Band.NEGATIVE
    if true_count < 1:
        return Band.NEUTRAL
    if true_count < 3:
        return Band.POSITIVE
    return Band.HIGH


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp a value to the closed range [lo, hi]."""
    return max(lo, min(hi, value))


@dataclass
class ShoeState:
    """
    Mutable count state for one shoe.

    Switching ``system`` only changes the weights of cards counted
    afterwards; cards already counted keep the weight they were given.
    """

    system: CountSystem = HI_LO
    decks_in_shoe: int = 6
    mode: TrueCountMode = TrueCountMode.COMPUTED
    tray_decks_remaining: float = 6.0
    ace_side_enabled: bool = False

    running_count: float = 0.0
    cards_dealt: int = 0
    aces_seen: int = 0

    def count(self, rank: Rank) -> float:
        """
        Count a single card and update the running count.

        Returns:
            The weight applied, which must be passed back to ``uncount``
        """
        weight = self.system.weight(rank)
        self.running_count += weight
        self.cards_dealt += 1
        if rank.is_ace:
            self.aces_seen += 1
        return weight

    def uncount(self, rank: Rank, weight: float) -> None:
        """Reverse a previous ``count`` call exactly."""
        self.running_count -= weight
        self.cards_dealt = max(0, self.cards_dealt - 1)
        if rank.is_ace:
            self.aces_seen = max(0, self.aces_seen - 1)

    def reset(self) -> None:
        """Zero the running count and card counters for a fresh shoe."""
        self.running_count = 0.0
        self.cards_dealt = 0
        self.aces_seen = 0
        logger.info("Shoe reset (%d decks, %s)", self.decks_in_shoe, self.system.name)

    @property
    def decks_remaining(self) -> float:
        """Decks left in the shoe, clamped to [MIN_DECKS_REMAINING, decks_in_shoe]."""
        if self.mode is TrueCountMode.TRAY_ESTIMATE:
            remaining = self.tray_decks_remaining
        else:
            remaining = self.decks_in_shoe - self.cards_dealt / CARDS_PER_DECK
        return clamp(remaining, MIN_DECKS_REMAINING, self.decks_in_shoe)

    @property
    def decks_seen(self) -> float:
        """Decks already played, by the same measure that drives the divisor."""
        if self.mode is TrueCountMode.TRAY_ESTIMATE:
            return self.decks_in_shoe - self.decks_remaining
        return min(self.cards_dealt / CARDS_PER_DECK, float(self.decks_in_shoe))

    @property
    def penetration(self) -> float:
        """Fraction of the shoe already dealt (0.0-1.0)."""
        return clamp(self.decks_seen / self.decks_in_shoe, 0.0, 1.0)

    @property
    def ace_correction(self) -> float:
        """Ace side-count adjustment, 0 unless enabled for an ace-neutral system."""
        if not self.ace_side_enabled:
            return 0.0
        if self.mode is TrueCountMode.TRAY_ESTIMATE:
            expected = expected_aces(self.decks_seen)
        else:
            expected = expected_aces(self.cards_dealt / CARDS_PER_DECK)
        return self.system.ace_correction(self.aces_seen, expected)

    @property
    def true_count(self) -> float:
        """(running count + ace correction) / decks remaining."""
        return (self.running_count + self.ace_correction) / self.decks_remaining

    @property
    def band(self) -> Band:
        """Band for the current true count."""
        return band_for(self.true_count)

    def __repr__(self) -> str:
        return (
            f"ShoeState(system={self.system.id}, running_count={self.running_count}, "
            f"cards_dealt={self.cards_dealt}, aces_seen={self.aces_seen})"
        )
