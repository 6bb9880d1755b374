"""Count system value objects and the ace side-count correction."""

from dataclasses import dataclass
from typing import Mapping

from trainer.ranks import Rank

# Aces per 52-card deck
ACES_PER_DECK = 4


@dataclass(frozen=True)
class CountSystem:
    """
    An immutable card counting system.

    Systems are plain values selected by identifier; they carry no running
    state. The running count lives in the shoe state that uses them.
    """

    id: str
    name: str
    tag_values: Mapping[Rank, float]

    # Ace-neutral systems can add an ace side count back into the main count
    supports_ace_side: bool = False
    ace_side_multiplier: float = 0.0

    # Edge calibration, in percent
    base_edge: float = -0.5
    edge_slope: float = 0.5

    def weight(self, rank: Rank) -> float:
        """Return the count increment for a rank."""
        return self.tag_values[rank]

    @property
    def full_deck_sum(self) -> float:
        """
        Calculate the sum of tag values for a full 52-card deck.

        Ten-value cards make up four of the thirteen faces.
        """
        total = 0.0
        for rank in Rank:
            copies = 16 if rank.is_ten_value else 4
            total += self.tag_values[rank] * copies
        return total

    @property
    def is_balanced(self) -> bool:
        """A balanced system sums to 0 over a complete deck."""
        return self.full_deck_sum == 0

    def ace_correction(self, aces_seen: int, expected_aces: float) -> float:
        """
        Side-count correction to add to the running count.

        Positive when fewer aces have been seen than expected, i.e. the
        remaining shoe is ace-rich. Always 0 for systems that count aces in
        the main count.
        """
        if not self.supports_ace_side:
            return 0.0
        return (expected_aces - aces_seen) * self.ace_side_multiplier

    def __str__(self) -> str:
        return self.name


def expected_aces(decks_seen: float) -> float:
    """Number of aces expected among the cards already seen."""
    return decks_seen * ACES_PER_DECK
