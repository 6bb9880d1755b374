"""Blackjack rule variations that affect strategy decisions."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RuleSet:
    """
    Table rules consulted by the strategy engine.

    The default matches the trainer's reference game: 6 decks, dealer hits
    soft 17, double after split, no surrender, one split, split aces get a
    single card.
    """

    # Dealer rules
    dealer_hits_soft_17: bool = True  # H17 vs S17

    # Double down rules
    double_after_split: bool = True  # DAS

    # Surrender rules
    late_surrender: bool = False

    # Split rules
    split_limit: int = 1  # Number of splits allowed per round
    split_aces_one_card: bool = True

    def can_split(self, splits_made: int) -> bool:
        """Check if another split is allowed."""
        return splits_made < self.split_limit

    def can_double(self, num_cards: int, splits_made: int = 0) -> bool:
        """Check if doubling is allowed at this decision point."""
        if num_cards != 2:
            return False
        return splits_made == 0 or self.double_after_split

    def can_surrender(self, num_cards: int, splits_made: int = 0) -> bool:
        """Late surrender: first two cards of an unsplit hand only."""
        return self.late_surrender and num_cards == 2 and splits_made == 0
