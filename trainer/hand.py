"""Hand evaluation for blackjack."""

from dataclasses import dataclass, field
from typing import Iterator

from trainer.ranks import Rank, rank_value


@dataclass
class Hand:
    """An ordered list of reported ranks with derived blackjack values."""

    cards: list[Rank] = field(default_factory=list)

    def add_card(self, rank: Rank) -> None:
        """Add a card to the hand."""
        self.cards.append(rank)

    def pop_card(self) -> Rank:
        """Remove and return the most recently added card."""
        return self.cards.pop()

    def clear(self) -> None:
        """Remove all cards from the hand."""
        self.cards.clear()

    @property
    def value(self) -> int:
        """
        Calculate the best hand value.

        Returns the highest value that doesn't bust, or the lowest bust value.
        """
        total = 0
        aces = 0

        for rank in self.cards:
            total += rank_value(rank)
            if rank.is_ace:
                aces += 1

        # Reduce aces from 11 to 1 as needed
        while total > 21 and aces > 0:
            total -= 10
            aces -= 1

        return total

    @property
    def is_soft(self) -> bool:
        """
        Check if the hand is soft (has an ace counted as 11).

        A hand is soft if it contains an ace that can be counted as 11
        without busting.
        """
        if not any(rank.is_ace for rank in self.cards):
            return False

        total_hard = sum(1 if rank.is_ace else rank_value(rank) for rank in self.cards)
        return total_hard + 10 <= 21

    @property
    def is_blackjack(self) -> bool:
        """Check if the hand is a natural blackjack (21 with 2 cards)."""
        return len(self.cards) == 2 and self.value == 21

    @property
    def is_busted(self) -> bool:
        """Check if the hand has busted (value > 21)."""
        return self.value > 21

    @property
    def is_pair(self) -> bool:
        """Check if the hand is two cards of equal rank value."""
        return (
            len(self.cards) == 2
            and rank_value(self.cards[0]) == rank_value(self.cards[1])
        )

    @property
    def first(self) -> Rank | None:
        """Return the first card (the dealer's upcard), if any."""
        return self.cards[0] if self.cards else None

    def describe(self) -> str:
        """Short label such as 'Hard 16', 'Soft 18', 'Pair 8s' or 'Blackjack'."""
        if self.is_blackjack:
            return "Blackjack"
        if self.is_pair:
            return f"Pair {self.cards[0]}s"
        kind = "Soft" if self.is_soft else "Hard"
        return f"{kind} {self.value}"

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Rank]:
        return iter(self.cards)

    def __str__(self) -> str:
        cards_str = " ".join(str(rank) for rank in self.cards)
        value_str = f"({self.value})"
        if self.is_soft:
            value_str = f"(soft {self.value})"
        if self.is_blackjack:
            value_str = "(BLACKJACK)"
        if self.is_busted:
            value_str = "(BUST)"
        return f"{cards_str} {value_str}"

    def __repr__(self) -> str:
        return f"Hand({[str(r) for r in self.cards]!r}, value={self.value})"
