"""Rank model - canonical card ranks for counting and hand totals."""

from enum import Enum


class Rank(Enum):
    """
    Canonical card ranks.

    Suits never matter for counting, and 10/J/Q/K are interchangeable,
    so all ten-value cards collapse into a single ``T`` rank.
    """

    ACE = "A"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "T"

    def __str__(self) -> str:
        return self.value

    @property
    def blackjack_value(self) -> int:
        """Return the blackjack point value (Ace = 11, ten-value = 10)."""
        return rank_value(self)

    @property
    def is_ace(self) -> bool:
        """Check if this rank is an Ace."""
        return self is Rank.ACE

    @property
    def is_ten_value(self) -> bool:
        """Check if this rank has a value of 10."""
        return self is Rank.TEN


_ALIASES: dict[str, Rank] = {
    "A": Rank.ACE,
    "2": Rank.TWO,
    "3": Rank.THREE,
    "4": Rank.FOUR,
    "5": Rank.FIVE,
    "6": Rank.SIX,
    "7": Rank.SEVEN,
    "8": Rank.EIGHT,
    "9": Rank.NINE,
    "10": Rank.TEN,
    "0": Rank.TEN,
    "T": Rank.TEN,
    "J": Rank.TEN,
    "Q": Rank.TEN,
    "K": Rank.TEN,
}


def normalize_rank(raw: object) -> Rank | None:
    """
    Normalize raw rank input into a canonical Rank.

    Accepts case-insensitive letters and digits ("a", "10", "0", "K", ...)
    as well as Rank instances. Returns None for anything unrecognized, so
    callers can treat bad input as a no-op.
    """
    if isinstance(raw, Rank):
        return raw
    if isinstance(raw, bool) or not isinstance(raw, (str, int)):
        return None
    return _ALIASES.get(str(raw).strip().upper())


def rank_value(rank: Rank) -> int:
    """Return the hand-total value of a rank (A = 11, T = 10)."""
    if rank is Rank.ACE:
        return 11
    if rank is Rank.TEN:
        return 10
    return int(rank.value)


def parse_ranks(raw: list[object]) -> list[Rank]:
    """
    Normalize a list of raw ranks.

    Raises:
        ValueError: If any entry is not a valid rank
    """
    ranks: list[Rank] = []
    for item in raw:
        rank = normalize_rank(item)
        if rank is None:
            raise ValueError(f"Invalid rank: {item!r}")
        ranks.append(rank)
    return ranks
