"""Count-dependent departures from basic strategy (Illustrious 18, Fab 4)."""

from dataclasses import dataclass
from itertools import chain
from typing import Literal

from trainer.strategy.basic import Action

# Take insurance against a dealer Ace at or above this true count
INSURANCE_INDEX = 3.0

Direction = Literal["at_or_above", "at_or_below"]


@dataclass(frozen=True)
class IndexPlay:
    """
    One index play: a hand and upcard where the right action changes once
    the true count crosses ``index`` in ``direction``.

    Index plays are always hard totals; pairs are keyed by their total
    (a pair of tens is 20).
    """

    player_total: int
    is_soft: bool
    is_pair: bool
    dealer_upcard: int  # 11 = Ace
    basic_action: Action
    deviation_action: Action
    index: float
    direction: Direction = "at_or_above"
    description: str = ""

    def should_deviate(self, true_count: float) -> bool:
        if self.direction == "at_or_above":
            return true_count >= self.index
        return true_count <= self.index

    @property
    def is_surrender(self) -> bool:
        return self.deviation_action == Action.SURRENDER


def _play(
    total: int,
    dealer: int,
    basic: Action,
    deviation: Action,
    index: float,
    description: str,
    is_pair: bool = False,
    direction: Direction = "at_or_above",
) -> IndexPlay:
    return IndexPlay(
        player_total=total,
        is_soft=False,
        is_pair=is_pair,
        dealer_upcard=dealer,
        basic_action=basic,
        deviation_action=deviation,
        index=index,
        direction=direction,
        description=description,
    )


H = Action.HIT
S = Action.STAND
D = Action.DOUBLE
P = Action.SPLIT
R = Action.SURRENDER

# The Illustrious 18 playing deviations (Hi-Lo indices), ordered by value.
# Insurance, the most valuable, is handled by INSURANCE_INDEX instead of
# a hand entry.
ILLUSTRIOUS_18: list[IndexPlay] = [
    _play(16, 10, H, S, 0.0, "Stand on 16 vs 10 at TC 0 or higher"),
    _play(15, 10, H, S, 4.0, "Stand on 15 vs 10 at TC +4 or higher"),
    _play(20, 5, S, P, 5.0, "Split 10s vs 5 at TC +5 or higher", is_pair=True),
    _play(20, 6, S, P, 4.0, "Split 10s vs 6 at TC +4 or higher", is_pair=True),
    _play(10, 10, H, D, 4.0, "Double 10 vs 10 at TC +4 or higher"),
    _play(12, 3, H, S, 2.0, "Stand on 12 vs 3 at TC +2 or higher"),
    _play(12, 2, H, S, 3.0, "Stand on 12 vs 2 at TC +3 or higher"),
    _play(11, 11, H, D, 1.0, "Double 11 vs A at TC +1 or higher"),
    _play(9, 2, H, D, 1.0, "Double 9 vs 2 at TC +1 or higher"),
    _play(10, 11, H, D, 4.0, "Double 10 vs A at TC +4 or higher"),
    _play(9, 7, H, D, 3.0, "Double 9 vs 7 at TC +3 or higher"),
    _play(16, 9, H, S, 5.0, "Stand on 16 vs 9 at TC +5 or higher"),
    _play(13, 2, S, H, -1.0, "Hit 13 vs 2 at TC -1 or lower", direction="at_or_below"),
    _play(12, 4, S, H, 0.0, "Hit 12 vs 4 at TC 0 or lower", direction="at_or_below"),
    _play(12, 5, S, H, -2.0, "Hit 12 vs 5 at TC -2 or lower", direction="at_or_below"),
    _play(12, 6, S, H, -1.0, "Hit 12 vs 6 at TC -1 or lower", direction="at_or_below"),
    _play(13, 3, S, H, -2.0, "Hit 13 vs 3 at TC -2 or lower", direction="at_or_below"),
]


# The Fab 4 - Surrender deviations
FAB_4: list[IndexPlay] = [
    _play(14, 10, H, R, 3.0, "Surrender 14 vs 10 at TC +3 or higher"),
    _play(15, 9, H, R, 2.0, "Surrender 15 vs 9 at TC +2 or higher"),
    _play(15, 11, H, R, 1.0, "Surrender 15 vs A at TC +1 or higher (H17)"),
    _play(14, 11, H, R, 3.0, "Surrender 14 vs A at TC +3 or higher (H17)"),
]


def find_deviation(
    player_total: int,
    is_soft: bool,
    is_pair: bool,
    dealer_upcard: int,
    true_count: float,
    include_surrender: bool = True,
) -> IndexPlay | None:
    """
    First index play matching the hand whose threshold the true count meets.

    Illustrious 18 entries are checked before the Fab 4 surrenders, which
    are skipped entirely unless ``include_surrender`` is set.
    """
    plays = chain(ILLUSTRIOUS_18, FAB_4) if include_surrender else iter(ILLUSTRIOUS_18)
    for play in plays:
        if (
            (play.player_total, play.is_soft, play.is_pair, play.dealer_upcard)
            == (player_total, is_soft, is_pair, dealer_upcard)
            and play.should_deviate(true_count)
        ):
            return play
    return None


def insurance_advised(dealer_upcard: int, true_count: float) -> bool:
    """Insurance is worth taking against an Ace at TC +3 or higher."""
    return dealer_upcard == 11 and true_count >= INSURANCE_INDEX
