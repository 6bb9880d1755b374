"""Hi-Opt II card counting system."""

from trainer.counting.base import CountSystem
from trainer.ranks import Rank

# A level-2, ace-neutral balanced system. Aces score 0 in the main count
# and are tracked in a side count worth 2 points per surplus ace.
#
# Tag values:
#     2, 3, 6, 7: +1
#     4, 5: +2
#     8, 9, A: 0
#     10-K: -2
HI_OPT_II = CountSystem(
    id="hiopt2",
    name="Hi-Opt II",
    tag_values={
        Rank.ACE: 0,
        Rank.TWO: 1,
        Rank.THREE: 1,
        Rank.FOUR: 2,
        Rank.FIVE: 2,
        Rank.SIX: 1,
        Rank.SEVEN: 1,
        Rank.EIGHT: 0,
        Rank.NINE: 0,
        Rank.TEN: -2,
    },
    supports_ace_side=True,
    ace_side_multiplier=2,
    base_edge=-0.5,
    edge_slope=0.55,
)
