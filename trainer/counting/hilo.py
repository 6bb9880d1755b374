"""Hi-Lo card counting system."""

from trainer.counting.base import CountSystem
from trainer.ranks import Rank

# The most popular and widely taught counting system.
#
# Tag values:
#     2-6: +1 (low cards)
#     7-9: 0  (neutral)
#     10-A: -1 (high cards)
#
# Full deck sum: 0 (balanced)
HI_LO = CountSystem(
    id="hilo",
    name="Hi-Lo",
    tag_values={
        Rank.ACE: -1,
        Rank.TWO: 1,
        Rank.THREE: 1,
        Rank.FOUR: 1,
        Rank.FIVE: 1,
        Rank.SIX: 1,
        Rank.SEVEN: 0,
        Rank.EIGHT: 0,
        Rank.NINE: 0,
        Rank.TEN: -1,
    },
    base_edge=-0.5,
    edge_slope=0.5,
)
