"""Wong Halves card counting system."""

from trainer.counting.base import CountSystem
from trainer.ranks import Rank

# A multi-level balanced system using fractional values.
# One of the most accurate systems but difficult to use.
#
# Tag values:
#     2, 7: +0.5
#     3, 4, 6: +1
#     5: +1.5
#     8: 0
#     9: -0.5
#     10-K, A: -1
WONG_HALVES = CountSystem(
    id="wong_halves",
    name="Wong Halves",
    tag_values={
        Rank.ACE: -1.0,
        Rank.TWO: 0.5,
        Rank.THREE: 1.0,
        Rank.FOUR: 1.0,
        Rank.FIVE: 1.5,
        Rank.SIX: 1.0,
        Rank.SEVEN: 0.5,
        Rank.EIGHT: 0.0,
        Rank.NINE: -0.5,
        Rank.TEN: -1.0,
    },
    base_edge=-0.5,
    edge_slope=0.52,
)
