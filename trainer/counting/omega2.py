"""Omega II card counting system."""

from trainer.counting.base import CountSystem
from trainer.ranks import Rank

# A multi-level balanced system with a separate ace side count.
# More accurate than Hi-Lo but more complex.
#
# Tag values:
#     2, 3, 7: +1
#     4, 5, 6: +2
#     8, A: 0
#     9: -1
#     10-K: -2
OMEGA_II = CountSystem(
    id="omega2",
    name="Omega II",
    tag_values={
        Rank.ACE: 0,  # Aces are tracked separately
        Rank.TWO: 1,
        Rank.THREE: 1,
        Rank.FOUR: 2,
        Rank.FIVE: 2,
        Rank.SIX: 2,
        Rank.SEVEN: 1,
        Rank.EIGHT: 0,
        Rank.NINE: -1,
        Rank.TEN: -2,
    },
    supports_ace_side=True,
    ace_side_multiplier=2,
    base_edge=-0.5,
    edge_slope=0.56,
)
