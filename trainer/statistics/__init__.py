"""Edge and bet sizing calculations."""

from trainer.statistics.edge import EDGE_CEILING, EDGE_FLOOR, estimate_edge, penetration_damp
from trainer.statistics.kelly import (
    MAX_BET_UNITS,
    MAX_KELLY_FRACTION,
    BetRecommendation,
    bet_units,
    kelly_criterion,
    kelly_fraction,
)

__all__ = [
    "EDGE_CEILING",
    "EDGE_FLOOR",
    "MAX_BET_UNITS",
    "MAX_KELLY_FRACTION",
    "BetRecommendation",
    "bet_units",
    "estimate_edge",
    "kelly_criterion",
    "kelly_fraction",
    "penetration_damp",
]
