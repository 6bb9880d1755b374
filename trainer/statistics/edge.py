"""Player edge estimation from the true count."""

from trainer.counting import CountSystem

# Reported edge band, in percent
EDGE_FLOOR = -3.0
EDGE_CEILING = 3.5

# Confidence in the count grows as the shoe is dealt out
MIN_PENETRATION_DAMP = 0.45


def penetration_damp(decks_seen: float, decks_in_shoe: float) -> float:
    """
    Confidence factor for the count-driven part of the edge.

    Ramps linearly from MIN_PENETRATION_DAMP with a full shoe to 1.0 when
    the shoe is exhausted.

    Args:
        decks_seen: Decks already dealt
        decks_in_shoe: Decks in a full shoe

    Returns:
        Damping factor in [MIN_PENETRATION_DAMP, 1.0]
    """
    if decks_in_shoe <= 0:
        return 1.0
    seen_fraction = max(0.0, min(1.0, decks_seen / decks_in_shoe))
    return MIN_PENETRATION_DAMP + (1.0 - MIN_PENETRATION_DAMP) * seen_fraction


def estimate_edge(
    true_count: float,
    decks_seen: float,
    decks_in_shoe: float,
    system: CountSystem,
) -> float:
    """
    Estimate the player's edge in percent.

    edge = base + damp * slope * true_count, clamped to
    [EDGE_FLOOR, EDGE_CEILING]. Only the count-driven swing is damped;
    the off-the-top house edge applies in full at any depth.

    Args:
        true_count: Current true count
        decks_seen: Decks already dealt
        decks_in_shoe: Decks in a full shoe
        system: Count system supplying the base edge and slope

    Returns:
        Estimated edge as a percentage (e.g. 1.0 for +1%)
    """
    swing = system.edge_slope * true_count * penetration_damp(decks_seen, decks_in_shoe)
    edge = system.base_edge + swing
    return max(EDGE_FLOOR, min(EDGE_CEILING, edge))
