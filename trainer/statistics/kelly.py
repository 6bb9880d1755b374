"""Kelly criterion calculations for bet sizing."""

from dataclasses import dataclass

# Hard limits that no user setting can lift
MAX_KELLY_FRACTION = 0.25
MAX_BET_UNITS = 500


@dataclass(frozen=True)
class BetRecommendation:
    """Suggested bet for the current edge."""

    units: int
    fraction: float
    edge_pct: float


def kelly_criterion(
    win_probability: float,
    win_amount: float,
    lose_amount: float = 1.0,
) -> float:
    """
    Calculate the Kelly criterion fraction.

    Formula: f* = (bp - q) / b
    where:
        f* = fraction of bankroll to bet
        b = odds received on the bet (win amount / lose amount)
        p = probability of winning
        q = probability of losing (1 - p)

    Args:
        win_probability: Probability of winning (0-1)
        win_amount: Amount won per unit bet
        lose_amount: Amount lost per unit bet (default 1)

    Returns:
        Optimal fraction of bankroll to bet
    """
    if win_probability <= 0 or win_probability >= 1:
        return 0.0

    p = win_probability
    q = 1 - p
    b = win_amount / lose_amount

    kelly = (b * p - q) / b

    return max(0.0, kelly)  # Never bet negative


def kelly_fraction(edge_pct: float, payout: float = 1.0, cap: float = MAX_KELLY_FRACTION) -> float:
    """
    Capped Kelly fraction for a given edge.

    The edge is mapped to a win probability of 0.5 + edge / (payout + 1).

    Args:
        edge_pct: Player edge in percent
        payout: Net odds paid on a win (1.0 for even money)
        cap: User's Kelly cap; never allowed above MAX_KELLY_FRACTION

    Returns:
        Fraction of bankroll to bet, 0 when the edge is not positive
    """
    edge = edge_pct / 100
    if edge <= 0 or payout <= 0:
        return 0.0
    win_probability = 0.5 + edge / (payout + 1)
    fraction = kelly_criterion(win_probability, payout)
    limit = max(0.0, min(cap, MAX_KELLY_FRACTION))
    return min(fraction, limit)


def bet_units(
    edge_pct: float,
    bankroll_units: float,
    payout: float = 1.0,
    cap: float = MAX_KELLY_FRACTION,
    min_units: int = 1,
) -> BetRecommendation:
    """
    Suggested bet size in bankroll units.

    Rounds fraction * bankroll, never goes below ``min_units`` (the table
    minimum a player keeps betting while waiting for a count) and never
    above MAX_BET_UNITS.

    Args:
        edge_pct: Player edge in percent
        bankroll_units: Bankroll expressed in betting units
        payout: Net odds paid on a win
        cap: Kelly cap
        min_units: Minimum bet in units

    Returns:
        BetRecommendation with units, fraction and edge
    """
    fraction = kelly_fraction(edge_pct, payout, cap)
    floor_units = max(0, min(min_units, MAX_BET_UNITS))
    units = round(fraction * max(0.0, bankroll_units))
    units = max(floor_units, min(units, MAX_BET_UNITS))
    return BetRecommendation(units=units, fraction=fraction, edge_pct=edge_pct)
