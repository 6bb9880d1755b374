"""Play recommendations for a reported hand."""

from dataclasses import dataclass
from functools import lru_cache

from trainer.hand import Hand
from trainer.ranks import Rank, rank_value
from trainer.strategy.basic import Action, BasicStrategy
from trainer.strategy.deviations import IndexPlay, find_deviation, insurance_advised
from trainer.strategy.rules import RuleSet

WAITING = "Waiting for cards"


@dataclass(frozen=True)
class Recommendation:
    """
    A recommended play.

    ``action`` is None when no recommendation can be made yet (fewer than
    two player cards, no dealer upcard, or a finished hand).
    """

    action: Action | None
    rationale: str
    deviation: bool = False
    insurance: bool = False

    @classmethod
    def none(cls, rationale: str = WAITING) -> "Recommendation":
        """The "no recommendation" sentinel."""
        return cls(action=None, rationale=rationale)


@lru_cache(maxsize=32)
def strategy_for(rules: RuleSet) -> BasicStrategy:
    """Shared strategy tables per rule set."""
    return BasicStrategy(rules)


def recommend(
    hand: Hand,
    dealer_upcard: Rank | None,
    rules: RuleSet | None = None,
    true_count: float | None = None,
    use_deviations: bool = False,
    splits_made: int = 0,
) -> Recommendation:
    """
    Recommend a play for the player's hand against the dealer upcard.

    Args:
        hand: Player hand
        dealer_upcard: Dealer's face-up card, or None if not reported yet
        rules: Table rules (defaults to the reference game)
        true_count: Current true count, needed for deviations and insurance
        use_deviations: Whether count-based index plays may override
        splits_made: Splits already made this round

    Returns:
        The Recommendation (the sentinel when the hand is insufficient)
    """
    rules = rules or RuleSet()
    if len(hand) < 2 or dealer_upcard is None:
        return Recommendation.none()

    dealer = rank_value(dealer_upcard)
    situation = f"{hand.describe()} vs {dealer_upcard}"
    insurance = (
        use_deviations
        and true_count is not None
        and len(hand) == 2
        and insurance_advised(dealer, true_count)
    )

    if hand.is_busted:
        return Recommendation.none(f"{situation}: bust")
    if splits_made > 0 and rules.split_aces_one_card and hand.cards[0].is_ace:
        return Recommendation(
            Action.STAND, f"{situation}: split aces take one card", insurance=insurance
        )

    can_double = rules.can_double(len(hand), splits_made)
    can_surrender = rules.can_surrender(len(hand), splits_made)
    can_split = hand.is_pair and rules.can_split(splits_made)

    strategy = strategy_for(rules)
    action = strategy.get_action(
        player_total=hand.value,
        dealer_upcard=dealer,
        is_soft=hand.is_soft,
        is_pair=hand.is_pair,
        pair_rank=rank_value(hand.cards[0]),
        can_double=can_double,
        can_surrender=can_surrender,
        can_split=can_split,
    )

    if use_deviations and true_count is not None:
        played_as_pair = can_split and (rank_value(hand.cards[0]), dealer) in strategy.pair_table
        play = _find_play(hand, dealer, true_count, can_split, played_as_pair, can_surrender)
        if (
            play is not None
            and play.deviation_action != action
            and _allowed(play.deviation_action, can_double, can_split)
            # A basic surrender only gives way to another surrender
            and (action != Action.SURRENDER or play.is_surrender)
        ):
            return Recommendation(
                play.deviation_action,
                f"{situation}: {play.description}",
                deviation=True,
                insurance=insurance,
            )

    return Recommendation(action, f"{situation}: {action.name.lower()}", insurance=insurance)


def _find_play(
    hand: Hand,
    dealer: int,
    true_count: float,
    can_split: bool,
    played_as_pair: bool,
    include_surrender: bool,
) -> IndexPlay | None:
    """
    Pair index plays first; a pair the table splits never takes a total play.

    Pairs the table plays by total (5s, 10s, 4s without DAS) fall through to
    the total plays when no pair play applies.
    """
    if can_split:
        play = find_deviation(
            player_total=hand.value,
            is_soft=hand.is_soft,
            is_pair=True,
            dealer_upcard=dealer,
            true_count=true_count,
            include_surrender=include_surrender,
        )
        if play is not None or played_as_pair:
            return play
    return find_deviation(
        player_total=hand.value,
        is_soft=hand.is_soft,
        is_pair=False,
        dealer_upcard=dealer,
        true_count=true_count,
        include_surrender=include_surrender,
    )


def _allowed(action: Action, can_double: bool, can_split: bool) -> bool:
    if action == Action.DOUBLE:
        return can_double
    if action == Action.SPLIT:
        return can_split
    return True
