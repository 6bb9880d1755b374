"""Basic strategy tables for blackjack."""

from enum import Enum, auto
from typing import Mapping

from trainer.strategy.rules import RuleSet


class Action(Enum):
    """Possible player actions."""

    HIT = auto()
    STAND = auto()
    DOUBLE = auto()
    SPLIT = auto()
    SURRENDER = auto()

    # Conditional actions (fallback if primary not allowed)
    DOUBLE_OR_HIT = auto()  # Double if allowed, else hit
    DOUBLE_OR_STAND = auto()  # Double if allowed, else stand
    SURRENDER_OR_HIT = auto()  # Surrender if allowed, else hit

    def __str__(self) -> str:
        return self.name.replace("_", "/")


DEALER_UPCARDS = range(2, 12)  # 2-11 (11 = Ace)


class BasicStrategy:
    """
    Basic strategy lookup tables.

    Pre-computed dictionaries keyed by (player value, dealer upcard value),
    built once per rule set. Pair keys use the value of one card of the
    pair (Ace = 11).
    """

    def __init__(self, rules: RuleSet | None = None) -> None:
        """
        Initialize basic strategy for given rules.

        Args:
            rules: Rule set to generate strategy for. Uses default if None.
        """
        self.rules = rules or RuleSet()
        self._hard_table = self._build_hard_table()
        self._soft_table = self._build_soft_table()
        self._pair_table = self._build_pair_table()

    def get_action(
        self,
        player_total: int,
        dealer_upcard: int,
        is_soft: bool = False,
        is_pair: bool = False,
        pair_rank: int | None = None,
        can_double: bool = True,
        can_surrender: bool = False,
        can_split: bool = True,
    ) -> Action:
        """
        Get the basic strategy action.

        Pairs are consulted first, then soft totals, then hard totals; each
        step short-circuits. A pair with no table entry (fives, tens, fours
        without DAS) is played by its total.

        Args:
            player_total: Player's hand total
            dealer_upcard: Dealer's upcard value (2-11, Ace=11)
            is_soft: Whether the hand is soft
            is_pair: Whether the hand is a pair
            pair_rank: The value of one card of the pair
            can_double: Whether doubling is allowed
            can_surrender: Whether surrender is allowed
            can_split: Whether splitting is allowed

        Returns:
            The recommended action
        """
        if is_pair and can_split and pair_rank is not None:
            action = self._pair_table.get((pair_rank, dealer_upcard))
            if action:
                return self._resolve_action(action, can_double, can_surrender)

        if is_soft:
            action = self._soft_table.get((player_total, dealer_upcard))
            if action:
                return self._resolve_action(action, can_double, can_surrender)

        action = self._hard_table.get((player_total, dealer_upcard))
        if action:
            return self._resolve_action(action, can_double, can_surrender)

        # Default actions for edge cases
        if player_total >= 17:
            return Action.STAND
        return Action.HIT

    def _resolve_action(
        self,
        action: Action,
        can_double: bool,
        can_surrender: bool,
    ) -> Action:
        """Resolve conditional actions based on what's allowed."""
        if action == Action.DOUBLE_OR_HIT:
            return Action.DOUBLE if can_double else Action.HIT
        if action == Action.DOUBLE_OR_STAND:
            return Action.DOUBLE if can_double else Action.STAND
        if action == Action.SURRENDER_OR_HIT:
            return Action.SURRENDER if can_surrender else Action.HIT
        return action

    def _build_hard_table(self) -> Mapping[tuple[int, int], Action]:
        """Build hard totals strategy table."""
        H = Action.HIT
        S = Action.STAND
        D = Action.DOUBLE_OR_HIT
        Rh = Action.SURRENDER_OR_HIT

        table: dict[tuple[int, int], Action] = {}

        # Hard 4-8: Always hit
        for total in range(4, 9):
            for dealer in DEALER_UPCARDS:
                table[(total, dealer)] = H

        # Hard 9: Double vs 3-6
        for dealer in DEALER_UPCARDS:
            table[(9, dealer)] = D if 3 <= dealer <= 6 else H

        # Hard 10: Double vs 2-9
        for dealer in DEALER_UPCARDS:
            table[(10, dealer)] = D if dealer <= 9 else H

        # Hard 11: Double, except vs Ace when the dealer stands on soft 17
        for dealer in range(2, 11):
            table[(11, dealer)] = D
        table[(11, 11)] = D if self.rules.dealer_hits_soft_17 else H

        # Hard 12: Stand vs 4-6
        for dealer in DEALER_UPCARDS:
            table[(12, dealer)] = S if 4 <= dealer <= 6 else H

        # Hard 13-16: Stand vs 2-6
        for total in range(13, 17):
            for dealer in DEALER_UPCARDS:
                table[(total, dealer)] = S if dealer <= 6 else H

        if self.rules.late_surrender:
            table[(15, 10)] = Rh
            table[(16, 9)] = Rh
            table[(16, 10)] = Rh
            table[(16, 11)] = Rh
            if self.rules.dealer_hits_soft_17:
                table[(15, 11)] = Rh

        # Hard 17+: Always stand
        for total in range(17, 22):
            for dealer in DEALER_UPCARDS:
                table[(total, dealer)] = S

        return table

    def _build_soft_table(self) -> Mapping[tuple[int, int], Action]:
        """Build soft totals strategy table."""
        H = Action.HIT
        S = Action.STAND
        D = Action.DOUBLE_OR_HIT
        Ds = Action.DOUBLE_OR_STAND

        table: dict[tuple[int, int], Action] = {}

        # Soft 12 (A,A when not split): Hit
        for dealer in DEALER_UPCARDS:
            table[(12, dealer)] = H

        # Soft 13-14 (A,2 / A,3): Double vs 5-6
        for total in (13, 14):
            for dealer in DEALER_UPCARDS:
                table[(total, dealer)] = D if dealer in (5, 6) else H

        # Soft 15-16 (A,4 / A,5): Double vs 4-6
        for total in (15, 16):
            for dealer in DEALER_UPCARDS:
                table[(total, dealer)] = D if 4 <= dealer <= 6 else H

        # Soft 17 (A,6): Double vs 3-6
        for dealer in DEALER_UPCARDS:
            table[(17, dealer)] = D if 3 <= dealer <= 6 else H

        # Soft 18 (A,7)
        for dealer in (2, 7, 8):
            table[(18, dealer)] = S
        for dealer in (3, 4, 5, 6):
            table[(18, dealer)] = Ds
        for dealer in (9, 10, 11):
            table[(18, dealer)] = H

        # Soft 19 (A,8): Double vs 6 only
        for dealer in DEALER_UPCARDS:
            table[(19, dealer)] = Ds if dealer == 6 else S

        # Soft 20-21: Always stand
        for total in (20, 21):
            for dealer in DEALER_UPCARDS:
                table[(total, dealer)] = S

        return table

    def _build_pair_table(self) -> Mapping[tuple[int, int], Action]:
        """Build pair splitting strategy table."""
        H = Action.HIT
        S = Action.STAND
        P = Action.SPLIT

        table: dict[tuple[int, int], Action] = {}

        # Aces and 8s: Always split
        for dealer in DEALER_UPCARDS:
            table[(11, dealer)] = P
            table[(8, dealer)] = P

        # 9s: Split except vs 7, 10, A
        for dealer in DEALER_UPCARDS:
            table[(9, dealer)] = S if dealer in (7, 10, 11) else P

        # 7s: Split vs 2-7
        for dealer in DEALER_UPCARDS:
            table[(7, dealer)] = P if dealer <= 7 else H

        # 6s: Split vs 2-6
        for dealer in DEALER_UPCARDS:
            table[(6, dealer)] = P if dealer <= 6 else H

        # 4s: Split vs 5-6 only with DAS, otherwise played as hard 8
        if self.rules.double_after_split:
            table[(4, 5)] = P
            table[(4, 6)] = P

        # 2s and 3s: Split vs 2-7
        for pair in (2, 3):
            for dealer in DEALER_UPCARDS:
                table[(pair, dealer)] = P if dealer <= 7 else H

        # 5s and 10s are never split and have no entries

        return table

    @property
    def pair_table(self) -> Mapping[tuple[int, int], Action]:
        """Return the pair splitting strategy table."""
        return self._pair_table
