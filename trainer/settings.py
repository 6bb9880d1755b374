"""Trainer settings and the persisted-preferences subset."""

import logging
import math
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Mapping

from trainer.counting import COUNT_SYSTEMS, DEFAULT_SYSTEM_ID
from trainer.shoe import MIN_DECKS_REMAINING, TrueCountMode, clamp
from trainer.statistics.kelly import MAX_BET_UNITS, MAX_KELLY_FRACTION
from trainer.strategy.rules import RuleSet

logger = logging.getLogger(__name__)

MIN_DECKS, MAX_DECKS = 1, 8
MIN_BANKROLL_UNITS, MAX_BANKROLL_UNITS = 1, 100_000

# A persisted preferences record: plain JSON-friendly values keyed by field name
Preferences = dict[str, Any]

# Accept the camelCase names a browser front end sends
_ALIASES = {
    "countSystem": "count_system",
    "decksInShoe": "decks_in_shoe",
    "tcMode": "tc_mode",
    "trayDecksRemaining": "tray_decks_remaining",
    "bankrollUnits": "bankroll_units",
    "kellyCapFrac": "kelly_cap_frac",
    "minBetUnits": "min_bet_units",
    "dealerHitsSoft17": "dealer_hits_soft_17",
    "doubleAfterSplit": "double_after_split",
    "lateSurrender": "late_surrender",
    "aceSideEnabled": "ace_side_enabled",
    "useDeviations": "use_deviations",
}


@dataclass(frozen=True)
class Settings:
    """
    User-adjustable trainer settings.

    Values outside their domain are clamped rather than rejected; see
    ``clamped``.
    """

    count_system: str = DEFAULT_SYSTEM_ID
    decks_in_shoe: int = 6
    tc_mode: TrueCountMode = TrueCountMode.COMPUTED
    tray_decks_remaining: float = 6.0
    bankroll_units: int = 100
    kelly_cap_frac: float = MAX_KELLY_FRACTION
    min_bet_units: int = 1

    # Table rules
    dealer_hits_soft_17: bool = True
    double_after_split: bool = True
    late_surrender: bool = False

    # Counting and strategy options
    ace_side_enabled: bool = False
    use_deviations: bool = False

    @property
    def rules(self) -> RuleSet:
        """Rule set for the strategy engine."""
        return RuleSet(
            dealer_hits_soft_17=self.dealer_hits_soft_17,
            double_after_split=self.double_after_split,
            late_surrender=self.late_surrender,
        )

    def clamped(self) -> "Settings":
        """Return a copy with every numeric value forced into its domain."""
        decks = int(clamp(round(self.decks_in_shoe), MIN_DECKS, MAX_DECKS))
        result = replace(
            self,
            decks_in_shoe=decks,
            tray_decks_remaining=float(
                clamp(self.tray_decks_remaining, MIN_DECKS_REMAINING, decks)
            ),
            bankroll_units=int(
                clamp(round(self.bankroll_units), MIN_BANKROLL_UNITS, MAX_BANKROLL_UNITS)
            ),
            kelly_cap_frac=float(clamp(self.kelly_cap_frac, 0.0, MAX_KELLY_FRACTION)),
            min_bet_units=int(clamp(round(self.min_bet_units), 0, MAX_BET_UNITS)),
        )
        if result != self:
            logger.debug("Clamped settings: %s", _diff(self, result))
        return result

    def merged(self, patch: Mapping[str, Any]) -> "Settings":
        """
        Apply a partial update.

        Unknown keys and values of the wrong type are ignored with a
        warning; numeric values are clamped.
        """
        changes: dict[str, Any] = {}
        for raw_key, value in patch.items():
            key = _ALIASES.get(raw_key, raw_key)
            if key not in _FIELD_TYPES:
                logger.warning("Ignoring unknown setting %r", raw_key)
                continue
            coerced = _coerce(key, value)
            if coerced is None:
                logger.warning("Ignoring invalid value %r for setting %r", value, raw_key)
                continue
            changes[key] = coerced
        return replace(self, **changes).clamped()

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly representation."""
        data = asdict(self)
        data["tc_mode"] = self.tc_mode.value
        return data

    def preferences(self) -> Preferences:
        """The subset worth persisting between sessions (no live shoe state)."""
        data = self.to_dict()
        del data["tray_decks_remaining"]
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Settings":
        """Build settings from a (possibly partial) mapping, ignoring bad values."""
        return cls().merged(data)


_FIELD_TYPES: dict[str, Any] = {f.name: f.type for f in fields(Settings)}


def _coerce(key: str, value: Any) -> Any:
    """Convert a raw value for ``key``; None means the value is unusable."""
    kind = _FIELD_TYPES[key]
    if key == "count_system":
        return value if isinstance(value, str) and value in COUNT_SYSTEMS else None
    if key == "tc_mode":
        if isinstance(value, TrueCountMode):
            return value
        if not isinstance(value, str):
            return None
        try:
            return TrueCountMode(value)
        except ValueError:
            return None
    if kind is bool:
        return value if isinstance(value, bool) else None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return kind(value) if kind is float else value


def _diff(before: Settings, after: Settings) -> dict[str, tuple[Any, Any]]:
    return {
        f.name: (getattr(before, f.name), getattr(after, f.name))
        for f in fields(Settings)
        if getattr(before, f.name) != getattr(after, f.name)
    }
