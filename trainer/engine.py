"""Count trainer engine - owns the shoe, the hands and the undo log."""

import logging
from dataclasses import dataclass
from random import Random
from typing import Any, Mapping

from transitions import Machine

from trainer.counting import get_count_system
from trainer.events import EventEmitter, EventHandler, EventType
from trainer.hand import Hand
from trainer.history import (
    DEFAULT_LOG_LIMIT,
    CardAdded,
    EventLog,
    HandCleared,
    HandContents,
    NoiseBatch,
    SettingsChanged,
    ShoeReset,
    TargetChanged,
)
from trainer.persistence import (
    DEFAULT_TARGET,
    TARGETS,
    InvalidStateError,
    SavedState,
    dumps,
    loads,
)
from trainer.ranks import Rank, normalize_rank, parse_ranks
from trainer.settings import Preferences, Settings
from trainer.shoe import Band, ShoeState
from trainer.statistics import bet_units, estimate_edge
from trainer.strategy import Recommendation, recommend

logger = logging.getLogger(__name__)

# Error codes reported in ActionResult.error
INVALID_RANK = "invalid_rank"
INVALID_TARGET = "invalid_target"
MALFORMED_IMPORT = "malformed_import"
EMPTY_UNDO = "empty_undo"

# Noise batches: a random number of unseen cards drawn from all 13 faces
NOISE_MIN_CARDS = 6
NOISE_MAX_CARDS = 18
NOISE_BATCH_LIMIT = 52
CARD_FACES = tuple(parse_ranks(list("A23456789TJQK")))


@dataclass(frozen=True)
class ActionResult:
    """Outcome of an engine operation. Failed operations leave state unchanged."""

    ok: bool
    error: str | None = None
    message: str = ""

    @classmethod
    def success(cls, message: str = "") -> "ActionResult":
        return cls(ok=True, message=message)

    @classmethod
    def failure(cls, error: str, message: str) -> "ActionResult":
        return cls(ok=False, error=error, message=message)

    def __bool__(self) -> bool:
        return self.ok


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of everything a renderer needs."""

    running_count: float
    ace_correction: float
    true_count: float
    decks_seen: float
    decks_remaining: float
    penetration: float
    cards_dealt: int
    aces_seen: int
    edge_pct: float
    bet_units: int
    kelly_fraction: float
    band: Band
    recommendation: Recommendation
    hands: dict[str, tuple[Rank, ...]]
    target: str
    settings: Settings
    undo_depth: int = 0

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly representation."""
        rec = self.recommendation
        return {
            "running_count": self.running_count,
            "ace_correction": self.ace_correction,
            "true_count": self.true_count,
            "decks_seen": self.decks_seen,
            "decks_remaining": self.decks_remaining,
            "penetration": self.penetration,
            "cards_dealt": self.cards_dealt,
            "aces_seen": self.aces_seen,
            "edge_pct": self.edge_pct,
            "bet_units": self.bet_units,
            "kelly_fraction": self.kelly_fraction,
            "band": self.band.value,
            "recommendation": {
                "action": rec.action.name if rec.action else None,
                "rationale": rec.rationale,
                "deviation": rec.deviation,
                "insurance": rec.insurance,
            },
            "hands": {t: [r.value for r in ranks] for t, ranks in self.hands.items()},
            "target": self.target,
            "settings": self.settings.to_dict(),
            "undo_depth": self.undo_depth,
        }


class CountTrainer:
    """
    Card-counting trainer for a single session.

    Every mutating operation records one undo entry before it changes
    anything and returns an ActionResult; nothing raises for bad input.
    State is read through ``snapshot``, which recomputes the true count,
    edge, bet and recommendation on each call.
    """

    # The hand that receives cards reported without an explicit target
    STATES = list(TARGETS)
    TRANSITIONS = [
        {"trigger": f"target_{target}", "source": "*", "dest": target}
        for target in TARGETS
    ]

    def __init__(
        self,
        settings: Settings | None = None,
        rng: Random | None = None,
        log_limit: int = DEFAULT_LOG_LIMIT,
        defaults: Settings | None = None,
    ) -> None:
        """
        Initialize a trainer with an empty shoe.

        Args:
            settings: Starting settings (``defaults`` if not provided)
            rng: Random number generator for reproducible noise batches
            log_limit: Undo log capacity
            defaults: Settings restored by ``reset_preferences``
        """
        self.defaults = (defaults or Settings()).clamped()
        self.settings = (settings or self.defaults).clamped()
        self.shoe = ShoeState()
        self.hands: dict[str, Hand] = {target: Hand() for target in TARGETS}
        self.log = EventLog(log_limit)
        self.events = EventEmitter()
        self._rng = rng or Random()

        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial=DEFAULT_TARGET,
            auto_transitions=False,
            model_attribute="_target",
        )

        self._sync_shoe()
        self._band = self.shoe.band

    @property
    def target(self) -> str:
        """Hand that receives cards added without a target."""
        return self._target  # type: ignore[attr-defined]

    @target.setter
    def target(self, value: str) -> None:
        self.machine.set_state(value)

    def subscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to trainer events."""
        self.events.subscribe(handler, event_type)

    # Card reporting

    def add_card(self, target: str | None, rank: object) -> ActionResult:
        """
        Count a card and add it to a hand.

        Args:
            target: "player", "dealer" or "table"; None uses the current target
            rank: Raw rank input such as "A", "10", "k" or 7

        Returns:
            ActionResult; invalid targets or ranks change nothing
        """
        target = self.target if target is None else target
        if target not in TARGETS:
            return self._reject(INVALID_TARGET, f"Unknown target {target!r}")
        card = normalize_rank(rank)
        if card is None:
            return self._reject(INVALID_RANK, f"Invalid rank {rank!r}")

        weight = self.shoe.system.weight(card)
        self.log.push(CardAdded(target, card, weight))
        self.shoe.count(card)
        self.hands[target].add_card(card)

        logger.debug("Counted %s to %s (%+g), rc=%g", card, target, weight, self.shoe.running_count)
        self.events.emit_new(EventType.CARD_ADDED, target=target, rank=card.value, weight=weight)
        self._check_band()
        return ActionResult.success(f"{card} to {target}")

    def add_noise(self, count: int | None = None) -> ActionResult:
        """
        Count a batch of unseen cards without adding them to any hand.

        Args:
            count: Number of cards (random 6-18 if not provided, capped at 52)
        """
        if count is None:
            count = self._rng.randint(NOISE_MIN_CARDS, NOISE_MAX_CARDS)
        count = max(1, min(int(count), NOISE_BATCH_LIMIT))

        ranks = tuple(self._rng.choice(CARD_FACES) for _ in range(count))
        weights = tuple(self.shoe.system.weight(rank) for rank in ranks)
        self.log.push(NoiseBatch(ranks, weights))
        for rank in ranks:
            self.shoe.count(rank)

        logger.debug("Counted %d noise cards (%+g)", count, sum(weights))
        self.events.emit_new(EventType.NOISE_ADDED, count=count, delta=sum(weights))
        self._check_band()
        return ActionResult.success(f"{count} cards")

    def set_target(self, target: str) -> ActionResult:
        """Change the hand that receives cards added without a target."""
        if target not in TARGETS:
            return self._reject(INVALID_TARGET, f"Unknown target {target!r}")
        if target == self.target:
            return ActionResult.success(f"Target already {target}")

        self.log.push(TargetChanged(self.target))
        self.trigger(f"target_{target}")  # type: ignore[attr-defined]

        logger.debug("Target set to %s", target)
        self.events.emit_new(EventType.TARGET_CHANGED, target=target)
        return ActionResult.success(f"Target {target}")

    # Undo

    def undo(self) -> ActionResult:
        """Revert the most recent logged action."""
        entry = self.log.pop()
        if entry is None:
            logger.debug("Nothing to undo")
            return ActionResult.failure(EMPTY_UNDO, "Nothing to undo")

        entry.revert(self)
        name = type(entry).__name__

        logger.debug("Undid %s", name)
        self.events.emit_new(EventType.UNDONE, entry=name)
        self._check_band()
        return ActionResult.success(f"Undid {name}")

    def clear_log(self) -> None:
        """Forget all undo history."""
        self.log.clear()

    # Resets

    def clear_hand(self) -> ActionResult:
        """Clear all hands and point the target back at the table; counts are kept."""
        self.log.push(HandCleared(self._hand_contents(), self.target))
        for hand in self.hands.values():
            hand.clear()
        self.target = DEFAULT_TARGET

        logger.debug("Hands cleared")
        self.events.emit_new(EventType.HAND_CLEARED)
        return ActionResult.success("Hands cleared")

    new_hand = clear_hand

    def reset_shoe(self) -> ActionResult:
        """Start a fresh shoe: zero the counts and clear hands. Settings are kept."""
        self.log.push(
            ShoeReset(
                running_count=self.shoe.running_count,
                cards_dealt=self.shoe.cards_dealt,
                aces_seen=self.shoe.aces_seen,
                hands=self._hand_contents(),
                target=self.target,
            )
        )
        self.shoe.reset()
        for hand in self.hands.values():
            hand.clear()
        self.target = DEFAULT_TARGET

        self.events.emit_new(EventType.SHOE_RESET)
        self._check_band()
        return ActionResult.success("Shoe reset")

    shuffle = reset_shoe

    def reset_preferences(self) -> ActionResult:
        """Restore default settings; counts and hands are kept."""
        return self._change_settings(self.defaults)

    # Settings

    def set_settings(
        self,
        patch: Mapping[str, Any] | None = None,
        **changes: Any,
    ) -> ActionResult:
        """
        Merge a partial settings update.

        Accepts a mapping, keyword arguments, or both; camelCase keys are
        understood. Unknown keys are ignored and numbers are clamped.
        """
        merged = self.settings.merged({**(patch or {}), **changes})
        return self._change_settings(merged)

    def apply_settings(self, settings: Settings) -> None:
        """Replace the settings wholesale without logging."""
        self.settings = settings
        self._sync_shoe()

    def preferences(self) -> Preferences:
        """Settings worth persisting between sessions."""
        return self.settings.preferences()

    def load_preferences(self, prefs: Mapping[str, Any]) -> None:
        """Seed settings from a persisted preferences record (not undoable)."""
        self.apply_settings(self.settings.merged(prefs))
        self._check_band()

    # Reading

    def snapshot(self) -> Snapshot:
        """Compute the current view of the session. Never mutates."""
        shoe = self.shoe
        settings = self.settings
        true_count = shoe.true_count
        edge = estimate_edge(true_count, shoe.decks_seen, shoe.decks_in_shoe, shoe.system)
        bet = bet_units(
            edge,
            settings.bankroll_units,
            cap=settings.kelly_cap_frac,
            min_units=settings.min_bet_units,
        )
        recommendation = recommend(
            self.hands["player"],
            self.hands["dealer"].first,
            rules=settings.rules,
            true_count=true_count,
            use_deviations=settings.use_deviations,
        )
        return Snapshot(
            running_count=shoe.running_count,
            ace_correction=shoe.ace_correction,
            true_count=true_count,
            decks_seen=shoe.decks_seen,
            decks_remaining=shoe.decks_remaining,
            penetration=shoe.penetration,
            cards_dealt=shoe.cards_dealt,
            aces_seen=shoe.aces_seen,
            edge_pct=edge,
            bet_units=bet.units,
            kelly_fraction=bet.fraction,
            band=shoe.band,
            recommendation=recommendation,
            hands={target: tuple(hand.cards) for target, hand in self.hands.items()},
            target=self.target,
            settings=settings,
            undo_depth=len(self.log),
        )

    # Export / import

    def export_state(self) -> str:
        """Serialize counts, hands, target and settings as JSON text."""
        return dumps(
            SavedState(
                settings=self.settings,
                running_count=self.shoe.running_count,
                cards_dealt=self.shoe.cards_dealt,
                aces_seen=self.shoe.aces_seen,
                hands={target: tuple(hand.cards) for target, hand in self.hands.items()},
                target=self.target,
            )
        )

    def import_state(self, text: str) -> ActionResult:
        """
        Restore a session exported by ``export_state``.

        The text is validated completely before anything changes. A
        successful import clears the undo log.
        """
        try:
            saved = loads(text)
        except InvalidStateError as e:
            return self._reject(MALFORMED_IMPORT, str(e))

        self.apply_settings(saved.settings)
        self.shoe.running_count = saved.running_count
        self.shoe.cards_dealt = saved.cards_dealt
        self.shoe.aces_seen = saved.aces_seen
        self.restore_hands(tuple(saved.hands.items()))
        self.target = saved.target
        self.log.clear()

        logger.info(
            "Imported state: rc=%g, %d cards dealt", saved.running_count, saved.cards_dealt
        )
        self.events.emit_new(EventType.STATE_IMPORTED)
        self._check_band()
        return ActionResult.success("State imported")

    # Helpers used by undo entries

    def restore_hands(self, contents: HandContents) -> None:
        """Replace hand contents from an undo entry or saved state."""
        for target in TARGETS:
            self.hands[target].clear()
        for target, ranks in contents:
            self.hands[target] = Hand(list(ranks))

    def _hand_contents(self) -> HandContents:
        return tuple((target, tuple(self.hands[target].cards)) for target in TARGETS)

    def _change_settings(self, new: Settings) -> ActionResult:
        if new == self.settings:
            return ActionResult.success("Settings unchanged")

        previous = self.settings
        self.log.push(SettingsChanged(previous))
        self.apply_settings(new)

        logger.debug("Settings changed: %s", _changed_keys(previous, new))
        self.events.emit_new(EventType.SETTINGS_CHANGED, changed=_changed_keys(previous, new))
        self._check_band()
        return ActionResult.success("Settings updated")

    def _sync_shoe(self) -> None:
        settings = self.settings
        self.shoe.system = get_count_system(settings.count_system)
        self.shoe.decks_in_shoe = settings.decks_in_shoe
        self.shoe.mode = settings.tc_mode
        self.shoe.tray_decks_remaining = settings.tray_decks_remaining
        self.shoe.ace_side_enabled = settings.ace_side_enabled

    def _check_band(self) -> None:
        band = self.shoe.band
        if band != self._band:
            logger.debug("Band %s -> %s", self._band, band)
            self.events.emit_new(EventType.BAND_CHANGED, previous=self._band.value, band=band.value)
            self._band = band

    def _reject(self, error: str, message: str) -> ActionResult:
        logger.warning("Rejected: %s", message)
        self.events.emit_new(EventType.INVALID_ACTION, error=error, message=message)
        return ActionResult.failure(error, message)

    def __repr__(self) -> str:
        return f"CountTrainer({self.shoe!r}, target={self.target})"


def _changed_keys(before: Settings, after: Settings) -> list[str]:
    old, new = before.to_dict(), after.to_dict()
    return sorted(key for key in new if old[key] != new[key])

