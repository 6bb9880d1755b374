"""JSON export and import of a full trainer session."""

import json
import math
from dataclasses import dataclass, field
from typing import Any

from trainer.counting import COUNT_SYSTEMS
from trainer.ranks import Rank, normalize_rank
from trainer.settings import Settings

STATE_VERSION = 1

TARGETS = ("player", "dealer", "table")
DEFAULT_TARGET = "table"

# Far beyond any real shoe; larger counters can only come from a corrupt file
MAX_CARDS_DEALT = 100_000

# Largest tag any registered system gives a single card
MAX_TAG = max(
    abs(weight) for system in COUNT_SYSTEMS.values() for weight in system.tag_values.values()
)


class InvalidStateError(ValueError):
    """Raised when exported state text cannot be restored."""


@dataclass(frozen=True)
class SavedState:
    """Everything needed to restore a session: counts, hands and settings."""

    settings: Settings = field(default_factory=Settings)
    running_count: float = 0.0
    cards_dealt: int = 0
    aces_seen: int = 0
    hands: dict[str, tuple[Rank, ...]] = field(
        default_factory=lambda: {target: () for target in TARGETS}
    )
    target: str = DEFAULT_TARGET


def _serialize_hands(hands: dict[str, tuple[Rank, ...]]) -> dict[str, list[str]]:
    """Serialize hands to lists of rank symbols."""
    return {target: [rank.value for rank in hands.get(target, ())] for target in TARGETS}


def _deserialize_hands(data: Any) -> dict[str, tuple[Rank, ...]]:
    """Deserialize hands, rejecting unknown targets and invalid ranks."""
    if not isinstance(data, dict):
        raise InvalidStateError("hands must be an object")
    unknown = set(data) - set(TARGETS)
    if unknown:
        raise InvalidStateError(f"unknown hand targets: {sorted(unknown)}")

    hands: dict[str, tuple[Rank, ...]] = {}
    for target in TARGETS:
        raw = data.get(target, [])
        if not isinstance(raw, list):
            raise InvalidStateError(f"hand {target!r} must be a list")
        ranks = []
        for value in raw:
            rank = normalize_rank(value)
            if rank is None:
                raise InvalidStateError(f"invalid rank {value!r} in hand {target!r}")
            ranks.append(rank)
        hands[target] = tuple(ranks)
    return hands


def _count_field(data: dict[str, Any], key: str) -> int:
    value = data.get(key, 0)
    if (
        isinstance(value, bool)
        or not isinstance(value, int)
        or not 0 <= value <= MAX_CARDS_DEALT
    ):
        raise InvalidStateError(f"{key} must be an integer from 0 to {MAX_CARDS_DEALT}")
    return value


def serialize_state(state: SavedState) -> dict[str, Any]:
    """Serialize a saved state to a JSON-friendly dict."""
    return {
        "version": STATE_VERSION,
        "settings": state.settings.to_dict(),
        "shoe": {
            "running_count": state.running_count,
            "cards_dealt": state.cards_dealt,
            "aces_seen": state.aces_seen,
        },
        "hands": _serialize_hands(state.hands),
        "target": state.target,
    }


def deserialize_state(data: Any) -> SavedState:
    """
    Deserialize and validate a saved state.

    Settings values are clamped the same way live updates are; anything
    structurally wrong raises InvalidStateError.
    """
    if not isinstance(data, dict):
        raise InvalidStateError("state must be a JSON object")
    if data.get("version") != STATE_VERSION:
        raise InvalidStateError(f"unsupported state version {data.get('version')!r}")

    settings = data.get("settings", {})
    if not isinstance(settings, dict):
        raise InvalidStateError("settings must be an object")

    shoe = data.get("shoe", {})
    if not isinstance(shoe, dict):
        raise InvalidStateError("shoe must be an object")
    running_count = shoe.get("running_count", 0.0)
    if (
        isinstance(running_count, bool)
        or not isinstance(running_count, (int, float))
        or not math.isfinite(running_count)
    ):
        raise InvalidStateError("running_count must be a finite number")
    cards_dealt = _count_field(shoe, "cards_dealt")
    aces_seen = _count_field(shoe, "aces_seen")
    if aces_seen > cards_dealt:
        raise InvalidStateError("aces_seen cannot exceed cards_dealt")
    if abs(running_count) > cards_dealt * MAX_TAG:
        raise InvalidStateError("running_count is out of reach of the cards dealt")

    target = data.get("target", DEFAULT_TARGET)
    if target not in TARGETS:
        raise InvalidStateError(f"invalid target {target!r}")

    return SavedState(
        settings=Settings.from_dict(settings),
        running_count=float(running_count),
        cards_dealt=cards_dealt,
        aces_seen=aces_seen,
        hands=_deserialize_hands(data.get("hands", {})),
        target=target,
    )


def dumps(state: SavedState) -> str:
    """Export a saved state as JSON text."""
    return json.dumps(serialize_state(state), sort_keys=True)


def loads(text: str) -> SavedState:
    """
    Parse exported JSON text.

    Raises:
        InvalidStateError: If the text is not valid JSON or fails validation
    """
    if not isinstance(text, str):
        raise InvalidStateError("state must be text")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidStateError(f"invalid JSON: {e.msg}") from e
    return deserialize_state(data)
