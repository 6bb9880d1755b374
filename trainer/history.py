"""Undo log - tagged, invertible records of state-mutating actions."""

from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, Union

from trainer.ranks import Rank
from trainer.settings import Settings

if TYPE_CHECKING:
    from trainer.engine import CountTrainer

DEFAULT_LOG_LIMIT = 50
MAX_LOG_LIMIT = 250

# Hand contents keyed by target, as stored in log entries
HandContents = tuple[tuple[str, tuple[Rank, ...]], ...]


@dataclass(frozen=True)
class CardAdded:
    """A card counted and appended to a hand."""

    target: str
    rank: Rank
    weight: float

    def revert(self, trainer: "CountTrainer") -> None:
        trainer.shoe.uncount(self.rank, self.weight)
        hand = trainer.hands[self.target]
        if hand.cards:
            hand.pop_card()


@dataclass(frozen=True)
class NoiseBatch:
    """A batch of unseen cards counted without touching any hand."""

    ranks: tuple[Rank, ...]
    weights: tuple[float, ...]

    def revert(self, trainer: "CountTrainer") -> None:
        for rank, weight in reversed(list(zip(self.ranks, self.weights))):
            trainer.shoe.uncount(rank, weight)


@dataclass(frozen=True)
class TargetChanged:
    """The default hand for new cards changed."""

    previous: str

    def revert(self, trainer: "CountTrainer") -> None:
        trainer.target = self.previous


@dataclass(frozen=True)
class SettingsChanged:
    """A full snapshot of the settings before a change."""

    previous: Settings

    def revert(self, trainer: "CountTrainer") -> None:
        trainer.apply_settings(self.previous)


@dataclass(frozen=True)
class HandCleared:
    """All hands were cleared; counts were kept."""

    hands: HandContents
    target: str

    def revert(self, trainer: "CountTrainer") -> None:
        trainer.restore_hands(self.hands)
        trainer.target = self.target


@dataclass(frozen=True)
class ShoeReset:
    """The shoe was reset; counters and hands were zeroed."""

    running_count: float
    cards_dealt: int
    aces_seen: int
    hands: HandContents
    target: str

    def revert(self, trainer: "CountTrainer") -> None:
        trainer.shoe.running_count = self.running_count
        trainer.shoe.cards_dealt = self.cards_dealt
        trainer.shoe.aces_seen = self.aces_seen
        trainer.restore_hands(self.hands)
        trainer.target = self.target


LogEntry = Union[CardAdded, NoiseBatch, TargetChanged, SettingsChanged, HandCleared, ShoeReset]


class EventLog:
    """
    Bounded undo log.

    Once ``capacity`` entries are held, pushing a new one drops the oldest.
    """

    def __init__(self, capacity: int = DEFAULT_LOG_LIMIT) -> None:
        """
        Initialize the log.

        Args:
            capacity: Maximum entries kept (clamped to 1..MAX_LOG_LIMIT)
        """
        self._entries: deque[LogEntry] = deque(maxlen=max(1, min(capacity, MAX_LOG_LIMIT)))

    def push(self, entry: LogEntry) -> None:
        """Record an entry, dropping the oldest when full."""
        self._entries.append(entry)

    def pop(self) -> LogEntry | None:
        """Remove and return the newest entry, or None when empty."""
        if not self._entries:
            return None
        return self._entries.pop()

    def clear(self) -> None:
        """Forget every entry."""
        self._entries.clear()

    @property
    def capacity(self) -> int:
        """Return the maximum number of entries kept."""
        return self._entries.maxlen or 0

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(self._entries)
