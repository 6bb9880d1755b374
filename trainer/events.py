"""Trainer events for subscribers such as a renderer."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Callable


class EventType(Enum):
    """What changed in the trainer."""

    CARD_ADDED = auto()
    NOISE_ADDED = auto()
    TARGET_CHANGED = auto()
    HAND_CLEARED = auto()
    SHOE_RESET = auto()
    SETTINGS_CHANGED = auto()
    STATE_IMPORTED = auto()
    UNDONE = auto()

    # The true count crossed into another band
    BAND_CHANGED = auto()

    # A rejected operation (bad rank, target or import)
    INVALID_ACTION = auto()


@dataclass(frozen=True)
class TrainerEvent:
    """
    Notification sent after an operation.

    Events only say that something happened; read the new state from
    ``CountTrainer.snapshot``.
    """

    event_type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.event_type.name}: {self.data}"


EventHandler = Callable[[TrainerEvent], None]


class EventEmitter:
    """Dispatches trainer events to handlers registered per type or for all types."""

    def __init__(self) -> None:
        self._handlers: dict[EventType | None, list[EventHandler]] = {}

    def subscribe(self, handler: EventHandler, event_type: EventType | None = None) -> None:
        """
        Register a handler.

        Args:
            handler: Called with each matching event
            event_type: Only deliver this type; None delivers everything
        """
        self._handlers.setdefault(event_type, []).append(handler)

    def emit_new(self, event_type: EventType, **data: Any) -> TrainerEvent:
        """Build an event from keyword data and deliver it."""
        event = TrainerEvent(event_type=event_type, data=data)
        for handler in self._handlers.get(event_type, []) + self._handlers.get(None, []):
            handler(event)
        return event
