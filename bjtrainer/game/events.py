"""Session events published to UI subscribers."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Callable


class EventType(Enum):
    """Things a training session reports."""

    # Session flow
    SESSION_STARTED = auto()
    RUN_ENDED = auto()
    SHOE_SHUFFLED = auto()

    # Round flow
    BET_PLACED = auto()
    CARDS_DEALT = auto()
    PLAYER_ACTED = auto()
    DEALER_PLAYED = auto()
    ROUND_ENDED = auto()
    ROUND_RESET = auto()

    # Training feedback
    DECISION_GRADED = auto()

    # Persistence
    PROGRESS_SAVE_FAILED = auto()


@dataclass(frozen=True)
class GameEvent:
    """Immutable record of something that happened in a session."""

    event_type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.event_type.name}: {self.data}"


EventHandler = Callable[[GameEvent], None]


class EventEmitter:
    """
    Publishes session events.

    Handlers subscribe to one event type, or to every event by passing
    ``None``. Handlers run synchronously in subscription order.
    """

    def __init__(self) -> None:
        self._handlers: dict[EventType | None, list[EventHandler]] = {}
        self._event_history: list[GameEvent] = []

    def subscribe(self, handler: EventHandler, event_type: EventType | None = None) -> None:
        self._handlers.setdefault(event_type, []).append(handler)

    def unsubscribe(self, handler: EventHandler, event_type: EventType | None = None) -> None:
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event_type: EventType, **data: Any) -> GameEvent:
        """
        Create an event, record it and hand it to subscribers.

        Args:
            event_type: Type of event
            **data: Event payload

        Returns:
            The emitted event
        """
        event = GameEvent(event_type=event_type, data=data)
        self._event_history.append(event)

        for handler in self._handlers.get(event_type, []):
            handler(event)
        for handler in self._handlers.get(None, []):
            handler(event)
        return event

    @property
    def history(self) -> list[GameEvent]:
        return self._event_history.copy()

    def clear_history(self) -> None:
        self._event_history.clear()
