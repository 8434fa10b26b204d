"""
Event bus for party-engine sessions.

This is the GameEventSink seam: the engine publishes, the UI shell
subscribes and renders. Each SessionController owns its own bus, so two
games never hear each other.

Usage:
    bus = controller.bus

    # Subscribe (typically when the screen mounts)
    bus.on(EventType.STATE_CHANGED, my_handler)

    # Handler receives event
    def my_handler(event: GameEvent):
        print(f"{event.data['from']} -> {event.data['to']}")
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Game events that can be published."""

    # Turn machine
    STATE_CHANGED = "state.changed"
    PROMPT_SHOWN = "prompt.shown"

    # Scoring
    SCORE_CHANGED = "score.changed"

    # Session lifecycle
    SESSION_STARTED = "session.started"
    SESSION_RESET = "session.reset"
    SESSION_ENDED = "session.ended"


@dataclass
class GameEvent:
    """
    Event payload for the event bus.

    Attributes:
        type: The event type (from EventType enum)
        data: Event-specific payload as dict
        session_id: ID of the session this event belongs to
        timestamp: When the event was emitted

    STATE_CHANGED events always carry `from`, `to` and `player`
    (the current player id, or None outside a turn).
    """

    type: EventType
    data: dict = field(default_factory=dict)
    session_id: str = ""
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"[{self.type.value}] {self.data}"


# Type alias for event handlers
EventHandler = Callable[[GameEvent], None]


class EventBus:
    """
    Synchronous event bus.

    Listeners are called immediately on emit(), in subscription order.
    A failing listener is logged and skipped; the rest still run.
    """

    def __init__(self, history_limit: int = 200):
        self._listeners: dict[EventType, list[EventHandler]] = {}
        self._history: list[GameEvent] = []
        self._history_limit = history_limit

    def on(self, event_type: EventType, handler: EventHandler) -> None:
        """Subscribe to an event type. Subscribing twice is a no-op."""
        if event_type not in self._listeners:
            self._listeners[event_type] = []
        if handler not in self._listeners[event_type]:
            self._listeners[event_type].append(handler)

    def on_all(self, handler: EventHandler) -> None:
        """Subscribe to every event type."""
        for event_type in EventType:
            self.on(event_type, handler)

    def off(self, event_type: EventType, handler: EventHandler) -> None:
        """Unsubscribe from an event type."""
        if event_type in self._listeners and handler in self._listeners[event_type]:
            self._listeners[event_type].remove(handler)

    def off_all(self, handler: EventHandler) -> None:
        for event_type in EventType:
            self.off(event_type, handler)

    def emit(
        self,
        event_type: EventType,
        session_id: str = "",
        **data,
    ) -> GameEvent:
        """
        Emit an event to all subscribers.

        Args:
            event_type: The type of event
            session_id: Session context (optional)
            **data: Event-specific data

        Returns:
            The emitted GameEvent (for chaining/testing)
        """
        event = GameEvent(type=event_type, data=data, session_id=session_id)

        self._history.append(event)
        if len(self._history) > self._history_limit:
            self._history = self._history[-self._history_limit :]

        # Copy so a handler can unsubscribe itself mid-emit
        for handler in list(self._listeners.get(event_type, [])):
            try:
                handler(event)
            except Exception:
                logger.exception("Error in handler for %s", event_type.value)

        return event

    def clear(self) -> None:
        """Clear all listeners. Useful for testing."""
        self._listeners.clear()

    def get_history(self, event_type: EventType | None = None) -> list[GameEvent]:
        """
        Get recent event history.

        Args:
            event_type: Filter by type, or None for all events
        """
        if event_type is None:
            return list(self._history)
        return [e for e in self._history if e.type == event_type]

    def listener_count(self, event_type: EventType) -> int:
        """Get number of listeners for an event type."""
        return len(self._listeners.get(event_type, []))
