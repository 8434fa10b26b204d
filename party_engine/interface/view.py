"""
GameView abstraction.

A view is whatever renders the game: a phone screen, the terminal shell,
a test recorder. It receives every event the session emits and decides
what to draw. Views never mutate the session; they send input back
through SessionController.dispatch().
"""

from abc import ABC, abstractmethod

from ..state.event_bus import EventType, GameEvent


class GameView(ABC):
    """Receives session events. Implementations must not dispatch from here."""

    @abstractmethod
    def on_event(self, event: GameEvent) -> None:
        ...


class RecordingView(GameView):
    """Keeps every event it sees. Handy for tests and replays."""

    def __init__(self):
        self.events: list[GameEvent] = []

    def on_event(self, event: GameEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: EventType) -> list[GameEvent]:
        return [e for e in self.events if e.type == event_type]

    @property
    def states(self) -> list:
        """Target state of every STATE_CHANGED seen, in order."""
        return [e.data["to"] for e in self.of_type(EventType.STATE_CHANGED)]
