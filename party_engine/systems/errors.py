"""
Exception hierarchy for the game systems.

Registry errors are recoverable: the UI re-prompts and nothing was
changed. IllegalTransition and EmptyRoster mean the caller broke a
precondition and should not retry the same call.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from enum import Enum


class GameError(Exception):
    """Base class for everything the engine raises."""
    pass


# ─── Turn machine ────────────────────────────────────────────────

class TurnError(GameError):
    """Error during turn processing."""
    pass


class IllegalTransition(TurnError):
    """Requested state is not reachable from the current one."""
    def __init__(self, from_state: "Enum", to_state: "Enum"):
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Cannot transition from {from_state.value} to {to_state.value}."
        )


class SessionNotStarted(TurnError):
    """An event arrived before start() was called."""
    def __init__(self, attempted: str):
        self.attempted = attempted
        super().__init__(f"Cannot {attempted}: no session has been started.")


class ReentrantDispatch(TurnError):
    """dispatch() was called from inside an event handler."""
    def __init__(self, attempted: str):
        self.attempted = attempted
        super().__init__(
            f"Cannot dispatch {attempted} while another event is being processed."
        )


# ─── Roster ──────────────────────────────────────────────────────

class RegistryError(GameError):
    """Roster validation failure. The roster was not changed."""
    pass


class BlankName(RegistryError):
    def __init__(self):
        super().__init__("Please enter a player name.")


class DuplicateName(RegistryError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"A player named {name!r} already exists.")


class AtCapacity(RegistryError):
    def __init__(self, max_players: int):
        self.max_players = max_players
        super().__init__(f"Maximum {max_players} players allowed.")


class BelowMinimum(RegistryError):
    def __init__(self, min_players: int):
        self.min_players = min_players
        plural = "s" if min_players != 1 else ""
        super().__init__(f"Minimum {min_players} player{plural} required.")


class UnknownPlayer(RegistryError):
    def __init__(self, player_id: str):
        self.player_id = player_id
        super().__init__(f"No player with id {player_id!r}.")


class EmptyRoster(GameError):
    """Selection or ranking over zero players. A broken precondition."""
    def __init__(self, attempted: str = "select a player"):
        super().__init__(f"Cannot {attempted}: the roster is empty.")
