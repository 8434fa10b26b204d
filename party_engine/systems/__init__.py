"""
Game systems for party-engine.

Each system owns one concern (roster, content, scores, turn legality,
pacing). SessionController composes them into a running game.
"""

from .errors import (
    GameError,
    TurnError,
    IllegalTransition,
    SessionNotStarted,
    ReentrantDispatch,
    RegistryError,
    BlankName,
    DuplicateName,
    AtCapacity,
    BelowMinimum,
    UnknownPlayer,
    EmptyRoster,
)
from .players import PlayerRegistry
from .scoring import ScoreLedger
from .content import ContentProvider, ContentSource, parse_banks
from .turns import (
    StateMachine,
    TurnState,
    TurnStateMachine,
    TURN_TRANSITIONS,
    NeverHaveIEverState,
    NeverHaveIEverMachine,
    WouldYouRatherState,
    WouldYouRatherMachine,
)
from .timers import DwellGate, clamp_dwell
from .session import SessionController

__all__ = [
    # Errors
    "GameError",
    "TurnError",
    "IllegalTransition",
    "SessionNotStarted",
    "ReentrantDispatch",
    "RegistryError",
    "BlankName",
    "DuplicateName",
    "AtCapacity",
    "BelowMinimum",
    "UnknownPlayer",
    "EmptyRoster",
    # Systems
    "PlayerRegistry",
    "ScoreLedger",
    "ContentProvider",
    "ContentSource",
    "parse_banks",
    "DwellGate",
    "clamp_dwell",
    # Turn machines
    "StateMachine",
    "TurnState",
    "TurnStateMachine",
    "TURN_TRANSITIONS",
    "NeverHaveIEverState",
    "NeverHaveIEverMachine",
    "WouldYouRatherState",
    "WouldYouRatherMachine",
    # Composition root
    "SessionController",
]
