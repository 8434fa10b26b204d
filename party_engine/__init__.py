"""
party-engine: turn-based party games for one shared screen.

Truth or Dare is the playable game; Never Have I Ever and Would You Rather
ship their turn machines only.
"""

from .state import (
    AcknowledgePunishment,
    ChooseType,
    CompleteAction,
    EventBus,
    EventType,
    GameEvent,
    Player,
    Prompt,
    PromptType,
    RequestExit,
    RevealTask,
    SessionConfig,
    SkipTask,
    TruthOrDareMode,
    Validate,
)
from .systems import (
    ContentProvider,
    GameError,
    IllegalTransition,
    RegistryError,
    SessionController,
    TurnState,
)

__version__ = "0.1.0"

__all__ = [
    "AcknowledgePunishment",
    "ChooseType",
    "CompleteAction",
    "ContentProvider",
    "EventBus",
    "EventType",
    "GameError",
    "GameEvent",
    "IllegalTransition",
    "Player",
    "Prompt",
    "PromptType",
    "RegistryError",
    "RequestExit",
    "RevealTask",
    "SessionConfig",
    "SessionController",
    "SkipTask",
    "TruthOrDareMode",
    "TurnState",
    "Validate",
]
