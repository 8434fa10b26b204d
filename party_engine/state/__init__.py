"""State models and the event bus for party-engine sessions."""

from .schema import (
    AVATAR_PALETTE,
    DEFAULT_MODE,
    MODE_CATALOG,
    EndCondition,
    GameSession,
    Mode,
    Player,
    PlayerSpec,
    Prompt,
    PromptType,
    SessionConfig,
    TruthOrDareMode,
    get_mode,
    resolve_mode_key,
)
from .actions import (
    AcknowledgePunishment,
    ChooseType,
    CompleteAction,
    RequestExit,
    RevealTask,
    SkipTask,
    UIAction,
    UIEvent,
    Validate,
)
from .event_bus import (
    EventBus,
    EventHandler,
    EventType,
    GameEvent,
)

__all__ = [
    # Schema
    "AVATAR_PALETTE",
    "DEFAULT_MODE",
    "MODE_CATALOG",
    "EndCondition",
    "GameSession",
    "Mode",
    "Player",
    "PlayerSpec",
    "Prompt",
    "PromptType",
    "SessionConfig",
    "TruthOrDareMode",
    "get_mode",
    "resolve_mode_key",
    # Actions
    "AcknowledgePunishment",
    "ChooseType",
    "CompleteAction",
    "RequestExit",
    "RevealTask",
    "SkipTask",
    "UIAction",
    "UIEvent",
    "Validate",
    # Event Bus
    "EventBus",
    "EventHandler",
    "EventType",
    "GameEvent",
]
