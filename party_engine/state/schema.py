"""
Pydantic models for party-engine game state.

Players, prompts, modes and session configuration. Everything here is
plain data; the systems package owns all mutation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Enums
# -----------------------------------------------------------------------------

class PromptType(str, Enum):
    TRUTH = "truth"
    DARE = "dare"


class TruthOrDareMode(str, Enum):
    """Content buckets for Truth or Dare, mildest first."""
    ORIGINAL = "original"
    FRIENDS = "friends"
    COUPLE = "couple"
    PARTY = "party"
    DRUNK = "drunk"
    DIRTY = "dirty"
    EXTREME = "extreme"


DEFAULT_MODE = TruthOrDareMode.ORIGINAL

# Avatar palette, assigned by creation order and cycled
AVATAR_PALETTE: tuple[str, ...] = (
    "#FF6B6B", "#4ECDC4", "#45B7D1", "#96CEB4",
    "#FFEAA7", "#DDA0DD", "#98D8C8", "#F7DC6F",
    "#BB8FCE", "#85C1E9", "#F8B500", "#00CED1",
)


def generate_id() -> str:
    return str(uuid4())[:8]


# -----------------------------------------------------------------------------
# Core Models
# -----------------------------------------------------------------------------

class Player(BaseModel):
    """
    A participant in the session.

    `score` is only ever changed through ScoreLedger; `joined_order` is the
    creation index inside the registry and drives standings tie-breaks.
    """
    id: str
    name: str
    avatar_color: str
    score: int = 0
    joined_order: int = 0

    @property
    def initial(self) -> str:
        return self.name[:1].upper()


class Prompt(BaseModel):
    """A single truth question or dare. Immutable once loaded."""
    model_config = ConfigDict(frozen=True)

    id: str
    type: PromptType
    mode: str
    text: str
    intensity: int = 1  # Ordinal hint only (1 = mild, 5 = extreme)


class Mode(BaseModel):
    """A content bucket plus its display metadata and roster limits."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    accent_color: str
    warning: str | None = None
    min_players: int = Field(default=2, ge=1)
    max_players: int | None = Field(default=None, ge=1)  # None = unbounded

    @property
    def is_adult(self) -> bool:
        return self.warning is not None


MODE_CATALOG: dict[TruthOrDareMode, Mode] = {
    TruthOrDareMode.ORIGINAL: Mode(id="original", name="Original", accent_color="#3498DB"),
    TruthOrDareMode.FRIENDS: Mode(id="friends", name="Friends", accent_color="#9B59B6"),
    TruthOrDareMode.COUPLE: Mode(id="couple", name="Couple", accent_color="#FF1493"),
    TruthOrDareMode.PARTY: Mode(id="party", name="Party", accent_color="#F39C12"),
    TruthOrDareMode.DRUNK: Mode(
        id="drunk", name="Drunk", accent_color="#E67E22", warning="Adults only",
    ),
    TruthOrDareMode.DIRTY: Mode(
        id="dirty", name="Dirty", accent_color="#C0392B", warning="Adults only",
    ),
    TruthOrDareMode.EXTREME: Mode(
        id="extreme", name="Extreme", accent_color="#8B0000", warning="Adults only",
    ),
}


def resolve_mode_key(mode_id: str) -> TruthOrDareMode:
    """Map a raw mode key onto the closed enum, falling back to ORIGINAL."""
    try:
        return TruthOrDareMode(mode_id)
    except ValueError:
        logger.debug("Unknown mode %r, falling back to %s", mode_id, DEFAULT_MODE.value)
        return DEFAULT_MODE


def get_mode(mode_id: str) -> Mode:
    """Catalog lookup. Unknown keys resolve to the default mode."""
    return MODE_CATALOG[resolve_mode_key(mode_id)]


class EndCondition(BaseModel):
    """When a session ends on its own. `manual` sessions only end on exit."""
    type: Literal["round_count", "manual"] = "manual"
    value: int | None = Field(default=None, ge=1)

    @model_validator(mode="after")
    def _require_round_count(self) -> "EndCondition":
        if self.type == "round_count" and self.value is None:
            raise ValueError("round_count end condition needs a value")
        return self

    @classmethod
    def rounds(cls, count: int) -> "EndCondition":
        return cls(type="round_count", value=count)

    def is_met(self, rounds_completed: int) -> bool:
        if self.type == "round_count" and self.value is not None:
            return rounds_completed >= self.value
        return False


class PlayerSpec(BaseModel):
    """Setup-screen input for one player."""
    name: str


class SessionConfig(BaseModel):
    """Everything `SessionController.start` needs."""
    players: list[PlayerSpec]
    mode: Mode = Field(default_factory=lambda: MODE_CATALOG[DEFAULT_MODE])
    end_condition: EndCondition = Field(default_factory=EndCondition)
    reward: str | None = None  # Optional custom reward shown with the winner

    @classmethod
    def create(
        cls,
        names: list[str],
        mode: str = DEFAULT_MODE.value,
        rounds: int | None = None,
        reward: str | None = None,
    ) -> "SessionConfig":
        """Build a config from plain names and a mode key."""
        return cls(
            players=[PlayerSpec(name=n) for n in names],
            mode=get_mode(mode),
            end_condition=EndCondition.rounds(rounds) if rounds is not None else EndCondition(),
            reward=reward,
        )


# -----------------------------------------------------------------------------
# Session state
# -----------------------------------------------------------------------------

BucketKey = tuple[str, PromptType]


@dataclass
class GameSession:
    """
    Mutable state of one running game.

    Owned by SessionController; everything else gets read-only views.
    `players` is the registry's roster in join order; the Player objects
    are shared, so score changes show up here directly.
    """
    mode: Mode
    end_condition: EndCondition
    players: list[Player] = field(default_factory=list)
    reward: str | None = None
    id: str = field(default_factory=generate_id)
    current_player: Player | None = None
    current_type: PromptType | None = None
    current_prompt: Prompt | None = None
    excluded_prompt_ids: dict[BucketKey, set[str]] = field(default_factory=dict)
    rounds_completed: int = 0
    started_at: datetime = field(default_factory=datetime.now)

    def excluded_for(self, mode: str, prompt_type: PromptType) -> set[str]:
        """The exclusion set for one bucket, created on first use."""
        return self.excluded_prompt_ids.setdefault((mode, prompt_type), set())

    def clear_turn(self) -> None:
        self.current_type = None
        self.current_prompt = None

    def reset(self) -> None:
        """Back to a fresh game with the same roster and mode."""
        self.current_player = None
        self.clear_turn()
        self.excluded_prompt_ids = {}
        self.rounds_completed = 0
        self.started_at = datetime.now()
