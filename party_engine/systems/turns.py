"""
Turn state machines.

Truth or Dare runs one turn through:
    INIT → SELECT_VICTIM → CHOOSE_TYPE → SHOW_TASK → ACTION_IN_PROGRESS
         → VALIDATION → (PUNISHMENT) → NEXT_TURN → SELECT_VICTIM ...

EXIT is reachable from every non-terminal state and has no way out.

The machine only enforces legality and records history. What happens on
entering a state (picking a victim, fetching a prompt, scoring) is the
SessionController's job.

Never Have I Ever and Would You Rather use the same machine shape with
their own tables.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, ClassVar, Generic, TypeVar

from .errors import IllegalTransition

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=Enum)

TransitionListener = Callable[[Enum, Enum], None]


class StateMachine(Generic[S]):
    """
    Table-driven finite-state machine.

    Subclasses set TRANSITIONS (state -> allowed targets) and INITIAL.
    A state with no allowed targets is terminal.
    """

    TRANSITIONS: ClassVar[dict]
    INITIAL: ClassVar[Enum]

    def __init__(self, on_transition: TransitionListener | None = None):
        self._current: S = self.INITIAL
        self._previous: S | None = None
        self._history: list[S] = []
        self._on_transition = on_transition

    @property
    def current_state(self) -> S:
        return self._current

    @property
    def previous_state(self) -> S | None:
        return self._previous

    @property
    def transition_history(self) -> list[S]:
        """States left so far, oldest first. Diagnostics only."""
        return list(self._history)

    @property
    def is_terminal(self) -> bool:
        return not self.TRANSITIONS[self._current]

    def allowed_targets(self) -> frozenset[S]:
        return self.TRANSITIONS[self._current]

    def can_transition(self, to: S) -> bool:
        return to in self.TRANSITIONS[self._current]

    def require(self, to: S) -> None:
        """Raise IllegalTransition unless `to` is legal right now."""
        if not self.can_transition(to):
            raise IllegalTransition(self._current, to)

    def transition(self, to: S) -> S:
        """
        Move to `to`.

        Raises:
            IllegalTransition: `to` is not allowed from the current state.
                The machine is left untouched.
        """
        self.require(to)

        from_state = self._current
        self._history.append(from_state)
        self._previous = from_state
        self._current = to
        logger.debug("%s: %s -> %s", type(self).__name__, from_state.value, to.value)

        if self._on_transition is not None:
            self._on_transition(from_state, to)
        return to

    def reset(self) -> None:
        """Back to INITIAL with an empty history."""
        self._current = self.INITIAL
        self._previous = None
        self._history = []


# ─── Truth or Dare ───────────────────────────────────────────────

class TurnState(str, Enum):
    """Truth-or-Dare turn states."""
    INIT = "init"
    SELECT_VICTIM = "select_victim"            # Picking who is on trial
    CHOOSE_TYPE = "choose_type"                # Victim picks truth or dare
    SHOW_TASK = "show_task"                    # Prompt on screen, not started
    ACTION_IN_PROGRESS = "action_in_progress"  # Victim is doing it
    VALIDATION = "validation"                  # Group judges the attempt
    PUNISHMENT = "punishment"                  # Failed or refused
    NEXT_TURN = "next_turn"                    # Routing only
    EXIT = "exit"


TURN_TRANSITIONS: dict[TurnState, frozenset[TurnState]] = {
    TurnState.INIT: frozenset({TurnState.SELECT_VICTIM}),
    TurnState.SELECT_VICTIM: frozenset({TurnState.CHOOSE_TYPE, TurnState.EXIT}),
    TurnState.CHOOSE_TYPE: frozenset({TurnState.SHOW_TASK, TurnState.EXIT}),
    TurnState.SHOW_TASK: frozenset({TurnState.ACTION_IN_PROGRESS, TurnState.EXIT}),
    TurnState.ACTION_IN_PROGRESS: frozenset({
        TurnState.VALIDATION, TurnState.PUNISHMENT, TurnState.EXIT,
    }),
    TurnState.VALIDATION: frozenset({
        TurnState.NEXT_TURN, TurnState.PUNISHMENT, TurnState.EXIT,
    }),
    TurnState.PUNISHMENT: frozenset({TurnState.NEXT_TURN, TurnState.EXIT}),
    TurnState.NEXT_TURN: frozenset({TurnState.SELECT_VICTIM, TurnState.EXIT}),
    TurnState.EXIT: frozenset(),
}


class TurnStateMachine(StateMachine[TurnState]):
    """The Truth-or-Dare machine."""
    TRANSITIONS = TURN_TRANSITIONS
    INITIAL = TurnState.INIT


# ─── Never Have I Ever ───────────────────────────────────────────

class NeverHaveIEverState(str, Enum):
    INIT = "init"
    SHOW_STATEMENT = "show_statement"
    PLAYER_REACTION = "player_reaction"
    STORY_TIME = "story_time"
    PENALTY = "penalty"
    NEXT_ROUND = "next_round"
    EXIT = "exit"


NEVER_HAVE_I_EVER_TRANSITIONS: dict[NeverHaveIEverState, frozenset[NeverHaveIEverState]] = {
    NeverHaveIEverState.INIT: frozenset({NeverHaveIEverState.SHOW_STATEMENT}),
    NeverHaveIEverState.SHOW_STATEMENT: frozenset({
        NeverHaveIEverState.PLAYER_REACTION, NeverHaveIEverState.EXIT,
    }),
    NeverHaveIEverState.PLAYER_REACTION: frozenset({
        NeverHaveIEverState.STORY_TIME, NeverHaveIEverState.PENALTY, NeverHaveIEverState.EXIT,
    }),
    NeverHaveIEverState.STORY_TIME: frozenset({
        NeverHaveIEverState.NEXT_ROUND, NeverHaveIEverState.EXIT,
    }),
    NeverHaveIEverState.PENALTY: frozenset({
        NeverHaveIEverState.NEXT_ROUND, NeverHaveIEverState.EXIT,
    }),
    NeverHaveIEverState.NEXT_ROUND: frozenset({
        NeverHaveIEverState.SHOW_STATEMENT, NeverHaveIEverState.EXIT,
    }),
    NeverHaveIEverState.EXIT: frozenset(),
}


class NeverHaveIEverMachine(StateMachine[NeverHaveIEverState]):
    TRANSITIONS = NEVER_HAVE_I_EVER_TRANSITIONS
    INITIAL = NeverHaveIEverState.INIT


# ─── Would You Rather ────────────────────────────────────────────

class WouldYouRatherState(str, Enum):
    INIT = "init"
    SHOW_DILEMMA = "show_dilemma"
    COUNTDOWN = "countdown"
    VOTING = "voting"
    REVEAL_RESULTS = "reveal_results"
    PENALTY = "penalty"
    DEFENSE = "defense"
    NEXT_ROUND = "next_round"
    EXIT = "exit"


WOULD_YOU_RATHER_TRANSITIONS: dict[WouldYouRatherState, frozenset[WouldYouRatherState]] = {
    WouldYouRatherState.INIT: frozenset({WouldYouRatherState.SHOW_DILEMMA}),
    WouldYouRatherState.SHOW_DILEMMA: frozenset({
        WouldYouRatherState.COUNTDOWN, WouldYouRatherState.EXIT,
    }),
    WouldYouRatherState.COUNTDOWN: frozenset({
        WouldYouRatherState.VOTING, WouldYouRatherState.EXIT,
    }),
    WouldYouRatherState.VOTING: frozenset({
        WouldYouRatherState.REVEAL_RESULTS, WouldYouRatherState.EXIT,
    }),
    WouldYouRatherState.REVEAL_RESULTS: frozenset({
        WouldYouRatherState.PENALTY,
        WouldYouRatherState.DEFENSE,
        WouldYouRatherState.NEXT_ROUND,
        WouldYouRatherState.EXIT,
    }),
    WouldYouRatherState.PENALTY: frozenset({
        WouldYouRatherState.DEFENSE, WouldYouRatherState.NEXT_ROUND, WouldYouRatherState.EXIT,
    }),
    WouldYouRatherState.DEFENSE: frozenset({
        WouldYouRatherState.NEXT_ROUND, WouldYouRatherState.EXIT,
    }),
    WouldYouRatherState.NEXT_ROUND: frozenset({
        WouldYouRatherState.SHOW_DILEMMA, WouldYouRatherState.EXIT,
    }),
    WouldYouRatherState.EXIT: frozenset(),
}


class WouldYouRatherMachine(StateMachine[WouldYouRatherState]):
    TRANSITIONS = WOULD_YOU_RATHER_TRANSITIONS
    INITIAL = WouldYouRatherState.INIT
