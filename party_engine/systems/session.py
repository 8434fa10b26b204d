"""
Session controller for Truth or Dare.

Owns one running game: the roster, the score ledger, the content source,
the turn machine and the event bus. The UI shell talks to it through two
doors only:

    controller.dispatch(ChooseType(prompt_type=PromptType.DARE))  # input
    controller.bus.on(EventType.STATE_CHANGED, handler)             # output

Usage:
    controller = SessionController()
    controller.start(SessionConfig.create(["Alice", "Bob"], rounds=3))
    # state is now CHOOSE_TYPE with a victim picked
    controller.dispatch(ChooseType(prompt_type=PromptType.TRUTH))
    controller.dispatch(RevealTask())
    ...

Design principles:
- Validate, then commit. A rejected start() or dispatch() changes nothing.
- Each event is legal from exactly one state; anything else raises
  IllegalTransition and is never corrected silently.
- SELECT_VICTIM and NEXT_TURN are routing states: the controller passes
  through them on its own within the same call.
- dispatch() is not re-entrant. Handlers must not dispatch.
"""

from __future__ import annotations

import logging
import random
import time
from contextlib import contextmanager
from typing import TYPE_CHECKING, Callable, Iterator

from ..config import EngineConfig, merge_config
from ..state.actions import (
    AcknowledgePunishment,
    ChooseType,
    CompleteAction,
    RequestExit,
    RevealTask,
    SkipTask,
    UIEvent,
    Validate,
)
from ..state.event_bus import EventBus, EventType, GameEvent
from ..state.schema import GameSession, Player, Prompt, SessionConfig
from .content import ContentProvider, ContentSource
from .errors import (
    AtCapacity,
    BelowMinimum,
    IllegalTransition,
    ReentrantDispatch,
    SessionNotStarted,
)
from .players import PlayerRegistry
from .scoring import ScoreLedger
from .timers import DwellGate
from .turns import TurnState, TurnStateMachine

if TYPE_CHECKING:
    from ..interface.view import GameView

logger = logging.getLogger(__name__)


class SessionController:
    """
    Composition root for one game.

    Attributes:
        config: Engine tunables (dwell time, rewards, penalties)
    """

    def __init__(
        self,
        content: ContentSource | None = None,
        config: EngineConfig | dict | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = merge_config(config)
        self._rng = rng or random.Random()
        self._content = content if content is not None else self._load_content()
        self._bus = EventBus()
        self._machine = TurnStateMachine(on_transition=self._on_transition)
        self._dwell = DwellGate(self.config["dwell_seconds"], clock=clock)

        self._registry: PlayerRegistry | None = None
        self._ledger: ScoreLedger | None = None
        self._session: GameSession | None = None
        self._dispatching = False

        self._handlers: dict[type, Callable] = {
            ChooseType: self._choose_type,
            RevealTask: self._reveal_task,
            CompleteAction: self._complete_action,
            SkipTask: self._skip_task,
            Validate: self._validate,
            AcknowledgePunishment: self._acknowledge_punishment,
            RequestExit: self._request_exit,
        }

    def _load_content(self) -> ContentProvider:
        path = self.config.get("content_path")
        if path:
            return ContentProvider.from_yaml(path, rng=self._rng)
        return ContentProvider.from_package(rng=self._rng)

    # ─── Read access ─────────────────────────────────────────────

    @property
    def state(self) -> TurnState:
        return self._machine.current_state

    @property
    def previous_state(self) -> TurnState | None:
        return self._machine.previous_state

    @property
    def history(self) -> list[TurnState]:
        """States visited so far, including the current one."""
        return self._machine.transition_history + [self._machine.current_state]

    @property
    def session(self) -> GameSession | None:
        return self._session

    @property
    def players(self) -> list[Player]:
        return self._registry.players if self._registry else []

    @property
    def current_player(self) -> Player | None:
        return self._session.current_player if self._session else None

    @property
    def current_prompt(self) -> Prompt | None:
        return self._session.current_prompt if self._session else None

    @property
    def bus(self) -> EventBus:
        return self._bus

    @property
    def dwell_gate(self) -> DwellGate:
        return self._dwell

    @property
    def is_running(self) -> bool:
        return self._session is not None and not self._machine.is_terminal

    def standings(self) -> list[Player]:
        return self._require_ledger("rank players").standings()

    def winner(self) -> Player:
        return self._require_ledger("pick a winner").winner()

    def can_complete(self) -> bool:
        """Whether the UI should enable the "completed" button yet."""
        return self.state == TurnState.ACTION_IN_PROGRESS and self._dwell.is_open()

    # ─── Views ───────────────────────────────────────────────────

    def attach_view(self, view: "GameView") -> None:
        """Subscribe a view to every event this session emits."""
        self._bus.on_all(view.on_event)

    def detach_view(self, view: "GameView") -> None:
        self._bus.off_all(view.on_event)

    # ─── Lifecycle ───────────────────────────────────────────────

    def start(self, config: SessionConfig) -> GameSession:
        """
        Validate the roster, seed a fresh session, and play up to CHOOSE_TYPE.

        A game still in progress is ended first (SESSION_ENDED with reason
        "restart"), but only once the new roster has passed validation.

        Raises:
            BelowMinimum / AtCapacity: player count outside the mode's limits
            BlankName / DuplicateName: a bad name in the roster
        """
        with self._exclusive("start"):
            mode = config.mode
            min_players = self.config.get("min_players")
            if min_players is None:
                min_players = mode.min_players
            max_players = self.config.get("max_players")
            if max_players is None:
                max_players = mode.max_players
            # A game always needs someone to pick
            min_players = max(min_players, 1)

            count = len(config.players)
            if count < min_players:
                raise BelowMinimum(min_players)
            if max_players is not None and count > max_players:
                raise AtCapacity(max_players)

            # Build everything off to the side; commit only if every name passes
            registry = PlayerRegistry(
                min_players=min_players,
                max_players=max_players,
                rng=self._rng,
            )
            for spec in config.players:
                registry.add(spec.name)

            if self._can_exit():
                self._end(reason="restart")

            self._dwell.cancel()
            self._registry = registry
            self._ledger = ScoreLedger(registry)
            self._session = GameSession(
                mode=mode,
                end_condition=config.end_condition,
                players=registry.players,
                reward=config.reward,
            )
            self._machine.reset()

            logger.info(
                "Session %s started: mode=%s players=%s end=%s",
                self._session.id,
                mode.id,
                [p.name for p in registry],
                config.end_condition.type,
            )
            self._emit(
                EventType.SESSION_STARTED,
                mode=mode.id,
                players=[p.id for p in registry],
                end_condition=config.end_condition.model_dump(),
            )
            self._begin_turn()
            return self._session

    def reset(self) -> None:
        """
        Same players, clean slate: scores zeroed, prompt history cleared,
        machine back to INIT. Call begin() to play again.
        """
        session = self._require_session("reset")
        with self._exclusive("reset"):
            self._dwell.cancel()
            self._registry.reset_scores()
            session.reset()
            self._machine.reset()
            logger.info("Session %s reset", session.id)
            self._emit(EventType.SESSION_RESET)

    def begin(self) -> TurnState:
        """Drive a freshly reset machine from INIT to the first CHOOSE_TYPE."""
        self._require_session("begin")
        with self._exclusive("begin"):
            self._begin_turn()
        return self.state

    def restart(self) -> TurnState:
        """reset() followed by begin()."""
        self.reset()
        return self.begin()

    def exit(self) -> None:
        """Abandon the game. A no-op unless the machine can move to EXIT."""
        if not self._can_exit():
            return
        self.dispatch(RequestExit())

    def close(self) -> None:
        """Tear down: exit if needed, drop pending timers and listeners."""
        try:
            self.exit()
        finally:
            self._dwell.cancel()
            self._bus.clear()

    # ─── Input ───────────────────────────────────────────────────

    def dispatch(self, event: UIEvent) -> TurnState:
        """
        Apply one UI event and return the state the machine settles in.

        Raises:
            SessionNotStarted: no start() yet
            IllegalTransition: event not valid in the current state
            ReentrantDispatch: called from inside an event handler
        """
        self._require_session(event.name)
        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError(f"Unsupported event: {type(event).__name__}")

        with self._exclusive(event.name):
            try:
                handler(event)
            except IllegalTransition as e:
                logger.warning("Rejected %s: %s", event.name, e)
                raise
        return self.state

    # ─── Event handlers ──────────────────────────────────────────

    def _choose_type(self, event: ChooseType) -> None:
        self._expect(TurnState.CHOOSE_TYPE, TurnState.SHOW_TASK)
        session = self._session

        mode = session.mode.id
        excluded = session.excluded_for(mode, event.prompt_type)
        prompt = self._content.get_random(mode, event.prompt_type, excluded)
        # Mark as shown before anything is displayed
        excluded.add(prompt.id)

        session.current_type = event.prompt_type
        session.current_prompt = prompt
        logger.debug("Prompt %s (%s/%s)", prompt.id, mode, event.prompt_type.value)

        self._machine.transition(TurnState.SHOW_TASK)
        self._emit(
            EventType.PROMPT_SHOWN,
            prompt_id=prompt.id,
            prompt_type=prompt.type.value,
            text=prompt.text,
            player=session.current_player.id,
        )

    def _reveal_task(self, event: RevealTask) -> None:
        self._expect(TurnState.SHOW_TASK, TurnState.ACTION_IN_PROGRESS)
        self._dwell.arm()
        self._machine.transition(TurnState.ACTION_IN_PROGRESS)

    def _complete_action(self, event: CompleteAction) -> None:
        self._expect(TurnState.ACTION_IN_PROGRESS, TurnState.VALIDATION)
        if not self._dwell.is_open():
            logger.debug("Completed with %.1fs of dwell left", self._dwell.remaining())
        self._dwell.cancel()
        self._machine.transition(TurnState.VALIDATION)

    def _skip_task(self, event: SkipTask) -> None:
        self._expect(TurnState.ACTION_IN_PROGRESS, TurnState.PUNISHMENT)
        self._dwell.cancel()
        self._award(self.config["skip_penalty"], reason="skip")
        self._machine.transition(TurnState.PUNISHMENT)

    def _validate(self, event: Validate) -> None:
        if event.completed:
            self._expect(TurnState.VALIDATION, TurnState.NEXT_TURN)
            self._award(self.config["complete_reward"], reason="completed")
            self._machine.transition(TurnState.NEXT_TURN)
            self._route_next_turn()
        else:
            self._expect(TurnState.VALIDATION, TurnState.PUNISHMENT)
            self._award(self.config["punishment_penalty"], reason="failed")
            self._machine.transition(TurnState.PUNISHMENT)

    def _acknowledge_punishment(self, event: AcknowledgePunishment) -> None:
        self._expect(TurnState.PUNISHMENT, TurnState.NEXT_TURN)
        self._machine.transition(TurnState.NEXT_TURN)
        self._route_next_turn()

    def _request_exit(self, event: RequestExit) -> None:
        self._machine.require(TurnState.EXIT)
        self._end(reason="exit")

    # ─── Routing ─────────────────────────────────────────────────

    def _begin_turn(self) -> None:
        """SELECT_VICTIM then CHOOSE_TYPE, picking the victim on the way in."""
        self._machine.require(TurnState.SELECT_VICTIM)
        session = self._session

        previous = session.current_player
        victim = self._registry.random_excluding(previous.id if previous else None)
        session.current_player = victim
        session.clear_turn()
        logger.info("Victim: %s", victim.name)

        self._machine.transition(TurnState.SELECT_VICTIM)
        self._machine.transition(TurnState.CHOOSE_TYPE)

    def _route_next_turn(self) -> None:
        """NEXT_TURN never waits: on to the next victim, or out."""
        session = self._session
        session.rounds_completed += 1
        session.clear_turn()

        if session.end_condition.is_met(session.rounds_completed):
            self._end(reason="rounds")
        else:
            self._begin_turn()

    def _end(self, reason: str) -> None:
        session = self._session
        self._dwell.cancel()
        self._machine.transition(TurnState.EXIT)

        winner = self._ledger.winner()
        logger.info(
            "Session %s ended (%s) after %d rounds, winner %s",
            session.id, reason, session.rounds_completed, winner.name,
        )
        self._emit(
            EventType.SESSION_ENDED,
            reason=reason,
            rounds=session.rounds_completed,
            winner=winner.id,
            standings=[(p.id, p.score) for p in self._ledger.standings()],
            reward=session.reward,
        )
        session.current_player = None
        session.clear_turn()

    # ─── Helpers ─────────────────────────────────────────────────

    def _expect(self, source: TurnState, target: TurnState) -> None:
        """The event is only valid in `source`, moving to `target`."""
        if self._machine.current_state != source:
            raise IllegalTransition(self._machine.current_state, target)
        self._machine.require(target)

    def _award(self, delta: int, reason: str) -> None:
        player = self._session.current_player
        if not delta or player is None:
            return
        total = self._ledger.award(player.id, delta)
        self._emit(
            EventType.SCORE_CHANGED,
            player=player.id,
            delta=delta,
            score=total,
            reason=reason,
        )

    def _on_transition(self, from_state: TurnState, to_state: TurnState) -> None:
        player = self._session.current_player if self._session else None
        self._emit(
            EventType.STATE_CHANGED,
            **{"from": from_state, "to": to_state, "player": player.id if player else None},
        )

    def _emit(self, event_type: EventType, **data) -> GameEvent:
        session_id = self._session.id if self._session else ""
        return self._bus.emit(event_type, session_id=session_id, **data)

    @contextmanager
    def _exclusive(self, attempted: str) -> Iterator[None]:
        if self._dispatching:
            raise ReentrantDispatch(attempted)
        self._dispatching = True
        try:
            yield
        finally:
            self._dispatching = False

    def _can_exit(self) -> bool:
        """A session exists and the machine may move to EXIT right now."""
        return self._session is not None and self._machine.can_transition(TurnState.EXIT)

    def _require_session(self, attempted: str) -> GameSession:
        if self._session is None:
            raise SessionNotStarted(attempted)
        return self._session

    def _require_ledger(self, attempted: str) -> ScoreLedger:
        if self._ledger is None:
            raise SessionNotStarted(attempted)
        return self._ledger
