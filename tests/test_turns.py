"""Tests for the table-driven turn state machines."""

import itertools

import pytest

from party_engine.systems.errors import IllegalTransition
from party_engine.systems.turns import (
    NEVER_HAVE_I_EVER_TRANSITIONS,
    TURN_TRANSITIONS,
    WOULD_YOU_RATHER_TRANSITIONS,
    NeverHaveIEverMachine,
    NeverHaveIEverState,
    TurnState,
    TurnStateMachine,
    WouldYouRatherMachine,
    WouldYouRatherState,
)


EXPECTED = {
    TurnState.INIT: {TurnState.SELECT_VICTIM},
    TurnState.SELECT_VICTIM: {TurnState.CHOOSE_TYPE, TurnState.EXIT},
    TurnState.CHOOSE_TYPE: {TurnState.SHOW_TASK, TurnState.EXIT},
    TurnState.SHOW_TASK: {TurnState.ACTION_IN_PROGRESS, TurnState.EXIT},
    TurnState.ACTION_IN_PROGRESS: {TurnState.VALIDATION, TurnState.PUNISHMENT, TurnState.EXIT},
    TurnState.VALIDATION: {TurnState.NEXT_TURN, TurnState.PUNISHMENT, TurnState.EXIT},
    TurnState.PUNISHMENT: {TurnState.NEXT_TURN, TurnState.EXIT},
    TurnState.NEXT_TURN: {TurnState.SELECT_VICTIM, TurnState.EXIT},
    TurnState.EXIT: set(),
}

# Shortest legal route from INIT to each state
PATHS = {
    TurnState.INIT: [],
    TurnState.SELECT_VICTIM: [TurnState.SELECT_VICTIM],
    TurnState.CHOOSE_TYPE: [TurnState.SELECT_VICTIM, TurnState.CHOOSE_TYPE],
    TurnState.SHOW_TASK: [TurnState.SELECT_VICTIM, TurnState.CHOOSE_TYPE, TurnState.SHOW_TASK],
    TurnState.ACTION_IN_PROGRESS: [
        TurnState.SELECT_VICTIM, TurnState.CHOOSE_TYPE, TurnState.SHOW_TASK,
        TurnState.ACTION_IN_PROGRESS,
    ],
    TurnState.VALIDATION: [
        TurnState.SELECT_VICTIM, TurnState.CHOOSE_TYPE, TurnState.SHOW_TASK,
        TurnState.ACTION_IN_PROGRESS, TurnState.VALIDATION,
    ],
    TurnState.PUNISHMENT: [
        TurnState.SELECT_VICTIM, TurnState.CHOOSE_TYPE, TurnState.SHOW_TASK,
        TurnState.ACTION_IN_PROGRESS, TurnState.PUNISHMENT,
    ],
    TurnState.NEXT_TURN: [
        TurnState.SELECT_VICTIM, TurnState.CHOOSE_TYPE, TurnState.SHOW_TASK,
        TurnState.ACTION_IN_PROGRESS, TurnState.VALIDATION, TurnState.NEXT_TURN,
    ],
    TurnState.EXIT: [TurnState.SELECT_VICTIM, TurnState.EXIT],
}


def machine_at(state: TurnState) -> TurnStateMachine:
    machine = TurnStateMachine()
    for step in PATHS[state]:
        machine.transition(step)
    return machine


class TestTransitionTable:
    """Test the Truth-or-Dare legality table."""

    def test_table_matches_expected(self):
        """Every state has exactly the documented targets."""
        assert {s: set(t) for s, t in TURN_TRANSITIONS.items()} == EXPECTED

    def test_every_state_has_an_entry(self):
        """No state is missing from the table."""
        assert set(TURN_TRANSITIONS) == set(TurnState)

    @pytest.mark.parametrize(
        "source,target", list(itertools.product(list(TurnState), repeat=2))
    )
    def test_all_pairs(self, source, target):
        """Legal pairs move the machine; illegal pairs raise and change nothing."""
        machine = machine_at(source)
        history_before = machine.transition_history

        if target in EXPECTED[source]:
            machine.transition(target)
            assert machine.current_state == target
            assert machine.previous_state == source
        else:
            with pytest.raises(IllegalTransition) as exc:
                machine.transition(target)
            assert exc.value.from_state == source
            assert exc.value.to_state == target
            assert machine.current_state == source
            assert machine.transition_history == history_before

    def test_exit_reachable_from_every_non_terminal_state(self):
        """EXIT is allowed everywhere except INIT and EXIT itself."""
        for state in TurnState:
            if state in (TurnState.INIT, TurnState.EXIT):
                continue
            assert TurnState.EXIT in TurnStateMachine.TRANSITIONS[state]


class TestMachineState:
    """Test history, previous state and reset."""

    def test_starts_at_init(self):
        """Fresh machine is at INIT with no previous state."""
        machine = TurnStateMachine()
        assert machine.current_state == TurnState.INIT
        assert machine.previous_state is None
        assert machine.transition_history == []

    def test_history_records_states_left(self):
        """History lists every state left, oldest first."""
        machine = machine_at(TurnState.SHOW_TASK)
        assert machine.transition_history == [
            TurnState.INIT, TurnState.SELECT_VICTIM, TurnState.CHOOSE_TYPE,
        ]

    def test_history_is_a_copy(self):
        """Mutating the returned history does not touch the machine."""
        machine = machine_at(TurnState.CHOOSE_TYPE)
        machine.transition_history.append(TurnState.EXIT)
        assert TurnState.EXIT not in machine.transition_history

    def test_exit_is_terminal(self):
        """Nothing leaves EXIT."""
        machine = machine_at(TurnState.EXIT)
        assert machine.is_terminal
        assert machine.allowed_targets() == frozenset()
        for state in TurnState:
            assert not machine.can_transition(state)

    def test_reset_clears_everything(self):
        """reset() goes back to INIT with an empty history."""
        machine = machine_at(TurnState.PUNISHMENT)
        machine.reset()
        assert machine.current_state == TurnState.INIT
        assert machine.previous_state is None
        assert machine.transition_history == []

    def test_listener_called_after_move(self):
        """The listener sees (from, to) once the machine has moved."""
        seen = []
        machine = TurnStateMachine(
            on_transition=lambda a, b: seen.append((a, b, machine.current_state))
        )
        machine.transition(TurnState.SELECT_VICTIM)
        assert seen == [(TurnState.INIT, TurnState.SELECT_VICTIM, TurnState.SELECT_VICTIM)]

    def test_listener_not_called_on_rejection(self):
        """An illegal move reports nothing."""
        seen = []
        machine = TurnStateMachine(on_transition=lambda a, b: seen.append(b))
        with pytest.raises(IllegalTransition):
            machine.transition(TurnState.VALIDATION)
        assert seen == []

    def test_error_message(self):
        """The message names both states."""
        machine = TurnStateMachine()
        with pytest.raises(IllegalTransition, match="from init to validation"):
            machine.transition(TurnState.VALIDATION)


class TestSiblingMachines:
    """Test Never Have I Ever and Would You Rather tables."""

    def test_never_have_i_ever_round(self):
        """A full NHIE round loops back to the next statement."""
        machine = NeverHaveIEverMachine()
        for state in (
            NeverHaveIEverState.SHOW_STATEMENT,
            NeverHaveIEverState.PLAYER_REACTION,
            NeverHaveIEverState.PENALTY,
            NeverHaveIEverState.NEXT_ROUND,
            NeverHaveIEverState.SHOW_STATEMENT,
        ):
            machine.transition(state)
        assert machine.current_state == NeverHaveIEverState.SHOW_STATEMENT

    def test_never_have_i_ever_rejects_skip(self):
        """Cannot jump from statement straight to story time."""
        machine = NeverHaveIEverMachine()
        machine.transition(NeverHaveIEverState.SHOW_STATEMENT)
        with pytest.raises(IllegalTransition):
            machine.transition(NeverHaveIEverState.STORY_TIME)

    def test_would_you_rather_round(self):
        """A full WYR round with a defense."""
        machine = WouldYouRatherMachine()
        for state in (
            WouldYouRatherState.SHOW_DILEMMA,
            WouldYouRatherState.COUNTDOWN,
            WouldYouRatherState.VOTING,
            WouldYouRatherState.REVEAL_RESULTS,
            WouldYouRatherState.PENALTY,
            WouldYouRatherState.DEFENSE,
            WouldYouRatherState.NEXT_ROUND,
        ):
            machine.transition(state)
        assert machine.previous_state == WouldYouRatherState.DEFENSE

    def test_sibling_tables_are_complete_and_terminal(self):
        """Every state has an entry and only EXIT is terminal."""
        for table, states in (
            (NEVER_HAVE_I_EVER_TRANSITIONS, NeverHaveIEverState),
            (WOULD_YOU_RATHER_TRANSITIONS, WouldYouRatherState),
        ):
            assert set(table) == set(states)
            terminal = [s for s, targets in table.items() if not targets]
            assert [s.value for s in terminal] == ["exit"]
