"""Tests for the restore state machine."""

from __future__ import annotations

import pytest

from trackmyexts.snapshot.state import (
    TERMINAL_STATES,
    TRANSITIONS,
    InvalidRestoreTransition,
    RestoreState,
    RestoreStateMachine,
)


class TestRestoreStateMachine:
    """Tests for RestoreStateMachine."""

    def test_starts_idle(self) -> None:
        machine = RestoreStateMachine()
        assert machine.state is RestoreState.IDLE
        assert machine.history == []

    def test_happy_path(self) -> None:
        machine = RestoreStateMachine()
        for state in (
            RestoreState.HISTORY_LOADED,
            RestoreState.REVISION_SELECTED,
            RestoreState.DIFF_COMPUTED,
            RestoreState.CONFIRMED,
            RestoreState.APPLYING,
            RestoreState.IDLE,
        ):
            machine.transition(state)
        assert machine.state is RestoreState.IDLE
        assert len(machine.history) == 6

    def test_only_applying_is_applying(self) -> None:
        machine = RestoreStateMachine()
        for state in (
            RestoreState.HISTORY_LOADED,
            RestoreState.REVISION_SELECTED,
            RestoreState.DIFF_COMPUTED,
            RestoreState.CONFIRMED,
        ):
            machine.transition(state)
            assert machine.is_applying is False
        machine.transition(RestoreState.APPLYING)
        assert machine.is_applying is True

    def test_invalid_transition(self) -> None:
        machine = RestoreStateMachine()
        with pytest.raises(InvalidRestoreTransition, match="IDLE → APPLYING"):
            machine.transition(RestoreState.APPLYING)
        assert machine.state is RestoreState.IDLE

    def test_invalid_transition_is_value_error(self) -> None:
        assert issubclass(InvalidRestoreTransition, ValueError)

    def test_cannot_apply_without_confirmation(self) -> None:
        machine = RestoreStateMachine()
        machine.transition(RestoreState.REVISION_SELECTED)
        machine.transition(RestoreState.DIFF_COMPUTED)
        assert machine.can_transition(RestoreState.APPLYING) is False

    def test_metadata_recorded(self) -> None:
        machine = RestoreStateMachine()
        machine.transition(RestoreState.HISTORY_LOADED, count=3)
        event = machine.history[0]
        assert event.from_state is RestoreState.IDLE
        assert event.to_state is RestoreState.HISTORY_LOADED
        assert event.metadata == {"count": 3}

    def test_history_is_copy(self) -> None:
        machine = RestoreStateMachine()
        machine.transition(RestoreState.HISTORY_LOADED)
        machine.history.clear()
        assert len(machine.history) == 1

    def test_fail_from_pre_apply_states(self) -> None:
        for path in (
            [],
            [RestoreState.HISTORY_LOADED],
            [RestoreState.HISTORY_LOADED, RestoreState.REVISION_SELECTED],
            [RestoreState.REVISION_SELECTED, RestoreState.DIFF_COMPUTED],
        ):
            machine = RestoreStateMachine()
            for state in path:
                machine.transition(state)
            machine.fail("boom")
            assert machine.state is RestoreState.FAILED
            assert machine.history[-1].metadata == {"error": "boom"}

    def test_cannot_fail_while_applying(self) -> None:
        machine = RestoreStateMachine()
        for state in (
            RestoreState.REVISION_SELECTED,
            RestoreState.DIFF_COMPUTED,
            RestoreState.CONFIRMED,
            RestoreState.APPLYING,
        ):
            machine.transition(state)
        with pytest.raises(InvalidRestoreTransition):
            machine.fail("late")

    @pytest.mark.parametrize("terminal", sorted(TERMINAL_STATES, key=lambda s: s.name))
    def test_terminal_states_reset_to_idle(self, terminal: RestoreState) -> None:
        assert TRANSITIONS[terminal] == [RestoreState.IDLE]

    def test_reset(self) -> None:
        machine = RestoreStateMachine()
        machine.transition(RestoreState.HISTORY_LOADED)
        machine.transition(RestoreState.NO_HISTORY)
        machine.reset()
        assert machine.state is RestoreState.IDLE

    def test_reset_when_idle_is_noop(self) -> None:
        machine = RestoreStateMachine()
        machine.reset()
        assert machine.history == []
