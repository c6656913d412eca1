"""Restore session state machine.

IDLE → HISTORY_LOADED → REVISION_SELECTED → DIFF_COMPUTED → CONFIRMED → APPLYING → IDLE
                 ↓                ↓                ↓
            NO_HISTORY        CANCELLED      CANCELLED / NO_CHANGES

Any state before APPLYING may move to FAILED. Terminal states return to
IDLE through ``reset()``. Only APPLYING has the sync suppression flag
set; the machine itself is not persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any


class RestoreState(Enum):
    """Restore session states."""

    IDLE = auto()
    HISTORY_LOADED = auto()
    NO_HISTORY = auto()
    REVISION_SELECTED = auto()
    DIFF_COMPUTED = auto()
    NO_CHANGES = auto()
    CANCELLED = auto()
    CONFIRMED = auto()
    APPLYING = auto()
    FAILED = auto()


TRANSITIONS: dict[RestoreState, list[RestoreState]] = {
    RestoreState.IDLE: [RestoreState.HISTORY_LOADED, RestoreState.REVISION_SELECTED, RestoreState.FAILED],
    RestoreState.HISTORY_LOADED: [
        RestoreState.REVISION_SELECTED,
        RestoreState.NO_HISTORY,
        RestoreState.CANCELLED,
        RestoreState.FAILED,
    ],
    RestoreState.REVISION_SELECTED: [RestoreState.DIFF_COMPUTED, RestoreState.FAILED],
    RestoreState.DIFF_COMPUTED: [
        RestoreState.CONFIRMED,
        RestoreState.CANCELLED,
        RestoreState.NO_CHANGES,
        RestoreState.FAILED,
    ],
    RestoreState.CONFIRMED: [RestoreState.APPLYING],
    RestoreState.APPLYING: [RestoreState.IDLE],
    RestoreState.NO_HISTORY: [RestoreState.IDLE],
    RestoreState.NO_CHANGES: [RestoreState.IDLE],
    RestoreState.CANCELLED: [RestoreState.IDLE],
    RestoreState.FAILED: [RestoreState.IDLE],
}

TERMINAL_STATES = frozenset({
    RestoreState.NO_HISTORY,
    RestoreState.NO_CHANGES,
    RestoreState.CANCELLED,
    RestoreState.FAILED,
})


class InvalidRestoreTransition(ValueError):
    """Raised when a restore session moves to a state it cannot reach."""

    pass


@dataclass
class StateEvent:
    """Record of a state transition."""

    from_state: RestoreState
    to_state: RestoreState
    timestamp: datetime
    metadata: dict[str, Any] = field(default_factory=dict)


class RestoreStateMachine:
    """Tracks one restore invocation through its states."""

    def __init__(self) -> None:
        self._state = RestoreState.IDLE
        self._history: list[StateEvent] = []

    @property
    def state(self) -> RestoreState:
        """Get current state."""
        return self._state

    @property
    def history(self) -> list[StateEvent]:
        """Get a copy of the transition history."""
        return self._history.copy()

    @property
    def is_applying(self) -> bool:
        """True while install/uninstall requests are being issued."""
        return self._state is RestoreState.APPLYING

    def can_transition(self, to_state: RestoreState) -> bool:
        """Check if transition to target state is valid."""
        return to_state in TRANSITIONS.get(self._state, [])

    def transition(self, to_state: RestoreState, **metadata: Any) -> None:
        """Move to a new state.

        Raises:
            InvalidRestoreTransition: If the transition is not allowed.
        """
        if not self.can_transition(to_state):
            valid = [s.name for s in TRANSITIONS.get(self._state, [])]
            raise InvalidRestoreTransition(
                f"Invalid transition: {self._state.name} → {to_state.name}. "
                f"Valid transitions: {valid}"
            )

        self._history.append(
            StateEvent(
                from_state=self._state,
                to_state=to_state,
                timestamp=datetime.now(),
                metadata=metadata,
            )
        )
        self._state = to_state

    def fail(self, error: str) -> None:
        """Move to FAILED from any pre-apply state."""
        self.transition(RestoreState.FAILED, error=error)

    def reset(self) -> None:
        """Return to IDLE from a terminal state or after applying."""
        if self._state is not RestoreState.IDLE:
            self.transition(RestoreState.IDLE)
