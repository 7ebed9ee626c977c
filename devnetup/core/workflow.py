"""Deterministic bootstrap state machine.

Enforces:
- Valid state transitions only (VALID_TRANSITIONS table)
- One-way progress: no rollback, TERMINATED and FAILED are terminal
- Every transition logged and kept in ``history`` for the run report
"""

from __future__ import annotations

import logging

from devnetup.models.phases import VALID_TRANSITIONS, PhaseTransition, WorkflowState

logger = logging.getLogger(__name__)


class InvalidTransitionError(RuntimeError):
    """Raised when a requested state transition is not valid."""


class WorkflowMachine:
    """Tracks one bootstrap invocation through its states."""

    def __init__(self) -> None:
        self._state = WorkflowState.INIT
        self._history: list[PhaseTransition] = []

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def history(self) -> list[PhaseTransition]:
        """A snapshot of all transitions so far, oldest first."""
        return list(self._history)

    @property
    def is_terminal(self) -> bool:
        return not VALID_TRANSITIONS[self._state]

    def transition(self, target: WorkflowState, detail: str = "") -> PhaseTransition:
        """Move to *target*, raising InvalidTransitionError if not allowed."""
        allowed = VALID_TRANSITIONS.get(self._state, set())
        if target not in allowed:
            raise InvalidTransitionError(
                f"Cannot transition from {self._state.value} to {target.value}. "
                f"Allowed: {sorted(s.value for s in allowed)}"
            )

        record = PhaseTransition(
            from_state=self._state, to_state=target, detail=detail
        )
        self._history.append(record)
        logger.debug("%s -> %s %s", self._state.value, target.value, detail)
        self._state = target
        return record

    def fail(self, detail: str = "") -> PhaseTransition | None:
        """Move to FAILED if that is still possible; no-op otherwise."""
        if WorkflowState.FAILED in VALID_TRANSITIONS[self._state]:
            return self.transition(WorkflowState.FAILED, detail)
        return None
