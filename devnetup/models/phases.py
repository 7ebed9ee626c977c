"""Workflow state machine models — one-way bootstrap transitions."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class WorkflowState(str, Enum):
    """Strict state model for a single bootstrap invocation."""

    INIT = "init"
    BUILT = "built"
    GENERATED = "generated"
    STATE_REUSED = "state_reused"
    PATCHED = "patched"
    LAUNCHED = "launched"
    TERMINATED = "terminated"
    FAILED = "failed"


# Valid state transitions — enforced structurally by WorkflowMachine.
# There is no rollback path; TERMINATED and FAILED are terminal.
VALID_TRANSITIONS: dict[WorkflowState, set[WorkflowState]] = {
    WorkflowState.INIT: {WorkflowState.BUILT, WorkflowState.FAILED},
    WorkflowState.BUILT: {
        WorkflowState.GENERATED,
        WorkflowState.STATE_REUSED,
        WorkflowState.FAILED,
    },
    WorkflowState.GENERATED: {WorkflowState.PATCHED, WorkflowState.FAILED},
    WorkflowState.PATCHED: {WorkflowState.LAUNCHED, WorkflowState.FAILED},
    WorkflowState.STATE_REUSED: {WorkflowState.LAUNCHED, WorkflowState.FAILED},
    WorkflowState.LAUNCHED: {WorkflowState.TERMINATED},
    WorkflowState.TERMINATED: set(),  # terminal
    WorkflowState.FAILED: set(),  # terminal
}


class PhaseTransition(BaseModel):
    """Records a single workflow transition for the run report."""

    model_config = ConfigDict(frozen=True)

    from_state: WorkflowState
    to_state: WorkflowState
    timestamp_utc: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    detail: str = ""
