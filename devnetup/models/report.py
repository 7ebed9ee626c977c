"""Run report returned by the orchestrator."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from devnetup.models.phases import PhaseTransition, WorkflowState


class BootstrapReport(BaseModel):
    """Summary of one bootstrap invocation.

    ``exit_code`` is the supervisor's exit code, passed through unchanged.
    """

    model_config = ConfigDict(frozen=True)

    exit_code: int
    final_state: WorkflowState
    generated: bool = False
    patched: bool = False
    transitions: list[PhaseTransition] = []
