"""devnetup data models — all Pydantic v2, all frozen (immutable)."""

from devnetup.models.invocation import BuildArtifact, CommandResult, SupervisorInvocation
from devnetup.models.network import (
    DEFAULT_POSTGRES_URL,
    DEVNET_ALLOCATION_ADDRESS,
    GenerationParams,
    IndexerPatch,
    NetworkState,
)
from devnetup.models.phases import VALID_TRANSITIONS, PhaseTransition, WorkflowState
from devnetup.models.report import BootstrapReport

__all__ = [
    # invocation
    "BuildArtifact",
    "CommandResult",
    "SupervisorInvocation",
    # network
    "DEFAULT_POSTGRES_URL",
    "DEVNET_ALLOCATION_ADDRESS",
    "GenerationParams",
    "IndexerPatch",
    "NetworkState",
    # phases
    "VALID_TRANSITIONS",
    "PhaseTransition",
    "WorkflowState",
    # report
    "BootstrapReport",
]
