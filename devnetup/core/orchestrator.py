"""Devnet orchestrator — the central coordinator for a bootstrap run.

The DevnetOrchestrator wires together the BuildGate, NetworkStateProbe,
NetworkBootstrapper, ConfigPatcher, SupervisorLauncher and
WorkflowMachine, and sequences them:

    build -> probe -> (generate -> patch, only when state is absent) -> launch

Phases run strictly one after another. Any BootstrapError moves the
workflow to FAILED and propagates unchanged; nothing is retried or
rolled back.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from devnetup.config import DevnetSettings
from devnetup.core.bootstrapper import NetworkBootstrapper, find_node_configs
from devnetup.core.build_gate import BuildGate
from devnetup.core.config_patcher import ConfigPatcher
from devnetup.core.errors import BootstrapError
from devnetup.core.runner import ProcessRunner, SubprocessRunner
from devnetup.core.state_probe import NetworkStateProbe
from devnetup.core.supervisor import SupervisorLauncher
from devnetup.core.workflow import WorkflowMachine
from devnetup.models.network import NetworkState
from devnetup.models.phases import WorkflowState
from devnetup.models.report import BootstrapReport

logger = logging.getLogger(__name__)


class DevnetOrchestrator:
    """Idempotent devnet bootstrap.

    Parameters
    ----------
    settings:
        Bootstrap configuration. Uses env-driven defaults if not provided.
    runner:
        Process runner shared by every phase. Defaults to SubprocessRunner.
    """

    def __init__(
        self,
        settings: DevnetSettings | None = None,
        *,
        runner: ProcessRunner | None = None,
    ) -> None:
        self.settings = settings or DevnetSettings()
        self.runner = runner or SubprocessRunner()

        s = self.settings
        self.build_gate = BuildGate(
            self.runner, s.repo_root, binary=s.binary, cargo=s.cargo
        )
        self.probe = NetworkStateProbe(s.state_dir)
        self.bootstrapper = NetworkBootstrapper(
            self.runner, self.build_gate, s.state_dir, cwd=s.repo_root
        )
        self.patcher = ConfigPatcher()
        self.launcher = SupervisorLauncher(
            self.runner, executable=s.supervisor, cwd=s.repo_root
        )
        self.machine = WorkflowMachine()

    # ------------------------------------------------------------------
    # Run lifecycle
    # ------------------------------------------------------------------

    def run(self, extra_args: Sequence[str] = ()) -> BootstrapReport:
        """Execute the full workflow and block until the supervisor exits.

        Returns a BootstrapReport whose ``exit_code`` is the supervisor's.
        """
        try:
            self.prepare()
            exit_code = self.launch(extra_args)
        except BootstrapError as exc:
            self.machine.fail(f"{exc.phase}: {exc}")
            logger.error("%s failed: %s", exc.phase, exc)
            raise

        return self._report(exit_code)

    def prepare(self) -> NetworkState:
        """Run every phase before the hand-off: build, probe, generate, patch."""
        self.build_gate.ensure_built()
        self.build_gate.ensure_invocable()
        self.machine.transition(WorkflowState.BUILT, str(self.build_gate.artifact.path))

        if self.probe.exists():
            return self._reuse_state()
        return self._generate_state()

    def launch(self, extra_args: Sequence[str] = ()) -> int:
        """Hand off to the supervisor; returns its exit code."""
        compose_file = self.settings.resolved_compose_file
        # The runner blocks for the supervisor's lifetime, so LAUNCHED is
        # recorded once it is known to have started, i.e. after it exits.
        exit_code = self.launcher.launch(compose_file, extra_args)
        self.machine.transition(WorkflowState.LAUNCHED, str(compose_file))
        self.machine.transition(WorkflowState.TERMINATED, f"exit code {exit_code}")
        return exit_code

    # ------------------------------------------------------------------
    # Network state
    # ------------------------------------------------------------------

    def _reuse_state(self) -> NetworkState:
        state_dir = self.settings.state_dir
        logger.info("network data exists locally at %s, reusing it", state_dir)
        if not self.probe.is_complete():
            logger.warning(
                "%s has no completion marker; it may be left over from an "
                "interrupted generation. Remove it to regenerate.",
                state_dir,
            )
        self.machine.transition(WorkflowState.STATE_REUSED, str(state_dir))
        return NetworkState(
            state_dir=state_dir,
            node_config_paths=find_node_configs(state_dir),
            reused=True,
        )

    def _generate_state(self) -> NetworkState:
        state = self.bootstrapper.generate(self.settings.generation)
        self.machine.transition(
            WorkflowState.GENERATED, f"{len(state.node_config_paths)} node(s)"
        )

        self.patcher.patch_state(state, self.settings.postgres_url)
        self.bootstrapper.mark_complete(state)
        self.machine.transition(WorkflowState.PATCHED, "indexer -> psql")
        return state

    def _report(self, exit_code: int) -> BootstrapReport:
        reached = {t.to_state for t in self.machine.history}
        return BootstrapReport(
            exit_code=exit_code,
            final_state=self.machine.state,
            generated=WorkflowState.GENERATED in reached,
            patched=WorkflowState.PATCHED in reached,
            transitions=self.machine.history,
        )
