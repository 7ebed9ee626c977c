"""Network bootstrapper — one-shot generation of devnet state.

Invokes ``pd network generate`` with a fixed devnet parameter set. This is
the expensive, non-idempotent phase: it must run at most once per state
directory, which the orchestrator enforces through the state probe. No
cleanup is attempted on failure; removing a partial directory is left to
the operator.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from pathlib import Path

from devnetup.core.build_gate import BuildGate
from devnetup.core.errors import GenerationError
from devnetup.core.runner import ProcessRunner
from devnetup.core.state_probe import COMPLETION_MARKER
from devnetup.models.network import GenerationParams, NetworkState

logger = logging.getLogger(__name__)

NODE_CONFIG_GLOB = "node*/cometbft/config/config.toml"
_NODE_INDEX = re.compile(r"^node(\d+)$")


def find_node_configs(state_dir: Path) -> list[Path]:
    """Per-node CometBFT config files under *state_dir*, in node order."""

    def _index(path: Path) -> int:
        node_dir = path.relative_to(state_dir).parts[0]
        match = _NODE_INDEX.match(node_dir)
        return int(match.group(1)) if match else -1

    return sorted(state_dir.glob(NODE_CONFIG_GLOB), key=_index)


class NetworkBootstrapper:
    """Generates NetworkState in *state_dir* using the built node binary.

    Parameters
    ----------
    runner:
        Process runner used for the generation command.
    build_gate:
        Supplies the ``cargo run`` command line for the node binary.
    state_dir:
        Destination network directory; must not exist yet.
    """

    def __init__(
        self,
        runner: ProcessRunner,
        build_gate: BuildGate,
        state_dir: Path,
        *,
        cwd: Path | None = None,
    ) -> None:
        self._runner = runner
        self._build_gate = build_gate
        self._state_dir = state_dir
        self._cwd = cwd

    def command(self, params: GenerationParams) -> list[str]:
        return self._build_gate.run_command(
            "network",
            "--network-dir",
            str(self._state_dir),
            "generate",
            *params.to_cli_args(),
        )

    def generate(self, params: GenerationParams) -> NetworkState:
        """Run generation and return the resulting state.

        Raises
        ------
        GenerationError
            On a non-zero exit, when the generator cannot be started, or
            when no per-node config was produced.
        """
        logger.info(
            "Generating network %s in %s", params.chain_id, self._state_dir
        )
        try:
            result = self._runner.run(self.command(params), cwd=self._cwd)
        except OSError as exc:
            raise GenerationError(f"could not start network generation: {exc}") from exc

        if not result.ok:
            raise GenerationError(
                f"network generation exited with code {result.exit_code}",
                returncode=result.exit_code,
                stderr=result.stderr,
            )

        node_configs = find_node_configs(self._state_dir)
        if not node_configs:
            raise GenerationError(
                f"network generation produced no node config matching "
                f"{NODE_CONFIG_GLOB} under {self._state_dir}",
                returncode=result.exit_code,
                stderr=result.stderr,
            )

        logger.info("Generated %d node config(s)", len(node_configs))
        return NetworkState(
            state_dir=self._state_dir,
            node_config_paths=node_configs,
            params=params,
        )

    def mark_complete(self, state: NetworkState) -> Path:
        """Write the completion marker once the state is fully prepared."""
        marker = state.state_dir / COMPLETION_MARKER
        chain_id = state.params.chain_id if state.params else ""
        marker.write_text(
            f"{chain_id} {datetime.now(timezone.utc).isoformat()}\n",
            encoding="utf-8",
        )
        return marker
