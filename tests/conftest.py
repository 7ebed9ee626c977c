"""Shared test fixtures for devnetup."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

import pytest

from devnetup.config import DevnetSettings
from devnetup.core.orchestrator import DevnetOrchestrator
from devnetup.models.invocation import CommandResult

SAMPLE_NODE_CONFIG = """\
# This is a TOML config file.
proxy_app = "tcp://127.0.0.1:26658"
moniker = "node0"

[rpc]
laddr = "tcp://0.0.0.0:26657"

[tx_index]
# What indexer to use for transactions
indexer = "kv"

# The PostgreSQL connection configuration
psql-conn = ""

[instrumentation]
prometheus = false
"""


# ---------------------------------------------------------------------------
# Fake process runner
# ---------------------------------------------------------------------------


@dataclass
class RecordedCall:
    command: list[str]
    capture: bool
    cwd: Path | None


@dataclass
class _Rule:
    token: str
    exit_code: int = 0
    stdout: str = ""
    stderr: str = ""
    raises: BaseException | None = None


class FakeRunner:
    """Records every command and answers from scripted rules.

    Without rules it behaves like a healthy toolchain: ``--help`` prints
    usage text and ``network ... generate`` writes a one-node layout into
    the ``--network-dir`` it was given.
    """

    def __init__(self, node_config: str = SAMPLE_NODE_CONFIG, nodes: int = 1) -> None:
        self.calls: list[RecordedCall] = []
        self._rules: list[_Rule] = []
        self._node_config = node_config
        self._nodes = nodes

    def respond(
        self,
        token: str,
        *,
        exit_code: int = 0,
        stdout: str = "",
        stderr: str = "",
        raises: BaseException | None = None,
    ) -> None:
        """Answer any command containing *token* with the given result."""
        self._rules.append(_Rule(token, exit_code, stdout, stderr, raises))

    def run(
        self,
        command: Sequence[str],
        *,
        capture: bool = True,
        cwd: Path | None = None,
    ) -> CommandResult:
        argv = [str(part) for part in command]
        self.calls.append(RecordedCall(argv, capture, cwd))

        for rule in reversed(self._rules):
            if rule.token in argv:
                if rule.raises is not None:
                    raise rule.raises
                return CommandResult(
                    command=argv,
                    exit_code=rule.exit_code,
                    stdout=rule.stdout,
                    stderr=rule.stderr,
                )

        stdout = ""
        if "--help" in argv:
            stdout = "Usage: pd <COMMAND>\n"
        if "generate" in argv:
            self._write_network(Path(argv[argv.index("--network-dir") + 1]))
        return CommandResult(command=argv, exit_code=0, stdout=stdout)

    def _write_network(self, state_dir: Path) -> None:
        for n in range(self._nodes):
            config_dir = state_dir / f"node{n}" / "cometbft" / "config"
            config_dir.mkdir(parents=True)
            (config_dir / "config.toml").write_text(self._node_config, encoding="utf-8")
            (config_dir / "genesis.json").write_text("{}", encoding="utf-8")

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------

    def calls_with(self, token: str) -> list[RecordedCall]:
        return [c for c in self.calls if token in c.command]

    def count(self, token: str) -> int:
        return len(self.calls_with(token))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_runner() -> FakeRunner:
    """Provide a FakeRunner behaving like a healthy toolchain."""
    return FakeRunner()


@pytest.fixture
def make_fake_runner() -> Callable[..., FakeRunner]:
    """Factory fixture: build a FakeRunner with custom node layout."""
    return FakeRunner


@pytest.fixture
def repo_root(tmp_path: Path) -> Path:
    """A fake source checkout with a process-compose config."""
    root = tmp_path / "repo"
    compose_dir = root / "deployments" / "compose"
    compose_dir.mkdir(parents=True)
    (compose_dir / "process-compose.yml").write_text("version: \"0.5\"\n", encoding="utf-8")
    return root


@pytest.fixture
def state_dir(tmp_path: Path) -> Path:
    """Isolated network-state location; does not exist yet."""
    return tmp_path / "home" / ".penumbra" / "network_data"


@pytest.fixture
def settings(repo_root: Path, state_dir: Path) -> DevnetSettings:
    """DevnetSettings redirected to temporary paths."""
    return DevnetSettings(repo_root=repo_root, state_dir=state_dir)


@pytest.fixture
def orchestrator(settings: DevnetSettings, fake_runner: FakeRunner) -> DevnetOrchestrator:
    """Provide a DevnetOrchestrator wired to the fake runner."""
    return DevnetOrchestrator(settings, runner=fake_runner)


@pytest.fixture
def node_config(tmp_path: Path) -> Path:
    """A stand-alone CometBFT config.toml in its generated form."""
    path = tmp_path / "config.toml"
    path.write_text(SAMPLE_NODE_CONFIG, encoding="utf-8")
    return path


@pytest.fixture
def existing_state(state_dir: Path) -> Path:
    """A previously generated (and patched) network directory."""
    FakeRunner()._write_network(state_dir)
    return state_dir
