"""Tests for the NetworkBootstrapper — generation command and failures."""

from __future__ import annotations

from pathlib import Path

import pytest

from devnetup.core.bootstrapper import NetworkBootstrapper, find_node_configs
from devnetup.core.build_gate import BuildGate
from devnetup.core.errors import GenerationError
from devnetup.core.state_probe import COMPLETION_MARKER
from devnetup.models.network import DEVNET_ALLOCATION_ADDRESS, GenerationParams


@pytest.fixture
def bootstrapper(fake_runner, repo_root: Path, state_dir: Path) -> NetworkBootstrapper:
    gate = BuildGate(fake_runner, repo_root)
    return NetworkBootstrapper(fake_runner, gate, state_dir, cwd=repo_root)


class TestGenerate:
    def test_command_line(self, bootstrapper: NetworkBootstrapper, fake_runner, state_dir: Path):
        bootstrapper.generate(GenerationParams())
        assert fake_runner.calls[0].command == [
            "cargo", "run", "--release", "--bin", "pd", "--",
            "network", "--network-dir", str(state_dir), "generate",
            "--chain-id", "penumbra-local-devnet",
            "--unbonding-delay", "302400",
            "--epoch-duration", "302400",
            "--proposal-voting-blocks", "50",
            "--gas-price-simple", "0",
            "--allocation-address", DEVNET_ALLOCATION_ADDRESS,
            "--timeout-commit", "1s",
        ]

    def test_returns_state_with_node_configs(self, bootstrapper: NetworkBootstrapper, state_dir: Path):
        params = GenerationParams()
        state = bootstrapper.generate(params)

        assert state.state_dir == state_dir
        assert state.params == params
        assert state.reused is False
        assert state.node_config_paths == [
            state_dir / "node0" / "cometbft" / "config" / "config.toml"
        ]

    def test_nonzero_exit_raises(self, bootstrapper: NetworkBootstrapper, fake_runner):
        fake_runner.respond("generate", exit_code=1, stderr="invalid allocation address")
        with pytest.raises(GenerationError) as excinfo:
            bootstrapper.generate(GenerationParams())
        assert excinfo.value.exit_code == 12
        assert excinfo.value.returncode == 1
        assert "allocation" in excinfo.value.stderr

    def test_failure_leaves_partial_state_alone(
        self, bootstrapper: NetworkBootstrapper, fake_runner, state_dir: Path
    ):
        state_dir.mkdir(parents=True)
        (state_dir / "partial").write_text("x")
        fake_runner.respond("generate", exit_code=2)
        with pytest.raises(GenerationError):
            bootstrapper.generate(GenerationParams())
        assert (state_dir / "partial").exists()

    def test_no_node_configs_raises(self, bootstrapper: NetworkBootstrapper, fake_runner):
        fake_runner.respond("generate", exit_code=0)
        with pytest.raises(GenerationError, match="no node config"):
            bootstrapper.generate(GenerationParams())

    def test_unstartable_raises(self, bootstrapper: NetworkBootstrapper, fake_runner):
        fake_runner.respond("generate", raises=FileNotFoundError("cargo"))
        with pytest.raises(GenerationError, match="could not start"):
            bootstrapper.generate(GenerationParams())

    def test_generate_does_not_write_marker(self, bootstrapper: NetworkBootstrapper, state_dir: Path):
        bootstrapper.generate(GenerationParams())
        assert not (state_dir / COMPLETION_MARKER).exists()

    def test_mark_complete(self, bootstrapper: NetworkBootstrapper, state_dir: Path):
        state = bootstrapper.generate(GenerationParams(chain_id="penumbra-scratch"))
        marker = bootstrapper.mark_complete(state)
        assert marker == state_dir / COMPLETION_MARKER
        assert marker.read_text(encoding="utf-8").startswith("penumbra-scratch ")


class TestFindNodeConfigs:
    def test_numeric_node_order(self, make_fake_runner, state_dir: Path):
        make_fake_runner(nodes=11)._write_network(state_dir)
        configs = find_node_configs(state_dir)
        nodes = [p.relative_to(state_dir).parts[0] for p in configs]
        assert nodes == [f"node{n}" for n in range(11)]

    def test_missing_dir_yields_nothing(self, state_dir: Path):
        assert find_node_configs(state_dir) == []
