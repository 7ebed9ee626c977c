"""Devnet bootstrap configuration — env-driven.

Centralized config using pydantic-settings. Reads from a .env file and
DEVNETUP_* environment variables, so tests and operators can redirect
the network-state directory without touching a global.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from devnetup.models.network import DEFAULT_POSTGRES_URL, GenerationParams


class DevnetSettings(BaseSettings):
    """Bootstrap configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export DEVNETUP_STATE_DIR=/tmp/devnet/network_data
        export DEVNETUP_LOG_LEVEL=DEBUG
        export DEVNETUP_GENERATION__CHAIN_ID=penumbra-scratch

    Or via .env file::

        DEVNETUP_REPO_ROOT=/src/penumbra
        DEVNETUP_SUPERVISOR=/usr/local/bin/process-compose
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="DEVNETUP_",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    # Source checkout and toolchain
    repo_root: Path = Field(default_factory=Path.cwd)
    cargo: str = "cargo"
    binary: str = "pd"

    # User-scoped network state
    state_dir: Path = Field(
        default_factory=lambda: Path.home() / ".penumbra" / "network_data"
    )
    generation: GenerationParams = GenerationParams()

    # CometBFT indexing
    postgres_url: str = DEFAULT_POSTGRES_URL

    # Supervisor
    supervisor: str = "process-compose"
    compose_file: Path | None = None  # defaults under repo_root

    log_level: str = "INFO"

    @property
    def resolved_compose_file(self) -> Path:
        """The supervisor config, defaulting to the repo's deployments tree."""
        if self.compose_file is not None:
            return self.compose_file
        return self.repo_root / "deployments" / "compose" / "process-compose.yml"
