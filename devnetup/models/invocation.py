"""Subprocess invocation and result models."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict


class CommandResult(BaseModel):
    """Outcome of one spawned process.

    ``stdout`` and ``stderr`` are empty when the child inherited the
    caller's streams instead of having its output captured.
    """

    model_config = ConfigDict(frozen=True)

    command: list[str]
    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class BuildArtifact(BaseModel):
    """The compiled node binary at the toolchain's release output path."""

    model_config = ConfigDict(frozen=True)

    path: Path
    ready: bool = False


class SupervisorInvocation(BaseModel):
    """The final hand-off to the process supervisor. Never persisted."""

    model_config = ConfigDict(frozen=True)

    executable: str = "process-compose"
    config_file: Path
    extra_args: list[str] = []

    def argv(self) -> list[str]:
        """Full command line; caller arguments go last, unmodified."""
        return [
            self.executable,
            "up",
            "--no-server",
            "--config",
            str(self.config_file),
            "--keep-tui",
            *self.extra_args,
        ]
