"""Build gate — guarantees a usable node binary before any later phase.

Two checks, both fatal on failure:
    1. ``ensure_built()``     — release-mode compile via cargo.
    2. ``ensure_invocable()`` — run the binary with ``--help`` through
       ``cargo run`` so later ``cargo run`` calls (and the supervisor's
       spin-up) do not block on further building or linking.
"""

from __future__ import annotations

import logging
from pathlib import Path

from devnetup.core.errors import BuildError, InvocationError
from devnetup.core.runner import ProcessRunner
from devnetup.models.invocation import BuildArtifact

logger = logging.getLogger(__name__)


class BuildGate:
    """Builds and smoke-tests the node binary.

    Parameters
    ----------
    runner:
        Process runner used for cargo invocations.
    repo_root:
        Cargo workspace root; commands run from here.
    binary:
        Name of the cargo binary target (``pd``).
    cargo:
        The cargo executable.
    """

    def __init__(
        self,
        runner: ProcessRunner,
        repo_root: Path,
        *,
        binary: str = "pd",
        cargo: str = "cargo",
    ) -> None:
        self._runner = runner
        self._repo_root = repo_root
        self._binary = binary
        self._cargo = cargo
        self._built = False
        self._invocable = False

    @property
    def artifact(self) -> BuildArtifact:
        """The release artifact; ``ready`` once both checks passed."""
        return BuildArtifact(
            path=self._repo_root / "target" / "release" / self._binary,
            ready=self._built and self._invocable,
        )

    def run_command(self, *binary_args: str) -> list[str]:
        """``cargo run`` command line for the binary with *binary_args*."""
        return [
            self._cargo, "run", "--release", "--bin", self._binary, "--", *binary_args,
        ]

    def ensure_built(self) -> None:
        """Compile the binary in release mode, raising BuildError on failure.

        Compiler output streams to the terminal; only the exit code is kept.
        """
        command = [self._cargo, "build", "--release", "--bin", self._binary]
        logger.info("Building %s from latest code...", self._binary)
        try:
            result = self._runner.run(command, capture=False, cwd=self._repo_root)
        except OSError as exc:
            raise BuildError(f"could not start {self._cargo}: {exc}") from exc

        if not result.ok:
            raise BuildError(
                f"cargo build of {self._binary} exited with code {result.exit_code}",
                returncode=result.exit_code,
                stderr=result.stderr,
            )
        self._built = True

    def ensure_invocable(self) -> None:
        """Run the binary with ``--help``; output is discarded."""
        command = [self._cargo, "--quiet", *self.run_command("--help")[1:]]
        try:
            result = self._runner.run(command, cwd=self._repo_root)
        except OSError as exc:
            raise InvocationError(f"could not start {self._cargo}: {exc}") from exc

        if not result.ok:
            raise InvocationError(
                f"{self._binary} --help exited with code {result.exit_code}",
                returncode=result.exit_code,
                stderr=result.stderr,
            )
        if not result.stdout.strip():
            raise InvocationError(
                f"{self._binary} --help produced no help text",
                returncode=result.exit_code,
                stderr=result.stderr,
            )
        self._invocable = True
        logger.debug("%s is invocable", self._binary)
