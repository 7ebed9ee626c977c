"""Bootstrap error taxonomy.

Every phase failure is fatal: it terminates the workflow immediately with
no retry and no rollback. Each error carries the phase label shown to the
operator, a distinct process exit code, the captured stderr of the failing
subprocess (if any), and a remediation hint.
"""

from __future__ import annotations


class BootstrapError(RuntimeError):
    """Base class for fatal bootstrap phase failures.

    Must not be caught and ignored; the CLI turns it into ``exit_code``.
    """

    phase: str = "bootstrap"
    exit_code: int = 1
    hint: str = ""

    def __init__(
        self,
        message: str,
        *,
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr

    def stderr_tail(self, lines: int = 20) -> str:
        """Last *lines* lines of the captured stderr."""
        return "\n".join(self.stderr.rstrip().splitlines()[-lines:])


class BuildError(BootstrapError):
    """The release build of the node binary failed."""

    phase = "build"
    exit_code = 10
    hint = "Fix the compilation errors above and re-run."


class InvocationError(BootstrapError):
    """The binary compiled but cannot be started."""

    phase = "invocability check"
    exit_code = 11
    hint = "The binary built but does not run; check linking and the toolchain."


class GenerationError(BootstrapError):
    """Network generation exited non-zero or produced an unexpected layout."""

    phase = "network generation"
    exit_code = 12
    hint = (
        "Inspect the generation parameters. Remove the partially generated "
        "network directory before re-running."
    )


class PatchError(BootstrapError):
    """The generated node config did not match the expected format."""

    phase = "config patch"
    exit_code = 13
    hint = "The generator's config format changed; inspect config.toml."


class LaunchError(BootstrapError):
    """The process supervisor could not be started."""

    phase = "launch"
    exit_code = 14
    hint = "Check that process-compose is installed and on PATH."
