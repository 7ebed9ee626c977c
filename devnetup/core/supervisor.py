"""Supervisor launcher — final hand-off to process-compose."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from devnetup.core.errors import LaunchError
from devnetup.core.runner import ProcessRunner
from devnetup.models.invocation import SupervisorInvocation

logger = logging.getLogger(__name__)


class SupervisorLauncher:
    """Starts the supervisor attached to the caller's streams and waits.

    The returned exit code is the supervisor's own, unchanged.
    """

    def __init__(
        self,
        runner: ProcessRunner,
        *,
        executable: str = "process-compose",
        cwd: Path | None = None,
    ) -> None:
        self._runner = runner
        self._executable = executable
        self._cwd = cwd

    def invocation(
        self, config_file: Path, extra_args: Sequence[str] = ()
    ) -> SupervisorInvocation:
        return SupervisorInvocation(
            executable=self._executable,
            config_file=config_file,
            extra_args=list(extra_args),
        )

    def launch(self, config_file: Path, extra_args: Sequence[str] = ()) -> int:
        """Run the supervisor until it exits and return its exit code.

        Raises
        ------
        LaunchError
            If the config file is missing or the supervisor cannot start.
        """
        if not config_file.is_file():
            raise LaunchError(f"supervisor config {config_file} does not exist")

        invocation = self.invocation(config_file, extra_args)
        logger.info(
            "Launching %s with %s%s",
            self._executable,
            config_file,
            f" (extra args: {' '.join(invocation.extra_args)})" if invocation.extra_args else "",
        )
        try:
            result = self._runner.run(invocation.argv(), capture=False, cwd=self._cwd)
        except OSError as exc:
            raise LaunchError(f"could not start {self._executable}: {exc}") from exc

        logger.info("%s exited with code %s", self._executable, result.exit_code)
        return result.exit_code
