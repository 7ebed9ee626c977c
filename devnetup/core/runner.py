"""Pluggable process runner used by every bootstrap phase.

Defines the ``ProcessRunner`` Protocol that phase components depend on,
along with ``SubprocessRunner``, the real implementation. Tests inject a
fake runner that records commands and returns scripted results.

Cancellation: while a child is active, SIGINT, SIGTERM and SIGHUP
delivered to this process are forwarded to the child and the runner keeps
waiting for it, so no child is left orphaned. A SIGINT is not relayed to a
child in the terminal's foreground process group, which already got it
from the Ctrl-C. Between children the previously installed handlers
apply, and a Ctrl-C exits promptly.
"""

from __future__ import annotations

import contextlib
import logging
import os
import signal
import subprocess
import threading
from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from devnetup.models.invocation import CommandResult

logger = logging.getLogger(__name__)

FORWARDED_SIGNALS: tuple[signal.Signals, ...] = tuple(
    getattr(signal, name)
    for name in ("SIGINT", "SIGTERM", "SIGHUP")
    if hasattr(signal, name)
)


@runtime_checkable
class ProcessRunner(Protocol):
    """Protocol for process execution backends.

    Any object with a ``run(command, *, capture, cwd) -> CommandResult``
    method satisfies this protocol.
    """

    def run(
        self,
        command: Sequence[str],
        *,
        capture: bool = True,
        cwd: Path | None = None,
    ) -> CommandResult:
        """Run *command* to completion and return its result.

        Parameters
        ----------
        command:
            Executable followed by its arguments.
        capture:
            Collect stdout/stderr when ``True``; otherwise the child
            inherits the caller's streams.
        cwd:
            Working directory for the child.

        Raises
        ------
        OSError
            If the executable cannot be started at all.
        """
        ...


class SubprocessRunner:
    """Runs commands with :mod:`subprocess`, blocking until they exit.

    No timeouts are applied; failures are detected solely via exit codes.
    """

    def run(
        self,
        command: Sequence[str],
        *,
        capture: bool = True,
        cwd: Path | None = None,
    ) -> CommandResult:
        argv = [str(part) for part in command]
        logger.debug("spawning %s (cwd=%s, capture=%s)", argv, cwd, capture)

        if capture:
            proc = subprocess.Popen(
                argv,
                cwd=cwd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
            )
        else:
            proc = subprocess.Popen(argv, cwd=cwd)

        with self._forward_signals(proc):
            stdout, stderr = proc.communicate()

        logger.debug("%s exited with %s", argv[0], proc.returncode)
        return CommandResult(
            command=argv,
            exit_code=proc.returncode,
            stdout=stdout or "",
            stderr=stderr or "",
        )

    @contextlib.contextmanager
    def _forward_signals(self, proc: subprocess.Popen) -> Iterator[None]:
        """Relay termination signals to *proc* for the duration of the block."""
        # Handlers can only be installed from the main thread.
        if threading.current_thread() is not threading.main_thread():
            try:
                yield
            finally:
                _reap(proc)
            return

        def _forward(signum: int, frame: object) -> None:
            if signum == signal.SIGINT and _in_foreground_group(proc):
                # The terminal already delivered Ctrl-C to the whole group.
                logger.debug("child pid %s received SIGINT from the terminal", proc.pid)
                return
            if proc.poll() is None:
                logger.info(
                    "forwarding %s to child pid %s",
                    signal.Signals(signum).name,
                    proc.pid,
                )
                proc.send_signal(signum)

        previous = {sig: signal.signal(sig, _forward) for sig in FORWARDED_SIGNALS}
        try:
            yield
        finally:
            _reap(proc)
            for sig, handler in previous.items():
                signal.signal(sig, handler if handler is not None else signal.SIG_DFL)


def _reap(proc: subprocess.Popen) -> None:
    """Make sure *proc* is not left running if waiting was aborted."""
    if proc.poll() is None:
        logger.warning("terminating child pid %s", proc.pid)
        proc.kill()
        proc.wait()


def _in_foreground_group(proc: subprocess.Popen) -> bool:
    """Whether *proc* belongs to the terminal's foreground process group."""
    if not hasattr(os, "tcgetpgrp"):
        return False
    try:
        return os.tcgetpgrp(0) == os.getpgid(proc.pid)
    except OSError:
        # stdin is not a terminal, or the child is already gone.
        return False
