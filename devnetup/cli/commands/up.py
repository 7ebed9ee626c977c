"""``devnetup [ARGS...]`` — build, bootstrap and run the local devnet.

Every argument is forwarded unchanged, and in order, to process-compose.
Exit code is the supervisor's, or the failing phase's code:

    build 10, invocability check 11, network generation 12,
    config patch 13, launch 14, interrupted 130.

A supervisor killed by signal N reports 128 + N, as a shell would.
"""

from __future__ import annotations

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from devnetup.config import DevnetSettings
from devnetup.core.errors import BootstrapError
from devnetup.core.orchestrator import DevnetOrchestrator
from devnetup.core.runner import SubprocessRunner
from devnetup.log import configure_logging

console = Console(stderr=True)

EXIT_INTERRUPTED = 130


def _exit_status(code: int) -> int:
    """Shell convention: a child killed by signal N exits with 128 + N."""
    return 128 - code if code < 0 else code


def _print_failure(exc: BootstrapError) -> None:
    lines = [f"[bold red]{escape(str(exc))}[/bold red]"]
    if exc.returncode is not None:
        lines.append(f"[bold]Exit code:[/bold] {exc.returncode}")
    tail = exc.stderr_tail()
    if tail:
        lines += ["", "[bold]stderr:[/bold]", escape(tail)]
    if exc.hint:
        lines += ["", f"[dim]{exc.hint}[/dim]"]

    console.print(
        Panel(
            "\n".join(lines),
            title=f"[bold]Phase failed: {exc.phase}[/bold]",
            border_style="red",
            padding=(1, 2),
        )
    )


def up_cmd(ctx: typer.Context) -> None:
    """Build pd, generate the devnet if absent, and run process-compose.

    Network state is generated only when the state directory does not
    exist yet; otherwise it is reused as-is.
    """
    settings = DevnetSettings()
    configure_logging(settings.log_level)

    orchestrator = DevnetOrchestrator(settings, runner=SubprocessRunner())
    try:
        report = orchestrator.run(list(ctx.args))
    except BootstrapError as exc:
        _print_failure(exc)
        raise typer.Exit(code=exc.exit_code)
    except KeyboardInterrupt:
        console.print("[bold yellow]Interrupted.[/bold yellow]")
        raise typer.Exit(code=EXIT_INTERRUPTED)

    raise typer.Exit(code=_exit_status(report.exit_code))
