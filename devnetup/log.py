"""Terminal logging for the bootstrap CLI."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(level: str = "INFO") -> None:
    """Route all ``devnetup`` loggers to stderr through Rich.

    Stdout is left to the supervisor, which inherits it.
    """
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                console=Console(stderr=True),
                show_path=False,
                rich_tracebacks=True,
            )
        ],
        force=True,
    )
