"""Main Typer application.

Entry point: ``devnetup`` (configured via pyproject.toml scripts).

The app has a single command and defines no options of its own, so
every argument (``--help`` included) reaches process-compose untouched.
"""

from __future__ import annotations

import typer

from devnetup.cli.commands.up import up_cmd

app = typer.Typer(
    name="devnetup",
    help="Bootstrap and run a local single-node devnet.",
    rich_markup_mode="rich",
    add_completion=False,
)

app.command(
    name="up",
    context_settings={
        "allow_extra_args": True,
        "ignore_unknown_options": True,
        "help_option_names": [],
    },
)(up_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
