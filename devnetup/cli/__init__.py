"""devnetup CLI — Typer-based command-line interface.

Provides the ``devnetup`` command: build, conditionally generate and
patch, then hand off to process-compose with any extra arguments.

All operator-facing output uses Rich on stderr.
"""
