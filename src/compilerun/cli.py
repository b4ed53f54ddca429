"""Shared CLI utilities for compilerun commands.

Provides common Typer options, config-loading helpers, and standardised
output / error helpers so that every command reports errors and JSON the
same way.

Usage in a command::

    import typer
    from compilerun.cli import ConfigOption, get_config, error_exit

    @app.command()
    def main(config: Path | None = ConfigOption) -> None:
        cfg = get_config(config)
        ...
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from compilerun.config import ConfigError, RunConfig, load_config

# Re-usable Typer option for --config
ConfigOption: Path | None = typer.Option(
    None,
    "--config",
    "-c",
    help="Settings file to use (default: nearest compilerun.toml, then the per-user file).",
    dir_okay=False,
)


def get_config(path: Path | None = None) -> RunConfig:
    """Load settings, exiting with an error message when they are invalid."""
    try:
        return load_config(path=path)
    except ConfigError as e:
        error_exit(str(e))


# ---------------------------------------------------------------------------
# Standardised output helpers
# ---------------------------------------------------------------------------

_err_console = Console(stderr=True)


def error_exit(msg: str, *, json_mode: bool = False, code: int = 1) -> NoReturn:
    """Print *msg* as an error and ``raise typer.Exit(code)``."""
    if json_mode:
        print(json.dumps({"error": msg}, indent=2))
    else:
        _err_console.print(
            f"[red bold]error:[/red bold] {escape(msg)}", highlight=False, emoji=False
        )
    raise typer.Exit(code=code)


def json_print(data: dict[str, Any] | list[Any]) -> None:
    """Print *data* as pretty-printed JSON to stdout."""
    print(json.dumps(data, indent=2))
