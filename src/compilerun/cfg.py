"""compilerun cfg: read and edit the settings file.

Uses tomlkit for format-preserving round-trip editing (comments, ordering,
and whitespace are retained).

Usage::

    compilerun cfg path
    compilerun cfg show [KEY]
    compilerun cfg set c-compiler clang
    compilerun cfg set run-in-external-terminal true
    compilerun cfg set cpp-flags "-std=c++20 -O2" --user
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import tomlkit
import typer
from tomlkit.exceptions import ParseError

from compilerun.cli import error_exit, json_print
from compilerun.config import (
    CONFIG_FILENAME,
    SETTINGS,
    ConfigError,
    RunConfig,
    as_dict,
    coerce_value,
    find_config_file,
    load_config,
    user_config_path,
)
from compilerun.utils import atomic_write_text

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_toml(path: Path) -> tomlkit.TOMLDocument:
    """Load *path* as a tomlkit document, or an empty one if it is missing."""
    if not path.exists():
        return tomlkit.document()
    try:
        return tomlkit.parse(path.read_text(encoding="utf-8"))
    except ParseError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e


def _save_toml(doc: tomlkit.TOMLDocument, path: Path) -> None:
    """Write tomlkit document back, preserving formatting."""
    path.parent.mkdir(parents=True, exist_ok=True)
    atomic_write_text(path, tomlkit.dumps(doc))


def set_setting(path: Path, key: str, value: Any) -> Any:
    """Validate and store *key* = *value* in the settings file at *path*.

    Creates the file (and its directory) when needed.  Returns the stored,
    coerced value.
    """
    coerced = coerce_value(key, value)
    doc = _load_toml(path)
    doc[key] = coerced
    _save_toml(doc, path)
    return coerced


def persist_setting(cfg: RunConfig, key: str, value: Any) -> Path:
    """Persist a setting to the file *cfg* was loaded from.

    When *cfg* came from defaults only, the per-user file is used.
    """
    path = cfg.source or user_config_path()
    set_setting(path, key, value)
    return path


# ---------------------------------------------------------------------------
# Typer app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="Read and edit compilerun settings.",
    rich_markup_mode="rich",
    epilog=f"""\
[bold]Examples:[/bold]
  compilerun cfg path                           Print the settings file in use
  compilerun cfg show                           Show effective settings
  compilerun cfg show c-flags                   Show one setting
  compilerun cfg set c-compiler clang           Change a setting
  compilerun cfg set save-before-compile false  Booleans accept true/false

[dim]Settings are read from {CONFIG_FILENAME} in the current directory or a
parent, falling back to the per-user file.  Known keys: {", ".join(SETTINGS)}.[/dim]""",
)


def _current_config() -> RunConfig:
    try:
        return load_config()
    except ConfigError as e:
        error_exit(str(e))


@app.command("path")
def path_cmd() -> None:
    """Print the settings file in use (or where one would be created)."""
    found = find_config_file()
    if found is None:
        typer.echo(f"{user_config_path()} (not created yet, defaults in effect)")
        return
    typer.echo(str(found))


@app.command("show")
def show(
    key: str | None = typer.Argument(None, help="Setting to show, e.g. 'c-flags'."),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON."),
) -> None:
    """Show the effective settings, or a single setting."""
    values = as_dict(_current_config())

    if key is not None:
        if key not in values:
            error_exit(f"Unknown setting '{key}'.  Known settings: {', '.join(SETTINGS)}")
        if json_output:
            json_print({key: values[key]})
        else:
            typer.echo(str(values[key]).lower() if isinstance(values[key], bool) else values[key])
        return

    if json_output:
        json_print(values)
        return
    typer.echo(tomlkit.dumps(values).rstrip())


@app.command("set")
def set_cmd(
    key: str = typer.Argument(..., help="Setting name, e.g. 'c-compiler'."),
    value: str = typer.Argument(..., help="New value."),
    user: bool = typer.Option(
        False, "--user", help="Write to the per-user file instead of the file in use."
    ),
) -> None:
    """Set a setting in the settings file (created on demand)."""
    if user:
        target = user_config_path()
    else:
        target = find_config_file() or user_config_path()
    try:
        stored = set_setting(target, key, value)
    except ConfigError as e:
        error_exit(str(e))
    typer.secho(f"Set {key} = {stored!r} in {target}", fg=typer.colors.GREEN)
