"""main.py – Umbrella CLI entry point for compilerun.

Lazily imports and registers all subcommands so that a module that fails
to import (a missing optional dependency) only disables its own command
instead of the entire CLI.

The six compile/run actions come from :mod:`compilerun.commands` and are
registered as flat commands.  Single-command modules (``doctor``) are flat
``app.command()`` entries as well; only true multi-command modules
(``cfg``) use ``add_typer()``.
"""

import importlib
import sys
from collections.abc import Callable

import typer

app = typer.Typer(
    help="Compile & run single C/C++ files.",
    rich_markup_mode="rich",
    epilog="""\
[bold]Typical workflow:[/bold]
  compilerun compile-run hello.c          Compile with default flags, then run
  compilerun custom-compile-run hello.cpp Prompt for flags and arguments
  compilerun run hello.c                  Re-run the last build
  compilerun cfg set c-compiler clang     Change a setting
  compilerun doctor                       Check the toolchain

[dim]Settings come from compilerun.toml (searched upward from the current
directory) or the per-user settings file.  Run 'compilerun <cmd> --help' for details.[/dim]""",
)

# ---------------------------------------------------------------------------
# Subcommand registry
# ---------------------------------------------------------------------------

# Single-command modules – registered as flat commands via app.command().
_SINGLE_COMMANDS: list[tuple[str, str, str]] = [
    ("doctor", "compilerun.doctor", "Check settings, compilers and terminal."),
]

# Multi-command modules – registered as groups via app.add_typer().
_MULTI_COMMANDS: list[tuple[str, str, str]] = [
    ("cfg", "compilerun.cfg", "Read and edit compilerun settings."),
]


def _make_stub_cmd(mod_name: str, err: ImportError) -> Callable[[], None]:
    """Create a stub command function that reports a missing dependency."""

    def _stub() -> None:
        print(f"Error: could not load '{mod_name}': {err}", file=sys.stderr)
        raise typer.Exit(code=1)

    return _stub


def _make_stub_app(mod_name: str, err: ImportError) -> typer.Typer:
    """Create a stub Typer app that reports a missing dependency."""
    stub = typer.Typer(help=f"[unavailable] {mod_name}")

    @stub.callback(invoke_without_command=True)
    def _stub_main() -> None:
        print(f"Error: could not load '{mod_name}': {err}", file=sys.stderr)
        raise typer.Exit(code=1)

    return stub


# Register the compile/run actions.
try:
    from compilerun.commands import ACTION_COMMANDS

    for _name, _action, _factory, _help in ACTION_COMMANDS:
        app.command(name=_name, help=_help)(_factory(_action))
except ImportError as _exc:
    app.command(name="compile-run", help="[unavailable] compile/run actions")(
        _make_stub_cmd("compilerun.commands", _exc)
    )

# Register single-command modules as flat commands.
for _name, _module, _help in _SINGLE_COMMANDS:
    try:
        _mod = importlib.import_module(_module)
        _epilog = getattr(_mod.app.info, "epilog", None)
        if not isinstance(_epilog, str):
            _epilog = None
        app.command(name=_name, help=_help, epilog=_epilog)(_mod.main)
    except ImportError as _exc:
        app.command(name=_name, help=f"[unavailable] {_help}")(_make_stub_cmd(_module, _exc))

# Register multi-command modules as groups (Typer sub-apps).
for _name, _module, _help in _MULTI_COMMANDS:
    try:
        _mod = importlib.import_module(_module)
        app.add_typer(_mod.app, name=_name, help=_help)
    except ImportError as _exc:
        app.add_typer(_make_stub_app(_module, _exc), name=_name, help=f"[unavailable] {_help}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
