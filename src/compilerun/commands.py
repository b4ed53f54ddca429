"""The six compile/run commands.

Each command is the same workflow with a different :class:`Action`:

=====================  ==============================================
``compile-run``        compile with default flags, run with default args
``custom-compile-run`` prompt for flags and args
``compile``            compile with default flags
``run``                run the last build with default args
``custom-compile``     prompt for flags
``custom-run``         prompt for args
=====================  ==============================================

Exit status: 0 on success and for silent no-ops (unsupported language,
cancelled prompt); 1 when the compiler is missing, compilation fails or
there is nothing to run; otherwise the program's own status when it ran in
this terminal.
"""

import sys
from collections.abc import Callable
from pathlib import Path

import typer

from compilerun.cli import ConfigOption, get_config
from compilerun.document import SourceDocument
from compilerun.output import OutputChannel
from compilerun.prompt import Prompter
from compilerun.workflow import SILENT_ERRORS, Action, CompileRun, WorkflowResult

SourceArgument: Path = typer.Argument(
    ..., help="C or C++ source file.", dir_okay=False, show_default=False
)
LanguageOption: str | None = typer.Option(
    None,
    "--language",
    "-l",
    help="Language id (c, cpp, cc) instead of guessing from the file suffix.",
)
StdinOption: bool = typer.Option(
    False,
    "--stdin",
    help="Read the unsaved buffer from stdin; it is written to SOURCE when save-before-compile is on.",
)
FlagsOption: str | None = typer.Option(
    None, "--flags", help="Compiler flags to use instead of prompting."
)
ArgsOption: str | None = typer.Option(
    None, "--args", help="Program arguments to use instead of prompting."
)


def exit_code_for(result: WorkflowResult) -> int:
    """Map a workflow result to a process exit status."""
    if result.error is None:
        return result.exit_code or 0
    if result.error in SILENT_ERRORS:
        return 0
    return 1


def run_action(
    action: Action,
    source: Path,
    *,
    language: str | None = None,
    stdin: bool = False,
    flags: str | None = None,
    args: str | None = None,
    config: Path | None = None,
) -> WorkflowResult:
    """Load settings, build the collaborators and execute *action*."""
    cfg = get_config(config)
    text = sys.stdin.read() if stdin else None
    document = SourceDocument(source.absolute(), language_id=language, text=text)
    channel = OutputChannel()
    prompter = Prompter(channel.err_console, flags=flags, run_args=args)
    return CompileRun(cfg, prompter, channel).execute(action, document)


def _finish(result: WorkflowResult) -> None:
    code = exit_code_for(result)
    if code:
        raise typer.Exit(code=code)


def _compile_command(action: Action) -> Callable[..., None]:
    def _cmd(
        source: Path = SourceArgument,
        language: str | None = LanguageOption,
        stdin: bool = StdinOption,
        config: Path | None = ConfigOption,
    ) -> None:
        _finish(run_action(action, source, language=language, stdin=stdin, config=config))

    return _cmd


def _custom_compile_command(action: Action) -> Callable[..., None]:
    def _cmd(
        source: Path = SourceArgument,
        flags: str | None = FlagsOption,
        language: str | None = LanguageOption,
        stdin: bool = StdinOption,
        config: Path | None = ConfigOption,
    ) -> None:
        _finish(
            run_action(
                action, source, language=language, stdin=stdin, flags=flags, config=config
            )
        )

    return _cmd


def _custom_compile_run_command(action: Action) -> Callable[..., None]:
    def _cmd(
        source: Path = SourceArgument,
        flags: str | None = FlagsOption,
        args: str | None = ArgsOption,
        language: str | None = LanguageOption,
        stdin: bool = StdinOption,
        config: Path | None = ConfigOption,
    ) -> None:
        _finish(
            run_action(
                action,
                source,
                language=language,
                stdin=stdin,
                flags=flags,
                args=args,
                config=config,
            )
        )

    return _cmd


def _run_command(action: Action) -> Callable[..., None]:
    def _cmd(
        source: Path = SourceArgument,
        language: str | None = LanguageOption,
        config: Path | None = ConfigOption,
    ) -> None:
        _finish(run_action(action, source, language=language, config=config))

    return _cmd


def _custom_run_command(action: Action) -> Callable[..., None]:
    def _cmd(
        source: Path = SourceArgument,
        args: str | None = ArgsOption,
        language: str | None = LanguageOption,
        config: Path | None = ConfigOption,
    ) -> None:
        _finish(run_action(action, source, language=language, args=args, config=config))

    return _cmd


# (command name, action, factory, help)
ACTION_COMMANDS: list[tuple[str, Action, Callable[[Action], Callable[..., None]], str]] = [
    (
        "compile-run",
        Action.COMPILE_RUN,
        _compile_command,
        "Compile with default flags & run with default arguments.",
    ),
    (
        "custom-compile-run",
        Action.CUSTOM_COMPILE_RUN,
        _custom_compile_run_command,
        "Compile with custom flags & run with custom arguments.",
    ),
    ("compile", Action.COMPILE, _compile_command, "Compile with default flags."),
    ("run", Action.RUN, _run_command, "Run with default arguments."),
    ("custom-compile", Action.CUSTOM_COMPILE, _custom_compile_command, "Compile with custom flags."),
    ("custom-run", Action.CUSTOM_RUN, _custom_run_command, "Run with custom arguments."),
]
