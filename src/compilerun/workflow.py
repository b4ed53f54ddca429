"""Compile-and-run orchestration.

One :class:`CompileRun` call handles one user action from start to finish:

    Idle -> Saving -> ResolvingCompiler -> AwaitingFlags -> Compiling
         -> CompileFailed | CompileSucceeded -> Running -> Done

Any step may instead end in ``Aborted`` (unsupported language, compiler not
found, prompt cancelled, missing output file, a source with no
extension).  Nothing here raises for those cases; every outcome comes back
as a :class:`WorkflowResult`, and the states visited are recorded on it.

Steps run strictly one after another: at most one compiler process and one
program process per call, and nothing that was spawned is ever killed.
"""

from __future__ import annotations

import enum
import sys
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Callable

from compilerun.cfg import persist_setting
from compilerun.compile import run_compiler
from compilerun.config import SETTINGS, ConfigError, RunConfig
from compilerun.document import SourceDocument
from compilerun.output import OutputChannel
from compilerun.prompt import Cancelled, Prompter
from compilerun.resolver import CompilerConfig, LanguageKind, is_reachable, language_for, resolve
from compilerun.runner import RunSpec
from compilerun.terminal import ExternalTerminal, IntegratedTerminal, external_terminal_for


class Action(enum.Enum):
    COMPILE = "compile"
    RUN = "run"
    COMPILE_RUN = "compile-run"
    CUSTOM_COMPILE = "custom-compile"
    CUSTOM_RUN = "custom-run"
    CUSTOM_COMPILE_RUN = "custom-compile-run"

    @property
    def compiles(self) -> bool:
        return self not in (Action.RUN, Action.CUSTOM_RUN)

    @property
    def runs(self) -> bool:
        return self not in (Action.COMPILE, Action.CUSTOM_COMPILE)

    @property
    def custom_flags(self) -> bool:
        return self in (Action.CUSTOM_COMPILE, Action.CUSTOM_COMPILE_RUN)

    @property
    def custom_args(self) -> bool:
        return self in (Action.CUSTOM_RUN, Action.CUSTOM_COMPILE_RUN)


class State(enum.Enum):
    IDLE = "idle"
    SAVING = "saving"
    RESOLVING_COMPILER = "resolving-compiler"
    AWAITING_FLAGS = "awaiting-flags"
    COMPILING = "compiling"
    COMPILE_FAILED = "compile-failed"
    COMPILE_SUCCEEDED = "compile-succeeded"
    RUNNING = "running"
    DONE = "done"
    ABORTED = "aborted"


class ErrorKind(enum.Enum):
    COMPILER_NOT_FOUND = "compiler-not-found"
    COMPILE_FAILED = "compile-failed"
    OUTPUT_MISSING = "output-missing"
    UNSUPPORTED_LANGUAGE = "unsupported-language"
    PROMPT_CANCELLED = "prompt-cancelled"
    SAVE_FAILED = "save-failed"
    OUTPUT_IS_SOURCE = "output-is-source"


# Outcomes the user is not told about
SILENT_ERRORS = frozenset({ErrorKind.UNSUPPORTED_LANGUAGE, ErrorKind.PROMPT_CANCELLED})


@dataclass(frozen=True)
class CompileTarget:
    source_path: Path
    language: LanguageKind
    output_path: Path

    @classmethod
    def from_source(
        cls, source_path: Path, language: LanguageKind, platform: str | None = None
    ) -> CompileTarget:
        """Derive the executable path: source minus extension, ``.exe`` on Windows."""
        platform = platform or sys.platform
        output = source_path.parent / source_path.stem
        if platform == "win32":
            output = output.with_name(output.name + ".exe")
        return cls(source_path, language, output)


@dataclass
class WorkflowResult:
    state: State
    error: ErrorKind | None = None
    # Exit status of the program when it ran in the integrated terminal
    exit_code: int | None = None
    states: list[State] = field(default_factory=list)
    compiler_output: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None


class CompileRun:
    """Runs compile/run actions against a source document.

    Settings are passed in, not looked up.  ``persist`` stores a corrected
    compiler path (default: write it to the settings file ``config`` came
    from).
    """

    def __init__(
        self,
        config: RunConfig,
        prompter: Prompter,
        channel: OutputChannel,
        *,
        external: ExternalTerminal | None = None,
        integrated: IntegratedTerminal | None = None,
        persist: Callable[[RunConfig, str, str], object] = persist_setting,
        platform: str | None = None,
    ) -> None:
        self.config = config
        self.prompter = prompter
        self.channel = channel
        self.platform = platform or sys.platform
        self.external = external or external_terminal_for(self.platform)
        self.integrated = integrated or IntegratedTerminal()
        self.persist = persist
        self._states: list[State] = []

    # -- bookkeeping -------------------------------------------------------

    def _enter(self, state: State) -> None:
        self._states.append(state)

    def _finish(
        self,
        state: State,
        error: ErrorKind | None = None,
        *,
        exit_code: int | None = None,
        compiler_output: str = "",
    ) -> WorkflowResult:
        self._enter(state)
        return WorkflowResult(
            state=state,
            error=error,
            exit_code=exit_code,
            states=list(self._states),
            compiler_output=compiler_output,
        )

    def _abort(self, error: ErrorKind) -> WorkflowResult:
        return self._finish(State.ABORTED, error)

    def _refuse_overwrite(self, target: CompileTarget) -> WorkflowResult:
        # A source without an extension would be its own executable
        self.channel.show_error(
            f'"{target.source_path}" has no extension; the executable would overwrite it!'
        )
        return self._abort(ErrorKind.OUTPUT_IS_SOURCE)

    # -- entry point -------------------------------------------------------

    def execute(self, action: Action, document: SourceDocument) -> WorkflowResult:
        """Perform *action* on *document*."""
        self._states = [State.IDLE]

        if action.compiles:
            return self._compile(document, action)

        language = language_for(document.path, document.language_id)
        if language is None:
            return self._abort(ErrorKind.UNSUPPORTED_LANGUAGE)
        target = CompileTarget.from_source(document.path, language, self.platform)
        if target.output_path == target.source_path:
            return self._refuse_overwrite(target)
        return self._run(target, with_args=action.custom_args)

    # -- compile -----------------------------------------------------------

    def _compile(self, document: SourceDocument, action: Action) -> WorkflowResult:
        if self.config.save_before_compile:
            self._enter(State.SAVING)
            try:
                document.save()
            except OSError as e:
                self.channel.show_error(f"Could not save {document.path}: {e}")
                return self._abort(ErrorKind.SAVE_FAILED)

        self._enter(State.RESOLVING_COMPILER)
        language = language_for(document.path, document.language_id)
        if language is None:
            return self._abort(ErrorKind.UNSUPPORTED_LANGUAGE)
        target = CompileTarget.from_source(document.path, language, self.platform)
        if target.output_path == target.source_path:
            return self._refuse_overwrite(target)

        compiler = self._resolve_compiler(language)
        if compiler is None:
            return self._abort(ErrorKind.COMPILER_NOT_FOUND)

        flags = compiler.default_flags
        if action.custom_flags:
            self._enter(State.AWAITING_FLAGS)
            answer = self.prompter.prompt_flags(compiler.default_flags)
            if isinstance(answer, Cancelled):
                return self._abort(ErrorKind.PROMPT_CANCELLED)
            flags = answer.value

        self._enter(State.COMPILING)
        result = run_compiler(
            compiler.executable_path, target.source_path, target.output_path, flags, self.channel
        )

        if not result.succeeded:
            self.channel.show_error("Error compiling!")
            return self._finish(
                State.COMPILE_FAILED, ErrorKind.COMPILE_FAILED, compiler_output=result.output
            )

        self._enter(State.COMPILE_SUCCEEDED)
        self.channel.show_info("Compiled successfully!")
        if not action.runs:
            return self._finish(State.DONE, compiler_output=result.output)

        run_result = self._run(target, with_args=action.custom_args)
        run_result.compiler_output = result.output
        return run_result

    def _resolve_compiler(self, language: LanguageKind) -> CompilerConfig | None:
        """Resolve the compiler, offering one chance to fix an unreachable path."""
        compiler = resolve(language, self.config)
        if is_reachable(compiler.executable_path):
            return compiler

        self.channel.show_error("Compiler not found, try to change path in settings!")
        if not self.prompter.confirm_change_path():
            return None
        answer = self.prompter.prompt_path()
        if isinstance(answer, Cancelled) or not answer.value:
            return None

        try:
            self.persist(self.config, compiler.setting_key, answer.value)
        except (ConfigError, OSError) as e:
            self.channel.show_error(f"Could not save compiler path: {e}")
            return None
        attr, _ = SETTINGS[compiler.setting_key]
        self.config = replace(self.config, **{attr: answer.value})

        compiler = resolve(language, self.config)
        if is_reachable(compiler.executable_path):
            return compiler
        self.channel.show_error(f"Compiler not found: {compiler.executable_path}")
        return None

    # -- run ---------------------------------------------------------------

    def _run(self, target: CompileTarget, *, with_args: bool) -> WorkflowResult:
        self._enter(State.RUNNING)
        output = target.output_path
        if not output.exists():
            self.channel.show_error(f'"{output}" doesn\'t exist!')
            return self._abort(ErrorKind.OUTPUT_MISSING)

        run_args = self.config.run_args
        if with_args:
            answer = self.prompter.prompt_run_args(self.config.run_args)
            if isinstance(answer, Cancelled):
                return self._abort(ErrorKind.PROMPT_CANCELLED)
            run_args = answer.value

        spec = RunSpec(output.name, str(output.parent), run_args, platform=self.platform)

        if self.config.run_in_external_terminal and self.external.launch(spec):
            return self._finish(State.DONE)
        return self._finish(State.DONE, exit_code=self.integrated.run(spec))
