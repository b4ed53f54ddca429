"""Interactive prompts for flags, run arguments and compiler paths.

Every prompt returns a :data:`PromptResult`: either an :class:`Answer`
(possibly holding an empty string, meaning "no flags") or :data:`CANCELLED`.
Callers must check for cancellation explicitly; there is no ``None``.

On interactive terminals with GNU readline the default value is pre-filled
in the input line so it can be edited or erased.  Otherwise the default is
shown in brackets, an empty reply keeps it and a lone ``-`` clears it.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Callable, Union

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm

try:
    import readline
except ImportError:  # Windows
    readline = None  # type: ignore[assignment]

# Reply that clears a bracketed default
CLEAR_REPLY = "-"


@dataclass(frozen=True)
class Answer:
    value: str


class Cancelled:
    """The user dismissed a prompt (Ctrl-C / Ctrl-D)."""

    def __repr__(self) -> str:
        return "CANCELLED"


CANCELLED = Cancelled()

PromptResult = Union[Answer, Cancelled]


class Prompter:
    """Prompts on a rich console.

    ``flags`` / ``run_args`` pre-answer the corresponding prompt, which lets
    the custom actions run non-interactively from scripts.
    """

    def __init__(
        self,
        console: Console | None = None,
        *,
        flags: str | None = None,
        run_args: str | None = None,
        input_func: Callable[[str], str] | None = None,
    ) -> None:
        self.console = console or Console()
        self._flags = flags
        self._run_args = run_args
        self._input = input_func

    def _ask(self, label: str, default: str = "", placeholder: str = "") -> PromptResult:
        prefill = readline is not None and self._input is None and sys.stdin.isatty()
        if prefill and default:
            readline.set_startup_hook(lambda: readline.insert_text(default))
        hint = ""
        if not prefill and default:
            hint = f" [{default}, {CLEAR_REPLY} for none]"
        elif placeholder and not default:
            hint = f" (e.g. {placeholder})"
        try:
            if self._input is not None:
                reply = self._input(f"{label}{hint}: ")
            else:
                reply = self.console.input(f"[bold]{label}[/bold]{escape(hint)}: ", emoji=False)
        except (EOFError, KeyboardInterrupt):
            self.console.print()
            return CANCELLED
        finally:
            if prefill and default:
                readline.set_startup_hook()
        if not prefill and default:
            if reply == "":
                reply = default
            elif reply.strip() == CLEAR_REPLY:
                reply = ""
        return Answer(reply.strip())

    def prompt_flags(self, default_flags: str) -> PromptResult:
        if self._flags is not None:
            return Answer(self._flags)
        return self._ask("Flags", default_flags, placeholder="-Wall -Wextra")

    def prompt_run_args(self, default_args: str) -> PromptResult:
        if self._run_args is not None:
            return Answer(self._run_args)
        return self._ask("Arguments", default_args)

    def prompt_path(self) -> PromptResult:
        return self._ask("Path", placeholder="/usr/bin/gcc")

    def confirm_change_path(self) -> bool:
        """Offer to change the compiler path; False on refusal or cancel."""
        try:
            return Confirm.ask("Change path?", console=self.console, default=True)
        except (EOFError, KeyboardInterrupt):
            self.console.print()
            return False
