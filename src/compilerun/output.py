"""Output channel: append-only compiler log plus transient notifications."""

from __future__ import annotations

from rich.console import Console
from rich.text import Text


class OutputChannel:
    """Console log tagged per source file.

    Compiler output is printed verbatim (no markup, emoji codes or
    highlighting) with a ``[file.c]`` tag; notifications go to stderr so they
    stay visible when stdout is redirected.
    """

    def __init__(self, console: Console | None = None, err_console: Console | None = None) -> None:
        self.console = console or Console(highlight=False, emoji=False)
        self.err_console = err_console or Console(stderr=True, highlight=False, emoji=False)
        self.lines: list[tuple[str, str]] = []

    def append_line(self, text: str, source: str) -> None:
        line = text.rstrip("\r\n")
        self.lines.append((source, line))
        # Text is never parsed for markup or ":name:" emoji codes
        self.console.print(Text.assemble((f"[{source}]", "dim"), " ", line), soft_wrap=True)

    def show_info(self, message: str) -> None:
        self.err_console.print(Text.assemble(("info:", "green bold"), " ", message), soft_wrap=True)

    def show_error(self, message: str) -> None:
        self.err_console.print(Text.assemble(("error:", "red bold"), " ", message), soft_wrap=True)
