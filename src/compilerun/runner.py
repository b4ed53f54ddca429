"""RunSpec: a compiled program ready to execute.

A ``RunSpec`` never runs anything itself.  It only knows how to spell the
command line for the platform; the terminal launchers in
:mod:`compilerun.terminal` do the spawning.
"""

from __future__ import annotations

import shlex
import sys
from dataclasses import dataclass, field


@dataclass(frozen=True)
class RunSpec:
    executable: str
    directory: str
    args: str = ""
    platform: str = field(default_factory=lambda: sys.platform)

    def get_executable(self) -> str:
        return self.executable

    def get_args(self) -> str:
        return self.args

    def get_directory(self) -> str:
        return self.directory

    def qualified_executable(self) -> str:
        """Executable with a relative-path qualifier so the shell finds it in cwd."""
        if self.platform == "win32":
            exe = f".\\{self.executable}"
            return f'"{exe}"' if " " in exe else exe
        return shlex.quote(f"./{self.executable}")

    def get_executable_with_args(self) -> str:
        """Return ``<qualified executable> <args>`` for a shell.

        Arguments are passed through untouched; they are a shell string the
        user typed or configured.
        """
        parts = [self.qualified_executable()]
        if self.args.strip():
            parts.append(self.args.strip())
        return " ".join(parts)
