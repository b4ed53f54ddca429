"""Terminal launchers: where a compiled program actually runs.

Two kinds:

``ExternalTerminal``
    Opens a separate OS terminal window and returns immediately
    (fire-and-forget, the program's exit status is never observed).  One
    variant per platform, picked by :func:`external_terminal_for`.  ``launch``
    returns ``False`` when no suitable terminal could be started so the caller
    can fall back to the integrated terminal.

``IntegratedTerminal``
    Runs the program through the shell in the terminal compilerun itself was
    started from and waits for it.
"""

from __future__ import annotations

import shlex
import shutil
import subprocess
import sys

from compilerun.runner import RunSpec

PAUSE_PROMPT = "Press any key to continue..."
_POSIX_PAUSE = f'echo; read -n1 -p "{PAUSE_PROMPT}"'


def _spawn(cmd: list[str] | str, cwd: str, *, shell: bool = False) -> bool:
    """Start *cmd* detached from us; False if it could not be started."""
    kwargs: dict[str, object] = {"cwd": cwd, "shell": shell}
    if sys.platform != "win32":
        kwargs["start_new_session"] = True
    try:
        subprocess.Popen(cmd, **kwargs)  # noqa: S603
    except OSError:
        return False
    return True


class ExternalTerminal:
    """Opens a program in a new terminal window."""

    name = "none"

    def launch(self, run: RunSpec) -> bool:
        return False

    def available(self) -> bool:
        return False


class WindowsTerminal(ExternalTerminal):
    """New console host via ``start``; ``pause`` keeps the window open."""

    name = "cmd"

    def command(self, run: RunSpec) -> str:
        return f'start "{run.get_executable()}" cmd /c "{run.get_executable_with_args()} & echo. & pause"'

    def launch(self, run: RunSpec) -> bool:
        return _spawn(self.command(run), run.get_directory(), shell=True)

    def available(self) -> bool:
        return True


class LinuxTerminal(ExternalTerminal):
    """``gnome-terminal`` if installed, else ``xterm``."""

    name = "gnome-terminal/xterm"
    candidates = ("gnome-terminal", "xterm")

    def find(self) -> str | None:
        for candidate in self.candidates:
            if shutil.which(candidate):
                return candidate
        return None

    def available(self) -> bool:
        return self.find() is not None

    def command(self, run: RunSpec, emulator: str) -> list[str]:
        script = f"{run.get_executable_with_args()} ; {_POSIX_PAUSE}"
        title = run.get_executable()
        if emulator == "gnome-terminal":
            return ["gnome-terminal", "-t", title, "--", "bash", "-c", script]
        return ["xterm", "-T", title, "-e", "bash", "-c", script]

    def launch(self, run: RunSpec) -> bool:
        for emulator in self.candidates:
            if shutil.which(emulator) is None:
                continue
            if _spawn(self.command(run, emulator), run.get_directory()):
                return True
        return False


def _applescript_quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


class MacTerminal(ExternalTerminal):
    """Terminal.app driven through ``osascript``."""

    name = "Terminal.app"

    def command(self, run: RunSpec) -> list[str]:
        script = (
            f"cd {shlex.quote(run.get_directory())} && "
            f"{run.get_executable_with_args()} ; {_POSIX_PAUSE}"
        )
        return [
            "osascript",
            "-e",
            f'tell application "Terminal" to do script {_applescript_quote(script)}',
            "-e",
            'tell application "Terminal" to activate',
        ]

    def launch(self, run: RunSpec) -> bool:
        return _spawn(self.command(run), run.get_directory())

    def available(self) -> bool:
        return shutil.which("osascript") is not None


def external_terminal_for(platform: str | None = None) -> ExternalTerminal:
    """Pick the external terminal variant for *platform* (default: this one)."""
    platform = platform or sys.platform
    if platform == "win32":
        return WindowsTerminal()
    if platform.startswith("linux"):
        return LinuxTerminal()
    if platform == "darwin":
        return MacTerminal()
    return ExternalTerminal()


class IntegratedTerminal:
    """Runs the program in the current terminal and waits for it."""

    def run(self, run: RunSpec) -> int:
        try:
            proc = subprocess.run(  # noqa: S602
                run.get_executable_with_args(), shell=True, cwd=run.get_directory()
            )
        except OSError:
            return 127
        return proc.returncode
