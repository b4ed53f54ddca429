"""Compiler invocation for compilerun.

Builds the compiler command line, spawns the compiler, streams its combined
stdout/stderr to the output channel as it arrives, and classifies the
result.

Command shape
~~~~~~~~~~~~~
Always ``<compiler> <source> -o <output> <flags...>``.  Flags come last so
that linker options such as ``-lm`` follow the source file.

Success
~~~~~~~
Exit code 0 *and* no literal ``ERROR`` in the captured output.  The
substring check misclassifies a successful build whose output happens to
contain ``ERROR`` (for instance a ``#warning ERROR ...`` directive).
"""

import subprocess
from dataclasses import dataclass
from pathlib import Path

from compilerun.output import OutputChannel
from compilerun.utils import split_args

ERROR_MARKER = "ERROR"


@dataclass(frozen=True)
class CompileResult:
    returncode: int
    output: str

    @property
    def succeeded(self) -> bool:
        return is_success(self.returncode, self.output)


def is_success(returncode: int, output: str) -> bool:
    """Return True for exit code 0 with no ``ERROR`` marker in *output*."""
    return returncode == 0 and ERROR_MARKER not in output


def build_command(
    compiler: str, source_path: str | Path, output_path: str | Path, flags: str
) -> list[str]:
    """Build ``[compiler, source, "-o", output, *flags]``."""
    return [compiler, str(source_path), "-o", str(output_path)] + split_args(flags)


def run_compiler(
    compiler: str,
    source_path: str | Path,
    output_path: str | Path,
    flags: str,
    channel: OutputChannel,
) -> CompileResult:
    """Compile *source_path* and stream output to *channel*.

    No timeout is applied; the compiler runs to completion.  A failure to
    spawn at all (the compiler vanished after the reachability check, or is
    not executable) is reported through the channel and returned as exit
    code 127.
    """
    source_path = Path(source_path)
    tag = source_path.name
    cmd = build_command(compiler, source_path, output_path, flags)

    try:
        proc = subprocess.Popen(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
        )
    except OSError as e:
        msg = f"Failed to run compiler: {e}"
        channel.append_line(msg, tag)
        return CompileResult(127, msg)

    captured: list[str] = []
    assert proc.stdout is not None
    with proc.stdout:
        for line in proc.stdout:
            captured.append(line)
            channel.append_line(line, tag)
    returncode = proc.wait()
    return CompileResult(returncode, "".join(captured))
