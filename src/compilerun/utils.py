"""Shared utilities for compilerun."""

import contextlib
import os
import shlex
from pathlib import Path


def atomic_write_text(filepath: Path, text: str, encoding: str = "utf-8") -> None:
    """Write text to a file atomically to prevent corruption on crash."""
    tmp_path = filepath.with_suffix(filepath.suffix + ".tmp")
    try:
        tmp_path.write_text(text, encoding=encoding)
        os.replace(tmp_path, filepath)
    except BaseException:
        with contextlib.suppress(OSError):
            tmp_path.unlink()
        raise


def split_args(text: str) -> list[str]:
    """Split a flags/arguments string into argv tokens.

    Quoted values (``-DNAME="a b"``) stay together.  Unbalanced quotes fall
    back to plain whitespace splitting.  An empty or blank string yields no
    tokens.
    """
    try:
        return shlex.split(text)
    except ValueError:
        return text.split()
