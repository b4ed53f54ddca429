"""Compiler resolution: which compiler and flags to use for a source file."""

from __future__ import annotations

import enum
import shutil
from dataclasses import dataclass
from pathlib import Path

from compilerun.config import RunConfig


class LanguageKind(enum.Enum):
    C = "c"
    CPP = "cpp"


@dataclass(frozen=True)
class CompilerConfig:
    """Compiler executable plus its default flags string."""

    executable_path: str
    default_flags: str
    # Settings key the executable came from, used when persisting a new path
    setting_key: str


# Editor-style language identifiers (the ``cc`` family is treated as C++)
_LANGUAGE_IDS: dict[str, LanguageKind] = {
    "c": LanguageKind.C,
    "cpp": LanguageKind.CPP,
    "cc": LanguageKind.CPP,
    "cxx": LanguageKind.CPP,
    "c++": LanguageKind.CPP,
}

_SUFFIXES: dict[str, LanguageKind] = {
    ".c": LanguageKind.C,
    ".cpp": LanguageKind.CPP,
    ".cc": LanguageKind.CPP,
    ".cxx": LanguageKind.CPP,
    ".c++": LanguageKind.CPP,
}


def language_for(path: Path, language_id: str | None = None) -> LanguageKind | None:
    """Return the language of a document, or ``None`` if unsupported.

    An explicit *language_id* wins over the file suffix.  Upper-case ``.C``
    is the traditional C++ suffix and is matched case-sensitively.
    """
    if language_id is not None:
        return _LANGUAGE_IDS.get(language_id.strip().lower())
    if path.suffix == ".C":
        return LanguageKind.CPP
    return _SUFFIXES.get(path.suffix.lower())


def resolve(kind: LanguageKind, cfg: RunConfig) -> CompilerConfig:
    """Return the configured compiler for *kind*."""
    if kind is LanguageKind.C:
        return CompilerConfig(cfg.c_compiler, cfg.c_flags, "c-compiler")
    return CompilerConfig(cfg.cpp_compiler, cfg.cpp_flags, "cpp-compiler")


def is_reachable(path: str) -> bool:
    """True if *path* names an executable on PATH or an existing executable file."""
    if not path or not path.strip():
        return False
    return shutil.which(path) is not None
