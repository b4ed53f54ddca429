"""Settings loader for compilerun.

Reads ``compilerun.toml`` and exposes every setting as a plain attribute on
a :class:`RunConfig`.  The config is resolved once per invocation and passed
explicitly to the workflow, so nothing in the tool reads settings from
module-level state.

Lookup order:

1. ``compilerun.toml`` in the current directory or any parent (like ``git``
   locating ``.git/``).
2. The per-user file ``<app dir>/config.toml`` (see :func:`user_config_path`).
3. Built-in defaults.

Example file::

    c-compiler = "clang"
    cpp-flags = "-std=c++20 -Wall -Wextra"
    run-in-external-terminal = true
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import typer

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import,no-redef]

CONFIG_FILENAME = "compilerun.toml"
APP_NAME = "compilerun"


class ConfigError(Exception):
    """Raised when a settings file cannot be read or holds invalid values."""


@dataclass
class RunConfig:
    """Resolved compile/run settings."""

    c_compiler: str = "gcc"
    cpp_compiler: str = "g++"
    save_before_compile: bool = True
    c_flags: str = "-Wall -Wextra"
    cpp_flags: str = "-Wall -Wextra"
    run_args: str = ""
    run_in_external_terminal: bool = False

    # File the values came from; None when only defaults apply
    source: Optional[Path] = None


# TOML key -> (attribute, type)
SETTINGS: Dict[str, tuple[str, type]] = {
    "c-compiler": ("c_compiler", str),
    "cpp-compiler": ("cpp_compiler", str),
    "save-before-compile": ("save_before_compile", bool),
    "c-flags": ("c_flags", str),
    "cpp-flags": ("cpp_flags", str),
    "run-args": ("run_args", str),
    "run-in-external-terminal": ("run_in_external_terminal", bool),
}


def default_values() -> Dict[str, Any]:
    """Return the built-in defaults keyed by TOML setting name."""
    defaults = RunConfig()
    return {key: getattr(defaults, attr) for key, (attr, _) in SETTINGS.items()}


def user_config_path() -> Path:
    """Return the per-user settings file path (it may not exist yet)."""
    return Path(typer.get_app_dir(APP_NAME)) / "config.toml"


def find_config_file(start: Optional[Path] = None) -> Optional[Path]:
    """Walk up from *start* (or cwd) looking for ``compilerun.toml``.

    Falls back to the per-user file when it exists.  Returns ``None`` when
    neither is present.
    """
    candidate = (start or Path.cwd()).resolve()
    while True:
        if (candidate / CONFIG_FILENAME).is_file():
            return candidate / CONFIG_FILENAME
        if candidate == candidate.parent:
            break
        candidate = candidate.parent
    user_path = user_config_path()
    if user_path.is_file():
        return user_path
    return None


def coerce_value(key: str, value: Any) -> Any:
    """Validate *value* for setting *key*, converting strings for bool keys."""
    if key not in SETTINGS:
        raise ConfigError(f"Unknown setting '{key}'.  Known settings: {', '.join(SETTINGS)}")
    _, kind = SETTINGS[key]
    if kind is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in ("true", "yes", "on", "1"):
            return True
        if isinstance(value, str) and value.strip().lower() in ("false", "no", "off", "0"):
            return False
        raise ConfigError(f"Setting '{key}' expects a boolean, got {value!r}")
    if not isinstance(value, str):
        raise ConfigError(f"Setting '{key}' expects a string, got {value!r}")
    return value


def parse_settings(raw: Dict[str, Any], source: Optional[Path] = None) -> RunConfig:
    """Build a :class:`RunConfig` from a parsed TOML mapping.

    Unknown keys are rejected so that typos (``c_compiler`` instead of
    ``c-compiler``) do not silently fall back to defaults.
    """
    cfg = RunConfig(source=source)
    for key, value in raw.items():
        attr, _ = SETTINGS.get(key, (None, None))
        if attr is None:
            where = f" in {source}" if source else ""
            raise ConfigError(f"Unknown setting '{key}'{where}")
        setattr(cfg, attr, coerce_value(key, value))
    return cfg


def load_config(path: Optional[Path] = None, start: Optional[Path] = None) -> RunConfig:
    """Load settings.

    Args:
        path: Explicit settings file.  Auto-detected if ``None``.
        start: Directory to begin the upward search from (default: cwd).
    """
    if path is None:
        path = find_config_file(start)
    if path is None:
        return RunConfig()
    if not path.exists():
        raise ConfigError(f"Config not found: {path}")

    try:
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    return parse_settings(raw, source=path)


def as_dict(cfg: RunConfig) -> Dict[str, Any]:
    """Return the settings of *cfg* keyed by TOML name (no ``source``)."""
    return {key: getattr(cfg, attr) for key, (attr, _) in SETTINGS.items()}

