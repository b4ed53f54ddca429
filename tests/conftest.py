"""Shared fixtures: keep tests away from the real per-user settings file."""

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def user_config(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> Path:
    path = tmp_path_factory.mktemp("appdir") / "config.toml"
    monkeypatch.setattr("compilerun.config.user_config_path", lambda: path)
    monkeypatch.setattr("compilerun.cfg.user_config_path", lambda: path)
    return path
