"""Tests for compilerun doctor diagnostic command."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from compilerun.config import CONFIG_FILENAME, RunConfig
from compilerun.doctor import (
    _FAIL,
    _PASS,
    _WARN,
    CheckResult,
    DoctorReport,
    app,
    check_compiler,
    check_config_parse,
    check_external_terminal,
    run_doctor,
)
from compilerun.resolver import LanguageKind

runner = CliRunner()


class TestCheckResult:
    def test_to_dict_minimal(self) -> None:
        d = CheckResult(name="test", status=_PASS, message="ok").to_dict()
        assert d == {"name": "test", "status": _PASS, "message": "ok"}

    def test_to_dict_with_fix(self) -> None:
        d = CheckResult(name="test", status=_FAIL, message="bad", fix="do X").to_dict()
        assert d["fix"] == "do X"


class TestDoctorReport:
    def test_empty_report_passes(self) -> None:
        r = DoctorReport()
        assert r.passed is True
        assert r.pass_count == 0

    def test_one_fail(self) -> None:
        r = DoctorReport(
            checks=[
                CheckResult(name="a", status=_PASS, message="ok"),
                CheckResult(name="b", status=_FAIL, message="bad"),
            ]
        )
        assert r.passed is False
        assert r.fail_count == 1

    def test_warn_still_passes(self) -> None:
        r = DoctorReport(checks=[CheckResult(name="a", status=_WARN, message="hmm")])
        assert r.passed is True
        assert r.warn_count == 1

    def test_to_dict(self) -> None:
        r = DoctorReport(config_file="x.toml", checks=[CheckResult("a", _PASS, "ok")])
        d = r.to_dict()
        assert d["config_file"] == "x.toml"
        assert d["summary"] == {"pass": 1, "fail": 0, "warn": 0}


class TestCheckConfigParse:
    def test_defaults(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        result, cfg = check_config_parse(None)
        assert result.status == _PASS
        assert "built-in defaults" in result.message
        assert cfg == RunConfig()

    def test_invalid_file(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("mystery = true\n", encoding="utf-8")
        result, cfg = check_config_parse(path)
        assert result.status == _FAIL
        assert cfg is None
        assert result.fix


class TestCheckCompiler:
    def test_found(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("compilerun.doctor.is_reachable", lambda path: True)
        result = check_compiler(RunConfig(), LanguageKind.C)
        assert result.status == _PASS
        assert result.name == "C compiler"
        assert "gcc" in result.message

    def test_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("compilerun.doctor.is_reachable", lambda path: False)
        result = check_compiler(RunConfig(cpp_compiler="nope++"), LanguageKind.CPP)
        assert result.status == _FAIL
        assert "nope++" in result.message
        assert "cpp-compiler" in result.fix


class TestCheckExternalTerminal:
    def test_disabled(self) -> None:
        assert check_external_terminal(RunConfig()).status == _PASS

    def test_linux_without_emulator(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("compilerun.terminal.shutil.which", lambda name: None)
        result = check_external_terminal(RunConfig(run_in_external_terminal=True), "linux")
        assert result.status == _WARN

    def test_windows_always_available(self) -> None:
        result = check_external_terminal(RunConfig(run_in_external_terminal=True), "win32")
        assert result.status == _PASS


class TestRunDoctor:
    def test_stops_after_bad_config(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("c-flags = 1\n", encoding="utf-8")
        report = run_doctor(path)
        assert len(report.checks) == 1
        assert not report.passed

    def test_all_checks(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("compilerun.doctor.is_reachable", lambda path: True)
        report = run_doctor()
        assert [c.name for c in report.checks] == [
            "Settings",
            "C compiler",
            "C++ compiler",
            "External terminal",
        ]
        assert report.passed
        assert report.config_file == "(defaults)"


class TestCLI:
    def test_json(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("compilerun.doctor.is_reachable", lambda path: True)
        result = runner.invoke(app, ["--json"])
        assert result.exit_code == 0
        assert json.loads(result.output)["passed"] is True

    def test_failure_exit_code(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("compilerun.doctor.is_reachable", lambda path: False)
        result = runner.invoke(app, [])
        assert result.exit_code == 1
        assert "Fix:" in result.output
