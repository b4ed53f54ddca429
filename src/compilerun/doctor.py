"""doctor.py – Diagnostic command for compilerun setup health.

Validates the toolchain in a single command: settings file, C compiler,
C++ compiler, and (when programs run in an external terminal) the terminal
emulator.  Prints a checklist with actionable fix suggestions.

Usage::

    compilerun doctor
    compilerun doctor --json
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import typer

from compilerun.cli import ConfigOption, json_print
from compilerun.config import ConfigError, RunConfig, load_config
from compilerun.resolver import LanguageKind, is_reachable, resolve
from compilerun.terminal import external_terminal_for

# ---------------------------------------------------------------------------
# Check result data
# ---------------------------------------------------------------------------

_PASS = "pass"
_FAIL = "fail"
_WARN = "warn"


@dataclass
class CheckResult:
    """Result of a single diagnostic check."""

    name: str
    status: str  # "pass", "fail", "warn"
    message: str
    fix: str = ""

    def to_dict(self) -> dict[str, str]:
        """Serialize to a plain dict for JSON output."""
        d: dict[str, str] = {
            "name": self.name,
            "status": self.status,
            "message": self.message,
        }
        if self.fix:
            d["fix"] = self.fix
        return d


@dataclass
class DoctorReport:
    """Aggregated results from all diagnostic checks."""

    config_file: str = ""
    checks: list[CheckResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        """True if no checks failed."""
        return all(c.status != _FAIL for c in self.checks)

    @property
    def pass_count(self) -> int:
        return sum(1 for c in self.checks if c.status == _PASS)

    @property
    def fail_count(self) -> int:
        return sum(1 for c in self.checks if c.status == _FAIL)

    @property
    def warn_count(self) -> int:
        return sum(1 for c in self.checks if c.status == _WARN)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict for JSON output."""
        return {
            "config_file": self.config_file,
            "passed": self.passed,
            "summary": {
                "pass": self.pass_count,
                "fail": self.fail_count,
                "warn": self.warn_count,
            },
            "checks": [c.to_dict() for c in self.checks],
        }


# ---------------------------------------------------------------------------
# Individual checks
# ---------------------------------------------------------------------------


def check_config_parse(path: Path | None) -> tuple[CheckResult, RunConfig | None]:
    """Check that the settings file (if any) parses and holds valid values."""
    try:
        cfg = load_config(path=path)
    except ConfigError as e:
        return (
            CheckResult(
                name="Settings",
                status=_FAIL,
                message=str(e),
                fix="Fix the file by hand or reset values with 'compilerun cfg set KEY VALUE'.",
            ),
            None,
        )
    where = str(cfg.source) if cfg.source else "built-in defaults"
    return CheckResult(name="Settings", status=_PASS, message=f"Loaded {where}"), cfg


def check_compiler(cfg: RunConfig, kind: LanguageKind) -> CheckResult:
    """Check that the compiler for *kind* can be found."""
    compiler = resolve(kind, cfg)
    label = "C compiler" if kind is LanguageKind.C else "C++ compiler"
    if is_reachable(compiler.executable_path):
        return CheckResult(
            name=label,
            status=_PASS,
            message=f"{compiler.executable_path} (flags: {compiler.default_flags or 'none'})",
        )
    return CheckResult(
        name=label,
        status=_FAIL,
        message=f"'{compiler.executable_path}' not found in PATH",
        fix=f"Install it or run 'compilerun cfg set {compiler.setting_key} /path/to/compiler'.",
    )


def check_external_terminal(cfg: RunConfig, platform: str | None = None) -> CheckResult:
    """Check that an external terminal exists when runs are sent to one."""
    if not cfg.run_in_external_terminal:
        return CheckResult(
            name="External terminal", status=_PASS, message="Disabled (programs run in this terminal)"
        )
    terminal = external_terminal_for(platform)
    if terminal.available():
        return CheckResult(name="External terminal", status=_PASS, message=terminal.name)
    return CheckResult(
        name="External terminal",
        status=_WARN,
        message="No supported terminal emulator found; programs will run in this terminal",
        fix="Install gnome-terminal or xterm, or 'compilerun cfg set run-in-external-terminal false'.",
    )


# ---------------------------------------------------------------------------
# Main diagnostic runner
# ---------------------------------------------------------------------------


def run_doctor(path: Path | None = None) -> DoctorReport:
    """Run all diagnostic checks and return a report."""
    report = DoctorReport()

    config_result, cfg = check_config_parse(path)
    report.checks.append(config_result)
    if cfg is None:
        report.config_file = str(path) if path else "(unknown)"
        return report
    report.config_file = str(cfg.source) if cfg.source else "(defaults)"

    report.checks.append(check_compiler(cfg, LanguageKind.C))
    report.checks.append(check_compiler(cfg, LanguageKind.CPP))
    report.checks.append(check_external_terminal(cfg))

    return report


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

_EPILOG = """\
[bold]Example:[/bold]

compilerun doctor                Check the current setup

compilerun doctor --json         Machine-readable output

[dim]Validates: settings file, C and C++ compilers, and the external
terminal when run-in-external-terminal is enabled.[/dim]"""

_STATUS_ICONS = {
    _PASS: "✅",
    _FAIL: "❌",
    _WARN: "⚠️",
}

app = typer.Typer(
    help="Diagnostic checks for the compile/run toolchain.",
    rich_markup_mode="rich",
    epilog=_EPILOG,
)


@app.callback(invoke_without_command=True)
def main(
    config: Path | None = ConfigOption,
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON"),
) -> None:
    """Run diagnostic checks on the compile/run setup."""
    report = run_doctor(config)

    if json_output:
        json_print(report.to_dict())
    else:
        print(f"\ncompilerun doctor: settings: {report.config_file}")
        print("=" * 60)

        for check in report.checks:
            icon = _STATUS_ICONS.get(check.status, "?")
            print(f"  {icon}  {check.name}: {check.message}")
            if check.fix:
                print(f"       Fix: {check.fix}")

        print("=" * 60)
        parts = []
        if report.pass_count:
            parts.append(f"{report.pass_count} passed")
        if report.fail_count:
            parts.append(f"{report.fail_count} failed")
        if report.warn_count:
            parts.append(f"{report.warn_count} warnings")
        print(f"  {', '.join(parts)}")

        if report.passed:
            print("\n  Ready to compile!\n")
        else:
            print("\n  Issues found. Fix the failures above and re-run.\n")

    if not report.passed:
        raise typer.Exit(code=1)
