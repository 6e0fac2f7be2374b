from __future__ import annotations

import logging
import subprocess
import sys

from services.installer import CommandExecutionResult
from services.system_config import ApplyStepResult, SubprocessRunner, apply_configurators, format_command_detail


class FakeConfigurator:
    def __init__(self, name: str, success: bool = True, detail: str = "") -> None:
        self.name = name
        self.success = success
        self.detail = detail
        self.calls = 0

    def apply(self) -> ApplyStepResult:
        self.calls += 1
        return ApplyStepResult(self.name, self.success, self.detail)


class ExplodingConfigurator:
    name = "Theme"

    def apply(self) -> ApplyStepResult:
        raise PermissionError("registry access denied")


def test_apply_runs_every_configurator_in_order() -> None:
    first = FakeConfigurator("Time zone", detail="UTC")
    second = FakeConfigurator("Terminal")
    results = apply_configurators([first, second])
    assert [result.name for result in results] == ["Time zone", "Terminal"]
    assert all(result.success for result in results)
    assert first.calls == 1 and second.calls == 1


def test_exception_becomes_failed_step_and_later_steps_run() -> None:
    later = FakeConfigurator("Taskbar")
    results = apply_configurators([ExplodingConfigurator(), later])
    assert results[0] == ApplyStepResult("Theme", False, "registry access denied")
    assert results[1].success
    assert later.calls == 1


def test_results_are_logged_by_outcome(caplog) -> None:
    caplog.set_level(logging.INFO, logger="services.system_config")
    apply_configurators([FakeConfigurator("Time zone", detail="UTC"), FakeConfigurator("Terminal", success=False, detail="no settings file")])
    records = [(record.levelno, record.getMessage()) for record in caplog.records if record.name == "services.system_config"]
    assert (logging.INFO, "Time zone: OK - UTC") in records
    assert (logging.ERROR, "Terminal: FAILED - no settings file") in records


def test_format_command_detail() -> None:
    result = CommandExecutionResult(["wsl"], 1, " done \n", "")
    assert format_command_detail(result) == "exit=1, stdout: done"
    completed = subprocess.CompletedProcess(["x"], 0, "", "warn")
    assert format_command_detail(completed) == "exit=0, stderr: warn"


def test_subprocess_runner_captures_output() -> None:
    completed = SubprocessRunner().run([sys.executable, "-c", "import sys; print('hi'); sys.exit(3)"])
    assert completed.returncode == 3
    assert completed.stdout.strip() == "hi"
