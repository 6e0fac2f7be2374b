"""Command execution seam and post-install system configurators."""
from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Iterable, Protocol, Sequence

logger = logging.getLogger(__name__)


@dataclass
class ApplyStepResult:
    name: str
    success: bool
    detail: str = ""


class CommandRunner(Protocol):
    def run(self, command: Sequence[str]) -> subprocess.CompletedProcess[str]:  # pragma: no cover - protocol
        ...


class SubprocessRunner:
    def __init__(self, *, encoding: str | None = None) -> None:
        self._encoding = encoding

    def run(self, command: Sequence[str]) -> subprocess.CompletedProcess[str]:
        logger.debug("RUN: %s", subprocess.list2cmdline(list(command)))
        return subprocess.run(
            list(command),
            capture_output=True,
            text=True,
            encoding=self._encoding,
            errors="replace",
            check=False,
        )


class SystemConfigurator(Protocol):
    """A one-shot OS configuration step run after package installation."""

    name: str

    def apply(self) -> ApplyStepResult:  # pragma: no cover - protocol
        ...


def apply_configurators(configurators: Iterable[SystemConfigurator]) -> list[ApplyStepResult]:
    results: list[ApplyStepResult] = []
    for configurator in configurators:
        try:
            result = configurator.apply()
        except Exception as exc:  # surfaced as a failed step
            logger.exception("Configurator %s raised", configurator.name)
            result = ApplyStepResult(configurator.name, False, str(exc))
        level = logging.INFO if result.success else logging.ERROR
        status = "OK" if result.success else "FAILED"
        detail = f" - {result.detail}" if result.detail else ""
        logger.log(level, "%s: %s%s", result.name, status, detail)
        results.append(result)
    return results


class CommandOutcome(Protocol):
    returncode: int
    stdout: str
    stderr: str


def format_command_detail(completed: CommandOutcome) -> str:
    detail_parts = [f"exit={completed.returncode}"]
    stdout = (completed.stdout or "").strip()
    stderr = (completed.stderr or "").strip()
    if stdout:
        detail_parts.append(f"stdout: {stdout}")
    if stderr:
        detail_parts.append(f"stderr: {stderr}")
    return ", ".join(detail_parts)
