"""Windows Subsystem for Linux enablement and distribution installs."""
from __future__ import annotations

import logging
import shutil
from pathlib import Path

from services.installer import AdapterUnreachable, CommandExecutionResult
from services.system_config import ApplyStepResult, CommandRunner, SubprocessRunner, format_command_detail
from win11_provision.constants import CatalogEntry, DistributionOption

logger = logging.getLogger(__name__)

DISTRIBUTION_CATEGORY = "Linux distribution"


class WslError(AdapterUnreachable):
    pass


class WslClient:
    """Package-manager style adapter over wsl.exe, keyed by distribution name."""

    def __init__(self, executable: str | None = None, *, command_runner: CommandRunner | None = None) -> None:
        exe_path = executable or shutil.which("wsl")
        self._executable = Path(exe_path) if exe_path else None
        self._runner = command_runner or SubprocessRunner(encoding="utf-8")

    def is_available(self) -> bool:
        return self._executable is not None

    def is_subsystem_enabled(self) -> bool:
        return self._run(["--status"]).returncode == 0

    def enable_subsystem(self) -> CommandExecutionResult:
        return self._run(["--install", "--no-distribution"])

    def installed_distributions(self) -> list[str]:
        result = self._run(["--list", "--quiet"])
        if result.returncode != 0:
            return []
        names: list[str] = []
        for line in _clean_wsl_output(result.stdout).splitlines():
            name = line.strip()
            if name:
                names.append(name)
        return names

    def is_installed(self, entry: CatalogEntry) -> bool:
        wanted = entry.identifier.lower()
        return any(name.lower() == wanted for name in self.installed_distributions())

    def install(self, entry: CatalogEntry) -> CommandExecutionResult:
        logger.info("Installing WSL distribution %s", entry.identifier)
        return self._run(["--install", "--distribution", entry.identifier, "--no-launch"])

    def _run(self, args: list[str]) -> CommandExecutionResult:
        if not self._executable:
            raise WslError("wsl executable not found in PATH")
        cmd = [str(self._executable), *args]
        try:
            completed = self._runner.run(cmd)
        except OSError as exc:
            raise WslError(f"wsl could not be started: {exc}") from exc
        return CommandExecutionResult(
            cmd,
            completed.returncode,
            _clean_wsl_output(completed.stdout or ""),
            _clean_wsl_output(completed.stderr or ""),
        )


class WslSubsystemConfigurator:
    name = "WSL"

    def __init__(self, client: WslClient) -> None:
        self._client = client

    def apply(self) -> ApplyStepResult:
        if not self._client.is_available():
            return ApplyStepResult(self.name, False, "wsl executable not found")
        if self._client.is_subsystem_enabled():
            return ApplyStepResult(self.name, True, "already enabled")
        result = self._client.enable_subsystem()
        return ApplyStepResult(self.name, result.succeeded, format_command_detail(result))


def distribution_entry(option: DistributionOption) -> CatalogEntry:
    return CatalogEntry(option.name, option.friendly_name, DISTRIBUTION_CATEGORY)


def resolve_distribution(name: str, options: tuple[DistributionOption, ...]) -> DistributionOption:
    for option in options:
        if option.name.lower() == name.lower():
            return option
    return DistributionOption(name, name)


def _clean_wsl_output(text: str) -> str:
    # wsl.exe writes UTF-16LE, which shows up as NUL-interleaved text.
    return text.replace("\x00", "").replace("\ufeff", "").replace("\ufffd", "")
