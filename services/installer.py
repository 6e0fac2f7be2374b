"""Package installation orchestration."""
from __future__ import annotations

import enum
import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Protocol, Sequence

from services.system_config import CommandRunner, SubprocessRunner
from win11_provision.constants import WINGET_EXIT_CODES, CatalogEntry, ExitCodeMap

logger = logging.getLogger(__name__)


@dataclass
class CommandExecutionResult:
    command: Sequence[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        parts = [part.strip() for part in (self.stdout, self.stderr) if part and part.strip()]
        return "\n".join(parts)


class AdapterUnreachable(RuntimeError):
    """The package manager itself cannot be invoked."""

    # Entries finished before the adapter was lost, when raised mid-run.
    report: InstallationReport | None = None


class WingetError(AdapterUnreachable):
    pass


class OutcomeKind(enum.Enum):
    ALREADY_INSTALLED = "already_installed"
    ALREADY_LATEST = "already_latest"
    INSTALLED = "installed"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass(frozen=True)
class InstallOutcome:
    kind: OutcomeKind
    detail: str = ""
    exit_code: int | None = None


@dataclass(frozen=True)
class EntryResult:
    entry: CatalogEntry
    outcome: InstallOutcome


@dataclass
class InstallationReport:
    results: list[EntryResult] = field(default_factory=list)

    def append(self, entry: CatalogEntry, outcome: InstallOutcome) -> EntryResult:
        result = EntryResult(entry, outcome)
        self.results.append(result)
        return result

    def counts(self) -> dict[OutcomeKind, int]:
        tally = {kind: 0 for kind in OutcomeKind}
        for result in self.results:
            tally[result.outcome.kind] += 1
        return tally

    def failures(self) -> list[EntryResult]:
        return [result for result in self.results if result.outcome.kind is OutcomeKind.FAILED]

    def __len__(self) -> int:
        return len(self.results)

    def __iter__(self):
        return iter(self.results)


class PackageManagerAdapter(Protocol):
    def is_available(self) -> bool:  # pragma: no cover - protocol
        ...

    def is_installed(self, entry: CatalogEntry) -> bool:  # pragma: no cover - protocol
        ...

    def install(self, entry: CatalogEntry) -> CommandExecutionResult:  # pragma: no cover - protocol
        ...


class WingetClient:
    """Thin wrapper around the winget CLI."""

    def __init__(self, executable: str | None = None, *, command_runner: CommandRunner | None = None):
        exe_path = executable or shutil.which("winget")
        if not exe_path:
            fallback = self._find_winget_fallback()
            exe_path = str(fallback) if fallback else None
        self._executable = Path(exe_path) if exe_path else None
        self._runner = command_runner or SubprocessRunner(encoding="utf-8")

    @property
    def executable(self) -> Path | None:
        return self._executable

    def is_available(self) -> bool:
        return self._executable is not None

    def is_installed(self, entry: CatalogEntry) -> bool:
        cmd = self._build_base_command("list", entry.identifier, entry.source)
        result = self._run(cmd)
        if result.returncode != 0:
            return False
        return entry.identifier.lower() in result.stdout.lower()

    def install(self, entry: CatalogEntry) -> CommandExecutionResult:
        return self.install_package(entry.identifier, source=entry.source)

    def install_package(
        self,
        package_id: str,
        *,
        source: str | None = None,
        override: str | None = None,
        silent: bool = True,
    ) -> CommandExecutionResult:
        cmd = self._build_base_command("install", package_id, source)
        if silent:
            cmd.append("--silent")
        cmd.extend(["--accept-package-agreements", "--accept-source-agreements"])
        if override:
            cmd.extend(["--override", override])
        return self._run(cmd)

    def update_sources(self, name: str | None = None) -> CommandExecutionResult | None:
        if not self._executable:
            return None
        cmd = [str(self._executable), "source", "update"]
        if name:
            cmd.extend(["--name", name])
        return self._run(cmd)

    def _build_base_command(self, verb: str, package_id: str, source: str | None) -> list[str]:
        if not self._executable:
            raise WingetError("winget executable not found in PATH")
        cmd = [str(self._executable), verb, "--id", package_id, "--exact"]
        if source:
            cmd.extend(["--source", source])
        if verb == "list":
            cmd.append("--accept-source-agreements")
        return cmd

    def _run(self, cmd: list[str]) -> CommandExecutionResult:
        try:
            completed = self._runner.run(cmd)
        except OSError as exc:
            raise WingetError(f"winget could not be started: {exc}") from exc
        return CommandExecutionResult(cmd, completed.returncode, completed.stdout or "", completed.stderr or "")

    def _find_winget_fallback(self) -> Path | None:
        local_appdata = os.environ.get("LOCALAPPDATA")
        if local_appdata:
            candidate = Path(local_appdata) / "Microsoft" / "WindowsApps" / "winget.exe"
            if candidate.exists():
                return candidate
        program_files = os.environ.get("ProgramFiles")
        if program_files:
            base = Path(program_files) / "WindowsApps"
            try:
                candidates = list(base.glob("Microsoft.DesktopAppInstaller_*_x64__8wekyb3d8bbwe/winget.exe"))
            except OSError:
                candidates = []
            for candidate in candidates:
                if candidate.exists():
                    return candidate
        return None


StartCallback = Callable[[int, CatalogEntry], None]
ResultCallback = Callable[[int, EntryResult], None]


class InstallerService:
    """Drives catalog entries through a package manager adapter, one at a time."""

    def __init__(self, adapter: PackageManagerAdapter, *, exit_codes: ExitCodeMap = WINGET_EXIT_CODES) -> None:
        self._adapter = adapter
        self._exit_codes = exit_codes

    def run(
        self,
        entries: Iterable[CatalogEntry],
        *,
        on_start: StartCallback | None = None,
        on_result: ResultCallback | None = None,
    ) -> InstallationReport:
        if not self._adapter.is_available():
            raise AdapterUnreachable("package manager is not available")
        report = InstallationReport()
        for index, entry in enumerate(entries):
            if on_start:
                on_start(index, entry)
            try:
                outcome = self._install_entry(entry)
            except AdapterUnreachable as exc:
                exc.report = report
                raise
            result = report.append(entry, outcome)
            logger.debug("%s -> %s", entry.identifier, outcome.kind.value)
            if on_result:
                on_result(index, result)
        return report

    def classify(self, result: CommandExecutionResult) -> InstallOutcome:
        code = to_signed_exit_code(result.returncode)
        if code == 0:
            return InstallOutcome(OutcomeKind.INSTALLED, exit_code=code)
        if code in self._exit_codes.not_found:
            return InstallOutcome(OutcomeKind.NOT_FOUND, exit_code=code)
        if code in self._exit_codes.already_latest:
            return InstallOutcome(OutcomeKind.ALREADY_LATEST, exit_code=code)
        if code in self._exit_codes.also_installed:
            return InstallOutcome(OutcomeKind.ALREADY_INSTALLED, exit_code=code)
        detail = result.output or f"exit code {code}"
        return InstallOutcome(OutcomeKind.FAILED, detail=detail, exit_code=code)

    def _install_entry(self, entry: CatalogEntry) -> InstallOutcome:
        if self._adapter.is_installed(entry):
            return InstallOutcome(OutcomeKind.ALREADY_INSTALLED)
        logger.info("Installing %s (%s)", entry.display_name, entry.identifier)
        try:
            result = self._adapter.install(entry)
        except AdapterUnreachable:
            raise
        except Exception as exc:  # recorded against this entry only
            logger.exception("Install of %s raised", entry.identifier)
            return InstallOutcome(OutcomeKind.FAILED, detail=str(exc))
        return self.classify(result)


def to_signed_exit_code(code: int) -> int:
    # Windows reports HRESULT exit codes as unsigned 32-bit values.
    if code > 0x7FFFFFFF:
        return code - (1 << 32)
    return code
