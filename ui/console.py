"""Interactive console surface: catalog table, prompts, status lines, progress."""
from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Sequence, TextIO

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn, TimeElapsedColumn
from rich.prompt import Prompt
from rich.table import Table
from rich.text import Text

from services.installer import EntryResult, ResultCallback, StartCallback
from services.reporting import OutcomeReporter, ReportLine, ReportTheme
from services.system_config import ApplyStepResult
from ui.theme import NORD_REPORT_THEME, NordColors, build_console_theme
from win11_provision.constants import CatalogEntry, DistributionOption

APP_NAME = "Windows 11 Provisioning"
APP_SUBTITLE = "winget package catalog, WSL and post-install setup"


@dataclass
class InstallCallbacks:
    on_start: StartCallback | None = None
    on_result: ResultCallback | None = None


class ProvisionConsole:
    def __init__(
        self,
        console: Console | None = None,
        *,
        report_theme: ReportTheme = NORD_REPORT_THEME,
        input_stream: TextIO | None = None,
    ) -> None:
        self._console = console or Console(theme=build_console_theme(), highlight=False)
        self._report_theme = report_theme
        self._input_stream = input_stream

    @property
    def report_theme(self) -> ReportTheme:
        return self._report_theme

    def print_header(self) -> None:
        self._console.print(
            Panel(
                f"[bold {NordColors.FROST_2}]{APP_NAME}[/]",
                subtitle=f"[{NordColors.SNOW_STORM_1}]{APP_SUBTITLE}[/]",
                border_style=NordColors.FROST_1,
                padding=(1, 2),
            )
        )

    def print_section(self, title: str) -> None:
        self._console.print()
        self._console.print(f"[heading]{escape(title)}[/]")
        self._console.print(f"[heading]{'─' * len(title)}[/]")

    def print_step(self, message: str) -> None:
        self._console.print(f"[step]→ {escape(message)}[/]")

    def print_success(self, message: str) -> None:
        self._console.print(f"[success]✓ {escape(message)}[/]")

    def print_warning(self, message: str) -> None:
        self._console.print(f"[warning]⚠ {escape(message)}[/]")

    def print_error(self, message: str) -> None:
        self._console.print(f"[error]✗ {escape(message)}[/]")

    def print_removed(self, entry: CatalogEntry) -> None:
        self._console.print(f"[removed]✗ Removed: {escape(entry.display_name)}[/]")

    def print_line(self, line: ReportLine) -> None:
        self._console.print(Text(line.text, style=line.style))

    def print_apply_result(self, result: ApplyStepResult) -> None:
        if result.success:
            self.print_success(f"{result.name}: {result.detail}" if result.detail else result.name)
        else:
            self.print_error(f"{result.name}: {result.detail}" if result.detail else f"{result.name} failed")

    def show_catalog(self, catalog: Sequence[CatalogEntry]) -> None:
        table = Table(title="Package catalog", header_style=f"bold {NordColors.FROST_3}", border_style=NordColors.FROST_4)
        table.add_column("#", justify="right", style="index")
        table.add_column("Package")
        table.add_column("Category", style="muted")
        table.add_column("winget id", style="muted")
        for position, entry in enumerate(catalog, start=1):
            identifier = entry.identifier if not entry.source else f"{entry.identifier} ({entry.source})"
            table.add_row(str(position), entry.display_name, entry.category, identifier)
        self._console.print(table)

    def ask_removals(self) -> str:
        return Prompt.ask(
            "Enter package numbers to skip, separated by commas (Enter to install everything)",
            console=self._console,
            default="",
            show_default=False,
            stream=self._input_stream,
        )

    def ask_distribution(self, options: Sequence[DistributionOption]) -> DistributionOption | None:
        self.print_section("Linux distribution (WSL)")
        self._console.print("[index]0[/]: Skip WSL")
        for position, option in enumerate(options, start=1):
            self._console.print(f"[index]{position}[/]: {escape(option.friendly_name)}")
        choices = [str(number) for number in range(len(options) + 1)]
        answer = Prompt.ask(
            "Choose a distribution",
            console=self._console,
            choices=choices,
            default="0",
            stream=self._input_stream,
        )
        choice = int(answer)
        if choice == 0:
            return None
        return options[choice - 1]

    @contextmanager
    def install_progress(
        self,
        total: int,
        reporter: OutcomeReporter,
        *,
        show_progress: bool,
        description: str = "Installing packages",
    ) -> Iterator[InstallCallbacks]:
        if not show_progress:
            yield InstallCallbacks()
            return
        progress = Progress(
            SpinnerColumn(spinner_name="dots", style=f"bold {NordColors.FROST_1}"),
            TextColumn(f"[bold {NordColors.FROST_2}]{{task.description}}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            console=self._console,
            transient=True,
        )
        with progress:
            task = progress.add_task(description, total=total)

            def on_start(index: int, entry: CatalogEntry) -> None:
                progress.update(task, description=f"{escape(entry.display_name)} ({index + 1}/{total})")

            def on_result(index: int, result: EntryResult) -> None:
                self.print_line(reporter.line_for(result))
                progress.advance(task)

            yield InstallCallbacks(on_start, on_result)
