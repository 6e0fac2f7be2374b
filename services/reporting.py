"""Turns installation reports into status lines, a tally, and log records."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping

from services.installer import EntryResult, InstallationReport, OutcomeKind

logger = logging.getLogger(__name__)

SEVERITY_BY_OUTCOME: Mapping[OutcomeKind, int] = {
    OutcomeKind.FAILED: logging.ERROR,
    OutcomeKind.NOT_FOUND: logging.WARNING,
    OutcomeKind.ALREADY_LATEST: logging.INFO,
    OutcomeKind.INSTALLED: logging.INFO,
    OutcomeKind.ALREADY_INSTALLED: logging.INFO,
}

TALLY_ORDER = (
    OutcomeKind.INSTALLED,
    OutcomeKind.ALREADY_INSTALLED,
    OutcomeKind.ALREADY_LATEST,
    OutcomeKind.NOT_FOUND,
    OutcomeKind.FAILED,
)


@dataclass(frozen=True)
class OutcomeStyle:
    symbol: str
    label: str
    tally_label: str
    style: str = ""


@dataclass(frozen=True)
class ReportTheme:
    outcomes: Mapping[OutcomeKind, OutcomeStyle]
    summary_style: str = ""
    failure_summary_style: str = ""


DEFAULT_REPORT_THEME = ReportTheme(
    outcomes={
        OutcomeKind.INSTALLED: OutcomeStyle("✓", "installed", "Installed"),
        OutcomeKind.ALREADY_INSTALLED: OutcomeStyle("•", "already installed", "Already installed"),
        OutcomeKind.ALREADY_LATEST: OutcomeStyle("•", "already up to date", "Up to date"),
        OutcomeKind.NOT_FOUND: OutcomeStyle("!", "not found in repository, skipped", "Not found"),
        OutcomeKind.FAILED: OutcomeStyle("✗", "failed", "Failed"),
    }
)


@dataclass(frozen=True)
class ReportLine:
    text: str
    level: int
    style: str = ""

    def __str__(self) -> str:
        return self.text


@dataclass
class ReportSummary:
    counts: dict[OutcomeKind, int]
    styled_lines: list[ReportLine] = field(default_factory=list)

    @property
    def lines(self) -> list[str]:
        return [line.text for line in self.styled_lines]

    @property
    def tally(self) -> ReportLine:
        return self.styled_lines[-1]

    @property
    def has_failures(self) -> bool:
        return self.counts.get(OutcomeKind.FAILED, 0) > 0


class OutcomeReporter:
    def __init__(self, theme: ReportTheme = DEFAULT_REPORT_THEME, *, log: logging.Logger | None = None) -> None:
        self._theme = theme
        self._log = log or logger

    def line_for(self, result: EntryResult) -> ReportLine:
        kind = result.outcome.kind
        style = self._theme.outcomes[kind]
        text = f"{style.symbol} {result.entry.display_name}: {style.label}"
        if kind is OutcomeKind.FAILED:
            reason = _first_line(result.outcome.detail)
            if reason:
                text = f"{text} ({reason})"
        return ReportLine(text, SEVERITY_BY_OUTCOME[kind], style.style)

    def tally_line(self, counts: Mapping[OutcomeKind, int]) -> ReportLine:
        parts = [f"{self._theme.outcomes[kind].tally_label}: {counts.get(kind, 0)}" for kind in TALLY_ORDER]
        total = sum(counts.values())
        text = f"{total} package(s) processed - " + ", ".join(parts)
        if counts.get(OutcomeKind.FAILED, 0):
            return ReportLine(text, logging.ERROR, self._theme.failure_summary_style)
        return ReportLine(text, logging.INFO, self._theme.summary_style)

    def summarize(self, report: InstallationReport) -> ReportSummary:
        counts = report.counts()
        lines = [self.line_for(result) for result in report]
        lines.append(self.tally_line(counts))
        for line in lines:
            self._log.log(line.level, line.text)
        for result in report.failures():
            if result.outcome.detail:
                self._log.error("%s output:\n%s", result.entry.identifier, result.outcome.detail)
        return ReportSummary(counts, lines)


def _first_line(text: str) -> str:
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return ""
