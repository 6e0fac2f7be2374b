from __future__ import annotations

import logging

from services.installer import InstallationReport, InstallOutcome, OutcomeKind
from services.reporting import SEVERITY_BY_OUTCOME, OutcomeReporter
from win11_provision.constants import CatalogEntry

LOGGER_NAME = "tests.reporting"


def _report(*outcomes: InstallOutcome) -> InstallationReport:
    report = InstallationReport()
    for index, outcome in enumerate(outcomes, start=1):
        report.append(CatalogEntry(f"Vendor.App{index}", f"App {index}", "Test"), outcome)
    return report


def test_severity_mapping() -> None:
    assert SEVERITY_BY_OUTCOME[OutcomeKind.FAILED] == logging.ERROR
    assert SEVERITY_BY_OUTCOME[OutcomeKind.NOT_FOUND] == logging.WARNING
    for kind in (OutcomeKind.INSTALLED, OutcomeKind.ALREADY_INSTALLED, OutcomeKind.ALREADY_LATEST):
        assert SEVERITY_BY_OUTCOME[kind] == logging.INFO


def test_summary_lines_and_tally() -> None:
    report = _report(
        InstallOutcome(OutcomeKind.INSTALLED),
        InstallOutcome(OutcomeKind.ALREADY_INSTALLED),
        InstallOutcome(OutcomeKind.NOT_FOUND),
        InstallOutcome(OutcomeKind.FAILED, "Installer hash does not match.\nmore output"),
    )
    summary = OutcomeReporter(log=logging.getLogger(LOGGER_NAME)).summarize(report)
    assert summary.lines == [
        "✓ App 1: installed",
        "• App 2: already installed",
        "! App 3: not found in repository, skipped",
        "✗ App 4: failed (Installer hash does not match.)",
        "4 package(s) processed - Installed: 1, Already installed: 1, Up to date: 0, Not found: 1, Failed: 1",
    ]
    assert summary.has_failures
    assert summary.tally.level == logging.ERROR


def test_summary_logs_each_line_at_its_severity(caplog) -> None:
    caplog.set_level(logging.INFO, logger=LOGGER_NAME)
    report = _report(
        InstallOutcome(OutcomeKind.INSTALLED),
        InstallOutcome(OutcomeKind.NOT_FOUND),
        InstallOutcome(OutcomeKind.FAILED, "boom"),
    )
    OutcomeReporter(log=logging.getLogger(LOGGER_NAME)).summarize(report)
    levels = [record.levelno for record in caplog.records]
    assert levels.count(logging.WARNING) == 1
    # failed line, failure detail, tally
    assert levels.count(logging.ERROR) == 3
    assert "Vendor.App3 output:\nboom" in caplog.text


def test_clean_run_tally_is_info() -> None:
    summary = OutcomeReporter(log=logging.getLogger(LOGGER_NAME)).summarize(
        _report(InstallOutcome(OutcomeKind.ALREADY_LATEST), InstallOutcome(OutcomeKind.INSTALLED))
    )
    assert not summary.has_failures
    assert summary.tally.level == logging.INFO
    assert summary.counts[OutcomeKind.FAILED] == 0


def test_empty_report() -> None:
    summary = OutcomeReporter(log=logging.getLogger(LOGGER_NAME)).summarize(InstallationReport())
    assert summary.lines == ["0 package(s) processed - Installed: 0, Already installed: 0, Up to date: 0, Not found: 0, Failed: 0"]


def test_default_theme_is_plain_text() -> None:
    report = _report(InstallOutcome(OutcomeKind.INSTALLED), InstallOutcome(OutcomeKind.FAILED, "boom"))
    summary = OutcomeReporter(log=logging.getLogger(LOGGER_NAME)).summarize(report)
    assert [line.style for line in summary.styled_lines] == ["", "", ""]
