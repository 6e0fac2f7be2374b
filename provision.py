#!/usr/bin/env python3
"""Provision a fresh Windows 11 install: winget catalog, WSL distribution, post-install steps."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Iterable, Sequence

from services.installer import AdapterUnreachable, InstallationReport, InstallerService, PackageManagerAdapter, WingetClient
from services.privilege import is_admin, relaunch_as_admin
from services.reporting import OutcomeReporter, ReportSummary
from services.selection import filter_catalog, parse_removals
from services.system_config import SystemConfigurator, apply_configurators
from services.wsl import WslClient, WslSubsystemConfigurator, distribution_entry, resolve_distribution
from ui.console import ProvisionConsole
from win11_provision.constants import IMMUTABLE_CONFIG, NO_DISTRIBUTION, CatalogEntry, DistributionOption, ImmutableConfig, validate_catalog
from win11_provision.log_setup import close_logging, configure_logging
from win11_provision.options import ProvisionOptions
from win11_provision.paths import get_log_directory

logger = logging.getLogger("provision")

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_ADAPTER_UNREACHABLE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Provision a fresh Windows 11 installation.")
    parser.add_argument("--skip-updates", action="store_true", help="Do not refresh winget sources before installing")
    parser.add_argument("--quiet", action="store_true", help="No prompts; show progress")
    parser.add_argument("--force", action="store_true", help="No prompts and no progress output")
    parser.add_argument("--distro", help=f"WSL distribution to install after the catalog ('{NO_DISTRIBUTION}' to skip)")
    parser.add_argument("--log-dir", help="Directory for the run log")
    parser.add_argument("--list", action="store_true", help="Print the package catalog and exit")
    parser.add_argument("--no-elevate", action="store_true", help="Do not relaunch with administrator rights")
    return parser


def select_entries(
    catalog: Sequence[CatalogEntry],
    options: ProvisionOptions,
    console: ProvisionConsole,
) -> list[CatalogEntry]:
    if not options.interactive:
        return list(catalog)
    console.show_catalog(catalog)
    raw = console.ask_removals()
    selection = parse_removals(raw, len(catalog))
    for warning in selection.warnings:
        logger.warning("Removal input: %s", warning)
        console.print_warning(warning)
    filtered = filter_catalog(catalog, selection.removals)
    for entry in filtered.removed:
        logger.info("Removed from this run: %s", entry.display_name)
        console.print_removed(entry)
    return filtered.kept


def choose_distribution(
    config: ImmutableConfig,
    options: ProvisionOptions,
    console: ProvisionConsole,
) -> DistributionOption | None:
    if options.distribution:
        if options.distribution.lower() == NO_DISTRIBUTION:
            return None
        return resolve_distribution(options.distribution, config.distributions)
    if options.interactive:
        return console.ask_distribution(config.distributions)
    if config.default_distribution.lower() == NO_DISTRIBUTION:
        return None
    return resolve_distribution(config.default_distribution, config.distributions)


def run_installs(
    entries: Sequence[CatalogEntry],
    service: InstallerService,
    reporter: OutcomeReporter,
    console: ProvisionConsole,
    options: ProvisionOptions,
    *,
    description: str,
) -> InstallationReport:
    with console.install_progress(len(entries), reporter, show_progress=options.show_progress, description=description) as callbacks:
        return service.run(entries, on_start=callbacks.on_start, on_result=callbacks.on_result)


def show_summary(
    report: InstallationReport,
    reporter: OutcomeReporter,
    console: ProvisionConsole,
    options: ProvisionOptions,
) -> ReportSummary:
    summary = reporter.summarize(report)
    # Progress mode already printed each entry as it finished.
    lines = [summary.tally] if options.show_progress else summary.styled_lines
    for line in lines:
        console.print_line(line)
    return summary


def provision(
    options: ProvisionOptions,
    console: ProvisionConsole,
    *,
    winget: PackageManagerAdapter | None = None,
    wsl: WslClient | None = None,
    config: ImmutableConfig = IMMUTABLE_CONFIG,
    configurators: Iterable[SystemConfigurator] = (),
) -> int:
    validate_catalog(config.catalog)
    winget = winget or WingetClient()
    reporter = OutcomeReporter(console.report_theme)
    if options.show_progress:
        console.print_header()

    if not winget.is_available():
        logger.error("winget is not available; nothing can be installed")
        console.print_error("winget was not found. Install App Installer from the Microsoft Store and rerun.")
        return EXIT_ADAPTER_UNREACHABLE

    if options.skip_updates:
        logger.info("Skipping winget source update")
    elif isinstance(winget, WingetClient):
        if options.show_progress:
            console.print_step("Updating winget sources")
        try:
            update = winget.update_sources()
        except AdapterUnreachable as exc:
            logger.error("Package manager unreachable: %s", exc)
            console.print_error(f"Package manager unreachable: {exc}")
            return EXIT_ADAPTER_UNREACHABLE
        if update is not None and not update.succeeded:
            logger.warning("winget source update failed: %s", update.output or update.returncode)
            console.print_warning("winget source update failed; continuing with cached sources")

    entries = select_entries(config.catalog, options, console)
    distribution = choose_distribution(config, options, console)

    try:
        report = run_installs(
            entries,
            InstallerService(winget, exit_codes=config.winget_exit_codes),
            reporter,
            console,
            options,
            description="Installing packages",
        )
    except AdapterUnreachable as exc:
        logger.error("Package manager unreachable: %s", exc)
        if exc.report:
            show_summary(exc.report, reporter, console, options)
        console.print_error(f"Package manager unreachable: {exc}")
        return EXIT_ADAPTER_UNREACHABLE
    summary = show_summary(report, reporter, console, options)
    exit_code = EXIT_FAILURES if summary.has_failures else EXIT_OK

    post_steps: list[SystemConfigurator] = []
    if distribution is not None:
        wsl = wsl or WslClient()
        post_steps.append(WslSubsystemConfigurator(wsl))
    post_steps.extend(configurators)
    step_results = apply_configurators(post_steps)
    for result in step_results:
        console.print_apply_result(result)
    if any(not result.success for result in step_results):
        exit_code = EXIT_FAILURES

    if distribution is not None and wsl is not None:
        # The WSL step is always first in post_steps.
        if not step_results[0].success:
            console.print_warning(f"Skipping {distribution.friendly_name}: WSL is not enabled")
        else:
            exit_code = max(exit_code, install_distribution(distribution, wsl, config, reporter, console, options))

    logger.info("Provisioning finished with exit code %s", exit_code)
    return exit_code


def install_distribution(
    distribution: DistributionOption,
    wsl: WslClient,
    config: ImmutableConfig,
    reporter: OutcomeReporter,
    console: ProvisionConsole,
    options: ProvisionOptions,
) -> int:
    try:
        report = run_installs(
            [distribution_entry(distribution)],
            InstallerService(wsl, exit_codes=config.wsl_exit_codes),
            reporter,
            console,
            options,
            description="Installing WSL distribution",
        )
    except AdapterUnreachable as exc:
        logger.error("WSL unreachable: %s", exc)
        console.print_error(f"WSL unreachable: {exc}")
        return EXIT_FAILURES
    summary = show_summary(report, reporter, console, options)
    return EXIT_FAILURES if summary.has_failures else EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    options = ProvisionOptions.from_args(args)
    console = ProvisionConsole()
    if options.list_only:
        console.show_catalog(IMMUTABLE_CONFIG.catalog)
        return EXIT_OK
    if not is_admin():
        if options.elevate and sys.platform == "win32" and relaunch_as_admin():
            return EXIT_OK
        console.print_error("Administrator privileges are required.")
        return EXIT_FAILURES
    log_path = configure_logging(get_log_directory(options.log_dir))
    logger.info("Provisioning started (quiet=%s, force=%s, skip_updates=%s)", options.quiet, options.force, options.skip_updates)
    try:
        exit_code = provision(options, console)
    finally:
        close_logging()
    if options.show_progress:
        console.print_step(f"Log saved to {log_path}")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
