"""Nord color palette for console output."""
from __future__ import annotations

from rich.theme import Theme

from services.installer import OutcomeKind
from services.reporting import OutcomeStyle, ReportTheme


class NordColors:
    POLAR_NIGHT_4: str = "#4C566A"
    SNOW_STORM_1: str = "#D8DEE9"
    SNOW_STORM_2: str = "#E5E9F0"
    FROST_1: str = "#8FBCBB"
    FROST_2: str = "#88C0D0"
    FROST_3: str = "#81A1C1"
    FROST_4: str = "#5E81AC"
    RED: str = "#BF616A"
    ORANGE: str = "#D08770"
    YELLOW: str = "#EBCB8B"
    GREEN: str = "#A3BE8C"
    PURPLE: str = "#B48EAD"


NORD_REPORT_THEME = ReportTheme(
    outcomes={
        OutcomeKind.INSTALLED: OutcomeStyle("✓", "installed", "Installed", NordColors.GREEN),
        OutcomeKind.ALREADY_INSTALLED: OutcomeStyle("•", "already installed", "Already installed", NordColors.FROST_2),
        OutcomeKind.ALREADY_LATEST: OutcomeStyle("•", "already up to date", "Up to date", NordColors.FROST_3),
        OutcomeKind.NOT_FOUND: OutcomeStyle("⚠", "not found in repository, skipped", "Not found", NordColors.YELLOW),
        OutcomeKind.FAILED: OutcomeStyle("✗", "failed", "Failed", NordColors.RED),
    },
    summary_style=f"bold {NordColors.GREEN}",
    failure_summary_style=f"bold {NordColors.RED}",
)


def build_console_theme() -> Theme:
    return Theme(
        {
            "step": NordColors.FROST_2,
            "success": NordColors.GREEN,
            "warning": NordColors.YELLOW,
            "error": f"bold {NordColors.RED}",
            "removed": NordColors.ORANGE,
            "heading": f"bold {NordColors.FROST_3}",
            "index": f"bold {NordColors.FROST_4}",
            "muted": NordColors.POLAR_NIGHT_4,
        }
    )
