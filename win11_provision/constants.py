"""Immutable provisioning settings: package catalog, winget exit codes, WSL choices."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Tuple


@dataclass(frozen=True)
class CatalogEntry:
    identifier: str
    display_name: str
    category: str
    source: str | None = None


@dataclass(frozen=True)
class ExitCodeMap:
    """Manager-specific exit codes that are soft outcomes rather than failures."""

    not_found: frozenset[int] = field(default_factory=frozenset)
    already_latest: frozenset[int] = field(default_factory=frozenset)
    also_installed: frozenset[int] = field(default_factory=frozenset)


@dataclass(frozen=True)
class DistributionOption:
    name: str
    friendly_name: str


@dataclass(frozen=True)
class ImmutableConfig:
    catalog: Tuple[CatalogEntry, ...]
    winget_exit_codes: ExitCodeMap
    wsl_exit_codes: ExitCodeMap
    distributions: Tuple[DistributionOption, ...]
    default_distribution: str


# winget HRESULTs as signed 32-bit process exit codes.
WINGET_NO_APPLICATIONS_FOUND = -1978335212  # 0x8A150014
WINGET_UPDATE_NOT_APPLICABLE = -1978335189  # 0x8A15002B
WINGET_PACKAGE_ALREADY_INSTALLED = -1978335135  # 0x8A150061

WINGET_EXIT_CODES = ExitCodeMap(
    not_found=frozenset({WINGET_NO_APPLICATIONS_FOUND}),
    already_latest=frozenset({WINGET_UPDATE_NOT_APPLICABLE}),
    also_installed=frozenset({WINGET_PACKAGE_ALREADY_INSTALLED}),
)

WSL_EXIT_CODES = ExitCodeMap()

NO_DISTRIBUTION = "none"

DEFAULT_CATALOG: Tuple[CatalogEntry, ...] = (
    CatalogEntry("Microsoft.PowerShell", "PowerShell 7", "Shells & Terminals"),
    CatalogEntry("Microsoft.WindowsTerminal", "Windows Terminal", "Shells & Terminals"),
    CatalogEntry("Git.Git", "Git", "Development"),
    CatalogEntry("Microsoft.VisualStudioCode", "Visual Studio Code", "Development"),
    CatalogEntry("Python.Python.3.12", "Python 3.12", "Development"),
    CatalogEntry("OpenJS.NodeJS.LTS", "Node.js LTS", "Development"),
    CatalogEntry("Docker.DockerDesktop", "Docker Desktop", "Development"),
    CatalogEntry("Mozilla.Firefox", "Firefox", "Internet"),
    CatalogEntry("Google.Chrome", "Google Chrome", "Internet"),
    CatalogEntry("Discord.Discord", "Discord", "Communication"),
    CatalogEntry("7zip.7zip", "7-Zip", "Utilities"),
    CatalogEntry("Microsoft.PowerToys", "PowerToys", "Utilities"),
    CatalogEntry("Notepad++.Notepad++", "Notepad++", "Utilities"),
    CatalogEntry("voidtools.Everything", "Everything", "Utilities"),
    CatalogEntry("VideoLAN.VLC", "VLC media player", "Multimedia"),
    CatalogEntry("9NCBCSZSJRSB", "Spotify", "Multimedia", source="msstore"),
    CatalogEntry("Valve.Steam", "Steam", "Gaming"),
)

DEFAULT_DISTRIBUTIONS: Tuple[DistributionOption, ...] = (
    DistributionOption("Ubuntu", "Ubuntu"),
    DistributionOption("Debian", "Debian GNU/Linux"),
    DistributionOption("kali-linux", "Kali Linux Rolling"),
    DistributionOption("openSUSE-Tumbleweed", "openSUSE Tumbleweed"),
    DistributionOption("archlinux", "Arch Linux"),
)


def validate_catalog(entries: Iterable[CatalogEntry]) -> None:
    seen: set[str] = set()
    for position, entry in enumerate(entries, start=1):
        if not entry.identifier.strip():
            raise ValueError(f"Catalog entry {position} has an empty identifier")
        if not entry.display_name.strip():
            raise ValueError(f"Catalog entry {position} ({entry.identifier}) has an empty display name")
        key = entry.identifier.lower()
        if key in seen:
            raise ValueError(f"Duplicate catalog identifier: {entry.identifier}")
        seen.add(key)


IMMUTABLE_CONFIG = ImmutableConfig(
    catalog=DEFAULT_CATALOG,
    winget_exit_codes=WINGET_EXIT_CODES,
    wsl_exit_codes=WSL_EXIT_CODES,
    distributions=DEFAULT_DISTRIBUTIONS,
    default_distribution=NO_DISTRIBUTION,
)
