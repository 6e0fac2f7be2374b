"""Filesystem locations used by the provisioning run."""
from __future__ import annotations

import os
import tempfile
from pathlib import Path

APP_DIR_NAME = "Win11Provision"


def get_log_directory(override: Path | str | None = None) -> Path:
    if override:
        return Path(override)
    program_data = os.environ.get("ProgramData") or os.environ.get("PROGRAMDATA")
    if program_data:
        return Path(program_data) / APP_DIR_NAME / "Logs"
    return Path(tempfile.gettempdir()) / APP_DIR_NAME / "Logs"
