"""Admin privilege helpers for Windows."""
from __future__ import annotations

import ctypes
import subprocess
import sys
from pathlib import Path
from typing import Final, Sequence

# ShellExecuteW returns a value greater than 32 on success.
SHELLEXECUTE_MIN_SUCCESS: Final[int] = 32
ENTRY_MODULE: Final[str] = "provision"


def is_admin() -> bool:
    try:
        return bool(ctypes.windll.shell32.IsUserAnAdmin())  # type: ignore[attr-defined]
    except (AttributeError, OSError):
        return False


def build_relaunch_parameters(argv: Sequence[str]) -> str:
    script = argv[0] if argv else ""
    if script.lower().endswith(".py"):
        head = [str(Path(script).resolve())]
    else:
        head = ["-m", ENTRY_MODULE]
    return subprocess.list2cmdline([*head, *argv[1:]])


def relaunch_as_admin(argv: Sequence[str] | None = None) -> bool:
    params = build_relaunch_parameters(list(sys.argv if argv is None else argv))
    try:
        code = ctypes.windll.shell32.ShellExecuteW(None, "runas", sys.executable, params, None, 1)  # type: ignore[attr-defined]
    except AttributeError:
        return False
    return int(code) > SHELLEXECUTE_MIN_SUCCESS
