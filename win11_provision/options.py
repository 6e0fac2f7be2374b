"""Per-run options handed to the provisioning core as already-parsed values."""
from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ProvisionOptions:
    skip_updates: bool = False
    quiet: bool = False
    force: bool = False
    distribution: str | None = None
    log_dir: Path | None = None
    list_only: bool = False
    elevate: bool = True

    @property
    def interactive(self) -> bool:
        return not (self.quiet or self.force)

    @property
    def show_progress(self) -> bool:
        return not self.force

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "ProvisionOptions":
        return cls(
            skip_updates=bool(args.skip_updates),
            quiet=bool(args.quiet),
            force=bool(args.force),
            distribution=args.distro,
            log_dir=Path(args.log_dir) if args.log_dir else None,
            list_only=bool(args.list),
            elevate=not args.no_elevate,
        )
