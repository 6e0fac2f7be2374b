"""Removal-list parsing and catalog filtering."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from win11_provision.constants import CatalogEntry

DIGITS_PATTERN = re.compile(r"[0-9]+")
MAX_SHOWN_DIGITS = 20


@dataclass(frozen=True)
class SelectionResult:
    removals: frozenset[int]
    warnings: tuple[str, ...] = ()


@dataclass
class FilterResult:
    kept: list[CatalogEntry] = field(default_factory=list)
    removed: list[CatalogEntry] = field(default_factory=list)


def parse_removals(raw: str | None, catalog_size: int) -> SelectionResult:
    """Turn free-text input such as ``"2, 4,7"`` into 1-based catalog indices.

    Malformed and out-of-range tokens are reported as warnings and dropped;
    the valid tokens of the same input are still honored.
    """
    if raw is None or not raw.strip():
        return SelectionResult(frozenset())
    removals: set[int] = set()
    warnings: list[str] = []
    for token in raw.split(","):
        cleaned = token.strip()
        if not cleaned:
            continue
        if not DIGITS_PATTERN.fullmatch(cleaned):
            warnings.append(f"invalid input '{cleaned}' - expected a number")
            continue
        digits = cleaned.lstrip("0") or "0"
        # More digits than catalog_size has is always out of range.
        if len(digits) > len(str(catalog_size)):
            warnings.append(_out_of_range(_shorten(digits), catalog_size))
            continue
        number = int(digits)
        if 1 <= number <= catalog_size:
            removals.add(number)
        else:
            warnings.append(_out_of_range(str(number), catalog_size))
    return SelectionResult(frozenset(removals), tuple(warnings))


def _out_of_range(number: str, catalog_size: int) -> str:
    return f"package number '{number}' is out of range (1-{catalog_size})"


def _shorten(digits: str) -> str:
    if len(digits) <= MAX_SHOWN_DIGITS:
        return digits
    return f"{digits[:MAX_SHOWN_DIGITS]}..."


def filter_catalog(catalog: Sequence[CatalogEntry], removals: Iterable[int]) -> FilterResult:
    excluded = set(removals)
    result = FilterResult()
    for position, entry in enumerate(catalog, start=1):
        if position in excluded:
            result.removed.append(entry)
        else:
            result.kept.append(entry)
    return result
