"""Small text and numeric heuristics shared by both engines.

Matching is plain substring search over normalized text. It is
deterministic and order-sensitive: callers check tiers in a fixed order
and the first hit wins.
"""

from __future__ import annotations

import math
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

_WHITESPACE = re.compile(r"\s+")
_NON_WORD = re.compile(r"[^a-z0-9+\s-]+")
_SEPARATORS = re.compile(r"[-_/]+")


def clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (``2.5 -> 3``)."""
    return math.floor(value + 0.5)


def round_to_step(value: float, step: float) -> float:
    if not math.isfinite(value):
        return value
    return round_half_up(value / step) * step


def first_present(*values: str | None) -> str | None:
    """Return the first value that is not ``None``; empty strings count as present."""
    return next((value for value in values if value is not None), None)


def normalize(value: str | None) -> str:
    """Lowercase, collapse whitespace, strip."""
    return _WHITESPACE.sub(" ", (value or "").lower()).strip()


def normalize_text(value: str | None) -> str:
    """Aggressive normalization used for typology alias matching.

    Punctuation becomes spaces and hyphen/underscore/slash runs are treated
    as word separators, so ``"Row-House / Villa"`` becomes ``"row house villa"``.
    """
    text = _NON_WORD.sub(" ", (value or "").lower())
    text = _SEPARATORS.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip()


def includes_any(source: str, terms: Iterable[str]) -> bool:
    return any(term in source for term in terms)


def count_matches(source: str, terms: Iterable[str]) -> int:
    return sum(1 for term in terms if term in source)


def dedupe(items: Iterable[str], limit: int = 4) -> list[str]:
    """Strip, drop blanks, keep first occurrence (case-sensitive), cap at ``limit``."""
    seen: list[str] = []
    for item in items:
        cleaned = item.strip()
        if cleaned and cleaned not in seen:
            seen.append(cleaned)
    return seen[:limit]
