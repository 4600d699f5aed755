"""Formatting helpers for plan and valuation output.

Amounts are always in the engines' reference currency (USD); currency
conversion happens in the presentation layer.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sitescope.models.valuation import ValueBand


def format_currency(amount: float) -> str:
    """Format a currency amount as a human-readable string.

    - Amounts >= $10,000: no cents, with comma separators (e.g., '$1,234,567')
    - Amounts < $10,000: with cents (e.g., '$9,876.54')
    """
    if amount >= 10_000:
        return f"${amount:,.0f}"
    return f"${amount:,.2f}"


def format_value_band(band: ValueBand) -> str:
    """Format a ValueBand as '$X.XM - $X.XM' or '$XXX,XXX - $XXX,XXX'."""
    if band.high >= 1_000_000:
        return f"${band.low / 1_000_000:.1f}M - ${band.high / 1_000_000:.1f}M"
    return f"${band.low:,.0f} - ${band.high:,.0f}"


def format_percent(fraction: float, digits: int = 0) -> str:
    return f"{fraction * 100:.{digits}f}%"


def range_label(value: float, spread: float, min_floor: float = 0, digits: int = 0) -> str:
    """Render ``value`` as a 'min-max' range of half-width ``value * spread``.

    Small values always get at least a +/-1 band, larger ones at least
    +/-0.5, and neither end drops below ``min_floor``.
    """
    delta = max(value * spread, 1 if value < 10 else 0.5)
    low = max(min_floor, value - delta)
    high = max(min_floor, value + delta)
    return f"{_fixed(low, digits)}-{_fixed(high, digits)}"


def _fixed(value: float, digits: int) -> str:
    # Halves round up, not to even.
    quantum = Decimal(1).scaleb(-digits)
    return str(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))
