"""Fixed-point physical units.

Lengths are integers counting hundredths of an inch, so a 22" roll is
``2200``. Integer arithmetic keeps the no-overlap checks exact.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

SCALE = 100
"""Units per inch."""


def to_units(inches: float) -> int:
    """Convert inches to hundredths of an inch, rounding half away from zero."""
    value = Decimal(str(inches)) * SCALE
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def to_inches(units: int) -> float:
    """Convert hundredths of an inch back to inches."""
    return units / SCALE


def px_to_units(pixels: int, dpi: int) -> int:
    """Physical length covered by ``pixels`` printed at ``dpi``.

    Rounds up so the physical rectangle always covers the artwork.
    """
    return -(-pixels * SCALE // dpi)


def units_to_px(units: int, dpi: int) -> int:
    """Pixel count needed to cover ``units`` at ``dpi`` (rounded up)."""
    return -(-units * dpi // SCALE)
