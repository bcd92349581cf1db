"""Rounding helpers shared by the calculators.

Python's built-in ``round`` uses banker's rounding (``round(0.5) == 0``);
survey scores round half up, so 62.5 is reported as 63.
"""

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float, places: int = 0) -> float:
    """Round ``value`` to ``places`` decimals, halves away from zero."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def round_half_up_int(value: float) -> int:
    """Round ``value`` to the nearest integer, halves away from zero."""
    return int(Decimal(str(value)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def clamp(value: float, min_val: float = 0.0, max_val: float = 100.0) -> float:
    """Clamp value to range [min_val, max_val]."""
    return max(min_val, min(max_val, value))


def percentage(part: float, whole: float) -> float:
    """Return ``part / whole`` as a 0-100 percentage rounded to 2 places.

    A zero or negative ``whole`` yields 0.0 rather than a division error.
    """
    if whole <= 0:
        return 0.0
    return round_half_up(clamp(part / whole * 100.0), 2)
