"""
Small numeric and time helpers shared by the calculators.
"""
import math
from datetime import datetime, timezone


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer with halves rounded up.

    The built-in ``round`` rounds halves to even, which would move scores
    such as 24.5 across a band boundary in the wrong direction.

    Examples:
        >>> round_half_up(24.5), round_half_up(2.5), round_half_up(-2.5)
        (25, 3, -2)
    """
    return math.floor(value + 0.5)


def as_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC so they compare with aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
