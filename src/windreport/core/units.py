"""Unit conversions and rounding helpers.

All rounding in the reporter goes through :func:`round_half_up` so that
speeds, medians and directions share one rule: ties round away from zero.
Values are rounded from their shortest decimal representation, which keeps
``2.675`` at ``2.68`` instead of the binary-float ``2.67``.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

FULL_TURN: float = 2 * math.pi
"""One full turn in radians."""

DEGREES_PER_TURN: int = 360


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round to ``ndigits`` decimals with ties away from zero.

    Args:
        value: Number to round.
        ndigits: Number of decimal places to keep.

    Returns:
        Rounded value as a float.
    """
    quantum = Decimal(1).scaleb(-ndigits)
    return float(Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP))


def round_speed(value: float) -> float:
    """Round a wind speed in m/s to 2 decimal places."""
    return round_half_up(value, 2)


def radians_to_degrees(radians: float) -> float:
    """Convert an angle from radians to degrees."""
    return math.degrees(radians)


def normalize_turn(radians: float) -> float:
    """Bring an angle back into [0, 2*pi) with a single wraparound step.

    Inputs are expected to be the sum of two angles that are each already in
    [0, 2*pi), so at most one correction is ever needed.

    Args:
        radians: Angle in radians.

    Returns:
        Angle in radians.
    """
    if radians >= FULL_TURN:
        return radians - FULL_TURN
    if radians < 0:
        return radians + FULL_TURN
    return radians


def to_compass_degrees(radians: float) -> int:
    """Convert radians to whole degrees in [0, 360).

    Args:
        radians: Angle in radians.

    Returns:
        Nearest whole degree, with 360 folded back to 0.
    """
    degrees = int(round_half_up(radians_to_degrees(radians)))
    return degrees % DEGREES_PER_TURN
