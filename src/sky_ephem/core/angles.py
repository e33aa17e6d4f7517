"""
Degree-based trigonometry helpers.

Every angle in sky_ephem is carried in degrees; these wrappers keep the
radian conversions in one place.
"""

from __future__ import annotations

import math

RAD: float = math.pi / 180.0
DEG: float = 180.0 / math.pi


def sin(x_deg: float) -> float:
    return math.sin(x_deg * RAD)


def cos(x_deg: float) -> float:
    return math.cos(x_deg * RAD)


def tan(x_deg: float) -> float:
    return math.tan(x_deg * RAD)


def asin(x: float) -> float:
    # clamp for numeric stability
    return math.asin(max(-1.0, min(1.0, x))) * DEG


def acos(x: float) -> float:
    return math.acos(max(-1.0, min(1.0, x))) * DEG


def atan(y: float, x: float) -> float:
    """
    Full-circle arctangent of y/x in degrees, mapped into [0, 360).

    Computed as 180 + atan2(-y, -x) so that the result is never negative.
    """
    return wrap_to_360(180.0 + math.atan2(-y, -x) * DEG)


def wrap_to_360(angle_deg: float) -> float:
    """Wrap angle to [0, 360)."""
    wrapped = angle_deg % 360.0
    # -1e-17 % 360.0 == 360.0
    if wrapped >= 360.0:
        return 0.0
    return wrapped


def wrap_to_180(angle_deg: float) -> float:
    """Wrap angle to [-180, 180)."""
    return wrap_to_360(angle_deg + 180.0) - 180.0


def frac(x: float) -> float:
    return x - math.floor(x)


def angular_difference(a_deg: float, b_deg: float) -> float:
    """Smallest absolute separation between two angles, in [0, 180]."""
    return abs(wrap_to_180(a_deg - b_deg))
