"""
Solar position, accurate to about one arcminute between 1800 and 2200.
http://aa.usno.navy.mil/faq/docs/SunApprox.php
"""

from __future__ import annotations

import logging
from typing import Optional

from sky_ephem.core.angles import RAD, cos, sin, wrap_to_180, wrap_to_360
from sky_ephem.core.config import DEFAULT_SETTINGS, SolverSettings
from sky_ephem.core.errors import ConvergenceFailure
from sky_ephem.core.frames import Ecliptic

logger = logging.getLogger(__name__)

# mean anomaly g = G0 + G1 d
G0 = 357.5291092
G1 = 0.985600281697

# mean longitude q = Q0 + Q1 d
Q0 = 280.459
Q1 = 0.9856473599763

# equation of centre
C1 = 1.915
C2 = 0.020

# distance (AU)
R0 = 1.00014
R1 = -0.01671
R2 = -0.00014


def sun_mean_anomaly_deg(d: float) -> float:
    return G0 + G1 * d


def sun_ecliptic(d: float) -> Ecliptic:
    """Geocentric ecliptic position of the Sun; latitude is taken as zero."""
    g = sun_mean_anomaly_deg(d)

    sin_1g = sin(g)
    cos_1g = cos(g)
    sin_2g = 2.0 * sin_1g * cos_1g
    cos_2g = 2.0 * cos_1g * cos_1g - 1.0

    lon = Q0 + Q1 * d + C1 * sin_1g + C2 * sin_2g
    r = R0 + R1 * cos_1g + R2 * cos_2g
    return Ecliptic(wrap_to_360(lon), 0.0, r, d)


def sun_longitude_rate(d: float) -> float:
    """Derivative of the Sun's ecliptic longitude (deg/day)."""
    g = sun_mean_anomaly_deg(d)
    return Q1 + RAD * G1 * (C1 * cos(g) + 2.0 * C2 * cos(2.0 * g))


def solar_longitude_time(
    longitude_deg: float,
    d_near: float,
    settings: Optional[SolverSettings] = None,
) -> float:
    """
    Epoch (days since J2000.0) nearest d_near at which the Sun reaches the
    given ecliptic longitude, e.g. 0 for the March equinox.
    Newton's method seeded from the mean motion.
    """
    settings = settings or DEFAULT_SETTINGS
    tol = settings.time_tolerance_days

    d = d_near + wrap_to_180(longitude_deg - sun_ecliptic(d_near).longitude) / Q1
    for i in range(settings.max_iterations):
        step = wrap_to_180(longitude_deg - sun_ecliptic(d).longitude) / sun_longitude_rate(d)
        d += step
        if abs(step) < tol:
            logger.debug("Solar longitude %.3f reached at d=%.6f after %d iterations", longitude_deg, d, i + 1)
            return d

    logger.error("Solar longitude search did not converge (target=%.6f, d=%.6f)", longitude_deg, d)
    raise ConvergenceFailure("Solar longitude search", settings.max_iterations, d)
