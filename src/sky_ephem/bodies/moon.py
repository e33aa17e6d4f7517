"""
Lunar position from mean Kepler elements plus the largest perturbation terms.
http://stjarnhimlen.se/comp/ppcomp.html
Phase angle after Jean Meeus, Astronomical Algorithms, 2nd ed., ch. 48.
"""

from __future__ import annotations

from dataclasses import dataclass

from sky_ephem.core.angles import cos, frac, sin, wrap_to_360
from sky_ephem.core.config import DEFAULT_SETTINGS, SolverSettings
from sky_ephem.core.constants import R_EARTH_AU
from sky_ephem.core.frames import Ecliptic, Origin, rectangular_to_ecliptic
from sky_ephem.physics.orbit import KeplerElements, kepler_to_rectangular

# Mean elements of the lunar orbit (a in Earth radii)
MOON_A_EARTH_RADII = 60.2666
MOON_E = 0.054900
MOON_I_DEG = 5.1454


@dataclass(frozen=True)
class MoonPhase:
    """
    phase_angle: Sun-Moon-Earth angle (deg), 180 at new moon
    illumination: illuminated fraction of the disc, 0..1
    phase: 0 new, 0.25 first quarter, 0.5 full, 0.75 last quarter
    """
    phase_angle: float
    illumination: float
    phase: float


def moon_elements(d: float) -> KeplerElements:
    M = 115.3654 + 13.0649929509 * d
    w = 318.0634 + 0.1643573223 * d
    N = 125.1228 - 0.0529538083 * d
    return KeplerElements.from_anomaly(MOON_A_EARTH_RADII, MOON_E, MOON_I_DEG, M, w, N)


def moon_ecliptic(d: float, settings: SolverSettings = DEFAULT_SETTINGS) -> Ecliptic:
    """Geocentric ecliptic position of the Moon, distance in AU."""
    elements = moon_elements(d)
    unperturbed = rectangular_to_ecliptic(kepler_to_rectangular(elements, d, Origin.GEOCENTRIC, settings))

    # Sun's mean anomaly and mean longitude
    Ms = 356.0470 + 0.9856002585 * d
    Ls = Ms + 282.9404 + 0.0000470935 * d

    Mm = elements.mean_anomaly_deg
    Lm = elements.mean_longitude_deg
    D = Lm - Ls  # mean elongation
    F = Lm - elements.node_longitude_deg  # argument of latitude

    lon = unperturbed.longitude + (
        -1.274 * sin(Mm - 2 * D)  # evection
        + 0.658 * sin(2 * D)  # variation
        - 0.186 * sin(Ms)  # yearly equation
        - 0.059 * sin(2 * Mm - 2 * D)
        - 0.057 * sin(Mm - 2 * D + Ms)
        + 0.053 * sin(Mm + 2 * D)
        + 0.046 * sin(2 * D - Ms)
        + 0.041 * sin(Mm - Ms)
        - 0.035 * sin(D)  # parallactic equation
        - 0.031 * sin(Mm + Ms)
        - 0.015 * sin(2 * F - 2 * D)
        + 0.011 * sin(Mm - 4 * D)
    )
    lat = unperturbed.latitude + (
        -0.173 * sin(F - 2 * D)
        - 0.055 * sin(Mm - F - 2 * D)
        - 0.046 * sin(Mm + F - 2 * D)
        + 0.033 * sin(F + 2 * D)
        + 0.017 * sin(2 * Mm + F)
    )
    r = unperturbed.distance + (
        -0.58 * cos(Mm - 2 * D)
        - 0.46 * cos(2 * D)
    )

    return Ecliptic(wrap_to_360(lon), lat, r * R_EARTH_AU, d)


def moon_phase(d: float) -> MoonPhase:
    D = 297.8501921 + 12.19074911440 * d  # mean elongation
    g = 357.5291092 + 0.985600281697 * d  # Sun's mean anomaly
    M = 134.9633964 + 13.06499295018 * d  # Moon's mean anomaly

    i = (180.0 - D
         - 6.289 * sin(M)
         + 2.100 * sin(g)
         - 1.274 * sin(2 * D - M)
         - 0.658 * sin(2 * D)
         - 0.214 * sin(2 * M)
         - 0.110 * sin(D))
    i = wrap_to_360(i)

    return MoonPhase(
        phase_angle=i,
        illumination=0.5 + 0.5 * cos(i),
        phase=frac(0.5 - i / 360.0),
    )
