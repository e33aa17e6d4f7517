from __future__ import annotations

import math
from dataclasses import dataclass

from sky_ephem.core.angles import cos, sin
from sky_ephem.core.config import DEFAULT_SETTINGS, SolverSettings
from sky_ephem.core.epoch import julian_centuries
from sky_ephem.core.errors import DomainError
from sky_ephem.core.frames import Origin, Rectangular
from sky_ephem.physics.kepler import solve_keplers_equation


@dataclass(frozen=True)
class KeplerElements:
    """
    Osculating Kepler elements of an elliptic orbit at one epoch.

    Units:
        a: semi-major axis (AU, or any length unit the caller keeps consistent)
        e: eccentricity (0<=e<1)
        inc_deg: inclination
        mean_longitude_deg: L = M + w + N
        perihelion_longitude_deg: longitude of perihelion w1 = w + N
        node_longitude_deg: longitude of the ascending node N
    """
    a: float
    e: float
    inc_deg: float
    mean_longitude_deg: float
    perihelion_longitude_deg: float
    node_longitude_deg: float

    def __post_init__(self):
        if not (math.isfinite(self.a) and self.a > 0):
            raise DomainError(f"Semi-major axis must be positive. Got: {self.a}")
        if not (0.0 <= self.e < 1.0):
            raise DomainError(f"Only elliptic orbits are supported (0 <= e < 1). Got: {self.e}")
        if not math.isfinite(self.inc_deg):
            raise DomainError(f"Inclination must be finite. Got: {self.inc_deg}")
        if not math.isfinite(self.mean_longitude_deg):
            raise DomainError(f"Mean longitude must be finite. Got: {self.mean_longitude_deg}")
        if not math.isfinite(self.perihelion_longitude_deg):
            raise DomainError(f"Longitude of perihelion must be finite. Got: {self.perihelion_longitude_deg}")
        if not math.isfinite(self.node_longitude_deg):
            raise DomainError(f"Longitude of ascending node must be finite. Got: {self.node_longitude_deg}")

    @classmethod
    def from_anomaly(cls, a: float, e: float, inc_deg: float, M_deg: float, argp_deg: float,
                     node_deg: float) -> "KeplerElements":
        """Build from mean anomaly and argument of perihelion instead of longitudes."""
        return cls(a, e, inc_deg, M_deg + argp_deg + node_deg, argp_deg + node_deg, node_deg)

    @property
    def mean_anomaly_deg(self) -> float:
        return self.mean_longitude_deg - self.perihelion_longitude_deg

    @property
    def argument_of_perihelion_deg(self) -> float:
        return self.perihelion_longitude_deg - self.node_longitude_deg


@dataclass(frozen=True)
class OrbitalElements:
    """
    Keplerian elements as linear functions of time: value at J2000.0 plus a
    rate per Julian century (the JPL "approximate positions" tables).
    """
    a_au: float
    e: float
    inc_deg: float
    mean_longitude_deg: float
    perihelion_longitude_deg: float
    node_longitude_deg: float
    a_rate: float = 0.0
    e_rate: float = 0.0
    inc_rate: float = 0.0
    mean_longitude_rate: float = 0.0
    perihelion_longitude_rate: float = 0.0
    node_longitude_rate: float = 0.0

    def at(self, d: float) -> KeplerElements:
        """Evaluate the elements at d days since J2000.0."""
        T = julian_centuries(d)
        return KeplerElements(
            a=self.a_au + self.a_rate * T,
            e=self.e + self.e_rate * T,
            inc_deg=self.inc_deg + self.inc_rate * T,
            mean_longitude_deg=self.mean_longitude_deg + self.mean_longitude_rate * T,
            perihelion_longitude_deg=self.perihelion_longitude_deg + self.perihelion_longitude_rate * T,
            node_longitude_deg=self.node_longitude_deg + self.node_longitude_rate * T,
        )


def kepler_to_rectangular(
    elements: KeplerElements,
    d: float,
    origin: Origin = Origin.HELIOCENTRIC,
    settings: SolverSettings = DEFAULT_SETTINGS,
) -> Rectangular:
    """
    Position on the orbit described by `elements`, rotated into the ecliptic
    frame by argument of perihelion, inclination and ascending node.
    """
    a = elements.a
    e = elements.e
    w = elements.argument_of_perihelion_deg
    N = elements.node_longitude_deg
    inc = elements.inc_deg

    E = solve_keplers_equation(elements.mean_anomaly_deg, e, settings.kepler_tolerance_deg,
                               settings.kepler_max_iterations)

    # Position in the orbital plane, x towards perihelion
    u = a * (cos(E) - e)
    v = a * math.sqrt(1.0 - e * e) * sin(E)

    sin_i = sin(inc)
    cos_i = cos(inc)
    sin_N = sin(N)
    cos_N = cos(N)
    sin_w = sin(w)
    cos_w = cos(w)

    x = u * ( cos_w * cos_N - sin_w * sin_N * cos_i) + \
        v * (-sin_w * cos_N - cos_w * sin_N * cos_i)
    y = u * ( cos_w * sin_N + sin_w * cos_N * cos_i) + \
        v * (-sin_w * sin_N + cos_w * cos_N * cos_i)
    z = u * (sin_w * sin_i) + \
        v * (cos_w * sin_i)

    return Rectangular(x, y, z, d, origin)


def heliocentric_rectangular(
    elements: OrbitalElements,
    d: float,
    settings: SolverSettings = DEFAULT_SETTINGS,
) -> Rectangular:
    """Heliocentric ecliptic position (AU) of a body at d days since J2000.0."""
    return kepler_to_rectangular(elements.at(d), d, Origin.HELIOCENTRIC, settings)
