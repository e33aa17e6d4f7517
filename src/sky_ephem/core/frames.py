from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from sky_ephem.core.angles import asin, atan, cos, sin, wrap_to_180, wrap_to_360
from sky_ephem.core.constants import (
    GMST_J2000_DEG,
    OBLIQUITY_J2000_DEG,
    OBLIQUITY_RATE_DEG_PER_DAY,
    R_EARTH_AU,
    SIDEREAL_RATE_DEG_PER_DAY,
)
from sky_ephem.core.errors import DomainError

Vector3 = Tuple[float, float, float]


def dot(a: Vector3, b: Vector3) -> float:
    return a[0]*b[0] + a[1]*b[1] + a[2]*b[2]


def sub(a: Vector3, b: Vector3) -> Vector3:
    return (a[0]-b[0], a[1]-b[1], a[2]-b[2])


def norm(a: Vector3) -> float:
    return math.sqrt(dot(a, a))


class Origin(Enum):
    """Centre a rectangular position is measured from."""
    HELIOCENTRIC = "heliocentric"
    GEOCENTRIC = "geocentric"


@dataclass(frozen=True)
class Rectangular:
    """
    Ecliptic rectangular coordinates (AU) at epoch d (days since J2000.0).
    """
    x: float
    y: float
    z: float
    d: float
    origin: Origin = Origin.HELIOCENTRIC

    @property
    def vector(self) -> Vector3:
        return (self.x, self.y, self.z)

    @property
    def distance(self) -> float:
        return norm(self.vector)

    def relative_to(self, other: "Rectangular", origin: Origin = Origin.GEOCENTRIC) -> "Rectangular":
        """Position of self as seen from `other` (both must share the epoch)."""
        if self.d != other.d:
            raise ValueError(f"Epoch mismatch: {self.d} != {other.d}")
        x, y, z = sub(self.vector, other.vector)
        return Rectangular(x, y, z, self.d, origin)


@dataclass(frozen=True)
class Ecliptic:
    """
    Ecliptic coordinates: longitude in [0, 360), latitude in [-90, 90] (deg),
    distance in AU (math.inf for fixed stars).
    """
    longitude: float
    latitude: float
    distance: float
    d: float


@dataclass(frozen=True)
class Equatorial:
    """
    Equatorial coordinates: right ascension in [0, 360) and declination in
    [-90, 90], both in degrees. Distance in AU (math.inf for fixed stars).
    """
    right_ascension: float
    declination: float
    d: float
    distance: float = math.inf

    @property
    def right_ascension_hours(self) -> float:
        return self.right_ascension / 15.0


@dataclass(frozen=True)
class Horizontal:
    """
    Altitude in [-90, 90] and azimuth in [0, 360) (0 = North, 90 = East), degrees.
    """
    altitude: float
    azimuth: float
    d: float


def obliquity_deg(d: float) -> float:
    """Obliquity of the ecliptic at epoch d."""
    return OBLIQUITY_J2000_DEG + OBLIQUITY_RATE_DEG_PER_DAY * d


def greenwich_mean_sidereal_time_deg(d: float) -> float:
    return wrap_to_360(GMST_J2000_DEG + SIDEREAL_RATE_DEG_PER_DAY * d)


def local_sidereal_time_deg(d: float, lon_deg: float) -> float:
    return wrap_to_360(greenwich_mean_sidereal_time_deg(d) + lon_deg)


def hour_angle_deg(right_ascension_deg: float, d: float, lon_deg: float) -> float:
    """Local hour angle H = LST - ra, wrapped to [-180, 180)."""
    return wrap_to_180(local_sidereal_time_deg(d, lon_deg) - right_ascension_deg)


def parallax_deg(distance_au: float) -> float:
    """Horizontal parallax of a body at the given geocentric distance."""
    if distance_au <= 0:
        raise DomainError(f"Distance must be positive. Got: {distance_au}")
    return asin(R_EARTH_AU / distance_au)


def topocentric_altitude(altitude_geocentric_deg: float, distance_au: float) -> float:
    """
    Lower a geocentric altitude by the parallax seen from the Earth's surface.
    Only material for the Moon.
    """
    par = parallax_deg(distance_au)
    return altitude_geocentric_deg - par * cos(altitude_geocentric_deg)


def rectangular_to_ecliptic(rect: Rectangular) -> Ecliptic:
    x, y, z = rect.vector
    r = rect.distance
    if r == 0:
        raise DomainError("Zero position vector has no direction.")
    return Ecliptic(atan(y, x), asin(z / r), r, rect.d)


def ecliptic_to_rectangular(ecl: Ecliptic, origin: Origin = Origin.GEOCENTRIC) -> Rectangular:
    r = ecl.distance
    cos_lat = cos(ecl.latitude)
    return Rectangular(
        r * cos_lat * cos(ecl.longitude),
        r * cos_lat * sin(ecl.longitude),
        r * sin(ecl.latitude),
        ecl.d,
        origin,
    )


def ecliptic_to_equatorial(ecl: Ecliptic) -> Equatorial:
    """
    Rotate about the vernal equinox axis by the obliquity.
    tan(lat) is multiplied through by cos(lat) so the poles stay finite.
    """
    ecl_obl = obliquity_deg(ecl.d)
    sin_lon = sin(ecl.longitude)
    cos_lon = cos(ecl.longitude)
    sin_lat = sin(ecl.latitude)
    cos_lat = cos(ecl.latitude)
    sin_obl = sin(ecl_obl)
    cos_obl = cos(ecl_obl)

    ra = atan(sin_lon * cos_obl * cos_lat - sin_lat * sin_obl, cos_lon * cos_lat)
    dec = asin(sin_lat * cos_obl + cos_lat * sin_obl * sin_lon)
    return Equatorial(ra, dec, ecl.d, ecl.distance)


def equatorial_to_ecliptic(eq: Equatorial) -> Ecliptic:
    ecl_obl = obliquity_deg(eq.d)
    sin_ra = sin(eq.right_ascension)
    cos_ra = cos(eq.right_ascension)
    sin_dec = sin(eq.declination)
    cos_dec = cos(eq.declination)
    sin_obl = sin(ecl_obl)
    cos_obl = cos(ecl_obl)

    lon = atan(sin_ra * cos_obl * cos_dec + sin_dec * sin_obl, cos_ra * cos_dec)
    lat = asin(sin_dec * cos_obl - cos_dec * sin_obl * sin_ra)
    return Ecliptic(lon, lat, eq.distance, eq.d)


def equatorial_to_horizontal(
    eq: Equatorial,
    lat_deg: float,
    lon_deg: float,
    topocentric: bool = True,
) -> Horizontal:
    """
    Project onto the observer's horizon. Azimuth is measured from North
    through East. With topocentric=True the altitude is corrected for the
    parallax implied by eq.distance (zero for fixed stars).
    """
    ha = hour_angle_deg(eq.right_ascension, eq.d, lon_deg)

    sin_lat = sin(lat_deg)
    cos_lat = cos(lat_deg)
    sin_dec = sin(eq.declination)
    cos_dec = cos(eq.declination)
    sin_ha = sin(ha)
    cos_ha = cos(ha)

    alt = asin(sin_lat * sin_dec + cos_lat * cos_dec * cos_ha)
    az = atan(-sin_ha * cos_dec, cos_lat * sin_dec - sin_lat * cos_dec * cos_ha)

    if topocentric and math.isfinite(eq.distance):
        alt = topocentric_altitude(alt, eq.distance)

    return Horizontal(alt, az, eq.d)


def horizontal_to_equatorial(hz: Horizontal, lat_deg: float, lon_deg: float) -> Equatorial:
    """Inverse of the geocentric equatorial_to_horizontal (no parallax undone)."""
    sin_lat = sin(lat_deg)
    cos_lat = cos(lat_deg)
    sin_alt = sin(hz.altitude)
    cos_alt = cos(hz.altitude)
    sin_az = sin(hz.azimuth)
    cos_az = cos(hz.azimuth)

    dec = asin(sin_lat * sin_alt + cos_lat * cos_alt * cos_az)
    ha = atan(-sin_az * cos_alt, cos_lat * sin_alt - sin_lat * cos_alt * cos_az)
    ra = wrap_to_360(local_sidereal_time_deg(hz.d, lon_deg) - ha)
    return Equatorial(ra, dec, hz.d)
