from __future__ import annotations

# Mean Earth equatorial radius in km (WGS-84)
R_EARTH_KM: float = 6378.137

# Astronomical unit in km (IAU 2012)
AU_KM: float = 149597870.7

# Earth radius expressed in AU, used for the horizontal parallax
R_EARTH_AU: float = R_EARTH_KM / AU_KM

MS_PER_DAY: float = 86400000.0
DAYS_PER_CENTURY: float = 36525.0

# Unix epoch (1970-01-01T00:00Z) measured in days from J2000.0 (2000-01-01T12:00Z)
UNIX_EPOCH_J2000_DAYS: float = -10957.5

# Obliquity of the ecliptic: eps = OBLIQUITY_J2000_DEG + OBLIQUITY_RATE_DEG_PER_DAY * d
OBLIQUITY_J2000_DEG: float = 23.43928
OBLIQUITY_RATE_DEG_PER_DAY: float = -0.0000003563

# Greenwich mean sidereal time, accurate to ~1 second (USNO)
GMST_J2000_DEG: float = 18.697374558 * 15.0
SIDEREAL_RATE_DEG_PER_DAY: float = 24.06570982441908 * 15.0

# Standard altitudes for rise/set style events (degrees)
SUNRISE_ALTITUDE_DEG: float = -0.833
CIVIL_TWILIGHT_ALTITUDE_DEG: float = -6.0
NAUTICAL_TWILIGHT_ALTITUDE_DEG: float = -12.0
ASTRONOMICAL_TWILIGHT_ALTITUDE_DEG: float = -18.0
MOONRISE_ALTITUDE_DEG: float = -0.833
STAR_RISE_ALTITUDE_DEG: float = -0.5667
