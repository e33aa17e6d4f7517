import pytest

from sky_ephem.bodies.catalog import PLANETS
from sky_ephem.bodies.sun import sun_ecliptic
from sky_ephem.core.angles import angular_difference
from sky_ephem.core.epoch import j2000_days, parse_iso
from sky_ephem.core.frames import Origin, rectangular_to_ecliptic
from sky_ephem.physics.ephemeris import earth_heliocentric, ecliptic_position, geocentric_rectangular

EARTH_PERIHELION_AU = 0.9832
EARTH_APHELION_AU = 1.0168


@pytest.mark.parametrize("name", sorted(PLANETS))
def test_geocentric_distance_within_orbit_bounds(name):
    body = PLANETS[name]
    for d in range(-3000, 9000, 500):
        el = body.elements.at(float(d))
        r_min = el.a * (1.0 - el.e)
        r_max = el.a * (1.0 + el.e)

        rect = geocentric_rectangular(body, float(d))
        assert rect.origin is Origin.GEOCENTRIC
        lower = max(r_min - EARTH_APHELION_AU, EARTH_PERIHELION_AU - r_max) - 0.01
        assert lower < rect.distance < r_max + EARTH_APHELION_AU + 0.01

        ecl = ecliptic_position(body, float(d))
        assert 0.0 <= ecl.longitude < 360.0
        assert abs(ecl.latitude) < 10.0


@pytest.mark.parametrize("d", [0.0, 100.0, 200.0, 300.0])
def test_earth_opposite_sun(d):
    earth = rectangular_to_ecliptic(earth_heliocentric(d))
    sun = sun_ecliptic(d)
    assert angular_difference(earth.longitude + 180.0, sun.longitude) < 0.05
    assert earth.distance == pytest.approx(sun.distance, abs=0.001)


def test_mars_2003_opposition():
    d = j2000_days(parse_iso("2003-08-28T18:00:00Z"))
    mars = ecliptic_position("mars", d)
    sun = sun_ecliptic(d)

    assert 0.370 < mars.distance < 0.376
    assert angular_difference(angular_difference(mars.longitude, sun.longitude), 180.0) < 1.5


def test_geocentric_uses_supplied_earth():
    d = 1234.0
    earth = earth_heliocentric(d)
    assert geocentric_rectangular("jupiter", d, earth) == geocentric_rectangular("jupiter", d)
