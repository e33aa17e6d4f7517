"""
Tests for rise/set/transit solvers.

Reference times are from the USNO one-day tables.
"""
import pytest

from sky_ephem.bodies.body import MOON, SUN
from sky_ephem.core.config import SolverSettings
from sky_ephem.core.constants import MOONRISE_ALTITUDE_DEG, STAR_RISE_ALTITUDE_DEG, SUNRISE_ALTITUDE_DEG
from sky_ephem.core.epoch import j2000_days, parse_iso, time_ms_from_j2000
from sky_ephem.core.errors import ConvergenceFailure
from sky_ephem.physics.ephemeris import EphemerisCache
from sky_ephem.physics.events import (
    MIN_EVENT_SEPARATION_DAYS,
    NO_EVENT,
    Direction,
    EventSolver,
    SolverState,
    direct_event,
    hour_angle_at_altitude,
    solve_event,
    standard_altitude,
)

ALBUQUERQUE = (35.05, -106.62)
NYC = (40.71, -74.01)
TROY = (42.73, -73.68)

MINUTE_MS = 60 * 1000


def ms(d):
    return time_ms_from_j2000(d)


class TestNoEvent:
    def test_sentinel_is_falsy_singleton(self):
        assert not NO_EVENT
        assert type(NO_EVENT)() is NO_EVENT
        assert repr(NO_EVENT) == "NO_EVENT"

    def test_hour_angle_at_altitude_circumpolar(self):
        # polar summer: the sun never goes below the horizon
        assert hour_angle_at_altitude(SUNRISE_ALTITUDE_DEG, 80.0, 23.0) is NO_EVENT
        # polar night
        assert hour_angle_at_altitude(SUNRISE_ALTITUDE_DEG, 80.0, -23.0) is NO_EVENT
        # at the pole every hour angle gives the same altitude
        assert hour_angle_at_altitude(0.0, 90.0, 10.0) is NO_EVENT

    def test_hour_angle_at_altitude_equator(self):
        assert hour_angle_at_altitude(0.0, 0.0, 0.0) == pytest.approx(90.0)


def test_standard_altitudes():
    assert standard_altitude(SUN) == SUNRISE_ALTITUDE_DEG
    assert standard_altitude("moon") == MOONRISE_ALTITUDE_DEG
    assert standard_altitude("jupiter") == STAR_RISE_ALTITUDE_DEG
    assert standard_altitude("vega") == STAR_RISE_ALTITUDE_DEG


def test_direction_is_hour_angle_sign():
    assert Direction.RISING.value == -1
    assert Direction.SETTING.value == 1


class TestSolarEvents:
    @pytest.fixture
    def d0(self):
        return j2000_days(parse_iso("2006-03-20T19:06:28.800Z"))

    @pytest.fixture
    def solver(self):
        return EventSolver()

    def test_transit(self, solver, d0):
        sol = solver.transit(SUN, ALBUQUERQUE[1], d0)
        assert sol.state is SolverState.CONVERGED
        assert abs(ms(sol.time) - parse_iso("2006-03-20T12:14:00-07:00")) < 2 * MINUTE_MS

    def test_direct_and_solve_agree(self, solver, d0):
        direct = solver.direct(SUN, *ALBUQUERQUE, SUNRISE_ALTITUDE_DEG, Direction.RISING, d0)
        solved = solver.solve(SUN, *ALBUQUERQUE, SUNRISE_ALTITUDE_DEG, Direction.RISING, d0)
        assert solved.found
        assert abs(ms(direct.time) - ms(solved.time)) < 2 * MINUTE_MS

    def test_solve_hits_target_altitude(self, solver, d0):
        sol = solver.solve(SUN, *ALBUQUERQUE, SUNRISE_ALTITUDE_DEG, Direction.SETTING, d0)
        assert solver.altitude(SUN, *ALBUQUERQUE, sol.time) == pytest.approx(SUNRISE_ALTITUDE_DEG, abs=0.01)

    def test_solve_event_returns_days(self, d0):
        d = solve_event(SUN, *ALBUQUERQUE, SUNRISE_ALTITUDE_DEG, Direction.RISING, d0)
        assert abs(ms(d) - parse_iso("2006-03-20T06:10:00-07:00")) < 2 * MINUTE_MS

    def test_direct_event_near_set(self, d0):
        d = direct_event(SUN, *ALBUQUERQUE, SUNRISE_ALTITUDE_DEG, Direction.SETTING, d0)
        assert abs(ms(d) - parse_iso("2006-03-20T18:18:00-07:00")) < 5 * MINUTE_MS

    def test_iteration_cap_is_not_no_event(self, d0):
        solver = EventSolver(SolverSettings(max_iterations=1))
        with pytest.raises(ConvergenceFailure) as excinfo:
            solver.solve(SUN, *ALBUQUERQUE, SUNRISE_ALTITUDE_DEG, Direction.RISING, d0)
        assert excinfo.value.iterations == 1


class TestCircumpolar:
    def test_midnight_sun(self):
        d = j2000_days(parse_iso("2019-06-21T12:00:00Z"))
        sol = EventSolver().solve(SUN, 69.65, 18.96, SUNRISE_ALTITUDE_DEG, Direction.SETTING, d)
        assert sol.time is NO_EVENT
        assert sol.state is SolverState.NO_EVENT
        assert not sol.found

    def test_polar_night_has_no_civil_dawn(self):
        d = j2000_days(parse_iso("2019-12-21T12:00:00Z"))
        assert solve_event(SUN, 78.22, 15.65, -6.0, Direction.RISING, d) is NO_EVENT

    def test_polaris_never_sets_from_new_york(self):
        d = j2000_days(parse_iso("2020-01-01T00:00:00Z"))
        assert solve_event("polaris", *NYC, STAR_RISE_ALTITUDE_DEG, Direction.SETTING, d) is NO_EVENT

    def test_canopus_never_rises_at_sixty_north(self):
        d = j2000_days(parse_iso("2020-01-01T00:00:00Z"))
        assert solve_event("canopus", 60.0, 10.0, STAR_RISE_ALTITUDE_DEG, Direction.RISING, d) is NO_EVENT


class TestStars:
    def test_sirius_rises_and_sets(self):
        solver = EventSolver()
        d = j2000_days(parse_iso("2020-01-01T00:00:00Z"))
        rise = solver.solve("sirius", *NYC, STAR_RISE_ALTITUDE_DEG, Direction.RISING, d)
        tr = solver.transit("sirius", NYC[1], d)
        st = solver.solve("sirius", *NYC, STAR_RISE_ALTITUDE_DEG, Direction.SETTING, d)
        assert rise.time < tr.time < st.time
        # symmetric about the meridian for a fixed star
        assert (tr.time - rise.time) == pytest.approx(st.time - tr.time, abs=1.0 / 1440.0)


# (start, lat/lon, next rise, next transit, next set)
MOON_CASES = [
    ("2006-03-20T19:06:28.800Z", ALBUQUERQUE,
     "2006-03-21T00:16-07:00", "2006-03-21T05:02-07:00", "2006-03-21T09:45-07:00"),
    ("2016-03-13T00:00:00-05:00", NYC,
     "2016-03-13T10:17-04:00", "2016-03-13T17:24-04:00", "2016-03-14T00:31-04:00"),
    ("2016-03-13T12:00:00-05:00", NYC,
     "2016-03-14T11:04-04:00", "2016-03-13T17:24-04:00", "2016-03-14T00:31-04:00"),
    ("2017-12-01T00:00:00-05:00", NYC,
     "2017-12-01T15:27-05:00", "2017-12-01T22:22-05:00", "2017-12-01T04:13-05:00"),
    ("2017-12-01T22:30:00-05:00", NYC,
     "2017-12-02T16:10-05:00", None, "2017-12-02T05:26-05:00"),
    ("2017-12-01T23:30:00-05:00", NYC,
     "2017-12-02T16:10-05:00", "2017-12-02T23:20-05:00", "2017-12-02T05:26-05:00"),
    ("2016-01-01T05:00:00-05:00", TROY,
     "2016-01-02T00:04-05:00", "2016-01-01T05:20-05:00", "2016-01-01T11:26-05:00"),
]


class TestMoonScan:
    @pytest.fixture
    def solver(self):
        return EventSolver()

    @pytest.mark.parametrize("start, site, rise, transit, set_", MOON_CASES)
    def test_next_moonrise(self, solver, start, site, rise, transit, set_):
        sol = solver.next_crossing(MOON, *site, MOONRISE_ALTITUDE_DEG, Direction.RISING, j2000_days(parse_iso(start)))
        assert abs(ms(sol.time) - parse_iso(rise)) < 10 * MINUTE_MS

    @pytest.mark.parametrize("start, site, rise, transit, set_", MOON_CASES)
    def test_next_moonset(self, solver, start, site, rise, transit, set_):
        sol = solver.next_crossing(MOON, *site, MOONRISE_ALTITUDE_DEG, Direction.SETTING, j2000_days(parse_iso(start)))
        assert abs(ms(sol.time) - parse_iso(set_)) < 10 * MINUTE_MS

    @pytest.mark.parametrize("start, site, rise, transit, set_", MOON_CASES)
    def test_next_moon_transit(self, solver, start, site, rise, transit, set_):
        sol = solver.next_transit(MOON, site[1], j2000_days(parse_iso(start)))
        if transit is None:
            assert sol.time is NO_EVENT
        else:
            assert abs(ms(sol.time) - parse_iso(transit)) < 10 * MINUTE_MS

    def test_scan_crossings_alternate(self, solver):
        d0 = j2000_days(parse_iso("2017-12-01T00:00:00-05:00"))
        crossings = solver.scan_crossings(MOON, *NYC, MOONRISE_ALTITUDE_DEG, d0, hours=72.0)
        assert len(crossings) >= 5
        times = [c.time for c in crossings]
        assert times == sorted(times)
        for a, b in zip(crossings, crossings[1:]):
            assert a.direction is not b.direction

    def test_scan_crossing_altitude(self, solver):
        d0 = j2000_days(parse_iso("2017-12-01T00:00:00-05:00"))
        sol = solver.next_crossing(MOON, *NYC, MOONRISE_ALTITUDE_DEG, Direction.RISING, d0)
        assert solver.altitude(MOON, *NYC, sol.time) == pytest.approx(MOONRISE_ALTITUDE_DEG, abs=0.1)

    def test_solved_moonrise_altitude(self, solver):
        d0 = j2000_days(parse_iso("2017-12-01T15:00:00-05:00"))
        sol = solver.solve(MOON, *NYC, MOONRISE_ALTITUDE_DEG, Direction.RISING, d0)
        assert sol.found
        assert solver.altitude(MOON, *NYC, sol.time) == pytest.approx(MOONRISE_ALTITUDE_DEG, abs=0.01)

    def test_window_without_crossing(self, solver):
        d0 = j2000_days(parse_iso("2017-12-01T00:00:00-05:00"))
        sol = solver.next_crossing(MOON, *NYC, MOONRISE_ALTITUDE_DEG, Direction.RISING, d0, hours=2.0)
        assert sol.time is NO_EVENT


class TestKeplerSettings:
    @pytest.fixture
    def strict(self):
        return SolverSettings(kepler_max_iterations=1, kepler_tolerance_deg=1e-15)

    def test_solver_forwards_kepler_settings(self, strict):
        with pytest.raises(ConvergenceFailure, match="Kepler solver"):
            EventSolver(strict).altitude("mars", 40.0, -74.0, 1234.5)

    def test_moon_uses_kepler_settings(self, strict):
        with pytest.raises(ConvergenceFailure, match="Kepler solver"):
            EventSolver(strict).altitude(MOON, 40.0, -74.0, 1234.5)

    def test_cached_default_does_not_mask_settings(self, strict):
        cache = EphemerisCache()
        assert -90.0 <= EventSolver(cache=cache).altitude("mars", 40.0, -74.0, 1234.5) <= 90.0
        with pytest.raises(ConvergenceFailure):
            EventSolver(strict, cache).altitude("mars", 40.0, -74.0, 1234.5)


class TestChainedScans:
    @pytest.fixture
    def solver(self):
        return EventSolver()

    @pytest.fixture
    def d0(self):
        return j2000_days(parse_iso("2017-12-01T00:00:00-05:00"))

    def test_next_moonrise_steps_to_following_day(self, solver, d0):
        first = solver.next_crossing(MOON, *NYC, MOONRISE_ALTITUDE_DEG, Direction.RISING, d0)
        second = solver.next_crossing(MOON, *NYC, MOONRISE_ALTITUDE_DEG, Direction.RISING, first.time)

        assert abs(ms(first.time) - parse_iso("2017-12-01T15:27-05:00")) < 10 * MINUTE_MS
        assert abs(ms(second.time) - parse_iso("2017-12-02T16:10-05:00")) < 10 * MINUTE_MS
        assert 0.9 < second.time - first.time < 1.1

    def test_next_moon_transit_steps_to_following_day(self, solver, d0):
        first = solver.next_transit(MOON, NYC[1], d0)
        second = solver.next_transit(MOON, NYC[1], first.time, hours=30.0)

        assert abs(ms(second.time) - parse_iso("2017-12-02T23:20-05:00")) < 10 * MINUTE_MS
        assert second.time - first.time > 1.0

    def test_crossing_just_after_start_is_skipped(self, solver, d0):
        first = solver.next_crossing(MOON, *NYC, MOONRISE_ALTITUDE_DEG, Direction.RISING, d0)
        again = solver.next_crossing(MOON, *NYC, MOONRISE_ALTITUDE_DEG, Direction.RISING,
                                     first.time - MIN_EVENT_SEPARATION_DAYS / 2.0)
        assert again.time - first.time > 0.9
