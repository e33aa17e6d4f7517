"""
Rise, set, transit and twilight times.

Three strategies share one objective (the topocentric altitude of a body):

  direct     hour-angle formula around the nearest transit, declination
             frozen at transit time
  solve      the direct answer refined by re-evaluating the body at each
             candidate time until successive candidates agree
  scan       parabola fits through consecutive altitude samples; finds every
             crossing in a window, needed for the Moon whose events do not
             recur daily

A body that never reaches the target altitude is reported with NO_EVENT,
not an exception. Exhausting the iteration cap raises ConvergenceFailure.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple, Union

from sky_ephem.bodies.body import Body, BodyKind
from sky_ephem.bodies.catalog import get_body
from sky_ephem.core.angles import acos, cos, sin, wrap_to_180
from sky_ephem.core.config import DEFAULT_SETTINGS, SolverSettings
from sky_ephem.core.constants import (
    MOONRISE_ALTITUDE_DEG,
    SIDEREAL_RATE_DEG_PER_DAY,
    STAR_RISE_ALTITUDE_DEG,
    SUNRISE_ALTITUDE_DEG,
)
from sky_ephem.core.errors import ConvergenceFailure
from sky_ephem.core.frames import Equatorial, equatorial_to_horizontal, hour_angle_deg, parallax_deg
from sky_ephem.physics.ephemeris import BodyLike, EphemerisCache, equatorial_position

logger = logging.getLogger(__name__)

# A scan started on an event it returned must not find that event again; the
# scan root and the time it was started from can differ by seconds.
MIN_EVENT_SEPARATION_DAYS = 5.0 / 1440.0


class _NoEvent:
    """Sentinel for "the body does not cross that altitude". Falsy."""

    _instance: Optional["_NoEvent"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_EVENT"

    def __reduce__(self):
        return "NO_EVENT"


NO_EVENT = _NoEvent()

# Days since J2000.0 (or Unix ms at the Observer boundary), or NO_EVENT
EventTime = Union[float, _NoEvent]


class Direction(Enum):
    """Sign of the hour angle at the event: rising east of the meridian, setting west."""
    RISING = -1
    SETTING = 1


class SolverState(Enum):
    INITIAL = "initial"
    REFINING = "refining"
    CONVERGED = "converged"
    NO_EVENT = "no_event"
    MAX_ITERS_EXCEEDED = "max_iters_exceeded"


@dataclass(frozen=True)
class EventSolution:
    time: EventTime
    state: SolverState
    iterations: int = 0

    @property
    def found(self) -> bool:
        return self.time is not NO_EVENT


@dataclass(frozen=True)
class Crossing:
    """One altitude crossing found by a scan."""
    time: float
    direction: Direction


def standard_altitude(body: BodyLike) -> float:
    """Altitude of the body's centre at apparent rise/set (refraction, semidiameter)."""
    body = get_body(body)
    if body.kind is BodyKind.SUN:
        return SUNRISE_ALTITUDE_DEG
    if body.kind is BodyKind.MOON:
        return MOONRISE_ALTITUDE_DEG
    return STAR_RISE_ALTITUDE_DEG


def hour_angle_at_altitude(altitude_deg: float, lat_deg: float, dec_deg: float) -> Union[float, _NoEvent]:
    """
    Hour angle H0 (deg, 0..180) at which a body of declination dec reaches
    the given geocentric altitude, or NO_EVENT if it never does.
    """
    denom = cos(lat_deg) * cos(dec_deg)
    if denom == 0.0:
        return NO_EVENT
    cos_h0 = (sin(altitude_deg) - sin(lat_deg) * sin(dec_deg)) / denom
    if abs(cos_h0) > 1.0:
        return NO_EVENT
    return acos(cos_h0)


def geocentric_target(altitude_deg: float, eq: Equatorial) -> float:
    """Geocentric altitude that corresponds to a topocentric target altitude."""
    if not math.isfinite(eq.distance):
        return altitude_deg
    return altitude_deg + parallax_deg(eq.distance) * cos(altitude_deg)


def _parabola_roots(y0: float, y1: float, y2: float) -> List[Tuple[float, float]]:
    """
    Fit y(x) = a x^2 + b x + c through (-1, y0), (0, y1), (1, y2) and return
    (root, slope) pairs for roots in [-1, 1]. Tangent roots are not crossings.
    """
    a = 0.5 * (y2 + y0) - y1
    b = 0.5 * (y2 - y0)
    c = y1

    if a == 0.0:
        if b == 0.0:
            return []
        x = -c / b
        return [(x, b)] if -1.0 <= x <= 1.0 else []

    disc = b * b - 4.0 * a * c
    if disc <= 0.0:
        return []

    xe = -b / (2.0 * a)
    dx = math.sqrt(disc) / (2.0 * abs(a))
    out = []
    for x in (xe - dx, xe + dx):
        if -1.0 <= x <= 1.0:
            out.append((x, 2.0 * a * x + b))
    return out


class EventSolver:
    """
    Event search for one body at a time. Holds only configuration and an
    optional caller-owned cache; every call is independent.
    """

    def __init__(self, settings: Optional[SolverSettings] = None, cache: Optional[EphemerisCache] = None):
        self.settings = settings or DEFAULT_SETTINGS
        self.cache = cache

    def _equatorial(self, body: Body, d: float) -> Equatorial:
        if self.cache is not None:
            return self.cache.equatorial(body, d, self.settings)
        return equatorial_position(body, d, settings=self.settings)

    def altitude(self, body: BodyLike, lat_deg: float, lon_deg: float, d: float) -> float:
        """Topocentric altitude of the body (deg)."""
        body = get_body(body)
        return equatorial_to_horizontal(self._equatorial(body, d), lat_deg, lon_deg).altitude

    def hour_angle_rate(self, body: Body, d: float) -> float:
        """Rate at which the body's hour angle grows (deg/day), ~361 for stars."""
        if body.kind is BodyKind.STAR:
            return SIDEREAL_RATE_DEG_PER_DAY
        half = 1.0 / 48.0
        ra_before = self._equatorial(body, d - half).right_ascension
        ra_after = self._equatorial(body, d + half).right_ascension
        return SIDEREAL_RATE_DEG_PER_DAY - wrap_to_180(ra_after - ra_before) / (2.0 * half)

    def transit(self, body: BodyLike, lon_deg: float, d_near: float) -> EventSolution:
        """Upper meridian transit nearest d_near (within half a day)."""
        body = get_body(body)
        tol = self.settings.time_tolerance_days
        rate = self.hour_angle_rate(body, d_near)

        d = d_near
        for i in range(self.settings.max_iterations):
            eq = self._equatorial(body, d)
            step = -hour_angle_deg(eq.right_ascension, d, lon_deg) / rate
            d += step
            if abs(step) < tol:
                logger.debug("Transit of %s converged at d=%.6f after %d iterations", body.name, d, i + 1)
                return EventSolution(d, SolverState.CONVERGED, i + 1)

        logger.error("Transit of %s: state=%s at d=%.6f", body.name, SolverState.MAX_ITERS_EXCEEDED.value, d)
        raise ConvergenceFailure("Transit solver", self.settings.max_iterations, d)

    def direct(
        self,
        body: BodyLike,
        lat_deg: float,
        lon_deg: float,
        altitude_deg: float,
        direction: Direction,
        d_near: float,
    ) -> EventSolution:
        """
        Hour-angle formula: transit -/+ H0, with the body's declination and
        distance taken at the transit nearest d_near.
        """
        body = get_body(body)
        tr = self.transit(body, lon_deg, d_near)
        eq = self._equatorial(body, tr.time)

        h0 = hour_angle_at_altitude(geocentric_target(altitude_deg, eq), lat_deg, eq.declination)
        if h0 is NO_EVENT:
            logger.debug("%s never reaches %.3f deg at lat %.3f (dec %.3f)", body.name, altitude_deg, lat_deg,
                         eq.declination)
            return EventSolution(NO_EVENT, SolverState.NO_EVENT, tr.iterations)

        rate = self.hour_angle_rate(body, tr.time)
        return EventSolution(tr.time + direction.value * h0 / rate, SolverState.CONVERGED, tr.iterations)

    def solve(
        self,
        body: BodyLike,
        lat_deg: float,
        lon_deg: float,
        altitude_deg: float,
        direction: Direction,
        d_near: float,
    ) -> EventSolution:
        """
        Crossing of `altitude_deg` (topocentric) on the rising or setting side
        of the transit nearest d_near, refined until two successive candidate
        times differ by less than the configured tolerance.
        """
        body = get_body(body)
        first = self.direct(body, lat_deg, lon_deg, altitude_deg, direction, d_near)
        if not first.found:
            return first

        tol = self.settings.time_tolerance_days
        d = first.time
        rate = self.hour_angle_rate(body, d)

        for i in range(self.settings.max_iterations):
            eq = self._equatorial(body, d)
            h0 = hour_angle_at_altitude(geocentric_target(altitude_deg, eq), lat_deg, eq.declination)
            if h0 is NO_EVENT:
                logger.debug("%s crossing of %.3f deg vanished while refining at d=%.6f", body.name, altitude_deg, d)
                return EventSolution(NO_EVENT, SolverState.NO_EVENT, first.iterations + i + 1)

            ha = hour_angle_deg(eq.right_ascension, d, lon_deg)
            step = wrap_to_180(direction.value * h0 - ha) / rate
            d += step
            if abs(step) < tol:
                logger.debug("%s %s at %.3f deg converged at d=%.6f after %d passes", body.name,
                             direction.name.lower(), altitude_deg, d, i + 1)
                return EventSolution(d, SolverState.CONVERGED, first.iterations + i + 1)

        logger.error("%s %s at %.3f deg: state=%s at d=%.6f", body.name, direction.name.lower(), altitude_deg,
                     SolverState.MAX_ITERS_EXCEEDED.value, d)
        raise ConvergenceFailure("Event solver", self.settings.max_iterations, d)

    def scan_crossings(
        self,
        body: BodyLike,
        lat_deg: float,
        lon_deg: float,
        altitude_deg: float,
        d_start: float,
        hours: float = 24.0,
    ) -> List[Crossing]:
        """
        Every crossing of `altitude_deg` in [d_start, d_start + hours], in
        chronological order.
        """
        body = get_body(body)
        step = self.settings.scan_step_hours / 24.0
        d_end = d_start + hours / 24.0
        n_pairs = max(1, math.ceil(hours / (2.0 * self.settings.scan_step_hours)))

        samples = [
            self.altitude(body, lat_deg, lon_deg, d_start + k * step) - altitude_deg
            for k in range(2 * n_pairs + 1)
        ]

        crossings: List[Crossing] = []
        for j in range(n_pairs):
            y0, y1, y2 = samples[2 * j], samples[2 * j + 1], samples[2 * j + 2]
            center = d_start + (2 * j + 1) * step
            for x, slope in _parabola_roots(y0, y1, y2):
                t = center + x * step
                if t < d_start or t > d_end or slope == 0.0:
                    continue
                direction = Direction.RISING if slope > 0 else Direction.SETTING
                # a root on a shared sample shows up in both neighbouring fits
                if crossings and crossings[-1].direction is direction and abs(crossings[-1].time - t) < 1e-9:
                    continue
                crossings.append(Crossing(t, direction))

        logger.debug("Scan of %s at %.3f deg found %d crossings", body.name, altitude_deg, len(crossings))
        return crossings

    def next_crossing(
        self,
        body: BodyLike,
        lat_deg: float,
        lon_deg: float,
        altitude_deg: float,
        direction: Direction,
        d_start: float,
        hours: float = 24.0,
    ) -> EventSolution:
        """
        Earliest crossing in the given direction after d_start, within `hours`.
        Crossings less than MIN_EVENT_SEPARATION_DAYS after d_start are skipped
        so that feeding a result back in steps to the following event.
        """
        earliest = d_start + MIN_EVENT_SEPARATION_DAYS
        for crossing in self.scan_crossings(body, lat_deg, lon_deg, altitude_deg, d_start, hours):
            if crossing.direction is direction and crossing.time > earliest:
                return EventSolution(crossing.time, SolverState.CONVERGED, 1)
        return EventSolution(NO_EVENT, SolverState.NO_EVENT, 1)

    def next_transit(self, body: BodyLike, lon_deg: float, d_start: float, hours: float = 24.0) -> EventSolution:
        """Earliest upper transit after d_start (see next_crossing), within `hours`."""
        body = get_body(body)
        step = self.settings.scan_step_hours / 24.0
        d_end = d_start + hours / 24.0
        n = max(1, math.ceil(hours / self.settings.scan_step_hours))

        times = [d_start + k * step for k in range(n + 1)]
        has = [hour_angle_deg(self._equatorial(body, t).right_ascension, t, lon_deg) for t in times]

        for k in range(n):
            h_a, h_b = has[k], has[k + 1]
            # skip the jump through +-180 (lower transit)
            if h_a < 0.0 <= h_b and h_b - h_a < 180.0:
                guess = times[k] + (times[k + 1] - times[k]) * (-h_a) / (h_b - h_a)
                tr = self.transit(body, lon_deg, guess)
                if d_start + MIN_EVENT_SEPARATION_DAYS < tr.time <= d_end:
                    return tr
        return EventSolution(NO_EVENT, SolverState.NO_EVENT, 1)


def solve_event(
    body: BodyLike,
    lat_deg: float,
    lon_deg: float,
    altitude_deg: float,
    direction: Direction,
    d_near: float,
    settings: Optional[SolverSettings] = None,
    cache: Optional[EphemerisCache] = None,
) -> EventTime:
    """Time (days since J2000.0) of the refined crossing, or NO_EVENT."""
    return EventSolver(settings, cache).solve(body, lat_deg, lon_deg, altitude_deg, direction, d_near).time


def direct_event(
    body: BodyLike,
    lat_deg: float,
    lon_deg: float,
    altitude_deg: float,
    direction: Direction,
    d_near: float,
    settings: Optional[SolverSettings] = None,
    cache: Optional[EphemerisCache] = None,
) -> EventTime:
    """Time (days since J2000.0) from the hour-angle formula alone, or NO_EVENT."""
    return EventSolver(settings, cache).direct(body, lat_deg, lon_deg, altitude_deg, direction, d_near).time
