from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from sky_ephem.bodies.body import SUN
from sky_ephem.core.config import DEFAULT_SETTINGS, SolverSettings
from sky_ephem.core.constants import CIVIL_TWILIGHT_ALTITUDE_DEG
from sky_ephem.core.epoch import j2000_days, time_ms_from_j2000
from sky_ephem.core.frames import Horizontal, equatorial_to_horizontal
from sky_ephem.physics.ephemeris import BodyLike, EphemerisCache, horizontal_position
from sky_ephem.physics.events import (
    NO_EVENT,
    Direction,
    EventSolution,
    EventSolver,
    EventTime,
    standard_altitude,
)


def _to_ms(solution: EventSolution) -> EventTime:
    if not solution.found:
        return NO_EVENT
    return time_ms_from_j2000(solution.time)


@dataclass(frozen=True)
class SolarDay:
    """Unix milliseconds of each solar event, or NO_EVENT."""
    dawn: EventTime
    rise: EventTime
    transit: EventTime
    set: EventTime
    dusk: EventTime


@dataclass
class Observer:
    """
    A place on the Earth's surface. All times in and out are Unix milliseconds;
    event methods return NO_EVENT when the body does not cross the altitude.
    """
    name: str
    lat_deg: float
    lon_deg: float
    settings: SolverSettings = field(default=DEFAULT_SETTINGS, repr=False)
    cache: Optional[EphemerisCache] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        if not (-90.0 <= self.lat_deg <= 90.0):
            raise ValueError(f"Latitude must be in range [-90, 90] degrees. Got: {self.lat_deg}")
        if not (-180.0 <= self.lon_deg <= 180.0):
            raise ValueError(f"Longitude must be in range [-180, 180] degrees. Got: {self.lon_deg}")
        if not self.name.strip():
            raise ValueError("Observer name cannot be empty or whitespace.")

    @property
    def solver(self) -> EventSolver:
        return EventSolver(self.settings, self.cache)

    def horizontal(self, body: BodyLike, time_ms: float, topocentric: bool = True) -> Horizontal:
        d = j2000_days(time_ms)
        if self.cache is not None:
            eq = self.cache.equatorial(body, d, self.settings)
            return equatorial_to_horizontal(eq, self.lat_deg, self.lon_deg, topocentric)
        return horizontal_position(body, d, self.lat_deg, self.lon_deg, topocentric, settings=self.settings)

    def can_see(self, body: BodyLike, time_ms: float, min_altitude_deg: float = 0.0) -> bool:
        return self.horizontal(body, time_ms).altitude >= min_altitude_deg

    # Events around the transit nearest time_ms

    def transit(self, body: BodyLike, time_ms: float) -> EventTime:
        return _to_ms(self.solver.transit(body, self.lon_deg, j2000_days(time_ms)))

    def crossing(self, body: BodyLike, time_ms: float, altitude_deg: float, direction: Direction) -> EventTime:
        d = j2000_days(time_ms)
        return _to_ms(self.solver.solve(body, self.lat_deg, self.lon_deg, altitude_deg, direction, d))

    def rise(self, body: BodyLike, time_ms: float, altitude_deg: Optional[float] = None) -> EventTime:
        if altitude_deg is None:
            altitude_deg = standard_altitude(body)
        return self.crossing(body, time_ms, altitude_deg, Direction.RISING)

    def set(self, body: BodyLike, time_ms: float, altitude_deg: Optional[float] = None) -> EventTime:
        if altitude_deg is None:
            altitude_deg = standard_altitude(body)
        return self.crossing(body, time_ms, altitude_deg, Direction.SETTING)

    def dawn(self, time_ms: float, altitude_deg: float = CIVIL_TWILIGHT_ALTITUDE_DEG) -> EventTime:
        return self.crossing(SUN, time_ms, altitude_deg, Direction.RISING)

    def dusk(self, time_ms: float, altitude_deg: float = CIVIL_TWILIGHT_ALTITUDE_DEG) -> EventTime:
        return self.crossing(SUN, time_ms, altitude_deg, Direction.SETTING)

    def solar_day(self, time_ms: float) -> SolarDay:
        return SolarDay(
            dawn=self.dawn(time_ms),
            rise=self.rise(SUN, time_ms),
            transit=self.transit(SUN, time_ms),
            set=self.set(SUN, time_ms),
            dusk=self.dusk(time_ms),
        )

    # Next events within a window starting at time_ms

    def next_rise(self, body: BodyLike, time_ms: float, hours: float = 24.0,
                  altitude_deg: Optional[float] = None) -> EventTime:
        if altitude_deg is None:
            altitude_deg = standard_altitude(body)
        d = j2000_days(time_ms)
        return _to_ms(self.solver.next_crossing(body, self.lat_deg, self.lon_deg, altitude_deg,
                                                Direction.RISING, d, hours))

    def next_set(self, body: BodyLike, time_ms: float, hours: float = 24.0,
                 altitude_deg: Optional[float] = None) -> EventTime:
        if altitude_deg is None:
            altitude_deg = standard_altitude(body)
        d = j2000_days(time_ms)
        return _to_ms(self.solver.next_crossing(body, self.lat_deg, self.lon_deg, altitude_deg,
                                                Direction.SETTING, d, hours))

    def next_transit(self, body: BodyLike, time_ms: float, hours: float = 24.0) -> EventTime:
        return _to_ms(self.solver.next_transit(body, self.lon_deg, j2000_days(time_ms), hours))
