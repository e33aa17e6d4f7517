"""
One pipeline for every body: model -> rectangular/ecliptic -> equatorial -> horizontal.

All functions are pure. Repeated queries can share work through an
EphemerisCache that the caller creates and owns.
"""

from __future__ import annotations

import logging
import math
import threading
from concurrent.futures import Future
from typing import Callable, Dict, Hashable, Optional, Tuple, TypeVar, Union

from sky_ephem.bodies.body import Body, BodyKind
from sky_ephem.bodies.catalog import EARTH_ELEMENTS, get_body
from sky_ephem.bodies.moon import moon_ecliptic
from sky_ephem.bodies.sun import sun_ecliptic
from sky_ephem.core.config import DEFAULT_SETTINGS, SolverSettings
from sky_ephem.core.epoch import j2000_days
from sky_ephem.core.frames import (
    Ecliptic,
    Equatorial,
    Horizontal,
    Origin,
    Rectangular,
    ecliptic_to_equatorial,
    ecliptic_to_rectangular,
    equatorial_to_ecliptic,
    equatorial_to_horizontal,
    rectangular_to_ecliptic,
)
from sky_ephem.physics.orbit import heliocentric_rectangular

logger = logging.getLogger(__name__)

BodyLike = Union[Body, str]
T = TypeVar("T")


def earth_heliocentric(d: float, settings: SolverSettings = DEFAULT_SETTINGS) -> Rectangular:
    """Heliocentric position of the Earth-Moon barycentre."""
    return heliocentric_rectangular(EARTH_ELEMENTS, d, settings)


def geocentric_rectangular(
    body: BodyLike,
    d: float,
    earth: Optional[Rectangular] = None,
    settings: SolverSettings = DEFAULT_SETTINGS,
) -> Rectangular:
    """
    Geocentric ecliptic rectangular position (AU).

    For planets, `earth` may carry a precomputed earth_heliocentric(d) so that
    several planets at one epoch share it.
    """
    body = get_body(body)

    if body.kind is BodyKind.PLANET:
        if earth is None:
            earth = earth_heliocentric(d, settings)
        return heliocentric_rectangular(body.elements, d, settings).relative_to(earth, Origin.GEOCENTRIC)
    if body.kind is BodyKind.STAR:
        raise ValueError(f"Fixed star {body.name!r} has no rectangular position.")
    return ecliptic_to_rectangular(ecliptic_position(body, d, settings=settings), Origin.GEOCENTRIC)


def ecliptic_position(
    body: BodyLike,
    d: float,
    earth: Optional[Rectangular] = None,
    settings: SolverSettings = DEFAULT_SETTINGS,
) -> Ecliptic:
    body = get_body(body)

    if body.kind is BodyKind.SUN:
        return sun_ecliptic(d)
    if body.kind is BodyKind.MOON:
        return moon_ecliptic(d, settings)
    if body.kind is BodyKind.PLANET:
        return rectangular_to_ecliptic(geocentric_rectangular(body, d, earth, settings))
    return equatorial_to_ecliptic(_star_equatorial(body, d))


def equatorial_position(
    body: BodyLike,
    d: float,
    earth: Optional[Rectangular] = None,
    settings: SolverSettings = DEFAULT_SETTINGS,
) -> Equatorial:
    body = get_body(body)

    if body.kind is BodyKind.STAR:
        return _star_equatorial(body, d)
    return ecliptic_to_equatorial(ecliptic_position(body, d, earth, settings))


def horizontal_position(
    body: BodyLike,
    d: float,
    lat_deg: float,
    lon_deg: float,
    topocentric: bool = True,
    earth: Optional[Rectangular] = None,
    settings: SolverSettings = DEFAULT_SETTINGS,
) -> Horizontal:
    return equatorial_to_horizontal(equatorial_position(body, d, earth, settings), lat_deg, lon_deg, topocentric)


def _star_equatorial(body: Body, d: float) -> Equatorial:
    return Equatorial(body.ra_deg, body.dec_deg, d, math.inf)


# Boundary wrappers: time as Unix milliseconds


def ecliptic_at(body: BodyLike, time_ms: float) -> Ecliptic:
    return ecliptic_position(body, j2000_days(time_ms))


def equatorial_at(body: BodyLike, time_ms: float) -> Equatorial:
    return equatorial_position(body, j2000_days(time_ms))


def horizontal_at(body: BodyLike, time_ms: float, lat_deg: float, lon_deg: float,
                  topocentric: bool = True) -> Horizontal:
    return horizontal_position(body, j2000_days(time_ms), lat_deg, lon_deg, topocentric)


class EphemerisCache:
    """
    Opt-in memoization keyed by (body, epoch, settings).

    Safe to share between threads: concurrent requests for the same key wait
    on a single computation instead of repeating it. Failed computations are
    not cached.

    Entries are never evicted. A cache kept across many sampling runs grows
    by one entry per body and epoch queried; call clear() to release them.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._entries: Dict[Hashable, Future] = {}
        self.computations = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def earth(self, d: float, settings: SolverSettings = DEFAULT_SETTINGS) -> Rectangular:
        return self._get(("earth", d, settings), lambda: earth_heliocentric(d, settings))

    def ecliptic(self, body: BodyLike, d: float, settings: SolverSettings = DEFAULT_SETTINGS) -> Ecliptic:
        body = get_body(body)
        return self._get(("ecliptic", body, d, settings),
                         lambda: ecliptic_position(body, d, self._earth_for(body, d, settings), settings))

    def equatorial(self, body: BodyLike, d: float, settings: SolverSettings = DEFAULT_SETTINGS) -> Equatorial:
        body = get_body(body)
        return self._get(("equatorial", body, d, settings),
                         lambda: equatorial_position(body, d, self._earth_for(body, d, settings), settings))

    def _earth_for(self, body: Body, d: float, settings: SolverSettings) -> Optional[Rectangular]:
        if body.kind is BodyKind.PLANET:
            return self.earth(d, settings)
        return None

    def _get(self, key: Tuple, compute: Callable[[], T]) -> T:
        with self._lock:
            entry = self._entries.get(key)
            owner = entry is None
            if owner:
                entry = Future()
                self._entries[key] = entry

        if owner:
            try:
                value = compute()
            except Exception as exc:
                with self._lock:
                    self._entries.pop(key, None)
                entry.set_exception(exc)
                raise
            with self._lock:
                self.computations += 1
            entry.set_result(value)
            logger.debug("Cached %s at d=%s", key[0], key[-2])

        return entry.result()
