from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sky_ephem.bodies.catalog import get_body
from sky_ephem.core.epoch import j2000_days
from sky_ephem.core.frames import Horizontal
from sky_ephem.objects.observer import Observer
from sky_ephem.physics.ephemeris import BodyLike, EphemerisCache

logger = logging.getLogger(__name__)


@dataclass
class SkyTrack:
    """
    Horizontal positions sampled over a time range for one observer.
    Plain containers only, so export_track_to_json can dump it directly.
    """
    observer: Observer
    # body name -> list of (t_ms, horizontal)
    samples: Dict[str, List[Tuple[float, Horizontal]]] = field(default_factory=dict)

    # {"body", "kind", "t_ms"} markers for charts and export
    events: List[Dict[str, Any]] = field(default_factory=list)

    def record_position(self, body_name: str, t_ms: float, hz: Horizontal) -> None:
        self.samples.setdefault(body_name, []).append((t_ms, hz))

    def record_event(self, body_name: str, kind: str, t_ms: float) -> None:
        self.events.append({"body": body_name, "kind": kind, "t_ms": t_ms})

    def times_ms(self, body_name: str) -> List[float]:
        return [t for (t, _hz) in self.samples.get(body_name, [])]


@dataclass
class TrackEngine:
    """
    Fixed-step sampler of body positions as seen by an observer.
    Same observer, bodies, dt and range always give the same samples.
    """
    dt_ms: float
    bodies: Sequence[BodyLike] = ("sun", "moon")
    cache: Optional[EphemerisCache] = None

    def run(self, observer: Observer, t_start_ms: float, t_end_ms: float) -> SkyTrack:
        if self.dt_ms <= 0:
            raise ValueError("dt_ms must be positive.")
        if t_end_ms < t_start_ms:
            raise ValueError("t_end_ms must be >= t_start_ms.")

        bodies = [get_body(b) for b in self.bodies]
        track = SkyTrack(observer=observer)
        cache = self.cache if self.cache is not None else EphemerisCache()
        sampler = Observer(observer.name, observer.lat_deg, observer.lon_deg, observer.settings, cache)

        # t_end_ms is sampled when it falls on the grid
        t = t_start_ms
        while t <= t_end_ms + 1e-6:
            for body in bodies:
                track.record_position(body.name, t, sampler.horizontal(body, t))
            t += self.dt_ms

        logger.debug("Sampled %d bodies from d=%.4f to d=%.4f", len(bodies), j2000_days(t_start_ms),
                     j2000_days(t_end_ms))
        return track


def compute_visibility_windows(
    times_ms: List[float],
    visible_flags: List[bool],
) -> List[Tuple[float, float]]:
    """
    Turn a sampled up/down series into (first sample up, first sample down)
    pairs. A window still open at the last sample ends there.
    """
    if len(times_ms) != len(visible_flags):
        raise ValueError("times_ms and visible_flags must be same length.")

    windows: List[Tuple[float, float]] = []
    start: Optional[float] = None

    for t, up in zip(times_ms, visible_flags):
        if up and start is None:
            start = t
        elif not up and start is not None:
            windows.append((start, t))
            start = None

    if start is not None:
        windows.append((start, times_ms[-1]))
    return windows


def visibility_windows(track: SkyTrack, body_name: str, min_altitude_deg: float = 0.0) -> List[Tuple[float, float]]:
    """Sampled windows during which the body stays at or above min_altitude_deg."""
    if body_name not in track.samples:
        raise ValueError(f"Body '{body_name}' not found in track samples")
    samples = track.samples[body_name]
    times = [t for (t, _hz) in samples]
    flags = [hz.altitude >= min_altitude_deg for (_t, hz) in samples]
    return compute_visibility_windows(times, flags)
