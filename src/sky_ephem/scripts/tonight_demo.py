import logging
import os
import time
from typing import Optional

from sky_ephem.analysis.sky_track import TrackEngine, visibility_windows
from sky_ephem.bodies.body import MOON, SUN
from sky_ephem.bodies.moon import moon_phase
from sky_ephem.core.config import get_output_dir
from sky_ephem.core.epoch import j2000_days, ms_to_datetime
from sky_ephem.objects.observer import Observer
from sky_ephem.physics.ephemeris import EphemerisCache
from sky_ephem.physics.events import NO_EVENT
from sky_ephem.visualization.export_log import export_track_to_json
from sky_ephem.visualization.plotly_sky import render_altitude_chart, render_sky_dome

logger = logging.getLogger(__name__)

HOUR_MS = 3_600_000.0


def fmt(t_ms) -> str:
    if t_ms is NO_EVENT:
        return "--"
    return ms_to_datetime(t_ms).strftime("%Y-%m-%d %H:%M:%S UTC")


def main(out_dir: Optional[str] = None, now_ms: Optional[float] = None):
    out_dir = out_dir or get_output_dir()
    now_ms = time.time() * 1000.0 if now_ms is None else now_ms

    cache = EphemerisCache()
    # Albuquerque, NM
    obs = Observer("Albuquerque", 35.05, -106.62, cache=cache)

    day = obs.solar_day(now_ms)
    print(f"Sun at {obs.name} ({obs.lat_deg:.2f}, {obs.lon_deg:.2f}):")
    print(f"  dawn    {fmt(day.dawn)}")
    print(f"  rise    {fmt(day.rise)}")
    print(f"  transit {fmt(day.transit)}")
    print(f"  set     {fmt(day.set)}")
    print(f"  dusk    {fmt(day.dusk)}")

    phase = moon_phase(j2000_days(now_ms))
    print("Moon:")
    print(f"  next rise    {fmt(obs.next_rise(MOON, now_ms))}")
    print(f"  next transit {fmt(obs.next_transit(MOON, now_ms))}")
    print(f"  next set     {fmt(obs.next_set(MOON, now_ms))}")
    print(f"  illuminated  {phase.illumination * 100.0:.0f}%")

    engine = TrackEngine(dt_ms=10 * 60 * 1000.0, bodies=[SUN, MOON, "mars", "jupiter"], cache=cache)
    track = engine.run(obs, now_ms, now_ms + 24 * HOUR_MS)
    for kind, t_ms in (("rise", day.rise), ("transit", day.transit), ("set", day.set)):
        if t_ms is not NO_EVENT:
            track.record_event(SUN.name, kind, t_ms)

    for a, b in visibility_windows(track, MOON.name):
        print(f"  moon up {fmt(a)} -> {fmt(b)}")

    chart_path = render_altitude_chart(track, out_html=os.path.join(out_dir, "altitude_chart.html"))
    dome_path = render_sky_dome(track, out_html=os.path.join(out_dir, "sky_dome.html"))
    json_path = export_track_to_json(track, out_path=os.path.join(out_dir, "sky_track.json"))
    logger.info("Cache holds %d entries after %d computations", len(cache), cache.computations)

    print("Wrote:")
    print(" -", chart_path)
    print(" -", dome_path)
    print(" -", json_path)
    print("\nOpen the HTML files in your browser.")
    return [chart_path, dome_path, json_path]


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    main()
