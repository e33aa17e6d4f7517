from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from sky_ephem.analysis.sky_track import SkyTrack
from sky_ephem.core.epoch import ms_to_datetime


def export_track_to_json(track: SkyTrack, out_path: str = "out/sky_track.json") -> str:
    """
    Export playback data:
      {
        "observer": {"name": "...", "lat_deg": ..., "lon_deg": ...},
        "samples": {
          "sun": [{"t_ms": ..., "utc": "...", "alt": ..., "az": ...}, ...],
          ...
        },
        "events": [{"body": "sun", "kind": "rise", "t_ms": ...}, ...]
      }
    """
    data: Dict[str, Any] = {
        "observer": {
            "name": track.observer.name,
            "lat_deg": track.observer.lat_deg,
            "lon_deg": track.observer.lon_deg,
        },
        "samples": {},
        "events": list(track.events),
    }

    for body_name, samples in track.samples.items():
        data["samples"][body_name] = [
            {"t_ms": t, "utc": ms_to_datetime(t).isoformat(), "alt": hz.altitude, "az": hz.azimuth}
            for (t, hz) in samples
        ]

    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(data, f)

    return out_path
