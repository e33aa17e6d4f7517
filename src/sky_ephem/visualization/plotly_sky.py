from __future__ import annotations

from pathlib import Path
from typing import Optional

import plotly.graph_objects as go

from sky_ephem.analysis.sky_track import SkyTrack
from sky_ephem.core.epoch import ms_to_datetime


def render_altitude_chart(
    track: SkyTrack,
    out_html: str = "out/altitude_chart.html",
    horizon_deg: Optional[float] = 0.0,
) -> str:
    """
    Renders altitude against time:
      - one line per body
      - event markers (rise/set/transit) from track.events
      - optional horizon line
    """
    fig = go.Figure()

    for body_name, samples in track.samples.items():
        fig.add_trace(go.Scatter(
            x=[ms_to_datetime(t) for (t, _hz) in samples],
            y=[hz.altitude for (_t, hz) in samples],
            mode="lines",
            name=body_name,
        ))

    if track.events:
        fig.add_trace(go.Scatter(
            x=[ms_to_datetime(ev["t_ms"]) for ev in track.events],
            y=[0.0 for _ev in track.events],
            mode="markers+text",
            text=[f"{ev['body']} {ev['kind']}" for ev in track.events],
            textposition="top center",
            name="events",
            marker=dict(size=7, symbol="diamond"),
        ))

    if horizon_deg is not None:
        fig.add_hline(y=horizon_deg, line_dash="dash", line_color="gray")

    fig.update_layout(
        title=f"Altitude over time at {track.observer.name}",
        xaxis_title="Time (UTC)",
        yaxis_title="Altitude (deg)",
        yaxis=dict(range=[-90, 90]),
        margin=dict(l=40, r=20, t=40, b=40),
        legend=dict(orientation="h"),
    )

    Path(out_html).parent.mkdir(parents=True, exist_ok=True)
    fig.write_html(out_html, auto_open=False)
    return out_html


def render_sky_dome(
    track: SkyTrack,
    out_html: str = "out/sky_dome.html",
) -> str:
    """
    Renders the above-horizon part of each track on a polar dome:
    radius = zenith distance, angle = azimuth (North up, East clockwise).
    """
    fig = go.Figure()

    for body_name, samples in track.samples.items():
        visible = [(t, hz) for (t, hz) in samples if hz.altitude >= 0.0]
        if not visible:
            continue
        fig.add_trace(go.Scatterpolar(
            r=[90.0 - hz.altitude for (_t, hz) in visible],
            theta=[hz.azimuth for (_t, hz) in visible],
            mode="lines+markers",
            marker=dict(size=3),
            name=body_name,
            text=[ms_to_datetime(t).strftime("%H:%M") for (t, _hz) in visible],
        ))

    fig.update_layout(
        title=f"Sky dome at {track.observer.name}",
        polar=dict(
            radialaxis=dict(range=[0, 90], tickvals=[0, 30, 60, 90], ticktext=["90", "60", "30", "0"]),
            angularaxis=dict(rotation=90, direction="clockwise"),
        ),
        margin=dict(l=20, r=20, t=40, b=20),
    )

    Path(out_html).parent.mkdir(parents=True, exist_ok=True)
    fig.write_html(out_html, auto_open=False)
    return out_html
