"""
Conversion between wall-clock instants and the internal epoch axis.

The internal epoch `d` is a float number of days since J2000.0
(2000-01-01T12:00Z). The difference between UT and TT is ignored.
At the public boundary, instants are milliseconds since the Unix epoch.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sky_ephem.core.constants import DAYS_PER_CENTURY, MS_PER_DAY, UNIX_EPOCH_J2000_DAYS


def j2000_days(time_ms: float) -> float:
    """Unix milliseconds -> days since J2000.0."""
    return time_ms / MS_PER_DAY + UNIX_EPOCH_J2000_DAYS


def time_ms_from_j2000(d: float) -> float:
    """Days since J2000.0 -> Unix milliseconds."""
    return (d - UNIX_EPOCH_J2000_DAYS) * MS_PER_DAY


def julian_centuries(d: float) -> float:
    return d / DAYS_PER_CENTURY


def datetime_to_ms(dt: datetime) -> float:
    """
    Convert an aware datetime to Unix milliseconds.
    Naive datetimes are rejected: the caller must say which zone they mean.
    """
    if dt.tzinfo is None or dt.tzinfo.utcoffset(dt) is None:
        raise ValueError(f"Datetime must be timezone-aware. Got: {dt!r}")
    return dt.timestamp() * 1000.0


def ms_to_datetime(time_ms: float) -> datetime:
    return datetime.fromtimestamp(time_ms / 1000.0, tz=timezone.utc)


def parse_iso(text: str) -> float:
    """
    Parse an ISO-8601 timestamp with an explicit offset (or trailing 'Z')
    into Unix milliseconds.
    """
    s = text.strip()
    if s.endswith("Z") or s.endswith("z"):
        s = s[:-1] + "+00:00"
    return datetime_to_ms(datetime.fromisoformat(s))
