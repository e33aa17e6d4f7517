from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from sky_ephem.physics.orbit import OrbitalElements


class BodyKind(Enum):
    """Which model supplies a body's position."""
    SUN = "sun"  # closed-form series
    MOON = "moon"  # Kepler elements plus perturbation series
    PLANET = "planet"  # linear Kepler elements, heliocentric
    STAR = "star"  # fixed equatorial coordinates


@dataclass(frozen=True)
class Body:
    """
    One variant type for everything in the sky. Planets carry an element
    set; stars carry fixed J2000 equatorial coordinates in degrees.
    """
    name: str
    kind: BodyKind
    elements: Optional[OrbitalElements] = None
    ra_deg: Optional[float] = None
    dec_deg: Optional[float] = None

    def __post_init__(self):
        if not self.name.strip():
            raise ValueError("Body name cannot be empty or whitespace.")
        if self.kind is BodyKind.PLANET and self.elements is None:
            raise ValueError(f"Planet {self.name!r} requires orbital elements.")
        if self.kind is BodyKind.STAR:
            if self.ra_deg is None or self.dec_deg is None:
                raise ValueError(f"Star {self.name!r} requires right ascension and declination.")
            if not (math.isfinite(self.ra_deg) and 0.0 <= self.ra_deg < 360.0):
                raise ValueError(f"Right ascension must be in range [0, 360) degrees. Got: {self.ra_deg}")
            if not (-90.0 <= self.dec_deg <= 90.0):
                raise ValueError(f"Declination must be in range [-90, 90] degrees. Got: {self.dec_deg}")

    @property
    def is_fixed(self) -> bool:
        return self.kind is BodyKind.STAR


SUN = Body("sun", BodyKind.SUN)
MOON = Body("moon", BodyKind.MOON)
