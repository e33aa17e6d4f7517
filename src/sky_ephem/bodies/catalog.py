"""
Static coefficient tables: planetary elements and the fixed-star list.

Planetary elements are the JPL "Keplerian elements for approximate positions
of the major planets" (valid 1800-2050): each row is
(a, e, I, L, long.peri, long.node) at J2000.0 followed by rates per century.
"""

from __future__ import annotations

from typing import Dict, Union

from sky_ephem.bodies.body import MOON, SUN, Body, BodyKind
from sky_ephem.physics.orbit import OrbitalElements

# Earth-Moon barycentre; the node longitude is undefined for I~0 and fixed at 0.
EARTH_ELEMENTS = OrbitalElements(
    1.00000261, 0.01671123, -0.00001531, 100.46457166, 102.93768193, 0.0,
    0.00000562, -0.00004392, -0.01294668, 35999.37244981, 0.32327364, 0.0,
)

PLANET_ELEMENTS: Dict[str, OrbitalElements] = {
    "mercury": OrbitalElements(
        0.38709927, 0.20563593, 7.00497902, 252.25032350, 77.45779628, 48.33076593,
        0.00000037, 0.00001906, -0.00594749, 149472.67411175, 0.16047689, -0.12534081,
    ),
    "venus": OrbitalElements(
        0.72333566, 0.00677672, 3.39467605, 181.97909950, 131.60246718, 76.67984255,
        0.00000390, -0.00004107, -0.00078890, 58517.81538729, 0.00268329, -0.27769418,
    ),
    "mars": OrbitalElements(
        1.52371034, 0.09339410, 1.84969142, 355.44656795, 336.05637041, 49.55953891,
        0.00001847, 0.00007882, -0.00813131, 19140.30268499, 0.44441088, -0.29257343,
    ),
    "jupiter": OrbitalElements(
        5.20288700, 0.04838624, 1.30439695, 34.39644051, 14.72847983, 100.47390909,
        -0.00011607, -0.00013253, -0.00183714, 3034.74612775, 0.21252668, 0.20469106,
    ),
    "saturn": OrbitalElements(
        9.53667594, 0.05386179, 2.48599187, 49.95424423, 92.59887831, 113.66242448,
        -0.00125060, -0.00050991, 0.00193609, 1222.49362201, -0.41897216, -0.28867794,
    ),
    "uranus": OrbitalElements(
        19.18916464, 0.04725744, 0.77263783, 313.23810451, 170.95427630, 74.01692503,
        -0.00196176, -0.00004397, -0.00242939, 428.48202785, 0.40805281, 0.04240589,
    ),
    "neptune": OrbitalElements(
        30.06992276, 0.00859048, 1.77004347, 304.87997031, 44.96476227, 131.78422574,
        0.00026291, 0.00005105, 0.00035372, 218.45945325, -0.32241464, -0.00508664,
    ),
}

# (name, right ascension, declination), J2000, degrees
STAR_COORDINATES = [
    # 10 brightest stars
    ("sirius", 101.287155, -16.716116),
    ("canopus", 95.987958, -52.695661),
    ("rigil_kentaurus", 219.899077, -60.835760),
    ("arcturus", 213.915417, 19.182222),
    ("vega", 279.234735, 38.783689),
    ("capella", 79.172328, 45.997991),
    ("rigel", 78.634467, -8.201638),
    ("procyon", 114.825498, 5.224988),
    ("achernar", 24.428523, -57.236753),
    ("betelgeuse", 88.792939, 7.407064),
    # Behenian fixed stars not listed above
    ("algol", 47.042219, 40.955647),
    ("pleiades", 56.850000, 24.116667),
    ("aldebaran", 68.980163, 16.509302),
    ("regulus", 152.092962, 11.967208),
    ("alkaid", 206.885157, 49.313267),
    ("algorab", 187.466063, -16.515431),
    ("spica", 201.298246, -11.161319),
    ("alphecca", 233.671950, 26.714692),
    ("antares", 247.351915, -26.432003),
    ("deneb_algedi", 326.760184, -16.127287),
    # royal star not listed above
    ("fomalhaut", 344.100222, -31.565565),
    ("polaris", 37.954542, 89.264111),
]

PLANETS: Dict[str, Body] = {
    name: Body(name, BodyKind.PLANET, elements=elements)
    for name, elements in PLANET_ELEMENTS.items()
}

STARS: Dict[str, Body] = {
    name: Body(name, BodyKind.STAR, ra_deg=ra, dec_deg=dec)
    for name, ra, dec in STAR_COORDINATES
}

BODIES: Dict[str, Body] = {SUN.name: SUN, MOON.name: MOON, **PLANETS, **STARS}


def get_body(body: Union[Body, str]) -> Body:
    """Resolve a body by (case-insensitive) name; Body instances pass through."""
    if isinstance(body, Body):
        return body
    key = body.strip().lower().replace(" ", "_")
    if key not in BODIES:
        raise ValueError(f"Unknown body: {body!r}")
    return BODIES[key]
