# Two-body elliptic motion, degree-based

from __future__ import annotations

import logging
import math

from sky_ephem.core.angles import DEG, cos, sin, wrap_to_360
from sky_ephem.core.config import DEFAULT_KEPLER_MAX_ITERATIONS, DEFAULT_KEPLER_TOLERANCE_DEG
from sky_ephem.core.errors import ConvergenceFailure, DomainError

logger = logging.getLogger(__name__)


def kepler_residual_deg(E_deg: float, M_deg: float, e: float) -> float:
    """E - e sin(E) - M, with the eccentricity term scaled into degrees."""
    return E_deg - e * DEG * sin(E_deg) - M_deg


def solve_keplers_equation(
    M_deg: float,
    e: float,
    tol: float = DEFAULT_KEPLER_TOLERANCE_DEG,
    max_iter: int = DEFAULT_KEPLER_MAX_ITERATIONS,
) -> float:
    """
    Solve Kepler's equation for elliptic orbits:
        M = E - e sin(E)
    using Newton-Raphson, all angles in degrees.

    Args:
        M_deg: Mean anomaly (deg), wrapped to [0, 360) before solving
        e: eccentricity (0 <= e < 1)
        tol: convergence tolerance on |dE| (deg)
        max_iter: iteration cap

    Returns:
        E_deg: Eccentric anomaly (deg), consistent with the wrapped M
    """
    if not (0.0 <= e < 1.0):
        raise DomainError(f"Elliptic Kepler solver requires 0 <= e < 1. Got: {e}")
    if not math.isfinite(M_deg):
        raise DomainError(f"Mean anomaly must be finite. Got: {M_deg}")

    M = wrap_to_360(M_deg)

    # Good initial guess
    if e < 0.8:
        E = M + e * DEG * sin(M)
    else:
        # For higher e, start at aphelion to avoid overshoot near M~0
        E = 180.0

    for i in range(max_iter):
        dE = -kepler_residual_deg(E, M, e) / (1.0 - e * cos(E))
        E += dE
        if abs(dE) <= tol:
            logger.debug("Kepler solver converged after %d iterations (M=%.6f, e=%.6f)", i + 1, M, e)
            return E

    logger.error("Kepler solver did not converge (M=%.6f, e=%.6f, E=%.9f)", M, e, E)
    raise ConvergenceFailure("Kepler solver", max_iter, E)
