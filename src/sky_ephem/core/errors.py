from __future__ import annotations

from typing import Optional


class EphemerisError(Exception):
    """Base class for failures raised by the ephemeris core."""


class DomainError(EphemerisError, ValueError):
    """
    An input lies outside the domain of a formula (e.g. eccentricity >= 1,
    a position vector of zero length).
    """


class ConvergenceFailure(EphemerisError, RuntimeError):
    """
    An iterative solver hit its iteration cap before meeting its tolerance.

    This signals malformed input or a bug, never a legitimate astronomical
    outcome (circumpolar bodies are reported with NO_EVENT instead).
    """

    def __init__(self, solver: str, iterations: int, last_estimate: Optional[float] = None):
        self.solver = solver
        self.iterations = iterations
        self.last_estimate = last_estimate
        super().__init__(
            f"{solver} did not converge within {iterations} iterations "
            f"(last estimate: {last_estimate})."
        )
