"""Configuration: solver tolerances and output paths, overridable from the environment."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass

DEFAULT_TIME_TOLERANCE_S = 1.0
DEFAULT_MAX_ITERATIONS = 20
DEFAULT_SCAN_STEP_HOURS = 1.0
DEFAULT_KEPLER_TOLERANCE_DEG = 1e-6
DEFAULT_KEPLER_MAX_ITERATIONS = 50
DEFAULT_OUT_DIR = "out"


@dataclass(frozen=True)
class SolverSettings:
    """
    Tunables shared by the iterative solvers.

    Units:
        time_tolerance_s: event solver stops when successive candidates differ by less
        max_iterations: event solver iteration cap (ConvergenceFailure past it)
        scan_step_hours: sample spacing for the parabola-fit scan
        kepler_tolerance_deg: Kepler solver stops when |dE| is at most this
        kepler_max_iterations: Kepler solver iteration cap
    """
    time_tolerance_s: float = DEFAULT_TIME_TOLERANCE_S
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    scan_step_hours: float = DEFAULT_SCAN_STEP_HOURS
    kepler_tolerance_deg: float = DEFAULT_KEPLER_TOLERANCE_DEG
    kepler_max_iterations: int = DEFAULT_KEPLER_MAX_ITERATIONS

    def __post_init__(self):
        if not (math.isfinite(self.time_tolerance_s) and self.time_tolerance_s > 0):
            raise ValueError(f"Time tolerance must be positive. Got: {self.time_tolerance_s}")
        if self.max_iterations < 1:
            raise ValueError(f"Max iterations must be at least 1. Got: {self.max_iterations}")
        if not (0.0 < self.scan_step_hours <= 12.0):
            raise ValueError(f"Scan step must be in range (0, 12] hours. Got: {self.scan_step_hours}")
        if not (math.isfinite(self.kepler_tolerance_deg) and self.kepler_tolerance_deg > 0):
            raise ValueError(f"Kepler tolerance must be positive. Got: {self.kepler_tolerance_deg}")
        if self.kepler_max_iterations < 1:
            raise ValueError(f"Kepler max iterations must be at least 1. Got: {self.kepler_max_iterations}")

    @property
    def time_tolerance_days(self) -> float:
        return self.time_tolerance_s / 86400.0


DEFAULT_SETTINGS = SolverSettings()


def get_solver_settings() -> SolverSettings:
    """Return solver settings with SKY_EPHEM_* environment overrides applied.

    Returns:
        SolverSettings built from SKY_EPHEM_TIME_TOLERANCE_S,
        SKY_EPHEM_MAX_ITERATIONS and SKY_EPHEM_SCAN_STEP_HOURS (or defaults).
    """
    return SolverSettings(
        time_tolerance_s=float(os.environ.get("SKY_EPHEM_TIME_TOLERANCE_S", DEFAULT_TIME_TOLERANCE_S)),
        max_iterations=int(os.environ.get("SKY_EPHEM_MAX_ITERATIONS", DEFAULT_MAX_ITERATIONS)),
        scan_step_hours=float(os.environ.get("SKY_EPHEM_SCAN_STEP_HOURS", DEFAULT_SCAN_STEP_HOURS)),
    )


def get_output_dir() -> str:
    """Return directory for rendered charts and exports (SKY_EPHEM_OUT_DIR or default)."""
    return os.environ.get("SKY_EPHEM_OUT_DIR", DEFAULT_OUT_DIR)
