"""Input validation and parameter feasibility checks for the models.

``validate_*`` functions raise ``ValueError`` and guard public entry points.
``*_feasible`` predicates are used inside objectives, which must signal
infeasibility with a penalty value rather than an exception.
"""

from __future__ import annotations

import numpy as np

from garch_corridor.constants import (
    GARCH_MIN_OMEGA,
    MIN_VARIANCE,
    STATIONARITY_BOUND,
)
from garch_corridor.models.core.distributions import df_in_range


def validate_min_data_points(length: int, minimum: int, model_name: str) -> None:
    """Raise ValueError if fewer than ``minimum`` data points were supplied."""
    if length < minimum:
        msg = f"Need at least {minimum} data points for {model_name} estimation"
        raise ValueError(msg)


def validate_steps(steps: int) -> None:
    """Raise ValueError unless ``steps`` is a positive integer."""
    if isinstance(steps, bool) or int(steps) != steps or steps < 1:
        msg = f"Forecast steps must be a positive integer, got {steps}"
        raise ValueError(msg)


def variance_path_feasible(variances: np.ndarray) -> bool:
    """True when every variance is finite and above ``MIN_VARIANCE``."""
    return bool(np.all(np.isfinite(variances)) and np.min(variances) > MIN_VARIANCE)


def garch_feasible(omega: float, alpha: float, beta: float, df: float) -> bool:
    """GARCH(1,1): omega > 0, alpha, beta >= 0, alpha + beta < 1, df admissible."""
    if omega <= GARCH_MIN_OMEGA or alpha < 0.0 or beta < 0.0:
        return False
    return alpha + beta < STATIONARITY_BOUND and df_in_range(df)


def gjr_feasible(omega: float, alpha: float, gamma: float, beta: float, df: float) -> bool:
    """GJR-GARCH(1,1): non-negative weights and alpha + gamma/2 + beta < 1."""
    if omega <= GARCH_MIN_OMEGA or alpha < 0.0 or gamma < 0.0 or beta < 0.0:
        return False
    return alpha + 0.5 * gamma + beta < STATIONARITY_BOUND and df_in_range(df)


def egarch_feasible(alpha: float, beta: float, df: float, *, range_proxy: bool = False) -> bool:
    """EGARCH(1,1): |beta| < 1 and df admissible.

    With a range proxy the magnitude sqrt(RV / v) rises as v falls, so alpha < 0
    drives the log-variance into a self-reinforcing collapse; alpha >= 0 is
    required there. With |z| magnitudes the sign of alpha is free.
    """
    if range_proxy and alpha < 0.0:
        return False
    return abs(beta) < STATIONARITY_BOUND and df_in_range(df)


def har_feasible(beta_short: float, beta_medium: float, beta_long: float, df: float) -> bool:
    """HAR-RV: beta_short + beta_medium + beta_long < 1 and df admissible."""
    return beta_short + beta_medium + beta_long < STATIONARITY_BOUND and df_in_range(df)
