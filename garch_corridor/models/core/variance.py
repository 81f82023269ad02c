"""Conditional-variance recursions for the GARCH family.

All recursions are causal filters: v[0] is the supplied initial variance and
v[t] depends only on data up to t-1. With ``extend=True`` one extra entry is
appended, which is the one-step-ahead variance after the last observation.

GARCH and GJR-GARCH are linear in v and run through ``scipy.signal.lfilter``;
EGARCH depends on v through the standardized residual and is iterated
explicitly in log-space with clamping.
"""

from __future__ import annotations

import math

import numpy as np
from scipy.signal import lfilter

from garch_corridor.config_logging import get_logger
from garch_corridor.constants import (
    EGARCH_LOG_VAR_MAX,
    EGARCH_LOG_VAR_MIN,
    MIN_INIT_VARIANCE,
)

logger = get_logger(__name__)


def initialize_variance(estimate: float) -> float:
    """Clamp an initial variance estimate to ``MIN_INIT_VARIANCE``.

    Flat or constant price data gives a zero estimate; the floor keeps the
    recursion and the log-variance seed finite.
    """
    if not math.isfinite(estimate):
        return MIN_INIT_VARIANCE
    return max(float(estimate), MIN_INIT_VARIANCE)


def clamp_log_variance(log_variance: float) -> float:
    """Clamp log-variance to [EGARCH_LOG_VAR_MIN, EGARCH_LOG_VAR_MAX]."""
    return min(max(log_variance, EGARCH_LOG_VAR_MIN), EGARCH_LOG_VAR_MAX)


def _linear_recursion(
    drive: np.ndarray, init_variance: float, beta: float, extend: bool
) -> np.ndarray:
    """Solve v[t] = drive[t-1] + beta * v[t-1] with v[0] = init_variance."""
    if not extend:
        drive = drive[:-1]
    tail = lfilter([1.0], [1.0, -beta], drive, zi=[beta * init_variance])[0]
    return np.concatenate(([init_variance], tail))


def garch_variance_path(
    innovations: np.ndarray,
    init_variance: float,
    omega: float,
    alpha: float,
    beta: float,
    *,
    extend: bool = False,
) -> np.ndarray:
    """Compute the GARCH(1,1) variance path.

    Implements: v_t = omega + alpha * innovation_{t-1} + beta * v_{t-1}

    Args:
        innovations: Squared returns or per-candle realized variance.
        init_variance: v_0.
        omega: Constant term.
        alpha: ARCH coefficient.
        beta: GARCH coefficient.
        extend: Append the one-step-ahead variance.

    Returns:
        Variance path of length n (or n + 1 when extended).
    """
    drive = omega + alpha * innovations
    return _linear_recursion(drive, init_variance, beta, extend)


def gjr_variance_path(
    innovations: np.ndarray,
    returns: np.ndarray,
    init_variance: float,
    omega: float,
    alpha: float,
    gamma: float,
    beta: float,
    *,
    extend: bool = False,
) -> np.ndarray:
    """Compute the GJR-GARCH(1,1) variance path.

    Implements: v_t = omega + (alpha + gamma * I(r_{t-1} < 0)) * innovation_{t-1} + beta * v_{t-1}

    The indicator always comes from the close-to-close return sign, even when
    the innovation is a range-based proxy.
    """
    indicator = (returns < 0.0).astype(float)
    drive = omega + (alpha + gamma * indicator) * innovations
    return _linear_recursion(drive, init_variance, beta, extend)


def egarch_variance_path(
    returns: np.ndarray,
    realized: np.ndarray | None,
    init_variance: float,
    omega: float,
    alpha: float,
    gamma: float,
    beta: float,
    kappa: float,
    *,
    extend: bool = False,
) -> np.ndarray:
    """Compute the EGARCH(1,1) variance path.

    Implements: ln v_t = omega + alpha * (m_{t-1} - kappa) + gamma * z_{t-1} + beta * ln v_{t-1}
    where z = r / sqrt(v) and m is |z| for squared-return input or
    sqrt(RV / v) when a realized-variance proxy is supplied. The sign term
    always uses the actual standardized return.

    Log-variance is clamped to [EGARCH_LOG_VAR_MIN, EGARCH_LOG_VAR_MAX] at
    every step so pathological parameters cannot overflow.

    Args:
        returns: Return series.
        realized: Per-period realized variance, or None for |z| magnitudes.
        init_variance: v_0 (must be positive).
        omega: Constant term.
        alpha: Magnitude coefficient.
        gamma: Leverage coefficient.
        beta: Log-variance persistence.
        kappa: E[|Z|] under the innovation distribution.
        extend: Append the one-step-ahead variance.

    Returns:
        Variance path of length n (or n + 1 when extended).
    """
    r = returns.tolist()
    rv = realized.tolist() if realized is not None else None
    n = len(r)
    steps = n + 1 if extend else n

    out = np.empty(steps, dtype=float)
    variance = init_variance
    log_variance = math.log(init_variance)
    out[0] = variance
    clamped = 0

    for t in range(1, steps):
        z = r[t - 1] / math.sqrt(variance)
        magnitude = math.sqrt(rv[t - 1] / variance) if rv is not None else abs(z)
        log_variance = omega + alpha * (magnitude - kappa) + gamma * z + beta * log_variance
        if not EGARCH_LOG_VAR_MIN <= log_variance <= EGARCH_LOG_VAR_MAX:
            if math.isnan(log_variance):
                out[t:] = math.nan
                return out
            clamped += 1
            log_variance = clamp_log_variance(log_variance)
        variance = math.exp(log_variance)
        out[t] = variance

    if clamped:
        logger.debug("Clamped %d EGARCH(1,1) log-variance steps", clamped)
    return out


def geometric_forecast(
    first: float, omega: float, persistence: float, steps: int
) -> np.ndarray:
    """Multi-step forecast v_{h+1} = omega + persistence * v_h from a one-step value."""
    out = np.empty(steps, dtype=float)
    v = first
    for h in range(steps):
        if h > 0:
            v = omega + persistence * v
        out[h] = v
    return out


def egarch_log_forecast(first: float, omega: float, beta: float, steps: int) -> np.ndarray:
    """Multi-step EGARCH forecast ln v_{h+1} = omega + beta * ln v_h, clamped."""
    out = np.empty(steps, dtype=float)
    log_variance = math.log(first)
    out[0] = first
    for h in range(1, steps):
        log_variance = clamp_log_variance(omega + beta * log_variance)
        out[h] = math.exp(log_variance)
    return out
