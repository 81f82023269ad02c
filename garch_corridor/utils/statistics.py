"""Statistical primitives: autocorrelation, Ljung-Box and normal quantiles."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from scipy.stats import chi2, norm

__all__ = [
    "LjungBoxResult",
    "autocorr",
    "ljung_box",
    "standard_normal_quantile",
]


@dataclass(frozen=True)
class LjungBoxResult:
    """Ljung-Box portmanteau statistic and its chi-square p-value."""

    statistic: float
    p_value: float


def autocorr(x: np.ndarray, nlags: int) -> np.ndarray:
    """Return sample autocorrelation r_k for k=0..nlags.

    Uses a mean-centered series with a biased denominator (sum of squares).
    A constant series has no defined autocorrelation and yields zeros.
    """
    x = np.asarray(x, dtype=float).ravel()
    if x.size == 0:
        return np.zeros(nlags + 1, dtype=float)
    x = x - float(np.nanmean(x))
    denom = float(np.sum(x * x))
    if denom <= 0.0 or not np.isfinite(denom):
        return np.zeros(nlags + 1, dtype=float)
    r = np.empty(nlags + 1, dtype=float)
    r[0] = 1.0
    for k in range(1, nlags + 1):
        r[k] = float(np.sum(x[k:] * x[:-k])) / denom
    return r


def ljung_box(series: np.ndarray, max_lag: int) -> LjungBoxResult:
    """Ljung-Box test for autocorrelation up to ``max_lag``.

    Q = n(n+2) * sum_{k=1..h} r_k^2 / (n-k), compared against chi2(h).

    Args:
        series: Observations (e.g. squared standardized residuals).
        max_lag: Number of lags h.

    Returns:
        LjungBoxResult with Q and its p-value.

    Raises:
        ValueError: If ``max_lag`` is not positive or the series is too short.
    """
    series = np.asarray(series, dtype=float).ravel()
    if max_lag < 1:
        msg = f"max_lag must be >= 1, got {max_lag}"
        raise ValueError(msg)
    if series.size <= max_lag:
        msg = f"Need more than {max_lag} observations for Ljung-Box, got {series.size}"
        raise ValueError(msg)

    r = autocorr(series, max_lag)
    n = float(np.sum(np.isfinite(series)))
    lags = np.arange(1, max_lag + 1, dtype=float)
    q = n * (n + 2.0) * float(np.sum(r[1:] ** 2 / np.maximum(1.0, n - lags)))
    return LjungBoxResult(statistic=q, p_value=float(chi2.sf(q, df=max_lag)))


def standard_normal_quantile(confidence: float) -> float:
    """Two-sided standard-normal quantile for a central coverage level.

    ``standard_normal_quantile(0.6827)`` is about 1, ``0.95`` about 1.96.

    Raises:
        ValueError: If ``confidence`` is outside the open interval (0, 1).
    """
    if not (0.0 < confidence < 1.0):
        msg = f"Confidence must be in (0, 1), got {confidence}"
        raise ValueError(msg)
    return float(norm.ppf(0.5 + confidence / 2.0))
