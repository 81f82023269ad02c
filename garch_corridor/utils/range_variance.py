"""Range-based variance estimators built from OHLC candles.

These serve two purposes in the models: a better zero-step variance anchor
(Garman-Klass, Yang-Zhang) and a per-candle realized-variance proxy
(Parkinson) that replaces squared returns as the recursion innovation.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from garch_corridor.constants import YANG_ZHANG_K_NUMERATOR, YANG_ZHANG_K_OFFSET
from garch_corridor.utils.returns import Candle

__all__ = [
    "garman_klass_variance",
    "per_candle_parkinson",
    "yang_zhang_variance",
]

_PARKINSON_SCALE = 1.0 / (4.0 * math.log(2.0))
_GK_CLOSE_COEFF = 2.0 * math.log(2.0) - 1.0


def _ohlc(candles: Sequence[Candle]) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    o = np.array([c.open for c in candles], dtype=float)
    h = np.array([c.high for c in candles], dtype=float)
    lo = np.array([c.low for c in candles], dtype=float)
    c = np.array([c.close for c in candles], dtype=float)
    return o, h, lo, c


def garman_klass_variance(candles: Sequence[Candle]) -> float:
    """Garman-Klass per-period variance averaged over all candles.

    sigma^2 = mean(0.5 * ln(H/L)^2 - (2 ln 2 - 1) * ln(C/O)^2)

    Raises:
        ValueError: If ``candles`` is empty.
    """
    if len(candles) == 0:
        raise ValueError("Need at least 1 candle for Garman-Klass variance")
    o, h, lo, c = _ohlc(candles)
    hl = np.log(h / lo)
    co = np.log(c / o)
    return float(np.mean(0.5 * hl * hl - _GK_CLOSE_COEFF * co * co))


def yang_zhang_variance(candles: Sequence[Candle]) -> float:
    """Yang-Zhang variance combining overnight, open-close and Rogers-Satchell terms.

    Uses candles 1..n-1 so that every term has a previous close. With fewer
    than three candles the sample variances are undefined and the estimate
    falls back to Garman-Klass.

    Args:
        candles: Ordered candles.

    Returns:
        Per-period variance estimate (non-negative).
    """
    if len(candles) < 3:
        return garman_klass_variance(candles)

    o, h, lo, c = _ohlc(candles)
    overnight = np.log(o[1:] / c[:-1])
    open_close = np.log(c[1:] / o[1:])
    rogers_satchell = (
        np.log(h[1:] / c[1:]) * np.log(h[1:] / o[1:])
        + np.log(lo[1:] / c[1:]) * np.log(lo[1:] / o[1:])
    )

    n = overnight.size
    k = YANG_ZHANG_K_NUMERATOR / (YANG_ZHANG_K_OFFSET + (n + 1) / (n - 1))
    variance = (
        float(np.var(overnight, ddof=1))
        + k * float(np.var(open_close, ddof=1))
        + (1.0 - k) * float(np.mean(rogers_satchell))
    )
    return max(variance, 0.0)


def per_candle_parkinson(candles: Sequence[Candle], returns: np.ndarray) -> np.ndarray:
    """Parkinson realized variance for each return period.

    ``rv[i]`` is computed from candle ``i + 1`` (the candle that closes the
    i-th return) as ``ln(H/L)^2 / (4 ln 2)``. Candles with ``H == L`` carry no
    range information and fall back to ``returns[i] ** 2``.

    Args:
        candles: Ordered candles, ``len(returns) + 1`` of them.
        returns: Close-to-close log returns.

    Returns:
        Fresh array aligned with ``returns``.

    Raises:
        ValueError: If the lengths are inconsistent.
    """
    returns = np.asarray(returns, dtype=float)
    if len(candles) != returns.size + 1:
        msg = f"Expected {returns.size + 1} candles for {returns.size} returns, got {len(candles)}"
        raise ValueError(msg)
    _, h, lo, _ = _ohlc(candles[1:])
    hl = np.log(h / lo)
    parkinson = _PARKINSON_SCALE * hl * hl
    return np.where(h == lo, returns * returns, parkinson)
