"""Candle records, log returns and simple return statistics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Sequence

import numpy as np
import pandas as pd

from garch_corridor.constants import LEVERAGE_RATIO_THRESHOLD, REQUIRED_OHLC_COLUMNS
from garch_corridor.utils.validation import (
    validate_dataframe_not_empty,
    validate_required_columns,
)

__all__ = [
    "Candle",
    "LeverageStats",
    "calculate_returns",
    "calculate_returns_from_prices",
    "candles_from_frame",
    "check_leverage_effect",
    "closes",
    "sample_variance",
    "sample_variance_with_mean",
]


@dataclass(frozen=True)
class Candle:
    """One OHLC bar. Immutable input; no model ever modifies it."""

    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0
    timestamp: float | None = None


@dataclass(frozen=True)
class LeverageStats:
    """Volatility asymmetry between down-moves and up-moves."""

    negative_vol: float
    positive_vol: float
    ratio: float
    recommendation: Literal["garch", "egarch"]


def closes(candles: Sequence[Candle]) -> np.ndarray:
    """Return close prices as a fresh float array."""
    return np.array([c.close for c in candles], dtype=float)


def _first_invalid_index(prices: np.ndarray) -> int | None:
    """Index of the first return whose price pair is not finite and positive."""
    bad = ~(np.isfinite(prices) & (prices > 0.0))
    if not bad.any():
        return None
    return max(int(np.argmax(bad)), 1)


def _log_returns(prices: np.ndarray, label: str) -> np.ndarray:
    if prices.size < 2:
        return np.empty(0, dtype=float)
    idx = _first_invalid_index(prices)
    if idx is not None:
        msg = f"Invalid {label} at index {idx}"
        raise ValueError(msg)
    return np.diff(np.log(prices))


def calculate_returns(candles: Sequence[Candle]) -> np.ndarray:
    """Compute close-to-close log returns from candles.

    Args:
        candles: Ordered candles.

    Returns:
        Array of length ``len(candles) - 1``.

    Raises:
        ValueError: If any close is non-positive or non-finite.
    """
    return _log_returns(closes(candles), "close price")


def calculate_returns_from_prices(prices: Sequence[float] | np.ndarray) -> np.ndarray:
    """Compute log returns from a bare price sequence.

    Raises:
        ValueError: If any price is non-positive or non-finite.
    """
    return _log_returns(np.array(prices, dtype=float), "price")


def sample_variance(returns: np.ndarray) -> float:
    """Sample variance under a zero-mean assumption."""
    returns = np.asarray(returns, dtype=float)
    if returns.size == 0:
        return 0.0
    return float(np.mean(returns * returns))


def sample_variance_with_mean(returns: np.ndarray) -> float:
    """Unbiased sample variance around the sample mean."""
    returns = np.asarray(returns, dtype=float)
    if returns.size < 2:
        return 0.0
    return float(np.var(returns, ddof=1))


def check_leverage_effect(returns: np.ndarray) -> LeverageStats:
    """Compare RMS of negative returns against RMS of positive returns.

    A ratio above ``LEVERAGE_RATIO_THRESHOLD`` recommends an asymmetric model.
    When either side is empty the ratio is 1 (no evidence of asymmetry).

    Args:
        returns: Log return series.

    Returns:
        LeverageStats with the ratio and recommended family.
    """
    returns = np.asarray(returns, dtype=float)
    negative = returns[returns < 0.0]
    positive = returns[returns > 0.0]
    if negative.size == 0 or positive.size == 0:
        return LeverageStats(negative_vol=0.0, positive_vol=0.0, ratio=1.0, recommendation="garch")

    negative_vol = float(np.sqrt(np.mean(negative * negative)))
    positive_vol = float(np.sqrt(np.mean(positive * positive)))
    ratio = negative_vol / positive_vol
    return LeverageStats(
        negative_vol=negative_vol,
        positive_vol=positive_vol,
        ratio=ratio,
        recommendation="egarch" if ratio > LEVERAGE_RATIO_THRESHOLD else "garch",
    )


def _timestamps(df: pd.DataFrame) -> list[float | None]:
    if "timestamp" not in df.columns:
        return [None] * len(df)
    column = df["timestamp"]
    if pd.api.types.is_numeric_dtype(column):
        return [float(v) for v in column]
    parsed = pd.to_datetime(column, utc=True)
    return [ts.timestamp() for ts in parsed]


def candles_from_frame(df: pd.DataFrame) -> list[Candle]:
    """Convert a DataFrame with open/high/low/close columns to candles.

    ``volume`` and ``timestamp`` columns are optional.

    Raises:
        ValueError: If the frame is empty.
        KeyError: If an OHLC column is missing.
    """
    validate_dataframe_not_empty(df, "Candle")
    validate_required_columns(df, REQUIRED_OHLC_COLUMNS, "candle frame")

    volumes = df["volume"].astype(float).tolist() if "volume" in df.columns else [0.0] * len(df)
    return [
        Candle(
            open=float(o),
            high=float(h),
            low=float(lo),
            close=float(c),
            volume=float(v),
            timestamp=ts,
        )
        for o, h, lo, c, v, ts in zip(
            df["open"], df["high"], df["low"], df["close"], volumes, _timestamps(df)
        )
    ]
