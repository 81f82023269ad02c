"""Candle interval tags: annualization factors and minimum sample sizes."""

from __future__ import annotations

from typing import Literal, get_args

CandleInterval = Literal["1m", "3m", "5m", "15m", "30m", "1h", "2h", "4h", "6h", "8h"]

INTERVALS: tuple[str, ...] = get_args(CandleInterval)

INTERVAL_MINUTES: dict[str, int] = {
    "1m": 1,
    "3m": 3,
    "5m": 5,
    "15m": 15,
    "30m": 30,
    "1h": 60,
    "2h": 120,
    "4h": 240,
    "6h": 360,
    "8h": 480,
}

INTERVALS_PER_YEAR: dict[str, int] = {
    "1m": 525_600,
    "3m": 175_200,
    "5m": 105_120,
    "15m": 35_040,
    "30m": 17_520,
    "1h": 8_760,
    "2h": 4_380,
    "4h": 2_190,
    "6h": 1_460,
    "8h": 1_095,
}

# Short intervals are noisier and need a longer history before fitting
MIN_CANDLES: dict[str, int] = {
    "1m": 500,
    "3m": 500,
    "5m": 500,
    "15m": 300,
    "30m": 200,
    "1h": 200,
    "2h": 200,
    "4h": 200,
    "6h": 150,
    "8h": 150,
}


def validate_interval(interval: str) -> str:
    """Return ``interval`` unchanged if it is a known tag.

    Raises:
        ValueError: For any other value.
    """
    if interval not in INTERVAL_MINUTES:
        msg = f"Unknown interval: {interval!r}. Must be one of: {', '.join(INTERVALS)}"
        raise ValueError(msg)
    return interval


def periods_per_year(interval: str) -> int:
    """Number of candles of this interval in a year."""
    return INTERVALS_PER_YEAR[validate_interval(interval)]


def min_candles(interval: str) -> int:
    """Minimum number of candles required before fitting."""
    return MIN_CANDLES[validate_interval(interval)]


def interval_minutes(interval: str) -> int:
    """Candle length in minutes."""
    return INTERVAL_MINUTES[validate_interval(interval)]
