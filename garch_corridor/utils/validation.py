"""Validation utilities for candle frames and candle sequences.

Every check raises immediately; invalid market data is never coerced.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Sequence

import pandas as pd

if TYPE_CHECKING:
    from garch_corridor.utils.returns import Candle

__all__ = [
    "validate_candles",
    "validate_dataframe_not_empty",
    "validate_min_length",
    "validate_positive_price",
    "validate_required_columns",
]

_OHLC_FIELDS = ("open", "high", "low", "close")


def validate_dataframe_not_empty(df: pd.DataFrame, name: str = "DataFrame") -> None:
    """Validate that DataFrame is not empty.

    Args:
        df: DataFrame to validate.
        name: Name of the DataFrame for error messages.

    Raises:
        ValueError: If DataFrame is empty.
    """
    if df.empty:
        msg = f"{name} DataFrame is empty"
        raise ValueError(msg)


def validate_required_columns(
    df: pd.DataFrame,
    required_columns: set[str] | list[str],
    df_name: str = "DataFrame",
) -> None:
    """Validate that DataFrame contains required columns.

    Raises:
        KeyError: If any required column is missing.
    """
    missing_columns = set(required_columns) - set(df.columns)
    if missing_columns:
        msg = f"Missing required columns in {df_name}: {sorted(missing_columns)}"
        raise KeyError(msg)


def validate_min_length(data: Sequence[object], minimum: int, what: str) -> None:
    """Raise ValueError when ``data`` holds fewer than ``minimum`` entries."""
    if len(data) < minimum:
        msg = f"Need at least {minimum} {what}, got {len(data)}"
        raise ValueError(msg)


def validate_positive_price(value: float, name: str = "price") -> None:
    """Raise ValueError unless ``value`` is a finite, strictly positive number."""
    if not (math.isfinite(value) and value > 0.0):
        msg = f"Invalid {name}: {value}"
        raise ValueError(msg)


def validate_candles(candles: Sequence[Candle]) -> None:
    """Check that every OHLC field is finite and strictly positive.

    Args:
        candles: Ordered candles.

    Raises:
        ValueError: On the first offending field, naming its index.
    """
    for i, candle in enumerate(candles):
        for field in _OHLC_FIELDS:
            value = getattr(candle, field)
            if not (math.isfinite(value) and value > 0.0):
                msg = f"Invalid {field} price at index {i}: {value}"
                raise ValueError(msg)
