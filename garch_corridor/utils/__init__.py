"""Utility functions for candles, returns, range variance, statistics and I/O.

This package provides modular utilities organized by functionality:
- returns: Candle records, log returns, sample variance, leverage check
- range_variance: Garman-Klass, Yang-Zhang and Parkinson estimators
- statistics: autocorrelation, Ljung-Box, normal quantile
- validation: candle and DataFrame validation
- io: CSV loading and JSON output
"""

from __future__ import annotations

from garch_corridor.config_logging import get_logger

# I/O utilities
from garch_corridor.utils.io import load_candles_csv, load_csv_file, save_json_pretty

# Range-based variance
from garch_corridor.utils.range_variance import (
    garman_klass_variance,
    per_candle_parkinson,
    yang_zhang_variance,
)

# Returns
from garch_corridor.utils.returns import (
    Candle,
    LeverageStats,
    calculate_returns,
    calculate_returns_from_prices,
    candles_from_frame,
    check_leverage_effect,
    closes,
    sample_variance,
    sample_variance_with_mean,
)

# Statistics
from garch_corridor.utils.statistics import (
    LjungBoxResult,
    autocorr,
    ljung_box,
    standard_normal_quantile,
)

# Validation utilities
from garch_corridor.utils.validation import (
    validate_candles,
    validate_dataframe_not_empty,
    validate_min_length,
    validate_positive_price,
    validate_required_columns,
)

__all__ = [
    # Logging
    "get_logger",
    # I/O
    "load_candles_csv",
    "load_csv_file",
    "save_json_pretty",
    # Range variance
    "garman_klass_variance",
    "per_candle_parkinson",
    "yang_zhang_variance",
    # Returns
    "Candle",
    "LeverageStats",
    "calculate_returns",
    "calculate_returns_from_prices",
    "candles_from_frame",
    "check_leverage_effect",
    "closes",
    "sample_variance",
    "sample_variance_with_mean",
    # Statistics
    "LjungBoxResult",
    "autocorr",
    "ljung_box",
    "standard_normal_quantile",
    # Validation
    "validate_candles",
    "validate_dataframe_not_empty",
    "validate_min_length",
    "validate_positive_price",
    "validate_required_columns",
]
