"""Forecast orchestration: model selection, corridors, reliability and backtests."""

from __future__ import annotations

from garch_corridor.forecast.backtest import BacktestReport, backtest, backtest_window, run_backtest
from garch_corridor.forecast.intervals import (
    INTERVAL_MINUTES,
    INTERVALS,
    INTERVALS_PER_YEAR,
    MIN_CANDLES,
    CandleInterval,
    interval_minutes,
    min_candles,
    periods_per_year,
    validate_interval,
)
from garch_corridor.forecast.predict import (
    MultiTimeframePrediction,
    PredictionResult,
    as_candle_list,
    hourly_sigma,
    predict,
    predict_multi_timeframe,
    predict_range,
    price_corridor,
    validate_request,
)
from garch_corridor.forecast.reliability import ReliabilityReport, assess_reliability, is_reliable
from garch_corridor.forecast.selection import (
    FittedModel,
    SelectionReport,
    candidate_models,
    select_and_fit,
)

__all__ = [
    # Backtest
    "BacktestReport",
    "backtest",
    "backtest_window",
    "run_backtest",
    # Intervals
    "INTERVAL_MINUTES",
    "INTERVALS",
    "INTERVALS_PER_YEAR",
    "MIN_CANDLES",
    "CandleInterval",
    "interval_minutes",
    "min_candles",
    "periods_per_year",
    "validate_interval",
    # Prediction
    "MultiTimeframePrediction",
    "PredictionResult",
    "as_candle_list",
    "hourly_sigma",
    "predict",
    "predict_multi_timeframe",
    "predict_range",
    "price_corridor",
    "validate_request",
    # Reliability
    "ReliabilityReport",
    "assess_reliability",
    "is_reliable",
    # Selection
    "FittedModel",
    "SelectionReport",
    "candidate_models",
    "select_and_fit",
]
