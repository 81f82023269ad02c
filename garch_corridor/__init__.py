"""Conditional volatility forecasting and log-normal price corridors from OHLC data."""

from __future__ import annotations

from garch_corridor.forecast import (
    BacktestReport,
    CandleInterval,
    MultiTimeframePrediction,
    PredictionResult,
    backtest,
    predict,
    predict_multi_timeframe,
    predict_range,
    run_backtest,
)
from garch_corridor.models import (
    MODELS,
    CalibrationResult,
    Diagnostics,
    Egarch,
    EgarchParams,
    Garch,
    GarchParams,
    GjrGarch,
    GjrGarchParams,
    HarRv,
    HarRvParams,
    ModelType,
    Novas,
    NovasParams,
    VolatilityForecast,
    calibrate_egarch,
    calibrate_garch,
    calibrate_gjr_garch,
    calibrate_har_rv,
    calibrate_novas,
)
from garch_corridor.models.core import EXPECTED_ABS_NORMAL
from garch_corridor.optimizer import OptimizerResult, nelder_mead, nelder_mead_multi_start
from garch_corridor.utils import (
    Candle,
    LeverageStats,
    calculate_returns,
    calculate_returns_from_prices,
    check_leverage_effect,
    sample_variance,
    sample_variance_with_mean,
)

__version__ = "0.1.0"

__all__ = [
    "EXPECTED_ABS_NORMAL",
    "MODELS",
    "BacktestReport",
    "CalibrationResult",
    "Candle",
    "CandleInterval",
    "Diagnostics",
    "Egarch",
    "EgarchParams",
    "Garch",
    "GarchParams",
    "GjrGarch",
    "GjrGarchParams",
    "HarRv",
    "HarRvParams",
    "LeverageStats",
    "ModelType",
    "MultiTimeframePrediction",
    "Novas",
    "NovasParams",
    "OptimizerResult",
    "PredictionResult",
    "VolatilityForecast",
    "backtest",
    "calculate_returns",
    "calculate_returns_from_prices",
    "calibrate_egarch",
    "calibrate_garch",
    "calibrate_gjr_garch",
    "calibrate_har_rv",
    "calibrate_novas",
    "check_leverage_effect",
    "nelder_mead",
    "nelder_mead_multi_start",
    "predict",
    "predict_multi_timeframe",
    "predict_range",
    "run_backtest",
    "sample_variance",
    "sample_variance_with_mean",
]
