"""Price-corridor prediction: validate, select, fit, forecast, assess, emit.

Every call is a fresh batch fit; nothing is cached between calls.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
import math
from typing import Sequence, Union

import numpy as np
import pandas as pd

from garch_corridor.config_logging import get_logger
from garch_corridor.constants import (
    DEFAULT_CONFIDENCE,
    MINUTES_PER_HOUR,
    MULTI_TIMEFRAME_DIVERGENCE_RATIO,
)
from garch_corridor.forecast.intervals import interval_minutes, min_candles, periods_per_year
from garch_corridor.forecast.reliability import is_reliable
from garch_corridor.forecast.selection import FittedModel, select_and_fit
from garch_corridor.models import VolatilityForecast
from garch_corridor.models.core import validate_steps
from garch_corridor.utils.returns import Candle, candles_from_frame
from garch_corridor.utils.statistics import standard_normal_quantile
from garch_corridor.utils.validation import (
    validate_candles,
    validate_min_length,
    validate_positive_price,
)

logger = get_logger(__name__)

CandleInput = Union[Sequence[Candle], pd.DataFrame]


@dataclass(frozen=True)
class PredictionResult:
    """Log-normal price corridor around the current price.

    Attributes:
        current_price: Reference price P.
        sigma: Forecast standard deviation of the log return (one step or cumulative).
        move: Upside move P * (exp(z * sigma) - 1).
        upper_price: P * exp(z * sigma).
        lower_price: P * exp(-z * sigma).
        model_type: Selected model identifier.
        reliable: Combined convergence, persistence and residual check.
    """

    current_price: float
    sigma: float
    move: float
    upper_price: float
    lower_price: float
    model_type: str
    reliable: bool

    def to_dict(self) -> dict[str, float | str | bool]:
        return asdict(self)


@dataclass(frozen=True)
class MultiTimeframePrediction:
    """Predictions on two timeframes and whether their hourly sigmas diverge."""

    primary: PredictionResult
    secondary: PredictionResult
    divergence: bool


def as_candle_list(candles: CandleInput) -> list[Candle]:
    """Accept candles or an OHLC DataFrame and return a candle list (new list)."""
    if isinstance(candles, pd.DataFrame):
        return candles_from_frame(candles)
    return list(candles)


def price_corridor(
    current_price: float, sigma: float, confidence: float = DEFAULT_CONFIDENCE
) -> tuple[float, float, float]:
    """Convert a log-return sigma into (move, upper_price, lower_price).

    The band is symmetric in log space, hence wider above the price than below.

    Raises:
        ValueError: If ``confidence`` is outside (0, 1).
    """
    z = standard_normal_quantile(confidence)
    upper = current_price * math.exp(z * sigma)
    lower = current_price * math.exp(-z * sigma)
    return upper - current_price, upper, lower


def validate_request(
    candles: CandleInput, interval: str, current_price: float | None = None
) -> list[Candle]:
    """Validate inputs before any estimation starts.

    Returns:
        The candles as a list.

    Raises:
        ValueError: Unknown interval, too few candles, invalid OHLC values or
            an invalid current price.
    """
    candle_list = as_candle_list(candles)
    validate_min_length(candle_list, min_candles(interval), f"candles for interval {interval}")
    validate_candles(candle_list)
    if current_price is not None:
        validate_positive_price(current_price, "current price")
    return candle_list


def _fit_and_forecast(
    candle_list: list[Candle], interval: str, steps: int
) -> tuple[FittedModel, VolatilityForecast]:
    fitted, _ = select_and_fit(candle_list, periods_per_year(interval))
    forecast = fitted.model.forecast(fitted.params, steps)
    return fitted, forecast


def _emit(
    fitted: FittedModel,
    sigma: float,
    current_price: float,
    confidence: float,
) -> PredictionResult:
    move, upper, lower = price_corridor(current_price, sigma, confidence)
    result = PredictionResult(
        current_price=current_price,
        sigma=sigma,
        move=move,
        upper_price=upper,
        lower_price=lower,
        model_type=fitted.model_type.value,
        reliable=is_reliable(fitted),
    )
    logger.info(
        "%s corridor: price=%.6g sigma=%.6g [%.6g, %.6g] reliable=%s",
        result.model_type,
        current_price,
        sigma,
        lower,
        upper,
        result.reliable,
    )
    return result


def predict(
    candles: CandleInput,
    interval: str,
    current_price: float | None = None,
    *,
    confidence: float = DEFAULT_CONFIDENCE,
) -> PredictionResult:
    """Forecast the price corridor for the next candle.

    Args:
        candles: Ordered candles (or an OHLC DataFrame).
        interval: Candle interval tag, e.g. ``"4h"``.
        current_price: Reference price; defaults to the last close.
        confidence: Two-sided coverage of the corridor (default about 1 sigma).

    Returns:
        PredictionResult with a one-step sigma.

    Raises:
        ValueError: On invalid input (checked before fitting).
        RuntimeError: If no model could be fitted.
    """
    candle_list = validate_request(candles, interval, current_price)
    standard_normal_quantile(confidence)
    price = candle_list[-1].close if current_price is None else float(current_price)

    fitted, forecast = _fit_and_forecast(candle_list, interval, 1)
    return _emit(fitted, float(forecast.volatility[0]), price, confidence)


def predict_range(
    candles: CandleInput,
    interval: str,
    steps: int,
    current_price: float | None = None,
    *,
    confidence: float = DEFAULT_CONFIDENCE,
) -> PredictionResult:
    """Forecast the price corridor over the next ``steps`` candles.

    Cumulative sigma = sqrt(sum of per-step variances): it follows the
    model's term structure instead of scaling sigma_1 by sqrt(steps).

    Raises:
        ValueError: On invalid input, including ``steps < 1``.
        RuntimeError: If no model could be fitted.
    """
    candle_list = validate_request(candles, interval, current_price)
    validate_steps(steps)
    standard_normal_quantile(confidence)
    price = candle_list[-1].close if current_price is None else float(current_price)

    fitted, forecast = _fit_and_forecast(candle_list, interval, int(steps))
    sigma = math.sqrt(float(np.sum(forecast.variance)))
    return _emit(fitted, sigma, price, confidence)


def hourly_sigma(sigma: float, interval: str) -> float:
    """Rescale a per-candle sigma to one hour: sigma * sqrt(60 / minutes)."""
    return sigma * math.sqrt(MINUTES_PER_HOUR / interval_minutes(interval))


def predict_multi_timeframe(
    primary_candles: CandleInput,
    primary_interval: str,
    secondary_candles: CandleInput,
    secondary_interval: str,
    current_price: float | None = None,
    *,
    confidence: float = DEFAULT_CONFIDENCE,
) -> MultiTimeframePrediction:
    """Predict on two timeframes and flag diverging hourly volatility.

    Divergence is reported when one timeframe's hourly sigma is more than
    MULTI_TIMEFRAME_DIVERGENCE_RATIO times the other's.
    """
    primary = predict(primary_candles, primary_interval, current_price, confidence=confidence)
    secondary = predict(secondary_candles, secondary_interval, current_price, confidence=confidence)

    primary_hourly = hourly_sigma(primary.sigma, primary_interval)
    secondary_hourly = hourly_sigma(secondary.sigma, secondary_interval)
    ratio = primary_hourly / secondary_hourly
    divergence = (
        ratio > MULTI_TIMEFRAME_DIVERGENCE_RATIO or ratio < 1.0 / MULTI_TIMEFRAME_DIVERGENCE_RATIO
    )
    if divergence:
        logger.warning(
            "Timeframe divergence: %s hourly sigma %.6g vs %s hourly sigma %.6g",
            primary_interval,
            primary_hourly,
            secondary_interval,
            secondary_hourly,
        )
    return MultiTimeframePrediction(primary=primary, secondary=secondary, divergence=divergence)
