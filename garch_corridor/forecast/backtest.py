"""Walk-forward backtest of the one-step price corridor.

The model is selected and fitted once on the first part of the history
(75%, at least the interval minimum). Its parameters are then rolled over the
remaining candles: at each step the same model is rebuilt on all candles seen
so far, a one-step corridor is forecast from the last close, and the next
close is checked against it.
"""

from __future__ import annotations

from dataclasses import dataclass
import math

from garch_corridor.config_logging import get_logger
from garch_corridor.constants import (
    BACKTEST_MIN_POINTS,
    BACKTEST_REQUIRED_PERCENT,
    BACKTEST_WINDOW_RATIO,
    DEFAULT_CONFIDENCE,
)
from garch_corridor.forecast.intervals import min_candles, periods_per_year
from garch_corridor.forecast.predict import CandleInput, price_corridor, validate_request
from garch_corridor.forecast.selection import select_and_fit
from garch_corridor.models import create_model

logger = get_logger(__name__)


@dataclass(frozen=True)
class BacktestReport:
    """Hit statistics of a walk-forward backtest."""

    model_type: str
    window: int
    hits: int
    total: int
    required_percent: float

    @property
    def hit_rate(self) -> float:
        """Percentage of next closes that fell inside the corridor."""
        return 100.0 * self.hits / self.total

    @property
    def passed(self) -> bool:
        return self.hit_rate >= self.required_percent


def backtest_window(n_candles: int, interval: str) -> int:
    """Fitting window: max(interval minimum, floor(0.75 * n))."""
    return max(min_candles(interval), int(math.floor(n_candles * BACKTEST_WINDOW_RATIO)))


def run_backtest(
    candles: CandleInput,
    interval: str,
    required_percent: float = BACKTEST_REQUIRED_PERCENT,
    *,
    confidence: float = DEFAULT_CONFIDENCE,
) -> BacktestReport:
    """Run the walk-forward backtest and return hit statistics.

    Raises:
        ValueError: On invalid input or fewer than BACKTEST_MIN_POINTS test points.
        RuntimeError: If no model could be fitted on the window.
    """
    candle_list = validate_request(candles, interval)
    if not math.isfinite(required_percent):
        msg = f"required_percent must be finite, got {required_percent}"
        raise ValueError(msg)

    n = len(candle_list)
    window = backtest_window(n, interval)
    if n - window < BACKTEST_MIN_POINTS:
        msg = f"Need at least {window + BACKTEST_MIN_POINTS} candles for backtest, got {n}"
        raise ValueError(msg)

    ppy = periods_per_year(interval)
    fitted, _ = select_and_fit(candle_list[:window], ppy)
    logger.info(
        "Backtest: %s fitted on %d candles, testing %d points",
        fitted.model_type.value,
        window,
        n - window,
    )

    hits = 0
    total = 0
    for i in range(window - 1, n - 1):
        model = create_model(fitted.model_type, candle_list[: i + 1], periods_per_year=ppy)
        sigma = float(model.forecast(fitted.params, 1).volatility[0])
        _, upper, lower = price_corridor(candle_list[i].close, sigma, confidence)
        actual = candle_list[i + 1].close
        if lower <= actual <= upper:
            hits += 1
        total += 1

    report = BacktestReport(
        model_type=fitted.model_type.value,
        window=window,
        hits=hits,
        total=total,
        required_percent=float(required_percent),
    )
    logger.info(
        "Backtest hit rate %.2f%% (%d/%d), required %.2f%% -> passed=%s",
        report.hit_rate,
        hits,
        total,
        report.required_percent,
        report.passed,
    )
    return report


def backtest(
    candles: CandleInput,
    interval: str,
    required_percent: float = BACKTEST_REQUIRED_PERCENT,
) -> bool:
    """True when the walk-forward hit rate meets ``required_percent``.

    Raises:
        ValueError: On invalid input or too few candles for a test segment.
    """
    return run_backtest(candles, interval, required_percent).passed
