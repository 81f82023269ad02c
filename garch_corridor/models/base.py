"""Shared contract for the volatility models.

Every model is constructed from one dataset (candles, a candle DataFrame or a
bare price sequence), derives its return and innovation series once, and then
exposes the same capability set:

- ``fit()`` -> CalibrationResult
- ``variance_series(params)`` -> conditional variance per return
- ``forecast(params, steps)`` -> VolatilityForecast

Models are registered by ``ModelType`` in ``garch_corridor.models.MODELS`` and
dispatched through the ``VolatilityModel`` protocol.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass
from enum import Enum
from typing import Generic, Protocol, Sequence, TypeVar, Union

import numpy as np
import pandas as pd

from garch_corridor.config_logging import get_logger
from garch_corridor.constants import DEFAULT_PERIODS_PER_YEAR
from garch_corridor.models.core.validation import validate_min_data_points, validate_steps
from garch_corridor.models.core.variance import initialize_variance
from garch_corridor.utils.range_variance import per_candle_parkinson, yang_zhang_variance
from garch_corridor.utils.returns import (
    Candle,
    calculate_returns,
    calculate_returns_from_prices,
    candles_from_frame,
    sample_variance,
)
from garch_corridor.utils.validation import validate_candles

logger = get_logger(__name__)

ModelInput = Union[Sequence[Candle], Sequence[float], np.ndarray, pd.DataFrame]


class ModelType(str, Enum):
    """Identifier of each model variant."""

    GARCH = "garch"
    EGARCH = "egarch"
    GJR_GARCH = "gjr-garch"
    HAR_RV = "har-rv"
    NOVAS = "novas"


class InnovationSource(Enum):
    """Which series drives the variance recursion.

    Resolved once at construction from the richness of the input.
    """

    SQUARED_RETURNS = "squared_returns"
    RANGE_PROXY = "range_proxy"


class ModelParams(Protocol):
    """Fields every parameter record carries."""

    @property
    def persistence(self) -> float: ...

    @property
    def unconditional_variance(self) -> float: ...

    @property
    def annualized_vol(self) -> float: ...

    @property
    def df(self) -> float: ...


P = TypeVar("P")


@dataclass(frozen=True)
class Diagnostics:
    """Goodness-of-fit summary of one calibration.

    Attributes:
        log_likelihood: Maximized Student-t log-likelihood.
        aic: Akaike Information Criterion.
        bic: Bayesian Information Criterion.
        iterations: Optimizer iterations spent.
        converged: Whether the optimizer met its tolerance.
    """

    log_likelihood: float
    aic: float
    bic: float
    iterations: int
    converged: bool

    def __str__(self) -> str:  # pragma: no cover - trivial
        return (
            f"converged={self.converged}, iterations={self.iterations}, "
            f"loglik={self.log_likelihood:.2f}, aic={self.aic:.2f}"
        )


@dataclass(frozen=True)
class CalibrationResult(Generic[P]):
    """Parameters plus diagnostics produced by one ``fit`` call."""

    params: P
    diagnostics: Diagnostics


@dataclass(frozen=True)
class VolatilityForecast:
    """Per-step variance forecast with derived volatility figures."""

    variance: np.ndarray
    volatility: np.ndarray
    annualized: np.ndarray

    @classmethod
    def from_variance(cls, variance: np.ndarray, periods_per_year: float) -> VolatilityForecast:
        """Build a forecast from per-step variances (the array is copied)."""
        variance = np.array(variance, dtype=float)
        return cls(
            variance=variance,
            volatility=np.sqrt(variance),
            annualized=np.sqrt(variance * periods_per_year) * 100.0,
        )


def annualize(variance: float, periods_per_year: float) -> float:
    """Annualized volatility in percent for a per-period variance."""
    return float(np.sqrt(abs(variance) * periods_per_year) * 100.0)


class VolatilityModel(Protocol):
    """Capability set shared by every model variant."""

    model_type: ModelType
    periods_per_year: float

    def fit(self, *, max_iter: int = ..., tol: float = ...) -> CalibrationResult: ...

    def variance_series(self, params) -> np.ndarray: ...

    def forecast(self, params, steps: int = 1) -> VolatilityForecast: ...

    def returns(self) -> np.ndarray: ...

    def standardized_residuals(self, params) -> np.ndarray: ...


def _as_candles(data: ModelInput) -> list[Candle] | None:
    """Return candles when ``data`` carries OHLC information, else None."""
    if isinstance(data, pd.DataFrame):
        return candles_from_frame(data)
    if len(data) > 0 and isinstance(data[0], Candle):
        return list(data)  # type: ignore[arg-type]
    return None


class SeriesModel(abc.ABC):
    """Input resolution and series accessors shared by the model classes.

    Subclasses set ``model_type`` and ``display_name`` and implement the fit,
    variance-series and forecast capabilities.
    """

    model_type: ModelType
    display_name: str

    def __init__(
        self,
        data: ModelInput,
        *,
        periods_per_year: float = DEFAULT_PERIODS_PER_YEAR,
        min_points: int,
    ) -> None:
        validate_min_data_points(len(data), min_points, self.display_name)
        self.periods_per_year = float(periods_per_year)

        candles = _as_candles(data)
        if candles is None:
            self._returns = calculate_returns_from_prices(np.asarray(data, dtype=float))
            self._innovations = self._returns * self._returns
            self._source = InnovationSource.SQUARED_RETURNS
            self._range_variance: float | None = None
        else:
            self._returns = calculate_returns(candles)
            validate_candles(candles)
            self._innovations = per_candle_parkinson(candles, self._returns)
            self._source = InnovationSource.RANGE_PROXY
            self._range_variance = yang_zhang_variance(candles)

        self._sample_variance = sample_variance(self._returns)
        logger.debug(
            "%s built from %d returns (innovation=%s)",
            self.display_name,
            self._returns.size,
            self._source.value,
        )

    @property
    def innovation_source(self) -> InnovationSource:
        """How the recursion innovation is obtained."""
        return self._source

    def returns(self) -> np.ndarray:
        """Log returns (copy)."""
        return self._returns.copy()

    def innovations(self) -> np.ndarray:
        """Recursion innovations: squared returns or Parkinson RV (copy)."""
        return self._innovations.copy()

    def initial_variance(self) -> float:
        """Zero-step variance anchor: Yang-Zhang for candles, sample variance for prices."""
        estimate = self._range_variance if self._range_variance is not None else self._sample_variance
        return initialize_variance(estimate)

    def fallback_variance(self) -> float:
        """Sample variance used where a model lacks history (floored)."""
        return initialize_variance(self._sample_variance)

    @abc.abstractmethod
    def fit(self, *, max_iter: int, tol: float) -> CalibrationResult:
        """Calibrate the model parameters by maximum likelihood."""

    @abc.abstractmethod
    def variance_series(self, params) -> np.ndarray:
        """Conditional variance aligned with the return series."""

    @abc.abstractmethod
    def forecast(self, params, steps: int = 1) -> VolatilityForecast:
        """Forecast variance ``steps`` periods ahead."""

    def standardized_residuals(self, params) -> np.ndarray:
        """Returns divided by the fitted conditional volatility."""
        return self._returns / np.sqrt(self.variance_series(params))

    def _package_forecast(self, variance: np.ndarray) -> VolatilityForecast:
        return VolatilityForecast.from_variance(variance, self.periods_per_year)

    @staticmethod
    def _check_steps(steps: int) -> int:
        validate_steps(steps)
        return int(steps)

    def _log_fit_start(self) -> None:
        logger.info(
            "Starting %s estimation: n=%d, innovation=%s",
            self.display_name,
            self._returns.size,
            self._source.value,
        )

    def _log_fit_result(self, diagnostics: Diagnostics) -> None:
        logger.info(
            "%s estimation completed: converged=%s, loglik=%.2f, aic=%.2f, iterations=%d",
            self.display_name,
            diagnostics.converged,
            diagnostics.log_likelihood,
            diagnostics.aic,
            diagnostics.iterations,
        )
        if not diagnostics.converged:
            logger.warning(
                "%s optimizer did not converge after %d iterations",
                self.display_name,
                diagnostics.iterations,
            )
