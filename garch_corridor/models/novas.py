"""NoVaS: Normalizing and Variance-Stabilizing transformation (Politis, 2003).

Model-free volatility built on the ARCH frame

    s2_t = a_0 + sum_{j=1..p} a_j * e_{t-j},    W_t = r_t / s_t

Stage 1 picks the weights that make W look most Gaussian by minimizing
D^2 = skew(W)^2 + (kurt(W) - 3)^2. Non-negativity is enforced through an
absolute-value reparameterization and stationarity (sum a_j < 1) through the
penalty.

Stage 2 rescales the D^2 proxy against realized variance with a two-parameter
OLS, e_t ~ c_0 + c_1 * s2_t, because weights tuned for normality are not tuned
for forecast accuracy. Both weight vectors are retained in the parameters.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable

import numpy as np

from garch_corridor.config_logging import get_logger
from garch_corridor.constants import (
    DEFAULT_PERIODS_PER_YEAR,
    MIN_FORECAST_VARIANCE,
    NM_TOLERANCE,
    NOVAS_DEFAULT_LAGS,
    NOVAS_INIT_DECAY,
    NOVAS_INIT_INTERCEPT_RATIO,
    NOVAS_INIT_LAG_MASS,
    NOVAS_MAX_ITER,
    NOVAS_MIN_COUNT,
    NOVAS_MIN_EXTRA_POINTS,
    NOVAS_MIN_WEIGHT,
    PENALTY_VALUE,
    STATIONARITY_BOUND,
)
from garch_corridor.models.base import (
    CalibrationResult,
    Diagnostics,
    ModelInput,
    ModelType,
    SeriesModel,
    VolatilityForecast,
    annualize,
)
from garch_corridor.models.core import aic, bic, ols, profile_student_t_df
from garch_corridor.optimizer import nelder_mead

logger = get_logger(__name__)


@dataclass(frozen=True)
class NovasParams:
    """Fitted NoVaS weights and rescaling."""

    weights: tuple[float, ...]
    lags: int
    rescaling: tuple[float, float]
    persistence: float
    unconditional_variance: float
    annualized_vol: float
    d_squared: float
    df: float


def d_squared(w: np.ndarray) -> float:
    """Squared skewness plus squared excess kurtosis (population moments)."""
    centered = w - float(np.mean(w))
    m2 = float(np.mean(centered**2))
    if m2 <= NOVAS_MIN_WEIGHT:
        return PENALTY_VALUE
    skewness = float(np.mean(centered**3)) / (m2 * math.sqrt(m2))
    kurtosis = float(np.mean(centered**4)) / (m2 * m2)
    if not (math.isfinite(skewness) and math.isfinite(kurtosis)):
        return PENALTY_VALUE
    return skewness * skewness + (kurtosis - 3.0) * (kurtosis - 3.0)


class Novas(SeriesModel):
    """NoVaS volatility with a D^2 weight search and OLS rescaling."""

    model_type = ModelType.NOVAS
    display_name = "NoVaS"

    def __init__(
        self,
        data: ModelInput,
        *,
        periods_per_year: float = DEFAULT_PERIODS_PER_YEAR,
        lags: int = NOVAS_DEFAULT_LAGS,
    ) -> None:
        if lags < 1:
            msg = f"NoVaS lags must be >= 1, got {lags}"
            raise ValueError(msg)
        self.lags = int(lags)
        super().__init__(
            data,
            periods_per_year=periods_per_year,
            min_points=self.lags + NOVAS_MIN_EXTRA_POINTS,
        )
        self._lagged = self._lag_matrix()

    def _lag_matrix(self) -> np.ndarray:
        """Row t-p holds [e_{t-1}, ..., e_{t-p}] for t = p .. n-1."""
        e = self._innovations
        n, p = e.size, self.lags
        return np.column_stack([e[p - j : n - j] for j in range(1, p + 1)])

    def _proxy(self, weights: np.ndarray) -> np.ndarray:
        """Unscaled variance proxy s2_t for t >= p."""
        return weights[0] + self._lagged @ weights[1:]

    def _objective_d2(self) -> Callable[[np.ndarray], float]:
        target = self._returns[self.lags :]

        def objective(raw: np.ndarray) -> float:
            weights = np.abs(raw)
            if weights[0] < NOVAS_MIN_WEIGHT:
                return PENALTY_VALUE
            if float(np.sum(weights[1:])) >= STATIONARITY_BOUND:
                return PENALTY_VALUE
            proxy = self._proxy(weights)
            if np.min(proxy) <= NOVAS_MIN_WEIGHT or target.size < NOVAS_MIN_COUNT:
                return PENALTY_VALUE
            w = target / np.sqrt(proxy)
            if not np.all(np.isfinite(w)):
                return PENALTY_VALUE
            return d_squared(w)

        return objective

    def _rescaled(self, weights: np.ndarray, rescaling: tuple[float, float]) -> np.ndarray:
        series = np.full(self._returns.size, self.fallback_variance())
        c0, c1 = rescaling
        series[self.lags :] = np.maximum(c0 + c1 * self._proxy(weights), MIN_FORECAST_VARIANCE)
        return series

    def fit(
        self, *, max_iter: int = NOVAS_MAX_ITER, tol: float = NM_TOLERANCE
    ) -> CalibrationResult[NovasParams]:
        """Calibrate NoVaS weights, rescaling and Student-t df.

        Raises:
            ValueError: If the stage-2 rescaling regression is singular
                (a constant proxy, e.g. from flat prices).
        """
        self._log_fit_start()
        p = self.lags
        init_variance = self.fallback_variance()
        x0 = [NOVAS_INIT_INTERCEPT_RATIO * init_variance] + [
            NOVAS_INIT_LAG_MASS * (1.0 - NOVAS_INIT_DECAY) * NOVAS_INIT_DECAY ** (j - 1)
            for j in range(1, p + 1)
        ]
        d2_result = nelder_mead(self._objective_d2(), x0, max_iter=max_iter, tol=tol)
        weights = np.abs(d2_result.x)
        logger.debug("NoVaS D^2=%.6f after %d iterations", d2_result.fx, d2_result.iterations)

        proxy = self._proxy(weights)
        design = np.column_stack((np.ones(proxy.size), proxy))
        fit = ols(design, self._innovations[p:], context="NoVaS rescaling OLS")
        rescaling = (float(fit.beta[0]), float(fit.beta[1]))

        variances = self._rescaled(weights, rescaling)
        df, log_likelihood = profile_student_t_df(self._returns, variances)

        lag_sum = float(np.sum(weights[1:]))
        persistence = rescaling[1] * lag_sum
        if abs(persistence) < 1.0:
            level = (rescaling[0] + rescaling[1] * float(weights[0])) / (1.0 - persistence)
            unconditional_variance = max(level, MIN_FORECAST_VARIANCE)
        else:
            unconditional_variance = init_variance

        num_params = p + 1 + 2 + 1  # weights, rescaling, df
        diagnostics = Diagnostics(
            log_likelihood=log_likelihood,
            aic=aic(log_likelihood, num_params),
            bic=bic(log_likelihood, num_params, self._returns.size - p),
            iterations=d2_result.iterations + 1,
            converged=d2_result.converged,
        )
        params = NovasParams(
            weights=tuple(float(v) for v in weights),
            lags=p,
            rescaling=rescaling,
            persistence=persistence,
            unconditional_variance=unconditional_variance,
            annualized_vol=annualize(unconditional_variance, self.periods_per_year),
            d_squared=float(d2_result.fx),
            df=df,
        )
        self._log_fit_result(diagnostics)
        return CalibrationResult(params=params, diagnostics=diagnostics)

    def variance_series(self, params: NovasParams) -> np.ndarray:
        """Sample variance for the first ``lags`` periods, rescaled proxy afterwards."""
        return self._rescaled(np.asarray(params.weights), params.rescaling)

    def forecast(self, params: NovasParams, steps: int = 1) -> VolatilityForecast:
        """Forecast by feeding each rescaled forecast back as the next innovation.

        Raises:
            ValueError: If ``steps`` is not a positive integer.
        """
        steps = self._check_steps(steps)
        weights = list(params.weights)
        c0, c1 = params.rescaling
        history = self._innovations[-params.lags :].tolist()

        variance = np.empty(steps, dtype=float)
        for h in range(steps):
            proxy = weights[0] + sum(weights[j] * history[-j] for j in range(1, params.lags + 1))
            v = max(c0 + c1 * proxy, MIN_FORECAST_VARIANCE)
            variance[h] = v
            history.append(v)
        return self._package_forecast(variance)


def calibrate_novas(
    data: ModelInput, *, periods_per_year: float = DEFAULT_PERIODS_PER_YEAR
) -> CalibrationResult[NovasParams]:
    """Construct a NoVaS model with default lags from ``data`` and fit it."""
    return Novas(data, periods_per_year=periods_per_year).fit()
