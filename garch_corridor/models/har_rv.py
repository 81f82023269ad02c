"""HAR-RV model (Corsi, 2009).

RV_{t+1} = b0 + b1 * RV_short + b2 * RV_medium + b3 * RV_long + e

where each RV_x is the mean of the last x realized variances (default
1 / 5 / 22 periods) and rv is the Parkinson range estimator for candles or the
squared return for prices.

Estimation runs in two stages:
1. OLS on the normal equations (closed form, reported through R^2).
2. Student-t likelihood refinement of the same coefficients plus df, so that
   the AIC is comparable with the MLE-fitted GARCH family.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import numpy as np

from garch_corridor.config_logging import get_logger
from garch_corridor.constants import (
    DEFAULT_PERIODS_PER_YEAR,
    HAR_INIT_BETAS,
    HAR_LONG_LAG,
    HAR_MEDIUM_LAG,
    HAR_MIN_EXTRA_POINTS,
    HAR_SHORT_LAG,
    MIN_FORECAST_VARIANCE,
    NM_MAX_ITER,
    NM_TOLERANCE,
    PENALTY_VALUE,
    STUDENT_DF_INIT,
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
from garch_corridor.models.core import (
    OlsResult,
    aic,
    bic,
    har_feasible,
    ols,
    student_t_neg_log_likelihood,
)
from garch_corridor.optimizer import nelder_mead_multi_start

logger = get_logger(__name__)

NUM_PARAMS = 5  # beta0, beta_short, beta_medium, beta_long, df


@dataclass(frozen=True)
class HarRvParams:
    """Fitted HAR-RV coefficients (likelihood-refined) and OLS summary."""

    beta0: float
    beta_short: float
    beta_medium: float
    beta_long: float
    persistence: float
    unconditional_variance: float
    annualized_vol: float
    r2: float
    df: float
    ols_coefficients: tuple[float, float, float, float]

    @property
    def coefficients(self) -> np.ndarray:
        """[beta0, beta_short, beta_medium, beta_long] as a fresh array."""
        return np.array([self.beta0, self.beta_short, self.beta_medium, self.beta_long])


def rolling_means(values: np.ndarray, lag: int) -> np.ndarray:
    """Mean of values[t-lag+1..t] for every t >= lag-1 (array index t-lag+1)."""
    csum = np.concatenate(([0.0], np.cumsum(values)))
    return (csum[lag:] - csum[:-lag]) / lag


class HarRv(SeriesModel):
    """Heterogeneous autoregressive model of realized variance."""

    model_type = ModelType.HAR_RV
    display_name = "HAR-RV"

    def __init__(
        self,
        data: ModelInput,
        *,
        periods_per_year: float = DEFAULT_PERIODS_PER_YEAR,
        short_lag: int = HAR_SHORT_LAG,
        medium_lag: int = HAR_MEDIUM_LAG,
        long_lag: int = HAR_LONG_LAG,
    ) -> None:
        if min(short_lag, medium_lag, long_lag) < 1:
            msg = f"HAR-RV lags must be >= 1, got {(short_lag, medium_lag, long_lag)}"
            raise ValueError(msg)
        self.short_lag = int(short_lag)
        self.medium_lag = int(medium_lag)
        self.long_lag = int(long_lag)
        self._max_lag = max(self.short_lag, self.medium_lag, self.long_lag)
        super().__init__(
            data,
            periods_per_year=periods_per_year,
            min_points=self._max_lag + HAR_MIN_EXTRA_POINTS,
        )

    def rv(self) -> np.ndarray:
        """Realized variance series (copy)."""
        return self._innovations.copy()

    def design_matrix(self) -> tuple[np.ndarray, np.ndarray]:
        """Regressors and targets for t = long_lag-1 .. n-2.

        Row t is [1, mean_short(t), mean_medium(t), mean_long(t)] and its
        target is rv[t+1].
        """
        rv = self._innovations
        start = self._max_lag - 1
        columns = [np.ones(rv.size - 1 - start)]
        for lag in (self.short_lag, self.medium_lag, self.long_lag):
            means = rolling_means(rv, lag)  # means[k] covers t = k + lag - 1
            columns.append(means[start - lag + 1 : rv.size - lag])
        return np.column_stack(columns), rv[start + 1 :]

    def _variances_from(self, coefficients: np.ndarray, x: np.ndarray) -> np.ndarray:
        series = np.full(self._returns.size, self.fallback_variance())
        series[self._max_lag :] = np.maximum(x @ coefficients, MIN_FORECAST_VARIANCE)
        return series

    def _negloglik(self, x: np.ndarray) -> Callable[[np.ndarray], float]:
        returns = self._returns

        def negloglik(params: np.ndarray) -> float:
            _, beta_short, beta_medium, beta_long, df = (float(v) for v in params)
            if not har_feasible(beta_short, beta_medium, beta_long, df):
                return PENALTY_VALUE
            return student_t_neg_log_likelihood(returns, self._variances_from(params[:4], x), df)

        return negloglik

    def fit_ols(self) -> OlsResult:
        """Stage 1: closed-form OLS of rv[t+1] on the three lag means.

        Raises:
            ValueError: If the design is singular (e.g. identical lags or flat data).
        """
        x, y = self.design_matrix()
        return ols(x, y, context="HAR-RV OLS")

    def fit(
        self, *, max_iter: int = NM_MAX_ITER, tol: float = NM_TOLERANCE
    ) -> CalibrationResult[HarRvParams]:
        """Calibrate HAR-RV by OLS followed by Student-t likelihood refinement.

        Raises:
            ValueError: If the OLS design matrix is singular.
        """
        self._log_fit_start()
        ols_result = self.fit_ols()
        logger.debug("HAR-RV OLS: beta=%s, r2=%.4f", np.round(ols_result.beta, 8), ols_result.r2)

        x, _ = self.design_matrix()
        init_variance = self.fallback_variance()
        x0 = [HAR_INIT_BETAS[0] * init_variance, *HAR_INIT_BETAS[1:], STUDENT_DF_INIT]
        result = nelder_mead_multi_start(self._negloglik(x), x0, max_iter=max_iter, tol=tol)

        beta0, beta_short, beta_medium, beta_long, df = (float(v) for v in result.x)
        persistence = beta_short + beta_medium + beta_long
        if abs(persistence) < 1.0:
            unconditional_variance = max(beta0 / (1.0 - persistence), MIN_FORECAST_VARIANCE)
        else:
            unconditional_variance = init_variance
        log_likelihood = -result.fx

        diagnostics = Diagnostics(
            log_likelihood=log_likelihood,
            aic=aic(log_likelihood, NUM_PARAMS),
            bic=bic(log_likelihood, NUM_PARAMS, x.shape[0]),
            iterations=result.iterations + 1,
            converged=result.converged,
        )
        b = ols_result.beta
        params = HarRvParams(
            beta0=beta0,
            beta_short=beta_short,
            beta_medium=beta_medium,
            beta_long=beta_long,
            persistence=persistence,
            unconditional_variance=unconditional_variance,
            annualized_vol=annualize(unconditional_variance, self.periods_per_year),
            r2=ols_result.r2,
            df=df,
            ols_coefficients=(float(b[0]), float(b[1]), float(b[2]), float(b[3])),
        )
        self._log_fit_result(diagnostics)
        return CalibrationResult(params=params, diagnostics=diagnostics)

    def variance_series(self, params: HarRvParams) -> np.ndarray:
        """Sample variance before ``long_lag``, HAR predictions afterwards."""
        x, _ = self.design_matrix()
        return self._variances_from(params.coefficients, x)

    def forecast(self, params: HarRvParams, steps: int = 1) -> VolatilityForecast:
        """Forecast by iterated substitution.

        Each forecast is appended to the realized-variance history and feeds
        the rolling means of the following step.

        Raises:
            ValueError: If ``steps`` is not a positive integer.
        """
        steps = self._check_steps(steps)
        history = self._innovations[-self._max_lag :].tolist()
        b0, b1, b2, b3 = params.coefficients.tolist()
        lags = (self.short_lag, self.medium_lag, self.long_lag)

        variance = np.empty(steps, dtype=float)
        for h in range(steps):
            short, medium, long_ = (sum(history[-lag:]) / lag for lag in lags)
            v = max(b0 + b1 * short + b2 * medium + b3 * long_, MIN_FORECAST_VARIANCE)
            variance[h] = v
            history.append(v)
        return self._package_forecast(variance)


def calibrate_har_rv(
    data: ModelInput, *, periods_per_year: float = DEFAULT_PERIODS_PER_YEAR
) -> CalibrationResult[HarRvParams]:
    """Construct a HAR-RV model with default lags from ``data`` and fit it."""
    return HarRv(data, periods_per_year=periods_per_year).fit()
