"""GJR-GARCH(1,1) (Glosten, Jagannathan & Runkle, 1993) with Student-t innovations.

v_t = omega + alpha * e_{t-1} + gamma * e_{t-1} * I(r_{t-1} < 0) + beta * v_{t-1}

where e is the squared return (price input) or the Parkinson realized
variance (candle input); the indicator always uses the close-to-close sign.
The indicator is on half the time in expectation, so persistence is
alpha + gamma / 2 + beta and must stay below 1.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import numpy as np

from garch_corridor.config_logging import get_logger
from garch_corridor.constants import (
    DEFAULT_PERIODS_PER_YEAR,
    GARCH_INIT_OMEGA_RATIO,
    GJR_INIT_ALPHA,
    GJR_INIT_BETA,
    GJR_INIT_GAMMA,
    MIN_DATA_POINTS,
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
    aic,
    bic,
    geometric_forecast,
    gjr_feasible,
    gjr_variance_path,
    student_t_neg_log_likelihood,
    variance_path_feasible,
)
from garch_corridor.optimizer import nelder_mead_multi_start

logger = get_logger(__name__)

NUM_PARAMS = 5  # omega, alpha, gamma, beta, df


@dataclass(frozen=True)
class GjrGarchParams:
    """Fitted GJR-GARCH(1,1) parameters."""

    omega: float
    alpha: float
    gamma: float
    beta: float
    persistence: float
    unconditional_variance: float
    annualized_vol: float
    leverage_effect: float
    df: float


def gjr_persistence(alpha: float, gamma: float, beta: float) -> float:
    """Expected persistence alpha + gamma / 2 + beta."""
    return alpha + 0.5 * gamma + beta


class GjrGarch(SeriesModel):
    """GJR-GARCH(1,1) fitted by Student-t maximum likelihood."""

    model_type = ModelType.GJR_GARCH
    display_name = "GJR-GARCH"

    def __init__(
        self, data: ModelInput, *, periods_per_year: float = DEFAULT_PERIODS_PER_YEAR
    ) -> None:
        super().__init__(data, periods_per_year=periods_per_year, min_points=MIN_DATA_POINTS)

    def _negloglik(self) -> Callable[[np.ndarray], float]:
        returns = self._returns
        innovations = self._innovations
        init_variance = self.initial_variance()

        def negloglik(params: np.ndarray) -> float:
            omega, alpha, gamma, beta, df = (float(v) for v in params)
            if not gjr_feasible(omega, alpha, gamma, beta, df):
                return PENALTY_VALUE
            variances = gjr_variance_path(
                innovations, returns, init_variance, omega, alpha, gamma, beta
            )
            if not variance_path_feasible(variances):
                return PENALTY_VALUE
            return student_t_neg_log_likelihood(returns, variances, df)

        return negloglik

    def fit(
        self, *, max_iter: int = NM_MAX_ITER, tol: float = NM_TOLERANCE
    ) -> CalibrationResult[GjrGarchParams]:
        """Calibrate GJR-GARCH(1,1) by maximum likelihood."""
        self._log_fit_start()
        x0 = [
            GARCH_INIT_OMEGA_RATIO * self.initial_variance(),
            GJR_INIT_ALPHA,
            GJR_INIT_GAMMA,
            GJR_INIT_BETA,
            STUDENT_DF_INIT,
        ]
        result = nelder_mead_multi_start(self._negloglik(), x0, max_iter=max_iter, tol=tol)

        omega, alpha, gamma, beta, df = (float(v) for v in result.x)
        persistence = gjr_persistence(alpha, gamma, beta)
        unconditional_variance = omega / (1.0 - persistence)
        log_likelihood = -result.fx
        n = self._returns.size

        diagnostics = Diagnostics(
            log_likelihood=log_likelihood,
            aic=aic(log_likelihood, NUM_PARAMS),
            bic=bic(log_likelihood, NUM_PARAMS, n),
            iterations=result.iterations,
            converged=result.converged,
        )
        params = GjrGarchParams(
            omega=omega,
            alpha=alpha,
            gamma=gamma,
            beta=beta,
            persistence=persistence,
            unconditional_variance=unconditional_variance,
            annualized_vol=annualize(unconditional_variance, self.periods_per_year),
            leverage_effect=gamma,
            df=df,
        )
        self._log_fit_result(diagnostics)
        return CalibrationResult(params=params, diagnostics=diagnostics)

    def variance_series(self, params: GjrGarchParams) -> np.ndarray:
        """Conditional variance aligned with the return series."""
        return gjr_variance_path(
            self._innovations,
            self._returns,
            self.initial_variance(),
            params.omega,
            params.alpha,
            params.gamma,
            params.beta,
        )

    def forecast(self, params: GjrGarchParams, steps: int = 1) -> VolatilityForecast:
        """Forecast variance ``steps`` periods ahead.

        The first step uses the last innovation and the sign of the last
        return; later steps use E[I(r<0)] = 1/2.

        Raises:
            ValueError: If ``steps`` is not a positive integer.
        """
        steps = self._check_steps(steps)
        path = gjr_variance_path(
            self._innovations,
            self._returns,
            self.initial_variance(),
            params.omega,
            params.alpha,
            params.gamma,
            params.beta,
            extend=True,
        )
        persistence = gjr_persistence(params.alpha, params.gamma, params.beta)
        variance = geometric_forecast(path[-1], params.omega, persistence, steps)
        return self._package_forecast(variance)


def calibrate_gjr_garch(
    data: ModelInput, *, periods_per_year: float = DEFAULT_PERIODS_PER_YEAR
) -> CalibrationResult[GjrGarchParams]:
    """Construct a GJR-GARCH(1,1) model from ``data`` and fit it."""
    return GjrGarch(data, periods_per_year=periods_per_year).fit()
