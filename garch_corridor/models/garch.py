"""GARCH(1,1) with Student-t innovations.

v_t = omega + alpha * innovation_{t-1} + beta * v_{t-1}

where:
- omega > 0: constant term
- alpha >= 0: reaction to the last innovation
- beta >= 0: persistence of the last variance
- alpha + beta < 1: stationarity
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import numpy as np

from garch_corridor.config_logging import get_logger
from garch_corridor.constants import (
    DEFAULT_PERIODS_PER_YEAR,
    GARCH_INIT_ALPHA,
    GARCH_INIT_BETA,
    GARCH_INIT_OMEGA_RATIO,
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
    garch_feasible,
    garch_variance_path,
    geometric_forecast,
    student_t_neg_log_likelihood,
    variance_path_feasible,
)
from garch_corridor.optimizer import nelder_mead_multi_start

logger = get_logger(__name__)

NUM_PARAMS = 4  # omega, alpha, beta, df


@dataclass(frozen=True)
class GarchParams:
    """Fitted GARCH(1,1) parameters."""

    omega: float
    alpha: float
    beta: float
    persistence: float
    unconditional_variance: float
    annualized_vol: float
    df: float


class Garch(SeriesModel):
    """GARCH(1,1) fitted by Student-t maximum likelihood."""

    model_type = ModelType.GARCH
    display_name = "GARCH"

    def __init__(
        self, data: ModelInput, *, periods_per_year: float = DEFAULT_PERIODS_PER_YEAR
    ) -> None:
        super().__init__(data, periods_per_year=periods_per_year, min_points=MIN_DATA_POINTS)

    def _negloglik(self) -> Callable[[np.ndarray], float]:
        """Create the negative log-likelihood over [omega, alpha, beta, df]."""
        returns = self._returns
        innovations = self._innovations
        init_variance = self.initial_variance()

        def negloglik(params: np.ndarray) -> float:
            omega, alpha, beta, df = (float(v) for v in params)
            if not garch_feasible(omega, alpha, beta, df):
                return PENALTY_VALUE
            variances = garch_variance_path(innovations, init_variance, omega, alpha, beta)
            if not variance_path_feasible(variances):
                return PENALTY_VALUE
            return student_t_neg_log_likelihood(returns, variances, df)

        return negloglik

    def fit(
        self, *, max_iter: int = NM_MAX_ITER, tol: float = NM_TOLERANCE
    ) -> CalibrationResult[GarchParams]:
        """Calibrate GARCH(1,1) by maximum likelihood.

        Args:
            max_iter: Maximum Nelder-Mead iterations per start.
            tol: Simplex convergence tolerance.

        Returns:
            Fresh CalibrationResult; non-convergence is reported, never raised.
        """
        self._log_fit_start()
        init_variance = self.initial_variance()
        x0 = [GARCH_INIT_OMEGA_RATIO * init_variance, GARCH_INIT_ALPHA, GARCH_INIT_BETA, STUDENT_DF_INIT]
        result = nelder_mead_multi_start(
            self._negloglik(),
            x0,
            max_iter=max_iter,
            tol=tol,
        )

        omega, alpha, beta, df = (float(v) for v in result.x)
        persistence = alpha + beta
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
        params = GarchParams(
            omega=omega,
            alpha=alpha,
            beta=beta,
            persistence=persistence,
            unconditional_variance=unconditional_variance,
            annualized_vol=annualize(unconditional_variance, self.periods_per_year),
            df=df,
        )
        self._log_fit_result(diagnostics)
        return CalibrationResult(params=params, diagnostics=diagnostics)

    def variance_series(self, params: GarchParams) -> np.ndarray:
        """Conditional variance aligned with the return series."""
        return garch_variance_path(
            self._innovations, self.initial_variance(), params.omega, params.alpha, params.beta
        )

    def forecast(self, params: GarchParams, steps: int = 1) -> VolatilityForecast:
        """Forecast variance ``steps`` periods ahead.

        The first step uses the last observed innovation; later steps use its
        expectation and contract geometrically toward omega / (1 - alpha - beta).

        Raises:
            ValueError: If ``steps`` is not a positive integer.
        """
        steps = self._check_steps(steps)
        path = garch_variance_path(
            self._innovations,
            self.initial_variance(),
            params.omega,
            params.alpha,
            params.beta,
            extend=True,
        )
        variance = geometric_forecast(path[-1], params.omega, params.alpha + params.beta, steps)
        return self._package_forecast(variance)


def calibrate_garch(
    data: ModelInput, *, periods_per_year: float = DEFAULT_PERIODS_PER_YEAR
) -> CalibrationResult[GarchParams]:
    """Construct a GARCH(1,1) model from ``data`` and fit it."""
    return Garch(data, periods_per_year=periods_per_year).fit()
