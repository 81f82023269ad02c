"""EGARCH(1,1) (Nelson, 1991) with Student-t innovations.

ln v_t = omega + alpha * (m_{t-1} - E[|Z|]) + gamma * z_{t-1} + beta * ln v_{t-1}

where:
- z_t = r_t / sqrt(v_t) is the standardized return
- m_t is |z_t| for price input, sqrt(RV_t / v_t) for candle input
- gamma < 0 signals the leverage effect
- |beta| < 1 is the stationarity condition (log-domain persistence)
- E[|Z|] is the Student-t expected absolute value for the fitted df
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable

import numpy as np

from garch_corridor.config_logging import get_logger
from garch_corridor.constants import (
    DEFAULT_PERIODS_PER_YEAR,
    EGARCH_INIT_ALPHA,
    EGARCH_INIT_BETA,
    EGARCH_INIT_GAMMA,
    MIN_DATA_POINTS,
    NM_MAX_ITER,
    NM_TOLERANCE,
    PENALTY_VALUE,
    STUDENT_DF_INIT,
)
from garch_corridor.models.base import (
    CalibrationResult,
    Diagnostics,
    InnovationSource,
    ModelInput,
    ModelType,
    SeriesModel,
    VolatilityForecast,
    annualize,
)
from garch_corridor.models.core import (
    aic,
    bic,
    clamp_log_variance,
    egarch_feasible,
    egarch_log_forecast,
    egarch_variance_path,
    expected_abs_student_t,
    student_t_neg_log_likelihood,
    variance_path_feasible,
)
from garch_corridor.optimizer import nelder_mead_multi_start

logger = get_logger(__name__)

NUM_PARAMS = 5  # omega, alpha, gamma, beta, df


@dataclass(frozen=True)
class EgarchParams:
    """Fitted EGARCH(1,1) parameters."""

    omega: float
    alpha: float
    gamma: float
    beta: float
    persistence: float
    unconditional_variance: float
    annualized_vol: float
    leverage_effect: float
    df: float


def compute_initial_omega(init_variance: float, beta0: float = EGARCH_INIT_BETA) -> float:
    """Starting omega so that the stationary log-variance equals ln(init_variance).

    omega_0 = (1 - beta_0) * ln(init_variance)
    """
    return (1.0 - beta0) * math.log(init_variance)


class Egarch(SeriesModel):
    """EGARCH(1,1) fitted by Student-t maximum likelihood."""

    model_type = ModelType.EGARCH
    display_name = "EGARCH"

    def __init__(
        self, data: ModelInput, *, periods_per_year: float = DEFAULT_PERIODS_PER_YEAR
    ) -> None:
        super().__init__(data, periods_per_year=periods_per_year, min_points=MIN_DATA_POINTS)

    def _realized(self) -> np.ndarray | None:
        """Realized-variance magnitudes for candle input, None for |z|."""
        return self._innovations if self._source is InnovationSource.RANGE_PROXY else None

    def _path(self, params: EgarchParams, *, extend: bool = False) -> np.ndarray:
        return egarch_variance_path(
            self._returns,
            self._realized(),
            self.initial_variance(),
            params.omega,
            params.alpha,
            params.gamma,
            params.beta,
            expected_abs_student_t(params.df),
            extend=extend,
        )

    def _negloglik(self) -> Callable[[np.ndarray], float]:
        """Create the negative log-likelihood over [omega, alpha, gamma, beta, df]."""
        returns = self._returns
        realized = self._realized()
        init_variance = self.initial_variance()
        range_proxy = realized is not None

        def negloglik(params: np.ndarray) -> float:
            omega, alpha, gamma, beta, df = (float(v) for v in params)
            if not egarch_feasible(alpha, beta, df, range_proxy=range_proxy):
                return PENALTY_VALUE
            variances = egarch_variance_path(
                returns,
                realized,
                init_variance,
                omega,
                alpha,
                gamma,
                beta,
                expected_abs_student_t(df),
            )
            if not variance_path_feasible(variances):
                return PENALTY_VALUE
            return student_t_neg_log_likelihood(returns, variances, df)

        return negloglik

    def fit(
        self, *, max_iter: int = NM_MAX_ITER, tol: float = NM_TOLERANCE
    ) -> CalibrationResult[EgarchParams]:
        """Calibrate EGARCH(1,1) by maximum likelihood.

        Args:
            max_iter: Maximum Nelder-Mead iterations per start.
            tol: Simplex convergence tolerance.

        Returns:
            Fresh CalibrationResult; non-convergence is reported, never raised.
        """
        self._log_fit_start()
        x0 = [
            compute_initial_omega(self.initial_variance()),
            EGARCH_INIT_ALPHA,
            EGARCH_INIT_GAMMA,
            EGARCH_INIT_BETA,
            STUDENT_DF_INIT,
        ]
        result = nelder_mead_multi_start(self._negloglik(), x0, max_iter=max_iter, tol=tol)

        omega, alpha, gamma, beta, df = (float(v) for v in result.x)
        # E[ln v] = omega / (1 - beta) once the shock terms average out
        unconditional_variance = math.exp(clamp_log_variance(omega / (1.0 - beta)))
        log_likelihood = -result.fx
        n = self._returns.size

        diagnostics = Diagnostics(
            log_likelihood=log_likelihood,
            aic=aic(log_likelihood, NUM_PARAMS),
            bic=bic(log_likelihood, NUM_PARAMS, n),
            iterations=result.iterations,
            converged=result.converged,
        )
        params = EgarchParams(
            omega=omega,
            alpha=alpha,
            gamma=gamma,
            beta=beta,
            persistence=beta,
            unconditional_variance=unconditional_variance,
            annualized_vol=annualize(unconditional_variance, self.periods_per_year),
            leverage_effect=gamma,
            df=df,
        )
        self._log_fit_result(diagnostics)
        return CalibrationResult(params=params, diagnostics=diagnostics)

    def variance_series(self, params: EgarchParams) -> np.ndarray:
        """Conditional variance aligned with the return series."""
        return self._path(params)

    def forecast(self, params: EgarchParams, steps: int = 1) -> VolatilityForecast:
        """Forecast variance ``steps`` periods ahead.

        The first step uses the last actual standardized return (sign and
        magnitude). Later steps set E[z] = 0 and E[m] = E[|Z|], so the
        log-variance contracts toward omega / (1 - beta) at rate |beta|.

        Raises:
            ValueError: If ``steps`` is not a positive integer.
        """
        steps = self._check_steps(steps)
        first = float(self._path(params, extend=True)[-1])
        variance = egarch_log_forecast(first, params.omega, params.beta, steps)
        return self._package_forecast(variance)


def calibrate_egarch(
    data: ModelInput, *, periods_per_year: float = DEFAULT_PERIODS_PER_YEAR
) -> CalibrationResult[EgarchParams]:
    """Construct an EGARCH(1,1) model from ``data`` and fit it."""
    return Egarch(data, periods_per_year=periods_per_year).fit()
