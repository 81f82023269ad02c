"""Student-t likelihood and information-criterion helpers.

This module provides the distribution-related functions shared by every model:
- Expected absolute value E[|Z|] for Normal and standardized Student-t
- Student-t log-likelihood (unit-variance parameterization)
- Degrees-of-freedom profiling
- AIC / BIC

References:
- Student-t: Hansen (1994) standardized Student-t
"""

from __future__ import annotations

import math

import numpy as np
from scipy.optimize import minimize_scalar
from scipy.special import gammaln

from garch_corridor.config_logging import get_logger
from garch_corridor.constants import PENALTY_VALUE, STUDENT_DF_MAX, STUDENT_DF_MIN

logger = get_logger(__name__)

# E[|Z|] for Z ~ N(0, 1)
EXPECTED_ABS_NORMAL: float = math.sqrt(2.0 / math.pi)


def log_gamma(x: float) -> float:
    """Natural log of the gamma function."""
    return float(gammaln(x))


# ==================== Kappa Computation ====================


def expected_abs_student_t(df: float) -> float:
    """Compute E[|Z|] for a standardized (unit-variance) Student-t.

    E[|Z|] = sqrt(df-2) * Gamma((df-1)/2) / (sqrt(pi) * Gamma(df/2))

    Tends to ``EXPECTED_ABS_NORMAL`` as ``df`` grows.

    Args:
        df: Degrees of freedom (must be > 2).

    Returns:
        Expected absolute value.

    Raises:
        ValueError: If df <= 2.
    """
    if not df > 2.0:
        msg = f"Invalid Student-t parameter: df={df} (must be > 2)"
        raise ValueError(msg)
    log_numerator = 0.5 * math.log(df - 2.0) + log_gamma(0.5 * (df - 1.0))
    log_denominator = 0.5 * math.log(math.pi) + log_gamma(0.5 * df)
    return math.exp(log_numerator - log_denominator)


# ==================== Log-Likelihood Computation ====================


def df_in_range(df: float) -> bool:
    """True when ``df`` lies in the admissible interval (STUDENT_DF_MIN, STUDENT_DF_MAX]."""
    return STUDENT_DF_MIN < df <= STUDENT_DF_MAX


def student_t_log_likelihood(returns: np.ndarray, variances: np.ndarray, df: float) -> float:
    """Compute Student-t log-likelihood of returns given conditional variances.

    LL = n*[lgamma((df+1)/2) - lgamma(df/2) - 0.5*ln(pi*(df-2))]
         + sum[-0.5*ln(v_t) - (df+1)/2 * ln(1 + r_t^2/((df-2) v_t))]

    Args:
        returns: Return series r_t.
        variances: Conditional variance series v_t (same length).
        df: Degrees of freedom (> 2).

    Returns:
        Log-likelihood value (may be -inf or nan for degenerate inputs).
    """
    n = returns.size
    constant = n * (
        log_gamma(0.5 * (df + 1.0)) - log_gamma(0.5 * df) - 0.5 * math.log(math.pi * (df - 2.0))
    )
    with np.errstate(divide="ignore", over="ignore", invalid="ignore"):
        scaled = (returns * returns) / ((df - 2.0) * variances)
        terms = -0.5 * np.log(variances) - 0.5 * (df + 1.0) * np.log1p(scaled)
    return float(constant + np.sum(terms))


def student_t_neg_log_likelihood(returns: np.ndarray, variances: np.ndarray, df: float) -> float:
    """Negative Student-t log-likelihood, or ``PENALTY_VALUE`` when infeasible.

    Infeasible means ``df`` outside its admissible range, any variance
    non-positive or non-finite, or a non-finite likelihood.
    """
    if not df_in_range(df):
        return PENALTY_VALUE
    if not np.all(np.isfinite(variances)) or np.any(variances <= 0.0):
        return PENALTY_VALUE
    ll = student_t_log_likelihood(returns, variances, df)
    if not math.isfinite(ll):
        return PENALTY_VALUE
    return -ll


def profile_student_t_df(returns: np.ndarray, variances: np.ndarray) -> tuple[float, float]:
    """Maximize the Student-t likelihood over df with the variance path fixed.

    Args:
        returns: Return series.
        variances: Conditional variance series.

    Returns:
        Tuple of (df, log_likelihood) at the profiled optimum.
    """
    result = minimize_scalar(
        lambda df: student_t_neg_log_likelihood(returns, variances, float(df)),
        bounds=(STUDENT_DF_MIN, STUDENT_DF_MAX),
        method="bounded",
    )
    df = float(min(max(result.x, math.nextafter(STUDENT_DF_MIN, math.inf)), STUDENT_DF_MAX))
    ll = -student_t_neg_log_likelihood(returns, variances, df)
    logger.debug("Profiled Student-t df=%.4f (loglik=%.4f)", df, ll)
    return df, ll


# ==================== Information Criteria ====================


def aic(log_likelihood: float, num_params: int) -> float:
    """Akaike Information Criterion: 2k - 2LL."""
    return 2.0 * num_params - 2.0 * log_likelihood


def bic(log_likelihood: float, num_params: int, num_obs: int) -> float:
    """Bayesian Information Criterion: k ln(n) - 2LL."""
    return num_params * math.log(num_obs) - 2.0 * log_likelihood
