"""Core numerical building blocks shared by the volatility models."""

from __future__ import annotations

from garch_corridor.models.core.distributions import (
    EXPECTED_ABS_NORMAL,
    aic,
    bic,
    df_in_range,
    expected_abs_student_t,
    log_gamma,
    profile_student_t_df,
    student_t_log_likelihood,
    student_t_neg_log_likelihood,
)
from garch_corridor.models.core.regression import OlsResult, ols, solve_linear_system
from garch_corridor.models.core.validation import (
    egarch_feasible,
    garch_feasible,
    gjr_feasible,
    har_feasible,
    validate_min_data_points,
    validate_steps,
    variance_path_feasible,
)
from garch_corridor.models.core.variance import (
    clamp_log_variance,
    egarch_log_forecast,
    egarch_variance_path,
    garch_variance_path,
    geometric_forecast,
    gjr_variance_path,
    initialize_variance,
)

__all__ = [
    # Distributions
    "EXPECTED_ABS_NORMAL",
    "aic",
    "bic",
    "df_in_range",
    "expected_abs_student_t",
    "log_gamma",
    "profile_student_t_df",
    "student_t_log_likelihood",
    "student_t_neg_log_likelihood",
    # Regression
    "OlsResult",
    "ols",
    "solve_linear_system",
    # Validation
    "egarch_feasible",
    "garch_feasible",
    "gjr_feasible",
    "har_feasible",
    "validate_min_data_points",
    "validate_steps",
    "variance_path_feasible",
    # Variance
    "clamp_log_variance",
    "egarch_log_forecast",
    "egarch_variance_path",
    "garch_variance_path",
    "geometric_forecast",
    "gjr_variance_path",
    "initialize_variance",
]
