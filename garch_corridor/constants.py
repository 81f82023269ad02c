"""Constants for the garch_corridor volatility library."""

from __future__ import annotations

import math

# ============================================================================
# OPTIMIZER (Nelder-Mead simplex)
# ============================================================================

NM_MAX_ITER: int = 1000
NM_TOLERANCE: float = 1e-8
NM_REFLECTION: float = 1.0
NM_EXPANSION: float = 2.0
NM_CONTRACTION: float = 0.5
NM_SHRINK: float = 0.5
NM_RELATIVE_STEP: float = 0.2  # Initial simplex step as a fraction of the coordinate
NM_ZERO_STEP: float = 0.00025  # Initial simplex step when the coordinate is exactly zero
NM_RESTARTS: int = 3
NM_RESTART_ZERO_SCALE: float = 0.001
GOLDEN_RATIO: float = (1.0 + math.sqrt(5.0)) / 2.0

# ============================================================================
# ESTIMATION (shared by every model)
# ============================================================================

# Returned by objectives for infeasible candidates; finite so the simplex
# can still rank vertices
PENALTY_VALUE: float = 1e10

DEFAULT_PERIODS_PER_YEAR: int = 252
MIN_DATA_POINTS: int = 50
MIN_INIT_VARIANCE: float = 1e-10
MIN_VARIANCE: float = 1e-12
MIN_FORECAST_VARIANCE: float = 1e-20
STATIONARITY_BOUND: float = 0.9999

# Student-t degrees of freedom
STUDENT_DF_MIN: float = 2.01  # Exclusive lower bound
STUDENT_DF_MAX: float = 100.0
STUDENT_DF_INIT: float = 5.0

# ============================================================================
# GARCH(1,1) / GJR-GARCH(1,1)
# ============================================================================

GARCH_MIN_OMEGA: float = 1e-12
GARCH_INIT_OMEGA_RATIO: float = 0.05
GARCH_INIT_ALPHA: float = 0.1
GARCH_INIT_BETA: float = 0.85
GJR_INIT_ALPHA: float = 0.05
GJR_INIT_GAMMA: float = 0.1
GJR_INIT_BETA: float = 0.85

# ============================================================================
# EGARCH(1,1)
# ============================================================================

EGARCH_LOG_VAR_MIN: float = -50.0
EGARCH_LOG_VAR_MAX: float = 50.0
EGARCH_INIT_ALPHA: float = 0.1
EGARCH_INIT_GAMMA: float = -0.05
EGARCH_INIT_BETA: float = 0.95

# ============================================================================
# HAR-RV
# ============================================================================

HAR_SHORT_LAG: int = 1
HAR_MEDIUM_LAG: int = 5
HAR_LONG_LAG: int = 22
HAR_MIN_EXTRA_POINTS: int = 30  # Required on top of the long lag
HAR_SINGULAR_PIVOT: float = 1e-15
HAR_INIT_BETAS: tuple[float, float, float, float] = (0.05, 0.1, 0.3, 0.5)  # beta0 as ratio of v0

# ============================================================================
# NoVaS
# ============================================================================

NOVAS_DEFAULT_LAGS: int = 10
NOVAS_MIN_EXTRA_POINTS: int = 30
NOVAS_MAX_ITER: int = 2000
NOVAS_MIN_WEIGHT: float = 1e-15
NOVAS_MIN_COUNT: int = 10
NOVAS_INIT_INTERCEPT_RATIO: float = 0.1
NOVAS_INIT_DECAY: float = 0.7
NOVAS_INIT_LAG_MASS: float = 0.9

# ============================================================================
# FORECAST ORCHESTRATOR
# ============================================================================

LEVERAGE_RATIO_THRESHOLD: float = 1.2
RELIABILITY_MAX_PERSISTENCE: float = 0.999
RELIABILITY_LJUNG_BOX_LAGS: int = 10
RELIABILITY_MIN_P_VALUE: float = 0.05
DEFAULT_CONFIDENCE: float = 0.6827  # Two-sided, z ~= 1

BACKTEST_REQUIRED_PERCENT: float = 68.0
BACKTEST_WINDOW_RATIO: float = 0.75
BACKTEST_MIN_POINTS: int = 10

MULTI_TIMEFRAME_DIVERGENCE_RATIO: float = 2.0
MINUTES_PER_HOUR: int = 60

# ============================================================================
# RANGE ESTIMATORS
# ============================================================================

YANG_ZHANG_K_NUMERATOR: float = 0.34
YANG_ZHANG_K_OFFSET: float = 1.34

REQUIRED_OHLC_COLUMNS: list[str] = ["open", "high", "low", "close"]
