"""Trustworthiness of a fitted model as one boolean.

A fit is reliable only when all three checks pass:
1. the optimizer converged;
2. persistence is strictly below RELIABILITY_MAX_PERSISTENCE;
3. squared standardized residuals show no autocorrelation left
   (Ljung-Box p-value >= RELIABILITY_MIN_P_VALUE).
"""

from __future__ import annotations

from dataclasses import dataclass
import math

import numpy as np

from garch_corridor.config_logging import get_logger
from garch_corridor.constants import (
    RELIABILITY_LJUNG_BOX_LAGS,
    RELIABILITY_MAX_PERSISTENCE,
    RELIABILITY_MIN_P_VALUE,
)
from garch_corridor.forecast.selection import FittedModel
from garch_corridor.utils.statistics import LjungBoxResult, ljung_box

logger = get_logger(__name__)


@dataclass(frozen=True)
class ReliabilityReport:
    """Outcome of each reliability check."""

    converged: bool
    persistence: float
    persistence_ok: bool
    ljung_box: LjungBoxResult
    residuals_ok: bool

    @property
    def reliable(self) -> bool:
        return self.converged and self.persistence_ok and self.residuals_ok


def assess_reliability(fitted: FittedModel) -> ReliabilityReport:
    """Run the three reliability checks on a fitted model."""
    converged = bool(fitted.calibration.diagnostics.converged)
    persistence = float(fitted.params.persistence)
    persistence_ok = math.isfinite(persistence) and persistence < RELIABILITY_MAX_PERSISTENCE

    z = fitted.model.standardized_residuals(fitted.params)
    lb = ljung_box(np.square(z), RELIABILITY_LJUNG_BOX_LAGS)
    residuals_ok = math.isfinite(lb.p_value) and lb.p_value >= RELIABILITY_MIN_P_VALUE

    report = ReliabilityReport(
        converged=converged,
        persistence=persistence,
        persistence_ok=persistence_ok,
        ljung_box=lb,
        residuals_ok=residuals_ok,
    )
    logger.info(
        "Reliability: converged=%s, persistence=%.4f, ljung_box_p=%.4f -> reliable=%s",
        converged,
        persistence,
        lb.p_value,
        report.reliable,
    )
    return report


def is_reliable(fitted: FittedModel) -> bool:
    """True when the fitted model passes every reliability check."""
    return assess_reliability(fitted).reliable
